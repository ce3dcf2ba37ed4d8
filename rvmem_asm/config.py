"""
Assembler configuration.

Parses and validates optional YAML configuration files. Every key is optional;
missing keys keep the defaults of AssemblerConfig.

Example:
    output: build/program.mif
    format: binary
    link_register: ra
    duplicate_labels: overwrite
    verbose: false
"""

from dataclasses import dataclass, replace

import yaml

from .output import OUTPUT_FORMATS
from .registers import is_valid_register
from .symbols import DUPLICATE_POLICIES

DEFAULT_OUTPUT = "memoria.mif"

VALID_KEYS = {"output", "format", "link_register", "duplicate_labels", "verbose"}


class ConfigError(Exception):
    """Raised when a configuration file is invalid."""
    pass


@dataclass(frozen=True)
class AssemblerConfig:
    """
    Settings shared by the CLI and the Assembler.

    Attributes:
        output: Output path used when none is given on the command line
        format: Output format name ("binary" or "hex")
        link_register: Destination of jal/jalr when it is omitted
        duplicate_labels: "overwrite" or "error" on label redefinition
        verbose: Print pass-by-pass progress
    """

    output: str = DEFAULT_OUTPUT
    format: str = "binary"
    link_register: str = "ra"
    duplicate_labels: str = "overwrite"
    verbose: bool = False

    def with_overrides(self, **overrides) -> "AssemblerConfig":
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def parse_config(yaml_content: str) -> AssemblerConfig:
    """
    Parse and validate YAML configuration text.

    Args:
        yaml_content: Raw YAML string content

    Returns:
        Validated AssemblerConfig

    Raises:
        ConfigError: If the configuration is invalid
    """
    try:
        data = yaml.safe_load(yaml_content)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax: {e}")

    if data is None:
        return AssemblerConfig()
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a YAML mapping/dictionary")

    _validate_config(data)
    return AssemblerConfig(**data)


def _validate_config(data: dict) -> None:
    """Validate configuration keys and values."""
    unknown = set(data) - VALID_KEYS
    if unknown:
        raise ConfigError(f"Unknown configuration key(s): {', '.join(sorted(unknown))}")

    if 'output' in data:
        if not isinstance(data['output'], str) or not data['output'].strip():
            raise ConfigError("'output' must be a non-empty string")

    if 'format' in data and data['format'] not in OUTPUT_FORMATS:
        raise ConfigError(
            f"Invalid format '{data['format']}'. Valid: {', '.join(sorted(OUTPUT_FORMATS))}"
        )

    if 'link_register' in data:
        reg = data['link_register']
        if not isinstance(reg, str) or not is_valid_register(reg):
            raise ConfigError(f"Invalid link_register '{reg}'")

    if 'duplicate_labels' in data and data['duplicate_labels'] not in DUPLICATE_POLICIES:
        raise ConfigError(
            f"Invalid duplicate_labels '{data['duplicate_labels']}'. "
            f"Valid: {', '.join(DUPLICATE_POLICIES)}"
        )

    if 'verbose' in data and not isinstance(data['verbose'], bool):
        raise ConfigError("'verbose' must be true or false")


def load_config(path: str) -> AssemblerConfig:
    """
    Load a configuration file.

    Raises:
        ConfigError: If the file cannot be read or is invalid
    """
    try:
        with open(path, "r") as f:
            content = f.read()
    except OSError as e:
        raise ConfigError(f"Could not read configuration file {path}: {e}")
    return parse_config(content)
