"""
rvmem Assembler - A two-pass RV32I assembler producing memory images.

This package encodes RV32I base integer assembly into 32-bit words and writes
them as byte-per-line binary text.
"""

__version__ = "1.0.0"

from .assembler import Assembler, AssemblyResult
from .config import AssemblerConfig, ConfigError
from .errors import (
    AssemblerError,
    EncodingError,
    ErrorKind,
    ParseError,
    SymbolError,
)

__all__ = [
    "Assembler",
    "AssemblyResult",
    "AssemblerConfig",
    "ConfigError",
    "AssemblerError",
    "EncodingError",
    "ErrorKind",
    "ParseError",
    "SymbolError",
]
