"""
Assembly source parser.

Handles comment stripping, label extraction, mnemonic/operand splitting and
the numeric and memory operand syntaxes.
"""

import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from .errors import MalformedMemoryOperandError, ParseError
from .registers import lookup_register

COMMENT_MARKER = "#"
LABEL_DELIMITER = ":"

HEX_RE = re.compile(r"^0[xX][0-9a-fA-F]+$")
DEC_RE = re.compile(r"^[+-]?[0-9]+$")


@dataclass
class ParsedLine:
    """
    Represents a parsed line of assembly.

    Attributes:
        line_num: Original line number in source file
        original: Original line text
        label: Label defined on this line (if any)
        text: Instruction text left after comment and label removal
    """

    line_num: int
    original: str = ""
    label: Optional[str] = None
    text: str = ""

    @property
    def has_instruction(self) -> bool:
        return bool(self.text)


def strip_comment(line: str) -> str:
    """Remove a '#' comment running to end of line."""
    pos = line.find(COMMENT_MARKER)
    if pos >= 0:
        return line[:pos]
    return line


def split_label(line: str) -> Tuple[Optional[str], str]:
    """
    Split a line at its first ':'.

    Returns:
        (label, rest) when the line defines a label, else (None, line)
    """
    pos = line.find(LABEL_DELIMITER)
    if pos < 0:
        return None, line.strip()
    return line[:pos].strip(), line[pos + 1 :].strip()


def split_instruction(text: str) -> Tuple[str, str]:
    """
    Split instruction text into lowercase mnemonic and operand text.

    Raises:
        ParseError: If there is no separator between mnemonic and operands
    """
    parts = text.strip().split(None, 1)
    if len(parts) < 2:
        raise ParseError(f"Invalid instruction format: {text.strip()}")
    return parts[0].lower(), parts[1].strip()


def parse_operands(operand_str: str) -> List[str]:
    """Split a comma-separated operand list into trimmed tokens."""
    return [token.strip() for token in operand_str.split(",")]


def is_number(value_str: str) -> bool:
    """
    Check whether a token is a numeric literal.

    Accepts signed decimal (-12, +7, 42) and unsigned hex (0x1F, 0X1f).
    """
    value_str = value_str.strip()
    return bool(HEX_RE.match(value_str) or DEC_RE.match(value_str))


def parse_number(value_str: str) -> int:
    """
    Parse a numeric literal accepted by is_number().

    Raises:
        ParseError: If the token is not a numeric literal
    """
    value_str = value_str.strip()
    if HEX_RE.match(value_str):
        return int(value_str, 16)
    if DEC_RE.match(value_str):
        return int(value_str, 10)
    raise ParseError(f"Invalid immediate value: {value_str}")


def parse_memory_operand(operand: str) -> Tuple[int, int]:
    """
    Parse a memory operand in the form offset(register).

    A missing or non-numeric offset is read as 0.

    Examples:
    - "0(sp)" -> (0, 2)
    - "-48(s0)" -> (-48, 8)
    - "(a0)" -> (0, 10)

    Returns:
        Tuple of (offset, register_number)
    """
    open_paren = operand.find("(")
    close_paren = operand.find(")")
    if open_paren < 0 or close_paren < 0:
        raise MalformedMemoryOperandError(
            f"Invalid memory operand format: {operand}"
        )

    offset_str = operand[:open_paren].strip()
    reg_str = operand[open_paren + 1 : close_paren].strip()

    offset = parse_number(offset_str) if is_number(offset_str) else 0
    return offset, lookup_register(reg_str)


def parse_line(line: str, line_num: int) -> ParsedLine:
    """
    Parse a single line of assembly.

    Returns:
        ParsedLine object containing parsed components
    """
    result = ParsedLine(line_num=line_num, original=line.rstrip("\r\n"))

    line = strip_comment(line).strip()
    if not line:
        return result

    result.label, result.text = split_label(line)
    return result


def parse_lines(lines: Iterable[str]) -> List[ParsedLine]:
    """Parse an iterable of source lines (e.g. an open file)."""
    return [parse_line(line, i) for i, line in enumerate(lines, start=1)]


def parse_string(content: str) -> List[ParsedLine]:
    """Parse assembly source from a string."""
    return parse_lines(content.splitlines())


def parse_file(filepath: str) -> List[ParsedLine]:
    """
    Parse an assembly file.

    Undecodable bytes (e.g. Latin-1 text in comments) are replaced, not fatal.
    """
    with open(filepath, "r", encoding="utf-8", errors="replace") as f:
        return parse_lines(f)
