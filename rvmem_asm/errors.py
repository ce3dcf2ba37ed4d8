"""
Custom exception types for the rvmem assembler.

Every exception carries an ErrorKind so callers can branch on the failure
without matching message text.
"""

from enum import Enum


class ErrorKind(Enum):
    """Categories of assembly failure."""

    FILE_ACCESS = "file access"
    SYNTAX = "syntax"
    UNKNOWN_MNEMONIC = "unknown mnemonic"
    UNKNOWN_REGISTER = "unknown register"
    UNKNOWN_SYMBOL = "unknown symbol"
    MALFORMED_MEMORY_OPERAND = "malformed memory operand"
    OPERAND_COUNT = "operand count mismatch"
    DUPLICATE_SYMBOL = "duplicate symbol"


class AssemblerError(Exception):
    """Base exception for assembler errors."""

    kind = ErrorKind.SYNTAX

    def __init__(self, message: str, line_num: int = None, line_text: str = None):
        self.detail = message
        self.line_num = line_num
        self.line_text = line_text
        if line_num is not None:
            if line_text:
                message = f"Line {line_num}: {message}\n  {line_text}"
            else:
                message = f"Line {line_num}: {message}"
        super().__init__(message)

    def at(self, line_num: int, line_text: str = None) -> "AssemblerError":
        """Return a copy of this error located at a source line."""
        return type(self)(self.detail, line_num, line_text)


class FileAccessError(AssemblerError):
    """Input file unreadable or output file uncreatable."""

    kind = ErrorKind.FILE_ACCESS


class ParseError(AssemblerError):
    """Exception raised for parsing errors."""

    pass


class MalformedMemoryOperandError(ParseError):
    """Memory operand without the offset(register) parentheses."""

    kind = ErrorKind.MALFORMED_MEMORY_OPERAND


class OperandCountError(ParseError):
    """Wrong number of operands for the instruction."""

    kind = ErrorKind.OPERAND_COUNT


class EncodingError(AssemblerError):
    """Exception raised for instruction encoding errors."""

    pass


class UnknownMnemonicError(EncodingError):
    kind = ErrorKind.UNKNOWN_MNEMONIC


class UnknownRegisterError(EncodingError):
    kind = ErrorKind.UNKNOWN_REGISTER


class SymbolError(AssemblerError):
    """Exception raised for symbol/label errors."""

    kind = ErrorKind.UNKNOWN_SYMBOL


class UnknownSymbolError(SymbolError):
    pass


class DuplicateSymbolError(SymbolError):
    kind = ErrorKind.DUPLICATE_SYMBOL
