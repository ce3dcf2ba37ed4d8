"""
Symbol resolution (pass 1).

Addresses come from iter_instruction_lines(), which both passes use, so a
line is visited at the same address in pass 1 and pass 2.
"""

from collections.abc import Mapping
from typing import Dict, Iterable, Iterator, Tuple

from .errors import DuplicateSymbolError, UnknownSymbolError
from .parser import ParsedLine

INSTRUCTION_SIZE = 4

DUPLICATE_POLICIES = ("overwrite", "error")


def iter_addressed_lines(
    lines: Iterable[ParsedLine],
) -> Iterator[Tuple[int, ParsedLine]]:
    """
    Yield (address, line) for every line, in source order.

    The address is that of the next instruction slot; it advances by 4 only
    after a line that holds an instruction.
    """
    address = 0
    for line in lines:
        yield address, line
        if line.has_instruction:
            address += INSTRUCTION_SIZE


def iter_instruction_lines(
    lines: Iterable[ParsedLine],
) -> Iterator[Tuple[int, ParsedLine]]:
    """Yield (address, line) for the lines that hold an instruction."""
    for address, line in iter_addressed_lines(lines):
        if line.has_instruction:
            yield address, line


class SymbolTable(Mapping):
    """Read-only label -> address mapping produced by pass 1."""

    def __init__(self, symbols: Dict[str, int], size: int = 0):
        self._symbols = dict(symbols)
        self.size = size

    def __getitem__(self, name: str) -> int:
        return self._symbols[name]

    def __iter__(self):
        return iter(self._symbols)

    def __len__(self) -> int:
        return len(self._symbols)

    def __repr__(self) -> str:
        return f"SymbolTable({self._symbols!r}, size={self.size})"

    def resolve(self, name: str) -> int:
        """
        Look up a label's address.

        Raises:
            UnknownSymbolError: If the label was never defined
        """
        try:
            return self._symbols[name]
        except KeyError:
            raise UnknownSymbolError(f"Unknown symbol: {name}") from None


def resolve_symbols(
    lines: Iterable[ParsedLine], duplicate_labels: str = "overwrite"
) -> SymbolTable:
    """
    Bind every label to the address of the next instruction slot.

    Args:
        lines: Parsed source lines
        duplicate_labels: "overwrite" keeps the last definition, "error"
            raises DuplicateSymbolError on redefinition

    Returns:
        SymbolTable for pass 2
    """
    if duplicate_labels not in DUPLICATE_POLICIES:
        raise ValueError(f"Unknown duplicate label policy: {duplicate_labels}")

    symbols: Dict[str, int] = {}
    size = 0
    for address, line in iter_addressed_lines(lines):
        if line.label is not None:
            if line.label in symbols and duplicate_labels == "error":
                raise DuplicateSymbolError(
                    f"Duplicate label: {line.label}", line.line_num, line.original
                )
            symbols[line.label] = address
        if line.has_instruction:
            size = address + INSTRUCTION_SIZE

    return SymbolTable(symbols, size=size)
