"""
Main assembler implementation.

Two-pass assembler for RV32I assembly to 32-bit words.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from .config import AssemblerConfig
from .encoder import encode_instruction
from .errors import AssemblerError, FileAccessError, OperandCountError
from .instructions import Instruction, OperandClass, lookup_instruction
from .parser import (
    ParsedLine,
    is_number,
    parse_file,
    parse_lines,
    parse_memory_operand,
    parse_number,
    parse_operands,
    parse_string,
    split_instruction,
    split_label,
    strip_comment,
)
from .registers import lookup_register
from .symbols import SymbolTable, iter_instruction_lines, resolve_symbols


@dataclass
class AssemblyResult:
    """
    Outcome of one assembly run.

    Attributes:
        words: Encoded 32-bit words, in source order. On failure, the words
            encoded before the failing line.
        symbols: Symbol table from pass 1 (empty if pass 1 failed)
        source_map: (address, line_num, source_text) per encoded word
        error: The first error hit, or None on success
    """

    words: List[int] = field(default_factory=list)
    symbols: SymbolTable = field(default_factory=lambda: SymbolTable({}))
    source_map: List[Tuple[int, int, str]] = field(default_factory=list)
    error: Optional[AssemblerError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class Assembler:
    """
    Two-pass RISC-V assembler.

    Pass 1: Collect labels and compute addresses
    Pass 2: Encode instructions with resolved labels
    """

    def __init__(self, config: AssemblerConfig = None, verbose: bool = None):
        """
        Initialize the assembler.

        Args:
            config: Assembler settings. Uses defaults if None.
            verbose: If given, overrides config.verbose
        """
        self.config = config or AssemblerConfig()
        self.verbose = self.config.verbose if verbose is None else verbose
        self.link_register = lookup_register(self.config.link_register)
        self.symbols = SymbolTable({})
        self.instructions: List[int] = []  # encoded 32-bit instructions
        self.source_map: List[Tuple[int, int, str]] = []  # (addr, line_num, original_line)

    def log(self, message: str) -> None:
        """Print message if verbose mode is enabled."""
        if self.verbose:
            print(message)

    def assemble_file(self, input_path: str) -> AssemblyResult:
        """
        Assemble an assembly file.

        Args:
            input_path: Path to input source file

        Returns:
            AssemblyResult; a missing or unreadable file is reported as a
            FileAccessError in result.error
        """
        self.log(f"Assembling: {input_path}")
        try:
            lines = parse_file(input_path)
        except OSError as e:
            self._reset()
            return self._result(
                FileAccessError(f"Could not open input file {input_path}: {e}")
            )
        return self._assemble(lines)

    def assemble_string(self, source: str) -> AssemblyResult:
        """Assemble from a string."""
        return self._assemble(parse_string(source))

    def assemble_lines(self, lines: Iterable[str]) -> AssemblyResult:
        """Assemble from an iterable of source lines."""
        return self._assemble(parse_lines(lines))

    def encode_line(self, text: str, address: int = 0) -> int:
        """
        Encode one line of source against the current symbol table.

        Args:
            text: Source line (comments and a leading label are ignored)
            address: Address the instruction is assembled at

        Returns:
            32-bit encoded instruction

        Raises:
            AssemblerError: On any syntax, lookup or operand error
        """
        _, text = split_label(strip_comment(text).strip())
        return self._encode_instruction(text, address)

    def _reset(self) -> None:
        self.symbols = SymbolTable({})
        self.instructions = []
        self.source_map = []

    def _result(self, error: AssemblerError = None) -> AssemblyResult:
        return AssemblyResult(
            words=list(self.instructions),
            symbols=self.symbols,
            source_map=list(self.source_map),
            error=error,
        )

    def _assemble(self, lines: List[ParsedLine]) -> AssemblyResult:
        self._reset()
        try:
            self._pass1(lines)
            self._pass2(lines)
        except AssemblerError as e:
            self.log(f"  Stopped: {e}")
            return self._result(e)
        return self._result()

    def _pass1(self, lines: List[ParsedLine]) -> None:
        """
        First pass: Collect labels and compute addresses.
        """
        self.log("\n=== Pass 1: Collecting labels ===")
        self.symbols = resolve_symbols(lines, self.config.duplicate_labels)

        for label, address in self.symbols.items():
            self.log(f"  Label '{label}' at 0x{address:04X}")
        self.log(f"  Total symbols: {len(self.symbols)}")
        self.log(f"  Program size: {self.symbols.size} bytes")

    def _pass2(self, lines: List[ParsedLine]) -> None:
        """
        Second pass: Encode instructions with resolved labels.
        """
        self.log("\n=== Pass 2: Encoding instructions ===")

        for address, line in iter_instruction_lines(lines):
            try:
                encoded = self._encode_instruction(line.text, address)
            except AssemblerError as e:
                raise e.at(line.line_num, line.original) from e

            self.instructions.append(encoded)
            self.source_map.append((address, line.line_num, line.original))
            self.log(f"  0x{address:04X}: {encoded:08X}  {line.text}")

        self.log(f"\n  Total instructions: {len(self.instructions)}")

    def _encode_instruction(self, text: str, address: int) -> int:
        """
        Encode a single instruction.

        Args:
            text: Instruction text without label or comment
            address: Address of this instruction

        Returns:
            32-bit encoded instruction
        """
        mnemonic, operand_str = split_instruction(text)
        instr = lookup_instruction(mnemonic)
        operands = parse_operands(operand_str)
        rd, rs1, rs2, imm = self._parse_operands(instr, operands, address)
        return encode_instruction(instr, rd, rs1, rs2, imm)

    def _parse_operands(
        self, instr: Instruction, operands: List[str], address: int
    ) -> Tuple[int, int, int, int]:
        """
        Parse operands for an instruction.

        Returns:
            Tuple of (rd, rs1, rs2, imm)
        """
        rd = rs1 = rs2 = imm = 0
        kind = instr.operand_class

        if kind == OperandClass.REG:
            # rd, rs1, rs2
            self._expect_count(instr, operands, (3,), "rd, rs1, rs2")
            rd = lookup_register(operands[0])
            rs1 = lookup_register(operands[1])
            rs2 = lookup_register(operands[2])

        elif kind == OperandClass.IMM:
            # rd, rs1, imm|symbol (symbol used as absolute address)
            self._expect_count(instr, operands, (3,), "rd, rs1, imm")
            rd = lookup_register(operands[0])
            rs1 = lookup_register(operands[1])
            imm = self._resolve_absolute(operands[2])

        elif kind == OperandClass.LOAD:
            self._expect_count(instr, operands, (2,), "rd, offset(rs1)")
            rd = lookup_register(operands[0])
            imm, rs1 = parse_memory_operand(operands[1])

        elif kind == OperandClass.STORE:
            self._expect_count(instr, operands, (2,), "rs2, offset(rs1)")
            rs2 = lookup_register(operands[0])
            imm, rs1 = parse_memory_operand(operands[1])

        elif kind == OperandClass.BRANCH:
            self._expect_count(instr, operands, (3,), "rs1, rs2, offset")
            rs1 = lookup_register(operands[0])
            rs2 = lookup_register(operands[1])
            imm = self._resolve_relative(operands[2], address)

        elif kind == OperandClass.UPPER:
            self._expect_count(instr, operands, (2,), "rd, imm")
            rd = lookup_register(operands[0])
            imm = self._resolve_absolute(operands[1])

        elif kind == OperandClass.JAL:
            # jal target  OR  jal rd, target
            self._expect_count(instr, operands, (1, 2), "[rd,] offset")
            if len(operands) == 2:
                rd = lookup_register(operands[0])
            else:
                rd = self.link_register
            imm = self._resolve_relative(operands[-1], address)

        elif kind == OperandClass.JALR:
            # jalr rs1, target  OR  jalr rd, rs1, target
            self._expect_count(instr, operands, (2, 3), "[rd,] rs1, imm")
            if len(operands) == 3:
                rd = lookup_register(operands[0])
            else:
                rd = self.link_register
            rs1 = lookup_register(operands[-2])
            imm = self._resolve_absolute(operands[-1])

        return rd, rs1, rs2, imm

    @staticmethod
    def _expect_count(
        instr: Instruction, operands: List[str], counts: Tuple[int, ...], usage: str
    ) -> None:
        if len(operands) not in counts:
            expected = " or ".join(str(c) for c in counts)
            raise OperandCountError(
                f"{instr.mnemonic} requires {expected} operands ({usage}), got {len(operands)}"
            )

    def _resolve_absolute(self, value: str) -> int:
        """Resolve a numeric literal, or a label to its absolute address."""
        if is_number(value):
            return parse_number(value)
        return self.symbols.resolve(value)

    def _resolve_relative(self, value: str, address: int) -> int:
        """
        Resolve a branch/jump target.

        A label becomes the displacement from the current instruction; a
        numeric literal is already a displacement and is used verbatim.
        """
        if is_number(value):
            return parse_number(value)
        return self.symbols.resolve(value) - address

    def get_listing(self) -> str:
        """
        Get an assembly listing showing addresses, encodings, and source.

        Returns:
            Formatted listing string
        """
        lines = []
        lines.append("Address   Code       Source")
        lines.append("-" * 60)

        for (addr, _, source), code in zip(self.source_map, self.instructions):
            lines.append(f"0x{addr:04X}:   {code:08X}   {source.strip()}")

        return "\n".join(lines)
