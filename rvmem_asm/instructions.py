"""
RV32I instruction definitions.

Each mnemonic maps to its format, its fixed opcode/funct3/funct7 fields and
the operand class that decides how the assembler reads its operands.
"""

from dataclasses import dataclass
from enum import Enum, auto
from types import MappingProxyType

from .errors import UnknownMnemonicError


class InstructionFormat(Enum):
    """RISC-V instruction format types."""

    R = auto()  # Register-register operations
    I = auto()  # Immediate operations
    S = auto()  # Store operations
    B = auto()  # Branch operations
    U = auto()  # Upper immediate operations
    J = auto()  # Jump operations


class OperandClass(Enum):
    """How an instruction's operand list is interpreted."""

    REG = auto()  # rd, rs1, rs2
    IMM = auto()  # rd, rs1, imm|symbol
    LOAD = auto()  # rd, offset(rs1)
    STORE = auto()  # rs2, offset(rs1)
    BRANCH = auto()  # rs1, rs2, offset|label
    UPPER = auto()  # rd, imm|symbol
    JAL = auto()  # [rd,] offset|label
    JALR = auto()  # [rd,] rs1, imm|symbol


@dataclass(frozen=True)
class Instruction:
    """
    Definition of an RV32I instruction.

    Attributes:
        mnemonic: Lowercase instruction name
        format: Instruction format type
        opcode: 7-bit opcode field
        funct3: 3-bit function field (0 if not applicable)
        funct7: 7-bit function field (0 if not applicable)
        operand_class: Operand layout accepted in source
    """

    mnemonic: str
    format: InstructionFormat
    opcode: int
    funct3: int = 0
    funct7: int = 0
    operand_class: OperandClass = OperandClass.REG


_R, _I, _S, _B, _U, _J = (
    InstructionFormat.R,
    InstructionFormat.I,
    InstructionFormat.S,
    InstructionFormat.B,
    InstructionFormat.U,
    InstructionFormat.J,
)

_DEFINITIONS = [
    # -------------------------------------------------------------------------
    # R-Type Instructions (Register-Register) - Opcode: 0x33
    # -------------------------------------------------------------------------
    ("add", _R, 0x33, 0b000, 0x00, OperandClass.REG),
    ("sub", _R, 0x33, 0b000, 0x20, OperandClass.REG),
    ("sll", _R, 0x33, 0b001, 0x00, OperandClass.REG),
    ("slt", _R, 0x33, 0b010, 0x00, OperandClass.REG),
    ("sltu", _R, 0x33, 0b011, 0x00, OperandClass.REG),
    ("xor", _R, 0x33, 0b100, 0x00, OperandClass.REG),
    ("srl", _R, 0x33, 0b101, 0x00, OperandClass.REG),
    ("sra", _R, 0x33, 0b101, 0x20, OperandClass.REG),
    ("or", _R, 0x33, 0b110, 0x00, OperandClass.REG),
    ("and", _R, 0x33, 0b111, 0x00, OperandClass.REG),
    # -------------------------------------------------------------------------
    # I-Type Instructions (Immediate) - Opcode: 0x13
    # -------------------------------------------------------------------------
    ("addi", _I, 0x13, 0b000, 0x00, OperandClass.IMM),
    ("slti", _I, 0x13, 0b010, 0x00, OperandClass.IMM),
    ("sltiu", _I, 0x13, 0b011, 0x00, OperandClass.IMM),
    ("xori", _I, 0x13, 0b100, 0x00, OperandClass.IMM),
    ("ori", _I, 0x13, 0b110, 0x00, OperandClass.IMM),
    ("andi", _I, 0x13, 0b111, 0x00, OperandClass.IMM),
    # Shift immediates carry funct7 in imm[11:5]
    ("slli", _I, 0x13, 0b001, 0x00, OperandClass.IMM),
    ("srli", _I, 0x13, 0b101, 0x00, OperandClass.IMM),
    ("srai", _I, 0x13, 0b101, 0x20, OperandClass.IMM),
    # -------------------------------------------------------------------------
    # Load Instructions (I-Type) - Opcode: 0x03
    # -------------------------------------------------------------------------
    ("lb", _I, 0x03, 0b000, 0x00, OperandClass.LOAD),
    ("lh", _I, 0x03, 0b001, 0x00, OperandClass.LOAD),
    ("lw", _I, 0x03, 0b010, 0x00, OperandClass.LOAD),
    ("lbu", _I, 0x03, 0b100, 0x00, OperandClass.LOAD),
    ("lhu", _I, 0x03, 0b101, 0x00, OperandClass.LOAD),
    # -------------------------------------------------------------------------
    # Store Instructions (S-Type) - Opcode: 0x23
    # -------------------------------------------------------------------------
    ("sb", _S, 0x23, 0b000, 0x00, OperandClass.STORE),
    ("sh", _S, 0x23, 0b001, 0x00, OperandClass.STORE),
    ("sw", _S, 0x23, 0b010, 0x00, OperandClass.STORE),
    # -------------------------------------------------------------------------
    # Branch Instructions (B-Type) - Opcode: 0x63
    # -------------------------------------------------------------------------
    ("beq", _B, 0x63, 0b000, 0x00, OperandClass.BRANCH),
    ("bne", _B, 0x63, 0b001, 0x00, OperandClass.BRANCH),
    ("blt", _B, 0x63, 0b100, 0x00, OperandClass.BRANCH),
    ("bge", _B, 0x63, 0b101, 0x00, OperandClass.BRANCH),
    ("bltu", _B, 0x63, 0b110, 0x00, OperandClass.BRANCH),
    ("bgeu", _B, 0x63, 0b111, 0x00, OperandClass.BRANCH),
    # -------------------------------------------------------------------------
    # Upper Immediate Instructions (U-Type)
    # -------------------------------------------------------------------------
    ("lui", _U, 0x37, 0b000, 0x00, OperandClass.UPPER),
    ("auipc", _U, 0x17, 0b000, 0x00, OperandClass.UPPER),
    # -------------------------------------------------------------------------
    # Jump Instructions
    # -------------------------------------------------------------------------
    ("jal", _J, 0x6F, 0b000, 0x00, OperandClass.JAL),
    ("jalr", _I, 0x67, 0b000, 0x00, OperandClass.JALR),
]


def _build_catalog() -> MappingProxyType:
    catalog = {}
    for mnemonic, fmt, opcode, funct3, funct7, operand_class in _DEFINITIONS:
        if mnemonic in catalog:
            raise ValueError(f"Duplicate instruction definition: {mnemonic}")
        catalog[mnemonic] = Instruction(
            mnemonic=mnemonic,
            format=fmt,
            opcode=opcode,
            funct3=funct3,
            funct7=funct7,
            operand_class=operand_class,
        )
    return MappingProxyType(catalog)


INSTRUCTIONS = _build_catalog()

SHIFT_IMMEDIATES = frozenset({"slli", "srli", "srai"})


def lookup_instruction(mnemonic: str) -> Instruction:
    """
    Look up an instruction by mnemonic.

    Args:
        mnemonic: Instruction mnemonic (case-insensitive)

    Returns:
        Instruction definition

    Raises:
        UnknownMnemonicError: If the mnemonic is not in the RV32I catalog
    """
    instr = INSTRUCTIONS.get(mnemonic.strip().lower())
    if instr is None:
        raise UnknownMnemonicError(f"Unknown instruction: {mnemonic}")
    return instr

