"""
RV32I instruction encoder.

Packs resolved register numbers and immediates into 32-bit words based on the
instruction format. Immediates are truncated to their fields; no range or
alignment checks are made here, so the word always reflects the value the
caller resolved.
"""

from .errors import EncodingError
from .instructions import SHIFT_IMMEDIATES, Instruction, InstructionFormat

WORD_MASK = 0xFFFFFFFF


def _bits(value: int, hi: int, lo: int) -> int:
    """Extract value[hi:lo] (inclusive), treating value as two's complement."""
    return (value >> lo) & ((1 << (hi - lo + 1)) - 1)


def _pack(instr: Instruction, rd: int = 0, rs1: int = 0, rs2: int = 0) -> int:
    """Place opcode, funct3 and the register fields shared by most formats."""
    return (
        (instr.opcode & 0x7F)
        | (rd & 0x1F) << 7
        | (instr.funct3 & 0x7) << 12
        | (rs1 & 0x1F) << 15
        | (rs2 & 0x1F) << 20
    )


def encode_r_type(instr: Instruction, rd: int, rs1: int, rs2: int) -> int:
    """
    Encode an R-type instruction.

    Layout: funct7 | rs2 | rs1 | funct3 | rd | opcode
    """
    return _pack(instr, rd, rs1, rs2) | (instr.funct7 & 0x7F) << 25


def encode_i_type(instr: Instruction, rd: int, rs1: int, imm: int) -> int:
    """
    Encode an I-type instruction.

    Layout: imm[11:0] | rs1 | funct3 | rd | opcode

    The low 12 bits of imm are kept. For shift immediates (SLLI, SRLI, SRAI)
    funct7 is also ORed into bits 25..31.
    """
    word = _pack(instr, rd, rs1) | _bits(imm, 11, 0) << 20
    if instr.mnemonic in SHIFT_IMMEDIATES:
        word |= (instr.funct7 & 0x7F) << 25
    return word


def encode_s_type(instr: Instruction, rs1: int, rs2: int, imm: int) -> int:
    """
    Encode an S-type instruction.

    Layout: imm[11:5] | rs2 | rs1 | funct3 | imm[4:0] | opcode
    """
    return (
        _pack(instr, rs1=rs1, rs2=rs2)
        | _bits(imm, 4, 0) << 7
        | _bits(imm, 11, 5) << 25
    )


def encode_b_type(instr: Instruction, rs1: int, rs2: int, imm: int) -> int:
    """
    Encode a B-type instruction.

    Layout: imm[12] | imm[10:5] | rs2 | rs1 | funct3 | imm[4:1] | imm[11] | opcode

    imm is the byte displacement. Bit 0 has no field and is dropped.
    """
    return (
        _pack(instr, rs1=rs1, rs2=rs2)
        | _bits(imm, 11, 11) << 7
        | _bits(imm, 4, 1) << 8
        | _bits(imm, 10, 5) << 25
        | _bits(imm, 12, 12) << 31
    )


def encode_u_type(instr: Instruction, rd: int, imm: int) -> int:
    """
    Encode a U-type instruction.

    Layout: imm[31:12] | rd | opcode

    imm is a full 32-bit value placed as-is; its low 12 bits are discarded.
    """
    return (instr.opcode & 0x7F) | (rd & 0x1F) << 7 | (imm & 0xFFFFF000)


def encode_j_type(instr: Instruction, rd: int, imm: int) -> int:
    """
    Encode a J-type instruction.

    Layout: imm[20] | imm[10:1] | imm[11] | imm[19:12] | rd | opcode

    imm is the byte displacement. Bit 0 has no field and is dropped.
    """
    return (
        (instr.opcode & 0x7F)
        | (rd & 0x1F) << 7
        | _bits(imm, 19, 12) << 12
        | _bits(imm, 11, 11) << 20
        | _bits(imm, 10, 1) << 21
        | _bits(imm, 20, 20) << 31
    )


def encode_instruction(
    instr: Instruction,
    rd: int = 0,
    rs1: int = 0,
    rs2: int = 0,
    imm: int = 0,
) -> int:
    """
    Encode an instruction based on its format.

    Args:
        instr: Instruction definition
        rd: Destination register (0-31)
        rs1: Source register 1 (0-31)
        rs2: Source register 2 (0-31)
        imm: Immediate value or byte displacement

    Returns:
        32-bit encoded instruction
    """
    fmt = instr.format

    if fmt == InstructionFormat.R:
        word = encode_r_type(instr, rd, rs1, rs2)
    elif fmt == InstructionFormat.I:
        word = encode_i_type(instr, rd, rs1, imm)
    elif fmt == InstructionFormat.S:
        word = encode_s_type(instr, rs1, rs2, imm)
    elif fmt == InstructionFormat.B:
        word = encode_b_type(instr, rs1, rs2, imm)
    elif fmt == InstructionFormat.U:
        word = encode_u_type(instr, rd, imm)
    elif fmt == InstructionFormat.J:
        word = encode_j_type(instr, rd, imm)
    else:
        raise EncodingError(f"Unknown instruction format: {fmt}")
    return word & WORD_MASK
