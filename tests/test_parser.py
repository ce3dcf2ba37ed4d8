"""
Tests for the source and operand parser.
"""

import pytest

from rvmem_asm.errors import ErrorKind, MalformedMemoryOperandError, ParseError, UnknownRegisterError
from rvmem_asm.parser import (
    is_number,
    parse_line,
    parse_memory_operand,
    parse_number,
    parse_operands,
    parse_string,
    split_instruction,
    split_label,
    strip_comment,
)


class TestLineSplitting:
    """Tests for comment, label and mnemonic splitting."""

    @pytest.mark.parametrize("src,expected", [
        ("add x1, x2, x3 # sum", "add x1, x2, x3 "),
        ("# whole line", ""),
        ("addi x1, x0, 1", "addi x1, x0, 1"),
        ("loop: # label only", "loop: "),
    ])
    def test_strip_comment(self, src, expected):
        assert strip_comment(src) == expected

    @pytest.mark.parametrize("src,label,rest", [
        ("loop: add x1, x2, x3", "loop", "add x1, x2, x3"),
        ("end:", "end", ""),
        ("  spaced  :  addi x1, x0, 1", "spaced", "addi x1, x0, 1"),
        ("add x1, x2, x3", None, "add x1, x2, x3"),
    ])
    def test_split_label(self, src, label, rest):
        assert split_label(src) == (label, rest)

    def test_split_instruction_lowercases_mnemonic(self):
        assert split_instruction("ADD x1, x2, x3") == ("add", "x1, x2, x3")
        assert split_instruction("addi\tx1, x0, 5") == ("addi", "x1, x0, 5")

    def test_split_instruction_without_separator(self):
        """A line with no mnemonic/operand separator is a syntax error."""
        with pytest.raises(ParseError, match="Invalid instruction format") as exc:
            split_instruction("ret")
        assert exc.value.kind == ErrorKind.SYNTAX

    def test_parse_operands(self):
        assert parse_operands("x1,  x2 ,x3") == ["x1", "x2", "x3"]
        assert parse_operands("a0, -8(sp)") == ["a0", "-8(sp)"]
        assert parse_operands("target") == ["target"]


class TestNumbers:
    """Tests for numeric literal recognition."""

    @pytest.mark.parametrize("token,value", [
        ("0", 0),
        ("42", 42),
        ("-1", -1),
        ("+7", 7),
        ("0x10", 16),
        ("0XfF", 255),
        ("0xFFFFF000", 0xFFFFF000),
    ])
    def test_numbers(self, token, value):
        assert is_number(token)
        assert parse_number(token) == value

    @pytest.mark.parametrize("token", ["", "-", "0x", "loop", "-0x10", "12a", "0b101"])
    def test_not_numbers(self, token):
        assert not is_number(token)
        with pytest.raises(ParseError):
            parse_number(token)


class TestMemoryOperand:
    """Tests for parse_memory_operand."""

    @pytest.mark.parametrize("token,expected", [
        ("0(sp)", (0, 2)),
        ("-48(s0)", (-48, 8)),
        ("0x10(x5)", (16, 5)),
        ("(a0)", (0, 10)),
        ("  12 ( t1 ) ", (12, 6)),
    ])
    def test_valid(self, token, expected):
        assert parse_memory_operand(token) == expected

    def test_non_numeric_offset_is_zero(self):
        """A symbolic offset is not resolved; it reads as zero."""
        assert parse_memory_operand("buffer(x2)") == (0, 2)

    @pytest.mark.parametrize("token", ["8", "8(x2", "8x2)", "sp"])
    def test_missing_parentheses(self, token):
        with pytest.raises(MalformedMemoryOperandError) as exc:
            parse_memory_operand(token)
        assert exc.value.kind == ErrorKind.MALFORMED_MEMORY_OPERAND

    def test_unknown_base_register(self):
        with pytest.raises(UnknownRegisterError, match="Unknown register: foo"):
            parse_memory_operand("4(foo)")


class TestParseLine:
    """Tests for whole-line parsing."""

    def test_label_and_instruction(self):
        line = parse_line("loop: addi x1, x1, -1  # decrement\n", 3)
        assert line.line_num == 3
        assert line.label == "loop"
        assert line.text == "addi x1, x1, -1"
        assert line.original == "loop: addi x1, x1, -1  # decrement"
        assert line.has_instruction

    def test_blank_and_comment_lines(self):
        for src in ["", "   ", "# only a comment", "\t# indented comment"]:
            line = parse_line(src, 1)
            assert line.label is None
            assert not line.has_instruction

    def test_label_only(self):
        line = parse_line("end:", 9)
        assert line.label == "end"
        assert not line.has_instruction

    def test_parse_string_numbers_lines(self):
        lines = parse_string("start:\n\n  add x1, x2, x3\n")
        assert [l.line_num for l in lines] == [1, 2, 3]
        assert lines[2].text == "add x1, x2, x3"
