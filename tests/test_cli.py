"""
Tests for the command line entry point.
"""

import pytest

from rvmem_asm.__main__ import main
from rvmem_asm.output import format_binary

PROGRAM = """\
start: addi x1, x0, 1
       add x2, x1, x1
"""


@pytest.fixture
def source(tmp_path):
    path = tmp_path / "prog.s"
    path.write_text(PROGRAM)
    return path


class TestMain:
    """Tests for main()."""

    def test_success(self, source, tmp_path, capsys):
        out = tmp_path / "prog.mif"
        assert main([str(source), str(out)]) == 0
        assert out.read_text() == format_binary([0x00100093, 0x00108133])
        assert f"Assembly successful. Output written to {out}" in capsys.readouterr().out

    def test_default_output_path(self, source, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert main([str(source)]) == 0
        assert (tmp_path / "memoria.mif").exists()

    def test_reassembly_is_identical(self, source, tmp_path):
        first, second = tmp_path / "a.mif", tmp_path / "b.mif"
        assert main([str(source), str(first)]) == 0
        assert main([str(source), str(second)]) == 0
        assert first.read_bytes() == second.read_bytes()

    def test_missing_input(self, tmp_path, capsys):
        out = tmp_path / "prog.mif"
        assert main([str(tmp_path / "missing.s"), str(out)]) == 1
        assert "Error: Could not open input file" in capsys.readouterr().err
        assert not out.exists()

    def test_failure_keeps_earlier_words(self, tmp_path, capsys):
        src = tmp_path / "bad.s"
        src.write_text("addi x1, x0, 1\nbeq x1, x0, nowhere\nadd x2, x1, x1\n")
        out = tmp_path / "bad.mif"
        assert main([str(src), str(out)]) == 1
        assert out.read_text() == format_binary([0x00100093])
        err = capsys.readouterr().err
        assert "Error: Line 2: Unknown symbol: nowhere" in err

    def test_assembly_error_reported_before_output_error(self, tmp_path, capsys):
        """An unwritable output path does not hide the failing source line."""
        src = tmp_path / "bad.s"
        src.write_text("addi x1, x0, 1\nbeq x1, x0, nowhere\n")
        out = tmp_path / "no" / "such" / "dir.mif"
        assert main([str(src), str(out)]) == 1
        err = capsys.readouterr().err
        assert "Line 2: Unknown symbol: nowhere" in err
        assert "Could not open output file" in err
        assert err.index("Unknown symbol") < err.index("Could not open output file")

    def test_missing_argument(self):
        with pytest.raises(SystemExit) as exc:
            main([])
        assert exc.value.code != 0

    def test_hex_format_and_listing(self, source, tmp_path, capsys):
        out = tmp_path / "prog.hex"
        assert main([str(source), str(out), "--format", "hex", "--listing"]) == 0
        assert out.read_text() == "00100093\n00108133\n"
        assert "0x0004:   00108133" in capsys.readouterr().out

    def test_config_file(self, source, tmp_path):
        out = tmp_path / "from_config.hex"
        config = tmp_path / "asm.yaml"
        config.write_text(f"output: {out}\nformat: hex\n")
        assert main([str(source), "--config", str(config)]) == 0
        assert out.read_text() == "00100093\n00108133\n"

    def test_command_line_overrides_config(self, source, tmp_path):
        config = tmp_path / "asm.yaml"
        config.write_text("format: hex\n")
        out = tmp_path / "prog.mif"
        assert main([str(source), str(out), "-c", str(config), "-f", "binary"]) == 0
        assert out.read_text() == format_binary([0x00100093, 0x00108133])

    def test_invalid_config(self, source, tmp_path, capsys):
        config = tmp_path / "asm.yaml"
        config.write_text("format: elf\n")
        assert main([str(source), "-c", str(config)]) == 1
        assert "Error: Invalid format" in capsys.readouterr().err

    def test_verbose(self, source, tmp_path, capsys):
        assert main([str(source), str(tmp_path / "p.mif"), "-v"]) == 0
        assert "Pass 2" in capsys.readouterr().out
