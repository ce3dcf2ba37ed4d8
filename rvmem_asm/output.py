"""
Word serialization.

The binary format is the memory image layout: one line per byte, four lines
per word, least-significant byte first, each byte written as eight '0'/'1'
characters with the most significant bit first.
"""

from typing import Callable, Dict, Iterable, List

from .errors import FileAccessError


def word_to_byte_lines(word: int) -> List[str]:
    """Render a 32-bit word as four little-endian binary byte strings."""
    return [f"{(word >> shift) & 0xFF:08b}" for shift in (0, 8, 16, 24)]


def format_binary(words: Iterable[int]) -> str:
    """Render words in the byte-per-line binary layout."""
    lines = []
    for word in words:
        lines.extend(word_to_byte_lines(word))
    return "".join(line + "\n" for line in lines)


def format_hex(words: Iterable[int]) -> str:
    """Render words as one 8-digit hex word per line."""
    return "".join(f"{word & 0xFFFFFFFF:08x}\n" for word in words)


OUTPUT_FORMATS: Dict[str, Callable[[Iterable[int]], str]] = {
    "binary": format_binary,
    "hex": format_hex,
}


def write_output(output_path: str, words: Iterable[int], fmt: str = "binary") -> None:
    """
    Write assembled words to a file.

    Args:
        output_path: Path to output file
        words: 32-bit words in program order
        fmt: Output format name (key of OUTPUT_FORMATS)

    Raises:
        FileAccessError: If the output file cannot be created
    """
    formatter = OUTPUT_FORMATS[fmt]
    try:
        with open(output_path, "w") as f:
            f.write(formatter(words))
    except OSError as e:
        raise FileAccessError(f"Could not open output file {output_path}: {e}") from e
