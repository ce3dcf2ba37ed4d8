"""
RISC-V register definitions and name mappings.

Supports both numeric names (x0-x31) and ABI names (zero, ra, sp, etc.).
"""

from types import MappingProxyType

from .errors import UnknownRegisterError

# Register number to ABI name mapping
REG_ABI_NAMES = MappingProxyType(
    {
        0: "zero",
        1: "ra",
        2: "sp",
        3: "gp",
        4: "tp",
        5: "t0",
        6: "t1",
        7: "t2",
        8: "s0",  # Also fp (frame pointer)
        9: "s1",
        10: "a0",
        11: "a1",
        12: "a2",
        13: "a3",
        14: "a4",
        15: "a5",
        16: "a6",
        17: "a7",
        18: "s2",
        19: "s3",
        20: "s4",
        21: "s5",
        22: "s6",
        23: "s7",
        24: "s8",
        25: "s9",
        26: "s10",
        27: "s11",
        28: "t3",
        29: "t4",
        30: "t5",
        31: "t6",
    }
)


def _build_register_map() -> MappingProxyType:
    names = {f"x{i}": i for i in range(32)}
    for num, name in REG_ABI_NAMES.items():
        names[name] = num
    names["fp"] = 8
    return MappingProxyType(names)


# Name to number, covering x0-x31, ABI names and the fp alias
REGISTER_MAP = _build_register_map()


def lookup_register(name: str) -> int:
    """
    Resolve a register name to its number.

    Args:
        name: Register name (e.g., "x0", "zero", "ra", "s0", "fp")

    Returns:
        Register number (0-31)

    Raises:
        UnknownRegisterError: If the register name is invalid
    """
    num = REGISTER_MAP.get(name.strip().lower())
    if num is None:
        raise UnknownRegisterError(f"Unknown register: {name.strip()}")
    return num


def is_valid_register(name: str) -> bool:
    """Check if a string is a valid register name."""
    return name.strip().lower() in REGISTER_MAP

