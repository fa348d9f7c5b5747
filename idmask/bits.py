"""Fixed-width integer helpers.

Python integers are unbounded, the codec is defined over 32 and 64 bit
two's complement values. Everything that needs wrap-around or sign
extension goes through these helpers.
"""

import numpy as np

MASK32 = 0xFFFFFFFF
MASK64 = 0xFFFFFFFFFFFFFFFF
SIGN32 = 1 << 31
SIGN64 = 1 << 63


def to_int64(value: int) -> int:
    value = int(value) & MASK64
    return value - (1 << 64) if value & SIGN64 else value


def to_int32(value: int) -> int:
    value = int(value) & MASK32
    return value - (1 << 32) if value & SIGN32 else value


def low_int(value: int) -> int:
    """Low 32 bits as unsigned."""
    return value & MASK32


def high_int(value: int) -> int:
    """High 32 bits of the 64-bit pattern as unsigned."""
    return (value & MASK64) >> 32


def ushr32(value: int, shift: int) -> int:
    # shift count is taken mod 32 like a 32-bit logical shift
    return (value & MASK32) >> (shift & 31)


def bit_count64(value32: int) -> int:
    """Population count of a 32-bit value after sign extension to 64 bits."""
    value32 &= MASK32
    ones = value32.bit_count()
    if value32 & SIGN32:
        ones += 32
    return ones


def reverse64(value: int) -> int:
    return int(f"{value & MASK64:064b}"[::-1], 2)


def rotr64(value: int, shift: int) -> int:
    value &= MASK64
    shift %= 64
    if shift == 0:
        return value
    return ((value >> shift) | (value << (64 - shift))) & MASK64


def data_length(value32: int) -> int:
    """Number of 3-bit symbols needed for a 32-bit value (2 bits go to the table offset)."""
    data_bits = (value32 & MASK32).bit_length() - 2
    if data_bits <= 0:
        return 1
    return (data_bits + 2) // 3


def double_to_bits(value: float) -> int:
    return int(np.float64(value).view(np.int64))


def bits_to_double(bits: int) -> float:
    return float(np.int64(to_int64(bits)).view(np.float64))


def float_to_bits(value: float) -> int:
    return int(np.float32(value).view(np.int32))


def bits_to_float(bits: int) -> float:
    return float(np.int32(to_int32(bits)).view(np.float32))
