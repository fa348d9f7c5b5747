"""Alphabet configurations (modes) used to turn bits into characters."""

import typing
from dataclasses import dataclass

from .errors import ConfigurationError


@dataclass(frozen=True)
class Mode:
    """
    Which characters encode which 3-bit values, and which characters are markers.

    Args:
        join: separates multiple values in one ID
        flip: marks a bit-flipped (complemented) value
        pad1: marks a single filler character
        padN: marks two or more filler characters
        tables: 4-13 tables of 8 distinct characters each; the first 4 tables
            must not share characters, later tables may repeat earlier ones

    Note:
        - Modes are not secret, they can be published freely
        - Tables are cycled left to right while encoding, so a character of one
          table followed by one of the next should never form a syllable
    """

    join: str
    flip: str
    pad1: str
    padN: str
    tables: typing.Tuple[str, ...]

    MIN_TABLES: typing.ClassVar[int] = 4
    MAX_TABLES: typing.ClassVar[int] = 13
    TABLE_SIZE: typing.ClassVar[int] = 8

    def __post_init__(self) -> None:
        tables = tuple(self.tables)
        object.__setattr__(self, "tables", tables)
        markers = (self.join, self.flip, self.pad1, self.padN)
        if any(not isinstance(m, str) or len(m) != 1 for m in markers):
            raise ConfigurationError("Marker characters must be single characters")
        if len(tables) < Mode.MIN_TABLES:
            raise ConfigurationError("At least 4 bit tables are required")
        if len(tables) > Mode.MAX_TABLES:
            raise ConfigurationError("At most 13 bit tables are supported")
        if any(len(t) != Mode.TABLE_SIZE for t in tables):
            raise ConfigurationError("Each bit table must have 8 symbols")
        if any(len(set(t)) != Mode.TABLE_SIZE for t in tables):
            raise ConfigurationError("Each character in a table must be distinct (unique)")
        if len(set("".join(tables[:4]))) != 4 * Mode.TABLE_SIZE:
            raise ConfigurationError("Each character in the first 4 tables must be distinct (unique)")
        for label, marker in zip(("join", "flip", "pad1", "padN"), markers):
            if any(marker in t for t in tables):
                raise ConfigurationError(f"Table must not contain the {label} character")
        if len(set(markers)) != 4:
            raise ConfigurationError("join, flip, pad1, padN must be different characters")

    @property
    def alphabet(self) -> str:
        return "".join(self.tables)

    @staticmethod
    def preset(name: str) -> "Mode":
        key = (name or "").strip().upper()
        if key not in PRESETS:
            raise ConfigurationError(
                f"Unknown mode: {name!r} (expected one of {', '.join(sorted(PRESETS))})"
            )
        return PRESETS[key]


UPPER = Mode("Q", "Y", "9", "8", ("BCDFGJKL", "MNPSTVXZ", "01234567", "AEIOUHRW"))
"""Upper case letters and digits only."""

LOWER = Mode("q", "y", "9", "8", ("mnpstvxz", "bcdfgjkl", "aeiouhrw", "01234567"))
"""Lower case letters and digits only."""

XSAFE = Mode("H", "R", "h", "r", ("BCDFGJKL", "mnpstvxz", "bcdfgjkl", "MNPSTVXZ"))
"""Consonants only; cannot accidentally spell words."""

SHAPE_TABLES = ("BCDFGJKL", "mnpstvxz", "bcdfgjkw", "MNPSTVXZ", "aeiuAEWU", "12345678")
SHAPE = Mode("H", "R", "h", "r", SHAPE_TABLES)
"""Only characters that are hard to confuse when read in a sans-serif font."""

MIXED_TABLES = ("BCDFGJKL", "mnpstvxz", "bcdfgjkl", "MNPSTVXZ", "aeiouhrw", "01234567", "AEIOUHRW")
MIXED = Mode("Q", "y", "9", "8", MIXED_TABLES)
"""Mixed case letters and digits (default)."""

PRESETS: typing.Dict[str, Mode] = {
    "UPPER": UPPER,
    "LOWER": LOWER,
    "XSAFE": XSAFE,
    "SHAPE": SHAPE,
    "MIXED": MIXED,
}


__all__ = ["Mode", "PRESETS", "UPPER", "LOWER", "XSAFE", "SHAPE", "MIXED"]
