"""
IDMASK - short, reversible, non-sequential IDs for numbers, names and text

A coder turns 64-bit values into strings like ``VGH5h8`` and back. Without
the secret the strings reveal neither order nor magnitude of the values.
This is obfuscation, not encryption.
"""

from .coder import Coder
from .errors import CodecError, ConfigurationError, DecodeError, EncodeError
from .mode import LOWER, MIXED, PRESETS, SHAPE, UPPER, XSAFE, Mode
from .secret import SECRET_PROPERTY, condition_secret, secret_from_passphrase
from .version import __version__


def of(secret: int = 0, min_length: int = 8, mode: Mode = MIXED) -> Coder:
    """
    Create a coder.

    Args:
        secret: 64-bit secret; 0 reads IDMASK_SECRET from the environment
        min_length: target minimum ID length (1-20)
        mode: alphabet preset or custom Mode

    Returns:
        An immutable, thread-safe Coder
    """
    return Coder(secret, min_length, mode)


def of8() -> Coder:
    return Coder.of8()


__all__ = [
    "CodecError",
    "Coder",
    "ConfigurationError",
    "DecodeError",
    "EncodeError",
    "LOWER",
    "MIXED",
    "Mode",
    "PRESETS",
    "SECRET_PROPERTY",
    "SHAPE",
    "UPPER",
    "XSAFE",
    "__version__",
    "condition_secret",
    "of",
    "of8",
    "secret_from_passphrase",
]
