"""Secret sources and the secret conditioning step."""

import os

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from .bits import MASK64, reverse64, to_int64
from .errors import ConfigurationError

SECRET_PROPERTY = "IDMASK_SECRET"
PASSPHRASE_INFO = b"idmask.secret.v1"


def condition_secret(secret: int) -> int:
    """
    Spread the 1-bits of a raw secret evenly over all 64 bits.

    Negative secrets are negated, a secret with an empty high half gets its
    low half mirrored into the high half, and every zero nibble is replaced by
    a fallback derived from the bit count of the previous nibble. The result
    is an unsigned 64-bit value with no zero nibble.
    """
    secret = to_int64(secret)
    if secret < 0:
        # avoid lots of leading 1s; -MIN wraps to 1 << 63 which is fine unsigned
        secret = -secret
    if secret >> 32 == 0:
        secret |= reverse64(secret) >> 1
    shifted = secret & MASK64
    filled = 0
    ones = 3
    for _ in range(16):
        nibble = shifted & 0b1111
        if nibble == 0:
            nibble = ones
        filled = ((filled << 4) | nibble) & MASK64
        shifted >>= 4
        ones_new = nibble.bit_count()
        ones = 5 if ones == 1 and ones_new == 1 else ones_new
    return filled


def read_secret(name: str = SECRET_PROPERTY) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        raise ConfigurationError(
            f"Secret must be defined for environment variable named: {name}"
        )
    try:
        return int(raw.strip())
    except ValueError:
        raise ConfigurationError(
            f"Secret in environment variable {name} is not a valid integer: {raw!r}"
        ) from None


def resolve_secret(secret: int, name: str = SECRET_PROPERTY) -> int:
    """Returns the signed 64-bit raw secret, reading `name` from the environment for 0."""
    if secret == 0:
        secret = read_secret(name)
        if secret == 0:
            raise ConfigurationError(f"Secret in environment variable {name} must not be 0")
    if not -(1 << 63) <= secret <= MASK64:
        raise ConfigurationError("Secret must fit into 64 bits")
    return to_int64(secret)


def secret_from_passphrase(passphrase: "str | bytes", info: bytes = PASSPHRASE_INFO) -> int:
    """
    Derive a 64-bit secret from a passphrase.

    Args:
        passphrase: any non-empty text or bytes
        info: HKDF context; different contexts give unrelated secrets

    Returns:
        Signed 64-bit integer usable as `Coder(secret=...)`
    """
    if isinstance(passphrase, str):
        passphrase = passphrase.encode("utf-8")
    if not passphrase:
        raise ConfigurationError("Passphrase must not be empty")
    hk = HKDF(
        algorithm=hashes.SHA256(),
        length=8,
        salt=None,
        info=info
    )
    secret = int.from_bytes(hk.derive(bytes(passphrase)), "big", signed=True)
    # 0 is reserved for "read from environment"
    return secret or 1


__all__ = [
    "PASSPHRASE_INFO",
    "SECRET_PROPERTY",
    "condition_secret",
    "read_secret",
    "resolve_secret",
    "secret_from_passphrase",
]
