"""
Scalar and multi-value codec.

A 64-bit value is XORed with the (conditioned) secret and the resulting bits
are written as characters of the mode's tables, 3 bits per character. The two
lowest bits of each 32-bit half select the table the encoding starts with, so
the same value never produces recognisable patterns across different secrets.

As a rule of thumb a value needs about as many characters as its decimal
form: 0-31 need 1 character, 32-255 need 2, 256-2047 need 3 and so on. No
value needs more than 20.

HOW TO USE:
    coder = Coder(secret=234987, min_length=8)
    coder.decode_long(coder.encode_long(42))  # -> 42

Important: never let outsiders submit chosen values to a coder whose secret
protects other IDs. Publishing encoded IDs is fine, the mode is public too.
"""

import os
import typing

import numpy as np

from .bits import (
    MASK64,
    bit_count64,
    bits_to_double,
    bits_to_float,
    data_length,
    double_to_bits,
    float_to_bits,
    high_int,
    low_int,
    to_int32,
    to_int64,
    ushr32,
)
from .errors import DecodeError
from .mode import MIXED, Mode
from .names import NameCodec
from .secret import SECRET_PROPERTY, condition_secret, resolve_secret


class Coder:
    ENGINE_VERSION = "1.0.0"
    MIN_LENGTH = 1
    MAX_LENGTH = 20
    BLOCK_LENGTH = 10
    # largest value expressible with 19 characters
    MAX_19 = (1 << 61) - 1

    __slots__ = (
        "_secret",
        "_min_length",
        "_mode",
        "_join",
        "_flip",
        "_pad1",
        "_padN",
        "_tables",
        "_table_index",
        "_names",
    )

    def __init__(
        self,
        secret: int = 0,
        min_length: int = 8,
        mode: Mode = MIXED,
        secret_property: str = SECRET_PROPERTY
    ) -> None:
        """
        Args:
            secret: the 64-bit secret; 0 reads it from the environment variable
                named by `secret_property`
            min_length: target minimum ID length, clamped to 1-20
            mode: alphabet configuration, see `idmask.mode`
            secret_property: environment variable consulted when `secret` is 0

        Raises:
            ConfigurationError: the secret is missing or not an integer
        """
        self._secret = condition_secret(resolve_secret(secret, secret_property))
        self._min_length = max(Coder.MIN_LENGTH, min(Coder.MAX_LENGTH, int(min_length)))
        self._mode = mode
        self._join = mode.join
        self._flip = mode.flip
        self._pad1 = mode.pad1
        self._padN = mode.padN
        self._tables = mode.tables
        self._table_index = tuple({c: i for i, c in enumerate(t)} for t in mode.tables)
        self._names = NameCodec(self._secret, self._min_length, mode)

    @staticmethod
    def _env_int(name: str) -> typing.Optional[int]:
        value = os.getenv(name)
        if not value:
            return None
        try:
            parsed = int(value)
        except (TypeError, ValueError):
            return None
        if parsed <= 0:
            return None
        return parsed

    # ------------------------------------------------------------------ factories

    @classmethod
    def of(
        cls,
        secret: int = 0,
        min_length: int = 8,
        mode: Mode = MIXED,
        secret_property: str = SECRET_PROPERTY
    ) -> "Coder":
        return cls(secret, min_length, mode, secret_property)

    @classmethod
    def of8(cls) -> "Coder":
        """Secret from `IDMASK_SECRET`, minimum length 8, `MIXED` mode."""
        return cls(0, 8, MIXED)

    @classmethod
    def from_env(cls, secret_property: str = SECRET_PROPERTY) -> "Coder":
        """Coder configured from `IDMASK_SECRET`, `IDMASK_MIN_LENGTH` and `IDMASK_MODE`."""
        min_length = Coder._env_int("IDMASK_MIN_LENGTH") or 8
        mode_name = os.getenv("IDMASK_MODE")
        mode = Mode.preset(mode_name) if mode_name else MIXED
        return cls(0, min_length, mode, secret_property)

    @property
    def min_length(self) -> int:
        return self._min_length

    @property
    def mode(self) -> Mode:
        return self._mode

    def __repr__(self) -> str:
        return f"Coder(min_length={self._min_length}, mode={self._mode!r})"

    # ------------------------------------------------------------------ longs

    def encode_long(self, value: int) -> str:
        """Encodes any signed 64-bit value in at most 20 characters."""
        return self._encode_long(to_int64(value), self._min_length)

    def decode_long(self, encoded: str) -> int:
        """
        Raises:
            DecodeError: the ID was not produced by this coder; changing a single
                character is detected with a chance of roughly 7 in 8
        """
        if not encoded:
            raise DecodeError("Cannot decode an empty ID")
        return self._decode_long(encoded, list(encoded), 0, len(encoded))

    def encode_longs(self, values: typing.Iterable[int]) -> str:
        """
        Encodes each value and joins them with the mode's join character.

        The minimum length applies to the whole ID; missing characters are
        spread over the values, the first value taking the remainder. Values
        whose own length already exceeds their share are written unpadded.
        """
        values = [to_int64(v) for v in values]
        if not values:
            return ""
        if len(values) == 1:
            return self.encode_long(values[0])
        lengths = [self._encoding_min_length(v) for v in values]
        total = sum(lengths) + len(values) - 1
        pad_avg = 0
        pad_first = 0
        if total < self._min_length:
            pad_avg = (self._min_length - total) // len(values)
            pad_first = (self._min_length - total) % len(values) + pad_avg
        parts = [self._encode_long(values[0], min(Coder.MAX_LENGTH, pad_first + lengths[0]))]
        for value, length in zip(values[1:], lengths[1:]):
            parts.append(self._encode_long(value, min(Coder.MAX_LENGTH, pad_avg + length)))
        return self._join.join(parts)

    def decode_longs(self, encoded: str) -> typing.List[int]:
        if not encoded:
            return []
        if self._join not in encoded:
            return [self.decode_long(encoded)]
        chars = list(encoded)
        values = []
        start = 0
        while True:
            end = encoded.find(self._join, start)
            stop = len(chars) if end < 0 else end
            values.append(self._decode_long(encoded, chars, start, stop - start))
            if end < 0:
                return values
            start = end + 1

    # ------------------------------------------------------------------ names and text

    def encode_name(self, value: str) -> str:
        """
        One character per input character plus at most 9 filler characters.

        Raises:
            EncodeError: `value` contains anything but A-Z and _
        """
        return self._names.encode_name(value)

    def decode_name(self, encoded: str) -> str:
        return self._names.decode_name(encoded)

    def encode_text(self, value: str) -> str:
        """Two characters per UTF-8 byte plus at most 9 filler characters."""
        return self._names.encode_text(value)

    def decode_text(self, encoded: str) -> str:
        return self._names.decode_text(encoded)

    # ------------------------------------------------------------------ convenience

    def encode_int(self, value: int) -> str:
        """At most 10 characters for positive values, 11 for large negative ones."""
        return self.encode_long(to_int32(value))

    def decode_int(self, encoded: str) -> int:
        return to_int32(self.decode_long(encoded))

    def encode_double(self, value: float) -> str:
        """Encodes the raw IEEE-754 bits; NaN and infinities included."""
        return self.encode_long(double_to_bits(value))

    def decode_double(self, encoded: str) -> float:
        return bits_to_double(self.decode_long(encoded))

    def encode_float(self, value: float) -> str:
        return self.encode_int(float_to_bits(value))

    def decode_float(self, encoded: str) -> float:
        return bits_to_float(self.decode_int(encoded))

    def encode_ints(self, values: typing.Iterable[int]) -> str:
        return self.encode_longs(to_int32(v) for v in values)

    def decode_ints(self, encoded: str) -> "np.ndarray":
        return np.asarray(self.decode_longs(encoded), dtype=np.int64).astype(np.int32)

    def encode_doubles(self, values: typing.Iterable[float]) -> str:
        bits = np.asarray(list(values), dtype=np.float64).view(np.int64)
        return self.encode_longs(bits.tolist())

    def decode_doubles(self, encoded: str) -> "np.ndarray":
        return np.asarray(self.decode_longs(encoded), dtype=np.int64).view(np.float64)

    def encode_floats(self, values: typing.Iterable[float]) -> str:
        bits = np.asarray(list(values), dtype=np.float32).view(np.int32)
        return self.encode_longs(bits.tolist())

    def decode_floats(self, encoded: str) -> "np.ndarray":
        return self.decode_ints(encoded).view(np.float32)

    # ------------------------------------------------------------------ scalar engine

    def _is_flip_preferable(self, value: int) -> bool:
        # complement, not negation: every bit pattern has a complement
        return value < 0 and ~value <= Coder.MAX_19

    def _encoding_min_length(self, value: int) -> int:
        """
        Share of the minimum length a value claims before padding is spread.

        Counts data characters of both halves plus one for a negative value,
        which is not always what the encoder writes: a non-zero high half
        always gets a full low block.
        """
        if value < 0:
            return 1 + self._encoding_min_length(~value)
        length = data_length(low_int(value))
        high = high_int(value)
        if high == 0:
            return length
        return data_length(high) + length

    def _encode_long(self, value: int, min_length: int) -> str:
        do_flip = self._is_flip_preferable(value)
        if do_flip:
            value = ~value
        value &= MASK64
        low_value = low_int(value)
        high_value = high_int(value)
        offset = 1 if do_flip else 0
        if min_length <= Coder.BLOCK_LENGTH and high_value == 0:
            length_data = data_length(low_value)
            length = max(min_length, length_data)
            if do_flip and length > length_data:
                length -= 1
            chars = [""] * (offset + length)
            self._encode(low_value, low_int(self._secret), chars, offset, length, length_data)
        else:
            length_data = data_length(high_value) + Coder.BLOCK_LENGTH
            length = max(min_length, length_data)
            if do_flip and length > length_data:
                length -= 1
            chars = [""] * (offset + length)
            self._encode(
                low_value,
                low_int(self._secret),
                chars,
                len(chars) - Coder.BLOCK_LENGTH,
                Coder.BLOCK_LENGTH,
                data_length(low_value)
            )
            self._encode(
                high_value,
                high_int(self._secret),
                chars,
                offset,
                length - Coder.BLOCK_LENGTH,
                data_length(high_value)
            )
        if do_flip:
            chars[0] = self._flip
            _swap(chars, 0, value.bit_count() % len(chars))
        return "".join(chars)

    def _encode(
        self,
        value: int,
        secret: int,
        chars: typing.List[str],
        offset: int,
        length: int,
        length_data: int
    ) -> None:
        pad_length = max(0, length - length_data)
        sec_val = value ^ secret
        table_offset = sec_val & 0b11
        table_count = len(self._tables)
        index = offset + length - 1
        for i in range(length_data):
            chars[index] = self._tables[table_offset % table_count][ushr32(sec_val, 2 + 3 * i) & 0b111]
            index -= 1
            table_offset += 1
        if pad_length == 0:
            return
        if pad_length == 1:
            chars[offset] = self._pad1
        else:
            # filler continues the triplet pattern, it carries no data
            for i in range(pad_length - 2):
                pad_val = ushr32(sec_val, 2 + (3 * i) % length_data)
                chars[index] = self._tables[table_offset % table_count][pad_val & 0b111]
                index -= 1
                table_offset += 1
            pad_secret = ushr32(secret, 2 + 3 * (length - 1)) & 0b111
            chars[offset + 1] = self._tables[table_offset % table_count][pad_secret ^ (pad_length - 2)]
            chars[offset] = self._padN
        _swap(chars, offset, offset + bit_count64(sec_val) % length)

    def _decode_long(self, encoded: str, chars: typing.List[str], offset: int, length: int) -> int:
        flip_index = _find(chars, offset, length, (self._flip,))
        if flip_index >= 0:
            _swap(chars, offset, flip_index)
            return to_int64(~self._decode(encoded, chars, offset + 1, length - 1))
        return to_int64(self._decode(encoded, chars, offset, length))

    def _decode(self, encoded: str, chars: typing.List[str], offset: int, length: int) -> int:
        if length < 1 or length > Coder.MAX_LENGTH:
            raise DecodeError(f"Unexpected length: {length} (at {offset} in {encoded})", None, offset)
        if length <= Coder.BLOCK_LENGTH:
            return self._decode_block(encoded, chars, offset, length, low_int(self._secret))
        high_length = length - Coder.BLOCK_LENGTH
        high = self._decode_block(encoded, chars, offset, high_length, high_int(self._secret))
        low = self._decode_block(
            encoded, chars, offset + high_length, Coder.BLOCK_LENGTH, low_int(self._secret)
        )
        return (high << 32) | low

    def _decode_block(
        self,
        encoded: str,
        chars: typing.List[str],
        offset: int,
        length: int,
        secret: int
    ) -> int:
        table_count = len(self._tables)
        pad_index = _find(chars, offset, length, (self._pad1, self._padN))
        if pad_index >= 0:
            _swap(chars, offset, pad_index)
            table_offset0 = self._decode_table_offset(encoded, chars, offset, length)
            if chars[offset] == self._pad1:
                pad_length = 1
            else:
                pad_secret = ushr32(secret, 2 + 3 * (length - 1)) & 0b111
                pad_encoded = self._decode_table_index(
                    (table_offset0 + length - 2) % table_count, chars, offset + 1
                )
                pad_length = (pad_secret ^ pad_encoded) + 2
            if pad_length >= length:
                raise DecodeError(
                    f"Unexpected padding: {pad_length} (at {pad_index} in {encoded})",
                    chars[offset],
                    pad_index
                )
            offset += pad_length
            length -= pad_length
        else:
            table_offset0 = self._decode_table_offset(encoded, chars, offset, length)
        # long enough for the highest bit of the 32-bit half
        value = 0
        for i in range(length):
            triplet_secret = ushr32(secret, 2 + 3 * (length - 1 - i)) & 0b111
            triplet = self._decode_table_index(
                (table_offset0 + length - 1 - i) % table_count, chars, offset + i
            )
            value = (value << 3) | (triplet_secret ^ triplet)
        # restore the 2 low bits from the table offset
        return (value << 2) | ((table_offset0 ^ secret) & 0b11)

    def _decode_table_offset(self, encoded: str, chars: typing.List[str], offset: int, length: int) -> int:
        index = offset + length - 1
        symbol = chars[index]
        for table in range(4):
            if symbol in self._table_index[table]:
                return table
        raise DecodeError(
            f"Unexpected offset: `{symbol}` (at {index} in {encoded})", symbol, index
        )

    def _decode_table_index(self, table: int, chars: typing.List[str], index: int) -> int:
        symbol = chars[index]
        value = self._table_index[table].get(symbol)
        if value is None:
            raise DecodeError(
                f"Unexpected symbol: `{symbol}` (expected one of {self._tables[table]})", symbol, index
            )
        return value


def _swap(chars: typing.List[str], i1: int, i2: int) -> None:
    chars[i1], chars[i2] = chars[i2], chars[i1]


def _find(chars: typing.List[str], offset: int, length: int, symbols: typing.Tuple[str, ...]) -> int:
    for i in range(offset, offset + length):
        if chars[i] in symbols:
            return i
    return -1


__all__ = ["Coder"]
