"""Name and text codec.

Names (upper case ASCII letters and ``_``) and UTF-8 text are encoded
symbol by symbol instead of as numbers. A symbol is a 5-bit value: the two
low bits pick one of the first four tables, the upper three bits the
character within it. The secret is rotated right by 5 bits for every input
position so repeated input characters do not repeat in the output.
"""

import typing

from .bits import MASK64, rotr64
from .errors import DecodeError, EncodeError
from .mode import Mode

NAME_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ_"


class NameCodec:
    MAX_PADDING = 9
    _NAME_VALUES: typing.ClassVar[typing.Dict[str, int]] = {c: i for i, c in enumerate(NAME_ALPHABET)}

    __slots__ = ("_secret", "_min_length", "_pad1", "_padN", "_symbols", "_symbol_values")

    def __init__(self, secret: int, min_length: int, mode: Mode):
        self._secret = secret & MASK64
        self._min_length = min_length
        self._pad1 = mode.pad1
        self._padN = mode.padN
        self._symbols = tuple(
            mode.tables[v & 0b11][v >> 2] for v in range(32)
        )
        self._symbol_values = {s: v for v, s in enumerate(self._symbols)}

    def encode_name(self, value: str) -> str:
        symbols = []
        mix = 0
        for index, ch in enumerate(value):
            sym = self._NAME_VALUES.get(ch)
            if sym is None:
                raise EncodeError(f"Not a name character: {ch} at index {index}", ch, index)
            v = (sym ^ self._key(index)) & 0x1F
            mix = ((mix << 5) ^ v) & MASK64
            symbols.append(self._symbols[v])
        return self._pad(symbols, mix)

    def decode_name(self, encoded: str) -> str:
        data, offset = self._unpad(encoded)
        out = []
        for i, ch in enumerate(data):
            sym = self._symbol_value(ch, offset + i) ^ (self._key(i) & 0x1F)
            if sym >= len(NAME_ALPHABET):
                raise DecodeError(f"Not a name symbol: `{ch}` (at {offset + i} in {encoded})", ch, offset + i)
            out.append(NAME_ALPHABET[sym])
        return "".join(out)

    def encode_text(self, value: str) -> str:
        symbols = []
        mix = 0
        for index, byte in enumerate(value.encode("utf-8")):
            v = (byte ^ self._key(index)) & 0x3FF
            mix = ((mix << 5) ^ v) & MASK64
            symbols.append(self._symbols[v >> 5])
            symbols.append(self._symbols[v & 0x1F])
        return self._pad(symbols, mix)

    def decode_text(self, encoded: str) -> str:
        data, offset = self._unpad(encoded)
        if len(data) % 2:
            raise DecodeError(f"Text ID must have an even number of data symbols: {encoded}")
        raw = bytearray()
        for i in range(0, len(data), 2):
            high = self._symbol_value(data[i], offset + i)
            low = self._symbol_value(data[i + 1], offset + i + 1)
            byte = ((high << 5) | low) ^ (self._key(i // 2) & 0x3FF)
            if byte > 0xFF:
                raise DecodeError(f"Not a text symbol pair: `{data[i]}{data[i + 1]}` (at {offset + i} in {encoded})",
                                  data[i], offset + i)
            raw.append(byte)
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecodeError(f"Text ID does not decode to UTF-8: {exc}") from exc

    def _key(self, index: int) -> int:
        return rotr64(self._secret, 5 * index)

    def _symbol_value(self, ch: str, index: int) -> int:
        v = self._symbol_values.get(ch)
        if v is None:
            raise DecodeError(f"Unexpected symbol: `{ch}` (at {index})", ch, index)
        return v

    def _pad(self, symbols: typing.List[str], mix: int) -> str:
        n = len(symbols)
        if n == 0:
            return ""
        pad_length = min(NameCodec.MAX_PADDING, max(0, self._min_length - n))
        if pad_length == 0:
            return "".join(symbols)
        if pad_length == 1:
            out = [self._pad1] + symbols
        else:
            extra = self._symbols[((pad_length - 2) ^ (self._secret >> 59)) & 0x1F]
            filler = [self._symbols[(self._key(n + i) ^ mix) & 0x1F] for i in range(pad_length - 2)]
            out = [self._padN, extra] + filler + symbols
        # move the marker away from the front
        pad_index = mix.bit_count() % len(out)
        out[0], out[pad_index] = out[pad_index], out[0]
        return "".join(out)

    def _unpad(self, encoded: str) -> typing.Tuple[typing.List[str], int]:
        """Returns the data symbols and their offset within the un-swapped ID."""
        chars = list(encoded)
        pad_index = next((i for i, c in enumerate(chars) if c in (self._pad1, self._padN)), -1)
        if pad_index < 0:
            return chars, 0
        chars[0], chars[pad_index] = chars[pad_index], chars[0]
        if chars[0] == self._pad1:
            pad_length = 1
        else:
            if len(chars) < 2:
                raise DecodeError(f"Padding marker without padding length: {encoded}", chars[0], pad_index)
            pad_length = ((self._symbol_value(chars[1], 1) ^ (self._secret >> 59)) & 0x1F) + 2
        if pad_length >= len(chars):
            raise DecodeError(f"Padding exceeds ID length: {encoded}", chars[0], pad_index)
        return chars[pad_length:], pad_length


__all__ = ["NAME_ALPHABET", "NameCodec"]
