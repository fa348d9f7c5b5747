"""Exception types raised by the idmask codec."""


class ConfigurationError(ValueError):
    """Invalid alphabet or secret; raised while constructing a coder."""


class CodecError(ValueError):
    def __init__(self, message: str, symbol: str | None = None, index: int | None = None):
        super().__init__(message)
        self.symbol = symbol
        self.index = index


class DecodeError(CodecError):
    """The ID was not produced by this coder or has been altered."""


class EncodeError(CodecError):
    """The input contains characters the codec cannot represent."""


__all__ = ["CodecError", "ConfigurationError", "DecodeError", "EncodeError"]
