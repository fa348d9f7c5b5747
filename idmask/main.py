"""Command line interface: ``python -m idmask``."""

import os
import sys

from .coder import Coder
from .errors import CodecError, ConfigurationError
from .mode import PRESETS, Mode
from .secret import SECRET_PROPERTY, secret_from_passphrase
from .version import __version__

DEMO_VALUES = (1, 12, 123, 1234, 12345, 123456, 1234567)


def cli(argv=None) -> int:
    import argparse

    def _cli_plain_mode() -> bool:
        if os.getenv("IDMASK_CLI_PLAIN"):
            return True
        if os.getenv("NO_COLOR"):
            return True
        return not sys.stderr.isatty()

    class _CliTheme:
        def __init__(self, plain: bool):
            self.plain = plain
            self.reset = "" if plain else "\033[0m"
            self.bold = "" if plain else "\033[1m"
            self.red = "" if plain else "\033[31m"
            self.yellow = "" if plain else "\033[33m"

        def _wrap(self, msg: str, color: str) -> str:
            if self.plain:
                return msg
            return f"{self.bold}{color}{msg}{self.reset}"

        def warn(self, msg: str) -> str:
            return self._wrap(msg, self.yellow)

        def err(self, msg: str) -> str:
            return self._wrap(msg, self.red)

    theme = _CliTheme(_cli_plain_mode())

    parser = argparse.ArgumentParser(prog="idmask", description="Short reversible obfuscated IDs")
    parser.add_argument("--version", action="version", version=f"idmask {__version__}")
    parser.add_argument(
        "--secret",
        type=int,
        default=0,
        help=f"64-bit secret (default: read from ${SECRET_PROPERTY})"
    )
    parser.add_argument("--passphrase", default=None, help="Derive the secret from a passphrase")
    parser.add_argument(
        "--secret-env",
        default=SECRET_PROPERTY,
        help="Environment variable holding the secret"
    )
    parser.add_argument(
        "--min-length",
        type=int,
        default=Coder._env_int("IDMASK_MIN_LENGTH") or 8,
        help="Target minimum ID length, 1-20 (default: $IDMASK_MIN_LENGTH or 8)"
    )
    parser.add_argument(
        "--mode",
        default=os.getenv("IDMASK_MODE") or "mixed",
        help=f"Alphabet preset: {', '.join(name.lower() for name in PRESETS)}"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    enc = subparsers.add_parser("encode", help="Encode one or more numbers into a single ID")
    enc.add_argument("values", nargs="+", help="Numbers to encode")
    enc.add_argument(
        "--type",
        choices=("long", "int", "double", "float"),
        default="long",
        help="How to interpret the numbers"
    )

    dec = subparsers.add_parser("decode", help="Decode an ID back into its numbers")
    dec.add_argument("id", help="ID to decode")
    dec.add_argument("--type", choices=("long", "int", "double", "float"), default="long")

    name_enc = subparsers.add_parser("encode-name", help="Encode an upper case name (A-Z, _)")
    name_enc.add_argument("name")
    name_dec = subparsers.add_parser("decode-name", help="Decode a name ID")
    name_dec.add_argument("id")

    text_enc = subparsers.add_parser("encode-text", help="Encode arbitrary UTF-8 text")
    text_enc.add_argument("text")
    text_dec = subparsers.add_parser("decode-text", help="Decode a text ID")
    text_dec.add_argument("id")

    subparsers.add_parser("demo", help="Show sample IDs for every preset")

    derive = subparsers.add_parser("derive-secret", help="Print the secret derived from a passphrase")
    derive.add_argument("passphrase")

    args = parser.parse_args(argv)

    if args.command == "derive-secret":
        try:
            print(secret_from_passphrase(args.passphrase))
            return 0
        except ConfigurationError as exc:
            print(theme.err(f"derive-secret failed: {exc}"), file=sys.stderr)
            return 1

    if args.secret:
        print(theme.warn("WARN: --secret is visible in the process list; prefer "
                         f"${args.secret_env}"), file=sys.stderr)

    def _coder(mode: Mode) -> Coder:
        secret = args.secret
        if args.passphrase:
            secret = secret_from_passphrase(args.passphrase)
        return Coder(secret, args.min_length, mode, args.secret_env)

    try:
        if args.command == "demo":
            coders = [(name, _coder(mode)) for name, mode in PRESETS.items()]
            print(" ".join(f"{h:>8}" for h in ["value"] + [name.lower() for name, _ in coders]))
            for value in DEMO_VALUES:
                cells = [str(value)] + [coder.encode_long(value) for _, coder in coders]
                print(" ".join(f"{c:>8}" for c in cells))
            return 0
        coder = _coder(Mode.preset(args.mode))
    except ConfigurationError as exc:
        print(theme.err(f"Configuration error: {exc}"), file=sys.stderr)
        return 1

    try:
        if args.command == "encode":
            if args.type == "long":
                print(coder.encode_longs(int(v) for v in args.values))
            elif args.type == "int":
                print(coder.encode_ints(int(v) for v in args.values))
            elif args.type == "double":
                print(coder.encode_doubles(float(v) for v in args.values))
            else:
                print(coder.encode_floats(float(v) for v in args.values))
            return 0
        if args.command == "decode":
            if args.type == "long":
                values = coder.decode_longs(args.id)
            elif args.type == "int":
                values = coder.decode_ints(args.id).tolist()
            elif args.type == "double":
                values = coder.decode_doubles(args.id).tolist()
            else:
                values = coder.decode_floats(args.id).tolist()
            print(" ".join(str(v) for v in values))
            return 0
        if args.command == "encode-name":
            print(coder.encode_name(args.name))
            return 0
        if args.command == "decode-name":
            print(coder.decode_name(args.id))
            return 0
        if args.command == "encode-text":
            print(coder.encode_text(args.text))
            return 0
        if args.command == "decode-text":
            print(coder.decode_text(args.id))
            return 0
    except ValueError as exc:
        label = "decode" if args.command.startswith("decode") else "encode"
        if isinstance(exc, CodecError) and exc.index is not None:
            print(theme.err(f"{label} failed at index {exc.index}: {exc}"), file=sys.stderr)
        else:
            print(theme.err(f"{label} failed: {exc}"), file=sys.stderr)
        return 1

    return 0


def main(argv=None) -> int:
    try:
        return cli(argv)
    except KeyboardInterrupt:
        print("Exiting...")
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
