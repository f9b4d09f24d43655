"""Command-line interface for cljformat."""

from __future__ import annotations

import argparse
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from cljformat.errors import LexError
from cljformat.tokens import Token, TokenType
from cljformat.transform import DEFAULT_TRANSFORMS, Transform

_TRUE_VALUES = {"on", "true", "yes", "1"}
_FALSE_VALUES = {"off", "false", "no", "0"}


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_file: Path
    transforms: dict[Transform, bool]
    print_tokens: bool
    list_transforms: bool
    debug: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="cljformat",
        description="Lex Clojure source and resolve formatting transforms",
    )
    p.add_argument("input", help="Input .clj file")
    p.add_argument(
        "--config",
        metavar="FILE",
        help="Config file (default: auto-discover cljformat.toml)",
    )
    p.add_argument(
        "-t",
        "--transform",
        action="append",
        default=[],
        metavar="NAME=on|off",
        help="Enable or disable a transform (repeatable)",
    )
    p.add_argument("--tokens", action="store_true", help="Print the token stream to stdout")
    p.add_argument(
        "--list-transforms",
        action="store_true",
        help="Print the resolved transform settings and exit",
    )
    p.add_argument("--debug", action="store_true", help="Dump tokens to stderr")
    return p


def parse_bool(s: str) -> bool:
    """Parse an on/off style flag value."""
    lowered = s.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise argparse.ArgumentTypeError(f"invalid boolean value: {s}")


def parse_transform_arg(s: str) -> tuple[Transform, bool]:
    """Parse a NAME=VALUE string into (transform, enabled)."""
    if "=" not in s:
        raise argparse.ArgumentTypeError(f"invalid transform format (expected NAME=VALUE): {s}")
    name, _, value = s.partition("=")
    try:
        transform = Transform.from_name(name)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from None
    return transform, parse_bool(value)


def load_config(config_path: Path | None, input_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else input_dir / "cljformat.toml"

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def resolve_transforms(config: dict[str, Any], overrides: list[str]) -> dict[Transform, bool]:
    """Merge defaults, the [transforms] config table, and CLI overrides.

    Precedence: defaults < config file < CLI flags.
    """
    transforms = dict(DEFAULT_TRANSFORMS)
    cfg_transforms = config.get("transforms")
    if isinstance(cfg_transforms, dict):
        for k, v in cfg_transforms.items():
            try:
                transform = Transform.from_name(str(k))
            except ValueError as exc:
                raise argparse.ArgumentTypeError(f"config: {exc}") from None
            if not isinstance(v, bool):
                raise argparse.ArgumentTypeError(
                    f"config: transform {k} must be true or false, got {v!r}"
                )
            transforms[transform] = v
    for raw in overrides:
        transform, enabled = parse_transform_arg(raw)
        transforms[transform] = enabled
    return transforms


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions."""
    input_file = Path(args.input)
    input_dir = input_file.parent
    if not input_dir.parts:
        input_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    config = load_config(config_path, input_dir)

    return CliOptions(
        input_file=input_file,
        transforms=resolve_transforms(config, args.transform),
        print_tokens=args.tokens,
        list_transforms=args.list_transforms,
        debug=args.debug,
    )


def lex_source(source: str, options: CliOptions) -> list[Token]:
    """Tokenize source, raising LexError on the first scan error."""
    from cljformat.debug import dump_tokens
    from cljformat.lexer import tokenize

    tokens = tokenize(source, str(options.input_file))

    if options.debug:
        dump_tokens(tokens, file=sys.stderr)

    last = tokens[-1]
    if last.type is TokenType.ERROR:
        raise last.as_error()
    return tokens


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = resolve_options(args)
    except argparse.ArgumentTypeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except tomllib.TOMLDecodeError as exc:
        print(f"error: invalid config file: {exc}", file=sys.stderr)
        return 2

    if options.list_transforms:
        for transform in Transform:
            state = "on" if options.transforms.get(transform) else "off"
            sys.stdout.write(f"{transform.config_name} {state}\n")
        return 0

    try:
        source = options.input_file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    try:
        tokens = lex_source(source, options)
    except LexError as exc:
        print(exc.format(source), file=sys.stderr)
        return 1

    if options.print_tokens:
        from cljformat.debug import dump_tokens

        dump_tokens(tokens, file=sys.stdout)

    return 0
