"""Command-line interface for formulafmt."""

from __future__ import annotations

import argparse
import json
import sys
import time
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from formulafmt.errors import ConfigError

STDIN = "-"


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_file: Path | None  # None reads stdin
    output_file: Path | None
    indent: str
    check: bool
    tokens: bool
    watch: bool
    debug: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="formulafmt",
        description="Formula formatter and highlighter",
    )
    p.add_argument(
        "input",
        nargs="?",
        default=STDIN,
        help="Input formula file (default: stdin)",
    )
    p.add_argument("-o", "--output", help="Output file (default: stdout)")
    p.add_argument(
        "--indent",
        default=None,
        metavar="tab|N",
        help="Indent unit: 'tab' or a number of spaces (default: tab)",
    )
    p.add_argument(
        "--check",
        action="store_true",
        help="Exit with status 1 if the input is not already formatted",
    )
    p.add_argument(
        "--tokens",
        action="store_true",
        help="Print highlight tokens as JSON instead of formatting",
    )
    p.add_argument(
        "--config",
        metavar="FILE",
        help="Config file (default: auto-discover formulafmt.toml)",
    )
    p.add_argument("--watch", action="store_true", help="Watch for changes and reformat")
    p.add_argument("--debug", action="store_true", help="Dump layout tokens to stderr")
    return p


def parse_indent_arg(s: str) -> str:
    """Turn 'tab' or a space count into the indent unit string."""
    if s.lower() == "tab":
        return "\t"
    if s.isdigit() and int(s) > 0:
        return " " * int(s)
    raise argparse.ArgumentTypeError(f"invalid indent (expected 'tab' or a positive number): {s}")


def load_config(config_path: Path | None, input_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else input_dir / "formulafmt.toml"

    if not path.is_file():
        return {}

    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"invalid TOML: {exc}", path) from exc


def _config_indent(config: dict[str, Any], path: Path) -> str | None:
    cfg_format = config.get("format")
    if not isinstance(cfg_format, dict) or "indent" not in cfg_format:
        return None
    value = cfg_format["indent"]
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise ConfigError(f"format.indent must be 'tab' or an integer, got {value!r}", path)
    try:
        return parse_indent_arg(str(value))
    except argparse.ArgumentTypeError as exc:
        raise ConfigError(f"format.indent: {exc}", path) from exc


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: defaults < config file < CLI flags.
    """
    input_file = None if args.input == STDIN else Path(args.input)
    input_dir = input_file.parent if input_file is not None else Path(".")
    if not input_dir.parts:
        input_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    config = load_config(config_path, input_dir)
    discovered = config_path if config_path is not None else input_dir / "formulafmt.toml"

    indent = "\t"
    cfg_indent = _config_indent(config, discovered)
    if cfg_indent is not None:
        indent = cfg_indent
    if args.indent is not None:
        indent = parse_indent_arg(args.indent)

    if args.watch and input_file is None:
        raise argparse.ArgumentTypeError("--watch needs an input file, not stdin")
    if args.check and args.tokens:
        raise argparse.ArgumentTypeError("--check cannot be combined with --tokens")

    output_file = Path(args.output) if args.output else None

    return CliOptions(
        input_file=input_file,
        output_file=output_file,
        indent=indent,
        check=args.check,
        tokens=args.tokens,
        watch=args.watch,
        debug=args.debug,
    )


def read_source(options: CliOptions) -> str:
    if options.input_file is None:
        return sys.stdin.read()
    return options.input_file.read_text(encoding="utf-8")


def format_file(options: CliOptions, source: str | None = None) -> str:
    """Read the input and return the text to output (formula or JSON tokens)."""
    from formulafmt.debug import dump_tokens
    from formulafmt.layout import format_formula
    from formulafmt.lexer import tokenize, tokenize_for_display

    if source is None:
        source = read_source(options)

    if options.debug:
        dump_tokens(tokenize(source), file=sys.stderr)

    if options.tokens:
        payload = [{"text": t.text, "kind": t.kind.value} for t in tokenize_for_display(source)]
        return json.dumps(payload, ensure_ascii=False) + "\n"

    formatted = format_formula(source, options.indent)
    return formatted + "\n" if formatted else ""


def _display_name(options: CliOptions) -> str:
    return str(options.input_file) if options.input_file is not None else "<stdin>"


def _write(options: CliOptions, text: str) -> None:
    if options.output_file:
        options.output_file.write_text(text, encoding="utf-8")
    else:
        sys.stdout.write(text)
        sys.stdout.flush()


def watch_loop(options: CliOptions) -> None:
    """Poll input file for changes, reformat on each modification."""
    if options.input_file is None:
        raise ValueError("watch_loop needs an input file, not stdin")
    last_mtime = 0.0
    print(f"Watching {options.input_file} for changes...", file=sys.stderr)
    try:
        while True:
            try:
                mtime = options.input_file.stat().st_mtime
            except OSError:
                time.sleep(0.5)
                continue
            if mtime != last_mtime:
                last_mtime = mtime
                try:
                    _write(options, format_file(options))
                    print(f"Formatted {options.input_file}", file=sys.stderr)
                except (OSError, UnicodeDecodeError) as exc:
                    print(f"error: {exc}", file=sys.stderr)
            time.sleep(0.5)
    except KeyboardInterrupt:
        pass


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = resolve_options(args)
    except argparse.ArgumentTypeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except ConfigError as exc:
        print(str(exc), file=sys.stderr)
        return 2

    if options.watch:
        watch_loop(options)
        return 0

    try:
        source = read_source(options)
        output = format_file(options, source)
    except (OSError, UnicodeDecodeError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if options.check:
        if output.rstrip("\n") != source.rstrip("\n"):
            print(f"would reformat {_display_name(options)}", file=sys.stderr)
            return 1
        return 0

    _write(options, output)
    return 0
