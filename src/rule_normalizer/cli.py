"""Command-line interface for rule_normalizer.

- reads a JSON rule declaration document from stdin or a file
- normalizes every field's rules under an optional path prefix
- writes ``{field: [rules]}`` as JSON to stdout
"""

from __future__ import annotations
import argparse
import json
import logging
import sys
from typing import Any, TextIO

from .declarations import load_declarations
from .errors import RuleNormalizerError
from .normalize import Limits, normalize_declarations


def _open_input(path: str) -> TextIO:
    if path == "-":
        return sys.stdin
    return open(path, "r", encoding="utf-8")


def _parse_route(items: list[str]) -> dict[str, Any]:
    route: dict[str, Any] = {}
    for item in items:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise argparse.ArgumentTypeError(f"expected KEY=VALUE, got {item!r}")
        route[key] = value
    return route


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="rule-normalizer", description="Normalize validation rule declarations.")
    p.add_argument("path", nargs="?", default="-", help="JSON declarations file or '-' for stdin")
    p.add_argument("--path", dest="prefix", default=None, help="Dotted path of the container being validated")
    p.add_argument("--route", action="append", default=[], metavar="KEY=VALUE",
                   help="Route parameter available to route references (repeatable)")
    p.add_argument("--max-depth", type=int, default=32, help="Reject rules nested deeper than this")
    p.add_argument("--max-rules", type=int, default=None, help="Reject fields with more rules than this")
    p.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr")
    return p


def main(argv: list[str] | None = None) -> int:
    p = build_parser()
    args = p.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        route = _parse_route(args.route)
    except argparse.ArgumentTypeError as ex:
        p.error(str(ex))

    limits = Limits(max_depth=args.max_depth, max_rules=args.max_rules)

    try:
        fh = _open_input(args.path)
        with fh:
            data = json.load(fh)
        declarations = load_declarations(data, route=route)
        out = normalize_declarations(declarations, args.prefix, limits)
    except (RuleNormalizerError, ValueError, OSError) as ex:
        sys.stderr.write(f"error: {ex}\n")
        return 2

    sys.stdout.write(json.dumps(out, indent=2, default=str) + "\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
