"""Whisker CLI — whisker accepts.

Entry point for the ``whisker`` command-line interface.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the whisker CLI."""
    parser = argparse.ArgumentParser(
        prog="whisker",
        description="Hot module replacement for module-graph dev servers.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # whisker accepts
    accepts_parser = subparsers.add_parser(
        "accepts",
        help="Print the dependencies each module accepts via import.meta.hot.accept()",
    )
    accepts_parser.add_argument("files", nargs="+", help="Module source files")

    return parser


def _get_version() -> str:
    """Get the package version."""
    from whisker import __version__

    return __version__


def _accepts(files: list[str]) -> int:
    """Lex each file and print one JSON object per line. Returns exit status."""
    from whisker._errors import AcceptedDepsError
    from whisker.hmr.lexer import scan_accepted_deps

    status = 0
    for name in files:
        path = Path(name)
        try:
            deps = scan_accepted_deps(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as exc:
            print(f"  Read error: {path}: {exc}", file=sys.stderr)
            status = 1
            continue
        except AcceptedDepsError as exc:
            print(f"  {path}:{exc.pos}: {exc}", file=sys.stderr)
            status = 1
            continue
        print(json.dumps({
            "file": str(path),
            "self": deps.self_accepts,
            "deps": sorted(deps.urls),
        }))
    return status


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "accepts":
        sys.exit(_accepts(args.files))


if __name__ == "__main__":
    main()
