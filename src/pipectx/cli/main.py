"""CLI entrypoint for pipectx."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from pipectx import __version__
from pipectx.cli.handlers import handle_evaluate, handle_validate_config
from pipectx.constants.branding import CLI_DESCRIPTION


def build_parser() -> argparse.ArgumentParser:
    """Build top-level CLI parser."""
    parser = argparse.ArgumentParser(
        prog="pipectx",
        description=CLI_DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    evaluate = subparsers.add_parser("evaluate", help="Evaluate expressions in a stage configuration document")
    evaluate.add_argument("-s", "--source", type=Path, required=True, help="Stage configuration document (YAML/JSON)")
    evaluate.add_argument("-x", "--context", type=Path, default=None, help="Evaluation context document (YAML/JSON)")
    evaluate.add_argument("-r", "--root", type=Path, default=Path("."), help="Directory holding pipectx.yaml")
    evaluate.add_argument("-c", "--config", type=Path, help="Explicit config file")
    unknown_keys = evaluate.add_mutually_exclusive_group()
    unknown_keys.add_argument(
        "--allow-unknown-keys",
        dest="allow_unknown_keys",
        action="store_true",
        default=None,
        help="Leave references to undefined context fields as literal text without recording a failure",
    )
    unknown_keys.add_argument(
        "--strict",
        dest="allow_unknown_keys",
        action="store_false",
        default=None,
        help="Record references to undefined context fields as failures",
    )
    evaluate.add_argument(
        "--fail-on-errors",
        action="store_true",
        help="Exit with status 1 when any expression failed to evaluate",
    )
    evaluate.add_argument("-v", "--verbose", action="store_true", help="Log evaluation summaries and diagnostics")

    validate = subparsers.add_parser("validate-config", help="Validate configuration without evaluating")
    validate.add_argument("-r", "--root", type=Path, required=True, help="Directory holding pipectx.yaml")
    validate.add_argument("-c", "--config", type=Path, help="Explicit config file")

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)

    level = logging.DEBUG if getattr(args, "verbose", False) else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s %(message)s")

    if args.command == "validate-config":
        return handle_validate_config(args)

    if args.command != "evaluate":
        parser.error(f"Unsupported command: {args.command}")

    return handle_evaluate(args)


if __name__ == "__main__":
    raise SystemExit(main())
