#!/usr/bin/env python3
"""
systour CLI Entry Point

Provides command-line interface for route solving.
Run with: python -m systour <command> [args]
"""

import argparse
import json
import sys

from .core import get_utc_timestamp


def output_json(data: dict, indent: int = 2) -> None:
    """Print JSON output to stdout."""
    print(json.dumps(data, indent=indent))


def output_error(message: str, exit_code: int = 1, **kwargs) -> None:
    """Print error JSON and exit."""
    error_data = {
        "error": kwargs.pop("error_type", "error"),
        "message": message,
        "query_timestamp": get_utc_timestamp(),
    }
    error_data.update(kwargs)
    output_json(error_data)
    sys.exit(exit_code)


# =============================================================================
# Main Entry Point
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="systour",
        description="systour - exact route through every system of a jump map",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  systour solve --map data.json --system I.EXP.NJ7\n"
            "  systour solve --map data.json --system A --closed --dot route.dot\n"
            "  systour inspect --map data.json --system A"
        ),
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    from .commands import tour

    tour.register_parsers(subparsers)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    try:
        result = args.func(args)

        if isinstance(result, dict) and result:
            output_json(result)

            # Return non-zero exit code if result contains error
            if "error" in result:
                return 1

        return 0

    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 130
    except Exception as e:
        output_error(str(e), error_type="command_error", command=args.command)
        return 1


if __name__ == "__main__":
    sys.exit(main())
