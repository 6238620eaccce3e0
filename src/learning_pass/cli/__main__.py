"""
Learning Pass CLI entry point.

Usage:
    python -m learning_pass.cli <command> [options]

Available commands:
    convert  - Validate a customer payload and emit a Symphony flat file
    rules    - List the registered field normalizers

Examples:
    python -m learning_pass.cli convert --customer customer.json --partner neos
    python -m learning_pass.cli rules
"""

import argparse
import json
import sys
from typing import List, Optional


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point with subcommand routing.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parser = argparse.ArgumentParser(
        prog="learning_pass.cli",
        description="Learning Pass CLI - customer registration to Symphony flat files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
        required=True,
        help="Command to execute",
    )
    subparsers.add_parser(
        "convert",
        help="Convert a customer payload into a flat file",
        add_help=False,  # Let the delegated module handle help
    )
    subparsers.add_parser("rules", help="List registered field normalizers")

    args, remaining_args = parser.parse_known_args(argv)

    if args.command == "convert":
        from learning_pass.cli.convert import main as convert_main

        return convert_main(remaining_args)

    elif args.command == "rules":
        from learning_pass.infrastructure.cleansing import list_available_rules

        print(json.dumps(list_available_rules(), indent=2))
        return 0

    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
