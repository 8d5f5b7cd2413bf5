"""
CLI Parser - Argument parser for the study command.
"""

import argparse

__all__ = ["create_parser"]


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="study",
        description="Study Lifecycle - inspect and manage the study's persisted state",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    subparsers.add_parser("status", help="Show expiration record and phases")
    subparsers.add_parser("expiration", help="Print the raw expiration record")

    reset_parser = subparsers.add_parser(
        "reset-expiration", help="Remove the expiration record"
    )
    reset_parser.add_argument(
        "-y", "--yes",
        action="store_true",
        help="Don't ask for confirmation",
    )

    phases_parser = subparsers.add_parser("phases", help="List configured phases")
    phases_parser.add_argument(
        "--json",
        action="store_true",
        help="Print phases as JSON",
    )

    return parser
