"""
CLI Main - Entry point for the `study` command.
"""

import logging
import sys

import structlog

from ..config import StudyConfig
from ..errors import StudyLifecycleError
from .commands import run_command
from .parser import create_parser

__all__ = ["main"]


def main(args: list[str] | None = None, config: StudyConfig | None = None) -> int:
    """Main entry point for the study CLI.

    Args:
        args: Command line arguments (uses sys.argv if None)
        config: Study configuration (uses defaults if None)

    Returns:
        Exit code
    """
    if args is None:
        args = sys.argv[1:]

    parser = create_parser()
    parsed = parser.parse_args(args)

    if parsed.command is None:
        parser.print_help()
        return 0

    if config is None:
        config = StudyConfig()

    log_level = getattr(logging, config.log_level.upper(), logging.INFO)
    structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(log_level))

    try:
        return run_command(parsed.command, parsed, config)
    except KeyboardInterrupt:
        return 130
    except (StudyLifecycleError, OSError, EOFError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
