"""Command line entry point.

Usage::

    express-starter my-app
    express-starter .
    express-starter my-app --profile fixed --install-timeout 600
    python -m express_starter my-app
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional, Sequence

from pydantic import ValidationError

from .config import MaterializerConfig
from .errors import MaterializationCancelled, MaterializeError, MissingArgument
from .materializer import ProjectMaterializer
from .models import MaterializationResult
from .prompts import ChoiceProvider
from .utils import console, print_error


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="express-starter",
        description="Create a new Express project from a bundled template",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  express-starter my-app\n"
            "  express-starter .            (use the current directory)\n"
            "  express-starter my-app --profile fixed\n"
        ),
    )
    parser.add_argument(
        "name",
        nargs="?",
        default=None,
        help="Project directory name, or '.' for the current directory",
    )
    parser.add_argument(
        "--profile",
        choices=["interactive", "fixed"],
        default="interactive",
        help="interactive: allow '.' and ask for a language; fixed: always a new "
        "directory with the default template (default: interactive)",
    )
    parser.add_argument(
        "--install-timeout",
        type=float,
        default=None,
        metavar="SECONDS",
        help="Kill the dependency install after this many seconds (default: no limit)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON configuration file; overrides --profile",
    )
    return parser


def load_config(args: argparse.Namespace) -> MaterializerConfig:
    """Build the configuration selected by the command line arguments."""
    if args.config is not None:
        config = MaterializerConfig.load(args.config)
    else:
        config = MaterializerConfig.for_profile(args.profile)

    if args.install_timeout is not None:
        config = MaterializerConfig.model_validate(
            {**config.model_dump(), "install_timeout": args.install_timeout}
        )
    return config


def exit_code_for(result: MaterializationResult, config: MaterializerConfig) -> int:
    """Map a run's outcome to the process exit status."""
    if result.success:
        return 0
    if config.distinct_exit_codes and isinstance(result.error, MaterializeError):
        return result.error.exit_code
    return 1


def main(
    argv: Optional[Sequence[str]] = None,
    *,
    chooser: Optional[ChoiceProvider] = None,
) -> int:
    """Parse *argv*, run the materializer and return the exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args)
    except (OSError, ValidationError, ValueError) as exc:
        print_error(f"Error: invalid configuration: {exc}")
        return 1

    # Fail before any prompt or filesystem work.
    if args.name is None or not args.name.strip():
        error = MissingArgument()
        print_error(f"Error: {error}")
        return error.exit_code if config.distinct_exit_codes else 1

    materializer = ProjectMaterializer(config, chooser=chooser)
    try:
        result = asyncio.run(materializer.run(args.name))
    except KeyboardInterrupt:
        console.print()
        print_error("Setup cancelled.")
        return MaterializationCancelled.exit_code if config.distinct_exit_codes else 1

    return exit_code_for(result, config)


def run() -> None:
    """Console-script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
