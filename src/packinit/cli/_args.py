"""Common CLI argument registration helpers."""
from __future__ import annotations

import argparse


def add_project_path_arg(parser: argparse.ArgumentParser) -> None:
    """Add the optional positional project directory."""
    parser.add_argument(
        "project_path",
        nargs="?",
        default=".",
        help="Project directory (defaults to current directory)",
    )


def add_json_flag(parser: argparse.ArgumentParser) -> None:
    """Add --json flag for JSON output mode.

    Args:
        parser: ArgumentParser to add the flag to
    """
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )


def add_force_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--force",
        "-f",
        action="store_true",
        help="Overwrite existing generated files",
    )


def add_dry_run_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--dry-run",
        "-n",
        action="store_true",
        help="Show the install command without running it",
    )


def add_verbose_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log at DEBUG level",
    )


def add_log_file_flag(parser: argparse.ArgumentParser) -> None:
    """Add --log-file to override ``logging.path`` from settings."""
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Write log records to this file",
    )


__all__ = [
    "add_project_path_arg",
    "add_json_flag",
    "add_force_flag",
    "add_dry_run_flag",
    "add_verbose_flag",
    "add_log_file_flag",
]
