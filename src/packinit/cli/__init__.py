"""
packinit CLI package.

Provides the command-line interface with auto-discovery of commands
from cli/commands.

Framework utilities for building CLI commands:
- _output: Output formatting (JSON/text modes)
- _args: Common argument registration helpers
"""
from ._output import OutputFormatter
from ._args import (
    add_dry_run_flag,
    add_force_flag,
    add_json_flag,
    add_log_file_flag,
    add_project_path_arg,
    add_verbose_flag,
)

__all__ = [
    # Output formatting
    "OutputFormatter",
    # Argument helpers
    "add_project_path_arg",
    "add_json_flag",
    "add_force_flag",
    "add_dry_run_flag",
    "add_verbose_flag",
    "add_log_file_flag",
]
