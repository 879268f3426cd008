"""
Show the stored configuration.

SUMMARY: Print the configuration document written by `packinit init`.
"""

from __future__ import annotations

import argparse
from pathlib import Path

from packinit.cli import OutputFormatter, add_json_flag, add_project_path_arg
from packinit.core.config import SettingsManager
from packinit.core.exceptions import PackInitError
from packinit.core.setup import ConfigWriter

SUMMARY = "Show the stored webpack configuration"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register CLI arguments for ``packinit show``."""
    add_project_path_arg(parser)
    add_json_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    project_root = Path(args.project_path).expanduser().resolve()

    try:
        settings = SettingsManager(project_root).load_settings()
        state_dir = str((settings.get("output") or {}).get("state_dir") or ".packinit")
        data = ConfigWriter(project_root, state_dir=state_dir).load()
    except PackInitError as exc:
        formatter.error(exc)
        return 1

    if formatter.json_mode:
        formatter.json_output(data)
        return 0

    options = data.get("webpackOptions") or {}
    formatter.text(f"Configuration: webpack.{data.get('configName')}.js")
    formatter.text_kv("mode", options.get("mode"))
    formatter.text_kv("entry", options.get("entry", "(webpack default)"))
    output = options.get("output") or {}
    formatter.text_kv("output", output.get("path", "(webpack default)"))
    rules = (options.get("module") or {}).get("rules") or []
    formatter.text_kv("rules", ", ".join(str(rule.get("test")) for rule in rules) or "(none)")
    formatter.text_kv("plugins", ", ".join(options.get("plugins") or []) or "(none)")
    formatter.text_kv("dependencies", " ".join(data.get("dependencies") or []))
    return 0
