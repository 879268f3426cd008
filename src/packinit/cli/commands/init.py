"""
Project initialization command.

SUMMARY: Answer a few questions and generate a webpack configuration.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from packinit.cli import (
    OutputFormatter,
    add_dry_run_flag,
    add_force_flag,
    add_json_flag,
    add_log_file_flag,
    add_project_path_arg,
    add_verbose_flag,
)
from packinit.core.config import SettingsManager
from packinit.core.exceptions import PackInitError
from packinit.core.setup import WriteMode, WriteResult, initialize_project
from packinit.core.setup.questionnaire.prompts import ConsoleAnswerSource, ScriptedAnswerSource
from packinit.core.stdlib_logging import configure_stdlib_logging, suppress_lastresort

SUMMARY = "Generate a webpack configuration and install its dependencies"

logger = logging.getLogger(__name__)


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register CLI arguments for ``packinit init``."""
    add_project_path_arg(parser)
    parser.add_argument(
        "--answers",
        type=str,
        default=None,
        help="YAML file mapping question ids to answers (skips prompting)",
    )
    parser.add_argument(
        "--skip-install",
        action="store_true",
        help="Do not install the collected dependencies",
    )
    add_dry_run_flag(parser)
    add_force_flag(parser)
    add_json_flag(parser)
    add_log_file_flag(parser)
    add_verbose_flag(parser)


def _setup_logging(args: argparse.Namespace, project_root: Path, settings: Dict[str, Any]) -> Optional[Path]:
    log_settings = settings.get("logging") or {}
    raw_path = args.log_file or log_settings.get("path")
    if not raw_path:
        suppress_lastresort()
        return None
    log_path = Path(raw_path).expanduser()
    if not log_path.is_absolute():
        log_path = project_root / log_path
    level = "DEBUG" if args.verbose else str(log_settings.get("level") or "INFO")
    configure_stdlib_logging(log_path=log_path, level=level)
    return log_path


def _print_banner(formatter: OutputFormatter, settings: Dict[str, Any]) -> None:
    docs_url = (settings.get("info") or {}).get("docs_url")
    if docs_url:
        formatter.text(
            "INFO For more information and a detailed description of each question, "
            f"have a look at {docs_url}"
        )
    formatter.text("INFO Alternatively, run `packinit --help` for usage info.\n")


def _report_files(formatter: OutputFormatter, write_result: Optional[WriteResult]) -> None:
    if not write_result:
        return
    if write_result.files_written:
        formatter.text("\nFiles written:")
        for path in write_result.files_written:
            formatter.text(f"   - {path}")
    if write_result.files_skipped:
        formatter.text("\nFiles skipped (use --force to overwrite):")
        for path in write_result.files_skipped:
            formatter.text(f"   - {path}")


def main(args: argparse.Namespace) -> int:
    """Run the init questionnaire for the given project directory."""
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    project_root = Path(args.project_path).expanduser().resolve()

    if formatter.json_mode and not args.answers:
        formatter.error(ValueError("--json requires --answers (prompts would mix with JSON output)"))
        return 1

    try:
        settings = SettingsManager(project_root).load_settings()
    except PackInitError as exc:
        formatter.error(exc)
        return 1

    log_path = _setup_logging(args, project_root, settings)
    logger.info("packinit init in %s (log=%s)", project_root, log_path)

    if args.answers:
        try:
            source = ScriptedAnswerSource.from_file(Path(args.answers).expanduser())
        except PackInitError as exc:
            formatter.error(exc)
            return 1
    else:
        source = ConsoleAnswerSource()
        _print_banner(formatter, settings)

    install_enabled = bool((settings.get("install") or {}).get("enabled", True)) and not args.skip_install
    result = initialize_project(
        project_root,
        source,
        settings=settings,
        write_mode=WriteMode.OVERWRITE if args.force else WriteMode.CREATE,
        install=install_enabled,
        dry_run=args.dry_run,
    )

    if not result.get("success"):
        _report_files(formatter, result.get("write_result"))
        exc = result.get("exception")
        if exc is not None:
            formatter.error(exc)
        for err in result.get("errors") or []:
            formatter.error(RuntimeError(err))
        return 1

    init_result = result["result"]
    write_result = result.get("write_result")
    install_result = result.get("install_result")

    if formatter.json_mode:
        payload: Dict[str, Any] = {
            "configName": result["configName"],
            "isProd": init_result.is_prod,
            "dependencies": result["dependencies"],
            "filesWritten": [str(p) for p in write_result.files_written] if write_result else [],
            "filesSkipped": [str(p) for p in write_result.files_skipped] if write_result else [],
        }
        if install_result is not None:
            payload["install"] = {
                "packageManager": install_result.package_manager,
                "command": install_result.command,
                "dryRun": install_result.dry_run,
                "production": install_result.production,
            }
        formatter.success(payload, "")
        return 0

    _report_files(formatter, write_result)

    if install_result is not None:
        verb = "Would run" if install_result.dry_run else "Ran"
        formatter.text(f"\n{verb}: {' '.join(install_result.command)}")
    else:
        formatter.text("\nSkipped dependency install. Install these dev dependencies:")
        formatter.text(f"   {' '.join(result['dependencies'])}")

    formatter.text(f"\n✅ Generated webpack.{result['configName']}.js")
    return 0
