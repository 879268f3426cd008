from __future__ import annotations

import logging
from pathlib import Path

from packinit.core.utils.io import ensure_directory

_CONFIGURED_LOG_PATH: str | None = None
_PACKINIT_FILE_HANDLER: logging.Handler | None = None
_NULL_HANDLER_INSTALLED: bool = False


def _level_from_name(name: str) -> int:
    level = getattr(logging, str(name).upper(), None)
    return level if isinstance(level, int) else logging.INFO


def configure_stdlib_logging(*, log_path: Path, level: str = "INFO") -> None:
    """Configure Python stdlib logging to write to `log_path` (no stderr handler).

    Prompts share the terminal with the process, so log records never go to
    stdout/stderr. Idempotent per-process: if already configured for the same
    file, no-op.
    """
    global _CONFIGURED_LOG_PATH, _PACKINIT_FILE_HANDLER

    resolved = str(Path(log_path).resolve())
    if _CONFIGURED_LOG_PATH == resolved and _PACKINIT_FILE_HANDLER is not None:
        return

    ensure_directory(Path(resolved).parent)

    root = logging.getLogger()
    root.setLevel(_level_from_name(level))

    # Replace the packinit-installed file handler when switching paths.
    if _PACKINIT_FILE_HANDLER is not None:
        root.removeHandler(_PACKINIT_FILE_HANDLER)
        _PACKINIT_FILE_HANDLER.close()
        _PACKINIT_FILE_HANDLER = None

    fh = logging.FileHandler(resolved, encoding="utf-8")
    fh.setLevel(_level_from_name(level))
    fh.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root.addHandler(fh)

    _PACKINIT_FILE_HANDLER = fh
    _CONFIGURED_LOG_PATH = resolved


def suppress_lastresort() -> None:
    """Keep stdlib logging's lastResort handler from writing WARNING+ to stderr.

    Installs a NullHandler on the root logger when it otherwise has none.
    """
    global _NULL_HANDLER_INSTALLED

    root = logging.getLogger()
    if root.handlers or _NULL_HANDLER_INSTALLED:
        return
    root.addHandler(logging.NullHandler())
    _NULL_HANDLER_INSTALLED = True


def reset_stdlib_logging_for_tests() -> None:
    """Test-only: clear configured handlers."""
    global _CONFIGURED_LOG_PATH, _PACKINIT_FILE_HANDLER, _NULL_HANDLER_INSTALLED
    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    _CONFIGURED_LOG_PATH = None
    _PACKINIT_FILE_HANDLER = None
    _NULL_HANDLER_INSTALLED = False


__all__ = ["configure_stdlib_logging", "suppress_lastresort", "reset_stdlib_logging_for_tests"]
