"""I/O utilities for packinit.

This package provides safe, atomic file operations:
- Core: atomic writes, directory management, text writes
- YAML: read/write helpers built on PyYAML
"""
from __future__ import annotations

from .core import (
    PathLike,
    atomic_write,
    ensure_directory,
    ensure_parent_dir,
    write_text,
)
from .yaml import (
    iter_yaml_files,
    read_yaml,
    write_yaml,
)

__all__ = [
    # core
    "PathLike",
    "ensure_parent_dir",
    "ensure_directory",
    "atomic_write",
    "write_text",
    # yaml
    "read_yaml",
    "write_yaml",
    "iter_yaml_files",
]
