"""YAML I/O utilities with atomic writes."""
from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from .core import atomic_write


def _str_representer(dumper: yaml.SafeDumper, data: str) -> yaml.ScalarNode:
    """Represent multiline strings with literal block style."""
    if "\n" in data.strip("\n"):
        return dumper.represent_scalar("tag:yaml.org,2002:str", data, style="|")
    return dumper.represent_scalar("tag:yaml.org,2002:str", data)


yaml.add_representer(str, _str_representer, Dumper=yaml.SafeDumper)


def read_yaml(path: Path, default: Any = None, raise_on_error: bool = False) -> Any:
    """Read YAML with error handling.

    Returns default if file is missing or invalid, unless raise_on_error is True.

    Args:
        path: YAML file path to read
        default: Value to return if file missing or invalid (default: None)
        raise_on_error: If True, propagate exceptions instead of returning default.

    Returns:
        Any: Parsed YAML data, or default if error
    """
    path = Path(path)
    if not path.exists():
        if raise_on_error:
            raise FileNotFoundError(f"File not found: {path}")
        return default

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return data if data is not None else default
    except (OSError, yaml.YAMLError):
        if raise_on_error:
            raise
        return default


def write_yaml(path: Path, data: Any, sort_keys: bool = False) -> None:
    """Atomically write YAML data to ``path``.

    Args:
        path: Target file path
        data: Data to serialize as YAML
        sort_keys: Whether to sort mapping keys (default: keep insertion order)
    """

    def _writer(f) -> None:
        yaml.safe_dump(
            data,
            f,
            default_flow_style=False,
            sort_keys=sort_keys,
            allow_unicode=True,
        )

    atomic_write(Path(path), _writer)


def iter_yaml_files(dir_path: Path) -> list[Path]:
    """Return YAML files in ``dir_path`` in deterministic order.

    Includes both ``*.yml`` and ``*.yaml``. When both ``<name>.yaml`` and
    ``<name>.yml`` exist, only the ``.yaml`` path is returned.
    """
    d = Path(dir_path)
    if not d.exists():
        return []
    yml_files = {p.stem: p for p in d.glob("*.yml")}
    yaml_files = {p.stem: p for p in d.glob("*.yaml")}

    out: list[Path] = []
    for stem in sorted(set(yml_files.keys()) | set(yaml_files.keys())):
        preferred = yaml_files.get(stem) or yml_files.get(stem)
        if preferred is not None:
            out.append(preferred)
    return out


__all__ = [
    "read_yaml",
    "write_yaml",
    "iter_yaml_files",
]
