"""
packinit settings management (YAML layers + PACKINIT_* environment overrides).
"""
from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

import jsonschema

from packinit.core.exceptions import SettingsError
from packinit.core.utils.io import iter_yaml_files, read_yaml
from packinit.core.utils.merge import deep_merge
from packinit.data import get_data_path

logger = logging.getLogger(__name__)

ENV_PREFIX = "PACKINIT_"
PROJECT_DIR_NAME = ".packinit"


class SettingsManager:
    """Load, merge, and validate packinit settings.

    Settings sources (highest to lowest priority):
    1. Environment variables: PACKINIT_<section>__<key>
    2. Project config: <repo-root>/.packinit/config/*.yml (alphabetical order)
    3. Bundled defaults: packinit.data/config/defaults.yaml
    """

    def __init__(self, repo_root: Optional[Path] = None) -> None:
        self.repo_root = Path(repo_root or Path.cwd()).resolve()
        self.defaults_path = get_data_path("config", "defaults.yaml")
        self.project_config_dir = self.repo_root / PROJECT_DIR_NAME / "config"
        self.schema_path = get_data_path("schemas", "settings.schema.yaml")

    def load_yaml(self, path: Path) -> Dict[str, Any]:
        # Fail closed: settings must never silently ignore invalid YAML.
        try:
            data = read_yaml(path, default={}, raise_on_error=True)
        except Exception as exc:
            raise SettingsError(f"Cannot read settings file {path}: {exc}", context={"path": str(path)}) from exc
        if not isinstance(data, dict):
            raise SettingsError(f"Settings file must contain a mapping: {path}", context={"path": str(path)})
        return data

    def load_settings(self, *, validate: bool = True) -> Dict[str, Any]:
        """Return merged settings, optionally validated against the bundled schema."""
        cfg = self.load_yaml(self.defaults_path)
        for path in iter_yaml_files(self.project_config_dir):
            logger.debug("Merging project settings from %s", path)
            cfg = deep_merge(cfg, self.load_yaml(path))

        self.apply_env_overrides(cfg)

        if validate:
            self.validate(cfg)
        return cfg

    def validate(self, cfg: Dict[str, Any]) -> None:
        schema = self.load_yaml(self.schema_path)
        validator = jsonschema.Draft202012Validator(schema)
        errors = sorted(validator.iter_errors(cfg), key=lambda e: list(e.path))
        if errors:
            first = errors[0]
            location = ".".join(str(p) for p in first.path) or "<root>"
            raise SettingsError(
                f"Invalid settings at {location}: {first.message}",
                context={"errors": [e.message for e in errors]},
            )

    # ---------- Environment overrides ----------
    def _as_bool(self, v: str) -> Optional[bool]:
        low = v.strip().lower()
        if low in {"true", "false"}:
            return low == "true"
        return None

    def _as_int(self, v: str) -> Optional[int]:
        if re.fullmatch(r"[-+]?\d+", v.strip() or " "):
            return int(v)
        return None

    def _as_float(self, v: str) -> Optional[float]:
        s = v.strip()
        if re.fullmatch(r"[-+]?\d*\.\d+", s) or re.fullmatch(r"[-+]?\d+\.\d*", s):
            return float(s)
        return None

    def _as_json(self, v: str) -> Optional[Any]:
        s = v.strip()
        if (s.startswith("{") and s.endswith("}")) or (s.startswith("[") and s.endswith("]")):
            try:
                return json.loads(s)
            except json.JSONDecodeError:
                return None
        return None

    def _coerce_type(self, value: str) -> Any:
        if value.strip().lower() in {"null", "none"}:
            return None
        for caster in (self._as_bool, self._as_int, self._as_float, self._as_json):
            result = caster(value)
            if result is not None:
                return result
        return value.strip()

    def _parse_env_key(self, raw: str) -> List[str]:
        segs = raw.split("__")
        if any(seg == "" for seg in segs):
            raise SettingsError(
                f"Malformed {ENV_PREFIX}* key: empty segment in '{raw}'.",
                context={"key": raw},
            )
        return [seg.lower() for seg in segs]

    def _iter_env_overrides(self) -> Iterator[Tuple[List[str], Any]]:
        for key in sorted(os.environ.keys()):
            if not key.startswith(ENV_PREFIX):
                continue
            raw = key[len(ENV_PREFIX):]
            if not raw:
                raise SettingsError(f"Malformed {ENV_PREFIX}* key")
            yield self._parse_env_key(raw), self._coerce_type(os.environ[key])

    def _set_nested(self, root: Dict[str, Any], path: List[str], value: Any) -> None:
        cur: Any = root
        for part in path[:-1]:
            if not isinstance(cur, dict):
                raise SettingsError("Path traverses non-dict container", context={"path": path})
            key_candidates = {k.lower(): k for k in cur.keys() if isinstance(k, str)}
            key_to_use = key_candidates.get(part, part)
            cur = cur.setdefault(key_to_use, {})
        if not isinstance(cur, dict):
            raise SettingsError("Key assignment requires dict", context={"path": path})
        lower_map = {k.lower(): k for k in cur.keys() if isinstance(k, str)}
        cur[lower_map.get(path[-1], path[-1])] = value

    def apply_env_overrides(self, cfg: Dict[str, Any]) -> None:
        for path, typed_value in self._iter_env_overrides():
            logger.debug("Applying env override %s", ".".join(path))
            self._set_nested(cfg, path, typed_value)


def load_settings(repo_root: Optional[Path] = None) -> Dict[str, Any]:
    """Convenience wrapper: load validated settings for ``repo_root``."""
    return SettingsManager(repo_root).load_settings()


__all__ = ["SettingsManager", "load_settings", "ENV_PREFIX", "PROJECT_DIR_NAME"]
