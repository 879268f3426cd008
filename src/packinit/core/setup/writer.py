"""Config writer for the init flow.

Persists a finalized configuration document in two forms:
- ``<project>/.packinit/configuration.yml``: the document as data, with
  JavaScript expressions tagged ``!js`` so it can be loaded back
- ``<project>/webpack.<config_name>.js``: the generated webpack config,
  rendered from a Jinja2 template

The stored document is always rewritten so it matches the latest run. Write
modes (create skips an existing file, overwrite replaces it) apply to the
generated webpack config.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml
from jinja2 import Environment, FileSystemLoader, StrictUndefined
from jsonschema import Draft202012Validator

from packinit.core.config.manager import PROJECT_DIR_NAME
from packinit.core.exceptions import WriterError
from packinit.core.utils.io import ensure_directory, read_yaml, write_text, write_yaml
from packinit.data import get_data_path, read_yaml as read_data_yaml

from .document import ConfigurationDocument
from .js_render import to_js

logger = logging.getLogger(__name__)

CONFIGURATION_FILENAME = "configuration.yml"
TEMPLATE_NAME = "webpack.config.js.j2"


class WriteMode(Enum):
    """File write mode for generated files."""
    CREATE = "create"      # Only create if not exists
    OVERWRITE = "overwrite"  # Replace existing


@dataclass
class WriteResult:
    """Result of a write operation."""
    success: bool
    files_written: List[Path] = field(default_factory=list)
    files_skipped: List[Path] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)


def _build_environment() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(get_data_path("templates"))),
        autoescape=False,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )
    env.filters["js"] = to_js
    return env


def validate_document_data(data: Mapping[str, Any]) -> None:
    """Check serialized document data against the bundled schema.

    Raises:
        WriterError: On the first schema violation
    """
    schema = read_data_yaml("schemas", "configuration.schema.yaml")
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(data), key=lambda e: list(e.path))
    if errors:
        first = errors[0]
        loc = "/".join(str(p) for p in first.path) or "<root>"
        raise WriterError(
            f"Invalid configuration document at {loc}: {first.message}",
            context={"location": loc},
        )


class ConfigWriter:
    """Write and read back configuration documents for one project.

    The target project directory is created on first write if missing.
    """

    def __init__(self, project_root: Path, *, state_dir: str = PROJECT_DIR_NAME) -> None:
        self.project_root = Path(project_root)
        self.state_dir = self.project_root / state_dir
        self._env: Optional[Environment] = None

    @property
    def configuration_path(self) -> Path:
        return self.state_dir / CONFIGURATION_FILENAME

    def webpack_path(self, config_name: str) -> Path:
        return self.project_root / f"webpack.{config_name}.js"

    @property
    def environment(self) -> Environment:
        if self._env is None:
            self._env = _build_environment()
        return self._env

    def render(self, document: ConfigurationDocument) -> str:
        """Render the generated webpack config source for ``document``."""
        if not document.is_finalized:
            raise WriterError("Only a finalized configuration document can be rendered")
        template = self.environment.get_template(TEMPLATE_NAME)
        return template.render(
            top_scope=list(document.top_scope),
            options=document.webpack_options(),
        )

    def write(self, document: ConfigurationDocument, mode: WriteMode = WriteMode.CREATE) -> WriteResult:
        """Write the stored document and the generated webpack config.

        Args:
            document: Finalized configuration document
            mode: Write mode (create/overwrite)

        Returns:
            WriteResult with details of what was written
        """
        data = document.to_dict()
        validate_document_data(data)
        source = self.render(document)

        result = WriteResult(success=True)
        # (target, writer, honours create mode)
        outputs = [
            (self.configuration_path, lambda path: write_yaml(path, data), False),
            (self.webpack_path(str(document.config_name)), lambda path: write_text(path, source), True),
        ]
        for target, write_fn, respects_mode in outputs:
            if respects_mode and target.exists() and mode == WriteMode.CREATE:
                logger.info("Skipping existing file %s", target)
                result.files_skipped.append(target)
                continue
            try:
                ensure_directory(target.parent)
                write_fn(target)
            except OSError as e:
                result.success = False
                result.errors.append(f"Failed to write {target}: {e}")
                logger.error("Failed to write %s: %s", target, e)
                continue
            logger.info("Wrote %s", target)
            result.files_written.append(target)
        return result

    def load(self) -> Dict[str, Any]:
        """Load the stored configuration document data.

        Raises:
            WriterError: If nothing is stored or the stored data is invalid
        """
        path = self.configuration_path
        if not path.exists():
            raise WriterError(
                f"No stored configuration at {path}; run `packinit init` first",
                context={"path": str(path)},
            )
        try:
            data = read_yaml(path, raise_on_error=True)
        except (OSError, yaml.YAMLError) as e:
            raise WriterError(f"Cannot read {path}: {e}", context={"path": str(path)}) from e
        if not isinstance(data, dict):
            raise WriterError(f"Stored configuration is not a mapping: {path}", context={"path": str(path)})
        validate_document_data(data)
        return data


__all__ = [
    "ConfigWriter",
    "WriteMode",
    "WriteResult",
    "validate_document_data",
    "CONFIGURATION_FILENAME",
]
