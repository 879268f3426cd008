"""Configuration document assembled by the init questionnaire.

The document is the single accumulator every decision step writes into:

- ``options``: the webpack options (entry, output, mode, module.rules,
  plugins, optimization)
- ``top_scope``: statements emitted before ``module.exports`` (requires and
  explanatory comments), append-only
- ``dependencies``: npm packages to install, seeded with a fixed baseline

Mutation methods are the only write path. A value written by one step is
never overwritten by a later one; the single exception is dropping
``uglifyjs-webpack-plugin`` from the dependencies in production mode. Once
``finalize()`` has been called every mutation raises.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

from packinit.core.exceptions import InvariantViolationError

from .js_render import JSExpression, to_js_inline

EntryValue = Union[str, Dict[str, str]]

DEVELOPMENT = "development"
PRODUCTION = "production"

BASELINE_DEPENDENCIES: Tuple[str, ...] = (
    "webpack",
    "webpack-cli",
    "uglifyjs-webpack-plugin",
    "babel-plugin-syntax-dynamic-import",
)
UGLIFY_DEPENDENCY = "uglifyjs-webpack-plugin"


@dataclass(frozen=True)
class LoaderReference:
    """One loader in a rule's ``use`` chain."""

    loader: str
    options: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"loader": self.loader}
        if self.options is not None:
            data["options"] = dict(self.options)
        return data


@dataclass
class ProcessingRule:
    """A ``module.rules`` entry.

    ``use`` is applied right-to-left by webpack, so its order matters. The
    babel rule uses the rule-level ``loader``/``options`` form instead.
    """

    test: JSExpression
    use: List[LoaderReference] = field(default_factory=list)
    include: List[Any] = field(default_factory=list)
    loader: Optional[str] = None
    options: Optional[Dict[str, Any]] = None

    def prepend_loader(self, reference: LoaderReference) -> None:
        self.use.insert(0, reference)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"test": self.test}
        if self.include:
            data["include"] = list(self.include)
        if self.loader is not None:
            data["loader"] = self.loader
        if self.options is not None:
            data["options"] = self.options
        if self.use:
            data["use"] = [ref.to_dict() for ref in self.use]
        return data


@dataclass(frozen=True)
class PluginReference:
    """A plugin constructor call, e.g. ``new MiniCssExtractPlugin({...})``."""

    name: str
    arguments: Optional[Dict[str, Any]] = None

    @property
    def expression(self) -> JSExpression:
        args = "" if self.arguments is None else to_js_inline(self.arguments)
        return JSExpression(f"new {self.name}({args})")


@dataclass(frozen=True)
class OutputOptions:
    filename: str
    path: JSExpression
    chunk_filename: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"filename": self.filename}
        if self.chunk_filename is not None:
            data["chunkFilename"] = self.chunk_filename
        data["path"] = self.path
        return data


class ConfigurationDocument:
    """Mutable webpack configuration under construction."""

    def __init__(self) -> None:
        self._entry: Optional[EntryValue] = None
        self._output: Optional[OutputOptions] = None
        self._mode: Optional[str] = None
        self._config_name: Optional[str] = None
        self._rules: List[ProcessingRule] = []
        self._plugins: List[PluginReference] = []
        self._optimization: Optional[Dict[str, Any]] = None
        self._top_scope: List[str] = []
        self._dependencies: List[str] = list(BASELINE_DEPENDENCIES)
        self._finalized = False

    # ---------- Read access ----------
    @property
    def entry(self) -> Optional[EntryValue]:
        return self._entry

    @property
    def output(self) -> Optional[OutputOptions]:
        return self._output

    @property
    def mode(self) -> Optional[str]:
        return self._mode

    @property
    def config_name(self) -> Optional[str]:
        return self._config_name

    @property
    def rules(self) -> Tuple[ProcessingRule, ...]:
        return tuple(self._rules)

    @property
    def plugins(self) -> Tuple[PluginReference, ...]:
        return tuple(self._plugins)

    @property
    def optimization(self) -> Optional[Dict[str, Any]]:
        return self._optimization

    @property
    def top_scope(self) -> Tuple[str, ...]:
        return tuple(self._top_scope)

    @property
    def dependencies(self) -> Tuple[str, ...]:
        return tuple(self._dependencies)

    @property
    def is_finalized(self) -> bool:
        return self._finalized

    # ---------- Mutation ----------
    def _ensure_mutable(self, operation: str) -> None:
        if self._finalized:
            raise InvariantViolationError(
                f"Configuration document is finalized; cannot {operation}",
                context={"operation": operation},
            )

    def _ensure_unset(self, name: str, current: Any) -> None:
        if current is not None:
            raise InvariantViolationError(
                f"webpack option '{name}' is already set",
                context={"option": name},
            )

    def set_entry(self, entry: EntryValue) -> None:
        self._ensure_mutable("set entry")
        self._ensure_unset("entry", self._entry)
        if not entry:
            raise InvariantViolationError("Refusing to store an empty entry")
        self._entry = entry

    def set_output(self, output: OutputOptions) -> None:
        self._ensure_mutable("set output")
        self._ensure_unset("output", self._output)
        self._output = output

    def set_mode(self, mode: str, config_name: str) -> None:
        self._ensure_mutable("set mode")
        self._ensure_unset("mode", self._mode)
        if mode not in (DEVELOPMENT, PRODUCTION):
            raise InvariantViolationError(f"Unknown webpack mode: {mode}", context={"mode": mode})
        self._mode = mode
        self._config_name = config_name

    def set_optimization(self, optimization: Dict[str, Any]) -> None:
        self._ensure_mutable("set optimization")
        self._ensure_unset("optimization", self._optimization)
        self._optimization = optimization

    def add_rule(self, rule: ProcessingRule) -> None:
        self._ensure_mutable("add rule")
        self._rules.append(rule)

    def add_plugin(self, plugin: PluginReference) -> None:
        self._ensure_mutable("add plugin")
        self._plugins.append(plugin)

    def add_top_scope(self, *statements: str) -> None:
        self._ensure_mutable("add top scope statement")
        self._top_scope.extend(statements)

    def add_dependencies(self, *names: str) -> None:
        """Append packages, ignoring ones already listed."""
        self._ensure_mutable("add dependency")
        for name in names:
            if name not in self._dependencies:
                self._dependencies.append(name)

    def remove_dependency(self, name: str) -> None:
        self._ensure_mutable("remove dependency")
        if name != UGLIFY_DEPENDENCY:
            raise InvariantViolationError(
                f"Only {UGLIFY_DEPENDENCY} may be removed from dependencies, not {name}",
                context={"dependency": name},
            )
        if name in self._dependencies:
            self._dependencies.remove(name)

    def finalize(self) -> "ConfigurationDocument":
        if self._finalized:
            raise InvariantViolationError("Configuration document finalized twice")
        if self._mode is None or self._optimization is None:
            raise InvariantViolationError("Configuration document finalized before mode and optimization were set")
        self._finalized = True
        return self

    # ---------- Export ----------
    def webpack_options(self) -> Dict[str, Any]:
        options: Dict[str, Any] = {}
        if self._entry:
            options["entry"] = self._entry
        if self._output is not None:
            options["output"] = self._output.to_dict()
        options["mode"] = self._mode
        options["module"] = {"rules": [rule.to_dict() for rule in self._rules]}
        options["plugins"] = [plugin.expression for plugin in self._plugins]
        options["optimization"] = self._optimization
        return options

    def to_dict(self) -> Dict[str, Any]:
        """Return the document as plain data (``JSExpression`` leaves kept)."""
        return {
            "configName": self._config_name,
            "topScope": list(self._top_scope),
            "webpackOptions": self.webpack_options(),
            "dependencies": list(self._dependencies),
        }


__all__ = [
    "BASELINE_DEPENDENCIES",
    "UGLIFY_DEPENDENCY",
    "DEVELOPMENT",
    "PRODUCTION",
    "LoaderReference",
    "ProcessingRule",
    "PluginReference",
    "OutputOptions",
    "ConfigurationDocument",
]
