"""Styling toolchain resolution.

Maps the chosen CSS toolchain to a file matcher, the npm packages it needs,
any top-scope statements, and the ordered loader chain. Production and
development chains differ on purpose and are reproduced exactly, including
two asymmetries:

- LESS never uses ``style-loader`` and keeps source maps in both modes.
- plain CSS in development puts ``sourceMap`` on ``style-loader``, not on
  ``css-loader``.

In production the chain is finished by ``finalize_styling``, which puts the
``MiniCssExtractPlugin`` loader in front and registers the plugin.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional

from packinit.core.exceptions import InvariantViolationError

from .document import ConfigurationDocument, LoaderReference, PluginReference, ProcessingRule
from .js_render import JSExpression
from .presets import tooltip

logger = logging.getLogger(__name__)

EXTRACT_PLUGIN = "MiniCssExtractPlugin"
EXTRACT_DEPENDENCY = "mini-css-extract-plugin"
EXTRACT_REQUIRE = "const MiniCssExtractPlugin = require('mini-css-extract-plugin');"
DEFAULT_CSS_BUNDLE = "style.css"

POSTCSS_PLUGINS = JSExpression(
    "function () {\n"
    "\treturn [\n"
    "\t\tprecss,\n"
    "\t\tautoprefixer\n"
    "\t];\n"
    "}"
)

_SOURCE_MAP = {"sourceMap": True}


class StylingToolchain(str, Enum):
    """The closed set of answers to the styling question."""

    SASS = "SASS"
    LESS = "LESS"
    CSS = "CSS"
    POSTCSS = "PostCSS"
    NONE = "No"

    @classmethod
    def choices(cls) -> List[str]:
        return [member.value for member in cls]


@dataclass
class StylingPlan:
    """Matcher and loader chain for one toolchain, before finalization."""

    toolchain: StylingToolchain
    test: Optional[JSExpression] = None
    use: List[LoaderReference] = field(default_factory=list)

    @property
    def is_active(self) -> bool:
        return self.test is not None


def _loader(name: str, **options: object) -> LoaderReference:
    return LoaderReference(name, dict(options) if options else None)


def _sass(document: ConfigurationDocument, is_prod: bool) -> StylingPlan:
    document.add_dependencies("sass-loader", "node-sass", "style-loader", "css-loader")
    if is_prod:
        use = [_loader("css-loader", **_SOURCE_MAP), _loader("sass-loader", **_SOURCE_MAP)]
    else:
        use = [_loader("style-loader"), _loader("css-loader"), _loader("sass-loader")]
    return StylingPlan(StylingToolchain.SASS, JSExpression(r"/\.(scss|css)$/"), use)


def _less(document: ConfigurationDocument, is_prod: bool) -> StylingPlan:
    document.add_dependencies("less-loader", "less", "style-loader", "css-loader")
    # Same chain in both modes.
    use = [_loader("css-loader", **_SOURCE_MAP), _loader("less-loader", **_SOURCE_MAP)]
    return StylingPlan(StylingToolchain.LESS, JSExpression(r"/\.(less|css)$/"), use)


def _postcss(document: ConfigurationDocument, is_prod: bool) -> StylingPlan:
    document.add_top_scope(
        tooltip("postcss"),
        "const autoprefixer = require('autoprefixer');",
        "const precss = require('precss');",
        "\n",
    )
    document.add_dependencies("style-loader", "css-loader", "postcss-loader", "precss", "autoprefixer")
    use = [
        _loader("css-loader", sourceMap=True, importLoaders=1),
        _loader("postcss-loader", plugins=POSTCSS_PLUGINS),
    ]
    if not is_prod:
        use.insert(0, _loader("style-loader"))
    return StylingPlan(StylingToolchain.POSTCSS, JSExpression(r"/\.css$/"), use)


def _css(document: ConfigurationDocument, is_prod: bool) -> StylingPlan:
    document.add_dependencies("style-loader", "css-loader")
    if is_prod:
        use = [_loader("css-loader", **_SOURCE_MAP)]
    else:
        use = [_loader("style-loader", **_SOURCE_MAP), _loader("css-loader")]
    return StylingPlan(StylingToolchain.CSS, JSExpression(r"/\.css$/"), use)


def _none(document: ConfigurationDocument, is_prod: bool) -> StylingPlan:
    return StylingPlan(StylingToolchain.NONE)


_HANDLERS: Dict[StylingToolchain, Callable[[ConfigurationDocument, bool], StylingPlan]] = {
    StylingToolchain.SASS: _sass,
    StylingToolchain.LESS: _less,
    StylingToolchain.POSTCSS: _postcss,
    StylingToolchain.CSS: _css,
    StylingToolchain.NONE: _none,
}


def resolve_styling(
    document: ConfigurationDocument,
    toolchain: StylingToolchain,
    is_prod: bool,
) -> StylingPlan:
    """Record the toolchain's dependencies/top scope and return its plan.

    Raises:
        InvariantViolationError: If ``toolchain`` is not a ``StylingToolchain``
    """
    handler = _HANDLERS.get(toolchain) if isinstance(toolchain, StylingToolchain) else None
    if handler is None:
        raise InvariantViolationError(
            f"Unknown styling toolchain: {toolchain!r}",
            context={"toolchain": str(toolchain), "known": StylingToolchain.choices()},
        )
    plan = handler(document, is_prod)
    logger.debug("Resolved styling %s (prod=%s): %d loaders", toolchain.value, is_prod, len(plan.use))
    return plan


def extract_plugin(bundle_name: Optional[str]) -> PluginReference:
    """Build the CSS extraction plugin; a blank name means ``style.css``."""
    # TODO: switch to [contenthash] once mini-css-extract-plugin supports it for CSS chunks
    filename = f"{bundle_name}.[chunkhash].css" if bundle_name else DEFAULT_CSS_BUNDLE
    return PluginReference(EXTRACT_PLUGIN, {"filename": filename})


def finalize_styling(
    document: ConfigurationDocument,
    plan: StylingPlan,
    is_prod: bool,
    bundle_name: Optional[str] = None,
) -> Optional[ProcessingRule]:
    """Append the styling rule, wiring CSS extraction in production.

    Returns the appended rule, or None when no toolchain is active.
    """
    if not plan.is_active:
        return None

    rule = ProcessingRule(test=plan.test, use=list(plan.use))
    if is_prod:
        document.add_top_scope(tooltip("cssPlugin"))
        document.add_dependencies(EXTRACT_DEPENDENCY)
        document.add_plugin(extract_plugin(bundle_name))
        rule.prepend_loader(LoaderReference(JSExpression(f"{EXTRACT_PLUGIN}.loader")))
        document.add_rule(rule)
        document.add_top_scope(EXTRACT_REQUIRE, "\n")
    else:
        document.add_rule(rule)
    return rule


__all__ = [
    "StylingToolchain",
    "StylingPlan",
    "resolve_styling",
    "finalize_styling",
    "extract_plugin",
    "DEFAULT_CSS_BUNDLE",
    "EXTRACT_PLUGIN",
    "EXTRACT_DEPENDENCY",
    "EXTRACT_REQUIRE",
    "POSTCSS_PLUGINS",
]
