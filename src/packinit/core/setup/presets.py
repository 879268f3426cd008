"""Fixed building blocks the init flow drops into the configuration."""
from __future__ import annotations

from typing import Any, Dict, List, Tuple

from packinit.data import read_yaml

from .document import PluginReference, ProcessingRule
from .js_render import JSExpression, quote_string

OUTPUT_FILENAME = "[name].[chunkhash].js"

BASE_TOP_SCOPE: Tuple[str, ...] = (
    "const webpack = require('webpack')",
    "const path = require('path')",
    "\n",
)

BABEL_DEPENDENCIES: Tuple[str, ...] = ("babel-core", "babel-loader", "babel-preset-env")

UGLIFY_REQUIRE = "const UglifyJSPlugin = require('uglifyjs-webpack-plugin');"


def tooltip(name: str) -> str:
    """Return the explanatory comment block registered under ``name``."""
    tooltips = read_yaml("templates", "tooltips.yaml")
    try:
        return str(tooltips[name])
    except KeyError:
        raise KeyError(f"No tooltip named {name!r} in tooltips.yaml") from None


def output_path(directory: str) -> JSExpression:
    return JSExpression(f"path.resolve(__dirname, {quote_string(directory)})")


def babel_rule() -> ProcessingRule:
    return ProcessingRule(
        test=JSExpression(r"/\.js$/"),
        include=[JSExpression("path.resolve(__dirname, 'src')")],
        loader="babel-loader",
        options={
            "plugins": ["syntax-dynamic-import"],
            "presets": [["env", {"modules": False}]],
        },
    )


def default_plugins() -> List[PluginReference]:
    """Plugins every development configuration starts with."""
    return [PluginReference("UglifyJSPlugin")]


def split_chunks(is_prod: bool) -> Dict[str, Any]:
    # webpack's own splitChunks defaults, spelled out; `name` is off in production.
    return {
        "splitChunks": {
            "chunks": "async",
            "minSize": 30000,
            "minChunks": 1,
            "name": not is_prod,
            "cacheGroups": {
                "vendors": {
                    "test": JSExpression(r"/[\\/]node_modules[\\/]/"),
                    "priority": -10,
                }
            },
        }
    }


__all__ = [
    "OUTPUT_FILENAME",
    "BASE_TOP_SCOPE",
    "BABEL_DEPENDENCIES",
    "UGLIFY_REQUIRE",
    "tooltip",
    "output_path",
    "babel_rule",
    "default_plugins",
    "split_chunks",
]
