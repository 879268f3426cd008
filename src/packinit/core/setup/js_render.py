"""Serialize configuration values as JavaScript source.

Plain strings become single-quoted JS string literals. ``JSExpression``
values (regex matchers, ``path.resolve(...)`` calls, inline functions) are
emitted verbatim. ``JSExpression`` also round-trips through YAML under the
``!js`` tag so a persisted document keeps the distinction.
"""
from __future__ import annotations

import re
from typing import Any, Mapping

import yaml

JS_TAG = "!js"
_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


class JSExpression(str):
    """JavaScript source text that must not be quoted when rendered."""

    __slots__ = ()

    def __repr__(self) -> str:
        return f"JSExpression({str.__repr__(self)})"


def quote_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace("'", "\\'").replace("\n", "\\n")
    return f"'{escaped}'"


def _render_key(key: Any) -> str:
    key = str(key)
    return key if _IDENTIFIER.match(key) else quote_string(key)


def to_js(value: Any, indent: int = 0, step: str = "\t") -> str:
    """Render ``value`` as a (multi-line) JavaScript literal.

    Args:
        value: Plain data (dict/list/str/bool/int/float/None) possibly
            containing ``JSExpression`` leaves
        indent: Current nesting depth
        step: Indentation unit

    Returns:
        JavaScript source text
    """
    if isinstance(value, JSExpression):
        return str(value)
    if isinstance(value, str):
        return quote_string(value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, (int, float)):
        return repr(value)

    pad = step * (indent + 1)
    closing = step * indent
    if isinstance(value, Mapping):
        if not value:
            return "{}"
        body = ",\n".join(f"{pad}{_render_key(k)}: {to_js(v, indent + 1, step)}" for k, v in value.items())
        return "{\n" + body + "\n" + closing + "}"
    if isinstance(value, (list, tuple)):
        if not value:
            return "[]"
        body = ",\n".join(f"{pad}{to_js(v, indent + 1, step)}" for v in value)
        return "[\n" + body + "\n" + closing + "]"

    raise TypeError(f"Cannot render {type(value).__name__} as JavaScript")


def to_js_inline(value: Any) -> str:
    """Render ``value`` on one line, in the compact ``{ key:'value' }`` style
    used for plugin constructor arguments."""
    if isinstance(value, Mapping):
        if not value:
            return "{}"
        body = ", ".join(f"{_render_key(k)}:{to_js_inline(v)}" for k, v in value.items())
        return "{ " + body + " }"
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(to_js_inline(v) for v in value) + "]"
    return to_js(value)


def _represent_js(dumper: yaml.SafeDumper, data: JSExpression) -> yaml.ScalarNode:
    style = "|" if "\n" in data else None
    return dumper.represent_scalar(JS_TAG, str(data), style=style)


def _construct_js(loader: yaml.SafeLoader, node: yaml.Node) -> JSExpression:
    return JSExpression(loader.construct_scalar(node))


yaml.add_representer(JSExpression, _represent_js, Dumper=yaml.SafeDumper)
yaml.add_constructor(JS_TAG, _construct_js, Loader=yaml.SafeLoader)


__all__ = ["JSExpression", "JS_TAG", "quote_string", "to_js", "to_js_inline"]
