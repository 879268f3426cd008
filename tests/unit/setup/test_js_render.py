from __future__ import annotations

import pytest
import yaml

from packinit.core.setup.js_render import JSExpression, quote_string, to_js, to_js_inline


def test_strings_are_quoted_and_expressions_are_verbatim() -> None:
    value = {"test": JSExpression(r"/\.css$/"), "use": [{"loader": "css-loader"}]}

    assert to_js(value) == (
        "{\n"
        "\ttest: /\\.css$/,\n"
        "\tuse: [\n"
        "\t\t{\n"
        "\t\t\tloader: 'css-loader'\n"
        "\t\t}\n"
        "\t]\n"
        "}"
    )


def test_scalars() -> None:
    assert to_js(True) == "true"
    assert to_js(False) == "false"
    assert to_js(None) == "null"
    assert to_js(30000) == "30000"
    assert to_js(-10) == "-10"
    assert to_js({}) == "{}"
    assert to_js([]) == "[]"


def test_quote_string_escapes() -> None:
    assert quote_string("it's") == "'it\\'s'"
    assert quote_string("a\\b") == "'a\\\\b'"


def test_non_identifier_keys_are_quoted() -> None:
    assert to_js({"my-key": 1}) == "{\n\t'my-key': 1\n}"


def test_inline_rendering() -> None:
    assert to_js_inline({"filename": "style.css"}) == "{ filename:'style.css' }"


def test_unsupported_values_raise() -> None:
    with pytest.raises(TypeError):
        to_js(object())


def test_expressions_survive_a_yaml_round_trip() -> None:
    text = yaml.safe_dump({"path": JSExpression("path.resolve(__dirname, 'dist')"), "name": "dist"})
    assert "!js" in text

    data = yaml.safe_load(text)

    assert isinstance(data["path"], JSExpression)
    assert data["path"] == "path.resolve(__dirname, 'dist')"
    assert type(data["name"]) is str
