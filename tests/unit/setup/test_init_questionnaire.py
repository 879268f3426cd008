from __future__ import annotations

import io

import pytest

from packinit.core.exceptions import InvalidAnswerError, InvariantViolationError
from packinit.core.setup.document import BASELINE_DEPENDENCIES, UGLIFY_DEPENDENCY, PluginReference, ProcessingRule
from packinit.core.setup.js_render import JSExpression
from packinit.core.setup.presets import BABEL_DEPENDENCIES, BASE_TOP_SCOPE, UGLIFY_REQUIRE, tooltip
from packinit.core.setup.questionnaire import InitQuestionnaire
from packinit.core.setup.questionnaire.prompts import ConsoleAnswerSource, ScriptedAnswerSource
from packinit.core.setup.styling import EXTRACT_REQUIRE

from helpers.answers import PRODUCTION_ANSWERS, StubEntryResolver, answers, run_flow

PATTERN = "[name].[chunkhash].js"


# ---------- Scenarios ----------
def test_empty_entry_without_defaults_builds_development_css_config() -> None:
    resolver = StubEntryResolver(entry=None, using_defaults=False)

    result = run_flow(answers(stylingType="CSS"), entry_resolver=resolver)
    doc = result.document

    assert resolver.calls == [False]
    assert result.is_prod is False
    assert doc.mode == "development"
    assert [rule.to_dict() for rule in doc.rules] == [
        {
            "test": r"/\.css$/",
            "use": [{"loader": "style-loader", "options": {"sourceMap": True}}, {"loader": "css-loader"}],
        }
    ]
    assert doc.output.to_dict() == {
        "filename": PATTERN,
        "chunkFilename": PATTERN,
        "path": "path.resolve(__dirname, 'dist')",
    }
    assert "entry" not in doc.webpack_options()


def test_empty_multiple_entries_behave_like_an_empty_entry() -> None:
    result = run_flow(answers(entryType=True, multipleEntries="", stylingType="CSS"))

    assert result.document.entry is None
    assert result.state.using_defaults is False
    assert result.document.output.chunk_filename == PATTERN


def test_defaults_with_sass_extracts_css_to_style_bundle() -> None:
    result = run_flow({**PRODUCTION_ANSWERS, "stylingType": "SASS", "extractPlugin": ""})
    doc = result.document

    assert result.is_prod is True
    assert doc.plugins == (PluginReference("MiniCssExtractPlugin", {"filename": "style.css"}),)
    (rule,) = doc.rules
    assert rule.to_dict()["use"] == [
        {"loader": "MiniCssExtractPlugin.loader"},
        {"loader": "css-loader", "options": {"sourceMap": True}},
        {"loader": "sass-loader", "options": {"sourceMap": True}},
    ]


def test_postcss_in_production_names_the_css_bundle() -> None:
    result = run_flow({**PRODUCTION_ANSWERS, "stylingType": "PostCSS", "extractPlugin": "app"})
    doc = result.document

    (plugin,) = doc.plugins
    assert plugin.arguments == {"filename": "app.[chunkhash].css"}
    assert plugin.expression == "new MiniCssExtractPlugin({ filename:'app.[chunkhash].css' })"
    assert doc.top_scope == (
        *BASE_TOP_SCOPE,
        tooltip("postcss"),
        "const autoprefixer = require('autoprefixer');",
        "const precss = require('precss');",
        "\n",
        tooltip("cssPlugin"),
        EXTRACT_REQUIRE,
        "\n",
        tooltip("splitChunks"),
    )


@pytest.mark.parametrize("styling", ["SASS", "LESS", "CSS", "PostCSS", "No"])
@pytest.mark.parametrize("entry", ["./src/index", ""])
def test_babel_adds_one_rule_and_three_dependencies(styling: str, entry: str) -> None:
    without = run_flow(answers(stylingType=styling, singularEntry=entry)).document
    with_babel = run_flow(answers(stylingType=styling, singularEntry=entry, babelConfirm=True)).document

    assert len(with_babel.rules) == len(without.rules) + 1
    assert len(with_babel.dependencies) == len(without.dependencies) + 3
    assert set(with_babel.dependencies) - set(without.dependencies) == set(BABEL_DEPENDENCIES)
    babel = with_babel.rules[0]
    assert babel.test == r"/\.js$/"
    assert babel.loader == "babel-loader"
    assert babel.options == {"plugins": ["syntax-dynamic-import"], "presets": [["env", {"modules": False}]]}


# ---------- Mode and defaults ----------
def test_blank_single_entry_switches_to_production_defaults() -> None:
    result = run_flow(PRODUCTION_ANSWERS)
    doc = result.document

    assert result.state.using_defaults is True
    assert result.is_prod is True
    assert doc.mode == "production"
    assert doc.config_name == "prod"
    assert doc.output is None
    assert doc.plugins == ()
    assert UGLIFY_DEPENDENCY not in doc.dependencies
    assert doc.optimization["splitChunks"]["name"] is False


def test_development_keeps_uglify_and_its_require() -> None:
    doc = run_flow(answers()).document

    assert doc.mode == "development"
    assert doc.config_name == "dev"
    assert doc.plugins == (PluginReference("UglifyJSPlugin"),)
    assert doc.dependencies == BASELINE_DEPENDENCIES
    assert doc.top_scope[-3:] == (tooltip("uglify"), UGLIFY_REQUIRE, "\n")
    assert doc.optimization["splitChunks"]["name"] is True


def test_entry_set_gives_filename_only_output() -> None:
    doc = run_flow(answers(outputType="build")).document

    assert doc.entry == "./src/index"
    assert doc.output.to_dict() == {"filename": PATTERN, "path": "path.resolve(__dirname, 'build')"}


def test_blank_output_uses_configured_default_dir() -> None:
    source = ScriptedAnswerSource(answers())
    settings = {"output": {"default_dir": "public"}}

    doc = InitQuestionnaire(source, settings=settings).run().document

    assert doc.output.path == "path.resolve(__dirname, 'public')"


def test_output_dir_is_quoted_as_a_js_string() -> None:
    doc = run_flow(answers(outputType="it's")).document

    assert doc.output.path == "path.resolve(__dirname, 'it\\'s')"


def test_no_styling_adds_no_rule_or_dependency() -> None:
    doc = run_flow(answers(stylingType="No")).document

    assert doc.rules == ()
    assert doc.dependencies == BASELINE_DEPENDENCIES


def test_bundle_name_question_only_asked_when_used() -> None:
    dev = ScriptedAnswerSource(answers(stylingType="CSS"))
    InitQuestionnaire(dev).run()
    assert "extractPlugin" not in dev.asked

    prod_unstyled = ScriptedAnswerSource({**PRODUCTION_ANSWERS, "stylingType": "No"})
    InitQuestionnaire(prod_unstyled).run()
    assert "extractPlugin" not in prod_unstyled.asked

    prod_styled = ScriptedAnswerSource({**PRODUCTION_ANSWERS, "stylingType": "LESS"})
    InitQuestionnaire(prod_styled).run()
    assert prod_styled.asked[-1] == "extractPlugin"


def test_questions_are_asked_in_order() -> None:
    source = ScriptedAnswerSource(answers(entryType=True, multipleEntries="app", **{"entry.app": "./src/app"}))
    InitQuestionnaire(source).run()

    assert source.asked == [
        "entryType",
        "multipleEntries",
        "entry.app",
        "outputType",
        "babelConfirm",
        "stylingType",
    ]


def test_identical_answers_give_identical_documents() -> None:
    data = {**PRODUCTION_ANSWERS, "stylingType": "PostCSS", "babelConfirm": True, "extractPlugin": "site"}

    first = run_flow(data).document.to_dict()
    second = run_flow(data).document.to_dict()

    assert first == second


# ---------- Entry points ----------
def test_multiple_entries_are_normalised() -> None:
    data = answers(
        entryType=True,
        multipleEntries="app, vendor",
        **{"entry.app": "./src/app", "entry.vendor": "'./src/vendor.js'"},
    )

    doc = run_flow(data).document

    assert doc.entry == {"app": "./src/app.js", "vendor": "./src/vendor.js"}
    assert doc.output.chunk_filename is None


def test_blank_entry_location_fails() -> None:
    data = answers(entryType=True, multipleEntries="app,vendor", **{"entry.app": "./src/app"})

    with pytest.raises(InvalidAnswerError) as exc:
        run_flow(data)

    assert exc.value.question_id == "entry.vendor"


# ---------- Failure modes ----------
def test_wrong_answer_shape_fails_fast() -> None:
    source = ScriptedAnswerSource(answers(babelConfirm="yes"))

    with pytest.raises(InvalidAnswerError) as exc:
        InitQuestionnaire(source).run()

    assert exc.value.question_id == "babelConfirm"
    assert source.asked[-1] == "babelConfirm"
    assert "stylingType" not in source.asked


def test_unknown_styling_choice_is_rejected() -> None:
    with pytest.raises(InvalidAnswerError, match="stylingType"):
        run_flow(answers(stylingType="Stylus"))


def test_missing_styling_answer_is_rejected() -> None:
    data = answers()
    del data["stylingType"]

    with pytest.raises(InvalidAnswerError):
        run_flow(data)


def test_questionnaire_runs_once() -> None:
    questionnaire = InitQuestionnaire(ScriptedAnswerSource(answers()))
    questionnaire.run()

    with pytest.raises(InvariantViolationError):
        questionnaire.run()


def test_document_is_frozen_after_completion() -> None:
    doc = run_flow(answers()).document

    assert doc.is_finalized
    with pytest.raises(InvariantViolationError):
        doc.add_rule(ProcessingRule(test=JSExpression(r"/\.txt$/")))


def test_on_done_called_once_with_result() -> None:
    seen = []

    result = InitQuestionnaire(ScriptedAnswerSource(answers()), on_done=seen.append).run()

    assert seen == [result]


def test_answers_are_recorded_in_order() -> None:
    result = run_flow(answers(outputType="build", stylingType="CSS"))

    assert result.answers == (
        ("entryType", False),
        ("singularEntry", "./src/index"),
        ("outputType", "build"),
        ("babelConfirm", False),
        ("stylingType", "CSS"),
    )


# ---------- Console answers ----------
def test_console_answers_drive_the_flow() -> None:
    replies = iter(["n", "./src/main", "build", "y", "3"])
    source = ConsoleAnswerSource(input_fn=lambda prompt: next(replies), stream=io.StringIO())

    doc = InitQuestionnaire(source).run().document

    assert doc.entry == "./src/main"
    assert doc.mode == "development"
    assert doc.output.path == "path.resolve(__dirname, 'build')"
    assert [rule.test for rule in doc.rules] == [r"/\.js$/", r"/\.css$/"]
