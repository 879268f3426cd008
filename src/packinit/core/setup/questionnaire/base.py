"""The `packinit init` decision flow."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from packinit.core.exceptions import InvariantViolationError

from .. import presets
from ..document import DEVELOPMENT, PRODUCTION, UGLIFY_DEPENDENCY, ConfigurationDocument, OutputOptions
from ..state import DecisionState
from ..styling import StylingToolchain, finalize_styling, resolve_styling
from .entry import EntryResolver, PromptEntryResolver
from .prompts import AnswerSource, Question, load_questions
from .validation import validate_answer

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_DIR = "dist"


@dataclass(frozen=True)
class InitResult:
    """Finalized outcome of one questionnaire run."""

    document: ConfigurationDocument
    state: DecisionState
    answers: Tuple[Tuple[str, Any], ...] = ()

    @property
    def is_prod(self) -> bool:
        return self.state.is_prod

    @property
    def dependencies(self) -> Tuple[str, ...]:
        return self.document.dependencies


class InitQuestionnaire:
    """Ask the init questions in order and build the configuration document.

    Steps run strictly one after another; each reads what earlier steps
    decided:

    1. entry points
    2. output directory
    3. mode (``is_prod`` is fixed here and never revisited)
    4. ES2015 transpilation
    5. styling toolchain
    6. CSS bundle name (production with a styling toolchain only)
    7. splitChunks block

    The document is then finalized and ``on_done`` is called exactly once.
    """

    def __init__(
        self,
        source: AnswerSource,
        *,
        settings: Optional[Mapping[str, Any]] = None,
        entry_resolver: Optional[EntryResolver] = None,
        questions: Optional[Dict[str, Question]] = None,
        on_done: Optional[Callable[[InitResult], None]] = None,
    ) -> None:
        self.source = source
        self.settings = dict(settings or {})
        self.entry_resolver = entry_resolver or PromptEntryResolver()
        self.questions = questions or load_questions()
        self.on_done = on_done
        self.default_output_dir = str(
            (self.settings.get("output") or {}).get("default_dir") or DEFAULT_OUTPUT_DIR
        )
        self._answers: List[Tuple[str, Any]] = []
        self._completed = False

    # ---------- Public API ----------
    def run(self) -> InitResult:
        """Run every step and return the finalized result.

        Raises:
            InvalidAnswerError: As soon as an answer has the wrong shape
            InvariantViolationError: On an internal inconsistency, or if this
                questionnaire has already completed
        """
        if self._completed:
            raise InvariantViolationError("This questionnaire has already completed")

        document = ConfigurationDocument()
        document.add_top_scope(*presets.BASE_TOP_SCOPE)
        state = DecisionState()

        for step in (
            self._ask_entry,
            self._ask_output,
            self._fix_mode,
            self._ask_babel,
            self._ask_styling,
            self._ask_css_bundle,
            self._add_split_chunks,
        ):
            logger.debug("Running step %s", step.__name__)
            step(document, state)

        self._finalize(document, state)

        result = InitResult(document=document, state=state, answers=tuple(self._answers))
        self._completed = True
        logger.info(
            "Init complete: mode=%s rules=%d dependencies=%d",
            document.mode,
            len(document.rules),
            len(document.dependencies),
        )
        if self.on_done is not None:
            self.on_done(result)
        return result

    def ask(self, key: str, *, question_id: Optional[str] = None, **prompt_values: Any) -> Any:
        """Pose catalogue question ``key`` and return its validated answer."""
        question = self.questions[key]
        if question_id or prompt_values:
            question = question.format(question_id=question_id, **prompt_values)
        value = validate_answer(question, self.source.ask(question))
        self._answers.append((question.id, value))
        return value

    # ---------- Steps ----------
    def _ask_entry(self, document: ConfigurationDocument, state: DecisionState) -> None:
        multiple = self.ask("entryType")
        result = self.entry_resolver.resolve(self.ask, multiple)
        state.using_defaults = bool(result.using_defaults)
        if result.entry:
            document.set_entry(result.entry)

    def _ask_output(self, document: ConfigurationDocument, state: DecisionState) -> None:
        answer = self.ask("outputType", default_dir=self.default_output_dir)
        if state.using_defaults:
            return
        directory = answer.strip() or self.default_output_dir
        if document.entry:
            output = OutputOptions(filename=presets.OUTPUT_FILENAME, path=presets.output_path(directory))
        else:
            output = OutputOptions(
                filename=presets.OUTPUT_FILENAME,
                chunk_filename=presets.OUTPUT_FILENAME,
                path=presets.output_path(directory),
            )
        document.set_output(output)

    def _fix_mode(self, document: ConfigurationDocument, state: DecisionState) -> None:
        state.fix_mode(state.using_defaults)
        if state.is_prod:
            document.set_mode(PRODUCTION, "prod")
        else:
            document.set_mode(DEVELOPMENT, "dev")
            for plugin in presets.default_plugins():
                document.add_plugin(plugin)

    def _ask_babel(self, document: ConfigurationDocument, state: DecisionState) -> None:
        if self.ask("babelConfirm"):
            document.add_rule(presets.babel_rule())
            document.add_dependencies(*presets.BABEL_DEPENDENCIES)

    def _ask_styling(self, document: ConfigurationDocument, state: DecisionState) -> None:
        state.styling = StylingToolchain(self.ask("stylingType"))
        state.styling_plan = resolve_styling(document, state.styling, state.is_prod)

    def _ask_css_bundle(self, document: ConfigurationDocument, state: DecisionState) -> None:
        plan = state.styling_plan
        if plan is None:
            raise InvariantViolationError("CSS bundle step reached before the styling step")
        if state.is_prod and plan.is_active:
            state.css_bundle_name = self.ask("extractPlugin").strip() or None
        finalize_styling(document, plan, state.is_prod, state.css_bundle_name)

    def _add_split_chunks(self, document: ConfigurationDocument, state: DecisionState) -> None:
        document.add_top_scope(presets.tooltip("splitChunks"))
        document.set_optimization(presets.split_chunks(state.is_prod))

    # ---------- Completion ----------
    def _finalize(self, document: ConfigurationDocument, state: DecisionState) -> None:
        if state.is_prod:
            document.remove_dependency(UGLIFY_DEPENDENCY)
        else:
            document.add_top_scope(presets.tooltip("uglify"), presets.UGLIFY_REQUIRE, "\n")
        document.finalize()


__all__ = ["InitQuestionnaire", "InitResult", "DEFAULT_OUTPUT_DIR"]
