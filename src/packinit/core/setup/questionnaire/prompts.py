"""Questions and the answer sources that reply to them.

Question wording lives in the bundled ``questions.yaml``. An answer source
takes one ``Question`` and returns one answer; it never sees the
configuration being built.
"""
from __future__ import annotations

import copy
import sys
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol, TextIO

from packinit.core.exceptions import InvalidAnswerError, PackInitError
from packinit.core.utils.io import read_yaml
from packinit.data import read_yaml as read_data_yaml

_TRUE_WORDS = ("y", "yes", "true", "1")
_FALSE_WORDS = ("n", "no", "false", "0")


class QuestionType(str, Enum):
    CONFIRM = "confirm"
    INPUT = "input"
    LIST = "list"


@dataclass(frozen=True)
class Question:
    id: str
    type: QuestionType
    prompt: str
    default: Any = None
    options: List[str] = field(default_factory=list)

    def format(self, *, question_id: Optional[str] = None, **values: Any) -> "Question":
        """Return a copy with ``{placeholders}`` in the prompt filled in."""
        return replace(
            self,
            id=question_id or self.id,
            prompt=self.prompt.format(**values),
        )


def load_questions() -> Dict[str, Question]:
    """Load the bundled question catalogue."""
    raw = read_data_yaml("config", "questions.yaml").get("questions") or {}
    questions: Dict[str, Question] = {}
    for qid, spec in raw.items():
        spec = copy.deepcopy(spec)
        questions[qid] = Question(
            id=qid,
            type=QuestionType(spec.get("type", "input")),
            prompt=str(spec.get("prompt", qid)),
            default=spec.get("default"),
            options=[str(o) for o in spec.get("options") or []],
        )
    return questions


class AnswerSource(Protocol):
    """Anything that can answer one question at a time."""

    def ask(self, question: Question) -> Any: ...


class ConsoleAnswerSource:
    """Ask questions on a terminal.

    Text typed by the user is parsed into the question's shape; text that
    fits no shape raises ``InvalidAnswerError`` rather than being guessed at.
    """

    def __init__(
        self,
        input_fn: Callable[[str], str] = input,
        stream: Optional[TextIO] = None,
    ) -> None:
        self._input = input_fn
        self._stream = stream or sys.stdout

    def ask(self, question: Question) -> Any:
        if question.type is QuestionType.CONFIRM:
            return self._confirm(question)
        if question.type is QuestionType.LIST:
            return self._choose(question)
        return self._input(f"? {question.prompt} ").strip()

    def _confirm(self, question: Question) -> bool:
        default = bool(question.default)
        suffix = "(Y/n)" if default else "(y/N)"
        raw = self._input(f"? {question.prompt} {suffix} ").strip().lower()
        if raw == "":
            return default
        if raw in _TRUE_WORDS:
            return True
        if raw in _FALSE_WORDS:
            return False
        raise InvalidAnswerError(
            f"Expected yes or no for '{question.id}', got {raw!r}",
            question_id=question.id,
        )

    def _choose(self, question: Question) -> str:
        print(f"? {question.prompt}", file=self._stream)
        for index, option in enumerate(question.options, start=1):
            print(f"  {index}) {option}", file=self._stream)
        raw = self._input("  Answer: ").strip()
        if raw.isdigit() and 1 <= int(raw) <= len(question.options):
            return question.options[int(raw) - 1]
        for option in question.options:
            if option.lower() == raw.lower():
                return option
        raise InvalidAnswerError(
            f"'{raw}' is not one of {question.options} for '{question.id}'",
            question_id=question.id,
            context={"options": list(question.options)},
        )


class ScriptedAnswerSource:
    """Answer questions from a prepared mapping of question id to answer.

    Unanswered confirm/input questions take their default (``False`` and
    ``""`` when none is declared); an unanswered list question is an error.
    Answers are passed through untouched so that shape checks still apply.
    """

    def __init__(self, answers: Mapping[str, Any]) -> None:
        self._answers = dict(answers)
        self.asked: List[str] = []

    @classmethod
    def from_file(cls, path: Path) -> "ScriptedAnswerSource":
        try:
            data = read_yaml(Path(path), default={}, raise_on_error=True)
        except Exception as exc:
            raise PackInitError(f"Cannot read answers file {path}: {exc}", context={"path": str(path)}) from exc
        if not isinstance(data, dict):
            raise PackInitError(f"Answers file must contain a mapping: {path}", context={"path": str(path)})
        return cls(data)

    def ask(self, question: Question) -> Any:
        self.asked.append(question.id)
        if question.id in self._answers:
            return self._answers[question.id]
        if question.type is QuestionType.CONFIRM:
            return bool(question.default)
        if question.type is QuestionType.INPUT:
            return "" if question.default is None else question.default
        raise InvalidAnswerError(
            f"No answer provided for '{question.id}'",
            question_id=question.id,
            context={"options": list(question.options)},
        )


__all__ = [
    "QuestionType",
    "Question",
    "load_questions",
    "AnswerSource",
    "ConsoleAnswerSource",
    "ScriptedAnswerSource",
]
