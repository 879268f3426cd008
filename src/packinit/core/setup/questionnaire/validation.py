"""Answer shape checks for the init questionnaire."""
from __future__ import annotations

from typing import Any

from packinit.core.exceptions import InvalidAnswerError

from .prompts import Question, QuestionType


def validate_answer(question: Question, value: Any) -> Any:
    """Check that ``value`` has the shape ``question`` asks for.

    Nothing is coerced: a confirm question wants a real ``bool``, an input
    question a ``str`` and a list question one of its options.

    Args:
        question: Question that was asked
        value: Answer returned by the answer source

    Returns:
        The value, unchanged

    Raises:
        InvalidAnswerError: If value has the wrong shape
    """
    if question.type is QuestionType.CONFIRM:
        if not isinstance(value, bool):
            raise _mismatch(question, value, "a boolean")
    elif question.type is QuestionType.INPUT:
        if not isinstance(value, str):
            raise _mismatch(question, value, "a string")
    elif question.type is QuestionType.LIST:
        if not isinstance(value, str) or value not in question.options:
            raise InvalidAnswerError(
                f"Invalid input for step '{question.id}': {value!r} is not one of {question.options}",
                question_id=question.id,
                context={"options": list(question.options), "received": repr(value)},
            )
    return value


def _mismatch(question: Question, value: Any, expected: str) -> InvalidAnswerError:
    return InvalidAnswerError(
        f"Invalid input for step '{question.id}': expected {expected}, got {type(value).__name__}",
        question_id=question.id,
        context={"expected": expected, "received": type(value).__name__},
    )


__all__ = ["validate_answer"]
