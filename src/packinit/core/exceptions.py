from __future__ import annotations

from typing import Any, Dict, Mapping


class PackInitError(Exception):
    """Base exception for packinit."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            # Store a shallow copy to avoid accidental mutation.
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class InvalidAnswerError(PackInitError, ValueError):
    """Raised when an answer does not match the shape of the question asked."""

    def __init__(
        self,
        message: str = "",
        *,
        question_id: str | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        if question_id:
            ctx.setdefault("question_id", question_id)
        PackInitError.__init__(self, message, context=ctx)
        ValueError.__init__(self, message)
        self.question_id = question_id


class InvariantViolationError(PackInitError, RuntimeError):
    """Raised when the setup flow reaches a state its invariants forbid.

    This signals a programming or configuration defect, not bad user input.
    """

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        PackInitError.__init__(self, message, context=context)
        RuntimeError.__init__(self, message)


class SettingsError(PackInitError):
    """Raised when settings files or PACKINIT_* overrides are invalid."""


class WriterError(PackInitError):
    """Raised when the configuration cannot be persisted or rendered."""


class InstallError(PackInitError):
    """Raised when dependency installation fails."""

    def __init__(
        self,
        message: str,
        *,
        command: list[str] | None = None,
        returncode: int | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        if command is not None:
            ctx.setdefault("command", list(command))
        if returncode is not None:
            ctx.setdefault("returncode", returncode)
        super().__init__(message, context=ctx)
        self.command = command
        self.returncode = returncode


__all__ = [
    "PackInitError",
    "InvalidAnswerError",
    "InvariantViolationError",
    "SettingsError",
    "WriterError",
    "InstallError",
]
