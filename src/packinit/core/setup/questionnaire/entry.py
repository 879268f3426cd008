"""Entry point questions.

Invoked once, right after the "multiple bundles?" confirm. Produces either a
single module path, a mapping of bundle name to module path, or nothing.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Protocol, Union

from packinit.core.exceptions import InvalidAnswerError

from ..js_render import JSExpression

AskFn = Callable[..., Any]
EntryValue = Union[str, Dict[str, str]]

# Locations containing any of these are treated as JavaScript, not a path.
_EXPRESSION_MARKERS = ("function", "path", "process")


@dataclass(frozen=True)
class EntryResult:
    entry: Optional[EntryValue] = None
    using_defaults: bool = False


class EntryResolver(Protocol):
    def resolve(self, ask: AskFn, multiple: bool) -> EntryResult: ...


def normalize_location(location: str) -> str:
    """Turn a typed module location into an entry value.

    ``./src/app`` becomes ``./src/app.js``; anything that already looks like a
    JavaScript expression is kept verbatim as a ``JSExpression``.
    """
    location = location.strip()
    if location.startswith(("(", "[")) or any(marker in location for marker in _EXPRESSION_MARKERS):
        return JSExpression(location)
    location = location.replace('"', "").replace("'", "")
    return location if location.endswith(".js") else f"{location}.js"


class PromptEntryResolver:
    """Ask for entry points through the questionnaire's ``ask`` callable."""

    def resolve(self, ask: AskFn, multiple: bool) -> EntryResult:
        if multiple:
            return self._resolve_multiple(ask)
        return self._resolve_single(ask)

    def _resolve_multiple(self, ask: AskFn) -> EntryResult:
        names = [name.strip() for name in ask("multipleEntries").split(",")]
        entries: Dict[str, str] = {}
        for name in names:
            if not name:
                continue
            location = ask("entryLocation", question_id=f"entry.{name}", name=name)
            if not location.strip():
                raise InvalidAnswerError(
                    f"Please make sure to fill out the location of '{name}'",
                    question_id=f"entry.{name}",
                )
            entries[name] = normalize_location(location)
        return EntryResult(entry=entries or None)

    def _resolve_single(self, ask: AskFn) -> EntryResult:
        entry = ask("singularEntry").replace('"', "").replace("'", "").strip()
        if not entry:
            return EntryResult(entry=None, using_defaults=True)
        return EntryResult(entry=entry)


__all__ = ["EntryResult", "EntryResolver", "PromptEntryResolver", "normalize_location"]
