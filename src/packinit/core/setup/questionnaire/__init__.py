"""Init questionnaire package for packinit.

This package splits the questionnaire into focused modules:
- base: InitQuestionnaire and the ordered decision steps
- prompts: question catalogue and answer sources
- validation: answer shape checks
- entry: the entry point sub-flow
"""
from __future__ import annotations

from .base import InitQuestionnaire, InitResult

from . import entry
from . import prompts
from . import validation

__all__ = [
    "InitQuestionnaire",
    "InitResult",
    "entry",
    "prompts",
    "validation",
]
