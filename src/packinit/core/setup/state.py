"""Per-run decision state derived from the answers."""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from packinit.core.exceptions import InvariantViolationError

if TYPE_CHECKING:
    from .styling import StylingPlan, StylingToolchain


@dataclass
class DecisionState:
    """Flags the decision steps branch on.

    ``is_prod`` is a one-way gate: it is fixed once by the mode step and
    reading it earlier, or fixing it twice, is a defect.
    """

    using_defaults: bool = False
    styling: Optional["StylingToolchain"] = None
    styling_plan: Optional["StylingPlan"] = None
    css_bundle_name: Optional[str] = None
    _is_prod: Optional[bool] = None

    @property
    def is_prod(self) -> bool:
        if self._is_prod is None:
            raise InvariantViolationError("Production mode was read before it was decided")
        return self._is_prod

    @property
    def mode_fixed(self) -> bool:
        return self._is_prod is not None

    def fix_mode(self, is_prod: bool) -> None:
        if self._is_prod is not None:
            raise InvariantViolationError(
                "Production mode is already decided",
                context={"is_prod": self._is_prod, "attempted": is_prod},
            )
        self._is_prod = bool(is_prod)


__all__ = ["DecisionState"]
