"""
Module: generator.rules.simple

Purpose:
    Unified simple rule: every move is a pure bead gesture. Earth moves
    1-4 and the heaven move 5 stand alone; 6-9 raise or lower the heaven
    bead together with earth beads in the same direction.

Key Classes:
    - UnifiedSimpleRule: Rule variant for "simple" exercises

Used By:
    - generator.rules.factory: RuleKind.SIMPLE
"""

from __future__ import annotations

from .base import Rule
from .kind import RuleKind


class UnifiedSimpleRule(Rule):
    """
    Simple exercises without any bead exchange.

    A single-digit example closes on 0 or on one of the selected digits.
    With include_five disabled the heaven bead is never raised.
    """

    kind = RuleKind.SIMPLE
    name = "Simple"

    def _is_single_digit_closing(self, number: int) -> bool:
        return number == 0 or number in self.config.selected_digits

    def describe(self) -> str:
        digits = ", ".join(str(d) for d in self.config.selected_digits)
        five = "with" if self.config.five_enabled else "without"
        return f"{self.name}: digits [{digits}] {five} the heaven bead"
