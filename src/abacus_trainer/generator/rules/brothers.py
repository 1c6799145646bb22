"""
Module: generator.rules.brothers

Purpose:
    Brothers rule: small magnitudes 1-4 realised by pairing to five.
    +n is taken as +5 and -(5-n); -n as -5 and +(5-n). The brothers form is
    only possible exactly when the direct earth move is not, so both are
    offered and the brothers form is preferred to train the technique.
    A move of n trains brother 5 - n; brothers_digits selects brothers.

Key Classes:
    - BrothersRule: Rule variant for "brothers" exercises

Used By:
    - generator.rules.factory: RuleKind.BROTHERS
"""

from __future__ import annotations

from typing import List

from abacus_trainer.core.models import HEAVEN_VALUE, Action, Example

from ..errors import ValidationFailed
from . import beads
from .base import Rule, action_parts
from .kind import RuleKind


class BrothersRule(Rule):
    """
    Pairing-to-five exercises.

    Simple gestures come from selected_digits. brothers_digits lists brother
    magnitudes b: brother b is the b <-> 5 exchange, a move of 5 - b taken
    through the heaven bead (brother 4 is +1 as +5 -4, or -1 as -5 +4).
    When both kinds are legal, only the brothers moves are offered with
    probability brothers_preference.
    """

    kind = RuleKind.BROTHERS
    name = "Brothers"

    def describe(self) -> str:
        brothers = ", ".join(str(d) for d in self.config.brothers_digits)
        return f"{self.name}: brothers [{brothers}], preference {self.config.brothers_preference:.0%}"

    def _build_moves(self, digit: int, sign: int, position: int) -> List[Action]:
        moves = super()._build_moves(digit, sign, position)
        for brother in self.config.brothers_digits:
            value = sign * (HEAVEN_VALUE - brother)
            orderings = beads.brothers_orderings(digit, value)
            if orderings:
                moves.append(Action(value, position, self._rng.choice(orderings)))
        return moves

    def _prefer(self, actions: List[Action]) -> List[Action]:
        brothers = [a for a in actions if a.is_brothers]
        if brothers and len(brothers) < len(actions):
            if self._rng.random() < self.config.brothers_preference:
                return brothers
        return actions

    def is_allowed_action(self, action: Action) -> bool:
        if action.is_brothers:
            return action.brother_magnitude in self.config.brothers_digits
        return super().is_allowed_action(action)

    def _check_requirements(self, example: Example) -> None:
        for action in example.actions:
            for part in action_parts(action):
                if part.is_brothers and part.brother_magnitude in self.config.brothers_digits:
                    return
        digits = list(self.config.brothers_digits)
        raise ValidationFailed(f"example has no brothers move for brothers {digits}")
