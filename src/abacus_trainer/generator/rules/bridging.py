"""
Module: generator.rules.bridging

Purpose:
    Bridging ("friends of five") rule for one target T in {6, 7, 8, 9}.
    The target is trained as a block: the heaven move ±5 and the earth
    move ±(T-5) of the same sign on consecutive steps, in either order.

Key Classes:
    - BridgingRule: Rule variant parameterised by RuleConfig.target_number

Algorithm:
    1. Moves are the same pure gestures as the simple rule
    2. Single-digit examples close within 0..T
    3. With require_block, an accepted example holds (±5, ±r) of one sign on
       one rod as two consecutive steps; a single compound ±T move is not a block
    4. The generator asks can_insert_block/generate_block to place the block

Used By:
    - generator.rules.factory: RuleKind.BRIDGING
    - generator.example_generator: Block insertion
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from abacus_trainer.core.models import HEAVEN_VALUE, Action, Example, State, digit_at
from abacus_trainer.core.models.example import AnyAction

from ..config import RuleConfig
from ..errors import ValidationFailed
from . import beads
from .base import Rule, action_parts
from .kind import RuleKind

logger = logging.getLogger(__name__)


class BridgingRule(Rule):
    """
    Friends-of-five rule for a single bridging target.

    Attributes:
        target: Bridging target T (6-9)
        remainder: Earth part of the target, T - 5

    Example:
        >>> rule = BridgingRule(RuleConfig.bridging(6))
        >>> rule.contains_block([Action(5), Action(1)])
        True
    """

    kind = RuleKind.BRIDGING

    def __init__(self, config: RuleConfig, rng=None):
        if config.target_number is None:
            raise ValueError("BridgingRule requires target_number")
        super().__init__(config, rng)
        self.target = config.target_number
        self.remainder = config.remainder

    @property
    def name(self) -> str:  # type: ignore[override]
        return f"Bridging {self.target}"

    def describe(self) -> str:
        digits = ", ".join(str(d) for d in self.config.selected_digits)
        block = "required" if self.config.require_block else "optional"
        return f"{self.name}: digits [{digits}], ±{self.target} block {block}"

    def _is_single_digit_closing(self, number: int) -> bool:
        return 0 <= number <= self.target

    def is_allowed_action(self, action: Action) -> bool:
        if self.needs_block and self._is_block_move(action):
            return True
        return super().is_allowed_action(action)

    # ─────────────────────────────────────────────────────────────────────────
    # Blocks
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def needs_block(self) -> bool:
        return self.config.require_block

    def _is_block_move(self, action: Action) -> bool:
        return not action.is_compound and action.magnitude in (HEAVEN_VALUE, self.remainder)

    def _is_block_pair(self, first: Action, second: Action) -> bool:
        return (
            first.position == second.position
            and first.sign == second.sign
            and self._is_block_move(first)
            and self._is_block_move(second)
            and first.magnitude + second.magnitude == self.target
        )

    def contains_block(self, actions: Sequence[AnyAction]) -> bool:
        """
        Check for the ±T block.

        Args:
            actions: Step actions in order (single-rod or vector)

        Returns:
            True if consecutive steps hold (±5, ±r) of one sign on one rod
        """
        for previous, current in zip(actions, actions[1:]):
            for first in action_parts(previous):
                for second in action_parts(current):
                    if self._is_block_pair(first, second):
                        return True
        return False

    def _block_signs(self, state: State, is_first_action: bool, position: int) -> List[int]:
        digit = digit_at(state, position)
        signs = []
        for sign in (1, -1):
            if not self.config.allows_sign(sign, is_first_action):
                continue
            if (
                beads.elementary_move_legal(digit, sign * HEAVEN_VALUE)
                and beads.elementary_move_legal(digit, sign * self.remainder)
            ):
                signs.append(sign)
        return signs

    def can_insert_block(self, state: State, is_first_action: bool = False) -> bool:
        return bool(self._block_signs(state, is_first_action, 0))

    def generate_block(
        self,
        state: State,
        is_first_action: bool = False,
        sign: Optional[int] = None,
    ) -> Optional[Tuple[Action, ...]]:
        """
        Build the two-step block from the current rod value.

        Args:
            state: Current state
            is_first_action: Block opens the example
            sign: Force a direction, or None to pick any legal one

        Returns:
            (±5, ±r) or (±r, ±5) in a random legal order, None if impossible
        """
        signs = self._block_signs(state, is_first_action, 0)
        if sign is not None:
            signs = [s for s in signs if s == sign]
        if not signs:
            return None
        chosen = self._rng.choice(signs)
        heaven = Action(chosen * HEAVEN_VALUE)
        earth = Action(chosen * self.remainder)
        block = (heaven, earth) if self._rng.random() < 0.5 else (earth, heaven)
        logger.debug(f"{self.name}: block {[a.value for a in block]} from {state!r}")
        return block

    def _check_requirements(self, example: Example) -> None:
        if self.needs_block and not self.contains_block(example.actions):
            raise ValidationFailed(f"example has no ±{self.target} block")
