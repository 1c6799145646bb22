"""
Module: generator.rules.base

Purpose:
    Abstract rule interface shared by every variant: legal-move queries,
    state transforms, presentation helpers and whole-example acceptance.
    Variants override a few hooks; everything else lives here.

Key Classes:
    - Rule: Abstract base for UnifiedSimpleRule, BridgingRule, BrothersRule

Dependencies:
    - abacus_trainer.core.models: State helpers, Action, Example
    - generator.config: RuleConfig
    - generator.rules.beads: Bead physics

Used By:
    - generator.rules.factory: create_rule
    - generator.example_generator: ExampleGenerator
    - generator.multi_digit: MultiDigitGenerator
"""

from __future__ import annotations

import logging
import random
from abc import ABC, abstractmethod
from typing import ClassVar, List, Optional, Tuple

from abacus_trainer.core.models import (
    HEAVEN_VALUE,
    Action,
    Example,
    State,
    VectorAction,
    digit_at,
    replace_digit,
    state_to_number,
    state_width,
    zero_state,
)
from abacus_trainer.core.models.example import AnyAction

from ..config import RuleConfig
from ..errors import IllegalTransition, ValidationFailed
from . import beads
from .kind import RuleKind

logger = logging.getLogger(__name__)


def action_parts(action: AnyAction) -> Tuple[Action, ...]:
    """Single-rod actions making up a (vector) action."""
    if isinstance(action, VectorAction):
        return action.parts
    return (action,)


def format_signed(action: AnyAction) -> str:
    """
    Render a move as a signed string.

    Vector moves concatenate each rod's magnitude, most significant first.

    Example:
        >>> format_signed(Action(-7))
        '-7'
        >>> format_signed(VectorAction((Action(3, 0), Action(2, 1))))
        '+23'
    """
    if isinstance(action, VectorAction):
        deltas = action.digits(action.width)
        body = "".join(str(abs(d)) for d in reversed(deltas))
        return ("+" if action.sign > 0 else "-") + body
    return f"{action.value:+d}"


class Rule(ABC):
    """
    Bead-physics legality for one rod plus whole-example acceptance.

    Attributes:
        config: Rule configuration
        kind: Variant tag used for explicit dispatch
        name: Human-readable rule name

    Example:
        >>> rule = UnifiedSimpleRule(RuleConfig())
        >>> [a.value for a in rule.get_available_actions(0, is_first_action=True)]
        [1, 2, 3, 4]
    """

    kind: ClassVar[RuleKind]
    name: ClassVar[str] = "Rule"

    def __init__(self, config: RuleConfig, rng: Optional[random.Random] = None):
        self.config = config
        self._rng = rng if rng is not None else random.Random(config.seed)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, digits={self.config.selected_digits})"

    @property
    def rng(self) -> random.Random:
        return self._rng

    # ─────────────────────────────────────────────────────────────────────────
    # States
    # ─────────────────────────────────────────────────────────────────────────

    def generate_start_state(self) -> State:
        """Canonical zero state sized to digit_count."""
        return zero_state(self.config.digit_count)

    def generate_steps_count(self) -> int:
        """Uniform step count in [min_steps, max_steps]."""
        return self._rng.randint(self.config.min_steps, self.config.max_steps)

    def state_to_number(self, state: State) -> int:
        return state_to_number(state)

    def format_action(self, action: AnyAction) -> str:
        return format_signed(action)

    @property
    def min_final_number(self) -> int:
        return self.config.min_final_number

    @property
    def max_final_number(self) -> int:
        return self.config.max_final_number

    def is_closing_number(self, number: int) -> bool:
        """Whether an example may end on this number."""
        if self.config.is_multi_digit:
            return self.min_final_number <= number <= self.max_final_number
        return self._is_single_digit_closing(number)

    def _is_single_digit_closing(self, number: int) -> bool:
        return 0 <= number <= 9

    # ─────────────────────────────────────────────────────────────────────────
    # Moves
    # ─────────────────────────────────────────────────────────────────────────

    def get_available_actions(
        self,
        current_state: State,
        is_first_action: bool = False,
        position: int = 0,
    ) -> List[Action]:
        """
        Legal moves on one rod.

        Args:
            current_state: Current state (digit or tuple of rods)
            is_first_action: Opening move of the example
            position: Rod to move (0 = least significant)

        Returns:
            Physically realisable actions drawn from the configured move
            set that keep the rod in [0, 9]
        """
        digit = digit_at(current_state, position)
        actions: List[Action] = []
        for sign in (1, -1):
            if not self.config.allows_sign(sign, is_first_action):
                continue
            if sign < 0 and digit == 0:
                continue
            actions.extend(self._build_moves(digit, sign, position))
        return self._prefer(actions)

    def _build_moves(self, digit: int, sign: int, position: int) -> List[Action]:
        """Candidate moves of one sign from a rod value."""
        moves = []
        for magnitude in self.config.selected_digits:
            action = self._simple_move(digit, sign * magnitude, position)
            if action is not None:
                moves.append(action)
        return moves

    def _simple_move(self, digit: int, value: int, position: int) -> Optional[Action]:
        """Pure gesture of `value`, compound through five for 6-9."""
        magnitude = abs(value)
        if value > 0 and magnitude >= HEAVEN_VALUE and not self.config.five_enabled:
            return None
        if magnitude <= HEAVEN_VALUE:
            if beads.elementary_move_legal(digit, value):
                return Action(value, position)
            return None
        orderings = beads.bridging_orderings(digit, value)
        if not orderings:
            return None
        return Action(value, position, self._rng.choice(orderings))

    def _prefer(self, actions: List[Action]) -> List[Action]:
        return actions

    def is_allowed_action(self, action: Action) -> bool:
        """Whether the move belongs to this rule's move set."""
        if action.value > 0 and action.magnitude >= HEAVEN_VALUE and not self.config.five_enabled:
            return False
        if action.is_compound and not action.is_bridging:
            return False
        return action.magnitude in self.config.selected_digits

    # ─────────────────────────────────────────────────────────────────────────
    # Mandatory blocks
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def needs_block(self) -> bool:
        """Whether accepted examples must contain a technique block."""
        return False

    def can_insert_block(self, state: State, is_first_action: bool = False) -> bool:
        return False

    def generate_block(
        self,
        state: State,
        is_first_action: bool = False,
        sign: Optional[int] = None,
    ) -> Optional[Tuple[Action, ...]]:
        return None

    # ─────────────────────────────────────────────────────────────────────────
    # Transforms
    # ─────────────────────────────────────────────────────────────────────────

    def apply_action(self, state: State, action: AnyAction) -> State:
        """
        Apply a move and return the new state.

        Vector moves update every listed rod simultaneously.

        Raises:
            IllegalTransition: If any rod leaves [0, 9], including the
                intermediate values of a compound formula
        """
        result = state
        for part in action_parts(action):
            if part.position >= state_width(state):
                raise IllegalTransition(state, action, f"no rod at position {part.position}")
            digit = digit_at(result, part.position)
            result = replace_digit(result, part.position, beads.apply_to_digit(digit, part))
        return result

    # ─────────────────────────────────────────────────────────────────────────
    # Validation
    # ─────────────────────────────────────────────────────────────────────────

    def validate_example(self, example: Example) -> bool:
        """Return True if the example passes every acceptance check."""
        try:
            self.check_example(example)
        except ValidationFailed as e:
            logger.debug(f"{self.name}: example rejected: {e.reason}")
            return False
        return True

    def check_example(self, example: Example) -> None:
        """
        Verify an example against this rule.

        Checks canonical start, positive opening move, the move set, bead
        physics of every step, declared states, replay of the answer, the
        closing range and rule-specific requirements.

        Raises:
            ValidationFailed: With the first failing reason
        """
        start = self.generate_start_state()
        if example.start != start:
            raise ValidationFailed(f"start {example.start!r} is not the zero state {start!r}")
        if not example.steps:
            raise ValidationFailed("example has no steps")
        if self.config.first_action_positive and example.steps[0].value <= 0:
            raise ValidationFailed(f"first step {example.steps[0].value} is not positive")

        state = start
        for index, step in enumerate(example.steps, start=1):
            if step.from_state != state:
                raise ValidationFailed(
                    f"step {index} starts from {step.from_state!r}, expected {state!r}"
                )
            self._check_step_action(state, step.action, index)
            try:
                state = self.apply_action(state, step.action)
            except IllegalTransition as e:
                raise ValidationFailed(f"step {index}: {e}") from e
            if step.to_state != state:
                raise ValidationFailed(
                    f"step {index} declares {step.to_state!r}, replay gives {state!r}"
                )

        if state != example.answer:
            raise ValidationFailed(f"replay gives {state!r}, answer is {example.answer!r}")
        final = self.state_to_number(state)
        if not self.is_closing_number(final):
            raise ValidationFailed(f"final number {final} is outside the closing range")
        self._check_requirements(example)

    def _check_step_action(self, state: State, action: AnyAction, index: int) -> None:
        sign = 1 if action.value > 0 else -1
        if not self.config.allows_sign(sign, is_first_action=index == 1):
            raise ValidationFailed(f"step {index} direction {sign:+d} is not allowed")
        for part in action_parts(action):
            if not self.is_allowed_action(part):
                raise ValidationFailed(f"step {index} move {part.value:+d} is not in the move set")
            if not beads.action_legal(digit_at(state, part.position), part):
                raise ValidationFailed(
                    f"step {index} move {part.value:+d} is physically impossible "
                    f"on rod {part.position}"
                )

    def _check_requirements(self, example: Example) -> None:
        """Rule-specific acceptance, raising ValidationFailed."""
        pass

    @abstractmethod
    def describe(self) -> str:
        """One-line description of the rule configuration."""
