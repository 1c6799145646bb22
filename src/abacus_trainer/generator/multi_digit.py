"""
Module: generator.multi_digit

Purpose:
    Number-wise multi-digit strategy. Each step is built as one whole
    number, digit by digit from the most significant rod, using a base
    rule's legal moves on every rod it touches.

Key Classes:
    - MultiDigitGenerator: Builds and validates multi-digit examples
    - SessionCounters: Rare-event counters local to one generate_example call

Algorithm:
    1. Choose the step width (maximum first, optionally weighted by width²)
    2. Prefer the sign opposite to the previous step, fall back to the other
    3. Fill rods most- to least-significant with distinct magnitudes unless
       the single duplicate allowance of the example is active
    4. Accept the step if it is nonzero, stays within the zero-digit cap and
       keeps every rod in [0, 9]; otherwise retry up to step_attempts times
    5. Restart the example when a step cannot be built, up to
       example_attempts times

Dependencies:
    - generator.rules: Base Rule
    - generator.config: MultiDigitConfig

Used By:
    - generator.controller: build_session (number-wise strategy)
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

from abacus_trainer.core.models import (
    Action,
    Example,
    State,
    Step,
    TrainerExample,
    VectorAction,
    number_to_digits,
    state_to_number,
)
from abacus_trainer.core.models.example import AnyAction

from .config import MultiDigitConfig
from .errors import GenerationExhausted, IllegalTransition, ValidationFailed
from .rules import Rule
from .sampling import weighted_choice

logger = logging.getLogger(__name__)

MAX_DUPLICATES_PER_EXAMPLE = 1


@dataclass
class SessionCounters:
    """
    Rare-event counters for one example.

    Created fresh for every example attempt and never stored on the
    generator or the rule.
    """

    duplicates_used: int = 0
    zero_digits_used: int = 0


class MultiDigitGenerator:
    """
    Generates examples whose steps are whole multi-digit numbers.

    Attributes:
        base_rule: Rule providing legal moves per rod
        config: Multi-digit generation parameters
        width: Number of rods (max_digit_count)

    Example:
        >>> generator = MultiDigitGenerator(rule, MultiDigitConfig(max_digit_count=2))
        >>> example = generator.generate_example()
        >>> generator.to_trainer_format(example).steps
        ('+21', '-10', '+34')
    """

    def __init__(
        self,
        base_rule: Rule,
        config: MultiDigitConfig,
        rng: Optional[random.Random] = None,
    ):
        self.base_rule = base_rule
        self.config = config
        self.width = config.max_digit_count
        self._rng = rng if rng is not None else base_rule.rng
        self.name = f"{base_rule.name} (multi-digit {self.width})"

    def generate_start_state(self) -> Tuple[int, ...]:
        return (0,) * self.width

    def generate_steps_count(self) -> int:
        return self.base_rule.generate_steps_count()

    def state_to_number(self, state: State) -> int:
        return state_to_number(state)

    def format_action(self, action: AnyAction) -> str:
        return self.base_rule.format_action(action)

    # ─────────────────────────────────────────────────────────────────────────
    # Generation
    # ─────────────────────────────────────────────────────────────────────────

    def generate_example(self) -> Example:
        """
        Generate one example.

        A step that cannot be built restarts the example from zero with
        fresh counters, up to example_attempts times.

        Returns:
            Validated example with one VectorAction per step

        Raises:
            GenerationExhausted: If every restart stalls on some step
        """
        last_reason: Optional[str] = None
        for attempt in range(1, self.config.example_attempts + 1):
            try:
                return self._generate_once()
            except GenerationExhausted as e:
                last_reason = e.reason
                logger.debug(f"{self.name}: restart {attempt}/{self.config.example_attempts}: {e}")

        logger.warning(
            f"{self.name}: no example after {self.config.example_attempts} restarts "
            f"(last failure: {last_reason})"
        )
        raise GenerationExhausted(self.config.example_attempts, last_reason)

    def _generate_once(self) -> Example:
        counters = SessionCounters()
        start = self.generate_start_state()
        steps_count = self.generate_steps_count()
        state: Tuple[int, ...] = start
        steps: List[Step] = []

        for _ in range(steps_count):
            action = self._build_step(state, steps, counters)
            new_state = self.apply_action(state, action)
            steps.append(Step(action, state, new_state))
            state = new_state

        example = Example(start=start, steps=tuple(steps), answer=state)
        self.check_example(example)
        logger.debug(
            f"{self.name}: {' '.join(self.format_action(s.action) for s in steps)} "
            f"= {self.state_to_number(state)} "
            f"(duplicates={counters.duplicates_used}, zeros={counters.zero_digits_used})"
        )
        return example

    def generate_multiple(self, count: int) -> List[Example]:
        if count < 0:
            raise ValueError(f"count must be non-negative: {count}")
        return [self.generate_example() for _ in range(count)]

    def _build_step(
        self,
        state: Tuple[int, ...],
        steps: Sequence[Step],
        counters: SessionCounters,
    ) -> VectorAction:
        is_first = not steps
        for attempt in range(1, self.config.step_attempts + 1):
            width = self._choose_width(is_first)
            allow_duplicate = (
                counters.duplicates_used < MAX_DUPLICATES_PER_EXAMPLE
                and self._rng.random() < self.config.duplicate_digit_probability
            )
            for sign in self._sign_order(steps):
                parts = self._fill_digits(state, width, sign, is_first, allow_duplicate)
                if not parts:
                    continue
                zeros = width - len(parts)
                if zeros and counters.zero_digits_used + zeros > self.config.max_zero_digits:
                    logger.debug(f"Step attempt {attempt}: zero-digit cap reached for sign {sign:+d}")
                    continue
                action = VectorAction(parts)
                try:
                    self.apply_action(state, action)
                except IllegalTransition as e:
                    logger.debug(f"Step attempt {attempt}: {e}")
                    continue

                counters.zero_digits_used += zeros
                if len({part.magnitude for part in parts}) < len(parts):
                    counters.duplicates_used += 1
                return action

        raise GenerationExhausted(
            self.config.step_attempts,
            f"could not build step {len(steps) + 1} from {state!r}",
        )

    def _choose_width(self, is_first: bool) -> int:
        """Maximum width, or width weighted by width² when widths vary."""
        if is_first or not self.config.variable_digit_counts:
            return self.width
        return weighted_choice(self.config.widths, lambda w: w * w, self._rng)

    def _sign_order(self, steps: Sequence[Step]) -> List[int]:
        """Opposite of the previous step's sign first, then the other sign."""
        is_first = not steps
        preferred = 1 if is_first else -steps[-1].action.sign
        rule_config = self.base_rule.config
        return [
            sign for sign in (preferred, -preferred)
            if rule_config.allows_sign(sign, is_first)
        ]

    def _fill_digits(
        self,
        state: Tuple[int, ...],
        width: int,
        sign: int,
        is_first: bool,
        allow_duplicate: bool,
    ) -> Optional[Tuple[Action, ...]]:
        """
        Pick one move per rod, most significant first.

        Rods without a suitable move stay zero; the leading rod must move.
        """
        used = set()
        parts: List[Action] = []
        for position in range(width - 1, -1, -1):
            options = [
                action
                for action in self.base_rule.get_available_actions(state, is_first, position)
                if action.sign == sign
            ]
            if not allow_duplicate:
                options = [action for action in options if action.magnitude not in used]
            if not options:
                if position == width - 1:
                    return None
                continue
            choice = self._rng.choice(options)
            parts.append(choice)
            used.add(choice.magnitude)
        return tuple(parts)

    # ─────────────────────────────────────────────────────────────────────────
    # Transforms
    # ─────────────────────────────────────────────────────────────────────────

    def apply_action(
        self,
        state: Tuple[int, ...],
        action: Union[AnyAction, int],
    ) -> Tuple[int, ...]:
        """
        Apply a step to every rod.

        A plain int is decomposed into same-signed rod moves.

        Raises:
            IllegalTransition: If any rod leaves [0, 9]
        """
        if isinstance(action, int):
            action = self._action_from_number(action)
        return self.base_rule.apply_action(state, action)

    def _action_from_number(self, value: int) -> VectorAction:
        if value == 0:
            raise ValueError("step value must be non-zero")
        sign = 1 if value > 0 else -1
        try:
            digits = number_to_digits(abs(value), self.width)
        except ValueError as e:
            raise IllegalTransition(None, value, str(e)) from e
        return VectorAction(tuple(
            Action(sign * digit, position) for position, digit in enumerate(digits) if digit
        ))

    # ─────────────────────────────────────────────────────────────────────────
    # Validation
    # ─────────────────────────────────────────────────────────────────────────

    def validate_example(self, example: Example) -> bool:
        try:
            self.check_example(example)
        except ValidationFailed as e:
            logger.debug(f"{self.name}: example rejected: {e.reason}")
            return False
        return True

    def check_example(self, example: Example) -> None:
        """
        Verify a multi-digit example.

        Raises:
            ValidationFailed: If the start is not all-zero, the first step is
                not positive, a step leaves [0, 9] or disagrees with its
                declared states, or the replay does not reach the answer
        """
        start = self.generate_start_state()
        if example.start != start:
            raise ValidationFailed(f"start {example.start!r} is not the zero state {start!r}")
        if example.steps and example.steps[0].value <= 0:
            raise ValidationFailed(f"first step {example.steps[0].value} is not positive")

        state = start
        for index, step in enumerate(example.steps, start=1):
            if step.from_state != state:
                raise ValidationFailed(
                    f"step {index} starts from {step.from_state!r}, expected {state!r}"
                )
            try:
                state = self.apply_action(state, step.action)
            except IllegalTransition as e:
                raise ValidationFailed(f"step {index}: {e}") from e
            if step.to_state != state:
                raise ValidationFailed(
                    f"step {index} declares {step.to_state!r}, replay gives {state!r}"
                )

        final = self.state_to_number(state)
        declared = self.state_to_number(example.answer)
        if final != declared:
            raise ValidationFailed(f"replay gives {final}, answer is {declared}")

    def to_trainer_format(self, example: Example) -> TrainerExample:
        return TrainerExample(
            start=self.state_to_number(example.start),
            steps=tuple(self.format_action(step.action) for step in example.steps),
            answer=self.state_to_number(example.answer),
        )
