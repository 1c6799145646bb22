"""
Module: generator.example_generator

Purpose:
    Bounded-retry search producing one validated Example from a rule.
    Single-rod rules build examples step by step with weighted moves;
    multi-digit rules move every rod at once with a shared sign.

Key Classes:
    - ExampleGenerator: Retry loop, both strategies and output assembly

Algorithm:
    1. Build a candidate move list (single-digit or vector strategy)
    2. Trim to max_steps and replay to re-derive every state
    3. Reject short candidates and, for non-combined multi-digit examples,
       intermediate numbers outside the configured width
    4. Delegate final acceptance to Rule.check_example
    5. Repeat until success or the attempt budget is spent

Dependencies:
    - generator.rules: Rule
    - generator.sampling: Cumulative-weight sampling

Used By:
    - generator.controller: build_session
    - abacus_trainer.cli: Command line entry point
"""

from __future__ import annotations

import itertools
import logging
import math
import random
from typing import List, Optional, Sequence

from abacus_trainer.core.models import (
    Action,
    Example,
    State,
    Step,
    TrainerExample,
    VectorAction,
    state_width,
)
from abacus_trainer.core.models.example import AnyAction

from .config import BlockPlacement
from .errors import GenerationExhausted, IllegalTransition, ValidationFailed
from .rules import Rule
from .sampling import magnitude_weight, weighted_choice

logger = logging.getLogger(__name__)

SINGLE_DIGIT_ATTEMPTS = 100
SHORT_MULTI_DIGIT_ATTEMPTS = 200
LONG_MULTI_DIGIT_ATTEMPTS = 250
MAX_ENUMERATED_COMBINATIONS = 10_000
MAX_REPAIR_STEPS = 10
MAX_COMBINATION_DRAWS = 50


def attempt_budget(digit_count: int, combine_levels: bool) -> int:
    """
    Attempts allowed for one example.

    100 for one rod, 200 for two or three, 250 beyond; doubled for
    multi-digit examples that must keep their full width.
    """
    if digit_count <= 1:
        return SINGLE_DIGIT_ATTEMPTS
    budget = SHORT_MULTI_DIGIT_ATTEMPTS if digit_count <= 3 else LONG_MULTI_DIGIT_ATTEMPTS
    if not combine_levels:
        budget *= 2
    return budget


class ExampleGenerator:
    """
    Produces validated examples for one rule.

    Attributes:
        rule: Rule supplying legal moves and acceptance
        max_attempts: Attempt budget per example

    Example:
        >>> generator = ExampleGenerator(create_rule("simple", RuleConfig()))
        >>> example = generator.generate()
        >>> generator.validate(example)
        True
    """

    def __init__(self, rule: Rule, rng: Optional[random.Random] = None):
        self.rule = rule
        self._rng = rng if rng is not None else rule.rng
        self.max_attempts = attempt_budget(rule.config.digit_count, rule.config.combine_levels)

    def generate(self) -> Example:
        """
        Generate one example.

        Returns:
            First candidate that clears every check

        Raises:
            GenerationExhausted: If the attempt budget is spent
        """
        last_reason: Optional[str] = None
        for attempt in range(1, self.max_attempts + 1):
            try:
                actions = self._build_candidate()
                example = self._assemble(actions)
                self.rule.check_example(example)
            except (IllegalTransition, ValidationFailed) as e:
                last_reason = str(e)
                logger.debug(f"Attempt {attempt}/{self.max_attempts} rejected: {e}")
                continue
            logger.debug(
                f"{self.rule.name}: generated {self.format_for_display(example)} "
                f"on attempt {attempt}"
            )
            return example

        logger.warning(
            f"{self.rule.name}: no valid example after {self.max_attempts} attempts "
            f"(last failure: {last_reason})"
        )
        raise GenerationExhausted(self.max_attempts, last_reason)

    def generate_multiple(self, count: int) -> List[Example]:
        """Generate `count` independent examples."""
        if count < 0:
            raise ValueError(f"count must be non-negative: {count}")
        examples = [self.generate() for _ in range(count)]
        logger.info(f"{self.rule.name}: generated {len(examples)} examples")
        return examples

    def validate(self, example: Example) -> bool:
        return self.rule.validate_example(example)

    # ─────────────────────────────────────────────────────────────────────────
    # Output Assembly
    # ─────────────────────────────────────────────────────────────────────────

    def to_trainer_format(self, example: Example) -> TrainerExample:
        """
        Project an example for display.

        Example:
            >>> generator.to_trainer_format(example).steps
            ('+3', '+5', '-2')
        """
        return TrainerExample(
            start=self.rule.state_to_number(example.start),
            steps=tuple(self.rule.format_action(step.action) for step in example.steps),
            answer=self.rule.state_to_number(example.answer),
        )

    def format_for_display(self, example: Example) -> str:
        """One-line rendering such as "+3 +5 -2 = 6" (a zero start is omitted)."""
        trainer = self.to_trainer_format(example)
        parts = list(trainer.steps)
        if trainer.start:
            parts.insert(0, str(trainer.start))
        return f"{' '.join(parts)} = {trainer.answer}"

    # ─────────────────────────────────────────────────────────────────────────
    # Candidate Building
    # ─────────────────────────────────────────────────────────────────────────

    def _build_candidate(self) -> List[AnyAction]:
        if self.rule.config.is_multi_digit:
            return self._build_vector_candidate()
        return self._build_single_digit_candidate()

    def _assemble(self, actions: Sequence[AnyAction]) -> Example:
        """Trim, replay and run the generator-level checks."""
        config = self.rule.config
        if len(actions) > config.max_steps:
            logger.debug(f"Trimming candidate from {len(actions)} to {config.max_steps} steps")
            actions = actions[:config.max_steps]
        if len(actions) < config.min_steps:
            raise ValidationFailed(
                f"candidate has {len(actions)} steps, at least {config.min_steps} required"
            )

        start = self.rule.generate_start_state()
        state = start
        steps = []
        for action in actions:
            new_state = self.rule.apply_action(state, action)
            steps.append(Step(action, state, new_state))
            state = new_state

        if config.is_multi_digit and not config.combine_levels:
            for index, step in enumerate(steps, start=1):
                number = self.rule.state_to_number(step.to_state)
                if not config.min_final_number <= number <= config.max_final_number:
                    raise ValidationFailed(
                        f"step {index} leaves {number} outside "
                        f"{config.min_final_number}-{config.max_final_number}"
                    )
        return Example(start=start, steps=tuple(steps), answer=state)

    def _build_single_digit_candidate(self) -> List[Action]:
        """Weighted step-by-step walk, with block insertion and range repair."""
        rule = self.rule
        config = rule.config
        state = rule.generate_start_state()
        steps_count = rule.generate_steps_count()
        actions: List[Action] = []
        block_pending = rule.needs_block

        if block_pending and config.block_placement is BlockPlacement.START:
            block = rule.generate_block(state, is_first_action=True)
            if block:
                state = self._extend(state, actions, block)
                block_pending = False

        while len(actions) < steps_count:
            is_first = not actions
            remaining = steps_count - len(actions)
            if (
                block_pending
                and remaining >= 2
                and self._rng.random() < config.block_insert_probability
            ):
                block = rule.generate_block(state, is_first)
                if block:
                    state = self._extend(state, actions, block)
                    block_pending = False
                    continue

            available = rule.get_available_actions(state, is_first)
            if not available:
                logger.debug(f"No legal move from {state!r}, stopping at {len(actions)} steps")
                break
            action = weighted_choice(available, lambda a: magnitude_weight(a.magnitude), self._rng)
            state = rule.apply_action(state, action)
            actions.append(action)

        if block_pending:
            block = rule.generate_block(state, not actions)
            if block:
                state = self._extend(state, actions, block)

        self._repair_to_closing_range(state, actions)
        return actions

    def _extend(self, state: State, actions: List[Action], moves: Sequence[Action]) -> State:
        for move in moves:
            state = self.rule.apply_action(state, move)
            actions.append(move)
        return state

    def _repair_to_closing_range(self, state: State, actions: List[Action]) -> State:
        """Append up to MAX_REPAIR_STEPS legal moves that approach the closing range."""
        rule = self.rule
        closing = [n for n in range(10) if rule.is_closing_number(n)]

        def distance(number: int) -> int:
            return min(abs(number - c) for c in closing)

        for _ in range(MAX_REPAIR_STEPS):
            current = distance(rule.state_to_number(state))
            if current == 0:
                return state
            outcomes = [
                (action, distance(rule.state_to_number(rule.apply_action(state, action))))
                for action in rule.get_available_actions(state, not actions)
            ]
            closer = [(action, d) for action, d in outcomes if d < current]
            if not closer:
                break
            best = min(d for _, d in closer)
            action = self._rng.choice([a for a, d in closer if d == best])
            state = rule.apply_action(state, action)
            actions.append(action)
        logger.debug(f"Repair could not reach the closing range from {state!r}")
        return state

    def _build_vector_candidate(self) -> List[VectorAction]:
        """Move every rod each step, all in one direction."""
        rule = self.rule
        state = rule.generate_start_state()
        steps_count = rule.generate_steps_count()
        actions: List[VectorAction] = []
        for _ in range(steps_count):
            action = self._choose_vector_action(state, is_first=not actions)
            if action is None:
                logger.debug(f"No vector move from {state!r}, stopping at {len(actions)} steps")
                break
            state = rule.apply_action(state, action)
            actions.append(action)
        return actions

    def _choose_vector_action(self, state: State, is_first: bool) -> Optional[VectorAction]:
        config = self.rule.config
        signs = [sign for sign in (1, -1) if config.allows_sign(sign, is_first)]
        self._rng.shuffle(signs)
        for sign in signs:
            per_position = []
            for position in range(state_width(state)):
                options = [
                    a for a in self.rule.get_available_actions(state, is_first, position)
                    if a.sign == sign
                ]
                if not options:
                    break
                per_position.append(options)
            else:
                action = self._pick_combination(state, per_position)
                if action is not None:
                    return action
        return None

    def _pick_combination(
        self,
        state: State,
        per_position: List[List[Action]],
    ) -> Optional[VectorAction]:
        """Uniform choice among combinations that stay in range."""
        total = math.prod(len(options) for options in per_position)
        if total <= MAX_ENUMERATED_COMBINATIONS:
            candidates = (VectorAction(combo) for combo in itertools.product(*per_position))
            valid = [action for action in candidates if self._in_range(state, action)]
            return self._rng.choice(valid) if valid else None
        # Independent uniform picks, redrawn while out of range
        for _ in range(MAX_COMBINATION_DRAWS):
            action = VectorAction(tuple(self._rng.choice(options) for options in per_position))
            if self._in_range(state, action):
                return action
        logger.debug(f"No in-range combination in {MAX_COMBINATION_DRAWS} draws from {state!r}")
        return None

    def _in_range(self, state: State, action: VectorAction) -> bool:
        """Every rod stays in [0, 9] and a full-width number keeps its width."""
        try:
            new_state = self.rule.apply_action(state, action)
        except IllegalTransition:
            return False
        config = self.rule.config
        if config.combine_levels:
            return True
        return self.rule.state_to_number(new_state) >= config.min_final_number
