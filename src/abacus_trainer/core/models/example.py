"""
Module: core.models.example

Purpose:
    Immutable generated exercises. Example holds the full replayable
    record (start, steps, answer); TrainerExample is the display projection
    handed to a presentation layer.

Key Classes:
    - Step: One applied action with its before/after states
    - Example: Start state, ordered steps and answer state
    - TrainerExample: Signed display strings plus numeric start/answer

Dependencies:
    - dataclasses (std)
    - .actions: Action, VectorAction
    - .state: State helpers

Used By:
    - generator.example_generator: ExampleGenerator
    - generator.multi_digit: MultiDigitGenerator
    - generator.controller: Session results
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union

from .actions import Action, VectorAction
from .state import State, digits_of, state_to_number

AnyAction = Union[Action, VectorAction]


def _state_to_json(state: State) -> int | list[int]:
    return state if isinstance(state, int) else list(state)


@dataclass(frozen=True)
class Step:
    """
    One applied action (immutable).

    Attributes:
        action: The move applied
        from_state: State before the move
        to_state: State after the move
    """

    action: AnyAction
    from_state: State
    to_state: State

    @property
    def value(self) -> int:
        return self.action.value

    def to_dict(self) -> dict:
        return {
            "action": self.action.to_dict(),
            "from_state": _state_to_json(self.from_state),
            "to_state": _state_to_json(self.to_state),
        }


@dataclass(frozen=True)
class Example:
    """
    Generated exercise (immutable).

    Attributes:
        start: Canonical all-zero state
        steps: Ordered applied steps
        answer: State after replaying every step

    Invariants:
        - Replaying steps from start reproduces answer (checked by the
          owning rule, not on construction)

    Example:
        >>> ex = Example(start=0, steps=(Step(Action(5), 0, 5),), answer=5)
        >>> ex.answer_number
        5
    """

    start: State
    steps: Tuple[Step, ...]
    answer: State

    def __post_init__(self) -> None:
        if not isinstance(self.steps, tuple):
            object.__setattr__(self, "steps", tuple(self.steps))

    # ─────────────────────────────────────────────────────────────────────────
    # Calculated Properties
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def step_count(self) -> int:
        return len(self.steps)

    @property
    def actions(self) -> Tuple[AnyAction, ...]:
        return tuple(step.action for step in self.steps)

    @property
    def values(self) -> Tuple[int, ...]:
        """Signed numeric value of each step."""
        return tuple(step.value for step in self.steps)

    @property
    def digit_count(self) -> int:
        return len(digits_of(self.start))

    @property
    def start_number(self) -> int:
        return state_to_number(self.start)

    @property
    def answer_number(self) -> int:
        return state_to_number(self.answer)

    def to_dict(self) -> dict:
        return {
            "start": _state_to_json(self.start),
            "steps": [step.to_dict() for step in self.steps],
            "answer": _state_to_json(self.answer),
        }


@dataclass(frozen=True)
class TrainerExample:
    """
    Display projection of an Example (immutable).

    Attributes:
        start: Numeric start value
        steps: Signed display strings such as "+3" or "-27"
        answer: Numeric answer value
    """

    start: int
    steps: Tuple[str, ...]
    answer: int

    def __post_init__(self) -> None:
        if not isinstance(self.steps, tuple):
            object.__setattr__(self, "steps", tuple(self.steps))

    def to_dict(self) -> dict:
        return {"start": self.start, "steps": list(self.steps), "answer": self.answer}
