"""
Module: core.models

Purpose:
    Immutable data models for abacus exercises.

Key Classes:
    - Action, VectorAction: Bead moves
    - Step, Example, TrainerExample: Generated exercises

Used By:
    - abacus_trainer.generator: Rules, generators and controller
"""

from .actions import Action, VectorAction, HEAVEN_VALUE
from .example import Example, Step, TrainerExample
from .state import (
    MAX_DIGIT,
    MIN_DIGIT,
    State,
    digit_at,
    digits_of,
    is_valid_digit,
    is_valid_state,
    is_zero_state,
    number_to_digits,
    replace_digit,
    state_to_number,
    state_width,
    zero_state,
)

__all__ = [
    "Action",
    "VectorAction",
    "HEAVEN_VALUE",
    "Example",
    "Step",
    "TrainerExample",
    "MAX_DIGIT",
    "MIN_DIGIT",
    "State",
    "digit_at",
    "digits_of",
    "is_valid_digit",
    "is_valid_state",
    "is_zero_state",
    "number_to_digits",
    "replace_digit",
    "state_to_number",
    "state_width",
    "zero_state",
]
