"""
Module: core.models.state

Purpose:
    Helpers for abacus states. A state is either a single digit (int,
    single-rod mode) or a tuple of digits, one per rod, with index 0 the
    least significant rod.

Key Functions:
    - zero_state(): Canonical all-zero state for a digit count
    - state_to_number(): Little-endian base-10 decoding
    - number_to_digits(): Encoding of a non-negative number into rods
    - digit_at() / replace_digit(): Per-rod access
    - is_valid_state(): Every rod within [0, 9]

Dependencies:
    - typing (std)

Used By:
    - generator.rules: Rule implementations
    - generator.example_generator: ExampleGenerator
    - generator.multi_digit: MultiDigitGenerator
"""

from __future__ import annotations

from typing import Tuple, Union

MIN_DIGIT = 0
MAX_DIGIT = 9

State = Union[int, Tuple[int, ...]]


def zero_state(digit_count: int) -> State:
    """
    Canonical starting state.

    Args:
        digit_count: Number of rods in use

    Returns:
        0 for a single rod, otherwise a tuple of zeros
    """
    if digit_count <= 1:
        return 0
    return (0,) * digit_count


def is_zero_state(state: State) -> bool:
    """Return True if every rod of the state is zero."""
    return all(d == 0 for d in digits_of(state))


def digits_of(state: State) -> Tuple[int, ...]:
    """Rods of a state as a tuple (least significant first)."""
    if isinstance(state, int):
        return (state,)
    return tuple(state)


def state_width(state: State) -> int:
    """Number of rods the state covers."""
    return 1 if isinstance(state, int) else len(state)


def state_to_number(state: State) -> int:
    """
    Decode a state into its numeric value.

    Example:
        >>> state_to_number((3, 2, 1))
        123
    """
    if isinstance(state, int):
        return state
    return sum(digit * 10 ** index for index, digit in enumerate(state))


def number_to_digits(number: int, width: int) -> Tuple[int, ...]:
    """
    Encode a non-negative number into `width` rods (least significant first).

    Raises:
        ValueError: If the number is negative or does not fit in width rods
    """
    if number < 0:
        raise ValueError(f"number must be non-negative: {number}")
    if number >= 10 ** width:
        raise ValueError(f"number {number} does not fit in {width} digits")
    return tuple((number // 10 ** index) % 10 for index in range(width))


def digit_at(state: State, position: int = 0) -> int:
    """Value of the rod at `position` (0 for rods the state does not cover)."""
    if isinstance(state, int):
        return state if position == 0 else 0
    if 0 <= position < len(state):
        return state[position]
    return 0


def replace_digit(state: State, position: int, value: int) -> State:
    """Return a copy of the state with one rod replaced."""
    if isinstance(state, int):
        if position != 0:
            raise IndexError(f"single-digit state has no position {position}")
        return value
    digits = list(state)
    digits[position] = value
    return tuple(digits)


def is_valid_digit(digit: int) -> bool:
    return MIN_DIGIT <= digit <= MAX_DIGIT


def is_valid_state(state: State) -> bool:
    """True if every rod lies within [0, 9]."""
    return all(is_valid_digit(d) for d in digits_of(state))
