"""
Module: generator.rules.beads

Purpose:
    Bead physics of one abacus rod, shared by every rule.

    A rod value d in [0, 9] decomposes as d = 5·U + L where U (0 or 1) is
    the heaven bead and L (0-4) counts engaged earth beads.

    - An earth move of magnitude 1-4 needs that many free (adding) or
      engaged (subtracting) earth beads.
    - A move of 5 toggles the heaven bead and needs it in the opposite state.
    - Bridging 6-9 is ±5 and ±(n-5) of the same sign, legal if some order of
      the two elementary moves is legal.
    - Brothers 1-4 is ±5 and ∓(5-n), the detour through the heaven bead.

Key Functions:
    - split_beads(): (U, L) decomposition of a rod value
    - elementary_move_legal(): Legality of a single bead gesture
    - formula_legal(): Legality of an ordered sequence of gestures
    - bridging_orderings(): Legal formulas for a 6-9 move
    - brothers_orderings(): Legal formulas for a 1-4 brothers move
    - action_legal(): Physical legality of a (possibly compound) Action
    - apply_to_digit(): Sequential application with range checking

Used By:
    - generator.rules.base: Shared move construction and validation
    - generator.rules.bridging: Block construction
    - generator.rules.brothers: Brothers moves
"""

from __future__ import annotations

from typing import List, Tuple

from abacus_trainer.core.models import HEAVEN_VALUE, Action, is_valid_digit

from ..errors import IllegalTransition

EARTH_BEADS = 4

Formula = Tuple[int, ...]


def split_beads(digit: int) -> Tuple[int, int]:
    """
    Decompose a rod value into (heaven, earth) bead counts.

    Example:
        >>> split_beads(7)
        (1, 2)
    """
    return divmod(digit, HEAVEN_VALUE)


def elementary_move_legal(digit: int, delta: int) -> bool:
    """
    Check a single bead gesture on a rod.

    Args:
        digit: Current rod value (0-9)
        delta: Signed gesture, ±1..±4 (earth) or ±5 (heaven)

    Returns:
        True if the beads needed for the gesture are available
    """
    if not is_valid_digit(digit) or delta == 0:
        return False
    heaven, earth = split_beads(digit)
    magnitude = abs(delta)
    if magnitude == HEAVEN_VALUE:
        return heaven == (0 if delta > 0 else 1)
    if magnitude > EARTH_BEADS:
        return False
    if delta > 0:
        return earth + magnitude <= EARTH_BEADS
    return earth >= magnitude


def formula_legal(digit: int, formula: Formula) -> bool:
    """Check that every gesture of a formula is legal in sequence."""
    current = digit
    for delta in formula:
        if not elementary_move_legal(current, delta):
            return False
        current += delta
    return True


def _legal_orderings(digit: int, first: int, second: int) -> List[Formula]:
    orderings = []
    for formula in ((first, second), (second, first)):
        if formula not in orderings and formula_legal(digit, formula):
            orderings.append(formula)
    return orderings


def bridging_orderings(digit: int, value: int) -> List[Formula]:
    """
    Legal formulas realising a 6-9 move through the heaven bead.

    Example:
        >>> bridging_orderings(0, 6)
        [(5, 1), (1, 5)]
        >>> bridging_orderings(4, 6)
        []
    """
    magnitude = abs(value)
    if not HEAVEN_VALUE < magnitude <= 9:
        return []
    sign = 1 if value > 0 else -1
    return _legal_orderings(digit, sign * HEAVEN_VALUE, sign * (magnitude - HEAVEN_VALUE))


def brothers_orderings(digit: int, value: int) -> List[Formula]:
    """
    Legal formulas realising a 1-4 move by pairing to five.

    +n is +5 then -(5-n); -n is -5 then +(5-n), either order.

    Example:
        >>> brothers_orderings(4, 1)
        [(5, -4), (-4, 5)]
        >>> brothers_orderings(0, 1)
        []
    """
    magnitude = abs(value)
    if not 1 <= magnitude < HEAVEN_VALUE:
        return []
    sign = 1 if value > 0 else -1
    return _legal_orderings(digit, sign * HEAVEN_VALUE, -sign * (HEAVEN_VALUE - magnitude))


def action_legal(digit: int, action: Action) -> bool:
    """Physical legality of an action on a rod currently showing `digit`."""
    if action.is_compound:
        return len(action.formula) == 2 and formula_legal(digit, action.formula)
    return elementary_move_legal(digit, action.value) or (
        HEAVEN_VALUE < action.magnitude and bool(bridging_orderings(digit, action.value))
    )


def apply_to_digit(digit: int, action: Action) -> int:
    """
    Apply an action to one rod, replaying compound formulas step by step.

    Raises:
        IllegalTransition: If the rod leaves [0, 9] at any point
    """
    moves = action.formula or (action.value,)
    current = digit
    for delta in moves:
        current += delta
        if not is_valid_digit(current):
            raise IllegalTransition(
                digit, action, f"rod {action.position} reached {current}"
            )
    return current
