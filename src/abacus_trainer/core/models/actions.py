"""
Module: core.models.actions

Purpose:
    Immutable representations of bead moves. An Action is a signed move on
    one rod; compound actions carry the two elementary moves (the formula)
    that realise them physically. A VectorAction is a set of same-signed
    Actions applied to several rods at once.

Key Classes:
    - Action: Signed move on a single rod
    - VectorAction: Simultaneous multi-rod move sharing one sign

Dependencies:
    - dataclasses (std)

Used By:
    - generator.rules: Rule implementations build and validate Actions
    - generator.example_generator: Vector strategy
    - generator.multi_digit: Number-wise strategy
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


HEAVEN_VALUE = 5


@dataclass(frozen=True)
class Action:
    """
    Signed move applied to one rod (immutable).

    Attributes:
        value: Signed magnitude (1-9 in absolute value)
        position: Rod index (0 = least significant)
        formula: Ordered elementary moves for compound actions, empty for
            simple ones. Replaying the formula reproduces the bead path.

    Invariants:
        - value != 0
        - formula is empty or sums to value

    Example:
        >>> Action(7, formula=(5, 2)).is_bridging
        True
        >>> Action(4, formula=(5, -1)).is_brothers
        True
    """

    value: int
    position: int = 0
    formula: Tuple[int, ...] = ()

    def __post_init__(self) -> None:
        """Validate action on construction."""
        if self.value == 0:
            raise ValueError("Action value must be non-zero")
        if not 1 <= abs(self.value) <= 9:
            raise ValueError(f"Action magnitude must be 1-9: {self.value}")
        if self.position < 0:
            raise ValueError(f"position must be non-negative: {self.position}")
        if not isinstance(self.formula, tuple):
            object.__setattr__(self, "formula", tuple(self.formula))
        if self.formula and sum(self.formula) != self.value:
            raise ValueError(
                f"formula {self.formula} does not sum to value {self.value}"
            )

    # ─────────────────────────────────────────────────────────────────────────
    # Calculated Properties
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def magnitude(self) -> int:
        return abs(self.value)

    @property
    def sign(self) -> int:
        return 1 if self.value > 0 else -1

    @property
    def is_compound(self) -> bool:
        return bool(self.formula)

    @property
    def is_bridging(self) -> bool:
        """Compound move of 6-9 through the heaven bead."""
        return self.is_compound and self.magnitude > HEAVEN_VALUE

    @property
    def is_brothers(self) -> bool:
        """Compound move of 1-4 realised by pairing to 5."""
        return self.is_compound and self.magnitude < HEAVEN_VALUE

    @property
    def brother_magnitude(self) -> int:
        """Complement to five used by a brothers move (0 for other moves)."""
        if not self.is_brothers:
            return 0
        return HEAVEN_VALUE - self.magnitude

    def to_dict(self) -> dict:
        data = {"value": self.value, "position": self.position}
        if self.formula:
            data["formula"] = list(self.formula)
        return data


@dataclass(frozen=True)
class VectorAction:
    """
    Simultaneous move on several rods sharing one sign (immutable).

    Attributes:
        parts: One Action per moved rod, at distinct positions

    Example:
        >>> step = VectorAction((Action(3, 0), Action(2, 1)))
        >>> step.value
        23
        >>> step.digits(3)
        (3, 2, 0)
    """

    parts: Tuple[Action, ...]

    def __post_init__(self) -> None:
        """Validate vector action on construction."""
        if not isinstance(self.parts, tuple):
            object.__setattr__(self, "parts", tuple(self.parts))
        if not self.parts:
            raise ValueError("VectorAction requires at least one part")
        signs = {part.sign for part in self.parts}
        if len(signs) != 1:
            raise ValueError(f"VectorAction parts must share one sign: {self.parts}")
        positions = [part.position for part in self.parts]
        if len(set(positions)) != len(positions):
            raise ValueError(f"VectorAction positions must be distinct: {positions}")

    @property
    def sign(self) -> int:
        return self.parts[0].sign

    @property
    def value(self) -> int:
        """Signed whole-number value of the move."""
        return sum(part.value * 10 ** part.position for part in self.parts)

    @property
    def magnitude(self) -> int:
        return abs(self.value)

    @property
    def width(self) -> int:
        """Rods spanned from position 0 up to the highest moved rod."""
        return max(part.position for part in self.parts) + 1

    def part_at(self, position: int) -> Action | None:
        for part in self.parts:
            if part.position == position:
                return part
        return None

    def digits(self, width: int) -> Tuple[int, ...]:
        """Signed per-rod deltas for `width` rods (least significant first)."""
        deltas = [0] * width
        for part in self.parts:
            deltas[part.position] = part.value
        return tuple(deltas)

    def to_dict(self) -> dict:
        return {"value": self.value, "parts": [part.to_dict() for part in self.parts]}
