"""
Module: generator.config

Purpose:
    Configuration dataclasses for rules and generators.
    Immutable configuration with validation on construction.

Key Classes:
    - RuleConfig: Parameters shared by every rule plus rule-specific knobs
    - MultiDigitConfig: Parameters of the number-wise generator
    - BlockPlacement: Where a mandatory bridging block is placed

Dependencies:
    - dataclasses (std)

Used By:
    - generator.rules: Rule implementations
    - generator.example_generator: ExampleGenerator
    - generator.multi_digit: MultiDigitGenerator
    - generator.controller: Session building
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from enum import Enum
from typing import Any, Dict, Optional, Sequence, Tuple

MAX_DIGIT_COUNT = 9
BRIDGING_TARGETS = (6, 7, 8, 9)

# Tuning knobs awaiting product calibration
DEFAULT_BROTHERS_PREFERENCE = 0.8
DEFAULT_BLOCK_INSERT_PROBABILITY = 0.6
DEFAULT_DUPLICATE_DIGIT_PROBABILITY = 0.1
DEFAULT_MAX_ZERO_DIGITS = 1


class BlockPlacement(Enum):
    """
    Where the generator puts a mandatory bridging block.

    Attributes:
        AUTO: Insert at a random point when possible, else append at the end
        START: Open the example with the block
    """

    AUTO = "auto"
    START = "start"


def _normalize_digits(name: str, digits: Sequence[int], low: int, high: int) -> Tuple[int, ...]:
    normalized = tuple(sorted({int(d) for d in digits}))
    if not normalized:
        raise ValueError(f"{name} must not be empty")
    for digit in normalized:
        if not low <= digit <= high:
            raise ValueError(f"{name} must be within {low}-{high}: {digit}")
    return normalized


@dataclass(frozen=True)
class RuleConfig:
    """
    Configuration for a rule (immutable).

    Attributes:
        selected_digits: Eligible move magnitudes (1-9)
        min_steps: Minimum number of steps in an example
        max_steps: Maximum number of steps in an example
        digit_count: Number of rods an example uses (1-9)
        combine_levels: Allow multi-digit answers with fewer significant
            digits than digit_count
        only_addition: Only positive moves
        only_subtraction: Only negative moves after the opening move
        include_five: Allow engaging the heaven bead (None = any selected
            magnitude of 5 or more)
        first_action_positive: The opening move must be positive
        target_number: Bridging target (6-9) for bridging rules
        target_remainder: Earth-bead complement, must equal target - 5
        require_block: Bridging examples must contain a (±5, ±r) block
        block_placement: Where the generator places the block
        block_insert_probability: Chance of inserting the block at a step
        brothers_digits: Brother magnitudes (1-4) trained by the brothers rule;
            brother b is a move of 5 - b through the heaven bead
        brothers_preference: Chance of offering only brothers moves when
            both kinds are legal
        seed: Seed for the rule's random source (None = unseeded)

    Invariants:
        - 1 <= min_steps <= max_steps
        - 1 <= digit_count <= 9
        - not (only_addition and only_subtraction)

    Example:
        >>> config = RuleConfig(selected_digits=[1, 2, 3, 4], digit_count=2)
        >>> (config.min_final_number, config.max_final_number)
        (10, 99)
    """

    # Move set
    selected_digits: Tuple[int, ...] = (1, 2, 3, 4)

    # Example length
    min_steps: int = 2
    max_steps: int = 6

    # Width
    digit_count: int = 1
    combine_levels: bool = False

    # Direction
    only_addition: bool = False
    only_subtraction: bool = False
    include_five: Optional[bool] = None
    first_action_positive: bool = True

    # Bridging
    target_number: Optional[int] = None
    target_remainder: Optional[int] = None
    require_block: bool = True
    block_placement: BlockPlacement = BlockPlacement.AUTO
    block_insert_probability: float = DEFAULT_BLOCK_INSERT_PROBABILITY

    # Brothers
    brothers_digits: Tuple[int, ...] = (4,)
    brothers_preference: float = DEFAULT_BROTHERS_PREFERENCE

    seed: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        object.__setattr__(
            self, "selected_digits",
            _normalize_digits("selected_digits", self.selected_digits, 1, 9),
        )
        object.__setattr__(
            self, "brothers_digits",
            _normalize_digits("brothers_digits", self.brothers_digits, 1, 4),
        )
        if isinstance(self.block_placement, str):
            object.__setattr__(self, "block_placement", BlockPlacement(self.block_placement))

        if self.min_steps < 1:
            raise ValueError(f"min_steps must be positive: {self.min_steps}")
        if self.max_steps < self.min_steps:
            raise ValueError(
                f"max_steps ({self.max_steps}) must be >= min_steps ({self.min_steps})"
            )
        if not 1 <= self.digit_count <= MAX_DIGIT_COUNT:
            raise ValueError(f"digit_count must be within 1-{MAX_DIGIT_COUNT}: {self.digit_count}")
        if self.only_addition and self.only_subtraction:
            raise ValueError("only_addition and only_subtraction are mutually exclusive")
        if self.target_number is not None and self.target_number not in BRIDGING_TARGETS:
            raise ValueError(f"target_number must be one of {BRIDGING_TARGETS}: {self.target_number}")
        if self.target_remainder is not None:
            if self.target_number is None:
                raise ValueError("target_remainder requires target_number")
            if self.target_remainder != self.target_number - 5:
                raise ValueError(
                    f"target_remainder ({self.target_remainder}) must equal "
                    f"target_number - 5 ({self.target_number - 5})"
                )
        for name in ("brothers_preference", "block_insert_probability"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be within 0-1: {value}")

    # ─────────────────────────────────────────────────────────────────────────
    # Factory Methods
    # ─────────────────────────────────────────────────────────────────────────

    @classmethod
    def bridging(cls, target_number: int, **overrides: Any) -> RuleConfig:
        """
        Config for a bridging rule with the usual defaults for its target.

        Example:
            >>> RuleConfig.bridging(6).selected_digits
            (1, 5, 6)
        """
        if target_number not in BRIDGING_TARGETS:
            raise ValueError(f"target_number must be one of {BRIDGING_TARGETS}: {target_number}")
        params: Dict[str, Any] = {
            "selected_digits": (target_number - 5, 5, target_number),
            "min_steps": 2,
            "max_steps": 5,
        }
        params.update(overrides)
        return cls(target_number=target_number, **params)

    @classmethod
    def brothers(cls, **overrides: Any) -> RuleConfig:
        """Config for the brothers rule."""
        params: Dict[str, Any] = {"min_steps": 3, "max_steps": 7}
        params.update(overrides)
        return cls(**params)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> RuleConfig:
        """
        Create config from a plain dictionary (e.g. parsed JSON).

        Raises:
            ValueError: On unknown keys or invalid values
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown rule config keys: {unknown}")
        params = dict(data)
        for key in ("selected_digits", "brothers_digits"):
            if key in params:
                params[key] = tuple(params[key])
        return cls(**params)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["selected_digits"] = list(self.selected_digits)
        data["brothers_digits"] = list(self.brothers_digits)
        data["block_placement"] = self.block_placement.value
        return data

    # ─────────────────────────────────────────────────────────────────────────
    # Calculated Properties
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def is_multi_digit(self) -> bool:
        return self.digit_count > 1

    @property
    def five_enabled(self) -> bool:
        """Whether moves may engage the heaven bead."""
        if self.include_five is None:
            return any(d >= 5 for d in self.selected_digits)
        return self.include_five

    @property
    def remainder(self) -> Optional[int]:
        """Earth-bead part of the bridging target."""
        if self.target_number is None:
            return None
        return self.target_number - 5

    @property
    def min_final_number(self) -> int:
        """Smallest acceptable whole-number result."""
        if self.digit_count == 1:
            return 0
        if not self.combine_levels:
            return 10 ** (self.digit_count - 1)
        return 1

    @property
    def max_final_number(self) -> int:
        """Largest acceptable whole-number result."""
        return 10 ** self.digit_count - 1

    def allows_sign(self, sign: int, is_first_action: bool = False) -> bool:
        """
        Check a move direction against the direction flags.

        The opening move is governed by first_action_positive alone so that
        subtraction-only exercises can still leave the zero state.
        """
        if is_first_action and self.first_action_positive:
            return sign > 0
        if self.only_addition and sign < 0:
            return False
        if self.only_subtraction and sign > 0 and not is_first_action:
            return False
        return True


@dataclass(frozen=True)
class MultiDigitConfig:
    """
    Configuration for the number-wise multi-digit generator (immutable).

    Attributes:
        max_digit_count: Width of the numbers built per step (1-9)
        variable_digit_counts: Allow narrower numbers after the first step
        duplicate_digit_probability: Chance a step may repeat a magnitude
        max_zero_digits: Zero-valued positions allowed across one example
        step_attempts: Retry budget for building one step
        example_attempts: Restarts allowed when a step cannot be built

    Example:
        >>> MultiDigitConfig(max_digit_count=3).widths
        (1, 2, 3)
    """

    max_digit_count: int
    variable_digit_counts: bool = False
    duplicate_digit_probability: float = DEFAULT_DUPLICATE_DIGIT_PROBABILITY
    max_zero_digits: int = DEFAULT_MAX_ZERO_DIGITS
    step_attempts: int = 50
    example_attempts: int = 20

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if not 1 <= self.max_digit_count <= MAX_DIGIT_COUNT:
            raise ValueError(
                f"max_digit_count must be within 1-{MAX_DIGIT_COUNT}: {self.max_digit_count}"
            )
        if not 0.0 <= self.duplicate_digit_probability <= 1.0:
            raise ValueError(
                f"duplicate_digit_probability must be within 0-1: {self.duplicate_digit_probability}"
            )
        if self.max_zero_digits < 0:
            raise ValueError(f"max_zero_digits must be non-negative: {self.max_zero_digits}")
        if self.step_attempts <= 0:
            raise ValueError(f"step_attempts must be positive: {self.step_attempts}")
        if self.example_attempts <= 0:
            raise ValueError(f"example_attempts must be positive: {self.example_attempts}")

    @property
    def widths(self) -> Tuple[int, ...]:
        return tuple(range(1, self.max_digit_count + 1))
