"""
Module: generator.controller

Purpose:
    Orchestrate a training session.
    Rule → Strategy → Generate → Project for display

Key Functions:
    - build_session(): Main entry point for generating a batch of examples

Key Classes:
    - GeneratorStrategy: Stepwise (ExampleGenerator) or number-wise
      (MultiDigitGenerator)
    - SessionConfig: Session request
    - SessionResult: Complete session result
    - SessionError: Exception for session failures

Dependencies:
    - generator.rules: create_rule
    - generator.example_generator: ExampleGenerator
    - generator.multi_digit: MultiDigitGenerator

Used By:
    - abacus_trainer.cli: Command line entry point
"""

from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple, Union

from abacus_trainer.core.models import Example, TrainerExample

from .config import MultiDigitConfig, RuleConfig
from .errors import GeneratorError
from .example_generator import ExampleGenerator
from .multi_digit import MultiDigitGenerator
from .rules import RuleKind, create_rule

logger = logging.getLogger(__name__)


class SessionError(Exception):
    """Error while generating a session."""
    pass


class GeneratorStrategy(Enum):
    """
    How examples are built.

    Attributes:
        STEPWISE: ExampleGenerator (single rod, or every rod per step)
        NUMBER_WISE: MultiDigitGenerator (whole multi-digit numbers per step)
    """

    STEPWISE = "stepwise"
    NUMBER_WISE = "number"


@dataclass(frozen=True)
class SessionConfig:
    """
    Session request (immutable).

    Attributes:
        rule_kind: Rule variant to train
        rule_config: Rule configuration
        count: Number of examples to generate
        strategy: Generation strategy
        multi_digit: Number-wise parameters (defaults to the rule's width)
    """

    rule_kind: Union[RuleKind, str]
    rule_config: RuleConfig
    count: int = 1
    strategy: GeneratorStrategy = GeneratorStrategy.STEPWISE
    multi_digit: Optional[MultiDigitConfig] = None

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if isinstance(self.rule_kind, str):
            object.__setattr__(self, "rule_kind", RuleKind(self.rule_kind.lower()))
        if isinstance(self.strategy, str):
            object.__setattr__(self, "strategy", GeneratorStrategy(self.strategy.lower()))
        if self.count <= 0:
            raise ValueError(f"count must be positive: {self.count}")

    @property
    def multi_digit_config(self) -> MultiDigitConfig:
        if self.multi_digit is not None:
            return self.multi_digit
        return MultiDigitConfig(max_digit_count=self.rule_config.digit_count)


@dataclass(frozen=True)
class SessionResult:
    """
    Complete session result (immutable).

    Attributes:
        examples: Generated examples
        trainer_examples: Display projections, in the same order
        metadata: Session metadata dictionary
        warnings: Any warnings during generation

    Example:
        >>> result = build_session(SessionConfig("simple", RuleConfig(), count=3))
        >>> len(result.trainer_examples)
        3
    """

    examples: Tuple[Example, ...]
    trainer_examples: Tuple[TrainerExample, ...]
    metadata: dict
    warnings: Tuple[str, ...]

    @property
    def display_lines(self) -> List[str]:
        """One "+3 +5 -2 = 6" line per example."""
        lines = []
        for trainer in self.trainer_examples:
            parts = list(trainer.steps)
            if trainer.start:
                parts.insert(0, str(trainer.start))
            lines.append(f"{' '.join(parts)} = {trainer.answer}")
        return lines

    def to_dict(self) -> dict:
        return {
            "metadata": self.metadata,
            "warnings": list(self.warnings),
            "examples": [t.to_dict() for t in self.trainer_examples],
        }


def build_session(config: SessionConfig, rng: Optional[random.Random] = None) -> SessionResult:
    """
    Generate a batch of examples for one rule.

    Pipeline:
    1. Create the rule for the requested kind
    2. Create the generator for the requested strategy
    3. Generate `count` validated examples
    4. Project them for display

    Args:
        config: Session configuration
        rng: Optional shared random source (defaults to the rule's own)

    Returns:
        SessionResult with examples and metadata

    Raises:
        SessionError: If the rule cannot be created or generation fails
    """
    warnings: List[str] = []
    start_time = time.perf_counter()

    try:
        rule = create_rule(config.rule_kind, config.rule_config, rng)
    except ValueError as e:
        raise SessionError(f"Invalid rule configuration: {e}") from e

    logger.info(f"Starting session: {rule.describe()}, {config.count} examples")

    if config.strategy is GeneratorStrategy.NUMBER_WISE:
        if not config.rule_config.is_multi_digit:
            warnings.append("Number-wise strategy used with a single-digit rule configuration")
        generator = MultiDigitGenerator(rule, config.multi_digit_config, rng)
        generate = generator.generate_example
        to_trainer = generator.to_trainer_format
    else:
        stepwise = ExampleGenerator(rule, rng)
        generate = stepwise.generate
        to_trainer = stepwise.to_trainer_format

    examples: List[Example] = []
    try:
        for _ in range(config.count):
            examples.append(generate())
    except GeneratorError as e:
        raise SessionError(f"Failed to generate example {len(examples) + 1}: {e}") from e

    short = [ex for ex in examples if ex.step_count < config.rule_config.min_steps]
    if short:
        warnings.append(f"{len(short)} examples are shorter than min_steps")

    trainer_examples = tuple(to_trainer(ex) for ex in examples)
    elapsed = time.perf_counter() - start_time
    logger.info(f"Generated {len(examples)} examples in {elapsed:.2f}s")

    metadata = {
        "rule": rule.name,
        "rule_kind": config.rule_kind.value,
        "strategy": config.strategy.value,
        "count": len(examples),
        "rule_config": config.rule_config.to_dict(),
        "elapsed_seconds": round(elapsed, 3),
    }
    return SessionResult(
        examples=tuple(examples),
        trainer_examples=trainer_examples,
        metadata=metadata,
        warnings=tuple(warnings),
    )
