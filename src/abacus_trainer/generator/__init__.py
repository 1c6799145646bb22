"""
Module: generator

Purpose:
    Abacus exercise generation: rules encoding bead physics and acceptance,
    the stepwise ExampleGenerator, the number-wise MultiDigitGenerator and
    the session controller.

Key Functions:
    - build_session(): Generate a batch of examples
    - create_rule(): Build a rule for a kind

Key Classes:
    - RuleConfig, MultiDigitConfig: Configuration
    - ExampleGenerator, MultiDigitGenerator: Strategies
    - GenerationExhausted, IllegalTransition, ValidationFailed: Errors

Used By:
    - abacus_trainer.cli: Command line entry point
"""

from .config import BlockPlacement, MultiDigitConfig, RuleConfig
from .controller import (
    GeneratorStrategy,
    SessionConfig,
    SessionError,
    SessionResult,
    build_session,
)
from .errors import GenerationExhausted, GeneratorError, IllegalTransition, ValidationFailed
from .example_generator import ExampleGenerator, attempt_budget
from .multi_digit import MultiDigitGenerator, SessionCounters
from .rules import (
    BridgingRule,
    BrothersRule,
    Rule,
    RuleKind,
    UnifiedSimpleRule,
    create_rule,
)

__all__ = [
    "BlockPlacement",
    "MultiDigitConfig",
    "RuleConfig",
    "GeneratorStrategy",
    "SessionConfig",
    "SessionError",
    "SessionResult",
    "build_session",
    "GenerationExhausted",
    "GeneratorError",
    "IllegalTransition",
    "ValidationFailed",
    "ExampleGenerator",
    "attempt_budget",
    "MultiDigitGenerator",
    "SessionCounters",
    "BridgingRule",
    "BrothersRule",
    "Rule",
    "RuleKind",
    "UnifiedSimpleRule",
    "create_rule",
]
