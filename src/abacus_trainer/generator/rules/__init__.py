"""
Module: generator.rules

Purpose:
    Closed set of rule variants encoding bead physics and example
    acceptance, plus explicit dispatch by RuleKind.

Key Functions:
    - create_rule(): Build a rule for a kind and config

Key Classes:
    - Rule: Abstract interface
    - UnifiedSimpleRule, BridgingRule, BrothersRule: Variants
    - RuleKind: Variant tag

Used By:
    - generator.example_generator: ExampleGenerator
    - generator.multi_digit: MultiDigitGenerator
    - generator.controller: build_session
"""

from .base import Rule, action_parts, format_signed
from .bridging import BridgingRule
from .brothers import BrothersRule
from .factory import RULES, create_rule
from .kind import RuleKind
from .simple import UnifiedSimpleRule

__all__ = [
    "Rule",
    "action_parts",
    "format_signed",
    "BridgingRule",
    "BrothersRule",
    "RULES",
    "create_rule",
    "RuleKind",
    "UnifiedSimpleRule",
]
