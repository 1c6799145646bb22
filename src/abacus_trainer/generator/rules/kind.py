"""
Module: generator.rules.kind

Purpose:
    Enum naming the closed set of rule variants.

Key Classes:
    - RuleKind: Simple, bridging (targets 6-9) or brothers

Used By:
    - generator.rules.factory: create_rule dispatch
    - generator.controller: SessionConfig
    - abacus_trainer.cli: --rule option
"""

from enum import Enum


class RuleKind(Enum):
    """
    Rule variants understood by create_rule.

    Attributes:
        SIMPLE: Unified simple rule, pure bead gestures only
        BRIDGING: Friends-of-five rule for one target (6, 7, 8 or 9),
                  chosen by RuleConfig.target_number
        BROTHERS: Pairing-to-five technique for magnitudes 1-4

    Example:
        >>> RuleKind("bridging") is RuleKind.BRIDGING
        True
    """

    SIMPLE = "simple"
    BRIDGING = "bridging"
    BROTHERS = "brothers"
