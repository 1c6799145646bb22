"""
Module: generator.rules.factory

Purpose:
    Explicit dispatch from RuleKind to the rule implementation.

Key Functions:
    - create_rule(): Build a rule for a kind and config

Used By:
    - generator.controller: build_session
    - abacus_trainer.cli: Command line entry point
"""

from __future__ import annotations

import logging
import random
from typing import Dict, Optional, Type, Union

from ..config import RuleConfig
from .base import Rule
from .bridging import BridgingRule
from .brothers import BrothersRule
from .kind import RuleKind
from .simple import UnifiedSimpleRule

logger = logging.getLogger(__name__)

RULES: Dict[RuleKind, Type[Rule]] = {
    RuleKind.SIMPLE: UnifiedSimpleRule,
    RuleKind.BRIDGING: BridgingRule,
    RuleKind.BROTHERS: BrothersRule,
}


def create_rule(
    kind: Union[RuleKind, str],
    config: RuleConfig,
    rng: Optional[random.Random] = None,
) -> Rule:
    """
    Create the rule for a kind.

    Args:
        kind: Rule kind or its string value ("simple", "bridging", "brothers")
        config: Rule configuration
        rng: Optional shared random source

    Returns:
        Configured rule instance

    Raises:
        ValueError: If the kind is unknown or the config does not fit it

    Example:
        >>> rule = create_rule("bridging", RuleConfig.bridging(7))
        >>> rule.name
        'Bridging 7'
    """
    if isinstance(kind, str):
        kind = RuleKind(kind.lower())
    rule = RULES[kind](config, rng)
    logger.debug(f"Created rule: {rule.describe()}")
    return rule
