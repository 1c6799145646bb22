"""
Unit tests for rule dispatch.
"""

import pytest

from abacus_trainer.generator.config import RuleConfig
from abacus_trainer.generator.rules import (
    RULES,
    BridgingRule,
    BrothersRule,
    RuleKind,
    UnifiedSimpleRule,
    create_rule,
)


class TestCreateRule:
    """Tests for create_rule."""

    @pytest.mark.parametrize(
        "kind, config, expected",
        [
            (RuleKind.SIMPLE, RuleConfig(), UnifiedSimpleRule),
            (RuleKind.BRIDGING, RuleConfig.bridging(8), BridgingRule),
            (RuleKind.BROTHERS, RuleConfig.brothers(), BrothersRule),
        ],
    )
    def test_create_when_kind_given_then_returns_rule(self, kind, config, expected):
        """Each kind maps to its rule class."""
        rule = create_rule(kind, config)
        assert isinstance(rule, expected)
        assert rule.kind is kind

    def test_create_when_string_kind_then_case_insensitive(self):
        """String kinds are accepted in any case."""
        assert isinstance(create_rule("Bridging", RuleConfig.bridging(7)), BridgingRule)

    def test_create_when_unknown_kind_then_raises_error(self):
        """Unknown kinds are rejected."""
        with pytest.raises(ValueError):
            create_rule("friends", RuleConfig())

    def test_registry_when_listed_then_covers_every_kind(self):
        """Every kind has an implementation."""
        assert set(RULES) == set(RuleKind)

    def test_create_when_seeded_then_reproducible(self):
        """The config seed drives the rule's random source."""
        first = create_rule("simple", RuleConfig(seed=7)).generate_steps_count()
        second = create_rule("simple", RuleConfig(seed=7)).generate_steps_count()
        assert first == second
