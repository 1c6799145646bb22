"""
Unit tests for the number-wise MultiDigitGenerator.
"""

import random

import pytest

from abacus_trainer.core.models import Action, Example, Step, VectorAction
from abacus_trainer.generator.config import MultiDigitConfig, RuleConfig
from abacus_trainer.generator.errors import (
    GenerationExhausted,
    IllegalTransition,
    ValidationFailed,
)
from abacus_trainer.generator.multi_digit import MultiDigitGenerator
from abacus_trainer.generator.rules import UnifiedSimpleRule

ALL_DIGITS = (1, 2, 3, 4, 5, 6, 7, 8, 9)


def _generator(seed, digit_count=2, **overrides):
    rule = UnifiedSimpleRule(
        RuleConfig(selected_digits=ALL_DIGITS, digit_count=digit_count, min_steps=2, max_steps=5),
        random.Random(seed),
    )
    params = {"max_digit_count": digit_count, "max_zero_digits": 5 * digit_count}
    params.update(overrides)
    return MultiDigitGenerator(rule, MultiDigitConfig(**params))


class TestGenerateExample:
    """Tests for generate_example."""

    def test_generate_when_two_digits_then_steps_are_two_digit_numbers(self):
        """Each step moves only rods 0 and 1 and leads with rod 1."""
        for seed in range(20):
            # Arrange
            generator = _generator(seed)

            # Act
            example = generator.generate_example()
            trainer = generator.to_trainer_format(example)

            # Assert
            assert example.start == (0, 0)
            assert example.steps[0].value > 0
            for step, text in zip(example.steps, trainer.steps):
                assert {part.position for part in step.action.parts} <= {0, 1}
                assert step.action.part_at(1) is not None
                assert text == f"{'+' if step.value > 0 else '-'}{abs(step.value)}"

    def test_generate_when_done_then_replay_matches_answer(self):
        """Replaying the steps reproduces the answer."""
        for seed in range(10):
            generator = _generator(seed, digit_count=3)
            example = generator.generate_example()

            state = example.start
            for step in example.steps:
                state = generator.apply_action(state, step.action)

            assert state == example.answer
            assert generator.validate_example(example)

    def test_generate_when_called_then_counters_not_stored(self):
        """Rare-event counters live only inside one call."""
        generator = _generator(1)
        generator.generate_example()
        assert "duplicates_used" not in vars(generator)
        assert "zero_digits_used" not in vars(generator)
        assert "duplicates_used" not in vars(generator.base_rule)

    def test_generate_when_duplicates_likely_then_at_most_one(self):
        """Only one step per example may repeat a magnitude."""
        for seed in range(20):
            generator = _generator(seed, duplicate_digit_probability=1.0)
            example = generator.generate_example()
            repeats = [
                step for step in example.steps
                if len({part.magnitude for part in step.action.parts}) < len(step.action.parts)
            ]
            assert len(repeats) <= 1

    def test_generate_when_variable_widths_then_first_step_full_width(self):
        """The opening number always uses every rod."""
        for seed in range(10):
            generator = _generator(seed, digit_count=3, variable_digit_counts=True)
            example = generator.generate_example()
            assert example.steps[0].action.width == 3

    def test_generate_when_zero_digits_forbidden_then_every_rod_moves(self):
        """With no zero allowance full-width steps move every rod."""
        generated = 0
        for seed in range(10):
            generator = _generator(seed, max_zero_digits=0, step_attempts=50)
            try:
                example = generator.generate_example()
            except GenerationExhausted:
                continue
            generated += 1
            for step in example.steps:
                assert len(step.action.parts) == 2
        assert generated > 0

    def test_generate_when_default_zero_cap_then_examples_complete(self):
        """The default single zero allowance still yields full examples."""
        for seed in range(20):
            # Arrange
            rule = UnifiedSimpleRule(
                RuleConfig(selected_digits=ALL_DIGITS, digit_count=3), random.Random(seed)
            )
            generator = MultiDigitGenerator(rule, MultiDigitConfig(max_digit_count=3))

            # Act
            example = generator.generate_example()

            # Assert
            zeros = sum(3 - len(step.action.parts) for step in example.steps)
            assert zeros <= 1
            assert rule.config.min_steps <= example.step_count <= rule.config.max_steps


class TestRestarts:
    """Tests for restarting an example whose step stalls."""

    def test_generate_when_step_stalls_once_then_restarts(self, monkeypatch):
        """A stalled step starts the example again from zero."""
        # Arrange
        generator = _generator(3)
        build_step = generator._build_step
        stalls = []

        def stall_first(state, steps, counters):
            if not stalls:
                stalls.append(state)
                raise GenerationExhausted(1, "stalled")
            return build_step(state, steps, counters)

        monkeypatch.setattr(generator, "_build_step", stall_first)

        # Act
        example = generator.generate_example()

        # Assert
        assert stalls == [(0, 0)]
        assert generator.validate_example(example)

    def test_generate_when_every_attempt_stalls_then_raises_exhausted(self, monkeypatch):
        """The restart budget bounds the work for one example."""
        # Arrange
        generator = _generator(0, example_attempts=4)
        calls = []

        def always_stall(state, steps, counters):
            calls.append(state)
            raise GenerationExhausted(1, f"could not build step 1 from {state!r}")

        monkeypatch.setattr(generator, "_build_step", always_stall)

        # Act / Assert
        with pytest.raises(GenerationExhausted) as info:
            generator.generate_example()
        assert len(calls) == 4
        assert info.value.attempts == 4
        assert "could not build step 1" in info.value.reason


class TestSignOrder:
    """Tests for the alternating sign preference."""

    def test_sign_order_when_first_step_then_positive_only(self):
        """The opening move is positive."""
        assert _generator(0)._sign_order([]) == [1]

    def test_sign_order_when_after_positive_then_negative_first(self):
        """The opposite of the previous sign is tried first."""
        step = Step(VectorAction((Action(1, 1),)), (0, 0), (0, 1))
        assert _generator(0)._sign_order([step]) == [-1, 1]

    def test_sign_order_when_only_addition_then_positive_only(self):
        """Direction flags still apply."""
        rule = UnifiedSimpleRule(RuleConfig(digit_count=2, only_addition=True))
        generator = MultiDigitGenerator(rule, MultiDigitConfig(max_digit_count=2))
        step = Step(VectorAction((Action(1, 1),)), (0, 0), (0, 1))
        assert generator._sign_order([step]) == [1]


class TestApplyAndValidate:
    """Tests for apply_action and check_example."""

    def test_apply_when_int_then_decomposes_by_rod(self):
        """21 adds 1 to rod 0 and 2 to rod 1."""
        assert _generator(0).apply_action((1, 2), 21) == (2, 4)

    def test_apply_when_rod_overflows_then_raises_error(self):
        """A rod passing 9 is illegal."""
        with pytest.raises(IllegalTransition):
            _generator(0).apply_action((9, 0), 1)

    def test_apply_when_number_too_wide_then_raises_error(self):
        """Numbers wider than the rods are illegal."""
        with pytest.raises(IllegalTransition):
            _generator(0).apply_action((0, 0), 100)

    def test_apply_when_zero_then_raises_error(self):
        """A step must change the number."""
        with pytest.raises(ValueError, match="non-zero"):
            _generator(0).apply_action((0, 0), 0)

    def test_check_when_answer_tampered_then_raises_error(self, build_example):
        """The declared answer must match the replay."""
        # Arrange
        generator = _generator(0)
        example = build_example(generator.base_rule, [VectorAction((Action(2, 1), Action(1, 0)))])
        tampered = Example(start=example.start, steps=example.steps, answer=(1, 3))

        # Act / Assert
        assert generator.validate_example(example) is True
        with pytest.raises(ValidationFailed, match="replay gives 21, answer is 31"):
            generator.check_example(tampered)

    def test_check_when_start_not_zero_then_raises_error(self):
        """Examples start from all-zero rods."""
        step = Step(VectorAction((Action(1, 0),)), (1, 0), (2, 0))
        example = Example(start=(1, 0), steps=(step,), answer=(2, 0))
        with pytest.raises(ValidationFailed, match="zero state"):
            _generator(0).check_example(example)

    def test_check_when_first_step_negative_then_raises_error(self):
        """The opening step is positive."""
        step = Step(VectorAction((Action(-1, 0),)), (0, 0), (0, 0))
        example = Example(start=(0, 0), steps=(step,), answer=(0, 0))
        assert _generator(0).validate_example(example) is False
