"""
Unit tests for Action, VectorAction and the example models.
"""

import pytest

from abacus_trainer.core.models import (
    Action,
    Example,
    Step,
    TrainerExample,
    VectorAction,
)


class TestAction:
    """Tests for single-rod actions."""

    def test_init_when_zero_value_then_raises_error(self):
        """A move must change the rod."""
        with pytest.raises(ValueError, match="non-zero"):
            Action(0)

    def test_init_when_magnitude_above_nine_then_raises_error(self):
        """Magnitudes are limited to one rod."""
        with pytest.raises(ValueError, match="1-9"):
            Action(10)

    def test_init_when_formula_does_not_sum_then_raises_error(self):
        """The formula must reproduce the value."""
        with pytest.raises(ValueError, match="does not sum"):
            Action(6, formula=(5, 2))

    def test_init_when_formula_is_list_then_stored_as_tuple(self):
        """Formulas are normalised to tuples."""
        assert Action(6, formula=[5, 1]).formula == (5, 1)

    def test_properties_when_simple_negative_then_reports_sign(self):
        """Sign and magnitude are derived from the value."""
        # Act
        action = Action(-3)

        # Assert
        assert action.sign == -1
        assert action.magnitude == 3
        assert action.is_compound is False

    def test_is_bridging_when_compound_above_five_then_true(self):
        """A 6-9 formula move is bridging."""
        action = Action(7, formula=(5, 2))
        assert action.is_bridging is True
        assert action.is_brothers is False

    def test_is_brothers_when_compound_below_five_then_true(self):
        """A 1-4 formula move is a brothers move with a complement."""
        action = Action(4, formula=(5, -1))
        assert action.is_brothers is True
        assert action.brother_magnitude == 1

    def test_to_dict_when_compound_then_includes_formula(self):
        """Serialisation keeps the realised bead path."""
        assert Action(-6, 1, (-1, -5)).to_dict() == {
            "value": -6, "position": 1, "formula": [-1, -5],
        }


class TestVectorAction:
    """Tests for simultaneous multi-rod actions."""

    def test_value_when_two_rods_then_combines_positionally(self):
        """Rod 1 carries tens."""
        # Arrange
        action = VectorAction((Action(3, 0), Action(2, 1)))

        # Assert
        assert action.value == 23
        assert action.digits(3) == (3, 2, 0)
        assert action.width == 2

    def test_value_when_negative_then_signed(self):
        """A shared negative sign gives a negative value."""
        action = VectorAction((Action(-1, 0), Action(-4, 1)))
        assert action.value == -41
        assert action.sign == -1

    def test_init_when_mixed_signs_then_raises_error(self):
        """All parts share one sign."""
        with pytest.raises(ValueError, match="share one sign"):
            VectorAction((Action(1, 0), Action(-1, 1)))

    def test_init_when_duplicate_positions_then_raises_error(self):
        """Each rod appears once."""
        with pytest.raises(ValueError, match="distinct"):
            VectorAction((Action(1, 0), Action(2, 0)))

    def test_init_when_empty_then_raises_error(self):
        """At least one rod moves."""
        with pytest.raises(ValueError, match="at least one part"):
            VectorAction(())

    def test_part_at_when_rod_not_moved_then_none(self):
        """Unmoved rods have no part."""
        action = VectorAction((Action(2, 1),))
        assert action.part_at(1) == Action(2, 1)
        assert action.part_at(0) is None


class TestExample:
    """Tests for Example and TrainerExample."""

    def test_properties_when_built_then_derives_values(self):
        """Values and numbers are derived from steps and states."""
        # Arrange
        example = Example(
            start=0,
            steps=[Step(Action(5), 0, 5), Step(Action(1), 5, 6)],
            answer=6,
        )

        # Assert
        assert isinstance(example.steps, tuple)
        assert example.values == (5, 1)
        assert example.step_count == 2
        assert example.answer_number == 6
        assert example.digit_count == 1

    def test_to_dict_when_multi_digit_then_states_are_lists(self):
        """Tuple states serialise as JSON lists."""
        # Arrange
        step = Step(VectorAction((Action(1, 0), Action(2, 1))), (0, 0), (1, 2))
        example = Example(start=(0, 0), steps=(step,), answer=(1, 2))

        # Act
        data = example.to_dict()

        # Assert
        assert data["start"] == [0, 0]
        assert data["answer"] == [1, 2]
        assert data["steps"][0]["action"]["value"] == 21

    def test_trainer_example_to_dict_when_built_then_lists_steps(self):
        """Display projection keeps strings and numbers."""
        trainer = TrainerExample(start=0, steps=["+3", "-1"], answer=2)
        assert trainer.to_dict() == {"start": 0, "steps": ["+3", "-1"], "answer": 2}
