"""
Unit Tests for Rule Config Validation

Tests for the validator module.
"""

import json

import pytest

from abacus_trainer.core.schemas.validator import (
    ConfigValidationError,
    load_rule_config_file,
    validate_rule_config,
)


class TestValidateRuleConfig:
    """Tests for validate_rule_config function."""

    @pytest.fixture
    def valid_config_data(self) -> dict:
        """Create valid rule config data for testing."""
        return {
            "selected_digits": [1, 2, 3, 4, 5],
            "min_steps": 3,
            "max_steps": 6,
            "digit_count": 1,
            "only_addition": False,
            "block_placement": "auto",
        }

    def test_valid_data_passes(self, valid_config_data):
        """Valid data should not raise."""
        validate_rule_config(valid_config_data)

    def test_valid_data_passes_strict(self, valid_config_data):
        """Valid data should pass the JSON schema as well."""
        validate_rule_config(valid_config_data, strict=True)

    def test_non_dict_raises_error(self):
        """A list is not a rule config."""
        with pytest.raises(ConfigValidationError, match="must be an object"):
            validate_rule_config([1, 2, 3])

    def test_empty_digits_raises_error(self, valid_config_data):
        """selected_digits must not be empty."""
        valid_config_data["selected_digits"] = []

        with pytest.raises(ConfigValidationError) as exc_info:
            validate_rule_config(valid_config_data)

        assert exc_info.value.path == "selected_digits"

    def test_digit_out_of_range_raises_error(self, valid_config_data):
        """Digits must lie within 1-9."""
        valid_config_data["selected_digits"] = [1, 10]

        with pytest.raises(ConfigValidationError, match="must be integers 1-9") as exc_info:
            validate_rule_config(valid_config_data)

        assert exc_info.value.errors == ["Invalid digit: 10"]

    def test_brothers_digit_above_four_raises_error(self, valid_config_data):
        """Brothers digits are limited to 1-4."""
        valid_config_data["brothers_digits"] = [5]

        with pytest.raises(ConfigValidationError, match="brothers_digits"):
            validate_rule_config(valid_config_data)

    def test_string_step_count_raises_error(self, valid_config_data):
        """Integer fields reject strings."""
        valid_config_data["min_steps"] = "3"

        with pytest.raises(ConfigValidationError, match="must be an integer") as exc_info:
            validate_rule_config(valid_config_data)

        assert exc_info.value.path == "min_steps"

    def test_non_bool_flag_raises_error(self, valid_config_data):
        """Boolean fields reject integers."""
        valid_config_data["combine_levels"] = 1

        with pytest.raises(ConfigValidationError, match="true or false"):
            validate_rule_config(valid_config_data)

    def test_max_below_min_raises_error(self, valid_config_data):
        """max_steps must not be below min_steps."""
        valid_config_data["max_steps"] = 2

        with pytest.raises(ConfigValidationError) as exc_info:
            validate_rule_config(valid_config_data)

        assert exc_info.value.path == "max_steps"

    def test_both_directions_raises_error(self, valid_config_data):
        """only_addition and only_subtraction cannot both be set."""
        valid_config_data["only_addition"] = True
        valid_config_data["only_subtraction"] = True

        with pytest.raises(ConfigValidationError, match="mutually exclusive"):
            validate_rule_config(valid_config_data)

    def test_unknown_key_passes_basic_fails_strict(self, valid_config_data):
        """Unknown keys are only caught by the schema."""
        valid_config_data["colour"] = "red"

        validate_rule_config(valid_config_data)
        with pytest.raises(ConfigValidationError, match="Schema validation failed"):
            validate_rule_config(valid_config_data, strict=True)

    def test_invalid_placement_strict_reports_path(self, valid_config_data):
        """Schema failures carry the offending field path."""
        valid_config_data["block_placement"] = "middle"

        with pytest.raises(ConfigValidationError) as exc_info:
            validate_rule_config(valid_config_data, strict=True)

        assert exc_info.value.path == "block_placement"
        assert exc_info.value.errors


class TestLoadRuleConfigFile:
    """Tests for load_rule_config_file function."""

    def test_valid_file_returns_data(self, tmp_path):
        """A valid file is returned as a dictionary."""
        path = tmp_path / "bridging.json"
        path.write_text(json.dumps({"target_number": 8, "min_steps": 2}), encoding="utf-8")

        data = load_rule_config_file(path)

        assert data == {"target_number": 8, "min_steps": 2}

    def test_invalid_json_raises_error(self, tmp_path):
        """Malformed JSON is reported as a validation error."""
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ConfigValidationError, match="Invalid JSON"):
            load_rule_config_file(path)

    def test_invalid_target_raises_error(self, tmp_path):
        """Targets outside 6-9 fail the schema."""
        path = tmp_path / "bad_target.json"
        path.write_text(json.dumps({"target_number": 5}), encoding="utf-8")

        with pytest.raises(ConfigValidationError) as exc_info:
            load_rule_config_file(path)

        assert exc_info.value.path == "target_number"
