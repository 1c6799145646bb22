"""
Schema Validation Utilities

Validates rule-configuration JSON before it becomes a RuleConfig.

- Basic structural checks always run and give precise field paths
- `strict=True` additionally validates against rule_config.schema.json
  with jsonschema
- Fail fast on any violation
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema


_DIGIT_LIST_RANGES = {
    "selected_digits": (1, 9),
    "brothers_digits": (1, 4),
}
_INT_FIELDS = ("min_steps", "max_steps", "digit_count", "target_number", "target_remainder", "seed")
_BOOL_FIELDS = (
    "combine_levels", "only_addition", "only_subtraction", "include_five",
    "first_action_positive", "require_block",
)


# Load schemas lazily
_SCHEMAS: dict[str, dict] = {}


def _load_schema(name: str) -> dict:
    """Load a schema from the schemas directory."""
    if name not in _SCHEMAS:
        schema_path = Path(__file__).parent / f"{name}.schema.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")
        with open(schema_path, "r", encoding="utf-8") as f:
            _SCHEMAS[name] = json.load(f)
    return _SCHEMAS[name]


class ConfigValidationError(Exception):
    """Raised when config data fails schema validation."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


def validate_rule_config(data: dict[str, Any], *, strict: bool = False) -> None:
    """
    Validate rule configuration data.

    Args:
        data: Rule config dictionary (RuleConfig field names)
        strict: If True, also validate against the JSON schema

    Raises:
        ConfigValidationError: If data is invalid
    """
    if not isinstance(data, dict):
        raise ConfigValidationError(
            f"Rule config must be an object, got {type(data).__name__}"
        )

    for name, (low, high) in _DIGIT_LIST_RANGES.items():
        if name in data:
            _validate_digit_list(data[name], name, low, high)

    for name in _INT_FIELDS:
        value = data.get(name)
        if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
            raise ConfigValidationError(
                f"Invalid {name}: {value!r} (must be an integer)",
                path=name
            )

    for name in _BOOL_FIELDS:
        value = data.get(name)
        if value is not None and not isinstance(value, bool):
            raise ConfigValidationError(
                f"Invalid {name}: {value!r} (must be true or false)",
                path=name
            )

    min_steps = data.get("min_steps")
    max_steps = data.get("max_steps")
    if isinstance(min_steps, int) and isinstance(max_steps, int) and max_steps < min_steps:
        raise ConfigValidationError(
            f"max_steps ({max_steps}) must be >= min_steps ({min_steps})",
            path="max_steps"
        )

    if data.get("only_addition") and data.get("only_subtraction"):
        raise ConfigValidationError(
            "only_addition and only_subtraction are mutually exclusive",
            path="only_subtraction"
        )

    # Full schema validation in strict mode
    if strict:
        schema = _load_schema("rule_config")
        try:
            jsonschema.validate(data, schema)
        except jsonschema.ValidationError as e:
            raise ConfigValidationError(
                f"Schema validation failed: {e.message}",
                path=".".join(str(p) for p in e.absolute_path),
                errors=[e.message]
            ) from e


def _validate_digit_list(value: Any, path: str, low: int, high: int) -> None:
    """Validate a list of digit magnitudes."""
    if not isinstance(value, list) or not value:
        raise ConfigValidationError(
            f"{path} must be a non-empty list",
            path=path
        )
    bad = [d for d in value if isinstance(d, bool) or not isinstance(d, int) or not low <= d <= high]
    if bad:
        raise ConfigValidationError(
            f"Invalid {path}: {bad} (must be integers {low}-{high})",
            path=path,
            errors=[f"Invalid digit: {d!r}" for d in bad]
        )


def load_rule_config_file(path: Path, *, strict: bool = True) -> dict[str, Any]:
    """
    Read and validate a rule config JSON file.

    Args:
        path: JSON file path
        strict: Validate against the JSON schema

    Returns:
        The validated dictionary

    Raises:
        ConfigValidationError: If the file is not valid JSON or fails validation
    """
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigValidationError(f"Invalid JSON in {path}: {e}") from e
    validate_rule_config(data, strict=strict)
    return data
