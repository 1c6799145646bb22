"""
JSON schema validation for rule configuration files.
"""

from .validator import (
    ConfigValidationError,
    load_rule_config_file,
    validate_rule_config,
)

__all__ = [
    "ConfigValidationError",
    "load_rule_config_file",
    "validate_rule_config",
]
