"""
Module: generator.errors

Purpose:
    Exception hierarchy for exercise generation.

Key Classes:
    - GeneratorError: Base class for generation failures
    - GenerationExhausted: No valid example within the attempt budget (fatal)
    - IllegalTransition: A move left a rod outside [0, 9] (recovered per attempt)
    - ValidationFailed: A finished candidate was rejected (recovered per attempt)

Used By:
    - generator.rules: Rule.apply_action, Rule.check_example
    - generator.example_generator: Retry loop
    - generator.multi_digit: Number-wise strategy
    - generator.controller: Wrapped into SessionError
"""

from __future__ import annotations

from typing import Any, Optional


class GeneratorError(Exception):
    """Base error for exercise generation."""
    pass


class GenerationExhausted(GeneratorError):
    """No valid example was produced within the attempt budget."""

    def __init__(self, attempts: int, reason: Optional[str] = None):
        message = f"No valid example after {attempts} attempts"
        if reason:
            message = f"{message} (last failure: {reason})"
        super().__init__(message)
        self.attempts = attempts
        self.reason = reason


class IllegalTransition(GeneratorError):
    """An action moved a rod outside [0, 9]."""

    def __init__(self, state: Any, action: Any, detail: str = ""):
        message = f"Illegal transition from {state!r} by {action!r}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.state = state
        self.action = action


class ValidationFailed(GeneratorError):
    """A fully formed candidate failed final acceptance."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason
