"""
Error taxonomy for the onboarding engine.

* ValidationError   – bad user input, message is safe to show as-is
* MissingFieldError – finalize() called before the wizard was complete
* InvalidInputError – a calculator was called outside its domain (a bug)
"""
from __future__ import annotations


class OnboardingError(Exception):
    """Base class for everything raised by the engine."""


class ValidationError(OnboardingError):
    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.message = message


class MissingFieldError(OnboardingError):
    def __init__(self, field: str) -> None:
        super().__init__(f"Missing required onboarding data: {field}")
        self.field = field


class InvalidInputError(OnboardingError, ValueError):
    pass
