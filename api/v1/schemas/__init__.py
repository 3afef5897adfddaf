"""Re-export individual schema modules for easy imports."""

from .onboarding import DraftOut, FieldErrorOut, FieldErrorResponse, OnboardingStepIn, PlanOut
from .user import AccountIdentity, UserOut

__all__ = [
    "AccountIdentity",
    "DraftOut",
    "FieldErrorOut",
    "FieldErrorResponse",
    "OnboardingStepIn",
    "PlanOut",
    "UserOut",
]
