"""Utility functions for the reconciliation library."""

from .verification import (
    VerificationResult,
    verify_reconstruction,
)

__all__ = [
    "VerificationResult",
    "verify_reconstruction",
]
