"""
Agreement statistics for reconciled annotations.
"""

from .metrics import (
    AgreementStatistics,
    bookmarked_only,
    compute_statistics,
    differences_only,
)

__all__ = [
    "AgreementStatistics",
    "bookmarked_only",
    "compute_statistics",
    "differences_only",
]
