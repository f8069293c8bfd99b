"""
Exceptions raised by the collaborators around the reconciliation core.

The core itself (reconcile, project) never raises on its own.
"""


class AppraisalReconcileError(Exception):
    """Base class for errors raised by this package."""


class IngestionError(AppraisalReconcileError, ValueError):
    """An annotator file or source document could not be read or parsed."""


class JudgmentStoreError(AppraisalReconcileError, ValueError):
    """The reviewer judgment file could not be read or written."""
