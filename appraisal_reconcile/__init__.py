"""
Appraisal Annotation Reconciliation Library

Pairs two annotators' labeled text spans by exact text, classifies their
agreement, and lays the classified spans back onto the source document as
an ordered, gap-free sequence of segments.
"""

from .core import (
    AgreementStatus,
    AnnotatedRun,
    AnnotationRecord,
    Document,
    DocumentSegment,
    PlainRun,
    ReconciledSpan,
)
from .reconciler import Reconciliation, classify, reconcile
from .projector import Projection, project
from .judgments import JudgmentStore, ReviewerJudgment, ReviewRow, join_judgments
from .session import ReviewSession
from .adjudicator import Adjudicator, AdjudicationResult
from .errors import AppraisalReconcileError, IngestionError, JudgmentStoreError

__version__ = "0.1.0"

__all__ = [
    "AgreementStatus",
    "AnnotatedRun",
    "AnnotationRecord",
    "Document",
    "DocumentSegment",
    "PlainRun",
    "ReconciledSpan",
    "Reconciliation",
    "classify",
    "reconcile",
    "Projection",
    "project",
    "JudgmentStore",
    "ReviewerJudgment",
    "ReviewRow",
    "join_judgments",
    "ReviewSession",
    "Adjudicator",
    "AdjudicationResult",
    "AppraisalReconcileError",
    "IngestionError",
    "JudgmentStoreError",
]
