"""
A review session: one document, two annotators, one reconciliation.
"""

from dataclasses import dataclass
from typing import Optional

from .config import ReviewConfig
from .core import AnnotationRecord, Document
from .errors import IngestionError
from .ingestion import ColumnResolver, get_resolver, load_records, read_document
from .projector import Projection, project
from .reconciler import Reconciliation, reconcile


@dataclass(frozen=True)
class ReviewSession:
    """
    Snapshot of one reconciliation run and its projection.

    A session is never updated in place; when any input changes, build a
    new one with from_inputs() or load().
    """
    document: Document
    records_a: tuple[AnnotationRecord, ...]
    records_b: tuple[AnnotationRecord, ...]
    reconciliation: Reconciliation
    projection: Projection

    @classmethod
    def from_inputs(
        cls,
        document: Document,
        records_a: list[AnnotationRecord],
        records_b: list[AnnotationRecord],
    ) -> "ReviewSession":
        reconciliation = reconcile(records_a, records_b)
        return cls(
            document=document,
            records_a=tuple(records_a),
            records_b=tuple(records_b),
            reconciliation=reconciliation,
            projection=project(document, reconciliation),
        )

    @classmethod
    def load(cls, config: ReviewConfig, resolver: Optional[ColumnResolver] = None) -> "ReviewSession":
        """Read all three inputs named by config and reconcile them."""
        if not config.inputs_ready:
            raise IngestionError("A document and both annotator files are required")
        if resolver is None:
            resolver = get_resolver(config.resolver)
        return cls.from_inputs(
            read_document(config.document_path),
            load_records(config.annotator_a_path, resolver=resolver),
            load_records(config.annotator_b_path, resolver=resolver),
        )
