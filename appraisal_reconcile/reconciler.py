"""
Pairing of two annotators' records by exact span text.

Each distinct text across both inputs becomes exactly one ReconciledSpan.
When one annotator produced several records with identical text, only the
first of them is kept: later duplicates are dropped, not merged.
"""

import logging
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Optional

from .core import AgreementStatus, AnnotationRecord, ReconciledSpan

logger = logging.getLogger(__name__)


class Reconciliation(Mapping[str, ReconciledSpan]):
    """
    Immutable result of one reconciliation pass.

    Behaves as a read-only mapping from text to ReconciledSpan, iterating in
    first-seen order (annotator A's texts, then texts only B produced).
    """

    def __init__(self, spans: Iterable[ReconciledSpan] = ()):
        by_text = {}
        for span in spans:
            by_text.setdefault(span.text, span)
        self._by_text = MappingProxyType(by_text)

    def __getitem__(self, text: str) -> ReconciledSpan:
        return self._by_text[text]

    def __iter__(self) -> Iterator[str]:
        return iter(self._by_text)

    def __len__(self) -> int:
        return len(self._by_text)

    def __repr__(self) -> str:
        return f"Reconciliation({len(self)} spans)"

    @property
    def spans(self) -> tuple[ReconciledSpan, ...]:
        return tuple(self._by_text.values())

    def by_status(self, status: AgreementStatus) -> list[ReconciledSpan]:
        """All spans with the given status, in first-seen order."""
        return [span for span in self._by_text.values() if span.status is status]

    def to_dict(self) -> dict:
        return {"spans": [span.to_dict() for span in self._by_text.values()]}


def classify(
    record_a: Optional[AnnotationRecord],
    record_b: Optional[AnnotationRecord],
) -> AgreementStatus:
    """Agreement status for the pair of records one span received."""
    if record_a is not None and record_b is not None:
        if record_a.labels() == record_b.labels():
            return AgreementStatus.MATCH
        return AgreementStatus.OVERLAP
    if record_a is not None:
        return AgreementStatus.MISSING
    if record_b is not None:
        return AgreementStatus.SPURIOUS
    raise ValueError("At least one annotator record is required")


def _first_by_text(records: Iterable[AnnotationRecord]) -> dict[str, AnnotationRecord]:
    """Index records by text, keeping the first record for each text."""
    index: dict[str, AnnotationRecord] = {}
    for record in records:
        if record.text not in index:
            index[record.text] = record
    return index


def reconcile(
    records_a: Iterable[AnnotationRecord],
    records_b: Iterable[AnnotationRecord],
) -> Reconciliation:
    """
    Reconcile two annotators' records into one span per distinct text.

    Args:
        records_a: Annotator A's records, in input order
        records_b: Annotator B's records, in input order

    Returns:
        Reconciliation mapping each distinct text to its ReconciledSpan
    """
    index_a = _first_by_text(records_a)
    index_b = _first_by_text(records_b)

    texts = list(index_a)
    texts.extend(text for text in index_b if text not in index_a)

    spans = []
    for text in texts:
        record_a = index_a.get(text)
        record_b = index_b.get(text)
        spans.append(
            ReconciledSpan(
                text=text,
                annotator_a=record_a,
                annotator_b=record_b,
                status=classify(record_a, record_b),
            )
        )

    logger.debug(
        "Reconciled %d texts (%d from A, %d from B)",
        len(spans), len(index_a), len(index_b),
    )
    return Reconciliation(spans)
