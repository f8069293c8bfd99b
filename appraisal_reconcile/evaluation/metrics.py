"""
Agreement statistics and review filters over a reconciliation.
"""

from dataclasses import dataclass, field
from typing import Iterable, Iterator, Mapping

from ..core import AgreementStatus, COMPARABLE_FIELDS, ReconciledSpan
from ..judgments import ReviewRow


@dataclass
class AgreementStatistics:
    """
    Counts of spans per agreement status for one reconciliation.
    """
    total: int = 0
    matches: int = 0
    overlaps: int = 0
    missing: int = 0
    spurious: int = 0

    # Among overlap spans: how many disagree on each label field
    field_disagreements: dict[str, int] = field(
        default_factory=lambda: {name: 0 for name in COMPARABLE_FIELDS}
    )

    @property
    def agreement_rate(self) -> float:
        """Fraction of spans that are full matches (0.0 when there are none)."""
        if self.total == 0:
            return 0.0
        return self.matches / self.total

    @property
    def agreement_percent(self) -> str:
        return f"{self.agreement_rate * 100:.2f}%"

    def count(self, status: AgreementStatus) -> int:
        return {
            AgreementStatus.MATCH: self.matches,
            AgreementStatus.OVERLAP: self.overlaps,
            AgreementStatus.MISSING: self.missing,
            AgreementStatus.SPURIOUS: self.spurious,
        }[status]

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "match": self.matches,
            "overlap": self.overlaps,
            "missing": self.missing,
            "spurious": self.spurious,
            "agreement_rate": self.agreement_rate,
            "field_disagreements": dict(self.field_disagreements),
        }

    def summary(self) -> str:
        lines = [
            "Agreement Summary:",
            "",
            f"Total annotations: {self.total}",
            f"Perfect matches: {self.matches}",
            f"Overlaps: {self.overlaps}",
            f"Missing: {self.missing}",
            f"Spurious: {self.spurious}",
            f"Agreement rate: {self.agreement_percent}",
        ]
        if self.overlaps:
            lines.append("")
            lines.append("Overlap disagreements by field:")
            for name, count in self.field_disagreements.items():
                lines.append(f"  {name}: {count}")
        return '\n'.join(lines)


def compute_statistics(reconciliation: Mapping[str, ReconciledSpan]) -> AgreementStatistics:
    """
    Compute agreement statistics for a reconciliation.
    """
    stats = AgreementStatistics()

    for span in reconciliation.values():
        stats.total += 1
        if span.status is AgreementStatus.MATCH:
            stats.matches += 1
        elif span.status is AgreementStatus.OVERLAP:
            stats.overlaps += 1
            for name in span.differing_fields():
                stats.field_disagreements[name] += 1
        elif span.status is AgreementStatus.MISSING:
            stats.missing += 1
        else:
            stats.spurious += 1

    return stats


def differences_only(reconciliation: Mapping[str, ReconciledSpan]) -> Iterator[ReconciledSpan]:
    """Spans on which the annotators did not fully agree."""
    return (span for span in reconciliation.values() if span.status is not AgreementStatus.MATCH)


def bookmarked_only(rows: Iterable[ReviewRow]) -> list[ReviewRow]:
    """Review rows the reviewer marked as typical examples."""
    return [row for row in rows if row.judgment.bookmarked]
