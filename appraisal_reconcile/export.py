"""
Report export: an HTML review report and a flat CSV of reviewer judgments.

Both consume the reconciliation and the reviewer judgments joined on text;
neither modifies them.
"""

import csv
import io
from datetime import datetime
from html import escape
from typing import Mapping, Optional, Union

from .core import AnnotationRecord, ReconciledSpan
from .evaluation.metrics import bookmarked_only, compute_statistics
from .judgments import JudgmentStore, ReviewerJudgment, ReviewRow, join_judgments

Judgments = Union[JudgmentStore, Mapping[str, ReviewerJudgment]]

CSV_HEADER = [
    "Text", "Status",
    "Annotator1_Role", "Annotator1_MainCategory", "Annotator1_SubCategory", "Annotator1_Polarity",
    "Annotator2_Role", "Annotator2_MainCategory", "Annotator2_SubCategory", "Annotator2_Polarity",
    "Reviewer_Role", "Reviewer_MainCategory", "Reviewer_SubCategory", "Reviewer_Polarity",
    "Notes", "Source", "Bookmarked",
]

_STYLE = """
    body { font-family: Arial, sans-serif; margin: 20px; line-height: 1.6; }
    h1, h2, h3 { color: #333; }
    table { border-collapse: collapse; width: 100%; margin-bottom: 20px; }
    th, td { border: 1px solid #ddd; padding: 8px; text-align: left; }
    th { background-color: #f2f2f2; }
    tr:nth-child(even) { background-color: #f9f9f9; }
    .bookmarked { background-color: #fff2cc; }
    .match { background-color: #d9ead3; }
    .overlap { background-color: #fff2cc; }
    .missing { background-color: #f4cccc; }
    .spurious { background-color: #d0e0e3; }
    .summary { background-color: #eee; padding: 15px; border-radius: 5px; margin-bottom: 20px; }
"""


def _labels_cell(record: Optional[AnnotationRecord]) -> str:
    if record is None:
        return "Not annotated"
    return (
        f"Role: {escape(record.role)}<br>"
        f"Main: {escape(record.main_category)}<br>"
        f"Sub: {escape(record.sub_category)}<br>"
        f"Polarity: {escape(record.polarity)}"
    )


def _judgment_cell(judgment: ReviewerJudgment) -> str:
    return (
        f"Role: {escape(judgment.resolved('role'))}<br>"
        f"Main: {escape(judgment.resolved('main_category'))}<br>"
        f"Sub: {escape(judgment.resolved('sub_category'))}<br>"
        f"Polarity: {escape(judgment.resolved('polarity'))}"
    )


def _review_table(rows: list[ReviewRow]) -> str:
    lines = [
        "<table>",
        "<tr><th>Text</th><th>Status</th><th>Annotator 1</th><th>Annotator 2</th>"
        "<th>Reviewer Opinion</th><th>Notes</th><th>Source</th></tr>",
    ]
    for row in rows:
        classes = " ".join(c for c in ("bookmarked" if row.judgment.bookmarked else "", row.status) if c)
        span_a = row.span.annotator_a if row.span else None
        span_b = row.span.annotator_b if row.span else None
        lines.append(
            f'<tr class="{classes}">'
            f"<td>{escape(row.text)}</td>"
            f"<td>{row.status}</td>"
            f"<td>{_labels_cell(span_a)}</td>"
            f"<td>{_labels_cell(span_b)}</td>"
            f"<td>{_judgment_cell(row.judgment)}</td>"
            f"<td>{escape(row.judgment.notes)}</td>"
            f"<td>{escape(row.judgment.source)}</td>"
            "</tr>"
        )
    lines.append("</table>")
    return "\n".join(lines)


def _spans_table(spans: list[ReconciledSpan]) -> str:
    lines = [
        "<table>",
        "<tr><th>Text</th><th>Status</th><th>Annotator 1</th><th>Annotator 2</th></tr>",
    ]
    for span in spans:
        lines.append(
            f'<tr class="{span.status.value}">'
            f"<td>{escape(span.text)}</td>"
            f"<td>{span.status.value}</td>"
            f"<td>{_labels_cell(span.annotator_a)}</td>"
            f"<td>{_labels_cell(span.annotator_b)}</td>"
            "</tr>"
        )
    lines.append("</table>")
    return "\n".join(lines)


def render_html_report(
    reconciliation: Mapping[str, ReconciledSpan],
    judgments: Judgments,
    generated_at: Optional[datetime] = None,
    title: str = "Appraisal Theory Annotation Report",
) -> str:
    """
    Render a standalone HTML review report.

    Args:
        reconciliation: Mapping of text to ReconciledSpan
        judgments: Reviewer judgments keyed by text
        generated_at: Timestamp shown in the summary (now if not specified)
        title: Report title

    Returns:
        The HTML document as a string
    """
    generated_at = generated_at or datetime.now()
    stats = compute_statistics(reconciliation)
    rows = join_judgments(reconciliation, judgments)
    bookmarked = bookmarked_only(rows)

    parts = [
        "<!DOCTYPE html>",
        '<html lang="en">',
        "<head>",
        '<meta charset="UTF-8">',
        f"<title>{escape(title)}</title>",
        f"<style>{_STYLE}</style>",
        "</head>",
        "<body>",
        f"<h1>{escape(title)}</h1>",
        '<div class="summary">',
        "<h2>Summary</h2>",
        f"<p>Total annotations: {stats.total}</p>",
        f"<p>Perfect matches: {stats.matches}</p>",
        f"<p>Overlaps: {stats.overlaps}</p>",
        f"<p>Missing: {stats.missing}</p>",
        f"<p>Spurious: {stats.spurious}</p>",
        f"<p>Agreement rate: {stats.agreement_percent}</p>",
        f"<p>Report generated: {generated_at.strftime('%Y-%m-%d %H:%M:%S')}</p>",
        "</div>",
        "<h2>Typical Examples (Bookmarked)</h2>",
        _review_table(bookmarked) if bookmarked else "<p>No bookmarked examples found.</p>",
        "<h2>All Annotations with Reviewer Opinions</h2>",
        _review_table(rows),
        "<h2>All Annotations</h2>",
        _spans_table(list(reconciliation.values())),
        "</body>",
        "</html>",
    ]
    return "\n".join(parts) + "\n"


def export_csv(
    reconciliation: Mapping[str, ReconciledSpan],
    judgments: Judgments,
) -> str:
    """
    Export one CSV row per reviewer judgment, joined with its span.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)

    for row in join_judgments(reconciliation, judgments):
        record_a = row.span.annotator_a if row.span else None
        record_b = row.span.annotator_b if row.span else None
        judgment = row.judgment
        writer.writerow(
            [row.text, row.status]
            + _record_cells(record_a)
            + _record_cells(record_b)
            + [
                judgment.resolved("role"),
                judgment.resolved("main_category"),
                judgment.resolved("sub_category"),
                judgment.resolved("polarity"),
                judgment.notes,
                judgment.source,
                "Yes" if judgment.bookmarked else "No",
            ]
        )

    return buffer.getvalue()


def _record_cells(record: Optional[AnnotationRecord]) -> list[str]:
    if record is None:
        return ["", "", "", ""]
    return list(record.labels())
