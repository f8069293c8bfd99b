"""
Projection of reconciled spans back onto the source document.

The projection is a greedy left-to-right sweep. Spans are first ordered by
where their text first occurs in the whole document, then placed one at a
time at the first occurrence at or after a cursor. The two searches differ on
purpose: a span whose only occurrences lie before the cursor is dropped, and
which duplicate occurrence gets annotated depends on this ordering.
"""

import html
import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Iterable, Optional, Union

from .core import AnnotatedRun, Document, DocumentSegment, PlainRun, ReconciledSpan

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Projection:
    """
    The document laid out as an ordered, gap-free sequence of segments.

    Concatenating the text of every segment gives back the document.
    """
    document: Document
    segments: tuple[DocumentSegment, ...]
    dropped: tuple[ReconciledSpan, ...] = ()  # Spans that received no segment

    @property
    def placed(self) -> list[ReconciledSpan]:
        """Spans that were placed, in document order."""
        return [seg.span for seg in self.annotated_runs()]

    def annotated_runs(self) -> list[AnnotatedRun]:
        return [seg for seg in self.segments if isinstance(seg, AnnotatedRun)]

    def plain_text(self) -> str:
        """Concatenation of all segments."""
        return "".join(seg.text for seg in self.segments)

    def segment_at(self, offset: int) -> Optional[DocumentSegment]:
        """The non-empty segment covering a document offset, if any."""
        for seg in self.segments:
            if seg.start <= offset < seg.end:
                return seg
        return None

    def to_dict(self) -> dict:
        return {
            "document_name": self.document.name,
            "segments": [seg.to_dict() for seg in self.segments],
            "dropped": [span.text for span in self.dropped],
        }

    def render(self, format: str = "inline") -> str:
        """
        Render the projected document.

        Formats:
        - inline: Wrap each annotated run as [[text]]{status}
        - html: Wrap each annotated run in a span classed by status
        - json: Return the segments as a JSON structure
        """
        if format == "json":
            return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)

        if format == "inline":
            return "".join(
                f"[[{seg.text}]]{{{seg.status.value}}}" if isinstance(seg, AnnotatedRun) else seg.text
                for seg in self.segments
            )

        if format == "html":
            return self._render_html()

        raise ValueError(f"Unknown format: {format}")

    def _render_html(self) -> str:
        parts = []
        for seg in self.segments:
            text = html.escape(seg.text)
            if isinstance(seg, AnnotatedRun):
                parts.append(
                    f'<span class="{seg.status.value}" data-offset="{seg.start}" '
                    f'title="{html.escape(seg.span.text, quote=True)}">{text}</span>'
                )
            else:
                parts.append(f"<span>{text}</span>")
        return f"<div>{''.join(parts)}</div>"


def project(
    document: Union[Document, str],
    spans: Union[Mapping[str, ReconciledSpan], Iterable[ReconciledSpan]],
) -> Projection:
    """
    Lay reconciled spans onto the document as contiguous segments.

    Args:
        document: Document object or raw text
        spans: Reconciled spans, or a text to span mapping such as a Reconciliation

    Returns:
        Projection whose segments reconstruct the document exactly
    """
    if isinstance(document, str):
        document = Document(content=document)
    if isinstance(spans, Mapping):
        spans = list(spans.values())

    content = document.content
    # Processing order uses the unconstrained search; sorted() is stable
    ordered = sorted(spans, key=lambda span: content.find(span.text))

    segments: list[DocumentSegment] = []
    dropped: list[ReconciledSpan] = []
    cursor = 0

    for span in ordered:
        index = content.find(span.text, cursor)
        if index == -1:
            dropped.append(span)
            continue

        if index > cursor:
            segments.append(PlainRun(start=cursor, end=index, text=content[cursor:index]))

        end = index + len(span.text)
        segments.append(AnnotatedRun(start=index, end=end, text=content[index:end], span=span))
        cursor = end

    if cursor < len(content):
        segments.append(PlainRun(start=cursor, end=len(content), text=content[cursor:]))

    if dropped:
        logger.debug(
            "%d of %d spans not placed in %s",
            len(dropped), len(ordered), document.name,
        )

    return Projection(document=document, segments=tuple(segments), dropped=tuple(dropped))
