"""
Core data structures for the reconciliation library.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union


COMPARABLE_FIELDS = ("role", "main_category", "sub_category", "polarity")


class AgreementStatus(Enum):
    """How two annotators' judgments on one span relate."""
    MATCH = "match"
    OVERLAP = "overlap"
    MISSING = "missing"  # Only annotator A annotated the span
    SPURIOUS = "spurious"  # Only annotator B annotated the span


@dataclass(frozen=True)
class Position:
    """Represents a position in a document."""
    offset: int  # Character offset from start of document
    line: int = 0  # Line number (0-indexed)
    column: int = 0  # Column number (0-indexed)

    def __post_init__(self):
        if self.offset < 0:
            raise ValueError("Offset must be non-negative")


@dataclass(frozen=True)
class AnnotationRecord:
    """
    One annotator's judgment on one text span.

    The label fields are opaque strings; an absent label is the empty string.
    """
    text: str
    role: str = ""
    main_category: str = ""
    sub_category: str = ""
    polarity: str = ""

    def labels(self) -> tuple[str, str, str, str]:
        """The comparable label fields, in COMPARABLE_FIELDS order."""
        return tuple(getattr(self, name) for name in COMPARABLE_FIELDS)

    def to_dict(self) -> dict:
        return {
            "text": self.text,
            "role": self.role,
            "main_category": self.main_category,
            "sub_category": self.sub_category,
            "polarity": self.polarity,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AnnotationRecord":
        """Create a record from a dictionary (snake_case or camelCase keys)."""
        return cls(
            text=data.get("text") or "",
            role=data.get("role") or "",
            main_category=data.get("main_category", data.get("mainCategory")) or "",
            sub_category=data.get("sub_category", data.get("subCategory")) or "",
            polarity=data.get("polarity") or "",
        )


@dataclass(frozen=True)
class ReconciledSpan:
    """
    Both annotators' records for one distinct text, with their agreement.

    The text is the identity of the span: every record carrying exactly this
    text string is treated as describing the same span.
    """
    text: str
    annotator_a: Optional[AnnotationRecord]
    annotator_b: Optional[AnnotationRecord]
    status: AgreementStatus

    def differing_fields(self) -> list[str]:
        """Comparable fields on which the two annotators disagree."""
        if self.annotator_a is None or self.annotator_b is None:
            return []
        return [
            name for name in COMPARABLE_FIELDS
            if getattr(self.annotator_a, name) != getattr(self.annotator_b, name)
        ]

    def to_dict(self) -> dict:
        return {
            "text": self.text,
            "status": self.status.value,
            "annotator_a": self.annotator_a.to_dict() if self.annotator_a else None,
            "annotator_b": self.annotator_b.to_dict() if self.annotator_b else None,
        }


@dataclass(frozen=True)
class PlainRun:
    """A stretch of the document that carries no annotation."""
    start: int  # inclusive
    end: int  # exclusive
    text: str

    @property
    def length(self) -> int:
        return self.end - self.start

    def to_dict(self) -> dict:
        return {"kind": "plain", "start": self.start, "end": self.end, "text": self.text}


@dataclass(frozen=True)
class AnnotatedRun:
    """A stretch of the document placed for one reconciled span."""
    start: int  # inclusive
    end: int  # exclusive
    text: str
    span: ReconciledSpan

    @property
    def status(self) -> AgreementStatus:
        return self.span.status

    @property
    def length(self) -> int:
        return self.end - self.start

    def to_dict(self) -> dict:
        return {
            "kind": "annotated",
            "start": self.start,
            "end": self.end,
            "text": self.text,
            "status": self.status.value,
        }


DocumentSegment = Union[PlainRun, AnnotatedRun]


@dataclass
class Document:
    """
    Represents the source document the annotators worked on.

    The content is never modified; projections reference offsets in it.
    """
    content: str
    name: str = "untitled"
    metadata: dict = field(default_factory=dict)

    def __post_init__(self):
        # Compute line offsets for efficient line/column calculations
        self._line_offsets: list[int] = [0]
        for i, char in enumerate(self.content):
            if char == '\n':
                self._line_offsets.append(i + 1)

    @property
    def line_count(self) -> int:
        """Number of lines in the document."""
        return len(self._line_offsets)

    @property
    def char_count(self) -> int:
        """Number of characters in the document."""
        return len(self.content)

    def offset_to_position(self, offset: int) -> Position:
        """Convert a character offset to a Position with line/column."""
        if offset < 0 or offset > len(self.content):
            raise ValueError(f"Offset {offset} out of range [0, {len(self.content)}]")

        line = 0
        for i, line_offset in enumerate(self._line_offsets):
            if line_offset > offset:
                break
            line = i

        column = offset - self._line_offsets[line]
        return Position(offset=offset, line=line, column=column)

    def find(self, text: str, start: int = 0) -> int:
        """Offset of the first occurrence of text at or after start, or -1."""
        return self.content.find(text, start)

    def find_all(self, text: str) -> list[int]:
        """Find all occurrences of text, return their offsets."""
        offsets = []
        start = 0
        while text:
            pos = self.content.find(text, start)
            if pos == -1:
                break
            offsets.append(pos)
            start = pos + 1
        return offsets

    def context(self, offset: int, length: int, radius: int = 80) -> str:
        """The text around [offset, offset + length), clipped to the document."""
        begin = max(0, offset - radius)
        end = min(len(self.content), offset + length + radius)
        return self.content[begin:end]
