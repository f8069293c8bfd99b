"""
Reviewer judgments: the sidecar a reviewer fills in while adjudicating spans.

Judgments are keyed by span text, the same key the reconciliation uses, but
they are owned here and not by the core. Nothing is written to disk until
save() is called.
"""

import json
import logging
from dataclasses import dataclass, fields, replace
from datetime import datetime
from pathlib import Path
from typing import Iterator, Mapping, Optional, Union

from .core import COMPARABLE_FIELDS, ReconciledSpan
from .errors import JudgmentStoreError

logger = logging.getLogger(__name__)

OTHER = "Other"
UNKNOWN_STATUS = "unknown"

# camelCase keys used by the JSON file, snake_case attributes in Python
_JSON_KEYS = {
    "role": "role",
    "main_category": "mainCategory",
    "sub_category": "subCategory",
    "polarity": "polarity",
    "role_custom": "roleCustom",
    "main_category_custom": "mainCategoryCustom",
    "sub_category_custom": "subCategoryCustom",
    "polarity_custom": "polarityCustom",
    "notes": "notes",
    "bookmarked": "bookmarked",
}


@dataclass(frozen=True)
class ReviewerJudgment:
    """
    A reviewer's opinion on one span.

    Each label field holds the value the reviewer settled on, typically one
    annotator's label. The value "Other" means the matching *_custom field
    holds free text instead.
    """
    role: str = ""
    main_category: str = ""
    sub_category: str = ""
    polarity: str = ""
    role_custom: str = ""
    main_category_custom: str = ""
    sub_category_custom: str = ""
    polarity_custom: str = ""
    notes: str = ""
    bookmarked: bool = False
    source: str = ""  # Provenance note, e.g. page number

    def resolved(self, field_name: str) -> str:
        """The effective label for a comparable field."""
        if field_name not in COMPARABLE_FIELDS:
            raise ValueError(f"Unknown label field: {field_name}")
        value = getattr(self, field_name)
        if value == OTHER:
            return getattr(self, f"{field_name}_custom")
        return value

    def is_empty(self) -> bool:
        return self == ReviewerJudgment()

    def has_opinion(self) -> bool:
        """True when anything besides the source was recorded."""
        return not replace(self, source="").is_empty()

    def to_dict(self) -> dict:
        """Opinion fields in the file format (source is stored separately)."""
        return {
            _JSON_KEYS[name]: getattr(self, name)
            for name in _JSON_KEYS
            if getattr(self, name) not in ("", False)
        }

    @classmethod
    def from_dict(cls, data: dict, source: str = "") -> "ReviewerJudgment":
        values = {}
        for name, key in _JSON_KEYS.items():
            if key in data:
                values[name] = bool(data[key]) if name == "bookmarked" else str(data[key] or "")
        return cls(source=source or "", **values)


_EDITABLE_FIELDS = {f.name for f in fields(ReviewerJudgment)}


class JudgmentStore:
    """
    In-memory map of text to ReviewerJudgment with explicit JSON persistence.

    File layout:
        {"reviewer_opinions": {text: {...}}, "source_info": {text: str},
         "last_updated": iso timestamp}
    """

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self.path = Path(path) if path else None
        self._judgments: dict[str, ReviewerJudgment] = {}
        self.last_updated: Optional[str] = None

    def __len__(self) -> int:
        return len(self._judgments)

    def __iter__(self) -> Iterator[str]:
        return iter(self._judgments)

    def __contains__(self, text: str) -> bool:
        return text in self._judgments

    def items(self):
        return self._judgments.items()

    def as_mapping(self) -> Mapping[str, ReviewerJudgment]:
        """Snapshot of the current judgments."""
        return dict(self._judgments)

    def get(self, text: str) -> ReviewerJudgment:
        """Judgment for text, or an empty judgment if none was recorded."""
        return self._judgments.get(text, ReviewerJudgment())

    def update(self, text: str, field_name: str, value) -> ReviewerJudgment:
        """Set one field of the judgment for text."""
        if field_name not in _EDITABLE_FIELDS:
            raise ValueError(f"Unknown judgment field: {field_name}")
        judgment = replace(self.get(text), **{field_name: value})
        self._judgments[text] = judgment
        return judgment

    def set(self, text: str, judgment: ReviewerJudgment) -> None:
        self._judgments[text] = judgment

    def toggle_bookmark(self, text: str) -> bool:
        """Flip the bookmark on text and return the new state."""
        judgment = self.update(text, "bookmarked", not self.get(text).bookmarked)
        return judgment.bookmarked

    def set_source(self, text: str, source: str) -> None:
        self.update(text, "source", source)

    def bookmarked(self) -> list[str]:
        """Texts with a bookmarked judgment, in insertion order."""
        return [text for text, judgment in self._judgments.items() if judgment.bookmarked]

    def load(self) -> "JudgmentStore":
        """Replace the in-memory judgments with the file contents."""
        if self.path is None:
            raise JudgmentStoreError("No judgments path configured")
        if not self.path.exists():
            logger.debug("No judgments file at %s, starting empty", self.path)
            self._judgments = {}
            return self

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise JudgmentStoreError(f"Corrupt judgments file {self.path}: {e}") from e
        except OSError as e:
            raise JudgmentStoreError(f"Error reading judgments file {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise JudgmentStoreError(f"Judgments file {self.path} must contain a JSON object")

        opinions = data.get("reviewer_opinions") or {}
        sources = data.get("source_info") or {}
        for key, section in (("reviewer_opinions", opinions), ("source_info", sources)):
            if not isinstance(section, dict):
                raise JudgmentStoreError(f"'{key}' in {self.path} must be a JSON object")
        for text, opinion in opinions.items():
            if not isinstance(opinion, dict):
                raise JudgmentStoreError(f"Opinion for {text!r} in {self.path} must be a JSON object")

        judgments = {}
        for text in list(opinions) + [t for t in sources if t not in opinions]:
            judgments[text] = ReviewerJudgment.from_dict(
                opinions.get(text) or {}, source=sources.get(text, "")
            )
        self._judgments = judgments
        self.last_updated = data.get("last_updated")
        logger.debug("Loaded %d judgments from %s", len(judgments), self.path)
        return self

    def save(self) -> Path:
        """Write the judgments to the configured path."""
        if self.path is None:
            raise JudgmentStoreError("No judgments path configured")

        self.last_updated = datetime.now().isoformat()
        payload = {
            "reviewer_opinions": {
                text: judgment.to_dict() for text, judgment in self._judgments.items()
            },
            "source_info": {
                text: judgment.source
                for text, judgment in self._judgments.items()
                if judgment.source
            },
            "last_updated": self.last_updated,
        }
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
        except OSError as e:
            raise JudgmentStoreError(f"Error writing judgments file {self.path}: {e}") from e
        return self.path


@dataclass(frozen=True)
class ReviewRow:
    """A reviewer judgment joined with the span it refers to."""
    text: str
    judgment: ReviewerJudgment
    span: Optional[ReconciledSpan] = None  # None when the text is not in the reconciliation

    @property
    def status(self) -> str:
        return self.span.status.value if self.span else UNKNOWN_STATUS


def join_judgments(
    reconciliation: Mapping[str, ReconciledSpan],
    judgments: Union[JudgmentStore, Mapping[str, ReviewerJudgment]],
) -> list[ReviewRow]:
    """
    One row per judged text, in judgment order, joined on text.

    Texts that only carry a source note have no opinion to report and are
    left out.
    """
    return [
        ReviewRow(text=text, judgment=judgment, span=reconciliation.get(text))
        for text, judgment in judgments.items()
        if judgment.has_opinion()
    ]
