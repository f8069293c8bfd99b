"""
Base class for column resolvers.

A resolver decides which header of an annotator's table holds each field of
an AnnotationRecord. The reconciliation core never sees headers: it only
receives records with all five fields populated.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Sequence

RECORD_FIELDS = ("text", "role", "main_category", "sub_category", "polarity")


@dataclass(frozen=True)
class ColumnMapping:
    """Header name to read for each record field; None means always empty."""
    text: Optional[str]
    role: Optional[str] = None
    main_category: Optional[str] = None
    sub_category: Optional[str] = None
    polarity: Optional[str] = None

    def column_for(self, field_name: str) -> Optional[str]:
        return getattr(self, field_name)

    def to_dict(self) -> dict:
        return {name: self.column_for(name) for name in RECORD_FIELDS}


class ColumnResolver(ABC):
    """
    Abstract base class for column resolvers.

    Each resolver must implement resolve(), which maps the header row of
    one annotator's table to a ColumnMapping.
    """

    name: str = "base"
    description: str = "Base resolver"

    @abstractmethod
    def resolve(self, headers: Sequence[str]) -> ColumnMapping:
        """
        Map table headers to record fields.

        Args:
            headers: Header names in table order

        Returns:
            ColumnMapping naming the header used for each field
        """
        pass
