"""
Explicit Column Resolver

Uses header names given by the caller, for tables whose headers the
heuristic would misread.
"""

from typing import Sequence

from .base import ColumnMapping, ColumnResolver, RECORD_FIELDS


class ExplicitColumnResolver(ColumnResolver):
    """Column resolver driven by a caller-supplied field to header mapping."""

    name = "explicit"
    description = "Use caller-supplied header names"

    def __init__(self, columns: dict[str, str]):
        unknown = set(columns) - set(RECORD_FIELDS)
        if unknown:
            raise ValueError(f"Unknown record fields: {sorted(unknown)}. Available: {list(RECORD_FIELDS)}")
        if "text" not in columns:
            raise ValueError("A column for 'text' is required")
        self.columns = dict(columns)

    def resolve(self, headers: Sequence[str]) -> ColumnMapping:
        headers = set(headers)
        return ColumnMapping(**{
            field_name: column if column in headers else None
            for field_name, column in self.columns.items()
        })
