"""
Heuristic Column Resolver

Finds each field by a keyword in its header name, so that tables exported
by different annotation tools ("Text", "Appraisal Role", "Main Category",
"Sub-category", "Polarity") load without configuration.
"""

from typing import Optional, Sequence

from .base import ColumnMapping, ColumnResolver, RECORD_FIELDS


class HeuristicColumnResolver(ColumnResolver):
    """
    Keyword-based column resolver.

    For each field, the first header whose lower-cased name contains the
    field's keyword wins. When no header matches, the header at the field's
    position (text=0, role=1, main=2, sub=3, polarity=4) is used instead.
    """

    name = "heuristic"
    description = "Match headers by keyword, falling back to column position"

    KEYWORDS = {
        "text": "text",
        "role": "role",
        "main_category": "main",
        "sub_category": "sub",
        "polarity": "polarity",
    }

    def __init__(self, keywords: Optional[dict[str, str]] = None):
        self.keywords = {**self.KEYWORDS, **(keywords or {})}

    def resolve(self, headers: Sequence[str]) -> ColumnMapping:
        headers = list(headers)
        resolved = {}
        for position, field_name in enumerate(RECORD_FIELDS):
            keyword = self.keywords[field_name].lower()
            match = next((h for h in headers if keyword in h.lower()), None)
            if match is None and position < len(headers):
                match = headers[position]
            resolved[field_name] = match
        return ColumnMapping(**resolved)
