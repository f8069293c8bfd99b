"""
Ingestion of annotator tables and source documents.

Column discovery is pluggable: each resolver implements a different way of
deciding which table header feeds which AnnotationRecord field.
"""

from .base import ColumnMapping, ColumnResolver, RECORD_FIELDS
from .heuristic import HeuristicColumnResolver
from .explicit import ExplicitColumnResolver
from .reader import load_records, parse_csv, parse_rows, read_document

__all__ = [
    "ColumnMapping",
    "ColumnResolver",
    "RECORD_FIELDS",
    "HeuristicColumnResolver",
    "ExplicitColumnResolver",
    "load_records",
    "parse_csv",
    "parse_rows",
    "read_document",
    "RESOLVERS",
    "get_resolver",
    "list_resolvers",
]

# Registry of all available resolvers
RESOLVERS = {
    "heuristic": HeuristicColumnResolver,
    "explicit": ExplicitColumnResolver,
}


def get_resolver(name: str, **kwargs) -> ColumnResolver:
    """Get a resolver by name."""
    if name not in RESOLVERS:
        raise ValueError(f"Unknown resolver: {name}. Available: {list(RESOLVERS.keys())}")
    return RESOLVERS[name](**kwargs)


def list_resolvers() -> list[str]:
    """List all available resolver names."""
    return list(RESOLVERS.keys())
