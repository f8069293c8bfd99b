"""
Reading of source documents and annotator tables.
"""

import csv
import io
import logging
from pathlib import Path
from typing import Iterable, Optional, Union

from ..core import AnnotationRecord, Document
from ..errors import IngestionError
from .base import ColumnMapping, ColumnResolver, RECORD_FIELDS
from .heuristic import HeuristicColumnResolver

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def read_document(path: PathLike) -> Document:
    """Read the source document as UTF-8 text."""
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8-sig")
    except FileNotFoundError:
        raise IngestionError(f"Document not found: {path}")
    except (OSError, UnicodeDecodeError) as e:
        raise IngestionError(f"Error reading document {path}: {e}") from e
    return Document(content=content, name=path.name)


def parse_rows(
    rows: Iterable[dict],
    headers: Optional[list[str]] = None,
    resolver: Optional[ColumnResolver] = None,
) -> list[AnnotationRecord]:
    """
    Convert header-keyed rows into AnnotationRecords.

    Args:
        rows: Rows as dictionaries keyed by header name
        headers: Header names in table order (taken from the first row if omitted)
        resolver: Column resolver (heuristic if not specified)

    Returns:
        One record per row, in input order
    """
    rows = list(rows)
    if headers is None:
        headers = list(rows[0].keys()) if rows else []
    resolver = resolver or HeuristicColumnResolver()
    mapping = resolver.resolve(headers)
    logger.debug("Resolved columns %s", mapping.to_dict())
    if rows and mapping.text is None:
        raise IngestionError(f"No text column among headers {headers}")
    return [_record_from_row(row, mapping) for row in rows]


def _record_from_row(row: dict, mapping: ColumnMapping) -> AnnotationRecord:
    values = {}
    for field_name in RECORD_FIELDS:
        column = mapping.column_for(field_name)
        value = row.get(column) if column is not None else None
        # Values are kept verbatim: text must match the document exactly
        values[field_name] = value if isinstance(value, str) else ""
    return AnnotationRecord(**values)


def parse_csv(text: str, resolver: Optional[ColumnResolver] = None) -> list[AnnotationRecord]:
    """
    Parse CSV text with a header row into AnnotationRecords.

    Blank lines are skipped. A row whose cell count differs from the header
    fails the whole table rather than being padded or truncated.
    """
    reader = csv.reader(io.StringIO(text, newline=""), strict=True)
    try:
        headers = next(reader, None)
        if not headers:
            raise IngestionError("CSV has no header row")
        rows = []
        for cells in reader:
            if not cells:
                continue
            if len(cells) != len(headers):
                raise IngestionError(
                    f"CSV parsing error at line {reader.line_num}: "
                    f"expected {len(headers)} fields, got {len(cells)}"
                )
            rows.append(dict(zip(headers, cells)))
    except csv.Error as e:
        raise IngestionError(f"CSV parsing error at line {reader.line_num}: {e}") from e

    return parse_rows(rows, headers=headers, resolver=resolver)


def load_records(path: PathLike, resolver: Optional[ColumnResolver] = None) -> list[AnnotationRecord]:
    """Load one annotator's records from a CSV file."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8-sig")
    except FileNotFoundError:
        raise IngestionError(f"Annotation file not found: {path}")
    except (OSError, UnicodeDecodeError) as e:
        raise IngestionError(f"Error reading {path}: {e}") from e

    records = parse_csv(text, resolver=resolver)
    logger.debug("Loaded %d records from %s", len(records), path)
    return records
