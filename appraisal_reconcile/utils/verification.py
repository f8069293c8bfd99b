"""
Verification utilities for checking that a projection preserves its document.

The check mirrors how a projection is consumed: concatenate the segments,
then diff the result against the original. Any diff means the segments do
not partition the document.
"""

import difflib
from dataclasses import dataclass
from typing import Iterable, Union

from ..core import Document, DocumentSegment


@dataclass
class VerificationResult:
    """Result of verifying that segments reconstruct a document."""
    preserved: bool
    errors: list[str]
    diff_lines: list[str]  # Unified diff output for debugging
    reconstructed: str  # The concatenated segment text


def verify_reconstruction(
    document: Union[Document, str],
    segments: Iterable[DocumentSegment],
) -> VerificationResult:
    """
    Check that segments are contiguous and reconstruct the document verbatim.

    Args:
        document: The original document
        segments: Segments in the order they will be displayed

    Returns:
        VerificationResult with preservation status and any errors
    """
    original = document.content if isinstance(document, Document) else document
    segments = list(segments)
    errors = []

    cursor = 0
    for i, seg in enumerate(segments):
        if seg.start != cursor:
            kind = "GAP" if seg.start > cursor else "OVERLAP"
            errors.append(f"{kind} before segment {i}: expected offset {cursor}, got {seg.start}")
        if original[seg.start:seg.end] != seg.text:
            errors.append(f"MISMATCH in segment {i} at {seg.start}: '{seg.text[:50]}'")
        cursor = seg.end

    if cursor != len(original):
        errors.append(f"TRUNCATED: segments end at {cursor}, document has {len(original)} chars")

    reconstructed = "".join(seg.text for seg in segments)

    diff = list(difflib.unified_diff(
        original.splitlines(keepends=True),
        reconstructed.splitlines(keepends=True),
        fromfile='original',
        tofile='reconstructed',
        lineterm='',
    ))

    if reconstructed != original and not errors:
        errors.append("Content differs after concatenation")

    return VerificationResult(
        preserved=len(errors) == 0,
        errors=errors,
        diff_lines=diff,
        reconstructed=reconstructed,
    )
