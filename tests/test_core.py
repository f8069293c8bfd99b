"""Tests for core data structures."""

import pytest
from appraisal_reconcile.core import (
    AgreementStatus,
    AnnotatedRun,
    AnnotationRecord,
    Document,
    PlainRun,
    Position,
    ReconciledSpan,
)


class TestDocument:
    """Tests for Document class."""

    def test_create_document(self):
        doc = Document(content="Hello, world!", name="review.txt")
        assert doc.content == "Hello, world!"
        assert doc.name == "review.txt"
        assert doc.char_count == 13

    def test_line_count(self):
        doc = Document(content="Line 1\nLine 2\nLine 3")
        assert doc.line_count == 3

    def test_offset_to_position(self):
        doc = Document(content="Hello\nWorld")

        pos = doc.offset_to_position(0)
        assert pos.line == 0
        assert pos.column == 0

        pos = doc.offset_to_position(6)  # 'W' in World
        assert pos.line == 1
        assert pos.column == 0

    def test_offset_out_of_range(self):
        doc = Document(content="short")
        with pytest.raises(ValueError):
            doc.offset_to_position(6)

    def test_find_from_cursor(self):
        doc = Document(content="was it what it was")
        assert doc.find("was") == 0
        assert doc.find("was", 1) == 15
        assert doc.find("was", 16) == -1

    def test_find_all(self):
        doc = Document(content="the cat and the dog")
        assert doc.find_all("the") == [0, 12]

    def test_find_all_empty_text(self):
        doc = Document(content="abc")
        assert doc.find_all("") == []

    def test_context_is_clipped(self):
        doc = Document(content="0123456789")
        assert doc.context(4, 2, radius=2) == "234567"
        assert doc.context(0, 1, radius=5) == "012345"


class TestAnnotationRecord:
    """Tests for AnnotationRecord class."""

    def test_defaults_are_empty(self):
        record = AnnotationRecord(text="slow")
        assert record.labels() == ("", "", "", "")

    def test_records_are_immutable(self):
        record = AnnotationRecord(text="slow", polarity="negative")
        with pytest.raises(AttributeError):
            record.polarity = "positive"

    def test_from_dict_accepts_camel_case(self):
        record = AnnotationRecord.from_dict({
            "text": "food was great",
            "role": "Affect",
            "mainCategory": "Attitude",
            "subCategory": "Satisfaction",
            "polarity": "positive",
        })
        assert record.main_category == "Attitude"
        assert record.sub_category == "Satisfaction"

    def test_from_dict_missing_fields(self):
        record = AnnotationRecord.from_dict({"text": "slow", "role": None})
        assert record.role == ""
        assert record.to_dict()["polarity"] == ""


class TestReconciledSpan:
    """Tests for ReconciledSpan class."""

    def test_differing_fields(self):
        a = AnnotationRecord(text="x", role="Affect", polarity="positive")
        b = AnnotationRecord(text="x", role="Judgement", polarity="positive")
        span = ReconciledSpan(text="x", annotator_a=a, annotator_b=b, status=AgreementStatus.OVERLAP)
        assert span.differing_fields() == ["role"]

    def test_differing_fields_one_sided(self):
        a = AnnotationRecord(text="x", role="Affect")
        span = ReconciledSpan(text="x", annotator_a=a, annotator_b=None, status=AgreementStatus.MISSING)
        assert span.differing_fields() == []

    def test_to_dict(self):
        b = AnnotationRecord(text="x", polarity="negative")
        span = ReconciledSpan(text="x", annotator_a=None, annotator_b=b, status=AgreementStatus.SPURIOUS)
        d = span.to_dict()
        assert d["status"] == "spurious"
        assert d["annotator_a"] is None
        assert d["annotator_b"]["polarity"] == "negative"


class TestSegments:
    """Tests for PlainRun and AnnotatedRun."""

    def test_plain_run(self):
        run = PlainRun(start=0, end=4, text="The ")
        assert run.length == 4
        assert run.to_dict()["kind"] == "plain"

    def test_annotated_run_reads_status_from_span(self):
        record = AnnotationRecord(text="slow")
        span = ReconciledSpan(text="slow", annotator_a=record, annotator_b=None, status=AgreementStatus.MISSING)
        run = AnnotatedRun(start=5, end=9, text="slow", span=span)
        assert run.status is AgreementStatus.MISSING
        assert run.to_dict()["status"] == "missing"


class TestPosition:
    """Tests for Position class."""

    def test_invalid_offset(self):
        with pytest.raises(ValueError):
            Position(offset=-1)
