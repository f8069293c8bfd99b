"""Tests for pairing annotators' records by text."""

import pytest

from appraisal_reconcile.core import AgreementStatus, AnnotationRecord, COMPARABLE_FIELDS
from appraisal_reconcile.reconciler import Reconciliation, classify, reconcile


def record(text, role="Affect", main="Attitude", sub="Happiness", polarity="positive"):
    return AnnotationRecord(
        text=text, role=role, main_category=main, sub_category=sub, polarity=polarity
    )


class TestReconcile:
    """Tests for reconcile()."""

    def test_empty_inputs(self):
        result = reconcile([], [])
        assert len(result) == 0
        assert dict(result) == {}

    def test_identical_records_match(self):
        result = reconcile([record("food was great")], [record("food was great")])
        assert len(result) == 1
        assert result["food was great"].status is AgreementStatus.MATCH

    @pytest.mark.parametrize("field_name", COMPARABLE_FIELDS)
    def test_any_field_difference_is_overlap(self, field_name):
        a = record("food was great")
        b = AnnotationRecord(**{**a.to_dict(), field_name: "different"})
        span = reconcile([a], [b])["food was great"]
        assert span.status is AgreementStatus.OVERLAP
        assert span.differing_fields() == [field_name]

    def test_only_in_a_is_missing(self):
        span = reconcile([AnnotationRecord(text="slow", polarity="negative")], [])["slow"]
        assert span.status is AgreementStatus.MISSING
        assert span.annotator_b is None

    def test_only_in_b_is_spurious(self):
        span = reconcile([], [record("slow")])["slow"]
        assert span.status is AgreementStatus.SPURIOUS
        assert span.annotator_a is None

    def test_one_span_per_distinct_text(self):
        records_a = [record("a"), record("b"), record("c")]
        records_b = [record("b"), record("d"), record("a")]
        result = reconcile(records_a, records_b)
        assert len(result) == len({"a", "b", "c", "d"})

    def test_first_seen_order(self):
        result = reconcile([record("b"), record("a")], [record("c"), record("a")])
        assert list(result) == ["b", "a", "c"]

    def test_duplicate_text_keeps_first_record(self):
        first = record("was", polarity="positive")
        second = record("was", polarity="negative")
        result = reconcile([first, second], [record("was", polarity="negative")])
        assert len(result) == 1
        span = result["was"]
        assert span.annotator_a is first
        assert span.status is AgreementStatus.OVERLAP

    def test_empty_text_is_a_valid_key(self):
        result = reconcile([AnnotationRecord(text="")], [AnnotationRecord(text="")])
        assert result[""].status is AgreementStatus.MATCH

    def test_texts_compare_exactly(self):
        result = reconcile([record("Slow")], [record("slow"), record("slow ")])
        assert len(result) == 3
        assert result["Slow"].status is AgreementStatus.MISSING

    def test_accepts_iterators(self):
        result = reconcile(iter([record("x")]), (r for r in [record("x")]))
        assert result["x"].status is AgreementStatus.MATCH

    def test_by_status(self):
        result = reconcile(
            [record("a"), record("b"), record("c")],
            [record("a"), record("b", polarity="negative"), record("d")],
        )
        assert [s.text for s in result.by_status(AgreementStatus.MATCH)] == ["a"]
        assert [s.text for s in result.by_status(AgreementStatus.OVERLAP)] == ["b"]
        assert [s.text for s in result.by_status(AgreementStatus.MISSING)] == ["c"]
        assert [s.text for s in result.by_status(AgreementStatus.SPURIOUS)] == ["d"]

    def test_large_input(self):
        records_a = [record(f"span {i}") for i in range(5000)]
        records_b = [record(f"span {i}") for i in range(2500, 7500)]
        result = reconcile(records_a, records_b)
        assert len(result) == 7500
        assert len(result.by_status(AgreementStatus.MATCH)) == 2500


class TestReconciliation:
    """Tests for the Reconciliation mapping."""

    def test_is_read_only(self):
        result = reconcile([record("x")], [])
        with pytest.raises(TypeError):
            result["y"] = result["x"]

    def test_spans_tuple(self):
        result = reconcile([record("x"), record("y")], [])
        assert isinstance(result.spans, tuple)
        assert [s.text for s in result.spans] == ["x", "y"]

    def test_get_missing_text(self):
        result = Reconciliation()
        assert result.get("nothing") is None

    def test_to_dict(self):
        result = reconcile([record("x")], [record("x")])
        assert result.to_dict()["spans"][0]["status"] == "match"


class TestClassify:
    """Tests for classify()."""

    def test_requires_a_record(self):
        with pytest.raises(ValueError):
            classify(None, None)

    def test_statuses(self):
        a = record("x")
        assert classify(a, a) is AgreementStatus.MATCH
        assert classify(a, None) is AgreementStatus.MISSING
        assert classify(None, a) is AgreementStatus.SPURIOUS
