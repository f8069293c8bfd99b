"""Tests for reviewer judgments and their store."""

import json

import pytest

from appraisal_reconcile.core import AnnotationRecord
from appraisal_reconcile.errors import JudgmentStoreError
from appraisal_reconcile.judgments import (
    JudgmentStore,
    ReviewerJudgment,
    join_judgments,
)
from appraisal_reconcile.reconciler import reconcile


@pytest.fixture
def store(tmp_path):
    return JudgmentStore(tmp_path / "judgments.json")


class TestReviewerJudgment:
    """Tests for ReviewerJudgment."""

    def test_resolved_uses_custom_for_other(self):
        judgment = ReviewerJudgment(role="Other", role_custom="Graduation", polarity="negative")
        assert judgment.resolved("role") == "Graduation"
        assert judgment.resolved("polarity") == "negative"

    def test_resolved_rejects_unknown_field(self):
        with pytest.raises(ValueError):
            ReviewerJudgment().resolved("notes")

    def test_to_dict_omits_empty_fields(self):
        judgment = ReviewerJudgment(main_category="Attitude", bookmarked=True, source="p. 3")
        assert judgment.to_dict() == {"mainCategory": "Attitude", "bookmarked": True}

    def test_from_dict(self):
        judgment = ReviewerJudgment.from_dict(
            {"subCategory": "Other", "subCategoryCustom": "Tenacity", "notes": "hm"},
            source="p. 3",
        )
        assert judgment.resolved("sub_category") == "Tenacity"
        assert judgment.source == "p. 3"
        assert judgment.bookmarked is False

    def test_is_empty(self):
        assert ReviewerJudgment().is_empty()
        assert not ReviewerJudgment(notes="x").is_empty()


class TestJudgmentStore:
    """Tests for JudgmentStore."""

    def test_get_absent_is_empty(self, store):
        assert store.get("slow").is_empty()
        assert "slow" not in store

    def test_update(self, store):
        store.update("slow", "polarity", "negative")
        store.update("slow", "notes", "clearly negative")
        judgment = store.get("slow")
        assert judgment.polarity == "negative"
        assert judgment.notes == "clearly negative"
        assert len(store) == 1

    def test_update_unknown_field(self, store):
        with pytest.raises(ValueError):
            store.update("slow", "colour", "red")

    def test_toggle_bookmark(self, store):
        assert store.toggle_bookmark("slow") is True
        assert store.bookmarked() == ["slow"]
        assert store.toggle_bookmark("slow") is False
        assert store.bookmarked() == []

    def test_mutation_does_not_write(self, store):
        store.update("slow", "polarity", "negative")
        assert not store.path.exists()

    def test_save_and_load(self, store):
        store.update("food was great", "role", "Affect")
        store.toggle_bookmark("food was great")
        store.set_source("food was great", "page 2")
        store.set_source("slow", "page 4")
        store.save()

        data = json.loads(store.path.read_text(encoding="utf-8"))
        assert data["reviewer_opinions"]["food was great"] == {"role": "Affect", "bookmarked": True}
        assert data["source_info"] == {"food was great": "page 2", "slow": "page 4"}
        assert data["last_updated"]

        loaded = JudgmentStore(store.path).load()
        assert loaded.get("food was great").bookmarked is True
        assert loaded.get("food was great").source == "page 2"
        assert loaded.get("slow").source == "page 4"
        assert list(loaded) == ["food was great", "slow"]

    def test_load_missing_file(self, store):
        assert len(store.load()) == 0

    def test_load_corrupt_file(self, store):
        store.path.write_text("{not json", encoding="utf-8")
        with pytest.raises(JudgmentStoreError):
            store.load()

    @pytest.mark.parametrize("payload", [
        [],
        {"reviewer_opinions": ["slow"]},
        {"reviewer_opinions": {"slow": ["role"]}},
        {"source_info": ["page 4"]},
    ])
    def test_load_non_object(self, store, payload):
        store.path.write_text(json.dumps(payload), encoding="utf-8")
        with pytest.raises(JudgmentStoreError):
            store.load()

    def test_no_path(self):
        with pytest.raises(JudgmentStoreError):
            JudgmentStore().save()


class TestJoin:
    """Tests for join_judgments()."""

    def test_join(self, store):
        reconciliation = reconcile([AnnotationRecord(text="slow")], [])
        store.update("slow", "polarity", "negative")
        store.update("gone", "notes", "no longer annotated")

        rows = join_judgments(reconciliation, store)
        assert [row.text for row in rows] == ["slow", "gone"]
        assert rows[0].status == "missing"
        assert rows[0].span is reconciliation["slow"]
        assert rows[1].span is None
        assert rows[1].status == "unknown"

    def test_source_only_text_is_not_a_row(self, store):
        reconciliation = reconcile([AnnotationRecord(text="slow")], [AnnotationRecord(text="was")])
        store.set_source("was", "page 4")
        store.update("slow", "role", "Affect")
        store.set_source("slow", "page 5")

        rows = join_judgments(reconciliation, store)
        assert [row.text for row in rows] == ["slow"]
        assert rows[0].judgment.source == "page 5"

    def test_has_opinion(self):
        assert not ReviewerJudgment(source="page 4").has_opinion()
        assert ReviewerJudgment(bookmarked=True).has_opinion()

    def test_join_plain_mapping(self):
        reconciliation = reconcile([], [AnnotationRecord(text="slow")])
        rows = join_judgments(reconciliation, {"slow": ReviewerJudgment(bookmarked=True)})
        assert rows[0].status == "spurious"
