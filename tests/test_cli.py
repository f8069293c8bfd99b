"""Tests for the command-line interface."""

import json

import pytest

from appraisal_reconcile.cli import main


@pytest.fixture
def inputs(tmp_path, monkeypatch):
    monkeypatch.delenv("APPRAISAL_JUDGMENTS_PATH", raising=False)
    monkeypatch.delenv("APPRAISAL_RESOLVER", raising=False)
    document = tmp_path / "review.txt"
    document.write_text("The food was great but service was slow.", encoding="utf-8")
    annotator_a = tmp_path / "a.csv"
    annotator_a.write_text(
        "Text,Role,Main,Sub,Polarity\n"
        "food was great,Affect,Attitude,Satisfaction,positive\n"
        "slow,Appreciation,Attitude,Reaction,negative\n",
        encoding="utf-8",
    )
    annotator_b = tmp_path / "b.csv"
    annotator_b.write_text(
        "Text,Role,Main,Sub,Polarity\n"
        "food was great,Affect,Attitude,Satisfaction,positive\n",
        encoding="utf-8",
    )
    return [str(document), str(annotator_a), str(annotator_b)]


class TestCommands:
    """Tests for the CLI subcommands."""

    def test_reconcile_json(self, inputs, capsys):
        assert main(["reconcile", *inputs, "--format", "json"]) == 0
        spans = json.loads(capsys.readouterr().out)
        assert {s["text"]: s["status"] for s in spans} == {
            "food was great": "match",
            "slow": "missing",
        }

    def test_reconcile_differences_only(self, inputs, capsys):
        assert main(["reconcile", *inputs, "-d", "-f", "json"]) == 0
        spans = json.loads(capsys.readouterr().out)
        assert [s["text"] for s in spans] == ["slow"]

    def test_render_inline(self, inputs, capsys):
        assert main(["render", *inputs]) == 0
        out = capsys.readouterr().out
        assert "The [[food was great]]{match} but service was [[slow]]{missing}." in out

    def test_stats(self, inputs, capsys):
        assert main(["stats", *inputs]) == 0
        assert "Agreement rate: 50.00%" in capsys.readouterr().out

    def test_judge_then_export(self, inputs, tmp_path, capsys):
        judgments = str(tmp_path / "judgments.json")
        assert main(["judge", "slow", "-j", judgments, "--polarity", "negative", "--bookmark"]) == 0
        capsys.readouterr()

        output = tmp_path / "report.csv"
        assert main(["export", *inputs, "-j", judgments, "-f", "csv", "-o", str(output)]) == 0
        lines = output.read_text(encoding="utf-8").splitlines()
        assert lines[1].startswith("slow,missing,")
        assert lines[1].endswith(",Yes")

    def test_explicit_columns(self, inputs, capsys):
        assert main(["reconcile", *inputs, "--columns", "text=Polarity", "-f", "json"]) == 0
        spans = json.loads(capsys.readouterr().out)
        assert {s["text"] for s in spans} == {"positive", "negative"}

    def test_suggest_with_mock_provider(self, inputs, capsys):
        assert main(["suggest", *inputs, "--provider", "mock", "--status", "missing"]) == 0
        results = json.loads(capsys.readouterr().out)
        assert [r["text"] for r in results] == ["slow"]

    def test_missing_file(self, inputs, tmp_path, capsys):
        assert main(["stats", str(tmp_path / "nope.txt"), inputs[1], inputs[2]]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_list_resolvers(self, capsys):
        assert main(["list-resolvers"]) == 0
        assert "heuristic" in capsys.readouterr().out

    def test_no_command(self, capsys):
        assert main([]) == 0
