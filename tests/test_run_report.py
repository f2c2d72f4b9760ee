"""Tests for the report entry point."""

import json

import pytest

from src.snapshot_pipeline.ingestion import IngestionError
from src.snapshot_pipeline.run_report import build_report, run_report
from src.snapshot_pipeline.snapshot_store import snapshot_to_dict


def _write_snapshot(tmp_path, snapshot, name="finals.json"):
    path = tmp_path / name
    path.write_text(json.dumps(snapshot_to_dict(snapshot)))
    return path


class TestBuildReport:
    def test_sections(self, championship_snapshot):
        report = build_report(championship_snapshot)
        assert set(report) == {
            "metadata", "events", "overall_standings",
            "committee_standings", "bearings",
        }
        assert report["metadata"]["total_events"] == 3
        assert report["metadata"]["completed_events"] == 2

    def test_standings_match_aggregation(self, championship_snapshot):
        report = build_report(championship_snapshot)
        assert [s["department_id"] for s in report["overall_standings"]] == ["d2", "d3", "d1"]
        assert [s["department_id"] for s in report["committee_standings"]["k2"]] == ["d1", "d3"]

    def test_single_event(self, championship_snapshot):
        report = build_report(championship_snapshot, event_id="e2")
        assert [e["event_id"] for e in report["events"]] == ["e2"]
        # Standings still cover the whole snapshot
        assert len(report["overall_standings"]) == 3

    def test_bearings_per_committee(self, championship_snapshot):
        report = build_report(championship_snapshot)
        assert set(report["bearings"]) == {"k1", "k2"}


class TestRunReport:
    def test_writes_report(self, tmp_path, scenario_snapshot):
        snapshot_path = _write_snapshot(tmp_path, scenario_snapshot)
        output = run_report(snapshot_path, output_dir=tmp_path / "reports")

        assert output.name == "report_finals.json"
        with open(output) as f:
            report = json.load(f)

        event = report["events"][0]
        assert event["scoring_status"]["is_complete"] is True
        assert [r["participant_id"] for r in event["rankings"]] == ["p2", "p1", "p3"]
        assert [r["percentile_score"] for r in event["rankings"]] == pytest.approx(
            [100.0, 200 / 3, 100 / 3]
        )
        # Still Ongoing, so nothing counts towards the championship
        assert report["overall_standings"] == []

    def test_judge_rankings_serialized(self, tmp_path, scenario_snapshot):
        output = run_report(_write_snapshot(tmp_path, scenario_snapshot), output_dir=tmp_path)
        with open(output) as f:
            top = json.load(f)["events"][0]["rankings"][0]

        assert [j["judge_id"] for j in top["judge_rankings"]] == ["jA", "jB"]
        assert top["average_rank"] == 1.25

    def test_missing_snapshot(self, tmp_path):
        with pytest.raises(IngestionError):
            run_report(tmp_path / "absent.json", output_dir=tmp_path)
