"""Tests for saving and loading snapshots."""

import json

import pytest

from src.snapshot_pipeline.snapshot_store import SnapshotStore, snapshot_to_dict


@pytest.fixture
def store(tmp_path):
    return SnapshotStore(storage_dir=tmp_path)


class TestSnapshotToDict:
    def test_camel_case_fields(self, championship_snapshot):
        document = snapshot_to_dict(championship_snapshot)
        event = document["events"][0]

        assert event["committeeId"] == "k1"
        assert event["judgeCount"] == 1
        assert event["criteria"] == [{"id": "c1", "name": "Overall", "percentage": 100.0}]
        assert document["departments"][0]["teamName"] == "Builders"

    def test_serializable(self, championship_snapshot):
        json.dumps(snapshot_to_dict(championship_snapshot))


class TestSaveLoad:
    def test_round_trip(self, store, championship_snapshot):
        store.save(championship_snapshot, "finals")
        assert store.load("finals") == championship_snapshot

    def test_saved_file_records_time(self, store, scenario_snapshot):
        path = store.save(scenario_snapshot, "day1")
        with open(path) as f:
            assert "savedAt" in json.load(f)

    def test_load_missing(self, store):
        assert store.load("nothing") is None

    def test_load_corrupt(self, store, tmp_path):
        (tmp_path / "snapshot_bad.json").write_text("{broken")
        assert store.load("bad") is None

    def test_latest_follows_last_save(self, store, scenario_snapshot, championship_snapshot):
        store.save(scenario_snapshot, "day1")
        store.save(championship_snapshot, "day2")

        assert store.load_latest() == championship_snapshot

    def test_no_latest(self, store):
        assert store.load_latest() is None

    def test_snapshot_named_latest_is_an_ordinary_save(
        self, store, scenario_snapshot, championship_snapshot
    ):
        store.save(championship_snapshot, "finals")
        store.save(scenario_snapshot, "latest")

        assert store.load("finals") == championship_snapshot
        assert store.load("latest") == scenario_snapshot
        assert store.load_latest() == scenario_snapshot
        assert {s["name"] for s in store.list_snapshots()} == {"finals", "latest"}


class TestListAndDelete:
    def test_list_metadata(self, store, scenario_snapshot, championship_snapshot):
        store.save(scenario_snapshot, "day1")
        store.save(championship_snapshot, "day2")

        listed = {s["name"]: s for s in store.list_snapshots()}
        assert set(listed) == {"day1", "day2"}
        assert listed["day2"]["event_count"] == 3
        assert listed["day2"]["completed_events"] == 2
        assert listed["day1"]["score_count"] == 6

    def test_list_skips_corrupt(self, store, scenario_snapshot, tmp_path):
        store.save(scenario_snapshot, "day1")
        (tmp_path / "snapshot_bad.json").write_text("{broken")
        assert [s["name"] for s in store.list_snapshots()] == ["day1"]

    @pytest.mark.parametrize("payload", [
        {"events": None},
        {"events": [], "scores": 7},
        {"events": [1, 2]},
        [],
    ])
    def test_list_skips_malformed_documents(self, store, scenario_snapshot, tmp_path, payload):
        store.save(scenario_snapshot, "day1")
        (tmp_path / "snapshot_bad.json").write_text(json.dumps(payload))
        assert [s["name"] for s in store.list_snapshots()] == ["day1"]

    def test_delete(self, store, scenario_snapshot):
        store.save(scenario_snapshot, "day1")

        assert store.delete("day1") is True
        assert store.load("day1") is None
        assert store.load_latest() is None

    def test_delete_missing(self, store):
        assert store.delete("nothing") is False
