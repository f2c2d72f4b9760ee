"""Snapshot persistence - save and load snapshots to/from JSON files."""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

from src.snapshot_pipeline.cleaning import SnapshotCleaner
from src.snapshot_pipeline.config import LATEST_SNAPSHOT_LINK, SNAPSHOTS_DIR
from src.snapshot_pipeline.ingestion import IngestionError, SnapshotIngester
from src.tabulation_engine.snapshot import Snapshot

logger = logging.getLogger(__name__)


def snapshot_to_dict(snapshot: Snapshot) -> Dict:
    """Convert a Snapshot to the camelCase document the storage layer uses."""
    return {
        "committees": [
            {
                "id": c.id,
                "name": c.name,
                "status": c.status,
                "baseBearing": c.base_bearing,
            }
            for c in snapshot.committees
        ],
        "events": [
            {
                "id": e.id,
                "committeeId": e.committee_id,
                "name": e.name,
                "type": e.type,
                "judgeCount": e.judge_count,
                "status": e.status,
                "criteria": [
                    {"id": c.id, "name": c.name, "percentage": c.percentage}
                    for c in e.criteria
                ],
                "judgeIds": list(e.judge_ids),
                "bearing": e.bearing,
                "ratingTL": e.rating_tl,
                "ratingC": e.rating_c,
                "ratingRI": e.rating_ri,
                "ratingPI": e.rating_pi,
            }
            for e in snapshot.events
        ],
        "judges": [
            {"id": j.id, "name": j.name, "role": j.role} for j in snapshot.judges
        ],
        "colleges": [{"id": c.id, "name": c.name} for c in snapshot.colleges],
        "departments": [
            {
                "id": d.id,
                "collegeId": d.college_id,
                "name": d.name,
                "teamName": d.team_name,
                "color": d.color,
            }
            for d in snapshot.departments
        ],
        "participants": [
            {
                "id": p.id,
                "name": p.name,
                "departmentId": p.department_id,
                "eventId": p.event_id,
            }
            for p in snapshot.participants
        ],
        "scores": [
            {
                "eventId": s.event_id,
                "judgeId": s.judge_id,
                "participantId": s.participant_id,
                "criteriaId": s.criteria_id,
                "value": s.value,
            }
            for s in snapshot.scores
        ],
    }


class SnapshotStore:
    """Handles saving and loading snapshots to/from JSON files."""

    def __init__(self, storage_dir: Optional[Path] = None):
        self.storage_dir = storage_dir or SNAPSHOTS_DIR
        self.storage_dir.mkdir(parents=True, exist_ok=True)
        self.cleaner = SnapshotCleaner()

    def save(self, snapshot: Snapshot, name: str) -> Path:
        """Save *snapshot* as ``snapshot_<name>.json`` and mark it latest.

        Returns:
            Path to the saved file.
        """
        filepath = self.storage_dir / f"snapshot_{name}.json"

        document = snapshot_to_dict(snapshot)
        document["savedAt"] = datetime.now(timezone.utc).isoformat()

        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(document, f, indent=2)

        self._update_latest_link(filepath)

        logger.info(
            "Saved snapshot %s (%d events, %d scores) to %s",
            name, len(snapshot.events), len(snapshot.scores), filepath,
        )
        return filepath

    def load(self, name: str) -> Optional[Snapshot]:
        """Load a saved snapshot.

        Returns:
            Snapshot if found and readable, None otherwise.
        """
        return self._load_file(self.storage_dir / f"snapshot_{name}.json")

    def load_latest(self) -> Optional[Snapshot]:
        """Load the most recently saved snapshot, if any."""
        latest_link = self.storage_dir / LATEST_SNAPSHOT_LINK
        if not latest_link.is_symlink():
            return None
        return self._load_file(latest_link.resolve())

    def list_snapshots(self) -> List[Dict]:
        """List saved snapshots with metadata, most recent first."""
        snapshots = []

        for filepath in self.storage_dir.glob("snapshot_*.json"):
            if filepath.is_symlink():
                continue

            try:
                with open(filepath, "r", encoding="utf-8") as f:
                    data = json.load(f)

                events = data.get("events", [])
                snapshots.append({
                    "name": filepath.stem[len("snapshot_"):],
                    "saved_at": data.get("savedAt", ""),
                    "event_count": len(events),
                    "completed_events": sum(
                        1 for e in events if e.get("status") == "Completed"
                    ),
                    "score_count": len(data.get("scores", [])),
                })
            except (json.JSONDecodeError, OSError, AttributeError, TypeError) as e:
                logger.warning("Skipping corrupt snapshot file %s: %s", filepath, e)
                continue

        return sorted(snapshots, key=lambda x: x["saved_at"], reverse=True)

    def delete(self, name: str) -> bool:
        """Delete a saved snapshot. Returns False if it did not exist."""
        filepath = self.storage_dir / f"snapshot_{name}.json"
        if not filepath.exists():
            return False

        latest_link = self.storage_dir / LATEST_SNAPSHOT_LINK
        if latest_link.is_symlink() and latest_link.resolve() == filepath.resolve():
            latest_link.unlink()

        filepath.unlink()
        logger.info("Deleted snapshot %s", name)
        return True

    def _load_file(self, filepath: Path) -> Optional[Snapshot]:
        if not filepath.exists():
            logger.warning("Snapshot file not found: %s", filepath)
            return None

        try:
            raw = SnapshotIngester(filepath).read_all()
        except IngestionError as e:
            logger.warning("Unreadable snapshot %s: %s", filepath, e)
            return None

        logger.info("Loaded snapshot from %s", filepath)
        return self.cleaner.clean_all(raw)

    def _update_latest_link(self, filepath: Path):
        """Point the latest symlink at *filepath*."""
        latest_link = self.storage_dir / LATEST_SNAPSHOT_LINK

        if latest_link.exists() or latest_link.is_symlink():
            latest_link.unlink()

        latest_link.symlink_to(filepath.name)
