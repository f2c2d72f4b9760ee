"""Compute every tabulation result for a snapshot and write a JSON report.

Usage:
    python -m src.snapshot_pipeline.run_report <snapshot.json> [output_dir]

Examples:
    python -m src.snapshot_pipeline.run_report data/snapshots/snapshot_finals.json
    python -m src.snapshot_pipeline.run_report finals.json /tmp/reports
"""

import json
import logging
import sys
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from src.bearing_engine.bearing_calculator import BearingCalculator
from src.logging_config import setup_logging
from src.snapshot_pipeline.cleaning import SnapshotCleaner
from src.snapshot_pipeline.config import REPORTS_DIR
from src.snapshot_pipeline.ingestion import SnapshotIngester
from src.tabulation_engine.aggregation import AggregationEngine
from src.tabulation_engine.ranking import RankingEngine
from src.tabulation_engine.scoring_rules import check_scoring_completeness
from src.tabulation_engine.snapshot import Snapshot

logger = logging.getLogger(__name__)


def build_report(snapshot: Snapshot, event_id: Optional[str] = None) -> dict:
    """Assemble rankings, standings and bearings into one document.

    Args:
        snapshot: The snapshot to tabulate.
        event_id: Only report this event's leaderboard. Standings and
            bearings are always computed over the whole snapshot.
    """
    ranking_engine = RankingEngine(snapshot)
    aggregation_engine = AggregationEngine(snapshot)
    bearing_calculator = BearingCalculator(snapshot)

    events = [e for e in snapshot.events if event_id is None or e.id == event_id]

    event_reports = []
    for event in events:
        status = check_scoring_completeness(snapshot, event.id)
        if not status.is_complete:
            logger.warning(
                "Event %s: %d participant(s) have incomplete scores",
                event.name, status.missing_count,
            )
        event_reports.append({
            "event_id": event.id,
            "name": event.name,
            "status": event.status,
            "scoring_status": asdict(status),
            "rankings": [asdict(r) for r in ranking_engine.rank_event(event.id)],
        })

    return {
        "metadata": {
            "version": "1.0",
            "generated_at": datetime.now(timezone.utc).isoformat(),
            "total_events": len(snapshot.events),
            "completed_events": sum(1 for e in snapshot.events if e.is_completed),
            "total_participants": len(snapshot.participants),
        },
        "events": event_reports,
        "overall_standings": [asdict(s) for s in aggregation_engine.overall_standings()],
        "committee_standings": {
            c.id: [asdict(s) for s in aggregation_engine.overall_standings(c.id)]
            for c in snapshot.committees
        },
        "bearings": {
            committee_id: asdict(result)
            for committee_id, result in bearing_calculator.calculate_all().items()
        },
    }


def run_report(
    snapshot_path: Path,
    output_dir: Optional[Path] = None,
    event_id: Optional[str] = None,
) -> Path:
    """Load a snapshot, tabulate it and write ``report_<stem>.json``.

    Returns:
        Path to the generated report.

    Raises:
        IngestionError: If the snapshot cannot be read.
    """
    snapshot_path = Path(snapshot_path)
    if output_dir is None:
        output_dir = REPORTS_DIR

    logger.info("Step 1/3: Reading snapshot %s...", snapshot_path)
    raw = SnapshotIngester(snapshot_path).read_all()

    logger.info("Step 2/3: Cleaning snapshot...")
    snapshot = SnapshotCleaner().clean_all(raw)

    logger.info("Step 3/3: Tabulating...")
    report = build_report(snapshot, event_id)

    output_dir.mkdir(parents=True, exist_ok=True)
    output_file = output_dir / f"report_{snapshot_path.stem}.json"
    with open(output_file, "w", encoding="utf-8") as f:
        json.dump(report, f, indent=2)

    logger.info("Report complete! Output: %s", output_file)
    logger.info(
        "  %d event leaderboard(s), %d department(s) in overall standings",
        len(report["events"]), len(report["overall_standings"]),
    )
    return output_file


if __name__ == "__main__":
    setup_logging()

    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(2)

    snapshot_path = Path(sys.argv[1])
    output_dir = Path(sys.argv[2]) if len(sys.argv) > 2 else None

    try:
        output = run_report(snapshot_path, output_dir)
        print(f"Report complete: {output}")
    except Exception:
        logger.exception("Report failed")
        sys.exit(1)
