from pathlib import Path

# Base project directory
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Data directories
DATA_DIR = PROJECT_ROOT / "data"
SNAPSHOTS_DIR = DATA_DIR / "snapshots"
REPORTS_DIR = DATA_DIR / "reports"

# Top-level collections of a snapshot document, with the columns each
# record is expected to carry (camelCase, as the storage layer emits them)
SNAPSHOT_COLUMNS = {
    "committees": ["id", "name", "status", "baseBearing"],
    "events": [
        "id", "committeeId", "name", "type", "judgeCount", "status",
        "criteria", "judgeIds", "bearing",
        "ratingTL", "ratingC", "ratingRI", "ratingPI",
    ],
    "judges": ["id", "name", "role"],
    "colleges": ["id", "name"],
    "departments": ["id", "collegeId", "name", "teamName", "color"],
    "participants": ["id", "name", "departmentId", "eventId"],
    "scores": ["eventId", "judgeId", "participantId", "criteriaId", "value"],
}

# Composite key of a score record
SCORE_KEY_COLUMNS = ["eventId", "judgeId", "participantId", "criteriaId"]

# Symlink to the most recent save; kept outside the snapshot_*.json names
LATEST_SNAPSHOT_LINK = "latest_snapshot.json"
