"""JSON ingestion for tabulation snapshots.

A snapshot document holds one list of records per collection (committees,
events, judges, colleges, departments, participants, scores). Each list is
read into its own DataFrame with a guaranteed column set, so records that
omit optional fields still line up.
"""

import json
import logging
from pathlib import Path
from typing import Dict

import pandas as pd

from src.snapshot_pipeline.config import SNAPSHOT_COLUMNS

logger = logging.getLogger(__name__)


class IngestionError(Exception):
    """Raised when a snapshot document cannot be read."""


class SnapshotIngester:
    """Reads a snapshot JSON document into per-collection DataFrames."""

    def __init__(self, snapshot_path: Path):
        self.snapshot_path = Path(snapshot_path)

    def read_document(self) -> Dict:
        """Load the raw JSON document.

        Raises:
            IngestionError: If the file is missing, is not valid JSON, or
                is not a JSON object.
        """
        if not self.snapshot_path.exists():
            raise IngestionError(f"Snapshot file not found: {self.snapshot_path}")

        try:
            with open(self.snapshot_path, "r", encoding="utf-8") as f:
                document = json.load(f)
        except json.JSONDecodeError as e:
            raise IngestionError(f"Corrupt snapshot file {self.snapshot_path}: {e}") from e

        if not isinstance(document, dict):
            raise IngestionError(
                f"Snapshot {self.snapshot_path} must be a JSON object, "
                f"got {type(document).__name__}"
            )
        return document

    def read_all(self) -> Dict[str, pd.DataFrame]:
        """Read every collection of the snapshot.

        Returns:
            Dict keyed by collection name (``events``, ``scores``, ...).

        Raises:
            IngestionError: If a collection is missing or not a list.
        """
        logger.info("Reading snapshot: %s", self.snapshot_path.name)
        return self.frames_from_document(self.read_document())

    @staticmethod
    def frames_from_document(document: Dict) -> Dict[str, pd.DataFrame]:
        """Split an already-parsed document into DataFrames."""
        missing = set(SNAPSHOT_COLUMNS) - document.keys()
        if missing:
            raise IngestionError(f"Snapshot missing required collections: {sorted(missing)}")

        frames: Dict[str, pd.DataFrame] = {}
        for name, columns in SNAPSHOT_COLUMNS.items():
            records = document[name]
            if not isinstance(records, list):
                raise IngestionError(
                    f"Collection {name!r} must be a list, got {type(records).__name__}"
                )
            df = pd.DataFrame.from_records(records) if records else pd.DataFrame()
            frames[name] = df.reindex(columns=columns)

        logger.info(
            "Loaded: %d committees, %d events, %d judges, %d colleges, "
            "%d departments, %d participants, %d scores",
            *(len(frames[name]) for name in SNAPSHOT_COLUMNS),
        )
        return frames
