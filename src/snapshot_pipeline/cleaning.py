"""Cleaning of ingested snapshot collections.

Handles the data-entry quirks the storage layer lets through:
- Numeric fields entered as text (non-numeric text becomes 0)
- Optional numeric fields left blank (kept as missing)
- Repeated score keys (the last write wins)
- Nested criteria and judge-assignment lists that may be absent
"""

import logging
import math
from typing import Dict, List, Optional

import pandas as pd

from src.snapshot_pipeline.config import SCORE_KEY_COLUMNS
from src.tabulation_engine.scoring_rules import coerce_number
from src.tabulation_engine.snapshot import (
    College,
    Committee,
    Criterion,
    Department,
    Event,
    Judge,
    Participant,
    Score,
    Snapshot,
)

logger = logging.getLogger(__name__)


def _is_missing(val) -> bool:
    if val is None or val is pd.NA:
        return True
    return isinstance(val, float) and math.isnan(val)


def _text(val, default: str = "") -> str:
    return default if _is_missing(val) else str(val)


def _optional_number(val) -> Optional[float]:
    """Blank stays ``None``; anything else is coerced (bad text -> 0)."""
    if _is_missing(val) or (isinstance(val, str) and val.strip() == ""):
        return None
    return coerce_number(val)


def _as_list(val) -> List:
    return list(val) if isinstance(val, (list, tuple)) else []


class SnapshotCleaner:
    """Turns ingested DataFrames into an immutable :class:`Snapshot`."""

    # ------------------------------------------------------------------
    # Collection-level cleaning
    # ------------------------------------------------------------------
    @staticmethod
    def clean_scores(df: pd.DataFrame) -> pd.DataFrame:
        """Coerce score values and collapse repeated composite keys.

        A key written more than once keeps its last value, matching the
        storage layer's upsert.
        """
        out = df.copy()
        # Same policy as every other numeric field: commas stripped, junk -> 0
        out["value"] = out["value"].map(coerce_number).astype(float)
        for col in SCORE_KEY_COLUMNS:
            out[col] = out[col].astype(str)

        dupes = out.duplicated(subset=SCORE_KEY_COLUMNS, keep="last")
        if dupes.any():
            logger.warning(
                "Dropping %d superseded score record(s) with repeated keys",
                dupes.sum(),
            )
            out = out.loc[~dupes]

        logger.info("Cleaned scores: %d rows", len(out))
        return out.reset_index(drop=True)

    @staticmethod
    def clean_events(df: pd.DataFrame) -> List[Event]:
        events = []
        for r in df.to_dict("records"):
            criteria = tuple(
                Criterion(
                    id=_text(c.get("id")),
                    name=_text(c.get("name")),
                    percentage=coerce_number(c.get("percentage")),
                )
                for c in _as_list(r["criteria"])
                if isinstance(c, dict)
            )
            events.append(Event(
                id=_text(r["id"]),
                committee_id=_text(r["committeeId"]),
                name=_text(r["name"]),
                type=_text(r["type"], "Individual"),
                judge_count=int(coerce_number(r["judgeCount"])),
                status=_text(r["status"], "Upcoming"),
                criteria=criteria,
                judge_ids=tuple(str(j) for j in _as_list(r["judgeIds"])),
                bearing=_optional_number(r["bearing"]),
                rating_tl=_optional_number(r["ratingTL"]),
                rating_c=_optional_number(r["ratingC"]),
                rating_ri=_optional_number(r["ratingRI"]),
                rating_pi=_optional_number(r["ratingPI"]),
            ))
        logger.info("Cleaned events: %d rows", len(events))
        return events

    # ------------------------------------------------------------------
    # Full cleaning pipeline
    # ------------------------------------------------------------------
    def clean_all(self, raw: Dict[str, pd.DataFrame]) -> Snapshot:
        """Clean every collection and assemble the snapshot.

        Args:
            raw: dict from :meth:`SnapshotIngester.read_all`.
        """
        committees = tuple(
            Committee(
                id=_text(r["id"]),
                name=_text(r["name"]),
                status=_text(r["status"], "Active"),
                base_bearing=coerce_number(r["baseBearing"]),
            )
            for r in raw["committees"].to_dict("records")
        )
        judges = tuple(
            Judge(id=_text(r["id"]), name=_text(r["name"]), role=_text(r["role"]))
            for r in raw["judges"].to_dict("records")
        )
        colleges = tuple(
            College(id=_text(r["id"]), name=_text(r["name"]))
            for r in raw["colleges"].to_dict("records")
        )
        departments = tuple(
            Department(
                id=_text(r["id"]),
                college_id=_text(r["collegeId"]),
                name=_text(r["name"]),
                team_name=_text(r["teamName"]),
                color=_text(r["color"]),
            )
            for r in raw["departments"].to_dict("records")
        )
        participants = tuple(
            Participant(
                id=_text(r["id"]),
                name=_text(r["name"]),
                department_id=_text(r["departmentId"]),
                event_id=_text(r["eventId"]),
            )
            for r in raw["participants"].to_dict("records")
        )
        scores = tuple(
            Score(
                event_id=r["eventId"],
                judge_id=r["judgeId"],
                participant_id=r["participantId"],
                criteria_id=r["criteriaId"],
                value=float(r["value"]),
            )
            for r in self.clean_scores(raw["scores"]).to_dict("records")
        )

        snapshot = Snapshot(
            committees=committees,
            events=tuple(self.clean_events(raw["events"])),
            judges=judges,
            colleges=colleges,
            departments=departments,
            participants=participants,
            scores=scores,
        )
        logger.info(
            "Snapshot ready: %d events (%d completed), %d participants, %d scores",
            len(snapshot.events),
            sum(1 for e in snapshot.events if e.is_completed),
            len(snapshot.participants),
            len(snapshot.scores),
        )
        return snapshot
