"""Data-entry rules around scores, criteria and event locking."""

import logging
import math
from dataclasses import replace
from typing import Optional, Sequence, Tuple

from src.tabulation_engine.config import COMPLETED_STATUS, CRITERIA_TOTAL_PERCENTAGE
from src.tabulation_engine.models import ScoringStatus
from src.tabulation_engine.ranking import resolve_event_judges
from src.tabulation_engine.snapshot import Criterion, Score, Snapshot

logger = logging.getLogger(__name__)


class ValidationError(Exception):
    """Raised when a record violates a tabulation rule."""

    pass


def coerce_number(value) -> float:
    """Convert entered text to a float, treating anything unparseable as 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        s = str(value).replace(",", "").strip()
        try:
            number = float(s)
        except ValueError:
            return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def clamp_score(value, criterion: Criterion) -> float:
    """Coerce *value* and keep it within ``[0, criterion.percentage]``."""
    number = coerce_number(value)
    if number > criterion.percentage:
        logger.info(
            "Score %.2f exceeds %s maximum of %.2f; capped",
            number, criterion.name, criterion.percentage,
        )
        return float(criterion.percentage)
    return max(number, 0.0)


class CriteriaRules:
    """Validates an event's criteria list."""

    @staticmethod
    def total_percentage(criteria: Sequence[Criterion]) -> float:
        return sum(c.percentage for c in criteria)

    def validate(self, criteria: Sequence[Criterion]) -> Tuple[bool, Optional[str]]:
        """
        Check that the criteria percentages total exactly 100.

        Returns:
            (is_valid, error_message) - (True, None) if valid
        """
        if not criteria:
            return False, "Event has no criteria"

        total = self.total_percentage(criteria)
        if total != CRITERIA_TOTAL_PERCENTAGE:
            return False, (
                f"Total percentage must be exactly "
                f"{CRITERIA_TOTAL_PERCENTAGE:g}% (currently {total:g}%)"
            )
        return True, None

    def can_add(
        self, criteria: Sequence[Criterion], percentage: float
    ) -> Tuple[bool, Optional[str]]:
        """Check whether a new criterion of *percentage* still fits."""
        if percentage <= 0:
            return False, "Criterion percentage must be positive"
        if self.total_percentage(criteria) + percentage > CRITERIA_TOTAL_PERCENTAGE:
            return False, (
                f"Total percentage cannot exceed {CRITERIA_TOTAL_PERCENTAGE:g}%"
            )
        return True, None


class ScoreRules:
    """Gatekeeper for score writes against a snapshot."""

    def __init__(self, snapshot: Snapshot):
        self.snapshot = snapshot
        self.criteria_rules = CriteriaRules()

    def accept_score(
        self,
        event_id: str,
        judge_id: str,
        participant_id: str,
        criteria_id: str,
        value,
    ) -> Snapshot:
        """Validate, clamp and upsert a score.

        Returns:
            A new snapshot containing the score.

        Raises:
            ValidationError: If the event is locked or unknown, its
                criteria are invalid, or the judge, participant or
                criterion does not belong to it.
        """
        event = self.snapshot.get_event(event_id)
        if event is None:
            raise ValidationError(f"Event {event_id} not found")
        if event.status == COMPLETED_STATUS:
            raise ValidationError(f"Event {event.name} is locked")

        valid, error = self.criteria_rules.validate(event.criteria)
        if not valid:
            raise ValidationError(f"Event {event.name}: {error}")

        criterion = next((c for c in event.criteria if c.id == criteria_id), None)
        if criterion is None:
            raise ValidationError(
                f"Criterion {criteria_id} does not belong to event {event.name}"
            )

        participant = next(
            (p for p in self.snapshot.participants_for_event(event_id)
             if p.id == participant_id),
            None,
        )
        if participant is None:
            raise ValidationError(
                f"Participant {participant_id} is not entered in event {event.name}"
            )

        judge_ids = {j.id for j in resolve_event_judges(self.snapshot, event)}
        if judge_id not in judge_ids:
            raise ValidationError(
                f"Judge {judge_id} is not assigned to event {event.name}"
            )

        score = Score(
            event_id=event_id,
            judge_id=judge_id,
            participant_id=participant_id,
            criteria_id=criteria_id,
            value=clamp_score(value, criterion),
        )
        self.snapshot = self.snapshot.with_score(score)
        return self.snapshot


def check_scoring_completeness(snapshot: Snapshot, event_id: str) -> ScoringStatus:
    """Count participants still missing scores from the event's judges."""
    event = snapshot.get_event(event_id)
    if event is None:
        return ScoringStatus(is_complete=False, missing_count=0, expected_per_participant=0)

    judge_ids = {j.id for j in resolve_event_judges(snapshot, event)}
    criteria_ids = {c.id for c in event.criteria}
    expected = len(judge_ids) * len(criteria_ids)

    # Distinct keys only; a repeated key is one score
    keys = {s.key for s in snapshot.scores_for_event(event_id)}
    scored = {}
    for (_, judge_id, participant_id, criteria_id) in keys:
        if judge_id in judge_ids and criteria_id in criteria_ids:
            scored[participant_id] = scored.get(participant_id, 0) + 1

    missing = sum(
        1 for p in snapshot.participants_for_event(event_id)
        if scored.get(p.id, 0) < expected
    )
    return ScoringStatus(
        is_complete=missing == 0,
        missing_count=missing,
        expected_per_participant=expected,
    )


def lock_event(snapshot: Snapshot, event_id: str) -> Snapshot:
    """Mark an event Completed. Locking is one-way.

    Raises:
        ValidationError: If the event does not exist.
    """
    event = snapshot.get_event(event_id)
    if event is None:
        raise ValidationError(f"Event {event_id} not found")
    if event.status == COMPLETED_STATUS:
        return snapshot

    status = check_scoring_completeness(snapshot, event_id)
    if not status.is_complete:
        logger.warning(
            "Locking event %s with %d participant(s) missing scores",
            event.name, status.missing_count,
        )

    logger.info("Locked event %s (%s)", event.id, event.name)
    return snapshot.with_event(replace(event, status=COMPLETED_STATUS))
