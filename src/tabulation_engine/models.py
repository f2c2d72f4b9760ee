"""Result models for the tabulation engine."""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class JudgeRanking:
    """One judge's total and rank for a single participant."""

    judge_id: str
    total_raw_score: float
    rank: float  # Fractional when tied


@dataclass(frozen=True)
class ParticipantRanking:
    """A participant's full standing within one event."""

    participant_id: str
    participant_name: str
    department_id: str
    judge_rankings: Tuple[JudgeRanking, ...]
    average_rank: float
    total_raw_score_sum: float
    final_rank: float
    percentile_score: float


@dataclass(frozen=True)
class DepartmentStanding:
    """A department's accumulated overall-championship score."""

    department_id: str
    department_name: str
    team_name: str
    college_id: str
    score: float
    event_count: int


@dataclass(frozen=True)
class ScoringStatus:
    """Whether every resolved judge has scored every participant."""

    is_complete: bool
    missing_count: int
    expected_per_participant: int
