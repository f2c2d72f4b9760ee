from src.tabulation_engine.aggregation import AggregationEngine, compute_overall_standings
from src.tabulation_engine.models import (
    DepartmentStanding,
    JudgeRanking,
    ParticipantRanking,
    ScoringStatus,
)
from src.tabulation_engine.ranking import RankingEngine, compute_event_ranking
from src.tabulation_engine.scoring_rules import (
    CriteriaRules,
    ScoreRules,
    ValidationError,
    check_scoring_completeness,
    lock_event,
)
from src.tabulation_engine.snapshot import Snapshot

__all__ = [
    "AggregationEngine",
    "CriteriaRules",
    "DepartmentStanding",
    "JudgeRanking",
    "ParticipantRanking",
    "RankingEngine",
    "ScoreRules",
    "ScoringStatus",
    "Snapshot",
    "ValidationError",
    "check_scoring_completeness",
    "compute_event_ranking",
    "compute_overall_standings",
    "lock_event",
]
