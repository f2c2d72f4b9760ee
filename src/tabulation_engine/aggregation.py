"""Overall-championship aggregation across completed events.

Each completed event contributes the percentile score of every college's
best-placed team, multiplied by the event's bearing. Other teams from the
same college contribute nothing for that event.
"""

import logging
from typing import Dict, List, Optional

from src.tabulation_engine.config import DEFAULT_EVENT_WEIGHT
from src.tabulation_engine.models import DepartmentStanding, ParticipantRanking
from src.tabulation_engine.ranking import RankingEngine
from src.tabulation_engine.snapshot import Event, Snapshot

logger = logging.getLogger(__name__)


def event_weight(event: Event) -> float:
    """The event's bearing if positive, else equal weighting."""
    if event.bearing is not None and event.bearing > 0:
        return float(event.bearing)
    return DEFAULT_EVENT_WEIGHT


class AggregationEngine:
    """Accumulate bearing-weighted percentiles per department."""

    def __init__(self, snapshot: Snapshot):
        self.snapshot = snapshot
        self.ranking_engine = RankingEngine(snapshot)

    def overall_standings(
        self, committee_id: Optional[str] = None
    ) -> List[DepartmentStanding]:
        """Compute the overall standings.

        Args:
            committee_id: Restrict to one committee's completed events.
                ``None`` aggregates every completed event.

        Returns:
            Departments that contributed to at least one event, sorted by
            descending score. Equal scores stay tied in snapshot order.
        """
        totals: Dict[str, float] = {d.id: 0.0 for d in self.snapshot.departments}
        counts: Dict[str, int] = {d.id: 0 for d in self.snapshot.departments}

        events = [
            e for e in self.snapshot.events
            if e.is_completed and (committee_id is None or e.committee_id == committee_id)
        ]

        for event in events:
            weight = event_weight(event)
            rankings = self.ranking_engine.rank_event(event.id)
            for top_team in self.best_team_per_college(rankings).values():
                totals[top_team.department_id] += top_team.percentile_score * weight
                counts[top_team.department_id] += 1

        standings = [
            DepartmentStanding(
                department_id=d.id,
                department_name=d.name,
                team_name=d.team_name,
                college_id=d.college_id,
                score=totals[d.id],
                event_count=counts[d.id],
            )
            for d in self.snapshot.departments
            if counts[d.id] > 0
        ]
        standings.sort(key=lambda s: s.score, reverse=True)

        logger.info(
            "Overall standings: %d department(s) across %d completed event(s)%s",
            len(standings), len(events),
            f" in committee {committee_id}" if committee_id else "",
        )
        return standings

    def best_team_per_college(
        self, rankings: List[ParticipantRanking]
    ) -> Dict[str, ParticipantRanking]:
        """Keep the highest-placed entry of each college.

        *rankings* must be in final-rank order. Entries whose department
        or college is unknown are dropped.
        """
        best: Dict[str, ParticipantRanking] = {}
        for ranking in rankings:
            department = self.snapshot.get_department(ranking.department_id)
            if department is None:
                logger.warning(
                    "Participant %s has unknown department %s; not counted",
                    ranking.participant_id, ranking.department_id,
                )
                continue
            if self.snapshot.get_college(department.college_id) is None:
                continue
            best.setdefault(department.college_id, ranking)
        return best


def compute_overall_standings(
    snapshot: Snapshot, committee_id: Optional[str] = None
) -> List[DepartmentStanding]:
    """Aggregate *snapshot*. See :meth:`AggregationEngine.overall_standings`."""
    return AggregationEngine(snapshot).overall_standings(committee_id)
