"""Per-event ranking using the Average Ranking System.

Each judge ranks the participants independently by raw score total; a
participant's standing is the mean of those per-judge ranks. Ties at
either stage receive the mean of the tied position range, and the final
rank maps onto a percentile score used for overall aggregation.
"""

import logging
from typing import Dict, List, Sequence

import pandas as pd

from src.tabulation_engine.config import PERCENTILE_SCALE
from src.tabulation_engine.models import JudgeRanking, ParticipantRanking
from src.tabulation_engine.snapshot import Event, Judge, Participant, Snapshot

logger = logging.getLogger(__name__)


def resolve_event_judges(snapshot: Snapshot, event: Event) -> List[Judge]:
    """Return the judges who score *event*.

    Explicitly assigned judges win. Without an assignment the first
    ``judge_count`` judges of the global list are used (legacy behaviour).
    """
    if event.judge_ids:
        assigned = set(event.judge_ids)
        return [j for j in snapshot.judges if j.id in assigned]

    logger.debug(
        "Event %s has no judge assignment; using first %d judges",
        event.id, event.judge_count,
    )
    return list(snapshot.judges[: max(event.judge_count, 0)])


def percentile_score(final_rank: float, participant_count: int) -> float:
    """Map a (possibly fractional) final rank onto ``(0, 100]``.

    Formula::

        K = N - (R - 1)
        W = 100 / N
        percentile = K * W

    Evaluated as ``K * 100 / N`` so rank 1 gives exactly 100.
    """
    if participant_count <= 0:
        return 0.0
    k = participant_count - (final_rank - 1)
    return k * PERCENTILE_SCALE / participant_count


class RankingEngine:
    """Rank the participants of a single event.

    The engine is stateless beyond the snapshot it was given: every call
    recomputes from scratch.
    """

    def __init__(self, snapshot: Snapshot):
        self.snapshot = snapshot

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def rank_event(self, event_id: str) -> List[ParticipantRanking]:
        """Compute the leaderboard for *event_id*.

        Returns:
            List of :class:`ParticipantRanking` sorted by final rank.
            Empty when the event is unknown, has no participants, or has
            no judges to rank with.
        """
        event = self.snapshot.get_event(event_id)
        if event is None:
            logger.warning("Cannot rank unknown event %s", event_id)
            return []

        participants = self.snapshot.participants_for_event(event_id)
        if not participants:
            return []

        judges = resolve_event_judges(self.snapshot, event)
        if not judges:
            logger.warning(
                "Event %s (%s) has no judges; ranking skipped", event.id, event.name
            )
            return []

        totals = self._raw_totals(event_id, participants, judges)

        # Step 2: each judge ranks independently, ties share the mean position
        judge_ranks = totals.rank(axis=0, ascending=False, method="average")

        # Step 3: average rank plus the raw sum used as tie-breaker
        summary = pd.DataFrame({
            "average_rank": judge_ranks.mean(axis=1),
            "total_raw_score_sum": totals.sum(axis=1),
        })

        # Step 4 and 5
        summary = self._assign_final_ranks(summary)
        n = len(summary)
        summary["percentile_score"] = [
            percentile_score(r, n) for r in summary["final_rank"]
        ]

        by_id: Dict[str, Participant] = {p.id: p for p in participants}
        results = []
        for participant_id, row in summary.iterrows():
            participant = by_id[participant_id]
            results.append(ParticipantRanking(
                participant_id=participant_id,
                participant_name=participant.name,
                department_id=participant.department_id,
                judge_rankings=tuple(
                    JudgeRanking(
                        judge_id=j.id,
                        total_raw_score=float(totals.at[participant_id, j.id]),
                        rank=float(judge_ranks.at[participant_id, j.id]),
                    )
                    for j in judges
                ),
                average_rank=float(row["average_rank"]),
                total_raw_score_sum=float(row["total_raw_score_sum"]),
                final_rank=float(row["final_rank"]),
                percentile_score=float(row["percentile_score"]),
            ))

        logger.debug(
            "Ranked event %s: %d participants, %d judges",
            event.id, len(results), len(judges),
        )
        return results

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _raw_totals(
        self,
        event_id: str,
        participants: Sequence[Participant],
        judges: Sequence[Judge],
    ) -> pd.DataFrame:
        """Sum every criterion score per (participant, judge).

        Returns:
            DataFrame indexed by participant id with one column per judge
            id. Pairs without any score total 0.
        """
        participant_ids = [p.id for p in participants]
        judge_ids = [j.id for j in judges]
        totals = pd.DataFrame(0.0, index=participant_ids, columns=judge_ids)

        # Indexed by composite key so a repeated key counts once.
        for (ev_id, judge_id, participant_id, _), value in self.snapshot.score_index().items():
            if ev_id != event_id:
                continue
            if participant_id in totals.index and judge_id in totals.columns:
                totals.at[participant_id, judge_id] += value

        return totals

    @staticmethod
    def _assign_final_ranks(summary: pd.DataFrame) -> pd.DataFrame:
        """Order by average rank, then by raw sum, and assign final ranks.

        Participants tied on both keys share the mean of their positions.
        """
        keys = ["average_rank", "total_raw_score_sum"]
        ordered = summary.sort_values(keys, ascending=[True, False], kind="mergesort")
        ordered = ordered.assign(position=range(1, len(ordered) + 1))
        ordered["final_rank"] = (
            ordered.groupby(keys, sort=False)["position"].transform("mean")
        )
        return ordered.drop(columns="position")


def compute_event_ranking(snapshot: Snapshot, event_id: str) -> List[ParticipantRanking]:
    """Rank one event from *snapshot*. See :meth:`RankingEngine.rank_event`."""
    return RankingEngine(snapshot).rank_event(event_id)
