"""Snapshot data models - a point-in-time view of every tabulation record.

The engines never hold a live reference to storage: callers fetch a
snapshot, pass it in, and receive fresh results computed from it.
"""

from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Tuple

from src.tabulation_engine.config import COMPLETED_STATUS

ScoreKey = Tuple[str, str, str, str]


@dataclass(frozen=True)
class Committee:
    """An event category; carries the operator-supplied base bearing."""

    id: str
    name: str
    status: str = "Active"  # "Active" or "Archived"
    base_bearing: float = 0.0


@dataclass(frozen=True)
class Criterion:
    id: str
    name: str
    percentage: float


@dataclass(frozen=True)
class Event:
    """A judged event and its bearing inputs."""

    id: str
    committee_id: str
    name: str
    type: str = "Individual"  # "Individual" or "Group"
    judge_count: int = 0
    status: str = "Upcoming"  # "Upcoming", "Ongoing" or "Completed"
    criteria: Tuple[Criterion, ...] = ()
    judge_ids: Tuple[str, ...] = ()
    bearing: Optional[float] = None

    # Rating inputs for the bearing rubric
    rating_tl: Optional[float] = None
    rating_c: Optional[float] = None
    rating_ri: Optional[float] = None
    rating_pi: Optional[float] = None

    @property
    def is_completed(self) -> bool:
        return self.status == COMPLETED_STATUS


@dataclass(frozen=True)
class Judge:
    id: str
    name: str
    role: str = ""


@dataclass(frozen=True)
class College:
    id: str
    name: str


@dataclass(frozen=True)
class Department:
    """A competing team; belongs to exactly one college."""

    id: str
    college_id: str
    name: str
    team_name: str = ""
    color: str = ""


@dataclass(frozen=True)
class Participant:
    id: str
    name: str
    department_id: str
    event_id: str


@dataclass(frozen=True)
class Score:
    """One judge's value for one participant on one criterion."""

    event_id: str
    judge_id: str
    participant_id: str
    criteria_id: str
    value: float

    @property
    def key(self) -> ScoreKey:
        return (self.event_id, self.judge_id, self.participant_id, self.criteria_id)


@dataclass(frozen=True)
class Snapshot:
    """Immutable bundle of every record the engines read.

    Lookups of unknown ids return ``None`` rather than raising.
    """

    committees: Tuple[Committee, ...] = ()
    events: Tuple[Event, ...] = ()
    judges: Tuple[Judge, ...] = ()
    colleges: Tuple[College, ...] = ()
    departments: Tuple[Department, ...] = ()
    participants: Tuple[Participant, ...] = ()
    scores: Tuple[Score, ...] = field(default=())

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_event(self, event_id: str) -> Optional[Event]:
        return next((e for e in self.events if e.id == event_id), None)

    def get_committee(self, committee_id: str) -> Optional[Committee]:
        return next((c for c in self.committees if c.id == committee_id), None)

    def get_department(self, department_id: str) -> Optional[Department]:
        return next((d for d in self.departments if d.id == department_id), None)

    def get_college(self, college_id: str) -> Optional[College]:
        return next((c for c in self.colleges if c.id == college_id), None)

    def participants_for_event(self, event_id: str) -> List[Participant]:
        return [p for p in self.participants if p.event_id == event_id]

    def events_for_committee(self, committee_id: str) -> List[Event]:
        return [e for e in self.events if e.committee_id == committee_id]

    def scores_for_event(self, event_id: str) -> List[Score]:
        return [s for s in self.scores if s.event_id == event_id]

    def score_index(self) -> Dict[ScoreKey, float]:
        """Map each composite key to its value (last record wins)."""
        return {s.key: s.value for s in self.scores}

    # ------------------------------------------------------------------
    # Copy-on-write updates
    # ------------------------------------------------------------------

    def with_score(self, score: Score) -> "Snapshot":
        """Upsert *score*, replacing any record with the same key."""
        kept = tuple(s for s in self.scores if s.key != score.key)
        return replace(self, scores=kept + (score,))

    def with_event(self, event: Event) -> "Snapshot":
        """Replace the event with the same id (or append a new one)."""
        if self.get_event(event.id) is None:
            return replace(self, events=self.events + (event,))
        return replace(
            self,
            events=tuple(event if e.id == event.id else e for e in self.events),
        )

    def with_committee(self, committee: Committee) -> "Snapshot":
        """Replace the committee with the same id (or append a new one)."""
        if self.get_committee(committee.id) is None:
            return replace(self, committees=self.committees + (committee,))
        return replace(
            self,
            committees=tuple(
                committee if c.id == committee.id else c for c in self.committees
            ),
        )
