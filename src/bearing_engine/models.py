"""Data models for the bearing engine."""

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class EventRatings:
    """The four rubric ratings of one event."""

    tl: float = 0.0
    c: float = 0.0
    ri: float = 0.0
    pi: float = 0.0


@dataclass(frozen=True)
class EventBearing:
    """An event's rubric weight and its share of the category bearing."""

    event_id: str
    event_name: str
    ratings: EventRatings
    weight: float
    bearing: float


@dataclass(frozen=True)
class BearingResult:
    """Bearings for one committee (category) and its events."""

    committee_id: str
    base_bearing: float
    category_weight: float  # Sum of event weights in this category
    total_weight: float  # Adjusted sum over every event in the system
    category_bearing: float
    events: Tuple[EventBearing, ...]

    def get_event(self, event_id: str) -> Optional[EventBearing]:
        return next((e for e in self.events if e.event_id == event_id), None)
