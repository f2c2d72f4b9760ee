"""Bearing calculator - distributes championship weight across categories.

A category (committee) receives its operator-chosen base bearing plus a
share of a fixed 16-point pool proportional to the rubric weight of its
events. Each event then receives a share of its category's bearing
proportional to its own weight.
"""

import logging
from dataclasses import replace
from typing import Dict, Mapping, Optional, Union

from src.bearing_engine.config import BEARING_POOL, RATING_WEIGHTS
from src.bearing_engine.models import BearingResult, EventBearing, EventRatings
from src.tabulation_engine.scoring_rules import coerce_number
from src.tabulation_engine.snapshot import Event, Snapshot

logger = logging.getLogger(__name__)

RatingsInput = Union[EventRatings, Mapping[str, object]]


class BearingError(ValueError):
    """Raised when bearings are requested for an unknown committee."""


def event_weight(tl: float, c: float, ri: float, pi: float) -> float:
    """Rubric weight: ``0.4*TL + 0.3*C + 0.2*RI + 0.1*PI``."""
    return (
        RATING_WEIGHTS["tl"] * tl
        + RATING_WEIGHTS["c"] * c
        + RATING_WEIGHTS["ri"] * ri
        + RATING_WEIGHTS["pi"] * pi
    )


def saved_ratings(event: Event) -> EventRatings:
    """Ratings as persisted on *event*; missing values count as 0."""
    return EventRatings(
        tl=event.rating_tl or 0.0,
        c=event.rating_c or 0.0,
        ri=event.rating_ri or 0.0,
        pi=event.rating_pi or 0.0,
    )


def to_ratings(value: RatingsInput) -> EventRatings:
    """Normalise edited ratings, coercing entered text to numbers."""
    if isinstance(value, EventRatings):
        return value
    return EventRatings(**{k: coerce_number(value.get(k)) for k in RATING_WEIGHTS})


class BearingCalculator:
    """Compute and apply category and event bearings for a snapshot.

    Ratings being edited for the selected committee are passed in
    alongside the snapshot; every other committee contributes its saved
    ratings only.
    """

    def __init__(self, snapshot: Snapshot):
        self.snapshot = snapshot

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def calculate(
        self,
        committee_id: str,
        base_bearing=None,
        edited_ratings: Optional[Mapping[str, RatingsInput]] = None,
    ) -> BearingResult:
        """Calculate bearings for one committee.

        Formula::

            B_category = B_base + 16 * (W_category / W_all)
            B_event    = B_category * (W_event / W_category)

        ``W_all`` is the saved total over every event, with this
        committee's saved contribution swapped for its edited one. A
        non-positive denominator leaves ``B_category = B_base`` or
        ``B_event = 0``.

        Args:
            committee_id: The committee (category) to calculate.
            base_bearing: Edited base bearing; defaults to the saved one.
            edited_ratings: Unsaved ratings keyed by event id.

        Raises:
            BearingError: If the committee does not exist.
        """
        committee = self.snapshot.get_committee(committee_id)
        if committee is None:
            raise BearingError(f"Committee {committee_id} not found")

        b_base = (
            committee.base_bearing if base_bearing is None
            else coerce_number(base_bearing)
        )
        edited = edited_ratings or {}
        committee_events = self.snapshot.events_for_committee(committee_id)

        current: Dict[str, EventRatings] = {
            e.id: to_ratings(edited[e.id]) if e.id in edited else saved_ratings(e)
            for e in committee_events
        }
        weights = {
            event_id: event_weight(r.tl, r.c, r.ri, r.pi)
            for event_id, r in current.items()
        }
        category_weight = sum(weights.values())

        saved_all = sum(self._saved_weight(e) for e in self.snapshot.events)
        saved_category = sum(self._saved_weight(e) for e in committee_events)
        total_weight = (saved_all - saved_category) + category_weight

        if total_weight > 0:
            category_bearing = b_base + BEARING_POOL * (category_weight / total_weight)
        else:
            category_bearing = b_base

        events = tuple(
            EventBearing(
                event_id=e.id,
                event_name=e.name,
                ratings=current[e.id],
                weight=weights[e.id],
                bearing=(
                    category_bearing * (weights[e.id] / category_weight)
                    if category_weight > 0 else 0.0
                ),
            )
            for e in committee_events
        )

        logger.debug(
            "Bearings for committee %s: base=%.3f, W_cat=%.3f, W_all=%.3f, B_cat=%.3f",
            committee_id, b_base, category_weight, total_weight, category_bearing,
        )

        return BearingResult(
            committee_id=committee_id,
            base_bearing=b_base,
            category_weight=category_weight,
            total_weight=total_weight,
            category_bearing=category_bearing,
            events=events,
        )

    def apply(self, result: BearingResult) -> Snapshot:
        """Write a calculated result back in one step.

        The committee receives the base bearing and every event of the
        result receives its ratings and its computed bearing, so the
        aggregation engine never reads a stale weight.

        Returns:
            A new snapshot; the calculator's snapshot is replaced by it.
        """
        committee = self.snapshot.get_committee(result.committee_id)
        if committee is None:
            raise BearingError(f"Committee {result.committee_id} not found")

        snapshot = self.snapshot.with_committee(
            replace(committee, base_bearing=result.base_bearing)
        )
        for eb in result.events:
            event = snapshot.get_event(eb.event_id)
            if event is None:
                logger.warning("Event %s vanished before bearings were saved", eb.event_id)
                continue
            snapshot = snapshot.with_event(replace(
                event,
                rating_tl=eb.ratings.tl,
                rating_c=eb.ratings.c,
                rating_ri=eb.ratings.ri,
                rating_pi=eb.ratings.pi,
                bearing=eb.bearing,
            ))

        logger.info(
            "Saved bearings for committee %s: B_category=%.3f across %d event(s)",
            result.committee_id, result.category_bearing, len(result.events),
        )
        self.snapshot = snapshot
        return snapshot

    def calculate_all(self) -> Dict[str, BearingResult]:
        """Calculate saved-state bearings for every committee."""
        return {c.id: self.calculate(c.id) for c in self.snapshot.committees}

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _saved_weight(event: Event) -> float:
        r = saved_ratings(event)
        return event_weight(r.tl, r.c, r.ri, r.pi)
