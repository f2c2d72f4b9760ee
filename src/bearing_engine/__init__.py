from src.bearing_engine.bearing_calculator import (
    BearingCalculator,
    BearingError,
    event_weight,
)
from src.bearing_engine.models import BearingResult, EventBearing, EventRatings

__all__ = [
    "BearingCalculator",
    "BearingError",
    "BearingResult",
    "EventBearing",
    "EventRatings",
    "event_weight",
]
