"""Price update decision loop."""

from .decider import (
    DEFAULT_THRESHOLD,
    DEFAULT_UPDATE_INTERVAL,
    UpdateDecider,
    should_act,
)
from .models import RoundResult

__all__ = [
    "DEFAULT_THRESHOLD",
    "DEFAULT_UPDATE_INTERVAL",
    "RoundResult",
    "UpdateDecider",
    "should_act",
]
