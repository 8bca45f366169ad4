"""Exchange rate averaging."""

from .averager import (
    DEFAULT_CURRENCY,
    DEFAULT_SAMPLE_INTERVAL,
    DEFAULT_WINDOW,
    RateAverager,
    window_capacity,
)

__all__ = [
    "DEFAULT_CURRENCY",
    "DEFAULT_SAMPLE_INTERVAL",
    "DEFAULT_WINDOW",
    "RateAverager",
    "window_capacity",
]
