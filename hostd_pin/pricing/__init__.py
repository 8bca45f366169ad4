"""Fiat to hastings price conversion."""

from .conversion import (
    BLOCKS_PER_MONTH,
    BYTES_PER_TB,
    HASTINGS_PER_SC,
    HostPrices,
    TargetPrices,
    convert_prices,
    to_hastings,
)

__all__ = [
    "BLOCKS_PER_MONTH",
    "BYTES_PER_TB",
    "HASTINGS_PER_SC",
    "HostPrices",
    "TargetPrices",
    "convert_prices",
    "to_hastings",
]
