"""Conversion of fiat target prices into hostd price settings."""
from dataclasses import dataclass
from decimal import Decimal, DecimalException, ROUND_HALF_UP, localcontext

from hostd_pin.utils.errors import ConversionFailure

# 1 SC = 10^24 hastings
HASTINGS_PER_SC = 10 ** 24
# Prices are configured per TB; hostd wants them per byte
BYTES_PER_TB = 10 ** 12
# Storage is configured per month; hostd wants it per block (~4320 blocks)
BLOCKS_PER_MONTH = 4320
# types.Currency is an unsigned 128-bit integer
MAX_CURRENCY = 2 ** 128 - 1


@dataclass(frozen=True)
class TargetPrices:
    """Target prices in fiat: storage per TB/month, ingress and egress per TB."""

    storage: Decimal = Decimal("1.00")
    ingress: Decimal = Decimal("0.10")
    egress: Decimal = Decimal("10")


@dataclass(frozen=True)
class HostPrices:
    """Host price settings in hastings."""

    storage: int  # per byte per block
    ingress: int  # per byte
    egress: int  # per byte

    def to_settings(self) -> dict:
        """Render as a hostd settings patch; currencies are decimal strings."""
        return {
            "minStoragePrice": str(self.storage),
            "minIngressPrice": str(self.ingress),
            "minEgressPrice": str(self.egress),
        }


def to_hastings(amount: Decimal, rate: Decimal) -> int:
    """
    Convert a fiat amount to hastings at `rate` fiat per SC.

    Raises:
        ConversionFailure: If the rate is not positive or the result is not
            a valid currency value
    """
    try:
        amount = Decimal(amount)
        rate = Decimal(rate)
        if not rate.is_finite() or rate <= 0:
            raise ConversionFailure(f"invalid exchange rate: {rate}")
        # enough precision for a 128-bit result
        with localcontext() as ctx:
            ctx.prec = 60
            hastings = (amount / rate * HASTINGS_PER_SC).to_integral_value(
                rounding=ROUND_HALF_UP
            )
    except DecimalException as e:
        raise ConversionFailure(f"failed to convert {amount} at rate {rate}") from e

    if not hastings.is_finite() or hastings < 0 or hastings > MAX_CURRENCY:
        raise ConversionFailure(f"converted value out of range: {hastings}")
    return int(hastings)


def convert_prices(target: TargetPrices, rate: Decimal) -> HostPrices:
    """Convert fiat target prices to per-byte host prices at `rate`."""
    return HostPrices(
        storage=to_hastings(target.storage, rate) // BLOCKS_PER_MONTH // BYTES_PER_TB,
        ingress=to_hastings(target.ingress, rate) // BYTES_PER_TB,
        egress=to_hastings(target.egress, rate) // BYTES_PER_TB,
    )
