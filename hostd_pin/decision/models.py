from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import List

from hostd_pin.pricing.conversion import HostPrices
from hostd_pin.utils.errors import EndpointUpdateFailure


@dataclass
class RoundResult:
    """Outcome of pushing prices to every managed host.

    A round always visits every host; `failures` holds one entry per host
    that could not be updated.
    """

    rate: Decimal
    prices: HostPrices
    updated: List[str] = field(default_factory=list)  # host addresses
    failures: List[EndpointUpdateFailure] = field(default_factory=list)
    completed_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def failed_hosts(self) -> List[str]:
        return [f.address for f in self.failures]
