"""Threshold-gated decision loop that pushes prices to hosts."""
import asyncio
import logging
from datetime import timedelta
from decimal import Decimal
from typing import Optional, Sequence

from hostd_pin.decision.models import RoundResult
from hostd_pin.hosts.client import Host, HostUpdater
from hostd_pin.pricing.conversion import TargetPrices, convert_prices
from hostd_pin.rate.averager import RateAverager
from hostd_pin.utils.errors import ConversionFailure, EndpointUpdateFailure
from hostd_pin.utils.logging import get_logger
from hostd_pin.utils.scheduling import run_periodic

DEFAULT_THRESHOLD = Decimal("0.1")
DEFAULT_UPDATE_INTERVAL = timedelta(minutes=5)


def should_act(baseline: Decimal, snapshot: Decimal, threshold: Decimal) -> bool:
    """
    Return True when `snapshot` deviates from `baseline` by more than
    `threshold` (a fraction of the baseline). Equality does not trigger.
    """
    limit = baseline * threshold
    diff = abs(baseline - snapshot)
    return diff > limit


class UpdateDecider:
    """
    Pushes converted prices to every host whenever the averaged rate drifts
    too far from the rate of the last push.
    """

    def __init__(
        self,
        averager: RateAverager,
        updater: HostUpdater,
        hosts: Sequence[Host],
        target: TargetPrices,
        baseline: Decimal,
        threshold: Decimal = DEFAULT_THRESHOLD,
        interval: timedelta = DEFAULT_UPDATE_INTERVAL,
        logger: Optional[logging.Logger] = None,
    ):
        self.averager = averager
        self.updater = updater
        self.hosts = tuple(hosts)
        self.target = target
        self.threshold = threshold
        self.interval = interval
        self.log = logger or get_logger(__name__)
        self._baseline = baseline

    @property
    def baseline(self) -> Decimal:
        """The rate prices were last pushed at."""
        return self._baseline

    async def push_round(self, rate: Decimal) -> RoundResult:
        """
        Convert target prices at `rate` and push them to every host in order.

        Host failures are logged and collected; they never stop the round.

        Raises:
            ConversionFailure: If prices cannot be converted at `rate`; no
                host is contacted
        """
        prices = convert_prices(self.target, rate)
        fields = {
            "rate": str(rate),
            "storage": str(prices.storage),
            "ingress": str(prices.ingress),
            "egress": str(prices.egress),
        }
        result = RoundResult(rate=rate, prices=prices)

        for host in self.hosts:
            try:
                await self.updater.push_price_settings(host, prices)
            except EndpointUpdateFailure as e:
                self.log.error(
                    "failed to update host",
                    extra={**fields, "host": host.address, "error": str(e)},
                )
                result.failures.append(e)
                continue
            except Exception as e:
                self.log.error(
                    "failed to update host",
                    extra={**fields, "host": host.address, "error": str(e)},
                    exc_info=True,
                )
                result.failures.append(EndpointUpdateFailure(host.address, str(e)))
                continue
            result.updated.append(host.address)

        if result.ok:
            self.log.info("updated hosts", extra={**fields, "hosts": len(result.updated)})
        else:
            self.log.warning(
                "update round finished with failures",
                extra={**fields, "failed": result.failed_hosts, "updated": result.updated},
            )
        return result

    async def tick(self) -> Optional[RoundResult]:
        """
        Run one decision step.

        Returns:
            The round result when prices were pushed, None when skipped or
            when conversion failed
        """
        average = self.averager.snapshot()
        if not should_act(self._baseline, average, self.threshold):
            self.log.debug(
                "skipping update",
                extra={"old": str(self._baseline), "new": str(average)},
            )
            return None

        try:
            result = await self.push_round(average)
        except ConversionFailure as e:
            self.log.error(
                "failed to convert prices",
                extra={"rate": str(average), "error": str(e)},
            )
            return None

        # advance even on partial failure so a bad host can't pin the baseline
        self._baseline = average
        return result

    async def _tick(self) -> None:
        try:
            await self.tick()
        except Exception:
            self.log.exception("update round failed")

    async def run(self, shutdown_event: asyncio.Event) -> None:
        """Run the decision loop every interval until shutdown."""
        await run_periodic(
            self.interval.total_seconds(),
            self._tick,
            shutdown_event,
            name="update decider",
        )
