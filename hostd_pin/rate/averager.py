"""Rolling average of an exchange rate sampled at a fixed interval."""
import asyncio
import logging
import threading
from collections import deque
from datetime import timedelta
from decimal import Decimal, InvalidOperation
from typing import Deque, Optional, Tuple

from hostd_pin.providers.base import BaseQuoteProvider
from hostd_pin.utils.errors import QuoteUnavailable
from hostd_pin.utils.logging import get_logger
from hostd_pin.utils.scheduling import run_periodic

DEFAULT_CURRENCY = "usd"
DEFAULT_SAMPLE_INTERVAL = timedelta(minutes=5)
DEFAULT_WINDOW = timedelta(hours=48)


def window_capacity(window: timedelta, sample_interval: timedelta) -> int:
    """Number of samples that fit in `window` at one per `sample_interval`."""
    if sample_interval <= timedelta(0):
        raise ValueError("sample_interval must be positive")
    return max(1, window // sample_interval)


class RateAverager:
    """
    Tracks the average exchange rate for a currency over a time window.

    Guarantees:
    - The buffer never holds more than floor(window / sample_interval)
      samples; the oldest sample is evicted first
    - The cached average always matches the buffered samples
    - snapshot() never observes a partially applied refresh
    """

    def __init__(
        self,
        provider: BaseQuoteProvider,
        currency: str = DEFAULT_CURRENCY,
        sample_interval: timedelta = DEFAULT_SAMPLE_INTERVAL,
        window: timedelta = DEFAULT_WINDOW,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the averager.

        Args:
            provider: Quote provider used by refresh()
            currency: Currency code the rate is quoted in
            sample_interval: Period of the background sample loop
            window: Wall-clock span the average covers
            logger: Logger to use; defaults to this module's logger
        """
        self.provider = provider
        self.currency = currency
        self.sample_interval = sample_interval
        self.window = window
        self.capacity = window_capacity(window, sample_interval)
        self.log = logger or get_logger(__name__)

        self._lock = threading.Lock()  # protects _samples and _average
        self._samples: Deque[Decimal] = deque(maxlen=self.capacity)
        self._average = Decimal(0)

    async def refresh(self) -> Decimal:
        """
        Fetch a new quote and fold it into the average.

        Returns:
            The freshly observed rate, not the average

        Raises:
            QuoteUnavailable: If the quote could not be fetched; the buffer
                and average are left unchanged
        """
        try:
            rate = await self.provider.get_quote(self.currency)
        except QuoteUnavailable:
            raise
        except Exception as e:
            raise QuoteUnavailable(f"failed to get exchange rate: {e}") from e

        if not isinstance(rate, Decimal):
            try:
                rate = Decimal(str(rate))
            except (InvalidOperation, ValueError) as e:
                raise QuoteUnavailable(f"invalid exchange rate for {self.currency}: {rate!r}") from e
        if not rate.is_finite() or rate < 0:
            raise QuoteUnavailable(f"invalid exchange rate for {self.currency}: {rate}")

        with self._lock:
            # deque(maxlen=...) drops from the left on overflow
            self._samples.append(rate)
            self._average = sum(self._samples, Decimal(0)) / len(self._samples)
            average = self._average
            count = len(self._samples)

        self.log.debug(
            "exchange rate updated",
            extra={"current": str(rate), "average": str(average), "samples": count},
        )
        return rate

    def snapshot(self) -> Decimal:
        """Return the average as of the last completed refresh."""
        with self._lock:
            return self._average

    def samples(self) -> Tuple[Decimal, ...]:
        """Return the buffered samples, oldest first."""
        with self._lock:
            return tuple(self._samples)

    async def _tick(self) -> None:
        try:
            await self.refresh()
        except QuoteUnavailable as e:
            self.log.error("failed to update exchange rate", extra={"error": str(e)})
        except Exception:
            self.log.exception("failed to update exchange rate")

    async def run(self, shutdown_event: asyncio.Event) -> None:
        """
        Refresh the rate every sample interval until shutdown.

        Failed refreshes are logged and skipped.
        """
        await run_periodic(
            self.sample_interval.total_seconds(),
            self._tick,
            shutdown_event,
            name="rate sampler",
        )
