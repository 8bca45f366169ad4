"""Main application wiring the rate sampler and the update decider."""

import asyncio
import signal
from typing import Optional

from hostd_pin.config import PinConfig
from hostd_pin.decision.decider import UpdateDecider
from hostd_pin.hosts.client import HostdClient, HostUpdater
from hostd_pin.providers import BaseQuoteProvider, get_provider
from hostd_pin.rate.averager import RateAverager
from hostd_pin.utils.errors import ConfigurationError, ConversionFailure
from hostd_pin.utils.logging import get_logger

logger = get_logger(__name__)


class PinApp:
    """
    Main application that wires everything together.

    Component graph:
    QuoteProvider --> RateAverager --snapshot()--> UpdateDecider --> HostUpdater
                           |                             |
                           └──────── shutdown event ─────┘
    """

    def __init__(
        self,
        config: PinConfig,
        provider: Optional[BaseQuoteProvider] = None,
        updater: Optional[HostUpdater] = None,
    ):
        """
        Initialize the application.

        Args:
            config: Application configuration
            provider: Quote provider; built from config when omitted
            updater: Host updater; a HostdClient when omitted
        """
        self.config = config

        # Validate config
        config.validate()

        if provider is None:
            try:
                provider = get_provider(
                    config.quote.provider,
                    base_url=config.quote.base_url,
                    timeout=config.quote.timeout,
                )
            except ValueError as e:
                raise ConfigurationError(str(e)) from e
        self.provider = provider
        self.updater = updater or HostdClient(timeout=config.hostd_timeout)

        # Components
        self.averager: Optional[RateAverager] = None
        self.decider: Optional[UpdateDecider] = None

        # Control
        self._shutdown_event = asyncio.Event()
        self._tasks: list[asyncio.Task] = []

    @property
    def shutdown_event(self) -> asyncio.Event:
        return self._shutdown_event

    async def start(self) -> None:
        """
        Seed the average, push the initial prices, and start both loops.

        Raises:
            QuoteUnavailable: If the initial exchange rate can't be fetched
        """
        logger.info(
            "Starting hostd-pin",
            extra={"currency": self.config.currency, "hosts": len(self.config.hosts)},
        )

        self.averager = RateAverager(
            self.provider,
            currency=self.config.currency,
            sample_interval=self.config.frequency,
            window=self.config.window,
            logger=get_logger("hostd_pin.rate"),
        )

        initial = await self.averager.refresh()
        logger.info("initial exchange rate", extra={"rate": str(initial)})

        self.decider = UpdateDecider(
            self.averager,
            self.updater,
            self.config.hosts,
            self.config.prices,
            baseline=initial,
            threshold=self.config.threshold,
            interval=self.config.update_interval,
            logger=get_logger("hostd_pin.decision"),
        )

        # set the initial prices; a failed host is retried when the rate moves
        try:
            await self.decider.push_round(initial)
        except ConversionFailure as e:
            logger.error(
                "failed to convert prices",
                extra={"rate": str(initial), "error": str(e)},
            )

        self._tasks = [
            asyncio.create_task(
                self.averager.run(self._shutdown_event),
                name="rate_sampler"
            ),
            asyncio.create_task(
                self.decider.run(self._shutdown_event),
                name="update_decider"
            ),
        ]

        logger.info("hostd-pin started")

    async def stop(self) -> None:
        """Stop the application, letting in-flight calls finish."""
        logger.info("Stopping hostd-pin...")

        # Signal shutdown
        self._shutdown_event.set()

        # Wait for tasks to complete
        if self._tasks:
            results = await asyncio.gather(*self._tasks, return_exceptions=True)
            for task, result in zip(self._tasks, results):
                if isinstance(result, Exception):
                    logger.error(
                        f"{task.get_name()} exited with an error",
                        exc_info=result,
                    )
            self._tasks = []

        logger.info("hostd-pin stopped")

    async def run(self) -> None:
        """
        Run the application until shutdown signal.

        Handles SIGINT and SIGTERM for graceful shutdown.
        """
        loop = asyncio.get_running_loop()

        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, self._handle_signal, sig)

        try:
            await self.start()

            # Wait for shutdown
            await self._shutdown_event.wait()
        finally:
            await self.stop()
            for sig in (signal.SIGINT, signal.SIGTERM):
                loop.remove_signal_handler(sig)

    def _handle_signal(self, sig: signal.Signals) -> None:
        """Handle shutdown signal."""
        logger.info(f"Received {sig.name}, shutting down")
        self._shutdown_event.set()
