"""Fixed-period scheduling for background loops."""
import asyncio
from typing import Awaitable, Callable

from hostd_pin.utils.logging import get_logger

logger = get_logger(__name__)


async def wait_for_shutdown(shutdown_event: asyncio.Event, timeout: float) -> bool:
    """
    Wait up to `timeout` seconds for the shutdown event.

    Returns:
        True if shutdown was requested, False if the timeout elapsed
    """
    if timeout <= 0:
        return shutdown_event.is_set()
    try:
        await asyncio.wait_for(shutdown_event.wait(), timeout=timeout)
        return True
    except asyncio.TimeoutError:
        return False


async def run_periodic(
    interval: float,
    tick: Callable[[], Awaitable[None]],
    shutdown_event: asyncio.Event,
    name: str = "periodic",
) -> None:
    """
    Call `tick` every `interval` seconds until `shutdown_event` is set.

    Deadlines sit on a fixed grid (start + n * interval) so slow ticks do
    not push later ones back. Deadlines missed while a tick was running are
    dropped rather than fired back to back. The first tick fires one
    interval after start.

    `tick` is responsible for its own error handling; an exception raised
    from it ends the loop.
    """
    if interval <= 0:
        raise ValueError("interval must be positive")

    loop = asyncio.get_running_loop()
    next_deadline = loop.time() + interval
    logger.debug(f"{name} loop started", extra={"interval_seconds": interval})

    while not shutdown_event.is_set():
        if await wait_for_shutdown(shutdown_event, next_deadline - loop.time()):
            break

        await tick()

        next_deadline += interval
        now = loop.time()
        if next_deadline <= now:
            skipped = int((now - next_deadline) // interval) + 1
            logger.warning(
                f"{name} tick overran its period",
                extra={"skipped_ticks": skipped},
            )
            next_deadline += skipped * interval

    logger.debug(f"{name} loop stopped")
