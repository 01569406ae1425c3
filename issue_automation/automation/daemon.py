"""Runs the automation repeatedly on a fixed interval until told to stop."""

import asyncio
import os
import signal
import time
from enum import Enum
from typing import Any, Awaitable, Callable

import structlog

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

SHUTDOWN_SIGNALS = tuple(
    sig for sig in (getattr(signal, name, None) for name in ("SIGINT", "SIGTERM", "SIGQUIT")) if sig is not None
)
"""Termination-family signals available on this platform."""


class SchedulerState(str, Enum):
    """Lifecycle states of the daemon scheduler."""

    IDLE = "idle"
    RUNNING = "running"
    WAITING = "waiting"
    SHUTTING_DOWN = "shutting_down"
    STOPPED = "stopped"


class DaemonScheduler:
    """Invokes a tick coroutine, waits a fixed interval, and repeats.

    The next tick is armed only after the previous one has finished, so ticks
    never overlap however long they take. A shutdown request does not interrupt
    a tick in flight; it cancels the pending timer and stops the loop once the
    current tick, if any, returns. A second request while that is still
    happening exits the process immediately with code 1.
    """

    def __init__(
        self,
        tick: Callable[[], Awaitable[Any]],
        interval_ms: int,
        force_exit: Callable[[int], Any] = os._exit,
    ) -> None:
        """Initialize the scheduler with the tick to run and the pause between ticks."""
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be a positive number, got {interval_ms}")
        self.tick = tick
        self.interval_ms = interval_ms
        self.force_exit = force_exit
        self.state = SchedulerState.IDLE
        self.run_count = 0
        self._shutdown_requested = False
        self._started = False
        self._timer: asyncio.TimerHandle | None = None
        self._wakeup: asyncio.Future[bool] | None = None

    @property
    def shutdown_requested(self) -> bool:
        """Whether shutdown has been requested."""
        return self._shutdown_requested

    def install_signal_handlers(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        """Route SIGINT, SIGTERM and SIGQUIT to shutdown()."""
        loop = loop or asyncio.get_running_loop()
        for sig in SHUTDOWN_SIGNALS:
            loop.add_signal_handler(sig, self.shutdown, sig.name)

    async def start(self) -> None:
        """Run ticks until shutdown is requested. The first tick runs immediately."""
        if self._shutdown_requested and not self._started:
            self.state = SchedulerState.STOPPED
            logger.info("Shutdown requested before start, not running")
            return
        if self.state != SchedulerState.IDLE:
            raise RuntimeError(f"Scheduler cannot be started from state '{self.state.value}'")
        self._started = True
        loop = asyncio.get_running_loop()
        logger.info("Daemon mode started", interval_seconds=self.interval_ms / 1000)

        while not self._shutdown_requested:
            self.state = SchedulerState.RUNNING
            await self._run_tick()
            if self._shutdown_requested:
                break

            self.state = SchedulerState.WAITING
            self._wakeup = loop.create_future()
            self._timer = loop.call_later(self.interval_ms / 1000, self._on_timer)
            logger.debug("Next run scheduled", interval_seconds=self.interval_ms / 1000)
            fired = await self._wakeup
            self._timer = None
            self._wakeup = None
            if fired:
                logger.info("Running scheduled automation check", run=self.run_count + 1)

        self.state = SchedulerState.STOPPED
        logger.info("Shutdown complete", runs=self.run_count)

    def shutdown(self, reason: str = "shutdown requested") -> None:
        """Request a graceful stop, or force an exit if one is already under way."""
        if self.state == SchedulerState.STOPPED:
            return
        if self._shutdown_requested:
            logger.warning("Force shutdown", reason=reason)
            self.force_exit(1)
            return

        self._shutdown_requested = True
        self.state = SchedulerState.SHUTTING_DOWN
        logger.info("Shutting down gracefully", reason=reason)

        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
            logger.info("Canceled pending automation timer")
        if self._wakeup is not None and not self._wakeup.done():
            self._wakeup.set_result(False)

    def _on_timer(self) -> None:
        self._timer = None
        if self._wakeup is not None and not self._wakeup.done():
            self._wakeup.set_result(not self._shutdown_requested)

    async def _run_tick(self) -> None:
        self.run_count += 1
        start_time = time.monotonic()
        try:
            await self.tick()
        except Exception:
            logger.exception("Automation run failed", run=self.run_count)
        logger.debug("Automation run finished", run=self.run_count, duration=round(time.monotonic() - start_time, 2))
