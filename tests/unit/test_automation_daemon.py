"""Unit tests for the daemon scheduler."""

import asyncio
import signal
from unittest.mock import MagicMock

import pytest

from issue_automation.automation.daemon import SHUTDOWN_SIGNALS, DaemonScheduler, SchedulerState


async def wait_for(condition, timeout: float = 2.0) -> None:  # type: ignore[no-untyped-def]
    """Poll until the condition holds or fail the test."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not condition():
        if loop.time() > deadline:
            pytest.fail("Condition not met before timeout")
        await asyncio.sleep(0.001)


class RecordingTick:
    """Tick that records start and end times and takes a fixed time to run."""

    def __init__(self, duration: float = 0.0, fail: bool = False) -> None:
        """Initialize the tick with how long each run should take."""
        self.duration = duration
        self.fail = fail
        self.starts: list[float] = []
        self.ends: list[float] = []

    async def __call__(self) -> None:
        """Record one run."""
        loop = asyncio.get_running_loop()
        self.starts.append(loop.time())
        await asyncio.sleep(self.duration)
        self.ends.append(loop.time())
        if self.fail:
            raise RuntimeError("tick failed")


def test_rejects_non_positive_interval() -> None:
    """Test that a zero interval is refused."""
    with pytest.raises(ValueError):
        DaemonScheduler(RecordingTick(), 0)


@pytest.mark.asyncio
async def test_first_run_starts_immediately() -> None:
    """Test that the first tick does not wait for the interval."""
    tick = RecordingTick()
    scheduler = DaemonScheduler(tick, interval_ms=60_000)

    task = asyncio.create_task(scheduler.start())
    await wait_for(lambda: scheduler.state == SchedulerState.WAITING)

    assert scheduler.run_count == 1
    scheduler.shutdown("test")
    await asyncio.wait_for(task, timeout=1)


@pytest.mark.asyncio
async def test_runs_never_overlap() -> None:
    """Test that each run starts only after the previous one ended, even when runs outlast the interval."""
    # Given
    tick = RecordingTick(duration=0.03)
    scheduler = DaemonScheduler(tick, interval_ms=5)

    # When
    task = asyncio.create_task(scheduler.start())
    await wait_for(lambda: len(tick.ends) >= 4)
    scheduler.shutdown("test")
    await asyncio.wait_for(task, timeout=1)

    # Then
    assert len(tick.starts) == len(tick.ends)
    for k in range(len(tick.ends) - 1):
        assert tick.starts[k + 1] >= tick.ends[k]


@pytest.mark.asyncio
async def test_shutdown_while_waiting_cancels_timer() -> None:
    """Test that shutting down mid-wait cancels the pending run."""
    # Given
    tick = RecordingTick()
    scheduler = DaemonScheduler(tick, interval_ms=50)
    task = asyncio.create_task(scheduler.start())
    await wait_for(lambda: scheduler.state == SchedulerState.WAITING)
    runs_at_shutdown = scheduler.run_count

    # When
    scheduler.shutdown("test")
    await asyncio.wait_for(task, timeout=1)
    await asyncio.sleep(0.1)

    # Then
    assert scheduler.run_count == runs_at_shutdown
    assert scheduler.state == SchedulerState.STOPPED
    assert scheduler.shutdown_requested is True


@pytest.mark.asyncio
async def test_shutdown_during_run_lets_it_finish() -> None:
    """Test that an in-flight run completes and no further run is scheduled."""
    release = asyncio.Event()
    finished: list[bool] = []

    async def tick() -> None:
        await release.wait()
        finished.append(True)

    scheduler = DaemonScheduler(tick, interval_ms=1)
    task = asyncio.create_task(scheduler.start())
    await wait_for(lambda: scheduler.run_count == 1)

    scheduler.shutdown("test")
    assert scheduler.state == SchedulerState.SHUTTING_DOWN
    release.set()
    await asyncio.wait_for(task, timeout=1)

    assert finished == [True]
    assert scheduler.run_count == 1
    assert scheduler.state == SchedulerState.STOPPED


@pytest.mark.asyncio
async def test_second_shutdown_forces_exit() -> None:
    """Test that a repeated shutdown request while the first is completing forces exit code 1."""
    release = asyncio.Event()

    async def tick() -> None:
        await release.wait()

    force_exit = MagicMock()
    scheduler = DaemonScheduler(tick, interval_ms=1000, force_exit=force_exit)
    task = asyncio.create_task(scheduler.start())
    await wait_for(lambda: scheduler.run_count == 1)

    scheduler.shutdown("SIGINT")
    force_exit.assert_not_called()
    scheduler.shutdown("SIGINT")
    force_exit.assert_called_once_with(1)

    release.set()
    await asyncio.wait_for(task, timeout=1)


@pytest.mark.asyncio
async def test_shutdown_after_stop_is_ignored() -> None:
    """Test that a shutdown request after the scheduler stopped does not force an exit."""
    force_exit = MagicMock()
    scheduler = DaemonScheduler(RecordingTick(), interval_ms=1000, force_exit=force_exit)
    task = asyncio.create_task(scheduler.start())
    await wait_for(lambda: scheduler.state == SchedulerState.WAITING)
    scheduler.shutdown("test")
    await asyncio.wait_for(task, timeout=1)

    scheduler.shutdown("test")

    force_exit.assert_not_called()


@pytest.mark.asyncio
async def test_shutdown_before_start_stops_without_running() -> None:
    """Test that a scheduler told to shut down before starting returns at once."""
    # Given a scheduler that received a shutdown request before start
    tick = RecordingTick()
    force_exit = MagicMock()
    scheduler = DaemonScheduler(tick, interval_ms=1000, force_exit=force_exit)
    scheduler.shutdown("test")

    # When it is started
    await asyncio.wait_for(scheduler.start(), timeout=1)

    # Then no tick runs and it is stopped
    assert tick.starts == []
    assert scheduler.run_count == 0
    assert scheduler.state == SchedulerState.STOPPED
    force_exit.assert_not_called()


@pytest.mark.asyncio
async def test_failing_tick_does_not_stop_scheduler() -> None:
    """Test that an exception from a tick is logged and the schedule continues."""
    tick = RecordingTick(fail=True)
    scheduler = DaemonScheduler(tick, interval_ms=1)

    task = asyncio.create_task(scheduler.start())
    await wait_for(lambda: scheduler.run_count >= 3)
    scheduler.shutdown("test")
    await asyncio.wait_for(task, timeout=1)

    assert scheduler.run_count >= 3
    assert scheduler.state == SchedulerState.STOPPED


@pytest.mark.asyncio
async def test_start_twice_is_rejected() -> None:
    """Test that a scheduler cannot be started again once it has stopped."""
    scheduler = DaemonScheduler(RecordingTick(), interval_ms=1000)
    task = asyncio.create_task(scheduler.start())
    await wait_for(lambda: scheduler.state == SchedulerState.WAITING)
    scheduler.shutdown("test")
    await asyncio.wait_for(task, timeout=1)

    with pytest.raises(RuntimeError):
        await scheduler.start()


def test_install_signal_handlers_registers_termination_signals() -> None:
    """Test that every termination-family signal is routed to shutdown."""
    scheduler = DaemonScheduler(RecordingTick(), interval_ms=1000)
    loop = MagicMock()

    scheduler.install_signal_handlers(loop)

    registered = [call.args[0] for call in loop.add_signal_handler.call_args_list]
    assert registered == list(SHUTDOWN_SIGNALS)
    assert signal.SIGINT in registered
    assert signal.SIGTERM in registered
    for call in loop.add_signal_handler.call_args_list:
        assert call.args[1] == scheduler.shutdown
