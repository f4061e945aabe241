"""
Global pytest configuration and fixtures for i2client tests

Provides:
- Recording command dispatcher
- Manual clock and scheduler
- Playlist manager wired to both
- Device configuration
"""

from datetime import datetime, timezone
from typing import List, Optional, Tuple

import pytest
import pytest_asyncio

from i2client.config import DeviceConfig
from i2client.dispatch import CommandDispatcher, CommandRejectedError
from i2client.playlist import PlaylistManager
from i2client.scheduler import DelayedTaskScheduler, ManualClock


# ============================================================================
# Pytest Configuration
# ============================================================================

def pytest_configure(config):
    """Configure pytest with custom settings"""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "playlist: Playlist orchestration tests")


# 2025-02-05T14:15:00Z
START = datetime(2025, 2, 5, 14, 15, 0, tzinfo=timezone.utc)


class RecordingDispatcher(CommandDispatcher):
    """
    Dispatcher that records every command with the clock time it was sent.

    Commands starting with a prefix registered via fail_on() raise
    CommandRejectedError after being recorded.
    """

    def __init__(self, clock=None, output: str = "OK"):
        super().__init__()
        self.clock = clock
        self.output = output
        self.sent: List[Tuple[Optional[datetime], str]] = []
        self._fail_prefixes: List[str] = []
        self.closed = False

    def fail_on(self, prefix: str):
        self._fail_prefixes.append(prefix)

    async def dispatch(self, command: str) -> str:
        sent_at = self.clock.now() if self.clock else None
        self.sent.append((sent_at, command))
        for prefix in self._fail_prefixes:
            if command.startswith(prefix):
                raise CommandRejectedError(f"rejected: {command}", command, stderr="rejected")
        return self.output

    async def close(self) -> None:
        self.closed = True

    @property
    def commands(self) -> List[str]:
        return [command for _, command in self.sent]

    def sent_at(self, command: str) -> datetime:
        for sent_at, sent in self.sent:
            if sent == command:
                return sent_at
        raise AssertionError(f"{command} was never dispatched")


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def clock():
    """Manual clock starting at 2025-02-05 14:15:00 UTC"""
    return ManualClock(START)


@pytest.fixture
def dispatcher(clock):
    return RecordingDispatcher(clock)


@pytest_asyncio.fixture
async def scheduler(clock):
    """Scheduler on the manual clock, shut down after each test"""
    scheduler = DelayedTaskScheduler(clock)
    yield scheduler
    await scheduler.shutdown()


@pytest.fixture
def manager(dispatcher, scheduler):
    return PlaylistManager(dispatcher, scheduler)


@pytest.fixture
def device_config(tmp_path):
    """DeviceConfig rooted in a temporary install directory"""
    return DeviceConfig(
        exec_path=str(tmp_path / "exec.exe"),
        install_dir=str(tmp_path),
    )
