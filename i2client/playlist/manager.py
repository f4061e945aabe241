"""
i2client/playlist/manager.py

Playlist manager: single presentation commands and the fully automated
handle_playlist sequence.

handle_playlist dispatches the load and cancel commands in order, then
either runs the presentation immediately or schedules the run, and finally
schedules two waves that pre-stage follow-on presentations near the end
of the current one. Only the load, the cancels and an immediate run count
toward the result; everything scheduled is fire-and-forget.
"""

import asyncio
import logging
import math
from datetime import timedelta
from typing import List, Optional

from ..dispatch import DispatchError
from . import commands
from .commands import format_start
from .models import PlaylistRequest

# Device playback runs 30x faster than the duration value it is given
PLAYBACK_RATIO = 30

# Safety pad added to every scheduled start time
START_PAD = 2

# Wait between the cancels and a delayed run
RUN_WAIT = 5

# Follow-on waves fire this many seconds before the playlist ends
FOLLOW_ON_LOAD_LEAD = 25
FOLLOW_ON_RUN_LEAD = 10

# Follow-on run wave delay when the playlist starts immediately
IMMEDIATE_FOLLOW_ON_RUN_DELAY = 5


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class PlaylistManager:
    """
    Loads, runs, cancels and chains presentations on the device.

    Args:
        dispatcher: CommandDispatcher used for every command.
        scheduler: DelayedTaskScheduler for deferred commands; its clock
                   also supplies "now" for start times.
    """

    def __init__(self, dispatcher, scheduler):
        self.dispatcher = dispatcher
        self.scheduler = scheduler
        self.logger = logging.getLogger(f"{__name__}.PlaylistManager")

    @property
    def clock(self):
        return self.scheduler.clock

    async def handle_playlist(self, request: PlaylistRequest) -> Optional[bool]:
        """
        Fully automated playlist handling.

        Args:
            request: The playlist to load, cancel against, run and chain.

        Returns:
            True once the load, cancels and run are dispatched (or the run
            is scheduled), None if any of them fails or the request has an
            unusable duration or delay.

        Example:
            >>> request = PlaylistRequest(
            ...     flavor="domestic/V", duration=1950, presentation_id="4",
            ...     logo="domesticAds/TAG3631", delay=10,
            ...     cancellations=[Cancellation("ldl3"), Cancellation("sidebar2")])
            >>> await manager.handle_playlist(request)
            True
        """
        pid = request.presentation_id

        if not self._validate(request):
            return None

        now = self.clock.now()
        load_command = commands.load_command(
            request.flavor, request.duration, pid, request.logo
        )

        if request.has_delay:
            base_time = now + timedelta(seconds=request.delay + START_PAD)
            run_command = commands.run_command(pid, format_start(base_time))
        else:
            base_time = now
            run_command = commands.run_command(pid)

        cancel_commands = [
            commands.cancel_command(c.presentation_id, format_start(base_time))
            for c in request.cancellations
        ]

        lead = request.duration / PLAYBACK_RATIO
        follow_on_start = format_start(
            now + timedelta(seconds=lead + (request.delay or 0) + START_PAD)
        )
        follow_on_loads = [
            commands.load_command(f.flavor, f.duration, f.presentation_id)
            for f in request.follow_ons
        ]
        follow_on_runs = [
            commands.run_command(f.presentation_id, follow_on_start)
            for f in request.follow_ons
        ]

        try:
            await self.dispatcher.dispatch(load_command)

            for cancel_command in cancel_commands:
                await self.dispatcher.dispatch(cancel_command)

            if request.has_delay:
                self.scheduler.call_later(
                    RUN_WAIT,
                    self._run_delayed,
                    pid, run_command, follow_on_loads, follow_on_runs, lead,
                    name=f"run:{pid}",
                )
            else:
                await self.dispatcher.dispatch(run_command)
                self._schedule_follow_ons(
                    pid,
                    follow_on_loads, lead - FOLLOW_ON_LOAD_LEAD,
                    follow_on_runs, IMMEDIATE_FOLLOW_ON_RUN_DELAY,
                )
        except DispatchError as e:
            self.logger.error(f"Error occurred while handling playlist {pid}: {e}")
            return None

        self.logger.info(
            f"Handled playlist {pid} ({request.flavor}, {request.duration}s, "
            f"{len(cancel_commands)} cancels, {len(follow_on_loads)} follow-ons)"
        )
        return True

    def _validate(self, request: PlaylistRequest) -> bool:
        duration = request.duration
        if not _is_number(duration) or not math.isfinite(duration) or duration <= 0:
            self.logger.error(
                f"Invalid duration {duration!r} for playlist {request.presentation_id}"
            )
            return False
        if request.has_delay and (
            not _is_number(request.delay) or not math.isfinite(request.delay)
        ):
            self.logger.error(
                f"Invalid delay {request.delay!r} for playlist {request.presentation_id}"
            )
            return False
        return True

    async def _run_delayed(
        self,
        pid: str,
        run_command: str,
        follow_on_loads: List[str],
        follow_on_runs: List[str],
        lead: float
    ) -> None:
        await self._dispatch_quietly(run_command)
        self._schedule_follow_ons(
            pid,
            follow_on_loads, lead - FOLLOW_ON_LOAD_LEAD,
            follow_on_runs, lead - FOLLOW_ON_RUN_LEAD,
        )

    def _schedule_follow_ons(self, pid, loads, load_delay, runs, run_delay) -> None:
        if not loads:
            return
        self.scheduler.call_later(
            load_delay, self._dispatch_wave, loads, name=f"follow-on-load:{pid}"
        )
        self.scheduler.call_later(
            run_delay, self._dispatch_wave, runs, name=f"follow-on-run:{pid}"
        )

    async def _dispatch_wave(self, wave: List[str]) -> None:
        await asyncio.gather(*(self._dispatch_quietly(c) for c in wave))

    async def _dispatch_quietly(self, command: str) -> None:
        try:
            await self.dispatcher.dispatch(command)
        except DispatchError as e:
            self.logger.error(f"Deferred command failed: {command}: {e}")

    async def _send(self, command: str) -> Optional[str]:
        try:
            return await self.dispatcher.dispatch(command)
        except DispatchError as e:
            self.logger.error(f"Error occurred while sending {command}: {e}")
            return None

    async def load_run_pres(self, flavor: str, duration, presentation_id, tag=None) -> Optional[str]:
        """
        Load and run a presentation in one command (not recommended).

        Returns:
            Command output, or None on failure.
        """
        return await self._send(
            commands.load_run_command(flavor, duration, presentation_id, tag)
        )

    async def load_pres(self, flavor: str, duration, presentation_id, tag=None) -> Optional[str]:
        """Load (but do not run) a presentation."""
        return await self._send(
            commands.load_command(flavor, duration, presentation_id, tag)
        )

    async def run_pres(self, presentation_id, start_time: Optional[str] = None) -> Optional[str]:
        """
        Run an already loaded presentation.

        Args:
            presentation_id: Presentation id (e.g. 'ldl3')
            start_time: Optional start time in device format (see format_start)
        """
        return await self._send(commands.run_command(presentation_id, start_time))

    async def cancel_pres(self, presentation_id, start_time: Optional[str] = None) -> Optional[str]:
        """Cancel a loaded or running presentation."""
        return await self._send(commands.cancel_command(presentation_id, start_time))

    @staticmethod
    def format_start(time) -> str:
        return format_start(time)
