"""
Client facade for the playout device.

I2Client wires one dispatcher and one scheduler into every command group
so callers only hold a single object:

    async with I2Client(DeviceConfig()) as i2:
        await i2.exec('loadRunPres("Flavor=domestic/Azul,Duration=1800,PresentationId=4")')
        await i2.sys.restart_process("I2jPipeline")
        await i2.playlist.handle_playlist(request)
"""

import logging
from typing import Optional

from .bundle import Bundle
from .config import DeviceConfig, get_config
from .data import DataStore
from .dispatch import CommandDispatcher, DispatchError, ExecDispatcher
from .playlist import PlaylistManager
from .scheduler import DelayedTaskScheduler
from .system import System

logger = logging.getLogger(__name__)


class I2Client:
    """
    Entry point for every device operation.

    Args:
        config: DeviceConfig; defaults to the standard install location.
        dispatcher: Dispatcher to use instead of ExecDispatcher(config).
        clock: Clock for the scheduler (SystemClock when omitted).

    Attributes:
        data: DataStore (store_data, store_image)
        bundle: Bundle (send)
        sys: System (restart_service, restart_process, get_mpc)
        playlist: PlaylistManager (handle_playlist, load_pres, ...)
        scheduler: DelayedTaskScheduler holding deferred playlist commands
    """

    def __init__(
        self,
        config: Optional[DeviceConfig] = None,
        dispatcher: Optional[CommandDispatcher] = None,
        clock=None
    ):
        self.config = config or DeviceConfig()
        self.dispatcher = dispatcher or ExecDispatcher(self.config)
        self.scheduler = DelayedTaskScheduler(clock)

        self.data = DataStore(self.dispatcher)
        self.bundle = Bundle(self.dispatcher)
        self.sys = System(self.dispatcher, self.config)
        self.playlist = PlaylistManager(self.dispatcher, self.scheduler)

    @classmethod
    def from_config_file(cls, path, **kwargs) -> 'I2Client':
        """Build a client from a JSON/YAML config file (also configures logging)."""
        _, device = get_config(path)
        return cls(device, **kwargs)

    async def exec(self, command: str) -> Optional[str]:
        """
        Execute a raw command on the device.

        Args:
            command: Device command, e.g.
                     'loadRunPres("Flavor=domestic/Azul,Duration=1800,PresentationId=4")'

        Returns:
            Command output if successful, None if it fails.
        """
        try:
            return await self.dispatcher.dispatch(command)
        except DispatchError as e:
            logger.error(f"Error occurred while sending i2 exec command: {e}")
            return None

    async def wait_idle(self) -> None:
        """Wait until every deferred playlist command has been sent."""
        await self.scheduler.wait_idle()

    async def close(self) -> None:
        """Cancel deferred commands that have not fired and release the dispatcher."""
        await self.scheduler.shutdown()
        await self.dispatcher.close()

    async def __aenter__(self) -> 'I2Client':
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
