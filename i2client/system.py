"""Device service and process control, plus config file access."""
import logging
from typing import Optional

from .dispatch import DispatchError


class System:
    """Restart the device service or its processes and read its config

    Args:
        dispatcher: CommandDispatcher for restart commands
        config: DeviceConfig locating MachineProductCfg.xml
    """
    logger = logging.getLogger(__name__)

    def __init__(self, dispatcher, config):
        self.dispatcher = dispatcher
        self.config = config

    async def restart_service(self) -> Optional[bool]:
        """Restart the i2 service

        Returns:
            True if successful, None if the command fails
        """
        try:
            await self.dispatcher.dispatch('restartI2Service("r=1")')
            return True
        except DispatchError as e:
            self.logger.error(f'Error while restarting i2 service: {e}')
            return None

    async def restart_process(self, process_name: str) -> Optional[bool]:
        """Restart a named process on the device (e.g. I2jPipeline)"""
        try:
            await self.dispatcher.dispatch(f'restartProcess("ProcessName={process_name}")')
            return True
        except DispatchError as e:
            self.logger.error(f'Error while restarting i2 process {process_name}: {e}')
            return None

    def get_mpc(self) -> Optional[str]:
        """Return MachineProductCfg.xml as text, or None if it can't be read"""
        path = self.config.mpc_path
        try:
            return path.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            self.logger.error(f'Error while getting machineproductcfg from {path}: {e}')
            return None
