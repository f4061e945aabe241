"""Stage star bundles on the device."""
import logging
from typing import Optional

from .dispatch import DispatchError


class Bundle:
    logger = logging.getLogger(__name__)

    def __init__(self, dispatcher):
        self.dispatcher = dispatcher

    async def send(self, file_path: str) -> Optional[bool]:
        """Send a star bundle zip to the device

        Returns:
            True if successful, None if the command fails
        """
        try:
            await self.dispatcher.dispatch(f'stageStarBundle(File={file_path})')
            return True
        except DispatchError as e:
            self.logger.error(f'Error while staging star bundle: {e}')
            return None
