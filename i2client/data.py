"""Store data and images on the device."""
import logging
from typing import Optional

from .dispatch import DispatchError


class DataStore:
    """Wraps the storeData / storeImage device commands"""
    logger = logging.getLogger(__name__)

    def __init__(self, dispatcher):
        self.dispatcher = dispatcher

    @staticmethod
    def _prefix(priority: bool) -> str:
        return 'Priority' if priority is True else ''

    async def store_data(self, file_path: str, priority: bool = False) -> Optional[bool]:
        """Store a data file (e.g. an .i2m record) on the device

        Args:
            file_path: Direct path to the file
            priority: Send as priority data

        Returns:
            True if successful, None if the command fails
        """
        command = f'store{self._prefix(priority)}Data("File={file_path}")'
        try:
            await self.dispatcher.dispatch(command)
            return True
        except DispatchError as e:
            self.logger.error(f'Error while storing i2 data: {e}')
            return None

    async def store_image(self, file_path: str, priority: bool, extension: str,
                          issue_time: str, image_type: str,
                          location: str) -> Optional[bool]:
        """Store an image (radar, map, ...) on the device

        Args:
            file_path: Direct path to the file
            priority: Send as priority image
            extension: File extension (.tiff, .tif, .bfg)
            issue_time: Issue time, e.g. '02/05/2025 14:15:00'
            image_type: Radar, Map, etc.
            location: US, HI, AK, PR

        Returns:
            True if successful, None if the command fails
        """
        command = (
            f'store{self._prefix(priority)}Image("File={file_path},'
            f'IssueTime={issue_time},Location={location},'
            f'imageType={image_type},FileExtension={extension}")'
        )
        try:
            await self.dispatcher.dispatch(command)
            return True
        except DispatchError as e:
            self.logger.error(f'Error while storing i2 image: {e}')
            return None
