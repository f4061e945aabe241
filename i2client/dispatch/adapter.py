"""
Abstract command dispatcher for the playout device.

This module defines the CommandDispatcher abstract base class that all
dispatcher implementations inherit from. Everything above this layer
formats a command string and hands it to a dispatcher; nothing above it
knows how the command reaches the device.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional


class CommandDispatcher(ABC):
    """
    Abstract interface for sending commands to the device.

    The adapter pattern allows swapping the transport (the bundled exec
    executable, a remote relay, a recording fake in tests) without
    changing the command wrappers or the playlist manager.

    Attributes:
        logger: Logger instance for dispatch events

    Example:
        >>> class EchoDispatcher(CommandDispatcher):
        ...     async def dispatch(self, command):
        ...         return command
        >>> output = await EchoDispatcher().dispatch('runPres("PresentationId=4")')
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize dispatcher.

        Args:
            logger: Optional logger instance. If None, creates default logger
                    named after the class.
        """
        self.logger = logger or logging.getLogger(self.__class__.__name__)

    @abstractmethod
    async def dispatch(self, command: str) -> str:
        """
        Send a single formatted command to the device.

        Args:
            command: Command string, e.g. 'loadPres("Flavor=domestic/V,...")'

        Returns:
            Output reported by the device (may be empty)

        Raises:
            DispatchError: If the command could not be delivered or the
                device rejected it. Connectivity failures and rejected
                commands are not distinguished by callers.
        """
        pass

    async def close(self) -> None:
        """Release any resources held by the dispatcher."""
        pass
