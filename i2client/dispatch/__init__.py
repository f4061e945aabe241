"""
Command dispatchers for the playout device.

This module provides the abstract dispatcher interface and the concrete
implementation that shells out to the device's exec executable.
"""

from .adapter import CommandDispatcher
from .errors import (
    CommandFailedError,
    CommandRejectedError,
    CommandTimeoutError,
    DispatchError,
    ExecutableNotFoundError,
)
from .exec import ExecDispatcher

__all__ = [
    'CommandDispatcher',
    'ExecDispatcher',
    'DispatchError',
    'ExecutableNotFoundError',
    'CommandFailedError',
    'CommandRejectedError',
    'CommandTimeoutError',
]
