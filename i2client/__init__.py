"""Async client for issuing commands to an i2 playout device."""
from .__version__ import __version__
from .client import I2Client
from .config import ConfigError, DeviceConfig, configure_logger, get_config
from .dispatch import CommandDispatcher, DispatchError, ExecDispatcher
from .playlist import (
    Cancellation,
    FollowOn,
    PlaylistManager,
    PlaylistRequest,
    format_start,
)
from .scheduler import DelayedTaskScheduler, ManualClock, SystemClock

__all__ = [
    '__version__',
    'I2Client',
    'DeviceConfig',
    'ConfigError',
    'get_config',
    'configure_logger',
    'CommandDispatcher',
    'ExecDispatcher',
    'DispatchError',
    'PlaylistManager',
    'PlaylistRequest',
    'Cancellation',
    'FollowOn',
    'format_start',
    'DelayedTaskScheduler',
    'SystemClock',
    'ManualClock',
]
