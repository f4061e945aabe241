"""
Playlist management for the playout device.

Provides command builders, request models and the PlaylistManager that
sequences load, cancel, run and follow-on commands.
"""

from .commands import (
    cancel_command,
    format_start,
    load_command,
    load_run_command,
    run_command,
)
from .manager import PlaylistManager
from .models import Cancellation, FollowOn, PlaylistRequest

__all__ = [
    'PlaylistManager',
    'PlaylistRequest',
    'Cancellation',
    'FollowOn',
    'format_start',
    'load_command',
    'load_run_command',
    'run_command',
    'cancel_command',
]
