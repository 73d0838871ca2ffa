"""Playback domain - the player surface the coordinator controls.

This domain handles:
- The ControllablePlayer protocol (is_playing / play / pause)
- MPV player integration via JSON IPC
"""

from .player import (
    ControllablePlayer,
    MpvPlayer,
    send_mpv_command,
    get_mpv_property,
)

__all__ = [
    "ControllablePlayer",
    "MpvPlayer",
    "send_mpv_command",
    "get_mpv_property",
]
