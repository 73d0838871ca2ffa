"""IPC (Inter-Process Communication) for Playback Intent.

Lets host lifecycle sources and UI controls deliver events to a running
coordinator over a Unix socket.
"""

from .client import send_command

__all__ = ['send_command']
