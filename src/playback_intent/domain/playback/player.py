"""
Controllable player capability and MPV integration via JSON IPC.

The coordinator only needs three things from a player: whether it is
currently playing, and commands to play and pause. ``MpvPlayer`` provides
them for a running mpv instance started with ``--input-ipc-server``.
"""

import json
import os
import socket
from typing import Any, Optional, Protocol, runtime_checkable

from loguru import logger


@runtime_checkable
class ControllablePlayer(Protocol):
    """Playback surface the coordinator queries and commands.

    Commands are assumed idempotent and reflected in ``is_playing`` on
    the next query.
    """

    @property
    def is_playing(self) -> bool:
        ...

    def play(self) -> None:
        ...

    def pause(self) -> None:
        ...


def send_mpv_command(socket_path: Optional[str], command: dict[str, Any]) -> bool:
    """Send JSON IPC command to MPV."""
    if not socket_path or not os.path.exists(socket_path):
        return False

    try:
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            sock.settimeout(2.0)
            sock.connect(socket_path)

            command_json = json.dumps(command) + "\n"
            sock.send(command_json.encode("utf-8"))

            response = sock.recv(4096).decode("utf-8").strip()
        finally:
            sock.close()

        if response:
            # mpv may interleave event lines; the reply is the line with "error"
            for line in response.splitlines():
                try:
                    response_data = json.loads(line)
                except json.JSONDecodeError:
                    continue
                if "error" in response_data:
                    return response_data.get("error") == "success"
            return False

        return True

    except (socket.error, OSError) as e:
        logger.debug(f"MPV command failed ({command}): {e}")
        return False


def get_mpv_property(socket_path: Optional[str], property_name: str) -> Any:
    """Get a property value from MPV."""
    if not socket_path or not os.path.exists(socket_path):
        return None

    try:
        command = {"command": ["get_property", property_name]}
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            sock.settimeout(2.0)
            sock.connect(socket_path)

            command_json = json.dumps(command) + "\n"
            sock.send(command_json.encode("utf-8"))

            response = sock.recv(4096).decode("utf-8").strip()
        finally:
            sock.close()

        for line in response.splitlines():
            try:
                response_data = json.loads(line)
            except json.JSONDecodeError:
                continue
            if response_data.get("error") == "success":
                return response_data.get("data")

        return None

    except (socket.error, OSError) as e:
        logger.debug(f"MPV property read failed ({property_name}): {e}")
        return None


class MpvPlayer:
    """ControllablePlayer backed by a running mpv instance.

    Reports playing only when mpv is neither paused nor idle. A missing or
    unresponsive socket reads as not playing and commands become no-ops.
    """

    def __init__(self, socket_path: str):
        self.socket_path = socket_path

    def __repr__(self) -> str:
        return f"MpvPlayer(socket_path={self.socket_path!r})"

    def is_available(self) -> bool:
        """Check if the mpv socket exists and answers."""
        return get_mpv_property(self.socket_path, "idle-active") is not None

    @property
    def is_playing(self) -> bool:
        paused = get_mpv_property(self.socket_path, "pause")
        if paused is None or paused:
            return False
        idle = get_mpv_property(self.socket_path, "idle-active")
        return idle is False

    def play(self) -> None:
        if not send_mpv_command(
            self.socket_path, {"command": ["set_property", "pause", False]}
        ):
            logger.warning(f"MPV did not accept play command: {self.socket_path}")

    def pause(self) -> None:
        if not send_mpv_command(
            self.socket_path, {"command": ["set_property", "pause", True]}
        ):
            logger.warning(f"MPV did not accept pause command: {self.socket_path}")
