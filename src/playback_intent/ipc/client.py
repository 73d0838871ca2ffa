"""IPC client for sending commands to a running Playback Intent instance."""

import json
import socket
from pathlib import Path
from typing import List, Optional, Tuple

from .server import get_socket_path


def send_command(
    command: str,
    args: Optional[List[str]] = None,
    socket_path: Optional[Path] = None,
) -> Tuple[bool, str]:
    """
    Send a command to the running Playback Intent instance.

    Args:
        command: Command name (e.g., 'background-enter', 'user-playback')
        args: Command arguments (optional)
        socket_path: Control socket path (default: get_socket_path())

    Returns:
        (success, message) tuple
            success: True if command executed successfully
            message: Response message or error description
    """
    socket_path = socket_path or get_socket_path()

    if not socket_path.exists():
        return False, "Playback Intent is not running"

    payload = {
        'command': command,
        'args': args or []
    }

    try:
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        sock.settimeout(5.0)
        try:
            sock.connect(str(socket_path))
            sock.sendall((json.dumps(payload) + '\n').encode('utf-8'))

            response_data = b''
            while True:
                chunk = sock.recv(4096)
                if not chunk:
                    break
                response_data += chunk
                if b'\n' in response_data:
                    break
        finally:
            sock.close()

        if not response_data:
            return False, "No response from Playback Intent"

        response = json.loads(response_data.decode('utf-8').strip())
        success = response.get('success', False)
        message = response.get('message', 'No message')

        return success, message

    except socket.timeout:
        return False, "Playback Intent not responding (timeout)"
    except (ConnectionRefusedError, FileNotFoundError):
        return False, "Playback Intent not running"
    except json.JSONDecodeError as e:
        return False, f"Invalid response from Playback Intent: {e}"
    except OSError as e:
        return False, f"Failed to send command: {e}"
