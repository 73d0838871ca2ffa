"""IPC server for receiving lifecycle and user-action events from external processes."""

import itertools
import json
import os
import queue
import socket
import threading
import time
from pathlib import Path
from typing import Optional, Tuple

from loguru import logger

from playback_intent.domain.lifecycle import LifecycleEvent, PlaybackIntentCoordinator

USER_PLAYBACK_ARGS = {"playing": True, "paused": False}
TRANSITION_ARGS = {"start": True, "end": False}


def get_socket_path() -> Path:
    """
    Get the path to the Playback Intent control socket.

    Returns:
        Path to Unix socket
    """
    # Use XDG_RUNTIME_DIR if available, otherwise fall back to ~/.local/share
    runtime_dir = os.environ.get('XDG_RUNTIME_DIR')
    if runtime_dir:
        return Path(runtime_dir) / 'playback-intent' / 'control.sock'
    return Path.home() / '.local' / 'share' / 'playback-intent' / 'control.sock'


class IPCServer:
    """Unix socket server for IPC commands.

    Runs in a background thread and accepts commands from external clients.
    Commands are handed to the owner thread through ``command_queue`` so the
    coordinator is only ever touched from one thread, in delivery order.
    """

    def __init__(
        self,
        command_queue: queue.Queue,
        response_queue: queue.Queue,
        socket_path: Optional[Path] = None,
        response_timeout: float = 15.0,
    ):
        """
        Initialize IPC server.

        Args:
            command_queue: Queue for sending commands to the owner thread
            response_queue: Queue for receiving responses from the owner thread
            socket_path: Control socket path (default: get_socket_path())
            response_timeout: Seconds to wait for the owner thread to answer
        """
        self.command_queue = command_queue
        self.response_queue = response_queue
        self.socket_path = socket_path or get_socket_path()
        self.response_timeout = response_timeout
        self._request_ids = itertools.count(1)
        self.server_socket: Optional[socket.socket] = None
        self.running = False
        self.thread: Optional[threading.Thread] = None

    def start(self) -> None:
        """Start the IPC server in a background thread."""
        if self.running:
            return

        self.socket_path.parent.mkdir(parents=True, exist_ok=True)

        # Remove stale socket if it exists
        if self.socket_path.exists():
            try:
                self.socket_path.unlink()
            except OSError:
                pass

        # Bind before returning so clients can connect as soon as start() does
        self.server_socket = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        self.server_socket.bind(str(self.socket_path))
        self.server_socket.listen(5)
        self.server_socket.settimeout(1.0)  # Poll every second

        self.running = True
        self.thread = threading.Thread(
            target=self._run_server, daemon=True, name="IPCServerThread"
        )
        self.thread.start()
        logger.info(f"IPC server listening on {self.socket_path}")

    def stop(self) -> None:
        """Stop the IPC server and cleanup."""
        self.running = False

        # Close server socket to unblock accept()
        if self.server_socket:
            try:
                self.server_socket.close()
            except OSError:
                pass

        if self.thread and self.thread.is_alive():
            self.thread.join(timeout=2.0)

        if self.socket_path.exists():
            try:
                self.socket_path.unlink()
            except OSError:
                pass
        logger.info("IPC server stopped")

    def _run_server(self) -> None:
        """Run the Unix socket server loop."""
        try:
            while self.running:
                try:
                    client_socket, _ = self.server_socket.accept()
                    # Sequential processing keeps events in delivery order
                    self._handle_client(client_socket)
                except socket.timeout:
                    continue
                except OSError as e:
                    if self.running:  # Only log if we're still supposed to be running
                        logger.error(f"Error accepting connection: {e}")

        except OSError:
            logger.exception("IPC server error")
        finally:
            if self.server_socket:
                self.server_socket.close()

    def _send(self, client_socket: socket.socket, success: bool, message: str) -> None:
        response = {'success': success, 'message': message}
        client_socket.sendall((json.dumps(response) + '\n').encode('utf-8'))

    def _await_response(self, request_id: int) -> Optional[Tuple[bool, str]]:
        """
        Wait for the owner thread's answer to ``request_id``.

        Answers to earlier requests that timed out are discarded.

        Returns:
            (success, message), or None if no answer arrived in time
        """
        deadline = time.monotonic() + self.response_timeout
        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return None
            try:
                response_id, success, message = self.response_queue.get(timeout=remaining)
            except queue.Empty:
                return None
            if response_id == request_id:
                return success, message
            logger.warning(f"Discarding stale IPC response for request {response_id}")

    def _handle_client(self, client_socket: socket.socket) -> None:
        """
        Handle a client connection.

        Args:
            client_socket: Connected client socket
        """
        try:
            data = b''
            while True:
                chunk = client_socket.recv(4096)
                if not chunk:
                    break
                data += chunk
                # Newline terminates a JSON message
                if b'\n' in data:
                    break

            if not data:
                return

            payload = json.loads(data.decode('utf-8').strip())
            if not isinstance(payload, dict):
                self._send(client_socket, False, 'Invalid request: expected JSON object')
                return

            command = str(payload.get('command', ''))
            args = [str(arg) for arg in payload.get('args', []) or []]

            request_id = next(self._request_ids)
            self.command_queue.put((request_id, command, args))

            response = self._await_response(request_id)
            if response is None:
                self._send(client_socket, False, 'Command timed out')
            else:
                self._send(client_socket, *response)

        except json.JSONDecodeError as e:
            self._send(client_socket, False, f'Invalid JSON: {e}')
        except (OSError, UnicodeDecodeError, TypeError) as e:
            logger.warning(f"IPC client error: {e}")
            try:
                self._send(client_socket, False, f'Error processing command: {e}')
            except OSError:
                pass
        finally:
            client_socket.close()


def process_ipc_command(
    coordinator: PlaybackIntentCoordinator,
    command: str,
    args: list,
) -> Tuple[bool, str]:
    """
    Apply an IPC command to the coordinator.

    Must be called from the thread that owns the coordinator.

    Args:
        coordinator: Coordinator owned by the calling thread
        command: Command name
        args: Command arguments

    Returns:
        (success, message) tuple
    """
    args_str = ' '.join(args) if args else ''
    logger.debug(f"[IPC] {command} {args_str}".strip())

    try:
        if command == 'user-playback':
            if len(args) != 1 or args[0] not in USER_PLAYBACK_ARGS:
                return False, "user-playback requires one argument: playing | paused"
            coordinator.notify_user_playback_change(USER_PLAYBACK_ARGS[args[0]])
            return True, f"User playback: {args[0]}"

        if command == 'transition':
            if len(args) != 1 or args[0] not in TRANSITION_ARGS:
                return False, "transition requires one argument: start | end"
            coordinator.mark_transition(TRANSITION_ARGS[args[0]])
            return True, f"Transition: {args[0]}"

        if command == 'status':
            player = coordinator.player
            player_desc = repr(player) if player is not None else "unbound"
            return True, (
                f"{coordinator.state.describe()} "
                f"allow_background={coordinator.allow_background_playback} "
                f"player={player_desc}"
            )

        try:
            event = LifecycleEvent.parse(command)
        except ValueError as e:
            return False, str(e)

        coordinator.handle(event)
        return True, f"Handled: {event.value}"

    except Exception as e:
        logger.exception(f"Failed to process IPC command: {command}")
        return False, f"Error: {e}"
