"""
Playback Intent - coordinator main loop

Owns the coordinator and applies commands delivered by the IPC server,
one at a time, on the main thread.
"""

import queue
import threading
from pathlib import Path
from typing import Optional

from loguru import logger

from playback_intent.core import config
from playback_intent.core.output import setup_loguru
from playback_intent.domain.lifecycle import PlaybackIntentCoordinator
from playback_intent.domain.playback import MpvPlayer
from playback_intent.ipc import server as ipc_server


def build_coordinator(cfg: config.Config) -> PlaybackIntentCoordinator:
    """Create a coordinator from configuration, bound to mpv when configured."""
    player = None
    if cfg.player.mpv_socket_path:
        player = MpvPlayer(cfg.player.mpv_socket_path)
        if not player.is_available():
            logger.warning(
                f"MPV socket not responding yet: {cfg.player.mpv_socket_path}"
            )
    else:
        logger.info("No mpv socket configured, coordinator starts unbound")

    return PlaybackIntentCoordinator(
        player, allow_background_playback=cfg.playback.allow_background_playback
    )


def drain_commands(
    coordinator: PlaybackIntentCoordinator,
    command_queue: queue.Queue,
    response_queue: queue.Queue,
    timeout: float = 0.5,
) -> int:
    """Apply every queued IPC command, waiting up to ``timeout`` for the first.

    Returns:
        Number of commands processed
    """
    processed = 0
    try:
        request_id, command, args = command_queue.get(timeout=timeout)
        while True:
            success, message = ipc_server.process_ipc_command(
                coordinator, command, args
            )
            response_queue.put((request_id, success, message))
            processed += 1
            request_id, command, args = command_queue.get_nowait()
    except queue.Empty:
        pass
    return processed


def run(
    cfg: config.Config,
    socket_path: Optional[Path] = None,
    stop_event: Optional[threading.Event] = None,
) -> None:
    """Run the coordinator until interrupted or ``stop_event`` is set."""
    log_file = (
        Path(cfg.logging.log_file)
        if cfg.logging.log_file
        else config.get_data_dir() / "playback-intent.log"
    )
    setup_loguru(
        log_file, level=cfg.logging.level, console_output=cfg.logging.console_output
    )

    coordinator = build_coordinator(cfg)

    if not cfg.ipc.enabled:
        logger.warning("IPC disabled in configuration, nothing to serve")
        return

    if socket_path is None and cfg.ipc.socket_path:
        socket_path = Path(cfg.ipc.socket_path)

    command_queue: queue.Queue = queue.Queue()
    response_queue: queue.Queue = queue.Queue()
    ipc_srv = ipc_server.IPCServer(command_queue, response_queue, socket_path)
    ipc_srv.start()

    stop_event = stop_event or threading.Event()
    try:
        while not stop_event.is_set():
            drain_commands(coordinator, command_queue, response_queue)
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    finally:
        ipc_srv.stop()
