"""Tests for coordinator construction and the serve loop."""

import threading
from pathlib import Path
from unittest.mock import patch

from playback_intent.core.config import Config
from playback_intent.domain.playback import MpvPlayer
from playback_intent.main import build_coordinator, run


class TestBuildCoordinator:
    def test_unbound_without_mpv_socket(self) -> None:
        coordinator = build_coordinator(Config())
        assert coordinator.player is None
        assert coordinator.allow_background_playback is False

    def test_binds_mpv_player(self) -> None:
        cfg = Config()
        cfg.player.mpv_socket_path = "/tmp/mpv.sock"
        cfg.playback.allow_background_playback = True
        with patch.object(MpvPlayer, "is_available", return_value=False):
            coordinator = build_coordinator(cfg)
        assert isinstance(coordinator.player, MpvPlayer)
        assert coordinator.player.socket_path == "/tmp/mpv.sock"
        assert coordinator.allow_background_playback is True


class TestRun:
    def test_ipc_disabled_returns_immediately(self, tmp_path: Path) -> None:
        cfg = Config()
        cfg.ipc.enabled = False
        cfg.logging.log_file = str(tmp_path / "logs" / "playback-intent.log")
        with patch("playback_intent.main.ipc_server.IPCServer") as server:
            run(cfg)
        server.assert_not_called()
        assert (tmp_path / "logs" / "playback-intent.log").exists()

    def test_stops_server_when_stop_event_set(self, tmp_path: Path) -> None:
        cfg = Config()
        cfg.logging.log_file = str(tmp_path / "playback-intent.log")
        stop = threading.Event()
        stop.set()
        with patch("playback_intent.main.ipc_server.IPCServer") as server:
            run(cfg, socket_path=tmp_path / "control.sock", stop_event=stop)
        server.return_value.start.assert_called_once()
        server.return_value.stop.assert_called_once()
        assert server.call_args.args[2] == tmp_path / "control.sock"
