"""Tests for the mpv-backed controllable player."""

from unittest.mock import MagicMock, patch

import pytest

from playback_intent.domain.playback import ControllablePlayer, MpvPlayer
from playback_intent.domain.playback.player import get_mpv_property, send_mpv_command

PLAYER_MODULE = "playback_intent.domain.playback.player"


def fake_properties(values: dict):
    """Build a get_mpv_property replacement backed by a dict."""

    def _get(socket_path, property_name):
        return values.get(property_name)

    return _get


class TestMpvPlayerState:
    """Tests for MpvPlayer.is_playing."""

    def test_playing_when_unpaused_and_not_idle(self) -> None:
        with patch(
            f"{PLAYER_MODULE}.get_mpv_property",
            side_effect=fake_properties({"pause": False, "idle-active": False}),
        ):
            assert MpvPlayer("/tmp/mpv.sock").is_playing is True

    def test_not_playing_when_paused(self) -> None:
        with patch(
            f"{PLAYER_MODULE}.get_mpv_property",
            side_effect=fake_properties({"pause": True, "idle-active": False}),
        ):
            assert MpvPlayer("/tmp/mpv.sock").is_playing is False

    def test_not_playing_when_idle(self) -> None:
        """Nothing loaded: mpv reports unpaused but idle."""
        with patch(
            f"{PLAYER_MODULE}.get_mpv_property",
            side_effect=fake_properties({"pause": False, "idle-active": True}),
        ):
            assert MpvPlayer("/tmp/mpv.sock").is_playing is False

    def test_not_playing_when_unreachable(self) -> None:
        with patch(f"{PLAYER_MODULE}.get_mpv_property", return_value=None):
            player = MpvPlayer("/tmp/mpv.sock")
            assert player.is_playing is False
            assert player.is_available() is False

    def test_satisfies_protocol(self) -> None:
        assert isinstance(MpvPlayer("/tmp/mpv.sock"), ControllablePlayer)


class TestMpvPlayerCommands:
    """Tests for MpvPlayer.play and MpvPlayer.pause."""

    @pytest.mark.parametrize("method, pause_value", [("play", False), ("pause", True)])
    def test_sets_pause_property(self, method: str, pause_value: bool) -> None:
        with patch(f"{PLAYER_MODULE}.send_mpv_command", return_value=True) as send:
            getattr(MpvPlayer("/tmp/mpv.sock"), method)()
        send.assert_called_once_with(
            "/tmp/mpv.sock", {"command": ["set_property", "pause", pause_value]}
        )

    def test_rejected_command_does_not_raise(self) -> None:
        with patch(f"{PLAYER_MODULE}.send_mpv_command", return_value=False):
            player = MpvPlayer("/tmp/mpv.sock")
            player.play()
            player.pause()


class TestMpvSocketHelpers:
    """Tests for the JSON IPC helpers with a missing socket."""

    def test_send_without_socket(self, tmp_path) -> None:
        assert send_mpv_command(str(tmp_path / "missing.sock"), {"command": ["stop"]}) is False
        assert send_mpv_command(None, {"command": ["stop"]}) is False

    def test_property_without_socket(self, tmp_path) -> None:
        assert get_mpv_property(str(tmp_path / "missing.sock"), "pause") is None
        assert get_mpv_property(None, "pause") is None

    def test_socket_closed_when_connect_fails(self, tmp_path) -> None:
        socket_file = tmp_path / "mpv.sock"
        socket_file.touch()
        sock = MagicMock()
        sock.connect.side_effect = ConnectionRefusedError("refused")
        with patch(f"{PLAYER_MODULE}.socket.socket", return_value=sock):
            assert send_mpv_command(str(socket_file), {"command": ["stop"]}) is False
            assert get_mpv_property(str(socket_file), "pause") is None
        assert sock.close.call_count == 2

    def test_socket_closed_when_recv_times_out(self, tmp_path) -> None:
        socket_file = tmp_path / "mpv.sock"
        socket_file.touch()
        sock = MagicMock()
        sock.recv.side_effect = TimeoutError("timed out")
        with patch(f"{PLAYER_MODULE}.socket.socket", return_value=sock):
            assert get_mpv_property(str(socket_file), "pause") is None
        sock.close.assert_called_once()
