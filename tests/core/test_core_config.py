"""Tests for configuration loading."""

from pathlib import Path

import pytest

from playback_intent.core.config import (
    Config,
    create_default_config,
    get_config_dir,
    get_data_dir,
    load_config,
)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Point XDG dirs at tmp_path and clear overrides."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.delenv("PLAYBACK_INTENT_ALLOW_BACKGROUND", raising=False)
    monkeypatch.delenv("PLAYBACK_INTENT_MPV_SOCKET", raising=False)


def write_config(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "config.toml"
    path.write_text(content, encoding="utf-8")
    return path


class TestDirectories:
    def test_xdg_dirs(self, tmp_path: Path) -> None:
        assert get_config_dir() == tmp_path / "config" / "playback-intent"
        assert get_data_dir() == tmp_path / "data" / "playback-intent"


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults(self) -> None:
        config = Config()
        assert config.playback.allow_background_playback is False
        assert config.player.mpv_socket_path is None
        assert config.ipc.enabled is True
        assert config.logging.level == "INFO"

    def test_creates_default_file(self, tmp_path: Path) -> None:
        path = tmp_path / "new" / "config.toml"
        config = load_config(path)
        assert path.read_text(encoding="utf-8") == create_default_config()
        assert config == Config()

    def test_default_file_round_trips(self, tmp_path: Path) -> None:
        """The generated default file parses back to the defaults."""
        path = write_config(tmp_path, create_default_config())
        assert load_config(path) == Config()

    def test_reads_sections(self, tmp_path: Path) -> None:
        path = write_config(
            tmp_path,
            """
[playback]
allow_background_playback = true

[player]
mpv_socket_path = "/tmp/mpv.sock"

[ipc]
enabled = false
socket_path = "/tmp/pi.sock"

[logging]
level = "debug"
console_output = true
""",
        )
        config = load_config(path)
        assert config.playback.allow_background_playback is True
        assert config.player.mpv_socket_path == "/tmp/mpv.sock"
        assert config.ipc.enabled is False
        assert config.ipc.socket_path == "/tmp/pi.sock"
        assert config.logging.level == "DEBUG"
        assert config.logging.console_output is True

    def test_invalid_toml_falls_back_to_defaults(
        self, tmp_path: Path, capsys: pytest.CaptureFixture
    ) -> None:
        path = write_config(tmp_path, "[playback\nallow_background_playback = ")
        assert load_config(path) == Config()
        assert "Using default configuration." in capsys.readouterr().out

    def test_env_overrides(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        path = write_config(tmp_path, "[playback]\nallow_background_playback = false\n")
        monkeypatch.setenv("PLAYBACK_INTENT_ALLOW_BACKGROUND", "yes")
        monkeypatch.setenv("PLAYBACK_INTENT_MPV_SOCKET", "/run/mpv.sock")
        config = load_config(path)
        assert config.playback.allow_background_playback is True
        assert config.player.mpv_socket_path == "/run/mpv.sock"

    def test_unrecognized_env_value_is_ignored(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        path = write_config(tmp_path, "[playback]\nallow_background_playback = true\n")
        monkeypatch.setenv("PLAYBACK_INTENT_ALLOW_BACKGROUND", "sometimes")
        assert load_config(path).playback.allow_background_playback is True

    def test_dotenv_in_config_dir(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        env_dir = tmp_path / "config" / "playback-intent"
        env_dir.mkdir(parents=True)
        (env_dir / ".env").write_text(
            "PLAYBACK_INTENT_ALLOW_BACKGROUND=true\n", encoding="utf-8"
        )
        path = write_config(tmp_path, "")
        config = load_config(path)
        assert config.playback.allow_background_playback is True
        # load_dotenv writes into os.environ; let monkeypatch restore it
        monkeypatch.delenv("PLAYBACK_INTENT_ALLOW_BACKGROUND", raising=False)
