"""
Configuration management for Playback Intent
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


@dataclass
class PlaybackConfig:
    """Configuration for lifecycle-driven playback decisions."""

    allow_background_playback: bool = False


@dataclass
class PlayerConfig:
    """Configuration for the controlled player."""

    mpv_socket_path: Optional[str] = None


@dataclass
class IPCConfig:
    """Configuration for IPC (Inter-Process Communication)."""

    enabled: bool = True
    socket_path: Optional[str] = None  # Default: XDG_RUNTIME_DIR/playback-intent/control.sock


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_file: Optional[str] = (
        None  # Custom log file path (default: ~/.local/share/playback-intent/playback-intent.log)
    )
    console_output: bool = False  # Also output to console (for debugging)


@dataclass
class Config:
    """Main configuration object."""

    playback: PlaybackConfig = field(default_factory=PlaybackConfig)
    player: PlayerConfig = field(default_factory=PlayerConfig)
    ipc: IPCConfig = field(default_factory=IPCConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    config_home = os.environ.get("XDG_CONFIG_HOME")
    if config_home:
        return Path(config_home) / "playback-intent"
    return Path.home() / ".config" / "playback-intent"


def _find_project_config() -> Optional[Path]:
    """Find config.toml in project root by looking for pyproject.toml.

    Returns:
        Path to config.toml in project root, or None if not found
    """
    try:
        current = Path(__file__).resolve().parent
        for parent in [current] + list(current.parents):
            if (parent / "pyproject.toml").exists():
                config_path = parent / "config.toml"
                if config_path.exists():
                    return config_path
                # Found project root but no config.toml there
                return None
    except OSError:
        pass
    return None


def get_config_path() -> Path:
    """Get the main configuration file path.

    Checks for config.toml in the following order:
    1. Project root (detected via pyproject.toml) - for development
    2. Current working directory
    3. XDG_CONFIG_HOME/playback-intent (or ~/.config/playback-intent)
    """
    project_config = _find_project_config()
    if project_config:
        return project_config

    local_config = Path.cwd() / "config.toml"
    if local_config.exists():
        return local_config

    return get_config_dir() / "config.toml"


def get_data_dir() -> Path:
    """Get the data directory path."""
    data_home = os.environ.get("XDG_DATA_HOME")
    if data_home:
        return Path(data_home) / "playback-intent"
    return Path.home() / ".local" / "share" / "playback-intent"


def create_default_config() -> str:
    """Create a default configuration TOML content."""
    return """
# Playback Intent Configuration

[playback]
# Keep playing when the app goes to the background
allow_background_playback = false

[player]
# Path of a running mpv JSON IPC socket (mpv --input-ipc-server=...)
# mpv_socket_path = "/tmp/mpv-socket"

[ipc]
# Accept lifecycle and user-action commands on a Unix socket
enabled = true

# Custom control socket path (default: $XDG_RUNTIME_DIR/playback-intent/control.sock)
# socket_path = "/run/user/1000/playback-intent/control.sock"

[logging]
# Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
level = "INFO"

# Custom log file path (default: ~/.local/share/playback-intent/playback-intent.log)
# log_file = "/path/to/custom/playback-intent.log"

# Also output logs to console (useful for debugging)
console_output = false
""".strip()


def _parse_bool(value: str) -> Optional[bool]:
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    return None


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from file or create default.

    Environment variables override TOML values:
    - PLAYBACK_INTENT_ALLOW_BACKGROUND
    - PLAYBACK_INTENT_MPV_SOCKET

    Args:
        config_path: Explicit config file (default: resolved via get_config_path)
    """
    # Load .env file from config directory if it exists
    from dotenv import load_dotenv

    env_path = get_config_dir() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    if config_path is None:
        config_path = get_config_path()

    config = Config()

    if not config_path.exists():
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            f.write(create_default_config())
        print(f"Created default configuration at: {config_path}")
    else:
        try:
            with open(config_path, "rb") as f:
                toml_data = tomllib.load(f)

            if "playback" in toml_data:
                playback_data = toml_data["playback"]
                config.playback = PlaybackConfig(
                    allow_background_playback=bool(
                        playback_data.get(
                            "allow_background_playback",
                            config.playback.allow_background_playback,
                        )
                    ),
                )

            if "player" in toml_data:
                player_data = toml_data["player"]
                socket_path = player_data.get("mpv_socket_path")
                if socket_path:
                    socket_path = str(Path(socket_path).expanduser())
                config.player = PlayerConfig(mpv_socket_path=socket_path)

            if "ipc" in toml_data:
                ipc_data = toml_data["ipc"]
                socket_path = ipc_data.get("socket_path")
                if socket_path:
                    socket_path = str(Path(socket_path).expanduser())
                config.ipc = IPCConfig(
                    enabled=ipc_data.get("enabled", config.ipc.enabled),
                    socket_path=socket_path,
                )

            if "logging" in toml_data:
                logging_data = toml_data["logging"]
                log_file = logging_data.get("log_file")
                if log_file:
                    log_file = str(Path(log_file).expanduser())
                config.logging = LoggingConfig(
                    level=logging_data.get("level", config.logging.level).upper(),
                    log_file=log_file,
                    console_output=logging_data.get(
                        "console_output", config.logging.console_output
                    ),
                )

        except (OSError, tomllib.TOMLDecodeError, AttributeError) as e:
            print(f"Error loading configuration from {config_path}: {e}")
            print("Using default configuration.")
            config = Config()

    # Environment overrides apply on top of file values
    allow_background = os.environ.get("PLAYBACK_INTENT_ALLOW_BACKGROUND")
    if allow_background:
        parsed = _parse_bool(allow_background)
        if parsed is not None:
            config.playback.allow_background_playback = parsed

    mpv_socket = os.environ.get("PLAYBACK_INTENT_MPV_SOCKET")
    if mpv_socket:
        config.player.mpv_socket_path = mpv_socket

    return config

