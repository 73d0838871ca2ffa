"""
Playback Intent CLI - Entry point with IPC support

Runs the coordinator (``serve``) or delivers lifecycle and user-action
events to a running instance over IPC.
"""

import argparse
import sys
from pathlib import Path
from typing import Optional

from playback_intent import ipc
from playback_intent.core.console import safe_print

# Subcommand -> (IPC command, args)
IPC_SUBCOMMANDS = {
    'foreground': ('foreground-enter', []),
    'background': ('background-enter', []),
    'system-pause': ('system-pause', []),
    'resume': ('foreground-resume', []),
    'play': ('user-playback', ['playing']),
    'pause': ('user-playback', ['paused']),
    'status': ('status', []),
}


def send_ipc_command(command: str, args: list, socket_path: Optional[Path] = None) -> int:
    """
    Send a command to running Playback Intent instance via IPC.

    Args:
        command: Command name
        args: Command arguments
        socket_path: Control socket path (default: resolved by the client)

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    success, message = ipc.send_command(command, args, socket_path=socket_path)

    if success:
        safe_print(message)
        return 0
    safe_print(message, style="red", stderr=True)
    return 1


def resolve_socket_path(socket_path: Optional[Path] = None) -> Optional[Path]:
    """
    Pick the control socket a client command should talk to.

    An explicit path wins, then [ipc] socket_path from an existing config
    file. None leaves the choice to the IPC client default.
    """
    if socket_path:
        return socket_path

    from playback_intent.core.config import get_config_path, load_config

    config_path = get_config_path()
    if not config_path.exists():
        return None
    cfg = load_config(config_path)
    if cfg.ipc.socket_path:
        return Path(cfg.ipc.socket_path)
    return None


def run_serve(args: argparse.Namespace) -> int:
    """Load configuration, apply command-line overrides and run the coordinator."""
    from playback_intent.core.config import load_config
    from playback_intent.main import run

    cfg = load_config(Path(args.config).expanduser() if args.config else None)
    if args.mpv_socket:
        cfg.player.mpv_socket_path = args.mpv_socket
    if args.allow_background:
        cfg.playback.allow_background_playback = True
    if args.log_level:
        cfg.logging.level = args.log_level.upper()
    if args.verbose:
        cfg.logging.console_output = True

    safe_print(
        f"Playback Intent serving (allow_background_playback="
        f"{cfg.playback.allow_background_playback}). Press Ctrl+C to stop.",
        style="green",
    )
    run(cfg, socket_path=args.serve_socket or args.socket)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='playback-intent',
        description="Playback Intent - lifecycle-aware play/pause coordination",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument(
        '--socket',
        type=Path,
        default=None,
        help='Control socket path (default: $XDG_RUNTIME_DIR/playback-intent/control.sock)'
    )

    subparsers = parser.add_subparsers(dest='subcommand', help='Available commands')

    serve_parser = subparsers.add_parser('serve', help='Run the coordinator')
    serve_parser.add_argument('--config', help='Path to config.toml')
    serve_parser.add_argument(
        '--socket',
        type=Path,
        dest='serve_socket',
        help='Control socket path (overrides [ipc] socket_path)'
    )
    serve_parser.add_argument('--mpv-socket', help='mpv JSON IPC socket to control')
    serve_parser.add_argument(
        '--allow-background',
        action='store_true',
        help='Keep playing when the app goes to the background'
    )
    serve_parser.add_argument('--log-level', help='Log level (DEBUG, INFO, ...)')
    serve_parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Also write log records to stderr'
    )

    # Lifecycle events
    subparsers.add_parser('foreground', help='App became visible')
    subparsers.add_parser('background', help='App went to the background')
    subparsers.add_parser('system-pause', help='System paused the app')
    subparsers.add_parser('resume', help='System resumed the app')

    # User actions
    subparsers.add_parser('play', help='User started playback')
    subparsers.add_parser('pause', help='User paused playback')

    transition_parser = subparsers.add_parser(
        'transition', help='Mark a UI transition (fullscreen, etc.)'
    )
    transition_parser.add_argument('state', choices=['start', 'end'])

    subparsers.add_parser('status', help='Show coordinator state')
    return parser


def main(argv: Optional[list] = None) -> None:
    """Main entry point for the playback-intent command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.subcommand is None:
        parser.print_help()
        sys.exit(1)

    if args.subcommand == 'serve':
        sys.exit(run_serve(args))

    socket_path = resolve_socket_path(args.socket)

    if args.subcommand == 'transition':
        sys.exit(send_ipc_command('transition', [args.state], socket_path))

    command, command_args = IPC_SUBCOMMANDS[args.subcommand]
    sys.exit(send_ipc_command(command, command_args, socket_path))


if __name__ == "__main__":
    main()
