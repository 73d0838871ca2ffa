"""
Lifecycle domain models.

Contains the lifecycle event type and the coordinator's state record.
"""

from dataclasses import dataclass
from enum import Enum


class LifecycleEvent(Enum):
    """Host lifecycle transitions delivered to the coordinator.

    Values are the wire names used on the control socket and CLI.
    """

    FOREGROUND_ENTER = "foreground-enter"  # app became visible
    BACKGROUND_ENTER = "background-enter"  # app stopped / hidden
    SYSTEM_PAUSE = "system-pause"  # transient OS-level pause
    FOREGROUND_RESUME = "foreground-resume"  # app resumed by the system

    @classmethod
    def parse(cls, name: str) -> "LifecycleEvent":
        """Parse a wire name such as ``background-enter`` or ``SYSTEM_PAUSE``.

        Raises:
            ValueError: If the name is not a known lifecycle event
        """
        normalized = name.strip().lower().replace("_", "-")
        for event in cls:
            if event.value == normalized:
                return event
        valid = ", ".join(event.value for event in cls)
        raise ValueError(f"Unknown lifecycle event: {name!r}. Valid events are: {valid}")


@dataclass
class CoordinatorState:
    """Mutable state owned by a single PlaybackIntentCoordinator.

    Starts out "user paused" so nothing auto-plays before an explicit
    play signal.
    """

    user_paused_playback: bool = True
    was_playing_before_pause: bool = False
    last_playback_state: bool = False
    is_app_in_foreground: bool = True
    is_in_transition: bool = False

    def describe(self) -> str:
        """One-line summary for status output."""
        return (
            f"foreground={self.is_app_in_foreground} "
            f"transition={self.is_in_transition} "
            f"user_paused={self.user_paused_playback} "
            f"was_playing={self.was_playing_before_pause} "
            f"last_playing={self.last_playback_state}"
        )
