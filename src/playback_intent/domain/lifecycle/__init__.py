"""Lifecycle domain - playback intent across app lifecycle transitions.

This domain handles:
- Lifecycle events (foreground/background, system pause/resume)
- User playback intent tracking
- Transition shielding for transient UI changes
"""

from .models import CoordinatorState, LifecycleEvent
from .coordinator import PlaybackIntentCoordinator

__all__ = [
    "CoordinatorState",
    "LifecycleEvent",
    "PlaybackIntentCoordinator",
]
