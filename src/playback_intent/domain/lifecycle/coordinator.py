"""
Playback intent coordinator.

Decides whether the player should be playing or paused as the app moves
between foreground and background, and remembers who stopped playback.
The player raises the same "stopped" signal whether the user tapped pause,
the OS took the foreground, or a UI transition churned the surface; only
the user's pause must survive a return to the foreground.

All methods run synchronously on the caller's thread. The coordinator is
not thread-safe: callers serialize access (see ipc.server).
"""

import dataclasses
from contextlib import contextmanager
from typing import Callable, Iterator, Optional, TypeVar

from loguru import logger

from playback_intent.domain.playback.player import ControllablePlayer

from .models import CoordinatorState, LifecycleEvent

T = TypeVar("T")


class PlaybackIntentCoordinator:
    """Applies lifecycle and user-action events to a single player.

    Issues at most one play/pause command per event. An unbound player
    (``None``) reads as not playing and turns every command into a no-op.
    """

    def __init__(
        self,
        player: Optional[ControllablePlayer] = None,
        allow_background_playback: bool = False,
    ):
        """Initialize the coordinator.

        Args:
            player: Player to control, or None until one is bound
            allow_background_playback: Keep playing when the app is backgrounded
        """
        self._player = player
        self._allow_background_playback = allow_background_playback
        self._state = CoordinatorState()

        self._handlers: dict[LifecycleEvent, Callable[[], None]] = {
            LifecycleEvent.FOREGROUND_ENTER: self.on_foreground_enter,
            LifecycleEvent.BACKGROUND_ENTER: self.on_background_enter,
            LifecycleEvent.SYSTEM_PAUSE: self.on_system_pause,
            LifecycleEvent.FOREGROUND_RESUME: self.on_foreground_resume,
        }

        logger.debug(
            f"Coordinator created: player={player!r}, "
            f"allow_background_playback={allow_background_playback}"
        )

    @property
    def player(self) -> Optional[ControllablePlayer]:
        return self._player

    @property
    def allow_background_playback(self) -> bool:
        return self._allow_background_playback

    @property
    def is_in_transition(self) -> bool:
        return self._state.is_in_transition

    @property
    def state(self) -> CoordinatorState:
        """Snapshot of the current state. Mutating it has no effect."""
        return dataclasses.replace(self._state)

    def bind_player(self, player: Optional[ControllablePlayer]) -> None:
        """Bind a different player (or None to unbind). State is kept."""
        logger.info(f"Binding player: {player!r}")
        self._player = player

    # Player access

    def _is_playing(self) -> bool:
        if self._player is None:
            return False
        return bool(self._player.is_playing)

    def _play(self) -> None:
        if self._player is None:
            logger.debug("No player bound, skipping play")
            return
        logger.info("Resuming playback")
        self._player.play()

    def _pause(self) -> None:
        if self._player is None:
            logger.debug("No player bound, skipping pause")
            return
        logger.info("Pausing playback")
        self._player.pause()

    # Transition handling

    def mark_transition(self, active: bool) -> None:
        """Mark a transient UI transition (fullscreen toggle, etc.) as active or done.

        Lifecycle handling is suppressed while active. Transitions do not
        nest: the last call wins.
        """
        self._state.is_in_transition = active
        logger.debug(f"Transition state changed: {active}")

    @contextmanager
    def transition(self) -> Iterator[None]:
        """Suppress lifecycle handling for the duration of the block.

        The flag is cleared on every exit path, including exceptions.
        """
        self.mark_transition(True)
        try:
            yield
        finally:
            self.mark_transition(False)

    def preserve_across_transition(self, action: Callable[[], T]) -> T:
        """Run ``action`` and restore the playing/paused state it started with.

        Use for surface changes (re-parenting a view, entering fullscreen)
        that may stop and restart the underlying player. If ``action``
        raises, the transition flag is still cleared and the exception
        propagates without a restoring command.

        Args:
            action: Callable performing the transient mutation

        Returns:
            Whatever ``action`` returns
        """
        was_playing = self._is_playing()
        with self.transition():
            result = action()

            is_playing = self._is_playing()
            if was_playing and not is_playing:
                logger.debug("Transition stopped playback, restoring play")
                self._play()
            elif not was_playing and is_playing:
                logger.debug("Transition started playback, restoring pause")
                self._pause()

        return result

    # User intent

    def notify_user_playback_change(self, is_playing: bool) -> None:
        """Record a playback change attributable to the user or normal playback.

        Only tracked while foregrounded and outside a transition. A stop is
        taken as a user pause only if playback was running before, so the
        initial not-yet-started state is never read as a pause.
        """
        logger.debug(
            f"Playback state changed: {is_playing}, "
            f"in_transition={self._state.is_in_transition}"
        )
        if not self._state.is_app_in_foreground or self._state.is_in_transition:
            return

        if is_playing:
            self._state.user_paused_playback = False
        elif self._state.last_playback_state:
            self._state.user_paused_playback = True
        self._state.last_playback_state = is_playing

    # Lifecycle events

    def handle(self, event: LifecycleEvent) -> None:
        """Dispatch a lifecycle event to its handler."""
        self._handlers[event]()

    def on_foreground_enter(self) -> None:
        self._state.is_app_in_foreground = True
        logger.debug("Lifecycle foreground-enter")

    def on_background_enter(self) -> None:
        if self._state.is_in_transition:
            logger.debug("In transition, ignoring background-enter")
            return

        self._state.is_app_in_foreground = False
        logger.debug(
            f"Lifecycle background-enter, "
            f"allow_background_playback={self._allow_background_playback}"
        )

        if self._allow_background_playback:
            logger.debug("Background playback enabled, continuing playback")
            return

        if self._is_playing():
            self._state.was_playing_before_pause = True
            self._pause()
        else:
            self._state.was_playing_before_pause = False

    def on_system_pause(self) -> None:
        if self._state.is_in_transition:
            logger.debug("In transition, ignoring system-pause")
            return

        logger.debug(
            f"Lifecycle system-pause, "
            f"allow_background_playback={self._allow_background_playback}"
        )

        if self._player is None:
            logger.debug("No player bound, ignoring system-pause")
            return

        is_playing = self._is_playing()
        self._state.last_playback_state = is_playing

        # Stopped while the user is in the app: treat as their pause
        if self._state.is_app_in_foreground and not is_playing:
            self._state.user_paused_playback = True

        if self._allow_background_playback:
            logger.debug("Background playback enabled, skipping pause")
            self._state.was_playing_before_pause = is_playing
            return

        if is_playing:
            self._state.was_playing_before_pause = True
            self._pause()
        else:
            self._state.was_playing_before_pause = False

    def on_foreground_resume(self) -> None:
        if self._state.is_in_transition:
            logger.debug("In transition, ignoring foreground-resume")
            return

        logger.debug(
            f"Lifecycle foreground-resume, "
            f"was_playing={self._state.was_playing_before_pause}, "
            f"user_paused={self._state.user_paused_playback}"
        )
        # Never override a pause the user asked for
        if self._state.was_playing_before_pause and not self._state.user_paused_playback:
            self._play()
