"""Playback clock - the single source of truth for the playback position"""

import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Optional

from loguru import logger

from .errors import ErrorKind


class PlaybackStatus(Enum):
    """Playback state enumeration"""
    IDLE = "idle"  # no source bound
    LOADING = "loading"
    READY = "ready"
    PLAYING = "playing"
    PAUSED = "paused"
    ENDED = "ended"
    ERRORED = "errored"  # terminal until the next reset


@dataclass(frozen=True)
class PlaybackState:
    """Snapshot of the clock for the presentation layer"""
    current_time: float = 0.0  # seconds
    duration: float = 0.0  # seconds, 0 = unknown
    status: PlaybackStatus = PlaybackStatus.IDLE
    last_error: Optional[ErrorKind] = None
    error_message: Optional[str] = None

    @property
    def is_playing(self) -> bool:
        return self.status == PlaybackStatus.PLAYING

    @property
    def has_duration(self) -> bool:
        return self.duration > 0


class PlaybackClock:
    """
    Owns current time, duration and play state.

    Mutations come from MediaBinding (native media events and optimistic seeks).
    Every effective change is reported synchronously to the change callback.
    """

    def __init__(self):
        self._state = PlaybackState()
        self._on_change_callback: Optional[Callable[[PlaybackState], None]] = None

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def current_time(self) -> float:
        return self._state.current_time

    @property
    def duration(self) -> float:
        return self._state.duration

    @property
    def status(self) -> PlaybackStatus:
        return self._state.status

    @property
    def is_playing(self) -> bool:
        return self._state.is_playing

    @property
    def last_error(self) -> Optional[ErrorKind]:
        return self._state.last_error

    def set_on_change_callback(self, callback: Optional[Callable[[PlaybackState], None]]):
        """Set callback invoked after every effective state change"""
        self._on_change_callback = callback

    def clamp(self, time: float) -> float:
        """Clamp a time into [0, duration], or [0, inf) while duration is unknown"""
        time = max(0.0, time)
        if self._state.duration > 0:
            time = min(time, self._state.duration)
        return time

    def advance(self, time: float) -> float:
        """Set the current time, clamped to the known range"""
        if not math.isfinite(time):
            logger.debug(f"Ignoring non-finite playback time: {time}")
            return self._state.current_time
        clamped = self.clamp(float(time))
        self._update(current_time=clamped)
        return clamped

    def set_duration(self, duration: float):
        """Record the media duration once metadata is loaded"""
        if duration < 0:
            raise ValueError(f"Duration must be non-negative, got {duration}")
        current = self._state.current_time
        if duration > 0:
            current = min(current, duration)
        self._update(duration=float(duration), current_time=current)

    def set_playing(self, playing: bool):
        """Reflect the media element's actual play state"""
        status = self._state.status
        if playing:
            if status == PlaybackStatus.ERRORED:
                logger.warning("Media reported playing after an error, ignoring")
                return
            self._update(status=PlaybackStatus.PLAYING)
        elif status == PlaybackStatus.PLAYING:
            self._update(status=PlaybackStatus.PAUSED)

    def mark_loading(self):
        if self._state.status == PlaybackStatus.ERRORED:
            return
        self._update(status=PlaybackStatus.LOADING)

    def mark_ready(self):
        if self._state.status in (PlaybackStatus.IDLE, PlaybackStatus.LOADING):
            self._update(status=PlaybackStatus.READY)

    def mark_ended(self):
        """Restart semantics: stop and rewind to the beginning"""
        if self._state.status == PlaybackStatus.ERRORED:
            return
        self._update(status=PlaybackStatus.ENDED, current_time=0.0)

    def record_error(self, kind: ErrorKind, message: Optional[str] = None):
        """Record a terminal media error, which also stops playback"""
        logger.error(f"Playback error ({kind.value}): {message or 'no details'}")
        self._update(status=PlaybackStatus.ERRORED, last_error=kind, error_message=message)

    def reset(self):
        """Return to the initial state (called when the source changes)"""
        self._update(
            current_time=0.0,
            duration=0.0,
            status=PlaybackStatus.IDLE,
            last_error=None,
            error_message=None,
        )

    def _update(self, **changes):
        new_state = replace(self._state, **changes)
        if new_state == self._state:
            return
        self._state = new_state
        if self._on_change_callback:
            self._on_change_callback(new_state)
