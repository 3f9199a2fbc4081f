"""Media binding - the only owner of the platform audio element"""

from typing import Optional

from loguru import logger
from PySide6.QtCore import QObject, QUrl
from PySide6.QtMultimedia import QAudioOutput, QMediaPlayer

from .conversation import AudioSource
from .errors import PlaybackFailure
from .playback_clock import PlaybackClock, PlaybackStatus


class MediaBinding(QObject):
    """
    Binds a PlaybackClock to a QMediaPlayer.

    Commands (play, pause, seek) go out to the player; native events
    (position, duration, status, errors) come back as clock mutations.
    Commands are fire-and-forget: failures are observable only through the
    clock's error state.
    """

    def __init__(self, player=None, audio_output=None, volume: float = 1.0, parent=None):
        super().__init__(parent)

        if player is None:
            player = QMediaPlayer(self)
            audio_output = audio_output or QAudioOutput(self)
            player.setAudioOutput(audio_output)

        self._player = player
        self._audio_output: Optional[QAudioOutput] = audio_output
        self._clock: Optional[PlaybackClock] = None
        self._source: Optional[AudioSource] = None
        self._pending_play = False

        self.set_volume(volume)

        self._player.positionChanged.connect(self._on_position_changed)
        self._player.durationChanged.connect(self._on_duration_changed)
        self._player.mediaStatusChanged.connect(self._on_media_status_changed)
        self._player.errorOccurred.connect(self._on_error_occurred)
        self._player.playbackStateChanged.connect(self._on_playback_state_changed)

    @property
    def source(self) -> Optional[AudioSource]:
        return self._source

    @property
    def has_source(self) -> bool:
        return self._source is not None and self._clock is not None

    @property
    def pending_play(self) -> bool:
        return self._pending_play

    @property
    def clock(self) -> Optional[PlaybackClock]:
        return self._clock

    def attach(self, clock: PlaybackClock):
        """Route native events into a session's clock"""
        if self._clock is not None and self._clock is not clock:
            self.detach()
        self._clock = clock

    def detach(self):
        """Release the player from the current source and clock"""
        self._pending_play = False
        self._clock = None
        had_source = self._source is not None
        self._source = None
        if had_source:
            try:
                self._player.stop()
                self._player.setSource(QUrl())
            except Exception as e:
                logger.error(f"Failed to release media source: {e}")
            logger.debug("Media binding detached")

    def bind(self, source: AudioSource):
        """Load a new source; a pending play intent starts once it is loadable"""
        if self._clock is None:
            logger.warning("bind() called without an attached clock, ignoring")
            return

        self._source = source
        self._clock.reset()
        self._clock.mark_loading()
        logger.info(f"Binding audio source: {source.display_name or source.locator}")

        try:
            self._player.setSource(QUrl.fromUserInput(source.locator))
        except Exception as e:
            self._fail(f"Could not load audio source: {e}")

    def request_play_when_ready(self):
        """Record a play intent to honour as soon as media is loaded"""
        self._pending_play = True

    def play(self):
        if self._clock is None:
            return
        if self._source is None:
            self._pending_play = True
            return

        status = self._clock.status
        if status == PlaybackStatus.ERRORED:
            logger.debug("Ignoring play after media error; re-select the conversation to retry")
            return
        if status in (PlaybackStatus.IDLE, PlaybackStatus.LOADING):
            self._pending_play = True
            return

        self._issue_play()

    def pause(self):
        self._pending_play = False
        if not self.has_source:
            return
        try:
            self._player.pause()
        except Exception as e:
            self._fail(f"Pause failed: {e}")

    def toggle(self):
        if self._clock is not None and self._clock.is_playing:
            self.pause()
        else:
            self.play()

    def seek(self, time: float) -> float:
        """Seek and update the clock optimistically; native position events reconcile"""
        if not self.has_source:
            return 0.0

        target = self._clock.clamp(time)
        try:
            self._player.setPosition(int(round(target * 1000)))
        except Exception as e:
            self._fail(f"Seek failed: {e}")
            return self._clock.current_time

        return self._clock.advance(target)

    def set_volume(self, volume: float):
        volume = min(1.0, max(0.0, volume))
        if self._audio_output is not None:
            self._audio_output.setVolume(volume)

    def _issue_play(self):
        self._pending_play = False
        try:
            self._player.play()
        except Exception as e:
            self._fail(f"Play failed: {e}")

    def _fail(self, message: str):
        error = PlaybackFailure(message)
        self._pending_play = False
        if self._clock is not None:
            self._clock.record_error(error.kind, error.message)

    # ===== Native media events =====

    def _on_position_changed(self, position_ms: int):
        if not self.has_source:
            return
        self._clock.advance(position_ms / 1000.0)

    def _on_duration_changed(self, duration_ms: int):
        if not self.has_source or duration_ms < 0:
            return
        self._clock.set_duration(duration_ms / 1000.0)

    def _on_media_status_changed(self, status):
        if not self.has_source:
            return

        if status == QMediaPlayer.MediaStatus.LoadingMedia:
            self._clock.mark_loading()
        elif status in (QMediaPlayer.MediaStatus.LoadedMedia, QMediaPlayer.MediaStatus.BufferedMedia):
            self._clock.mark_ready()
            if self._pending_play and self._clock.status != PlaybackStatus.ERRORED:
                self._issue_play()
        elif status == QMediaPlayer.MediaStatus.EndOfMedia:
            self._clock.mark_ended()
            self._player.setPosition(0)
        elif status == QMediaPlayer.MediaStatus.InvalidMedia:
            self._fail("Invalid or unsupported media")

    def _on_error_occurred(self, error, message: str = ""):
        if error == QMediaPlayer.Error.NoError or not self.has_source:
            return
        self._fail(message or str(error))

    def _on_playback_state_changed(self, state):
        if not self.has_source:
            return
        self._clock.set_playing(state == QMediaPlayer.PlaybackState.PlayingState)
