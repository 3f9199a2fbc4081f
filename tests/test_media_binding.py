"""Tests for the media binding between QMediaPlayer and the playback clock."""

from __future__ import annotations

import pytest
from conftest import FakePlayer
from PySide6.QtCore import QUrl
from PySide6.QtMultimedia import QMediaPlayer

from convoreview.core.conversation import AudioSource
from convoreview.core.errors import ErrorKind
from convoreview.core.media_binding import MediaBinding
from convoreview.core.playback_clock import PlaybackClock, PlaybackStatus

Status = QMediaPlayer.MediaStatus


@pytest.fixture
def clock() -> PlaybackClock:
    return PlaybackClock()


@pytest.fixture
def media(fake_player: FakePlayer, clock: PlaybackClock) -> MediaBinding:
    binding = MediaBinding(player=fake_player)
    binding.attach(clock)
    return binding


def _load(media: MediaBinding, player: FakePlayer, duration_ms: int = 60_000) -> None:
    media.bind(AudioSource(url="http://localhost:8080/audio/c1/call.mp3", name="call.mp3"))
    player.mediaStatusChanged.emit(Status.LoadingMedia)
    player.durationChanged.emit(duration_ms)
    player.mediaStatusChanged.emit(Status.LoadedMedia)


def test_bind_resets_clock_and_loads_source(media: MediaBinding, fake_player: FakePlayer, clock: PlaybackClock) -> None:
    """Binding a source rewinds the clock and hands the URL to the player."""
    clock.advance(42.0)

    media.bind(AudioSource(url="http://localhost:8080/audio/c1/call.mp3"))

    assert clock.current_time == 0.0
    assert clock.status == PlaybackStatus.LOADING
    assert fake_player.calls[-1] == ("setSource", QUrl("http://localhost:8080/audio/c1/call.mp3"))


def test_loaded_media_marks_ready_with_duration(media: MediaBinding, fake_player: FakePlayer, clock: PlaybackClock) -> None:
    """Duration and readiness come from native events."""
    _load(media, fake_player)

    assert clock.status == PlaybackStatus.READY
    assert clock.duration == 60.0


def test_seek_is_optimistic_and_clamped(media: MediaBinding, fake_player: FakePlayer, clock: PlaybackClock) -> None:
    """Seeks move the clock immediately, clamped to the media length."""
    _load(media, fake_player, duration_ms=30_000)

    assert media.seek(75.0) == 30.0
    assert clock.current_time == 30.0
    assert media.seek(-5.0) == 0.0
    assert media.seek(12.25) == 12.25
    assert fake_player.positions() == [30_000, 0, 12_250]


def test_native_position_reconciles_optimistic_seek(
    media: MediaBinding, fake_player: FakePlayer, clock: PlaybackClock
) -> None:
    """The media element's reported position is authoritative."""
    _load(media, fake_player)
    media.seek(20.0)

    fake_player.positionChanged.emit(19_800)

    assert clock.current_time == pytest.approx(19.8)


def test_seek_without_source_does_nothing(media: MediaBinding, fake_player: FakePlayer) -> None:
    """There is nothing to seek before a source is bound."""
    assert media.seek(10.0) == 0.0
    assert fake_player.positions() == []


def test_play_before_ready_is_deferred(media: MediaBinding, fake_player: FakePlayer) -> None:
    """A play intent issued while loading starts once media is loaded."""
    media.bind(AudioSource(url="http://localhost:8080/audio/c1/call.mp3"))
    media.play()

    assert "play" not in fake_player.names()
    assert media.pending_play

    fake_player.mediaStatusChanged.emit(Status.LoadedMedia)

    assert "play" in fake_player.names()
    assert not media.pending_play


def test_playback_state_follows_player(media: MediaBinding, fake_player: FakePlayer, clock: PlaybackClock) -> None:
    """Play state is taken from the player, not from the command."""
    _load(media, fake_player)
    media.play()
    assert not clock.is_playing

    fake_player.playbackStateChanged.emit(QMediaPlayer.PlaybackState.PlayingState)
    assert clock.is_playing

    media.pause()
    fake_player.playbackStateChanged.emit(QMediaPlayer.PlaybackState.PausedState)
    assert clock.status == PlaybackStatus.PAUSED


def test_end_of_media_rewinds(media: MediaBinding, fake_player: FakePlayer, clock: PlaybackClock) -> None:
    """Reaching the end stops playback at time zero."""
    _load(media, fake_player)
    fake_player.playbackStateChanged.emit(QMediaPlayer.PlaybackState.PlayingState)
    fake_player.positionChanged.emit(60_000)

    fake_player.mediaStatusChanged.emit(Status.EndOfMedia)

    assert clock.status == PlaybackStatus.ENDED
    assert clock.current_time == 0.0
    assert not clock.is_playing
    assert fake_player.positions()[-1] == 0


def test_player_error_is_terminal(media: MediaBinding, fake_player: FakePlayer, clock: PlaybackClock) -> None:
    """A decode error stops playback and blocks further play commands."""
    _load(media, fake_player)
    fake_player.errorOccurred.emit(QMediaPlayer.Error.FormatError, "unsupported codec")

    assert clock.status == PlaybackStatus.ERRORED
    assert clock.last_error == ErrorKind.PLAYBACK_FAILURE
    assert clock.state.error_message == "unsupported codec"

    fake_player.calls.clear()
    media.play()
    assert fake_player.names() == []


def test_invalid_media_is_an_error(media: MediaBinding, fake_player: FakePlayer, clock: PlaybackClock) -> None:
    """Unsupported media surfaces as a playback failure."""
    media.bind(AudioSource(url="http://localhost:8080/audio/c1/broken.bin"))
    fake_player.mediaStatusChanged.emit(Status.InvalidMedia)

    assert clock.status == PlaybackStatus.ERRORED


def test_rejected_command_records_error(media: MediaBinding, fake_player: FakePlayer, clock: PlaybackClock) -> None:
    """Exceptions from player commands land in the clock, not the caller."""
    _load(media, fake_player)
    fake_player.fail_on.add("play")

    media.play()

    assert clock.status == PlaybackStatus.ERRORED


def test_no_error_signal_is_ignored(media: MediaBinding, fake_player: FakePlayer, clock: PlaybackClock) -> None:
    """NoError notifications do not fail the clock."""
    _load(media, fake_player)
    fake_player.errorOccurred.emit(QMediaPlayer.Error.NoError, "")

    assert clock.status == PlaybackStatus.READY


def test_detach_releases_player_and_ignores_late_events(
    media: MediaBinding, fake_player: FakePlayer, clock: PlaybackClock
) -> None:
    """After detaching, native events no longer reach the old clock."""
    _load(media, fake_player)
    media.seek(10.0)

    media.detach()
    fake_player.positionChanged.emit(50_000)
    fake_player.mediaStatusChanged.emit(Status.EndOfMedia)

    assert clock.current_time == 10.0
    assert media.clock is None
    assert not media.has_source
    assert ("stop", None) in fake_player.calls
    assert fake_player.calls[-1] == ("setSource", QUrl())
