"""Tests for per-conversation session state."""

from __future__ import annotations

from conftest import sentence

from convoreview.core.conversation import AudioSource, ConversationDetail
from convoreview.core.errors import ErrorKind
from convoreview.core.playback_clock import PlaybackStatus
from convoreview.core.session import ConversationSession, FetchState
from convoreview.core.sync_resolver import ActivePosition


def _detail(**fields) -> ConversationDetail:
    payload = {
        "id": "c1",
        "name": "Support call",
        "transcript": [sentence("Hello", 0.0, 5.0), sentence("Bye", 7.0, 10.0)],
        "summary": "Customer asked for a refund.",
        "action_items": ["Issue refund"],
        "chat_history": [{"content": "What happened?"}],
    }
    payload.update(fields)
    return ConversationDetail.model_validate(payload)


def _session() -> ConversationSession:
    session = ConversationSession("c1", token=1, name="From list")
    session.begin_fetches()
    return session


def test_new_session_is_loading() -> None:
    """Both fetches start out loading with nothing to show."""
    view = _session().view_model()

    assert view.transcript_state == FetchState.LOADING
    assert view.audio_state == FetchState.LOADING
    assert view.is_loading
    assert not view.controls_enabled
    assert view.active is None
    assert view.error_banner is None
    assert view.title == "From list"


def test_apply_detail_populates_view() -> None:
    """Transcript, insights and chat history come from the detail."""
    session = _session()
    session.apply_detail(_detail())
    view = session.view_model()

    assert view.transcript_state == FetchState.READY
    assert [s.text for s in view.sentences] == ["Hello", "Bye"]
    assert view.summary == "Customer asked for a refund."
    assert view.action_items == ("Issue refund",)
    assert view.chat_lines == ("You: What happened?",)
    assert view.title == "Support call"
    assert view.active == ActivePosition(0, None)


def test_empty_transcript_is_ready_not_failed() -> None:
    """A conversation without sentences shows the empty state."""
    session = _session()
    session.apply_detail(_detail(transcript=None))
    view = session.view_model()

    assert view.transcript_state == FetchState.READY
    assert view.show_empty_transcript
    assert view.active is None


def test_clock_changes_drive_active_position() -> None:
    """Advancing the clock re-resolves the active sentence synchronously."""
    session = _session()
    session.apply_detail(_detail())
    changes: list[bool] = []
    session.set_on_change_callback(lambda s, active_changed: changes.append(active_changed))

    session.clock.advance(8.0)
    assert session.active == ActivePosition(1, None)

    session.clock.advance(6.0)
    assert session.active is None

    session.clock.advance(6.5)
    assert changes == [True, True, False]


def test_audio_failure_keeps_transcript() -> None:
    """A failed audio fetch leaves the transcript usable and disables controls."""
    session = _session()
    session.apply_detail(_detail())
    session.fail_audio("GET /conversations/c1/audio returned 500")
    view = session.view_model()

    assert view.transcript_state == FetchState.READY
    assert view.audio_state == FetchState.FAILED
    assert not view.controls_enabled
    assert len(view.sentences) == 2
    assert "Audio unavailable" in view.error_banner


def test_missing_audio_is_not_an_error() -> None:
    """No audio attached means no controls but also no banner."""
    session = _session()
    session.apply_audio(None)
    view = session.view_model()

    assert view.audio_state == FetchState.READY
    assert not view.has_audio
    assert not view.controls_enabled
    assert view.error_banner is None


def test_playback_error_disables_controls() -> None:
    """Controls are off once the media element has failed."""
    session = _session()
    session.apply_audio(AudioSource(url="http://localhost/audio.mp3"))
    assert session.controls_enabled

    session.clock.record_error(ErrorKind.PLAYBACK_FAILURE, "unsupported codec")

    assert session.clock.status == PlaybackStatus.ERRORED
    assert not session.controls_enabled
    assert "Playback failed: unsupported codec" in session.error_banner


def test_transcript_failure_banner() -> None:
    """A failed transcript fetch is reported without touching the audio slice."""
    session = _session()
    session.fail_transcript("timed out")

    assert session.transcript_fetch.state == FetchState.FAILED
    assert session.audio_fetch.state == FetchState.LOADING
    assert session.error_banner == "Transcript unavailable: timed out"


def test_closed_session_stops_notifying() -> None:
    """Clock changes after close reach nobody."""
    session = _session()
    calls: list[bool] = []
    session.set_on_change_callback(lambda s, changed: calls.append(changed))

    session.close()
    session.clock.advance(3.0)

    assert calls == []
