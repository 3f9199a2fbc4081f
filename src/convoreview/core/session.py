"""Conversation session - all state scoped to one selected conversation"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple

from loguru import logger

from .chat_log import ChatEntry, ChatLog
from .conversation import AudioSource, ConversationDetail
from .playback_clock import PlaybackClock, PlaybackState, PlaybackStatus
from .sync_resolver import ActivePosition, SyncResolver
from .transcript import TranscriptSentence, TranscriptStore


class FetchState(Enum):
    """Lifecycle of one independent fetch"""
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


@dataclass
class FetchSlice:
    """State of one sub-fetch; each fetch writes only its own slice"""
    state: FetchState = FetchState.IDLE
    error: Optional[str] = None

    @property
    def is_loading(self) -> bool:
        return self.state == FetchState.LOADING

    @property
    def is_settled(self) -> bool:
        return self.state in (FetchState.READY, FetchState.FAILED)

    def start(self):
        self.state = FetchState.LOADING
        self.error = None

    def succeed(self):
        self.state = FetchState.READY
        self.error = None

    def fail(self, error: str):
        self.state = FetchState.FAILED
        self.error = error


@dataclass(frozen=True)
class SessionViewModel:
    """Everything the presentation layer renders for a session"""
    conversation_id: str
    title: str
    playback: PlaybackState
    active: Optional[ActivePosition]
    sentences: Tuple[TranscriptSentence, ...]
    summary: str
    action_items: Tuple[str, ...]
    chat_entries: Tuple[ChatEntry, ...]
    transcript_state: FetchState
    audio_state: FetchState
    has_audio: bool
    controls_enabled: bool
    error_banner: Optional[str]

    @property
    def is_loading(self) -> bool:
        return FetchState.LOADING in (self.transcript_state, self.audio_state)

    @property
    def show_empty_transcript(self) -> bool:
        return self.transcript_state == FetchState.READY and not self.sentences

    @property
    def chat_lines(self) -> Tuple[str, ...]:
        return tuple(entry.display_text for entry in self.chat_entries)


class ConversationSession:
    """
    State for one selected conversation.

    Constructed fresh on every selection and discarded as a whole; nothing is
    carried over from a previous session. The token identifies this selection
    so late responses for superseded selections can be recognised.
    """

    def __init__(self, conversation_id: str, token: int, name: Optional[str] = None):
        self.conversation_id = conversation_id
        self.token = token
        self.name = name or ""

        self.transcript_fetch = FetchSlice()
        self.audio_fetch = FetchSlice()

        self.detail: Optional[ConversationDetail] = None
        self.audio_source: Optional[AudioSource] = None
        self.store = TranscriptStore()
        self.resolver = SyncResolver(self.store)
        self.chat_log = ChatLog()
        self.clock = PlaybackClock()
        self.active: Optional[ActivePosition] = None

        self._on_change_callback: Optional[Callable[["ConversationSession", bool], None]] = None
        self.clock.set_on_change_callback(self._on_clock_changed)

    def __repr__(self) -> str:
        return f"ConversationSession(id={self.conversation_id!r}, token={self.token})"

    @property
    def title(self) -> str:
        if self.detail and self.detail.name:
            return self.detail.name
        return self.name or self.conversation_id

    @property
    def is_settled(self) -> bool:
        return self.transcript_fetch.is_settled and self.audio_fetch.is_settled

    @property
    def has_audio(self) -> bool:
        return self.audio_source is not None

    @property
    def controls_enabled(self) -> bool:
        return self.has_audio and self.clock.status != PlaybackStatus.ERRORED

    @property
    def error_banner(self) -> Optional[str]:
        messages: List[str] = []
        if self.transcript_fetch.state == FetchState.FAILED:
            messages.append(f"Transcript unavailable: {self.transcript_fetch.error}")
        if self.audio_fetch.state == FetchState.FAILED:
            messages.append(f"Audio unavailable: {self.audio_fetch.error}")
        state = self.clock.state
        if state.last_error is not None:
            messages.append(f"Playback failed: {state.error_message or state.last_error.value}")
        return "\n".join(messages) or None

    def set_on_change_callback(self, callback: Optional[Callable[["ConversationSession", bool], None]]):
        """Set callback(session, active_changed) invoked after clock or data changes"""
        self._on_change_callback = callback

    # ===== Fetch lifecycle =====

    def begin_fetches(self):
        self.transcript_fetch.start()
        self.audio_fetch.start()

    def apply_detail(self, detail: ConversationDetail):
        """Transcript + metadata arrived"""
        self.detail = detail
        self.store = TranscriptStore(detail.transcript)
        self.resolver = SyncResolver(self.store)
        self.chat_log.seed(detail.chat_history)
        self.transcript_fetch.succeed()
        logger.info(f"Transcript loaded for {self.conversation_id}: {len(self.store)} sentences")
        self._notify(self.sync())

    def fail_transcript(self, error: str):
        self.transcript_fetch.fail(error)
        logger.error(f"Transcript fetch failed for {self.conversation_id}: {error}")
        self._notify(False)

    def apply_audio(self, source: Optional[AudioSource]):
        """Audio locator arrived; None means the conversation has no audio"""
        self.audio_source = source
        self.audio_fetch.succeed()
        if source is None:
            logger.info(f"Conversation {self.conversation_id} has no audio")
        self._notify(False)

    def fail_audio(self, error: str):
        self.audio_source = None
        self.audio_fetch.fail(error)
        logger.error(f"Audio fetch failed for {self.conversation_id}: {error}")
        self._notify(False)

    # ===== Sync =====

    def sync(self) -> bool:
        """Recompute the active position from the clock; True if it changed"""
        active = self.resolver.resolve_position(self.clock.current_time)
        if active == self.active:
            return False
        self.active = active
        return True

    def view_model(self) -> SessionViewModel:
        detail = self.detail
        return SessionViewModel(
            conversation_id=self.conversation_id,
            title=self.title,
            playback=self.clock.state,
            active=self.active,
            sentences=self.store.sentences,
            summary=detail.summary if detail else "",
            action_items=tuple(detail.action_items) if detail else (),
            chat_entries=self.chat_log.entries,
            transcript_state=self.transcript_fetch.state,
            audio_state=self.audio_fetch.state,
            has_audio=self.has_audio,
            controls_enabled=self.controls_enabled,
            error_banner=self.error_banner,
        )

    def close(self):
        """Detach observers; a closed session never notifies anyone again"""
        self._on_change_callback = None
        self.clock.set_on_change_callback(None)

    def _on_clock_changed(self, state: PlaybackState):
        # Runs inside the media callback so highlight and time never disagree
        self._notify(self.sync())

    def _notify(self, active_changed: bool):
        if self._on_change_callback:
            self._on_change_callback(self, active_changed)
