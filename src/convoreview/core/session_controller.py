"""Session controller - coordinates API fetches, media binding and the active session"""

from functools import partial
from itertools import count
from typing import Optional

from loguru import logger
from PySide6.QtCore import QObject

from .api_client import ConversationApiClient, create_api_client
from .chat_log import ChatEntry
from .config import get_config_manager
from .errors import describe_error
from .fetch_dispatcher import FetchDispatcher, FetchResult
from .media_binding import MediaBinding
from .session import ConversationSession
from ..signals import get_app_signals


class SessionController(QObject):
    """
    Controller that manages the conversation-review workflow.

    Owns at most one ConversationSession at a time. Selecting a conversation
    tears the previous session down (media detached first) and builds a new
    one; both fetches for the new session run concurrently and their results
    are applied only while that session is still current.
    """

    def __init__(
        self,
        api_client: Optional[ConversationApiClient] = None,
        dispatcher: Optional[FetchDispatcher] = None,
        media: Optional[MediaBinding] = None,
        parent=None,
    ):
        super().__init__(parent)

        self._signals = get_app_signals()
        self._config = get_config_manager()
        config = self._config.config

        self._api = api_client or create_api_client()
        self._dispatcher = dispatcher or FetchDispatcher(parent=self)
        self._media = media or MediaBinding(volume=config.playback_volume, parent=self)

        self._session: Optional[ConversationSession] = None
        self._tokens = count(1)
        self._list_generation = 0

    @property
    def current_session(self) -> Optional[ConversationSession]:
        return self._session

    @property
    def media(self) -> MediaBinding:
        return self._media

    # ===== Selection =====

    def select_conversation(
        self,
        conversation_id: str,
        name: Optional[str] = None,
        refresh: bool = False,
    ) -> ConversationSession:
        """Open a conversation, replacing the current session wholesale"""
        current = self._session
        if current is not None and current.conversation_id == conversation_id and not refresh:
            logger.debug(f"Conversation {conversation_id} already selected, ignoring")
            return current

        self._teardown_session()

        session = ConversationSession(conversation_id, next(self._tokens), name=name)
        session.set_on_change_callback(self._on_session_changed)
        self._session = session
        self._media.attach(session.clock)
        if self._config.config.autoplay_on_select:
            self._media.request_play_when_ready()

        session.begin_fetches()
        logger.info(f"Selected conversation {conversation_id} (token {session.token})")
        self._signals.session_changed.emit(session.view_model())
        self._signals.busy_state_changed.emit(True)

        self._dispatcher.submit(
            partial(self._api.get_conversation, conversation_id),
            partial(self._on_detail_fetched, session.token),
        )
        self._dispatcher.submit(
            partial(self._api.get_conversation_audio, conversation_id),
            partial(self._on_audio_fetched, session.token),
        )

        self._config.set_last_conversation(conversation_id)
        return session

    def refresh(self) -> Optional[ConversationSession]:
        """Reload the current conversation from scratch"""
        if self._session is None:
            return None
        return self.select_conversation(self._session.conversation_id, self._session.name, refresh=True)

    def close_session(self):
        self._teardown_session()

    def _teardown_session(self):
        old = self._session
        if old is None:
            return
        # Release the audio element before anything else touches the new session
        self._media.detach()
        old.close()
        self._session = None
        logger.debug(f"Closed session {old!r}")

    def _current(self, token: int) -> Optional[ConversationSession]:
        session = self._session
        if session is None or session.token != token:
            return None
        return session

    # ===== Fetch completions =====

    def _on_detail_fetched(self, token: int, result: FetchResult):
        session = self._current(token)
        if session is None:
            logger.debug(f"Discarding transcript response for superseded session {token}")
            return

        if result.ok:
            session.apply_detail(result.value)
            self._signals.transcript_loaded.emit(session.view_model())
        else:
            message = describe_error(result.error)
            session.fail_transcript(message)
            self._signals.transcript_failed.emit(message)
            self._signals.status_message.emit(f"Could not load transcript: {message}", 5000)

        self._emit_busy(session)

    def _on_audio_fetched(self, token: int, result: FetchResult):
        session = self._current(token)
        if session is None:
            logger.debug(f"Discarding audio response for superseded session {token}")
            return

        if not result.ok:
            message = describe_error(result.error)
            session.fail_audio(message)
            self._signals.audio_unavailable.emit(message)
            self._signals.status_message.emit(f"Could not load audio: {message}", 5000)
        elif result.value is None:
            session.apply_audio(None)
            self._signals.audio_unavailable.emit("")
        else:
            session.apply_audio(result.value)
            self._media.bind(result.value)
            self._signals.audio_ready.emit(result.value)

        self._emit_busy(session)

    def _emit_busy(self, session: ConversationSession):
        if session.is_settled:
            self._signals.busy_state_changed.emit(False)

    def _on_session_changed(self, session: ConversationSession, active_changed: bool):
        """Session data or clock changed; runs synchronously inside the originating callback"""
        if session is not self._session:
            return
        view = session.view_model()
        self._signals.playback_state_changed.emit(view.playback)
        if active_changed:
            self._signals.active_position_changed.emit(view.active)
        self._signals.session_updated.emit(view)

    # ===== Playback intents =====

    def play(self):
        if self._session is None:
            return
        if self._session.audio_fetch.is_loading:
            self._media.request_play_when_ready()
            return
        self._media.play()

    def pause(self):
        self._media.pause()

    def toggle_playback(self):
        if self._session is None:
            return
        # A queued play intent counts as playing so the next toggle cancels it
        if self._session.clock.is_playing or self._media.pending_play:
            self.pause()
        else:
            self.play()

    def seek(self, time: float) -> Optional[float]:
        if self._session is None or not self._session.controls_enabled:
            return None
        return self._media.seek(time)

    def skip(self, delta: float) -> Optional[float]:
        if self._session is None:
            return None
        return self.seek(self._session.clock.current_time + delta)

    def seek_to_sentence(self, index: int) -> Optional[float]:
        session = self._session
        if session is None or not 0 <= index < len(session.store):
            return None
        return self.seek(session.store.sentence(index).start_time)

    # ===== Chat =====

    def send_chat_message(self, text: str) -> Optional[ChatEntry]:
        """Append the local echo immediately, then persist in the background"""
        session = self._session
        text = text.strip()
        if session is None or not text:
            return None

        entry = session.chat_log.append_local(text)
        self._signals.chat_message_appended.emit(entry)

        self._dispatcher.submit(
            partial(self._api.post_message, session.conversation_id, text),
            partial(self._on_message_sent, session, entry),
        )
        return entry

    def _on_message_sent(self, session: ConversationSession, entry: ChatEntry, result: FetchResult):
        is_current = session is self._session
        if result.ok:
            updated = session.chat_log.mark_delivered(entry.entry_id)
        else:
            updated = session.chat_log.mark_failed(entry.entry_id)
            message = describe_error(result.error)
            logger.error(f"Chat message {entry.entry_id} not persisted: {message}")
            if is_current:
                self._signals.chat_send_failed.emit(message)
                self._signals.status_message.emit(f"Message not sent: {message}", 5000)

        if is_current and updated is not None:
            self._signals.chat_message_updated.emit(updated)

    # ===== Conversation list =====

    def refresh_conversations(self):
        self._load_conversation_list(self._api.list_conversations)

    def search_conversations(self, query: str):
        query = query.strip()
        if not query:
            self.refresh_conversations()
            return
        self._load_conversation_list(partial(self._api.search_conversations, query))

    def _load_conversation_list(self, job):
        self._list_generation += 1
        self._dispatcher.submit(job, partial(self._on_conversations_fetched, self._list_generation))

    def _on_conversations_fetched(self, generation: int, result: FetchResult):
        if generation != self._list_generation:
            return
        if result.ok:
            self._signals.conversations_loaded.emit(list(result.value))
        else:
            message = describe_error(result.error)
            logger.error(f"Conversation list failed: {message}")
            self._signals.conversations_failed.emit(message)
            self._signals.status_message.emit(f"Could not load conversations: {message}", 5000)

    def shutdown(self):
        """Release media and stop background work"""
        self._teardown_session()
        self._dispatcher.shutdown()


# Singleton instance
_controller_instance: Optional[SessionController] = None


def get_session_controller() -> SessionController:
    """Get the singleton session controller"""
    global _controller_instance
    if _controller_instance is None:
        _controller_instance = SessionController()
    return _controller_instance
