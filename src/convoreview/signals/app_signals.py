"""Application-wide signals for cross-component communication"""

from PySide6.QtCore import QObject, Signal


class AppSignals(QObject):
    """
    Singleton class containing all application-wide signals.
    Use get_app_signals() to access the instance.
    """

    _instance = None

    # ===== Conversation list signals =====
    conversations_loaded = Signal(object)  # list[ConversationSummary]
    conversations_failed = Signal(str)
    conversation_selected = Signal(str, str)  # (conversation_id, name) - user intent

    # ===== Session signals =====
    session_changed = Signal(object)  # SessionViewModel of the new session
    session_updated = Signal(object)  # SessionViewModel after any data change
    transcript_loaded = Signal(object)  # SessionViewModel
    transcript_failed = Signal(str)
    audio_ready = Signal(object)  # AudioSource
    audio_unavailable = Signal(str)  # reason (empty when the conversation has no audio)

    # ===== Playback signals =====
    # Request signals (from UI controls)
    play_toggle_requested = Signal()
    seek_requested = Signal(float)  # seconds
    skip_requested = Signal(float)  # +/- seconds
    sentence_seek_requested = Signal(int)  # sentence index

    # State signals (actual playback state changes)
    playback_state_changed = Signal(object)  # PlaybackState
    active_position_changed = Signal(object)  # ActivePosition | None

    # ===== Chat signals =====
    chat_submitted = Signal(str)
    chat_message_appended = Signal(object)  # ChatEntry
    chat_message_updated = Signal(object)  # ChatEntry (delivery status changed)
    chat_send_failed = Signal(str)

    # ===== UI signals =====
    status_message = Signal(str, int)  # (message, timeout_ms)
    busy_state_changed = Signal(bool)

    def __init__(self):
        # Only initialize once
        if not hasattr(self, '_initialized'):
            super().__init__()
            self._initialized = True


# Module-level singleton instance
_app_signals_instance: AppSignals | None = None


def get_app_signals() -> AppSignals:
    """Get the singleton AppSignals instance"""
    global _app_signals_instance
    if _app_signals_instance is None:
        _app_signals_instance = AppSignals()
    return _app_signals_instance
