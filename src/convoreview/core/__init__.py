"""Core business logic"""

from .config import AppConfig, ConfigManager, get_config_manager
from .errors import ErrorKind, ConvoReviewError, FetchFailure, PlaybackFailure, SendFailure
from .transcript import TranscriptWord, TranscriptSentence, TranscriptStore
from .conversation import AudioSource, ChatMessage, ConversationSummary, ConversationDetail
from .playback_clock import PlaybackClock, PlaybackState, PlaybackStatus
from .sync_resolver import ActivePosition, SyncResolver
from .chat_log import ChatLog, ChatEntry, DeliveryStatus
from .api_client import ConversationApiClient, create_api_client
from .fetch_dispatcher import FetchDispatcher, FetchResult
from .media_binding import MediaBinding
from .session import ConversationSession, FetchSlice, FetchState, SessionViewModel
from .session_controller import SessionController, get_session_controller

__all__ = [
    "AppConfig",
    "ConfigManager",
    "get_config_manager",
    "ErrorKind",
    "ConvoReviewError",
    "FetchFailure",
    "PlaybackFailure",
    "SendFailure",
    "TranscriptWord",
    "TranscriptSentence",
    "TranscriptStore",
    "AudioSource",
    "ChatMessage",
    "ConversationSummary",
    "ConversationDetail",
    "PlaybackClock",
    "PlaybackState",
    "PlaybackStatus",
    "ActivePosition",
    "SyncResolver",
    "ChatLog",
    "ChatEntry",
    "DeliveryStatus",
    "ConversationApiClient",
    "create_api_client",
    "FetchDispatcher",
    "FetchResult",
    "MediaBinding",
    "ConversationSession",
    "FetchSlice",
    "FetchState",
    "SessionViewModel",
    "SessionController",
    "get_session_controller",
]
