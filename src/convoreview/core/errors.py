"""Error taxonomy shared by the API client, media binding and session"""

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """Failure categories surfaced to the presentation layer"""
    FETCH_FAILURE = "fetch_failure"  # transcript/metadata or audio locator retrieval
    PLAYBACK_FAILURE = "playback_failure"  # media could not load, decode or play
    SEND_FAILURE = "send_failure"  # chat message not persisted server-side


class ConvoReviewError(Exception):
    """Base class for failures raised by ConvoReview services"""

    kind: Optional[ErrorKind] = None

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class FetchFailure(ConvoReviewError):
    """A read from the conversation API failed"""
    kind = ErrorKind.FETCH_FAILURE


class PlaybackFailure(ConvoReviewError):
    """The media element rejected a command"""
    kind = ErrorKind.PLAYBACK_FAILURE


class SendFailure(ConvoReviewError):
    """A chat message was not accepted by the backend"""
    kind = ErrorKind.SEND_FAILURE


def describe_error(error: BaseException) -> str:
    """Short user-facing description of an exception"""
    if isinstance(error, ConvoReviewError):
        return error.message
    return f"{type(error).__name__}: {error}"
