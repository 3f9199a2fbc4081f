"""Conversation shapes returned by the backend"""

from typing import Any, List, Optional
from urllib.parse import urljoin

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .transcript import TranscriptSentence


def _none_to_list(value: Any) -> Any:
    # Go encodes nil slices as null
    return [] if value is None else value


class AudioSource(BaseModel):
    """Playable audio for a conversation"""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    locator: str = Field(alias="url")
    display_name: str = Field(default="", alias="name")

    def resolve(self, base_url: str) -> "AudioSource":
        """Join a server-relative locator (e.g. /audio/<id>/<file>) to the API base URL"""
        if "://" in self.locator or not base_url:
            return self
        base = base_url if base_url.endswith("/") else base_url + "/"
        return self.model_copy(update={"locator": urljoin(base, self.locator.lstrip("/"))})


class ChatMessage(BaseModel):
    """Persisted chat message"""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: Optional[str] = None
    content: str = ""
    timestamp: Optional[str] = None


class ConversationSummary(BaseModel):
    """Conversation as shown in the list view"""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str
    name: str = ""
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.name or f"Conversation {self.id[:8]}"


class ConversationDetail(BaseModel):
    """Loaded conversation with transcript and analysis"""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str
    name: str = ""
    transcript: List[TranscriptSentence] = Field(default_factory=list)
    summary: str = ""
    action_items: List[str] = Field(default_factory=list)
    chat_history: List[ChatMessage] = Field(default_factory=list)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @field_validator("transcript", "action_items", "chat_history", mode="before")
    @classmethod
    def _null_lists_are_empty(cls, value: Any) -> Any:
        return _none_to_list(value)

    @field_validator("summary", mode="before")
    @classmethod
    def _null_summary_is_empty(cls, value: Any) -> Any:
        return "" if value is None else value
