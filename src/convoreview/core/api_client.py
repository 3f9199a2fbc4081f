"""Conversation API client.

Thin wrapper over the backend's REST endpoints:
- GET  /conversations                 -> list of conversations
- GET  /search?q=...                  -> conversations matching name or transcript
- GET  /conversations/{id}            -> transcript, summary, action items, chat history
- GET  /conversations/{id}/audio      -> {"audio_file": {"name", "url"} | null}
- POST /conversations/{id}/messages   -> persisted chat message

No retries: every call either returns parsed data or raises FetchFailure
(reads) / SendFailure (message posts).
"""

from typing import Any, List, Optional, Type

import requests
from loguru import logger
from pydantic import ValidationError

from .conversation import AudioSource, ChatMessage, ConversationDetail, ConversationSummary
from .errors import ConvoReviewError, FetchFailure, SendFailure


class ConversationApiClient:
    """Blocking HTTP client; run calls through the FetchDispatcher off the UI thread"""

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: Optional[float] = 30.0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()
        if token:
            self._session.headers["Authorization"] = f"Bearer {token}"
        self._session.headers.setdefault("Accept", "application/json")

    # ===== Reads =====

    def list_conversations(self) -> List[ConversationSummary]:
        data = self._request("GET", "/conversations", FetchFailure)
        return self._parse_list(data, ConversationSummary)

    def search_conversations(self, query: str) -> List[ConversationSummary]:
        data = self._request("GET", "/search", FetchFailure, params={"q": query})
        return self._parse_list(data, ConversationSummary)

    def get_conversation(self, conversation_id: str) -> ConversationDetail:
        data = self._request("GET", f"/conversations/{conversation_id}", FetchFailure)
        try:
            return ConversationDetail.model_validate(data)
        except ValidationError as e:
            raise FetchFailure(f"Malformed conversation {conversation_id}: {e.error_count()} errors") from e

    def get_conversation_audio(self, conversation_id: str) -> Optional[AudioSource]:
        data = self._request("GET", f"/conversations/{conversation_id}/audio", FetchFailure)
        if not isinstance(data, dict):
            raise FetchFailure(f"Unexpected audio response for {conversation_id}")

        audio = data.get("audio_file")
        if audio is None:
            return None
        try:
            source = AudioSource.model_validate(audio)
        except ValidationError as e:
            raise FetchFailure(f"Malformed audio locator for {conversation_id}") from e
        return source.resolve(self.base_url)

    # ===== Writes =====

    def post_message(self, conversation_id: str, content: str) -> ChatMessage:
        data = self._request(
            "POST",
            f"/conversations/{conversation_id}/messages",
            SendFailure,
            json={"content": content},
        )
        try:
            return ChatMessage.model_validate(data or {"content": content})
        except ValidationError as e:
            raise SendFailure("Malformed message acknowledgement") from e

    # ===== Internals =====

    def _request(self, method: str, path: str, failure: Type[ConvoReviewError], **kwargs) -> Any:
        url = f"{self.base_url}{path}"
        logger.debug(f"{method} {url}")

        try:
            response = self._session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.Timeout as e:
            raise failure(f"Request timed out: {method} {path}") from e
        except requests.exceptions.RequestException as e:
            raise failure(f"Request failed: {method} {path}: {e}") from e

        if not response.ok:
            raise failure(
                f"{method} {path} returned {response.status_code}: {response.text.strip()[:200]}",
                status_code=response.status_code,
            )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise failure(f"Invalid JSON from {method} {path}") from e

    @staticmethod
    def _parse_list(data: Any, model):
        if data is None:
            return []
        if not isinstance(data, list):
            raise FetchFailure("Expected a list response")
        try:
            return [model.model_validate(item) for item in data]
        except ValidationError as e:
            raise FetchFailure(f"Malformed list response: {e.error_count()} errors") from e


def create_api_client() -> ConversationApiClient:
    """Build a client from the application config"""
    from .config import get_config_manager

    config = get_config_manager().config
    return ConversationApiClient(
        base_url=config.api_base_url,
        token=config.api_token,
        timeout=config.api_timeout_seconds,
    )
