"""Shared fixtures: Qt core application, isolated config and fake collaborators."""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path
from typing import Any, Callable

import pytest
from PySide6.QtCore import QCoreApplication, QObject, Signal

from convoreview.core import config as config_module
from convoreview.core.config import ConfigManager
from convoreview.core.conversation import AudioSource, ConversationDetail, ConversationSummary
from convoreview.core.errors import FetchFailure, SendFailure
from convoreview.core.fetch_dispatcher import FetchResult


@pytest.fixture(scope="session")
def qapp() -> QCoreApplication:
    """One Qt core application for the whole run; signals need it."""
    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    return app


@pytest.fixture(autouse=True)
def isolated_config(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Generator[ConfigManager, None, None]:
    """Points the config singleton at a throwaway file."""
    monkeypatch.setattr(config_module, "get_config_path", lambda: tmp_path / "config.json")
    ConfigManager._instance = None
    ConfigManager._config = None
    manager = config_module.get_config_manager()
    yield manager
    ConfigManager._instance = None
    ConfigManager._config = None


class FakePlayer(QObject):
    """Stands in for QMediaPlayer: records commands, lets tests fire native events."""

    positionChanged = Signal(object)
    durationChanged = Signal(object)
    mediaStatusChanged = Signal(object)
    errorOccurred = Signal(object, str)
    playbackStateChanged = Signal(object)

    def __init__(self) -> None:
        super().__init__()
        self.calls: list[tuple[str, Any]] = []
        self.fail_on: set[str] = set()

    def _record(self, name: str, arg: Any = None) -> None:
        if name in self.fail_on:
            raise RuntimeError(f"{name} rejected")
        self.calls.append((name, arg))

    def setSource(self, url: Any) -> None:
        self._record("setSource", url)

    def setAudioOutput(self, output: Any) -> None:
        self._record("setAudioOutput", output)

    def play(self) -> None:
        self._record("play")

    def pause(self) -> None:
        self._record("pause")

    def stop(self) -> None:
        self._record("stop")

    def setPosition(self, position_ms: int) -> None:
        self._record("setPosition", position_ms)

    def names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def positions(self) -> list[int]:
        return [arg for name, arg in self.calls if name == "setPosition"]


class ManualDispatcher:
    """Queues jobs until a test completes them, in any order."""

    def __init__(self) -> None:
        self.jobs: list[tuple[Callable[[], Any], Callable[[FetchResult], None]]] = []
        self.shut_down = False

    def submit(self, job: Callable[[], Any], on_done: Callable[[FetchResult], None]) -> None:
        self.jobs.append((job, on_done))

    def complete(self, index: int = 0) -> FetchResult:
        job, on_done = self.jobs.pop(index)
        try:
            result = FetchResult(value=job())
        except Exception as exc:
            result = FetchResult(error=exc)
        on_done(result)
        return result

    def complete_all(self) -> None:
        while self.jobs:
            self.complete(0)

    def shutdown(self) -> None:
        self.shut_down = True


class StubApi:
    """In-memory conversation backend."""

    def __init__(self) -> None:
        self.details: dict[str, ConversationDetail | Exception] = {}
        self.audio: dict[str, AudioSource | None | Exception] = {}
        self.summaries: list[ConversationSummary] = []
        self.posted: list[tuple[str, str]] = []
        self.fail_posts = False

    def add(
        self,
        conversation_id: str,
        transcript: list[dict] | None = None,
        audio: AudioSource | None | Exception = None,
        **fields: Any,
    ) -> None:
        payload = {"id": conversation_id, "name": f"Call {conversation_id}", "transcript": transcript or []}
        payload.update(fields)
        self.details[conversation_id] = ConversationDetail.model_validate(payload)
        self.audio[conversation_id] = audio
        self.summaries.append(ConversationSummary(id=conversation_id, name=payload["name"]))

    def list_conversations(self) -> list[ConversationSummary]:
        return list(self.summaries)

    def search_conversations(self, query: str) -> list[ConversationSummary]:
        return [s for s in self.summaries if query.lower() in s.name.lower()]

    def get_conversation(self, conversation_id: str) -> ConversationDetail:
        detail = self.details.get(conversation_id)
        if detail is None:
            raise FetchFailure(f"GET /conversations/{conversation_id} returned 404", status_code=404)
        if isinstance(detail, Exception):
            raise detail
        return detail

    def get_conversation_audio(self, conversation_id: str) -> AudioSource | None:
        audio = self.audio.get(conversation_id)
        if isinstance(audio, Exception):
            raise audio
        return audio

    def post_message(self, conversation_id: str, content: str) -> Any:
        if self.fail_posts:
            raise SendFailure("POST /messages returned 500", status_code=500)
        self.posted.append((conversation_id, content))
        return {"content": content}


def sentence(text: str, start: float, end: float, words: list[tuple[str, float, float]] | None = None,
             speaker: str | None = None) -> dict[str, Any]:
    """Builds a transcript sentence in the backend's wire shape."""
    return {
        "sentence": text,
        "start": start,
        "end": end,
        "words": [{"word": w, "start": s, "end": e, "confidence": 0.9} for w, s, e in (words or [])],
        "speaker": speaker,
    }


@pytest.fixture
def fake_player(qapp: QCoreApplication) -> FakePlayer:
    return FakePlayer()


@pytest.fixture
def dispatcher() -> ManualDispatcher:
    return ManualDispatcher()


@pytest.fixture
def stub_api() -> StubApi:
    return StubApi()
