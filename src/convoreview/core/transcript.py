"""Transcript data model and lookup store"""

from typing import Any, Iterator, List, Optional, Tuple

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def _clamp_unit_bounds(data: Any) -> Any:
    """Collapse a unit whose end precedes its start to zero length"""
    if isinstance(data, dict):
        start = data.get("start", data.get("start_time"))
        end = data.get("end", data.get("end_time"))
        if start is not None and end is not None and end < start:
            data = dict(data)
            key = "end" if "end" in data else "end_time"
            data[key] = start
    return data


def _clamp_confidence(value: Any) -> float:
    if value is None:
        return 0.0
    return min(1.0, max(0.0, float(value)))


class TranscriptWord(BaseModel):
    """A single recognized word with timing information"""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    text: str = Field(alias="word")
    start_time: float = Field(alias="start")  # seconds from recording start
    end_time: float = Field(alias="end")
    confidence: float = 0.0

    @model_validator(mode="before")
    @classmethod
    def _end_not_before_start(cls, data: Any) -> Any:
        return _clamp_unit_bounds(data)

    @field_validator("confidence", mode="before")
    @classmethod
    def _confidence_in_range(cls, value: Any) -> float:
        return _clamp_confidence(value)

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time

    def contains(self, time: float) -> bool:
        """Start inclusive, end exclusive"""
        return self.start_time <= time < self.end_time


class TranscriptSentence(BaseModel):
    """A sentence with its words, speaker and channel"""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    text: str = Field(alias="sentence")
    start_time: float = Field(alias="start")
    end_time: float = Field(alias="end")
    words: Tuple[TranscriptWord, ...] = ()
    confidence: float = 0.0
    speaker_label: Optional[str] = Field(default=None, alias="speaker")
    channel: int = 0

    @model_validator(mode="before")
    @classmethod
    def _end_not_before_start(cls, data: Any) -> Any:
        return _clamp_unit_bounds(data)

    @field_validator("confidence", mode="before")
    @classmethod
    def _confidence_in_range(cls, value: Any) -> float:
        return _clamp_confidence(value)

    @field_validator("words", mode="before")
    @classmethod
    def _null_words_are_empty(cls, value: Any) -> Any:
        # Backend serializes empty slices as null
        if value is None:
            return ()
        return value

    @field_validator("speaker_label", mode="before")
    @classmethod
    def _blank_speaker_is_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time

    def contains(self, time: float) -> bool:
        """Start inclusive, end exclusive"""
        return self.start_time <= time < self.end_time


class TranscriptStore:
    """
    Ordered transcript for one conversation.
    Pure data: sorted sentences plus precomputed start-time tables for lookup.
    """

    def __init__(self, sentences: Optional[List[TranscriptSentence]] = None):
        sentences = list(sentences or [])

        # Stable sort keeps the earliest-received sentence first on ties
        ordered = sorted(sentences, key=lambda s: s.start_time)
        if ordered != sentences:
            logger.warning("Transcript sentences arrived out of order, re-sorted by start time")

        normalized = []
        for sentence in ordered:
            words = sorted(sentence.words, key=lambda w: w.start_time)
            if list(sentence.words) != words:
                sentence = sentence.model_copy(update={"words": tuple(words)})
            normalized.append(sentence)

        self._sentences: Tuple[TranscriptSentence, ...] = tuple(normalized)
        self._start_times: Tuple[float, ...] = tuple(s.start_time for s in self._sentences)
        self._word_start_times: Tuple[Tuple[float, ...], ...] = tuple(
            tuple(w.start_time for w in s.words) for s in self._sentences
        )

    @classmethod
    def from_api(cls, payload: Optional[List[dict]]) -> "TranscriptStore":
        """Build a store from the backend's transcript JSON list"""
        if not payload:
            return cls()
        return cls([TranscriptSentence.model_validate(item) for item in payload])

    def __len__(self) -> int:
        return len(self._sentences)

    def __iter__(self) -> Iterator[TranscriptSentence]:
        return iter(self._sentences)

    @property
    def sentences(self) -> Tuple[TranscriptSentence, ...]:
        return self._sentences

    @property
    def is_empty(self) -> bool:
        return not self._sentences

    @property
    def start_times(self) -> Tuple[float, ...]:
        return self._start_times

    @property
    def end_time(self) -> float:
        """End of the last sentence, 0.0 for an empty transcript"""
        if not self._sentences:
            return 0.0
        return max(s.end_time for s in self._sentences)

    @property
    def speakers(self) -> List[str]:
        """Distinct speaker labels in order of first appearance"""
        seen = []
        for sentence in self._sentences:
            if sentence.speaker_label and sentence.speaker_label not in seen:
                seen.append(sentence.speaker_label)
        return seen

    def sentence(self, index: int) -> TranscriptSentence:
        return self._sentences[index]

    def word_start_times(self, index: int) -> Tuple[float, ...]:
        return self._word_start_times[index]

    def find(self, query: str) -> List[int]:
        """Indices of sentences containing query, case-insensitive"""
        needle = query.strip().casefold()
        if not needle:
            return []
        return [i for i, s in enumerate(self._sentences) if needle in s.text.casefold()]
