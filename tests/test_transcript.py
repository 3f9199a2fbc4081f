"""Tests for transcript models and the transcript store."""

from __future__ import annotations

from conftest import sentence

from convoreview.core.transcript import TranscriptSentence, TranscriptStore, TranscriptWord


def test_sentence_parses_backend_field_names() -> None:
    """Wire names map onto the model fields."""
    parsed = TranscriptSentence.model_validate(
        sentence("Hello there.", 1.0, 2.5, words=[("Hello", 1.0, 1.4), ("there.", 1.5, 2.5)], speaker="Agent")
    )

    assert parsed.text == "Hello there."
    assert parsed.start_time == 1.0
    assert parsed.end_time == 2.5
    assert [w.text for w in parsed.words] == ["Hello", "there."]
    assert parsed.speaker_label == "Agent"
    assert parsed.duration == 1.5


def test_null_words_and_blank_speaker_normalize() -> None:
    """Null word lists become empty and blank speakers become None."""
    parsed = TranscriptSentence.model_validate(
        {"sentence": "Hi", "start": 0, "end": 1, "words": None, "speaker": "  "}
    )

    assert parsed.words == ()
    assert parsed.speaker_label is None


def test_end_before_start_collapses_to_zero_length() -> None:
    """A unit ending before it starts is kept with zero duration."""
    word = TranscriptWord.model_validate({"word": "uh", "start": 3.0, "end": 2.0})

    assert word.start_time == 3.0
    assert word.end_time == 3.0
    assert not word.contains(3.0)


def test_confidence_is_clamped() -> None:
    """Confidence outside [0, 1] is clamped; null means zero."""
    high = TranscriptWord.model_validate({"word": "a", "start": 0, "end": 1, "confidence": 1.7})
    low = TranscriptWord.model_validate({"word": "b", "start": 0, "end": 1, "confidence": -2})
    missing = TranscriptWord.model_validate({"word": "c", "start": 0, "end": 1, "confidence": None})

    assert high.confidence == 1.0
    assert low.confidence == 0.0
    assert missing.confidence == 0.0


def test_contains_is_start_inclusive_end_exclusive() -> None:
    """The interval is half-open."""
    unit = TranscriptSentence.model_validate(sentence("x", 5.0, 7.0))

    assert unit.contains(5.0)
    assert unit.contains(6.999)
    assert not unit.contains(7.0)
    assert not unit.contains(4.999)


def test_store_sorts_sentences_and_words() -> None:
    """Out-of-order input is re-sorted by start time."""
    store = TranscriptStore.from_api(
        [
            sentence("second", 7.0, 10.0),
            sentence("first", 0.0, 5.0, words=[("b", 2.0, 3.0), ("a", 0.0, 1.0)]),
        ]
    )

    assert [s.text for s in store] == ["first", "second"]
    assert store.start_times == (0.0, 7.0)
    assert [w.text for w in store.sentence(0).words] == ["a", "b"]
    assert store.word_start_times(0) == (0.0, 2.0)


def test_store_sort_is_stable_for_equal_starts() -> None:
    """Sentences sharing a start time keep their received order."""
    store = TranscriptStore.from_api(
        [sentence("early", 3.0, 4.0), sentence("a", 1.0, 2.0), sentence("late", 3.0, 6.0)]
    )

    assert [s.text for s in store] == ["a", "early", "late"]


def test_empty_store() -> None:
    """Null and empty payloads give an empty store."""
    for payload in (None, []):
        store = TranscriptStore.from_api(payload)
        assert len(store) == 0
        assert store.is_empty
        assert store.end_time == 0.0
        assert store.speakers == []


def test_store_speakers_and_end_time() -> None:
    """Speakers are listed in order of first appearance."""
    store = TranscriptStore.from_api(
        [
            sentence("a", 0, 2, speaker="Customer"),
            sentence("b", 2, 4, speaker="Agent"),
            sentence("c", 4, 9, speaker="Customer"),
            sentence("d", 5, 6),
        ]
    )

    assert store.speakers == ["Customer", "Agent"]
    assert store.end_time == 9


def test_find_is_case_insensitive() -> None:
    """Search returns matching sentence indices."""
    store = TranscriptStore.from_api(
        [sentence("Refund the order", 0, 1), sentence("Thanks", 1, 2), sentence("the REFUND went through", 2, 3)]
    )

    assert store.find("refund") == [0, 2]
    assert store.find("  ") == []
    assert store.find("missing") == []
