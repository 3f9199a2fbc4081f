"""Tests for mapping playback time to the active sentence and word."""

from __future__ import annotations

import math

import pytest
from conftest import sentence

from convoreview.core.sync_resolver import ActivePosition, SyncResolver
from convoreview.core.transcript import TranscriptStore


@pytest.fixture
def resolver() -> SyncResolver:
    store = TranscriptStore.from_api(
        [
            sentence("one", 0.0, 5.0, words=[("a", 0.0, 1.0), ("b", 2.0, 4.5)]),
            sentence("two", 7.0, 10.0),
        ]
    )
    return SyncResolver(store)


@pytest.mark.parametrize(
    ("time", "expected"),
    [
        (3.0, 0),
        (0.0, 0),
        (6.0, None),
        (5.0, None),
        (9.9, 1),
        (10.0, None),
        (-1.0, None),
        (120.0, None),
    ],
)
def test_resolve_sentence(resolver: SyncResolver, time: float, expected: int | None) -> None:
    """Times inside a sentence resolve to it; gaps and out-of-range times do not."""
    assert resolver.resolve(time) == expected


def test_non_finite_time_resolves_to_none(resolver: SyncResolver) -> None:
    """NaN and infinities never match."""
    assert resolver.resolve(math.nan) is None
    assert resolver.resolve(math.inf) is None


def test_empty_transcript_never_matches() -> None:
    """Nothing is active in an empty transcript."""
    assert SyncResolver(TranscriptStore()).resolve(1.0) is None


def test_equal_starts_pick_earliest_containing_index() -> None:
    """Sentences with the same start resolve to the first one whose end covers the time."""
    resolver = SyncResolver(
        TranscriptStore.from_api([sentence("short", 2.0, 3.0), sentence("long", 2.0, 6.0)])
    )

    assert resolver.resolve(2.5) == 0
    assert resolver.resolve(4.0) == 1


def test_overlapping_later_sentence_wins_after_its_start() -> None:
    """The last sentence starting at or before the time is checked first."""
    resolver = SyncResolver(
        TranscriptStore.from_api([sentence("outer", 0.0, 10.0), sentence("inner", 4.0, 5.0)])
    )

    assert resolver.resolve(4.5) == 1
    assert resolver.resolve(6.0) is None


def test_resolve_word(resolver: SyncResolver) -> None:
    """Words resolve within their sentence; gaps between words give None."""
    assert resolver.resolve_word(0, 0.5) == 0
    assert resolver.resolve_word(0, 1.5) is None
    assert resolver.resolve_word(0, 3.0) == 1
    assert resolver.resolve_word(1, 8.0) is None


def test_resolve_position(resolver: SyncResolver) -> None:
    """Sentence and word are resolved together."""
    assert resolver.resolve_position(3.0) == ActivePosition(0, 1)
    assert resolver.resolve_position(8.0) == ActivePosition(1, None)
    assert resolver.resolve_position(6.0) is None


def test_resolution_is_pure(resolver: SyncResolver) -> None:
    """The same time always yields the same answer regardless of call order."""
    first = [resolver.resolve(t) for t in (9.0, 1.0, 6.0, 3.0)]
    second = [resolver.resolve(t) for t in (9.0, 1.0, 6.0, 3.0)]

    assert first == second == [1, 0, None, 0]
