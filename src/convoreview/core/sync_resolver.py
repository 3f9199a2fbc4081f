"""Maps playback time to the active transcript sentence and word"""

import math
from bisect import bisect_left, bisect_right
from typing import NamedTuple, Optional, Sequence

from .transcript import TranscriptStore


class ActivePosition(NamedTuple):
    """Transcript unit under the playhead"""
    sentence_index: int
    word_index: Optional[int] = None  # None when the time falls between words


def _search(start_times: Sequence[float], units: Sequence, time: float) -> Optional[int]:
    """
    Find the unit whose [start, end) interval contains time.

    Binary search for the last unit starting at or before time. Among units
    sharing that start time, the earliest index containing time wins.
    A time in a gap between units resolves to None.
    """
    if not math.isfinite(time):
        return None

    upper = bisect_right(start_times, time)
    if upper == 0:
        return None

    first = bisect_left(start_times, start_times[upper - 1])
    for index in range(first, upper):
        if time < units[index].end_time:
            return index
    return None


class SyncResolver:
    """
    Resolves playback time against one transcript in O(log n).

    A pure function of (transcript, time): the store is immutable and the
    resolver keeps no other state.
    """

    def __init__(self, store: TranscriptStore):
        self._store = store

    @property
    def store(self) -> TranscriptStore:
        return self._store

    def resolve(self, time: float) -> Optional[int]:
        """Index of the active sentence, or None in silence"""
        return _search(self._store.start_times, self._store.sentences, time)

    def resolve_word(self, sentence_index: int, time: float) -> Optional[int]:
        """Index of the active word within a sentence, or None between words"""
        sentence = self._store.sentence(sentence_index)
        if not sentence.words:
            return None
        return _search(self._store.word_start_times(sentence_index), sentence.words, time)

    def resolve_position(self, time: float) -> Optional[ActivePosition]:
        """Active sentence and word for a playback time"""
        sentence_index = self.resolve(time)
        if sentence_index is None:
            return None
        return ActivePosition(sentence_index, self.resolve_word(sentence_index, time))
