"""Append-only chat history for a conversation session"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from itertools import count
from typing import Iterable, Iterator, List, Optional

from .conversation import ChatMessage


class DeliveryStatus(Enum):
    PENDING = "pending"
    DELIVERED = "delivered"
    FAILED = "failed"


@dataclass(frozen=True)
class ChatEntry:
    """A single chat log line.

    ``sequence`` is the position in the log; ``entry_id`` never changes and
    is what delivery updates are keyed on.
    """
    sequence: int
    entry_id: int
    author: str
    text: str
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())
    delivery: DeliveryStatus = DeliveryStatus.DELIVERED

    @property
    def display_text(self) -> str:
        return f"{self.author}: {self.text}"


class ChatLog:
    """
    Ordered message history.
    Entries are only ever appended; sending outcomes replace an entry with a
    copy carrying the new delivery status but never remove it. History
    persisted by the backend always sorts ahead of local messages.
    """

    LOCAL_AUTHOR = "You"

    def __init__(self):
        self._entries: List[ChatEntry] = []
        self._ids = count()

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ChatEntry]:
        return iter(self._entries)

    @property
    def entries(self) -> tuple:
        return tuple(self._entries)

    def seed(self, history: Iterable[ChatMessage]):
        """Load messages already persisted by the backend ahead of local ones"""
        local = self._entries
        self._entries = []
        for message in history:
            self._append(
                self.LOCAL_AUTHOR,
                message.content,
                timestamp=message.timestamp,
                delivery=DeliveryStatus.DELIVERED,
            )
        offset = len(self._entries)
        self._entries.extend(
            replace(entry, sequence=offset + i) for i, entry in enumerate(local)
        )

    def append_local(self, text: str) -> ChatEntry:
        """Echo a user message immediately, before the backend acknowledges it"""
        return self._append(self.LOCAL_AUTHOR, text, delivery=DeliveryStatus.PENDING)

    def get(self, entry_id: int) -> Optional[ChatEntry]:
        for entry in self._entries:
            if entry.entry_id == entry_id:
                return entry
        return None

    def mark_delivered(self, entry_id: int) -> Optional[ChatEntry]:
        return self._set_delivery(entry_id, DeliveryStatus.DELIVERED)

    def mark_failed(self, entry_id: int) -> Optional[ChatEntry]:
        return self._set_delivery(entry_id, DeliveryStatus.FAILED)

    def lines(self) -> List[str]:
        return [entry.display_text for entry in self._entries]

    def _append(
        self,
        author: str,
        text: str,
        timestamp: Optional[str] = None,
        delivery: DeliveryStatus = DeliveryStatus.DELIVERED,
    ) -> ChatEntry:
        extra = {"timestamp": timestamp} if timestamp else {}
        entry = ChatEntry(
            sequence=len(self._entries),
            entry_id=next(self._ids),
            author=author,
            text=text,
            delivery=delivery,
            **extra,
        )
        self._entries.append(entry)
        return entry

    def _set_delivery(self, entry_id: int, status: DeliveryStatus) -> Optional[ChatEntry]:
        current = self.get(entry_id)
        if current is None:
            return None
        updated = replace(current, delivery=status)
        self._entries[current.sequence] = updated
        return updated
