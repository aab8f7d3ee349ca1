"""
Match commentary: the flavour lines a simulated minute can produce and the
feed the simulation room reads, newest first.
"""
from __future__ import annotations

from typing import Iterator, List, Optional

from .models import CommentaryEntry, CommentaryKind

FEED_WINDOW = 4

GOAL_TEXT = "GOAL!!! The stadium erupts!"

FLAVOR_EVENTS = (
    "Dangerous attack...",
    "Great save by the keeper!",
    "Corner kick awarded.",
    "Midfield battle intensifying.",
    "Tactical adjustment detected.",
    "Shot hits the post!",
)

CHANCE_KEYWORDS = ("save", "post")


def classify_flavor(text: str) -> CommentaryKind:
    lowered = text.lower()
    if any(k in lowered for k in CHANCE_KEYWORDS):
        return CommentaryKind.CHANCE
    return CommentaryKind.NORMAL


class CommentaryFeed:
    """Append-only match log, read newest first.

    The whole log is kept for the run; only the view is truncated.
    """

    def __init__(self, window: int = FEED_WINDOW) -> None:
        self.window = window
        self._entries: List[CommentaryEntry] = []

    def append(self, entry: CommentaryEntry) -> None:
        self._entries.append(entry)

    def recent(self, n: Optional[int] = None) -> List[CommentaryEntry]:
        n = self.window if n is None else n
        if n <= 0:
            return []
        return list(reversed(self._entries[-n:]))

    def count(self, kind: CommentaryKind) -> int:
        return sum(1 for e in self._entries if e.kind == kind)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[CommentaryEntry]:
        return reversed(self._entries)
