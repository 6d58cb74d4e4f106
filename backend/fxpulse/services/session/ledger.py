"""
Trade History Ledger

Newest-first record of accepted signals, capped at a fixed size.
"""

from collections import deque

from fxpulse.schemas.prediction import TradeHistoryEntry


class TradeHistory:
    """Bounded ledger; the oldest entry drops off when the cap is reached."""

    def __init__(self, limit: int = 10):
        self._entries: deque[TradeHistoryEntry] = deque(maxlen=limit)

    @property
    def limit(self) -> int:
        return self._entries.maxlen

    def __len__(self) -> int:
        return len(self._entries)

    def record(self, entry: TradeHistoryEntry) -> None:
        # appendleft on a full deque discards from the right (the oldest)
        self._entries.appendleft(entry)

    def entries(self) -> list[TradeHistoryEntry]:
        """Newest first."""
        return list(self._entries)
