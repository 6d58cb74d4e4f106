"""
Session Broadcaster

Fans SessionView updates out to Server-Sent Events clients. Each client gets
its own bounded queue; when a slow client's queue is full the oldest view is
dropped so the newest state always gets through.
"""

import asyncio
import logging
from typing import Dict, Optional

from fxpulse.schemas.session import SessionView

logger = logging.getLogger(__name__)

QUEUE_MAXSIZE = 100


class SessionBroadcaster:
    """
    Usage:
        broadcaster = get_broadcaster()
        session.add_listener(broadcaster.publish)

        queue = broadcaster.create_queue(client_id)
        view = await queue.get()
        broadcaster.remove_queue(client_id)
    """

    def __init__(self, maxsize: int = QUEUE_MAXSIZE):
        self._maxsize = maxsize
        self._queues: Dict[str, asyncio.Queue] = {}
        self._latest: Optional[SessionView] = None

    @property
    def client_count(self) -> int:
        return len(self._queues)

    @property
    def latest(self) -> Optional[SessionView]:
        """Most recently published view."""
        return self._latest

    def create_queue(self, client_id: str) -> asyncio.Queue:
        """Create a queue for an SSE client."""
        queue: asyncio.Queue = asyncio.Queue(maxsize=self._maxsize)
        self._queues[client_id] = queue
        logger.debug(f"SSE client connected: {client_id}")
        return queue

    def remove_queue(self, client_id: str) -> None:
        """Remove an SSE client queue."""
        if client_id in self._queues:
            del self._queues[client_id]
            logger.debug(f"SSE client disconnected: {client_id}")

    def publish(self, view: SessionView) -> None:
        """Push a view to every connected client."""
        self._latest = view
        for queue in self._queues.values():
            try:
                queue.put_nowait(view)
            except asyncio.QueueFull:
                # Drop the oldest view
                queue.get_nowait()
                queue.put_nowait(view)


# Singleton instance
_broadcaster: Optional[SessionBroadcaster] = None


def get_broadcaster() -> SessionBroadcaster:
    """Get the broadcaster singleton."""
    global _broadcaster
    if _broadcaster is None:
        _broadcaster = SessionBroadcaster()
    return _broadcaster
