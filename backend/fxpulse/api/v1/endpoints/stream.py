"""
Server-Sent Events (SSE) endpoint for real-time session streaming.

Pushes every SessionView to the frontend without polling.
"""

import asyncio
import logging
import uuid

from fastapi import APIRouter, Query
from fastapi.responses import StreamingResponse

from fxpulse.services.session import get_session
from fxpulse.services.stream import get_broadcaster

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/session")
async def stream_session(
    heartbeat: int = Query(default=15000, ge=1000, le=60000, description="Heartbeat interval in ms"),
):
    """
    Stream session updates via SSE.

    The current snapshot is sent immediately on connect, then one event per
    update. A comment line is sent when nothing changes for a heartbeat
    interval.

    Usage (JavaScript):
    ```js
    const eventSource = new EventSource('/api/v1/stream/session');
    eventSource.onmessage = (event) => {
      const view = JSON.parse(event.data);
      console.log(view.pair, view.current_price, view.signal);
    };
    ```
    """
    heartbeat_seconds = heartbeat / 1000.0

    async def event_generator():
        broadcaster = get_broadcaster()
        client_id = str(uuid.uuid4())
        queue = broadcaster.create_queue(client_id)

        try:
            yield f"data: {get_session().view().model_dump_json()}\n\n"

            while True:
                try:
                    view = await asyncio.wait_for(queue.get(), timeout=heartbeat_seconds)
                except asyncio.TimeoutError:
                    # Keep the connection alive
                    yield ": heartbeat\n\n"
                    continue
                yield f"data: {view.model_dump_json()}\n\n"

        except asyncio.CancelledError:
            pass
        finally:
            broadcaster.remove_queue(client_id)

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",  # Disable buffering for nginx
        },
    )
