"""
Stream Service

Pushes SessionView updates to connected frontends over SSE.
"""

from fxpulse.services.stream.broadcaster import SessionBroadcaster, get_broadcaster

__all__ = ["SessionBroadcaster", "get_broadcaster"]
