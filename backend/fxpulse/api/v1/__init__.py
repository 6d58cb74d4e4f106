"""
API v1 Router

All API endpoints for the frontend.
"""

from fastapi import APIRouter

from fxpulse.api.v1.endpoints import session, stream

router = APIRouter()

# Include all endpoint routers
router.include_router(session.router, prefix="/session", tags=["Session"])
router.include_router(stream.router, prefix="/stream", tags=["Real-Time Streaming"])
