"""
ForexPulse Backend - FastAPI Application

Main entry point for the backend API.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from fxpulse.core.config import settings
from fxpulse.api.v1 import router as api_v1_router
from fxpulse.services.base import ServiceError

if settings.debug:
    logging.basicConfig(level=logging.DEBUG)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")

    from fxpulse.services.session import get_session, close_session
    from fxpulse.services.stream import get_broadcaster

    session = get_session()
    broadcaster = get_broadcaster()
    session.add_listener(broadcaster.publish)
    logger.info(f"Session ready for {session.pair}")

    # Start simulated price feed
    from fxpulse.services.data_ingestion import start_price_feed, stop_price_feed
    if settings.enable_feed:
        feed = await start_price_feed()
        logger.info("Price feed started")
    else:
        feed = None
        logger.info("Price feed disabled (enable_feed=false)")

    yield

    # Shutdown
    logger.info("Shutting down...")
    if feed:
        await stop_price_feed()
    session.remove_listener(broadcaster.publish)
    await close_session()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    ForexPulse Real-Time Forex Analysis API

    ## Architecture
    - **Price Feed**: Simulated OHLC bars pushed into a bounded bar window
    - **Indicator Engine**: SMA and Wilder RSI (pure Python/NumPy)
    - **Pattern Detector**: Rule-based candlestick recognition
    - **Signal Sampler**: Rate-limits LLM prediction requests
    - **Prediction Layer**: LLM next-price forecast with BUY/SELL/HOLD signal

    ## Core Principles
    - AI suggests, human executes
    - One prediction in flight at a time; stale answers are discarded
    """,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware - allow both frontend ports
cors_origins = [
    "http://localhost:3000",
    "http://localhost:3001",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:3001",
]
# Add the configured frontend and any additional origins from settings
if settings.frontend_url not in cors_origins:
    cors_origins.append(settings.frontend_url)
if settings.allowed_origins:
    cors_origins.extend([o for o in settings.allowed_origins if o not in cors_origins])

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    """Map service-layer errors to 400 responses."""
    logger.warning(f"{exc.service_name} error on {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=400,
        content={"detail": exc.message, "service": exc.service_name, "details": exc.details},
    )


# Include API routes
app.include_router(api_v1_router, prefix="/api/v1")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    from fxpulse.services.llm import get_prediction_service

    return {
        "status": "healthy",
        "app": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
        "prediction_ready": await get_prediction_service().health_check(),
    }


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "ForexPulse Backend API",
        "docs": "/docs",
        "health": "/health",
    }
