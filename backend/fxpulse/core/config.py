"""
Application Configuration

All settings loaded from environment variables.
"""

from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # Application
    app_name: str = "ForexPulse Backend"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # CORS (Frontend URL)
    frontend_url: str = "http://localhost:3000"
    allowed_origins: list[str] = ["http://localhost:3000"]

    # Analysis session
    default_pair: str = "EUR/USD"
    trade_history_limit: int = 10

    # Indicators
    sma_enabled: bool = False
    sma_period: int = 20
    sma_color: str = "#f6e05e"
    rsi_enabled: bool = False
    rsi_period: int = 14
    rsi_color: str = "#4299e1"

    # Signal sampler: a tick is sampled when clock % every < phase width
    sample_every: int = 4
    sample_phase_width: int = 1

    # Prediction
    prediction_temperature: float = 0.5
    prediction_history_length: int = 50
    prediction_horizon_seconds: float = 60.0

    # Simulated price feed
    enable_feed: bool = True
    feed_interval_seconds: float = 2.0
    feed_volatility: float = 0.00014  # Fraction of price per bar

    # LLM Providers
    gemini_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    llm_primary_provider: str = "gemini"  # Options: gemini, openai
    llm_model: str = "gemini-2.5-flash"
    llm_fallback_model: str = "gpt-4o-mini"
    llm_max_tokens: int = 1024

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
