"""
LLM Client Abstraction

Provides unified interface for Google Gemini and OpenAI.
Handles provider switching and fallback.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class LLMProvider(str, Enum):
    GEMINI = "gemini"
    OPENAI = "openai"


@dataclass
class LLMConfig:
    """Configuration for LLM client."""

    provider: LLMProvider
    gemini_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    gemini_model: str = "gemini-2.5-flash"
    openai_model: str = "gpt-4o-mini"
    max_tokens: int = 1024
    temperature: float = 0.5


@dataclass
class LLMResponse:
    """Response from LLM."""

    content: str
    model: str
    provider: LLMProvider
    usage: dict = field(default_factory=dict)


class BaseLLMClient(ABC):
    """Abstract base class for LLM clients."""

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        response_schema: Optional[dict] = None,
    ) -> LLMResponse:
        """Generate a response from the LLM."""
        pass


class GeminiClient(BaseLLMClient):
    """Google Gemini client implementation."""

    def __init__(self, config: LLMConfig):
        self.config = config
        self._model = None

    def _get_model(self):
        """Lazy initialization of the Gemini model."""
        if self._model is None:
            try:
                import google.generativeai as genai
            except ImportError:
                raise RuntimeError(
                    "google-generativeai package not installed. Run: pip install google-generativeai"
                )
            genai.configure(api_key=self.config.gemini_api_key)
            self._model = genai.GenerativeModel(self.config.gemini_model)
        return self._model

    async def generate(
        self,
        prompt: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        response_schema: Optional[dict] = None,
    ) -> LLMResponse:
        """Generate response using Gemini."""
        model = self._get_model()

        generation_config = {
            "temperature": temperature if temperature is not None else self.config.temperature,
            "max_output_tokens": max_tokens if max_tokens is not None else self.config.max_tokens,
        }
        if response_schema is not None:
            generation_config["response_mime_type"] = "application/json"
            generation_config["response_schema"] = response_schema

        try:
            # Gemini's generate_content is synchronous, wrap in executor
            loop = asyncio.get_running_loop()
            response = await loop.run_in_executor(
                None,
                lambda: model.generate_content(prompt, generation_config=generation_config),
            )
        except Exception as e:
            logger.error(f"Gemini API error: {e}")
            raise

        usage = {}
        if hasattr(response, "usage_metadata"):
            usage = {
                "prompt_tokens": response.usage_metadata.prompt_token_count,
                "completion_tokens": response.usage_metadata.candidates_token_count,
            }
        return LLMResponse(
            content=response.text,
            model=self.config.gemini_model,
            provider=LLMProvider.GEMINI,
            usage=usage,
        )


class OpenAIClient(BaseLLMClient):
    """OpenAI GPT client implementation."""

    def __init__(self, config: LLMConfig):
        self.config = config
        self._client = None

    def _get_client(self):
        """Lazy initialization of OpenAI client."""
        if self._client is None:
            try:
                import openai
            except ImportError:
                raise RuntimeError(
                    "openai package not installed. Run: pip install openai"
                )
            self._client = openai.AsyncOpenAI(api_key=self.config.openai_api_key)
        return self._client

    async def generate(
        self,
        prompt: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        response_schema: Optional[dict] = None,
    ) -> LLMResponse:
        """Generate response using GPT."""
        client = self._get_client()

        kwargs = {
            "model": self.config.openai_model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": temperature if temperature is not None else self.config.temperature,
            "max_tokens": max_tokens if max_tokens is not None else self.config.max_tokens,
        }
        if response_schema is not None:
            kwargs["response_format"] = {"type": "json_object"}

        try:
            response = await client.chat.completions.create(**kwargs)
        except Exception as e:
            logger.error(f"OpenAI API error: {e}")
            raise

        return LLMResponse(
            content=response.choices[0].message.content,
            model=self.config.openai_model,
            provider=LLMProvider.OPENAI,
            usage={
                "prompt_tokens": response.usage.prompt_tokens,
                "completion_tokens": response.usage.completion_tokens,
            },
        )


class LLMClient:
    """
    Unified LLM client with provider switching and fallback.

    Primary provider is tried first.
    Falls back to the other provider on failure when its key is configured.
    """

    def __init__(self, config: LLMConfig):
        self.config = config
        self._primary: Optional[BaseLLMClient] = None
        self._fallback: Optional[BaseLLMClient] = None
        self._setup_clients()

    def _setup_clients(self):
        """Setup primary and fallback clients based on config."""
        gemini = GeminiClient(self.config) if self.config.gemini_api_key else None
        openai = OpenAIClient(self.config) if self.config.openai_api_key else None

        if self.config.provider == LLMProvider.GEMINI:
            self._primary, self._fallback = gemini, openai
        else:
            self._primary, self._fallback = openai, gemini

        if self._primary is None and self._fallback is None:
            logger.warning("No LLM API keys configured. AI predictions disabled.")

    @property
    def is_configured(self) -> bool:
        return self._primary is not None or self._fallback is not None

    async def generate(
        self,
        prompt: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        response_schema: Optional[dict] = None,
    ) -> LLMResponse:
        """
        Generate LLM response with automatic fallback.

        Tries primary provider first, falls back to secondary on failure.
        """
        if not self.is_configured:
            raise RuntimeError("No LLM providers configured")

        kwargs = {
            "prompt": prompt,
            "temperature": temperature,
            "max_tokens": max_tokens,
            "response_schema": response_schema,
        }

        if self._primary:
            try:
                return await self._primary.generate(**kwargs)
            except Exception as e:
                if self._fallback is None:
                    raise
                logger.warning(f"Primary LLM failed: {e}, trying fallback...")

        return await self._fallback.generate(**kwargs)


# Singleton instance management
_llm_client: Optional[LLMClient] = None


def get_llm_client() -> LLMClient:
    """Get or create LLM client singleton."""
    global _llm_client
    if _llm_client is None:
        from fxpulse.core.config import settings

        config = LLMConfig(
            provider=LLMProvider(settings.llm_primary_provider),
            gemini_api_key=settings.gemini_api_key,
            openai_api_key=settings.openai_api_key,
            gemini_model=settings.llm_model,
            openai_model=settings.llm_fallback_model,
            max_tokens=settings.llm_max_tokens,
            temperature=settings.prediction_temperature,
        )
        _llm_client = LLMClient(config)
    return _llm_client
