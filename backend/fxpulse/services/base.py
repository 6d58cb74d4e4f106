"""
Base Service Interface

Boundary services (the prediction collaborator) implement this contract,
and every service-layer failure derives from ServiceError so the API can
answer it with a single handler.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

InputT = TypeVar("InputT")
OutputT = TypeVar("OutputT")


class BaseService(ABC, Generic[InputT, OutputT]):
    """
    Typed request/response service.

    Implementations name themselves for logs and error payloads, turn one
    InputT into one OutputT, and report whether they can currently serve.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Service name for logging and ServiceError.service_name."""
        pass

    @abstractmethod
    async def execute(self, input_data: InputT) -> OutputT:
        """
        Raises:
            ServiceError: If the request cannot be served
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Whether execute() can currently succeed (e.g. credentials present)."""
        pass


class ServiceError(Exception):
    """Base exception for service errors."""

    def __init__(self, service_name: str, message: str, details: dict = None):
        self.service_name = service_name
        self.message = message
        self.details = details or {}
        super().__init__(f"[{service_name}] {message}")


class ValidationError(ServiceError):
    """A request named an unsupported value (e.g. an unknown pair)."""
    pass


class ConfigurationError(ServiceError):
    """Invalid configuration reached a computation (e.g. non-positive period)."""
    pass


class BarOrderError(ServiceError):
    """A bar's time did not strictly increase over the window's newest bar."""
    pass


class ExternalAPIError(ServiceError):
    """A call to an external provider failed."""
    pass


class PredictionError(ExternalAPIError):
    """The prediction collaborator failed or returned an unusable answer."""
    pass
