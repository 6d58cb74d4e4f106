"""
LLM Service Interfaces

Defines the contract for the prediction collaborator.
"""

from abc import abstractmethod

from fxpulse.services.base import BaseService
from fxpulse.schemas.prediction import PredictionRequest, PredictionResult


class PredictionServiceInterface(BaseService[PredictionRequest, PredictionResult]):
    """
    Prediction Service Contract.

    INPUT: PredictionRequest
        - bars: trailing bars (truncated to settings.history_length)
        - pair: instrument label
        - settings: temperature and history length

    OUTPUT: PredictionResult
        - predicted_price: next-interval close
        - signal: BUY / SELL / HOLD (anything else becomes HOLD)
        - rationale: one sentence

    RULES:
        - Raise PredictionError on any failure; never return partial results
        - No retries; the next sampled tick is the natural retry
    """

    @property
    def name(self) -> str:
        return "PredictionService"

    @abstractmethod
    async def execute(self, input_data: PredictionRequest) -> PredictionResult:
        """Request a prediction for the given window."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Whether a provider is configured."""
        pass
