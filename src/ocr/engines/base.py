from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from ..config import RecognitionConfig


@dataclass(frozen=True, slots=True)
class RecognizedText:
    text: str
    confidence: float  # engine-native 0..100
    meta: dict[str, Any] | None = None


class RecognitionError(Exception):
    """
    Raised by engines when recognition could not produce any text.

    Carries a stable error code so Stage 2 can record the degradation.
    """

    def __init__(self, code: str, message: str, detail: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.detail = detail


class RecognitionEngine(ABC):
    """
    Interface for text recognition engines.

    Engines return literal recognized text plus a page confidence; they do not
    correct vocabulary (that is Stage 3's job).
    """

    @abstractmethod
    def recognize(self, *, image: bytes, config: RecognitionConfig) -> RecognizedText:
        raise NotImplementedError
