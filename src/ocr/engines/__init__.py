from .base import RecognitionEngine, RecognitionError, RecognizedText
from .tesseract_cli import TesseractCliEngine

__all__ = ["RecognitionEngine", "RecognitionError", "RecognizedText", "TesseractCliEngine"]
