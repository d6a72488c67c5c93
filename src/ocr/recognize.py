from __future__ import annotations

import logging

from contracts.pipeline import PreprocessOutput, RecognitionOutput, StageError, StageResult

from .config import RecognitionConfig, RecognitionEngineName
from .engines.base import RecognitionEngine, RecognitionError
from .engines.tesseract_cli import TesseractCliEngine

logger = logging.getLogger(__name__)


def _get_engine(engine: RecognitionEngineName) -> RecognitionEngine:
    if engine == RecognitionEngineName.TESSERACT_CLI:
        return TesseractCliEngine()
    raise ValueError(f"Unsupported recognition engine: {engine}")


class TextRecognizer:
    """
    Stage 2: run text recognition on the (possibly fallback) Stage 1 image.

    An empty text with zero confidence means "no signal"; it is returned, not
    raised.
    """

    def __init__(self, config: RecognitionConfig | None = None, engine: RecognitionEngine | None = None) -> None:
        self.config = config or RecognitionConfig()
        self.engine = engine if engine is not None else _get_engine(self.config.engine)

    def run(self, data: PreprocessOutput) -> StageResult[RecognitionOutput]:
        logger.info("Stage 2: recognizing text")
        try:
            recognized = self.engine.recognize(image=data.processed_image, config=self.config)
        except RecognitionError as e:
            logger.warning("Stage 2 failed: %s (%s)", e.message, e.code)
            return self._failure(StageError(code=e.code, message=e.message, detail=e.detail))
        except Exception as e:
            logger.warning("Stage 2 failed: %r", e)
            return self._failure(
                StageError(code="OCR_FAILED", message=str(e) or type(e).__name__, detail={"error": repr(e)})
            )

        text = recognized.text or ""
        confidence = float(recognized.confidence or 0.0)
        logger.info("Stage 2 complete: %d chars, %.1f%% confidence", len(text), confidence)
        return StageResult(
            success=True,
            data=RecognitionOutput(text=text, confidence=confidence),
            message=f"Stage 2 complete: extracted {len(text)} characters with {confidence:.1f}% confidence",
            metadata={
                "confidence": confidence,
                "text_length": len(text),
                "ocr_confidence": confidence,
                **({"engine": recognized.meta} if recognized.meta else {}),
            },
        )

    def _failure(self, error: StageError) -> StageResult[RecognitionOutput]:
        return StageResult(
            success=False,
            data=RecognitionOutput(text="", confidence=0.0),
            message=f"Stage 2 failed: {error.message}",
            error=error,
        )
