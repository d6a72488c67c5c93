from __future__ import annotations

import logging

from contracts.pipeline import PipelineResult, PipelineStages

from .config import PipelineConfig
from .engines.base import RecognitionEngine
from .preprocess import ImagePreprocessor
from .recognize import TextRecognizer
from .refine import FuzzyRefiner

logger = logging.getLogger(__name__)


class PipelineOrchestrator:
    """
    Runs Stage 1 -> Stage 2 -> Stage 3 for one page image.

    Every stage runs regardless of the previous stage's `success` flag: each
    stage's fallback payload is valid input for the next one. Only an exception
    escaping the stage calls is fatal, and even that is returned as a zeroed
    PipelineResult carrying `error`.
    """

    def __init__(self, config: PipelineConfig | None = None, engine: RecognitionEngine | None = None) -> None:
        self.config = config or PipelineConfig()
        self.preprocessor = ImagePreprocessor(self.config.preprocess)
        self.recognizer = TextRecognizer(self.config.recognition, engine=engine)
        self.refiner = FuzzyRefiner(self.config.refinement)

    def run(self, image: bytes) -> PipelineResult:
        logger.info("Starting 3-stage recognition pipeline")
        try:
            stage1 = self.preprocessor.run(image)
            stage2 = self.recognizer.run(stage1.data)
            stage3 = self.refiner.run(stage2.data)

            text = stage3.data.enhanced_text if stage3.success else stage2.data.text
            confidence = stage2.data.confidence or 0.0
            result = PipelineResult(
                text=text,
                confidence=confidence,
                stages=PipelineStages(
                    preprocessing=stage1.success,
                    recognition=stage2.success,
                    refinement=stage3.success,
                ),
                refinement_confidence=stage3.data.confidence if stage3.success else None,
            )
        except Exception as e:
            logger.exception("Recognition pipeline failed")
            return PipelineResult(
                text="",
                confidence=0.0,
                stages=PipelineStages(preprocessing=False, recognition=False, refinement=False),
                error=str(e) or type(e).__name__,
            )

        logger.info("Pipeline complete: %d chars, %.1f%% confidence", len(result.text), result.confidence)
        return result


def run_pipeline_on_image(
    image: bytes,
    *,
    config: PipelineConfig | None = None,
    engine: RecognitionEngine | None = None,
) -> PipelineResult:
    """
    Run the full recognition pipeline on one rendered page image.
    """

    return PipelineOrchestrator(config, engine=engine).run(image)
