"""
Recognition pipeline: rendered page image -> recognized statement text.

Stages:
- Stage 1 (preprocess): contrast/brightness boost, light blur, normalization, grayscale
- Stage 2 (recognize): OCR restricted to a statement character whitelist
- Stage 3 (refine): position-aware fuzzy correction against a banking vocabulary

Each stage degrades to a safe fallback payload instead of raising; the
orchestrator always runs all three stages. No PDF handling and no environment
variable reads in this package; callers pass rendered page images and an
explicit PipelineConfig.
"""

from .config import (
    BANKING_TERMS,
    DEFAULT_CHAR_WHITELIST,
    PipelineConfig,
    PreprocessConfig,
    RecognitionConfig,
    RecognitionEngineName,
    RefinementConfig,
)
from .doc_module import concatenate_pages, run_pipeline_on_pages
from .module import PipelineOrchestrator, run_pipeline_on_image
from .preprocess import ImagePreprocessor
from .recognize import TextRecognizer
from .refine import FuzzyRefiner

__all__ = [
    "BANKING_TERMS",
    "DEFAULT_CHAR_WHITELIST",
    "FuzzyRefiner",
    "ImagePreprocessor",
    "PipelineConfig",
    "PipelineOrchestrator",
    "PreprocessConfig",
    "RecognitionConfig",
    "RecognitionEngineName",
    "RefinementConfig",
    "TextRecognizer",
    "concatenate_pages",
    "run_pipeline_on_image",
    "run_pipeline_on_pages",
]
