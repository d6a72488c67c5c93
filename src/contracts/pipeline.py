from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar


@dataclass(frozen=True, slots=True)
class StageError:
    code: str
    message: str
    detail: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "detail": None if self.detail is None else dict(self.detail),
        }


T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class StageResult(Generic[T]):
    """
    Output of one pipeline stage.

    `success=False` never halts the pipeline: `data` is then the stage's
    fallback payload (original image, empty text, unrefined text), which is
    always valid input for the next stage.
    """

    success: bool
    data: T
    message: str
    metadata: dict[str, Any] = field(default_factory=dict)
    error: StageError | None = None


@dataclass(frozen=True, slots=True)
class PreprocessOutput:
    processed_image: bytes
    image_format: str | None = None  # PIL format name, e.g. "PNG"


@dataclass(frozen=True, slots=True)
class RecognitionOutput:
    text: str
    confidence: float  # engine-native 0..100


@dataclass(frozen=True, slots=True)
class TermReplacement:
    """
    One accepted vocabulary correction, addressed by its offset span within a line.
    """

    line_index: int
    start: int
    end: int
    original: str
    replacement: str
    score: float  # 0 = exact match, 1 = no similarity

    def to_dict(self) -> dict[str, Any]:
        return {
            "line_index": self.line_index,
            "start": self.start,
            "end": self.end,
            "original": self.original,
            "replacement": self.replacement,
            "score": self.score,
        }


@dataclass(frozen=True, slots=True)
class RefinementOutput:
    original_text: str
    enhanced_text: str
    confidence: float  # enhancement confidence, 0..1
    replacements: list[TermReplacement] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class PipelineStages:
    preprocessing: bool
    recognition: bool
    refinement: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "preprocessing": self.preprocessing,
            "recognition": self.recognition,
            "refinement": self.refinement,
        }


@dataclass(frozen=True, slots=True)
class PipelineResult:
    """
    Final per-page pipeline output.

    `confidence` is always the recognition (Stage 2) confidence in [0, 100].
    `refinement_confidence` is diagnostic only and never blended into it.
    """

    text: str
    confidence: float
    stages: PipelineStages
    error: str | None = None
    refinement_confidence: float | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        return {
            "text": self.text,
            "confidence": self.confidence,
            "stages": self.stages.to_dict(),
            "error": self.error,
            "refinement_confidence": self.refinement_confidence,
        }


@dataclass(frozen=True, slots=True)
class PageText:
    page_num: int  # 1-indexed, in caller page order
    result: PipelineResult

    def to_dict(self) -> dict[str, Any]:
        return {"page_num": self.page_num, "result": self.result.to_dict()}


@dataclass(frozen=True, slots=True)
class DocumentText:
    """
    Multi-page recognition output.

    `text` is the page-ordered concatenation of every page that yielded text,
    each preceded by a `--- Page N ---` separator line. `confidence` is the mean
    recognition confidence of those pages (0 when none yielded text).
    """

    text: str
    confidence: float
    pages: list[PageText]
    refinement_confidence: float | None = None

    @property
    def ok(self) -> bool:
        return all(p.result.ok for p in self.pages)

    def to_dict(self) -> dict[str, Any]:
        return {
            "text": self.text,
            "confidence": self.confidence,
            "refinement_confidence": self.refinement_confidence,
            "pages": [p.to_dict() for p in self.pages],
        }
