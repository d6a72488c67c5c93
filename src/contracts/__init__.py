"""
Canonical pipeline contracts.

These models are the schema boundary between the recognition stages, the
transaction parser and the presentation helpers. Stage code should consume and
produce these contract objects (not ad-hoc dicts).
"""

from .pipeline import (
    DocumentText,
    PageText,
    PipelineResult,
    PipelineStages,
    PreprocessOutput,
    RecognitionOutput,
    RefinementOutput,
    StageError,
    StageResult,
    TermReplacement,
)
from .transactions import (
    DroppedLine,
    GroupedResult,
    MonthGroup,
    ParseResult,
    SkipReason,
    SummaryStats,
    Transaction,
    YearGroup,
)

__all__ = [
    "DocumentText",
    "DroppedLine",
    "GroupedResult",
    "MonthGroup",
    "PageText",
    "ParseResult",
    "PipelineResult",
    "PipelineStages",
    "PreprocessOutput",
    "RecognitionOutput",
    "RefinementOutput",
    "SkipReason",
    "StageError",
    "StageResult",
    "SummaryStats",
    "TermReplacement",
    "Transaction",
    "YearGroup",
]
