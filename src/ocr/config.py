from __future__ import annotations

import string
from dataclasses import dataclass, field
from enum import Enum


class RecognitionEngineName(str, Enum):
    """
    Recognition backends supported by Stage 2.
    """

    TESSERACT_CLI = "tesseract_cli"


# Characters a statement line is expected to contain.
DEFAULT_CHAR_WHITELIST = string.digits + string.ascii_uppercase + string.ascii_lowercase + ".,()-/$ "

BANKING_TERMS: tuple[str, ...] = (
    "BALANCE",
    "DEPOSIT",
    "WITHDRAWAL",
    "TRANSFER",
    "PAYMENT",
    "CHECK",
    "FEE",
    "INTEREST",
    "DIVIDEND",
    "REFUND",
    "PURCHASE",
    "DEBIT",
    "CREDIT",
    "ACH",
    "WIRE",
    "ATM",
    "POS",
    "OVERDRAFT",
    "NSF",
    "RETURNED",
    "CLEARED",
    "PENDING",
    "AUTHORIZED",
    "DECLINED",
    "APPROVED",
    "TRANSACTION",
)


@dataclass(frozen=True, slots=True)
class PreprocessConfig:
    """
    Stage 1 image enhancement parameters.

    `contrast` and `brightness` are boost amounts: the enhancement factor
    applied is `1 + amount` (0 leaves the image unchanged).
    """

    contrast: float = 0.3
    brightness: float = 0.1
    blur_radius: float = 0.5
    normalize: bool = True
    grayscale: bool = True

    def validate(self) -> None:
        if not (-1.0 < self.contrast <= 1.0):
            raise ValueError("contrast must be within (-1, 1]")
        if not (-1.0 < self.brightness <= 1.0):
            raise ValueError("brightness must be within (-1, 1]")
        if self.blur_radius < 0:
            raise ValueError("blur_radius must be >= 0")

    def __post_init__(self) -> None:
        self.validate()


@dataclass(frozen=True, slots=True)
class RecognitionConfig:
    engine: RecognitionEngineName = RecognitionEngineName.TESSERACT_CLI
    language: str = "eng"
    psm: int | None = 6  # Tesseract "single uniform block of text"
    char_whitelist: str = DEFAULT_CHAR_WHITELIST
    preserve_interword_spaces: bool = True
    timeout_s: float = 120.0

    def validate(self) -> None:
        if self.timeout_s <= 0:
            raise ValueError("timeout_s must be > 0")
        if self.psm is not None and not (0 <= self.psm <= 13):
            raise ValueError("psm must be within [0, 13]")
        if not self.language:
            raise ValueError("language must be a non-empty string")

    def __post_init__(self) -> None:
        self.validate()


@dataclass(frozen=True, slots=True)
class RefinementConfig:
    """
    Stage 3 vocabulary correction parameters.

    Scores are distances in [0, 1] (0 = exact). Candidates farther than
    `search_threshold` are never considered; a token is replaced only when the
    best candidate is closer than `acceptance_threshold`.
    """

    vocabulary: tuple[str, ...] = BANKING_TERMS
    search_threshold: float = 0.6
    acceptance_threshold: float = 0.3
    min_token_length: int = 3
    neutral_confidence: float = 0.5  # reported when no replacement was accepted

    def validate(self) -> None:
        if not self.vocabulary:
            raise ValueError("vocabulary must not be empty")
        if not (0.0 <= self.search_threshold <= 1.0):
            raise ValueError("search_threshold must be within [0, 1]")
        if not (0.0 <= self.acceptance_threshold <= self.search_threshold):
            raise ValueError("acceptance_threshold must be within [0, search_threshold]")
        if self.min_token_length < 1:
            raise ValueError("min_token_length must be >= 1")
        if not (0.0 <= self.neutral_confidence <= 1.0):
            raise ValueError("neutral_confidence must be within [0, 1]")

    def __post_init__(self) -> None:
        if not isinstance(self.vocabulary, tuple):
            # Keep the config hashable/immutable even when a list is passed.
            object.__setattr__(self, "vocabulary", tuple(self.vocabulary))
        self.validate()


@dataclass(frozen=True, slots=True)
class PipelineConfig:
    """
    Read-only configuration shared by every stage of every page.

    No environment variable reads; callers build it explicitly and may derive
    per-call variants with `dataclasses.replace`.
    """

    preprocess: PreprocessConfig = field(default_factory=PreprocessConfig)
    recognition: RecognitionConfig = field(default_factory=RecognitionConfig)
    refinement: RefinementConfig = field(default_factory=RefinementConfig)
