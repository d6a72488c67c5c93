from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ParserConfig:
    """
    Line parsing and validation thresholds.

    Amounts are in statement currency units; confidences use the recognition
    engine's 0..100 scale except `match_confidence_floor` (0..1).
    """

    min_line_length: int = 10
    min_description_length: int = 3
    two_digit_year_pivot: int = 50  # yy < pivot -> 20yy, else 19yy

    # Inline (pre-acceptance) checks.
    large_amount_threshold: float = 10000.0
    whole_dollar_min: float = 100.0
    balance_abs_tolerance: float = 1.0
    balance_rel_tolerance: float = 0.1  # fraction of the transaction amount
    low_confidence_threshold: float = 60.0

    # Post-hoc validator checks.
    posthoc_large_amount_threshold: float = 50000.0
    match_confidence_floor: float = 0.3

    def validate(self) -> None:
        if self.min_line_length < 0:
            raise ValueError("min_line_length must be >= 0")
        if self.min_description_length < 0:
            raise ValueError("min_description_length must be >= 0")
        if not (0 <= self.two_digit_year_pivot <= 100):
            raise ValueError("two_digit_year_pivot must be within [0, 100]")
        if self.balance_abs_tolerance < 0 or self.balance_rel_tolerance < 0:
            raise ValueError("balance tolerances must be >= 0")
        if not (0.0 <= self.low_confidence_threshold <= 100.0):
            raise ValueError("low_confidence_threshold must be within [0, 100]")
        if not (0.0 <= self.match_confidence_floor <= 1.0):
            raise ValueError("match_confidence_floor must be within [0, 1]")

    def __post_init__(self) -> None:
        self.validate()
