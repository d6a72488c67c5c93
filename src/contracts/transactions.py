from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any


@dataclass(frozen=True, slots=True)
class Transaction:
    """
    One parsed statement line.

    `warnings` is always `parsing_errors` followed by `ocr_uncertainty`; the
    boolean flags are derived from the lists, so they cannot drift apart.
    Instances are never mutated; validation passes return new copies.
    """

    date: date
    description: str
    debit: float
    credit: float
    balance: float
    original_line: str
    source_confidence: float  # batch recognition confidence, 0..100
    parsing_errors: list[str] = field(default_factory=list)
    ocr_uncertainty: list[str] = field(default_factory=list)
    match_confidence: float | None = None  # term-matching confidence, 0..1, when known

    @property
    def warnings(self) -> list[str]:
        return [*self.parsing_errors, *self.ocr_uncertainty]

    @property
    def has_warnings(self) -> bool:
        return bool(self.parsing_errors or self.ocr_uncertainty)

    @property
    def has_parsing_errors(self) -> bool:
        return bool(self.parsing_errors)

    @property
    def has_ocr_uncertainty(self) -> bool:
        return bool(self.ocr_uncertainty)

    @property
    def amount(self) -> float:
        return self.debit + self.credit

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "description": self.description,
            "debit": self.debit,
            "credit": self.credit,
            "balance": self.balance,
            "original_line": self.original_line,
            "source_confidence": self.source_confidence,
            "match_confidence": self.match_confidence,
            "warnings": self.warnings,
            "parsing_errors": list(self.parsing_errors),
            "ocr_uncertainty": list(self.ocr_uncertainty),
            "has_warnings": self.has_warnings,
            "has_parsing_errors": self.has_parsing_errors,
            "has_ocr_uncertainty": self.has_ocr_uncertainty,
        }

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "Transaction":
        return Transaction(
            date=date.fromisoformat(str(d["date"])),
            description=str(d.get("description", "")),
            debit=float(d.get("debit") or 0.0),
            credit=float(d.get("credit") or 0.0),
            balance=float(d.get("balance") or 0.0),
            original_line=str(d.get("original_line", "")),
            source_confidence=float(d.get("source_confidence") or 0.0),
            parsing_errors=[str(x) for x in (d.get("parsing_errors") or [])],
            ocr_uncertainty=[str(x) for x in (d.get("ocr_uncertainty") or [])],
            match_confidence=(None if d.get("match_confidence") is None else float(d["match_confidence"])),
        )


class SkipReason(str, Enum):
    HEADER = "HEADER"
    TOO_SHORT = "TOO_SHORT"
    NO_DIGIT = "NO_DIGIT"
    NO_DATE = "NO_DATE"
    NO_AMOUNT = "NO_AMOUNT"
    INVALID_DATE = "INVALID_DATE"
    ERROR = "ERROR"


@dataclass(frozen=True, slots=True)
class DroppedLine:
    line_index: int  # index among non-blank input lines
    reason: SkipReason

    def to_dict(self) -> dict[str, Any]:
        return {"line_index": self.line_index, "reason": self.reason.value}


@dataclass(frozen=True, slots=True)
class ParseResult:
    transactions: list[Transaction]
    dropped_lines: list[DroppedLine]


@dataclass(frozen=True, slots=True)
class MonthGroup:
    month: str  # English month name
    transactions: list[Transaction]  # newest first

    def to_dict(self) -> dict[str, Any]:
        return {"month": self.month, "transactions": [t.to_dict() for t in self.transactions]}


@dataclass(frozen=True, slots=True)
class YearGroup:
    year: int
    months: list[MonthGroup]  # December -> January

    def to_dict(self) -> dict[str, Any]:
        return {"year": self.year, "months": [m.to_dict() for m in self.months]}


GroupedResult = list[YearGroup]


@dataclass(frozen=True, slots=True)
class SummaryStats:
    total_transactions: int
    total_warnings: int
    total_parsing_errors: int
    total_ocr_uncertainty: int
    warning_breakdown: dict[str, int]
    parsing_error_breakdown: dict[str, int]
    ocr_uncertainty_breakdown: dict[str, int]

    @property
    def warning_rate(self) -> float:
        """Percentage of transactions carrying any warning (0 when there are none)."""

        if self.total_transactions == 0:
            return 0.0
        return self.total_warnings / self.total_transactions * 100.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_transactions": self.total_transactions,
            "total_warnings": self.total_warnings,
            "total_parsing_errors": self.total_parsing_errors,
            "total_ocr_uncertainty": self.total_ocr_uncertainty,
            "warning_rate": self.warning_rate,
            "warning_breakdown": dict(self.warning_breakdown),
            "parsing_error_breakdown": dict(self.parsing_error_breakdown),
            "ocr_uncertainty_breakdown": dict(self.ocr_uncertainty_breakdown),
        }
