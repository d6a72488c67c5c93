from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from contracts.pipeline import PageText
from contracts.transactions import DroppedLine, GroupedResult, SummaryStats, Transaction


@dataclass(frozen=True, slots=True)
class StatementResult:
    """
    End-to-end output for one statement.

    `transactions` are in input-line order; `grouped` is the presentation view
    of the same records. `pages` is empty when processing started from text.
    """

    transactions: list[Transaction]
    grouped: GroupedResult
    summary: SummaryStats
    dropped_lines: list[DroppedLine]
    source_confidence: float
    pages: list[PageText] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(p.result.ok for p in self.pages)

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "source_confidence": self.source_confidence,
            "transactions": [t.to_dict() for t in self.transactions],
            "grouped": [y.to_dict() for y in self.grouped],
            "summary": self.summary.to_dict(),
            "dropped_lines": [d.to_dict() for d in self.dropped_lines],
            "pages": [p.to_dict() for p in self.pages],
        }
