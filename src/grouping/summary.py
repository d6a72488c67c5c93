from __future__ import annotations

import logging
from collections import Counter

from contracts.transactions import GroupedResult, SummaryStats

logger = logging.getLogger(__name__)


def warning_label(warning: str) -> str:
    """Normalized warning type: the warning text up to its first colon."""

    return warning.split(":", 1)[0]


def summarize_grouped(grouped: GroupedResult) -> SummaryStats:
    """
    Aggregate warning diagnostics over a grouped result.

    Counts are per transaction (a record with three warnings counts once in
    `total_warnings`); breakdowns count individual warnings by label.
    """

    total = 0
    with_warnings = 0
    with_parsing_errors = 0
    with_ocr_uncertainty = 0
    warning_breakdown: Counter[str] = Counter()
    parsing_breakdown: Counter[str] = Counter()
    ocr_breakdown: Counter[str] = Counter()

    for year in grouped:
        for month in year.months:
            total += len(month.transactions)
            for t in month.transactions:
                if not t.has_warnings:
                    continue
                with_warnings += 1
                if t.has_parsing_errors:
                    with_parsing_errors += 1
                    parsing_breakdown.update(warning_label(w) for w in t.parsing_errors)
                if t.has_ocr_uncertainty:
                    with_ocr_uncertainty += 1
                    ocr_breakdown.update(warning_label(w) for w in t.ocr_uncertainty)
                warning_breakdown.update(warning_label(w) for w in t.warnings)

    return SummaryStats(
        total_transactions=total,
        total_warnings=with_warnings,
        total_parsing_errors=with_parsing_errors,
        total_ocr_uncertainty=with_ocr_uncertainty,
        warning_breakdown=dict(warning_breakdown),
        parsing_error_breakdown=dict(parsing_breakdown),
        ocr_uncertainty_breakdown=dict(ocr_breakdown),
    )


def log_summary(stats: SummaryStats, log: logging.Logger | None = None) -> None:
    log = log or logger
    log.info("Parsing summary:")
    log.info("  transactions parsed: %d", stats.total_transactions)
    log.info("  transactions with warnings: %d", stats.total_warnings)
    log.info("  parsing errors (data validation): %d", stats.total_parsing_errors)
    log.info("  OCR uncertainty (text recognition): %d", stats.total_ocr_uncertainty)
    log.info("  warning rate: %.1f%%", stats.warning_rate)
    log.info("  parsing error breakdown: %s", stats.parsing_error_breakdown)
    log.info("  OCR uncertainty breakdown: %s", stats.ocr_uncertainty_breakdown)
