"""
Transaction validation rules.

Two passes share these rules:

- the inline pass (`validate_parsed`) runs inside the parser, once per accepted
  line, before the next line is read, and is the only pass that reconciles
  running balances and inspects descriptions;
- the post-hoc pass (`validate_transactions`) re-categorizes an existing
  transaction list from scratch using only per-record amount and confidence
  checks, so it can be re-run on saved or edited lists.

Every warning is a plain string whose text up to the first colon is a stable
label (used by the summary breakdowns).
"""

from __future__ import annotations

import dataclasses
import logging
import re
from typing import Iterable

from contracts.transactions import Transaction

from .config import ParserConfig
from .line_parser import AmountToken, ParsedLine

logger = logging.getLogger(__name__)

UNUSUAL_CHARS_RE = re.compile(r"[~§¥£€@#%^&*|\\`]")
BALANCE_MARKERS = ("OPENING BALANCE", "BALANCE", "FORWARD")


# --- parsing errors (data / formatting defects) ---


def check_large_amount(amount: float, *, threshold: float) -> str | None:
    if amount > threshold:
        return f"Large amount: ${amount:.2f} - check for missing decimal"
    return None


def check_missing_decimal(token: AmountToken | None, *, minimum: float) -> str | None:
    # A whole-dollar transaction amount of 100+ may be a cents value that lost its point.
    if token is None or token.has_cents or token.value < minimum:
        return None
    return f"Missing decimal? Amount: ${token.value:.0f} might be ${token.value / 100:.2f}"


def check_unread_figures(debit: float, credit: float, bare_figures: list[str]) -> str | None:
    if debit or credit or not bare_figures:
        return None
    return f"Missing decimal? Figure: {', '.join(bare_figures)} was not read as an amount"


def check_missing_amount(debit: float, credit: float, description: str) -> str | None:
    if debit or credit:
        return None
    upper = description.upper()
    if any(marker in upper for marker in BALANCE_MARKERS):
        return None
    return "No debit or credit amount found"


def check_balance(
    previous_balance: float | None,
    *,
    debit: float,
    credit: float,
    balance: float,
    abs_tolerance: float,
    rel_tolerance: float,
) -> str | None:
    """
    Reconcile `previous_balance + credit - debit` against the stated balance.

    Either tolerance being exceeded flags the record.
    """

    if previous_balance is None:
        return None
    expected = previous_balance + credit - debit
    diff = abs(expected - balance)
    amount = debit + credit
    if diff > abs_tolerance or (amount > 0 and diff > amount * rel_tolerance):
        return f"Possible balance error: Expected ${expected:.2f}, got ${balance:.2f}"
    return None


# --- OCR uncertainty (recognition noise) ---


def check_description_length(raw_description: str, *, minimum: int) -> str | None:
    if len(raw_description) < minimum:
        return "Description too short - possible OCR error"
    return None


def check_unusual_characters(description: str) -> str | None:
    if UNUSUAL_CHARS_RE.search(description):
        return "Unusual characters detected - possible OCR error"
    return None


def check_source_confidence(confidence: float, *, threshold: float) -> str | None:
    if confidence < threshold:
        return f"Low source OCR confidence: {confidence:.1f}%"
    return None


def _collect(results: Iterable[str | None]) -> list[str]:
    return [r for r in results if r is not None]


def validate_parsed(
    parsed: ParsedLine,
    *,
    previous: Transaction | None,
    source_confidence: float,
    config: ParserConfig,
) -> tuple[list[str], list[str]]:
    """
    Inline checks for one freshly parsed line.

    `previous` is the last transaction already accepted in this batch (None for
    the first one). Returns (parsing_errors, ocr_uncertainty).
    """

    amount = parsed.debit + parsed.credit
    parsing_errors = _collect(
        [
            check_large_amount(amount, threshold=config.large_amount_threshold),
            check_missing_decimal(parsed.transaction_amount, minimum=config.whole_dollar_min),
            check_unread_figures(parsed.debit, parsed.credit, parsed.bare_figures),
            check_balance(
                None if previous is None else previous.balance,
                debit=parsed.debit,
                credit=parsed.credit,
                balance=parsed.balance,
                abs_tolerance=config.balance_abs_tolerance,
                rel_tolerance=config.balance_rel_tolerance,
            ),
            check_missing_amount(parsed.debit, parsed.credit, parsed.description),
        ]
    )
    ocr_uncertainty = _collect(
        [
            check_description_length(parsed.raw_description, minimum=config.min_description_length),
            check_unusual_characters(parsed.description),
            check_source_confidence(source_confidence, threshold=config.low_confidence_threshold),
        ]
    )
    return parsing_errors, ocr_uncertainty


def validate_transactions(
    transactions: Iterable[Transaction], config: ParserConfig | None = None
) -> list[Transaction]:
    """
    Post-hoc validator: recompute both warning categories for every record.

    Checks large amounts, whole-dollar amounts, low term-matching confidence (when the record carries
    one) and low recognition confidence. Earlier warnings are replaced, not
    merged, so the pass is idempotent. Input records are never mutated.
    """

    cfg = config or ParserConfig()
    validated: list[Transaction] = []
    for t in transactions:
        parsing_errors: list[str] = []
        ocr_uncertainty: list[str] = []

        if t.amount > cfg.posthoc_large_amount_threshold:
            parsing_errors.append("Large amount detected - verify accuracy")

        if abs(t.amount) >= cfg.whole_dollar_min and float(t.amount).is_integer():
            parsing_errors.append("Whole dollar amount - verify no missing decimals")

        if t.match_confidence is not None and t.match_confidence < cfg.match_confidence_floor:
            ocr_uncertainty.append("Low confidence in transaction type matching")

        if t.source_confidence < cfg.low_confidence_threshold:
            ocr_uncertainty.append(f"Low OCR confidence: {t.source_confidence:.1f}%")

        validated.append(dataclasses.replace(t, parsing_errors=parsing_errors, ocr_uncertainty=ocr_uncertainty))

    logger.debug("Validated %d transactions", len(validated))
    return validated
