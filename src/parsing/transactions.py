from __future__ import annotations

import logging

from contracts.transactions import DroppedLine, ParseResult, SkipReason, Transaction

from .config import ParserConfig
from .line_parser import LineParser
from .validation import validate_parsed

logger = logging.getLogger(__name__)


def parse_statement_text(
    text: str,
    confidence: float = 0.0,
    *,
    config: ParserConfig | None = None,
    match_confidence: float | None = None,
) -> ParseResult:
    """
    Parse accumulated statement text into transactions.

    `confidence` is the batch recognition confidence (0..100) stamped on every
    record; `match_confidence` (0..1) is the optional vocabulary-matching
    confidence of the same batch. Lines are processed in input order and each
    accepted transaction is validated against the ones accepted before it.
    Lines that cannot become a transaction are dropped (never raised) and
    recorded in `dropped_lines` with the reason.
    """

    cfg = config or ParserConfig()
    parser = LineParser(cfg)

    lines = [ln.strip() for ln in text.split("\n") if ln.strip()]
    accepted: list[Transaction] = []
    dropped: list[DroppedLine] = []

    for idx, line in enumerate(lines):
        try:
            parsed = parser.parse(line, ordinal=len(accepted) + 1)
            if isinstance(parsed, SkipReason):
                if parsed == SkipReason.INVALID_DATE:
                    logger.debug("Invalid date, skipping line %d: %r", idx, line)
                dropped.append(DroppedLine(line_index=idx, reason=parsed))
                continue

            parsing_errors, ocr_uncertainty = validate_parsed(
                parsed,
                previous=accepted[-1] if accepted else None,
                source_confidence=confidence,
                config=cfg,
            )
            accepted.append(
                Transaction(
                    date=parsed.date,
                    description=parsed.description,
                    debit=parsed.debit,
                    credit=parsed.credit,
                    balance=parsed.balance,
                    original_line=line,
                    source_confidence=confidence,
                    parsing_errors=parsing_errors,
                    ocr_uncertainty=ocr_uncertainty,
                    match_confidence=match_confidence,
                )
            )
        except Exception:
            logger.debug("Error parsing line %d: %r", idx, line, exc_info=True)
            dropped.append(DroppedLine(line_index=idx, reason=SkipReason.ERROR))

    logger.info("Parsed %d transactions (%d lines dropped)", len(accepted), len(dropped))
    return ParseResult(transactions=accepted, dropped_lines=dropped)


def parse_transactions(
    text: str,
    confidence: float = 0.0,
    *,
    config: ParserConfig | None = None,
    match_confidence: float | None = None,
) -> list[Transaction]:
    return parse_statement_text(
        text, confidence, config=config, match_confidence=match_confidence
    ).transactions
