from __future__ import annotations

import logging
from typing import Sequence

from grouping.by_date import group_transactions_by_date
from grouping.summary import log_summary, summarize_grouped
from ocr.config import PipelineConfig
from ocr.doc_module import run_pipeline_on_pages
from ocr.engines.base import RecognitionEngine
from parsing.config import ParserConfig
from parsing.transactions import parse_statement_text

from .contracts import StatementResult

logger = logging.getLogger(__name__)


def process_statement_text(
    text: str,
    confidence: float = 0.0,
    *,
    config: ParserConfig | None = None,
    match_confidence: float | None = None,
) -> StatementResult:
    """
    Parse accumulated statement text, group it by date and log the summary.
    """

    parsed = parse_statement_text(text, confidence, config=config, match_confidence=match_confidence)
    grouped = group_transactions_by_date(parsed.transactions)
    summary = summarize_grouped(grouped)
    log_summary(summary, logger)
    return StatementResult(
        transactions=parsed.transactions,
        grouped=grouped,
        summary=summary,
        dropped_lines=parsed.dropped_lines,
        source_confidence=confidence,
    )


def process_statement_pages(
    pages: Sequence[bytes],
    *,
    pipeline_config: PipelineConfig | None = None,
    parser_config: ParserConfig | None = None,
    engine: RecognitionEngine | None = None,
    max_workers: int = 1,
) -> StatementResult:
    """
    Full run: rendered page images -> recognized text -> transactions.

    The batch confidence stamped on every transaction is the mean recognition
    confidence of the pages that produced text.
    """

    doc = run_pipeline_on_pages(pages, config=pipeline_config, engine=engine, max_workers=max_workers)
    if not doc.text.strip():
        logger.warning("No text could be extracted from %d page(s)", len(pages))

    result = process_statement_text(
        doc.text,
        doc.confidence,
        config=parser_config,
        match_confidence=doc.refinement_confidence,
    )
    return StatementResult(
        transactions=result.transactions,
        grouped=result.grouped,
        summary=result.summary,
        dropped_lines=result.dropped_lines,
        source_confidence=result.source_confidence,
        pages=doc.pages,
    )
