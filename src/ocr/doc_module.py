from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Sequence

from contracts.pipeline import DocumentText, PageText, PipelineResult

from .config import PipelineConfig
from .engines.base import RecognitionEngine
from .module import PipelineOrchestrator

logger = logging.getLogger(__name__)


def page_separator(page_num: int) -> str:
    return f"--- Page {page_num} ---"


def concatenate_pages(pages: Sequence[PageText]) -> str:
    """
    Join page texts in page order; pages with no text are left out.
    """

    parts: list[str] = []
    for p in pages:
        if p.result.text:
            parts.append(f"\n{page_separator(p.page_num)}\n{p.result.text}\n")
    return "".join(parts)


def run_pipeline_on_pages(
    pages: Sequence[bytes],
    *,
    config: PipelineConfig | None = None,
    engine: RecognitionEngine | None = None,
    max_workers: int = 1,
) -> DocumentText:
    """
    Document mode: run the page pipeline on every rendered page image.

    Pages are processed one at a time unless `max_workers > 1`; either way the
    results are reassembled in input page order before concatenation, since
    balance reconciliation downstream depends on line order.
    """

    if max_workers < 1:
        raise ValueError("max_workers must be >= 1")

    orchestrator = PipelineOrchestrator(config, engine=engine)

    def _run(indexed: tuple[int, bytes]) -> PageText:
        page_num, image = indexed
        logger.info("Processing page %d of %d", page_num, len(pages))
        return PageText(page_num=page_num, result=orchestrator.run(image))

    indexed_pages = list(enumerate(pages, start=1))
    if max_workers == 1 or len(indexed_pages) <= 1:
        page_texts = [_run(p) for p in indexed_pages]
    else:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            # Executor.map yields in submission order.
            page_texts = list(pool.map(_run, indexed_pages))

    with_text: list[PipelineResult] = []
    for p in page_texts:
        if p.result.text:
            with_text.append(p.result)
            logger.info(
                "Page %d: %d chars, %.1f%% confidence", p.page_num, len(p.result.text), p.result.confidence
            )
        else:
            logger.warning("No text extracted from page %d", p.page_num)

    confidence = sum(r.confidence for r in with_text) / len(with_text) if with_text else 0.0
    refinement = [r.refinement_confidence for r in with_text if r.refinement_confidence is not None]
    refinement_confidence = sum(refinement) / len(refinement) if refinement else None

    return DocumentText(
        text=concatenate_pages(page_texts),
        confidence=confidence,
        pages=page_texts,
        refinement_confidence=refinement_confidence,
    )
