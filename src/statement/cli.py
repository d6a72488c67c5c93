from __future__ import annotations

import argparse
import logging
from pathlib import Path

from ocr.config import PipelineConfig, RecognitionConfig

from .artifacts import write_statement_json_artifact
from .module import process_statement_pages


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="statement-ocr",
        description=(
            "Recognize rendered bank-statement page images and emit validated transactions as JSON."
        ),
    )
    p.add_argument(
        "--page",
        dest="pages",
        action="append",
        required=True,
        type=Path,
        help="Rendered page image file; repeat in page order.",
    )
    p.add_argument(
        "--out",
        required=True,
        type=Path,
        help="Output JSON artifact file path.",
    )
    p.add_argument(
        "--language",
        default="eng",
        help="Tesseract language hint (default: eng).",
    )
    p.add_argument(
        "--psm",
        type=int,
        default=6,
        help="Tesseract page segmentation mode (default: 6, single block).",
    )
    p.add_argument(
        "--timeout-s",
        type=float,
        default=120.0,
        help="Tesseract timeout in seconds, per page.",
    )
    p.add_argument(
        "--max-workers",
        type=int,
        default=1,
        help="Pages recognized concurrently (output order is always page order).",
    )
    p.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    return p


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    config = PipelineConfig(
        recognition=RecognitionConfig(
            language=args.language,
            psm=args.psm,
            timeout_s=args.timeout_s,
        )
    )

    images = [path.read_bytes() for path in args.pages]
    result = process_statement_pages(images, pipeline_config=config, max_workers=args.max_workers)
    write_statement_json_artifact(result=result, out_file=args.out)

    print(
        f"pages={len(result.pages)} transactions={result.summary.total_transactions} "
        f"warnings={result.summary.total_warnings} ok={result.ok}"
    )
    return 0 if result.ok else 2


if __name__ == "__main__":
    raise SystemExit(main())
