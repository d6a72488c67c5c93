from __future__ import annotations

import csv
import subprocess
from collections import defaultdict
from typing import Any

from ..config import RecognitionConfig
from .base import RecognitionEngine, RecognitionError, RecognizedText


def build_command(config: RecognitionConfig) -> list[str]:
    # The image is streamed on stdin; TSV goes to stdout.
    cmd = ["tesseract", "stdin", "stdout", "-l", config.language]
    if config.psm is not None:
        cmd.extend(["--psm", str(config.psm)])
    if config.char_whitelist:
        cmd.extend(["-c", f"tessedit_char_whitelist={config.char_whitelist}"])
    if config.preserve_interword_spaces:
        cmd.extend(["-c", "preserve_interword_spaces=1"])
    cmd.append("tsv")
    return cmd


def _join_line(words: list[tuple[int, int, int, str]], *, preserve_spacing: bool) -> str:
    # words: (word_num, left, width, text), already in word order
    if not preserve_spacing:
        return " ".join(w[3] for w in words)

    chars = sum(len(w[3]) for w in words)
    pixels = sum(w[2] for w in words)
    char_w = pixels / chars if chars and pixels > 0 else 0.0

    parts = [words[0][3]]
    for prev, cur in zip(words, words[1:]):
        gap = cur[1] - (prev[1] + prev[2])
        n = max(1, round(gap / char_w)) if char_w > 0 else 1
        parts.append(" " * n)
        parts.append(cur[3])
    return "".join(parts)


def parse_tsv(tsv: str, *, preserve_spacing: bool = False) -> tuple[str, float, int]:
    """
    Rebuild page text from Tesseract TSV word rows.

    Words are ordered by (page, block, par, line, word). Lines are joined by
    newlines and blocks by a blank line. Words of one line are joined by a
    single space, or, with `preserve_spacing`, by as many spaces as the pixel
    gap between them spans at the line's mean character width.
    Returns (text, mean word confidence 0..100, word count).
    """

    words_by_line: dict[tuple[int, int, int, int], list[tuple[int, int, int, str]]] = defaultdict(list)
    confidences: list[float] = []

    reader = csv.DictReader(tsv.splitlines(), delimiter="\t", quoting=csv.QUOTE_NONE)
    for row in reader:
        # level meanings: 1=page,2=block,3=para,4=line,5=word
        try:
            level = int(row.get("level", "") or "0")
        except ValueError:
            continue
        if level != 5:
            continue

        text = (row.get("text") or "").strip()
        if text == "":
            continue

        try:
            key = (
                int(row.get("page_num", "") or "1"),
                int(row.get("block_num", "") or "0"),
                int(row.get("par_num", "") or "0"),
                int(row.get("line_num", "") or "0"),
            )
            word_num = int(row.get("word_num", "") or "0")
            left = int(row.get("left", "") or "0")
            width = int(row.get("width", "") or "0")
        except ValueError:
            continue

        words_by_line[key].append((word_num, left, width, text))

        try:
            conf = float(row.get("conf", "") or "-1")
        except ValueError:
            conf = -1.0
        if conf >= 0:
            confidences.append(conf)

    lines: list[str] = []
    prev_block: tuple[int, int] | None = None
    for key in sorted(words_by_line):
        block = (key[0], key[1])
        if prev_block is not None and block != prev_block:
            lines.append("")
        prev_block = block
        lines.append(_join_line(sorted(words_by_line[key]), preserve_spacing=preserve_spacing))

    text = "\n".join(lines)
    confidence = sum(confidences) / len(confidences) if confidences else 0.0
    word_count = sum(len(v) for v in words_by_line.values())
    return text, max(0.0, min(100.0, confidence)), word_count


class TesseractCliEngine(RecognitionEngine):
    """
    Tesseract OCR via the `tesseract` CLI, parsed from TSV output.

    Failures are raised as `RecognitionError` with a stable code; Stage 2
    turns them into a degraded StageResult.
    """

    def recognize(self, *, image: bytes, config: RecognitionConfig) -> RecognizedText:
        cmd = build_command(config)
        meta: dict[str, Any] = {
            "backend": "tesseract",
            "backend_mode": "cli",
            "language": config.language,
            "psm": config.psm,
            "command_template": ["tesseract", "<STDIN>", *cmd[2:]],
        }

        try:
            proc = subprocess.run(
                cmd,
                input=image,
                check=False,
                capture_output=True,
                timeout=config.timeout_s,
            )
        except FileNotFoundError as e:
            raise RecognitionError(
                code="OCR_BACKEND_NOT_INSTALLED",
                message="tesseract binary not found on PATH",
                detail={"expected_command": "tesseract"},
            ) from e
        except subprocess.TimeoutExpired as e:
            raise RecognitionError(
                code="OCR_TIMEOUT",
                message="OCR backend timed out",
                detail={"timeout_s": config.timeout_s},
            ) from e

        if proc.returncode != 0:
            stderr = proc.stderr.decode("utf-8", errors="replace") if proc.stderr else ""
            raise RecognitionError(
                code="OCR_BACKEND_ERROR",
                message="OCR backend returned a non-zero exit code",
                detail={
                    "returncode": proc.returncode,
                    "stderr": stderr[-4000:],
                },
            )

        tsv = proc.stdout.decode("utf-8", errors="replace") if proc.stdout else ""
        text, confidence, word_count = parse_tsv(tsv, preserve_spacing=config.preserve_interword_spaces)
        return RecognizedText(text=text, confidence=confidence, meta={**meta, "word_count": word_count})
