from __future__ import annotations

import logging
import re

from contracts.pipeline import RecognitionOutput, RefinementOutput, StageError, StageResult, TermReplacement

from .config import RefinementConfig

logger = logging.getLogger(__name__)

_TOKEN_RE = re.compile(r"\S+")
_HAS_LETTER_RE = re.compile(r"[A-Za-z]")


def _require_fuzz():
    try:
        from thefuzz import fuzz, process

        return fuzz, process
    except ImportError as e:
        raise RuntimeError("Missing dependency: thefuzz is required for Stage 3 refinement.") from e


class FuzzyRefiner:
    """
    Stage 3: correct recognized tokens against the banking vocabulary.

    Replacements are applied to the matched token's own offset span, so other
    occurrences of the same characters elsewhere in the text are untouched.
    """

    def __init__(self, config: RefinementConfig | None = None) -> None:
        self.config = config or RefinementConfig()

    def best_match(self, token: str) -> tuple[str, float] | None:
        """
        Closest vocabulary term for `token` as (term, distance), or None when no
        term is within the search threshold.
        """

        fuzz, process = _require_fuzz()
        cutoff = int(round((1.0 - self.config.search_threshold) * 100))
        ranked = process.extractBests(
            token,
            self.config.vocabulary,
            scorer=fuzz.ratio,
            score_cutoff=cutoff,
            limit=3,
        )
        if not ranked:
            return None
        term, score = ranked[0][0], ranked[0][1]
        return term, 1.0 - float(score) / 100.0

    def refine_line(self, line: str, line_index: int) -> tuple[str, list[TermReplacement]]:
        cfg = self.config
        replacements: list[TermReplacement] = []
        for m in _TOKEN_RE.finditer(line):
            token = m.group(0)
            if len(token) < cfg.min_token_length or not _HAS_LETTER_RE.search(token):
                continue
            match = self.best_match(token)
            if match is None:
                continue
            term, score = match
            if score < cfg.acceptance_threshold:
                replacements.append(
                    TermReplacement(
                        line_index=line_index,
                        start=m.start(),
                        end=m.end(),
                        original=token,
                        replacement=term,
                        score=score,
                    )
                )

        if not replacements:
            return line, []

        # Splice right-to-left so earlier offsets stay valid.
        out = line
        for r in reversed(replacements):
            out = out[: r.start] + r.replacement + out[r.end :]
        return out, replacements

    def run(self, data: RecognitionOutput) -> StageResult[RefinementOutput]:
        logger.info("Stage 3: refining text against %d vocabulary terms", len(self.config.vocabulary))
        text = data.text or ""
        try:
            _require_fuzz()
        except RuntimeError as e:
            logger.warning("Stage 3 failed: %s", e)
            return self._fallback(data, StageError(code="REFINE_DEPENDENCY_MISSING", message=str(e)))

        try:
            refined: list[str] = []
            accepted: list[TermReplacement] = []
            for i, line in enumerate(text.split("\n")):
                new_line, reps = self.refine_line(line, i)
                refined.append(new_line)
                accepted.extend(reps)
            enhanced = "\n".join(refined)
        except Exception as e:
            logger.warning("Stage 3 failed: %r", e)
            return self._fallback(
                data,
                StageError(code="REFINE_FAILED", message=str(e) or type(e).__name__, detail={"error": repr(e)}),
            )

        if accepted:
            confidence = 1.0 - sum(r.score for r in accepted) / len(accepted)
        else:
            confidence = self.config.neutral_confidence

        logger.info(
            "Stage 3 complete: %d replacements, enhancement confidence %.3f (recognition confidence %.1f%%)",
            len(accepted),
            confidence,
            data.confidence,
        )
        return StageResult(
            success=True,
            data=RefinementOutput(
                original_text=text,
                enhanced_text=enhanced,
                confidence=confidence,
                replacements=accepted,
            ),
            message="Stage 3 complete: text enhanced using fuzzy vocabulary matching",
            metadata={
                "original_length": len(text),
                "enhanced_length": len(enhanced),
                "ocr_confidence": data.confidence,
                "enhancement_confidence": confidence,
                "replacement_count": len(accepted),
            },
        )

    def _fallback(self, data: RecognitionOutput, error: StageError) -> StageResult[RefinementOutput]:
        text = data.text or ""
        return StageResult(
            success=False,
            data=RefinementOutput(
                original_text=text,
                enhanced_text=text,
                confidence=float(data.confidence or 0.0),
            ),
            message=f"Stage 3 failed: {error.message}",
            error=error,
        )
