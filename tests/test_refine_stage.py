from __future__ import annotations

import unittest
from unittest.mock import patch

from contracts.pipeline import RecognitionOutput
from ocr.config import RefinementConfig
from ocr.refine import FuzzyRefiner


class TestFuzzyRefiner(unittest.TestCase):
    def test_corrects_misrecognized_banking_term(self) -> None:
        r = FuzzyRefiner().run(RecognitionOutput(text="03/15/2024 DEPOSLT PAYROLL 1,200.00 5,432.10", confidence=88.0))

        self.assertTrue(r.success)
        self.assertEqual(r.data.enhanced_text, "03/15/2024 DEPOSIT PAYROLL 1,200.00 5,432.10")
        self.assertEqual(r.data.original_text, "03/15/2024 DEPOSLT PAYROLL 1,200.00 5,432.10")
        self.assertEqual([x.replacement for x in r.data.replacements], ["DEPOSIT"])
        rep = r.data.replacements[0]
        self.assertEqual((rep.line_index, rep.start, rep.end, rep.original), (0, 11, 18, "DEPOSLT"))

    def test_replacement_is_position_aware(self) -> None:
        # The long first token contains the second token as a substring but is
        # itself too far from any term to be replaced.
        text = "ZZZZZZZZDEPOSITT DEPOSITT"
        r = FuzzyRefiner().run(RecognitionOutput(text=text, confidence=90.0))

        self.assertTrue(r.success)
        self.assertEqual(r.data.enhanced_text, "ZZZZZZZZDEPOSITT DEPOSIT")

    def test_lines_are_refined_independently(self) -> None:
        text = "first WITHDRAWL\n\nCHECKK 12.00"
        r = FuzzyRefiner().run(RecognitionOutput(text=text, confidence=90.0))

        self.assertEqual(r.data.enhanced_text.split("\n"), ["first WITHDRAWAL", "", "CHECK 12.00"])
        self.assertEqual(sorted({x.line_index for x in r.data.replacements}), [0, 2])

    def test_short_and_numeric_tokens_are_left_alone(self) -> None:
        text = "AT 12 1,200.00 (150.00)"
        r = FuzzyRefiner().run(RecognitionOutput(text=text, confidence=90.0))

        self.assertEqual(r.data.enhanced_text, text)
        self.assertEqual(r.data.replacements, [])

    def test_enhancement_confidence(self) -> None:
        exact = FuzzyRefiner().run(RecognitionOutput(text="CHECK DEPOSIT", confidence=90.0))
        self.assertAlmostEqual(exact.data.confidence, 1.0)

        none = FuzzyRefiner().run(RecognitionOutput(text="0001 0002", confidence=90.0))
        self.assertAlmostEqual(none.data.confidence, 0.5)

        one = FuzzyRefiner().run(RecognitionOutput(text="DEPOSITT", confidence=90.0))
        self.assertEqual(len(one.data.replacements), 1)
        self.assertAlmostEqual(one.data.confidence, 1.0 - one.data.replacements[0].score)
        self.assertGreater(one.data.confidence, 0.7)

    def test_empty_text_is_a_successful_noop(self) -> None:
        r = FuzzyRefiner().run(RecognitionOutput(text="", confidence=0.0))
        self.assertTrue(r.success)
        self.assertEqual(r.data.enhanced_text, "")

    def test_missing_dependency_falls_back_to_unrefined_text(self) -> None:
        with patch("ocr.refine._require_fuzz", side_effect=RuntimeError("Missing dependency: thefuzz")):
            r = FuzzyRefiner().run(RecognitionOutput(text="DEPOSLT", confidence=70.0))

        self.assertFalse(r.success)
        self.assertEqual(r.data.enhanced_text, "DEPOSLT")
        self.assertEqual(r.error.code, "REFINE_DEPENDENCY_MISSING")

    def test_matching_failure_falls_back_to_unrefined_text(self) -> None:
        refiner = FuzzyRefiner()
        with patch.object(refiner, "best_match", side_effect=ValueError("bad scorer")):
            r = refiner.run(RecognitionOutput(text="DEPOSLT", confidence=70.0))

        self.assertFalse(r.success)
        self.assertEqual(r.data.enhanced_text, "DEPOSLT")
        self.assertEqual(r.error.code, "REFINE_FAILED")

    def test_custom_vocabulary(self) -> None:
        refiner = FuzzyRefiner(RefinementConfig(vocabulary=["ZELLE"]))
        r = refiner.run(RecognitionOutput(text="ZELLF DEPOSLT", confidence=90.0))
        self.assertEqual(r.data.enhanced_text, "ZELLE DEPOSLT")

    def test_invalid_thresholds_rejected(self) -> None:
        with self.assertRaises(ValueError):
            RefinementConfig(search_threshold=0.2, acceptance_threshold=0.3)


if __name__ == "__main__":
    unittest.main()
