from __future__ import annotations

import unittest
from datetime import date

from contracts.transactions import Transaction
from grouping.by_date import group_transactions_by_date
from grouping.summary import log_summary, summarize_grouped, warning_label


def _tx(day: int, parsing_errors: list[str], ocr_uncertainty: list[str]) -> Transaction:
    return Transaction(
        date=date(2024, 3, day),
        description="GROCERY",
        debit=10.0,
        credit=0.0,
        balance=90.0,
        original_line="",
        source_confidence=50.0,
        parsing_errors=parsing_errors,
        ocr_uncertainty=ocr_uncertainty,
    )


class TestSummary(unittest.TestCase):
    def test_warning_label_is_text_before_first_colon(self) -> None:
        self.assertEqual(warning_label("Large amount: $12500.00 - check for missing decimal"), "Large amount")
        self.assertEqual(
            warning_label("Possible balance error: Expected $1.00, got $2.00"), "Possible balance error"
        )
        self.assertEqual(
            warning_label("Description too short - possible OCR error"),
            "Description too short - possible OCR error",
        )

    def test_counts_and_breakdowns(self) -> None:
        txs = [
            _tx(1, [], []),
            _tx(2, ["Large amount: $12500.00 - check for missing decimal"], ["Low source OCR confidence: 50.0%"]),
            _tx(3, ["Large amount: $20000.00 - check for missing decimal"], []),
            _tx(4, [], ["Low source OCR confidence: 50.0%", "Unusual characters detected - possible OCR error"]),
        ]
        s = summarize_grouped(group_transactions_by_date(txs))

        self.assertEqual(s.total_transactions, 4)
        self.assertEqual(s.total_warnings, 3)
        self.assertEqual(s.total_parsing_errors, 2)
        self.assertEqual(s.total_ocr_uncertainty, 2)
        self.assertAlmostEqual(s.warning_rate, 75.0)
        self.assertEqual(s.parsing_error_breakdown, {"Large amount": 2})
        self.assertEqual(
            s.ocr_uncertainty_breakdown,
            {"Low source OCR confidence": 2, "Unusual characters detected - possible OCR error": 1},
        )
        self.assertEqual(
            s.warning_breakdown,
            {
                "Large amount": 2,
                "Low source OCR confidence": 2,
                "Unusual characters detected - possible OCR error": 1,
            },
        )

    def test_empty_grouping_has_zero_rate(self) -> None:
        s = summarize_grouped([])
        self.assertEqual(s.total_transactions, 0)
        self.assertEqual(s.warning_rate, 0.0)
        self.assertEqual(s.to_dict()["warning_breakdown"], {})

    def test_log_summary_reports_counts(self) -> None:
        s = summarize_grouped(group_transactions_by_date([_tx(1, ["Large amount: $1.00 - x"], [])]))
        with self.assertLogs("grouping.summary", level="INFO") as logs:
            log_summary(s)

        joined = "\n".join(logs.output)
        self.assertIn("transactions parsed: 1", joined)
        self.assertIn("warning rate: 100.0%", joined)


if __name__ == "__main__":
    unittest.main()
