from __future__ import annotations

import unittest
from datetime import date

from contracts.transactions import Transaction
from parsing.config import ParserConfig
from parsing.transactions import parse_transactions
from parsing.validation import validate_transactions


def _tx(
    *,
    debit: float = 0.0,
    credit: float = 0.0,
    balance: float = 1000.0,
    confidence: float = 90.0,
    match_confidence: float | None = None,
    parsing_errors: list[str] | None = None,
    ocr_uncertainty: list[str] | None = None,
) -> Transaction:
    return Transaction(
        date=date(2024, 3, 15),
        description="WIRE TRANSFER",
        debit=debit,
        credit=credit,
        balance=balance,
        original_line="03/15/2024 WIRE TRANSFER",
        source_confidence=confidence,
        parsing_errors=parsing_errors or [],
        ocr_uncertainty=ocr_uncertainty or [],
        match_confidence=match_confidence,
    )


class TestTransactionValidator(unittest.TestCase):
    def test_large_amount_over_posthoc_threshold(self) -> None:
        out = validate_transactions([_tx(credit=60000.5), _tx(debit=50000.0), _tx(debit=12000.25)])

        self.assertEqual(out[0].parsing_errors, ["Large amount detected - verify accuracy"])
        # Exactly at the threshold is not large, though it is a whole dollar amount.
        self.assertEqual(out[1].parsing_errors, ["Whole dollar amount - verify no missing decimals"])
        # The inline threshold is lower; the post-hoc pass does not apply it.
        self.assertEqual(out[2].parsing_errors, [])

    def test_whole_dollar_amounts_flagged(self) -> None:
        flagged, small, with_cents, credit = validate_transactions(
            [_tx(debit=1250.0), _tx(debit=12.0), _tx(debit=150.50), _tx(credit=100.0)]
        )

        self.assertEqual(flagged.parsing_errors, ["Whole dollar amount - verify no missing decimals"])
        self.assertEqual(small.parsing_errors, [])
        self.assertEqual(with_cents.parsing_errors, [])
        self.assertEqual(credit.parsing_errors, ["Whole dollar amount - verify no missing decimals"])

        again = validate_transactions([flagged, small, with_cents, credit])
        self.assertEqual(again, [flagged, small, with_cents, credit])

    def test_whole_dollar_and_large_amount_both_reported(self) -> None:
        t = validate_transactions([_tx(debit=75000.0)])[0]
        self.assertEqual(
            t.parsing_errors,
            ["Large amount detected - verify accuracy", "Whole dollar amount - verify no missing decimals"],
        )

    def test_low_match_confidence_only_when_known(self) -> None:
        low, ok, unknown = validate_transactions(
            [_tx(debit=5.0, match_confidence=0.2), _tx(debit=5.0, match_confidence=0.3), _tx(debit=5.0)]
        )
        self.assertEqual(low.ocr_uncertainty, ["Low confidence in transaction type matching"])
        self.assertEqual(ok.ocr_uncertainty, [])
        self.assertEqual(unknown.ocr_uncertainty, [])

    def test_low_recognition_confidence(self) -> None:
        out = validate_transactions([_tx(debit=5.0, confidence=59.5), _tx(debit=5.0, confidence=60.0)])
        self.assertEqual(out[0].ocr_uncertainty, ["Low OCR confidence: 59.5%"])
        self.assertEqual(out[1].ocr_uncertainty, [])

    def test_replaces_existing_warnings_and_is_idempotent(self) -> None:
        original = _tx(
            debit=5.0,
            balance=123.0,
            parsing_errors=["Possible balance error: Expected $1.00, got $123.00"],
            ocr_uncertainty=["Description too short - possible OCR error"],
        )
        once = validate_transactions([original])
        twice = validate_transactions(once)

        self.assertEqual(once[0].warnings, [])
        self.assertEqual(once, twice)
        # Input records are untouched.
        self.assertEqual(len(original.parsing_errors), 1)
        self.assertEqual(len(original.ocr_uncertainty), 1)

    def test_does_not_reconcile_balances(self) -> None:
        parsed = parse_transactions(
            "03/15/2024 DEPOSIT PAYROLL 1,200.45 5,432.55\n03/16/2024 CHECK (150.25) 5,200.00", 92.0
        )
        self.assertTrue(parsed[1].has_parsing_errors)

        revalidated = validate_transactions(parsed)
        self.assertEqual([t.warnings for t in revalidated], [[], []])
        self.assertEqual([t.balance for t in revalidated], [t.balance for t in parsed])

    def test_custom_thresholds(self) -> None:
        cfg = ParserConfig(posthoc_large_amount_threshold=100.0, match_confidence_floor=0.9)
        t = validate_transactions([_tx(debit=150.5, match_confidence=0.8)], cfg)[0]
        self.assertEqual(
            t.warnings,
            ["Large amount detected - verify accuracy", "Low confidence in transaction type matching"],
        )

    def test_round_trip_through_dict(self) -> None:
        t = validate_transactions([_tx(debit=60000.0, confidence=40.0, match_confidence=0.1)])[0]
        self.assertEqual(Transaction.from_dict(t.to_dict()), t)


if __name__ == "__main__":
    unittest.main()
