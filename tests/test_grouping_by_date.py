from __future__ import annotations

import unittest
from datetime import date

from contracts.transactions import Transaction
from grouping.by_date import MONTH_NAMES, flatten_grouped, group_transactions_by_date


def _tx(d: date, description: str) -> Transaction:
    return Transaction(
        date=d,
        description=description,
        debit=1.0,
        credit=0.0,
        balance=100.0,
        original_line=f"{d:%m/%d/%Y} {description} 1.00 100.00",
        source_confidence=90.0,
    )


class TestGroupTransactionsByDate(unittest.TestCase):
    def test_years_months_and_days_descending(self) -> None:
        txs = [
            _tx(date(2023, 12, 30), "a"),
            _tx(date(2024, 1, 5), "b"),
            _tx(date(2024, 3, 1), "c"),
            _tx(date(2024, 1, 20), "d"),
            _tx(date(2023, 2, 14), "e"),
        ]
        grouped = group_transactions_by_date(txs)

        self.assertEqual([y.year for y in grouped], [2024, 2023])
        self.assertEqual([m.month for m in grouped[0].months], ["March", "January"])
        self.assertEqual([m.month for m in grouped[1].months], ["December", "February"])
        self.assertEqual([t.description for t in grouped[0].months[1].transactions], ["d", "b"])
        self.assertEqual([t.description for t in flatten_grouped(grouped)], ["c", "d", "b", "a", "e"])

    def test_same_day_keeps_input_order(self) -> None:
        d = date(2024, 5, 2)
        txs = [_tx(d, "first"), _tx(date(2024, 5, 1), "earlier"), _tx(d, "second"), _tx(d, "third")]
        grouped = group_transactions_by_date(txs)

        self.assertEqual(
            [t.description for t in grouped[0].months[0].transactions],
            ["first", "second", "third", "earlier"],
        )

    def test_every_transaction_appears_exactly_once(self) -> None:
        txs = [_tx(date(2020 + i % 3, 1 + i % 12, 1 + i % 28), f"t{i}") for i in range(40)]
        flat = flatten_grouped(group_transactions_by_date(txs))

        self.assertEqual(len(flat), len(txs))
        self.assertEqual(sorted(t.description for t in flat), sorted(t.description for t in txs))

    def test_month_names_are_english_and_complete(self) -> None:
        self.assertEqual(len(MONTH_NAMES), 12)
        txs = [_tx(date(2024, m, 1), str(m)) for m in range(1, 13)]
        grouped = group_transactions_by_date(txs)
        self.assertEqual([m.month for m in grouped[0].months], list(reversed(MONTH_NAMES)))

    def test_empty_input(self) -> None:
        self.assertEqual(group_transactions_by_date([]), [])

    def test_grouping_is_deterministic(self) -> None:
        txs = [_tx(date(2024, 1 + i % 4, 1 + i % 3), f"t{i}") for i in range(12)]
        a = [y.to_dict() for y in group_transactions_by_date(txs)]
        b = [y.to_dict() for y in group_transactions_by_date(list(txs))]
        self.assertEqual(a, b)


if __name__ == "__main__":
    unittest.main()
