from __future__ import annotations

from collections import defaultdict
from typing import Iterable

from contracts.transactions import GroupedResult, MonthGroup, Transaction, YearGroup

# Fixed English names; grouping output must not depend on the process locale.
MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


def group_transactions_by_date(transactions: Iterable[Transaction]) -> GroupedResult:
    """
    Arrange transactions into year -> month buckets for presentation.

    Ordering: years descending, months December -> January, transactions
    newest first (equal dates keep their input order). Records without a date
    are dropped.
    """

    buckets: dict[int, dict[int, list[Transaction]]] = defaultdict(lambda: defaultdict(list))
    for t in transactions:
        if getattr(t, "date", None) is None:
            continue
        buckets[t.date.year][t.date.month].append(t)

    result: GroupedResult = []
    for year in sorted(buckets, reverse=True):
        months = [
            MonthGroup(
                month=MONTH_NAMES[month - 1],
                transactions=sorted(buckets[year][month], key=lambda t: t.date, reverse=True),
            )
            for month in sorted(buckets[year], reverse=True)
        ]
        result.append(YearGroup(year=year, months=months))
    return result


def flatten_grouped(grouped: GroupedResult) -> list[Transaction]:
    """Transactions in the order the grouping emits them."""

    return [t for y in grouped for m in y.months for t in m.transactions]
