"""
Presentation-side arrangement of parsed transactions.

- year -> month grouping with deterministic ordering
- warning summary statistics (diagnostic only; never changes the data)
"""

from .by_date import MONTH_NAMES, flatten_grouped, group_transactions_by_date
from .summary import log_summary, summarize_grouped, warning_label

__all__ = [
    "MONTH_NAMES",
    "flatten_grouped",
    "group_transactions_by_date",
    "log_summary",
    "summarize_grouped",
    "warning_label",
]
