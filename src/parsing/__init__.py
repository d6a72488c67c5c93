"""
Statement text -> transactions.

Heuristic line parsing (filter -> date -> amounts -> description -> classify)
with inline validation that splits warnings into parsing errors and OCR
uncertainty, plus a standalone post-hoc validator.
"""

from .config import ParserConfig
from .line_parser import LineParser, ParsedLine
from .transactions import parse_statement_text, parse_transactions
from .validation import validate_parsed, validate_transactions

__all__ = [
    "LineParser",
    "ParsedLine",
    "ParserConfig",
    "parse_statement_text",
    "parse_transactions",
    "validate_parsed",
    "validate_transactions",
]
