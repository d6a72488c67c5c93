from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date
from enum import Enum

from contracts.transactions import SkipReason

from .config import ParserConfig

HEADER_RE = re.compile(r"^(Date|Transaction|Description|Amount|Balance)", re.IGNORECASE)
DIGIT_RE = re.compile(r"\d")
DATE_RE = re.compile(r"(\d{1,2}[/\-.]\d{1,2}[/\-.]\d{2,4})")
DATE_SPLIT_RE = re.compile(r"[/\-.]")
CREDIT_KEYWORDS_RE = re.compile(r"deposit|credit|refund|interest|dividend", re.IGNORECASE)
WHITESPACE_RE = re.compile(r"\s+")

# Numeric tokens not glued to a word, another number, or a path-like separator.
# Enclosing parentheses are part of the token.
NUMBER_RE = re.compile(
    r"(?<![\w.,/])"
    r"(?P<open>\()?"
    r"(?P<dollar>\$)?"
    r"(?P<num>\d{1,3}(?:,\d{3})+(?:\.\d{2})?|\d+\.\d{2}|\d+)"
    r"(?P<close>\))?"
    r"(?![\w,]|\.\d)"
)


@dataclass(frozen=True, slots=True)
class AmountToken:
    text: str  # exact matched span, including "$" and parentheses
    value: float
    start: int
    end: int
    has_cents: bool
    parenthesized: bool


@dataclass(frozen=True, slots=True)
class ParsedLine:
    """
    Everything the line state machine extracted from one accepted line.
    """

    line: str
    date: date
    date_text: str
    amounts: list[AmountToken]
    bare_figures: list[str]  # whole numbers without cents, grouping or "$"
    raw_description: str  # description before placeholder substitution
    description: str
    debit: float
    credit: float
    balance: float
    has_parentheses: bool

    @property
    def transaction_amount(self) -> AmountToken | None:
        return self.amounts[0] if len(self.amounts) >= 2 else None


class LineStep(str, Enum):
    FILTER = "FILTER"
    EXTRACT_DATE = "EXTRACT_DATE"
    EXTRACT_AMOUNTS = "EXTRACT_AMOUNTS"
    DESCRIBE = "DESCRIBE"
    CLASSIFY = "CLASSIFY"
    NORMALIZE_DATE = "NORMALIZE_DATE"
    DONE = "DONE"


@dataclass(slots=True)
class _LineWork:
    line: str
    ordinal: int  # 1-based number the line would get if accepted
    date_text: str = ""
    date_span: tuple[int, int] = (0, 0)
    amounts: list[AmountToken] = field(default_factory=list)
    bare_figures: list[str] = field(default_factory=list)
    raw_description: str = ""
    description: str = ""
    debit: float = 0.0
    credit: float = 0.0
    balance: float = 0.0
    has_parentheses: bool = False
    date: date | None = None


def scan_numbers(line: str, *, exclude: tuple[int, int] | None = None) -> tuple[list[AmountToken], list[str]]:
    """
    Scan `line` left to right for numeric tokens.

    Returns (monetary tokens, bare whole-number figures). A token is monetary
    when it carries cents, comma grouping, or a "$" sign. The `exclude` span
    (the date) is blanked before scanning so offsets stay aligned with `line`.
    """

    scan = line
    if exclude is not None:
        s, e = exclude
        scan = line[:s] + " " * (e - s) + line[e:]

    amounts: list[AmountToken] = []
    bare: list[str] = []
    for m in NUMBER_RE.finditer(scan):
        num = m.group("num")
        has_cents = "." in num
        grouped = "," in num
        dollar = m.group("dollar") is not None
        if not (has_cents or grouped or dollar):
            bare.append(num)
            continue
        amounts.append(
            AmountToken(
                text=m.group(0),
                value=float(num.replace(",", "")),
                start=m.start(),
                end=m.end(),
                has_cents=has_cents,
                parenthesized=m.group("open") is not None and m.group("close") is not None,
            )
        )
    return amounts, bare


def normalize_date(date_text: str, *, pivot: int) -> date | None:
    """
    Interpret a month/day/year date token; two-digit years are expanded around
    `pivot`. Returns None for anything that is not a real calendar date.
    """

    parts = DATE_SPLIT_RE.split(date_text)
    if len(parts) != 3:
        return None
    month_s, day_s, year_s = parts
    if len(year_s) == 3:
        return None
    year = int(year_s)
    if len(year_s) == 2:
        year += 2000 if year < pivot else 1900
    try:
        return date(year, int(month_s), int(day_s))
    except ValueError:
        return None


class LineParser:
    """
    Per-line state machine:

        FILTER -> EXTRACT_DATE -> EXTRACT_AMOUNTS -> DESCRIBE -> CLASSIFY -> NORMALIZE_DATE -> DONE

    Each step either advances to the next step or ends the line with a
    SkipReason. The parser never looks at other lines; cross-line checks
    (balance reconciliation) belong to validation.
    """

    def __init__(self, config: ParserConfig | None = None) -> None:
        self.config = config or ParserConfig()

    def parse(self, line: str, *, ordinal: int = 1) -> ParsedLine | SkipReason:
        work = _LineWork(line=line.strip(), ordinal=ordinal)
        steps = {
            LineStep.FILTER: self._filter,
            LineStep.EXTRACT_DATE: self._extract_date,
            LineStep.EXTRACT_AMOUNTS: self._extract_amounts,
            LineStep.DESCRIBE: self._describe,
            LineStep.CLASSIFY: self._classify,
            LineStep.NORMALIZE_DATE: self._normalize_date,
        }

        step = LineStep.FILTER
        while step != LineStep.DONE:
            outcome = steps[step](work)
            if isinstance(outcome, SkipReason):
                return outcome
            step = outcome

        return ParsedLine(
            line=work.line,
            date=work.date,
            date_text=work.date_text,
            amounts=work.amounts,
            bare_figures=work.bare_figures,
            raw_description=work.raw_description,
            description=work.description,
            debit=work.debit,
            credit=work.credit,
            balance=work.balance,
            has_parentheses=work.has_parentheses,
        )

    def _filter(self, work: _LineWork) -> LineStep | SkipReason:
        if HEADER_RE.match(work.line):
            return SkipReason.HEADER
        if len(work.line) < self.config.min_line_length:
            return SkipReason.TOO_SHORT
        if not DIGIT_RE.search(work.line):
            return SkipReason.NO_DIGIT
        return LineStep.EXTRACT_DATE

    def _extract_date(self, work: _LineWork) -> LineStep | SkipReason:
        m = DATE_RE.search(work.line)
        if m is None:
            return SkipReason.NO_DATE
        work.date_text = m.group(1)
        work.date_span = m.span(1)
        return LineStep.EXTRACT_AMOUNTS

    def _extract_amounts(self, work: _LineWork) -> LineStep | SkipReason:
        work.amounts, work.bare_figures = scan_numbers(work.line, exclude=work.date_span)
        if not work.amounts:
            return SkipReason.NO_AMOUNT
        return LineStep.DESCRIBE

    def _describe(self, work: _LineWork) -> LineStep | SkipReason:
        spans = sorted([work.date_span, *[(a.start, a.end) for a in work.amounts]])
        kept: list[str] = []
        pos = 0
        for s, e in spans:
            kept.append(work.line[pos:s])
            pos = max(pos, e)
        kept.append(work.line[pos:])

        work.raw_description = WHITESPACE_RE.sub(" ", " ".join(kept)).strip()
        if len(work.raw_description) < self.config.min_description_length:
            work.description = f"Transaction {work.ordinal}"
        else:
            work.description = work.raw_description
        return LineStep.CLASSIFY

    def _classify(self, work: _LineWork) -> LineStep | SkipReason:
        work.has_parentheses = "(" in work.line and ")" in work.line
        if len(work.amounts) >= 2:
            amount = work.amounts[0].value
            is_credit = CREDIT_KEYWORDS_RE.search(work.description) is not None
            if is_credit and not work.has_parentheses:
                work.credit = amount
            else:
                work.debit = amount
            work.balance = work.amounts[-1].value
        else:
            work.balance = work.amounts[0].value
        return LineStep.NORMALIZE_DATE

    def _normalize_date(self, work: _LineWork) -> LineStep | SkipReason:
        work.date = normalize_date(work.date_text, pivot=self.config.two_digit_year_pivot)
        if work.date is None:
            return SkipReason.INVALID_DATE
        return LineStep.DONE
