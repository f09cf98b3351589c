# daraz_orders/utils/formatting.py

import re
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Tuple, Union

Number = Union[int, float, str]

# plain ASCII decimal or scientific notation, no digit separators
NUMBER_RE = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?", re.ASCII)

# beyond this many integer digits amounts are shown and exported in E notation
MAX_PLAIN_DIGITS = 15


def to_decimal(value: Any) -> Decimal:
    """
    Coerce a numeric-looking form value to Decimal.

    Blank, missing, non-numeric, NaN and infinite values all become 0.
    Example: " 12.5 " -> Decimal("12.5"), "abc" -> Decimal("0"), "1_000" -> Decimal("0")
    """
    if value is None or isinstance(value, bool):
        return Decimal(0)

    if isinstance(value, Decimal):
        number = value
    else:
        text = str(value).strip()
        if not NUMBER_RE.fullmatch(text):
            return Decimal(0)
        try:
            number = Decimal(text)
        except InvalidOperation:
            return Decimal(0)

    if not number.is_finite():
        return Decimal(0)
    return number


def parse_amount(value: Any) -> Optional[Decimal]:
    """Like to_decimal, but keeps None for empty stored values."""
    if value is None or value == "":
        return None
    return to_decimal(value)


def _is_plain(value: Decimal) -> bool:
    return value.is_finite() and value.adjusted() < MAX_PLAIN_DIGITS


def to_record_amount(value: Optional[Decimal]) -> Optional[str]:
    """
    Amount as sent to a Postgres numeric column. Text keeps every digit.
    Example: Decimal("200.125") -> "200.125"
    """
    if value is None:
        return None
    return str(value)


def to_spreadsheet_number(value: Optional[Decimal]) -> Number:
    """
    Spreadsheet cell value: int when whole, float otherwise, "" when empty.
    Amounts too large for a spreadsheet number are written as text.
    """
    if value is None:
        return ""
    if not _is_plain(value):
        return str(value)
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def format_amount(value: Optional[Decimal]) -> str:
    """
    Format an amount with ',' as thousands separator, dropping trailing zeros.
    Example: Decimal("1234567.50") -> "1,234,567.5", None -> ""
    """
    if value is None:
        return ""
    if not _is_plain(value):
        return str(value)
    if value == value.to_integral_value():
        return f"{value:,.0f}"
    return f"{value:,.2f}".rstrip("0").rstrip(".")


DATE_TIME_FORMAT = "%Y-%m-%dT%H:%M"


def join_date_time(day: Optional[date], at: Optional[time]) -> str:
    # same shape as an HTML datetime-local value
    if day is None:
        return ""
    return datetime.combine(day, at or time(0, 0)).strftime(DATE_TIME_FORMAT)


def split_date_time(value: str) -> Tuple[Optional[date], Optional[time]]:
    if not value:
        return None, None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None, None
    return parsed.date(), parsed.time().replace(second=0, microsecond=0)
