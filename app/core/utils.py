import re
import unicodedata
from datetime import date
from decimal import Decimal, InvalidOperation

from app.core.errors import ValidationError

EPOCH = date(1970, 1, 1)

_AMOUNT_NOISE = re.compile(r"[,\s₩원]")


def parse_amount(value) -> int:
    """Read an integer currency amount from a sheet cell.

    Anything unparseable becomes 0 so sums never turn into NaN.
    """
    if value is None:
        return 0
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    cleaned = _AMOUNT_NOISE.sub("", str(value))
    if not cleaned:
        return 0
    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        return 0
    if not amount.is_finite():
        return 0
    return int(amount)


def parse_cell_date(value) -> date | None:
    """Parse a stored date cell; None when it is blank or malformed."""
    if not value:
        return None
    text = str(value).strip()[:10]
    try:
        return date.fromisoformat(text)
    except ValueError:
        return None


def parse_filter_date(value: str | None, field: str, default: date) -> date:
    if value is None or not str(value).strip():
        return default
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        raise ValidationError(f"{field} must be an ISO date (YYYY-MM-DD)")


def parse_bool_cell(value) -> bool:
    return str(value or "").strip().upper() == "TRUE"


def bool_cell(value: bool) -> str:
    return "TRUE" if value else "FALSE"


# Script order of ko collation: symbols, digits, Hangul, Hanja, then the
# other alphabets (Latin, ...).
_SYMBOL, _DIGIT, _HANGUL, _HANJA, _OTHER = range(5)

_HANGUL_RANGES = ((0xAC00, 0xD7A3), (0x1100, 0x11FF), (0x3130, 0x318F), (0xA960, 0xA97F), (0xD7B0, 0xD7FF))
_HANJA_RANGES = ((0x4E00, 0x9FFF), (0x3400, 0x4DBF), (0xF900, 0xFAFF), (0x20000, 0x2FFFF))


def _in_ranges(cp: int, ranges) -> bool:
    return any(lo <= cp <= hi for lo, hi in ranges)


def _script_group(ch: str) -> int:
    cp = ord(ch)
    if _in_ranges(cp, _HANGUL_RANGES):
        return _HANGUL
    if _in_ranges(cp, _HANJA_RANGES):
        return _HANJA
    category = unicodedata.category(ch)
    if category.startswith("N"):
        return _DIGIT
    if category.startswith("L"):
        return _OTHER
    return _SYMBOL


def collation_key(text: str | None) -> tuple:
    """Sort key following ko collation for names, memos and menus.

    Hangul sorts before Latin and after digits; inside a script, precomposed
    syllables are already in dictionary order and Latin compares caselessly.
    The original text breaks ties so the order is total.
    """
    normalized = unicodedata.normalize("NFC", text or "")
    primary = tuple((_script_group(ch), ord(ch)) for ch in normalized.casefold())
    return primary, normalized


def cell(row: list, index: int) -> str:
    """Cell at `index`, or "" when the sheet trimmed a short row."""
    if index < len(row) and row[index] is not None:
        return str(row[index]).strip()
    return ""
