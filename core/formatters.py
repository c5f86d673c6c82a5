"""Display formatting and parsing for currency, weights, percentages and dates.

Currency and percentages follow pt-BR conventions: ``.`` groups thousands
and ``,`` separates decimals (``R$ 1.999,00``).
"""
from __future__ import annotations

import math
import re
from datetime import date, datetime
from typing import Any, Optional

from core.constants import (
    CRITICAL_STOCK_THRESHOLD,
    CUSTOMER_STATUSES,
    DATE_FORMATS,
    DISPLAY_DATE_FORMAT,
    LOW_STOCK_THRESHOLD_DEFAULT,
    SALE_STATUSES,
)
from core.errors import ParseError

CURRENCY_SYMBOL = "R$"

_NON_DIGITS = re.compile(r"\D")
_GROUPED_THOUSANDS = re.compile(r"^-?\d{1,3}(\.\d{3})+$")
_ISO_TIMESTAMP = re.compile(r"^(\d{4}-\d{2}-\d{2})[T ]")
_DAY_FIRST = re.compile(r"^\s*(\d{1,2})[/-](\d{1,2})[/-]\d{4}\s*$")


def _swap_separators(text: str) -> str:
    # 1,234.56 -> 1.234,56
    return text.replace(",", "\0").replace(".", ",").replace("\0", ".")


# ---------- currency ----------

def format_currency(value: float) -> str:
    """Render a number as BRL currency."""
    sign = "-" if value < 0 else ""
    return f"{sign}{CURRENCY_SYMBOL} {_swap_separators(f'{abs(value):,.2f}')}"


def format_currency_input(raw: str) -> str:
    """Mask typed input as currency: the digits are read as cents."""
    digits = _NON_DIGITS.sub("", raw or "")
    if not digits:
        return ""
    return format_currency(int(digits) / 100)


def parse_currency(text: Any) -> float:
    """Parse a currency or plain decimal string into a float.

    ``"R$ 1.999,00"`` and ``"1999.00"`` both give ``1999.0``. A dot is a
    thousands separator when the text has a comma, carries ``R$`` or is
    grouped in threes (``"R$ 1.000"`` and ``"1.000"`` give ``1000.0``).
    """
    if isinstance(text, (int, float)):
        value = float(text)
    else:
        raw = str(text or "")
        cleaned = raw.replace(CURRENCY_SYMBOL, "").replace(" ", "").replace("\xa0", "")
        if "," in cleaned or CURRENCY_SYMBOL in raw or _GROUPED_THOUSANDS.match(cleaned):
            cleaned = cleaned.replace(".", "").replace(",", ".")
        try:
            value = float(cleaned)
        except ValueError:
            raise ParseError(f"Invalid amount: {text!r}") from None
    if not math.isfinite(value):
        raise ParseError(f"Invalid amount: {text!r}")
    return value


def format_amount(value: Any, missing: str = "-") -> str:
    """Like ``format_currency`` for stored values that may be NULL or NaN."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return missing
    try:
        number = float(value)
    except (TypeError, ValueError):
        return missing
    return missing if math.isnan(number) else format_currency(number)


# ---------- weights and dimensions ----------

def format_weight(raw: str) -> str:
    """Keep digits and one decimal separator, normalized to two decimals."""
    cleaned = re.sub(r"[^\d.,]", "", raw or "").replace(",", ".", 1)
    match = re.match(r"\d*\.?\d*", cleaned)
    try:
        return f"{float(match.group(0)):.2f}"
    except ValueError:
        return raw


def parse_decimal(text: Any) -> float:
    """Parse ``"0,2"`` or ``"0.2"``; raises ParseError otherwise."""
    if isinstance(text, (int, float)):
        value = float(text)
    else:
        try:
            value = float(str(text or "").strip().replace(",", ".", 1))
        except ValueError:
            raise ParseError(f"Invalid number: {text!r}") from None
    if not math.isfinite(value):
        raise ParseError(f"Invalid number: {text!r}")
    return value


def parse_int(text: Any) -> int:
    """Parse an integer literal such as ``"10"`` or ``"-1"``."""
    if isinstance(text, int) and not isinstance(text, bool):
        return text
    cleaned = str(text if text is not None else "").strip()
    if not re.fullmatch(r"[+-]?\d+", cleaned):
        raise ParseError(f"Invalid integer: {text!r}")
    return int(cleaned)


def format_percent(fraction: float, decimals: int = 0) -> str:
    """``0.45 -> "45%"``; ``0.125, 1 -> "12,5%"``."""
    return f"{fraction * 100:.{decimals}f}".replace(".", ",") + "%"


# ---------- dates ----------

def parse_sale_date(value: Any) -> Optional[date]:
    """Parse a sale date, trying each accepted pattern in order.

    Returns None when nothing matches. Day-first strings such as
    ``01/02/2024`` are read as 1 February; see ``is_ambiguous_date``.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    iso = _ISO_TIMESTAMP.match(text)
    if iso:
        text = iso.group(1)
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def is_ambiguous_date(value: Any) -> bool:
    """True when a day-first string could also be read month-first."""
    match = _DAY_FIRST.match(str(value)) if isinstance(value, str) else None
    if not match:
        return False
    day, month = int(match.group(1)), int(match.group(2))
    return day != month and day <= 12 and month <= 12


def to_iso_date(text: str) -> str:
    """Convert an accepted date string to ``yyyy-MM-dd``; unchanged if unparsable."""
    parsed = parse_sale_date(text)
    return parsed.isoformat() if parsed else text


def format_date(value: Any) -> str:
    """Render any accepted date as ``dd/MM/yyyy``."""
    parsed = parse_sale_date(value)
    if parsed is None:
        return "" if value is None else str(value)
    return parsed.strftime(DISPLAY_DATE_FORMAT)


# ---------- status labels ----------

def sale_status_label(status: str) -> str:
    entry = SALE_STATUSES.get(status)
    return entry[0] if entry else status


def sale_status_color(status: str) -> str:
    entry = SALE_STATUSES.get(status)
    return entry[1] if entry else "#9CA3AF"


def customer_status_label(status: str) -> str:
    entry = CUSTOMER_STATUSES.get(status)
    return entry[0] if entry else status


def stock_status(stock: int) -> str:
    return "Em estoque" if stock > LOW_STOCK_THRESHOLD_DEFAULT else "Estoque baixo"


def product_option_label(name: str, stock: Any) -> str:
    """``"Mouse (Estoque: 3)"`` for the sale product picker."""
    return f"{name} (Estoque: {stock})"


def low_stock_level(stock: int) -> str:
    return "Crítico" if stock <= CRITICAL_STOCK_THRESHOLD else "Baixo"
