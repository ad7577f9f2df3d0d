# =============================================================================
# lib/formatters.py - Display Formatters
# =============================================================================
# Pure helpers for rendering listing data: prices, dates, distances, phone
# numbers and VINs, plus small string utilities.
#
# Usage:
#   from lib.formatters import format_currency, format_distance
#   format_currency(25999)          # "$25,999"
#   format_distance(5000)           # "5,000 mi"
# =============================================================================

import random
import re
import string
from datetime import date, datetime, timezone
from decimal import ROUND_HALF_UP, Decimal

KM_PER_MILE = 1.60934

RANDOM_ALPHABET = string.ascii_letters + string.digits


def _round_whole(value: float) -> int:
    """Round half away from zero, matching how prices are displayed."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_currency(amount: float, symbol: str = "$") -> str:
    """
    Format an amount as whole currency units with thousands separators.

    Args:
        amount: Amount in currency units (not cents)
        symbol: Currency symbol to prefix

    Returns:
        e.g. "$25,999", "-$1,200"
    """
    whole = _round_whole(amount)
    sign = "-" if whole < 0 else ""
    return f"{sign}{symbol}{abs(whole):,}"


def format_date(value: str | int | float | date | datetime) -> str:
    """
    Format a date as "January 5, 2024".

    Accepts ISO-8601 strings (a trailing "Z" is allowed), epoch
    milliseconds, or date/datetime objects.
    """
    if isinstance(value, str):
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    elif isinstance(value, (int, float)):
        parsed = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    else:
        parsed = value
    return f"{parsed:%B} {parsed.day}, {parsed.year}"


def _format_number(value: float, max_decimals: int = 3) -> str:
    if float(value).is_integer():
        return f"{int(value):,}"
    text = f"{value:,.{max_decimals}f}".rstrip("0").rstrip(".")
    return text


def format_distance(distance: float, use_metric: bool = False) -> str:
    """
    Format a mileage value.

    Args:
        distance: Distance in miles
        use_metric: Convert to whole kilometres

    Returns:
        "5,000 mi" or "8,047 km"
    """
    if use_metric:
        return f"{_round_whole(distance * KM_PER_MILE):,} km"
    return f"{_format_number(distance)} mi"


def format_phone_number(phone: str) -> str:
    """Format a 10-digit US number as (XXX) XXX-XXXX; anything else is returned unchanged."""
    cleaned = re.sub(r"\D", "", phone)
    if len(cleaned) == 10:
        return f"({cleaned[:3]}) {cleaned[3:6]}-{cleaned[6:]}"
    return phone


def format_vin(vin: str) -> str:
    """Group a 17-character VIN as "XXX XX XXXXXXXXXXXX"; other input is only upper-cased."""
    cleaned = re.sub(r"\s", "", vin).upper()
    if len(cleaned) == 17:
        return f"{cleaned[:3]} {cleaned[3:5]} {cleaned[5:]}"
    return vin.upper()


def truncate(text: str | None, length: int = 100) -> str:
    if not text:
        return ""
    if len(text) <= length:
        return text
    return text[:length] + "..."


def random_string(length: int = 8, alphabet: str = RANDOM_ALPHABET) -> str:
    """Random identifier suffix; not suitable for secrets."""
    return "".join(random.choices(alphabet, k=length))
