"""Price formatting for display.

Prices are whole rupees. Grouping follows the active numeric locale when
it defines one; otherwise digits are grouped in threes by hand.
"""

from __future__ import annotations

import locale
import re

_GROUP_RE = re.compile(r"\B(?=(\d{3})+(?!\d))")

DEFAULT_MARKER = "Rs."


def group_digits(value: int) -> str:
    """Insert a comma every three digits, e.g. ``185000`` -> ``185,000``."""
    return _GROUP_RE.sub(",", str(value))


def _locale_grouped(value: int) -> str | None:
    conv = locale.localeconv()
    if not conv.get("grouping") or not conv.get("thousands_sep"):
        return None
    return locale.format_string("%d", value, grouping=True)


def format_price(price: int, marker: str = DEFAULT_MARKER) -> str:
    """Render *price* as ``"Rs. 14,999"``."""
    value = int(price)
    try:
        grouped = _locale_grouped(value)
    except (ValueError, locale.Error):
        grouped = None
    if grouped is None:
        grouped = group_digits(value)
    return f"{marker} {grouped}"
