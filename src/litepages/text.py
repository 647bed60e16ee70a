"""Text clean-up for partner-supplied descriptions and names."""

from __future__ import annotations

import json
import re
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "PHP": "₱",
    "THB": "฿",
    "JPY": "¥",
    "AUD": "A$",
    "CAD": "C$",
    "INR": "₹",
}

_EMOJI = re.compile(
    "[\U0001F300-\U0001F9FF\u2600-\u26FF\u2700-\u27BF\uFE00-\uFE0F\U0001F000-\U0001F02F]"
)

# (pattern, replacement) applied in order
_CLEANUP_RULES = [
    (re.compile(r"\*\*"), ""),
    (re.compile(r"^.*(airbnb|booking|vrbo)\.com.*$", re.IGNORECASE | re.MULTILINE), ""),
    (re.compile(r"^\s*\(Copy/Paste\)\s*$", re.IGNORECASE | re.MULTILINE), ""),
    (re.compile(r"\bSALE\b!?", re.IGNORECASE), ""),
    (re.compile(r"Prices just went down[^!]*!?", re.IGNORECASE), ""),
    (re.compile(r"Book (now|today)!?", re.IGNORECASE), ""),
    (re.compile(r"^[\s•\-]*$", re.MULTILINE), ""),
    (re.compile(r"^\s*-\s*", re.MULTILINE), "• "),
    (re.compile(r"\n{3,}"), "\n\n"),
    (re.compile(r"[ \t]+"), " "),
    (re.compile(r"\n "), "\n"),
]


def localized_text(value: Any) -> str:
    """Pick a display string from plain text or a JSON object of translations."""
    if value is None:
        return ""
    if isinstance(value, str) and value.strip().startswith("{"):
        try:
            value = json.loads(value)
        except ValueError:
            return value
    if isinstance(value, dict):
        for key in ("en", "EN", "default"):
            if value.get(key):
                return str(value[key])
        return str(next(iter(value.values()), "") or "")
    return str(value)


def clean_description(value: Any) -> str:
    """Normalize a listing description imported from a channel manager."""
    text = localized_text(value)
    if not text:
        return ""
    text = text.replace("\\n", "\n").replace("\\r", "").replace("\\t", "  ")
    text = _EMOJI.sub("", text)
    for pattern, replacement in _CLEANUP_RULES:
        text = pattern.sub(replacement, text)
    return text.strip()


def paragraphs(text: str) -> list[str]:
    return [line.strip() for line in text.split("\n") if line.strip()]


def currency_symbol(code: str | None) -> str:
    if not code:
        return "$"
    return CURRENCY_SYMBOLS.get(code.upper(), f"{code} ")


def round_half_up(amount: float) -> int:
    """Nearest whole unit with halves rounded up, so 100.5 becomes 101."""
    return int(Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_money(amount: float | None, symbol: str = "$") -> str:
    """Whole-unit price with thousands separators, e.g. ``€1,250``."""
    if amount is None:
        return ""
    return f"{symbol}{round_half_up(amount):,}"
