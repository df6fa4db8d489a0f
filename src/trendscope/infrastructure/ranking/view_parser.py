"""View-count extraction from reported values and free text.

Both parsers return 0 when nothing usable is found; callers treat 0 as
"fall through to the next strategy". Arithmetic uses Decimal so that
``"4.35万"`` becomes exactly 43500.
"""

from __future__ import annotations

import math
import re
from decimal import Decimal, InvalidOperation
from typing import Any

# Magnitude units (lower-case keys; matching is case-insensitive).
UNIT_MULTIPLIERS: dict[str, int] = {
    "万": 10_000,
    "w": 10_000,
    "亿": 100_000_000,
}

# Play/view-count keywords that must follow a mined number.
VIEW_KEYWORDS: tuple[str, ...] = ("播放", "浏览", "观看", "views")

# Optional measure word between unit and keyword ("2.1亿次播放").
COUNT_WORD = "次"

_NUMBER = r"\d+(?:\.\d+)?"
_LEADING_NUMBER_RE = re.compile(r"\d+(?:\.\d+)?|\.\d+")
_NON_NUMERIC_RE = re.compile(r"[^0-9.]")
# Latin "w" only counts as a unit right after a number and not inside a word.
_LATIN_TEN_THOUSAND_RE = re.compile(r"\d\s*w(?![a-z])", re.IGNORECASE)


def _compile_mined_pattern() -> re.Pattern[str]:
    units = "".join(re.escape(u) for u in UNIT_MULTIPLIERS)
    keywords = "|".join(re.escape(k) for k in VIEW_KEYWORDS)
    return re.compile(
        rf"({_NUMBER})\s*([{units}])?\s*(?:{re.escape(COUNT_WORD)})?\s*(?:{keywords})",
        re.IGNORECASE,
    )


MINED_VIEWS_RE = _compile_mined_pattern()


def _scaled(number: str, multiplier: int) -> int:
    try:
        value = Decimal(number) * multiplier
    except InvalidOperation:
        return 0
    if not value.is_finite() or value <= 0:
        return 0
    return int(value)  # truncation == floor for positive values


def reported_multiplier(text: str) -> int:
    """Magnitude implied by a reported view string (1 when none)."""
    if "亿" in text:
        return UNIT_MULTIPLIERS["亿"]
    if "万" in text or _LATIN_TEN_THOUSAND_RE.search(text):
        return UNIT_MULTIPLIERS["万"]
    return 1


def parse_reported_views(value: Any) -> int:
    """Parse the provider's ``views`` field ("3.5万", "1,204 views", 12000)."""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        if not math.isfinite(value) or value <= 0:
            return 0
        return math.floor(value)

    text = str(value)
    match = _LEADING_NUMBER_RE.search(_NON_NUMERIC_RE.sub("", text))
    if match is None:
        return 0
    return _scaled(match.group(0), reported_multiplier(text))


def mine_views(text: str) -> int:
    """Find "<number>[unit][次]<keyword>" in free text ("2.1亿次播放" -> 210000000)."""
    if not text:
        return 0
    match = MINED_VIEWS_RE.search(text)
    if match is None:
        return 0
    number, unit = match.group(1), match.group(2)
    multiplier = UNIT_MULTIPLIERS[unit.lower()] if unit else 1
    return _scaled(number, multiplier)
