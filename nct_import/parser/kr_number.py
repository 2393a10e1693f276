from __future__ import annotations

import math
import re

"""Key Result number extraction.

Turns a free-text KR cell into its numeric target:

    "24K leads"  -> 24000
    "$1.5M ARR"  -> 1500000
    "50%"        -> 50
    "3,500"      -> 3500

Only the first number is used; percentages and ranges are not interpreted.
"""

__all__ = [
    "parse_kr_number",
    "SUFFIX_MULTIPLIERS",
]

SUFFIX_MULTIPLIERS = {
    "k": 1_000,
    "m": 1_000_000,
    "b": 1_000_000_000,
}

_KR_NUMBER_RE = re.compile(r"[$€£]?\s*([\d,]+(?:\.\d+)?)\s*([kmb])?", re.IGNORECASE)


def parse_kr_number(text: str | None) -> float | None:
    """Extract the target number from a KR string.

    Returns None for empty input, when the text holds no number, or when the
    number overflows a float.
    A k/m/b suffix directly after the number (whitespace allowed) scales it.
    """
    if not text:
        return None
    match = _KR_NUMBER_RE.search(text)
    if match is None:
        return None
    try:
        base = float(match.group(1).replace(",", ""))
    except ValueError:
        # "," のみのトークン等
        return None
    suffix = match.group(2)
    value = base * SUFFIX_MULTIPLIERS[suffix.lower()] if suffix else base
    if not math.isfinite(value):
        # 桁あふれ (inf) は数値なし扱い
        return None
    return value
