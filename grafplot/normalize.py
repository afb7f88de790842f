from __future__ import annotations

import math
import re
from typing import Any


MISSING_TOKENS = frozenset({"nd", "nc", "#nd", "#n/d", "/"})
# "Not applicable" codes emitted by the upstream data exports.
SENTINEL_CODES = frozenset({1000000000.0, 999999999.0, 88888900.0, 88888888.0})

_WHITESPACE = re.compile(r"\s+")
_FLOAT_LITERAL = r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?"
_LEADING_FLOAT = re.compile(_FLOAT_LITERAL)
_WHOLE_FLOAT = re.compile(rf"\s*({_FLOAT_LITERAL})\s*")


def normalize_value(raw: Any) -> float | None:
    """Coerce a raw cell value into a finite float, or ``None`` when missing.

    Accepts numbers and numeric-looking strings such as ``" 12,5 "`` or
    ``"1 000"``. Missing-data tokens, sentinel codes and anything that does
    not start with a number read as ``None``. Never raises.
    """
    if raw is None or isinstance(raw, bool):
        return None
    try:
        text = str(raw)
    except Exception:
        return None
    if text.lower() in MISSING_TOKENS:
        return None
    if _is_sentinel(text):
        return None

    cleaned = _WHITESPACE.sub("", text).replace(",", ".")
    match = _LEADING_FLOAT.match(cleaned)
    if match is None:
        return None
    value = float(match.group(0))
    if not math.isfinite(value):
        return None
    return value


def _is_sentinel(text: str) -> bool:
    match = _WHOLE_FLOAT.fullmatch(text)
    return match is not None and float(match.group(1)) in SENTINEL_CODES
