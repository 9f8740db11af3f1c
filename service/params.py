"""Lenient query parameter parsing shared by the feed services"""
import math
from typing import Optional, Union


def clamp_int(value: Optional[Union[str, int]], default: int, lo: int, hi: int) -> int:
    """Parse an int and clamp it to [lo, hi]; unparseable input gives `default`"""
    if value is None or value == "":
        return default
    try:
        n = int(value)
    except (TypeError, ValueError):
        return default
    return min(hi, max(lo, n))


def clamp_amount(value: Optional[float], lo: int = 1, hi: int = 10) -> int:
    """Floor a support amount and clamp it; missing or non-finite gives `lo`"""
    if value is None or not math.isfinite(value):
        return lo
    return min(hi, max(lo, math.floor(value)))


def is_truthy(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes")
