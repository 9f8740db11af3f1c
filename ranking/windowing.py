"""
Time windows for recency filters.

Two policies coexist and callers pick one explicitly:

- rolling: cutoff = now - N hours, in absolute instants
- civil midnight: cutoff = local midnight today - (days - 1) days, in a fixed
  UTC offset, so "today" is the same wall-clock day for every request
"""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional, Tuple

ROLLING_HOURS: Dict[str, int] = {
    "1d": 24,
    "24h": 24,
    "48h": 48,
    "7d": 7 * 24,
    "30d": 30 * 24,
}

CIVIL_DAYS: Dict[str, int] = {
    "1d": 1,
    "7d": 7,
    "30d": 30,
}

# Next-wider rolling window used when a feed comes back empty
WIDER: Dict[str, str] = {
    "24h": "48h",
}

# Tokens each call site accepts
SEARCH_RANGES: Tuple[str, ...] = ("1d", "7d", "30d")
TRENDING_WINDOWS: Tuple[str, ...] = ("24h", "48h", "7d", "30d")
LISTING_RANGES: Tuple[str, ...] = ("24h", "7d", "30d")
RANKING_RANGES: Tuple[str, ...] = ("1d", "7d", "30d")


@dataclass(frozen=True)
class Window:
    """A resolved window: the token asked for and its cutoff"""
    range: str
    since: datetime

    @property
    def hours(self) -> int:
        return ROLLING_HOURS.get(self.range, 0)

    def contains(self, instant: datetime) -> bool:
        return instant >= self.since


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def resolve_token(value: Optional[str], allowed: Tuple[str, ...], default: str) -> str:
    """Lower-case the token and fall back to `default` when it is not allowed"""
    token = (value or "").strip().lower()
    return token if token in allowed else default


def rolling_cutoff(token: str, now: Optional[datetime] = None) -> datetime:
    """Cutoff instant for a rolling window (`24h`, `48h`, `1d`, `7d`, `30d`)"""
    now = now or utc_now()
    return now - timedelta(hours=ROLLING_HOURS[token])


def rolling_window(token: str, now: Optional[datetime] = None) -> Window:
    return Window(range=token, since=rolling_cutoff(token, now))


def start_of_today_local(now: Optional[datetime] = None, utc_offset_hours: int = 9) -> datetime:
    """UTC instant of local midnight for the day `now` falls on"""
    now = now or utc_now()
    local_tz = timezone(timedelta(hours=utc_offset_hours))
    local_now = now.astimezone(local_tz)
    local_midnight = local_now.replace(hour=0, minute=0, second=0, microsecond=0)
    return local_midnight.astimezone(timezone.utc)


def civil_midnight_cutoff(token: str, now: Optional[datetime] = None,
                          utc_offset_hours: int = 9) -> datetime:
    """Cutoff instant aligned to local midnight (`1d`, `7d`, `30d`)"""
    days = CIVIL_DAYS[token]
    return start_of_today_local(now, utc_offset_hours) - timedelta(days=days - 1)


def civil_midnight_window(token: str, now: Optional[datetime] = None,
                          utc_offset_hours: int = 9) -> Window:
    return Window(range=token, since=civil_midnight_cutoff(token, now, utc_offset_hours))


def widen(token: str) -> Optional[str]:
    """Next-wider rolling token, or None when there is none"""
    return WIDER.get(token)
