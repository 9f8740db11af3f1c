"""Short-form vs long-form classification"""
from typing import Iterable, List, Optional

from ranking.records import VideoRecord

SHORTS_MARKER = "/shorts/"
SHORTS_MAX_SECONDS = 60

SHORTS_MODES = ("all", "exclude", "only")
_ALIASES = {"any": "all"}


def resolve_shorts_mode(value: Optional[str]) -> str:
    mode = (value or "").strip().lower()
    mode = _ALIASES.get(mode, mode)
    return mode if mode in SHORTS_MODES else "all"


def is_short(record: VideoRecord) -> bool:
    """
    A video is short when its URL is a /shorts/ URL or its known duration
    is at most 60 seconds. Unknown duration never counts as short.
    """
    if SHORTS_MARKER in (record.url or ""):
        return True
    return record.duration_sec is not None and record.duration_sec <= SHORTS_MAX_SECONDS


def filter_shorts(records: Iterable[VideoRecord], mode: str) -> List[VideoRecord]:
    """Apply a shorts mode (`all`, `exclude`, `only`) preserving order"""
    if mode == "exclude":
        return [r for r in records if not is_short(r)]
    if mode == "only":
        return [r for r in records if is_short(r)]
    return list(records)
