import httpx
import logging
from typing import List, Dict, Any, Optional, Sequence
from datetime import datetime, timezone
from tenacity import retry, retry_if_exception, stop_after_attempt, wait_exponential_jitter

from core.config import Settings, get_settings
from core.errors import UpstreamUnavailable
from ranking.records import VideoRecord, normalize_youtube_item

logger = logging.getLogger(__name__)

BASE_URL = "https://www.googleapis.com/youtube/v3"
# videos.list accepts at most 50 ids per call
MAX_IDS_PER_REQUEST = 50


def _is_retryable(exc: BaseException) -> bool:
    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        return status == 429 or status >= 500
    return isinstance(exc, httpx.TransportError)


class YouTubeClient:
    """Fetch video metadata from the YouTube Data API v3"""

    def __init__(self, settings: Optional[Settings] = None,
                 transport: Optional[httpx.BaseTransport] = None):
        self.settings = settings or get_settings()
        if not self.settings.youtube_api_key:
            raise UpstreamUnavailable("YOUTUBE_API_KEY is not configured", code="MISSING_API_KEY")
        self.base_url = BASE_URL
        self.client = httpx.Client(
            timeout=10.0,
            limits=httpx.Limits(max_connections=5, max_keepalive_connections=2),
            transport=transport,
        )

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.client.close()

    def fetch_details(self, video_ids: Sequence[str]) -> List[VideoRecord]:
        """Fetch snippet, duration and statistics for the given video IDs"""
        unique_ids = list(dict.fromkeys(i for i in video_ids if i))
        videos: List[VideoRecord] = []

        try:
            for start in range(0, len(unique_ids), MAX_IDS_PER_REQUEST):
                chunk = unique_ids[start:start + MAX_IDS_PER_REQUEST]
                response = self._make_request("videos", {
                    "part": "snippet,contentDetails,statistics",
                    "id": ",".join(chunk)
                })
                videos.extend(self._parse_videos(response))
        except httpx.HTTPError as e:
            logger.error(f"Failed to fetch video details: {e}", extra={"trace_id": "youtube_fetch_error"})
            raise UpstreamUnavailable(f"YouTube API unavailable: {e}") from e

        return videos

    @retry(
        retry=retry_if_exception(_is_retryable),
        stop=stop_after_attempt(5),
        wait=wait_exponential_jitter(initial=1, max=30, jitter=0.2),
        reraise=True,
        before_sleep=lambda retry_state: logger.warning(
            f"Retry {retry_state.attempt_number}: {retry_state.outcome.exception()}"
        )
    )
    def _make_request(self, endpoint: str, params: Dict[str, Any]) -> Dict[str, Any]:
        """Make HTTP request with retry logic for 429/5xx errors"""
        params = {
            **params,
            "key": self.settings.youtube_api_key
        }

        try:
            response = self.client.get(f"{self.base_url}/{endpoint}", params=params)

            if response.status_code == 429 or response.status_code >= 500:
                logger.warning(f"HTTP {response.status_code}: retrying request")

            response.raise_for_status()
            return response.json()

        except httpx.HTTPStatusError as e:
            logger.error(f"HTTP error {e.response.status_code}: {e}")
            raise
        except httpx.RequestError as e:
            logger.error(f"Request error: {e}")
            raise

    def _parse_videos(self, videos_data: Dict[str, Any]) -> List[VideoRecord]:
        """Parse video data into normalized records"""
        videos = []
        now = datetime.now(timezone.utc)

        for item in videos_data.get("items", []):
            try:
                videos.append(normalize_youtube_item(item, now=now))
            except (KeyError, ValueError, TypeError) as e:
                logger.warning(f"Failed to parse video {item.get('id', 'unknown')}: {e}")
                continue

        return videos
