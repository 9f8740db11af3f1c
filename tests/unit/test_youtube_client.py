"""Unit tests for the YouTube metadata client"""
import httpx
import pytest
from tenacity import wait_none

from collection.clients.youtube import YouTubeClient
from core.config import Settings
from core.errors import UpstreamUnavailable


def _item(video_id):
    return {
        "id": video_id,
        "snippet": {"title": f"t-{video_id}", "publishedAt": "2025-01-10T00:00:00Z"},
        "contentDetails": {"duration": "PT30S"},
        "statistics": {"viewCount": "10", "likeCount": "1"},
    }


@pytest.fixture
def api_settings():
    return Settings(database_url="sqlite://", youtube_api_key="test-key")


@pytest.fixture(autouse=True)
def no_retry_wait(monkeypatch):
    monkeypatch.setattr(YouTubeClient._make_request.retry, "wait", wait_none())


class TestYouTubeClient:
    """videos.list fetching"""

    def test_fetch_details_chunks_ids(self, api_settings):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            ids = request.url.params["id"].split(",")
            calls.append(ids)
            assert request.url.params["key"] == "test-key"
            assert request.url.params["part"] == "snippet,contentDetails,statistics"
            return httpx.Response(200, json={"items": [_item(i) for i in ids]})

        ids = [f"id{n:09d}" for n in range(60)]
        with YouTubeClient(api_settings, transport=httpx.MockTransport(handler)) as client:
            videos = client.fetch_details(ids + ids[:5])

        assert [len(c) for c in calls] == [50, 10]
        assert len(videos) == 60
        assert videos[0].duration_sec == 30

    def test_unparseable_items_are_skipped(self, api_settings):
        def handler(request):
            return httpx.Response(200, json={"items": [{"snippet": {}}, _item("abcdefghijk")]})

        with YouTubeClient(api_settings, transport=httpx.MockTransport(handler)) as client:
            videos = client.fetch_details(["abcdefghijk", "zzz"])

        assert [v.platform_video_id for v in videos] == ["abcdefghijk"]

    def test_server_errors_are_retried(self, api_settings):
        responses = iter([httpx.Response(503), httpx.Response(200, json={"items": [_item("abcdefghijk")]})])

        with YouTubeClient(api_settings, transport=httpx.MockTransport(lambda r: next(responses))) as client:
            videos = client.fetch_details(["abcdefghijk"])

        assert len(videos) == 1

    def test_client_errors_raise_upstream_unavailable(self, api_settings):
        attempts = []

        def handler(request):
            attempts.append(1)
            return httpx.Response(403, json={"error": "quota"})

        with YouTubeClient(api_settings, transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(UpstreamUnavailable):
                client.fetch_details(["abcdefghijk"])

        assert len(attempts) == 1

    def test_missing_api_key(self):
        with pytest.raises(UpstreamUnavailable) as exc_info:
            YouTubeClient(Settings(database_url="sqlite://", youtube_api_key=None))
        assert exc_info.value.code == "MISSING_API_KEY"
