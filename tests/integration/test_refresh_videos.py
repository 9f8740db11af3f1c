"""Tests for the on-demand metadata refresh job"""
from datetime import timedelta
from unittest.mock import Mock

from collection.jobs.refresh_videos import VideoRefresher
from factories import make_video


class TestVideoRefresher:
    """Refresh by ID or URL"""

    def _client(self, now):
        client = Mock()
        client.fetch_details.return_value = [
            make_video("x", views=42).model_copy(update={"platform_video_id": "abcdefghijk"})
        ]
        return client

    def test_refresh_upserts_fetched_videos(self, session, store, now):
        client = self._client(now)

        fetched, upserted = VideoRefresher(session, client).refresh(
            ["https://youtu.be/abcdefghijk", "not a video"]
        )

        client.fetch_details.assert_called_once_with(["abcdefghijk"])
        assert (fetched, upserted) == (1, 1)
        assert store.get("abcdefghijk").views == 42

    def test_dry_run_writes_nothing(self, session, store, now):
        fetched, upserted = VideoRefresher(session, self._client(now)).refresh(["abcdefghijk"], dry_run=True)

        assert (fetched, upserted) == (1, 0)
        assert store.find_published_since(now - timedelta(days=1)) == []

    def test_no_valid_ids(self, session):
        client = Mock()
        assert VideoRefresher(session, client).refresh(["??"]) == (0, 0)
        client.fetch_details.assert_not_called()
