"""API tests through FastAPI TestClient"""
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

from factories import insert_support, insert_videos, make_video
from core.errors import UpstreamUnavailable


def _recent(video_id, **kwargs):
    # API handlers use the real clock
    return make_video(video_id, now=datetime.now(timezone.utc), **kwargs)


class TestHealthAPI:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["ok"] is True


class TestFeedsAPI:
    """Feed endpoints"""

    def test_search(self, client, session):
        insert_videos(session, [_recent("a", title="Cover", views=10), _recent("b", title="Other")])

        response = client.get("/api/search", params={"q": "cover", "range": "1d"})
        body = response.json()

        assert response.status_code == 200
        assert response.headers["cache-control"] == "no-store"
        assert [i["id"] for i in body["items"]] == ["a"]
        assert body["window"]["range"] == "1d"

    def test_trending_reports_widened_window(self, client, session):
        insert_videos(session, [_recent("a", hours_ago=30)])

        body = client.get("/api/trending", params={"window": "24h"}).json()

        assert body["effective_window"]["range"] == "48h"
        assert body["effective_window"]["widened"] is True
        assert [i["id"] for i in body["items"]] == ["a"]

    def test_trending_no_fallback_flag(self, client, session):
        insert_videos(session, [_recent("a", hours_ago=30)])

        body = client.get("/api/trending?noFallback").json()

        assert body["items"] == []
        assert body["effective_window"]["widened"] is False

    def test_trending_exclude_shorts_flag(self, client, session):
        insert_videos(session, [_recent("s", duration_sec=15), _recent("l", duration_sec=900)])

        body = client.get("/api/trending", params={"excludeShorts": "true"}).json()

        assert [i["id"] for i in body["items"]] == ["l"]

    def test_videos_listing_bad_params_fall_back(self, client, session):
        insert_videos(session, [_recent("a")])

        body = client.get("/api/videos", params={"range": "year", "take": "lots", "sort": "??"}).json()

        assert body["take"] == 24
        assert [i["id"] for i in body["items"]] == ["a"]

    def test_ranking(self, client, session):
        insert_videos(session, [_recent("a"), _recent("b")])
        insert_support(session, "b", datetime.now(timezone.utc), count=2)

        body = client.get("/api/ranking").json()

        assert body["items"][0]["id"] == "b"
        assert body["items"][0]["support_points"] == 2

    def test_store_failure_is_503(self, client):
        with patch("store.video_store.VideoStore.find_published_since",
                   side_effect=UpstreamUnavailable("down")):
            response = client.get("/api/search")

        assert response.status_code == 503
        assert response.json()["detail"]["error"]["code"] == "UPSTREAM_UNAVAILABLE"


class TestSupportAPI:
    """Support endpoints"""

    def test_post_support_twice(self, client, session):
        insert_videos(session, [_recent("x")])
        headers = {"x-forwarded-for": "203.0.113.9", "user-agent": "pytest"}

        first = client.post("/api/support", json={"videoId": "x", "amount": 3}, headers=headers)
        second = client.post("/api/support", json={"videoId": "x", "amount": 3}, headers=headers)

        assert first.json() == {"ok": True, "points": 3, "already": False}
        assert second.json() == {"ok": True, "points": 3, "already": True}

    def test_post_support_by_platform_video_id(self, client, session, store):
        insert_videos(session, [_recent("x")])

        response = client.post("/api/support", json={"videoId": "yt_x", "amount": 2})

        assert response.json() == {"ok": True, "points": 2, "already": False}
        assert store.support_total("x") == 2

    def test_post_support_requires_video_id(self, client):
        response = client.post("/api/support", json={})

        assert response.status_code == 400
        assert response.json()["detail"]["error"]["code"] == "MISSING_PARAMETER"

    def test_post_support_unknown_video(self, client):
        assert client.post("/api/support", json={"video_id": "nope"}).status_code == 404

    def test_support_ranking(self, client, session):
        insert_videos(session, [_recent("x")])
        insert_support(session, "x", datetime.now(timezone.utc) - timedelta(hours=1), count=2)

        body = client.get("/api/support/ranking", params={"range": "7d"}).json()

        assert body["items"][0]["video_id"] == "x"
        assert body["items"][0]["support"] == 2


class TestVideosAPI:
    """Hero, detail and by-ids endpoints"""

    def test_hero_uses_pinned_ids(self, client, session, settings):
        settings.hero_pinned_ids = "b,a"
        insert_videos(session, [_recent("a"), _recent("b"), _recent("c", support_total=7)])

        body = client.get("/api/hero").json()

        assert [i["id"] for i in body["items"]] == ["b", "a", "c"]

    def test_by_ids(self, client, session):
        insert_videos(session, [_recent("a")])
        assert [i["id"] for i in client.get("/api/videos/by-ids", params={"ids": "a,zz"}).json()["items"]] == ["a"]

    def test_detail(self, client, session):
        insert_videos(session, [_recent("a"), _recent("b")])

        body = client.get("/api/videos/a").json()

        assert body["video"]["id"] == "a"
        assert [r["id"] for r in body["related"]] == ["b"]

    def test_detail_missing(self, client):
        response = client.get("/api/videos/missing")

        assert response.status_code == 404
        assert response.json()["detail"]["error"]["code"] == "NOT_FOUND"


class TestStartup:
    """Application lifespan"""

    def test_logging_configured_on_startup(self, settings):
        from fastapi.testclient import TestClient
        import app.main as main

        settings.log_level = "debug"
        with patch.object(main, "get_settings", return_value=settings), \
                patch.object(main, "setup_json_logging") as setup:
            setup.assert_not_called()
            with TestClient(main.app):
                pass

        setup.assert_called_once_with("debug")
