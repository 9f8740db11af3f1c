"""Unit tests for ranking assembly"""
import pytest

from factories import make_video
from ranking.assembler import assemble, merge_pinned, rank_candidates
from ranking.scoring import feed_trending_score


class TestRankCandidates:
    """Sort modes"""

    def test_hot_orders_by_score(self, now):
        videos = [
            make_video("old", hours_ago=100, views=1000),
            make_video("fresh", hours_ago=1, views=1000),
            make_video("mid", hours_ago=10, views=1000),
        ]
        ranked = rank_candidates(videos, "hot", now=now)

        assert [i.record.id for i in ranked] == ["fresh", "mid", "old"]
        assert [i.rank for i in ranked] == [1, 2, 3]
        assert all(i.trending_score is not None for i in ranked)

    def test_score_ties_keep_input_order(self, now):
        videos = [make_video(v, hours_ago=5, views=10) for v in ("c", "a", "b")]
        assert [i.record.id for i in rank_candidates(videos, "hot", now=now)] == ["c", "a", "b"]

    def test_new_orders_by_publish_time(self, now):
        videos = [make_video("b", hours_ago=5), make_video("a", hours_ago=1), make_video("c", hours_ago=9)]
        assert [i.record.id for i in rank_candidates(videos, "new")] == ["a", "b", "c"]

    def test_views_ties_broken_by_newest(self, now):
        videos = [
            make_video("older", hours_ago=9, views=50),
            make_video("top", hours_ago=20, views=90),
            make_video("newer", hours_ago=2, views=50),
        ]
        assert [i.record.id for i in rank_candidates(videos, "views")] == ["top", "newer", "older"]

    def test_custom_scorer(self, now):
        videos = [make_video("views", views=100, hours_ago=3), make_video("likes", likes=10, hours_ago=3)]
        ranked = rank_candidates(videos, "trend", now=now, scorer=feed_trending_score)
        assert [i.record.id for i in ranked] == ["likes", "views"]

    def test_support_mode_ranks_by_count(self):
        """Three events for X and two for Y put X first"""
        videos = [make_video("Y"), make_video("X"), make_video("Z")]
        ranked = rank_candidates(videos, "support", support_points={"Y": 2, "X": 3})

        assert [(i.record.id, i.support_points, i.rank) for i in ranked] == [("X", 3, 1), ("Y", 2, 2)]

    def test_support_mode_drops_ids_without_record(self):
        ranked = rank_candidates([make_video("X")], "support", support_points={"gone": 9, "X": 1})
        assert [i.record.id for i in ranked] == ["X"]

    def test_support_weighted_mode(self):
        videos = [make_video("popular", views=1_000_000, likes=100), make_video("supported", likes=1)]
        ranked = rank_candidates(videos, "support_weighted", support_points={"supported": 10})

        assert [i.record.id for i in ranked] == ["popular", "supported"]
        assert ranked[1].support_points == 10
        assert ranked[1].trending_score == pytest.approx(10 * 50 + 3)
        assert ranked[0].support_points == 0


class TestMergePinned:
    """Pinned items go first in the given order"""

    def test_pinned_then_top_ranked(self, now):
        """Pinned a, b lead and three unpinned items follow without duplicates"""
        videos = [make_video(f"v{i}", views=1000 - i * 10, hours_ago=2) for i in range(10)]
        videos += [make_video("b", views=1, hours_ago=2), make_video("a", views=2, hours_ago=2)]

        result = assemble(videos, "hot", 1, 5, pinned_ids=["a", "b"], now=now)
        ids = [i.record.id for i in result.items]

        assert ids == ["a", "b", "v0", "v1", "v2"]
        assert len(set(ids)) == 5
        assert [i.rank for i in result.items] == [1, 2, 3, 4, 5]

    def test_duplicate_and_missing_pins_are_skipped(self, now):
        ranked = rank_candidates([make_video("x"), make_video("y")], "new")
        merged = merge_pinned(ranked, ["y", "missing", "y"])
        assert [i.record.id for i in merged] == ["y", "x"]

    def test_limit(self, now):
        ranked = rank_candidates([make_video(c) for c in "abcdef"], "new")
        assert len(merge_pinned(ranked, ["f"], limit=3)) == 3


class TestPagination:
    """Page slicing and total cap"""

    def test_second_page(self, now):
        videos = [make_video(f"v{i}", hours_ago=i + 1) for i in range(7)]
        result = assemble(videos, "new", page=2, page_size=3)

        assert [i.record.id for i in result.items] == ["v3", "v4", "v5"]
        assert result.total == 7
        assert [i.rank for i in result.items] == [4, 5, 6]

    def test_page_past_end_is_empty(self):
        result = assemble([make_video("a")], "new", page=3, page_size=10)
        assert result.items == []
        assert result.total == 1

    def test_total_is_capped(self):
        videos = [make_video(f"v{i}", hours_ago=i + 1) for i in range(12)]
        result = assemble(videos, "new", page=1, page_size=50, max_total=10)

        assert result.total == 10
        assert len(result.items) == 10

    def test_empty_candidates(self):
        result = assemble([], "hot", 1, 24)
        assert result.items == [] and result.total == 0
