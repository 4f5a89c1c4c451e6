"""
Tests for topic clustering: title cleanup, tokenizing, stemming and
cluster extraction.
"""

import pytest

from nichescout.core.models import ScoreBreakdown, ScoredVideo, VideoSnippet, VideoStats
from nichescout.scoring.stats import assign_grade
from nichescout.scoring.topic_clusters import (
    _overlaps,
    are_same_topic,
    clean_title,
    extract_topic_clusters,
    stem,
    tokenize_title,
)


def _scored(video_id, title, composite):
    return ScoredVideo(
        rank=1,
        grade=assign_grade(composite),
        snippet=VideoSnippet(video_id=video_id, title=title, channel_id="UC_a"),
        stats=VideoStats(view_count=10_000, subscriber_count=1_000),
        scores=ScoreBreakdown(views_to_sub_ratio=10.0, velocity=500.0, engagement=2.0, composite=composite),
    )


def _topics(clusters):
    return [c.topic for c in clusters]


class TestCleanTitle:
    def test_strips_hashtags(self):
        assert clean_title("Latte Art Basics #coffee #shorts") == "Latte Art Basics"

    def test_strips_emoji(self):
        assert clean_title("Espresso 😀 Secrets 🤯") == "Espresso Secrets"

    def test_collapses_whitespace(self):
        assert clean_title("  Too    many   spaces ") == "Too many spaces"

    def test_empty(self):
        assert clean_title("") == ""


class TestTokenizeTitle:
    def test_drops_short_words_and_stop_words(self):
        assert tokenize_title("How to Build AI Agents with Python") == ["build", "agents", "python"]

    def test_lowercases_and_strips_punctuation(self):
        assert tokenize_title("Python's BEST Tricks!") == ["pythons", "best", "tricks"]

    def test_dedupes_in_order(self):
        assert tokenize_title("Pasta pasta PASTA recipe") == ["pasta", "recipe"]

    def test_ignores_hashtags(self):
        assert tokenize_title("Sourdough Starter #baking") == ["sourdough", "starter"]

    def test_keeps_numbers(self):
        assert tokenize_title("Best AI Agents 2024") == ["best", "agents", "2024"]


class TestStem:
    @pytest.mark.parametrize("word,expected", [
        ("agents", "agent"),
        ("agent", "agent"),
        ("stories", "story"),
        ("story", "story"),
        ("running", "run"),
        ("runner", "run"),
        ("automation", "automat"),
        ("quickly", "quick"),
        ("boxes", "box"),
    ])
    def test_stem(self, word, expected):
        assert stem(word) == expected


class TestAreSameTopic:
    def test_equal(self):
        assert are_same_topic("pasta", "pasta")

    def test_shared_stem(self):
        assert are_same_topic("agents", "agent")
        assert are_same_topic("stories", "story")

    def test_containment(self):
        assert are_same_topic("game", "gameplay")

    def test_unrelated(self):
        assert not are_same_topic("pasta", "espresso")


class TestOverlaps:
    def test_uses_smaller_set(self):
        # 1 shared of a 2-video set is over 40%
        assert _overlaps({1, 2, 3, 4, 5, 6}, {6, 7})

    def test_disjoint(self):
        assert not _overlaps({1, 2, 3}, {4, 5})

    def test_below_threshold(self):
        assert not _overlaps({1, 2, 3, 4, 5}, {5, 6, 7, 8, 9})


# ============================================================================
# Cluster extraction
# ============================================================================

class TestExtractTopicClusters:
    def test_shared_keyword_forms_cluster(self):
        videos = [
            _scored("v1", "AI Agents Explained", 1.5),
            _scored("v2", "Best AI Agents 2024", 1.0),
            _scored("v3", "Cooking Pasta", -0.5),
        ]
        clusters = extract_topic_clusters(videos, 3)

        assert _topics(clusters) == ["agents"]
        cluster = clusters[0]
        assert [v.snippet.video_id for v in cluster.videos] == ["v1", "v2"]
        assert cluster.avg_score == pytest.approx(1.25)
        assert cluster.top_video.snippet.video_id == "v1"

    def test_weak_signal_dropped(self):
        videos = [
            _scored("v1", "Sourdough Starter Guide", 0.3),
            _scored("v2", "Sourdough Mistakes", 0.2),
        ]
        assert extract_topic_clusters(videos, 3) == []

    def test_single_video_keyword_ignored(self):
        videos = [_scored("v1", "Espresso Machine", 2.0), _scored("v2", "Latte Basics", 2.0)]
        assert extract_topic_clusters(videos, 3) == []

    def test_same_topic_keywords_merged(self):
        videos = [
            _scored("v1", "AI agent tools", 2.0),
            _scored("v2", "agent builder", 1.9),
            _scored("v3", "best agents", 1.0),
            _scored("v4", "agents compared", 0.9),
        ]
        assert _topics(extract_topic_clusters(videos, 3)) == ["agent"]

    def test_overlapping_video_sets_deduped(self):
        videos = [
            _scored("v1", "Python Coding Basics", 1.0),
            _scored("v2", "Python Coding Tips", 1.0),
            _scored("v3", "Python Coding Fast", 1.0),
        ]
        clusters = extract_topic_clusters(videos, 3)
        assert _topics(clusters) == ["python"]

    def test_ranked_by_weight(self):
        videos = [
            _scored("p1", "Pasta Night", 0.5),
            _scored("p2", "Pasta Sauce", 0.5),
            _scored("e1", "Espresso Shots", 2.0),
            _scored("e2", "Espresso Beans", 2.0),
            _scored("e3", "Espresso Gear", 2.0),
        ]
        assert _topics(extract_topic_clusters(videos, 3)) == ["espresso", "pasta"]

    def test_max_clusters(self):
        videos = [
            _scored("p1", "Pasta Night", 1.0),
            _scored("p2", "Pasta Sauce", 1.0),
            _scored("e1", "Espresso Shots", 2.0),
            _scored("e2", "Espresso Beans", 2.0),
        ]
        assert _topics(extract_topic_clusters(videos, 1)) == ["espresso"]
        assert extract_topic_clusters(videos, 0) == []

    def test_top_video_tie_keeps_first(self):
        videos = [
            _scored("first", "Garden Tips", 1.0),
            _scored("second", "Garden Tools", 1.0),
        ]
        clusters = extract_topic_clusters(videos, 3)
        assert clusters[0].top_video.snippet.video_id == "first"

    def test_cluster_videos_keep_input_order(self):
        videos = [
            _scored("low", "Garden Tips", 0.5),
            _scored("high", "Garden Tools", 2.0),
        ]
        cluster = extract_topic_clusters(videos, 3)[0]
        assert [v.snippet.video_id for v in cluster.videos] == ["low", "high"]
        assert cluster.top_video.snippet.video_id == "high"

    def test_empty(self):
        assert extract_topic_clusters([], 3) == []
