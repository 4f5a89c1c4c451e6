"""
Topic Clustering for Scored Videos

Groups videos by shared title keywords, merging near-duplicate keywords
("agent"/"agents", "story"/"stories") with a naive suffix stemmer.

Steps:
1. Tokenize cleaned titles (lowercase, alphanumeric, no stop words, len > 3)
2. Index keyword -> videos containing it
3. Score keywords seen in 2+ videos, drop weak ones, rank by avg_score * count
4. Deduplicate by same-topic keywords and by video overlap
"""

import logging
import re
from dataclasses import dataclass
from typing import Dict, List, Sequence, Set

from ..core.models import ScoredVideo, TopicCluster
from .constants import (
    MAX_CLUSTER_OVERLAP,
    MIN_CLUSTER_VIDEOS,
    MIN_KEYWORD_LENGTH,
    MIN_TOP_VIDEO_SCORE,
    STOP_WORDS,
)


logger = logging.getLogger(__name__)

HASHTAG_RE = re.compile(r"#\S+")
EMOJI_RE = re.compile("[\U0001F600-\U0001F9FF]")
MULTI_SPACE_RE = re.compile(r"\s{2,}")
NON_ALNUM_RE = re.compile(r"[^a-z0-9\s]")

# Applied in order, each at most once
_STEM_RULES = (
    (re.compile(r"ies$"), "y"),
    (re.compile(r"tion$"), "t"),
    (re.compile(r"(ing|ed|er|ly|ment|ness)$"), ""),
    (re.compile(r"(es|s)$"), ""),
    (re.compile(r"(.)\1$"), r"\1"),
)


def clean_title(raw: str) -> str:
    """Strip hashtags and emoji, collapse whitespace."""
    title = HASHTAG_RE.sub("", raw or "")
    title = EMOJI_RE.sub("", title)
    title = MULTI_SPACE_RE.sub(" ", title)
    return title.strip()


def tokenize_title(raw: str) -> List[str]:
    """
    Distinct keywords of a title, in order of first appearance.

    Stop words and words shorter than four characters are dropped.
    """
    text = NON_ALNUM_RE.sub("", clean_title(raw).lower())
    keywords: List[str] = []
    seen: Set[str] = set()
    for word in text.split():
        if len(word) < MIN_KEYWORD_LENGTH or word in STOP_WORDS or word in seen:
            continue
        seen.add(word)
        keywords.append(word)
    return keywords


def stem(word: str) -> str:
    """
    Naive English stemmer.

    Good enough to merge "agent"/"agents"; not linguistically correct.
    """
    for pattern, replacement in _STEM_RULES:
        word = pattern.sub(replacement, word, count=1)
    return word


def are_same_topic(a: str, b: str) -> bool:
    """True when two keywords are equal, share a stem, or one contains the other."""
    if a == b:
        return True
    if stem(a) == stem(b):
        return True
    if len(a) >= 4 and len(b) >= 4 and (a in b or b in a):
        return True
    return False


@dataclass
class _KeywordCandidate:
    keyword: str
    indices: List[int]  # video positions, ascending
    avg_score: float
    top_video: ScoredVideo

    @property
    def weight(self) -> float:
        return self.avg_score * len(self.indices)


def _index_keywords(videos: Sequence[ScoredVideo]) -> Dict[str, List[int]]:
    keyword_videos: Dict[str, List[int]] = {}
    for idx, video in enumerate(videos):
        for word in tokenize_title(video.snippet.title):
            keyword_videos.setdefault(word, []).append(idx)
    return keyword_videos


def _score_candidates(
    videos: Sequence[ScoredVideo],
    keyword_videos: Dict[str, List[int]],
) -> List[_KeywordCandidate]:
    candidates = []
    for keyword, indices in keyword_videos.items():
        if len(indices) < MIN_CLUSTER_VIDEOS:
            continue

        matching = [videos[i] for i in indices]
        avg_score = sum(v.scores.composite for v in matching) / len(matching)
        # max() keeps the earliest video on ties
        top_video = max(matching, key=lambda v: v.scores.composite)

        # Weak signal: the best video for this keyword is not an outlier
        if top_video.scores.composite <= MIN_TOP_VIDEO_SCORE:
            continue

        candidates.append(_KeywordCandidate(keyword, indices, avg_score, top_video))

    candidates.sort(key=lambda c: c.weight, reverse=True)
    return candidates


def _overlaps(candidate: Set[int], accepted: Set[int]) -> bool:
    smaller = min(len(candidate), len(accepted))
    return len(candidate & accepted) > smaller * MAX_CLUSTER_OVERLAP


def extract_topic_clusters(videos: Sequence[ScoredVideo], max_clusters: int) -> List[TopicCluster]:
    """
    Extract up to max_clusters topic clusters from scored videos.

    Args:
        videos: Scored videos (any order; composite scores drive ranking)
        max_clusters: Maximum clusters to return

    Returns:
        TopicCluster list, strongest first. Cluster videos keep input order.
    """
    if max_clusters <= 0 or not videos:
        return []

    candidates = _score_candidates(videos, _index_keywords(videos))

    clusters: List[TopicCluster] = []
    used_keywords: List[str] = []
    used_video_sets: List[Set[int]] = []

    for candidate in candidates:
        if len(clusters) >= max_clusters:
            break

        if any(are_same_topic(candidate.keyword, used) for used in used_keywords):
            continue

        index_set = set(candidate.indices)
        if any(_overlaps(index_set, used) for used in used_video_sets):
            continue

        used_keywords.append(candidate.keyword)
        used_video_sets.append(index_set)
        clusters.append(TopicCluster(
            topic=candidate.keyword,
            videos=[videos[i] for i in candidate.indices],
            avg_score=candidate.avg_score,
            top_video=candidate.top_video,
        ))

    logger.debug(f"Accepted {len(clusters)} topic clusters from {len(candidates)} candidates")
    return clusters
