"""
Idea Generator

Turns ranked outlier videos into structured video ideas using three
strategies, applied in order and sharing the idea budget:

- Trending Topic: topic clusters of outperforming videos
- Standout Video: single high-grade videos worth replicating
- Winning Format: title structures with the best average score

Usage:
    scored = score_videos(videos, channels, filters)
    ideas = generate_ideas(scored, max_ideas=9)
"""

import logging
import math
from collections import Counter
from typing import Dict, List, Optional, Sequence

from ..core.models import (
    BasedOnVideo,
    CompetitionLevel,
    IdeaType,
    ScoredVideo,
    VideoIdea,
)
from .constants import (
    COMPETITION_LEVELS,
    DEFAULT_MAX_IDEAS,
    IDEA_SAMPLE_VIDEOS,
    MAX_COMMON_TAGS,
    MIN_PATTERN_AVG_SCORE,
    MIN_PATTERN_VIDEOS,
    STANDOUT_GRADES,
    TITLE_PATTERNS,
)
from .duration import duration_minutes
from .topic_clusters import clean_title, extract_topic_clusters


logger = logging.getLogger(__name__)


# ============================================================================
# Helpers
# ============================================================================

def detect_title_patterns(title: str) -> List[str]:
    """Labels of every title pattern the title matches, in table order."""
    return [label for regex, label in TITLE_PATTERNS if regex.search(title)]


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def format_duration_range(videos: Sequence[ScoredVideo]) -> str:
    """
    25th-75th percentile duration range in minutes.

    Returns "~N minutes" for a single usable duration and "varies" when
    none parse.
    """
    durations = sorted(
        d for d in (duration_minutes(v.snippet.duration) for v in videos) if d > 0
    )

    if not durations:
        return "varies"
    if len(durations) == 1:
        return f"~{_round_half_up(durations[0])} minutes"

    p25 = durations[int(len(durations) * 0.25)]
    p75 = durations[int(len(durations) * 0.75)]
    return f"{_round_half_up(p25)}-{_round_half_up(p75)} minutes"


def estimate_competition(video_count: int) -> CompetitionLevel:
    """Bucket the number of contributing videos into low/medium/high."""
    for max_count, level in COMPETITION_LEVELS:
        if video_count <= max_count:
            return CompetitionLevel(level)
    return CompetitionLevel.HIGH


def collect_tags(videos: Sequence[ScoredVideo], limit: int = MAX_COMMON_TAGS) -> List[str]:
    """Most frequent tags across videos (first seen wins ties)."""
    counts = Counter(tag for video in videos for tag in video.snippet.tags)
    return [tag for tag, _ in counts.most_common(limit)]


def format_views(count: int) -> str:
    """Compact view count: 1.2M, 45K, 999."""
    if count >= 1_000_000:
        return f"{count / 1_000_000:.1f}M"
    if count >= 1_000:
        return f"{count / 1_000:.0f}K"
    return f"{count:,}"


def _capitalize(text: str) -> str:
    return text[:1].upper() + text[1:]


def _by_score(videos: Sequence[ScoredVideo]) -> List[ScoredVideo]:
    return sorted(videos, key=lambda v: v.scores.composite, reverse=True)


def _based_on(videos: Sequence[ScoredVideo]) -> List[BasedOnVideo]:
    return [
        BasedOnVideo(video_id=v.snippet.video_id, title=clean_title(v.snippet.title))
        for v in videos
    ]


# ============================================================================
# Strategies
# ============================================================================

def _trending_topic_ideas(videos: Sequence[ScoredVideo], slots: int, next_id: int) -> List[VideoIdea]:
    ideas = []
    for cluster in extract_topic_clusters(videos, slots):
        best = _by_score(cluster.videos)[:IDEA_SAMPLE_VIDEOS]
        top = best[0]
        topic = _capitalize(cluster.topic)
        count = len(cluster.videos)

        formats = [p for v in best for p in detect_title_patterns(clean_title(v.snippet.title))]
        format_hint = f' The "{formats[0]}" format works well here.' if formats else ""

        ideas.append(VideoIdea(
            id=next_id + len(ideas),
            type=IdeaType.TRENDING_TOPIC,
            suggested_title=f'Make a video about "{topic}": {count} outlier videos prove demand',
            reasoning=(
                f'"{topic}" is trending in this niche. {count} videos feature this topic '
                f'with an avg outlier score of {cluster.avg_score:.1f}. The top performer '
                f'"{clean_title(top.snippet.title)}" hit {format_views(top.stats.view_count)} views.'
                f'{format_hint}'
            ),
            based_on=_based_on(best),
            common_tags=collect_tags(_by_score(cluster.videos)),
            avg_score=cluster.avg_score,
            optimal_length=format_duration_range(cluster.videos),
            competition=estimate_competition(count),
        ))
    return ideas


def _standout_video_ideas(
    videos: Sequence[ScoredVideo],
    slots: int,
    next_id: int,
    used_video_ids: set,
) -> List[VideoIdea]:
    ideas = []
    for video in videos:
        if len(ideas) >= slots:
            break
        if video.grade not in STANDOUT_GRADES or video.snippet.video_id in used_video_ids:
            continue

        title = clean_title(video.snippet.title)
        patterns = detect_title_patterns(title)
        views = format_views(video.stats.view_count)
        ratio: Optional[float] = video.scores.views_to_sub_ratio

        if patterns:
            format_advice = f'Use the "{patterns[0]}" format, it clearly resonates.'
        else:
            format_advice = "Find your own unique angle on this topic."

        if ratio is not None:
            title_stats = f"{views} views ({ratio:.1f}x subs)"
            ratio_note = f" That's {ratio:.1f}x the channel's subscriber count."
        else:
            title_stats = f"{views} views"
            ratio_note = ""

        ideas.append(VideoIdea(
            id=next_id + len(ideas),
            type=IdeaType.STANDOUT_VIDEO,
            suggested_title=f'Create your own take on "{title}": it hit {title_stats}',
            reasoning=(
                f"This video scored {video.grade} ({video.scores.composite:.1f}) with "
                f"{views} views.{ratio_note} {format_advice} Put your unique spin on this angle."
            ),
            based_on=_based_on([video]),
            common_tags=list(video.snippet.tags[:MAX_COMMON_TAGS]),
            avg_score=video.scores.composite,
            optimal_length=format_duration_range([video]),
            competition=CompetitionLevel.LOW,
        ))
        used_video_ids.add(video.snippet.video_id)
    return ideas


def _winning_format_ideas(videos: Sequence[ScoredVideo], slots: int, next_id: int) -> List[VideoIdea]:
    pattern_videos: Dict[str, List[ScoredVideo]] = {}
    for video in videos:
        for label in detect_title_patterns(clean_title(video.snippet.title)):
            pattern_videos.setdefault(label, []).append(video)

    ranked = []
    for label, matching in pattern_videos.items():
        if len(matching) < MIN_PATTERN_VIDEOS:
            continue
        avg_score = sum(v.scores.composite for v in matching) / len(matching)
        if avg_score > MIN_PATTERN_AVG_SCORE:
            ranked.append((label, _by_score(matching), avg_score))
    ranked.sort(key=lambda entry: entry[2], reverse=True)

    ideas = []
    for label, matching, avg_score in ranked[:slots]:
        best = matching[0]
        count = len(matching)
        ideas.append(VideoIdea(
            id=next_id + len(ideas),
            type=IdeaType.WINNING_FORMAT,
            suggested_title=f'Try the "{label}" format: {count} top videos use it (avg score {avg_score:.1f})',
            reasoning=(
                f'The "{label}" title structure is outperforming in this niche. {count} videos '
                f'use it with an average score of {avg_score:.1f}. Best example: '
                f'"{clean_title(best.snippet.title)}" with {format_views(best.stats.view_count)} views. '
                f'Structure your next video this way.'
            ),
            based_on=_based_on(matching[:IDEA_SAMPLE_VIDEOS]),
            common_tags=collect_tags(matching),
            avg_score=avg_score,
            optimal_length=format_duration_range(matching),
            competition=estimate_competition(count),
        ))
    return ideas


# ============================================================================
# Main Idea Generator
# ============================================================================

def generate_ideas(videos: Sequence[ScoredVideo], max_ideas: int = DEFAULT_MAX_IDEAS) -> List[VideoIdea]:
    """
    Generate up to max_ideas video ideas from ranked videos.

    Args:
        videos: Scored videos in rank order
        max_ideas: Total idea budget shared by the three strategies

    Returns:
        VideoIdea list with sequential ids starting at 1
    """
    if not videos or max_ideas <= 0:
        return []

    share = math.ceil(max_ideas / 3)
    ideas: List[VideoIdea] = []

    # Strategy 1: Trending Topics
    ideas.extend(_trending_topic_ideas(videos, min(share, max_ideas), next_id=1))
    used_video_ids = {b.video_id for idea in ideas for b in idea.based_on}

    # Strategy 2: Standout Videos
    remaining = max_ideas - len(ideas)
    if remaining > 0:
        ideas.extend(_standout_video_ideas(
            videos, min(share, remaining), len(ideas) + 1, used_video_ids
        ))

    # Strategy 3: Winning Formats
    remaining = max_ideas - len(ideas)
    if remaining > 0:
        ideas.extend(_winning_format_ideas(videos, remaining, len(ideas) + 1))

    logger.debug(f"Generated {len(ideas)} ideas (budget {max_ideas})")
    return ideas
