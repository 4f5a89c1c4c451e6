"""
Outlier Scorer for YouTube Videos

Ranks candidate videos by how far they outperform the rest of the
candidate population.

Pipeline:
1. Filter - min views, publish window, shorts, channel size, missing channel
2. Enrich - velocity, engagement rate, views-to-subscriber ratio
3. Normalize - z-score each signal across the surviving population
4. Composite - weighted z-score sum (alternate weights for hidden subs)
5. Grade, sort (stable), truncate to top N and rank

Usage:
    scored = score_videos(
        videos,
        channels_by_id,
        ScoringFilters(min_views=1000, published_after_days=14, top_n=50),
    )
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Mapping, Optional, Sequence

from ..core.models import (
    ChannelRecord,
    ScoreBreakdown,
    ScoredVideo,
    ScoringFilters,
    VideoRecord,
    VideoSnippet,
    VideoStats,
)
from .constants import HIDDEN_SUBS_WEIGHTS, MIN_DAYS_SINCE_PUBLISHED, PRIMARY_WEIGHTS
from .stats import assign_grade, compute_zscores


logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60


@dataclass
class EnrichedVideo:
    """A candidate video joined with its channel and derived metrics"""
    video: VideoRecord
    channel: ChannelRecord
    days_since_published: float
    velocity: float  # views per day
    engagement_rate: float  # (likes + comments) / views
    views_sub_ratio: Optional[float]  # None when subs hidden or zero

    @property
    def hidden_subs(self) -> bool:
        return self.channel.hidden_subscriber_count


def parse_published_at(value: str) -> Optional[datetime]:
    """
    Parse an ISO 8601 publish timestamp into an aware UTC datetime.

    Naive timestamps are taken as UTC. Returns None when unparseable.
    """
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _passes_filters(
    video: VideoRecord,
    published: Optional[datetime],
    channel: Optional[ChannelRecord],
    filters: ScoringFilters,
    cutoff: datetime,
) -> bool:
    if video.view_count < filters.min_views:
        return False
    if published is None or published < cutoff:
        return False
    if not filters.include_shorts and video.is_short:
        return False
    if channel is None:
        return False
    if (
        not channel.hidden_subscriber_count
        and filters.max_channel_subs > 0
        and channel.subscriber_count > filters.max_channel_subs
    ):
        return False
    return True


def enrich_video(
    video: VideoRecord,
    channel: ChannelRecord,
    published: datetime,
    now: datetime,
) -> EnrichedVideo:
    """Compute velocity, engagement rate and views/sub ratio for one video."""
    elapsed_days = (now - published).total_seconds() / SECONDS_PER_DAY
    days_since_published = max(elapsed_days, MIN_DAYS_SINCE_PUBLISHED)

    velocity = video.view_count / days_since_published
    engagement_rate = (video.like_count + video.comment_count) / max(video.view_count, 1)

    views_sub_ratio = None
    if not channel.hidden_subscriber_count and channel.subscriber_count > 0:
        views_sub_ratio = video.view_count / channel.subscriber_count

    return EnrichedVideo(
        video=video,
        channel=channel,
        days_since_published=days_since_published,
        velocity=velocity,
        engagement_rate=engagement_rate,
        views_sub_ratio=views_sub_ratio,
    )


def composite_score(velocity_z: float, engagement_z: float, views_sub_z: Optional[float]) -> float:
    """
    Weighted sum of z-scores.

    Videos without a views/sub z-score use the hidden-subscriber weights.
    """
    if views_sub_z is not None:
        return (
            PRIMARY_WEIGHTS["views_sub"] * views_sub_z
            + PRIMARY_WEIGHTS["velocity"] * velocity_z
            + PRIMARY_WEIGHTS["engagement"] * engagement_z
        )
    return (
        HIDDEN_SUBS_WEIGHTS["velocity"] * velocity_z
        + HIDDEN_SUBS_WEIGHTS["engagement"] * engagement_z
    )


def _build_scored_video(item: EnrichedVideo, score: float) -> ScoredVideo:
    video = item.video
    return ScoredVideo(
        rank=0,
        grade=assign_grade(score),
        snippet=VideoSnippet(
            video_id=video.video_id,
            title=video.title,
            channel_id=video.channel_id,
            channel_title=item.channel.channel_title,
            published_at=video.published_at,
            thumbnail_url=video.thumbnail_url,
            tags=list(video.tags),
            duration=video.duration,
        ),
        stats=VideoStats(
            view_count=video.view_count,
            like_count=video.like_count,
            comment_count=video.comment_count,
            subscriber_count=item.channel.subscriber_count,
        ),
        scores=ScoreBreakdown(
            views_to_sub_ratio=item.views_sub_ratio,
            velocity=item.velocity,
            engagement=item.engagement_rate * 100,
            composite=score,
        ),
    )


def score_videos(
    videos: Sequence[VideoRecord],
    channels: Mapping[str, ChannelRecord],
    filters: ScoringFilters,
    now: Optional[datetime] = None,
) -> List[ScoredVideo]:
    """
    Filter, score, grade and rank candidate videos.

    Args:
        videos: Candidate videos
        channels: Channel records keyed by channel ID
        filters: Scoring filters
        now: Reference time (defaults to current UTC time; naive is taken as UTC)

    Returns:
        At most filters.top_n ScoredVideo objects, sorted by composite
        score descending with ranks 1..k. Empty when nothing survives
        filtering.
    """
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    cutoff = now - timedelta(days=filters.published_after_days)

    # Step 1: Filter and enrich
    enriched: List[EnrichedVideo] = []
    for video in videos:
        published = parse_published_at(video.published_at)
        channel = channels.get(video.channel_id)
        if not _passes_filters(video, published, channel, filters, cutoff):
            continue
        enriched.append(enrich_video(video, channel, published, now))

    logger.debug(f"{len(enriched)}/{len(videos)} videos passed filters")

    if not enriched:
        return []

    # Step 2: Z-scores across the surviving population
    velocity_z = compute_zscores([v.velocity for v in enriched])
    engagement_z = compute_zscores([v.engagement_rate for v in enriched])

    # Views/sub ratio only over videos where it is defined
    vsr_indices = [i for i, v in enumerate(enriched) if v.views_sub_ratio is not None]
    vsr_z = compute_zscores([enriched[i].views_sub_ratio for i in vsr_indices])
    vsr_z_by_index: Dict[int, float] = dict(zip(vsr_indices, vsr_z))

    # Step 3: Composite score and grade
    scored: List[ScoredVideo] = []
    for i, item in enumerate(enriched):
        score = composite_score(velocity_z[i], engagement_z[i], vsr_z_by_index.get(i))
        scored.append(_build_scored_video(item, score))

    # Step 4: Sort (stable), truncate and rank
    scored.sort(key=lambda v: v.scores.composite, reverse=True)
    top = scored[:filters.top_n]
    for rank, video in enumerate(top, 1):
        video.rank = rank

    return top
