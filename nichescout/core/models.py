"""
Pydantic models for video, channel, score and idea records
"""

from typing import Optional, List
from enum import Enum

from pydantic import BaseModel, Field


# ============================================================================
# Enums
# ============================================================================

class IdeaType(str, Enum):
    """Strategy that produced a video idea"""
    TRENDING_TOPIC = "Trending Topic"
    STANDOUT_VIDEO = "Standout Video"
    WINNING_FORMAT = "Winning Format"


class CompetitionLevel(str, Enum):
    """Rough competition estimate for an idea"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# ============================================================================
# Input Records (from YouTube Data API)
# ============================================================================

class SearchResult(BaseModel):
    """Single hit from a YouTube search"""
    video_id: str
    channel_id: str = ""
    title: str = ""
    description: str = ""
    published_at: str = ""
    thumbnail_url: str = ""


class VideoRecord(BaseModel):
    """Candidate video with raw statistics"""

    video_id: str = Field(..., description="YouTube video ID")
    channel_id: str = Field(..., description="Owning channel ID")
    title: str = Field(default="", description="Video title")
    published_at: str = Field(default="", description="Publish timestamp (ISO 8601)")
    view_count: int = Field(default=0, ge=0, description="Total view count")
    like_count: int = Field(default=0, ge=0, description="Total likes")
    comment_count: int = Field(default=0, ge=0, description="Total comments")
    duration: str = Field(default="PT0S", description="ISO 8601 duration, e.g. PT12M30S")
    duration_seconds: int = Field(default=0, ge=0, description="Duration in seconds")
    is_short: bool = Field(default=False, description="True when duration is 60s or less")
    tags: List[str] = Field(default_factory=list, description="Free-text video tags")
    category_id: str = Field(default="", description="YouTube category ID")
    default_language: str = Field(default="", description="Default language code")
    thumbnail_url: str = Field(default="", description="Thumbnail URL if known")

    model_config = {"frozen": True}


class ChannelRecord(BaseModel):
    """Channel statistics, keyed by channel ID"""

    channel_id: str = Field(..., description="Channel ID")
    channel_title: str = Field(default="", description="Channel display name")
    subscriber_count: int = Field(default=0, description="Subscriber count (-1 when hidden)")
    total_views: int = Field(default=0, ge=0, description="Lifetime channel views")
    video_count: int = Field(default=0, ge=0, description="Number of uploads")
    hidden_subscriber_count: bool = Field(default=False, description="Channel hides its subscriber count")

    model_config = {"frozen": True}


class ChannelInfo(BaseModel):
    """Channel summary used by channel spy"""
    channel_id: str
    title: str = ""
    subscriber_count: int = 0
    total_views: int = 0
    video_count: int = 0
    thumbnail_url: str = ""


# ============================================================================
# Scoring
# ============================================================================

class ScoringFilters(BaseModel):
    """Filters applied before scoring"""

    min_views: int = Field(default=0, ge=0, description="Minimum view count")
    max_channel_subs: int = Field(default=0, ge=0, description="Maximum channel subscribers (0 = unlimited)")
    published_after_days: float = Field(default=14, ge=0, description="Only videos from the last N days")
    include_shorts: bool = Field(default=False, description="Keep videos of 60s or less")
    top_n: int = Field(default=50, ge=0, description="Maximum number of results")


class VideoSnippet(BaseModel):
    """Descriptive part of a scored video"""
    video_id: str
    title: str
    channel_id: str
    channel_title: str = ""
    published_at: str = ""
    thumbnail_url: str = ""
    description: str = ""
    tags: List[str] = Field(default_factory=list)
    duration: str = ""


class VideoStats(BaseModel):
    """Raw counts of a scored video"""
    view_count: int = 0
    like_count: int = 0
    comment_count: int = 0
    subscriber_count: int = 0


class ScoreBreakdown(BaseModel):
    """Derived metrics and composite score"""
    views_to_sub_ratio: Optional[float] = Field(None, description="Views / subscribers; None when subscribers are hidden or zero")
    velocity: float = Field(..., description="Views per day since publication")
    engagement: float = Field(..., description="(likes + comments) / views, as a percentage")
    composite: float = Field(..., description="Weighted z-score composite")


class ScoredVideo(BaseModel):
    """Ranked outlier video"""
    rank: int = Field(default=0, ge=0, description="1-based rank, 1 = strongest outlier")
    grade: str = Field(..., description="Outlier grade: A+, A, B+, B or C")
    snippet: VideoSnippet
    stats: VideoStats
    scores: ScoreBreakdown

    @property
    def video_url(self) -> str:
        return f"https://youtube.com/watch?v={self.snippet.video_id}"


class TopicCluster(BaseModel):
    """Videos grouped under one topical keyword"""
    topic: str
    videos: List[ScoredVideo]
    avg_score: float
    top_video: ScoredVideo


# ============================================================================
# Ideas
# ============================================================================

class BasedOnVideo(BaseModel):
    """Reference to a video an idea was derived from"""
    video_id: str
    title: str


class VideoIdea(BaseModel):
    """Structured content suggestion"""
    id: int = Field(..., ge=1, description="Sequential idea number")
    type: IdeaType
    suggested_title: str
    reasoning: str
    based_on: List[BasedOnVideo] = Field(default_factory=list)
    common_tags: List[str] = Field(default_factory=list)
    avg_score: float
    optimal_length: str = Field(..., description='e.g. "10-15 minutes" or "varies"')
    competition: CompetitionLevel

    model_config = {"use_enum_values": True}


# ============================================================================
# Pipeline Results
# ============================================================================

class AnalysisResult(BaseModel):
    """Result of a niche analysis"""
    videos: List[ScoredVideo] = Field(default_factory=list)
    ideas: List[VideoIdea] = Field(default_factory=list)
    quota_used: int = Field(default=0, ge=0, description="YouTube API quota units consumed")
    query: str
    timestamp: str


class ChannelSpyResult(BaseModel):
    """Result of scoring one channel's uploads against each other"""
    channel: ChannelInfo
    videos: List[ScoredVideo] = Field(default_factory=list)
    quota_used: int = Field(default=0, ge=0)
    timestamp: str
