"""
Scoring constants: composite weights, grade brackets, stop words and
title patterns.

All tables are immutable and evaluated in order.
"""

import re
from typing import Dict, FrozenSet, Pattern, Tuple


# ============================================================================
# Composite Score Weights
# ============================================================================

# Used when the channel's subscriber count is known
PRIMARY_WEIGHTS: Dict[str, float] = {
    "views_sub": 0.45,
    "velocity": 0.30,
    "engagement": 0.25,
}

# Used when the subscriber count is hidden (no views/sub ratio)
HIDDEN_SUBS_WEIGHTS: Dict[str, float] = {
    "velocity": 0.55,
    "engagement": 0.45,
}

# Z-scores are clamped to +/- this value
ZSCORE_CLAMP: float = 3.0


# ============================================================================
# Grade Thresholds
# ============================================================================

# (minimum_score, grade) evaluated top-down, first match wins
GRADES: Tuple[Tuple[float, str], ...] = (
    (2.0, "A+"),
    (1.5, "A"),
    (1.0, "B+"),
    (0.5, "B"),
    (float("-inf"), "C"),
)

STANDOUT_GRADES: FrozenSet[str] = frozenset({"A+", "A", "B+"})


# ============================================================================
# Enrichment
# ============================================================================

MIN_DAYS_SINCE_PUBLISHED: float = 0.5
SHORT_MAX_SECONDS: int = 60


# ============================================================================
# Topic Clustering
# ============================================================================

MIN_KEYWORD_LENGTH: int = 4
MIN_CLUSTER_VIDEOS: int = 2
MIN_TOP_VIDEO_SCORE: float = 0.3
MAX_CLUSTER_OVERLAP: float = 0.4

STOP_WORDS: FrozenSet[str] = frozenset({
    "the", "a", "an", "is", "are", "was", "were", "be", "been", "being",
    "have", "has", "had", "do", "does", "did", "will", "would", "could",
    "should", "may", "might", "shall", "can", "to", "of", "in", "for",
    "on", "with", "at", "by", "from", "as", "into", "through", "during",
    "before", "after", "and", "but", "or", "nor", "not", "so", "yet",
    "both", "either", "neither", "each", "every", "all", "any", "few",
    "more", "most", "other", "some", "such", "no", "only", "own", "same",
    "than", "too", "very", "just", "about", "above", "below", "between",
    "this", "that", "these", "those", "i", "me", "my", "we", "you", "your",
    "he", "him", "his", "she", "her", "it", "its", "they", "them", "their",
    "what", "which", "who", "whom", "how", "when", "where", "why", "up",
    "out", "if", "then", "here", "there", "also", "over",
})


# ============================================================================
# Title Patterns
# ============================================================================

# (compiled regex, label), case-insensitive, searched anywhere in the title
TITLE_PATTERNS: Tuple[Tuple[Pattern, str], ...] = tuple(
    (re.compile(pattern, re.IGNORECASE), label)
    for pattern, label in (
        (r"top\s+\d+", "Top N Listicle"),
        (r"best\s+\d+", "Best N Listicle"),
        (r"^\d+\s+", "Numbered List"),
        (r"i\s+(tried|spent|bought|tested|lived)", "Personal Experiment"),
        (r"how\s+to", "How-To Tutorial"),
        (r"\bvs\.?\b|\bversus\b|\bcompared?\b", "Comparison / Versus"),
        (r"beginner|beginners|starting|started|from\s+zero", "Beginner-Focused"),
        (r"20\d{2}", "Year-Tagged"),
        (r"review", "Review"),
        (r"tutorial|step[\s-]by[\s-]step|guide", "Tutorial"),
        (r"why\s+(you|i|we|most|nobody|everybody|everyone)", "Why / Explanation"),
        (r"don'?t|stop|never|worst|mistake|avoid|wrong", "Negative Framing"),
    )
)


# ============================================================================
# Idea Generation
# ============================================================================

DEFAULT_MAX_IDEAS: int = 9
IDEA_SAMPLE_VIDEOS: int = 3
MAX_COMMON_TAGS: int = 8
MIN_PATTERN_VIDEOS: int = 2
MIN_PATTERN_AVG_SCORE: float = -0.5

# (max_video_count, level), first match wins
COMPETITION_LEVELS: Tuple[Tuple[float, str], ...] = (
    (3, "low"),
    (8, "medium"),
    (float("inf"), "high"),
)
