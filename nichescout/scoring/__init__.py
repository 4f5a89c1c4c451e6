"""
Outlier Scoring Engine

Statistical scoring, topic clustering and idea generation for YouTube
outlier videos.
"""

from .duration import parse_duration
from .stats import compute_zscores, assign_grade
from .outlier_scorer import score_videos
from .topic_clusters import extract_topic_clusters
from .idea_generator import generate_ideas

__all__ = [
    'parse_duration',
    'compute_zscores',
    'assign_grade',
    'score_videos',
    'extract_topic_clusters',
    'generate_ideas',
]
