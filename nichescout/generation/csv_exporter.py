"""
CSV Exporter

Export ranked outlier videos and generated ideas to CSV for analysis.

Usage:
    exporter = CSVExporter()
    exporter.export_videos(result.videos, "output/outlier-videos-2024-01-15.csv")
    exporter.export_ideas(result.ideas, "output/video-ideas-2024-01-15.csv")
"""

import csv
import logging
from datetime import date
from pathlib import Path
from typing import List, Optional

from ..core.models import ScoredVideo, VideoIdea


logger = logging.getLogger(__name__)

VIDEO_HEADERS = [
    "Rank",
    "Grade",
    "Score",
    "Title",
    "Channel",
    "Subscribers",
    "Views",
    "Views/Sub",
    "Velocity (/day)",
    "Engagement (%)",
    "Published",
    "Duration",
    "Video URL",
]

IDEA_HEADERS = [
    "#",
    "Type",
    "Suggested Title",
    "Reasoning",
    "Based On",
    "Tags",
    "Avg Score",
    "Optimal Length",
    "Competition",
]


class CSVExporter:
    """
    Export scored videos and ideas as CSV files
    """

    @staticmethod
    def default_filename(prefix: str, today: Optional[date] = None) -> str:
        """e.g. outlier-videos-2024-01-15.csv"""
        today = today or date.today()
        return f"{prefix}-{today.isoformat()}.csv"

    @staticmethod
    def video_row(video: ScoredVideo) -> List[str]:
        """Flatten a scored video into CSV cells."""
        ratio = video.scores.views_to_sub_ratio
        subscribers = video.stats.subscriber_count
        return [
            str(video.rank),
            video.grade,
            f"{video.scores.composite:.1f}",
            video.snippet.title,
            video.snippet.channel_title,
            f"{subscribers:,}" if subscribers >= 0 else "hidden",
            f"{video.stats.view_count:,}",
            f"{ratio:.2f}" if ratio is not None else "",
            f"{video.scores.velocity:.1f}",
            f"{video.scores.engagement:.2f}",
            video.snippet.published_at.split("T")[0],
            video.snippet.duration,
            video.video_url,
        ]

    @staticmethod
    def idea_row(idea: VideoIdea) -> List[str]:
        """Flatten an idea into CSV cells."""
        return [
            str(idea.id),
            str(idea.type),
            idea.suggested_title,
            idea.reasoning,
            "; ".join(b.title for b in idea.based_on),
            ", ".join(idea.common_tags),
            f"{idea.avg_score:.1f}",
            idea.optimal_length,
            str(idea.competition),
        ]

    def _write(self, headers: List[str], rows: List[List[str]], output_path: str) -> Path:
        output_file = Path(output_path)
        output_file.parent.mkdir(parents=True, exist_ok=True)

        with open(output_file, 'w', newline='', encoding='utf-8') as f:
            writer = csv.writer(f)
            writer.writerow(headers)
            writer.writerows(rows)

        return output_file

    def export_videos(self, videos: List[ScoredVideo], output_path: str) -> Path:
        """
        Export scored videos to a CSV file

        Args:
            videos: Ranked videos
            output_path: Output file path

        Returns:
            Path of the written file
        """
        output_file = self._write(VIDEO_HEADERS, [self.video_row(v) for v in videos], output_path)
        logger.info(f"Exported {len(videos)} videos to CSV: {output_path}")
        return output_file

    def export_ideas(self, ideas: List[VideoIdea], output_path: str) -> Path:
        """
        Export video ideas to a CSV file

        Args:
            ideas: Generated ideas
            output_path: Output file path

        Returns:
            Path of the written file
        """
        output_file = self._write(IDEA_HEADERS, [self.idea_row(i) for i in ideas], output_path)
        logger.info(f"Exported {len(ideas)} ideas to CSV: {output_path}")
        return output_file
