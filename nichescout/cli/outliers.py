"""
Outlier CLI Commands

Commands for finding outlier videos in a niche or channel and turning
them into video ideas.
"""

import json
import logging
from pathlib import Path
from typing import List, Optional, Tuple

import click

from ..core.config import Config
from ..core.models import ChannelRecord, ScoredVideo, ScoringFilters, VideoIdea, VideoRecord
from ..generation.csv_exporter import CSVExporter
from ..scoring.idea_generator import generate_ideas
from ..scoring.outlier_scorer import score_videos
from ..scrapers.youtube_data import YouTubeAPIError, YouTubeDataClient
from ..services.outlier_service import NoVideosFoundError, OutlierService


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="[%(asctime)s] %(levelname)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)

logger = logging.getLogger(__name__)


def _echo_videos(videos: List[ScoredVideo]) -> None:
    click.echo(f"\n🏆 Top Outliers ({len(videos)})\n")
    for video in videos:
        ratio = video.scores.views_to_sub_ratio
        ratio_str = f"{ratio:.1f}x subs" if ratio is not None else "subs hidden"
        click.echo(
            f"{video.rank:>3}. [{video.grade:<2}] {video.scores.composite:>5.2f}  "
            f"{video.snippet.title[:60]}"
        )
        click.echo(
            f"      {video.snippet.channel_title} | {video.stats.view_count:,} views | "
            f"{video.scores.velocity:,.0f}/day | {ratio_str} | "
            f"{video.scores.engagement:.2f}% engagement"
        )


def _echo_ideas(ideas: List[VideoIdea]) -> None:
    if not ideas:
        click.echo("\n⚠️  No ideas generated")
        return
    click.echo(f"\n💡 Video Ideas ({len(ideas)})\n")
    for idea in ideas:
        click.echo(f"{idea.id}. [{idea.type}] {idea.suggested_title}")
        click.echo(f"   {idea.reasoning}")
        click.echo(
            f"   Length: {idea.optimal_length} | Competition: {idea.competition} | "
            f"Avg score: {idea.avg_score:.1f}"
        )
        if idea.common_tags:
            click.echo(f"   Tags: {', '.join(idea.common_tags)}")
        click.echo()


def _export(export_dir: Optional[str], videos: List[ScoredVideo], ideas: Optional[List[VideoIdea]] = None) -> None:
    if not export_dir:
        return
    exporter = CSVExporter()
    videos_path = Path(export_dir) / CSVExporter.default_filename("outlier-videos")
    exporter.export_videos(videos, str(videos_path))
    click.echo(f"📁 Videos exported to {videos_path}")
    if ideas is not None:
        ideas_path = Path(export_dir) / CSVExporter.default_filename("video-ideas")
        exporter.export_ideas(ideas, str(ideas_path))
        click.echo(f"📁 Ideas exported to {ideas_path}")


def _fail(action: str, error: Exception) -> None:
    if isinstance(error, YouTubeAPIError) and error.is_quota_exceeded:
        click.echo("\n❌ YouTube API quota exceeded. Try again tomorrow or use a different API key.", err=True)
    elif isinstance(error, YouTubeAPIError) and error.is_invalid_key:
        click.echo("\n❌ Invalid YouTube API key. Check YT_API_KEY or --api-key.", err=True)
    else:
        click.echo(f"\n❌ {action} failed: {error}", err=True)
    logger.exception(error)
    raise click.Abort()


@click.group(name="outliers")
def outliers_group():
    """Find outlier videos and generate video ideas"""
    pass


@outliers_group.command(name="analyze")
@click.option('--niche', required=True, help='Niche or topic to search (e.g., "ai agents")')
@click.option('--pages', default=Config.DEFAULT_MAX_PAGES, type=int, help='Search pages, 50 results each (default: 3)')
@click.option('--days', default=Config.DEFAULT_PUBLISHED_WITHIN_DAYS, type=int, help='Only videos from last N days (default: 14)')
@click.option('--min-views', default=Config.DEFAULT_MIN_VIEWS, type=int, help='Minimum view count (default: 1000)')
@click.option('--region', 'regions', multiple=True, help='Region code, repeatable (default: US)')
@click.option('--include-shorts', is_flag=True, help='Include videos of 60s or less')
@click.option('--top-n', default=Config.DEFAULT_TOP_N, type=int, help='Max videos to return (default: 50)')
@click.option('--max-ideas', default=Config.DEFAULT_MAX_IDEAS, type=int, help='Max ideas to generate (default: 9)')
@click.option('--api-key', help='YouTube Data API key (default: YT_API_KEY)')
@click.option('--export-dir', help='Write videos and ideas CSVs to this directory')
def analyze_niche(
    niche: str,
    pages: int,
    days: int,
    min_views: int,
    regions: Tuple[str, ...],
    include_shorts: bool,
    top_n: int,
    max_ideas: int,
    api_key: Optional[str],
    export_dir: Optional[str]
):
    """
    Find outlier videos in a niche and generate video ideas

    Examples:
        nichescout outliers analyze --niche "ai agents"

        nichescout outliers analyze --niche "home espresso" --days 30 --region US --region GB

        nichescout outliers analyze --niche "budget travel" --export-dir ./output
    """
    try:
        click.echo(f"\n{'='*60}")
        click.echo(f"🔍 Outlier Analysis: {niche}")
        click.echo(f"{'='*60}\n")

        service = OutlierService(YouTubeDataClient(api_key))
        result = service.analyze_niche(
            niche=niche,
            max_pages=pages,
            published_within_days=days,
            min_views=min_views,
            regions=list(regions),
            include_shorts=include_shorts,
            top_n=top_n,
            max_ideas=max_ideas,
        )

        if not result.videos:
            click.echo("⚠️  No videos passed the filters")
            click.echo("\n💡 Try:")
            click.echo("   - Lowering --min-views")
            click.echo("   - Expanding --days")
            click.echo("   - Adding --include-shorts")
        else:
            _echo_videos(result.videos)
            _echo_ideas(result.ideas)

        _export(export_dir, result.videos, result.ideas)

        click.echo(f"\n📊 Quota used: {result.quota_used}")
        click.echo(f"{'='*60}\n")

    except NoVideosFoundError as e:
        click.echo(f"\n⚠️  {e}", err=True)
        raise click.Abort()
    except Exception as e:
        _fail("Analysis", e)


@outliers_group.command(name="channel")
@click.option('--channel', 'channel_input', required=True, help='Channel URL, @handle or channel ID')
@click.option('--top-n', default=Config.DEFAULT_TOP_N, type=int, help='Max videos to return (default: 50)')
@click.option('--api-key', help='YouTube Data API key (default: YT_API_KEY)')
@click.option('--export-dir', help='Write the videos CSV to this directory')
def spy_channel(channel_input: str, top_n: int, api_key: Optional[str], export_dir: Optional[str]):
    """
    Rank a channel's recent uploads against each other

    Example:
        nichescout outliers channel --channel @mkbhd
    """
    try:
        service = OutlierService(YouTubeDataClient(api_key))
        result = service.spy_channel(channel_input, top_n=top_n)

        click.echo(f"\n{'='*60}")
        click.echo(f"🕵️  {result.channel.title}")
        click.echo(f"{'='*60}")
        click.echo(f"Subscribers: {result.channel.subscriber_count:,}")
        click.echo(f"Videos: {result.channel.video_count:,}")

        _echo_videos(result.videos)
        _export(export_dir, result.videos)

        click.echo(f"\n📊 Quota used: {result.quota_used}")

    except NoVideosFoundError as e:
        click.echo(f"\n⚠️  {e}", err=True)
        raise click.Abort()
    except Exception as e:
        _fail("Channel analysis", e)


@outliers_group.command(name="score")
@click.option('--videos', 'videos_file', required=True, type=click.Path(exists=True, dir_okay=False), help='JSON list of video records')
@click.option('--channels', 'channels_file', required=True, type=click.Path(exists=True, dir_okay=False), help='JSON object of channel records keyed by channel ID')
@click.option('--min-views', default=0, type=int, help='Minimum view count (default: 0)')
@click.option('--max-subs', default=0, type=int, help='Maximum channel subscribers, 0 = unlimited (default: 0)')
@click.option('--days', default=Config.DEFAULT_PUBLISHED_WITHIN_DAYS, type=int, help='Only videos from last N days (default: 14)')
@click.option('--include-shorts', is_flag=True, help='Include videos of 60s or less')
@click.option('--top-n', default=Config.DEFAULT_TOP_N, type=int, help='Max videos to return (default: 50)')
@click.option('--max-ideas', default=Config.DEFAULT_MAX_IDEAS, type=int, help='Max ideas to generate (default: 9)')
@click.option('--output', '-o', help='Write JSON result to this file instead of stdout')
def score_file(
    videos_file: str,
    channels_file: str,
    min_views: int,
    max_subs: int,
    days: int,
    include_shorts: bool,
    top_n: int,
    max_ideas: int,
    output: Optional[str]
):
    """
    Score previously fetched records offline (no API calls)

    Example:
        nichescout outliers score --videos videos.json --channels channels.json -o result.json
    """
    try:
        with open(videos_file, encoding='utf-8') as f:
            videos = [VideoRecord.model_validate(v) for v in json.load(f)]
        with open(channels_file, encoding='utf-8') as f:
            channels = {
                channel_id: ChannelRecord.model_validate(record)
                for channel_id, record in json.load(f).items()
            }

        scored = score_videos(videos, channels, ScoringFilters(
            min_views=min_views,
            max_channel_subs=max_subs,
            published_after_days=days,
            include_shorts=include_shorts,
            top_n=top_n,
        ))
        ideas = generate_ideas(scored, max_ideas)

        payload = json.dumps({
            "videos": [v.model_dump() for v in scored],
            "ideas": [i.model_dump() for i in ideas],
        }, indent=2, ensure_ascii=False)

        if output:
            output_file = Path(output)
            output_file.parent.mkdir(parents=True, exist_ok=True)
            output_file.write_text(payload, encoding='utf-8')
            click.echo(f"✅ Scored {len(scored)} videos, {len(ideas)} ideas -> {output}")
        else:
            click.echo(payload)

    except Exception as e:
        _fail("Scoring", e)


# Export the command group
outliers = outliers_group
