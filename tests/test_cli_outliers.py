"""
Tests for the outliers CLI commands.
"""

import json
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

from click.testing import CliRunner

from nichescout.cli import outliers as outliers_cli
from nichescout.cli.main import cli
from nichescout.core.config import Config
from nichescout.core.models import AnalysisResult
from nichescout.scrapers.youtube_data import YouTubeAPIError


def _published(days_ago):
    return (datetime.now(timezone.utc) - timedelta(days=days_ago)).strftime("%Y-%m-%dT%H:%M:%SZ")


def _write_inputs(tmp_path):
    videos = [
        {"video_id": "v1", "channel_id": "UC_a", "title": "Espresso Grinder Review",
         "published_at": _published(2), "view_count": 90_000, "like_count": 2000, "comment_count": 100,
         "duration": "PT11M", "duration_seconds": 660},
        {"video_id": "v2", "channel_id": "UC_a", "title": "Budget Espresso Setup",
         "published_at": _published(3), "view_count": 4_000, "like_count": 80, "comment_count": 5,
         "duration": "PT9M", "duration_seconds": 540},
        {"video_id": "v3", "channel_id": "UC_b", "title": "Latte Art",
         "published_at": _published(1), "view_count": 500},
    ]
    channels = {
        "UC_a": {"channel_id": "UC_a", "channel_title": "Coffee Lab", "subscriber_count": 10_000},
        "UC_b": {"channel_id": "UC_b", "channel_title": "Milk Bar", "subscriber_count": -1,
                 "hidden_subscriber_count": True},
    }
    videos_file = tmp_path / "videos.json"
    channels_file = tmp_path / "channels.json"
    videos_file.write_text(json.dumps(videos))
    channels_file.write_text(json.dumps(channels))
    return str(videos_file), str(channels_file)


class TestScoreCommand:
    def test_writes_json(self, tmp_path):
        videos_file, channels_file = _write_inputs(tmp_path)
        output = tmp_path / "out" / "result.json"

        result = CliRunner().invoke(cli, [
            "outliers", "score",
            "--videos", videos_file,
            "--channels", channels_file,
            "--output", str(output),
        ])

        assert result.exit_code == 0, result.output
        assert "Scored 3 videos" in result.output

        payload = json.loads(output.read_text())
        assert [v["snippet"]["video_id"] for v in payload["videos"]][0] == "v1"
        assert [v["rank"] for v in payload["videos"]] == [1, 2, 3]
        assert isinstance(payload["ideas"], list)

    def test_filters(self, tmp_path):
        videos_file, channels_file = _write_inputs(tmp_path)
        output = tmp_path / "result.json"

        result = CliRunner().invoke(cli, [
            "outliers", "score",
            "--videos", videos_file,
            "--channels", channels_file,
            "--min-views", "1000",
            "--max-ideas", "0",
            "-o", str(output),
        ])

        assert result.exit_code == 0, result.output
        payload = json.loads(output.read_text())
        assert {v["snippet"]["video_id"] for v in payload["videos"]} == {"v1", "v2"}
        assert payload["ideas"] == []

    def test_missing_file(self, tmp_path):
        result = CliRunner().invoke(cli, [
            "outliers", "score",
            "--videos", str(tmp_path / "nope.json"),
            "--channels", str(tmp_path / "nope.json"),
        ])
        assert result.exit_code == 2

    def test_invalid_records(self, tmp_path):
        videos_file = tmp_path / "videos.json"
        channels_file = tmp_path / "channels.json"
        videos_file.write_text(json.dumps([{"title": "no ids"}]))
        channels_file.write_text("{}")

        result = CliRunner().invoke(cli, [
            "outliers", "score", "--videos", str(videos_file), "--channels", str(channels_file),
        ])

        assert result.exit_code == 1
        assert "Scoring failed" in result.output


class TestAnalyzeCommand:
    def test_missing_api_key(self, monkeypatch):
        monkeypatch.setattr(Config, "YT_API_KEY", "")
        result = CliRunner().invoke(cli, ["outliers", "analyze", "--niche", "espresso"])
        assert result.exit_code == 1
        assert "YouTube API key is required" in result.output

    def test_runs_service(self, monkeypatch, tmp_path):
        service = MagicMock()
        service.analyze_niche.return_value = AnalysisResult(
            videos=[], ideas=[], quota_used=102, query="espresso", timestamp="2024-06-01T00:00:00+00:00"
        )
        monkeypatch.setattr(outliers_cli, "YouTubeDataClient", MagicMock())
        monkeypatch.setattr(outliers_cli, "OutlierService", MagicMock(return_value=service))

        result = CliRunner().invoke(cli, [
            "outliers", "analyze",
            "--niche", "espresso",
            "--region", "US", "--region", "GB",
            "--days", "30",
            "--export-dir", str(tmp_path),
        ])

        assert result.exit_code == 0, result.output
        assert "Quota used: 102" in result.output
        kwargs = service.analyze_niche.call_args.kwargs
        assert kwargs["regions"] == ["US", "GB"]
        assert kwargs["published_within_days"] == 30
        assert len(list(tmp_path.glob("outlier-videos-*.csv"))) == 1
        assert len(list(tmp_path.glob("video-ideas-*.csv"))) == 1

    def test_quota_exceeded(self, monkeypatch):
        service = MagicMock()
        service.analyze_niche.side_effect = YouTubeAPIError("quota", status_code=403, reason="quotaExceeded")
        monkeypatch.setattr(outliers_cli, "YouTubeDataClient", MagicMock())
        monkeypatch.setattr(outliers_cli, "OutlierService", MagicMock(return_value=service))

        result = CliRunner().invoke(cli, ["outliers", "analyze", "--niche", "espresso"])

        assert result.exit_code == 1
        assert "quota exceeded" in result.output


class TestChannelCommand:
    def test_not_found(self, monkeypatch):
        service = MagicMock()
        service.spy_channel.side_effect = YouTubeAPIError("Channel not found.", status_code=404)
        monkeypatch.setattr(outliers_cli, "YouTubeDataClient", MagicMock())
        monkeypatch.setattr(outliers_cli, "OutlierService", MagicMock(return_value=service))

        result = CliRunner().invoke(cli, ["outliers", "channel", "--channel", "@nobody"])

        assert result.exit_code == 1
        assert "Channel not found." in result.output
