"""
Data source clients
"""

from .youtube_data import YouTubeDataClient, YouTubeAPIError

__all__ = ['YouTubeDataClient', 'YouTubeAPIError']
