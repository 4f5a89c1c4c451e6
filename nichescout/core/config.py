"""
Configuration management for NicheScout
"""

import os
from typing import Optional

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class Config:
    """Application configuration"""

    # YouTube Data API
    YT_API_KEY: str = os.getenv('YT_API_KEY', '')
    REQUEST_TIMEOUT_SECONDS: int = int(os.getenv('REQUEST_TIMEOUT_SECONDS', '30'))

    # Analysis defaults
    DEFAULT_MAX_PAGES: int = int(os.getenv('MAX_PAGES', '3'))
    DEFAULT_PUBLISHED_WITHIN_DAYS: int = int(os.getenv('PUBLISHED_WITHIN_DAYS', '14'))
    DEFAULT_MIN_VIEWS: int = int(os.getenv('MIN_VIEWS', '1000'))
    DEFAULT_REGION: str = os.getenv('REGION', 'US')
    DEFAULT_TOP_N: int = int(os.getenv('TOP_N', '50'))
    DEFAULT_MAX_IDEAS: int = int(os.getenv('MAX_IDEAS', '9'))

    # Channel spy looks back one year of uploads
    CHANNEL_SPY_DAYS: int = 365

    @classmethod
    def validate(cls) -> bool:
        """Validate required configuration"""
        required = {
            'YT_API_KEY': cls.YT_API_KEY,
        }

        missing = [k for k, v in required.items() if not v]

        if missing:
            raise ValueError(f"Missing required configuration: {', '.join(missing)}")

        return True

    @classmethod
    def get(cls, key: str, default: Optional[str] = None) -> Optional[str]:
        """Get configuration value"""
        return getattr(cls, key, default)

    @classmethod
    def resolve_api_key(cls, api_key: Optional[str] = None) -> str:
        """
        Pick the YouTube API key for a request.

        An explicitly passed key wins; otherwise the environment key is used.

        Raises:
            ValueError: If neither is set
        """
        key = (api_key or '').strip() or cls.YT_API_KEY
        if not key:
            raise ValueError("YouTube API key is required (pass --api-key or set YT_API_KEY)")
        return key
