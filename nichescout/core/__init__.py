"""
Core module - Configuration and data models
"""

from .config import Config

__all__ = ['Config']
