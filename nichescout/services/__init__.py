"""
Services layer for NicheScout.

Wires the YouTube data client to the scoring engine.
"""

from .outlier_service import OutlierService, NoVideosFoundError

__all__ = ['OutlierService', 'NoVideosFoundError']
