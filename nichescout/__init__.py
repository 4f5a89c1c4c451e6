"""
NicheScout - Outlier Video Discovery and Content Idea Generation

Finds videos that outperform their niche on YouTube, grades them with a
composite z-score, and turns the winners into structured video ideas.
"""

__version__ = "0.1.0"
__author__ = "NicheScout Team"
