"""
Statistical helpers for outlier scoring.

Provides pure functions with no side effects.
"""

from typing import List, Sequence

import numpy as np

from .constants import GRADES, ZSCORE_CLAMP


def compute_zscores(values: Sequence[float]) -> List[float]:
    """
    Population z-scores using the sample standard deviation (ddof=1).

    Args:
        values: Values to normalize

    Returns:
        Z-scores in input order, clamped to [-3, 3]. All zeros when there
        are fewer than two values or no spread.

    Example:
        >>> compute_zscores([1, 2, 3])
        [-1.0, 0.0, 1.0]
    """
    n = len(values)
    if n < 2:
        return [0.0] * n

    scores = np.asarray(values, dtype=float)

    # Identical values can leave float noise in std, so check spread directly
    if np.all(scores == scores[0]):
        return [0.0] * n

    std = np.std(scores, ddof=1)
    if std == 0:
        return [0.0] * n

    z_scores = (scores - np.mean(scores)) / std
    return np.clip(z_scores, -ZSCORE_CLAMP, ZSCORE_CLAMP).tolist()


def assign_grade(score: float) -> str:
    """
    Map a composite score to an outlier grade.

    >= 2.0 A+, >= 1.5 A, >= 1.0 B+, >= 0.5 B, anything else C.
    """
    for threshold, grade in GRADES:
        if score >= threshold:
            return grade
    return GRADES[-1][1]
