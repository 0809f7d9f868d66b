# ccperf/stats/confidence.py
from __future__ import annotations

from typing import Tuple

import numpy as np
from scipy.stats import norm, t

from ccperf.measures.estimation import EstimationKind


def check_level(level: float) -> float:
    level = float(level)
    if not 0.0 < level < 1.0:
        raise ValueError(f"Confidence level must be in (0, 1), got {level}")
    return level


def half_width(
    variance,
    counts,
    level: float,
    estimation: EstimationKind,
) -> np.ndarray:
    """
    Per-cell half-width, a = (level + 1) / 2:

      FUNCTION_OF_EXPECTATIONS  z(a) * sqrt(var / n)        (delta method)
      otherwise                 t(n - 1, a) * sqrt(var / n), NaN when n < 2
    """
    a = 0.5 * (check_level(level) + 1.0)
    var = np.asarray(variance, dtype=float)
    n = np.asarray(counts, dtype=float)
    if var.shape != n.shape:
        raise ValueError(f"variance shape {var.shape} does not match counts shape {n.shape}")

    with np.errstate(divide="ignore", invalid="ignore"):
        se = np.sqrt(var / n)

    if estimation == EstimationKind.FUNCTION_OF_EXPECTATIONS:
        return np.where(n >= 1, norm.ppf(a) * se, np.nan)

    df = np.where(n >= 2, n - 1, 1)
    return np.where(n >= 2, t.ppf(a, df) * se, np.nan)


def confidence_interval(
    estimate,
    variance,
    counts,
    level: float,
    estimation: EstimationKind,
) -> Tuple[np.ndarray, np.ndarray]:
    """(lower, upper) matrices with the shape of the point estimate."""
    center = np.asarray(estimate, dtype=float)
    radius = half_width(variance, counts, level, estimation)
    if radius.shape != center.shape:
        raise ValueError(
            f"point estimate shape {center.shape} does not match variance shape {radius.shape}"
        )
    return center - radius, center + radius
