# ccperf/measures/traffic.py
from __future__ import annotations

import numpy as np

from ccperf.measures.catalog import MeasureType


def agent_to_contact_traffic(evaluator) -> np.ndarray:
    """
    Share of each contact type in the work of each agent group, from the
    SERVEDRATES point estimate.

    Shape I' x K (I' = I + 1 when I > 1, the last row covering all
    groups); entry (i, k) = sr[k, i] / sr[-1, i]. All ones when K == 1.
    """
    sr = evaluator.point_estimate(MeasureType.SERVEDRATES)
    k_count = evaluator.info.num_contact_types
    i_count = evaluator.info.num_agent_groups
    n_rows = i_count + 1 if i_count > 1 else i_count

    if k_count == 1:
        return np.ones((n_rows, k_count))

    with np.errstate(divide="ignore", invalid="ignore"):
        return (sr[:k_count, :n_rows] / sr[-1, :n_rows]).T


def contact_to_agent_traffic(evaluator) -> np.ndarray:
    """
    Routing share of each contact type towards each agent group.

    Shape K' x I (K' = K + 1 when K > 1); entry (k, i) = sr[k, i] / sr[k, -1].
    All ones when I == 1.
    """
    sr = evaluator.point_estimate(MeasureType.SERVEDRATES)
    k_count = evaluator.info.num_contact_types
    i_count = evaluator.info.num_agent_groups
    n_rows = k_count + 1 if k_count > 1 else k_count

    if i_count == 1:
        return np.ones((n_rows, i_count))

    with np.errstate(divide="ignore", invalid="ignore"):
        return sr[:n_rows, :i_count] / sr[:n_rows, -1:]
