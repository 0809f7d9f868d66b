# ccperf/eval/report.py
from __future__ import annotations

from typing import TYPE_CHECKING, List

import numpy as np
import pandas as pd

from ccperf.measures.catalog import MeasureType
from ccperf.utils.capture import try_capture

if TYPE_CHECKING:
    from ccperf.eval.base import Evaluator


def measure_frame(evaluator: "Evaluator", m: MeasureType) -> pd.DataFrame:
    """Point estimate of one measure, labelled with row and column names."""
    info = evaluator.info
    values = np.asarray(evaluator.point_estimate(m), dtype=float)
    rows, columns = values.shape
    return pd.DataFrame(
        values,
        index=[m.row_name(info, r) for r in range(rows)],
        columns=[m.column_name(info, c) or m.description for c in range(columns)],
    )


def _selected(evaluator: "Evaluator") -> List[MeasureType]:
    wanted = {n.upper() for n in evaluator.report_config.printed_stats}
    measures = sorted(evaluator.supported_measures(), key=lambda m: m.name)
    if not wanted:
        return measures
    return [m for m in measures if m.name in wanted]


def format_statistics(evaluator: "Evaluator") -> str:
    """
    Plain-text report: one table per supported measure.
    Stochastic evaluators add a half-width table unless the report
    config asks for averages only.
    """
    from ccperf.eval.base import StochasticEvaluator

    report = evaluator.report_config
    fmt = f"{{:.{report.num_digits}f}}".format
    blocks: List[str] = []

    for m in _selected(evaluator):
        frame = try_capture(measure_frame, evaluator, m)
        if frame is None:
            continue
        frame = frame.iloc[:, : report.max_columns]
        title = f"{m.description} ({m.row_title or '-'} x {m.column_title or '-'})"
        blocks.append(f"{title}\n{frame.to_string(float_format=fmt, na_rep='---')}")

        if isinstance(evaluator, StochasticEvaluator) and not report.default_only_averages:
            ci = try_capture(evaluator.confidence_interval, m, evaluator.confidence_level)
            if ci is None:
                continue
            radius = ((ci[1] - ci[0]) / 2.0)[:, : report.max_columns]
            hw = pd.DataFrame(radius, index=frame.index, columns=frame.columns)
            blocks.append(
                f"  +/- ({evaluator.confidence_level:.0%} confidence)\n"
                f"{hw.to_string(float_format=fmt, na_rep='---')}"
            )

    return "\n\n".join(blocks)
