# ccperf/compare/comparator.py
from __future__ import annotations

import math
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from ccperf.config.compare_config import CompareConfig
from ccperf.eval.base import Evaluator, StochasticEvaluator
from ccperf.measures.catalog import MeasureType
from ccperf.stats.confidence import check_level
from ccperf.utils.capture import try_capture
from ccperf.utils.logger import logs

Cells = List[Tuple[int, int]]
Differences = Dict[MeasureType, Cells]

MISSING = "---"


def _capitalize(name: str) -> str:
    return name[:1].upper() + name[1:]


class ResultComparator:
    """
    ResultComparator

    Compares the point estimates (or confidence intervals) of two
    evaluators measure by measure and cell by cell.

      - common_measures(): measures both systems expose with equal shapes;
        every mismatch becomes a message, none is fatal
      - differing_cells(): exact (NaN == NaN) or |v1 - v2| > tolerance
      - non_overlapping_intervals(): upper1 + slack < lower2 or
        upper2 + slack < lower1
      - equals*(): True iff nothing differs, otherwise `report` holds
        one table per differing measure
    """

    def __init__(self, config: Optional[CompareConfig] = None):
        self.config = config or CompareConfig()
        self.messages: List[str] = []
        self.report: str = ""

    def _message(self, msg: str) -> None:
        self.messages.append(msg)
        logs.warning(f"[ResultComparator] {msg}")

    # ---------------- measure matching ----------------
    def common_measures(self, e1: Evaluator, e2: Evaluator) -> List[MeasureType]:
        supported2 = set(e2.supported_measures())
        common: List[MeasureType] = []

        for m in e1.supported_measures():
            if m not in supported2:
                self._message(
                    f"First system has performance measure {m.name} while second system does not"
                )
                continue
            r1, c1 = np.shape(e1.point_estimate(m))
            r2, c2 = np.shape(e2.point_estimate(m))
            if r1 != r2:
                self._message(
                    f"For {m.name}, the first system gives matrices of results containing "
                    f"{r1} rows while the second system produces matrices with {r2} rows"
                )
                continue
            if c1 != c2:
                self._message(
                    f"For {m.name}, the first system gives matrices of results containing "
                    f"{c1} columns while the second system produces matrices with {c2} columns"
                )
                continue

            for r in range(r1):
                n1, n2 = m.row_name(e1.info, r), m.row_name(e2.info, r)
                if n1 != n2:
                    self._message(f"Row with index {r} has name {n1} in system 1 but name {n2} in system 2")
            for c in range(c1):
                n1, n2 = m.column_name(e1.info, c), m.column_name(e2.info, c)
                if n1 != n2:
                    self._message(f"Column with index {c} has name {n1} in system 1 but name {n2} in system 2")
            common.append(m)

        supported1 = set(e1.supported_measures())
        for m in e2.supported_measures():
            if m not in supported1:
                self._message(
                    f"First system does not have performance measure {m.name} while second system does"
                )
        return common

    # ---------------- cell comparison ----------------
    def differing_cells(
        self,
        e1: Evaluator,
        e2: Evaluator,
        measures: Sequence[MeasureType],
        tolerance: Optional[float] = None,
    ) -> Differences:
        out: Differences = {}
        for m in measures:
            v1 = np.asarray(e1.point_estimate(m), dtype=float)
            v2 = np.asarray(e2.point_estimate(m), dtype=float)
            if tolerance is None:
                diff = (v1 != v2) & ~(np.isnan(v1) & np.isnan(v2))
            else:
                diff = np.abs(v2 - v1) > tolerance
            cells = [(int(r), int(c)) for r, c in zip(*np.nonzero(diff))]
            if cells:
                out[m] = cells
        return out

    def non_overlapping_intervals(
        self,
        e1: StochasticEvaluator,
        e2: StochasticEvaluator,
        level: float,
        slack: float,
        measures: Sequence[MeasureType],
    ) -> Differences:
        check_level(level)
        out: Differences = {}
        for m in measures:
            ci1 = try_capture(e1.confidence_interval, m, level)
            ci2 = try_capture(e2.confidence_interval, m, level)
            if ci1 is None or ci2 is None:
                logs.debug(f"[ResultComparator] no confidence interval for {m.name}, skipped")
                continue
            (l1, u1), (l2, u2) = ci1, ci2
            apart = (u1 + slack < l2) | (u2 + slack < l1)
            cells = [(int(r), int(c)) for r, c in zip(*np.nonzero(apart))]
            if cells:
                out[m] = cells
        return out

    # ---------------- report ----------------
    def _fmt(self, value: Optional[float]) -> str:
        if value is None or math.isnan(value):
            return MISSING
        return f"{value:.{self.config.num_digits}f}"

    def _label(self, e: Evaluator, m: MeasureType, r: int, c: int, columns: int) -> str:
        label = _capitalize(m.row_name(e.info, r))
        if columns > 1:
            label += f", {m.column_name(e.info, c)}"
        return label

    def _stats(self, e: Evaluator, m: MeasureType, level: float) -> Tuple[np.ndarray, Optional[np.ndarray], Optional[Tuple[np.ndarray, np.ndarray]]]:
        avg = np.asarray(e.point_estimate(m), dtype=float)
        if not isinstance(e, StochasticEvaluator):
            return avg, None, None
        var = try_capture(e.variance, m)
        ci = try_capture(e.confidence_interval, m, level)
        return avg, (np.sqrt(var) if var is not None else None), ci

    def format_differences(
        self,
        e1: Evaluator,
        e2: Evaluator,
        differences: Differences,
        level: Optional[float] = None,
    ) -> str:
        """One table per measure; statistics columns when a level is given."""
        blocks: List[str] = []
        for m, cells in differences.items():
            columns = np.shape(e1.point_estimate(m))[1]
            index = [self._label(e1, m, r, c, columns) for r, c in cells]

            if level is None:
                v1 = np.asarray(e1.point_estimate(m), dtype=float)
                v2 = np.asarray(e2.point_estimate(m), dtype=float)
                frame = pd.DataFrame(
                    {
                        "Avg1": [self._fmt(v1[r, c]) for r, c in cells],
                        "Avg2": [self._fmt(v2[r, c]) for r, c in cells],
                    },
                    index=index,
                )
            else:
                data: Dict[str, List[str]] = {}
                for tag, e in (("1", e1), ("2", e2)):
                    avg, std, ci = self._stats(e, m, level)
                    data[f"Avg{tag}"] = [self._fmt(avg[r, c]) for r, c in cells]
                    data[f"StdDev{tag}"] = [
                        self._fmt(std[r, c]) if std is not None else MISSING for r, c in cells
                    ]
                    data[f"ConfInt{tag}"] = [
                        self._interval(ci, r, c) for r, c in cells
                    ]
                frame = pd.DataFrame(data, index=index)

            frame.index.name = m.row_title
            blocks.append(f"{m.description}\n{frame.to_string()}")
        return "\n\n".join(blocks)

    def _interval(self, ci, r: int, c: int) -> str:
        if ci is None:
            return MISSING
        lower, upper = float(ci[0][r, c]), float(ci[1][r, c])
        if math.isnan(lower) or math.isnan(upper):
            return MISSING
        return f"[{self._fmt(lower)}, {self._fmt(upper)}]"

    # ---------------- predicates ----------------
    def equals(self, e1: Evaluator, e2: Evaluator) -> bool:
        return self.equals_with_tolerance(e1, e2, None)

    def equals_with_tolerance(self, e1: Evaluator, e2: Evaluator, tolerance: Optional[float]) -> bool:
        measures = self.common_measures(e1, e2)
        diffs = self.differing_cells(e1, e2, measures, tolerance)
        self.report = self.format_differences(e1, e2, diffs) if diffs else ""
        return not diffs

    def equals_statistically(
        self,
        e1: StochasticEvaluator,
        e2: StochasticEvaluator,
        level: Optional[float] = None,
        slack: Optional[float] = None,
    ) -> bool:
        level = self.config.confidence_level if level is None else level
        slack = self.config.slack if slack is None else slack
        measures = self.common_measures(e1, e2)
        diffs = self.non_overlapping_intervals(e1, e2, level, slack, measures)
        self.report = self.format_differences(e1, e2, diffs, level) if diffs else ""
        return not diffs
