# ccperf/results/sim_results.py
from __future__ import annotations

from typing import Dict, List, Mapping, Optional, Tuple

import numpy as np

from ccperf.config.report_config import ReportConfig
from ccperf.eval.base import ObservationSource, StochasticEvaluator
from ccperf.eval.eval_info import EvalInfo
from ccperf.measures.catalog import MeasureType
from ccperf.measures.estimation import EstimationKind
from ccperf.model.info import CenterInfo
from ccperf.results.document import ObservationCell, ResultsDocument
from ccperf.results.eval_results import (
    EvalResults,
    copy_info,
    decode_measures,
    from_matrix,
)
from ccperf.stats.confidence import confidence_interval
from ccperf.stats.tally import TallyMatrix
from ccperf.utils.capture import try_capture
from ccperf.utils.errors import (
    InvalidStateError,
    NotFoundError,
    UnsupportedOperationError,
)
from ccperf.utils.logger import logs

Cell = Tuple[int, int]


class SimResults(EvalResults, StochasticEvaluator, ObservationSource):
    """
    SimResults (SNAPSHOT)

    Point estimates plus the per-cell sample statistics of a stochastic
    evaluator. Each statistic is captured independently; a measure the
    source has no variance for simply has no variance here.
    """

    KIND = "sim"

    def __init__(
        self,
        info: CenterInfo,
        measures: Mapping[MeasureType, np.ndarray],
        *,
        steps: int = 0,
        variance: Optional[Mapping[MeasureType, np.ndarray]] = None,
        min: Optional[Mapping[MeasureType, np.ndarray]] = None,
        max: Optional[Mapping[MeasureType, np.ndarray]] = None,
        counts: Optional[Mapping[MeasureType, np.ndarray]] = None,
        observations: Optional[Mapping[MeasureType, Mapping[Cell, List[float]]]] = None,
        estimation: Optional[Mapping[MeasureType, EstimationKind]] = None,
        report: Optional[ReportConfig] = None,
        eval_info: Optional[EvalInfo] = None,
    ):
        super().__init__(info, measures, report=report, eval_info=eval_info)
        self._steps = steps
        self._variance = dict(variance or {})
        self._min = dict(min or {})
        self._max = dict(max or {})
        self._counts = dict(counts or {})
        self._estimation = dict(estimation or {})
        self._observations: Dict[MeasureType, Dict[Cell, List[float]]] = {
            m: {cell: list(v) for cell, v in cells.items()}
            for m, cells in (observations or {}).items()
        }

    # ---------------- capture ----------------
    @classmethod
    def capture(cls, evaluator: StochasticEvaluator) -> "SimResults":
        if not isinstance(evaluator, StochasticEvaluator):
            raise TypeError(f"[SimResults] {type(evaluator).__name__} is not stochastic")
        info = copy_info(evaluator.info)
        measures: Dict[MeasureType, np.ndarray] = {}
        variance: Dict[MeasureType, np.ndarray] = {}
        mins: Dict[MeasureType, np.ndarray] = {}
        maxs: Dict[MeasureType, np.ndarray] = {}
        counts: Dict[MeasureType, np.ndarray] = {}
        estimation: Dict[MeasureType, EstimationKind] = {}
        observations: Dict[MeasureType, Dict[Cell, List[float]]] = {}

        for m in evaluator.supported_measures():
            measures[m] = np.array(evaluator.point_estimate(m), dtype=float)
            estimation[m] = evaluator.estimation_kind(m)
            for target, fn in ((variance, evaluator.variance), (mins, evaluator.min), (maxs, evaluator.max)):
                value = try_capture(fn, m)
                if value is not None:
                    target[m] = np.array(value, dtype=float)
            tally = try_capture(evaluator.tally_matrix, m)
            stored = try_capture(evaluator.counts, m) if isinstance(evaluator, SimResults) else None
            if stored is not None:
                counts[m] = stored
            elif tally is not None:
                counts[m] = np.asarray(tally.counts(), dtype=float)
            elif m in variance:
                counts[m] = np.full(measures[m].shape, float(evaluator.completed_steps))

            if isinstance(evaluator, ObservationSource):
                cells: Dict[Cell, List[float]] = {}
                rows, columns = measures[m].shape
                for r in range(rows):
                    for c in range(columns):
                        obs = try_capture(evaluator.observations, m, r, c)
                        if obs is not None:
                            cells[(r, c)] = list(obs)
                if cells:
                    observations[m] = cells

        res = cls(
            info,
            measures,
            steps=evaluator.completed_steps,
            variance=variance,
            min=mins,
            max=maxs,
            counts=counts,
            observations=observations,
            estimation=estimation,
            report=evaluator.report_config.model_copy(deep=True),
            eval_info=evaluator.eval_info.copy(),
        )
        logs.debug(
            f"[SimResults] captured {len(measures)} measures, "
            f"{len(variance)} with variance, {len(observations)} with observations"
        )
        return res

    # ---------------- statistics ----------------
    def _lookup(self, table: Mapping[MeasureType, np.ndarray], m: MeasureType, what: str) -> np.ndarray:
        try:
            return table[m].copy()
        except KeyError:
            raise NotFoundError(f"[SimResults] no {what} stored for {m.name}") from None

    def variance(self, m: MeasureType) -> np.ndarray:
        return self._lookup(self._variance, m, "variance")

    def min(self, m: MeasureType) -> np.ndarray:
        return self._lookup(self._min, m, "minimum")

    def max(self, m: MeasureType) -> np.ndarray:
        return self._lookup(self._max, m, "maximum")

    def counts(self, m: MeasureType) -> np.ndarray:
        return self._lookup(self._counts, m, "observation counts")

    def confidence_interval(self, m: MeasureType, level: float) -> Tuple[np.ndarray, np.ndarray]:
        return confidence_interval(
            self.point_estimate(m), self.variance(m), self.counts(m), level, self.estimation_kind(m)
        )

    def estimation_kind(self, m: MeasureType) -> EstimationKind:
        """Kind the source used for its intervals; the measure's own kind if unrecorded."""
        return self._estimation.get(m, m.estimation)

    @property
    def completed_steps(self) -> int:
        return self._steps

    def tally_matrix(self, m: MeasureType) -> TallyMatrix:
        cells = self._observations.get(m)
        rows, columns = m.shape(self._info)
        if not cells or len(cells) != rows * columns:
            raise NotFoundError(f"[SimResults] observations of {m.name} were not stored")
        return TallyMatrix.from_observations(
            [[cells[(r, c)] for c in range(columns)] for r in range(rows)], name=m.name
        )

    # ---------------- observations ----------------
    def observation_count(self, m: MeasureType, row: int, column: int) -> int:
        return len(self.observations(m, row, column))

    def observations(self, m: MeasureType, row: int, column: int) -> List[float]:
        try:
            return list(self._observations[m][(row, column)])
        except KeyError:
            raise NotFoundError(
                f"[SimResults] no observations stored for {m.name}[{row}, {column}]"
            ) from None

    # ---------------- streams ----------------
    def _no_streams(self, *_):
        raise UnsupportedOperationError("[SimResults] stored results have no random streams")

    new_seeds = _no_streams
    reset_start_stream = _no_streams
    reset_start_substream = _no_streams
    reset_next_substream = _no_streams

    @property
    def auto_reset_start_stream(self) -> bool:
        return False

    @auto_reset_start_stream.setter
    def auto_reset_start_stream(self, value: bool) -> None:
        self._no_streams()

    @property
    def sequential_sampling_each_evaluate(self) -> bool:
        return False

    @sequential_sampling_each_evaluate.setter
    def sequential_sampling_each_evaluate(self, value: bool) -> None:
        self._no_streams()

    # ---------------- consistency ----------------
    def validate(self) -> None:
        super().validate()
        for section, table in (
            ("variance", self._variance),
            ("minimum", self._min),
            ("maximum", self._max),
            ("count", self._counts),
        ):
            if table is None:
                raise InvalidStateError(f"[SimResults] missing {section} map")
            for m, values in table.items():
                self._check_matrix(section, m, values)
        rows_cols = {m: m.shape(self._info) for m in self._observations}
        for m, cells in self._observations.items():
            rows, columns = rows_cols[m]
            for r, c in cells:
                if not (0 <= r < rows and 0 <= c < columns):
                    raise InvalidStateError(
                        f"[SimResults] observation cell ({r}, {c}) outside {m.name} shape {(rows, columns)}"
                    )
        if self._steps < 0:
            raise InvalidStateError(f"[SimResults] negative number of completed steps: {self._steps}")

    # ---------------- persistence ----------------
    def _document_fields(self) -> Dict:
        fields = super()._document_fields()
        fields.update(
            steps=self._steps,
            variance={m.name: from_matrix(v) for m, v in self._variance.items()},
            min={m.name: from_matrix(v) for m, v in self._min.items()},
            max={m.name: from_matrix(v) for m, v in self._max.items()},
            counts={m.name: from_matrix(v) for m, v in self._counts.items()},
            estimation={m.name: kind for m, kind in self._estimation.items()},
            observations={
                m.name: [
                    ObservationCell(row=r, column=c, values=values)
                    for (r, c), values in sorted(cells.items())
                ]
                for m, cells in self._observations.items()
            },
        )
        return fields

    @classmethod
    def from_document(cls, doc: ResultsDocument) -> "SimResults":
        info = CenterInfo.from_dict(doc.info)
        observations: Dict[MeasureType, Dict[Cell, List[float]]] = {}
        for name, cells in doc.observations.items():
            try:
                m = MeasureType.lookup(name)
            except NotFoundError:
                logs.warning(f"[Results] skipping unknown performance measure {name} in observations")
                continue
            observations[m] = {(cell.row, cell.column): list(cell.values) for cell in cells}
        estimation: Dict[MeasureType, EstimationKind] = {}
        for name, kind in doc.estimation.items():
            try:
                estimation[MeasureType.lookup(name)] = kind
            except NotFoundError:
                logs.warning(f"[Results] skipping unknown performance measure {name} in estimation")

        res = cls(
            info,
            decode_measures(doc.measures, info, "measures"),
            steps=doc.steps or 0,
            variance=decode_measures(doc.variance, info, "variance"),
            min=decode_measures(doc.min, info, "min"),
            max=decode_measures(doc.max, info, "max"),
            counts=decode_measures(doc.counts, info, "counts"),
            observations=observations,
            estimation=estimation,
            report=doc.report,
            eval_info=EvalInfo.from_dict(doc.eval_info),
        )
        res.validate()
        return res

    # ---------------- tabular export ----------------
    def _stat_columns(self) -> List[str]:
        return ["variance", "min", "max", "count"]

    def _cell_stats(self, m: MeasureType) -> Dict[str, Optional[np.ndarray]]:
        return {
            "variance": self._variance.get(m),
            "min": self._min.get(m),
            "max": self._max.get(m),
            "count": self._counts.get(m),
        }
