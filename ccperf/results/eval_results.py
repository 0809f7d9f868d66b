# ccperf/results/eval_results.py
from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
import pyarrow as pa
import pyarrow.parquet as pq

from ccperf.config.report_config import ReportConfig
from ccperf.eval.base import Evaluator, StochasticEvaluator
from ccperf.eval.eval_info import EvalInfo
from ccperf.measures.catalog import MeasureType
from ccperf.model.info import CenterInfo
from ccperf.results.document import Matrix, ResultsDocument
from ccperf.utils.errors import (
    InvalidStateError,
    NotFoundError,
    UnsupportedOperationError,
)
from ccperf.utils.filesystem import FileSystem
from ccperf.utils.logger import logs


def to_matrix(raw: Matrix, shape: Tuple[int, int]) -> np.ndarray:
    arr = np.asarray(raw, dtype=float)
    if arr.size == 0 and shape[0] * shape[1] == 0:
        return arr.reshape(shape)
    return arr


def from_matrix(values: np.ndarray) -> Matrix:
    return np.asarray(values, dtype=float).tolist()


def copy_info(info: CenterInfo) -> CenterInfo:
    return CenterInfo.from_dict(info.to_dict())


def decode_measures(
    raw: Mapping[str, Matrix], info: CenterInfo, section: str
) -> Dict[MeasureType, np.ndarray]:
    out: Dict[MeasureType, np.ndarray] = {}
    for name, matrix in raw.items():
        try:
            m = MeasureType.lookup(name)
        except NotFoundError:
            logs.warning(f"[Results] skipping unknown performance measure {name} in {section}")
            continue
        out[m] = to_matrix(matrix, m.shape(info))
    return out


class EvalResults(Evaluator):
    """
    EvalResults (SNAPSHOT)

    Point estimates of another evaluator, frozen after capture.
    Behaves as an Evaluator that is always evaluated and can never
    be re-evaluated.
    """

    KIND = "eval"

    def __init__(
        self,
        info: CenterInfo,
        measures: Mapping[MeasureType, np.ndarray],
        *,
        report: Optional[ReportConfig] = None,
        eval_info: Optional[EvalInfo] = None,
    ):
        super().__init__(report)
        self._info = info
        self._measures: Dict[MeasureType, np.ndarray] = {
            m: np.asarray(v, dtype=float) for m, v in measures.items()
        }
        if eval_info is not None:
            self._eval_info = eval_info

    # ---------------- capture ----------------
    @classmethod
    def capture(cls, evaluator: Evaluator) -> "EvalResults":
        info = copy_info(evaluator.info)
        measures = {
            m: np.array(evaluator.point_estimate(m), dtype=float)
            for m in evaluator.supported_measures()
        }
        res = cls(
            info,
            measures,
            report=evaluator.report_config.model_copy(deep=True),
            eval_info=evaluator.eval_info.copy(),
        )
        logs.debug(f"[EvalResults] captured {len(measures)} measures from {type(evaluator).__name__}")
        return res

    @staticmethod
    def capture_any(evaluator: Evaluator) -> "EvalResults":
        """SimResults for stochastic evaluators, EvalResults otherwise."""
        if isinstance(evaluator, StochasticEvaluator):
            from ccperf.results.sim_results import SimResults

            return SimResults.capture(evaluator)
        return EvalResults.capture(evaluator)

    # ---------------- Evaluator ----------------
    @property
    def info(self) -> CenterInfo:
        return self._info

    def supported_measures(self) -> Sequence[MeasureType]:
        return list(self._measures)

    def point_estimate(self, m: MeasureType) -> np.ndarray:
        try:
            return self._measures[m].copy()
        except KeyError:
            raise NotFoundError(f"[{type(self).__name__}] no results for {m.name}") from None

    def evaluate(self) -> None:
        raise UnsupportedOperationError(f"[{type(self).__name__}] stored results cannot be evaluated")

    def reset(self) -> None:
        raise UnsupportedOperationError(f"[{type(self).__name__}] stored results cannot be reset")

    def is_likely_unstable(self) -> bool:
        return False

    # ---------------- consistency ----------------
    def _check_matrix(self, section: str, m: MeasureType, values) -> None:
        if values is None:
            raise InvalidStateError(f"[{type(self).__name__}] missing {section} matrix for {m.name}")
        expected = m.shape(self._info)
        if np.shape(values) != expected:
            raise InvalidStateError(
                f"[{type(self).__name__}] {section} matrix for {m.name} has shape "
                f"{np.shape(values)}, expected {expected}"
            )

    def validate(self) -> None:
        info = self._info
        if info is None:
            raise InvalidStateError(f"[{type(self).__name__}] missing model information")
        for table in ("contact_types", "agent_groups", "waiting_queues", "main_periods"):
            if getattr(info, table) is None:
                raise InvalidStateError(f"[{type(self).__name__}] missing {table} table")
        if not 0 <= info.num_inbound_types <= info.num_contact_types:
            raise InvalidStateError(
                f"[{type(self).__name__}] {info.num_inbound_types} inbound types "
                f"for {info.num_contact_types} contact types"
            )
        if info.num_main_periods < 0:
            raise InvalidStateError(f"[{type(self).__name__}] negative number of periods")
        if self._measures is None:
            raise InvalidStateError(f"[{type(self).__name__}] missing performance measure map")
        for m, values in self._measures.items():
            self._check_matrix("point estimate", m, values)

    # ---------------- persistence ----------------
    def _document_fields(self) -> Dict:
        return {
            "kind": self.KIND,
            "info": self._info.to_dict(),
            "eval_info": self._eval_info.to_dict(),
            "report": self._report,
            "measures": {m.name: from_matrix(v) for m, v in self._measures.items()},
        }

    def to_document(self) -> ResultsDocument:
        return ResultsDocument(**self._document_fields())

    @classmethod
    def from_document(cls, doc: ResultsDocument) -> "EvalResults":
        info = CenterInfo.from_dict(doc.info)
        res = cls(
            info,
            decode_measures(doc.measures, info, "measures"),
            report=doc.report,
            eval_info=EvalInfo.from_dict(doc.eval_info),
        )
        res.validate()
        return res

    # ---------------- tabular export ----------------
    def _cell_stats(self, m: MeasureType) -> Dict[str, Optional[np.ndarray]]:
        return {}

    def to_frame(self) -> pd.DataFrame:
        """Long form: one line per (measure, row, column) cell."""
        records: List[Dict] = []
        for m, values in self._measures.items():
            stats = self._cell_stats(m)
            rows, columns = values.shape
            for r in range(rows):
                row_name = m.row_name(self._info, r)
                for c in range(columns):
                    rec = {
                        "measure": m.name,
                        "row": r,
                        "column": c,
                        "row_name": row_name,
                        "column_name": m.column_name(self._info, c),
                        "value": float(values[r, c]),
                    }
                    for key, arr in stats.items():
                        rec[key] = float(arr[r, c]) if arr is not None else np.nan
                    records.append(rec)
        columns = ["measure", "row", "column", "row_name", "column_name", "value"]
        return pd.DataFrame.from_records(records, columns=columns + self._stat_columns())

    def _stat_columns(self) -> List[str]:
        return []

    def write_parquet(self, path: str | Path) -> Path:
        path = Path(path)
        FileSystem.ensure_dir(path.parent)
        table = pa.Table.from_pandas(self.to_frame(), preserve_index=False)
        pq.write_table(table, path, compression="zstd")
        logs.info(f"[{type(self).__name__}] wrote {table.num_rows} cells to {path}")
        return path
