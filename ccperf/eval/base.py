# ccperf/eval/base.py
from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, ClassVar, Dict, FrozenSet, List, Optional, Sequence, Tuple

import numpy as np

from ccperf.config.report_config import ReportConfig
from ccperf.eval.eval_info import EvalInfo
from ccperf.measures.catalog import MeasureType
from ccperf.measures.estimation import EstimationKind
from ccperf.model.info import CenterInfo
from ccperf.utils.errors import NotFoundError


class EvalOption(Enum):
    """Evaluation options an evaluator may accept, with their value types."""

    STAFFING_VECTOR = ("Staffing vector", (list, tuple, np.ndarray))
    STAFFING_MATRIX = ("Staffing matrix", (list, tuple, np.ndarray))
    SCHEDULED_AGENTS = ("Scheduled agents", (list, tuple, np.ndarray))
    QUEUE_CAPACITY = ("Queue capacity", (int,))
    STOPPING_CONDITION = ("Simulation stopping condition", (object,))
    CURRENT_PERIOD = ("Current period", (int,))

    def __init__(self, label: str, value_types: Tuple[type, ...]):
        self.label = label
        self.value_types = value_types

    def check(self, value: Any) -> None:
        if isinstance(value, bool) or not isinstance(value, self.value_types):
            if self.value_types == (object,):
                return
            expected = ", ".join(t.__name__ for t in self.value_types)
            raise TypeError(
                f"[EvalOption] {self.name} expects {expected}, got {type(value).__name__}"
            )


class Evaluator(ABC):
    """
    Evaluator (CONTRACT)

    Anything able to produce matrices of performance measures for a
    contact-center model: a simulator, an approximation, a stored snapshot.

    Contract:
      - point_estimate(m) has shape m.shape(info)
      - NotFoundError for unsupported measures
      - NotReadyError before the first evaluate()
      - evaluate() is idempotent under unchanged parameters
    """

    SUPPORTED_OPTIONS: ClassVar[FrozenSet[EvalOption]] = frozenset()

    def __init__(self, report: Optional[ReportConfig] = None):
        self._report = report if report is not None else ReportConfig()
        self._eval_info = EvalInfo(evaluator=type(self).__name__)
        self._options: Dict[EvalOption, Any] = {}
        self.verbose = False

    # ---------------- model ----------------
    @property
    @abstractmethod
    def info(self) -> CenterInfo:
        ...

    @abstractmethod
    def supported_measures(self) -> Sequence[MeasureType]:
        ...

    def has_measure(self, m: MeasureType) -> bool:
        if m is None:
            raise ValueError("The queried performance measure must not be None")
        return m in self.supported_measures()

    # ---------------- evaluation ----------------
    @abstractmethod
    def evaluate(self) -> None:
        ...

    @abstractmethod
    def point_estimate(self, m: MeasureType) -> np.ndarray:
        ...

    @abstractmethod
    def reset(self) -> None:
        ...

    @abstractmethod
    def is_likely_unstable(self) -> bool:
        ...

    # ---------------- metadata ----------------
    @property
    def eval_info(self) -> EvalInfo:
        return self._eval_info

    @property
    def report_config(self) -> ReportConfig:
        return self._report

    @report_config.setter
    def report_config(self, report: ReportConfig) -> None:
        self._report = report

    # ---------------- options ----------------
    def supported_options(self) -> FrozenSet[EvalOption]:
        return self.SUPPORTED_OPTIONS

    def get_option(self, option: EvalOption) -> Any:
        if option not in self.supported_options():
            raise NotFoundError(f"[{type(self).__name__}] unsupported option {option.name}")
        return self._options.get(option)

    def set_option(self, option: EvalOption, value: Any) -> None:
        if option not in self.supported_options():
            raise NotFoundError(f"[{type(self).__name__}] unsupported option {option.name}")
        option.check(value)
        self._options[option] = value
        self._on_option(option, value)

    def _on_option(self, option: EvalOption, value: Any) -> None:
        """Hook for subclasses reacting to a new option value."""

    def format_statistics(self) -> str:
        from ccperf.eval.report import format_statistics

        return format_statistics(self)


class StochasticEvaluator(Evaluator):
    """
    StochasticEvaluator (CONTRACT)

    Adds sample statistics, confidence intervals and random-stream
    discipline. With auto_reset_start_stream (default), consecutive
    evaluate() calls under unchanged parameters return identical point
    estimates.
    """

    def __init__(self, report: Optional[ReportConfig] = None):
        super().__init__(report)
        self._auto_reset = True
        self._seq_sampling = False

    @abstractmethod
    def variance(self, m: MeasureType) -> np.ndarray:
        ...

    @abstractmethod
    def min(self, m: MeasureType) -> np.ndarray:
        ...

    @abstractmethod
    def max(self, m: MeasureType) -> np.ndarray:
        ...

    @abstractmethod
    def confidence_interval(self, m: MeasureType, level: float) -> Tuple[np.ndarray, np.ndarray]:
        ...

    def estimation_kind(self, m: MeasureType) -> EstimationKind:
        """Interval formula behind confidence_interval(m); the measure's own kind by default."""
        return m.estimation

    @property
    @abstractmethod
    def completed_steps(self) -> int:
        ...

    # ---------------- random streams ----------------
    @abstractmethod
    def new_seeds(self) -> None:
        ...

    @abstractmethod
    def reset_start_stream(self) -> None:
        ...

    @abstractmethod
    def reset_start_substream(self) -> None:
        ...

    @abstractmethod
    def reset_next_substream(self) -> None:
        ...

    @property
    def auto_reset_start_stream(self) -> bool:
        return self._auto_reset

    @auto_reset_start_stream.setter
    def auto_reset_start_stream(self, value: bool) -> None:
        self._auto_reset = bool(value)

    @property
    def sequential_sampling_each_evaluate(self) -> bool:
        return self._seq_sampling

    @sequential_sampling_each_evaluate.setter
    def sequential_sampling_each_evaluate(self, value: bool) -> None:
        self._seq_sampling = bool(value)

    @property
    def confidence_level(self) -> float:
        return self._report.confidence_level

    @confidence_level.setter
    def confidence_level(self, level: float) -> None:
        self._report = self._report.model_copy(update={"confidence_level": level})

    def tally_matrix(self, m: MeasureType):
        raise NotFoundError(f"[{type(self).__name__}] no tallies exposed for {m.name}")


class ObservationSource(ABC):
    """Evaluators that retain the raw per-step observations of some measures."""

    @abstractmethod
    def observation_count(self, m: MeasureType, row: int, column: int) -> int:
        ...

    @abstractmethod
    def observations(self, m: MeasureType, row: int, column: int) -> List[float]:
        ...
