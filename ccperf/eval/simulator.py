# ccperf/eval/simulator.py
from __future__ import annotations

from abc import abstractmethod
from typing import Dict, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np

from ccperf.config.report_config import ReportConfig
from ccperf.eval.base import ObservationSource, StochasticEvaluator
from ccperf.measures.catalog import MeasureType
from ccperf.measures.estimation import EstimationKind
from ccperf.model.info import CenterInfo
from ccperf.observability.timer import Timer
from ccperf.stats.confidence import confidence_interval
from ccperf.stats.tally import RatioTallyMatrix, TallyMatrix
from ccperf.utils.errors import InvalidStateError, NotFoundError, NotReadyError
from ccperf.utils.logger import logs

StepObservation = Union[np.ndarray, Tuple[np.ndarray, np.ndarray]]
Tally = Union[TallyMatrix, RatioTallyMatrix]


class TallyBackedSimulator(StochasticEvaluator, ObservationSource):
    """
    TallyBackedSimulator

    Base for concrete simulators. A subclass implements simulate_step(rng),
    returning one observation matrix per supported measure for a single
    replication; FUNCTION_OF_EXPECTATIONS measures return a
    (numerator, denominator) pair.

    Random streams:
      - replication j of the current substream p draws from
        SeedSequence(entropy, spawn_key=(p, offset + j))
      - reset_start_stream() -> p = 0, offset = 0
      - reset_start_substream() -> offset = 0
      - reset_next_substream() -> p + 1, offset = 0
    """

    def __init__(
        self,
        info: CenterInfo,
        measures: Sequence[MeasureType],
        *,
        steps: int = 1,
        seed: Optional[int] = None,
        keep_observations: bool = False,
        report: Optional[ReportConfig] = None,
    ):
        super().__init__(report)
        if steps < 1:
            raise ValueError(f"[{type(self).__name__}] steps must be >= 1, got {steps}")
        self._info = info
        self._measures: List[MeasureType] = list(dict.fromkeys(measures))
        self.steps = steps
        self.keep_observations = keep_observations

        self._seed_seq = np.random.SeedSequence(seed)
        self._substream = 0
        self._offset = 0

        self._tallies: Dict[MeasureType, Tally] = {}
        self._completed = 0
        self._done = False
        self._timer = Timer()

        self._eval_info.seed = seed

    # ---------------- subclass hook ----------------
    @abstractmethod
    def simulate_step(self, rng: np.random.Generator) -> Mapping[MeasureType, StepObservation]:
        ...

    # ---------------- model ----------------
    @property
    def info(self) -> CenterInfo:
        return self._info

    def supported_measures(self) -> Sequence[MeasureType]:
        return list(self._measures)

    # ---------------- streams ----------------
    @property
    def entropy(self) -> int:
        return self._seed_seq.entropy

    def _generator(self, replication: int) -> np.random.Generator:
        seq = np.random.SeedSequence(
            self._seed_seq.entropy, spawn_key=(self._substream, replication)
        )
        return np.random.default_rng(seq)

    def new_seeds(self) -> None:
        self._seed_seq = np.random.SeedSequence()
        self._substream = 0
        self._offset = 0

    def reset_start_stream(self) -> None:
        self._substream = 0
        self._offset = 0

    def reset_start_substream(self) -> None:
        self._offset = 0

    def reset_next_substream(self) -> None:
        self._substream += 1
        self._offset = 0

    # ---------------- evaluation ----------------
    def _new_tally(self, m: MeasureType) -> Tally:
        rows, columns = m.shape(self._info)
        if m.estimation == EstimationKind.FUNCTION_OF_EXPECTATIONS:
            return RatioTallyMatrix(rows, columns, zero_over_zero=m.zero_over_zero, name=m.name)
        return TallyMatrix(rows, columns, keep_observations=self.keep_observations, name=m.name)

    def _add(self, m: MeasureType, tally: Tally, obs: StepObservation) -> None:
        expected = m.shape(self._info)
        if isinstance(tally, RatioTallyMatrix):
            if not isinstance(obs, tuple) or len(obs) != 2:
                raise InvalidStateError(
                    f"[{type(self).__name__}] {m.name} needs a (numerator, denominator) pair"
                )
            num, den = np.asarray(obs[0], dtype=float), np.asarray(obs[1], dtype=float)
            if num.shape != expected or den.shape != expected:
                raise InvalidStateError(
                    f"[{type(self).__name__}] {m.name}: got {num.shape}/{den.shape}, expected {expected}"
                )
            tally.add(num, den)
            return

        if isinstance(obs, tuple):
            # mean of per-replication ratios
            num, den = np.asarray(obs[0], dtype=float), np.asarray(obs[1], dtype=float)
            with np.errstate(divide="ignore", invalid="ignore"):
                value = np.where((num == 0) & (den == 0), m.zero_over_zero, num / den)
        else:
            value = np.asarray(obs, dtype=float)
        if value.shape != expected:
            raise InvalidStateError(
                f"[{type(self).__name__}] {m.name}: got {value.shape}, expected {expected}"
            )
        tally.add(value)

    def evaluate(self) -> None:
        self._tallies = {m: self._new_tally(m) for m in self._measures}
        self._completed = 0
        self._done = False

        self._timer.start("evaluate")
        for j in range(self.steps):
            rng = self._generator(self._offset + j)
            step = self.simulate_step(rng)
            for m in self._measures:
                if m not in step:
                    raise InvalidStateError(
                        f"[{type(self).__name__}] replication produced no value for {m.name}"
                    )
                self._add(m, self._tallies[m], step[m])
            self._completed += 1
        self._offset += self.steps
        elapsed = self._timer.end("evaluate")

        self._done = True
        self._eval_info.steps = self._completed
        self._eval_info.cpu_seconds = self._timer.cpu("evaluate")
        if self.verbose:
            logs.info(
                f"[{type(self).__name__}] {self._completed} replications "
                f"substream={self._substream} in {elapsed:.3f}s"
            )

        if self.auto_reset_start_stream:
            if self.sequential_sampling_each_evaluate:
                self.reset_next_substream()
            else:
                self.reset_start_stream()

    def reset(self) -> None:
        self._tallies = {}
        self._completed = 0
        self._done = False

    def is_likely_unstable(self) -> bool:
        self._require_done()
        return False

    @property
    def completed_steps(self) -> int:
        return self._completed

    # ---------------- accessors ----------------
    def _require_done(self) -> None:
        if not self._done:
            raise NotReadyError(f"[{type(self).__name__}] evaluate() has not been called")

    def _tally(self, m: MeasureType) -> Tally:
        if m not in self._measures:
            raise NotFoundError(f"[{type(self).__name__}] unsupported performance measure {m.name}")
        self._require_done()
        return self._tallies[m]

    def tally_matrix(self, m: MeasureType) -> Tally:
        return self._tally(m)

    def point_estimate(self, m: MeasureType) -> np.ndarray:
        return self._tally(m).average()

    def variance(self, m: MeasureType) -> np.ndarray:
        return self._tally(m).variance()

    def min(self, m: MeasureType) -> np.ndarray:
        return self._tally(m).min()

    def max(self, m: MeasureType) -> np.ndarray:
        return self._tally(m).max()

    def confidence_interval(self, m: MeasureType, level: float) -> Tuple[np.ndarray, np.ndarray]:
        tally = self._tally(m)
        return confidence_interval(
            tally.average(), tally.variance(), tally.counts(), level, self.estimation_kind(m)
        )

    def observation_count(self, m: MeasureType, row: int, column: int) -> int:
        tally = self._tally(m)
        if not isinstance(tally, TallyMatrix) or not tally.has_observations:
            raise NotFoundError(f"[{type(self).__name__}] no observations kept for {m.name}")
        return int(tally.counts()[row, column])

    def observations(self, m: MeasureType, row: int, column: int) -> List[float]:
        tally = self._tally(m)
        if not isinstance(tally, TallyMatrix):
            raise NotFoundError(f"[{type(self).__name__}] no observations kept for {m.name}")
        return tally.observations(row, column)
