# tests/conftest.py
from __future__ import annotations

from typing import List, Mapping, Optional, Sequence, Set

import numpy as np
import pytest
from loguru import logger

from ccperf.eval.base import EvalOption, StochasticEvaluator
from ccperf.eval.simulator import TallyBackedSimulator
from ccperf.measures.catalog import MeasureType
from ccperf.model.info import CenterInfo, NamedInfo
from ccperf.results.eval_results import EvalResults
from ccperf.results.sim_results import SimResults
from ccperf.utils.errors import NotFoundError, NotReadyError


@pytest.fixture(autouse=True)
def disable_file_logger():
    logger.remove()
    logger.add(lambda msg: None)  # or sys.stderr
    yield


# ============================================================
# fakes
# ============================================================
class SequenceEvaluator(StochasticEvaluator):
    """
    Stochastic evaluator replaying a fixed sequence: the k-th substream
    yields SERVICELEVEL = values[k] on a 1x1 model.

    `missing` lists substreams on which SPEEDOFANSWER is unavailable.
    """

    SUPPORTED_OPTIONS = frozenset({EvalOption.QUEUE_CAPACITY})

    def __init__(self, values: Sequence[float], missing: Optional[Set[int]] = None):
        super().__init__()
        self.values = list(values)
        self.missing = set(missing or ())
        self.substream = 0
        self.evaluations = 0
        self.resets = 0
        self.new_seed_calls = 0
        self._current: Optional[float] = None
        self._current_substream = 0
        self._info = CenterInfo.simple(1, 1)

    @property
    def info(self) -> CenterInfo:
        return self._info

    def supported_measures(self):
        return [MeasureType.SERVICELEVEL, MeasureType.SPEEDOFANSWER]

    def evaluate(self) -> None:
        self._current = self.values[self.substream % len(self.values)]
        self._current_substream = self.substream
        self.evaluations += 1
        if self.auto_reset_start_stream:
            self.reset_start_stream()

    def _value(self, m: MeasureType) -> float:
        if not self.has_measure(m):
            raise NotFoundError(m.name)
        if self._current is None:
            raise NotReadyError("not evaluated")
        if m is MeasureType.SPEEDOFANSWER:
            if self._current_substream in self.missing:
                raise NotFoundError("no speed of answer for this substream")
            return 10.0 * self._current
        return self._current

    def point_estimate(self, m):
        return np.array([[self._value(m)]])

    def variance(self, m):
        self._value(m)
        raise NotFoundError("no within-step variance")

    def min(self, m):
        return self.point_estimate(m)

    def max(self, m):
        return self.point_estimate(m)

    def confidence_interval(self, m, level):
        raise NotFoundError("no interval")

    @property
    def completed_steps(self) -> int:
        return 1 if self._current is not None else 0

    def reset(self) -> None:
        self._current = None
        self.resets += 1

    def is_likely_unstable(self) -> bool:
        if self._current is None:
            raise NotReadyError("not evaluated")
        return False

    def new_seeds(self) -> None:
        self.new_seed_calls += 1
        self.substream = 0

    def reset_start_stream(self) -> None:
        self.substream = 0

    def reset_start_substream(self) -> None:
        pass

    def reset_next_substream(self) -> None:
        self.substream += 1


class ToySimulator(TallyBackedSimulator):
    """
    Two inbound types, two agent groups, two periods.
    Each replication draws binomial service-level counts and
    exponential waiting times.
    """

    MEASURES = (
        MeasureType.SERVICELEVEL,
        MeasureType.SERVICELEVELREP,
        MeasureType.WAITINGTIME,
        MeasureType.RATEOFARRIVALS,
    )

    def __init__(self, *, seed: Optional[int] = 1234, steps: int = 20, keep_observations: bool = False):
        super().__init__(
            CenterInfo.simple(2, 2, num_periods=2),
            self.MEASURES,
            steps=steps,
            seed=seed,
            keep_observations=keep_observations,
        )

    def simulate_step(self, rng: np.random.Generator):
        info = self.info
        sl_shape = MeasureType.SERVICELEVEL.shape(info)
        ct_shape = MeasureType.WAITINGTIME.shape(info)

        offered = rng.poisson(100.0, size=sl_shape).astype(float)
        good = rng.binomial(offered.astype(int), 0.8).astype(float)
        arrivals = rng.poisson(100.0, size=ct_shape).astype(float)
        total_wait = arrivals * rng.exponential(30.0, size=ct_shape)
        return {
            MeasureType.SERVICELEVEL: (good, offered),
            MeasureType.SERVICELEVELREP: (good, offered),
            MeasureType.WAITINGTIME: (total_wait, arrivals),
            MeasureType.RATEOFARRIVALS: arrivals,
        }


@pytest.fixture
def sequence_evaluator():
    def _make(values: Sequence[float] = (0.80, 0.82, 0.79, 0.81, 0.83), missing=None):
        return SequenceEvaluator(values, missing)

    return _make


@pytest.fixture
def toy_simulator():
    def _make(**kwargs) -> ToySimulator:
        return ToySimulator(**kwargs)

    return _make


# ============================================================
# snapshots
# ============================================================
@pytest.fixture
def small_info() -> CenterInfo:
    """Two inbound types, two groups, one period, named entities."""
    return CenterInfo(
        contact_types=(NamedInfo("Sales"), NamedInfo("Support")),
        num_inbound_types=2,
        agent_groups=(NamedInfo("Generalists"), NamedInfo("Experts")),
        waiting_queues=(NamedInfo("Q1"), NamedInfo("Q2")),
        main_periods=(NamedInfo("Morning"),),
    )


@pytest.fixture
def make_eval_results(small_info):
    def _make(values: Optional[Mapping[MeasureType, np.ndarray]] = None) -> EvalResults:
        if values is None:
            values = {
                MeasureType.SERVICELEVEL: np.array([[0.80], [0.90], [0.85]]),
                MeasureType.WAITINGTIME: np.array([[12.0], [8.0], [10.0]]),
            }
        return EvalResults(small_info, values)

    return _make


@pytest.fixture
def make_sim_results(small_info):
    """
    SimResults with SERVICELEVEL averages `avg`, variance `var` and
    `n` observations in every cell.
    """

    def _make(avg: List[float], var: float = 0.01, n: int = 100) -> SimResults:
        m = MeasureType.SERVICELEVEL
        point = np.array(avg, dtype=float).reshape(-1, 1)
        return SimResults(
            small_info,
            {m: point},
            steps=n,
            variance={m: np.full(point.shape, var)},
            min={m: point - 0.1},
            max={m: point + 0.1},
            counts={m: np.full(point.shape, float(n))},
        )

    return _make

