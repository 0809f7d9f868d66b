# ccperf/batch/driver.py
from __future__ import annotations

from functools import partial
from typing import Callable, Dict, FrozenSet, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from ccperf.batch.parallel import ParallelExecutor
from ccperf.batch.types import ParallelKind
from ccperf.config.batch_config import BatchConfig
from ccperf.eval.base import EvalOption, ObservationSource, StochasticEvaluator
from ccperf.measures.catalog import MeasureType
from ccperf.measures.estimation import EstimationKind
from ccperf.model.info import CenterInfo
from ccperf.observability.timer import Timer
from ccperf.stats.confidence import confidence_interval
from ccperf.stats.tally import TallyMatrix
from ccperf.utils.capture import try_capture
from ccperf.utils.errors import InvalidStateError, NotFoundError, NotReadyError
from ccperf.utils.logger import logs

InnerFactory = Callable[[int, np.random.SeedSequence], StochasticEvaluator]
StepEstimates = Dict[MeasureType, np.ndarray]


def _run_step(
    factory: InnerFactory,
    entropy: int,
    measures: Tuple[MeasureType, ...],
    step: int,
) -> StepEstimates:
    """Worker body: one fresh inner evaluator on its own pre-split seed."""
    inner = factory(step, np.random.SeedSequence(entropy, spawn_key=(step,)))
    inner.evaluate()
    out: StepEstimates = {}
    for m in measures:
        values = try_capture(inner.point_estimate, m)
        if values is not None:
            out[m] = np.asarray(values, dtype=float)
    return out


class ReplicatedBatchEvaluator(StochasticEvaluator, ObservationSource):
    """
    ReplicatedBatchEvaluator

    Runs an inner stochastic evaluator `steps` times, each run on a fresh
    random substream, and treats every run's point estimate as one
    observation of a between-step tally.

    Contract:
      - point_estimate / variance / min / max come from the between-step
        tallies; the inner evaluator's own variance is discarded
      - confidence intervals are Student-t on the step estimates
      - a measure the inner evaluator cannot produce for a step
        (NotFoundError) is skipped for that step
      - with auto_reset_start_stream, the inner evaluator is rewound to its
        start stream after each evaluate(), so repeated runs are identical

    Parallel mode (an inner_factory is given): steps run through the
    ParallelExecutor on up to max_workers processes. Step s uses
    inner_factory(s, SeedSequence(entropy, spawn_key=(s,))); results are
    merged in step order, so the worker count does not change them.
    Without auto_reset_start_stream the step indices keep counting across
    evaluate() calls, so each call runs on fresh streams.
    """

    def __init__(
        self,
        inner: StochasticEvaluator,
        *,
        config: Optional[BatchConfig] = None,
        inner_factory: Optional[InnerFactory] = None,
    ):
        super().__init__(inner.report_config)
        self.config = config or BatchConfig()
        self._inner = inner
        self._inner_factory = inner_factory
        self._seed_seq = np.random.SeedSequence(self.config.seed)
        self._step_offset = 0

        self._auto_reset = self.config.auto_reset_start_stream
        self._tallies: Dict[MeasureType, TallyMatrix] = {}
        self._completed = 0
        self._done = False
        self._timer = Timer()

        self._eval_info.seed = self.config.seed
        self._eval_info.annotate("inner", type(inner).__name__)

    # ---------------- delegation ----------------
    @property
    def inner(self) -> StochasticEvaluator:
        return self._inner

    @property
    def info(self) -> CenterInfo:
        return self._inner.info

    def supported_measures(self) -> Sequence[MeasureType]:
        return self._inner.supported_measures()

    def supported_options(self) -> FrozenSet[EvalOption]:
        return self._inner.supported_options()

    def get_option(self, option: EvalOption):
        return self._inner.get_option(option)

    def set_option(self, option: EvalOption, value) -> None:
        self._inner.set_option(option, value)

    @property
    def steps(self) -> int:
        return self.config.steps

    @property
    def keep_observations(self) -> bool:
        return self.config.keep_observations

    @property
    def parallel(self) -> bool:
        return self._inner_factory is not None

    # ---------------- evaluation ----------------
    def _accumulate(self, step: int, estimates: Mapping[MeasureType, np.ndarray]) -> None:
        for m, values in estimates.items():
            tally = self._tallies.get(m)
            if tally is None:
                tally = TallyMatrix(keep_observations=self.keep_observations, name=m.name)
                self._tallies[m] = tally
            elif values.shape != tally.shape:
                raise InvalidStateError(
                    f"[ReplicatedBatchEvaluator] step {step}: {m.name} changed shape "
                    f"from {tally.shape} to {values.shape}"
                )
            tally.add(values)

    def _step_estimates(self, step: int) -> StepEstimates:
        out: StepEstimates = {}
        for m in self._inner.supported_measures():
            values = try_capture(self._inner.point_estimate, m)
            if values is None:
                logs.debug(f"[ReplicatedBatchEvaluator] step {step}: no value for {m.name}, skipped")
                continue
            out[m] = np.asarray(values, dtype=float)
        return out

    def _evaluate_sequential(self, steps: int) -> None:
        inner = self._inner
        inner.auto_reset_start_stream = False
        prog = logs.progress_logger("ReplicatedBatchEvaluator", total=steps, unit="steps") if self.verbose else None

        for step in range(steps):
            self._timer.start("step")
            inner.evaluate()
            self._accumulate(step, self._step_estimates(step))
            inner.reset_next_substream()
            elapsed = self._timer.end("step")
            logs.debug(f"[ReplicatedBatchEvaluator] step {step + 1}/{steps} took {elapsed:.4f}s")
            if prog is not None:
                prog.update(1)

        if prog is not None:
            prog.finish()
        if self.auto_reset_start_stream:
            inner.reset_start_stream()

    @logs.catch("parallel steps failed")
    def _evaluate_parallel(self, steps: int) -> None:
        handler = partial(
            _run_step,
            self._inner_factory,
            self._seed_seq.entropy,
            tuple(self._inner.supported_measures()),
        )
        results: List[StepEstimates] = ParallelExecutor.run(
            kind=ParallelKind.STEP,
            items=range(self._step_offset, self._step_offset + steps),
            handler=handler,
            max_workers=self.config.max_workers,
        )
        for step, estimates in enumerate(results):
            self._accumulate(step, estimates)

        if self.auto_reset_start_stream:
            self._step_offset = 0
        else:
            self._step_offset += steps

    def evaluate(self, steps: Optional[int] = None) -> None:
        steps = self.steps if steps is None else steps
        if steps < 1:
            raise ValueError(f"[ReplicatedBatchEvaluator] steps must be >= 1, got {steps}")

        self._tallies = {}
        self._completed = 0
        self._done = False

        self._timer.start("evaluate")
        if self.parallel:
            self._evaluate_parallel(steps)
        else:
            self._evaluate_sequential(steps)
        elapsed = self._timer.end("evaluate")

        self._completed = steps
        self._done = True
        self._eval_info.steps = steps
        self._eval_info.cpu_seconds = self._timer.cpu("evaluate")
        logs.info(
            f"[ReplicatedBatchEvaluator] {steps} steps, {len(self._tallies)} measures "
            f"in {elapsed:.3f}s ({'parallel' if self.parallel else 'sequential'})"
        )

    def reset(self) -> None:
        self._tallies = {}
        self._completed = 0
        self._done = False
        self._inner.reset()

    def is_likely_unstable(self) -> bool:
        self._require_done()
        if self.parallel:
            return False
        return self._inner.is_likely_unstable()

    @property
    def completed_steps(self) -> int:
        return self._completed

    # ---------------- streams ----------------
    def new_seeds(self) -> None:
        self._tallies = {}
        self._completed = 0
        self._done = False
        self._seed_seq = np.random.SeedSequence()
        self._step_offset = 0
        self._inner.new_seeds()

    def reset_start_stream(self) -> None:
        self._step_offset = 0
        self._inner.reset_start_stream()

    def reset_start_substream(self) -> None:
        self._inner.reset_start_substream()

    def reset_next_substream(self) -> None:
        self._inner.reset_next_substream()

    # ---------------- accessors ----------------
    def _require_done(self) -> None:
        if not self._done:
            raise NotReadyError("[ReplicatedBatchEvaluator] evaluate() has not been called")

    def tally_matrix(self, m: MeasureType) -> TallyMatrix:
        if not self.has_measure(m):
            raise NotFoundError(f"[ReplicatedBatchEvaluator] unsupported performance measure {m.name}")
        self._require_done()
        try:
            return self._tallies[m]
        except KeyError:
            raise NotFoundError(
                f"[ReplicatedBatchEvaluator] no step produced a value for {m.name}"
            ) from None

    def point_estimate(self, m: MeasureType) -> np.ndarray:
        return self.tally_matrix(m).average()

    def variance(self, m: MeasureType) -> np.ndarray:
        return self.tally_matrix(m).variance()

    def min(self, m: MeasureType) -> np.ndarray:
        return self.tally_matrix(m).min()

    def max(self, m: MeasureType) -> np.ndarray:
        return self.tally_matrix(m).max()

    def confidence_interval(self, m: MeasureType, level: float) -> Tuple[np.ndarray, np.ndarray]:
        tally = self.tally_matrix(m)
        return confidence_interval(
            tally.average(), tally.variance(), tally.counts(), level, self.estimation_kind(m)
        )

    def estimation_kind(self, m: MeasureType) -> EstimationKind:
        return EstimationKind.EXPECTATION

    def observation_count(self, m: MeasureType, row: int, column: int) -> int:
        return len(self.observations(m, row, column))

    def observations(self, m: MeasureType, row: int, column: int) -> List[float]:
        return self.tally_matrix(m).observations(row, column)
