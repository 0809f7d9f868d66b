# ccperf/eval/erlang.py
from __future__ import annotations

import math
from typing import Dict, Optional, Sequence

import numpy as np

from ccperf.config.report_config import ReportConfig
from ccperf.eval.base import EvalOption, Evaluator
from ccperf.measures.catalog import MeasureType
from ccperf.model.info import CenterInfo, NamedInfo
from ccperf.utils.errors import NotFoundError, NotReadyError, UnstableSystemError
from ccperf.utils.logger import logs

_MEASURES = (
    MeasureType.ABANDONMENTRATIO,
    MeasureType.AVGQUEUESIZE,
    MeasureType.DELAYRATIO,
    MeasureType.OCCUPANCY,
    MeasureType.RATEOFARRIVALS,
    MeasureType.RATEOFSERVICES,
    MeasureType.SERVEDRATES,
    MeasureType.SERVICELEVEL,
    MeasureType.SPEEDOFANSWER,
    MeasureType.WAITINGTIME,
    MeasureType.WAITINGTIMEWAIT,
)


def erlang_c(agents: int, load: float) -> float:
    """Probability of delay in an M/M/c queue with offered load `load` (load < agents)."""
    b = 1.0
    for k in range(1, agents + 1):
        b = load * b / (k + load * b)
    return agents * b / (agents - load * (1.0 - b))


class ErlangCEvaluator(Evaluator):
    """
    ErlangCEvaluator

    One inbound contact type, one agent group, one queue, one period,
    exponential service and infinite patience. Closed-form Erlang C
    values; one service-level row per acceptable waiting time.

    Rates are per time unit; the period is one time unit long.
    """

    SUPPORTED_OPTIONS = frozenset({EvalOption.STAFFING_VECTOR})

    def __init__(
        self,
        arrival_rate: float,
        service_rate: float,
        agents: int,
        awts: Sequence[float] = (20.0,),
        *,
        report: Optional[ReportConfig] = None,
        info: Optional[CenterInfo] = None,
    ):
        super().__init__(report)
        if arrival_rate < 0 or service_rate <= 0:
            raise ValueError(
                f"[ErlangCEvaluator] invalid rates: arrival={arrival_rate}, service={service_rate}"
            )
        if not awts:
            raise ValueError("[ErlangCEvaluator] at least one acceptable waiting time is needed")
        self.arrival_rate = float(arrival_rate)
        self.service_rate = float(service_rate)
        self.agents = int(agents)
        self.awts = tuple(float(a) for a in awts)
        self._info = info or CenterInfo(
            contact_types=(NamedInfo("Inbound"),),
            num_inbound_types=1,
            agent_groups=(NamedInfo("Agents"),),
            waiting_queues=(NamedInfo("Queue"),),
            main_periods=(NamedInfo("Period"),),
            awt_matrix_names=tuple(f"{a:g}s" for a in self.awts) if len(self.awts) > 1 else ("",),
        )
        self._options[EvalOption.STAFFING_VECTOR] = [self.agents]
        self._results: Dict[MeasureType, np.ndarray] = {}
        self._checked = False
        self._unstable = False

    @property
    def info(self) -> CenterInfo:
        return self._info

    def supported_measures(self) -> Sequence[MeasureType]:
        return list(_MEASURES)

    def _on_option(self, option: EvalOption, value) -> None:
        if len(value) != 1:
            raise ValueError(f"[ErlangCEvaluator] staffing vector must have one entry, got {len(value)}")
        self.agents = int(value[0])

    @property
    def offered_load(self) -> float:
        return self.arrival_rate / self.service_rate

    def evaluate(self) -> None:
        self._results = {}
        self._checked = True
        lam, mu, c = self.arrival_rate, self.service_rate, self.agents
        a = self.offered_load
        self._unstable = a >= c
        if self._unstable:
            raise UnstableSystemError(
                f"[ErlangCEvaluator] offered load {a:.3f} >= {c} agents"
            )

        pw = erlang_c(c, a) if lam > 0 else 0.0
        drain = c * mu - lam
        asa = pw / drain

        def one(v: float) -> np.ndarray:
            return np.array([[v]], dtype=float)

        self._results = {
            MeasureType.ABANDONMENTRATIO: one(0.0),
            MeasureType.AVGQUEUESIZE: one(lam * asa),
            MeasureType.DELAYRATIO: one(pw),
            MeasureType.OCCUPANCY: one(a / c),
            MeasureType.RATEOFARRIVALS: one(lam),
            MeasureType.RATEOFSERVICES: one(lam),
            MeasureType.SERVEDRATES: one(lam),
            MeasureType.SERVICELEVEL: np.array(
                [[1.0 - pw * math.exp(-drain * awt)] for awt in self.awts], dtype=float
            ),
            MeasureType.SPEEDOFANSWER: one(asa),
            MeasureType.WAITINGTIME: one(asa),
            MeasureType.WAITINGTIMEWAIT: one(1.0 / drain),
        }
        if self.verbose:
            logs.info(f"[ErlangCEvaluator] load={a:.3f} agents={c} P(wait)={pw:.4f} ASA={asa:.4f}")

    def point_estimate(self, m: MeasureType) -> np.ndarray:
        if m not in _MEASURES:
            raise NotFoundError(f"[ErlangCEvaluator] unsupported performance measure {m.name}")
        if m not in self._results:
            raise NotReadyError("[ErlangCEvaluator] evaluate() has not succeeded")
        return self._results[m].copy()

    def reset(self) -> None:
        self._results = {}
        self._checked = False
        self._unstable = False

    def is_likely_unstable(self) -> bool:
        if not self._checked:
            raise NotReadyError("[ErlangCEvaluator] evaluate() has not been called")
        return self._unstable
