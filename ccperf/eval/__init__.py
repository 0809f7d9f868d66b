from ccperf.eval.base import EvalOption, Evaluator, ObservationSource, StochasticEvaluator
from ccperf.eval.erlang import ErlangCEvaluator, erlang_c
from ccperf.eval.eval_info import EvalInfo
from ccperf.eval.simulator import TallyBackedSimulator

__all__ = [
    "EvalInfo",
    "EvalOption",
    "Evaluator",
    "ErlangCEvaluator",
    "ObservationSource",
    "StochasticEvaluator",
    "TallyBackedSimulator",
    "erlang_c",
]
