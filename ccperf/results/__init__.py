from ccperf.eval.eval_info import EvalInfo
from ccperf.results.document import ResultsDocument
from ccperf.results.eval_results import EvalResults
from ccperf.results.io import load_results, save_results
from ccperf.results.sim_results import SimResults

__all__ = [
    "EvalInfo",
    "EvalResults",
    "ResultsDocument",
    "SimResults",
    "load_results",
    "save_results",
]
