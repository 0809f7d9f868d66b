from ccperf.batch.driver import ReplicatedBatchEvaluator
from ccperf.batch.parallel import ParallelExecutor
from ccperf.batch.types import ParallelKind

__all__ = ["ParallelExecutor", "ParallelKind", "ReplicatedBatchEvaluator"]
