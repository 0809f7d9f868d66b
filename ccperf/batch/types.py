# ccperf/batch/types.py
from enum import Enum


class ParallelKind(str, Enum):
    STEP = "step"
