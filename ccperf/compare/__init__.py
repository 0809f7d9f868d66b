from ccperf.compare.comparator import ResultComparator

__all__ = ["ResultComparator"]
