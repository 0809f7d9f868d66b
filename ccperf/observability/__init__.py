from ccperf.observability.timer import Timer

__all__ = ["Timer"]
