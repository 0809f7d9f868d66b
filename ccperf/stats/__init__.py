from .tally import RatioTallyMatrix, TallyMatrix
from .confidence import check_level, confidence_interval, half_width

__all__ = [
    "TallyMatrix",
    "RatioTallyMatrix",
    "check_level",
    "confidence_interval",
    "half_width",
]
