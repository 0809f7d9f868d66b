# ccperf/measures/estimation.py
from enum import Enum


class EstimationKind(str, Enum):
    """
    How a measure is estimated; decides the confidence interval formula
    and whether per-observation data exist.

    EXPECTATION               mean of per-step observations
    FUNCTION_OF_EXPECTATIONS  ratio of means (delta method)
    EXPECTATION_OF_FUNCTION   mean of per-step ratios
    RAW_STATISTIC             terminal value, no estimator
    """

    EXPECTATION = "EXPECTATION"
    FUNCTION_OF_EXPECTATIONS = "FUNCTIONOFEXPECTATIONS"
    EXPECTATION_OF_FUNCTION = "EXPECTATIONOFFUNCTION"
    RAW_STATISTIC = "RAWSTATISTIC"
