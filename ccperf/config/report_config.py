#!filepath: ccperf/config/report_config.py
from typing import List

from pydantic import BaseModel, Field


class ReportConfig(BaseModel):
    """
    Report parameters travelling with an evaluator or a stored snapshot.
    printed_stats: measure names to report; empty means all.
    """
    confidence_level: float = Field(0.95, gt=0.0, lt=1.0)
    num_digits: int = Field(3, ge=0)
    max_columns: int = Field(255, ge=1)
    default_detailed: bool = True
    default_periods: bool = True
    default_only_averages: bool = False
    printed_stats: List[str] = Field(default_factory=list)
