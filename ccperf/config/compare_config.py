#!filepath: ccperf/config/compare_config.py
from typing import Optional

from pydantic import BaseModel, Field


class CompareConfig(BaseModel):
    confidence_level: float = Field(0.95, gt=0.0, lt=1.0)
    slack: float = Field(0.0, ge=0.0)
    tolerance: Optional[float] = Field(None, ge=0.0)
    num_digits: int = Field(3, ge=0)
