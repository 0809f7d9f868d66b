#!filepath: ccperf/config/batch_config.py
from typing import Optional

from pydantic import BaseModel, Field


class BatchConfig(BaseModel):
    steps: int = Field(10, ge=1)
    max_workers: int = Field(1, ge=1)
    keep_observations: bool = False
    auto_reset_start_stream: bool = True
    seed: Optional[int] = None
