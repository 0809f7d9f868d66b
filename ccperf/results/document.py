# ccperf/results/document.py
from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from ccperf.config.report_config import ReportConfig
from ccperf.measures.estimation import EstimationKind

FORMAT_NAME = "ccperf-results"
FORMAT_VERSION = 1

Matrix = List[List[float]]


class ObservationCell(BaseModel):
    row: int = Field(ge=0)
    column: int = Field(ge=0)
    values: List[float]


class ResultsDocument(BaseModel):
    """
    Persisted form of a results snapshot.
    Matrices are row-major nested lists; NaN is written as the JSON token NaN.
    """

    format: Literal["ccperf-results"] = FORMAT_NAME
    version: Literal[1] = FORMAT_VERSION
    kind: Literal["eval", "sim"] = "eval"

    info: Dict[str, Any]
    eval_info: Dict[str, Any] = Field(default_factory=dict)
    report: ReportConfig = Field(default_factory=ReportConfig)
    measures: Dict[str, Matrix] = Field(default_factory=dict)

    # simulation results only
    steps: Optional[int] = None
    variance: Dict[str, Matrix] = Field(default_factory=dict)
    min: Dict[str, Matrix] = Field(default_factory=dict)
    max: Dict[str, Matrix] = Field(default_factory=dict)
    counts: Dict[str, Matrix] = Field(default_factory=dict)
    # interval formula per measure; the catalog kind when absent
    estimation: Dict[str, EstimationKind] = Field(default_factory=dict)
    observations: Dict[str, List[ObservationCell]] = Field(default_factory=dict)
