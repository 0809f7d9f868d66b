# ccperf/results/io.py
from __future__ import annotations

import json
from pathlib import Path
from typing import Union

from pydantic import ValidationError

from ccperf.results.document import ResultsDocument
from ccperf.results.eval_results import EvalResults
from ccperf.results.sim_results import SimResults
from ccperf.utils.errors import UserInputError
from ccperf.utils.filesystem import FileSystem
from ccperf.utils.logger import logs


def save_results(results: EvalResults, path: Union[str, Path]) -> Path:
    """Write a snapshot as a JSON document (NaN kept as the NaN token)."""
    path = Path(path)
    payload = results.to_document().model_dump(mode="python")
    data = json.dumps(payload, indent=2, sort_keys=True).encode("utf-8")
    FileSystem.safe_write(path, data)
    logs.info(
        f"[Results] saved {payload['kind']} results "
        f"({len(payload['measures'])} measures) to {path}"
    )
    return path


def load_results(path: Union[str, Path]) -> EvalResults:
    """
    Read a snapshot written by save_results().
    SimResults for "sim" documents, EvalResults otherwise.
    """
    path = Path(path)
    if not path.is_file():
        raise UserInputError(f"[Results] file not found: {path}")
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise UserInputError(f"[Results] cannot read {path}: {e}") from e
    try:
        doc = ResultsDocument.model_validate(raw)
    except ValidationError as e:
        raise UserInputError(f"[Results] {path} is not a results document: {e}") from e

    cls = SimResults if doc.kind == "sim" else EvalResults
    results = cls.from_document(doc)
    logs.info(f"[Results] loaded {doc.kind} results ({len(results.supported_measures())} measures) from {path}")
    return results
