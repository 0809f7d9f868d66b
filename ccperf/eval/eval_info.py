# ccperf/eval/eval_info.py
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Mapping, Optional


def _encode(value: Any) -> Any:
    if isinstance(value, datetime):
        return {"datetime": value.isoformat()}
    if isinstance(value, timedelta):
        return {"duration_seconds": value.total_seconds()}
    if isinstance(value, (list, tuple)):
        return [_encode(v) for v in value]
    if isinstance(value, (str, bool, int, float)) or value is None:
        return value
    raise TypeError(f"[EvalInfo] unsupported metadata value type: {type(value).__name__}")


def _decode(value: Any) -> Any:
    if isinstance(value, dict):
        if "datetime" in value:
            return datetime.fromisoformat(value["datetime"])
        if "duration_seconds" in value:
            return timedelta(seconds=value["duration_seconds"])
        raise ValueError(f"[EvalInfo] unknown encoded metadata value: {value}")
    if isinstance(value, list):
        return [_decode(v) for v in value]
    return value


@dataclass
class EvalInfo:
    """
    EvalInfo

    Metadata describing how a set of results was produced.
    Well-known fields are typed; open-ended annotations go to `extra`
    (str, number, bool, datetime, timedelta or nested lists of those).
    """

    evaluator: str = ""
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    steps: Optional[int] = None
    cpu_seconds: Optional[float] = None
    seed: Optional[int] = None
    notes: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def annotate(self, key: str, value: Any) -> None:
        _encode(value)  # type check only
        self.extra[key] = value

    def copy(self) -> "EvalInfo":
        return replace(self, extra=dict(self.extra))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "evaluator": self.evaluator,
            "created_at": self.created_at.isoformat(),
            "steps": self.steps,
            "cpu_seconds": self.cpu_seconds,
            "seed": self.seed,
            "notes": self.notes,
            "extra": {k: _encode(v) for k, v in self.extra.items()},
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "EvalInfo":
        created = raw.get("created_at")
        return cls(
            evaluator=raw.get("evaluator") or "",
            created_at=datetime.fromisoformat(created) if created else datetime.now(timezone.utc),
            steps=raw.get("steps"),
            cpu_seconds=raw.get("cpu_seconds"),
            seed=raw.get("seed"),
            notes=raw.get("notes"),
            extra={k: _decode(v) for k, v in (raw.get("extra") or {}).items()},
        )
