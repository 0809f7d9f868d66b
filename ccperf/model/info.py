# ccperf/model/info.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple


@dataclass(frozen=True)
class NamedInfo:
    """Name and free-form properties of one entity or segment."""

    name: str = ""
    properties: Mapping[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "properties": dict(self.properties)}

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "NamedInfo":
        return cls(
            name=raw.get("name") or "",
            properties=dict(raw.get("properties") or {}),
        )


def _with_segments(n: int, s: int) -> int:
    # implicit "all" aggregate only when there is something to aggregate
    if n <= 1:
        return n
    return n + s + 1


_TABLES = (
    "contact_types",
    "agent_groups",
    "waiting_queues",
    "main_periods",
    "contact_type_segments",
    "inbound_type_segments",
    "outbound_type_segments",
    "agent_group_segments",
    "waiting_queue_segments",
    "main_period_segments",
)


@dataclass(frozen=True)
class CenterInfo:
    """
    CenterInfo (FROZEN)

    Entity tables of a contact-center model, the context every
    row/column kind is evaluated against.

    Contract:
      - contact_types lists inbound types first; num_inbound_types of them
      - awt_matrix_names has one entry per matrix of acceptable waiting
        times (at least one)
      - segments regroup base entities; they only produce rows/columns
        when the base count exceeds one
    """

    contact_types: Tuple[NamedInfo, ...] = ()
    num_inbound_types: int = 0
    agent_groups: Tuple[NamedInfo, ...] = ()
    waiting_queues: Tuple[NamedInfo, ...] = ()
    main_periods: Tuple[NamedInfo, ...] = ()

    contact_type_segments: Tuple[NamedInfo, ...] = ()
    inbound_type_segments: Tuple[NamedInfo, ...] = ()
    outbound_type_segments: Tuple[NamedInfo, ...] = ()
    agent_group_segments: Tuple[NamedInfo, ...] = ()
    waiting_queue_segments: Tuple[NamedInfo, ...] = ()
    main_period_segments: Tuple[NamedInfo, ...] = ()

    awt_matrix_names: Tuple[str, ...] = ("",)
    default_unit: Optional[str] = None

    # -------------------------------------------------- counts
    @property
    def num_contact_types(self) -> int:
        return len(self.contact_types)

    @property
    def num_outbound_types(self) -> int:
        return len(self.contact_types) - self.num_inbound_types

    @property
    def num_agent_groups(self) -> int:
        return len(self.agent_groups)

    @property
    def num_waiting_queues(self) -> int:
        return len(self.waiting_queues)

    @property
    def num_main_periods(self) -> int:
        return len(self.main_periods)

    @property
    def num_awt_matrices(self) -> int:
        return len(self.awt_matrix_names)

    # -------------------------------------------------- with segments
    @property
    def num_contact_types_with_segments(self) -> int:
        return _with_segments(self.num_contact_types, len(self.contact_type_segments))

    @property
    def num_inbound_types_with_segments(self) -> int:
        return _with_segments(self.num_inbound_types, len(self.inbound_type_segments))

    @property
    def num_outbound_types_with_segments(self) -> int:
        return _with_segments(self.num_outbound_types, len(self.outbound_type_segments))

    @property
    def num_agent_groups_with_segments(self) -> int:
        return _with_segments(self.num_agent_groups, len(self.agent_group_segments))

    @property
    def num_waiting_queues_with_segments(self) -> int:
        return _with_segments(self.num_waiting_queues, len(self.waiting_queue_segments))

    @property
    def num_main_periods_with_segments(self) -> int:
        return _with_segments(self.num_main_periods, len(self.main_period_segments))

    def awt_matrix_name(self, m: int) -> str:
        name = self.awt_matrix_names[m]
        return name if name else str(m)

    # -------------------------------------------------- persistence
    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            t: [e.to_dict() for e in getattr(self, t)] for t in _TABLES
        }
        out["num_inbound_types"] = self.num_inbound_types
        out["awt_matrix_names"] = list(self.awt_matrix_names)
        out["default_unit"] = self.default_unit
        return out

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "CenterInfo":
        tables = {
            t: tuple(NamedInfo.from_dict(e) for e in (raw.get(t) or ()))
            for t in _TABLES
        }
        return cls(
            num_inbound_types=int(raw.get("num_inbound_types", 0)),
            awt_matrix_names=tuple(raw.get("awt_matrix_names") or ("",)),
            default_unit=raw.get("default_unit"),
            **tables,
        )

    @classmethod
    def simple(
        cls,
        num_inbound: int,
        num_agent_groups: int,
        *,
        num_outbound: int = 0,
        num_periods: int = 1,
        num_queues: Optional[int] = None,
        names: bool = False,
        num_awt_matrices: int = 1,
        segments: Optional[Mapping[str, Sequence[str]]] = None,
    ) -> "CenterInfo":
        """
        Anonymous (or generically named) model; one waiting queue per
        inbound type unless num_queues says otherwise.
        """
        def _entities(prefix: str, n: int) -> Tuple[NamedInfo, ...]:
            return tuple(NamedInfo(f"{prefix}{j}" if names else "") for j in range(n))

        segs = {
            f"{k}_segments": tuple(NamedInfo(s) for s in v)
            for k, v in (segments or {}).items()
        }
        return cls(
            contact_types=_entities("type", num_inbound + num_outbound),
            num_inbound_types=num_inbound,
            agent_groups=_entities("group", num_agent_groups),
            waiting_queues=_entities("queue", num_inbound if num_queues is None else num_queues),
            main_periods=_entities("period", num_periods),
            awt_matrix_names=tuple("" for _ in range(num_awt_matrices)),
            **segs,
        )
