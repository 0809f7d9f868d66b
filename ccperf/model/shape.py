# ccperf/model/shape.py
from __future__ import annotations

from enum import Enum
from typing import Callable, Dict, Mapping, NamedTuple, Sequence

from ccperf.model.info import CenterInfo, NamedInfo

_EMPTY: Mapping[str, str] = {}


class TypeGroupIndex(NamedTuple):
    """Row of a (contact type, agent group) matrix, unflattened."""

    type_index: int
    group_index: int


class _Shape(NamedTuple):
    title: str
    count: Callable[[CenterInfo], int]
    name: Callable[[CenterInfo, int], str]
    properties: Callable[[CenterInfo, int], Mapping[str, str]]


# ---------------------------------------------------------------------------
# building blocks
# ---------------------------------------------------------------------------
def _count(n: int, s: int) -> int:
    if n <= 1:
        return n
    return n + s + 1


def _check(index: int, count: int, kind: str) -> None:
    if index < 0 or index >= count:
        raise IndexError(f"[{kind}] index {index} out of range [0, {count})")


def _locate(index: int, n: int, segments: Sequence[NamedInfo]):
    """
    Split an index into ("base", j) / ("segment", s) / ("all", None).
    Segments only exist when n > 1.
    """
    ns = len(segments) if n > 1 else 0
    if index >= n + ns:
        return "all", None
    if index >= n:
        return "segment", index - n
    return "base", index


def _simple_name(
    index: int,
    n: int,
    entities: Sequence[NamedInfo],
    segments: Sequence[NamedInfo],
    base_fmt: str,
    segment_fmt: str,
    all_label: str,
    offset: int = 0,
) -> str:
    where, j = _locate(index, n, segments)
    if where == "all":
        return all_label
    if where == "segment":
        return segments[j].name or segment_fmt.format(j)
    return entities[j + offset].name or base_fmt.format(j + offset)


def _simple_properties(
    index: int,
    n: int,
    entities: Sequence[NamedInfo],
    segments: Sequence[NamedInfo],
    offset: int = 0,
) -> Mapping[str, str]:
    where, j = _locate(index, n, segments)
    if where == "all":
        return _EMPTY
    if where == "segment":
        return segments[j].properties
    return entities[j + offset].properties


# ---------------------------------------------------------------------------
# simple row kinds
# ---------------------------------------------------------------------------
def _contact_type_count(info: CenterInfo) -> int:
    return _count(info.num_contact_types, len(info.contact_type_segments))


def _contact_type_name(info: CenterInfo, row: int) -> str:
    _check(row, _contact_type_count(info), "CONTACT_TYPE")
    return _simple_name(
        row, info.num_contact_types, info.contact_types, info.contact_type_segments,
        "Contact type {}", "Contact type segment {}", "All contact types",
    )


def _contact_type_properties(info: CenterInfo, row: int) -> Mapping[str, str]:
    _check(row, _contact_type_count(info), "CONTACT_TYPE")
    return _simple_properties(
        row, info.num_contact_types, info.contact_types, info.contact_type_segments
    )


def _inbound_count(info: CenterInfo) -> int:
    return _count(info.num_inbound_types, len(info.inbound_type_segments))


def _inbound_name(info: CenterInfo, row: int) -> str:
    _check(row, _inbound_count(info), "INBOUND_TYPE")
    ki = info.num_inbound_types
    if row < ki and info.num_outbound_types == 0:
        return _contact_type_name(info, row)
    return _simple_name(
        row, ki, info.contact_types, info.inbound_type_segments,
        "Inbound type {}", "Inbound type segment {}", "All inbound types",
    )


def _inbound_properties(info: CenterInfo, row: int) -> Mapping[str, str]:
    _check(row, _inbound_count(info), "INBOUND_TYPE")
    return _simple_properties(
        row, info.num_inbound_types, info.contact_types, info.inbound_type_segments
    )


def _outbound_count(info: CenterInfo) -> int:
    return _count(info.num_outbound_types, len(info.outbound_type_segments))


def _outbound_name(info: CenterInfo, row: int) -> str:
    _check(row, _outbound_count(info), "OUTBOUND_TYPE")
    ko = info.num_outbound_types
    if row < ko and info.num_inbound_types == 0:
        return _contact_type_name(info, row)
    return _simple_name(
        row, ko, info.contact_types, info.outbound_type_segments,
        "Outbound type {}", "Outbound type segment {}", "All outbound types",
        offset=info.num_inbound_types,
    )


def _outbound_properties(info: CenterInfo, row: int) -> Mapping[str, str]:
    _check(row, _outbound_count(info), "OUTBOUND_TYPE")
    return _simple_properties(
        row, info.num_outbound_types, info.contact_types, info.outbound_type_segments,
        offset=info.num_inbound_types,
    )


def _awt_count(info: CenterInfo) -> int:
    return info.num_awt_matrices * _inbound_count(info)


def _awt_name(info: CenterInfo, row: int) -> str:
    _check(row, _awt_count(info), "INBOUND_TYPE_AWT")
    if info.num_awt_matrices == 1:
        return _inbound_name(info, row)
    m, k = divmod(row, _inbound_count(info))
    # the AWT suffix replaces the CONTACT_TYPE borrowing of INBOUND_TYPE
    base = _simple_name(
        k, info.num_inbound_types, info.contact_types, info.inbound_type_segments,
        "Inbound type {}", "Inbound type segment {}", "All inbound types",
    )
    return f"{base} (AWT {info.awt_matrix_name(m)})"


def _awt_properties(info: CenterInfo, row: int) -> Mapping[str, str]:
    _check(row, _awt_count(info), "INBOUND_TYPE_AWT")
    return _inbound_properties(info, row % _inbound_count(info))


def _queue_count(info: CenterInfo) -> int:
    return _count(info.num_waiting_queues, len(info.waiting_queue_segments))


def _queue_name(info: CenterInfo, row: int) -> str:
    _check(row, _queue_count(info), "WAITING_QUEUE")
    return _simple_name(
        row, info.num_waiting_queues, info.waiting_queues, info.waiting_queue_segments,
        "Waiting queue {}", "Waiting queue segment {}", "All waiting queues",
    )


def _queue_properties(info: CenterInfo, row: int) -> Mapping[str, str]:
    _check(row, _queue_count(info), "WAITING_QUEUE")
    return _simple_properties(
        row, info.num_waiting_queues, info.waiting_queues, info.waiting_queue_segments
    )


def _group_count(info: CenterInfo) -> int:
    return _count(info.num_agent_groups, len(info.agent_group_segments))


def _group_name(info: CenterInfo, row: int) -> str:
    _check(row, _group_count(info), "AGENT_GROUP")
    return _simple_name(
        row, info.num_agent_groups, info.agent_groups, info.agent_group_segments,
        "Agent group {}", "Agent group segment {}", "All agent groups",
    )


def _group_properties(info: CenterInfo, row: int) -> Mapping[str, str]:
    _check(row, _group_count(info), "AGENT_GROUP")
    return _simple_properties(
        row, info.num_agent_groups, info.agent_groups, info.agent_group_segments
    )


def _period_count(info: CenterInfo) -> int:
    return _count(info.num_main_periods, len(info.main_period_segments))


def _period_name(info: CenterInfo, column: int) -> str:
    _check(column, _period_count(info), "MAIN_PERIOD")
    return _simple_name(
        column, info.num_main_periods, info.main_periods, info.main_period_segments,
        "Period {}", "Period segment {}", "All periods",
    )


# ---------------------------------------------------------------------------
# (contact type, agent group) pairs: row = t * I' + i
# ---------------------------------------------------------------------------
def _pair_shape(type_shape: _Shape) -> _Shape:
    def count(info: CenterInfo) -> int:
        return type_shape.count(info) * _group_count(info)

    def name(info: CenterInfo, row: int) -> str:
        _check(row, count(info), "TYPE_AGENT_GROUP")
        t, i = _split_pair(info, row)
        return f"{type_shape.name(info, t)}, {_group_name(info, i)}"

    def properties(info: CenterInfo, row: int) -> Mapping[str, str]:
        _check(row, count(info), "TYPE_AGENT_GROUP")
        t, i = _split_pair(info, row)
        # type properties win on key collisions
        return {**_group_properties(info, i), **type_shape.properties(info, t)}

    return _Shape("Types/Groups", count, name, properties)


def _split_pair(info: CenterInfo, row: int) -> TypeGroupIndex:
    t, i = divmod(row, _group_count(info))
    return TypeGroupIndex(t, i)


_CONTACT_TYPE = _Shape("Types", _contact_type_count, _contact_type_name, _contact_type_properties)
_INBOUND_TYPE = _Shape("Types", _inbound_count, _inbound_name, _inbound_properties)
_INBOUND_TYPE_AWT = _Shape("Types", _awt_count, _awt_name, _awt_properties)
_OUTBOUND_TYPE = _Shape("Types", _outbound_count, _outbound_name, _outbound_properties)
_AGENT_GROUP = _Shape("Groups", _group_count, _group_name, _group_properties)


class RowKind(Enum):
    """
    RowKind (CLOSED SET)

    Role and number of rows of a matrix of performance measures.
    All queries are pure functions of (CenterInfo, index).
    """

    CONTACT_TYPE = "CONTACTTYPE"
    INBOUND_TYPE = "INBOUNDTYPE"
    INBOUND_TYPE_AWT = "INBOUNDTYPEAWT"
    OUTBOUND_TYPE = "OUTBOUNDTYPE"
    CONTACT_TYPE_AGENT_GROUP = "CONTACTTYPEAGENTGROUP"
    INBOUND_TYPE_AGENT_GROUP = "INBOUNDTYPEAGENTGROUP"
    INBOUND_TYPE_AWT_AGENT_GROUP = "INBOUNDTYPEAWTAGENTGROUP"
    OUTBOUND_TYPE_AGENT_GROUP = "OUTBOUNDTYPEAGENTGROUP"
    WAITING_QUEUE = "WAITINGQUEUE"
    AGENT_GROUP = "AGENTGROUP"

    @property
    def title(self) -> str:
        return _ROW_SHAPES[self].title

    def count(self, info: CenterInfo) -> int:
        return _ROW_SHAPES[self].count(info)

    def name_of(self, info: CenterInfo, row: int) -> str:
        return _ROW_SHAPES[self].name(info, row)

    def properties(self, info: CenterInfo, row: int) -> Mapping[str, str]:
        return _ROW_SHAPES[self].properties(info, row)

    # ---------------- classification ----------------
    @property
    def is_contact_type(self) -> bool:
        return self in _TYPE_KINDS

    @property
    def is_contact_type_agent_group(self) -> bool:
        return self in _PAIR_OF

    # ---------------- pair encoding ----------------
    def pair_index(self, info: CenterInfo, row: int) -> TypeGroupIndex:
        """Flattened row -> (type row, agent group row)."""
        if not self.is_contact_type_agent_group:
            raise ValueError(f"[RowKind] {self.name} has no (type, group) encoding")
        _check(row, self.count(info), self.name)
        return _split_pair(info, row)

    def flat_index(self, info: CenterInfo, pair: TypeGroupIndex) -> int:
        """(type row, agent group row) -> flattened row."""
        if not self.is_contact_type_agent_group:
            raise ValueError(f"[RowKind] {self.name} has no (type, group) encoding")
        t, i = pair
        _check(t, self.to_contact_type().count(info), self.name)
        ip = _group_count(info)
        _check(i, ip, self.name)
        return t * ip + i

    # ---------------- conversions ----------------
    def to_inbound_type(self) -> "RowKind":
        return _convert(self, "to_inbound_type", {
            RowKind.CONTACT_TYPE: RowKind.INBOUND_TYPE,
            RowKind.CONTACT_TYPE_AGENT_GROUP: RowKind.INBOUND_TYPE_AGENT_GROUP,
            RowKind.INBOUND_TYPE: RowKind.INBOUND_TYPE,
            RowKind.INBOUND_TYPE_AGENT_GROUP: RowKind.INBOUND_TYPE_AGENT_GROUP,
        })

    def to_inbound_type_awt(self) -> "RowKind":
        return _convert(self, "to_inbound_type_awt", {
            RowKind.CONTACT_TYPE: RowKind.INBOUND_TYPE_AWT,
            RowKind.CONTACT_TYPE_AGENT_GROUP: RowKind.INBOUND_TYPE_AWT_AGENT_GROUP,
            RowKind.INBOUND_TYPE: RowKind.INBOUND_TYPE_AWT,
            RowKind.INBOUND_TYPE_AGENT_GROUP: RowKind.INBOUND_TYPE_AWT_AGENT_GROUP,
            RowKind.INBOUND_TYPE_AWT: RowKind.INBOUND_TYPE_AWT,
            RowKind.INBOUND_TYPE_AWT_AGENT_GROUP: RowKind.INBOUND_TYPE_AWT_AGENT_GROUP,
        })

    def to_outbound_type(self) -> "RowKind":
        return _convert(self, "to_outbound_type", {
            RowKind.CONTACT_TYPE: RowKind.OUTBOUND_TYPE,
            RowKind.CONTACT_TYPE_AGENT_GROUP: RowKind.OUTBOUND_TYPE_AGENT_GROUP,
            RowKind.OUTBOUND_TYPE: RowKind.OUTBOUND_TYPE,
            RowKind.OUTBOUND_TYPE_AGENT_GROUP: RowKind.OUTBOUND_TYPE_AGENT_GROUP,
        })

    def to_contact_type_agent_group(self) -> "RowKind":
        return _convert(self, "to_contact_type_agent_group", {v: k for k, v in _PAIR_OF.items()})

    def to_contact_type(self) -> "RowKind":
        return _convert(self, "to_contact_type", _PAIR_OF)


def _convert(kind: RowKind, op: str, table: Dict[RowKind, RowKind]) -> RowKind:
    if kind not in table:
        raise ValueError(f"[RowKind] {op}: invalid row kind {kind.name}")
    return table[kind]


_TYPE_KINDS = frozenset({
    RowKind.CONTACT_TYPE,
    RowKind.INBOUND_TYPE,
    RowKind.INBOUND_TYPE_AWT,
    RowKind.OUTBOUND_TYPE,
})

# pair kind -> its contact-type kind
_PAIR_OF: Dict[RowKind, RowKind] = {
    RowKind.CONTACT_TYPE_AGENT_GROUP: RowKind.CONTACT_TYPE,
    RowKind.INBOUND_TYPE_AGENT_GROUP: RowKind.INBOUND_TYPE,
    RowKind.INBOUND_TYPE_AWT_AGENT_GROUP: RowKind.INBOUND_TYPE_AWT,
    RowKind.OUTBOUND_TYPE_AGENT_GROUP: RowKind.OUTBOUND_TYPE,
}

_ROW_SHAPES: Dict[RowKind, _Shape] = {
    RowKind.CONTACT_TYPE: _CONTACT_TYPE,
    RowKind.INBOUND_TYPE: _INBOUND_TYPE,
    RowKind.INBOUND_TYPE_AWT: _INBOUND_TYPE_AWT,
    RowKind.OUTBOUND_TYPE: _OUTBOUND_TYPE,
    RowKind.CONTACT_TYPE_AGENT_GROUP: _pair_shape(_CONTACT_TYPE),
    RowKind.INBOUND_TYPE_AGENT_GROUP: _pair_shape(_INBOUND_TYPE),
    RowKind.INBOUND_TYPE_AWT_AGENT_GROUP: _pair_shape(_INBOUND_TYPE_AWT),
    RowKind.OUTBOUND_TYPE_AGENT_GROUP: _pair_shape(_OUTBOUND_TYPE),
    RowKind.WAITING_QUEUE: _Shape("Queues", _queue_count, _queue_name, _queue_properties),
    RowKind.AGENT_GROUP: _AGENT_GROUP,
}


class ColumnKind(Enum):
    """Role and number of columns of a matrix of performance measures."""

    MAIN_PERIOD = "MAINPERIOD"
    AGENT_GROUP = "AGENTGROUP"
    SINGLE_COLUMN = "SINGLECOLUMN"

    @property
    def title(self) -> str:
        return _COLUMN_SHAPES[self].title

    def count(self, info: CenterInfo) -> int:
        return _COLUMN_SHAPES[self].count(info)

    def name_of(self, info: CenterInfo, column: int) -> str:
        return _COLUMN_SHAPES[self].name(info, column)

    def properties(self, info: CenterInfo, column: int) -> Mapping[str, str]:
        return _COLUMN_SHAPES[self].properties(info, column)


def _single_name(info: CenterInfo, column: int) -> str:
    _check(column, 1, "SINGLE_COLUMN")
    return ""


def _no_properties(kind: str, count: Callable[[CenterInfo], int]):
    def properties(info: CenterInfo, column: int) -> Mapping[str, str]:
        _check(column, count(info), kind)
        return _EMPTY
    return properties


_COLUMN_SHAPES: Dict[ColumnKind, _Shape] = {
    ColumnKind.MAIN_PERIOD: _Shape(
        "Periods", _period_count, _period_name, _no_properties("MAIN_PERIOD", _period_count)
    ),
    ColumnKind.AGENT_GROUP: _AGENT_GROUP,
    ColumnKind.SINGLE_COLUMN: _Shape(
        "", lambda info: 1, _single_name, _no_properties("SINGLE_COLUMN", lambda info: 1)
    ),
}
