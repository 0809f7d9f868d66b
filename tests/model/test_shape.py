# tests/model/test_shape.py
import pytest

from ccperf.model import CenterInfo, ColumnKind, NamedInfo, RowKind, TypeGroupIndex


@pytest.fixture
def info() -> CenterInfo:
    """K=3 (2 inbound, 1 outbound), I=2, one inbound segment, 3 periods."""
    return CenterInfo(
        contact_types=(
            NamedInfo("Sales", {"site": "east"}),
            NamedInfo("Support"),
            NamedInfo("Callback", {"mode": "preview"}),
        ),
        num_inbound_types=2,
        agent_groups=(NamedInfo("Generalists", {"site": "west", "skill": "all"}), NamedInfo("")),
        waiting_queues=(NamedInfo("Q1"),),
        main_periods=(NamedInfo("8h"), NamedInfo("9h"), NamedInfo("10h")),
        inbound_type_segments=(NamedInfo("Premium"),),
    )


def test_counts(info):
    assert RowKind.CONTACT_TYPE.count(info) == 4
    assert RowKind.INBOUND_TYPE.count(info) == 4   # 2 + 1 segment + all
    assert RowKind.OUTBOUND_TYPE.count(info) == 1
    assert RowKind.AGENT_GROUP.count(info) == 3
    assert RowKind.WAITING_QUEUE.count(info) == 1
    assert RowKind.CONTACT_TYPE_AGENT_GROUP.count(info) == 12
    assert ColumnKind.MAIN_PERIOD.count(info) == 4
    assert ColumnKind.AGENT_GROUP.count(info) == 3
    assert ColumnKind.SINGLE_COLUMN.count(info) == 1


def test_single_entity_has_no_aggregate():
    info = CenterInfo.simple(1, 1, segments={"contact_type": ["ignored"]})
    assert RowKind.CONTACT_TYPE.count(info) == 1
    assert RowKind.AGENT_GROUP.count(info) == 1
    assert ColumnKind.MAIN_PERIOD.count(info) == 1


def test_zero_entities():
    info = CenterInfo.simple(0, 0, num_periods=0)
    assert RowKind.CONTACT_TYPE.count(info) == 0
    assert RowKind.CONTACT_TYPE_AGENT_GROUP.count(info) == 0
    assert ColumnKind.MAIN_PERIOD.count(info) == 0


def test_simple_names(info):
    assert RowKind.CONTACT_TYPE.name_of(info, 0) == "Sales"
    assert RowKind.CONTACT_TYPE.name_of(info, 3) == "All contact types"
    assert RowKind.INBOUND_TYPE.name_of(info, 2) == "Premium"
    assert RowKind.INBOUND_TYPE.name_of(info, 3) == "All inbound types"
    assert RowKind.OUTBOUND_TYPE.name_of(info, 0) == "Callback"
    assert RowKind.AGENT_GROUP.name_of(info, 1) == "Agent group 1"
    assert RowKind.AGENT_GROUP.name_of(info, 2) == "All agent groups"
    assert ColumnKind.MAIN_PERIOD.name_of(info, 1) == "9h"
    assert ColumnKind.MAIN_PERIOD.name_of(info, 3) == "All periods"
    assert ColumnKind.SINGLE_COLUMN.name_of(info, 0) == ""


def test_placeholder_names():
    info = CenterInfo.simple(3, 2, segments={"contact_type": [""]})
    assert RowKind.CONTACT_TYPE.name_of(info, 1) == "Contact type 1"
    assert "segment 0" in RowKind.CONTACT_TYPE.name_of(info, 3)
    assert RowKind.CONTACT_TYPE.name_of(info, 4) == "All contact types"


def test_inbound_outbound_placeholders():
    info = CenterInfo.simple(2, 1, num_outbound=2)
    assert RowKind.INBOUND_TYPE.name_of(info, 1) == "Inbound type 1"
    # outbound placeholders keep the contact-type index
    assert RowKind.OUTBOUND_TYPE.name_of(info, 0) == "Outbound type 2"
    assert RowKind.OUTBOUND_TYPE.name_of(info, 2) == "All outbound types"


def test_inbound_borrows_contact_type_names_without_outbound():
    info = CenterInfo.simple(2, 1)
    assert RowKind.INBOUND_TYPE.name_of(info, 0) == "Contact type 0"
    assert RowKind.INBOUND_TYPE.name_of(info, 2) == "All inbound types"


def test_properties(info):
    assert RowKind.CONTACT_TYPE.properties(info, 0) == {"site": "east"}
    assert RowKind.CONTACT_TYPE.properties(info, 3) == {}
    assert RowKind.OUTBOUND_TYPE.properties(info, 0) == {"mode": "preview"}
    assert ColumnKind.MAIN_PERIOD.properties(info, 0) == {}


def test_pair_names_and_properties(info):
    kind = RowKind.CONTACT_TYPE_AGENT_GROUP
    # row = k * I' + i with I' = 3
    assert kind.name_of(info, 0) == "Sales, Generalists"
    assert kind.name_of(info, 5) == "Support, All agent groups"
    assert kind.name_of(info, 11) == "All contact types, All agent groups"
    # type properties override group ones
    assert kind.properties(info, 0) == {"site": "east", "skill": "all"}


def test_pair_index_round_trip(info):
    for kind in (
        RowKind.CONTACT_TYPE_AGENT_GROUP,
        RowKind.INBOUND_TYPE_AGENT_GROUP,
        RowKind.INBOUND_TYPE_AWT_AGENT_GROUP,
    ):
        for row in range(kind.count(info)):
            pair = kind.pair_index(info, row)
            assert kind.flat_index(info, pair) == row
    assert RowKind.CONTACT_TYPE_AGENT_GROUP.pair_index(info, 7) == TypeGroupIndex(2, 1)


def test_pair_index_rejects_simple_kind(info):
    with pytest.raises(ValueError):
        RowKind.CONTACT_TYPE.pair_index(info, 0)


def test_awt_single_matrix_matches_inbound(info):
    for row in range(RowKind.INBOUND_TYPE.count(info)):
        assert RowKind.INBOUND_TYPE_AWT.name_of(info, row) == RowKind.INBOUND_TYPE.name_of(info, row)


def test_awt_naming_with_several_matrices():
    info = CenterInfo(
        contact_types=(NamedInfo("Sales"), NamedInfo("Support")),
        num_inbound_types=2,
        agent_groups=(NamedInfo("G"),),
        main_periods=(NamedInfo("P"),),
        awt_matrix_names=("20s", ""),
    )
    kind = RowKind.INBOUND_TYPE_AWT
    assert kind.count(info) == 6
    assert kind.name_of(info, 0) == "Sales (AWT 20s)"
    assert kind.name_of(info, 2) == "All inbound types (AWT 20s)"
    assert kind.name_of(info, 4) == "Support (AWT 1)"
    assert kind.properties(info, 4) == RowKind.INBOUND_TYPE.properties(info, 1)

    pair = RowKind.INBOUND_TYPE_AWT_AGENT_GROUP
    # row = m*Ki'*I' + k*I' + i, I' = 1
    assert pair.name_of(info, 4) == "Support (AWT 1), G"


@pytest.mark.parametrize("row", [-1, 4])
def test_out_of_range_raises(info, row):
    with pytest.raises(IndexError):
        RowKind.CONTACT_TYPE.name_of(info, row)


def test_titles():
    assert RowKind.CONTACT_TYPE.title == "Types"
    assert RowKind.OUTBOUND_TYPE_AGENT_GROUP.title == "Types/Groups"
    assert RowKind.WAITING_QUEUE.title == "Queues"
    assert RowKind.AGENT_GROUP.title == "Groups"
    assert ColumnKind.MAIN_PERIOD.title == "Periods"
    assert ColumnKind.SINGLE_COLUMN.title == ""


def test_conversions():
    assert RowKind.CONTACT_TYPE.to_inbound_type() is RowKind.INBOUND_TYPE
    assert RowKind.CONTACT_TYPE_AGENT_GROUP.to_inbound_type_awt() is RowKind.INBOUND_TYPE_AWT_AGENT_GROUP
    assert RowKind.OUTBOUND_TYPE.to_contact_type_agent_group() is RowKind.OUTBOUND_TYPE_AGENT_GROUP
    assert RowKind.INBOUND_TYPE_AGENT_GROUP.to_contact_type() is RowKind.INBOUND_TYPE
    assert RowKind.CONTACT_TYPE.is_contact_type
    assert not RowKind.AGENT_GROUP.is_contact_type
    assert RowKind.OUTBOUND_TYPE_AGENT_GROUP.is_contact_type_agent_group


@pytest.mark.parametrize(
    "kind, op",
    [
        (RowKind.AGENT_GROUP, "to_inbound_type"),
        (RowKind.OUTBOUND_TYPE, "to_inbound_type_awt"),
        (RowKind.INBOUND_TYPE, "to_outbound_type"),
        (RowKind.WAITING_QUEUE, "to_contact_type_agent_group"),
        (RowKind.CONTACT_TYPE, "to_contact_type"),
    ],
)
def test_invalid_conversions(kind, op):
    with pytest.raises(ValueError):
        getattr(kind, op)()
