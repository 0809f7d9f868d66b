# tests/model/test_center_info.py
from ccperf.model import CenterInfo, NamedInfo


def test_simple_counts():
    info = CenterInfo.simple(2, 3, num_outbound=1, num_periods=4, num_awt_matrices=2)
    assert info.num_contact_types == 3
    assert info.num_inbound_types == 2
    assert info.num_outbound_types == 1
    assert info.num_agent_groups == 3
    assert info.num_waiting_queues == 2
    assert info.num_main_periods == 4
    assert info.num_awt_matrices == 2
    assert info.num_contact_types_with_segments == 4
    assert info.num_main_periods_with_segments == 5


def test_segments_only_count_with_several_entities():
    info = CenterInfo.simple(1, 3, segments={"contact_type": ["a"], "agent_group": ["x", "y"]})
    assert info.num_contact_types_with_segments == 1
    assert info.num_agent_groups_with_segments == 6


def test_awt_matrix_name_falls_back_to_index():
    info = CenterInfo(awt_matrix_names=("short", ""))
    assert info.awt_matrix_name(0) == "short"
    assert info.awt_matrix_name(1) == "1"


def test_dict_round_trip():
    info = CenterInfo(
        contact_types=(NamedInfo("Sales", {"site": "east"}),),
        num_inbound_types=1,
        agent_groups=(NamedInfo("G"),),
        main_periods=(NamedInfo("P0"), NamedInfo("P1")),
        main_period_segments=(NamedInfo("Morning"),),
        awt_matrix_names=("20s",),
        default_unit="s",
    )
    assert CenterInfo.from_dict(info.to_dict()) == info
