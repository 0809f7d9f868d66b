# tests/measures/test_traffic.py
import numpy as np

from ccperf.measures import MeasureType, agent_to_contact_traffic, contact_to_agent_traffic
from ccperf.model import CenterInfo
from ccperf.results import EvalResults


def _served(info, matrix):
    return EvalResults(info, {MeasureType.SERVEDRATES: np.asarray(matrix, dtype=float)})


def test_traffic_shares():
    info = CenterInfo.simple(2, 2)
    # rows: type0, type1, all; columns: group0, group1, all
    sr = [[6.0, 2.0, 8.0],
          [4.0, 6.0, 10.0],
          [10.0, 8.0, 18.0]]
    ev = _served(info, sr)

    a2c = agent_to_contact_traffic(ev)
    assert a2c.shape == (3, 2)
    np.testing.assert_allclose(a2c[0], [0.6, 0.4])
    np.testing.assert_allclose(a2c[2], [8.0 / 18.0, 10.0 / 18.0])

    c2a = contact_to_agent_traffic(ev)
    assert c2a.shape == (3, 2)
    np.testing.assert_allclose(c2a[0], [0.75, 0.25])
    np.testing.assert_allclose(c2a[2], [10.0 / 18.0, 8.0 / 18.0])


def test_single_type_or_group_gives_ones():
    info = CenterInfo.simple(1, 2)
    ev = _served(info, [[3.0, 1.0, 4.0]])
    np.testing.assert_array_equal(agent_to_contact_traffic(ev), np.ones((3, 1)))

    info = CenterInfo.simple(2, 1)
    ev = _served(info, [[3.0], [1.0], [4.0]])
    np.testing.assert_array_equal(contact_to_agent_traffic(ev), np.ones((3, 1)))
