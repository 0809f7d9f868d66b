# tests/eval/test_erlang.py
import math

import numpy as np
import pytest

from ccperf.eval import ErlangCEvaluator, EvalOption, erlang_c
from ccperf.measures import MeasureType
from ccperf.utils.errors import NotFoundError, NotReadyError, UnstableSystemError


def test_erlang_c_known_value():
    # 10 agents, 8 Erlangs
    assert erlang_c(10, 8.0) == pytest.approx(0.4092, abs=5e-4)


def test_point_estimates():
    ev = ErlangCEvaluator(arrival_rate=8.0, service_rate=1.0, agents=10, awts=(0.5,))
    ev.evaluate()
    pw = erlang_c(10, 8.0)
    assert ev.point_estimate(MeasureType.DELAYRATIO)[0, 0] == pytest.approx(pw)
    assert ev.point_estimate(MeasureType.SPEEDOFANSWER)[0, 0] == pytest.approx(pw / 2.0)
    assert ev.point_estimate(MeasureType.OCCUPANCY)[0, 0] == pytest.approx(0.8)
    assert ev.point_estimate(MeasureType.SERVICELEVEL)[0, 0] == pytest.approx(1 - pw * math.exp(-1.0))
    assert not ev.is_likely_unstable()


def test_shapes_with_several_awts():
    ev = ErlangCEvaluator(8.0, 1.0, 10, awts=(0.1, 0.5, 1.0))
    ev.evaluate()
    for m in ev.supported_measures():
        assert ev.point_estimate(m).shape == m.shape(ev.info)
    sl = ev.point_estimate(MeasureType.SERVICELEVEL)[:, 0]
    assert np.all(np.diff(sl) > 0)
    assert MeasureType.SERVICELEVEL.row_name(ev.info, 1) == "Inbound (AWT 0.5s)"


def test_evaluate_is_idempotent():
    ev = ErlangCEvaluator(8.0, 1.0, 10)
    ev.evaluate()
    first = ev.point_estimate(MeasureType.SERVICELEVEL)
    ev.evaluate()
    np.testing.assert_array_equal(ev.point_estimate(MeasureType.SERVICELEVEL), first)


def test_unstable_system():
    ev = ErlangCEvaluator(12.0, 1.0, 10)
    with pytest.raises(NotReadyError):
        ev.is_likely_unstable()
    with pytest.raises(UnstableSystemError):
        ev.evaluate()
    assert ev.is_likely_unstable()
    with pytest.raises(NotReadyError):
        ev.point_estimate(MeasureType.SERVICELEVEL)


def test_not_found_and_not_ready():
    ev = ErlangCEvaluator(8.0, 1.0, 10)
    with pytest.raises(NotFoundError):
        ev.point_estimate(MeasureType.ABANDONMENTRATIOAFTERAWT)
    with pytest.raises(NotReadyError):
        ev.point_estimate(MeasureType.SERVICELEVEL)


def test_staffing_option():
    ev = ErlangCEvaluator(8.0, 1.0, 9)
    ev.set_option(EvalOption.STAFFING_VECTOR, [12])
    assert ev.get_option(EvalOption.STAFFING_VECTOR) == [12]
    ev.evaluate()
    assert ev.point_estimate(MeasureType.OCCUPANCY)[0, 0] == pytest.approx(8.0 / 12.0)


def test_option_errors():
    ev = ErlangCEvaluator(8.0, 1.0, 10)
    with pytest.raises(NotFoundError):
        ev.set_option(EvalOption.QUEUE_CAPACITY, 5)
    with pytest.raises(NotFoundError):
        ev.get_option(EvalOption.CURRENT_PERIOD)
    with pytest.raises(TypeError):
        ev.set_option(EvalOption.STAFFING_VECTOR, 12)
