# tests/results/test_eval_results.py
import numpy as np
import pytest

from ccperf.eval import ErlangCEvaluator, EvalOption
from ccperf.measures import MeasureType
from ccperf.model import CenterInfo, NamedInfo
from ccperf.results import EvalResults, SimResults
from ccperf.utils.errors import (
    InvalidStateError,
    NotFoundError,
    NotReadyError,
    UnsupportedOperationError,
)


def test_capture_copies_every_measure():
    ev = ErlangCEvaluator(8.0, 1.0, 10)
    ev.evaluate()
    res = EvalResults.capture(ev)
    assert list(res.supported_measures()) == list(ev.supported_measures())
    for m in ev.supported_measures():
        np.testing.assert_array_equal(res.point_estimate(m), ev.point_estimate(m))
    assert res.eval_info.evaluator == "ErlangCEvaluator"
    res.validate()


def test_capture_is_detached_from_source():
    ev = ErlangCEvaluator(8.0, 1.0, 10)
    ev.evaluate()
    res = EvalResults.capture(ev)
    before = res.point_estimate(MeasureType.OCCUPANCY)
    ev.set_option(EvalOption.STAFFING_VECTOR, [20])
    ev.evaluate()
    np.testing.assert_array_equal(res.point_estimate(MeasureType.OCCUPANCY), before)


def test_capture_before_evaluate_fails():
    with pytest.raises(NotReadyError):
        EvalResults.capture(ErlangCEvaluator(8.0, 1.0, 10))


def test_snapshot_cannot_be_evaluated(make_eval_results):
    res = make_eval_results()
    with pytest.raises(UnsupportedOperationError):
        res.evaluate()
    with pytest.raises(UnsupportedOperationError):
        res.reset()
    assert res.is_likely_unstable() is False
    assert res.supported_options() == frozenset()


def test_missing_measure(make_eval_results):
    with pytest.raises(NotFoundError):
        make_eval_results().point_estimate(MeasureType.OCCUPANCY)


def test_validate_rejects_bad_shape(small_info):
    res = EvalResults(small_info, {MeasureType.SERVICELEVEL: np.zeros((2, 1))})
    with pytest.raises(InvalidStateError) as e:
        res.validate()
    assert "SERVICELEVEL" in str(e.value)


def test_validate_rejects_bad_inbound_count():
    info = CenterInfo(contact_types=(NamedInfo("a"),), num_inbound_types=2)
    with pytest.raises(InvalidStateError):
        EvalResults(info, {}).validate()


def test_capture_any_dispatches(toy_simulator):
    sim = toy_simulator(steps=3)
    sim.evaluate()
    assert isinstance(EvalResults.capture_any(sim), SimResults)

    ev = ErlangCEvaluator(8.0, 1.0, 10)
    ev.evaluate()
    captured = EvalResults.capture_any(ev)
    assert type(captured) is EvalResults


def test_to_frame_long_form(make_eval_results):
    frame = make_eval_results().to_frame()
    assert list(frame.columns) == ["measure", "row", "column", "row_name", "column_name", "value"]
    assert len(frame) == 6
    row = frame[(frame.measure == "WAITINGTIME") & (frame.row == 1)].iloc[0]
    assert row.row_name == "Support"
    assert row.column_name == "Morning"
    assert row.value == 8.0


def test_write_parquet(make_eval_results, tmp_path):
    import pyarrow.parquet as pq

    path = make_eval_results().write_parquet(tmp_path / "out" / "results.parquet")
    table = pq.read_table(path)
    assert table.num_rows == 6
    assert "row_name" in table.column_names
