# tests/utils/test_logger.py
import pytest
from loguru import logger

from ccperf import logs


@pytest.fixture
def records():
    out = []
    handler = logger.add(lambda msg: out.append(msg.record["message"]), level="DEBUG")
    yield out
    logger.remove(handler)


def test_catch_logs_and_reraises(records):
    @logs.catch("division failed", log_time=False)
    def divide(a, b):
        return a / b

    assert divide(4, 2) == 2
    with pytest.raises(ZeroDivisionError):
        divide(1, 0)
    assert any("division failed" in r for r in records)


def test_catch_logs_time(records):
    @logs.catch()
    def noop():
        return None

    noop()
    assert any(r.startswith("[TIME] noop") for r in records)


def test_progress_logger(records):
    prog = logs.progress_logger("steps", total=2, unit="steps")
    prog.update(1)
    prog.update(1)
    prog.finish()

    assert records[0] == "[steps] START total=2 steps"
    assert "2/2 steps" in records[2]
    assert records[-1].startswith("[steps] DONE")
