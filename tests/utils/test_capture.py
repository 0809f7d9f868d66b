# tests/utils/test_capture.py
import pytest

from ccperf.utils.capture import try_capture
from ccperf.utils.errors import NotFoundError, NotReadyError


def _missing():
    raise NotFoundError("absent")


def _not_ready():
    raise NotReadyError("later")


def test_value_passes_through():
    assert try_capture(lambda a, b=0: a + b, 1, b=2) == 3


def test_not_found_becomes_none():
    assert try_capture(_missing) is None


def test_other_errors_propagate():
    with pytest.raises(NotReadyError):
        try_capture(_not_ready)
