# ccperf/utils/capture.py
from __future__ import annotations

from typing import Callable, Optional, TypeVar

from ccperf.utils.errors import NotFoundError

T = TypeVar("T")


def try_capture(fn: Callable[..., T], *args, **kwargs) -> Optional[T]:
    """
    Call fn; a NotFoundError means "statistic absent" and yields None.

    Every other exception propagates.
    """
    try:
        return fn(*args, **kwargs)
    except NotFoundError:
        return None
