# tests/batch/test_parallel_executor.py
from ccperf.batch import ParallelExecutor, ParallelKind


def square(x):
    return x * x


def test_run_with_empty_items_does_nothing():
    called = []

    def handler(x):
        called.append(x)

    assert ParallelExecutor.run(kind=ParallelKind.STEP, items=[], handler=handler) == []
    assert called == []


def test_run_sequential_order_preserved():
    called = []

    def handler(x):
        called.append(x)
        return x.upper()

    items = ["a", "b", "c"]
    out = ParallelExecutor.run(kind=ParallelKind.STEP, items=items, handler=handler, max_workers=1)

    assert called == items
    assert out == ["A", "B", "C"]


def test_run_parallel_results_in_item_order():
    out = ParallelExecutor.run(kind=ParallelKind.STEP, items=range(8), handler=square, max_workers=3)
    assert out == [x * x for x in range(8)]


def test_worker_count_is_bounded_by_items():
    assert ParallelExecutor._resolve_workers([1, 2], 8) == 2
    assert ParallelExecutor._resolve_workers([1, 2, 3], 0) == 1
