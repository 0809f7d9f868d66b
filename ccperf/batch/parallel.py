# ccperf/batch/parallel.py
from __future__ import annotations

import os
from concurrent.futures import ProcessPoolExecutor, as_completed
from typing import Any, Callable, Iterable, TypeVar

from ccperf.batch.types import ParallelKind
from ccperf.utils.logger import logs

T = TypeVar("T")


class ParallelExecutor:
    """
    ParallelExecutor

    - one ProcessPoolExecutor wrapper for independent work items
    - results come back in item order, whatever the completion order
    - workers == 1 runs in-process
    """

    @staticmethod
    def run(
            *,
            kind: ParallelKind,
            items: Iterable[T],
            handler: Callable[[T], Any],
            max_workers: int | None = None,
    ) -> list[Any]:
        items = list(items)
        if not items:
            logs.info("[ParallelExecutor] no items to process")
            return []

        logs.info(
            f"[ParallelExecutor] start "
            f"kind={kind.value} total={len(items)}"
        )

        workers = ParallelExecutor._resolve_workers(items, max_workers)

        if workers == 1:
            return ParallelExecutor._run_sequential(items, handler)
        return ParallelExecutor._run_parallel(items, handler, workers)

    # ---------------- internal ----------------

    @staticmethod
    def _resolve_workers(items: list, max_workers: int | None) -> int:
        cpu = os.cpu_count() or 1
        if max_workers is None:
            return min(cpu, len(items))
        return max(1, min(max_workers, len(items)))

    @staticmethod
    def _run_sequential(
            items: list[T],
            handler: Callable[[T], Any],
    ) -> list[Any]:
        return [handler(item) for item in items]

    @staticmethod
    def _run_parallel(
            items: list[T],
            handler: Callable[[T], Any],
            workers: int,
    ) -> list[Any]:
        logs.info(
            f"[ParallelExecutor] run parallel | workers={workers}"
        )

        results: list[Any] = [None] * len(items)
        with ProcessPoolExecutor(max_workers=workers) as pool:
            futures = {
                pool.submit(handler, item): pos
                for pos, item in enumerate(items)
            }
            for fut in as_completed(futures):
                results[futures[fut]] = fut.result()

        return results
