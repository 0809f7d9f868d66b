#!filepath: ccperf/observability/timer.py
import time
from typing import Dict


class Timer:
    """
    Named wall-clock and CPU timers
    - start(name)
    - end(name) -> elapsed wall seconds
    - cpu(name) -> CPU seconds of the last finished interval
    """

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self._start: Dict[str, float] = {}
        self._cpu_start: Dict[str, float] = {}
        self._cpu: Dict[str, float] = {}

    def start(self, name: str):
        if not self.enabled:
            return
        self._start[name] = time.perf_counter()
        self._cpu_start[name] = time.process_time()

    def end(self, name: str) -> float:
        if not self.enabled or name not in self._start:
            return 0.0
        elapsed = time.perf_counter() - self._start.pop(name)
        self._cpu[name] = time.process_time() - self._cpu_start.pop(name)
        return elapsed

    def cpu(self, name: str) -> float:
        return self._cpu.get(name, 0.0)
