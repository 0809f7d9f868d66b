#!filepath: ccperf/utils/logger.py
import os
from functools import wraps
from time import perf_counter
from typing import Callable

from loguru import logger


class Logging:
    """
    Process-wide logging facade
    ---------------------------------------
    - daily file sink with rotation / retention
    - component-tagged messages: "[Component] ..."
    - catch() decorator that logs and re-raises
    - progress_logger() for long step loops
    ---------------------------------------
    """

    def __init__(
        self,
        log_dir: str = "logs",
        rotation: str = "1 day",
        retention: str = "30 days",
        log_level: str = "INFO",
    ):
        self.log_dir = log_dir
        self.rotation = rotation
        self.retention = retention
        self.level = log_level

        os.makedirs(self.log_dir, exist_ok=True)
        self._configure()

    def reconfigure(self, cfg) -> None:
        """Apply a LogConfig in place; modules holding `logs` keep working."""
        self.log_dir = cfg.dir
        self.rotation = cfg.rotation
        self.retention = cfg.retention
        self.level = cfg.level

        os.makedirs(self.log_dir, exist_ok=True)
        self._configure()

    def _configure(self) -> None:
        logger.remove()

        logger.add(
            sink=f"{self.log_dir}/{{time:YYYY-MM-DD}}.log",
            rotation=self.rotation,
            retention=self.retention,
            level=self.level,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}",
            enqueue=True,  # safe across worker processes
            backtrace=True,
            diagnose=True,
        )

        logger.debug("-----------Logger initialized-----------")

    # ---------- basic interface ----------
    def debug(self, msg: str, *args, **kwargs):
        logger.debug(msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs):
        logger.info(msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs):
        logger.warning(msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs):
        logger.error(msg, *args, **kwargs)

    def exception(self, msg: str, *args, **kwargs):
        logger.exception(msg, *args, **kwargs)

    # ---------- decorators ----------
    def catch(
        self,
        msg: str = "Exception occurred",
        log_inputs: bool = False,
        log_outputs: bool = False,
        log_time: bool = True,
    ) -> Callable:

        def decorator(func: Callable):
            @wraps(func)
            def wrapper(*args, **kwargs):

                if log_inputs:
                    logger.info(f"[CALL] {func.__name__} args={args}, kwargs={kwargs}")

                start = perf_counter()

                try:
                    result = func(*args, **kwargs)
                except Exception:
                    logger.exception(f"[ERROR] {func.__name__}: {msg}")
                    raise

                if log_outputs:
                    logger.info(f"[RETURN] {func.__name__} result={result}")

                if log_time:
                    cost = perf_counter() - start
                    logger.info(f"[TIME] {func.__name__} took {cost:.4f}s")

                return result

            return wrapper

        return decorator

    def progress_logger(self, task: str, total: int, unit: str = "items") -> "_SimpleProgressLogger":
        """
        Usage:
            prog = logs.progress_logger("batch", total=10, unit="steps")
            for ...:
                prog.update(1)
            prog.finish()
        """
        return _SimpleProgressLogger(task, total, unit, self)


class _SimpleProgressLogger:
    """
    Info-level progress reporting; does not touch the sink configuration.
    """

    def __init__(self, task, total, unit, logger):
        self.task = task
        self.total = int(total)
        self.unit = unit
        self.logger = logger
        self.current = 0
        self.start = perf_counter()

        logger.info(f"[{self.task}] START total={self.total} {self.unit}")

    def update(self, value):
        self.current += value
        elapsed = perf_counter() - self.start

        eta = (elapsed / self.current) * (self.total - self.current) if self.current else 0

        self.logger.info(
            f"[Progress] {self.task}: "
            f"{self.current}/{self.total} {self.unit} "
            f"| elapsed={elapsed:.2f}s | ETA={eta:.2f}s"
        )

    def finish(self):
        elapsed = perf_counter() - self.start
        self.logger.info(f"[{self.task}] DONE total_time={elapsed:.2f}s")


# global default, reconfigured by init_logging()
logs = Logging(
    log_dir=os.getenv("CCPERF_LOG_DIR", "logs"),
    log_level=os.getenv("CCPERF_LOG_LEVEL", "INFO"),
)


def init_logging(cfg) -> Logging:
    """Reconfigure the global sink from a LogConfig."""
    logs.reconfigure(cfg)
    return logs
