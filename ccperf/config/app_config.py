#!filepath: ccperf/config/app_config.py
import os

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

from .log_config import LogConfig
from .report_config import ReportConfig
from .batch_config import BatchConfig
from .compare_config import CompareConfig


def project_root() -> str:
    """
    ccperf/config/app_config.py -> ccperf/config -> ccperf -> project_root
    """
    return os.path.abspath(os.path.join(os.path.dirname(__file__), "../../"))


class AppConfig(BaseModel):
    log: LogConfig = Field(default_factory=LogConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)
    batch: BatchConfig = Field(default_factory=BatchConfig)
    compare: CompareConfig = Field(default_factory=CompareConfig)

    @classmethod
    def load(cls, path: str | None = None) -> "AppConfig":
        """
        YAML config + .env
        - default: <project_root>/ccperf/config/base.yml
        - CCPERF_LOG_LEVEL / CCPERF_LOG_DIR override the log section
        """
        root = project_root()

        load_dotenv(os.path.join(root, ".env"))

        if path is None:
            path = os.path.join(root, "ccperf/config/base.yml")

        if not os.path.exists(path):
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}

        log = dict(raw.get("log") or {})
        if os.getenv("CCPERF_LOG_LEVEL"):
            log["level"] = os.getenv("CCPERF_LOG_LEVEL")
        if os.getenv("CCPERF_LOG_DIR"):
            log["dir"] = os.getenv("CCPERF_LOG_DIR")
        raw["log"] = log

        return cls(**raw)
