from .app_config import AppConfig
from .log_config import LogConfig
from .report_config import ReportConfig
from .batch_config import BatchConfig
from .compare_config import CompareConfig

__all__ = ["AppConfig", "LogConfig", "ReportConfig", "BatchConfig", "CompareConfig"]
