#!filepath: ccperf/__init__.py

from .utils.logger import Logging, logs, init_logging
from .utils.errors import (
    NotFoundError,
    NotReadyError,
    InvalidStateError,
    UnstableSystemError,
    UnsupportedOperationError,
    UserInputError,
)

__version__ = "0.1.0"

__all__ = [
    "logs", "Logging", "init_logging",
    "NotFoundError",
    "NotReadyError",
    "InvalidStateError",
    "UnstableSystemError",
    "UnsupportedOperationError",
    "UserInputError",
    "__version__",
]
