"""Public logging API for reconciler packages.

This package wraps Python's ``logging`` module with opinionated defaults for
stderr emission and structured context propagation.
"""

from .config import configure_logging, get_logger
from .context import log_context
from .public_api import public_api_instrumented

__all__ = [
    "configure_logging",
    "get_logger",
    "log_context",
    "public_api_instrumented",
]
