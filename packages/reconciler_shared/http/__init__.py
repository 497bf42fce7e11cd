"""Public shared HTTP API for reconciler packages."""

from .client import HttpClient
from .errors import (
    HttpJsonDecodeError,
    HttpRequestError,
    HttpStatusError,
)

__all__ = [
    "HttpClient",
    "HttpJsonDecodeError",
    "HttpRequestError",
    "HttpStatusError",
]
