"""API middleware components.

This module contains middleware for authentication, error handling,
request logging and metrics.
"""

from .auth import BasicAuthCredentials, verify_basic_auth
from .error_handler import ErrorHandlerMiddleware
from .logging_middleware import LoggingMiddleware
from .metrics_middleware import MetricsMiddleware

__all__ = [
    "BasicAuthCredentials",
    "verify_basic_auth",
    "ErrorHandlerMiddleware",
    "LoggingMiddleware",
    "MetricsMiddleware",
]
