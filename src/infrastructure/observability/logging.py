"""Structured logging configuration with OpenTelemetry integration.

Configures structlog for JSON logging with correlation IDs from trace context.
Records emitted through the standard library (domain and application layers,
uvicorn, SQLAlchemy) are rendered by the same processor chain.
Excludes sensitive data (passwords, tokens, authorization headers) from logs.
"""

import logging
import sys
from typing import Any

import structlog
from opentelemetry import trace

from src.infrastructure.config.settings import ObservabilitySettings

SENSITIVE_KEYS = frozenset(
    {
        "token",
        "password",
        "auth_pass",
        "secret",
        "authorization",
        "auth",
        "cookie",
    }
)


def configure_logging(config: ObservabilitySettings | None = None) -> None:
    """Configure structured logging with structlog.

    Sets up:
    - JSON or console rendering
    - Correlation IDs from OpenTelemetry trace context
    - Log level from configuration
    - Standard library logging routed through the structlog renderer

    Args:
        config: Observability settings (defaults to environment values)
    """
    config = config or ObservabilitySettings()
    level = getattr(logging, config.log_level.upper(), logging.INFO)

    shared_processors: list = [
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _add_trace_context,
        _filter_sensitive_data,
        structlog.processors.StackInfoRenderer(),
    ]

    if config.log_json_format:
        renderer: Any = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def _add_trace_context(
    logger: logging.Logger,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Add OpenTelemetry trace context to log events.

    Adds trace_id and span_id for correlation with distributed traces.
    """
    span = trace.get_current_span()
    if span:
        span_context = span.get_span_context()
        if span_context.is_valid:
            event_dict["trace_id"] = format(span_context.trace_id, "032x")
            event_dict["span_id"] = format(span_context.span_id, "016x")

    return event_dict


def _mask_value(key: Any, value: Any) -> Any:
    if isinstance(key, str) and key.lower() in SENSITIVE_KEYS:
        return "***REDACTED***"
    if isinstance(value, dict):
        return {k: _mask_value(k, v) for k, v in value.items()}
    return value


def _filter_sensitive_data(
    logger: logging.Logger,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Mask values of sensitive keys, recursively.

    Args:
        logger: Logger instance
        method_name: Log method name (info, error, etc.)
        event_dict: Log event dictionary

    Returns:
        Updated event dictionary with sensitive data filtered
    """
    return {key: _mask_value(key, value) for key, value in event_dict.items()}


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get structured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Structured logger with bound context

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Downtime window stored", window_id="8f0c...")
    """
    return structlog.get_logger(name)
