"""
Observability Infrastructure

Structured logging, correlation tracking and Prometheus metrics for the
planning engine and the vessel-visit execution workflow.
"""

import contextvars
import functools
import logging
import sys
import time
import uuid
from collections.abc import Callable
from typing import Any, TextIO, TypeVar

import structlog
from prometheus_client import Counter, Histogram, start_http_server

from .config import settings

# Context variables for correlation tracking
correlation_id_var: contextvars.ContextVar[str] = contextvars.ContextVar(
    "correlation_id", default=""
)

F = TypeVar("F", bound=Callable[..., Any])

# Prometheus metrics
PLANS_GENERATED = Counter(
    "berthing_plans_generated_total",
    "Operation plans produced by the schedule generator",
    ["algorithm", "feasible"],
)

DOCK_CONFLICTS = Counter(
    "berthing_dock_conflicts_total",
    "Dock time-overlap conflicts detected",
    ["source"],
)

UNPLACED_VISITS = Counter(
    "berthing_unplaced_visits_total",
    "Visit requests left without a dock by the schedule generator",
)

EXECUTION_TRANSITIONS = Counter(
    "berthing_execution_transitions_total",
    "Vessel-visit execution status transitions",
    ["from_status", "to_status"],
)

PLANNING_OPERATIONS = Counter(
    "berthing_planning_operations_total",
    "Total planning operations",
    ["operation_type", "status"],
)

PLANNING_DURATION = Histogram(
    "berthing_planning_operation_duration_seconds",
    "Planning operation duration",
    ["operation_type"],
)


class CorrelationIdProcessor:
    """Structlog processor to add correlation ID to all log entries."""

    def __call__(
        self, logger: Any, name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        correlation_id = correlation_id_var.get("")
        if correlation_id:
            event_dict["correlation_id"] = correlation_id
        return event_dict


def setup_structured_logging(stream: TextIO | None = None) -> None:
    """
    Configure structured logging with correlation tracking.

    Args:
        stream: Where log lines are written, stdout by default
    """
    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    processors = [
        structlog.contextvars.merge_contextvars,
        CorrelationIdProcessor(),
        structlog.processors.TimeStamper(fmt="ISO"),
        structlog.processors.add_log_level,
        structlog.stdlib.add_logger_name,
    ]

    if settings.LOG_FORMAT == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(colors=settings.ENVIRONMENT == "local")
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=stream or sys.stdout,
        level=log_level,
    )


def setup_metrics() -> None:
    """Expose Prometheus metrics over HTTP when enabled."""
    if not settings.ENABLE_METRICS:
        return

    start_http_server(settings.METRICS_PORT)


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


def set_correlation_id(correlation_id: str | None = None) -> str:
    """Set correlation ID for request tracking."""
    if correlation_id is None:
        correlation_id = str(uuid.uuid4())

    correlation_id_var.set(correlation_id)
    return correlation_id


def get_correlation_id() -> str:
    """Get current correlation ID."""
    return correlation_id_var.get("")


def monitor_performance(operation_type: str):
    """Decorator to monitor planning operations with metrics and logging."""

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            logger = get_logger(func.__module__)
            start_time = time.perf_counter()

            log_context = {
                "operation": operation_type,
                "function": func.__name__,
            }

            logger.debug("Operation started", **log_context)

            try:
                result = func(*args, **kwargs)
            except Exception as e:
                duration = time.perf_counter() - start_time
                PLANNING_OPERATIONS.labels(
                    operation_type=operation_type, status="error"
                ).inc()
                logger.error(
                    "Operation failed",
                    **log_context,
                    duration_seconds=duration,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                raise

            duration = time.perf_counter() - start_time
            PLANNING_OPERATIONS.labels(
                operation_type=operation_type, status="success"
            ).inc()
            PLANNING_DURATION.labels(operation_type=operation_type).observe(duration)
            logger.debug(
                "Operation completed successfully",
                **log_context,
                duration_seconds=duration,
            )
            return result

        return wrapper  # type: ignore[return-value]

    return decorator


def initialize_observability(stream: TextIO | None = None) -> None:
    """Initialize all observability components."""
    setup_structured_logging(stream)
    setup_metrics()

    logger = get_logger("observability")
    logger.info(
        "Observability system initialized",
        project=settings.PROJECT_NAME,
        log_format=settings.LOG_FORMAT,
        metrics_enabled=settings.ENABLE_METRICS,
        metrics_port=settings.METRICS_PORT if settings.ENABLE_METRICS else None,
    )
