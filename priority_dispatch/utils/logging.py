"""Structured logging configuration."""

import logging
import sys
from typing import Any

import structlog
from pythonjsonlogger import jsonlogger

from priority_dispatch.config import get_settings


def setup_logging() -> None:
    """Configure structured logging for the application."""
    settings = get_settings()

    # Configure standard library logging
    log_level = getattr(logging, settings.log_level)

    if settings.log_format == "json":
        # JSON logging for production
        handler = logging.StreamHandler(sys.stdout)
        formatter = jsonlogger.JsonFormatter(
            fmt="%(timestamp)s %(level)s %(name)s %(message)s",
            rename_fields={"levelname": "level", "asctime": "timestamp"},
        )
        handler.setFormatter(formatter)
    else:
        # Human-readable logging for development
        handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.JSONRenderer() if settings.log_format == "json"
            else structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


class DispatchLogger:
    """Logger for ranking, priority changes and assignment offers."""

    def __init__(self, component: str):
        self.component = component
        self.logger = get_logger(component)

    def log_ranking(
        self,
        order_id: int,
        candidates: int,
        ranked: int,
        required_vehicle_type: str,
        **kwargs: Any,
    ) -> None:
        """Log the outcome of a ranking call."""
        self.logger.debug(
            "drivers_ranked",
            component=self.component,
            order_id=order_id,
            candidates=candidates,
            ranked=ranked,
            required_vehicle_type=required_vehicle_type,
            **kwargs,
        )

    def log_priority_change(
        self,
        driver_id: int,
        previous_level: str,
        new_level: str,
        reason: str,
        changed_by: int | None = None,
        **kwargs: Any,
    ) -> None:
        """Log a priority level change."""
        self.logger.info(
            "priority_level_changed",
            component=self.component,
            driver_id=driver_id,
            previous_level=previous_level,
            new_level=new_level,
            reason=reason,
            changed_by=changed_by,
            **kwargs,
        )

    def log_offer(
        self,
        order_id: int,
        driver_id: int,
        priority_score: float,
        assignment_reason: str,
        **kwargs: Any,
    ) -> None:
        """Log an order being offered to a driver."""
        self.logger.info(
            "order_offered",
            component=self.component,
            order_id=order_id,
            driver_id=driver_id,
            priority_score=priority_score,
            assignment_reason=assignment_reason,
            **kwargs,
        )

    def log_response(
        self,
        order_id: int,
        driver_id: int,
        response_status: str,
        response_time: int | None,
        **kwargs: Any,
    ) -> None:
        """Log a driver's answer to an offer."""
        self.logger.info(
            "offer_answered",
            component=self.component,
            order_id=order_id,
            driver_id=driver_id,
            response_status=response_status,
            response_time=response_time,
            **kwargs,
        )
