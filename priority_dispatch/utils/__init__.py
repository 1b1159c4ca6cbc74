"""Utility modules."""

from priority_dispatch.utils.logging import DispatchLogger, get_logger, setup_logging
from priority_dispatch.utils.tracing import AssignmentTracer

__all__ = ["setup_logging", "get_logger", "DispatchLogger", "AssignmentTracer"]
