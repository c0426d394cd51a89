"""Cooperative cancellation and supersession primitives."""

from __future__ import annotations

from .debounce import DebouncedPipeline, PipelineAction
from .delay import delay, guard
from .scope import ErrorReporter, SupersessionScope, TaskFactory, log_error
from .token import Cancelled, CancellationToken

__all__ = [
    "Cancelled",
    "CancellationToken",
    "DebouncedPipeline",
    "ErrorReporter",
    "PipelineAction",
    "SupersessionScope",
    "TaskFactory",
    "delay",
    "guard",
    "log_error",
]
