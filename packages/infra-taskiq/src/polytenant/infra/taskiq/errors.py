"""Errors raised by the background-job integration."""

from __future__ import annotations


class TaskIQError(Exception):
    """Base exception for background-job infrastructure errors."""


class TaskIQBrokerError(TaskIQError):
    """Raised when the broker cannot start or shut down."""


class TaskIQTenantError(TaskIQError):
    """Raised when a task is sent without a usable tenant."""
