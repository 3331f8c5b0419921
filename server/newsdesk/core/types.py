"""
Core Type Definitions and Exceptions

Every error raised inside the service derives from NewsdeskError and carries
a context dict that is rendered into the message for logging.
"""
from __future__ import annotations

from typing import Any, Optional


class NewsdeskError(Exception):
    """Base exception for all newsdesk errors."""

    def __init__(
        self,
        message: str,
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} [{ctx_str}]"
        return self.message


class ValidationError(NewsdeskError):
    """Raised when data validation fails."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Any = None,
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        ctx = context or {}
        if field:
            ctx["field"] = field
        if value is not None:
            ctx["value"] = repr(value)[:100]  # Truncate long values
        super().__init__(message, ctx)
        self.field = field
        self.value = value


class SourceError(NewsdeskError):
    """Raised when an external feed or data source fails or times out."""

    def __init__(
        self,
        message: str,
        source: str,
        status: Optional[int] = None,
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        ctx = context or {}
        ctx["source"] = source
        if status is not None:
            ctx["status"] = status
        super().__init__(message, ctx)
        self.source = source
        self.status = status


class AnalysisError(NewsdeskError):
    """Raised when the on-demand headline analysis cannot be produced."""

    def __init__(
        self,
        message: str,
        headline: str = "",
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        ctx = context or {}
        if headline:
            ctx["headline"] = headline[:80]
        super().__init__(message, ctx)
        self.headline = headline


class PublishError(NewsdeskError):
    """Raised when mirroring a card to Redis fails."""

    def __init__(
        self,
        message: str,
        channel: str,
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        ctx = context or {}
        ctx["channel"] = channel
        super().__init__(message, ctx)
        self.channel = channel
