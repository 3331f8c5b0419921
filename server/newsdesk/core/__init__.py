"""
Newsdesk Core Utilities
"""
from newsdesk.core.types import (
    AnalysisError,
    NewsdeskError,
    PublishError,
    SourceError,
    ValidationError,
)

__all__ = [
    "AnalysisError",
    "NewsdeskError",
    "PublishError",
    "SourceError",
    "ValidationError",
]
