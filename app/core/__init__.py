"""
Core module for application infrastructure.
"""
from app.core.config import Settings, get_settings
from app.core.logging_config import setup_logging
from app.core.exceptions import (
    LifecycleError,
    InvalidArgumentError,
    NotFoundError,
    ConflictError,
    DuplicateRecordError
)

__all__ = [
    "Settings",
    "get_settings",
    "setup_logging",
    "LifecycleError",
    "InvalidArgumentError",
    "NotFoundError",
    "ConflictError",
    "DuplicateRecordError"
]
