"""Utility modules for the Resume Intake package."""

from .exceptions import (
    ResumeIntakeError,
    ConfigurationError,
    FileValidationError,
    DocumentDecodeError,
    DecodeTimeoutError,
)
from .logging import setup_logging, get_logger, start_parse_context, get_correlation_id

__all__ = [
    "ResumeIntakeError",
    "ConfigurationError",
    "FileValidationError",
    "DocumentDecodeError",
    "DecodeTimeoutError",
    "setup_logging",
    "get_logger",
    "start_parse_context",
    "get_correlation_id",
]
