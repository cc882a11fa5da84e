"""Service modules for the Resume Intake package."""

from .configuration_manager import AppConfig, ConfigurationManager, LoggingConfig, ParserConfig, VocabularyConfig
from .parsing_service import ParsingService, parse_resume_document
from .summary import ERROR_RECOVERY_GUIDE, ParsingSummary, create_parsing_summary

__all__ = [
    "AppConfig",
    "ConfigurationManager",
    "LoggingConfig",
    "ParserConfig",
    "VocabularyConfig",
    "ParsingService",
    "parse_resume_document",
    "ERROR_RECOVERY_GUIDE",
    "ParsingSummary",
    "create_parsing_summary",
]
