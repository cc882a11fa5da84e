"""Data models for the Resume Intake package."""

from .base import BaseModel, FrozenModel, IdentifiableModel, stable_id
from .enums import (
    AchievementCategory,
    ErrorType,
    MetricCategory,
    RECOVERABLE_ERROR_TYPES,
    SectionName,
    SkillCategory,
    SkillLevel,
)
from .resume import Achievement, Education, Experience, Metric, Skill
from .results import ParsedResume, ParseError, ParseResult, SectionParseResult

__all__ = [
    "BaseModel",
    "FrozenModel",
    "IdentifiableModel",
    "stable_id",
    "AchievementCategory",
    "ErrorType",
    "MetricCategory",
    "RECOVERABLE_ERROR_TYPES",
    "SectionName",
    "SkillCategory",
    "SkillLevel",
    "Achievement",
    "Education",
    "Experience",
    "Metric",
    "Skill",
    "ParsedResume",
    "ParseError",
    "ParseResult",
    "SectionParseResult",
]
