"""Enumeration types for the Resume Intake package."""

from enum import Enum


class _LenientEnum(str, Enum):
    """String enum accepting member names, values and ``"Enum.MEMBER"`` strings."""

    @classmethod
    def _missing_(cls, value):
        """Handle case-insensitive string values during deserialization."""
        if isinstance(value, str):
            # Handle cases like "ErrorType.FILE_EMPTY", "FILE_EMPTY" or "File_Empty"
            if value.startswith(f"{cls.__name__}."):
                value = value.split(".", 1)[1]
            for member in cls:
                if value.lower() in (member.value, member.name.lower()):
                    return member
        return None

    def __str__(self) -> str:
        return self.value


class ErrorType(_LenientEnum):
    """Closed taxonomy of parse error kinds."""

    FILE_FORMAT = "file_format"
    FILE_CORRUPTED = "file_corrupted"
    FILE_EMPTY = "file_empty"
    SECTION_MISSING = "section_missing"
    PARSING_FAILED = "parsing_failed"
    FILE_TOO_LARGE = "file_too_large"
    UNSUPPORTED_FORMAT = "unsupported_format"

    @property
    def recoverable(self) -> bool:
        """Whether the user can fix this kind of problem without a new file."""
        return self in RECOVERABLE_ERROR_TYPES


RECOVERABLE_ERROR_TYPES = frozenset({
    ErrorType.FILE_FORMAT,
    ErrorType.SECTION_MISSING,
    ErrorType.PARSING_FAILED,
    ErrorType.FILE_TOO_LARGE,
    ErrorType.UNSUPPORTED_FORMAT,
})


class SectionName(_LenientEnum):
    """Resume sections the parser reports on."""

    EXPERIENCE = "experience"
    SKILLS = "skills"
    EDUCATION = "education"
    ACHIEVEMENTS = "achievements"
    PERSONAL_INFO = "personal_info"

    @property
    def label(self) -> str:
        """Human readable section label."""
        return self.value.replace("_", " ").title()


class SkillCategory(_LenientEnum):
    """Skill categories."""

    TECHNICAL = "technical"
    SOFT = "soft"
    INDUSTRY = "industry"


class SkillLevel(_LenientEnum):
    """Skill proficiency levels."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"


class AchievementCategory(_LenientEnum):
    """Achievement categories."""

    AWARD = "award"
    RECOGNITION = "recognition"
    MILESTONE = "milestone"
    PUBLICATION = "publication"


class MetricCategory(_LenientEnum):
    """Business metric categories."""

    RETENTION = "retention"
    GROWTH = "growth"
    SATISFACTION = "satisfaction"
    EFFICIENCY = "efficiency"
    REVENUE = "revenue"
    OTHER = "other"
