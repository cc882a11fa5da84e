"""Downstream schema layer for re-validating extracted resume data.

The schemas here are stricter than the data models: they check what a
consumer (manual entry forms, storage) needs, such as the GPA range and
non-empty list items. Extracted data is expected to pass them.
"""

import datetime as dt
from dataclasses import dataclass, field
from typing import Annotated, Any, Dict, List, Optional, Type, Union

from pydantic import BaseModel as PydanticBaseModel, ConfigDict, Field, ValidationError, model_validator

from ..models.enums import AchievementCategory, MetricCategory, SkillCategory, SkillLevel
from ..utils.logging import get_logger

logger = get_logger("validation")

MIN_DESCRIPTION_LENGTH = 10

NonEmptyStr = Annotated[str, Field(min_length=1)]


@dataclass
class ValidationIssue:
    """A single schema problem."""
    field: str
    message: str
    code: str


@dataclass
class ValidationResult:
    """Outcome of validating one value against a schema."""
    is_valid: bool
    errors: List[ValidationIssue] = field(default_factory=list)
    warnings: List[ValidationIssue] = field(default_factory=list)

    def errors_by_field(self) -> Dict[str, List[str]]:
        """Group error messages by field path."""
        grouped: Dict[str, List[str]] = {}
        for issue in self.errors:
            grouped.setdefault(issue.field, []).append(issue.message)
        return grouped


class _Schema(PydanticBaseModel):
    model_config = ConfigDict(extra="ignore")


class _DatedSchema(_Schema):
    start_date: dt.date
    end_date: Optional[dt.date] = None

    @model_validator(mode="after")
    def check_date_order(self):
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("End date must be after start date")
        return self


class MetricSchema(_Schema):
    id: NonEmptyStr
    name: NonEmptyStr
    value: Union[float, str]
    unit: NonEmptyStr
    description: NonEmptyStr
    category: MetricCategory
    timeframe: Optional[str] = None
    context: Optional[str] = None


class ExperienceSchema(_DatedSchema):
    id: NonEmptyStr
    company: NonEmptyStr
    position: NonEmptyStr
    location: NonEmptyStr
    description: str
    achievements: List[NonEmptyStr]
    technologies: List[NonEmptyStr]
    metrics: List[MetricSchema]


class SkillSchema(_Schema):
    id: NonEmptyStr
    name: NonEmptyStr
    category: SkillCategory
    level: SkillLevel
    description: Optional[str] = None


class EducationSchema(_DatedSchema):
    id: NonEmptyStr
    institution: NonEmptyStr
    degree: NonEmptyStr
    field_of_study: NonEmptyStr
    gpa: Optional[float] = Field(default=None, ge=0.0, le=4.0)
    achievements: List[NonEmptyStr] = Field(default_factory=list)


class AchievementSchema(_Schema):
    id: NonEmptyStr
    title: NonEmptyStr
    description: str
    date: dt.date
    category: AchievementCategory
    organization: Optional[str] = None
    metrics: List[MetricSchema] = Field(default_factory=list)


class ParsedResumeSchema(_Schema):
    personal_info: Dict[str, Any] = Field(default_factory=dict)
    experience: List[ExperienceSchema]
    skills: List[SkillSchema]
    education: List[EducationSchema]
    achievements: List[AchievementSchema]
    raw_text: str
    confidence: float = Field(..., ge=0.0, le=1.0)


def _as_data(data: Any) -> Any:
    if isinstance(data, PydanticBaseModel):
        return data.model_dump()
    return data


def _issues_from(error: ValidationError) -> List[ValidationIssue]:
    issues = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ())) or "root"
        issues.append(ValidationIssue(field=location, message=item.get("msg", "Invalid value"), code=item.get("type", "invalid")))
    return issues


def _description_warnings(data: Any, prefix: str = "") -> List[ValidationIssue]:
    if not isinstance(data, dict):
        return []
    description = data.get("description")
    if isinstance(description, str) and len(description.strip()) < MIN_DESCRIPTION_LENGTH:
        return [ValidationIssue(
            field=f"{prefix}description",
            message=f"Description should be at least {MIN_DESCRIPTION_LENGTH} characters",
            code="description_too_short",
        )]
    return []


def validate_data(schema: Type[PydanticBaseModel], data: Any) -> ValidationResult:
    """Validate a value against a schema.

    Args:
        schema: Schema model class
        data: Model instance or plain dict

    Returns:
        ValidationResult with one issue per failing field
    """
    try:
        schema.model_validate(_as_data(data))
    except ValidationError as e:
        issues = _issues_from(e)
        logger.debug(f"{schema.__name__} validation failed with {len(issues)} issue(s)")
        return ValidationResult(is_valid=False, errors=issues)
    return ValidationResult(is_valid=True)


def validate_experience(data: Any) -> ValidationResult:
    """Validate an experience entry; short descriptions are warnings."""
    payload = _as_data(data)
    result = validate_data(ExperienceSchema, payload)
    result.warnings.extend(_description_warnings(payload))
    return result


def validate_skill(data: Any) -> ValidationResult:
    return validate_data(SkillSchema, data)


def validate_education(data: Any) -> ValidationResult:
    return validate_data(EducationSchema, data)


def validate_achievement(data: Any) -> ValidationResult:
    """Validate an achievement entry; short descriptions are warnings."""
    payload = _as_data(data)
    result = validate_data(AchievementSchema, payload)
    result.warnings.extend(_description_warnings(payload))
    return result


def validate_parsed_resume(data: Any) -> ValidationResult:
    """Validate a whole parsed resume including every nested entry.

    Args:
        data: ParsedResume or equivalent dict

    Returns:
        ValidationResult covering all sections
    """
    payload = _as_data(data)
    result = validate_data(ParsedResumeSchema, payload)
    if isinstance(payload, dict):
        for section in ("experience", "achievements"):
            for index, entry in enumerate(payload.get(section) or []):
                result.warnings.extend(_description_warnings(entry, prefix=f"{section}.{index}."))
    return result
