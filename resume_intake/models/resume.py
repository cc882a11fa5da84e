"""Resume data models produced by the section extractors."""

import datetime as dt
from typing import List, Optional, Union

from pydantic import Field, model_validator

from .base import IdentifiableModel
from .enums import AchievementCategory, MetricCategory, SkillCategory, SkillLevel


class Metric(IdentifiableModel):
    """A quantified business outcome attached to a job or achievement."""

    name: str = Field(..., min_length=1, description="Metric name")
    value: Union[float, str] = Field(..., description="Metric value")
    unit: str = Field(default="", description="Unit of the value")
    description: str = Field(default="", description="What the metric measures")
    category: MetricCategory = Field(default=MetricCategory.OTHER, description="Metric category")
    timeframe: Optional[str] = Field(default=None, description="Period the metric covers")
    context: Optional[str] = Field(default=None, description="Additional context")


class Experience(IdentifiableModel):
    """Work experience entry."""

    company: str = Field(..., min_length=1, description="Company name")
    position: str = Field(..., min_length=1, description="Job position/title")
    start_date: dt.date = Field(..., description="Start date")
    end_date: Optional[dt.date] = Field(default=None, description="End date (None if current)")
    location: str = Field(default="Unknown Location", description="Job location")
    description: str = Field(default="", description="Job description")
    achievements: List[str] = Field(default_factory=list, description="Achievement phrases")
    technologies: List[str] = Field(default_factory=list, description="Technologies mentioned")
    metrics: List[Metric] = Field(default_factory=list, description="Quantified outcomes")

    @property
    def is_current(self) -> bool:
        """Whether this is an ongoing position."""
        return self.end_date is None

    @model_validator(mode="after")
    def check_date_order(self) -> "Experience":
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("End date must not be before start date")
        return self


class Skill(IdentifiableModel):
    """A single skill."""

    name: str = Field(..., min_length=1, description="Skill name")
    category: SkillCategory = Field(..., description="Skill category")
    level: SkillLevel = Field(default=SkillLevel.INTERMEDIATE, description="Proficiency level")
    description: Optional[str] = Field(default=None, description="Skill description")


class Education(IdentifiableModel):
    """Education entry."""

    institution: str = Field(..., min_length=1, description="Educational institution")
    degree: str = Field(..., min_length=1, description="Degree obtained")
    field_of_study: str = Field(..., min_length=1, description="Field of study")
    start_date: dt.date = Field(..., description="Start date")
    end_date: Optional[dt.date] = Field(default=None, description="End date (None if ongoing)")
    gpa: Optional[float] = Field(default=None, description="Grade point average")
    achievements: List[str] = Field(default_factory=list, description="Academic achievements")

    @model_validator(mode="after")
    def check_date_order(self) -> "Education":
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("End date must not be before start date")
        return self


class Achievement(IdentifiableModel):
    """Award, recognition or other notable accomplishment."""

    title: str = Field(..., min_length=1, description="Achievement title")
    description: str = Field(default="", description="Achievement description")
    date: dt.date = Field(..., description="Date of the achievement")
    category: AchievementCategory = Field(default=AchievementCategory.RECOGNITION, description="Achievement category")
    organization: Optional[str] = Field(default=None, description="Issuing organization")
    metrics: List[Metric] = Field(default_factory=list, description="Quantified outcomes")
