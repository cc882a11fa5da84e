"""Result envelopes shared by every stage of the parsing pipeline."""

from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import Field, field_validator, model_validator

from .base import FrozenModel
from .enums import ErrorType, SectionName
from .resume import Achievement, Education, Experience, Skill

T = TypeVar("T")


class ParseError(FrozenModel):
    """A user-facing parse problem, used for both errors and warnings."""

    type: ErrorType = Field(..., description="Error kind")
    message: str = Field(..., min_length=1, description="Human readable description")
    section: Optional[str] = Field(default=None, description="Section the problem relates to")
    suggestions: List[str] = Field(..., min_length=1, description="Actionable remediation hints")
    recoverable: bool = Field(..., description="Whether the user can fix it without a new file")
    details: Optional[Dict[str, Any]] = Field(default=None, description="Diagnostic payload")

    @field_validator("suggestions")
    @classmethod
    def validate_suggestions(cls, v: List[str]) -> List[str]:
        if any(not suggestion.strip() for suggestion in v):
            raise ValueError("Suggestions must not be empty strings")
        return v


class ParseResult(FrozenModel, Generic[T]):
    """Outcome of a parse operation.
    
    ``success`` is true exactly when ``errors`` is empty, and ``data`` is only
    present on success.
    """

    success: bool = Field(..., description="Whether the operation produced usable data")
    data: Optional[T] = Field(default=None, description="Payload, present only on success")
    errors: List[ParseError] = Field(default_factory=list, description="Blocking problems")
    warnings: List[ParseError] = Field(default_factory=list, description="Non-blocking problems")
    confidence: Optional[float] = Field(default=None, ge=0.0, le=1.0, description="Overall confidence")

    @model_validator(mode="after")
    def check_consistency(self) -> "ParseResult":
        if self.success == bool(self.errors):
            raise ValueError("success must be true exactly when there are no errors")
        if not self.success and self.data is not None:
            raise ValueError("Failed results carry no data")
        return self


class SectionParseResult(FrozenModel):
    """Per-section extraction report."""

    section: SectionName = Field(..., description="Section this result describes")
    success: bool = Field(..., description="Whether extraction ran without an exception")
    data: List[Any] = Field(default_factory=list, description="Extracted entries")
    errors: List[ParseError] = Field(default_factory=list, description="Section errors")
    warnings: List[ParseError] = Field(default_factory=list, description="Section warnings")
    confidence: float = Field(default=0.0, ge=0.0, le=1.0, description="Section confidence")


class ParsedResume(FrozenModel):
    """Structured resume assembled by the orchestrator."""

    personal_info: Dict[str, Any] = Field(default_factory=dict, description="Partial personal details")
    experience: List[Experience] = Field(default_factory=list, description="Work history")
    skills: List[Skill] = Field(default_factory=list, description="Skills")
    education: List[Education] = Field(default_factory=list, description="Education history")
    achievements: List[Achievement] = Field(default_factory=list, description="Achievements")
    raw_text: str = Field(default="", description="Decoded document text")
    confidence: float = Field(default=0.0, ge=0.0, le=1.0, description="Overall confidence")
    parse_result: ParseResult = Field(..., description="Outcome of the whole operation")
    section_results: List[SectionParseResult] = Field(default_factory=list, description="Per-section reports")

    def get_section_result(self, section: SectionName) -> Optional[SectionParseResult]:
        """Look up the report for one section.
        
        Args:
            section: Section to look up
            
        Returns:
            Matching SectionParseResult or None
        """
        for result in self.section_results:
            if result.section == section:
                return result
        return None
