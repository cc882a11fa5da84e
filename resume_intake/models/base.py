"""Base model classes for the Resume Intake package."""

from uuid import NAMESPACE_URL, uuid4, uuid5

from pydantic import BaseModel as PydanticBaseModel, ConfigDict, Field

# Namespace for ids derived from resume content
RESUME_ID_NAMESPACE = uuid5(NAMESPACE_URL, "resume-intake")


def stable_id(*parts: object) -> str:
    """Build a deterministic identifier from the given parts.
    
    The same parts always produce the same id, so re-parsing an unchanged
    document yields identical results.
    
    Args:
        *parts: Values identifying the entry (section, position, content)
        
    Returns:
        UUID5 string
    """
    return str(uuid5(RESUME_ID_NAMESPACE, "\x1f".join(str(part) for part in parts)))


class BaseModel(PydanticBaseModel):
    """Base model with common functionality."""

    model_config = ConfigDict(
        use_enum_values=False,
        validate_assignment=True,
    )


class FrozenModel(BaseModel):
    """Immutable base model for parse results."""

    model_config = ConfigDict(frozen=True)


class IdentifiableModel(BaseModel):
    """Base model with ID field."""

    id: str = Field(default_factory=lambda: str(uuid4()), min_length=1, description="Unique identifier")
