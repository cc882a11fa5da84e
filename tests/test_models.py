from datetime import date

import pytest
from pydantic import ValidationError

from resume_intake.models import (
    ErrorType,
    Experience,
    ParseError,
    ParseResult,
    SectionName,
    Skill,
    SkillCategory,
    stable_id,
)


def _error(**overrides):
    data = {
        "type": ErrorType.FILE_EMPTY,
        "message": "Empty",
        "suggestions": ["Upload a different file"],
        "recoverable": False,
    }
    data.update(overrides)
    return ParseError(**data)


@pytest.mark.parametrize("value", ["file_empty", "FILE_EMPTY", "File_Empty", "ErrorType.FILE_EMPTY"])
def test_error_type_accepts_names_and_values(value):
    assert ErrorType(value) is ErrorType.FILE_EMPTY


def test_unknown_error_type_is_rejected():
    with pytest.raises(ValueError):
        ErrorType("exploded")


def test_section_label():
    assert SectionName.PERSONAL_INFO.label == "Personal Info"
    assert str(SectionName.SKILLS) == "skills"


def test_parse_error_requires_suggestions():
    with pytest.raises(ValidationError):
        _error(suggestions=[])
    with pytest.raises(ValidationError):
        _error(suggestions=["  "])


def test_parse_error_requires_message():
    with pytest.raises(ValidationError):
        _error(message="")


def test_parse_error_is_immutable():
    error = _error()
    with pytest.raises(ValidationError):
        error.message = "Changed"


def test_parse_result_success_matches_errors():
    with pytest.raises(ValidationError):
        ParseResult(success=True, errors=[_error()])
    with pytest.raises(ValidationError):
        ParseResult(success=False)


def test_failed_result_carries_no_data():
    with pytest.raises(ValidationError):
        ParseResult(success=False, data={"a": 1}, errors=[_error()])


def test_parse_result_confidence_range():
    with pytest.raises(ValidationError):
        ParseResult(success=True, confidence=1.2)


def test_experience_end_date_not_before_start():
    with pytest.raises(ValidationError):
        Experience(company="Acme", position="Engineer", start_date=date(2021, 1, 1), end_date=date(2020, 1, 1))


def test_experience_without_end_is_current():
    job = Experience(company="Acme", position="Engineer", start_date=date(2021, 1, 1))
    assert job.is_current
    assert job.id


def test_skill_category_from_value():
    assert Skill(name="Python", category="technical").category == SkillCategory.TECHNICAL


def test_stable_id_is_deterministic():
    assert stable_id("skills", "python") == stable_id("skills", "python")
    assert stable_id("skills", "python") != stable_id("skills", "docker")
