import asyncio

import pytest

from resume_intake.models.enums import ErrorType, SectionName
from resume_intake.models.results import ParsedResume
from resume_intake.parsers.base_parser import DOCX_MEDIA_TYPE, PDF_MEDIA_TYPE, FileFormat, UploadedFile
from resume_intake.parsers.file_handlers import FileHandlerRegistry, TextFileHandler
from resume_intake.services.configuration_manager import ParserConfig
from resume_intake.services.error_handling import get_default_suggestions
from resume_intake.services.parsing_service import ParsingService, parse_resume_document

from conftest import NO_SECTIONS_TEXT, SAMPLE_RESUME, text_upload


@pytest.fixture
def service():
    return ParsingService()


def _all_issues(result):
    issues = list(result.errors) + list(result.warnings)
    if result.data is not None:
        for section_result in result.data.section_results:
            issues.extend(section_result.errors)
            issues.extend(section_result.warnings)
    return issues


# --- End to end ---


@pytest.mark.asyncio
async def test_parse_text_resume(service, sample_text_file):
    result = await service.parse_resume_document(sample_text_file)

    assert result.success is True
    assert result.errors == []
    resume = result.data
    assert isinstance(resume, ParsedResume)
    assert [job.company for job in resume.experience] == ["Google", "Acme Corp"]
    assert [skill.name for skill in resume.skills][:3] == ["Python", "JavaScript", "Docker"]
    assert resume.education[0].institution == "Stanford University"
    assert resume.achievements[0].title == "Employee of the Year"
    assert resume.raw_text.startswith("Jane Doe")
    assert 0.0 <= result.confidence <= 1.0
    assert resume.confidence == result.confidence
    assert resume.parse_result.success is True


@pytest.mark.asyncio
async def test_section_results_cover_every_section(service, sample_text_file):
    result = await service.parse_resume_document(sample_text_file)

    sections = [section_result.section for section_result in result.data.section_results]
    assert sections == [SectionName.EXPERIENCE, SectionName.SKILLS, SectionName.EDUCATION, SectionName.ACHIEVEMENTS]
    experience = result.data.get_section_result(SectionName.EXPERIENCE)
    assert experience.success is True
    assert experience.confidence == pytest.approx(1.0)
    assert result.data.get_section_result(SectionName.EDUCATION).confidence == pytest.approx(0.9)


@pytest.mark.asyncio
async def test_parse_word_resume(service, sample_docx_file):
    result = await service.parse_resume_document(sample_docx_file)

    assert result.success is True
    assert [job.company for job in result.data.experience] == ["Google", "Acme Corp"]
    assert result.data.education[0].gpa == 3.8


@pytest.mark.asyncio
async def test_parse_pdf_resume(service, sample_pdf_file):
    result = await service.parse_resume_document(sample_pdf_file)

    assert result.success is True
    assert "Senior Engineer at Google" in result.data.raw_text
    assert result.data.skills


@pytest.mark.asyncio
async def test_module_level_helper(sample_text_file):
    result = await parse_resume_document(sample_text_file)
    assert result.success is True


@pytest.mark.asyncio
async def test_parse_resume_file_from_disk(service, tmp_path):
    path = tmp_path / "resume.txt"
    path.write_text(SAMPLE_RESUME, encoding="utf-8")

    result = await service.parse_resume_file(path)

    assert result.success is True
    assert len(result.data.experience) == 2


# --- File problems ---


@pytest.mark.asyncio
async def test_empty_unsupported_upload_reports_both_problems(service):
    file = UploadedFile(name="photo.jpg", content=b"", media_type="image/jpeg")

    result = await service.parse_resume_document(file)

    assert result.success is False
    assert result.data is None
    assert [error.type for error in result.errors] == [ErrorType.FILE_EMPTY, ErrorType.UNSUPPORTED_FORMAT]


@pytest.mark.asyncio
async def test_oversized_upload_uses_configured_limit(sample_text_file):
    service = ParsingService(config=ParserConfig(max_file_size=100))

    result = await service.parse_resume_document(sample_text_file)

    assert [error.type for error in result.errors] == [ErrorType.FILE_TOO_LARGE]


@pytest.mark.asyncio
async def test_word_document_with_no_bytes(service):
    # Declared size passes validation but the body is empty
    file = UploadedFile(name="resume.docx", content=b"", media_type=DOCX_MEDIA_TYPE, size=2048)

    result = await service.parse_resume_document(file)

    assert result.success is False
    assert len(result.errors) == 1
    error = result.errors[0]
    assert error.type == ErrorType.FILE_CORRUPTED
    assert error.message == "Failed to read file: Word document appears to be empty"
    assert error.details["reason"] == "empty"
    assert error.recoverable is False


@pytest.mark.asyncio
async def test_invalid_pdf_is_corrupted(service):
    file = UploadedFile(name="resume.pdf", content=b"definitely not a pdf", media_type=PDF_MEDIA_TYPE)

    result = await service.parse_resume_document(file)

    assert [error.type for error in result.errors] == [ErrorType.FILE_CORRUPTED]
    assert result.errors[0].message.startswith("Failed to read file: ")
    assert result.errors[0].details["error_class"] == "DocumentDecodeError"


@pytest.mark.asyncio
async def test_short_text_file_fails_in_decoder(service):
    result = await service.parse_resume_document(text_upload("Jane Doe\nEngineer"))

    assert result.success is False
    assert result.errors[0].type == ErrorType.FILE_CORRUPTED
    assert "very little content" in result.errors[0].message


@pytest.mark.asyncio
async def test_slow_decoder_times_out():
    class SlowTextHandler(TextFileHandler):
        async def extract_text(self, file):
            await asyncio.sleep(1)
            return await super().extract_text(file)

    registry = FileHandlerRegistry()
    registry.register(FileFormat.TXT, SlowTextHandler)
    service = ParsingService(config=ParserConfig(decode_timeout=0.05), registry=registry)

    result = await service.parse_resume_document(text_upload(SAMPLE_RESUME))

    assert result.success is False
    error = result.errors[0]
    assert error.type == ErrorType.FILE_CORRUPTED
    assert "took longer than 0.05 seconds" in error.message
    assert error.details["reason"] == "timeout"


@pytest.mark.asyncio
async def test_missing_handler_is_unsupported_format():
    registry = FileHandlerRegistry()
    registry.register(FileFormat.TXT, lambda: None)
    service = ParsingService(registry=registry)

    result = await service.parse_resume_document(text_upload(SAMPLE_RESUME))

    assert [error.type for error in result.errors] == [ErrorType.UNSUPPORTED_FORMAT]
    assert result.errors[0].message == "Unsupported file format: text/plain"


@pytest.mark.asyncio
async def test_unexpected_exception_becomes_critical_error(service, monkeypatch, sample_text_file):
    def explode(file, max_size):
        raise RuntimeError("disk on fire")

    monkeypatch.setattr("resume_intake.services.parsing_service.validate_file", explode)

    result = await service.parse_resume_document(sample_text_file)

    assert result.success is False
    error = result.errors[0]
    assert error.type == ErrorType.PARSING_FAILED
    assert error.message == "Critical parsing error: disk on fire"
    assert error.details == {"original_error": "disk on fire", "error_class": "RuntimeError"}
    assert error.suggestions


# --- Content problems ---


@pytest.mark.asyncio
async def test_document_without_sections_succeeds_with_warnings(service):
    result = await service.parse_resume_document(text_upload(NO_SECTIONS_TEXT))

    assert result.success is True
    assert result.data.experience == []
    assert result.data.skills == []
    messages = [warning.message for warning in result.warnings]
    assert "No work experience section found in your resume" in messages
    assert "No experience section detected in resume" in messages
    assert "No skills section detected in resume" in messages


@pytest.mark.asyncio
async def test_too_little_text_is_a_content_error(sample_text_file):
    service = ParsingService(config=ParserConfig(min_text_length=5000))

    result = await service.parse_resume_document(sample_text_file)

    assert result.success is False
    assert result.data is None
    assert [error.type for error in result.errors] == [ErrorType.FILE_EMPTY]
    assert result.confidence is not None


@pytest.mark.asyncio
async def test_padded_short_text_is_a_content_error(service):
    result = await service.parse_resume_document(
        text_upload("Jane Doe, Software Engineer, San Francisco CA" + "\n" * 10)
    )

    assert result.success is False
    assert [error.type for error in result.errors] == [ErrorType.FILE_EMPTY]
    assert result.errors[0].message == "The document contains very little readable text"


@pytest.mark.asyncio
async def test_entries_without_company_are_dropped_with_warning(service):
    text = (
        "Jane Doe, software engineer\n\nEXPERIENCE\nFreelance consulting for various clients\n"
        "2018 - 2019\n\nSKILLS\nPython, Docker\n"
    )

    result = await service.parse_resume_document(text_upload(text))

    assert result.data.experience == []
    assert 'Experience entry missing company name: "Freelance consulting for various clients"' in [
        warning.message for warning in result.warnings
    ]


@pytest.mark.asyncio
async def test_education_without_institution_is_dropped(service):
    text = "Jane Doe, software engineer\n\nEDUCATION\nBachelor of Arts\n2015\n\nSKILLS\nPython, Docker\n"

    result = await service.parse_resume_document(text_upload(text))

    assert result.data.education == []
    education = result.data.get_section_result(SectionName.EDUCATION)
    assert [warning.message for warning in education.warnings] == [
        'Education entry missing institution: "Bachelor of Arts"'
    ]


@pytest.mark.parametrize("wrapper, text, message, hint", [
    ("extract_experience_with_error_handling", "EXPERIENCE\n",
     "Experience section found but no entries could be parsed", "company names"),
    ("extract_skills_with_error_handling", "SKILLS\n",
     "Skills section found but no skills could be parsed", "comma-separated"),
    ("extract_education_with_error_handling", "EDUCATION\n",
     "Education section found but no entries could be parsed", "institution names"),
    ("extract_achievements_with_error_handling", "AWARDS\nTop",
     "Achievements section found but no entries could be parsed", "achievements"),
])
def test_heading_without_entries_is_a_section_warning(service, wrapper, text, message, hint):
    result = getattr(service, wrapper)(text)

    assert result.success is True
    assert result.data == []
    assert result.errors == []
    assert result.confidence == pytest.approx(0.4)
    assert len(result.warnings) == 1
    warning = result.warnings[0]
    assert warning.type == ErrorType.PARSING_FAILED
    assert warning.message == message
    assert warning.section == result.section.value
    assert warning.suggestions != get_default_suggestions(ErrorType.PARSING_FAILED)
    assert any(hint in suggestion for suggestion in warning.suggestions)


@pytest.mark.asyncio
async def test_failing_extractor_is_isolated(service, monkeypatch, sample_text_file):
    def boom(text):
        raise RuntimeError("boom")

    monkeypatch.setattr(service.extractor, "extract_skills", boom)

    result = await service.parse_resume_document(sample_text_file)

    assert result.success is True
    assert result.data.skills == []
    assert len(result.data.experience) == 2
    skills = result.data.get_section_result(SectionName.SKILLS)
    assert skills.success is False
    assert skills.confidence == 0.0
    assert skills.errors[0].message == "Failed to parse skills section: boom"
    assert "Failed to parse skills section: boom" in [warning.message for warning in result.warnings]


@pytest.mark.asyncio
@pytest.mark.parametrize("text", [SAMPLE_RESUME, NO_SECTIONS_TEXT, "Jane Doe\nEngineer"])
async def test_every_reported_problem_has_suggestions(service, text):
    result = await service.parse_resume_document(text_upload(text))
    for issue in _all_issues(result):
        assert issue.suggestions
        assert all(suggestion.strip() for suggestion in issue.suggestions)


@pytest.mark.asyncio
async def test_parsing_is_deterministic(service):
    first = await service.parse_resume_document(text_upload(SAMPLE_RESUME))
    second = await service.parse_resume_document(text_upload(SAMPLE_RESUME))
    assert first.model_dump() == second.model_dump()


# --- Batch and statistics ---


@pytest.mark.asyncio
async def test_batch_results_keep_input_order(service, sample_text_file):
    empty = UploadedFile(name="photo.jpg", content=b"", media_type="image/jpeg")

    results = await service.batch_parse_documents([sample_text_file, empty, sample_text_file])

    assert [result.success for result in results] == [True, False, True]


@pytest.mark.asyncio
async def test_stats_track_outcomes(service, sample_text_file):
    success = await service.parse_resume_document(sample_text_file)
    await service.parse_resume_document(UploadedFile(name="photo.jpg", content=b""))

    stats = service.get_parsing_stats()
    assert stats["documents_parsed"] == 2
    assert stats["successful_parses"] == 1
    assert stats["failed_parses"] == 1
    assert stats["average_confidence"] == pytest.approx(success.confidence)
    assert stats["last_parse_time"] is not None

    service.reset_stats()
    assert service.get_parsing_stats()["documents_parsed"] == 0


def test_supported_formats(service):
    assert service.get_supported_formats() == [".pdf", ".docx", ".txt"]
