"""Service coordinating validation, decoding and section extraction of resumes."""

import asyncio
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from .configuration_manager import ParserConfig
from .confidence import calculate_overall_confidence, calculate_section_confidence
from .error_handling import (
    create_failure_result,
    create_parse_error,
    create_section_result,
    create_success_result,
    validate_file,
    validate_parsed_content,
)
from ..models.enums import ErrorType, SectionName
from ..models.results import ParsedResume, ParseError, ParseResult, SectionParseResult
from ..parsers.base_parser import UploadedFile
from ..parsers.file_handlers import FileHandlerRegistry
from ..parsers.resume_parser import UNKNOWN_COMPANY, UNKNOWN_INSTITUTION, ResumeSectionExtractor
from ..parsers.sections import has_section_heading
from ..parsers.vocabulary import KeywordVocabulary
from ..utils.exceptions import DecodeTimeoutError
from ..utils.logging import get_logger, log_error, log_performance, start_parse_context

MIN_SKILL_NAME_LENGTH = 2

CRITICAL_ERROR_SUGGESTIONS = [
    "Try uploading your resume in a different format",
    "Ensure the file is not corrupted",
    "Contact support if the problem persists",
]


def _empty_stats() -> Dict[str, Any]:
    return {
        "documents_parsed": 0,
        "successful_parses": 0,
        "failed_parses": 0,
        "average_confidence": 0.0,
        "last_parse_time": None
    }


class ParsingService:
    """Runs the full resume parsing pipeline.

    Each call to ``parse_resume_document`` works only on its own file, so any
    number of parses can run concurrently on one service. The statistics are
    bookkeeping only and never influence a result.
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        vocabulary: Optional[KeywordVocabulary] = None,
        registry: Optional[FileHandlerRegistry] = None
    ):
        """Initialize the parsing service.

        Args:
            config: Parser limits; defaults to the built-in limits
            vocabulary: Keyword tables for the extractors
            registry: Decoder registry; a fresh one is created when omitted
        """
        self.config = config or ParserConfig()
        self.extractor = ResumeSectionExtractor(
            vocabulary=vocabulary,
            max_achievements_per_entry=self.config.max_achievements_per_entry
        )
        self.registry = registry or FileHandlerRegistry()
        self.logger = get_logger("parsing_service")
        self.stats = _empty_stats()

    # Section wrappers

    def _run_extractor(
        self,
        section: SectionName,
        extract: Callable[[str], List[Any]],
        text: str
    ) -> Union[List[Any], SectionParseResult]:
        """Call an extractor, turning an exception into a failed section result."""
        try:
            return extract(text)
        except Exception as e:
            self.logger.warning(f"{section.label} extraction raised {type(e).__name__}: {e}", exc_info=True)
            error = create_parse_error(
                ErrorType.PARSING_FAILED,
                f"Failed to parse {section.value} section: {e}",
                section=section,
            )
            return create_section_result(section, False, [], errors=[error], confidence=0.0)

    def extract_experience_with_error_handling(self, text: str) -> SectionParseResult:
        """Extract work experience and report problems as section warnings.

        Entries without a company name are dropped with a warning each.

        Args:
            text: Raw resume text

        Returns:
            SectionParseResult for the experience section
        """
        section = SectionName.EXPERIENCE
        extracted = self._run_extractor(section, self.extractor.extract_experience, text)
        if isinstance(extracted, SectionParseResult):
            return extracted

        warnings: List[ParseError] = []
        heading_found = has_section_heading(text, section)
        if heading_found and not extracted:
            warnings.append(create_parse_error(
                ErrorType.PARSING_FAILED,
                "Experience section found but no entries could be parsed",
                section=section,
                suggestions=[
                    "Ensure job entries include company names and positions",
                    'Use consistent date formats (e.g., "2020-2023")',
                    "Separate each job with clear formatting",
                ],
            ))
        elif not heading_found:
            warnings.append(create_parse_error(
                ErrorType.SECTION_MISSING,
                "No experience section detected in resume",
                section=section,
            ))

        experience = []
        for entry in extracted:
            if not entry.company or entry.company == UNKNOWN_COMPANY:
                warnings.append(create_parse_error(
                    ErrorType.PARSING_FAILED,
                    f'Experience entry missing company name: "{entry.position}"',
                    section=section,
                    suggestions=["Ensure each job entry includes a clear company name"],
                ))
                continue
            experience.append(entry)

        confidence = calculate_section_confidence(heading_found, len(experience))
        return create_section_result(section, True, experience, warnings=warnings, confidence=confidence)

    def extract_skills_with_error_handling(self, text: str) -> SectionParseResult:
        """Extract skills and report problems as section warnings.

        A missing heading is only reported when the technology scan found
        nothing either, since skills are often listed without a heading.

        Args:
            text: Raw resume text

        Returns:
            SectionParseResult for the skills section
        """
        section = SectionName.SKILLS
        extracted = self._run_extractor(section, self.extractor.extract_skills, text)
        if isinstance(extracted, SectionParseResult):
            return extracted

        warnings: List[ParseError] = []
        heading_found = has_section_heading(text, section)
        if heading_found and not extracted:
            warnings.append(create_parse_error(
                ErrorType.PARSING_FAILED,
                "Skills section found but no skills could be parsed",
                section=section,
                suggestions=[
                    "Use comma-separated lists or bullet points for skills",
                    "Include both technical and soft skills",
                    "Group similar skills together",
                ],
            ))
        elif not heading_found and not extracted:
            warnings.append(create_parse_error(
                ErrorType.SECTION_MISSING,
                "No skills section detected in resume",
                section=section,
            ))

        skills = []
        for skill in extracted:
            if len(skill.name) < MIN_SKILL_NAME_LENGTH:
                warnings.append(create_parse_error(
                    ErrorType.PARSING_FAILED,
                    f'Skill name too short: "{skill.name}"',
                    section=section,
                    suggestions=["Ensure skill names are descriptive and complete"],
                ))
                continue
            skills.append(skill)

        confidence = calculate_section_confidence(heading_found, len(skills))
        return create_section_result(section, True, skills, warnings=warnings, confidence=confidence)

    def extract_education_with_error_handling(self, text: str) -> SectionParseResult:
        """Extract education and report problems as section warnings.

        Entries without an institution name are dropped with a warning each.

        Args:
            text: Raw resume text

        Returns:
            SectionParseResult for the education section
        """
        section = SectionName.EDUCATION
        extracted = self._run_extractor(section, self.extractor.extract_education, text)
        if isinstance(extracted, SectionParseResult):
            return extracted

        warnings: List[ParseError] = []
        heading_found = has_section_heading(text, section)
        if heading_found and not extracted:
            warnings.append(create_parse_error(
                ErrorType.PARSING_FAILED,
                "Education section found but no entries could be parsed",
                section=section,
                suggestions=[
                    "Include degree type and field of study",
                    "Mention institution names clearly",
                    "Add graduation dates or expected completion dates",
                ],
            ))
        elif not heading_found:
            warnings.append(create_parse_error(
                ErrorType.SECTION_MISSING,
                "No education section detected in resume",
                section=section,
            ))

        education = []
        for entry in extracted:
            if not entry.institution or entry.institution == UNKNOWN_INSTITUTION:
                warnings.append(create_parse_error(
                    ErrorType.PARSING_FAILED,
                    f'Education entry missing institution: "{entry.degree}"',
                    section=section,
                    suggestions=["Ensure each education entry includes the institution name"],
                ))
                continue
            education.append(entry)

        confidence = calculate_section_confidence(heading_found, len(education))
        return create_section_result(section, True, education, warnings=warnings, confidence=confidence)

    def extract_achievements_with_error_handling(self, text: str) -> SectionParseResult:
        """Extract achievements; a missing achievements section is not reported.

        Args:
            text: Raw resume text

        Returns:
            SectionParseResult for the achievements section
        """
        section = SectionName.ACHIEVEMENTS
        extracted = self._run_extractor(section, self.extractor.extract_achievements, text)
        if isinstance(extracted, SectionParseResult):
            return extracted

        warnings: List[ParseError] = []
        heading_found = has_section_heading(text, section)
        if heading_found and not extracted:
            warnings.append(create_parse_error(
                ErrorType.PARSING_FAILED,
                "Achievements section found but no entries could be parsed",
                section=section,
                suggestions=[
                    "Use bullet points or clear formatting for achievements",
                    "Include dates and issuing organizations",
                    "Describe the significance of each achievement",
                ],
            ))

        confidence = calculate_section_confidence(heading_found, len(extracted))
        return create_section_result(section, True, extracted, warnings=warnings, confidence=confidence)

    # Orchestration

    async def parse_resume_document(self, file: UploadedFile) -> ParseResult:
        """Parse an uploaded resume into structured data.

        File and decode problems end the parse immediately. Section problems
        are isolated to their section and never stop the others. Nothing is
        raised to the caller: unexpected exceptions become one critical
        ``parsing_failed`` error.

        Args:
            file: Uploaded document

        Returns:
            ParseResult wrapping a ParsedResume on success
        """
        start_parse_context(file.name)
        started = time.perf_counter()
        self.logger.info(f"Parsing {file.name} ({file.size} bytes, {file.media_type or 'unknown type'})")

        try:
            result = await self._parse(file)
        except Exception as e:
            log_error(e, {"operation": "parse_resume_document", "file_name": file.name})
            critical = create_parse_error(
                ErrorType.PARSING_FAILED,
                f"Critical parsing error: {e}",
                suggestions=CRITICAL_ERROR_SUGGESTIONS,
                details={"original_error": str(e), "error_class": type(e).__name__},
            )
            result = create_failure_result([critical])

        duration = time.perf_counter() - started
        log_performance("parse_resume_document", duration, {
            "file_name": file.name,
            "success": result.success,
        })
        self._update_stats(result)
        return result

    async def _parse(self, file: UploadedFile) -> ParseResult:
        file_errors = validate_file(file, max_size=self.config.max_file_size)
        if file_errors:
            return create_failure_result(file_errors)

        handler = self.registry.resolve(file)
        if handler is None:
            return create_failure_result([create_parse_error(
                ErrorType.UNSUPPORTED_FORMAT,
                f"Unsupported file format: {file.media_type or file.name}",
                details={"file_type": file.media_type, "file_name": file.name},
            )])

        decode_started = time.perf_counter()
        try:
            extraction = await self._decode(handler, file)
        except Exception as e:
            self.logger.warning(f"Failed to read {file.name}: {e}")
            return create_failure_result([create_parse_error(
                ErrorType.FILE_CORRUPTED,
                f"Failed to read file: {e}",
                details={
                    "original_error": str(e),
                    "error_class": type(e).__name__,
                    "reason": getattr(e, "reason", None),
                },
            )])
        log_performance("decode", time.perf_counter() - decode_started, {
            "file_format": handler.file_format.value,
            "text_length": len(extraction.text),
        })

        raw_text = extraction.text
        section_results = [
            self.extract_experience_with_error_handling(raw_text),
            self.extract_skills_with_error_handling(raw_text),
            self.extract_education_with_error_handling(raw_text),
            self.extract_achievements_with_error_handling(raw_text),
        ]
        experience, skills, education, achievements = (result.data for result in section_results)

        content_errors, content_warnings = validate_parsed_content(
            raw_text, experience, skills, education, achievements,
            min_length=self.config.min_text_length
        )

        errors = list(content_errors)
        warnings = list(content_warnings)
        for section_result in section_results:
            # A failed extractor is surfaced as a warning so the parse can still succeed
            # (the section result keeps it as an error); summaries see it in both lists
            warnings.extend(section_result.errors)
            warnings.extend(section_result.warnings)

        confidence = calculate_overall_confidence(section_results, raw_text)
        nested = (
            create_failure_result(errors, warnings, confidence) if errors
            else create_success_result(None, warnings, confidence)
        )

        parsed = ParsedResume(
            personal_info={},
            experience=experience,
            skills=skills,
            education=education,
            achievements=achievements,
            raw_text=raw_text,
            confidence=confidence,
            parse_result=nested,
            section_results=section_results,
        )

        self.logger.info(
            f"Parsed {file.name}: {len(experience)} jobs, {len(skills)} skills, {len(education)} degrees, "
            f"{len(achievements)} achievements, {len(errors)} errors, {len(warnings)} warnings, "
            f"confidence {confidence:.2f}"
        )

        if errors:
            return create_failure_result(errors, warnings, confidence)
        return create_success_result(parsed, warnings, confidence)

    async def _decode(self, handler, file: UploadedFile):
        timeout = self.config.decode_timeout
        try:
            return await asyncio.wait_for(handler.extract_text(file), timeout=timeout)
        except asyncio.TimeoutError:
            raise DecodeTimeoutError(timeout, handler.file_format.value)

    async def parse_resume_file(self, file_path: Union[str, Path], media_type: Optional[str] = None) -> ParseResult:
        """Read a resume from disk and parse it.

        Args:
            file_path: Path to the resume file
            media_type: Declared media type; guessed from the name when omitted

        Returns:
            ParseResult wrapping a ParsedResume on success

        Raises:
            FileValidationError: If the path cannot be read
        """
        file = await UploadedFile.from_path(file_path, media_type=media_type)
        return await self.parse_resume_document(file)

    async def batch_parse_documents(self, files: Sequence[UploadedFile]) -> List[ParseResult]:
        """Parse several documents concurrently.

        Args:
            files: Uploaded documents

        Returns:
            One ParseResult per file, in input order
        """
        self.logger.info(f"Batch parsing {len(files)} documents")
        return list(await asyncio.gather(*(self.parse_resume_document(file) for file in files)))

    def get_supported_formats(self) -> List[str]:
        """Get list of supported file extensions."""
        return [extension for fmt in self.registry.get_supported_formats() for extension in fmt.extensions]

    def get_parsing_stats(self) -> Dict[str, Any]:
        """Get parsing service statistics.

        Returns:
            Dictionary containing parsing statistics
        """
        return self.stats.copy()

    def reset_stats(self) -> None:
        """Reset parsing service statistics."""
        self.stats = _empty_stats()
        self.logger.info("Parsing service statistics reset")

    def _update_stats(self, result: ParseResult) -> None:
        self.stats["documents_parsed"] += 1
        self.stats["last_parse_time"] = datetime.now().isoformat()

        if not result.success:
            self.stats["failed_parses"] += 1
            return

        self.stats["successful_parses"] += 1
        if result.confidence is not None:
            current_avg = self.stats["average_confidence"]
            total_successful = self.stats["successful_parses"]
            self.stats["average_confidence"] = (
                (current_avg * (total_successful - 1) + result.confidence) / total_successful
            )


async def parse_resume_document(file: UploadedFile, config: Optional[ParserConfig] = None) -> ParseResult:
    """Parse one document with a throwaway service.

    Args:
        file: Uploaded document
        config: Optional parser limits

    Returns:
        ParseResult wrapping a ParsedResume on success
    """
    return await ParsingService(config=config).parse_resume_document(file)
