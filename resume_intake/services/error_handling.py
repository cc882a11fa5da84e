"""Error taxonomy helpers, file validation and content completeness checks."""

import re
from typing import Any, Dict, List, Optional, Tuple

from ..models.enums import ErrorType, SectionName
from ..models.resume import Achievement, Education, Experience, Skill
from ..models.results import ParseError, ParseResult, SectionParseResult
from ..parsers.base_parser import FileFormat, UploadedFile
from ..utils.logging import get_logger

logger = get_logger("error_handling")

MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB
MIN_CONTENT_LENGTH = 50

SUPPORTED_MEDIA_TYPES = tuple(media_type for fmt in FileFormat for media_type in fmt.media_types)
SUPPORTED_EXTENSIONS = tuple(extension for fmt in FileFormat for extension in fmt.extensions)

FALLBACK_SUGGESTIONS = ["Please try again or contact support for assistance"]

DEFAULT_SUGGESTIONS: Dict[ErrorType, List[str]] = {
    ErrorType.FILE_FORMAT: [
        "Convert your resume to PDF, Word (.docx), or plain text format",
        "Ensure the file is not password protected",
        "Try saving your document in a different format",
        'Use "Save As" instead of "Export" when creating the file',
    ],
    ErrorType.FILE_CORRUPTED: [
        "Try re-saving your resume file",
        "Check if the file opens correctly in its native application",
        "Create a new copy of your resume",
        "Try uploading a different version of your resume",
    ],
    ErrorType.FILE_EMPTY: [
        "Ensure your resume file contains text content",
        "Check that the file is not just images or graphics",
        "Try copying and pasting your resume content into a new document",
        "Verify the file size is greater than 0 bytes",
    ],
    ErrorType.FILE_TOO_LARGE: [
        "Reduce the file size by compressing images",
        "Remove unnecessary graphics or formatting",
        "Save as a simpler format like plain text or basic PDF",
        "Split your resume into multiple smaller files if needed",
    ],
    ErrorType.UNSUPPORTED_FORMAT: [
        "Convert your resume to PDF (.pdf), Word (.docx), or plain text (.txt)",
        "Avoid using proprietary formats or older Word versions (.doc)",
        "Copy and paste your content into a supported format",
        "Use online converters to change the file format",
    ],
    ErrorType.PARSING_FAILED: [
        "Try reformatting your resume with clearer section headers",
        'Use standard section names like "Experience", "Education", "Skills"',
        "Ensure consistent formatting throughout your resume",
        "Consider manually entering the information if parsing continues to fail",
    ],
}

SECTION_MISSING_SUGGESTIONS: Dict[str, List[str]] = {
    SectionName.EXPERIENCE.value: [
        'Add a section titled "Experience", "Work History", or "Professional Experience"',
        "Include your job titles, company names, and employment dates",
        "List your responsibilities and achievements for each role",
        "Use bullet points to organize your experience clearly",
    ],
    SectionName.EDUCATION.value: [
        'Add an "Education" section with your degrees and institutions',
        "Include graduation dates and any relevant coursework",
        "List certifications and professional development",
        "Mention your GPA if it's 3.5 or higher",
    ],
    SectionName.SKILLS.value: [
        'Create a "Skills" section listing your technical and soft skills',
        "Group skills by category (e.g., Programming Languages, Tools, etc.)",
        "Use comma-separated lists or bullet points",
        "Include both technical skills and soft skills relevant to your field",
    ],
    SectionName.ACHIEVEMENTS.value: [
        'Add sections for "Awards", "Recognition", or "Achievements"',
        "Include dates and issuing organizations",
        "Describe the significance of each achievement",
        "Quantify your accomplishments with specific metrics when possible",
    ],
    SectionName.PERSONAL_INFO.value: [
        "Ensure your name is prominently displayed at the top",
        "Include contact information: email, phone, location",
        "Add your LinkedIn profile URL",
        "Include a professional summary or objective statement",
    ],
}

GENERIC_SECTION_SUGGESTIONS = [
    "Review your resume structure and ensure all sections are clearly labeled",
    "Use standard section headers that are commonly recognized",
    "Consider manually entering this information if the section cannot be detected",
]

# Keyword evidence that a section exists even though nothing was extracted
_CONTENT_EVIDENCE: Tuple[Tuple[SectionName, str, Optional[List[str]]], ...] = (
    (
        SectionName.EXPERIENCE,
        r'(?:experience|work|employment|career|job|position)',
        [
            "Try using clearer formatting for your work experience",
            "Include company names, job titles, and dates",
            "Use consistent formatting for each job entry",
        ],
    ),
    (
        SectionName.EDUCATION,
        r'(?:education|degree|university|college|school)',
        None,
    ),
    (
        SectionName.SKILLS,
        r'(?:skills|competencies|expertise|proficiencies|technologies)',
        None,
    ),
)


def _section_key(section: Any) -> Optional[str]:
    if section is None:
        return None
    return section.value if isinstance(section, SectionName) else str(section)


def get_default_suggestions(error_type: ErrorType, section: Optional[str] = None) -> List[str]:
    """Get the fixed remediation hints for an error type.

    Args:
        error_type: Kind of error
        section: Section name, consulted for ``section_missing`` only

    Returns:
        Non-empty list of suggestions
    """
    error_type = ErrorType(error_type)
    if error_type == ErrorType.SECTION_MISSING:
        return list(SECTION_MISSING_SUGGESTIONS.get(_section_key(section), GENERIC_SECTION_SUGGESTIONS))
    return list(DEFAULT_SUGGESTIONS.get(error_type, FALLBACK_SUGGESTIONS))


def is_recoverable(error_type: ErrorType) -> bool:
    """Whether the user can fix an error of this type without a different file."""
    return ErrorType(error_type).recoverable


def create_parse_error(
    error_type: ErrorType,
    message: str,
    section: Optional[Any] = None,
    suggestions: Optional[List[str]] = None,
    details: Optional[Dict[str, Any]] = None
) -> ParseError:
    """Build a ParseError with defaults filled in.

    Suggestions default to the fixed list for the type (section-specific for
    ``section_missing``); an explicitly empty list also gets the defaults so
    every error carries at least one hint. Recoverability is fixed by type.

    Args:
        error_type: Kind of error
        message: Human-readable description
        section: Optional section the error relates to
        suggestions: Optional remediation hints overriding the defaults
        details: Optional diagnostic payload

    Returns:
        Immutable ParseError
    """
    error_type = ErrorType(error_type)
    section_key = _section_key(section)
    hints = [hint for hint in (suggestions or []) if hint and hint.strip()]
    return ParseError(
        type=error_type,
        message=message or "An unknown error occurred",
        section=section_key,
        suggestions=hints or get_default_suggestions(error_type, section_key),
        recoverable=error_type.recoverable,
        details=details,
    )


def create_success_result(data: Any, warnings: Optional[List[ParseError]] = None, confidence: Optional[float] = None) -> ParseResult:
    """Wrap data in a successful ParseResult."""
    return ParseResult(success=True, data=data, errors=[], warnings=list(warnings or []), confidence=confidence)


def create_failure_result(
    errors: List[ParseError],
    warnings: Optional[List[ParseError]] = None,
    confidence: Optional[float] = None
) -> ParseResult:
    """Wrap errors in a failed ParseResult without data.

    Args:
        errors: Blocking problems, at least one
        warnings: Non-blocking problems
        confidence: Optional confidence of the partial parse

    Returns:
        Failed ParseResult
    """
    return ParseResult(success=False, data=None, errors=list(errors), warnings=list(warnings or []), confidence=confidence)


def create_section_result(
    section: SectionName,
    success: bool,
    data: Optional[List[Any]] = None,
    errors: Optional[List[ParseError]] = None,
    warnings: Optional[List[ParseError]] = None,
    confidence: float = 0.0
) -> SectionParseResult:
    """Build a per-section report."""
    return SectionParseResult(
        section=SectionName(section),
        success=success,
        data=list(data or []),
        errors=list(errors or []),
        warnings=list(warnings or []),
        confidence=confidence,
    )


def validate_file(file: UploadedFile, max_size: int = MAX_FILE_SIZE) -> List[ParseError]:
    """Check an upload before any decoding.

    The emptiness, size and format checks are independent, so one file can
    fail several of them at once.

    Args:
        file: Uploaded document
        max_size: Largest accepted size in bytes; equal sizes pass

    Returns:
        List of file-level errors, empty when the file is acceptable
    """
    errors = []

    if file.size == 0:
        errors.append(create_parse_error(
            ErrorType.FILE_EMPTY,
            "The uploaded file appears to be empty",
            details={"file_size": file.size},
        ))
    elif file.size > max_size:
        errors.append(create_parse_error(
            ErrorType.FILE_TOO_LARGE,
            f"File size ({file.size / 1024 / 1024:.2f}MB) exceeds the maximum limit of "
            f"{max_size / 1024 / 1024:g}MB",
            details={"file_size": file.size, "max_size": max_size},
        ))

    if FileFormat.from_media_type(file.media_type) is None and FileFormat.from_filename(file.name) is None:
        errors.append(create_parse_error(
            ErrorType.UNSUPPORTED_FORMAT,
            f'File format "{file.media_type or "unknown"}" is not supported',
            details={"file_type": file.media_type, "file_name": file.name},
        ))

    if errors:
        logger.info(f"File {file.name} failed validation with {len(errors)} error(s)")
    return errors


def validate_parsed_content(
    raw_text: str,
    experience: List[Experience],
    skills: List[Skill],
    education: List[Education],
    achievements: List[Achievement],
    min_length: int = MIN_CONTENT_LENGTH
) -> Tuple[List[ParseError], List[ParseError]]:
    """Cross-section completeness check run after all extractors.

    Args:
        raw_text: Decoded document text
        experience: Extracted experience entries
        skills: Extracted skills
        education: Extracted education entries
        achievements: Extracted achievements (never reported as missing)
        min_length: Minimum meaningful text length

    Returns:
        Tuple of (errors, warnings)
    """
    errors: List[ParseError] = []
    warnings: List[ParseError] = []

    text_length = len(raw_text.strip())
    if text_length < min_length:
        errors.append(create_parse_error(
            ErrorType.FILE_EMPTY,
            "The document contains very little readable text",
            suggestions=[
                "Ensure your resume contains substantial text content",
                "Check if the document is mostly images or graphics",
                "Try converting to a text-based format",
            ],
            details={"text_length": text_length},
        ))

    extracted = {
        SectionName.EXPERIENCE: experience,
        SectionName.EDUCATION: education,
        SectionName.SKILLS: skills,
    }
    for section, evidence, suggestions in _CONTENT_EVIDENCE:
        if extracted[section]:
            continue
        if re.search(evidence, raw_text, re.IGNORECASE):
            warnings.append(create_parse_error(
                ErrorType.PARSING_FAILED,
                f"{section.label} section detected but could not be parsed properly",
                section=section,
                suggestions=suggestions,
            ))
        else:
            warnings.append(create_parse_error(
                ErrorType.SECTION_MISSING,
                f"No {_missing_label(section)} section found in your resume",
                section=section,
            ))

    return errors, warnings


def _missing_label(section: SectionName) -> str:
    return "work experience" if section == SectionName.EXPERIENCE else section.value
