"""User-facing formatting of parse errors and summaries."""

from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from ..models.enums import ErrorType
from ..models.results import ParseError, SectionParseResult

ERROR_PREFIXES: Dict[ErrorType, str] = {
    ErrorType.FILE_FORMAT: "📄 File Format Issue",
    ErrorType.FILE_CORRUPTED: "🔧 File Corruption Detected",
    ErrorType.FILE_EMPTY: "📭 Empty File",
    ErrorType.FILE_TOO_LARGE: "📏 File Too Large",
    ErrorType.UNSUPPORTED_FORMAT: "❌ Unsupported Format",
    ErrorType.SECTION_MISSING: "📋 Missing Section",
    ErrorType.PARSING_FAILED: "⚠️ Parsing Error",
}
DEFAULT_ERROR_PREFIX = "❗ Error"
WARNING_PREFIX = "⚠️ Warning"

ERROR_RECOVERY_GUIDE: Dict[str, Dict[str, object]] = {
    "file_format": {
        "title": "File Format Issues",
        "description": "Your resume file format is not supported or may be corrupted.",
        "steps": [
            "Save your resume as a PDF, Word (.docx), or plain text (.txt) file",
            "Ensure the file is not password protected",
            "Try opening the file in its native application to verify it works",
            "If using an older Word format (.doc), save as .docx instead",
        ],
    },
    "missing_content": {
        "title": "Missing or Incomplete Content",
        "description": "Some sections of your resume could not be found or parsed.",
        "steps": [
            'Use clear section headers like "Experience", "Education", "Skills"',
            "Ensure each section has substantial content",
            "Use consistent formatting throughout your resume",
            "Consider manually entering missing information",
        ],
    },
    "parsing_errors": {
        "title": "Parsing Difficulties",
        "description": "The system had trouble understanding parts of your resume.",
        "steps": [
            "Simplify your resume formatting",
            "Use bullet points for lists",
            'Include dates in a consistent format (e.g., "2020-2023")',
            "Avoid complex tables or unusual layouts",
        ],
    },
    "manual_entry": {
        "title": "Manual Data Entry",
        "description": "When automatic parsing fails, you can enter information manually.",
        "steps": [
            "Use the manual entry forms below",
            "Copy information directly from your resume",
            "You can always upload a new resume file later",
            "Manual entries can be edited and updated anytime",
        ],
    },
}


@dataclass
class ParsingSummary:
    """Aggregate view of a parse used to decide between retry and manual entry."""
    successful_sections: List[str] = field(default_factory=list)
    failed_sections: List[str] = field(default_factory=list)
    total_errors: int = 0
    total_warnings: int = 0
    overall_success: bool = False
    recommendations: List[str] = field(default_factory=list)


def format_error_message(error: ParseError) -> str:
    """Prefix an error message with its type label."""
    prefix = ERROR_PREFIXES.get(error.type, DEFAULT_ERROR_PREFIX)
    return f"{prefix}: {error.message}"


def format_warning_message(warning: ParseError) -> str:
    """Prefix a warning message with the warning label."""
    return f"{WARNING_PREFIX}: {warning.message}"


def create_parsing_summary(
    section_results: Sequence[SectionParseResult],
    overall_errors: Sequence[ParseError],
    overall_warnings: Sequence[ParseError]
) -> ParsingSummary:
    """Summarize section outcomes and error counts.

    A section counts as successful only when it reported success and kept at
    least one entry. Overall success needs zero errors in total and at least
    one successful section.

    Args:
        section_results: Per-section reports
        overall_errors: Top-level errors
        overall_warnings: Top-level warnings

    Returns:
        ParsingSummary with ordered recommendations
    """
    successful_sections = [r.section.value for r in section_results if r.success and r.data]
    failed_sections = [r.section.value for r in section_results if not r.success or not r.data]

    total_errors = len(overall_errors) + sum(len(r.errors) for r in section_results)
    total_warnings = len(overall_warnings) + sum(len(r.warnings) for r in section_results)

    recommendations = []
    if failed_sections:
        recommendations.append(f"Consider manually entering information for: {', '.join(failed_sections)}")
    if total_warnings > 0:
        recommendations.append("Review the warnings below to improve parsing accuracy")
    if successful_sections:
        recommendations.append(f"Successfully parsed: {', '.join(successful_sections)}")
    if total_errors > 0:
        recommendations.append("Please address the errors below before proceeding")

    return ParsingSummary(
        successful_sections=successful_sections,
        failed_sections=failed_sections,
        total_errors=total_errors,
        total_warnings=total_warnings,
        overall_success=total_errors == 0 and bool(successful_sections),
        recommendations=recommendations,
    )
