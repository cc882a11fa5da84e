"""Parsers package for decoding documents and extracting resume sections."""

from .base_parser import FileFormat, UploadedFile, detect_file_format
from .file_handlers import (
    DOCXFileHandler,
    FileHandler,
    FileHandlerRegistry,
    PDFFileHandler,
    TextExtractionResult,
    TextFileHandler,
)
from .resume_parser import (
    ResumeSectionExtractor,
    extract_achievements,
    extract_education,
    extract_experience,
    extract_skills,
)
from .sections import SectionSpan, find_next_section, has_section_heading, locate_section
from .vocabulary import DEFAULT_VOCABULARY, KeywordVocabulary

__all__ = [
    "FileFormat",
    "UploadedFile",
    "detect_file_format",
    "DOCXFileHandler",
    "FileHandler",
    "FileHandlerRegistry",
    "PDFFileHandler",
    "TextExtractionResult",
    "TextFileHandler",
    "ResumeSectionExtractor",
    "extract_achievements",
    "extract_education",
    "extract_experience",
    "extract_skills",
    "SectionSpan",
    "find_next_section",
    "has_section_heading",
    "locate_section",
    "DEFAULT_VOCABULARY",
    "KeywordVocabulary",
]
