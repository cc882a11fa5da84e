"""Format decoders that turn uploaded documents into plain text."""

import asyncio
import io
import re
import zipfile
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from .base_parser import FileFormat, UploadedFile, detect_file_format
from ..utils.exceptions import DocumentDecodeError
from ..utils.logging import get_logger

MIN_TEXT_FILE_LENGTH = 50

_CONTROL_CHARS = re.compile(r'[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]')


@dataclass
class TextExtractionResult:
    """Result of text extraction from a file."""
    text: str
    metadata: Dict[str, Any] = field(default_factory=dict)
    extraction_errors: List[str] = field(default_factory=list)
    confidence_score: float = 1.0


class FileHandler:
    """Base class for file handlers.
    
    Handlers raise DocumentDecodeError with a user-facing message whenever a
    document yields no usable text; they never return empty text.
    """
    
    def __init__(self, file_format: FileFormat):
        """Initialize file handler.
        
        Args:
            file_format: Format this handler supports
        """
        self.file_format = file_format
        self.logger = get_logger(f"file_handler.{file_format.value}")
    
    async def extract_text(self, file: UploadedFile) -> TextExtractionResult:
        """Extract text from an uploaded document.
        
        Args:
            file: Uploaded document
            
        Returns:
            TextExtractionResult containing extracted text and metadata
            
        Raises:
            DocumentDecodeError: If no usable text could be extracted
        """
        raise NotImplementedError
    
    def supports_format(self, file_format: FileFormat) -> bool:
        """Check if this handler supports a specific format.
        
        Args:
            file_format: Format to check
            
        Returns:
            True if supported, False otherwise
        """
        return file_format == self.file_format
    
    def _clean_text(self, text: str) -> str:
        """Normalize line endings and drop control characters, keeping line structure.
        
        Args:
            text: Raw text to clean
            
        Returns:
            Cleaned text
        """
        text = text.replace('\r\n', '\n').replace('\r', '\n')
        text = _CONTROL_CHARS.sub('', text)
        return text.strip()
    
    def _decode_error(self, message: str, reason: str = "failed", cause: Optional[Exception] = None) -> DocumentDecodeError:
        """Build a DocumentDecodeError for this handler's format."""
        details = {"original_error": str(cause)} if cause is not None else None
        return DocumentDecodeError(message, file_format=self.file_format.value, reason=reason, details=details)


class TextFileHandler(FileHandler):
    """Handler for plain text files."""
    
    FALLBACK_ENCODINGS = ('cp1252', 'latin-1')
    
    def __init__(self):
        """Initialize text file handler."""
        super().__init__(FileFormat.TXT)
    
    async def extract_text(self, file: UploadedFile) -> TextExtractionResult:
        """Extract text from a plain text file.
        
        Args:
            file: Uploaded text document
            
        Returns:
            TextExtractionResult with extracted text
        """
        encoding = "utf-8"
        confidence = 1.0
        try:
            content = await file.text("utf-8-sig")
        except UnicodeDecodeError:
            content, encoding = await self._try_different_encodings(file)
            # Lower confidence due to encoding issues
            confidence = 0.8
        
        text = self._clean_text(content)
        if not text:
            raise self._decode_error("Text file parsing failed: Text file appears to be empty", "empty")
        # Counted before trimming; the trimmed length is checked after extraction
        if len(content) < MIN_TEXT_FILE_LENGTH:
            raise self._decode_error("Text file parsing failed: Text file contains very little content", "too_short")
        
        metadata = {
            "encoding": encoding,
            "line_count": len(text.splitlines()),
            "word_count": len(text.split()),
            "file_size": file.size
        }
        
        return TextExtractionResult(text=text, metadata=metadata, confidence_score=confidence)
    
    async def _try_different_encodings(self, file: UploadedFile) -> Tuple[str, str]:
        """Try different encodings if UTF-8 fails.
        
        Args:
            file: Uploaded text document
            
        Returns:
            Tuple of (decoded text, encoding used)
        """
        for encoding in self.FALLBACK_ENCODINGS:
            try:
                content = await file.text(encoding)
                self.logger.warning(f"{file.name} is not valid UTF-8, decoded as {encoding}")
                return content, encoding
            except UnicodeDecodeError:
                continue
        
        raise self._decode_error("Text file parsing failed: Failed to decode file with any supported encoding")


class PDFFileHandler(FileHandler):
    """Handler for PDF files."""
    
    def __init__(self):
        """Initialize PDF file handler."""
        super().__init__(FileFormat.PDF)
    
    async def extract_text(self, file: UploadedFile) -> TextExtractionResult:
        """Extract text from a PDF file.
        
        Args:
            file: Uploaded PDF document
            
        Returns:
            TextExtractionResult with extracted text
        """
        content = await file.read()
        if not content:
            raise self._decode_error("PDF file appears to be empty", "empty")
        
        try:
            raw_text, page_count = await asyncio.to_thread(self._extract_pdf_text, content)
        except DocumentDecodeError:
            raise
        except Exception as e:
            self.logger.warning(f"Failed to extract text from PDF {file.name}: {e}")
            raise self._translate_error(e) from e
        
        text = self._clean_text(raw_text)
        if not text:
            raise self._decode_error("PDF contains no readable text content", "no_text")
        
        metadata = {
            "page_count": page_count,
            "file_size": len(content)
        }
        
        return TextExtractionResult(text=text, metadata=metadata, confidence_score=0.8)
    
    def _extract_pdf_text(self, content: bytes) -> Tuple[str, int]:
        """Extract text from every page using pypdf.
        
        Args:
            content: Raw PDF bytes
            
        Returns:
            Tuple of (joined page text, page count)
        """
        from pypdf import PdfReader
        
        pdf_reader = PdfReader(io.BytesIO(content))
        
        if pdf_reader.is_encrypted and not pdf_reader.decrypt(""):
            raise self._decode_error(
                "The PDF file is password protected. Please provide an unprotected version",
                "password_protected"
            )
        
        text_parts = []
        for page in pdf_reader.pages:
            page_text = page.extract_text()
            if page_text:
                text_parts.append(page_text)
        
        return '\n\n'.join(text_parts), len(pdf_reader.pages)
    
    def _translate_error(self, error: Exception) -> DocumentDecodeError:
        """Map a pypdf failure onto a user-facing decode error.
        
        Args:
            error: Exception raised while reading the document
            
        Returns:
            DocumentDecodeError with a descriptive message
        """
        from pypdf.errors import PdfReadError
        
        message = str(error)
        lowered = message.lower()
        
        if "password" in lowered:
            return self._decode_error(
                "The PDF file is password protected. Please provide an unprotected version",
                "password_protected", error
            )
        if "encrypt" in lowered or "decrypt" in lowered:
            return self._decode_error(
                "The PDF file is encrypted. Please provide an unencrypted version",
                "encrypted", error
            )
        if isinstance(error, PdfReadError) or "invalid pdf" in lowered:
            return self._decode_error(
                "The PDF file appears to be corrupted or invalid",
                "corrupted", error
            )
        return self._decode_error(f"PDF parsing failed: {message}", "failed", error)


class DOCXFileHandler(FileHandler):
    """Handler for DOCX files."""
    
    def __init__(self):
        """Initialize DOCX file handler."""
        super().__init__(FileFormat.DOCX)
    
    async def extract_text(self, file: UploadedFile) -> TextExtractionResult:
        """Extract text from a DOCX file.
        
        Args:
            file: Uploaded Word document
            
        Returns:
            TextExtractionResult with extracted text
        """
        content = await file.read()
        if not content:
            raise self._decode_error("Word document appears to be empty", "empty")
        
        try:
            raw_text, warnings, paragraph_count = await asyncio.to_thread(self._extract_docx_text, content)
        except Exception as e:
            self.logger.warning(f"Failed to extract text from DOCX {file.name}: {e}")
            raise self._translate_error(e) from e
        
        for warning in warnings:
            self.logger.warning(f"{file.name}: {warning}")
        
        text = self._clean_text(raw_text)
        if not text:
            raise self._decode_error("Word document contains no readable text content", "no_text")
        
        metadata = {
            "paragraph_count": paragraph_count,
            "file_size": len(content)
        }
        
        return TextExtractionResult(
            text=text,
            metadata=metadata,
            extraction_errors=warnings,
            confidence_score=0.9
        )
    
    def _extract_docx_text(self, content: bytes) -> Tuple[str, List[str], int]:
        """Extract paragraph and table text using python-docx.
        
        Args:
            content: Raw DOCX bytes
            
        Returns:
            Tuple of (text, extraction warnings, paragraph count)
        """
        import docx
        
        doc = docx.Document(io.BytesIO(content))
        
        text_parts = []
        warnings = []
        
        for paragraph in doc.paragraphs:
            if paragraph.text.strip():
                text_parts.append(paragraph.text)
        paragraph_count = len(text_parts)
        
        for table in doc.tables:
            for row in table.rows:
                row_text = []
                for cell in row.cells:
                    if cell.text.strip():
                        row_text.append(cell.text.strip())
                if row_text:
                    text_parts.append(' | '.join(row_text))
        
        image_count = len(doc.inline_shapes)
        if image_count:
            warnings.append(f"Skipped {image_count} embedded image(s); text inside images is not extracted")
        if not paragraph_count and text_parts:
            warnings.append("Document text was found only inside tables")
        
        return '\n'.join(text_parts), warnings, paragraph_count
    
    def _translate_error(self, error: Exception) -> DocumentDecodeError:
        """Map a python-docx failure onto a user-facing decode error.
        
        Args:
            error: Exception raised while reading the document
            
        Returns:
            DocumentDecodeError with a descriptive message
        """
        from docx.opc.exceptions import PackageNotFoundError
        
        message = str(error)
        lowered = message.lower()
        
        if "password" in lowered:
            return self._decode_error(
                "The Word document is password protected. Please provide an unprotected version",
                "password_protected", error
            )
        if isinstance(error, (zipfile.BadZipFile, PackageNotFoundError)) or "zip file" in lowered:
            return self._decode_error(
                "The Word document appears to be corrupted or is not a valid .docx file",
                "corrupted", error
            )
        return self._decode_error(f"Word document parsing failed: {message}", "failed", error)


class FileHandlerRegistry:
    """Registry for file handlers.
    
    Handlers are built on first use, so a deployment that only ever sees text
    uploads never imports the PDF or Word libraries.
    """
    
    def __init__(self):
        """Initialize the file handler registry."""
        self.handlers: Dict[FileFormat, FileHandler] = {}
        self._factories: Dict[FileFormat, Callable[[], FileHandler]] = {
            FileFormat.PDF: PDFFileHandler,
            FileFormat.DOCX: DOCXFileHandler,
            FileFormat.TXT: TextFileHandler,
        }
        self.logger = get_logger("file_handler.registry")
    
    def register(self, file_format: FileFormat, factory: Callable[[], FileHandler]) -> None:
        """Register or replace the handler factory for a format.
        
        Args:
            file_format: Format the factory handles
            factory: Zero-argument callable returning a FileHandler
        """
        self._factories[file_format] = factory
        self.handlers.pop(file_format, None)
    
    def get_handler(self, file_format: FileFormat) -> Optional[FileHandler]:
        """Get handler for a specific file format.
        
        Args:
            file_format: File format to get handler for
            
        Returns:
            FileHandler instance or None if not found
        """
        handler = self.handlers.get(file_format)
        if handler is None:
            factory = self._factories.get(file_format)
            if factory is None:
                return None
            handler = factory()
            self.handlers[file_format] = handler
            self.logger.debug(f"Created {type(handler).__name__} for {file_format.value}")
        return handler
    
    def resolve(self, file: UploadedFile) -> Optional[FileHandler]:
        """Pick the handler for an upload, declared media type first, extension second.
        
        Args:
            file: Uploaded document
            
        Returns:
            FileHandler instance or None when the format is not supported
        """
        file_format = detect_file_format(file.media_type, file.name)
        if file_format is None:
            return None
        return self.get_handler(file_format)
    
    def get_supported_formats(self) -> List[FileFormat]:
        """Get list of supported file formats.
        
        Returns:
            List of supported FileFormat enums
        """
        return list(self._factories.keys())
