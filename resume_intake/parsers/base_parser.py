"""Input contract and format detection for resume documents."""

import mimetypes
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Union

import aiofiles

from ..utils.exceptions import FileValidationError
from ..utils.logging import get_logger

logger = get_logger("parser.input")

PDF_MEDIA_TYPE = "application/pdf"
DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
TEXT_MEDIA_TYPE = "text/plain"


class FileFormat(Enum):
    """Supported file formats for parsing."""
    PDF = "pdf"
    DOCX = "docx"
    TXT = "txt"

    @property
    def extensions(self) -> tuple:
        """File name extensions that identify this format."""
        return _FORMAT_EXTENSIONS[self]

    @property
    def media_types(self) -> tuple:
        """Declared media types that identify this format."""
        return _FORMAT_MEDIA_TYPES[self]

    @classmethod
    def from_media_type(cls, media_type: Optional[str]) -> Optional["FileFormat"]:
        """Map a declared media type to a format.
        
        Args:
            media_type: Media type as declared by the uploader, may carry parameters
            
        Returns:
            FileFormat or None if the type is not supported
        """
        if not media_type:
            return None
        normalized = media_type.split(";", 1)[0].strip().lower()
        for file_format, media_types in _FORMAT_MEDIA_TYPES.items():
            if normalized in media_types:
                return file_format
        return None

    @classmethod
    def from_filename(cls, filename: Optional[str]) -> Optional["FileFormat"]:
        """Map a file name extension to a format.
        
        Args:
            filename: File name, compared case-insensitively
            
        Returns:
            FileFormat or None if the extension is not supported
        """
        if not filename:
            return None
        lowered = filename.lower()
        for file_format, extensions in _FORMAT_EXTENSIONS.items():
            if lowered.endswith(extensions):
                return file_format
        return None


_FORMAT_EXTENSIONS = {
    FileFormat.PDF: (".pdf",),
    FileFormat.DOCX: (".docx",),
    FileFormat.TXT: (".txt",),
}

_FORMAT_MEDIA_TYPES = {
    FileFormat.PDF: (PDF_MEDIA_TYPE,),
    FileFormat.DOCX: (DOCX_MEDIA_TYPE,),
    FileFormat.TXT: (TEXT_MEDIA_TYPE,),
}


def detect_file_format(media_type: Optional[str], filename: Optional[str]) -> Optional[FileFormat]:
    """Pick the decoder format for an upload.
    
    The declared media type wins; the file name extension is consulted only
    when the type is missing or unrecognised.
    
    Args:
        media_type: Declared media type
        filename: Original file name
        
    Returns:
        FileFormat or None when neither signal is supported
    """
    return FileFormat.from_media_type(media_type) or FileFormat.from_filename(filename)


@dataclass
class UploadedFile:
    """A resume document handed to the parser.
    
    ``size`` is the size the caller reports and defaults to the length of
    ``content``; the two can disagree when a transport reports a size it did
    not deliver.
    """
    name: str
    content: bytes = b""
    media_type: str = ""
    size: Optional[int] = field(default=None)

    def __post_init__(self):
        if self.size is None:
            self.size = len(self.content)

    @property
    def extension(self) -> str:
        """Lower-case extension including the dot, or empty string."""
        return Path(self.name).suffix.lower()

    async def read(self) -> bytes:
        """Return the raw bytes of the document."""
        return self.content

    async def text(self, encoding: str = "utf-8") -> str:
        """Return the document decoded as text.
        
        Args:
            encoding: Text encoding to decode with
            
        Raises:
            UnicodeDecodeError: If the bytes are not valid in ``encoding``
        """
        return self.content.decode(encoding)

    @classmethod
    async def from_path(cls, file_path: Union[str, Path], media_type: Optional[str] = None) -> "UploadedFile":
        """Load a document from disk.
        
        Args:
            file_path: Path to the document
            media_type: Declared media type; guessed from the name when omitted
            
        Returns:
            UploadedFile with the file's bytes
            
        Raises:
            FileValidationError: If the path is not a readable file
        """
        path = Path(file_path)
        if not path.is_file():
            raise FileValidationError(f"Not a readable file: {path}", file_path=str(path))

        if media_type is None:
            media_type, _ = mimetypes.guess_type(path.name)
            if media_type is None and path.suffix.lower() == ".docx":
                media_type = DOCX_MEDIA_TYPE

        try:
            async with aiofiles.open(path, "rb") as f:
                content = await f.read()
        except OSError as e:
            raise FileValidationError(f"Failed to read {path}: {e}", file_path=str(path)) from e

        logger.debug(f"Loaded {path.name} ({len(content)} bytes, {media_type or 'unknown type'})")
        return cls(name=path.name, content=content, media_type=media_type or "")
