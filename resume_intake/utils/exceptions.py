"""Custom exceptions for the Resume Intake package."""

from typing import Optional, Any, Dict


class ResumeIntakeError(Exception):
    """Base exception for all Resume Intake errors."""
    
    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        """Initialize the exception.
        
        Args:
            message: Error message
            error_code: Optional error code for categorization
            details: Optional additional error details
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
    
    def __str__(self) -> str:
        """Return string representation of the exception."""
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message


class ConfigurationError(ResumeIntakeError):
    """Exception raised for configuration-related errors."""
    
    def __init__(self, message: str, config_key: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        """Initialize the configuration error.
        
        Args:
            message: Error message
            config_key: Optional configuration key that caused the error
            details: Optional additional error details
        """
        super().__init__(message, "CONFIG_ERROR", details)
        self.config_key = config_key


class FileValidationError(ResumeIntakeError):
    """Exception raised when an input file cannot be opened for parsing."""
    
    def __init__(self, message: str, file_path: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        """Initialize the file validation error.
        
        Args:
            message: Error message
            file_path: Optional path of the offending file
            details: Optional additional error details
        """
        super().__init__(message, "FILE_VALIDATION_ERROR", details)
        self.file_path = file_path


class DocumentDecodeError(ResumeIntakeError):
    """Exception raised by format decoders when a document yields no usable text.
    
    The message is user-facing; the orchestrator embeds it verbatim in the
    ``file_corrupted`` error it reports.
    """
    
    def __init__(
        self,
        message: str,
        file_format: Optional[str] = None,
        reason: str = "failed",
        details: Optional[Dict[str, Any]] = None
    ):
        """Initialize the decode error.
        
        Args:
            message: Human-readable failure message
            file_format: Format of the document being decoded (pdf, docx, txt)
            reason: Short failure category (empty, no_text, too_short, corrupted,
                password_protected, encrypted, timeout, failed)
            details: Optional additional error details
        """
        super().__init__(message, "DECODE_ERROR", details)
        self.file_format = file_format
        self.reason = reason

    def __str__(self) -> str:
        # The message travels into user-facing errors, so no code prefix here.
        return self.message


class DecodeTimeoutError(DocumentDecodeError):
    """Exception raised when a decoder exceeds the configured time limit."""
    
    def __init__(self, timeout: float, file_format: Optional[str] = None):
        """Initialize the timeout error.
        
        Args:
            timeout: Limit in seconds that was exceeded
            file_format: Format of the document being decoded
        """
        super().__init__(
            f"Reading the document took longer than {timeout:g} seconds",
            file_format=file_format,
            reason="timeout",
            details={"timeout_seconds": timeout}
        )
        self.timeout = timeout
