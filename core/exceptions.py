"""
Custom exceptions for better error handling.
"""
from typing import Any, Dict, Optional


class ConverterException(Exception):
    """Base exception for all transaction conversion errors."""
    
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize exception.
        
        Args:
            message: Error message
            details: Additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class FileProcessingError(ConverterException):
    """Raised when file processing fails."""
    pass


class SignValidationError(ConverterException):
    """Raised when a ledger entry has the wrong sign for its operation."""
    pass


class ParsingError(ConverterException):
    """Raised when CSV parsing fails."""
    pass


class ExportError(ConverterException):
    """Raised when CSV export fails."""
    pass


class ConfigurationError(ConverterException):
    """Raised when configuration is invalid."""
    pass


class DataNotFoundError(ConverterException):
    """Raised when required data is not found."""
    pass
