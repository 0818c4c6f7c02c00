"""
Unit tests for custom exceptions.
"""
from core.exceptions import (
    ConverterException,
    FileProcessingError,
    SignValidationError,
    ParsingError,
    ExportError,
    ConfigurationError,
    DataNotFoundError,
)


def test_base_exception():
    """Test base exception class."""
    exc = ConverterException("Test error", details={"key": "value"})
    assert str(exc) == "Test error"
    assert exc.message == "Test error"
    assert exc.details == {"key": "value"}


def test_exception_hierarchy():
    """Test exception inheritance."""
    assert issubclass(FileProcessingError, ConverterException)
    assert issubclass(SignValidationError, ConverterException)
    assert issubclass(ParsingError, ConverterException)
    assert issubclass(ExportError, ConverterException)
    assert issubclass(ConfigurationError, ConverterException)
    assert issubclass(DataNotFoundError, ConverterException)


def test_exception_with_details():
    """Test exception with details dictionary."""
    details = {"change": "5", "currency": "BTC"}
    exc = SignValidationError("Trade change should be negative.", details=details)
    assert exc.message == "Trade change should be negative."
    assert exc.details["change"] == "5"
    assert exc.details["currency"] == "BTC"


def test_exception_without_details():
    """Test exception without details."""
    exc = ParsingError("Bad row")
    assert exc.message == "Bad row"
    assert exc.details == {}
