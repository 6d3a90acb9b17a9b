"""
Custom exception classes for the administrative area tree builder.

Only conditions that stop a run are raised as exceptions. Skipped lines and
integrity problems found while building the tree are reported as
diagnostics instead (see ``models.Diagnostic``).
"""

from typing import Optional, List, Dict, Any


class AreaTreeError(Exception):
    """Base exception class for all area tree errors."""

    def __init__(self, message: str, error_code: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None):
        """
        Initialize the base area tree error.

        Args:
            message: Human-readable error message
            error_code: Optional error code for programmatic handling
            context: Optional context information about the error
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            'error_type': self.__class__.__name__,
            'message': self.message,
            'error_code': self.error_code,
            'context': self.context
        }


class MalformedCodeError(AreaTreeError):
    """
    Raised when a token identified as a division code is not 6 ASCII digits.

    Level classification depends on fixed-width codes, so this aborts the
    whole parse rather than skipping the line.
    """

    def __init__(self, message: str, code: Optional[str] = None,
                 line_number: Optional[int] = None, line: Optional[str] = None):
        """
        Initialize malformed code error.

        Args:
            message: Human-readable error message
            code: The offending code token
            line_number: 1-based input line number, when known
            line: Raw input line, when known
        """
        context = {
            'code': code,
            'line_number': line_number,
            'line': line
        }
        super().__init__(message, error_code='MALFORMED_CODE', context=context)
        self.code = code
        self.line_number = line_number
        self.line = line


class DataLoadError(AreaTreeError):
    """Exception raised for data loading errors."""

    def __init__(self, message: str, file_path: Optional[str] = None,
                 line_number: Optional[int] = None, original_error: Optional[Exception] = None):
        """
        Initialize data load error.

        Args:
            message: Human-readable error message
            file_path: Path to the file that caused the error
            line_number: Line number where the error occurred
            original_error: Original exception that caused this error
        """
        context = {
            'file_path': file_path,
            'line_number': line_number,
            'original_error': str(original_error) if original_error else None,
            'original_error_type': type(original_error).__name__ if original_error else None
        }
        super().__init__(message, error_code='DATA_LOAD_ERROR', context=context)
        self.file_path = file_path
        self.line_number = line_number
        self.original_error = original_error


class FileAccessError(AreaTreeError):
    """Exception raised for file access and I/O errors."""

    def __init__(self, message: str, file_path: str, operation: str,
                 original_error: Optional[Exception] = None):
        """
        Initialize file access error.

        Args:
            message: Human-readable error message
            file_path: Path to the file that caused the error
            operation: Type of operation that failed (read, write, create, etc.)
            original_error: Original exception that caused this error
        """
        context = {
            'file_path': file_path,
            'operation': operation,
            'original_error': str(original_error) if original_error else None,
            'original_error_type': type(original_error).__name__ if original_error else None
        }
        super().__init__(message, error_code='FILE_ACCESS_ERROR', context=context)
        self.file_path = file_path
        self.operation = operation
        self.original_error = original_error


class ConfigurationError(AreaTreeError):
    """Exception raised for configuration errors."""

    def __init__(self, message: str, config_key: Optional[str] = None,
                 config_value: Any = None, valid_values: Optional[List[Any]] = None):
        """
        Initialize configuration error.

        Args:
            message: Human-readable error message
            config_key: Configuration key that has invalid value
            config_value: Invalid configuration value
            valid_values: List of valid values for the configuration key
        """
        context = {
            'config_key': config_key,
            'config_value': str(config_value) if config_value is not None else None,
            'valid_values': [str(v) for v in valid_values] if valid_values else None
        }
        super().__init__(message, error_code='CONFIGURATION_ERROR', context=context)
        self.config_key = config_key
        self.config_value = config_value
        self.valid_values = valid_values or []


class OutputGenerationError(AreaTreeError):
    """Exception raised for errors during output generation."""

    def __init__(self, message: str, output_type: Optional[str] = None,
                 output_path: Optional[str] = None, record_count: Optional[int] = None,
                 original_error: Optional[Exception] = None):
        """
        Initialize output generation error.

        Args:
            message: Human-readable error message
            output_type: Type of output being generated (JSON, CSV, report)
            output_path: Path where output was being written
            record_count: Number of records being written
            original_error: Original exception that caused this error
        """
        context = {
            'output_type': output_type,
            'output_path': output_path,
            'record_count': record_count,
            'original_error': str(original_error) if original_error else None,
            'original_error_type': type(original_error).__name__ if original_error else None
        }
        super().__init__(message, error_code='OUTPUT_GENERATION_ERROR', context=context)
        self.output_type = output_type
        self.output_path = output_path
        self.record_count = record_count
        self.original_error = original_error


class DataQualityError(AreaTreeError):
    """Exception raised when a build produced diagnostics the caller refuses to accept."""

    def __init__(self, message: str, quality_issue: str, affected_records: Optional[int] = None,
                 severity: str = 'medium', recommendations: Optional[List[str]] = None):
        """
        Initialize data quality error.

        Args:
            message: Human-readable error message
            quality_issue: Type of quality issue (diagnostic kinds, comma separated)
            affected_records: Number of records affected by the issue
            severity: Severity level (low, medium, high, critical)
            recommendations: List of recommendations to fix the issue
        """
        context = {
            'quality_issue': quality_issue,
            'affected_records': affected_records,
            'severity': severity,
            'recommendations': recommendations or []
        }
        super().__init__(message, error_code='DATA_QUALITY_ERROR', context=context)
        self.quality_issue = quality_issue
        self.affected_records = affected_records
        self.severity = severity
        self.recommendations = recommendations or []


def get_error_severity(error: Exception) -> str:
    """
    Get the severity level of an error.

    Args:
        error: Exception to evaluate

    Returns:
        Severity level string (low, medium, high, critical)
    """
    if isinstance(error, ConfigurationError):
        return 'critical'
    elif isinstance(error, (DataLoadError, FileAccessError, MalformedCodeError)):
        return 'high'
    elif isinstance(error, OutputGenerationError):
        return 'medium'
    elif isinstance(error, DataQualityError):
        return error.severity
    else:
        return 'medium'


def create_malformed_code_error(code: str, line_number: Optional[int] = None,
                                line: Optional[str] = None) -> MalformedCodeError:
    """
    Create a standardized malformed code error.

    Args:
        code: The offending code token
        line_number: 1-based input line number
        line: Raw input line

    Returns:
        MalformedCodeError instance
    """
    message = f"Division code '{code}' is not a 6-digit code"
    if line_number is not None:
        message += f" (line {line_number})"

    return MalformedCodeError(
        message=message,
        code=code,
        line_number=line_number,
        line=line
    )


def create_file_error(operation: str, file_path: str, original_error: Exception) -> FileAccessError:
    """
    Create a standardized file access error.

    Args:
        operation: Type of file operation that failed
        file_path: Path to the file
        original_error: Original exception

    Returns:
        FileAccessError instance
    """
    message = f"Failed to {operation} file '{file_path}': {str(original_error)}"

    return FileAccessError(
        message=message,
        file_path=file_path,
        operation=operation,
        original_error=original_error
    )
