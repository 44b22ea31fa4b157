"""
Custom Exceptions - Lawyer Performance Scoring
app/core/exceptions.py

Typed failure modes for the CSV scoring pipeline and the repository layer.
"""

from typing import Optional


class PipelineException(Exception):
    """Base exception for the CSV-to-score pipeline."""

    error_code = "PIPELINE_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


# =============================================================================
# INPUT ERRORS - the pipeline does not run, no partial output
# =============================================================================


class InputError(PipelineException):
    """The uploaded content cannot be processed at all."""

    error_code = "INVALID_INPUT"


class EmptyInputError(InputError):
    """Content is empty after trimming."""

    error_code = "EMPTY_FILE"

    def __init__(self, message: str = "CSV file appears to be empty"):
        super().__init__(message)


class NoHeaderError(InputError):
    """No non-blank line to use as a header."""

    error_code = "NO_HEADER"

    def __init__(self, message: str = "CSV file must have at least a header row"):
        super().__init__(message)


class NoDataRowsError(InputError):
    """Header row present but no data rows follow it."""

    error_code = "NO_DATA_ROWS"

    def __init__(self, headers: Optional[list] = None):
        self.headers = headers or []
        super().__init__("CSV file contains only headers, no data rows found")


class UnreadableEncodingError(InputError):
    """Content is not valid UTF-8."""

    error_code = "UNREADABLE_ENCODING"

    def __init__(self, message: str = "CSV file must be UTF-8 encoded"):
        super().__init__(message)


class UploadTooLargeError(InputError):
    """Upload exceeds the configured size limit."""

    error_code = "FILE_TOO_LARGE"

    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(f"CSV file is {size} bytes, limit is {limit} bytes")


class NoValidRowsError(InputError):
    """Every data row failed to process."""

    error_code = "NO_VALID_ROWS"

    def __init__(self, rows_failed: int):
        self.rows_failed = rows_failed
        super().__init__(
            f"No valid data rows could be processed from the CSV file ({rows_failed} failed)"
        )


# =============================================================================
# ROW AND PROCESSING ERRORS
# =============================================================================


class RowError(PipelineException):
    """A single data row could not be parsed or converted."""

    error_code = "ROW_ERROR"

    def __init__(self, row_number: int, reason: str):
        self.row_number = row_number
        self.reason = reason
        super().__init__(f"Row {row_number}: {reason}")


class RemoteProcessingError(PipelineException):
    """The remote preprocessing endpoint failed or returned unusable data."""

    error_code = "REMOTE_PROCESSING_FAILED"


class ProcessingFailedError(PipelineException):
    """Both the remote processor and the local pipeline failed."""

    error_code = "PROCESSING_FAILED"

    def __init__(self, remote_error: Optional[str], local_error: str):
        self.remote_error = remote_error
        self.local_error = local_error
        super().__init__(
            f"Remote processing failed ({remote_error}); local processing failed ({local_error})"
        )


# =============================================================================
# REPOSITORY ERRORS
# =============================================================================


class RepositoryException(Exception):
    """Base exception for repository operations."""

    pass


class DatabaseConnectionException(RepositoryException):
    """Database connection failure."""

    def __init__(self, message: str = "Database connection failed"):
        self.message = message
        super().__init__(message)


class DuplicateEntityException(RepositoryException):
    """Duplicate entity violation."""

    def __init__(self, message: str = "Entity already exists"):
        self.message = message
        super().__init__(message)
