"""
Core Package - Lawyer Performance Scoring
app/core/__init__.py

Core infrastructure: dependencies, exceptions, logging.
Import FastAPI dependencies from app.core.dependencies directly.
"""

from app.core.exceptions import (
    DatabaseConnectionException,
    DuplicateEntityException,
    InputError,
    PipelineException,
    ProcessingFailedError,
    RemoteProcessingError,
    RepositoryException,
    RowError,
)

__all__ = [
    "DatabaseConnectionException",
    "DuplicateEntityException",
    "InputError",
    "PipelineException",
    "ProcessingFailedError",
    "RemoteProcessingError",
    "RepositoryException",
    "RowError",
]
