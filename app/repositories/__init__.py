"""
Repositories Package - Lawyer Performance Scoring
app/repositories/__init__.py

Data access layer for scored lawyer records.
"""

from app.repositories.base import BaseRepository
from app.repositories.lawyer_repository import (
    InMemoryLawyerRepository,
    LawyerRepository,
    SnowflakeLawyerRepository,
)

__all__ = [
    "BaseRepository",
    "InMemoryLawyerRepository",
    "LawyerRepository",
    "SnowflakeLawyerRepository",
]
