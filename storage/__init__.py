"""Storage layer for exercise templates and user responses.

Provides repository interfaces and SQLite implementations. The progress
engine itself never touches storage; callers load templates and
responses here and pass them in.
"""

from pathlib import Path

from .base import (
    ExerciseRepository,
    ResponseRepository,
)
from .sqlite import (
    SQLiteExerciseRepository,
    SQLiteResponseRepository,
)
from .connection import get_connection, init_schema, DEFAULT_DB_PATH

__all__ = [
    # Abstract interfaces
    "ExerciseRepository",
    "ResponseRepository",
    # SQLite implementations
    "SQLiteExerciseRepository",
    "SQLiteResponseRepository",
    # Connection utilities
    "get_connection",
    "init_schema",
    "DEFAULT_DB_PATH",
    # Factory functions
    "get_exercise_repo",
    "get_response_repo",
]


def get_exercise_repo(db_path: Path = DEFAULT_DB_PATH) -> ExerciseRepository:
    """Get an ExerciseRepository instance."""
    return SQLiteExerciseRepository(db_path)


def get_response_repo(db_path: Path = DEFAULT_DB_PATH) -> ResponseRepository:
    """Get a ResponseRepository instance."""
    return SQLiteResponseRepository(db_path)
