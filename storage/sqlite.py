"""SQLite implementations of repository interfaces."""

import json
from datetime import datetime
from pathlib import Path

from loguru import logger

from .base import ExerciseRepository, ResponseRepository
from .connection import get_connection, DEFAULT_DB_PATH
from models import (
    MODALITY_ORDER,
    ExerciseResponse,
    ExerciseTemplate,
    PersistedStatus,
    RawRequirement,
)
from normalizer import normalize_for_authoring

REQUIREMENT_COLUMNS = [f"require_{kind.value}" for kind in MODALITY_ORDER]

# Update in place; REPLACE would cascade-delete the exercise's responses.
UPSERT_ASSIGNMENTS = ", ".join(
    f"{column} = excluded.{column}"
    for column in [
        "title",
        "category",
        "question",
        "instructions",
        *REQUIREMENT_COLUMNS,
        "max_text_length",
    ]
)

LEGACY_TRUE = {"1", "true"}
LEGACY_FALSE = {"0", "false", ""}


def _decode_requirement(value) -> RawRequirement:
    """Map a stored requirement column back to its raw shape."""
    if value is None:
        return None
    if isinstance(value, int):
        return bool(value)
    text = str(value).strip().lower()
    if text in LEGACY_TRUE:
        return True
    if text in LEGACY_FALSE:
        return False
    return text


class SQLiteExerciseRepository(ExerciseRepository):
    """SQLite implementation of ExerciseRepository."""

    def __init__(self, db_path: Path = DEFAULT_DB_PATH):
        self.db_path = db_path

    def get_all(self) -> list[ExerciseTemplate]:
        """Load all exercise templates."""
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute("SELECT * FROM exercises ORDER BY category, title")
            return [self._row_to_model(row) for row in cursor.fetchall()]
        finally:
            conn.close()

    def get_by_id(self, exercise_id: str) -> ExerciseTemplate | None:
        """Load a single exercise by ID."""
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute("SELECT * FROM exercises WHERE id = ?", (exercise_id,))
            row = cursor.fetchone()
            return self._row_to_model(row) if row else None
        finally:
            conn.close()

    def get_by_category(self, category: str) -> list[ExerciseTemplate]:
        """Load exercises in a category."""
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute(
                "SELECT * FROM exercises WHERE category = ? ORDER BY title", (category,)
            )
            return [self._row_to_model(row) for row in cursor.fetchall()]
        finally:
            conn.close()

    def save(self, template: ExerciseTemplate) -> ExerciseTemplate:
        """Validate and save/update an exercise.

        Requirements are stored in normalized form, so a lone OR member is
        written as required.
        """
        is_valid, errors = template.validate_requirements()
        if not is_valid:
            raise ValueError(f"Exercise {template.id} is invalid: {errors}")

        policies = normalize_for_authoring(template)
        stored = template.model_copy(
            update={
                f"require_{kind.value}": policy.value
                for kind, policy in policies.items()
            }
        )

        conn = get_connection(self.db_path)
        try:
            conn.execute(
                f"""INSERT INTO exercises
                (id, title, category, question, instructions,
                 {", ".join(REQUIREMENT_COLUMNS)}, max_text_length)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET {UPSERT_ASSIGNMENTS}""",
                (
                    stored.id,
                    stored.title,
                    stored.category,
                    stored.question,
                    stored.instructions,
                    *(getattr(stored, column) for column in REQUIREMENT_COLUMNS),
                    stored.max_text_length,
                ),
            )
            conn.commit()
        finally:
            conn.close()

        logger.info(f"Saved exercise {stored.id}")
        return stored

    def delete(self, exercise_id: str) -> bool:
        """Delete an exercise; its responses go with it."""
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute("DELETE FROM exercises WHERE id = ?", (exercise_id,))
            conn.commit()
            return cursor.rowcount > 0
        finally:
            conn.close()

    def _row_to_model(self, row) -> ExerciseTemplate:
        """Convert a database row to an ExerciseTemplate model."""
        return ExerciseTemplate(
            id=row["id"],
            title=row["title"],
            category=row["category"],
            question=row["question"],
            instructions=row["instructions"],
            max_text_length=row["max_text_length"],
            **{column: _decode_requirement(row[column]) for column in REQUIREMENT_COLUMNS},
        )


class SQLiteResponseRepository(ResponseRepository):
    """SQLite implementation of ResponseRepository."""

    def __init__(self, db_path: Path = DEFAULT_DB_PATH):
        self.db_path = db_path

    def get(self, exercise_id: str, user_id: str) -> ExerciseResponse | None:
        """Load the response of one user to one exercise."""
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute(
                """SELECT * FROM exercise_responses
                WHERE exercise_id = ? AND user_id = ?""",
                (exercise_id, user_id),
            )
            row = cursor.fetchone()
            return self._row_to_model(row) if row else None
        finally:
            conn.close()

    def get_for_user(self, user_id: str) -> dict[str, ExerciseResponse]:
        """Load every response of a user, keyed by exercise ID."""
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute(
                "SELECT * FROM exercise_responses WHERE user_id = ?", (user_id,)
            )
            responses = [self._row_to_model(row) for row in cursor.fetchall()]
            return {response.exercise_id: response for response in responses}
        finally:
            conn.close()

    def save(self, response: ExerciseResponse) -> None:
        """Save/update a response."""
        conn = get_connection(self.db_path)
        try:
            # Use INSERT OR REPLACE for upsert behavior
            conn.execute(
                """INSERT OR REPLACE INTO exercise_responses
                (exercise_id, user_id, response_text, image_keys, audio_key,
                 video_keys, document_keys, status, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                (
                    response.exercise_id,
                    response.user_id,
                    response.response_text,
                    json.dumps(response.image_keys),
                    response.audio_key,
                    json.dumps(response.video_keys),
                    json.dumps(response.document_keys),
                    response.status.value,
                    response.created_at.isoformat() if response.created_at else None,
                    response.updated_at.isoformat() if response.updated_at else None,
                ),
            )
            conn.commit()
        finally:
            conn.close()

    def _row_to_model(self, row) -> ExerciseResponse:
        """Convert a database row to an ExerciseResponse model."""
        return ExerciseResponse(
            exercise_id=row["exercise_id"],
            user_id=row["user_id"],
            response_text=row["response_text"],
            image_keys=json.loads(row["image_keys"]),
            audio_key=row["audio_key"],
            video_keys=json.loads(row["video_keys"]),
            document_keys=json.loads(row["document_keys"]),
            status=PersistedStatus(row["status"]),
            created_at=datetime.fromisoformat(row["created_at"])
            if row["created_at"]
            else None,
            updated_at=datetime.fromisoformat(row["updated_at"])
            if row["updated_at"]
            else None,
        )
