"""Database connection management and schema initialization."""

import sqlite3
from pathlib import Path

from config import DEFAULT_DB_PATH

SCHEMA_SQL = """
-- Exercise templates. Requirement columns hold 'not_required', 'required'
-- or 'or'; rows written before the enum existed may hold '1' / '0'.
CREATE TABLE IF NOT EXISTS exercises (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    category TEXT NOT NULL DEFAULT 'general',
    question TEXT NOT NULL DEFAULT '',
    instructions TEXT,
    require_text TEXT NOT NULL DEFAULT 'not_required',
    require_image TEXT NOT NULL DEFAULT 'not_required',
    require_audio TEXT NOT NULL DEFAULT 'not_required',
    require_video TEXT NOT NULL DEFAULT 'not_required',
    require_document TEXT NOT NULL DEFAULT 'not_required',
    max_text_length INTEGER
);

CREATE INDEX IF NOT EXISTS idx_exercises_category ON exercises(category);

-- One response per (exercise, user)
CREATE TABLE IF NOT EXISTS exercise_responses (
    exercise_id TEXT NOT NULL,
    user_id TEXT NOT NULL,
    response_text TEXT NOT NULL DEFAULT '',
    image_keys TEXT NOT NULL DEFAULT '[]',     -- JSON array of storage keys
    audio_key TEXT,
    video_keys TEXT NOT NULL DEFAULT '[]',     -- JSON array of storage keys
    document_keys TEXT NOT NULL DEFAULT '[]',  -- JSON array of storage keys
    status TEXT NOT NULL DEFAULT 'draft' CHECK (status IN ('draft', 'completed')),
    created_at TEXT,
    updated_at TEXT,
    PRIMARY KEY (exercise_id, user_id),
    FOREIGN KEY (exercise_id) REFERENCES exercises(id) ON DELETE CASCADE
);

CREATE INDEX IF NOT EXISTS idx_exercise_responses_user ON exercise_responses(user_id);
"""


def get_connection(db_path: Path = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """Get a database connection with appropriate settings.

    Args:
        db_path: Path to the SQLite database file.

    Returns:
        A configured sqlite3 Connection object.
    """
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def init_schema(db_path: Path = DEFAULT_DB_PATH) -> None:
    """Initialize the database schema if it doesn't exist.

    Args:
        db_path: Path to the SQLite database file.
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = get_connection(db_path)
    try:
        conn.executescript(SCHEMA_SQL)
        conn.commit()
    finally:
        conn.close()
