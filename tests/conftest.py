"""Shared pytest fixtures for the exercise progress test suite."""

import io
import pytest

import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from rich.console import Console

from models import (
    ExerciseResponse,
    ExerciseTemplate,
    PersistedStatus,
    RequirementPolicy,
    RequirementSet,
    ModalityKind,
)
from storage import SQLiteExerciseRepository, SQLiteResponseRepository, init_schema
from ui import DEFAULT_THEME


@pytest.fixture
def text_or_media_requirements() -> RequirementSet:
    """Text required plus an Image/Audio OR group."""
    return RequirementSet(
        policies={
            ModalityKind.TEXT: RequirementPolicy.REQUIRED,
            ModalityKind.IMAGE: RequirementPolicy.OR,
            ModalityKind.AUDIO: RequirementPolicy.OR,
        }
    )


@pytest.fixture
def video_requirements() -> RequirementSet:
    """Only a video is required."""
    return RequirementSet(policies={ModalityKind.VIDEO: RequirementPolicy.REQUIRED})


@pytest.fixture
def reflection_template() -> ExerciseTemplate:
    """A journaling exercise: text plus an image or an audio note."""
    return ExerciseTemplate(
        id="ex001",
        title="Morning Reflection",
        category="mindset",
        question="What are you grateful for today?",
        require_text="required",
        require_image="or",
        require_audio="or",
        max_text_length=500,
    )


@pytest.fixture
def legacy_template() -> ExerciseTemplate:
    """An exercise authored before the enum existed (boolean flags)."""
    return ExerciseTemplate(
        id="ex002",
        title="Vision Board",
        category="goals",
        question="Collect images that describe your goals.",
        require_text=False,
        require_image=True,
    )


@pytest.fixture
def video_template() -> ExerciseTemplate:
    return ExerciseTemplate(
        id="ex003",
        title="Elevator Pitch",
        category="goals",
        question="Record a one minute pitch about yourself.",
        require_video="required",
    )


@pytest.fixture
def sample_templates(
    reflection_template, legacy_template, video_template
) -> list[ExerciseTemplate]:
    return [reflection_template, legacy_template, video_template]


@pytest.fixture
def draft_response() -> ExerciseResponse:
    """A draft response to ex001 with text only."""
    return ExerciseResponse(
        exercise_id="ex001",
        user_id="user-1",
        response_text="My family and a quiet morning.",
        status=PersistedStatus.DRAFT,
    )


@pytest.fixture
def test_db_path(tmp_path) -> Path:
    """Create a temporary database path for testing."""
    db_path = tmp_path / "test_playbook.db"
    init_schema(db_path)
    return db_path


@pytest.fixture
def populated_test_db(test_db_path, sample_templates) -> Path:
    """Create a test database populated with the sample exercises."""
    repo = SQLiteExerciseRepository(test_db_path)
    for template in sample_templates:
        repo.save(template)
    return test_db_path


@pytest.fixture
def response_repo(populated_test_db) -> SQLiteResponseRepository:
    return SQLiteResponseRepository(populated_test_db)


@pytest.fixture
def console() -> Console:
    """A console that records output instead of writing to the terminal."""
    return Console(
        file=io.StringIO(), width=120, color_system=None, theme=DEFAULT_THEME
    )
