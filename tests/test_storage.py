"""Tests for the storage layer repository implementations."""

from datetime import datetime

import pytest

from models import (
    ExerciseResponse,
    ExerciseTemplate,
    ModalityKind,
    PersistedStatus,
    RequirementPolicy,
)
from storage import (
    SQLiteExerciseRepository,
    SQLiteResponseRepository,
    get_connection,
    get_exercise_repo,
    get_response_repo,
)


class TestExerciseRepository:
    """Tests for SQLiteExerciseRepository."""

    def test_get_all_returns_empty_for_empty_db(self, test_db_path):
        """Should return empty list when database has no exercises."""
        repo = SQLiteExerciseRepository(test_db_path)
        assert repo.get_all() == []

    def test_get_all_orders_by_category(self, populated_test_db):
        repo = SQLiteExerciseRepository(populated_test_db)
        result = repo.get_all()
        assert [template.id for template in result] == ["ex003", "ex002", "ex001"]

    def test_get_by_id(self, populated_test_db):
        repo = SQLiteExerciseRepository(populated_test_db)
        result = repo.get_by_id("ex001")
        assert result is not None
        assert result.title == "Morning Reflection"
        assert result.max_text_length == 500
        assert result.require_image == "or"

    def test_get_by_id_returns_none_for_unknown_id(self, populated_test_db):
        repo = SQLiteExerciseRepository(populated_test_db)
        assert repo.get_by_id("nonexistent") is None

    def test_get_by_category(self, populated_test_db):
        repo = SQLiteExerciseRepository(populated_test_db)
        assert [t.id for t in repo.get_by_category("goals")] == ["ex003", "ex002"]

    def test_legacy_booleans_are_stored_as_enum(self, populated_test_db):
        repo = SQLiteExerciseRepository(populated_test_db)
        result = repo.get_by_id("ex002")
        assert result.require_image == "required"
        assert result.require_text == "not_required"

    def test_single_or_is_stored_as_required(self, test_db_path):
        repo = SQLiteExerciseRepository(test_db_path)
        stored = repo.save(
            ExerciseTemplate(
                id="solo", title="Solo", require_text="required", require_audio="or"
            )
        )
        assert stored.require_audio == "required"
        assert repo.get_by_id("solo").require_audio == "required"

    def test_save_rejects_exercise_without_requirements(self, test_db_path):
        repo = SQLiteExerciseRepository(test_db_path)
        with pytest.raises(ValueError, match="invalid"):
            repo.save(ExerciseTemplate(id="empty", title="Empty"))
        assert repo.get_by_id("empty") is None

    def test_save_updates_existing(self, populated_test_db):
        repo = SQLiteExerciseRepository(populated_test_db)
        template = repo.get_by_id("ex003")
        repo.save(template.model_copy(update={"title": "Two Minute Pitch"}))
        assert repo.get_by_id("ex003").title == "Two Minute Pitch"
        assert len(repo.get_all()) == 3

    def test_update_keeps_responses(self, populated_test_db, draft_response):
        responses = SQLiteResponseRepository(populated_test_db)
        responses.save(draft_response)

        repo = SQLiteExerciseRepository(populated_test_db)
        template = repo.get_by_id("ex001")
        repo.save(template.model_copy(update={"max_text_length": 800}))

        assert repo.get_by_id("ex001").max_text_length == 800
        assert responses.get("ex001", "user-1") is not None

    def test_reads_legacy_rows(self, test_db_path):
        """Rows written with 1/0 flags still normalize correctly."""
        conn = get_connection(test_db_path)
        conn.execute(
            """INSERT INTO exercises (id, title, require_text, require_image)
            VALUES (?, ?, ?, ?)""",
            ("old", "Old Exercise", 1, 0),
        )
        conn.commit()
        conn.close()

        template = SQLiteExerciseRepository(test_db_path).get_by_id("old")
        assert template.require_text is True
        assert template.require_image is False
        assert template.requirements.policy(ModalityKind.TEXT) == (
            RequirementPolicy.REQUIRED
        )

    def test_stored_string_flags_match_import(self, test_db_path):
        """A "true" column reads back the same way a "true" JSON value imports."""
        conn = get_connection(test_db_path)
        conn.execute(
            "INSERT INTO exercises (id, title, require_text) VALUES (?, ?, ?)",
            ("flag", "String Flag", "true"),
        )
        conn.commit()
        conn.close()

        stored = SQLiteExerciseRepository(test_db_path).get_by_id("flag")
        imported = ExerciseTemplate.model_validate(
            {"id": "flag", "title": "String Flag", "requireText": "true"}
        )
        assert stored.requirements == imported.requirements
        assert stored.requirements.required == [ModalityKind.TEXT]

    def test_delete_cascades_to_responses(self, populated_test_db, draft_response):
        responses = SQLiteResponseRepository(populated_test_db)
        responses.save(draft_response)

        repo = SQLiteExerciseRepository(populated_test_db)
        assert repo.delete("ex001")
        assert not repo.delete("ex001")
        assert responses.get("ex001", "user-1") is None


class TestResponseRepository:
    """Tests for SQLiteResponseRepository."""

    def test_get_returns_none_when_missing(self, response_repo):
        assert response_repo.get("ex001", "user-1") is None

    def test_save_and_load_roundtrip(self, response_repo):
        response = ExerciseResponse(
            exercise_id="ex001",
            user_id="user-1",
            response_text="<p>Sunrise</p>",
            image_keys=["users/user-1/a.png", "users/user-1/b.png"],
            audio_key="users/user-1/note.wav",
            status=PersistedStatus.COMPLETED,
            created_at=datetime(2024, 1, 10, 8, 0, 0),
            updated_at=datetime(2024, 1, 11, 9, 30, 0),
        )
        response_repo.save(response)
        assert response_repo.get("ex001", "user-1") == response

    def test_save_replaces_existing(self, response_repo, draft_response):
        response_repo.save(draft_response)
        response_repo.save(draft_response.model_copy(update={"response_text": "New"}))
        assert response_repo.get("ex001", "user-1").response_text == "New"

    def test_get_for_user(self, response_repo, draft_response):
        response_repo.save(draft_response)
        response_repo.save(
            ExerciseResponse(exercise_id="ex003", user_id="user-1", video_keys=["v"])
        )
        response_repo.save(ExerciseResponse(exercise_id="ex003", user_id="user-2"))

        result = response_repo.get_for_user("user-1")
        assert set(result) == {"ex001", "ex003"}
        assert result["ex003"].video_keys == ["v"]


class TestFactories:
    def test_factories_return_sqlite_repos(self, test_db_path):
        assert isinstance(get_exercise_repo(test_db_path), SQLiteExerciseRepository)
        assert isinstance(get_response_repo(test_db_path), SQLiteResponseRepository)
