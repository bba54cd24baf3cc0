"""End-to-end tests for the command line interface."""

import json

import pytest

from main import create_parser, load_templates, main
from models import PersistedStatus
from storage import get_exercise_repo, get_response_repo


@pytest.fixture
def exercises_file(tmp_path):
    path = tmp_path / "exercises.json"
    path.write_text(
        json.dumps(
            {
                "exercises": [
                    {
                        "id": "ex001",
                        "title": "Morning Reflection",
                        "category": "mindset",
                        "requireText": "required",
                        "requireImage": "or",
                        "requireAudio": "or",
                        "maxTextLength": 500,
                    },
                    {
                        "id": "ex002",
                        "title": "Vision Board",
                        "category": "goals",
                        "require_image": True,
                    },
                ]
            }
        ),
        encoding="utf-8",
    )
    return path


@pytest.fixture
def cli_db(tmp_path, exercises_file, console):
    db_path = tmp_path / "cli.db"
    assert main(["--db", str(db_path), "import", str(exercises_file)], console) == 0
    console.file.truncate(0)
    console.file.seek(0)
    return db_path


def run_cli(db_path, console, *args) -> int:
    return main(["--db", str(db_path), *args], console)


class TestParser:
    def test_repeatable_uploads(self):
        args = create_parser().parse_args(
            ["respond", "ex001", "--image", "a.png", "--image", "b.png"]
        )
        assert args.image == ["a.png", "b.png"]
        assert args.audio is None

    def test_load_templates_accepts_list(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text(json.dumps([{"id": "x", "title": "X", "requireText": True}]))
        templates = load_templates(path)
        assert templates[0].require_text is True


class TestCommands:
    def test_init(self, tmp_path, console):
        db_path = tmp_path / "fresh.db"
        assert run_cli(db_path, console, "init") == 0
        assert db_path.exists()
        assert "Database ready" in console.file.getvalue()

    def test_import(self, cli_db):
        templates = get_exercise_repo(cli_db).get_all()
        assert {t.id for t in templates} == {"ex001", "ex002"}

    def test_import_reports_invalid_exercise(self, tmp_path, console):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps([{"id": "bad", "title": "Nothing required"}]))
        assert run_cli(tmp_path / "bad.db", console, "import", str(path)) == 1
        assert "Imported 0 of 1" in console.file.getvalue()

    def test_import_missing_file(self, tmp_path, console):
        assert run_cli(tmp_path / "x.db", console, "import", "missing.json") == 1
        assert "Could not read" in console.file.getvalue()

    def test_list(self, cli_db, console):
        assert run_cli(cli_db, console, "list") == 0
        output = console.file.getvalue()
        assert "Morning Reflection" in output
        assert "Vision Board" in output

    def test_list_filtered_by_state(self, cli_db, console):
        assert run_cli(cli_db, console, "list", "--state", "completed") == 0
        assert "No exercises found." in console.file.getvalue()

    def test_show_unknown_exercise(self, cli_db, console):
        assert run_cli(cli_db, console, "show", "nope") == 1
        assert "not found" in console.file.getvalue()

    def test_respond_then_complete(self, cli_db, console):
        assert run_cli(cli_db, console, "respond", "ex001", "-u", "u1", "-t", "Hi") == 0
        assert "still needed: Image OR Audio" in console.file.getvalue()

        assert run_cli(cli_db, console, "complete", "ex001", "-u", "u1") == 1
        assert "cannot be completed yet" in console.file.getvalue()

        assert (
            run_cli(cli_db, console, "respond", "ex001", "-u", "u1", "--audio", "a.wav")
            == 0
        )
        assert run_cli(cli_db, console, "complete", "ex001", "-u", "u1") == 0

        stored = get_response_repo(cli_db).get("ex001", "u1")
        assert stored.status == PersistedStatus.COMPLETED
        assert stored.response_text == "Hi"

    def test_show_includes_character_count(self, cli_db, console):
        run_cli(cli_db, console, "respond", "ex001", "-u", "u1", "-t", "Quiet morning")
        console.file.truncate(0)
        console.file.seek(0)

        assert run_cli(cli_db, console, "show", "ex001", "-u", "u1") == 0
        assert "13/500 characters" in console.file.getvalue()

    def test_completed_response_is_read_only_until_reopened(self, cli_db, console):
        run_cli(cli_db, console, "respond", "ex002", "-u", "u1", "--image", "g.png")
        run_cli(cli_db, console, "complete", "ex002", "-u", "u1")

        assert run_cli(cli_db, console, "respond", "ex002", "-u", "u1", "-t", "x") == 1
        assert "Reopen it before editing" in console.file.getvalue()

        assert run_cli(cli_db, console, "reopen", "ex002", "-u", "u1") == 0
        assert run_cli(cli_db, console, "respond", "ex002", "-u", "u1", "-t", "x") == 0
        stored = get_response_repo(cli_db).get("ex002", "u1")
        assert stored.status == PersistedStatus.DRAFT

    def test_reopen_without_response(self, cli_db, console):
        assert run_cli(cli_db, console, "reopen", "ex001", "-u", "u1") == 1

    def test_summary(self, cli_db, console):
        run_cli(cli_db, console, "respond", "ex002", "-u", "u1", "--image", "g.png")
        run_cli(cli_db, console, "complete", "ex002", "-u", "u1")
        console.file.truncate(0)
        console.file.seek(0)

        assert run_cli(cli_db, console, "summary", "-u", "u1") == 0
        assert "1 of 2 exercises completed" in console.file.getvalue()
