import argparse
import json
import sys
from pathlib import Path

from loguru import logger
from pydantic import ValidationError
from rich.console import Console

from config import Settings, get_settings
from models import ExerciseResponse, ExerciseTemplate, LifecycleState
from progress import build_entries, calculate_progress, filter_by_state, summarize_progress
from responses import CompletionBlockedError, complete_response, reopen_response, save_draft
from storage import get_exercise_repo, get_response_repo, init_schema
from ui import PlaybookUI


def configure_logging(settings: Settings) -> None:
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser with subcommands."""
    parser = argparse.ArgumentParser(description="Exercise progress tracker")
    parser.add_argument(
        "--db",
        type=str,
        default=None,
        help="SQLite database path (default: PLAYBOOK_DB_PATH or data/playbook.db)",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("init", help="Create the database schema")

    import_parser = subparsers.add_parser(
        "import", help="Import exercise templates from a JSON file"
    )
    import_parser.add_argument("file", type=str, help="JSON list of exercises")

    list_parser = subparsers.add_parser("list", help="List exercises with progress")
    list_parser.add_argument("--user", "-u", type=str, default=None, help="User ID")
    list_parser.add_argument(
        "--state",
        "-s",
        choices=[state.value for state in LifecycleState],
        default=None,
        help="Only show exercises in this state",
    )

    show_parser = subparsers.add_parser("show", help="Show progress for one exercise")
    show_parser.add_argument("exercise_id", type=str)
    show_parser.add_argument("--user", "-u", type=str, default=None, help="User ID")

    summary_parser = subparsers.add_parser("summary", help="Overall progress")
    summary_parser.add_argument("--user", "-u", type=str, default=None, help="User ID")

    respond_parser = subparsers.add_parser(
        "respond", help="Save a draft response with uploaded content"
    )
    respond_parser.add_argument("exercise_id", type=str)
    respond_parser.add_argument("--user", "-u", type=str, default=None, help="User ID")
    respond_parser.add_argument("--text", "-t", type=str, default=None)
    respond_parser.add_argument("--image", action="append", default=[], help="Image key")
    respond_parser.add_argument("--audio", type=str, default=None, help="Audio key")
    respond_parser.add_argument("--video", action="append", default=[], help="Video key")
    respond_parser.add_argument(
        "--document", action="append", default=[], help="Document key"
    )

    for name, help_text in (
        ("complete", "Mark a response as completed"),
        ("reopen", "Reopen a completed response for editing"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("exercise_id", type=str)
        sub.add_argument("--user", "-u", type=str, default=None, help="User ID")

    return parser


def load_templates(path: Path) -> list[ExerciseTemplate]:
    """Read exercise templates from a JSON file."""
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("exercises", [])
    return [ExerciseTemplate.model_validate(item) for item in data]


def run_import(args, db_path: Path, ui: PlaybookUI) -> int:
    try:
        templates = load_templates(Path(args.file))
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        ui.show_error(f"Could not read {args.file}: {e}")
        return 1

    repo = get_exercise_repo(db_path)
    imported = 0
    for template in templates:
        try:
            repo.save(template)
            imported += 1
        except ValueError as e:
            ui.show_error(str(e))

    ui.show_success(f"Imported {imported} of {len(templates)} exercises.")
    return 0 if imported == len(templates) else 1


def run_list(args, db_path: Path, user_id: str, ui: PlaybookUI) -> int:
    templates = get_exercise_repo(db_path).get_all()
    responses = get_response_repo(db_path).get_for_user(user_id)
    entries = build_entries(templates, responses)
    if args.state:
        entries = filter_by_state(entries, LifecycleState(args.state))
    ui.show_exercise_list(entries)
    return 0


def run_show(args, db_path: Path, user_id: str, ui: PlaybookUI) -> int:
    template = get_exercise_repo(db_path).get_by_id(args.exercise_id)
    if template is None:
        ui.show_error(f"Exercise {args.exercise_id} not found.")
        return 1

    response = get_response_repo(db_path).get(template.id, user_id)
    ui.show_exercise_progress(
        template,
        calculate_progress(template, response),
        response_text=response.response_text if response else "",
    )
    return 0


def run_summary(db_path: Path, user_id: str, ui: PlaybookUI) -> int:
    templates = get_exercise_repo(db_path).get_all()
    responses = get_response_repo(db_path).get_for_user(user_id)
    ui.show_summary(summarize_progress(build_entries(templates, responses)))
    return 0


def run_respond(args, db_path: Path, user_id: str, ui: PlaybookUI) -> int:
    template = get_exercise_repo(db_path).get_by_id(args.exercise_id)
    if template is None:
        ui.show_error(f"Exercise {args.exercise_id} not found.")
        return 1

    repo = get_response_repo(db_path)
    response = repo.get(template.id, user_id) or ExerciseResponse(
        exercise_id=template.id, user_id=user_id
    )
    if not calculate_progress(template, response).can_edit:
        ui.show_error("Response is completed. Reopen it before editing.")
        return 1

    update: dict = {
        "image_keys": response.image_keys + args.image,
        "video_keys": response.video_keys + args.video,
        "document_keys": response.document_keys + args.document,
    }
    if args.text is not None:
        update["response_text"] = args.text
    if args.audio is not None:
        update["audio_key"] = args.audio

    saved = save_draft(repo, response.model_copy(update=update))
    ui.show_exercise_progress(
        template,
        calculate_progress(template, saved),
        response_text=saved.response_text,
    )
    return 0


def run_complete(args, db_path: Path, user_id: str, ui: PlaybookUI) -> int:
    template = get_exercise_repo(db_path).get_by_id(args.exercise_id)
    if template is None:
        ui.show_error(f"Exercise {args.exercise_id} not found.")
        return 1

    repo = get_response_repo(db_path)
    response = repo.get(template.id, user_id) or ExerciseResponse(
        exercise_id=template.id, user_id=user_id
    )
    try:
        saved = complete_response(repo, template, response)
    except CompletionBlockedError as e:
        ui.show_error(str(e))
        return 1

    ui.show_exercise_progress(template, calculate_progress(template, saved))
    return 0


def run_reopen(args, db_path: Path, user_id: str, ui: PlaybookUI) -> int:
    repo = get_response_repo(db_path)
    response = repo.get(args.exercise_id, user_id)
    if response is None:
        ui.show_error(f"No response to {args.exercise_id} for {user_id}.")
        return 1

    reopen_response(repo, response)
    ui.show_success(f"Reopened {args.exercise_id}.")
    return 0


def main(argv: list[str] | None = None, console: Console | None = None) -> int:
    """Main entry point with CLI routing."""
    parser = create_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(settings)

    db_path = Path(args.db) if args.db else settings.db_path
    user_id = getattr(args, "user", None) or settings.default_user_id
    ui = PlaybookUI(console, bar_width=settings.progress_bar_width)

    if args.command is None:
        parser.print_help()
        return 0

    init_schema(db_path)

    if args.command == "init":
        ui.show_success(f"Database ready at {db_path}")
        return 0
    if args.command == "import":
        return run_import(args, db_path, ui)
    if args.command == "list":
        return run_list(args, db_path, user_id, ui)
    if args.command == "show":
        return run_show(args, db_path, user_id, ui)
    if args.command == "summary":
        return run_summary(db_path, user_id, ui)
    if args.command == "respond":
        return run_respond(args, db_path, user_id, ui)
    if args.command == "complete":
        return run_complete(args, db_path, user_id, ui)
    if args.command == "reopen":
        return run_reopen(args, db_path, user_id, ui)

    parser.print_help()
    return 1


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
