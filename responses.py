"""Saving responses.

A draft can always be saved. Marking a response complete requires
calculate_progress() to allow it for the committed content; pending
uploads do not count.
"""

from datetime import datetime

from loguru import logger

from models import ExerciseResponse, ExerciseTemplate, PersistedStatus, ProgressResult
from progress import calculate_progress
from storage.base import ResponseRepository


class CompletionBlockedError(ValueError):
    """Raised when completing a response whose requirements are not met."""

    def __init__(self, exercise_id: str, missing_labels: list[str]):
        self.exercise_id = exercise_id
        self.missing_labels = missing_labels
        missing = ", ".join(missing_labels) if missing_labels else "uploads to finish"
        super().__init__(f"Exercise {exercise_id} cannot be completed yet: missing {missing}")


def _touch(response: ExerciseResponse, status: PersistedStatus) -> ExerciseResponse:
    now = datetime.now()
    return response.model_copy(
        update={
            "status": status,
            "created_at": response.created_at or now,
            "updated_at": now,
        }
    )


def save_draft(repo: ResponseRepository, response: ExerciseResponse) -> ExerciseResponse:
    """Persist a response as a draft regardless of its progress."""
    saved = _touch(response, PersistedStatus.DRAFT)
    repo.save(saved)
    logger.info(f"Saved draft for {saved.exercise_id} ({saved.user_id})")
    return saved


def completion_check(
    template: ExerciseTemplate, response: ExerciseResponse
) -> ProgressResult:
    """Progress of a response as if it were still a draft."""
    return calculate_progress(template, response, PersistedStatus.DRAFT)


def complete_response(
    repo: ResponseRepository,
    template: ExerciseTemplate,
    response: ExerciseResponse,
) -> ExerciseResponse:
    """Persist a response as completed.

    Raises:
        CompletionBlockedError: If the committed content does not meet the
            exercise's requirements.
    """
    progress = completion_check(template, response)
    if not progress.can_complete:
        raise CompletionBlockedError(template.id, progress.missing_labels)

    saved = _touch(response, PersistedStatus.COMPLETED)
    repo.save(saved)
    logger.info(f"Completed {saved.exercise_id} ({saved.user_id})")
    return saved


def reopen_response(
    repo: ResponseRepository, response: ExerciseResponse
) -> ExerciseResponse:
    """Move a completed response back to draft so it can be edited.

    A response that is already a draft is returned unchanged.
    """
    if response.status == PersistedStatus.DRAFT:
        logger.debug(f"{response.exercise_id} ({response.user_id}) is already a draft")
        return response
    return save_draft(repo, response)
