"""Progress pipeline and list views.

calculate_progress() is the one entry point every view goes through, so
the listing pages, the response form and the dashboard widgets all get
the same answer for the same exercise.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel, Field

from aggregator import aggregate, round_percentage
from evaluator import build_snapshot, evaluate, snapshot_from_response
from models import (
    ExerciseResponse,
    ExerciseTemplate,
    LifecycleState,
    PersistedStatus,
    ProgressResult,
    RequirementSet,
    ResponseDraft,
    ResponseSnapshot,
)
from normalizer import normalize

ResponseInput = ResponseDraft | ResponseSnapshot | ExerciseResponse | None


def _as_snapshot(response: ResponseInput) -> ResponseSnapshot:
    if response is None:
        return ResponseSnapshot()
    if isinstance(response, ResponseSnapshot):
        return response
    if isinstance(response, ExerciseResponse):
        return snapshot_from_response(response)
    return build_snapshot(response)


def calculate_progress(
    requirements: RequirementSet | ExerciseTemplate | Mapping[str, Any] | None,
    response: ResponseInput = None,
    persisted_status: PersistedStatus | None = None,
) -> ProgressResult:
    """Normalize, evaluate and aggregate in one call.

    Args:
        requirements: A normalized RequirementSet, an ExerciseTemplate, or
            raw requirement fields.
        response: Live form state, a prebuilt snapshot, or a persisted
            response. None means nothing has been entered yet.
        persisted_status: Status of the last save. Defaults to the status
            of ``response`` when a persisted response is passed.
    """
    if not isinstance(requirements, RequirementSet):
        requirements = normalize(requirements)

    if persisted_status is None and isinstance(response, ExerciseResponse):
        persisted_status = response.status

    satisfaction = evaluate(requirements, _as_snapshot(response))
    return aggregate(requirements, satisfaction, persisted_status)


class ExerciseProgressEntry(BaseModel):
    """An exercise paired with its progress for one user."""

    template: ExerciseTemplate
    progress: ProgressResult

    @property
    def category(self) -> str:
        return self.template.category


class CategoryProgress(BaseModel):
    category: str
    total: int = 0
    started: int = 0
    completed: int = 0

    @property
    def percentage(self) -> int:
        return round_percentage(self.completed, self.total)


class ProgressSummary(BaseModel):
    total_exercises: int = 0
    completed_exercises: int = 0
    started_exercises: int = 0
    categories: list[CategoryProgress] = Field(default_factory=list)

    @property
    def remaining_exercises(self) -> int:
        return self.total_exercises - self.completed_exercises

    @property
    def percentage(self) -> int:
        return round_percentage(self.completed_exercises, self.total_exercises)


def build_entries(
    templates: Iterable[ExerciseTemplate],
    responses: Mapping[str, ExerciseResponse],
) -> list[ExerciseProgressEntry]:
    """Compute progress for each template from responses keyed by exercise id."""
    return [
        ExerciseProgressEntry(
            template=template,
            progress=calculate_progress(template, responses.get(template.id)),
        )
        for template in templates
    ]


def filter_by_state(
    entries: Iterable[ExerciseProgressEntry], state: LifecycleState
) -> list[ExerciseProgressEntry]:
    return [entry for entry in entries if entry.progress.state == state]


def summarize_progress(entries: Iterable[ExerciseProgressEntry]) -> ProgressSummary:
    """Overall and per-category completion counts.

    Categories appear in order of first occurrence.
    """
    summary = ProgressSummary()
    categories: dict[str, CategoryProgress] = {}

    for entry in entries:
        bucket = categories.setdefault(
            entry.category, CategoryProgress(category=entry.category)
        )
        bucket.total += 1
        summary.total_exercises += 1

        if entry.progress.state == LifecycleState.COMPLETED:
            bucket.completed += 1
            summary.completed_exercises += 1
        elif entry.progress.state == LifecycleState.INCOMPLETE:
            bucket.started += 1
            summary.started_exercises += 1

    summary.categories = list(categories.values())
    return summary
