"""Progress aggregation.

Reduces per-modality satisfaction into the ProgressResult every view
renders. Required modalities count one requirement each; the OR group,
when present, counts as one requirement no matter how many of its
members are satisfied.

Two notions of "done" are kept apart:
- can_complete is a permission: all committed content needed to mark
  the exercise complete is there.
- state == COMPLETED is a fact: the response was last saved as completed.
"""

from models import (
    LifecycleState,
    PerModalitySatisfaction,
    PersistedStatus,
    ProgressResult,
    RequirementSet,
    Satisfaction,
)


def round_percentage(completed: int, total: int) -> int:
    """Percentage of completed over total, rounded half up. 0 when total is 0."""
    if total <= 0:
        return 0
    completed = max(0, min(completed, total))
    return (200 * completed + total) // (2 * total)


def _completed_result(requirements: RequirementSet) -> ProgressResult:
    """Read-only result for a response saved as completed."""
    total = len(requirements.required) + (1 if requirements.or_group else 0)
    return ProgressResult(
        state=LifecycleState.COMPLETED,
        total_requirements=total,
        completed_requirements=total,
        completed_labels=requirements.labels,
        missing_labels=[],
        percentage_complete=100,
        can_complete=True,
        has_all_requirements=True,
    )


def aggregate(
    requirements: RequirementSet,
    satisfaction: PerModalitySatisfaction,
    persisted_status: PersistedStatus | None = None,
) -> ProgressResult:
    """Compute progress for one exercise.

    Args:
        requirements: Normalized requirements of the exercise.
        satisfaction: Result of evaluator.evaluate() for the current snapshot.
        persisted_status: Status of the last saved response, if any.

    Returns:
        A ProgressResult. Never raises; degenerate input yields an
        UNSTARTED result that cannot be completed.
    """
    if persisted_status == PersistedStatus.COMPLETED:
        return _completed_result(requirements)

    required = requirements.required
    or_group = requirements.or_group

    completed_labels: list[str] = []
    missing_labels: list[str] = []
    completed_count = 0
    committed_count = 0

    for kind in required:
        status = satisfaction.get(kind)
        if status.is_satisfied:
            completed_count += 1
            completed_labels.append(kind.label)
        else:
            missing_labels.append(kind.label)
        if status == Satisfaction.COMMITTED:
            committed_count += 1

    or_satisfied = False
    or_committed = False
    if or_group:
        statuses = [satisfaction.get(kind) for kind in or_group]
        or_satisfied = any(status.is_satisfied for status in statuses)
        or_committed = any(status == Satisfaction.COMMITTED for status in statuses)
        if or_satisfied:
            completed_count += 1
            completed_labels.append(requirements.or_label)
        else:
            missing_labels.append(requirements.or_label)

    total = len(required) + (1 if or_group else 0)
    can_complete = (
        total > 0
        and committed_count == len(required)
        and (not or_group or or_committed)
    )

    if completed_count == 0:
        state = LifecycleState.UNSTARTED
    else:
        state = LifecycleState.INCOMPLETE

    return ProgressResult(
        state=state,
        total_requirements=total,
        completed_requirements=completed_count,
        completed_labels=completed_labels,
        missing_labels=missing_labels,
        percentage_complete=round_percentage(completed_count, total),
        can_complete=can_complete,
        has_all_requirements=can_complete,
    )
