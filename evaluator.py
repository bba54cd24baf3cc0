"""Response evaluation.

Turns form state into a ResponseSnapshot and checks the snapshot against
a RequirementSet. Locally queued files make a modality *pending*: they
show up in progress but do not allow the exercise to be completed until
the upload has produced a committed key.
"""

from enum import Enum

from config import Settings, get_settings
from models import (
    MODALITY_ORDER,
    ExerciseResponse,
    ModalityEvidence,
    PerModalitySatisfaction,
    RequirementPolicy,
    RequirementSet,
    ResponseDraft,
    ResponseSnapshot,
    Satisfaction,
)


class TextLimitStatus(str, Enum):
    OK = "ok"
    NEAR = "near"
    CRITICAL = "critical"
    OVER = "over"


def _has_value(value: str | None) -> bool:
    return bool(value and value.strip())


def _count(values: list[str]) -> int:
    return sum(1 for value in values if _has_value(value))


def _file_evidence(committed: int, queued: int) -> ModalityEvidence:
    """Evidence for a modality backed by uploaded keys and queued files."""
    if committed > 0:
        return ModalityEvidence(present=True, pending=False)
    if queued > 0:
        return ModalityEvidence(present=True, pending=True)
    return ModalityEvidence()


def build_snapshot(draft: ResponseDraft) -> ResponseSnapshot:
    """Build presence facts from the current form state."""
    return ResponseSnapshot(
        text=ModalityEvidence(present=_has_value(draft.response_text)),
        image=_file_evidence(_count(draft.image_keys), _count(draft.queued_images)),
        audio=_file_evidence(
            int(_has_value(draft.audio_key)), int(_has_value(draft.queued_audio))
        ),
        video=_file_evidence(_count(draft.video_keys), _count(draft.queued_videos)),
        document=_file_evidence(
            _count(draft.document_keys), _count(draft.queued_documents)
        ),
    )


def snapshot_from_response(response: ExerciseResponse) -> ResponseSnapshot:
    """Snapshot of a persisted response; everything in it is committed."""
    return build_snapshot(response.to_draft())


def evaluate(
    requirements: RequirementSet, snapshot: ResponseSnapshot
) -> PerModalitySatisfaction:
    """Classify every requested modality as committed, pending or unsatisfied."""
    entries = {}
    for kind in MODALITY_ORDER:
        if requirements.policy(kind) == RequirementPolicy.NOT_REQUIRED:
            continue

        evidence = snapshot.evidence(kind)
        if evidence.committed:
            entries[kind] = Satisfaction.COMMITTED
        elif evidence.present:
            entries[kind] = Satisfaction.PENDING
        else:
            entries[kind] = Satisfaction.UNSATISFIED

    return PerModalitySatisfaction(entries=entries)


def text_limit_status(
    text: str,
    max_length: int | None,
    settings: Settings | None = None,
) -> TextLimitStatus:
    """Advisory character-limit status for a text response.

    Used for warnings while typing. It has no effect on whether the text
    requirement is satisfied.
    """
    if not max_length or max_length <= 0:
        return TextLimitStatus.OK

    settings = settings or get_settings()
    length = len(text.strip())

    if length > max_length:
        return TextLimitStatus.OVER
    if length > max_length * settings.text_critical_limit_ratio:
        return TextLimitStatus.CRITICAL
    if length > max_length * settings.text_near_limit_ratio:
        return TextLimitStatus.NEAR
    return TextLimitStatus.OK
