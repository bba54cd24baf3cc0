from datetime import datetime
from enum import Enum
from typing import Any, Iterator

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class ModalityKind(str, Enum):
    TEXT = "text"
    IMAGE = "image"
    AUDIO = "audio"
    VIDEO = "video"
    DOCUMENT = "document"

    @property
    def label(self) -> str:
        """Human-readable name shown in requirement lists."""
        return self.value.capitalize()


# Deterministic output order for every list the engine produces.
MODALITY_ORDER: tuple[ModalityKind, ...] = (
    ModalityKind.TEXT,
    ModalityKind.IMAGE,
    ModalityKind.AUDIO,
    ModalityKind.VIDEO,
    ModalityKind.DOCUMENT,
)


class RequirementPolicy(str, Enum):
    NOT_REQUIRED = "not_required"
    REQUIRED = "required"
    OR = "or"


class PersistedStatus(str, Enum):
    DRAFT = "draft"
    COMPLETED = "completed"


class LifecycleState(str, Enum):
    UNSTARTED = "unstarted"
    INCOMPLETE = "incomplete"
    COMPLETED = "completed"


class Satisfaction(str, Enum):
    COMMITTED = "committed"
    PENDING = "pending"
    UNSATISFIED = "unsatisfied"

    @property
    def is_satisfied(self) -> bool:
        """Committed or pending content counts toward visual progress."""
        return self is not Satisfaction.UNSATISFIED


class ColorToken(str, Enum):
    NEUTRAL = "neutral"
    WARNING = "warning"
    SUCCESS = "success"


# ============================================================================
# Requirement Models
# ============================================================================


class RequirementSet(BaseModel):
    """Normalized per-modality policies for one exercise.

    Usually built by normalizer.normalize(). The OR group always has zero
    or at least two members: a lone OR member is made required on
    construction.
    """

    model_config = ConfigDict(frozen=True)

    policies: dict[ModalityKind, RequirementPolicy] = Field(default_factory=dict)

    @field_validator("policies")
    @classmethod
    def collapse_single_or(
        cls, policies: dict[ModalityKind, RequirementPolicy]
    ) -> dict[ModalityKind, RequirementPolicy]:
        """A one-member OR group is not a choice: make that member required."""
        or_members = [
            kind for kind in MODALITY_ORDER if policies.get(kind) == RequirementPolicy.OR
        ]
        if len(or_members) == 1:
            logger.debug(
                f"OR group has a single member ({or_members[0].value}), treating it as required"
            )
            policies = dict(policies)
            policies[or_members[0]] = RequirementPolicy.REQUIRED
        return policies

    def policy(self, kind: ModalityKind) -> RequirementPolicy:
        return self.policies.get(kind, RequirementPolicy.NOT_REQUIRED)

    @property
    def required(self) -> list[ModalityKind]:
        """Modalities that must each be satisfied, in canonical order."""
        return [
            kind
            for kind in MODALITY_ORDER
            if self.policy(kind) == RequirementPolicy.REQUIRED
        ]

    @property
    def or_group(self) -> list[ModalityKind]:
        """Modalities where any single one satisfies the group."""
        return [
            kind for kind in MODALITY_ORDER if self.policy(kind) == RequirementPolicy.OR
        ]

    @property
    def or_label(self) -> str:
        """Combined label for the OR group, e.g. 'Image OR Audio'."""
        return " OR ".join(kind.label for kind in self.or_group)

    @property
    def labels(self) -> list[str]:
        """Labels of every requirement, required modalities first."""
        labels = [kind.label for kind in self.required]
        if self.or_group:
            labels.append(self.or_label)
        return labels


# ============================================================================
# Response Models
# ============================================================================


class ModalityEvidence(BaseModel):
    """Whether a modality has content, and whether that content is only queued."""

    model_config = ConfigDict(frozen=True)

    present: bool = False
    pending: bool = False

    @property
    def committed(self) -> bool:
        return self.present and not self.pending


class ResponseSnapshot(BaseModel):
    """Per-modality presence facts rebuilt from form state on every render."""

    model_config = ConfigDict(frozen=True)

    text: ModalityEvidence = Field(default_factory=ModalityEvidence)
    image: ModalityEvidence = Field(default_factory=ModalityEvidence)
    audio: ModalityEvidence = Field(default_factory=ModalityEvidence)
    video: ModalityEvidence = Field(default_factory=ModalityEvidence)
    document: ModalityEvidence = Field(default_factory=ModalityEvidence)

    def evidence(self, kind: ModalityKind) -> ModalityEvidence:
        return getattr(self, kind.value)


class ResponseDraft(BaseModel):
    """Current state of a response form.

    Keys are storage keys of uploaded (committed) files; queued entries are
    names of files selected or recorded locally but not uploaded yet.
    """

    response_text: str = ""
    image_keys: list[str] = Field(default_factory=list)
    queued_images: list[str] = Field(default_factory=list)
    audio_key: str | None = None
    queued_audio: str | None = None
    video_keys: list[str] = Field(default_factory=list)
    queued_videos: list[str] = Field(default_factory=list)
    document_keys: list[str] = Field(default_factory=list)
    queued_documents: list[str] = Field(default_factory=list)


class PerModalitySatisfaction(BaseModel):
    """Evaluation result for every modality an exercise asks for."""

    model_config = ConfigDict(frozen=True)

    entries: dict[ModalityKind, Satisfaction] = Field(default_factory=dict)

    def get(self, kind: ModalityKind) -> Satisfaction:
        return self.entries.get(kind, Satisfaction.UNSATISFIED)

    def items(self) -> Iterator[tuple[ModalityKind, Satisfaction]]:
        """Yield (modality, satisfaction) pairs in canonical order."""
        for kind in MODALITY_ORDER:
            if kind in self.entries:
                yield kind, self.entries[kind]


# ============================================================================
# Progress Models
# ============================================================================


class ProgressResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    state: LifecycleState
    total_requirements: int = 0
    completed_requirements: int = 0
    completed_labels: list[str] = Field(default_factory=list)
    missing_labels: list[str] = Field(default_factory=list)
    percentage_complete: int = Field(default=0, ge=0, le=100)
    can_complete: bool = False
    has_all_requirements: bool = False

    @property
    def can_edit(self) -> bool:
        """Completed responses are read-only until explicitly reopened."""
        return self.state != LifecycleState.COMPLETED


class Presentation(BaseModel):
    model_config = ConfigDict(frozen=True)

    icon: str
    label: str
    color_token: ColorToken


# ============================================================================
# Stored Records
# ============================================================================


RawRequirement = bool | str | None


class ExerciseTemplate(BaseModel):
    """An authored exercise as kept by the exercise store."""

    # Accepts both require_text and requireText style keys on input
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    title: str
    category: str = "general"
    question: str = ""
    instructions: str | None = None
    require_text: RawRequirement = None
    require_image: RawRequirement = None
    require_audio: RawRequirement = None
    require_video: RawRequirement = None
    require_document: RawRequirement = None
    max_text_length: int | None = None

    def raw_requirements(self) -> dict[str, Any]:
        """Requirement fields in the shape the normalizer accepts."""
        raw: dict[str, Any] = {
            f"require_{kind.value}": getattr(self, f"require_{kind.value}")
            for kind in MODALITY_ORDER
        }
        raw["instructions"] = self.instructions
        return raw

    @property
    def requirements(self) -> RequirementSet:
        from normalizer import normalize

        return normalize(self.raw_requirements())

    def validate_requirements(self) -> tuple[bool, list[str]]:
        """Authoring-time validation.

        Returns:
            Tuple of (is_valid, list of error messages).
        """
        from normalizer import normalize_for_authoring, validate_requirements

        errors: list[str] = []
        if self.max_text_length is not None and self.max_text_length <= 0:
            errors.append("max_text_length must be a positive number")

        _, requirement_errors = validate_requirements(
            normalize_for_authoring(self.raw_requirements())
        )
        errors.extend(requirement_errors)
        return len(errors) == 0, errors


class ExerciseResponse(BaseModel):
    """Last persisted response of one user to one exercise."""

    exercise_id: str
    user_id: str
    response_text: str = ""
    image_keys: list[str] = Field(default_factory=list)
    audio_key: str | None = None
    video_keys: list[str] = Field(default_factory=list)
    document_keys: list[str] = Field(default_factory=list)
    status: PersistedStatus = PersistedStatus.DRAFT
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_draft(self) -> ResponseDraft:
        """Form state for this response with nothing queued locally."""
        return ResponseDraft(
            response_text=self.response_text,
            image_keys=list(self.image_keys),
            audio_key=self.audio_key,
            video_keys=list(self.video_keys),
            document_keys=list(self.document_keys),
        )
