"""Requirement normalization.

Exercise templates store a per-modality policy either as a legacy boolean
or as one of the enum strings "not_required" / "required" / "or". Older
templates may also tag OR members through an ``[OR_TYPES:image,audio]``
marker inside their instructions. Everything is folded into a canonical
RequirementSet here, so nothing downstream branches on the raw shape.
"""

import re
from collections.abc import Mapping
from typing import Any

from loguru import logger

from models import (
    MODALITY_ORDER,
    ExerciseTemplate,
    ModalityKind,
    RawRequirement,
    RequirementPolicy,
    RequirementSet,
)

OR_MARKER_PATTERN = re.compile(r"\[OR_TYPES:([^\]]+)\]")

# Boolean flags that were stored or exported as strings
LEGACY_STRINGS = {
    "true": RequirementPolicy.REQUIRED,
    "1": RequirementPolicy.REQUIRED,
    "false": RequirementPolicy.NOT_REQUIRED,
    "0": RequirementPolicy.NOT_REQUIRED,
}


def _field_names(kind: ModalityKind) -> tuple[str, str]:
    """Snake and camel case names of the requirement field for a modality."""
    return f"require_{kind.value}", f"require{kind.value.capitalize()}"


def coerce_policy(value: RawRequirement) -> RequirementPolicy:
    """Convert a single raw requirement value to a policy.

    Unknown values fall back to NOT_REQUIRED.
    """
    if value is True:
        return RequirementPolicy.REQUIRED
    if value is False or value is None:
        return RequirementPolicy.NOT_REQUIRED
    if isinstance(value, RequirementPolicy):
        return value
    if isinstance(value, str):
        text = value.strip().lower()
        if text in LEGACY_STRINGS:
            return LEGACY_STRINGS[text]
        try:
            return RequirementPolicy(text)
        except ValueError:
            pass

    logger.debug(f"Unrecognized requirement value {value!r}, treating as not_required")
    return RequirementPolicy.NOT_REQUIRED


def parse_or_marker(instructions: str | None) -> list[ModalityKind]:
    """Modalities listed in a legacy ``[OR_TYPES:...]`` instructions marker."""
    if not instructions:
        return []

    match = OR_MARKER_PATTERN.search(instructions)
    if not match:
        return []

    kinds: set[ModalityKind] = set()
    for name in match.group(1).split(","):
        try:
            kinds.add(ModalityKind(name.strip().lower()))
        except ValueError:
            continue
    return [kind for kind in MODALITY_ORDER if kind in kinds]


def _raw_policies(
    raw: Mapping[str, Any] | ExerciseTemplate | None,
) -> dict[ModalityKind, RequirementPolicy]:
    if raw is None:
        raw = {}
    elif isinstance(raw, ExerciseTemplate):
        raw = raw.raw_requirements()

    policies: dict[ModalityKind, RequirementPolicy] = {}
    for kind in MODALITY_ORDER:
        snake, camel = _field_names(kind)
        value = raw.get(snake, raw.get(camel))
        policies[kind] = coerce_policy(value)

    instructions = raw.get("instructions")
    if isinstance(instructions, str):
        for kind in parse_or_marker(instructions):
            policies[kind] = RequirementPolicy.OR

    return policies


def normalize(raw: Mapping[str, Any] | ExerciseTemplate | None) -> RequirementSet:
    """Build a canonical RequirementSet from raw template fields.

    Accepts legacy booleans and enum strings per modality, in either
    ``require_text`` or ``requireText`` form. Missing fields mean
    NOT_REQUIRED. A lone OR member comes back as REQUIRED. Never raises.
    """
    return RequirementSet(policies=_raw_policies(raw))


def normalize_for_authoring(
    raw: Mapping[str, Any] | ExerciseTemplate | None,
) -> dict[ModalityKind, RequirementPolicy]:
    """Policies as they should be stored when an exercise is saved."""
    return dict(normalize(raw).policies)


def validate_requirements(
    policies: Mapping[ModalityKind, RequirementPolicy],
) -> tuple[bool, list[str]]:
    """Check authored policies before they reach the exercise store.

    Returns:
        Tuple of (is_valid, list of error messages).
    """
    errors: list[str] = []

    values = [
        policies.get(kind, RequirementPolicy.NOT_REQUIRED) for kind in MODALITY_ORDER
    ]
    if all(value == RequirementPolicy.NOT_REQUIRED for value in values):
        errors.append("At least one response type must be required or part of an OR group")

    or_count = sum(1 for value in values if value == RequirementPolicy.OR)
    if or_count == 1:
        errors.append("An OR group needs at least two response types")

    return len(errors) == 0, errors
