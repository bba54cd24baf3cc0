"""Playbook UI Module - Terminal rendering of exercise progress."""

from ui.app import PlaybookUI
from ui.components import (
    StatusBadge,
    CharacterCount,
    ExerciseProgressPanel,
    ExerciseListTable,
    ProgressSummaryPanel,
)
from ui.styles import (
    PLAYBOOK_INDIGO,
    WARNING_AMBER,
    SUCCESS_GREEN,
    ERROR_RED,
    INFO_BLUE,
    MUTED_GRAY,
    DEFAULT_THEME,
    create_progress_bar,
)

__all__ = [
    "PlaybookUI",
    "StatusBadge",
    "CharacterCount",
    "ExerciseProgressPanel",
    "ExerciseListTable",
    "ProgressSummaryPanel",
    "PLAYBOOK_INDIGO",
    "WARNING_AMBER",
    "SUCCESS_GREEN",
    "ERROR_RED",
    "INFO_BLUE",
    "MUTED_GRAY",
    "DEFAULT_THEME",
    "create_progress_bar",
]
