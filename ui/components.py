from rich.text import Text
from rich.panel import Panel
from rich.table import Table
from rich.style import Style
from rich.align import Align
from rich.console import Group
from rich import box
from typing import List

from evaluator import TextLimitStatus, text_limit_status
from models import ExerciseTemplate, LifecycleState, ProgressResult
from presentation import present
from progress import ExerciseProgressEntry, ProgressSummary
from ui.styles import (
    PLAYBOOK_INDIGO,
    SUCCESS_GREEN,
    ERROR_RED,
    WARNING_AMBER,
    MUTED_GRAY,
    TEXT_WHITE,
    create_progress_bar,
    get_text_limit_style,
    get_token_style,
)


class StatusBadge:
    """Icon and label for a lifecycle state."""

    def __init__(self, state: LifecycleState):
        self.state = state

    def render(self) -> Text:
        presentation = present(self.state)
        return Text(
            f"{presentation.icon} {presentation.label}",
            style=get_token_style(presentation.color_token),
        )

    def __rich__(self) -> Text:
        return self.render()


class CharacterCount:
    """Character counter for a text response with a length limit."""

    def __init__(self, text: str, max_length: int):
        self.text = text
        self.max_length = max_length

    @property
    def status(self) -> TextLimitStatus:
        return text_limit_status(self.text, self.max_length)

    def render(self) -> Text:
        status = self.status
        label = f"{len(self.text.strip())}/{self.max_length} characters"
        if status == TextLimitStatus.OVER:
            label += " (over limit)"
        return Text(label, style=get_text_limit_style(status))

    def __rich__(self) -> Text:
        return self.render()


class ExerciseProgressPanel:
    """Progress of a single exercise: bar, requirement checklist and actions."""

    def __init__(
        self,
        template: ExerciseTemplate,
        progress: ProgressResult,
        bar_width: int = 30,
        response_text: str | None = None,
    ):
        self.template = template
        self.progress = progress
        self.bar_width = bar_width
        self.response_text = response_text

    def render(self) -> Panel:
        progress = self.progress
        content = Text()

        if self.template.question:
            content.append(self.template.question, Style(color=TEXT_WHITE, bold=True))
            content.append("\n\n")

        content.append_text(
            create_progress_bar(progress.percentage_complete, self.bar_width)
        )
        content.append(
            f"\n{progress.completed_requirements} of "
            f"{progress.total_requirements} requirements met\n\n",
            Style(color=MUTED_GRAY),
        )

        for label in progress.completed_labels:
            content.append("✓ ", Style(color=SUCCESS_GREEN, bold=True))
            content.append(f"{label}\n", Style(color=TEXT_WHITE))
        for label in progress.missing_labels:
            content.append("✗ ", Style(color=ERROR_RED, bold=True))
            content.append(f"{label}\n", Style(color=MUTED_GRAY))

        if self.template.max_text_length and self.response_text is not None:
            content.append("\n")
            content.append_text(
                CharacterCount(self.response_text, self.template.max_text_length).render()
            )
            content.append("\n")

        content.append("\n")
        content.append_text(self._actions())

        return Panel(
            Align.left(content),
            title=self.template.title,
            subtitle=StatusBadge(progress.state).render(),
            border_style=PLAYBOOK_INDIGO,
            box=box.HEAVY,
            padding=(1, 2),
        )

    def _actions(self) -> Text:
        """Which save actions are available for this response."""
        actions = Text()
        if not self.progress.can_edit:
            actions.append("Read-only: reopen to edit", Style(color=MUTED_GRAY))
            return actions

        actions.append("[Save as Draft] ", Style(color=TEXT_WHITE))
        if self.progress.can_complete:
            actions.append("[Complete]", Style(color=SUCCESS_GREEN, bold=True))
        else:
            actions.append("[Complete]", Style(color=MUTED_GRAY, dim=True))
            if self.progress.missing_labels:
                remaining = ", ".join(self.progress.missing_labels)
                actions.append(f"  still needed: {remaining}", Style(color=WARNING_AMBER))
            else:
                actions.append("  waiting for uploads", Style(color=WARNING_AMBER))
        return actions

    def __rich__(self) -> Panel:
        return self.render()


class ExerciseListTable:
    """A styled table of exercises and their progress."""

    def __init__(self, entries: List[ExerciseProgressEntry], bar_width: int = 20):
        self.entries = entries
        self.bar_width = bar_width

    def render(self) -> Panel:
        table = Table(
            show_header=True,
            header_style=Style(color=PLAYBOOK_INDIGO, bold=True),
            border_style=MUTED_GRAY,
            row_styles=[Style(), Style(dim=True)],
            box=box.HEAVY,
        )

        table.add_column("ID", style=Style(color=MUTED_GRAY))
        table.add_column("Exercise", style=Style(color=TEXT_WHITE))
        table.add_column("Category", style=Style(color=MUTED_GRAY))
        table.add_column("Status")
        table.add_column("Progress")

        for entry in self.entries:
            table.add_row(
                entry.template.id,
                entry.template.title,
                entry.category,
                StatusBadge(entry.progress.state).render(),
                create_progress_bar(entry.progress.percentage_complete, self.bar_width),
            )

        return Panel(
            Align.center(table),
            title="Exercises",
            border_style=PLAYBOOK_INDIGO,
            box=box.HEAVY,
            padding=(1, 1),
        )

    def __rich__(self) -> Panel:
        return self.render()


class ProgressSummaryPanel:
    """Overall and per-category completion."""

    def __init__(self, summary: ProgressSummary, bar_width: int = 30):
        self.summary = summary
        self.bar_width = bar_width

    def render(self) -> Panel:
        summary = self.summary
        content = Text()
        content.append("Overall Progress\n", Style(color=PLAYBOOK_INDIGO, bold=True))
        content.append_text(create_progress_bar(summary.percentage, self.bar_width))
        content.append(
            f"\n{summary.completed_exercises} of {summary.total_exercises} exercises"
            f" completed, {summary.remaining_exercises} remaining\n",
            Style(color=MUTED_GRAY),
        )

        categories = Table(
            show_header=True,
            header_style=Style(color=PLAYBOOK_INDIGO, bold=True),
            border_style=MUTED_GRAY,
            box=box.SIMPLE,
        )
        categories.add_column("Category")
        categories.add_column("Completed", justify="right")
        categories.add_column("Started", justify="right")
        categories.add_column("Progress")

        for category in summary.categories:
            categories.add_row(
                category.category.title(),
                f"{category.completed}/{category.total}",
                str(category.started),
                create_progress_bar(category.percentage, self.bar_width // 2),
            )

        return Panel(
            Group(content, categories),
            title="Your Progress",
            border_style=PLAYBOOK_INDIGO,
            box=box.HEAVY,
            padding=(1, 2),
        )

    def __rich__(self) -> Panel:
        return self.render()
