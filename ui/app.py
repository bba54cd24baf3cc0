from rich.console import Console
from rich.text import Text
from rich.panel import Panel
from typing import List, Optional

from models import ExerciseTemplate, ProgressResult
from progress import ExerciseProgressEntry, ProgressSummary
from ui.components import (
    ExerciseListTable,
    ExerciseProgressPanel,
    ProgressSummaryPanel,
)
from ui.styles import ERROR_RED, DEFAULT_THEME


class PlaybookUI:
    """Terminal views over exercise progress."""

    def __init__(self, console: Optional[Console] = None, bar_width: int = 30):
        self.console = console or Console(theme=DEFAULT_THEME)
        self.bar_width = bar_width

    def show_exercise_list(self, entries: List[ExerciseProgressEntry]) -> None:
        """Display exercises with status badges and progress bars."""
        if not entries:
            self.show_info("No exercises found.")
            return

        self.console.print(ExerciseListTable(entries, bar_width=self.bar_width // 2))
        self.console.print()

    def show_exercise_progress(
        self,
        template: ExerciseTemplate,
        progress: ProgressResult,
        response_text: Optional[str] = None,
    ) -> None:
        """Display the requirement checklist for one exercise.

        When response_text is given and the exercise has a text limit, a
        character counter is shown as well.
        """
        self.console.print(
            ExerciseProgressPanel(
                template,
                progress,
                bar_width=self.bar_width,
                response_text=response_text,
            )
        )
        self.console.print()

    def show_summary(self, summary: ProgressSummary) -> None:
        """Display overall and per-category progress."""
        self.console.print(ProgressSummaryPanel(summary, bar_width=self.bar_width))
        self.console.print()

    def show_error(self, message: str) -> None:
        """Display an error message."""
        self.console.print(
            Panel(
                Text(f"Error: {message}", style="error"),
                title="Error",
                border_style=ERROR_RED,
            )
        )

    def show_info(self, message: str) -> None:
        """Display an informational message."""
        self.console.print(Text(message, style="info"))

    def show_success(self, message: str) -> None:
        """Display a success message."""
        self.console.print(Text(message, style="success"))
