from rich.theme import Theme
from rich.style import Style
from rich.text import Text

from evaluator import TextLimitStatus
from models import ColorToken
from presentation import present_percentage

PLAYBOOK_INDIGO = "#6366F1"
WARNING_AMBER = "#F59E0B"
SUCCESS_GREEN = "#10B981"
ERROR_RED = "#EF4444"
INFO_BLUE = "#3B82F6"
MUTED_GRAY = "#7F8C8D"
TEXT_WHITE = "#FFFFFF"

COLOR_TOKEN_STYLES: dict[ColorToken, Style] = {
    ColorToken.NEUTRAL: Style(color=MUTED_GRAY),
    ColorToken.WARNING: Style(color=WARNING_AMBER, bold=True),
    ColorToken.SUCCESS: Style(color=SUCCESS_GREEN, bold=True),
}

TEXT_LIMIT_STYLES: dict[TextLimitStatus, Style] = {
    TextLimitStatus.OK: Style(color=MUTED_GRAY),
    TextLimitStatus.NEAR: Style(color=WARNING_AMBER),
    TextLimitStatus.CRITICAL: Style(color=ERROR_RED),
    TextLimitStatus.OVER: Style(color=ERROR_RED, bold=True),
}

DEFAULT_THEME = Theme(
    {
        "success": Style(color=SUCCESS_GREEN),
        "error": Style(color=ERROR_RED, bold=True),
        "info": Style(color=INFO_BLUE),
    }
)


def get_token_style(token: ColorToken) -> Style:
    """Get the badge style for a presentation colour token."""
    return COLOR_TOKEN_STYLES.get(token, Style())


def get_text_limit_style(status: TextLimitStatus) -> Style:
    """Style for the character counter under a text response."""
    return TEXT_LIMIT_STYLES.get(status, Style())


def get_percentage_style(percentage: float) -> Style:
    """Progress bar fill style for a completion percentage."""
    return Style(color=present_percentage(percentage), bold=True)


def create_progress_bar(percentage: float, width: int = 30) -> Text:
    """Create a text progress bar coloured by completion."""
    filled = int(width * max(0.0, min(100.0, percentage)) / 100)
    bar = Text()
    bar.append("█" * filled, get_percentage_style(percentage))
    bar.append("░" * (width - filled), Style(color=MUTED_GRAY))
    bar.append(f" {percentage:.0f}%", Style(color=MUTED_GRAY))
    return bar
