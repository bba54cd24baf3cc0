"""Display mapping for lifecycle states and progress percentages."""

from models import ColorToken, LifecycleState, Presentation

STATE_PRESENTATIONS: dict[LifecycleState, Presentation] = {
    LifecycleState.UNSTARTED: Presentation(
        icon="🔓", label="Unstarted", color_token=ColorToken.NEUTRAL
    ),
    LifecycleState.INCOMPLETE: Presentation(
        icon="🚀", label="Started", color_token=ColorToken.WARNING
    ),
    LifecycleState.COMPLETED: Presentation(
        icon="✅", label="Completed", color_token=ColorToken.SUCCESS
    ),
}

PROGRESS_RED = (0xEF, 0x44, 0x44)
PROGRESS_AMBER = (0xF5, 0x9E, 0x0B)
PROGRESS_GREEN = (0x10, 0xB9, 0x81)


def present(state: LifecycleState) -> Presentation:
    """Icon, label and colour token for a status badge."""
    return STATE_PRESENTATIONS[LifecycleState(state)]


def _mix(start: tuple[int, int, int], end: tuple[int, int, int], t: float) -> str:
    channels = (round(a + (b - a) * t) for a, b in zip(start, end))
    return "#" + "".join(f"{c:02x}" for c in channels)


def present_percentage(percentage: float) -> str:
    """Progress bar fill colour, red at 0% through amber at 50% to green at 100%.

    Returns a hex colour string. Out-of-range input is clamped.
    """
    value = max(0.0, min(100.0, float(percentage)))
    if value <= 50:
        return _mix(PROGRESS_RED, PROGRESS_AMBER, value / 50)
    return _mix(PROGRESS_AMBER, PROGRESS_GREEN, (value - 50) / 50)
