"""
Timeline bounds and bar positions.

Derives the calendar window shared by all tasks and maps each task's
date range onto fractions of that window. All functions are pure.
"""

from datetime import date, timedelta
from typing import Iterable, Optional

from ..config.settings import settings
from .models import DayMarker, PositionInterval, TaskNode, TimelineBounds
from .normalizer import Clock, today_from


def resolve_bounds(nodes: Iterable[TaskNode], clock: Optional[Clock] = None,
                   padding_days: int = None) -> TimelineBounds:
    """
    Derive the timeline window from task dates.

    The window runs from padding days before the earliest start to padding
    days after the latest end. With no tasks it is centred on today. Padding
    is at least one day, so the window is never zero days wide.

    Args:
        nodes: Tasks to cover (may be empty)
        clock: Current-time source, used only for the empty case
        padding_days: Margin on each side (default from settings, minimum 1)

    Returns:
        TimelineBounds covering every task
    """
    if padding_days is None:
        padding_days = settings.TIMELINE_PADDING_DAYS
    # At least one day each side keeps the window wider than zero days
    padding = timedelta(days=max(padding_days, 1))

    nodes = list(nodes)
    if not nodes:
        today = today_from(clock)
        return TimelineBounds(start=today - padding, end=today + padding)

    # End dates may precede start dates on unnormalized input
    dates = [d for node in nodes for d in (node.start_date, node.end_date)]
    return TimelineBounds(start=min(dates) - padding, end=max(dates) + padding)


def map_position(node: TaskNode, bounds: TimelineBounds) -> PositionInterval:
    """
    Place a task bar within the timeline window.

    The width counts the end day itself, so a task starting and ending on
    the same day still gets a visible bar.
    """
    total_days = bounds.total_days
    if total_days <= 0:
        raise ValueError(f"Timeline window {bounds.start} - {bounds.end} is empty")

    start_offset = days_between(node.start_date, bounds.start)
    duration = days_between(node.end_date, node.start_date) + 1

    left = min(max(start_offset / total_days, 0.0), 1.0)
    width = min(max(duration / total_days, 0.0), 1.0 - left)
    return PositionInterval(left_fraction=left, width_fraction=width)


def map_positions(nodes: Iterable[TaskNode], bounds: TimelineBounds) -> dict[int, PositionInterval]:
    """Place every task bar; keyed by task id."""
    return {node.id: map_position(node, bounds) for node in nodes}


def day_markers(bounds: TimelineBounds) -> list[DayMarker]:
    """One header marker per calendar day, start through end inclusive."""
    markers = []
    current = bounds.start
    while current <= bounds.end:
        markers.append(DayMarker(
            day=current,
            label=current.strftime('%d'),
            weekday=current.strftime('%a'),
            is_weekend=current.weekday() >= 5,
        ))
        current += timedelta(days=1)
    return markers


def days_between(later: date, earlier: date) -> int:
    """Whole days from earlier to later (negative if reversed)."""
    return (later - earlier).days
