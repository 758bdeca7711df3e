"""
Critical Path Analysis.

Headline statistics, render-row filtering and a plain-text report for a
computed schedule.
"""

from typing import Iterable, Optional, Union

from ..cpm.models import (
    RenderItem,
    RenderModel,
    ScheduleStats,
    TaskNode,
    TaskPriority,
    TaskStatus,
)
from ..cpm.normalizer import Clock, today_from
from ..pipeline import Schedule


def get_schedule_stats(nodes: Iterable[TaskNode], clock: Optional[Clock] = None) -> ScheduleStats:
    """
    Count tasks by progress.

    Overdue tasks are those that should have finished before today and
    are not completed.
    """
    nodes = list(nodes)
    today = today_from(clock)
    return ScheduleStats(
        total=len(nodes),
        completed=sum(1 for n in nodes if n.is_completed()),
        in_progress=sum(1 for n in nodes if n.is_in_progress()),
        overdue=sum(1 for n in nodes if n.is_overdue(today)),
        critical=sum(1 for n in nodes if n.is_critical_path),
    )


def filter_render_items(
    model: RenderModel,
    priority: Union[TaskPriority, str, None] = None,
    status: Union[TaskStatus, str, None] = None,
    critical_only: bool = False,
) -> list[RenderItem]:
    """
    Select render rows by priority, status and critical flag.

    Args:
        model: Render model to filter
        priority: Keep only this priority ('all' or None keeps every priority)
        status: Keep only this status ('all' or None keeps every status)
        critical_only: Keep only critical path rows

    Returns:
        Matching rows in model order
    """
    if priority is not None and priority != 'all':
        priority = TaskPriority(priority)
    else:
        priority = None
    if status is not None and status != 'all':
        status = TaskStatus(status)
    else:
        status = None

    candidates = model.get_critical_items() if critical_only else model.items
    items = []
    for item in candidates:
        if priority is not None and item.priority != priority:
            continue
        if status is not None and item.status != status:
            continue
        items.append(item)
    return items


def print_critical_path_report(schedule: Schedule, items: Optional[list[RenderItem]] = None,
                               clock: Optional[Clock] = None) -> None:
    """Print a formatted critical path report."""
    if items is None:
        items = list(schedule.render_model.items)
    stats = get_schedule_stats(schedule.nodes, clock=clock)

    print("=" * 80)
    print("CRITICAL PATH REPORT")
    print("=" * 80)

    print(f"\nTimeline: {schedule.bounds.start} - {schedule.bounds.end} "
          f"({schedule.bounds.total_days} days)")
    print(f"Tasks: {stats.get_summary()}")
    print(f"Longest chain: {schedule.critical.max_duration} days")

    print("\n--- Critical Path ---")
    for task_id in sorted(schedule.critical.critical_ids):
        path = schedule.get_driving_path(task_id)
        print(f"  {' -> '.join(str(tid) for tid in path)}")

    print(f"\n--- Tasks ({len(items)} shown) ---")
    for item in items:
        flags = ('C' if item.is_critical_path else ' ') + ('M' if item.is_milestone else ' ')
        print(f"  {item.task_id:5d} {flags} | {item.title[:40]:40s} | "
              f"{item.start_date} - {item.end_date} | {item.progress_percent:3d}% | "
              f"chain {schedule.critical.get_chain_length(item.task_id)}d")

    if schedule.diagnostics:
        print("\n--- Diagnostics ---")
        for diagnostic in schedule.diagnostics:
            print(f"  {type(diagnostic).__name__}: {diagnostic}")

    print("\n" + "=" * 80)
