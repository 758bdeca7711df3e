"""
Data models for critical path and timeline calculations.

Defines immutable dataclasses for task nodes, layout results and
reschedule requests. Everything here is rebuilt from scratch for each
task snapshot; nothing is patched in place.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Mapping, Optional


class TaskStatus(str, Enum):
    TODO = 'todo'
    IN_PROGRESS = 'in_progress'
    REVIEW = 'review'
    COMPLETED = 'completed'
    BLOCKED = 'blocked'


class TaskPriority(str, Enum):
    LOW = 'low'
    MEDIUM = 'medium'
    HIGH = 'high'
    CRITICAL = 'critical'


# Progress shown on the bar, by status
STATUS_PROGRESS: dict[TaskStatus, int] = {
    TaskStatus.COMPLETED: 100,
    TaskStatus.IN_PROGRESS: 50,
}


@dataclass(frozen=True)
class TaskNode:
    """A normalized task, ready to be placed in the dependency graph."""

    id: int
    title: str
    priority: TaskPriority
    status: TaskStatus
    start_date: date
    end_date: date
    predecessor_ids: frozenset[int] = frozenset()
    is_milestone: bool = False
    is_critical_path: bool = False

    @property
    def duration_days(self) -> int:
        """Whole days between start and end."""
        return (self.end_date - self.start_date).days

    @property
    def progress_percent(self) -> int:
        return STATUS_PROGRESS.get(self.status, 0)

    def is_completed(self) -> bool:
        """Check if task is completed."""
        return self.status == TaskStatus.COMPLETED

    def is_in_progress(self) -> bool:
        """Check if task is in progress."""
        return self.status == TaskStatus.IN_PROGRESS

    def is_overdue(self, today: date) -> bool:
        """Check if task should have finished before today."""
        return self.end_date < today and not self.is_completed()


@dataclass(frozen=True)
class TimelineBounds:
    """Calendar window shared by every bar on the chart."""

    start: date
    end: date

    @property
    def total_days(self) -> int:
        return (self.end - self.start).days


@dataclass(frozen=True)
class PositionInterval:
    """Fractional placement of a task bar within the timeline window."""

    left_fraction: float
    width_fraction: float

    @property
    def right_fraction(self) -> float:
        return self.left_fraction + self.width_fraction


@dataclass(frozen=True)
class DayMarker:
    """One column of the timeline header."""

    day: date
    label: str          # day of month, zero padded
    weekday: str        # short weekday name
    is_weekend: bool


@dataclass(frozen=True)
class CriticalPathResult:
    """
    Results from a critical path calculation.

    Maps are read-only and keyed by task id. Compose them onto nodes with
    annotate_nodes() rather than mutating shared task objects.
    """

    longest_chain: Mapping[int, int]
    critical_flags: Mapping[int, bool]
    critical_ids: frozenset[int]
    max_duration: int
    warnings: tuple = ()

    def is_critical(self, task_id: int) -> bool:
        return self.critical_flags.get(task_id, False)

    def get_chain_length(self, task_id: int) -> Optional[int]:
        return self.longest_chain.get(task_id)


@dataclass(frozen=True)
class RenderItem:
    """Layout row for a single task bar."""

    task_id: int
    left_fraction: float
    width_fraction: float
    is_critical_path: bool
    is_milestone: bool
    progress_percent: int
    title: str = ''
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    start_date: Optional[date] = None
    end_date: Optional[date] = None


@dataclass(frozen=True)
class RenderModel:
    """Everything the chart renderer needs for one snapshot."""

    items: tuple[RenderItem, ...]
    bounds: TimelineBounds
    day_markers: tuple[DayMarker, ...]
    critical_ids: frozenset[int] = frozenset()
    diagnostics: tuple = field(default=(), compare=False)

    def get_critical_items(self) -> list[RenderItem]:
        return [item for item in self.items if item.is_critical_path]


@dataclass(frozen=True)
class RescheduleRequest:
    """A validated move, handed to the task store for persistence."""

    task_id: int
    new_start_date: date
    new_end_date: date

    @property
    def accepted(self) -> bool:
        return True

    def to_update(self) -> dict[str, str]:
        """Payload in the task service's update format."""
        return {
            'start_date': self.new_start_date.isoformat(),
            'end_date': self.new_end_date.isoformat(),
        }


class RejectionReason(str, Enum):
    UNKNOWN_TASK = 'unknown_task'
    PREDECESSOR_CONFLICT = 'predecessor_conflict'
    SUCCESSOR_CONFLICT = 'successor_conflict'
    PENDING_CONFLICT = 'pending_conflict'


@dataclass(frozen=True)
class RescheduleRejected:
    """A move refused because it would invert a precedence relationship."""

    task_id: int
    reason: RejectionReason
    conflicting_task_ids: tuple[int, ...] = ()
    message: str = ''

    @property
    def accepted(self) -> bool:
        return False


@dataclass(frozen=True)
class ScheduleStats:
    """Headline counts for a snapshot."""

    total: int
    completed: int
    in_progress: int
    overdue: int
    critical: int

    def get_summary(self) -> str:
        """Get human-readable summary."""
        return (f"{self.total} tasks: {self.completed} completed, "
                f"{self.in_progress} in progress, {self.overdue} overdue, "
                f"{self.critical} critical")
