"""
Schemas for task snapshot records and exported render rows.

TaskRecord describes one raw task as delivered by the task service (or read
from a CSV/JSON export). Every field is optional at this layer; the
normalizer decides which gaps are repairable and which are fatal.
"""

from datetime import date, datetime
from typing import Any, Optional

import pandas as pd
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from .cpm.models import TaskPriority, TaskStatus


def is_missing(value: Any) -> bool:
    """True for None, blank strings and pandas/NumPy NA scalars."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return bool(pd.api.types.is_scalar(value) and pd.isna(value))


def parse_day(value: Any) -> Optional[date]:
    """Parse a date-like value into a calendar day (time of day dropped)."""
    if is_missing(value):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    parsed = pd.to_datetime(value)
    if pd.isna(parsed):
        return None
    return parsed.date()


class TaskRecord(BaseModel):
    """A raw task entry from the task snapshot."""

    model_config = ConfigDict(extra='ignore', populate_by_name=True)

    id: Optional[int] = Field(default=None, description="Task primary key")
    title: Optional[str] = Field(default=None, description="Task title")
    status: Optional[TaskStatus] = Field(
        default=None, description="todo, in_progress, review, completed or blocked"
    )
    priority: Optional[TaskPriority] = Field(
        default=None, description="low, medium, high or critical"
    )
    start_date: Optional[date] = Field(
        default=None,
        validation_alias=AliasChoices('start_date', 'startDate'),
        description="Planned start (YYYY-MM-DD)",
    )
    end_date: Optional[date] = Field(
        default=None,
        validation_alias=AliasChoices('end_date', 'endDate'),
        description="Planned end (YYYY-MM-DD)",
    )
    dependency_id: Optional[int] = Field(
        default=None,
        validation_alias=AliasChoices('dependency_id', 'dependencyId'),
        description="FK to the predecessor task",
    )

    @field_validator('id', 'title', 'status', 'priority', 'dependency_id', mode='before')
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        return None if is_missing(value) else value

    @field_validator('start_date', 'end_date', mode='before')
    @classmethod
    def _parse_dates(cls, value: Any) -> Optional[date]:
        return parse_day(value)


class RenderRow(BaseModel):
    """One row of an exported render model (CSV)."""

    task_id: int = Field(description="Task primary key")
    title: str = Field(description="Task title")
    status: str = Field(description="Task status")
    priority: str = Field(description="Task priority")
    start_date: Optional[str] = Field(description="Start (YYYY-MM-DD)")
    end_date: Optional[str] = Field(description="End (YYYY-MM-DD)")
    left_fraction: float = Field(description="Bar offset within the timeline, 0-1")
    width_fraction: float = Field(description="Bar width within the timeline, 0-1")
    progress_percent: int = Field(description="0, 50 or 100")
    is_milestone: bool = Field(description="Title marks a milestone")
    is_critical_path: bool = Field(description="Ends a longest dependency chain")
