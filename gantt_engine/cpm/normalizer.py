"""
Task Record Normalizer.

Converts raw task snapshot records into TaskNode objects: fills in missing
dates, repairs inverted date ranges, derives progress and milestone flags,
and extracts predecessor references.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any, Callable, Iterable, Mapping, Optional, Union

from pydantic import ValidationError

from ..config.settings import settings
from ..schemas import TaskRecord
from .errors import CyclicDependencyWarning, InvalidTaskError, InvertedDateWarning, ScheduleWarning
from .models import TaskNode, TaskPriority, TaskStatus

logger = logging.getLogger(__name__)

Clock = Callable[[], Union[date, datetime]]


def today_from(clock: Optional[Clock] = None) -> date:
    """Read the current calendar day from a clock (default: date.today)."""
    now = clock() if clock is not None else date.today()
    if isinstance(now, datetime):
        return now.date()
    return now


def is_milestone_title(title: str, keywords: Iterable[str] = None) -> bool:
    """Check whether a title names a milestone-like task."""
    if keywords is None:
        keywords = settings.MILESTONE_KEYWORDS
    lowered = (title or '').lower()
    return any(keyword in lowered for keyword in keywords)


@dataclass
class NormalizationResult:
    """Nodes built from a snapshot plus the records that were rejected or repaired."""

    nodes: list[TaskNode] = field(default_factory=list)
    errors: list[InvalidTaskError] = field(default_factory=list)
    warnings: list[ScheduleWarning] = field(default_factory=list)

    @property
    def diagnostics(self) -> list[Exception]:
        return [*self.errors, *self.warnings]


class TaskNormalizer:
    """
    Builds TaskNode objects from raw task records.

    The clock is only consulted for records without a start date, which
    default to the current day.
    """

    def __init__(self, clock: Optional[Clock] = None,
                 default_duration_days: int = None,
                 milestone_keywords: Iterable[str] = None):
        """
        Initialize the normalizer.

        Args:
            clock: Current-time source (returns date or datetime)
            default_duration_days: Length given to tasks without a usable end date
            milestone_keywords: Title fragments that mark a milestone
        """
        self.clock = clock
        self.default_duration_days = (
            settings.DEFAULT_DURATION_DAYS if default_duration_days is None
            else default_duration_days
        )
        self.milestone_keywords = tuple(
            k.lower() for k in (
                settings.MILESTONE_KEYWORDS if milestone_keywords is None else milestone_keywords
            )
        )

    def normalize(self, records: Iterable[Union[Mapping[str, Any], TaskRecord]]) -> NormalizationResult:
        """
        Normalize a batch of raw records.

        Records with a missing or duplicated id, or a malformed shape, are
        excluded and reported; the rest of the batch is still processed.

        Args:
            records: Raw task records (mappings or TaskRecord instances)

        Returns:
            NormalizationResult with nodes in snapshot order
        """
        result = NormalizationResult()
        seen_ids: set[int] = set()
        today = None

        for index, raw in enumerate(records):
            try:
                record = self._parse_record(raw, index)
                if record.id in seen_ids:
                    raise InvalidTaskError(
                        f"Duplicate task id {record.id} at record {index}",
                        task_id=record.id, record_index=index,
                    )

                # Only read the clock when a start date is actually missing
                if record.start_date is None and today is None:
                    today = today_from(self.clock)

                node = self._build_node(record, today, result.warnings)
            except InvalidTaskError as e:
                logger.warning("Excluding task record: %s", e)
                result.errors.append(e)
                continue

            seen_ids.add(node.id)
            result.nodes.append(node)

        if result.errors or result.warnings:
            logger.info("Normalized %d tasks (%d excluded, %d repaired)",
                        len(result.nodes), len(result.errors), len(result.warnings))
        return result

    def _parse_record(self, raw: Union[Mapping[str, Any], TaskRecord], index: int) -> TaskRecord:
        if isinstance(raw, TaskRecord):
            record = raw
        else:
            try:
                record = TaskRecord.model_validate(dict(raw))
            except ValidationError as e:
                fields = sorted({str(err['loc'][0]) for err in e.errors() if err.get('loc')})
                raw_id = raw.get('id') if isinstance(raw, Mapping) else None
                raise InvalidTaskError(
                    f"Malformed task record {index}: invalid {', '.join(fields) or 'shape'}",
                    task_id=raw_id if isinstance(raw_id, int) else None,
                    record_index=index,
                ) from e
            except TypeError as e:
                raise InvalidTaskError(
                    f"Task record {index} is not a mapping", record_index=index,
                ) from e

        if record.id is None:
            raise InvalidTaskError(f"Task record {index} has no id", record_index=index)
        return record

    def _build_node(self, record: TaskRecord, today: Optional[date],
                    warnings: list[ScheduleWarning]) -> TaskNode:
        start_date = record.start_date or today
        end_date = record.end_date
        default_end = start_date + timedelta(days=self.default_duration_days)

        if end_date is None:
            end_date = default_end
        elif end_date < start_date:
            warning = InvertedDateWarning(
                f"Task {record.id} ends {end_date} before it starts {start_date}; "
                f"end moved to {default_end}",
                task_id=record.id,
            )
            logger.warning(str(warning))
            warnings.append(warning)
            end_date = default_end

        predecessor_ids = frozenset()
        if record.dependency_id is not None:
            if record.dependency_id == record.id:
                warning = CyclicDependencyWarning(
                    f"Task {record.id} depends on itself; dependency ignored",
                    task_id=record.id, predecessor_id=record.id,
                )
                logger.warning(str(warning))
                warnings.append(warning)
            else:
                predecessor_ids = frozenset({record.dependency_id})

        title = record.title or ''
        return TaskNode(
            id=record.id,
            title=title,
            priority=record.priority or TaskPriority.MEDIUM,
            status=record.status or TaskStatus.TODO,
            start_date=start_date,
            end_date=end_date,
            predecessor_ids=predecessor_ids,
            is_milestone=is_milestone_title(title, self.milestone_keywords),
        )
