"""
Errors and diagnostics raised or collected by the scheduling engine.

Structural problems with a single record raise InvalidTaskError, which the
normalizer catches and reports per record. Temporal anomalies are repaired
and reported as ScheduleWarning instances collected alongside the result;
they are never raised.
"""

from typing import Optional


class InvalidTaskError(ValueError):
    """Raised when a raw task record cannot become a graph node."""

    def __init__(self, message: str, task_id: Optional[int] = None,
                 record_index: Optional[int] = None):
        super().__init__(message)
        self.task_id = task_id
        self.record_index = record_index


class ScheduleWarning(UserWarning):
    """Base class for non-fatal schedule diagnostics."""

    def __init__(self, message: str, task_id: Optional[int] = None):
        super().__init__(message)
        self.task_id = task_id

    @property
    def message(self) -> str:
        return str(self)


class InvertedDateWarning(ScheduleWarning):
    """End date before start date; the end date was repaired."""


class CyclicDependencyWarning(ScheduleWarning):
    """A dependency cycle was short-circuited during traversal."""

    def __init__(self, message: str, task_id: Optional[int] = None,
                 predecessor_id: Optional[int] = None):
        super().__init__(message, task_id=task_id)
        self.predecessor_id = predecessor_id
