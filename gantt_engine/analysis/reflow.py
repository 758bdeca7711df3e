"""
Drag-Reflow Coordinator.

Validates a proposed reschedule (a task bar dragged to a new start date)
against the precedence constraints of the current snapshot. Accepted moves
are handed to the task store as a RescheduleRequest; nothing is changed
locally. The caller persists the request and supplies a fresh snapshot,
which is the only way the engine ever sees the move.
"""

import logging
from datetime import date, timedelta
from enum import Enum
from typing import Callable, Optional, Union

from ..config.settings import CONFLICT_POLICIES, settings
from ..cpm.models import RejectionReason, RescheduleRejected, RescheduleRequest
from ..cpm.network import DependencyGraph
from ..pipeline import Schedule

logger = logging.getLogger(__name__)

RescheduleSink = Callable[[RescheduleRequest], None]
ProposalOutcome = Union[RescheduleRequest, RescheduleRejected]


class ReflowState(str, Enum):
    IDLE = 'idle'
    PENDING_VALIDATION = 'pending_validation'
    COMMITTED = 'committed'
    REJECTED = 'rejected'


class DragReflowCoordinator:
    """
    Validates drag proposals and emits reschedule requests.

    Each proposal moves IDLE -> PENDING_VALIDATION -> COMMITTED or REJECTED
    and then back to IDLE. Proposals validate against the snapshot given to
    the coordinator; requests already emitted against that snapshot are
    tracked so the conflict policy can refuse overlapping moves.
    """

    def __init__(self, schedule: Union[Schedule, DependencyGraph],
                 sink: Optional[RescheduleSink] = None,
                 conflict_policy: str = None):
        """
        Initialize the coordinator.

        Args:
            schedule: Current snapshot (Schedule or its DependencyGraph)
            sink: Receives each accepted RescheduleRequest (the task store)
            conflict_policy: 'reject' or 'last_write_wins' (default from settings)
        """
        if conflict_policy is None:
            conflict_policy = settings.RESCHEDULE_CONFLICT_POLICY
        if conflict_policy not in CONFLICT_POLICIES:
            raise ValueError(f"Unknown conflict policy {conflict_policy!r}; "
                             f"expected one of {CONFLICT_POLICIES}")

        self.sink = sink
        self.conflict_policy = conflict_policy
        self.state = ReflowState.IDLE
        self.last_state: Optional[ReflowState] = None
        self.graph: DependencyGraph = None
        self._pending: dict[int, RescheduleRequest] = {}
        self.load_snapshot(schedule)

    def load_snapshot(self, schedule: Union[Schedule, DependencyGraph]) -> None:
        """Replace the snapshot; requests emitted against the old one are forgotten."""
        self.graph = schedule.graph if isinstance(schedule, Schedule) else schedule
        self._pending = {}

    @property
    def pending_requests(self) -> list[RescheduleRequest]:
        """Requests emitted against the current snapshot, oldest first."""
        return list(self._pending.values())

    def propose(self, task_id: int, new_start_date: date) -> ProposalOutcome:
        """
        Validate moving a task to a new start date.

        The task keeps its duration. The move is rejected if it would start
        the task before a predecessor ends, or end it after a successor
        starts.

        Args:
            task_id: Task being dragged
            new_start_date: Proposed start

        Returns:
            RescheduleRequest when accepted (also sent to the sink),
            RescheduleRejected otherwise
        """
        self.state = ReflowState.PENDING_VALIDATION
        try:
            outcome = self._validate(task_id, new_start_date)
            if outcome.accepted:
                self.state = ReflowState.COMMITTED
                # Re-proposals move to the back of the pending order
                self._pending.pop(task_id, None)
                self._pending[task_id] = outcome
                logger.info("Rescheduling task %d to %s - %s",
                            task_id, outcome.new_start_date, outcome.new_end_date)
                if self.sink is not None:
                    self.sink(outcome)
            else:
                self.state = ReflowState.REJECTED
                logger.info("Rejected move of task %d: %s", task_id, outcome.message)
            return outcome
        finally:
            self.last_state = self.state
            self.state = ReflowState.IDLE

    def _validate(self, task_id: int, new_start_date: date) -> ProposalOutcome:
        task = self.graph.get_task(task_id)
        if task is None:
            return RescheduleRejected(
                task_id=task_id,
                reason=RejectionReason.UNKNOWN_TASK,
                message=f"Task {task_id} is not in the current snapshot",
            )

        new_end_date = new_start_date + timedelta(days=task.duration_days)

        # A predecessor must end on or before the new start
        late_preds = tuple(
            pred.id for pred in self.graph.get_predecessor_tasks(task_id)
            if pred.end_date > new_start_date
        )
        if late_preds:
            return RescheduleRejected(
                task_id=task_id,
                reason=RejectionReason.PREDECESSOR_CONFLICT,
                conflicting_task_ids=late_preds,
                message=f"Task {task_id} cannot start {new_start_date} before "
                        f"predecessor(s) {list(late_preds)} finish",
            )

        # A successor must start on or after the new end
        early_succs = tuple(
            succ.id for succ in self.graph.get_successor_tasks(task_id)
            if succ.start_date < new_end_date
        )
        if early_succs:
            return RescheduleRejected(
                task_id=task_id,
                reason=RejectionReason.SUCCESSOR_CONFLICT,
                conflicting_task_ids=early_succs,
                message=f"Task {task_id} cannot end {new_end_date} after "
                        f"successor(s) {list(early_succs)} start",
            )

        if self.conflict_policy == 'reject':
            related = {task_id, *self.graph.predecessors_of(task_id),
                       *self.graph.successors_of(task_id)}
            pending = tuple(sorted(tid for tid in related if tid in self._pending))
            if pending:
                return RescheduleRejected(
                    task_id=task_id,
                    reason=RejectionReason.PENDING_CONFLICT,
                    conflicting_task_ids=pending,
                    message=f"Task(s) {list(pending)} already rescheduled against this "
                            f"snapshot; reload before moving task {task_id}",
                )

        return RescheduleRequest(
            task_id=task_id,
            new_start_date=new_start_date,
            new_end_date=new_end_date,
        )
