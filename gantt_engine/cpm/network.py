"""
Dependency Graph for critical path calculations.

Indexes task nodes by id and answers predecessor/successor questions.
A graph is built once per snapshot and never modified afterwards.
"""

from collections import defaultdict, deque
from typing import Iterable, Iterator, Optional

from .models import TaskNode


class DependencyGraph:
    """
    Task dependency graph.

    Predecessors come straight from node data. Successors are the inverted
    relation, built by one scan on first use and cached for the life of the
    graph (one recompute cycle).
    """

    def __init__(self, nodes: Iterable[TaskNode] = ()):
        self.tasks: dict[int, TaskNode] = {}
        for node in nodes:
            self.tasks[node.id] = node
        self._successors: Optional[dict[int, tuple[int, ...]]] = None

    def get_task(self, task_id: int) -> Optional[TaskNode]:
        """Get a task by ID."""
        return self.tasks.get(task_id)

    def predecessors_of(self, task_id: int) -> tuple[int, ...]:
        """
        Get IDs of the tasks that must finish before task_id may start.

        References to tasks missing from the snapshot are skipped; see
        validate() for reporting them.
        """
        node = self.tasks.get(task_id)
        if node is None:
            return ()
        return tuple(sorted(pid for pid in node.predecessor_ids if pid in self.tasks))

    def successors_of(self, task_id: int) -> tuple[int, ...]:
        """Get IDs of the tasks that depend directly on task_id."""
        if self._successors is None:
            self._successors = self._build_successors()
        return self._successors.get(task_id, ())

    def _build_successors(self) -> dict[int, tuple[int, ...]]:
        successors = defaultdict(list)
        for node in self.tasks.values():
            for pred_id in node.predecessor_ids:
                if pred_id in self.tasks:
                    successors[pred_id].append(node.id)
        return {tid: tuple(sorted(ids)) for tid, ids in successors.items()}

    def get_predecessor_tasks(self, task_id: int) -> list[TaskNode]:
        """Get predecessor TaskNode objects."""
        return [self.tasks[pid] for pid in self.predecessors_of(task_id)]

    def get_successor_tasks(self, task_id: int) -> list[TaskNode]:
        """Get successor TaskNode objects."""
        return [self.tasks[sid] for sid in self.successors_of(task_id)]

    def get_start_tasks(self) -> list[int]:
        """Get task IDs with no predecessors."""
        return [tid for tid in self.tasks if not self.predecessors_of(tid)]

    def get_end_tasks(self) -> list[int]:
        """Get task IDs with no successors."""
        return [tid for tid in self.tasks if not self.successors_of(tid)]

    def topological_sort(self) -> list[int]:
        """
        Return task IDs in topological order (predecessors before successors).

        Uses Kahn's algorithm. Raises ValueError if circular dependency detected.
        """
        # Calculate in-degree for each task
        in_degree = {tid: len(self.predecessors_of(tid)) for tid in self.tasks}

        # Start with tasks that have no predecessors
        queue = deque(sorted(tid for tid, deg in in_degree.items() if deg == 0))
        result = []

        while queue:
            task_id = queue.popleft()
            result.append(task_id)

            # Reduce in-degree for all successors
            for succ_id in self.successors_of(task_id):
                in_degree[succ_id] -= 1
                if in_degree[succ_id] == 0:
                    queue.append(succ_id)

        if len(result) != len(self.tasks):
            # Find tasks involved in cycle
            remaining = sorted(set(self.tasks) - set(result))
            raise ValueError(f"Circular dependency detected involving {len(remaining)} tasks: "
                             f"{remaining[:5]}...")

        return result

    def get_all_predecessors(self, task_id: int, include_self: bool = False) -> set[int]:
        """Get all predecessor task IDs (transitive closure)."""
        return self._closure(task_id, self.predecessors_of, include_self)

    def get_all_successors(self, task_id: int, include_self: bool = False) -> set[int]:
        """Get all successor task IDs (transitive closure)."""
        return self._closure(task_id, self.successors_of, include_self)

    @staticmethod
    def _closure(task_id: int, neighbours, include_self: bool) -> set[int]:
        result = set()
        if include_self:
            result.add(task_id)

        visited = set()
        queue = deque([task_id])

        while queue:
            current = queue.popleft()
            if current in visited:
                continue
            visited.add(current)

            for other in neighbours(current):
                result.add(other)
                queue.append(other)

        return result

    def would_create_cycle(self, task_id: int, candidate_predecessor_id: int) -> bool:
        """
        Check whether making candidate a predecessor of task_id closes a loop.

        That happens when the candidate is the task itself or already
        depends on it, directly or transitively.
        """
        if task_id == candidate_predecessor_id:
            return True
        return candidate_predecessor_id in self.get_all_successors(task_id)

    def get_statistics(self) -> dict:
        """Get network statistics."""
        statuses = defaultdict(int)
        dependencies = 0

        for node in self.tasks.values():
            statuses[node.status.value] += 1
            dependencies += len(self.predecessors_of(node.id))

        return {
            'total_tasks': len(self.tasks),
            'total_dependencies': dependencies,
            'start_tasks': len(self.get_start_tasks()),
            'end_tasks': len(self.get_end_tasks()),
            'milestones': sum(1 for n in self.tasks.values() if n.is_milestone),
            'statuses': dict(statuses),
        }

    def validate(self) -> list[str]:
        """
        Validate network integrity.

        Returns list of issues found (empty if valid).
        """
        issues = []

        # Check for dangling dependencies
        for node in self.tasks.values():
            for pred_id in sorted(node.predecessor_ids):
                if pred_id not in self.tasks:
                    issues.append(f"Task {node.id} references missing predecessor: {pred_id}")

        # Check for circular dependencies
        try:
            self.topological_sort()
        except ValueError as e:
            issues.append(str(e))

        return issues

    def __len__(self) -> int:
        return len(self.tasks)

    def __contains__(self, task_id: int) -> bool:
        return task_id in self.tasks

    def __iter__(self) -> Iterator[TaskNode]:
        return iter(self.tasks.values())

    def __repr__(self) -> str:
        return f"DependencyGraph({len(self.tasks)} tasks)"
