"""Dependency candidates for a task."""

from ..cpm.models import TaskNode
from ..cpm.network import DependencyGraph


def available_predecessors(graph: DependencyGraph, task_id: int) -> list[TaskNode]:
    """
    List tasks that could become task_id's dependency.

    Excludes the task itself, completed tasks, and tasks that already
    depend on task_id (directly or transitively), since those would close
    a cycle.
    """
    if task_id not in graph:
        raise ValueError(f"Task {task_id} not in graph")

    return [
        node for node in graph
        if not node.is_completed()
        and not graph.would_create_cycle(task_id, node.id)
    ]
