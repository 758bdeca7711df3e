"""
Critical Path Calculator.

Finds the longest duration-weighted dependency chain ending at every task
and flags the tasks whose chain is the longest overall.
"""

import logging
from dataclasses import replace
from types import MappingProxyType
from typing import Iterable

from .errors import CyclicDependencyWarning
from .models import CriticalPathResult, TaskNode
from .network import DependencyGraph

logger = logging.getLogger(__name__)


class CriticalPathCalculator:
    """
    Longest-chain calculation over a dependency graph.

        longest_chain(n) = duration_days(n) + max(longest_chain(p) for p in preds(n), default 0)

    Each task's chain is evaluated from that task with its own traversal
    stack, using an explicit depth-first worklist rather than recursion. A
    predecessor that is already on the stack closes a cycle and contributes
    0. Chains that never touched a cycle are independent of where the
    traversal started and are reused; chains through a cycle are recomputed
    for every starting task.
    """

    def __init__(self, graph: DependencyGraph):
        self.graph = graph

    def longest_chains(self) -> tuple[dict[int, int], list[CyclicDependencyWarning]]:
        """
        Calculate the longest chain ending at every task.

        Returns:
            Tuple of (task_id -> chain length in days, cycle warnings)
        """
        chain: dict[int, int] = {}
        settled: dict[int, int] = {}
        warnings: list[CyclicDependencyWarning] = []
        reported: set[tuple[int, int]] = set()

        for root_id in sorted(self.graph.tasks):
            if root_id in settled:
                chain[root_id] = settled[root_id]
                continue

            # Each frame: (task_id, iterator over its predecessors)
            stack = [(root_id, iter(self.graph.predecessors_of(root_id)))]
            on_stack = {root_id}
            best = {root_id: 0}
            # Frames whose chain passed through a back edge
            tainted: set[int] = set()

            while stack:
                task_id, preds = stack[-1]
                descended = False

                for pred_id in preds:
                    if pred_id in settled:
                        best[task_id] = max(best[task_id], settled[pred_id])
                    elif pred_id in on_stack:
                        tainted.add(task_id)
                        if (task_id, pred_id) not in reported:
                            reported.add((task_id, pred_id))
                            warning = CyclicDependencyWarning(
                                f"Dependency cycle through task {pred_id} -> {task_id}; "
                                f"task {pred_id} contributes 0 to the chain",
                                task_id=task_id, predecessor_id=pred_id,
                            )
                            logger.warning(str(warning))
                            warnings.append(warning)
                    else:
                        stack.append((pred_id, iter(self.graph.predecessors_of(pred_id))))
                        on_stack.add(pred_id)
                        best[pred_id] = 0
                        descended = True
                        break

                if descended:
                    continue

                # All predecessors visited
                stack.pop()
                on_stack.discard(task_id)
                length = self.graph.tasks[task_id].duration_days + best.pop(task_id)

                if task_id in tainted:
                    tainted.discard(task_id)
                    if stack:
                        tainted.add(stack[-1][0])
                else:
                    settled[task_id] = length

                if stack:
                    parent_id = stack[-1][0]
                    best[parent_id] = max(best[parent_id], length)
                else:
                    chain[task_id] = length

        return chain, warnings

    def run(self) -> CriticalPathResult:
        """
        Execute the full critical path calculation.

        Returns:
            CriticalPathResult with every tied-longest task flagged
        """
        chain, warnings = self.longest_chains()
        max_duration = max(chain.values(), default=0)

        # Ties are all critical
        critical_ids = frozenset(tid for tid, length in chain.items() if length == max_duration)
        flags = {tid: tid in critical_ids for tid in chain}

        return CriticalPathResult(
            longest_chain=MappingProxyType(chain),
            critical_flags=MappingProxyType(flags),
            critical_ids=critical_ids,
            max_duration=max_duration,
            warnings=tuple(warnings),
        )

    def driving_path(self, task_id: int, result: CriticalPathResult) -> list[int]:
        """
        Trace the chain that determines a task's longest_chain value.

        Walks back through the predecessor with the longest chain at each
        step (lowest id on ties).

        Returns:
            Task IDs in execution order, ending with task_id
        """
        if task_id not in self.graph:
            raise ValueError(f"Task {task_id} not in graph")

        path = [task_id]
        visited = {task_id}
        current = task_id

        while True:
            preds = [p for p in self.graph.predecessors_of(current) if p not in visited]
            if not preds:
                break
            current = max(preds, key=lambda p: (result.longest_chain.get(p, 0), -p))
            visited.add(current)
            path.append(current)

        path.reverse()
        return path


def calculate_critical_path(graph: DependencyGraph) -> CriticalPathResult:
    """Run the calculator over a graph."""
    return CriticalPathCalculator(graph).run()


def annotate_nodes(nodes: Iterable[TaskNode], result: CriticalPathResult) -> list[TaskNode]:
    """Return copies of nodes with is_critical_path taken from a result."""
    return [replace(node, is_critical_path=result.is_critical(node.id)) for node in nodes]
