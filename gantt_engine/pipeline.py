"""
Snapshot pipeline.

Runs normalizer -> dependency graph -> critical path -> timeline layout
for one task snapshot and assembles the render model. Every call
recomputes from scratch; nothing is carried between snapshots.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional

from .cpm.engine import CriticalPathCalculator, annotate_nodes
from .cpm.models import CriticalPathResult, RenderItem, RenderModel, TaskNode, TimelineBounds
from .cpm.network import DependencyGraph
from .cpm.normalizer import Clock, NormalizationResult, TaskNormalizer
from .cpm.timeline import day_markers, map_position, resolve_bounds

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Schedule:
    """All derived data for one snapshot."""

    nodes: tuple[TaskNode, ...]
    graph: DependencyGraph
    critical: CriticalPathResult
    bounds: TimelineBounds
    render_model: RenderModel
    normalization: NormalizationResult

    @property
    def diagnostics(self) -> tuple:
        return self.render_model.diagnostics

    def get_driving_path(self, task_id: int) -> list[int]:
        """Chain of task IDs that sets task_id's longest chain."""
        return CriticalPathCalculator(self.graph).driving_path(task_id, self.critical)


def compute_schedule(records: Iterable[Mapping[str, Any]], clock: Optional[Clock] = None,
                     normalizer: TaskNormalizer = None) -> Schedule:
    """
    Compute everything derived from a task snapshot.

    Args:
        records: Raw task records from the task service
        clock: Current-time source for default start dates and empty timelines
        normalizer: Preconfigured normalizer (default built from settings and clock)

    Returns:
        Schedule with nodes, graph, critical path, bounds and render model
    """
    if normalizer is None:
        normalizer = TaskNormalizer(clock=clock)

    normalization = normalizer.normalize(records)
    graph = DependencyGraph(normalization.nodes)
    critical = CriticalPathCalculator(graph).run()
    nodes = tuple(annotate_nodes(normalization.nodes, critical))
    bounds = resolve_bounds(nodes, clock=clock)

    items = []
    for node in nodes:
        position = map_position(node, bounds)
        items.append(RenderItem(
            task_id=node.id,
            left_fraction=position.left_fraction,
            width_fraction=position.width_fraction,
            is_critical_path=node.is_critical_path,
            is_milestone=node.is_milestone,
            progress_percent=node.progress_percent,
            title=node.title,
            status=node.status,
            priority=node.priority,
            start_date=node.start_date,
            end_date=node.end_date,
        ))

    diagnostics = (*normalization.errors, *normalization.warnings, *critical.warnings)
    render_model = RenderModel(
        items=tuple(items),
        bounds=bounds,
        day_markers=tuple(day_markers(bounds)),
        critical_ids=critical.critical_ids,
        diagnostics=diagnostics,
    )

    logger.debug("Computed schedule: %d tasks, %d critical, window %s - %s",
                 len(nodes), len(critical.critical_ids), bounds.start, bounds.end)

    return Schedule(
        nodes=nodes,
        graph=DependencyGraph(nodes),
        critical=critical,
        bounds=bounds,
        render_model=render_model,
        normalization=normalization,
    )


def build_render_model(records: Iterable[Mapping[str, Any]],
                       clock: Optional[Clock] = None) -> RenderModel:
    """Compute only the render model for a snapshot."""
    return compute_schedule(records, clock=clock).render_model
