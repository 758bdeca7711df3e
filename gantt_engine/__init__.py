"""
Gantt Critical Path Engine.

Builds the dependency graph behind a project timeline, flags the longest
dependency chain, lays tasks out on a shared calendar window and validates
drag-reschedules against precedence constraints.
"""

from .cpm import (
    TaskNode,
    TaskStatus,
    TaskPriority,
    TimelineBounds,
    PositionInterval,
    DayMarker,
    CriticalPathResult,
    RenderItem,
    RenderModel,
    RescheduleRequest,
    RescheduleRejected,
    RejectionReason,
    InvalidTaskError,
    InvertedDateWarning,
    CyclicDependencyWarning,
    TaskNormalizer,
    DependencyGraph,
    CriticalPathCalculator,
    resolve_bounds,
    map_position,
    day_markers,
)
from .pipeline import Schedule, compute_schedule, build_render_model
from .analysis import DragReflowCoordinator, ReflowState
from .data_loader import load_snapshot, snapshot_from_dataframe, render_model_to_dataframe

__all__ = [
    # Models
    'TaskNode',
    'TaskStatus',
    'TaskPriority',
    'TimelineBounds',
    'PositionInterval',
    'DayMarker',
    'CriticalPathResult',
    'RenderItem',
    'RenderModel',
    'RescheduleRequest',
    'RescheduleRejected',
    'RejectionReason',
    # Diagnostics
    'InvalidTaskError',
    'InvertedDateWarning',
    'CyclicDependencyWarning',
    # Core
    'TaskNormalizer',
    'DependencyGraph',
    'CriticalPathCalculator',
    'resolve_bounds',
    'map_position',
    'day_markers',
    'Schedule',
    'compute_schedule',
    'build_render_model',
    'DragReflowCoordinator',
    'ReflowState',
    # Loading
    'load_snapshot',
    'snapshot_from_dataframe',
    'render_model_to_dataframe',
]
