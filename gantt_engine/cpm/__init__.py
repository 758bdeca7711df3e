"""
Critical path and timeline layout core.

This module provides:
- Task record normalization into graph nodes
- Dependency graph construction and traversal
- Longest-chain (critical path) calculation, cycle tolerant
- Timeline bounds, bar positions and day markers
"""

from .models import (
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
    ScheduleStats,
)
from .errors import InvalidTaskError, ScheduleWarning, InvertedDateWarning, CyclicDependencyWarning
from .normalizer import TaskNormalizer, NormalizationResult
from .network import DependencyGraph
from .engine import CriticalPathCalculator, calculate_critical_path, annotate_nodes
from .timeline import resolve_bounds, map_position, map_positions, day_markers

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
    'ScheduleStats',
    # Diagnostics
    'InvalidTaskError',
    'ScheduleWarning',
    'InvertedDateWarning',
    'CyclicDependencyWarning',
    # Core
    'TaskNormalizer',
    'NormalizationResult',
    'DependencyGraph',
    'CriticalPathCalculator',
    'calculate_critical_path',
    'annotate_nodes',
    'resolve_bounds',
    'map_position',
    'map_positions',
    'day_markers',
]
