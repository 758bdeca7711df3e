"""
Analysis built on a computed schedule.
"""

from .critical_path import get_schedule_stats, filter_render_items, print_critical_path_report
from .dependencies import available_predecessors
from .reflow import DragReflowCoordinator, ReflowState

__all__ = [
    'get_schedule_stats',
    'filter_render_items',
    'print_critical_path_report',
    'available_predecessors',
    'DragReflowCoordinator',
    'ReflowState',
]
