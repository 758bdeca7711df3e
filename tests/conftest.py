"""Pytest configuration and fixtures."""
import pytest
from datetime import date
from typing import List, Dict, Any


FIXED_TODAY = date(2025, 2, 1)


@pytest.fixture
def fixed_clock():
    """Clock that always reports FIXED_TODAY."""
    return lambda: FIXED_TODAY


@pytest.fixture
def chain_records() -> List[Dict[str, Any]]:
    """Two chained tasks and one long independent task."""
    return [
        {'id': 1, 'title': 'Foundation', 'status': 'completed', 'priority': 'high',
         'start_date': '2025-01-01', 'end_date': '2025-01-05'},
        {'id': 2, 'title': 'Framing', 'status': 'in_progress', 'priority': 'medium',
         'start_date': '2025-01-05', 'end_date': '2025-01-10', 'dependency_id': 1},
        {'id': 3, 'title': 'Permit review', 'status': 'todo', 'priority': 'low',
         'start_date': '2025-01-01', 'end_date': '2025-01-20'},
    ]


@pytest.fixture
def precedence_records() -> List[Dict[str, Any]]:
    """Predecessor P (ends Mar 10) -> dependent D (3 days long)."""
    return [
        {'id': 10, 'title': 'Pour slab', 'status': 'in_progress',
         'start_date': '2025-03-01', 'end_date': '2025-03-10'},
        {'id': 20, 'title': 'Cure slab', 'status': 'todo',
         'start_date': '2025-03-10', 'end_date': '2025-03-13', 'dependency_id': 10},
    ]


@pytest.fixture
def cyclic_records() -> List[Dict[str, Any]]:
    """A depends on B and B depends on A."""
    return [
        {'id': 1, 'title': 'A', 'start_date': '2025-01-01', 'end_date': '2025-01-03',
         'dependency_id': 2},
        {'id': 2, 'title': 'B', 'start_date': '2025-01-02', 'end_date': '2025-01-06',
         'dependency_id': 1},
    ]
