"""
Data Loader for task snapshots.

Reads task exports (CSV or JSON) into raw records for the normalizer and
writes render models back out as tables.
"""

import json
from pathlib import Path
from typing import Any, Union

import pandas as pd

from .cpm.models import RenderModel
from .schemas import RenderRow, is_missing


def snapshot_from_dataframe(df: pd.DataFrame, require_dates: bool = False) -> list[dict[str, Any]]:
    """
    Convert a task table into raw snapshot records.

    Args:
        df: Table with id, title, status, priority, start_date, end_date
            and dependency_id columns (any may be absent)
        require_dates: Drop tasks missing a start or end date

    Returns:
        List of record dicts, NA values replaced by None
    """
    records = []
    for row in df.to_dict('records'):
        record = {key: (None if is_missing(value) else value) for key, value in row.items()}
        if require_dates and (record.get('start_date') is None or record.get('end_date') is None):
            continue
        records.append(record)
    return records


def load_snapshot(path: Union[str, Path], require_dates: bool = False) -> list[dict[str, Any]]:
    """
    Load a task snapshot from a CSV or JSON export.

    JSON files may hold either a list of task objects or an object with a
    'tasks' list.

    Args:
        path: File to read
        require_dates: Drop tasks missing a start or end date

    Returns:
        List of raw task records
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == '.csv':
        # Keep ids as nullable integers so blanks don't turn them into floats
        df = pd.read_csv(path, dtype={'id': 'Int64', 'dependency_id': 'Int64'})
    elif suffix == '.json':
        with open(path, encoding='utf-8') as f:
            data = json.load(f)
        if isinstance(data, dict):
            data = data.get('tasks', [])
        df = pd.DataFrame(data)
    else:
        raise ValueError(f"Unsupported snapshot format: {path.suffix or path.name}")

    return snapshot_from_dataframe(df, require_dates=require_dates)


def render_model_to_dataframe(model: RenderModel) -> pd.DataFrame:
    """Convert a render model into a table with RenderRow columns."""
    rows = []
    for item in model.items:
        rows.append(RenderRow(
            task_id=item.task_id,
            title=item.title,
            status=item.status.value,
            priority=item.priority.value,
            start_date=item.start_date.isoformat() if item.start_date else None,
            end_date=item.end_date.isoformat() if item.end_date else None,
            left_fraction=item.left_fraction,
            width_fraction=item.width_fraction,
            progress_percent=item.progress_percent,
            is_milestone=item.is_milestone,
            is_critical_path=item.is_critical_path,
        ).model_dump())
    return pd.DataFrame(rows, columns=list(RenderRow.model_fields))
