#!/usr/bin/env python3
"""
Critical path report for a task snapshot.

Loads a CSV/JSON task export, computes the critical path and timeline
layout, prints a report, and optionally dry-runs a drag-reschedule or
writes the render model to CSV.
"""

import argparse
import sys
from datetime import date
from pathlib import Path

from .analysis.critical_path import filter_render_items, print_critical_path_report
from .analysis.reflow import DragReflowCoordinator
from .config.settings import settings
from .data_loader import load_snapshot, render_model_to_dataframe
from .pipeline import compute_schedule
from .schemas import parse_day
from .utils.logger import configure_logging

logger = configure_logging('gantt_engine')


def _parse_proposal(value: str) -> tuple[int, date]:
    try:
        task_id, start = value.split(':', 1)
        return int(task_id), parse_day(start)
    except ValueError as e:
        raise argparse.ArgumentTypeError(
            f"expected TASK_ID:YYYY-MM-DD, got {value!r}"
        ) from e


def _parse_today(value: str) -> date:
    try:
        return parse_day(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid date {value!r}") from e


def main(argv: list[str] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='Critical path and timeline report for a task snapshot',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  gantt-engine tasks.csv                        # Report on a snapshot
  gantt-engine tasks.csv --critical-only        # Only critical path tasks
  gantt-engine tasks.json --propose 4:2025-03-12  # Validate a move
  gantt-engine tasks.csv --output layout.csv    # Save the render model
        """
    )

    parser.add_argument('snapshot', type=str,
                        help='Task export (.csv or .json)')
    parser.add_argument('--today', type=_parse_today, default=None,
                        help='Date to treat as today (default: system date)')
    parser.add_argument('--priority', type=str, default=None,
                        choices=['low', 'medium', 'high', 'critical'],
                        help='Only show tasks with this priority')
    parser.add_argument('--status', type=str, default=None,
                        choices=['todo', 'in_progress', 'review', 'completed', 'blocked'],
                        help='Only show tasks with this status')
    parser.add_argument('--critical-only', action='store_true',
                        help='Only show critical path tasks')
    parser.add_argument('--require-dates', action='store_true',
                        help='Skip tasks without both a start and end date')
    parser.add_argument('--propose', type=_parse_proposal, action='append', default=[],
                        metavar='ID:DATE',
                        help='Validate moving a task to a new start date (repeatable)')
    parser.add_argument('--output', '-o', type=str, default=None,
                        help='Write the render model to this CSV file')
    parser.add_argument('--quiet', '-q', action='store_true',
                        help='Minimal output')

    args = parser.parse_args(argv)

    problems = settings.validate_required_settings()
    if problems:
        for problem in problems:
            logger.error(problem)
        return 2

    clock = (lambda: args.today) if args.today else None

    try:
        records = load_snapshot(args.snapshot, require_dates=args.require_dates)
    except (OSError, ValueError) as e:
        logger.error("Could not load snapshot %s: %s", args.snapshot, e)
        return 2

    schedule = compute_schedule(records, clock=clock)

    if not args.quiet:
        items = filter_render_items(
            schedule.render_model,
            priority=args.priority,
            status=args.status,
            critical_only=args.critical_only,
        )
        print_critical_path_report(schedule, items=items, clock=clock)

    exit_code = 0
    if args.propose:
        # Dry run: requests are printed, never persisted
        coordinator = DragReflowCoordinator(
            schedule, sink=lambda request: print(f"[REQUEST] {request.task_id}: {request.to_update()}")
        )
        for task_id, new_start in args.propose:
            outcome = coordinator.propose(task_id, new_start)
            if not outcome.accepted:
                print(f"[REJECTED] {task_id}: {outcome.message}")
                exit_code = 1

    if args.output:
        output_path = Path(args.output)
        render_model_to_dataframe(schedule.render_model).to_csv(output_path, index=False)
        print(f"Render model saved to: {output_path}")

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
