"""Unit tests for the task record normalizer."""
import pytest
from datetime import date, datetime

import pandas as pd

from gantt_engine.cpm.errors import CyclicDependencyWarning, InvalidTaskError, InvertedDateWarning
from gantt_engine.cpm.models import TaskPriority, TaskStatus
from gantt_engine.cpm.normalizer import TaskNormalizer, is_milestone_title, today_from
from gantt_engine.schemas import TaskRecord


class TestDates:
    """Test default and repaired dates."""

    def test_missing_start_uses_clock(self, fixed_clock):
        """Missing start date defaults to the injected clock."""
        result = TaskNormalizer(clock=fixed_clock).normalize([{'id': 1, 'title': 'x'}])
        node = result.nodes[0]
        assert node.start_date == date(2025, 2, 1)
        assert node.end_date == date(2025, 2, 8)
        assert node.duration_days == 7

    def test_clock_returning_datetime(self):
        """A datetime clock is truncated to its calendar day."""
        clock = lambda: datetime(2025, 5, 4, 18, 30)
        result = TaskNormalizer(clock=clock).normalize([{'id': 1}])
        assert result.nodes[0].start_date == date(2025, 5, 4)

    def test_clock_not_called_when_dates_present(self):
        """The clock is only read for records without a start date."""
        def clock():
            raise AssertionError("clock should not be read")

        result = TaskNormalizer(clock=clock).normalize(
            [{'id': 1, 'start_date': '2025-01-01', 'end_date': '2025-01-02'}]
        )
        assert len(result.nodes) == 1

    def test_missing_end_defaults_silently(self):
        """Missing end date becomes start + 7 days without a warning."""
        result = TaskNormalizer().normalize([{'id': 1, 'start_date': '2025-01-01'}])
        assert result.nodes[0].end_date == date(2025, 1, 8)
        assert result.warnings == []

    def test_inverted_end_is_repaired(self):
        """End before start is repaired and reported once."""
        result = TaskNormalizer().normalize(
            [{'id': 5, 'start_date': '2025-01-10', 'end_date': '2025-01-02'}]
        )
        node = result.nodes[0]
        assert node.end_date == date(2025, 1, 17)
        assert len(result.warnings) == 1
        assert isinstance(result.warnings[0], InvertedDateWarning)
        assert result.warnings[0].task_id == 5
        assert result.errors == []

    def test_same_day_is_not_inverted(self):
        """Start equal to end is a valid zero-length task."""
        result = TaskNormalizer().normalize(
            [{'id': 1, 'start_date': '2025-01-10', 'end_date': '2025-01-10'}]
        )
        assert result.nodes[0].duration_days == 0
        assert result.warnings == []

    def test_timestamps_and_date_objects(self):
        """Datetime strings, Timestamps and date objects are all accepted."""
        result = TaskNormalizer().normalize([
            {'id': 1, 'start_date': '2025-01-01T09:30:00', 'end_date': pd.Timestamp('2025-01-03 17:00')},
            {'id': 2, 'start_date': date(2025, 1, 1), 'end_date': datetime(2025, 1, 4, 8)},
        ])
        assert [n.duration_days for n in result.nodes] == [2, 3]

    def test_camel_case_fields(self):
        """camelCase field names are accepted."""
        result = TaskNormalizer().normalize([
            {'id': 1, 'startDate': '2025-01-01', 'endDate': '2025-01-04'},
            {'id': 2, 'startDate': '2025-01-04', 'endDate': '2025-01-05', 'dependencyId': 1},
        ])
        assert result.nodes[0].duration_days == 3
        assert result.nodes[1].predecessor_ids == frozenset({1})


class TestDerivedFields:
    """Test progress, milestone and predecessor derivation."""

    @pytest.mark.parametrize("status,progress", [
        ('completed', 100),
        ('in_progress', 50),
        ('todo', 0),
        ('review', 0),
        ('blocked', 0),
        (None, 0),
    ])
    def test_progress_from_status(self, status, progress):
        """Progress follows the fixed status mapping."""
        result = TaskNormalizer().normalize([{'id': 1, 'status': status, 'start_date': '2025-01-01'}])
        assert result.nodes[0].progress_percent == progress

    def test_defaults_for_status_and_priority(self):
        """Missing status and priority fall back to todo / medium."""
        node = TaskNormalizer().normalize([{'id': 1, 'start_date': '2025-01-01'}]).nodes[0]
        assert node.status == TaskStatus.TODO
        assert node.priority == TaskPriority.MEDIUM
        assert node.title == ''

    @pytest.mark.parametrize("title,expected", [
        ('Project Milestone 1', True),
        ('Final INSPECTION', True),
        ('Steel delivery', True),
        ('Pour concrete', False),
        ('', False),
    ])
    def test_milestone_from_title(self, title, expected):
        """Milestones are detected from title keywords, case-insensitively."""
        assert is_milestone_title(title) is expected

    def test_custom_milestone_keywords(self):
        """Keyword list can be overridden."""
        normalizer = TaskNormalizer(milestone_keywords=['handover'])
        nodes = normalizer.normalize([
            {'id': 1, 'title': 'Handover', 'start_date': '2025-01-01'},
            {'id': 2, 'title': 'Delivery', 'start_date': '2025-01-01'},
        ]).nodes
        assert [n.is_milestone for n in nodes] == [True, False]

    def test_empty_milestone_keywords(self):
        """An empty keyword list turns milestone detection off."""
        nodes = TaskNormalizer(milestone_keywords=[]).normalize([
            {'id': 1, 'title': 'Final inspection', 'start_date': '2025-01-01'},
        ]).nodes
        assert nodes[0].is_milestone is False

    def test_predecessor_from_dependency_id(self):
        """dependency_id becomes the single predecessor."""
        nodes = TaskNormalizer().normalize([
            {'id': 1, 'start_date': '2025-01-01'},
            {'id': 2, 'start_date': '2025-01-01', 'dependency_id': 1},
        ]).nodes
        assert nodes[0].predecessor_ids == frozenset()
        assert nodes[1].predecessor_ids == frozenset({1})

    def test_self_dependency_dropped(self):
        """A task depending on itself loses that dependency with a warning."""
        result = TaskNormalizer().normalize([{'id': 3, 'start_date': '2025-01-01', 'dependency_id': 3}])
        assert result.nodes[0].predecessor_ids == frozenset()
        assert isinstance(result.warnings[0], CyclicDependencyWarning)

    def test_critical_flag_not_set_by_normalizer(self):
        """Only the calculator decides criticality."""
        node = TaskNormalizer().normalize([{'id': 1, 'start_date': '2025-01-01'}]).nodes[0]
        assert node.is_critical_path is False


class TestInvalidRecords:
    """Test per-record exclusion."""

    def test_missing_id_excluded(self):
        """Records without an id are excluded, the rest survive."""
        result = TaskNormalizer().normalize([
            {'title': 'no id', 'start_date': '2025-01-01'},
            {'id': 2, 'start_date': '2025-01-01'},
        ])
        assert [n.id for n in result.nodes] == [2]
        assert len(result.errors) == 1
        assert isinstance(result.errors[0], InvalidTaskError)
        assert result.errors[0].record_index == 0

    def test_duplicate_id_excludes_later_record(self):
        """The first record with an id wins; later duplicates are excluded."""
        result = TaskNormalizer().normalize([
            {'id': 1, 'title': 'first', 'start_date': '2025-01-01'},
            {'id': 1, 'title': 'second', 'start_date': '2025-01-01'},
            {'id': 2, 'title': 'other', 'start_date': '2025-01-01'},
        ])
        assert [n.title for n in result.nodes] == ['first', 'other']
        assert result.errors[0].task_id == 1
        assert result.errors[0].record_index == 1

    def test_unknown_status_excluded(self):
        """Malformed fields exclude the record."""
        result = TaskNormalizer().normalize([{'id': 1, 'status': 'archived'}])
        assert result.nodes == []
        assert 'status' in str(result.errors[0])

    def test_nan_values_are_missing(self):
        """NaN values from tabular input count as missing."""
        result = TaskNormalizer().normalize([
            {'id': 1, 'title': float('nan'), 'start_date': '2025-01-01',
             'end_date': float('nan'), 'dependency_id': float('nan')},
        ])
        node = result.nodes[0]
        assert node.title == ''
        assert node.end_date == date(2025, 1, 8)
        assert node.predecessor_ids == frozenset()

    def test_accepts_task_record_instances(self):
        """Already-validated TaskRecord objects pass straight through."""
        record = TaskRecord(id=4, title='x', start_date=date(2025, 1, 1))
        result = TaskNormalizer().normalize([record])
        assert result.nodes[0].id == 4


class TestTodayFrom:
    """Test clock reading."""

    def test_default_is_system_date(self):
        """Without a clock the system date is used."""
        assert today_from() == date.today()
