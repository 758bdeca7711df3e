"""Unit tests for the snapshot pipeline."""
from datetime import date

from gantt_engine.config.settings import Settings
from gantt_engine.cpm.errors import CyclicDependencyWarning, InvalidTaskError, InvertedDateWarning
from gantt_engine.pipeline import build_render_model, compute_schedule


class TestRenderModel:
    """Test the assembled render model."""

    def test_reference_scenario(self, chain_records, fixed_clock):
        """Only task 3 is critical; rows keep snapshot order."""
        model = build_render_model(chain_records, clock=fixed_clock)
        assert [item.task_id for item in model.items] == [1, 2, 3]
        assert model.critical_ids == frozenset({3})
        assert [item.is_critical_path for item in model.items] == [False, False, True]
        assert [item.progress_percent for item in model.items] == [100, 50, 0]
        assert [item.task_id for item in model.get_critical_items()] == [3]

    def test_bounds_and_markers(self, chain_records):
        """Bounds pad the task dates and markers cover them."""
        model = build_render_model(chain_records)
        assert model.bounds.start == date(2024, 12, 25)
        assert model.bounds.end == date(2025, 1, 27)
        assert len(model.day_markers) == model.bounds.total_days + 1

    def test_positions_within_window(self, chain_records):
        """Every bar fits inside the window."""
        model = build_render_model(chain_records)
        for item in model.items:
            assert item.left_fraction + item.width_fraction <= 1.0 + 1e-9
            assert item.width_fraction > 0

    def test_milestones_flagged(self, fixed_clock):
        """Milestone titles carry through to render rows."""
        model = build_render_model([
            {'id': 1, 'title': 'Final inspection', 'start_date': '2025-01-10', 'end_date': '2025-01-10'},
        ], clock=fixed_clock)
        assert model.items[0].is_milestone is True

    def test_idempotent(self, chain_records, fixed_clock):
        """Same input, same render model."""
        first = build_render_model(chain_records, clock=fixed_clock)
        second = build_render_model(chain_records, clock=fixed_clock)
        assert first == second

    def test_input_not_mutated(self, chain_records):
        """Raw records are left as supplied."""
        before = [dict(r) for r in chain_records]
        build_render_model(chain_records)
        assert chain_records == before


class TestEdgeCases:
    """Test empty, cyclic and invalid input."""

    def test_empty_snapshot(self, fixed_clock):
        """No tasks: a two-week window around today and no rows."""
        model = build_render_model([], clock=fixed_clock)
        assert model.items == ()
        assert model.bounds.start == date(2025, 1, 25)
        assert model.bounds.end == date(2025, 2, 8)
        assert len(model.day_markers) == 15

    def test_cyclic_snapshot(self, cyclic_records):
        """Cycles produce a model plus a diagnostic."""
        schedule = compute_schedule(cyclic_records)
        assert len(schedule.render_model.items) == 2
        assert any(isinstance(d, CyclicDependencyWarning) for d in schedule.diagnostics)

    def test_diagnostics_collected(self):
        """Invalid and repaired records are reported, not raised."""
        schedule = compute_schedule([
            {'title': 'no id'},
            {'id': 1, 'start_date': '2025-01-10', 'end_date': '2025-01-01'},
        ])
        kinds = {type(d) for d in schedule.diagnostics}
        assert kinds == {InvalidTaskError, InvertedDateWarning}
        assert [item.task_id for item in schedule.render_model.items] == [1]

    def test_zero_padding_setting(self, monkeypatch, fixed_clock):
        """Same-day snapshots still lay out when padding is configured to 0."""
        monkeypatch.setattr(Settings, 'TIMELINE_PADDING_DAYS', 0)
        model = build_render_model([
            {'id': 1, 'title': 'Walkthrough', 'start_date': '2025-01-10', 'end_date': '2025-01-10'},
            {'id': 2, 'title': 'Punch list', 'start_date': '2025-01-10', 'end_date': '2025-01-10'},
        ], clock=fixed_clock)
        assert model.bounds.total_days == 2
        assert all(item.width_fraction > 0 for item in model.items)

    def test_graph_nodes_are_annotated(self, chain_records):
        """The schedule's graph carries critical flags for downstream users."""
        schedule = compute_schedule(chain_records)
        assert schedule.graph.get_task(3).is_critical_path is True
        assert schedule.get_driving_path(2) == [1, 2]
