import datetime as dt

import pytest

from timeline_engine.item_models import TemporalItem
from timeline_engine.layout import GANTT_CONFIG, ROADMAP_CONFIG, LayoutConfig, compute_layout, step_zoom


def _items():
    return [
        TemporalItem(id=1, title="Design", start_date=dt.date(2024, 1, 1), end_date=dt.date(2024, 1, 5)),
        TemporalItem(id=2, title="Build", start_date=dt.date(2024, 1, 8), end_date=dt.date(2024, 1, 20), dependencies=(1,)),
        TemporalItem(id=3, title="Launch", start_date=dt.date(2024, 1, 22)),
    ]


def test_gantt_defaults_reproduce_reference_geometry():
    items = [TemporalItem(id=1, start_date=dt.date(2024, 1, 1), end_date=dt.date(2024, 1, 5))]

    layout = compute_layout(items, GANTT_CONFIG, today=dt.date(2024, 1, 3))

    assert layout.time_range.start == dt.date(2023, 12, 29)
    assert layout.time_range.end == dt.date(2024, 1, 8)
    assert layout.mapper.day_width == 140
    assert layout.bars[1].left == 420
    assert layout.bars[1].width == 700
    assert layout.today_x == 5 * 140


def test_layout_collects_dateless_rows_edges_and_flags():
    layout = compute_layout(_items(), GANTT_CONFIG, critical_ids={1, 2}, today=dt.date(2030, 1, 1))

    assert layout.rows == [1, 2, 3]
    assert layout.dateless_ids == [3]
    assert [(edge.from_id, edge.to_id) for edge in layout.edges] == [(1, 2)]
    assert layout.edges[0].y == 60
    assert layout.today_x is None
    assert layout.is_critical(1)
    assert not layout.is_critical(3)


def test_critical_flags_can_be_switched_off():
    config = GANTT_CONFIG.with_overrides({"show_critical_path": False})

    layout = compute_layout(_items(), config, critical_ids={1})

    assert not layout.is_critical(1)


def test_zoom_change_reuses_range_and_scales_geometry():
    full = compute_layout(_items(), GANTT_CONFIG, today=dt.date(2024, 1, 10))
    zoomed = compute_layout(
        _items(),
        GANTT_CONFIG.with_overrides({"zoom": 0.5}),
        today=dt.date(2024, 1, 10),
        time_range=full.time_range,
    )

    assert zoomed.time_range == full.time_range
    assert zoomed.markers == full.markers
    for item_id, bar in full.bars.items():
        assert zoomed.bars[item_id].width == pytest.approx(bar.width / 2)
        assert zoomed.bars[item_id].left == pytest.approx(bar.left / 2)
    assert zoomed.today_x == pytest.approx(full.today_x / 2)


def test_empty_collection_yields_only_boundary_markers():
    layout = compute_layout([], ROADMAP_CONFIG, today=dt.date(2024, 6, 1))

    assert layout.time_range.is_fallback
    assert [marker.date for marker in layout.markers] == [dt.date(2024, 6, 1), dt.date(2024, 8, 30)]
    assert layout.bars == {}
    assert layout.edges == []
    assert layout.today_x == 0


def test_roadmap_preset_pads_a_week():
    items = [TemporalItem(id="E1", start_date=dt.date(2024, 3, 1), end_date=dt.date(2024, 9, 30))]

    layout = compute_layout(items, ROADMAP_CONFIG)

    assert layout.time_range.start == dt.date(2024, 2, 23)
    assert layout.time_range.end == dt.date(2024, 10, 7)
    assert all(marker.date.day == 1 for marker in layout.markers[1:-1])


def test_overrides_ignore_unknown_and_missing_values():
    config = LayoutConfig().with_overrides({"zoom": 2.0, "granularity": None, "colour": "red"})

    assert config.zoom == 2.0
    assert config.granularity == "week"


def test_zoom_moves_in_fixed_clamped_steps():
    assert step_zoom(1.0, +1) == 1.25
    assert step_zoom(1.0, -1) == 0.75
    assert step_zoom(3.0, +1) == 3.0
    assert step_zoom(0.5, -1) == 0.5
    assert step_zoom(7.0, 0) == 3.0
