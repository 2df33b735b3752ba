import datetime as dt

from timeline_engine.bars import build_bars
from timeline_engine.dependencies import route_edges
from timeline_engine.item_models import TemporalItem, TimeRange
from timeline_engine.position import PositionMapper

MAPPER = PositionMapper(TimeRange(start=dt.date(2024, 1, 1), end=dt.date(2024, 1, 21)), zoom=1.0, base_width=2000)


def _item(item_id, start, end, depends_on=()):
    return TemporalItem(id=item_id, start_date=start, end_date=end, dependencies=tuple(depends_on))


def _route(items, **kwargs):
    return route_edges(items, build_bars(items, MAPPER), **kwargs)


def test_edge_runs_from_prerequisite_end_to_dependent_start():
    items = [
        _item("A", dt.date(2024, 1, 1), dt.date(2024, 1, 5)),
        _item("B", dt.date(2024, 1, 10), dt.date(2024, 1, 12), depends_on=["A"]),
    ]

    edges = _route(items, row_height=40.0)

    assert len(edges) == 1
    edge = edges[0]
    assert (edge.from_id, edge.to_id) == ("A", "B")
    assert edge.start_x == 500
    assert edge.end_x == 900
    assert edge.y == 60
    assert edge.length > 0


def test_overlapping_dependency_is_suppressed():
    items = [
        _item("A", dt.date(2024, 1, 1), dt.date(2024, 1, 10)),
        _item("B", dt.date(2024, 1, 5), dt.date(2024, 1, 12), depends_on=["A"]),
    ]

    assert _route(items) == []


def test_back_to_back_dependency_has_no_slack_and_is_suppressed():
    items = [
        _item("A", dt.date(2024, 1, 1), dt.date(2024, 1, 5)),
        _item("B", dt.date(2024, 1, 6), dt.date(2024, 1, 8), depends_on=["A"]),
    ]

    assert _route(items) == []


def test_missing_or_dateless_prerequisites_are_skipped():
    items = [
        _item("A", None, dt.date(2024, 1, 3)),
        _item("B", dt.date(2024, 1, 10), dt.date(2024, 1, 12), depends_on=["A", "ghost"]),
        _item("C", None, None, depends_on=["B"]),
    ]

    assert _route(items) == []


def test_flag_disables_all_edges():
    items = [
        _item("A", dt.date(2024, 1, 1), dt.date(2024, 1, 5)),
        _item("B", dt.date(2024, 1, 10), dt.date(2024, 1, 12), depends_on=["A"]),
    ]

    assert _route(items, show_dependencies=False) == []


def test_edges_follow_item_and_dependency_order():
    items = [
        _item(1, dt.date(2024, 1, 1), dt.date(2024, 1, 2)),
        _item(2, dt.date(2024, 1, 2), dt.date(2024, 1, 3)),
        _item(3, dt.date(2024, 1, 10), dt.date(2024, 1, 11), depends_on=[2, 1]),
    ]

    edges = _route(items)

    assert [(edge.from_id, edge.to_id) for edge in edges] == [(2, 3), (1, 3)]
    assert all(edge.start_x < edge.end_x for edge in edges)
