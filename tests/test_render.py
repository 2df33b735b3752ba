import datetime as dt

from timeline_engine.item_models import TemporalItem
from timeline_engine.layout import GANTT_CONFIG, ROADMAP_CONFIG, compute_layout
from timeline_engine.render_timeline import render_timeline


def _items():
    return [
        TemporalItem(id=1, title="Design", status="DONE", start_date=dt.date(2024, 1, 1), end_date=dt.date(2024, 1, 5)),
        TemporalItem(id=2, title="Build", status="IN_PROGRESS", start_date=dt.date(2024, 1, 10),
                     end_date=dt.date(2024, 1, 25), dependencies=(1,)),
        TemporalItem(id=3, title="Docs"),
    ]


def test_renderer_produces_svg(tmp_path):
    items = _items()
    layout = compute_layout(items, GANTT_CONFIG, critical_ids={1, 2}, today=dt.date(2024, 1, 12))

    out_file = tmp_path / "chart.svg"
    render_timeline(layout, items, out_path=str(out_file), title="Timeline")

    assert out_file.exists()
    text = out_file.read_text(encoding="utf-8")
    assert text.lstrip().startswith("<?xml")
    assert "<svg" in text


def test_renderer_handles_empty_roadmap(tmp_path):
    layout = compute_layout([], ROADMAP_CONFIG, today=dt.date(2024, 6, 1))

    out_file = tmp_path / "nested" / "empty.svg"
    render_timeline(layout, [], out_path=str(out_file))

    assert out_file.stat().st_size > 0
