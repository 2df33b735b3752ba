from __future__ import annotations

import dataclasses
import datetime as dt
import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

from .bars import MIN_BAR_WIDTH, build_bars
from .dependencies import route_edges
from .item_models import (
    BarGeometry,
    DependencyEdge,
    Granularity,
    ItemId,
    Marker,
    SprintWindow,
    TemporalItem,
    TimeRange,
)
from .markers import DEFAULT_MIN_SEPARATION_PCT, generate_markers
from .overlays import is_critical, today_position
from .position import PositionMapper
from .time_range import GANTT_PADDING_DAYS, ROADMAP_PADDING_DAYS, resolve_time_range

logger = logging.getLogger(__name__)

ZOOM_STEP = 0.25
ZOOM_MIN = 0.5
ZOOM_MAX = 3.0


@dataclass(frozen=True)
class LayoutConfig:
    """View-owned parameters for a layout pass."""

    base_width: float = 1400.0
    zoom: float = 1.0
    granularity: Granularity = "week"
    padding_days: int = GANTT_PADDING_DAYS
    min_separation_pct: float = DEFAULT_MIN_SEPARATION_PCT
    min_bar_width: float = MIN_BAR_WIDTH
    row_height: float = 40.0
    show_dependencies: bool = True
    show_critical_path: bool = True

    def with_overrides(self, overrides: Mapping[str, Any]) -> "LayoutConfig":
        """Copy with known fields replaced; unknown keys and None values are ignored."""
        names = {f.name for f in dataclasses.fields(self)}
        changes = {key: value for key, value in overrides.items() if key in names and value is not None}
        return dataclasses.replace(self, **changes)


GANTT_CONFIG = LayoutConfig()
ROADMAP_CONFIG = LayoutConfig(granularity="adaptive-year", padding_days=ROADMAP_PADDING_DAYS)


@dataclass(frozen=True)
class TimelineLayout:
    """Render geometry for one pass; rebuilt from scratch on every change."""

    time_range: TimeRange
    mapper: PositionMapper
    markers: list[Marker]
    bars: dict[ItemId, BarGeometry]
    dateless_ids: list[ItemId]
    edges: list[DependencyEdge]
    today_x: float | None
    rows: list[ItemId]
    row_height: float = 40.0
    critical_ids: frozenset[ItemId] = field(default_factory=frozenset)

    def is_critical(self, item_id: ItemId) -> bool:
        return is_critical(self.critical_ids, item_id)


def compute_layout(
    items: Iterable[TemporalItem],
    config: LayoutConfig = GANTT_CONFIG,
    *,
    critical_ids: Iterable[ItemId] = (),
    sprints: Iterable[SprintWindow] = (),
    today: dt.date | None = None,
    time_range: TimeRange | None = None,
    min_date: Any = None,
    max_date: Any = None,
) -> TimelineLayout:
    """
    Run the full pipeline: range, mapper, markers, bars, edges, overlays.

    Pass the previous `time_range` when only zoom or granularity changed; the
    resolver is then skipped.
    """

    item_list = list(items)
    if time_range is None:
        time_range = resolve_time_range(
            item_list,
            padding_days=config.padding_days,
            start=min_date,
            end=max_date,
            sprints=sprints,
            today=today,
        )

    mapper = PositionMapper(time_range=time_range, zoom=config.zoom, base_width=config.base_width)
    markers = generate_markers(time_range, config.granularity, config.min_separation_pct)
    bars = build_bars(item_list, mapper, config.min_bar_width)
    edges = route_edges(item_list, bars, config.show_dependencies, config.row_height)
    flagged = frozenset(critical_ids) if config.show_critical_path else frozenset()

    layout = TimelineLayout(
        time_range=time_range,
        mapper=mapper,
        markers=markers,
        bars=bars,
        dateless_ids=[item.id for item in item_list if item.id not in bars],
        edges=edges,
        today_x=today_position(mapper, today),
        rows=[item.id for item in item_list],
        row_height=config.row_height,
        critical_ids=flagged,
    )
    logger.debug(
        "Layout %s..%s zoom=%s: %d bars, %d dateless, %d markers, %d edges",
        time_range.start,
        time_range.end,
        config.zoom,
        len(bars),
        len(layout.dateless_ids),
        len(markers),
        len(edges),
    )
    return layout


def step_zoom(current: float, direction: int, step: float = ZOOM_STEP) -> float:
    """Move zoom one discrete step in `direction` (+1 in, -1 out), clamped to the zoom domain."""
    if direction == 0:
        return min(ZOOM_MAX, max(ZOOM_MIN, current))
    target = current + step * (1 if direction > 0 else -1)
    return min(ZOOM_MAX, max(ZOOM_MIN, round(target, 6)))
