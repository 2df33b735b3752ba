from __future__ import annotations

from typing import Iterable

from .dates import coerce_date, days_between
from .item_models import BarGeometry, ItemId, TemporalItem
from .position import PositionMapper

MIN_BAR_WIDTH = 8.0


def build_bar(item: TemporalItem, mapper: PositionMapper, min_width: float = MIN_BAR_WIDTH) -> BarGeometry | None:
    """
    Compute the bar for an item, or None when either date is missing.

    Duration counts days inclusively and never drops below one day, so an end
    before the start still yields a positive width. The visual floor `min_width`
    does not scale with zoom.
    """

    start = coerce_date(item.start_date)
    end = coerce_date(item.end_date)
    if start is None or end is None:
        return None

    duration = max(1, days_between(start, end) + 1)
    width = max(duration * mapper.day_width, min_width, 1e-6)
    return BarGeometry(left=mapper.position(start), width=width)


def build_bars(
    items: Iterable[TemporalItem], mapper: PositionMapper, min_width: float = MIN_BAR_WIDTH
) -> dict[ItemId, BarGeometry]:
    """Bars keyed by item id; dateless items are simply absent."""
    bars: dict[ItemId, BarGeometry] = {}
    for item in items:
        geometry = build_bar(item, mapper, min_width)
        if geometry is not None:
            bars[item.id] = geometry
    return bars
