from __future__ import annotations

import datetime as dt
import math
from dataclasses import dataclass

from .dates import days_between
from .item_models import Marker, TimeRange

MIN_ZOOM = 0.1
MIN_BASE_WIDTH = 1.0


@dataclass(frozen=True)
class PositionMapper:
    """
    Map calendar dates to linear coordinates within a resolved range.

    `base_width` is the width of the whole range at zoom 1. Non-positive zoom or
    width fall back to small floors so the mapping stays defined.
    """

    time_range: TimeRange
    zoom: float = 1.0
    base_width: float = 1400.0

    @property
    def total_days(self) -> int:
        return max(1, math.ceil(days_between(self.time_range.start, self.time_range.end)))

    @property
    def total_width(self) -> float:
        zoom = self.zoom if self.zoom > 0 else MIN_ZOOM
        return max(self.base_width, MIN_BASE_WIDTH) * zoom

    @property
    def day_width(self) -> float:
        return self.total_width / self.total_days

    def position(self, day: dt.date | None) -> float:
        """Coordinate of `day`; undefined dates map to 0, dates before the range clamp to 0."""
        if day is None:
            return 0.0
        return max(0, days_between(self.time_range.start, day)) * self.day_width

    def marker_x(self, marker: Marker) -> float:
        return marker.position * self.total_width
