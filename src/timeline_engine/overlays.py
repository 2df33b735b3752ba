from __future__ import annotations

import datetime as dt
from typing import AbstractSet

from .dates import coerce_date, today as _today
from .item_models import ItemId
from .position import PositionMapper


def today_position(mapper: PositionMapper, today: dt.date | dt.datetime | None = None) -> float | None:
    """
    Coordinate of the current date, or None when it lies outside the range.

    The comparison is inclusive and done on dates only, so the indicator does
    not depend on the time of day.
    """

    day = coerce_date(today) or _today()
    if not mapper.time_range.contains(day):
        return None
    return mapper.position(day)


def is_critical(critical_ids: AbstractSet[ItemId], item_id: ItemId) -> bool:
    """Membership in an externally computed critical-path id set."""
    return item_id in critical_ids
