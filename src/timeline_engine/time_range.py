from __future__ import annotations

import datetime as dt
from typing import Any, Iterable

from .dates import coerce_date, today as _today
from .item_models import SprintWindow, TemporalItem, TimeRange

DEFAULT_WINDOW_DAYS = 90
GANTT_PADDING_DAYS = 3
ROADMAP_PADDING_DAYS = 7


def resolve_time_range(
    items: Iterable[TemporalItem],
    padding_days: int = GANTT_PADDING_DAYS,
    start: Any = None,
    end: Any = None,
    sprints: Iterable[SprintWindow] = (),
    today: dt.date | None = None,
) -> TimeRange:
    """
    Derive the visible window from every defined start/end date.

    - Sprint windows (roadmap variant) widen the window like items do.
    - Caller overrides replace the inferred bound on their side and are not padded.
    - Nothing dated: fall back to [today, today + 90 days] around any override;
      only the untouched default window is flagged `is_fallback`.
    - The result always spans at least one day.
    """

    dates: list[dt.date] = []
    for item in items:
        dates.extend(_present(item.start_date, item.end_date))
    for sprint in sprints:
        dates.extend(_present(sprint.start_date, sprint.end_date))

    start_override = coerce_date(start)
    end_override = coerce_date(end)
    pad = dt.timedelta(days=max(0, int(padding_days)))

    if not dates:
        anchor = start_override or (today or _today())
        fallback_end = end_override or anchor + dt.timedelta(days=DEFAULT_WINDOW_DAYS)
        caller_window = start_override is not None or end_override is not None
        return _at_least_one_day(anchor, fallback_end, is_fallback=not caller_window)

    computed_start = start_override or min(dates) - pad
    computed_end = end_override or max(dates) + pad
    return _at_least_one_day(computed_start, computed_end)


def _present(*values: Any) -> list[dt.date]:
    # Items built in code may still carry raw strings; parse leniently.
    return [d for d in (coerce_date(v) for v in values) if d is not None]


def _at_least_one_day(start: dt.date, end: dt.date, is_fallback: bool = False) -> TimeRange:
    if end <= start:
        end = start + dt.timedelta(days=1)
    return TimeRange(start=start, end=end, is_fallback=is_fallback)
