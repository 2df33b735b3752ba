from __future__ import annotations

import datetime as dt
from typing import Callable, Iterator

from dateutil.relativedelta import MO, relativedelta
from dateutil.rrule import MONTHLY, WEEKLY, rrule

from .dates import days_between
from .item_models import Granularity, Marker, TimeRange

BIWEEK_MAX_SPAN_DAYS = 62
EVERY_MONTH_MAX_SPAN = 6
EVERY_OTHER_MONTH_MAX_SPAN = 12
EVERY_OTHER_MONTH = (1, 3, 5, 7, 9, 11)
QUARTER_MONTHS = (1, 4, 7, 10)
DEFAULT_MIN_SEPARATION_PCT = 3.0

CandidateFn = Callable[[TimeRange], Iterator[dt.date]]
LabelFn = Callable[[dt.date, TimeRange], str]


def generate_markers(
    time_range: TimeRange,
    granularity: Granularity = "week",
    min_separation_pct: float = DEFAULT_MIN_SEPARATION_PCT,
) -> list[Marker]:
    """
    Produce ascending axis markers for `time_range` under the given granularity.

    Markers at the exact range start and end are always present. Interior
    candidates closer than `min_separation_pct` (percent of total width) to the
    previous survivor are dropped. The fallback window only gets its two bounds.
    """

    candidates_fn, label_fn = _STRATEGIES.get(granularity, _STRATEGIES["week"])
    total_days = max(1, days_between(time_range.start, time_range.end))

    def marker(day: dt.date) -> Marker:
        return Marker(date=day, label=label_fn(day, time_range), position=days_between(time_range.start, day) / total_days)

    first = marker(time_range.start)
    last = marker(time_range.end)
    if time_range.is_fallback:
        return [first, last]

    interior = sorted(
        {day for day in candidates_fn(time_range) if time_range.start < day < time_range.end}
    )
    return _dedupe([first, *(marker(day) for day in interior), last], min_separation_pct / 100.0)


def _dedupe(markers: list[Marker], threshold: float) -> list[Marker]:
    first, *interior, last = markers
    kept = [first]
    for candidate in interior:
        if candidate.position - kept[-1].position >= threshold:
            kept.append(candidate)
    if len(kept) > 1 and last.position - kept[-1].position < threshold:
        kept.pop()
    kept.append(last)
    return kept


def _month_starts(time_range: TimeRange, months: tuple[int, ...] = tuple(range(1, 13))) -> Iterator[dt.date]:
    rule = rrule(MONTHLY, bymonthday=1, bymonth=months, dtstart=time_range.start.replace(day=1), until=time_range.end)
    return (occurrence.date() for occurrence in rule)


def span_months(time_range: TimeRange) -> int:
    return (time_range.end.year - time_range.start.year) * 12 + time_range.end.month - time_range.start.month


def _week_candidates(time_range: TimeRange) -> Iterator[dt.date]:
    return (occurrence.date() for occurrence in rrule(WEEKLY, dtstart=time_range.start, until=time_range.end))


def _week_label(day: dt.date, time_range: TimeRange) -> str:
    return f"W{day.isocalendar()[1]:02d} {day.isoformat()}"


def _is_biweekly(time_range: TimeRange) -> bool:
    return days_between(time_range.start, time_range.end) <= BIWEEK_MAX_SPAN_DAYS


def _month_or_biweek_candidates(time_range: TimeRange) -> Iterator[dt.date]:
    if not _is_biweekly(time_range):
        return _month_starts(time_range)
    first_monday = time_range.start + relativedelta(weekday=MO)
    rule = rrule(WEEKLY, interval=2, dtstart=first_monday, until=time_range.end)
    return (occurrence.date() for occurrence in rule)


def _month_or_biweek_label(day: dt.date, time_range: TimeRange) -> str:
    if _is_biweekly(time_range):
        return day.isoformat()
    return f"{day.year}-{day.month:02d}"


def _adaptive_candidates(time_range: TimeRange) -> Iterator[dt.date]:
    months = span_months(time_range)
    if months <= EVERY_MONTH_MAX_SPAN:
        return _month_starts(time_range)
    if months <= EVERY_OTHER_MONTH_MAX_SPAN:
        return _month_starts(time_range, EVERY_OTHER_MONTH)
    return _month_starts(time_range, QUARTER_MONTHS)


def _adaptive_label(day: dt.date, time_range: TimeRange) -> str:
    if span_months(time_range) > EVERY_OTHER_MONTH_MAX_SPAN:
        return f"Q{(day.month - 1) // 3 + 1} {day.year}"
    return f"{day.year}-{day.month:02d}"


_STRATEGIES: dict[str, tuple[CandidateFn, LabelFn]] = {
    "week": (_week_candidates, _week_label),
    "month-or-biweek": (_month_or_biweek_candidates, _month_or_biweek_label),
    "adaptive-year": (_adaptive_candidates, _adaptive_label),
}
