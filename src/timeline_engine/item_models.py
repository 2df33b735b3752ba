from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Hashable, Literal


Granularity = Literal["week", "month-or-biweek", "adaptive-year"]
"""Axis label policies: ISO weeks, month starts (biweekly on short ranges), adaptive month/quarter."""

ItemId = Hashable


@dataclass(frozen=True)
class TemporalItem:
    """Task or epic laid out on the timeline; renders as a bar only when both dates are set."""

    id: ItemId
    title: str = ""
    status: str | None = None
    priority: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    dependencies: tuple[ItemId, ...] = ()

    @property
    def is_dated(self) -> bool:
        """Both dates present; half-dated items are treated as dateless."""
        return self.start_date is not None and self.end_date is not None


@dataclass(frozen=True)
class SprintWindow:
    """Sprint dates supplied alongside roadmap items; only widens the visible window."""

    name: str
    start_date: date | None = None
    end_date: date | None = None


@dataclass(frozen=True)
class TimeRange:
    """Visible window; `is_fallback` marks the default window used when nothing is dated."""

    start: date
    end: date
    is_fallback: bool = False

    @property
    def total_days(self) -> int:
        return max(1, (self.end - self.start).days)

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


@dataclass(frozen=True)
class Marker:
    """Axis label anchor; `position` is the fractional offset in [0, 1] along the range."""

    date: date
    label: str
    position: float


@dataclass(frozen=True)
class BarGeometry:
    left: float
    width: float

    @property
    def right(self) -> float:
        return self.left + self.width


@dataclass(frozen=True)
class DependencyEdge:
    """Horizontal connector from a prerequisite's end to its dependent's start."""

    from_id: ItemId
    to_id: ItemId
    start_x: float
    end_x: float
    y: float

    @property
    def length(self) -> float:
        return self.end_x - self.start_x


@dataclass
class TimelineInput:
    """Everything an input file can provide to a layout pass."""

    name: str = ""
    items: list[TemporalItem] = field(default_factory=list)
    sprints: list[SprintWindow] = field(default_factory=list)
    critical_ids: frozenset[ItemId] = frozenset()
    settings: dict[str, Any] = field(default_factory=dict)
