from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass
from typing import Any

import yaml

from .dates import coerce_date
from .item_models import ItemId, SprintWindow, TemporalItem, TimelineInput

logger = logging.getLogger(__name__)


class ItemValidationError(Exception):
    """Raised when an input file is structurally invalid (bad shape, missing or duplicate ids)."""


@dataclass(frozen=True)
class _Path:
    """Helper to produce readable path strings like items[0].tasks[1]."""

    parts: tuple[str, ...] = ()

    def child(self, segment: str) -> "_Path":
        return _Path(self.parts + (segment,))

    def __str__(self) -> str:  # pragma: no cover - trivial
        return ".".join(self.parts) if self.parts else "root"


def load_timeline(path: str) -> TimelineInput:
    """
    Load items from a YAML or JSON file at the given path.

    Accepts the native `items:` layout as well as the REST payloads for the
    Gantt (`tasks:`) and roadmap (`roadmap:`) views, optionally wrapped in a
    `{success, data}` envelope.
    """

    with open(path, "r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh)

    return parse_timeline(raw)


def parse_timeline(data: Any) -> TimelineInput:
    path = _Path()
    if not isinstance(data, dict):
        raise ItemValidationError(f"{path}: expected mapping at top level")
    if isinstance(data.get("data"), dict) and "success" in data:
        data = data["data"]
        path = path.child("data")

    if "items" in data:
        result = _parse_native(data, path)
    elif "tasks" in data:
        result = _parse_gantt_payload(data, path)
    elif "roadmap" in data:
        result = _parse_roadmap_payload(data, path)
    else:
        raise ItemValidationError(f"{path}: missing required list 'items', 'tasks' or 'roadmap'")

    _warn_unknown_dependencies(result.items)
    return result


def parse_critical_path(data: Any) -> frozenset[ItemId]:
    """
    Extract critical-path ids from a plain id list or a `criticalPath: [{id}]` payload.
    """

    if isinstance(data, dict):
        if isinstance(data.get("data"), dict):
            data = data["data"]
        data = data.get("criticalPath", data.get("critical_path", []))
    if not isinstance(data, list):
        raise ItemValidationError("critical path: expected list of ids")
    ids: set[ItemId] = set()
    for idx, entry in enumerate(data):
        value = entry.get("id") if isinstance(entry, dict) else entry
        if value is None:
            raise ItemValidationError(f"critical path[{idx}]: missing id")
        if isinstance(value, (list, dict)):
            raise ItemValidationError(f"critical path[{idx}].id: expected integer or string")
        ids.add(value)
    return frozenset(ids)


def _parse_native(data: dict[str, Any], path: _Path) -> TimelineInput:
    settings = data.get("timeline") or {}
    if not isinstance(settings, dict):
        raise ItemValidationError(f"{path.child('timeline')}: expected mapping")

    items_raw = _require_list(data, "items", path)
    ids: set[ItemId] = set()
    items = [
        _parse_item(item_raw, path.child(f"items[{idx}]"), ids, start_key="start_date", end_key="end_date")
        for idx, item_raw in enumerate(items_raw)
    ]

    sprints = _parse_sprints(data.get("sprints"), path.child("sprints"), "start_date", "end_date")
    critical_raw = data.get("critical_path")
    critical = parse_critical_path(critical_raw) if critical_raw is not None else frozenset()

    name = settings.get("name", "")
    return TimelineInput(
        name=name if isinstance(name, str) else str(name),
        items=items,
        sprints=sprints,
        critical_ids=critical,
        settings=_parse_settings(settings, path.child("timeline")),
    )


_NUMERIC_SETTINGS = {"base_width", "zoom", "min_separation_pct", "min_bar_width", "row_height"}
_BOOL_SETTINGS = {"show_dependencies", "show_critical_path"}
_GRANULARITIES = {"week", "month-or-biweek", "adaptive-year"}


def _parse_settings(settings: dict[str, Any], path: _Path) -> dict[str, Any]:
    parsed: dict[str, Any] = {}
    for key, value in settings.items():
        if key == "name":
            continue
        if key in _NUMERIC_SETTINGS:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ItemValidationError(f"{path.child(key)}: expected number")
            parsed[key] = float(value)
        elif key in _BOOL_SETTINGS:
            if not isinstance(value, bool):
                raise ItemValidationError(f"{path.child(key)}: expected boolean")
            parsed[key] = value
        elif key == "padding_days":
            if isinstance(value, bool) or not isinstance(value, int):
                raise ItemValidationError(f"{path.child(key)}: expected integer")
            parsed[key] = value
        elif key == "granularity":
            if value not in _GRANULARITIES:
                raise ItemValidationError(f"{path.child(key)}: expected one of {sorted(_GRANULARITIES)}")
            parsed[key] = value
        else:
            raise ItemValidationError(f"{path}: unexpected field '{key}'")
    return parsed


def _parse_gantt_payload(data: dict[str, Any], path: _Path) -> TimelineInput:
    tasks_raw = _require_list(data, "tasks", path)
    ids: set[ItemId] = set()
    items = [
        _parse_item(task_raw, path.child(f"tasks[{idx}]"), ids, start_key="startDate", end_key="dueDate")
        for idx, task_raw in enumerate(tasks_raw)
    ]
    sprints = _parse_sprints(data.get("sprints"), path.child("sprints"), "startDate", "endDate")
    critical = parse_critical_path(data) if "criticalPath" in data else frozenset()
    return TimelineInput(items=items, sprints=sprints, critical_ids=critical)


def _parse_roadmap_payload(data: dict[str, Any], path: _Path) -> TimelineInput:
    epics_raw = _require_list(data, "roadmap", path)
    ids: set[ItemId] = set()
    items = [
        _parse_item(
            epic_raw, path.child(f"roadmap[{idx}]"), ids, start_key="estimatedStart", end_key="estimatedEnd"
        )
        for idx, epic_raw in enumerate(epics_raw)
    ]
    critical = parse_critical_path(data) if "criticalPath" in data else frozenset()
    return TimelineInput(items=items, critical_ids=critical, settings={"granularity": "adaptive-year"})


def _parse_item(data: Any, path: _Path, ids: set[ItemId], start_key: str, end_key: str) -> TemporalItem:
    if not isinstance(data, dict):
        raise ItemValidationError(f"{path}: expected mapping for item")

    item_id = _require_id(data, path, ids)
    title = data.get("title", data.get("name", ""))
    start = _parse_date(data.get(start_key), path.child(start_key))
    end = _parse_date(data.get(end_key), path.child(end_key))

    if "tasks" in data and start is None and end is None:
        start, end = _span_from_children(data["tasks"], path.child("tasks"))

    return TemporalItem(
        id=item_id,
        title=title if isinstance(title, str) else str(title),
        status=_optional_str(data.get("status")),
        priority=_optional_str(data.get("priority")),
        start_date=start,
        end_date=end,
        dependencies=_parse_dependencies(data, path),
    )


def _span_from_children(children: Any, path: _Path) -> tuple[dt.date | None, dt.date | None]:
    """Epic window from child tasks: earliest start, latest end (end falls back to start)."""

    if not isinstance(children, list):
        raise ItemValidationError(f"{path}: expected list")
    starts: list[dt.date] = []
    ends: list[dt.date] = []
    for idx, child in enumerate(children):
        if not isinstance(child, dict):
            raise ItemValidationError(f"{path.child(f'[{idx}]')}: expected mapping")
        start = _parse_date(child.get("start_date"), path.child(f"[{idx}].start_date"))
        end = _parse_date(child.get("end_date"), path.child(f"[{idx}].end_date")) or start
        if start is not None:
            starts.append(start)
        if end is not None:
            ends.append(end)
    return (min(starts) if starts else None, max(ends) if ends else None)


def _parse_dependencies(data: dict[str, Any], path: _Path) -> tuple[ItemId, ...]:
    raw = data.get("depends_on", data.get("dependencies"))
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise ItemValidationError(f"{path}.depends_on: expected list of ids")

    refs: list[ItemId] = []
    for idx, dep in enumerate(raw):
        if isinstance(dep, dict):
            dep = dep.get("dependsOnId")
        if dep is None or isinstance(dep, (list, dict)):
            raise ItemValidationError(f"{path}.depends_on[{idx}]: expected item id")
        if dep not in refs:
            refs.append(dep)
    return tuple(refs)


def _parse_sprints(raw: Any, path: _Path, start_key: str, end_key: str) -> list[SprintWindow]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ItemValidationError(f"{path}: expected list")
    sprints: list[SprintWindow] = []
    for idx, sprint in enumerate(raw):
        if not isinstance(sprint, dict):
            raise ItemValidationError(f"{path.child(f'[{idx}]')}: expected mapping for sprint")
        sprints.append(
            SprintWindow(
                name=str(sprint.get("name", "")),
                start_date=_parse_date(sprint.get(start_key), path.child(f"[{idx}].{start_key}")),
                end_date=_parse_date(sprint.get(end_key), path.child(f"[{idx}].{end_key}")),
            )
        )
    return sprints


def _require_list(data: dict[str, Any], key: str, path: _Path) -> list[Any]:
    value = data.get(key)
    if value is None:
        raise ItemValidationError(f"{path}: missing required field '{key}'")
    if not isinstance(value, list):
        raise ItemValidationError(f"{path.child(key)}: expected list")
    return value


def _require_id(data: dict[str, Any], path: _Path, ids: set[ItemId]) -> ItemId:
    if "id" not in data or data["id"] is None:
        raise ItemValidationError(f"{path}: missing required field 'id'")
    value = data["id"]
    if isinstance(value, (list, dict)) or (isinstance(value, str) and not value.strip()):
        raise ItemValidationError(f"{path.child('id')}: expected integer or non-empty string")
    if value in ids:
        raise ItemValidationError(f"{path.child('id')}: duplicate id '{value}'")
    ids.add(value)
    return value


def _parse_date(value: Any, path: _Path) -> dt.date | None:
    if value is None or value == "":
        return None
    parsed = coerce_date(value)
    if parsed is None:
        logger.warning("%s: unparseable date %r treated as absent", path, value)
    return parsed


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def _warn_unknown_dependencies(items: list[TemporalItem]) -> None:
    known = {item.id for item in items}
    for item in items:
        for dep in item.dependencies:
            if dep not in known:
                logger.warning("Item '%s' depends on unknown id '%s'; edge will be skipped", item.id, dep)
