from __future__ import annotations

from typing import Mapping, Sequence

from .item_models import BarGeometry, DependencyEdge, ItemId, TemporalItem


def route_edges(
    items: Sequence[TemporalItem],
    bars: Mapping[ItemId, BarGeometry],
    show_dependencies: bool = True,
    row_height: float = 40.0,
) -> list[DependencyEdge]:
    """
    Connect each prerequisite's bar end to its dependent's bar start.

    Edges are drawn on the dependent's row midpoint. Missing bars on either side
    and edges without forward slack (start_x >= end_x) are skipped silently.
    """

    if not show_dependencies:
        return []

    edges: list[DependencyEdge] = []
    for row, item in enumerate(items):
        target = bars.get(item.id)
        if target is None:
            continue
        y = row * row_height + row_height / 2
        for dep_id in item.dependencies:
            source = bars.get(dep_id)
            if source is None:
                continue
            edge = route_edge(dep_id, source, item.id, target, y)
            if edge is not None:
                edges.append(edge)
    return edges


def route_edge(
    from_id: ItemId, source: BarGeometry, to_id: ItemId, target: BarGeometry, y: float
) -> DependencyEdge | None:
    start_x = source.right
    end_x = target.left
    if start_x >= end_x:
        return None
    return DependencyEdge(from_id=from_id, to_id=to_id, start_x=start_x, end_x=end_x, y=y)
