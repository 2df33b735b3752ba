from __future__ import annotations

from importlib import metadata
from pathlib import Path
from typing import Iterable

import matplotlib

matplotlib.use("Agg")  # ensure headless, deterministic output
import matplotlib.pyplot as plt
from matplotlib.patches import FancyArrowPatch

from .item_models import ItemId, TemporalItem
from .layout import TimelineLayout

FONT_SCALE = 1.0
TITLE_FONT = 14 * FONT_SCALE
LABEL_FONT = 10 * FONT_SCALE
FOOTER_FONT = 8 * FONT_SCALE
TICK_FONT = 9 * FONT_SCALE
TOP_MARGIN_FRAC = 0.85
TITLE_Y = 0.985
BAR_HEIGHT_FRAC = 0.6
PX_PER_INCH = 100.0

STATUS_COLORS = {
    "TODO": "#9e9e9e",
    "PLANNING": "#9e9e9e",
    "IN_PROGRESS": "#1f77b4",
    "IN_REVIEW": "#9467bd",
    "TESTING": "#9467bd",
    "DONE": "#2ca02c",
    "COMPLETED": "#2ca02c",
    "BLOCKED": "#d62728",
}
DEFAULT_BAR_COLOR = "#7f7f7f"
CRITICAL_EDGE_COLOR = "#d62728"
EDGE_COLOR = "#3a3a3a"
TODAY_COLOR = "#ff7f0e"


def render_timeline(
    layout: TimelineLayout,
    items: Iterable[TemporalItem],
    out_path: str,
    title: str = "",
) -> None:
    """
    Render a computed layout as a static SVG to `out_path`.

    - Geometry comes straight from the layout; no dates are re-mapped here.
    - Dateless items get a placeholder label instead of a bar.
    - Critical-path items are outlined; dependency edges end in an arrow.
    """

    by_id: dict[ItemId, TemporalItem] = {item.id: item for item in items}
    row_height = layout.row_height
    rows = layout.rows
    total_width = layout.mapper.total_width

    fig_height = max(3.0, 0.45 * len(rows) + 2.0)
    fig_width = max(10.0, min(30.0, total_width / PX_PER_INCH + 4.0))
    fig = plt.figure(figsize=(fig_width, fig_height))
    gs = fig.add_gridspec(1, 2, width_ratios=[1.2, 4.0], wspace=0.05, left=0.04, right=0.98, top=TOP_MARGIN_FRAC, bottom=0.08)
    label_ax = fig.add_subplot(gs[0, 0])
    ax = fig.add_subplot(gs[0, 1], sharey=label_ax)

    y_max = max(1, len(rows)) * row_height
    ax.set_ylim(y_max, 0)
    ax.set_xlim(0, total_width)
    ax.xaxis.tick_top()
    ax.set_xticks([layout.mapper.marker_x(marker) for marker in layout.markers])
    ax.set_xticklabels([marker.label for marker in layout.markers])
    ax.tick_params(axis="x", labelrotation=30, labelsize=TICK_FONT, pad=4)
    ax.grid(True, axis="x", linestyle="--", alpha=0.4)
    ax.set_yticks([])

    label_ax.set_xlim(0, 1)
    label_ax.axis("off")

    fig.suptitle(title, x=0.5, fontsize=TITLE_FONT, y=TITLE_Y)
    footer = f"{layout.time_range.start.isoformat()} – {layout.time_range.end.isoformat()} · timeline-engine v{_tool_version()}"
    fig.text(0.99, 0.01, footer, ha="right", va="bottom", fontsize=FOOTER_FONT, alpha=0.8)

    for idx, item_id in enumerate(rows):
        item = by_id.get(item_id)
        name = item.title if item is not None and item.title else str(item_id)
        y = idx * row_height + row_height / 2
        label_ax.text(0.98, y, name, ha="right", va="center", fontsize=LABEL_FONT, transform=label_ax.transData)

        bar = layout.bars.get(item_id)
        if bar is None:
            ax.text(4, y, "no dates", ha="left", va="center", fontsize=LABEL_FONT, style="italic", alpha=0.6)
            continue

        critical = layout.is_critical(item_id)
        color = STATUS_COLORS.get((item.status or "").upper(), DEFAULT_BAR_COLOR) if item else DEFAULT_BAR_COLOR
        ax.barh(
            y,
            width=bar.width,
            left=bar.left,
            height=row_height * BAR_HEIGHT_FRAC,
            color=color,
            edgecolor=CRITICAL_EDGE_COLOR if critical else "black",
            linewidth=2.0 if critical else 0.5,
        )

    for edge in layout.edges:
        ax.add_patch(
            FancyArrowPatch(
                (edge.start_x, edge.y),
                (edge.end_x, edge.y),
                arrowstyle="-|>",
                mutation_scale=8.0,
                lw=0.9,
                color=EDGE_COLOR,
                shrinkA=0.5,
                shrinkB=0.5,
            )
        )

    if layout.today_x is not None:
        ax.axvline(layout.today_x, color=TODAY_COLOR, linestyle="--", linewidth=1.2)

    Path(out_path).parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(out_path, format="svg", bbox_inches="tight")
    plt.close(fig)


def _tool_version() -> str:
    try:
        return metadata.version("timeline-engine")
    except Exception:
        return "0.0.0"
