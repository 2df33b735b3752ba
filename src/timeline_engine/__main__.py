from __future__ import annotations

import argparse
import logging
import sys
import webbrowser
from pathlib import Path

import yaml

from .item_models import TimelineInput
from .layout import GANTT_CONFIG, ROADMAP_CONFIG, compute_layout
from .parse_items import ItemValidationError, load_timeline, parse_critical_path
from .render_timeline import render_timeline


def _parse_date(value: str):
    import datetime as dt

    try:
        return dt.date.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid date '{value}', expected YYYY-MM-DD") from exc


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Timeline layout engine: render tasks or epics as a Gantt/roadmap SVG",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("items", help="Path to items YAML/JSON (native layout or Gantt/roadmap API payload)")
    parser.add_argument("--out", default="output/timeline.svg", help="Output SVG path")
    parser.add_argument("--zoom", type=float, help="Zoom multiplier (typical 0.5-3.0)")
    parser.add_argument(
        "--granularity",
        choices=["week", "month-or-biweek", "adaptive-year"],
        help="Axis marker policy; defaults to the file setting or the view preset",
    )
    parser.add_argument("--padding-days", type=int, help="Days added on each side of the inferred window")
    parser.add_argument("--min-date", type=_parse_date, help="Override inferred window start (YYYY-MM-DD)")
    parser.add_argument("--max-date", type=_parse_date, help="Override inferred window end (YYYY-MM-DD)")
    parser.add_argument("--today", type=_parse_date, help="Date used for the today marker (YYYY-MM-DD)")
    parser.add_argument("--critical-path", help="Path to a critical-path id list or API payload")
    parser.add_argument("--no-dependencies", action="store_true", help="Do not draw dependency edges")
    parser.add_argument("--no-critical-path", action="store_true", help="Do not highlight critical-path items")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--view",
        dest="view",
        action="store_true",
        default=True,
        help="Best-effort open the output file after rendering",
    )
    parser.add_argument(
        "--no-view",
        dest="view",
        action="store_false",
        help="Do not open the output file after rendering",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    items_path = Path(args.items)

    try:
        timeline: TimelineInput = load_timeline(str(items_path))
        critical_ids = timeline.critical_ids
        if args.critical_path:
            with open(args.critical_path, "r", encoding="utf-8") as fh:
                critical_ids = parse_critical_path(yaml.safe_load(fh))
    except (yaml.YAMLError, ItemValidationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2
    except FileNotFoundError as exc:
        print(f"Error: file not found: {exc.filename}", file=sys.stderr)
        return 1
    except Exception as exc:  # Unexpected
        print(f"Unexpected error while loading items: {exc}", file=sys.stderr)
        return 1

    preset = ROADMAP_CONFIG if timeline.settings.get("granularity") == "adaptive-year" else GANTT_CONFIG
    config = preset.with_overrides(timeline.settings).with_overrides(
        {
            "zoom": args.zoom,
            "granularity": args.granularity,
            "padding_days": args.padding_days,
            "show_dependencies": False if args.no_dependencies else None,
            "show_critical_path": False if args.no_critical_path else None,
        }
    )

    layout = compute_layout(
        timeline.items,
        config,
        critical_ids=critical_ids,
        sprints=timeline.sprints,
        today=args.today,
        min_date=args.min_date,
        max_date=args.max_date,
    )

    try:
        render_timeline(layout, timeline.items, out_path=args.out, title=timeline.name)
    except Exception as exc:
        print(f"Unexpected error while rendering: {exc}", file=sys.stderr)
        return 1

    if args.view:
        try:
            webbrowser.open(Path(args.out).resolve().as_uri())
        except Exception:
            pass

    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
