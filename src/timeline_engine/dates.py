from __future__ import annotations

import datetime as dt
import logging
from typing import Any

logger = logging.getLogger(__name__)


def coerce_date(value: Any) -> dt.date | None:
    """
    Normalise a caller-supplied value to a calendar date.

    Accepts `date`, `datetime` (time of day dropped) and ISO strings, including
    API timestamps such as `2024-01-05T00:00:00.000Z`. Anything else is absent.
    """

    if value is None:
        return None
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None
    try:
        return dt.date.fromisoformat(text[:10])
    except ValueError:
        pass
    try:
        return dt.datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        logger.debug("Unparseable date %r treated as absent", value)
        return None


def days_between(start: dt.date, end: dt.date) -> int:
    """Signed whole days from `start` to `end`."""
    return (end - start).days


def today() -> dt.date:
    return dt.date.today()
