from __future__ import annotations

import math
from typing import Any, Mapping, Optional

from task_frontier.core.model import Duration, Metric, Unknown
from task_frontier.core.units.unit_config import DEFAULT_UNITS


# Largest first; formatting picks the first unit the value fills at least once.
_DISPLAY_ORDER: list[tuple[str, str]] = [
    ("months", "month"),
    ("weeks", "week"),
    ("days", "day"),
]

NEEDS_ESTIMATE = "needs estimate"


def to_days(duration: Optional[Duration], units: Mapping[str, float] | None = None) -> float:
    """Convert a duration to days.

    Missing, non-numeric and non-positive values convert to 0, which callers
    treat as "no estimate". Unknown units count as days.
    """
    if duration is None:
        return 0.0
    value = _as_number(duration.value)
    if value is None or math.isnan(value) or value <= 0:
        return 0.0
    table = units or DEFAULT_UNITS
    return value * table.get(duration.unit, 1.0)


def format_days(days: float, units: Mapping[str, float] | None = None) -> str:
    """Render a day count in the largest unit whose magnitude is at least 1.

    >>> format_days(7.5)
    '1.5 weeks'
    """
    n = _as_number(days)
    if n is None or math.isnan(n) or n <= 0:
        return ""

    table = units or DEFAULT_UNITS
    for unit, singular in _DISPLAY_ORDER:
        factor = table.get(unit, DEFAULT_UNITS[unit])
        if n >= factor or unit == "days":
            text = f"{n / factor:.1f}"
            if text.endswith(".0"):
                text = text[:-2]
            return f"{text} {singular if float(text) == 1 else singular + 's'}"
    return ""  # pragma: no cover


def format_metric(metric: Metric, units: Mapping[str, float] | None = None) -> dict[str, str]:
    if isinstance(metric, Unknown):
        return {"serial_sum": NEEDS_ESTIMATE, "critical_min": NEEDS_ESTIMATE}
    return {
        "serial_sum": format_days(metric.serial_sum, units),
        "critical_min": format_days(metric.critical_min, units),
    }


def _as_number(v: Any) -> Optional[float]:
    if isinstance(v, bool):
        return None
    if isinstance(v, (int, float)):
        return float(v)
    if isinstance(v, str):
        try:
            return float(v)
        except ValueError:
            return None
    return None
