from __future__ import annotations

from pathlib import Path

import yaml


DEFAULT_UNITS: dict[str, float] = {
    "days": 1.0,
    # 5 work days per week.
    "weeks": 5.0,
    # 4 work weeks per month.
    "months": 20.0,
}

# Days are the base unit.
_OVERRIDABLE: tuple[str, ...] = ("weeks", "months")

UNITS_FILE_ENV = "FRONTIER_UNITS_FILE"


class UnitConfigError(ValueError):
    pass


def load_units_file(path: str | Path) -> dict[str, float]:
    """Load unit factor overrides from a YAML file.

    Format:
      weeks: 6
      months: 24

    Returns a mapping of unit name -> days per unit.
    """
    p = Path(path)
    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise
    except OSError as e:
        raise UnitConfigError(f"cannot read units file: {e}") from e
    except yaml.YAMLError as e:
        raise UnitConfigError(f"invalid YAML: {e}") from e
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise UnitConfigError("units file must be a mapping of unit -> days")

    out: dict[str, float] = {}
    for k, v in raw.items():
        if not isinstance(k, str) or k.strip() not in _OVERRIDABLE:
            raise UnitConfigError(
                f"unit '{k}' cannot be overridden (choose from: {', '.join(_OVERRIDABLE)})"
            )
        if isinstance(v, bool) or not isinstance(v, (int, float)) or v <= 0:
            raise UnitConfigError(f"unit '{k}' must be a positive number of days")
        out[k.strip()] = float(v)
    return out


def merged_units(overrides: dict[str, float] | None = None) -> dict[str, float]:
    """Return DEFAULT_UNITS merged with optional overrides."""
    merged = dict(DEFAULT_UNITS)
    if overrides:
        merged.update(overrides)
    return merged


def load_and_merge(units_file: str | None) -> dict[str, float]:
    if not units_file:
        return merged_units()
    overrides = load_units_file(units_file)
    return merged_units(overrides)
