from pathlib import Path

import pytest

from task_frontier.core.units.unit_config import (
    DEFAULT_UNITS,
    UnitConfigError,
    load_and_merge,
    load_units_file,
)


def test_defaults_without_file():
    assert load_and_merge(None) == {"days": 1.0, "weeks": 5.0, "months": 20.0}
    assert load_and_merge(None) is not DEFAULT_UNITS


def test_units_file_overrides():
    units = load_and_merge("examples/units-six-day-week.yaml")
    assert units == {"days": 1.0, "weeks": 6.0, "months": 24.0}


def test_empty_units_file(tmp_path: Path):
    p = tmp_path / "units.yaml"
    p.write_text("", encoding="utf-8")
    assert load_units_file(p) == {}


@pytest.mark.parametrize("body", ["days: 2\n", "weeks: 0\n", "weeks: soon\n", "- 5\n", "fortnights: 10\n"])
def test_invalid_units_file(tmp_path: Path, body: str):
    p = tmp_path / "units.yaml"
    p.write_text(body, encoding="utf-8")
    with pytest.raises(UnitConfigError):
        load_units_file(p)


def test_missing_units_file():
    with pytest.raises(FileNotFoundError):
        load_and_merge("examples/does-not-exist.yaml")


def test_malformed_yaml_units_file(tmp_path: Path):
    p = tmp_path / "units.yaml"
    p.write_text("weeks: [6\n", encoding="utf-8")
    with pytest.raises(UnitConfigError, match="invalid YAML"):
        load_units_file(p)


def test_directory_as_units_file(tmp_path: Path):
    with pytest.raises(UnitConfigError, match="cannot read"):
        load_and_merge(str(tmp_path))
