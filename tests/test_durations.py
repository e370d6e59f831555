import pytest

from task_frontier.core.model import UNKNOWN, Duration, TimeMetric
from task_frontier.core.units.durations import NEEDS_ESTIMATE, format_days, format_metric, to_days


@pytest.mark.parametrize(
    "days,expected",
    [
        (1, "1 day"),
        (2.5, "2.5 days"),
        (4.96, "5 days"),
        (5, "1 week"),
        (7.5, "1.5 weeks"),
        (10, "2 weeks"),
        (20, "1 month"),
        (30, "1.5 months"),
        (0, ""),
        (-3, ""),
    ],
)
def test_format_days(days, expected):
    assert format_days(days) == expected


def test_format_days_uses_unit_table():
    units = {"days": 1.0, "weeks": 6.0, "months": 24.0}
    assert format_days(5, units) == "5 days"
    assert format_days(6, units) == "1 week"
    assert format_days(36, units) == "1.5 months"


def test_to_days():
    assert to_days(Duration(3, "days")) == 3.0
    assert to_days(Duration(2, "weeks")) == 10.0
    assert to_days(Duration(1.5, "months")) == 30.0
    assert to_days(None) == 0.0
    assert to_days(Duration(0, "weeks")) == 0.0
    assert to_days(Duration(-1, "days")) == 0.0


def test_format_metric():
    assert format_metric(TimeMetric(serial_sum=12, critical_min=9)) == {
        "serial_sum": "2.4 weeks",
        "critical_min": "1.8 weeks",
    }
    assert format_metric(UNKNOWN) == {"serial_sum": NEEDS_ESTIMATE, "critical_min": NEEDS_ESTIMATE}
