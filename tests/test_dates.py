from datetime import date

import pytest

from expense_tracker.domain.dates import add_months, month_bounds, months_ago, parse_iso_date, resolve_date

TODAY = date(2026, 10, 19)


def test_resolve_relative_dates() -> None:
    assert resolve_date("hôm qua ăn trưa 50k", today=TODAY) == date(2026, 10, 18)
    assert resolve_date("hôm kia đổ xăng 100k", today=TODAY) == date(2026, 10, 17)
    assert resolve_date("ăn trưa 50k", today=TODAY) == TODAY


def test_yesterday_wins_when_both_phrases_present() -> None:
    assert resolve_date("hôm kia hay hôm qua gì đó 50k", today=TODAY) == date(2026, 10, 18)


def test_resolve_crosses_month_boundary() -> None:
    assert resolve_date("hôm kia", today=date(2026, 3, 1)) == date(2026, 2, 27)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("2026-10-18", date(2026, 10, 18)),
        ("2026-10-18T08:00:00Z", date(2026, 10, 18)),
        ("18/10/2026", None),
        (None, None),
        (20261018, None),
    ],
)
def test_parse_iso_date(value: object, expected: date | None) -> None:
    assert parse_iso_date(value) == expected


def test_month_arithmetic_clamps_day() -> None:
    assert months_ago(date(2026, 5, 31), 3) == date(2026, 2, 28)
    assert months_ago(date(2026, 1, 15), 3) == date(2025, 10, 15)
    assert add_months(date(2026, 12, 5), 1) == date(2027, 1, 5)


def test_month_bounds() -> None:
    assert month_bounds(2024, 2) == (date(2024, 2, 1), date(2024, 2, 29))
    assert month_bounds(2026, 12) == (date(2026, 12, 1), date(2026, 12, 31))
    assert month_bounds(2026) == (date(2026, 1, 1), date(2026, 12, 31))
