from datetime import date, timedelta

YESTERDAY = "hôm qua"
DAY_BEFORE_YESTERDAY = "hôm kia"


def resolve_date(lowered: str, today: date | None = None) -> date:
    # "hôm qua" is checked first and wins when both phrases appear.
    today = today or date.today()
    if YESTERDAY in lowered:
        return today - timedelta(days=1)
    if DAY_BEFORE_YESTERDAY in lowered:
        return today - timedelta(days=2)
    return today


def parse_iso_date(value: object) -> date | None:
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None


def months_ago(today: date, months: int) -> date:
    """Same day ``months`` calendar months earlier, clamped to the month's length."""
    year, month = divmod(today.year * 12 + (today.month - 1) - months, 12)
    month += 1
    day = today.day
    while day > 28:
        try:
            return date(year, month, day)
        except ValueError:
            day -= 1
    return date(year, month, day)


def add_months(today: date, months: int) -> date:
    return months_ago(today, -months)


def month_bounds(year: int, month: int | None = None) -> tuple[date, date]:
    if month is None:
        return date(year, 1, 1), date(year, 12, 31)
    start = date(year, month, 1)
    end = add_months(start, 1) - timedelta(days=1)
    return start, end
