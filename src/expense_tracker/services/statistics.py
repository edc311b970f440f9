from collections.abc import Iterable

from expense_tracker.models import (
    CategoryBreakdown,
    CategoryStat,
    MonthlyStat,
    MonthlyTrend,
    StatisticsReport,
    TransactionWithCategory,
)


def month_key(year: int, month: int) -> str:
    return f"{year}-{month:02d}"


def aggregate_categories(transactions: Iterable[TransactionWithCategory]) -> list[CategoryStat]:
    """Totals per category name, in first-seen order."""
    stats: dict[str, CategoryStat] = {}
    for t in transactions:
        stat = stats.get(t.category.name)
        if stat is None:
            stat = CategoryStat(name=t.category.name, icon=t.category.icon, kind=t.kind)
            stats[t.category.name] = stat
        stat.add(t.amount)
    return list(stats.values())


def monthly_trends(transactions: Iterable[TransactionWithCategory]) -> list[MonthlyTrend]:
    """One entry per month present in ``transactions``, ascending by month key."""
    trends: dict[str, MonthlyTrend] = {}
    for t in transactions:
        key = month_key(t.date.year, t.date.month)
        trend = trends.setdefault(key, MonthlyTrend(month=key))
        if t.kind == "income":
            trend.income += t.amount
        else:
            trend.expense += t.amount
    return [trends[key] for key in sorted(trends)]


def build_statistics(
    transactions: list[TransactionWithCategory],
    year: int,
    month: int | None = None,
) -> StatisticsReport:
    # Grouped by (category, kind) so each stat belongs to exactly one kind total.
    breakdown: dict[tuple[str, str], CategoryBreakdown] = {}
    totals = {"income": 0.0, "expense": 0.0}
    monthly = {
        m: MonthlyStat(month=month_key(year, m), label=f"T{m}")
        for m in range(1, 13)
    }

    for t in transactions:
        key = (t.category_id, t.kind)
        stat = breakdown.get(key)
        if stat is None:
            stat = CategoryBreakdown(
                category_id=t.category_id,
                name=t.category.name,
                icon=t.category.icon,
                color=t.category.color,
                kind=t.kind,
            )
            breakdown[key] = stat
        stat.add(t.amount)
        totals[t.kind] += t.amount

        if t.date.year == year:
            entry = monthly[t.date.month]
            if t.kind == "income":
                entry.income += t.amount
            else:
                entry.expense += t.amount

    for stat in breakdown.values():
        denominator = totals[stat.kind]
        stat.percentage = stat.total / denominator * 100 if denominator > 0 else 0.0

    for entry in monthly.values():
        entry.balance = entry.income - entry.expense

    return StatisticsReport(
        year=year,
        month=month,
        total_income=totals["income"],
        total_expense=totals["expense"],
        balance=totals["income"] - totals["expense"],
        category_stats=sorted(breakdown.values(), key=lambda s: s.total, reverse=True),
        monthly_stats=[monthly[m] for m in range(1, 13)],
        transaction_count=len(transactions),
    )
