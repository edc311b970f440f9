import datetime as dt
from typing import Literal

from pydantic import BaseModel, Field, computed_field

TransactionKind = Literal["expense", "income"]
ParseStatus = Literal["ai", "rules", "failed", "no_category"]
Trend = Literal["up", "down", "stable"]


class Category(BaseModel):
    id: str
    name: str
    icon: str = "📁"
    color: str = "#6b7280"
    kind: TransactionKind
    is_default: bool = False
    user_id: str | None = None


class Transaction(BaseModel):
    id: str
    amount: float
    description: str | None = None
    date: dt.date
    kind: TransactionKind
    category_id: str
    user_id: str
    created_at: dt.datetime = Field(default_factory=dt.datetime.now)


class TransactionWithCategory(Transaction):
    category: Category


class TransactionIntent(BaseModel):
    """Structured result of parsing a chat message, before it is stored."""
    amount: float = Field(gt=0)
    description: str
    category_name: str
    kind: TransactionKind
    date: dt.date


class ParseResult(BaseModel):
    status: ParseStatus
    intent: TransactionIntent | None = None
    category: Category | None = None
    reply: str | None = None

    @property
    def ok(self) -> bool:
        return self.status in ("ai", "rules")

    @property
    def used_ai(self) -> bool:
        return self.status == "ai"


class CategoryStat(BaseModel):
    name: str
    icon: str
    kind: TransactionKind
    total: float = 0.0
    count: int = 0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def average(self) -> float:
        return self.total / self.count if self.count else 0.0

    def add(self, amount: float) -> None:
        self.total += amount
        self.count += 1


class CategoryBreakdown(CategoryStat):
    category_id: str
    color: str
    percentage: float = 0.0


class MonthlyTrend(BaseModel):
    month: str  # YYYY-MM
    income: float = 0.0
    expense: float = 0.0


class MonthlyStat(MonthlyTrend):
    label: str
    balance: float = 0.0


class StatisticsReport(BaseModel):
    year: int
    month: int | None = None
    total_income: float
    total_expense: float
    balance: float
    category_stats: list[CategoryBreakdown]
    monthly_stats: list[MonthlyStat]
    transaction_count: int


class PredictionResult(BaseModel):
    predicted_income: float
    predicted_expense: float
    predicted_balance: float
    confidence: int = Field(ge=1, le=100)
    trend: Trend = "stable"
    summary: str
    tips: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    top_spending_category: str = ""
    saving_potential: float = Field(default=0.0, ge=0)
    month_name: str
    source: Literal["ai", "average"]


class PredictionStats(BaseModel):
    avg_monthly_income: float
    avg_monthly_expense: float
    monthly_trends: list[MonthlyTrend]
    top_expenses: list[CategoryStat]
    total_transactions: int


class PredictionReport(BaseModel):
    prediction: PredictionResult | None = None
    message: str | None = None
    stats: PredictionStats | None = None
