from datetime import date
from typing import Any

from expense_tracker.domain.dates import add_months, months_ago
from expense_tracker.domain.formatting import format_money, format_month_name
from expense_tracker.domain.jsonblock import as_number, extract_json_object
from expense_tracker.integration.llm import LLMClient
from expense_tracker.logger import get_logger
from expense_tracker.models import (
    CategoryStat,
    MonthlyTrend,
    PredictionReport,
    PredictionResult,
    PredictionStats,
    TransactionWithCategory,
)
from expense_tracker.services.statistics import aggregate_categories, monthly_trends

logger = get_logger(__name__)

MIN_TRANSACTIONS = 5
WINDOW_MONTHS = 3
TOP_EXPENSE_CATEGORIES_IN_PROMPT = 8
TOP_EXPENSES_IN_STATS = 5
DEFAULT_AI_CONFIDENCE = 70
FALLBACK_CONFIDENCE = 50
TRENDS = ("up", "down", "stable")

NOT_ENOUGH_DATA_MESSAGE = "Cần ít nhất 5 giao dịch để dự đoán. Hãy thêm thêm giao dịch!"
DEFAULT_SUMMARY = "Dựa trên dữ liệu hiện có, tài chính của bạn đang ổn định."
FALLBACK_SUMMARY = "Dự đoán dựa trên mức trung bình 3 tháng gần nhất."
FALLBACK_TIPS = (
    "Theo dõi chi tiêu hàng ngày",
    "Đặt mục tiêu tiết kiệm cụ thể",
    "Hạn chế chi tiêu không cần thiết",
)

PROMPT_TEMPLATE = """Bạn là chuyên gia tài chính cá nhân. Phân tích dữ liệu chi tiêu và đưa ra dự đoán cho tháng tới.

📊 DỮ LIỆU 3 THÁNG GẦN NHẤT:

Thu nhập trung bình/tháng: {avg_income}
Chi tiêu trung bình/tháng: {avg_expense}
Số dư trung bình/tháng: {avg_balance}

📈 XU HƯỚNG THEO THÁNG:
{trend_summary}

💸 CHI TIÊU THEO DANH MỤC:
{expense_summary}

💰 THU NHẬP THEO DANH MỤC:
{income_summary}

Tổng số giao dịch: {total_transactions}

Hãy phân tích và trả về JSON với format sau (CHỈ trả về JSON, không có text khác):
{{
  "predictedIncome": <số tiền dự đoán thu nhập tháng tới>,
  "predictedExpense": <số tiền dự đoán chi tiêu tháng tới>,
  "predictedBalance": <số tiền dự đoán số dư tháng tới>,
  "confidence": <độ tin cậy từ 1-100>,
  "trend": "<up/down/stable - xu hướng chi tiêu>",
  "summary": "<tóm tắt ngắn gọn 1-2 câu về tình hình tài chính>",
  "tips": [
    "<lời khuyên 1>",
    "<lời khuyên 2>",
    "<lời khuyên 3>"
  ],
  "warnings": [
    "<cảnh báo nếu có, để trống nếu không>"
  ],
  "topSpendingCategory": "<danh mục chi nhiều nhất>",
  "savingPotential": <số tiền có thể tiết kiệm thêm>
}}

Lưu ý:
- Dự đoán dựa trên xu hướng 3 tháng gần nhất
- Xem xét các biến động theo mùa ({month_name})
- Đưa ra lời khuyên thực tế, cụ thể
- Nếu chi tiêu > thu nhập, cảnh báo rõ ràng"""


def _category_lines(stats: list[CategoryStat]) -> str:
    return "\n".join(f"- {c.icon} {c.name}: {format_money(c.total)} ({c.count} lần)" for c in stats)


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item).strip() for item in value if item is not None and str(item).strip()]


class PredictionGenerator:
    """Next-month income/expense forecast from the trailing three months."""

    def __init__(self, llm: LLMClient | None = None):
        self.llm = llm

    @staticmethod
    def window_start(today: date) -> date:
        return months_ago(today, WINDOW_MONTHS)

    def predict(self, transactions: list[TransactionWithCategory], today: date | None = None) -> PredictionReport:
        today = today or date.today()
        start = self.window_start(today)
        window = [t for t in transactions if start <= t.date <= today]

        if len(window) < MIN_TRANSACTIONS:
            logger.info("[PREDICT] Only %d transactions since %s; skipping forecast.", len(window), start)
            return PredictionReport(message=NOT_ENOUGH_DATA_MESSAGE)

        categories = aggregate_categories(window)
        trends = monthly_trends(window)
        total_months = len(trends) or 1
        avg_income = sum(m.income for m in trends) / total_months
        avg_expense = sum(m.expense for m in trends) / total_months

        expense_stats = sorted((c for c in categories if c.kind == "expense"), key=lambda c: c.total, reverse=True)
        income_stats = [c for c in categories if c.kind == "income"]
        month_name = format_month_name(add_months(today, 1))

        prediction = None
        if self.llm is not None:
            prompt = PROMPT_TEMPLATE.format(
                avg_income=format_money(avg_income),
                avg_expense=format_money(avg_expense),
                avg_balance=format_money(avg_income - avg_expense),
                trend_summary=self._trend_lines(trends),
                expense_summary=_category_lines(expense_stats[:TOP_EXPENSE_CATEGORIES_IN_PROMPT]),
                income_summary=_category_lines(income_stats),
                total_transactions=len(window),
                month_name=month_name,
            )
            payload = extract_json_object(self.llm.complete(prompt))
            if payload is None:
                logger.warning("[PREDICT] Model reply unusable; falling back to averages.")
            else:
                prediction = self._normalize(payload, avg_income, avg_expense, expense_stats, month_name)

        if prediction is None:
            prediction = self._fallback(avg_income, avg_expense, expense_stats, month_name)

        return PredictionReport(
            prediction=prediction,
            stats=PredictionStats(
                avg_monthly_income=avg_income,
                avg_monthly_expense=avg_expense,
                monthly_trends=trends,
                top_expenses=expense_stats[:TOP_EXPENSES_IN_STATS],
                total_transactions=len(window),
            ),
        )

    @staticmethod
    def _trend_lines(trends: list[MonthlyTrend]) -> str:
        return "\n".join(
            f"- {m.month}: Thu {format_money(m.income)}, Chi {format_money(m.expense)}" for m in trends
        )

    @staticmethod
    def _normalize(
        payload: dict[str, Any],
        avg_income: float,
        avg_expense: float,
        expense_stats: list[CategoryStat],
        month_name: str,
    ) -> PredictionResult:
        """Default every field on its own; bad values never discard the whole reply."""
        income = as_number(payload.get("predictedIncome"))
        if income is None or income < 0:
            income = avg_income
        expense = as_number(payload.get("predictedExpense"))
        if expense is None or expense < 0:
            expense = avg_expense

        balance = income - expense
        reported_balance = as_number(payload.get("predictedBalance"))
        if reported_balance is not None and abs(reported_balance - balance) >= 1:
            logger.debug("[PREDICT] Model balance %.0f != income - expense %.0f; recomputed.", reported_balance, balance)

        confidence = as_number(payload.get("confidence"))
        confidence_value = DEFAULT_AI_CONFIDENCE if confidence is None else min(100, max(1, round(confidence)))

        trend = str(payload.get("trend") or "").strip().lower()
        summary = payload.get("summary")
        top_category = payload.get("topSpendingCategory")
        saving = as_number(payload.get("savingPotential"))

        return PredictionResult(
            predicted_income=income,
            predicted_expense=expense,
            predicted_balance=balance,
            confidence=confidence_value,
            trend=trend if trend in TRENDS else "stable",  # type: ignore[arg-type]
            summary=summary.strip() if isinstance(summary, str) and summary.strip() else DEFAULT_SUMMARY,
            tips=_string_list(payload.get("tips")),
            warnings=_string_list(payload.get("warnings")),
            top_spending_category=(
                top_category.strip() if isinstance(top_category, str) and top_category.strip()
                else (expense_stats[0].name if expense_stats else "")
            ),
            saving_potential=max(0.0, saving or 0.0),
            month_name=month_name,
            source="ai",
        )

    @staticmethod
    def _fallback(
        avg_income: float,
        avg_expense: float,
        expense_stats: list[CategoryStat],
        month_name: str,
    ) -> PredictionResult:
        return PredictionResult(
            predicted_income=avg_income,
            predicted_expense=avg_expense,
            predicted_balance=avg_income - avg_expense,
            confidence=FALLBACK_CONFIDENCE,
            trend="stable",
            summary=FALLBACK_SUMMARY,
            tips=list(FALLBACK_TIPS),
            warnings=[],
            top_spending_category=expense_stats[0].name if expense_stats else "",
            saving_potential=0.0,
            month_name=month_name,
            source="average",
        )
