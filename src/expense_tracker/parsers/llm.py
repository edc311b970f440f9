from datetime import date
from typing import Any

from expense_tracker.domain.dates import parse_iso_date
from expense_tracker.domain.jsonblock import as_number, extract_json_object
from expense_tracker.domain.keywords import detect_kind
from expense_tracker.integration.llm import LLMClient
from expense_tracker.logger import get_logger
from expense_tracker.models import Category, TransactionIntent, TransactionKind

from .base import Parser

logger = get_logger(__name__)

KIND_LABELS: dict[str, str] = {"expense": "chi tiêu", "income": "thu nhập"}

PROMPT_TEMPLATE = """Bạn là trợ lý phân tích giao dịch tài chính. Phân tích tin nhắn tiếng Việt và trích xuất thông tin giao dịch.

Danh sách danh mục có sẵn:
{category_list}

Ngày hôm nay: {today}

Tin nhắn người dùng: "{message}"

Hãy phân tích và trả về JSON với format sau (CHỈ trả về JSON, không có text khác):
{{
  "amount": <số tiền bằng số, đơn vị VND - ví dụ 50k = 50000, 1tr = 1000000>,
  "description": "<mô tả ngắn gọn>",
  "categoryName": "<tên danh mục phù hợp nhất từ danh sách trên>",
  "type": "<expense hoặc income>",
  "date": "<ngày theo format YYYY-MM-DD, nếu 'hôm qua' thì trừ 1 ngày, 'hôm kia' trừ 2 ngày>"
}}

Nếu không thể phân tích được, trả về: {{"error": "không hiểu"}}

Quy tắc:
- "k" hoặc "K" = nghìn (x1000)
- "tr", "triệu", "m" = triệu (x1000000)
- Mặc định là chi tiêu (expense) trừ khi có từ như: nhận, lương, thưởng, thu, được tiền, bán, tiền về
- Chọn danh mục phù hợp nhất với nội dung"""


def build_parse_prompt(message: str, categories: list[Category], today: date) -> str:
    category_list = "\n".join(f"- {c.name} ({KIND_LABELS[c.kind]})" for c in categories)
    return PROMPT_TEMPLATE.format(
        category_list=category_list or "(chưa có danh mục)",
        today=today.isoformat(),
        message=message,
    )


class LLMParser(Parser):
    source = "ai"

    def __init__(self, client: LLMClient, today: date | None = None):
        self.client = client
        self.today = today

    def parse(self, message: str, categories: list[Category]) -> TransactionIntent | None:
        today = self.today or date.today()
        text = self.client.complete(build_parse_prompt(message, categories, today))
        if text is None:
            return None

        payload = extract_json_object(text)
        if payload is None:
            logger.warning("[PARSE] No JSON object in model reply: %r", text[:200])
            return None
        if "error" in payload:
            logger.info("[PARSE] Model could not parse %r: %s", message, payload.get("error"))
            return None

        return self._to_intent(payload, message, today)

    @staticmethod
    def _to_intent(payload: dict[str, Any], message: str, today: date) -> TransactionIntent | None:
        amount = as_number(payload.get("amount"))
        if amount is None or amount <= 0:
            logger.warning("[PARSE] Model returned unusable amount: %r", payload.get("amount"))
            return None

        raw_kind = str(payload.get("type") or "").strip().lower()
        kind: TransactionKind = raw_kind if raw_kind in KIND_LABELS else detect_kind(message.lower())  # type: ignore[assignment]

        category_name = str(payload.get("categoryName") or "").strip()
        description = str(payload.get("description") or "").strip() or category_name or message.strip()

        return TransactionIntent(
            amount=amount,
            description=description,
            category_name=category_name,
            kind=kind,
            date=parse_iso_date(payload.get("date")) or today,
        )
