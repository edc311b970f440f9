import asyncio

from pydantic import BaseModel

from expense_tracker.domain.formatting import format_long_date, format_vnd
from expense_tracker.integration.storage import TransactionStore
from expense_tracker.logger import get_logger
from expense_tracker.manager import ParserService
from expense_tracker.models import Category, TransactionIntent, TransactionWithCategory

logger = get_logger(__name__)

KIND_TITLES = {"income": "thu nhập", "expense": "chi tiêu"}


class ChatbotReply(BaseModel):
    success: bool
    reply: str
    transaction: TransactionWithCategory | None = None
    used_ai: bool = False


def format_confirmation(intent: TransactionIntent, category: Category, used_ai: bool) -> str:
    lines = [
        f"✅ Đã ghi nhận {KIND_TITLES[intent.kind]}:",
        "",
        f"💰 Số tiền: {format_vnd(intent.amount)}",
        f"📁 Danh mục: {category.icon} {category.name}",
        f"📝 Mô tả: {intent.description}",
        f"📅 Ngày: {format_long_date(intent.date)}",
    ]
    if used_ai:
        lines.extend(["", "🤖 Phân tích bởi AI"])
    return "\n".join(lines)


class ChatbotPipeline:
    def __init__(self, service: ParserService, store: TransactionStore) -> None:
        self.service = service
        self.store = store

    async def handle(self, user_id: str, message: str) -> ChatbotReply:
        categories = await asyncio.to_thread(self.store.list_categories, user_id)
        result = await asyncio.to_thread(self.service.parse, message, categories)

        if not result.ok or result.intent is None or result.category is None:
            return ChatbotReply(success=False, reply=result.reply or "")

        transaction = await asyncio.to_thread(
            self.store.create_transaction,
            user_id,
            result.intent,
            result.category,
        )
        logger.info(
            "[CHATBOT] %s %s -> '%s' (%s)",
            KIND_TITLES[result.intent.kind],
            format_vnd(result.intent.amount),
            result.category.name,
            result.status,
        )
        return ChatbotReply(
            success=True,
            reply=format_confirmation(result.intent, result.category, result.used_ai),
            transaction=transaction,
            used_ai=result.used_ai,
        )
