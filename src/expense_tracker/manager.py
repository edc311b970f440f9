from expense_tracker.integration.llm import LLMClient
from expense_tracker.logger import get_logger
from expense_tracker.models import Category, ParseResult, TransactionIntent
from expense_tracker.parsers.base import Parser
from expense_tracker.parsers.llm import LLMParser
from expense_tracker.parsers.rules import RuleBasedParser

logger = get_logger(__name__)

HELP_MESSAGE = (
    "Xin lỗi, mình không hiểu. Bạn có thể nhập theo dạng:\n"
    "• 'ăn trưa 50k'\n"
    "• 'đổ xăng 200 nghìn'\n"
    "• 'nhận lương 15 triệu'"
)
NO_CATEGORY_MESSAGE = "Không tìm thấy danh mục phù hợp. Vui lòng tạo danh mục trước."


def resolve_category(intent: TransactionIntent, categories: list[Category]) -> Category | None:
    """Exact name (case-insensitive) first, then the first category of the same kind."""
    wanted = intent.category_name.strip().lower()
    for category in categories:
        if category.name.lower() == wanted:
            return category
    for category in categories:
        if category.kind == intent.kind:
            return category
    return None


class ParserService:
    def __init__(self, llm: LLMClient | None = None):
        self.parsers: list[Parser] = []

        # 1. Language model (only when configured)
        if llm is not None:
            self.parsers.append(LLMParser(llm))

        # 2. Keyword rules (always available)
        self.parsers.append(RuleBasedParser())

    def parse(self, message: str, categories: list[Category]) -> ParseResult:
        """
        Run the parser chain and resolve the winning intent against
        ``categories``, a snapshot of the caller's categories.
        """
        for parser in self.parsers:
            parser_name = parser.__class__.__name__
            logger.debug("Trying %s for: '%s'", parser_name, message[:50])

            try:
                intent = parser.parse(message, categories)
            except Exception as e:
                logger.error("[PARSE] %s failed: %s", parser_name, e)
                intent = None

            if intent is None:
                logger.debug("%s returned: None", parser_name)
                continue

            logger.debug(
                "%s returned: %.0f %s '%s' on %s",
                parser_name,
                intent.amount,
                intent.kind,
                intent.category_name,
                intent.date,
            )
            category = resolve_category(intent, categories)
            if category is None:
                logger.info("[PARSE] No %s category available for '%s'", intent.kind, intent.category_name)
                return ParseResult(status="no_category", intent=intent, reply=NO_CATEGORY_MESSAGE)
            return ParseResult(status=parser.source, intent=intent, category=category)

        logger.info("[PARSE] Could not parse: '%s'", message[:50])
        return ParseResult(status="failed", reply=HELP_MESSAGE)
