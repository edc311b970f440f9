from datetime import date

from expense_tracker.domain.amounts import extract_amount
from expense_tracker.domain.dates import resolve_date
from expense_tracker.domain.descriptions import clean_description
from expense_tracker.domain.keywords import detect_kind, match_category
from expense_tracker.models import Category, TransactionIntent

from .base import Parser


class RuleBasedParser(Parser):
    """Deterministic keyword parser used when the model is unavailable or gives up."""

    source = "rules"

    def __init__(self, today: date | None = None):
        self.today = today

    def parse(self, message: str, categories: list[Category] | None = None) -> TransactionIntent | None:
        lowered = message.lower()
        kind = detect_kind(lowered)

        amount = extract_amount(message)
        if amount is None:
            return None

        category_name = match_category(lowered, kind)
        return TransactionIntent(
            amount=amount,
            description=clean_description(message, fallback=category_name),
            category_name=category_name,
            kind=kind,
            date=resolve_date(lowered, today=self.today),
        )
