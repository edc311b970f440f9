from abc import ABC, abstractmethod

from expense_tracker.models import Category, TransactionIntent


class Parser(ABC):
    source: str

    @abstractmethod
    def parse(self, message: str, categories: list[Category]) -> TransactionIntent | None:
        """Turn a chat message into a transaction intent, or None when it cannot."""
        pass
