import json
import os
import tempfile
import threading
import uuid
from datetime import date
from typing import Any

from expense_tracker.logger import get_logger
from expense_tracker.models import (
    Category,
    Transaction,
    TransactionIntent,
    TransactionKind,
    TransactionWithCategory,
)

logger = get_logger(__name__)

# (name, icon, color, kind)
DEFAULT_CATEGORIES: tuple[tuple[str, str, str, TransactionKind], ...] = (
    ("Ăn uống", "🍜", "#ef4444", "expense"),
    ("Di chuyển", "🚗", "#f97316", "expense"),
    ("Mua sắm", "🛒", "#eab308", "expense"),
    ("Giải trí", "🎬", "#22c55e", "expense"),
    ("Hóa đơn", "📄", "#3b82f6", "expense"),
    ("Sức khỏe", "💊", "#8b5cf6", "expense"),
    ("Giáo dục", "📚", "#ec4899", "expense"),
    ("Tiết kiệm", "🏦", "#14b8a6", "expense"),
    ("Khác", "📁", "#6b7280", "expense"),
    ("Lương", "💰", "#22c55e", "income"),
    ("Thưởng", "🎁", "#f97316", "income"),
    ("Đầu tư", "📈", "#3b82f6", "income"),
    ("Thu nhập khác", "💵", "#8b5cf6", "income"),
)


def _new_id() -> str:
    return uuid.uuid4().hex


class TransactionStore:
    """
    JSON-file store for categories, transactions and family membership.

    Shared default categories (``user_id=None``) are seeded on first load.
    """

    def __init__(self, data_path: str = "expenses.json", seed_defaults: bool = True):
        self.data_path = data_path
        self.seed_defaults = seed_defaults
        self._lock = threading.Lock()
        self.categories: dict[str, Category] = {}
        self.transactions: dict[str, Transaction] = {}
        self.families: dict[str, str] = {}  # user_id -> family_id
        self.load()

    def load(self) -> None:
        with self._lock:
            self.categories = {}
            self.transactions = {}
            self.families = {}
            if os.path.exists(self.data_path):
                try:
                    with open(self.data_path, encoding="utf-8") as f:
                        data: dict[str, Any] = json.load(f)
                except json.JSONDecodeError:
                    # Keep the unreadable file; seeding below would otherwise overwrite it.
                    corrupt_path = f"{self.data_path}.corrupt"
                    os.replace(self.data_path, corrupt_path)
                    logger.error("[STORE] %s is not valid JSON; moved to %s, starting empty.", self.data_path, corrupt_path)
                    data = {}
                for raw in data.get("categories", []):
                    category = Category.model_validate(raw)
                    self.categories[category.id] = category
                for raw in data.get("transactions", []):
                    transaction = Transaction.model_validate(raw)
                    self.transactions[transaction.id] = transaction
                self.families = dict(data.get("families", {}))

            if self.seed_defaults and not any(c.is_default for c in self.categories.values()):
                for name, icon, color, kind in DEFAULT_CATEGORIES:
                    category = Category(id=_new_id(), name=name, icon=icon, color=color, kind=kind, is_default=True)
                    self.categories[category.id] = category
                logger.info("[STORE] Seeded %d default categories.", len(DEFAULT_CATEGORIES))
                self._save()

    def _save(self) -> None:
        payload = {
            "categories": [c.model_dump(mode="json") for c in self.categories.values()],
            "transactions": [t.model_dump(mode="json") for t in self.transactions.values()],
            "families": self.families,
        }
        directory = os.path.dirname(os.path.abspath(self.data_path))
        fd, tmp_path = tempfile.mkstemp(prefix=".expenses-", suffix=".tmp", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.data_path)
        except BaseException:
            os.unlink(tmp_path)
            raise

    def list_categories(self, user_id: str) -> list[Category]:
        """Shared defaults first, then the user's own, each sorted by name."""
        with self._lock:
            visible = [
                c for c in self.categories.values()
                if (c.is_default and c.user_id is None) or c.user_id == user_id
            ]
        return sorted(visible, key=lambda c: (not c.is_default, c.name))

    def create_category(
        self,
        user_id: str,
        name: str,
        kind: TransactionKind,
        icon: str = "📁",
        color: str = "#6b7280",
    ) -> Category:
        """Add a private category; used when seeding user data, no route exposes it."""
        category = Category(id=_new_id(), name=name, icon=icon, color=color, kind=kind, user_id=user_id)
        with self._lock:
            self.categories[category.id] = category
            self._save()
        return category

    def create_transaction(self, user_id: str, intent: TransactionIntent, category: Category) -> TransactionWithCategory:
        transaction = Transaction(
            id=_new_id(),
            amount=intent.amount,
            description=intent.description,
            date=intent.date,
            kind=intent.kind,
            category_id=category.id,
            user_id=user_id,
        )
        with self._lock:
            self.transactions[transaction.id] = transaction
            self._save()
        logger.debug("[STORE] Created transaction %s for user %s", transaction.id, user_id)
        return TransactionWithCategory(**transaction.model_dump(), category=category)

    def list_transactions(
        self,
        user_ids: list[str],
        start: date | None = None,
        end: date | None = None,
    ) -> list[TransactionWithCategory]:
        """Transactions of the given users within [start, end], newest first."""
        wanted = set(user_ids)
        with self._lock:
            rows = [
                TransactionWithCategory(**t.model_dump(), category=self.categories[t.category_id])
                for t in self.transactions.values()
                if t.user_id in wanted
                and (start is None or t.date >= start)
                and (end is None or t.date <= end)
                and t.category_id in self.categories
            ]
        rows.sort(key=lambda t: (t.date, t.created_at), reverse=True)
        return rows

    def join_family(self, user_id: str, family_id: str) -> None:
        """Link a user to a family; membership is managed outside the HTTP API."""
        with self._lock:
            self.families[user_id] = family_id
            self._save()

    def family_user_ids(self, user_id: str) -> list[str]:
        with self._lock:
            family_id = self.families.get(user_id)
            if not family_id:
                return [user_id]
            return sorted(uid for uid, fid in self.families.items() if fid == family_id)
