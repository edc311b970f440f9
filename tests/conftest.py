from datetime import date
from itertools import count

import pytest

from expense_tracker.models import Category, TransactionKind, TransactionWithCategory

_ids = count(1)


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def categories() -> list[Category]:
    return [
        Category(id="c-food", name="Ăn uống", icon="🍜", color="#ef4444", kind="expense", is_default=True),
        Category(id="c-move", name="Di chuyển", icon="🚗", color="#f97316", kind="expense", is_default=True),
        Category(id="c-other", name="Khác", icon="📁", color="#6b7280", kind="expense", is_default=True),
        Category(id="c-salary", name="Lương", icon="💰", color="#22c55e", kind="income", is_default=True),
    ]


def _make_transaction(
    category: Category,
    amount: float,
    on: date,
    kind: TransactionKind | None = None,
    user_id: str = "u1",
) -> TransactionWithCategory:
    return TransactionWithCategory(
        id=f"t{next(_ids)}",
        amount=amount,
        description=category.name,
        date=on,
        kind=kind or category.kind,
        category_id=category.id,
        user_id=user_id,
        category=category,
    )


@pytest.fixture
def make_transaction():
    return _make_transaction

