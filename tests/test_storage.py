import json
from datetime import date
from pathlib import Path

import pytest

from expense_tracker.integration.storage import DEFAULT_CATEGORIES, TransactionStore
from expense_tracker.models import TransactionIntent


@pytest.fixture
def store(tmp_path: Path) -> TransactionStore:
    return TransactionStore(data_path=str(tmp_path / "expenses.json"))


def _intent(amount: float, on: date) -> TransactionIntent:
    return TransactionIntent(amount=amount, description="ăn trưa", category_name="Ăn uống", kind="expense", date=on)


def test_defaults_seeded_once(store: TransactionStore) -> None:
    assert len(store.list_categories("u1")) == len(DEFAULT_CATEGORIES)

    store.load()
    assert len(store.list_categories("u1")) == len(DEFAULT_CATEGORIES)


def test_user_categories_are_private(store: TransactionStore) -> None:
    store.create_category("u1", "Thú cưng", "expense", icon="🐶")

    names_u1 = [c.name for c in store.list_categories("u1")]
    names_u2 = [c.name for c in store.list_categories("u2")]

    assert names_u1[-1] == "Thú cưng"
    assert "Thú cưng" not in names_u2


def test_create_and_list_transactions(store: TransactionStore) -> None:
    food = next(c for c in store.list_categories("u1") if c.name == "Ăn uống")
    store.create_transaction("u1", _intent(50_000, date(2026, 10, 18)), food)
    store.create_transaction("u1", _intent(70_000, date(2026, 10, 19)), food)
    store.create_transaction("u2", _intent(90_000, date(2026, 10, 19)), food)

    store.load()
    rows = store.list_transactions(["u1"])

    assert [t.amount for t in rows] == [70_000, 50_000]
    assert rows[0].category.name == "Ăn uống"
    assert store.list_transactions(["u1"], start=date(2026, 10, 19)) == rows[:1]
    assert store.list_transactions(["u1"], end=date(2026, 10, 18))[0].amount == 50_000


def test_family_membership(store: TransactionStore) -> None:
    assert store.family_user_ids("u1") == ["u1"]

    store.join_family("u1", "fam")
    store.join_family("u2", "fam")
    store.join_family("u3", "other")

    assert store.family_user_ids("u2") == ["u1", "u2"]
    assert store.family_user_ids("u3") == ["u3"]


def test_unreadable_file_is_kept_aside(tmp_path: Path) -> None:
    data_path = tmp_path / "expenses.json"
    broken = '{"transactions": [{"id": "t1", "amount": 5'
    data_path.write_text(broken, encoding="utf-8")

    store = TransactionStore(data_path=str(data_path))

    assert (tmp_path / "expenses.json.corrupt").read_text(encoding="utf-8") == broken
    assert len(store.list_categories("u1")) == len(DEFAULT_CATEGORIES)
    assert json.loads(data_path.read_text(encoding="utf-8"))["transactions"] == []


def test_save_leaves_no_temp_files(store: TransactionStore, tmp_path: Path) -> None:
    food = next(c for c in store.list_categories("u1") if c.name == "Ăn uống")
    store.create_transaction("u1", _intent(50_000, date(2026, 10, 18)), food)

    assert sorted(p.name for p in tmp_path.iterdir()) == ["expenses.json"]
