import logging
from collections.abc import Generator
from datetime import date
from unittest.mock import MagicMock, patch

import pytest

from expense_tracker.manager import HELP_MESSAGE, NO_CATEGORY_MESSAGE, ParserService, resolve_category
from expense_tracker.models import Category, TransactionIntent


def _intent(category_name: str, kind: str = "expense", amount: float = 50_000) -> TransactionIntent:
    return TransactionIntent(
        amount=amount,
        description="ăn trưa",
        category_name=category_name,
        kind=kind,  # type: ignore[arg-type]
        date=date(2026, 10, 19),
    )


@pytest.fixture
def mock_parsers() -> Generator[tuple[MagicMock, MagicMock], None, None]:
    with patch("expense_tracker.manager.LLMParser") as mock_llm, \
         patch("expense_tracker.manager.RuleBasedParser") as mock_rules:
        mock_llm.return_value.source = "ai"
        mock_rules.return_value.source = "rules"
        yield mock_llm, mock_rules


def test_service_without_llm_only_uses_rules(mock_parsers: tuple[MagicMock, MagicMock]) -> None:
    mock_llm_cls, mock_rules_cls = mock_parsers

    service = ParserService(llm=None)

    assert service.parsers == [mock_rules_cls.return_value]
    mock_llm_cls.assert_not_called()


def test_orchestration_priority(mock_parsers: tuple[MagicMock, MagicMock], categories: list[Category]) -> None:
    mock_llm_cls, mock_rules_cls = mock_parsers
    llm_instance = mock_llm_cls.return_value
    rules_instance = mock_rules_cls.return_value

    service = ParserService(llm=MagicMock())

    # Case 1: model succeeds
    llm_instance.parse.return_value = _intent("ăn uống")
    result = service.parse("ăn trưa 50k", categories)
    assert result.status == "ai"
    assert result.used_ai
    assert result.category is not None
    assert result.category.id == "c-food"
    rules_instance.parse.assert_not_called()

    # Case 2: model gives up, rules succeed
    llm_instance.parse.return_value = None
    rules_instance.parse.return_value = _intent("Ăn uống")
    result = service.parse("ăn trưa 50k", categories)
    assert result.status == "rules"
    assert not result.used_ai

    # Case 3: model raises, rules still run
    llm_instance.parse.side_effect = RuntimeError("boom")
    result = service.parse("ăn trưa 50k", categories)
    assert result.status == "rules"


def test_all_parsers_fail(mock_parsers: tuple[MagicMock, MagicMock], categories: list[Category]) -> None:
    _, mock_rules_cls = mock_parsers
    mock_rules_cls.return_value.parse.return_value = None

    result = ParserService(llm=None).parse("xyz", categories)

    assert result.status == "failed"
    assert not result.ok
    assert result.reply == HELP_MESSAGE
    assert "ăn trưa 50k" in result.reply


def test_no_category_of_kind(categories: list[Category]) -> None:
    expense_only = [c for c in categories if c.kind == "expense"]

    result = ParserService(llm=None).parse("Nhận lương 15tr", expense_only)

    assert result.status == "no_category"
    assert result.reply == NO_CATEGORY_MESSAGE
    assert result.intent is not None
    assert result.category is None


def test_salary_end_to_end() -> None:
    categories = [Category(id="s", name="Lương", kind="income")]

    result = ParserService(llm=None).parse("Nhận lương 15tr", categories)

    assert result.status == "rules"
    assert result.intent is not None
    assert result.intent.amount == 15_000_000
    assert result.intent.kind == "income"
    assert result.category is not None
    assert result.category.name == "Lương"


def test_unparseable_message_end_to_end(categories: list[Category]) -> None:
    result = ParserService(llm=None).parse("xyz", categories)

    assert result.status == "failed"
    assert result.reply == HELP_MESSAGE


def test_resolve_category_rules(categories: list[Category]) -> None:
    assert resolve_category(_intent("DI CHUYỂN"), categories).id == "c-move"  # type: ignore[union-attr]
    # Unknown name: first category of the same kind
    assert resolve_category(_intent("Mua sắm"), categories).id == "c-food"  # type: ignore[union-attr]
    assert resolve_category(_intent("Thưởng", kind="income"), categories).id == "c-salary"  # type: ignore[union-attr]
    assert resolve_category(_intent("Thưởng", kind="income"), categories[:3]) is None


def test_parser_failure_is_logged_with_arguments(
    mock_parsers: tuple[MagicMock, MagicMock],
    categories: list[Category],
    caplog: pytest.LogCaptureFixture,
) -> None:
    mock_llm_cls, mock_rules_cls = mock_parsers
    mock_llm_cls.return_value.parse.side_effect = RuntimeError("boom")
    mock_rules_cls.return_value.parse.return_value = None

    with caplog.at_level(logging.ERROR, logger="expense_tracker.manager"):
        ParserService(llm=MagicMock()).parse("ăn trưa 50k", categories)

    [record] = [r for r in caplog.records if r.levelno == logging.ERROR]
    assert record.msg == "[PARSE] %s failed: %s"
    assert str(record.args[1]) == "boom"  # type: ignore[index]
