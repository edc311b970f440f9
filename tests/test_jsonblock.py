import pytest

from expense_tracker.domain.jsonblock import as_number, extract_json_object, find_json_object


def test_extracts_object_wrapped_in_prose() -> None:
    text = 'Đây là kết quả:\n```json\n{"amount": 50000, "type": "expense"}\n```\nChúc bạn vui!'
    assert extract_json_object(text) == {"amount": 50000, "type": "expense"}


def test_nested_objects_are_not_truncated() -> None:
    text = 'x {"a": {"b": {"c": 1}}, "d": 2} y {"e": 3}'
    assert find_json_object(text) == '{"a": {"b": {"c": 1}}, "d": 2}'


def test_braces_inside_strings_are_ignored() -> None:
    text = '{"summary": "chi tiêu } nhiều {", "tips": ["a \\" }"]}'
    assert extract_json_object(text) == {"summary": "chi tiêu } nhiều {", "tips": ['a " }']}


@pytest.mark.parametrize(
    "text",
    [None, "", "không có json", '{"amount": 5', "{not json}", "[1, 2]"],
)
def test_unusable_output(text: str | None) -> None:
    assert extract_json_object(text) is None


@pytest.mark.parametrize(
    ("value", "expected"),
    [(50000, 50000.0), ("1500000", 1500000.0), (1.5, 1.5), (True, None), ("abc", None), (None, None), ("nan", None)],
)
def test_as_number(value: object, expected: float | None) -> None:
    assert as_number(value) == expected
