import json
import math
from typing import Any


def find_json_object(text: str) -> str | None:
    """
    Return the first balanced ``{...}`` block in ``text``.

    Braces inside JSON string literals are ignored, so nested objects and
    values such as ``"a {b}"`` do not cut the block short. Returns None when
    no opening brace exists or the block never closes.
    """
    start = text.find("{")
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start:index + 1]
    return None


def extract_json_object(text: str | None) -> dict[str, Any] | None:
    """Parse the first JSON object embedded in free-form model output."""
    if not text:
        return None
    block = find_json_object(text)
    if block is None:
        return None
    try:
        parsed = json.loads(block)
    except json.JSONDecodeError:
        return None
    if not isinstance(parsed, dict):
        return None
    return parsed


def as_number(value: Any) -> float | None:
    """Coerce a JSON value to a finite float; booleans and garbage give None."""
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number
