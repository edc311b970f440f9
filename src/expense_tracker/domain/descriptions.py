import re

# Amounts go first so the single-letter pronouns below never eat a unit.
_AMOUNT = re.compile(
    r"\d+(?:[.,]\d+)*\s*(?:triệu|tr|nghìn|ngàn|k|đồng|đ|vnd|d|m)?(?!\w)",
    re.IGNORECASE,
)
_LEADING_PRONOUN = re.compile(r"^(?:mình|tôi|em|anh|chị|t|mk|m)\s+", re.IGNORECASE)
_INNER_PRONOUN = re.compile(r"\s+(?:mình|tôi|em|anh|chị)\s+", re.IGNORECASE)
_TIME_PHRASE = re.compile(
    r"(?:^|\s+)(?:hôm nay|hôm qua|hôm kia|sáng nay|tối nay|trưa nay)(?!\w)",
    re.IGNORECASE,
)
_FILLER = re.compile(r"\s+(?:vừa|mới|đã|rồi|xong|được|bị|cho|về|ra|vào)(?!\w)", re.IGNORECASE)
_SPACES = re.compile(r"\s+")


def clean_description(message: str, fallback: str) -> str:
    """Strip amounts, pronouns, time phrases and filler verbs from a chat message."""
    text = _AMOUNT.sub("", message)
    text = _LEADING_PRONOUN.sub("", text.strip())
    text = _INNER_PRONOUN.sub(" ", text)
    text = _TIME_PHRASE.sub("", text)
    text = _FILLER.sub(" ", text)
    text = _SPACES.sub(" ", text).strip()

    if len(text) < 2:
        return fallback
    return text
