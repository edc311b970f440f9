import re

THOUSAND = 1_000
MILLION = 1_000_000

# A unit marker must end the token: "2 món" is not "2m".
_END = r"(?!\w)"

# Ordered by priority; the first pattern that matches anywhere in the text wins.
# Each entry: (pattern, multiplier, group may hold a decimal fraction rather
# than thousands separators).
_AMOUNT_PATTERNS: tuple[tuple[re.Pattern[str], int, bool], ...] = (
    (re.compile(r"(\d+(?:[.,]\d{3})*)\s*(?:đồng|đ|vnd|d)" + _END, re.IGNORECASE), 1, False),
    (re.compile(r"(\d+(?:[.,]\d+)*)\s*(?:triệu|tr|m)" + _END, re.IGNORECASE), MILLION, True),
    (re.compile(r"(\d+(?:[.,]\d+)*)\s*(?:nghìn|ngàn|k)" + _END, re.IGNORECASE), THOUSAND, True),
    (re.compile(r"(\d+(?:[.,]\d{3})*)"), 1, False),
)


def _to_number(raw: str, decimal: bool) -> float:
    groups = re.split(r"[.,]", raw)
    # "1.200k" is grouped thousands; only "1.5tr" / "1,5tr" read as a fraction.
    is_grouped = all(len(g) == 3 for g in groups[1:])
    if decimal and len(groups) == 2 and not is_grouped:
        return float(".".join(groups))
    return float("".join(groups))


def extract_amount(text: str) -> float | None:
    """
    Parse a Vietnamese money expression ("50k", "1.5tr", "200 nghìn",
    "1.000.000đ") into whole VND. Returns None when no positive amount is found.
    """
    for pattern, multiplier, decimal in _AMOUNT_PATTERNS:
        match = pattern.search(text)
        if not match:
            continue
        amount = round(_to_number(match.group(1), decimal) * multiplier)
        if amount <= 0:
            return None
        return float(amount)
    return None
