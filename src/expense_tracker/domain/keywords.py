from types import MappingProxyType

from expense_tracker.models import TransactionKind

INCOME_KEYWORDS: tuple[str, ...] = ("nhận", "thu", "lương", "thưởng", "được", "bán", "tiền về")

DEFAULT_EXPENSE_CATEGORY = "Khác"
DEFAULT_INCOME_CATEGORY = "Thu nhập khác"

# Table order is the tie-break order.
CATEGORY_KEYWORDS: MappingProxyType[str, tuple[str, ...]] = MappingProxyType({
    "Ăn uống": ("ăn", "uống", "cơm", "phở", "cafe", "trưa", "sáng", "tối", "nhậu", "bia"),
    "Di chuyển": ("grab", "xe", "taxi", "xăng", "gửi xe"),
    "Mua sắm": ("mua", "shopping", "shopee", "lazada"),
    "Giải trí": ("xem phim", "game", "chơi", "du lịch", "karaoke"),
    "Hóa đơn": ("điện", "nước", "internet", "wifi", "tiền nhà"),
    "Sức khỏe": ("thuốc", "bệnh viện", "khám"),
    "Lương": ("lương", "salary"),
    "Thưởng": ("thưởng", "bonus"),
})


def detect_kind(lowered: str) -> TransactionKind:
    for keyword in INCOME_KEYWORDS:
        if keyword in lowered:
            return "income"
    return "expense"


def default_category(kind: TransactionKind) -> str:
    return DEFAULT_INCOME_CATEGORY if kind == "income" else DEFAULT_EXPENSE_CATEGORY


def match_category(lowered: str, kind: TransactionKind) -> str:
    """Return the label whose keywords occur most often in the message."""
    matched = default_category(kind)
    max_matches = 0
    for label, keywords in CATEGORY_KEYWORDS.items():
        matches = sum(1 for keyword in keywords if keyword in lowered)
        if matches > max_matches:
            max_matches = matches
            matched = label
    return matched
