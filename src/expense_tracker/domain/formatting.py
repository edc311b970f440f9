from datetime import date

_WEEKDAYS = ("Thứ Hai", "Thứ Ba", "Thứ Tư", "Thứ Năm", "Thứ Sáu", "Thứ Bảy", "Chủ Nhật")


def group_thousands(amount: float) -> str:
    return f"{round(amount):,}".replace(",", ".")


def format_vnd(amount: float) -> str:
    """50000 -> '50.000 ₫'"""
    return f"{group_thousands(amount)} ₫"


def format_money(amount: float) -> str:
    """50000 -> '50.000đ'"""
    return f"{group_thousands(amount)}đ"


def format_long_date(value: date) -> str:
    return f"{_WEEKDAYS[value.weekday()]}, {value:%d/%m/%Y}"


def format_month_name(value: date) -> str:
    return f"tháng {value.month} năm {value.year}"
