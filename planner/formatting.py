"""Amount formatting helpers.

All plan amounts are stored in 만원 (10,000 KRW). Chart helpers emit short
labels ("1.2억", "5.0천") that `parse_chart_amount` reads back, so labels can be
round-tripped without drifting.
"""
from __future__ import annotations

import math
import re
from typing import Any, Callable, Sequence

CHART_UNITS: tuple[tuple[float, str], ...] = ((10000, "억"), (1000, "천"))
WON_AXIS_UNITS: tuple[tuple[float, str], ...] = ((100_000_000, "억"), (10_000, "만"))


def _to_number(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def _locale(number: float) -> str:
    """Thousands separators, at most three decimals (like toLocaleString)."""
    if float(number).is_integer():
        return f"{int(number):,}"
    return f"{number:,.3f}".rstrip("0").rstrip(".")


def _plain(number: float) -> str:
    if float(number).is_integer():
        return str(int(number))
    return f"{number:g}"


def _scaled_label(number: float, units: Sequence[tuple[float, str]], plain: Callable[[float], str]) -> str:
    sign = "-" if number < 0 else ""
    magnitude = abs(number)
    chosen = None
    for index, (size, _suffix) in enumerate(units):
        if magnitude >= size:
            chosen = index
            break
    if chosen is None:
        smallest = units[-1][0]
        if round(magnitude) < smallest:
            return plain(number)
        chosen = len(units) - 1
    # "10.0천" must be shown as "1.0억" so the label parses back to the same unit
    while chosen > 0 and round(magnitude / units[chosen][0], 1) * units[chosen][0] >= units[chosen - 1][0]:
        chosen -= 1
    size, suffix = units[chosen]
    return f"{sign}{magnitude / size:.1f}{suffix}"


def _parse_scaled(text: Any, units: Sequence[tuple[float, str]]) -> float | int:
    raw = str(text).strip().replace(",", "")
    for size, suffix in units:
        if raw.endswith(suffix):
            number = float(raw[: -len(suffix)]) * size
            break
    else:
        number = float(raw)
    number = round(number, 6)
    return int(number) if number.is_integer() else number


def format_amount(amount: Any) -> str:
    """12000 -> "1억 2,000만원", 3500 -> "3,500만원"."""
    number = _to_number(amount)
    if number is None:
        return "0만원"
    if number >= 10000:
        eok = int(number // 10000)
        remainder = number - eok * 10000
        if remainder == 0:
            return f"{eok}억원"
        return f"{eok}억 {_locale(remainder)}만원"
    return f"{_locale(number)}만원"


def format_amount_short(amount: Any) -> str:
    number = _to_number(amount)
    if number is None:
        return "0만원"
    if number >= 10000:
        return f"{number / 10000:.1f}억원"
    if number >= 1000:
        return f"{number / 1000:.1f}천만원"
    return f"{_locale(number)}만원"


def format_amount_for_chart(amount: Any) -> str:
    """Axis/tooltip label in 만원 units: 12000 -> "1.2억", 4321 -> "4.3천"."""
    number = _to_number(amount)
    if number is None:
        return "0"
    return _scaled_label(number, CHART_UNITS, _plain)


def parse_chart_amount(label: Any) -> float | int:
    """Inverse of `format_amount_for_chart`; raises ValueError on junk."""
    return _parse_scaled(label, CHART_UNITS)


def format_y_axis(value: Any) -> str:
    """Axis label for raw won values: 150,000,000 -> "1.5억", 25,000 -> "2.5만"."""
    number = _to_number(value)
    if number is None:
        return "0"
    return _scaled_label(number, WON_AXIS_UNITS, lambda n: f"{n:,.0f}")


def parse_y_axis(label: Any) -> float | int:
    return _parse_scaled(label, WON_AXIS_UNITS)


def format_currency(value: Any) -> str:
    number = _to_number(value)
    if number is None:
        return "0원"
    rounded = int(round(number))
    if rounded < 0:
        return f"-₩{abs(rounded):,}"
    return f"₩{rounded:,}"


def only_digits_to_number(text: Any) -> int | None:
    if text is None or text == "":
        return None
    digits = re.sub(r"[^\d]", "", str(text))
    return int(digits) if digits else None


def parse_amount(text: Any) -> int:
    if not text or not isinstance(text, str):
        return 0
    return only_digits_to_number(text) or 0


def format_krw_comma(value: Any) -> str:
    """Input-field display: digits with separators, no 억 conversion."""
    if value is None or value == "":
        return ""
    number = value if isinstance(value, (int, float)) and not isinstance(value, bool) else only_digits_to_number(value)
    if number is None:
        return ""
    return _locale(number)


def _with_billion(value: Any, suffix: str = "") -> str:
    if value is None or value == "":
        return "—"
    number = _to_number(value)
    if number is None:
        return "—"
    if number >= 10000:
        billion = int(number // 10000)
        remainder = number - billion * 10000
        if remainder == 0:
            return f"{billion:,}억원{suffix}"
        return f"{billion:,}억 {_locale(remainder)}만원{suffix}"
    return f"{_locale(number)}만원{suffix}"


def format_krw(value: Any) -> str:
    return _with_billion(value)


def format_krw_monthly(value: Any) -> str:
    return _with_billion(value, "/월")


def format_percent(value: Any) -> str:
    if value is None or value == "":
        return "—"
    number = _to_number(value)
    if number is None:
        return "—"
    return f"{_plain(number)}%"
