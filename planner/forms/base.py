"""Shared plumbing for the item forms (add/edit modals).

A form is opened either blank or seeded from an existing record, edited field
by field, then submitted. Submission validates the current values; on success
the normalized record is passed to ``on_save`` and the form closes, on failure
``errors`` holds a field -> message mapping and nothing is emitted.
"""
from __future__ import annotations

import datetime
import math
import re
from typing import Any, Callable, Dict, Optional

from ..data_model import FormModel, Profile

Record = Dict[str, Any]
SaveCallback = Callable[[Record], None]
CloseCallback = Callable[[], None]

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def sanitize_numeric(text: Any, allow_negative: bool = True, allow_decimal: bool = True) -> str:
    """Drop every character the numeric inputs would refuse at keypress time."""
    allowed = "0123456789"
    if allow_decimal:
        allowed += "."
    if allow_negative:
        allowed += "-"
    return "".join(ch for ch in str(text or "") if ch in allowed)


def parse_int(value: Any) -> Optional[int]:
    """parseInt-style conversion: "2025" -> 2025, "4.9" -> 4, "" -> None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value) if math.isfinite(value) else None
    match = _LEADING_INT.match(str(value).replace(",", ""))
    return int(match.group(1)) if match else None


def parse_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(str(value).replace(",", "").strip())
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def percent_text(fraction: Any) -> str:
    """0.045 -> "4.5"; the inverse of `fraction_from_percent`."""
    value = round(float(fraction) * 100.0, 6)
    if value.is_integer():
        return str(int(value))
    return f"{value:.6f}".rstrip("0").rstrip(".")


def fraction_from_percent(text: Any) -> float:
    return round((parse_float(text) or 0.0) / 100.0, 10)


def present(value: Any) -> bool:
    return value is not None and value != ""


def check_title(values: Record, errors: Dict[str, str], message: str) -> None:
    if not str(values.get("title") or "").strip():
        errors["title"] = message


def check_positive(
    values: Record,
    field: str,
    errors: Dict[str, str],
    message: str,
    integer: bool = True,
) -> None:
    raw = values.get(field)
    number = parse_int(raw) if integer else parse_float(raw)
    if number is None or number <= 0:
        errors[field] = message


def check_non_negative(values: Record, field: str, errors: Dict[str, str], message: str) -> None:
    if not present(values.get(field)):
        return
    number = parse_float(values.get(field))
    if number is None or number < 0:
        errors[field] = message


def check_year_order(
    values: Record,
    start_field: str,
    end_field: str,
    errors: Dict[str, str],
    message: str,
) -> None:
    start = parse_int(values.get(start_field))
    end = parse_int(values.get(end_field))
    if start is None:
        errors[start_field] = "년도를 입력해주세요."
        return
    if end is None:
        errors[end_field] = "년도를 입력해주세요."
        return
    if start > end:
        errors[end_field] = message


def check_rate(
    values: Record,
    field: str,
    errors: Dict[str, str],
    message: str,
    low: float = 0.0,
    high: float = 100.0,
) -> None:
    number = parse_float(values.get(field))
    if number is None or number < low or number > high:
        errors[field] = message


class ItemForm:
    """Base add/edit form. Subclasses provide `model` and the four hooks."""

    model: FormModel

    def __init__(
        self,
        on_save: SaveCallback | None = None,
        on_close: CloseCallback | None = None,
        profile: Profile | None = None,
        current_year: int | None = None,
    ) -> None:
        self.on_save = on_save
        self.on_close = on_close
        self.profile = profile
        self.current_year = current_year or datetime.date.today().year
        self.is_open = False
        self.edit_data: Record | None = None
        self.values: Record = self.defaults()
        self.errors: Dict[str, str] = {}

    @property
    def is_edit(self) -> bool:
        return self.edit_data is not None

    def retirement_year(self, fallback_offset: int) -> int:
        if self.profile and self.profile.birth_year and self.profile.retirement_age:
            return self.profile.retirement_year
        return self.current_year + fallback_offset

    def open(self, edit_data: Record | None = None) -> Record:
        self.is_open = True
        self.edit_data = dict(edit_data) if edit_data else None
        self.values = self.load(self.edit_data) if self.edit_data else self.defaults()
        self.errors = {}
        return self.values

    def update(self, **changes: Any) -> Record:
        self.values.update(changes)
        return self.values

    def validate(self) -> bool:
        self.errors = self.check(self.values)
        return not self.errors

    def submit(self) -> Record | None:
        if not self.validate():
            return None
        record = self.normalize(self.values)
        if self.edit_data and self.edit_data.get("id"):
            record["id"] = self.edit_data["id"]
        if self.on_save:
            self.on_save(record)
        self.close()
        return record

    def close(self) -> None:
        self.is_open = False
        self.edit_data = None
        self.values = self.defaults()
        self.errors = {}
        if self.on_close:
            self.on_close()

    def defaults(self) -> Record:
        raise NotImplementedError

    def load(self, edit_data: Record) -> Record:
        raise NotImplementedError

    def check(self, values: Record) -> Dict[str, str]:
        raise NotImplementedError

    def normalize(self, values: Record) -> Record:
        raise NotImplementedError
