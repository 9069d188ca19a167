from __future__ import annotations

from typing import Dict

from ..data_model import ExpenseFormModel, IncomeFormModel, SavingFormModel
from ..data_model.cashflow import EXPENSE_FREQUENCIES, INCOME_FREQUENCIES, SAVING_FREQUENCIES
from .base import (
    ItemForm,
    Record,
    check_non_negative,
    check_positive,
    check_rate,
    check_title,
    check_year_order,
    fraction_from_percent,
    parse_float,
    parse_int,
    percent_text,
    present,
)


def _text(value) -> str:
    number = parse_float(value)
    if number is None:
        return ""
    return str(int(number)) if number.is_integer() else str(number)


class IncomeForm(ItemForm):
    """Growth rate stays a percentage in the stored record."""

    model = IncomeFormModel()

    def defaults(self) -> Record:
        values = self.model.blank_values()
        values.update(startYear=self.current_year, endYear=self.retirement_year(10) - 1)
        return values

    def load(self, edit_data: Record) -> Record:
        growth = edit_data.get("growthRate")
        return {
            "title": edit_data.get("title") or "",
            "frequency": edit_data.get("originalFrequency") or edit_data.get("frequency") or "monthly",
            "amount": edit_data.get("originalAmount") or edit_data.get("amount") or "",
            "startYear": parse_int(edit_data.get("startYear")) or self.current_year,
            "endYear": parse_int(edit_data.get("endYear")) or self.retirement_year(10) - 1,
            "growthRate": _text(growth) if present(growth) else "2.5",
            "memo": edit_data.get("memo") or "",
        }

    def check(self, values: Record) -> Dict[str, str]:
        errors: Dict[str, str] = {}
        check_title(values, errors, "수입 항목명을 입력해주세요.")
        if values.get("frequency") not in INCOME_FREQUENCIES:
            errors["frequency"] = "주기를 선택해주세요."
        check_positive(values, "amount", errors, "금액을 입력해주세요.")
        check_year_order(values, "startYear", "endYear", errors, "종료년도는 시작년도보다 늦어야 합니다.")
        check_rate(values, "growthRate", errors, "상승률은 0-100% 사이의 유효한 숫자여야 합니다.")
        return errors

    def normalize(self, values: Record) -> Record:
        amount = parse_int(values["amount"])
        return {
            "title": values["title"],
            "frequency": values["frequency"],
            "amount": amount,
            "startYear": parse_int(values["startYear"]),
            "endYear": parse_int(values["endYear"]),
            "growthRate": parse_float(values["growthRate"]),
            "memo": values.get("memo") or "",
            "originalAmount": amount,
            "originalFrequency": values["frequency"],
        }


class ExpenseForm(ItemForm):
    """Growth rate stays a percentage and may be negative."""

    model = ExpenseFormModel()

    def defaults(self) -> Record:
        values = self.model.blank_values()
        values.update(startYear=self.current_year, endYear=self.retirement_year(10))
        return values

    def load(self, edit_data: Record) -> Record:
        growth = edit_data.get("growthRate")
        return {
            "title": edit_data.get("title") or "",
            "frequency": edit_data.get("originalFrequency") or edit_data.get("frequency") or "monthly",
            "amount": edit_data.get("originalAmount") or edit_data.get("amount") or "",
            "startYear": parse_int(edit_data.get("startYear")) or self.current_year,
            "endYear": parse_int(edit_data.get("endYear")) or self.retirement_year(10),
            "growthRate": _text(growth) if present(growth) else "1.89",
            "isFixedToRetirementYear": bool(edit_data.get("isFixedToRetirementYear")),
            "memo": edit_data.get("memo") or "",
        }

    def update(self, **changes) -> Record:
        values = super().update(**changes)
        if values.get("isFixedToRetirementYear"):
            values["endYear"] = self.retirement_year(10)
        return values

    def check(self, values: Record) -> Dict[str, str]:
        errors: Dict[str, str] = {}
        check_title(values, errors, "제목을 입력해주세요.")
        if values.get("frequency") not in EXPENSE_FREQUENCIES:
            errors["frequency"] = "주기를 선택해주세요."
        check_positive(values, "amount", errors, "금액을 입력해주세요.")
        if values.get("frequency") == "one_time":
            if parse_int(values.get("startYear")) is None:
                errors["startYear"] = "년도를 입력해주세요."
        else:
            check_year_order(values, "startYear", "endYear", errors, "종료년도는 시작년도보다 늦어야 합니다.")
        check_rate(values, "growthRate", errors, "상승률은 -100-100% 사이의 유효한 숫자여야 합니다.", low=-100.0)
        return errors

    def normalize(self, values: Record) -> Record:
        amount = parse_int(values["amount"])
        start_year = parse_int(values["startYear"])
        end_year = start_year if values["frequency"] == "one_time" else parse_int(values["endYear"])
        return {
            "title": values["title"],
            "frequency": values["frequency"],
            "amount": amount,
            "startYear": start_year,
            "endYear": end_year,
            "growthRate": parse_float(values["growthRate"]),
            "isFixedToRetirementYear": bool(values.get("isFixedToRetirementYear")),
            "memo": values.get("memo") or "",
            "originalAmount": amount,
            "originalFrequency": values["frequency"],
        }


class SavingForm(ItemForm):
    """Both rates are stored as fractions and shown as percentages."""

    model = SavingFormModel()

    def defaults(self) -> Record:
        values = self.model.blank_values()
        values.update(startYear=self.current_year, endYear=self.retirement_year(11))
        return values

    def load(self, edit_data: Record) -> Record:
        interest = edit_data.get("interestRate")
        growth = edit_data.get("yearlyGrowthRate")
        return {
            "title": edit_data.get("title") or "",
            "frequency": edit_data.get("originalFrequency") or edit_data.get("frequency") or "monthly",
            "amount": edit_data.get("originalAmount") or edit_data.get("amount") or "",
            "currentAmount": edit_data.get("currentAmount") or "",
            "startYear": parse_int(edit_data.get("startYear")) or self.current_year,
            "endYear": parse_int(edit_data.get("endYear")) or self.retirement_year(11),
            "interestRate": percent_text(interest) if present(interest) else "2.86",
            "yearlyGrowthRate": percent_text(growth) if present(growth) else "1.89",
            "memo": edit_data.get("memo") or "",
        }

    def check(self, values: Record) -> Dict[str, str]:
        errors: Dict[str, str] = {}
        check_title(values, errors, "저축/투자 항목명을 입력해주세요.")
        if values.get("frequency") not in SAVING_FREQUENCIES:
            errors["frequency"] = "주기를 선택해주세요."
        check_positive(values, "amount", errors, "저축/투자 금액을 입력해주세요.")
        check_non_negative(values, "currentAmount", errors, "현재 보유 금액은 0 이상이어야 합니다.")
        check_year_order(values, "startYear", "endYear", errors, "종료년도는 시작년도보다 늦어야 합니다.")
        check_rate(values, "interestRate", errors, "수익률은 -100-100% 사이의 유효한 숫자여야 합니다.", low=-100.0)
        check_rate(values, "yearlyGrowthRate", errors, "증가율은 -100-100% 사이의 유효한 숫자여야 합니다.", low=-100.0)
        return errors

    def normalize(self, values: Record) -> Record:
        amount = parse_int(values["amount"])
        return {
            "title": values["title"],
            "frequency": values["frequency"],
            "amount": amount,
            "currentAmount": parse_int(values.get("currentAmount")) or 0,
            "startYear": parse_int(values["startYear"]),
            "endYear": parse_int(values["endYear"]),
            "interestRate": fraction_from_percent(values["interestRate"]),
            "yearlyGrowthRate": fraction_from_percent(values["yearlyGrowthRate"]),
            "memo": values.get("memo") or "",
            "originalAmount": amount,
            "originalFrequency": values["frequency"],
        }
