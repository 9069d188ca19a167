from __future__ import annotations

from typing import Dict, Tuple

from ..data_model import PENSION_TYPE_LABELS, PENSION_TYPES, PensionFormModel
from ..data_model.pension import CONTRIBUTION_FREQUENCIES
from .base import (
    ItemForm,
    Record,
    check_non_negative,
    check_positive,
    check_rate,
    check_title,
    check_year_order,
    fraction_from_percent,
    parse_int,
    percent_text,
    present,
)

PAYMENT_START_AGE = 65
PAYMENT_END_AGE = 90
DEFAULT_INFLATION_RATE = "2.5"
DEFAULT_RETURN_RATE = "5.0"


class PensionForm(ItemForm):
    """National pensions carry a monthly benefit; the other two types are
    accumulated from contributions and then paid out over the payment years.
    Fields that do not belong to the selected type are zeroed on submit."""

    model = PensionFormModel()

    def age_years(self) -> Tuple[int, int]:
        """Years in which the profile turns 65 and 90."""
        current_age = 0
        if self.profile and self.profile.birth_year:
            current_age = self.profile.age_in(self.current_year)
        return (
            self.current_year + (PAYMENT_START_AGE - current_age),
            self.current_year + (PAYMENT_END_AGE - current_age),
        )

    def defaults(self) -> Record:
        age65_year, age90_year = self.age_years()
        values = self.model.blank_values()
        values.update(
            startYear=age65_year,
            endYear=age90_year,
            inflationRate=DEFAULT_INFLATION_RATE,
            contributionStartYear=self.current_year,
            contributionEndYear=self.current_year + 10,
            returnRate=DEFAULT_RETURN_RATE,
            paymentStartYear=age65_year,
            paymentEndYear=age90_year,
        )
        return values

    def load(self, edit_data: Record) -> Record:
        inflation = edit_data.get("inflationRate")
        return_rate = edit_data.get("returnRate")
        frequency = edit_data.get("contributionFrequency")
        return {
            "type": edit_data.get("type") or "national",
            "title": edit_data.get("title") or "",
            "monthlyAmount": edit_data.get("monthlyAmount") or "",
            "startYear": parse_int(edit_data.get("startYear")) or self.current_year,
            "endYear": parse_int(edit_data.get("endYear")) or self.current_year + 20,
            "inflationRate": percent_text(inflation) if present(inflation) else DEFAULT_INFLATION_RATE,
            "currentAmount": edit_data.get("currentAmount") or "",
            "contributionAmount": edit_data.get("contributionAmount") or "",
            "contributionFrequency": frequency if frequency in CONTRIBUTION_FREQUENCIES else "monthly",
            "contributionStartYear": parse_int(edit_data.get("contributionStartYear")) or self.current_year,
            "contributionEndYear": parse_int(edit_data.get("contributionEndYear")) or self.current_year + 10,
            "returnRate": percent_text(return_rate) if present(return_rate) else DEFAULT_RETURN_RATE,
            "paymentStartYear": parse_int(edit_data.get("paymentStartYear")) or self.current_year + 11,
            "paymentEndYear": parse_int(edit_data.get("paymentEndYear")) or self.current_year + 20,
            "memo": edit_data.get("memo") or "",
        }

    def set_type(self, pension_type: str) -> Record:
        self.values["type"] = pension_type
        if pension_type in PENSION_TYPE_LABELS:
            self.values["title"] = PENSION_TYPE_LABELS[pension_type]
        if pension_type == "national":
            self.values["startYear"], self.values["endYear"] = self.age_years()
        return self.values

    def check(self, values: Record) -> Dict[str, str]:
        errors: Dict[str, str] = {}
        pension_type = values.get("type")
        if pension_type not in PENSION_TYPES:
            errors["type"] = "연금 타입을 선택해주세요."
        check_title(values, errors, "연금 항목명을 입력해주세요.")
        if pension_type == "national":
            check_positive(values, "monthlyAmount", errors, "월 수령 금액을 입력해주세요.")
            check_year_order(values, "startYear", "endYear", errors, "종료년도는 시작년도보다 늦어야 합니다.")
            check_rate(values, "inflationRate", errors, "물가상승률은 0-100% 사이여야 합니다.")
        elif pension_type in PENSION_TYPES:
            check_non_negative(values, "currentAmount", errors, "현재 보유액은 0 이상이어야 합니다.")
            check_positive(values, "contributionAmount", errors, "적립 금액을 입력해주세요.")
            check_year_order(
                values,
                "contributionStartYear",
                "contributionEndYear",
                errors,
                "적립 종료년도는 시작년도보다 늦어야 합니다.",
            )
            check_year_order(
                values,
                "paymentStartYear",
                "paymentEndYear",
                errors,
                "수령 종료년도는 시작년도보다 늦어야 합니다.",
            )
            contribution_end = parse_int(values.get("contributionEndYear"))
            payment_start = parse_int(values.get("paymentStartYear"))
            if (
                contribution_end is not None
                and payment_start is not None
                and contribution_end >= payment_start
            ):
                errors["paymentStartYear"] = "수령 시작년도는 적립 종료년도보다 늦어야 합니다."
            check_rate(values, "returnRate", errors, "투자 수익률은 0-100% 사이여야 합니다.")
        return errors

    def normalize(self, values: Record) -> Record:
        national = values["type"] == "national"
        record: Record = {
            "type": values["type"],
            "title": values["title"],
            "memo": values.get("memo") or "",
        }
        if national:
            start_year = parse_int(values["startYear"])
            end_year = parse_int(values["endYear"])
            record.update(
                monthlyAmount=parse_int(values["monthlyAmount"]),
                startYear=start_year,
                endYear=end_year,
                inflationRate=fraction_from_percent(values["inflationRate"]),
                currentAmount=0,
                contributionAmount=0,
                contributionFrequency="monthly",
                contributionStartYear=0,
                contributionEndYear=0,
                returnRate=0.0,
                paymentStartYear=0,
                paymentEndYear=0,
                paymentYears=end_year - start_year + 1,
            )
        else:
            payment_start = parse_int(values["paymentStartYear"])
            payment_end = parse_int(values["paymentEndYear"])
            record.update(
                monthlyAmount=0,
                startYear=0,
                endYear=0,
                inflationRate=0.0,
                currentAmount=parse_int(values.get("currentAmount")) or 0,
                contributionAmount=parse_int(values["contributionAmount"]),
                contributionFrequency=values.get("contributionFrequency") or "monthly",
                contributionStartYear=parse_int(values["contributionStartYear"]),
                contributionEndYear=parse_int(values["contributionEndYear"]),
                returnRate=fraction_from_percent(values["returnRate"]),
                paymentStartYear=payment_start,
                paymentEndYear=payment_end,
                paymentYears=payment_end - payment_start + 1,
            )
        return record
