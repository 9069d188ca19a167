from __future__ import annotations

from typing import Dict

from ..data_model import DEBT_TYPES, DebtFormModel
from .base import (
    ItemForm,
    Record,
    check_positive,
    check_rate,
    check_title,
    check_year_order,
    fraction_from_percent,
    parse_int,
    percent_text,
    present,
)

DEFAULT_INTEREST_RATE = "3.5"
DEFAULT_GRACE_PERIOD = 5


class DebtForm(ItemForm):
    model = DebtFormModel()

    def defaults(self) -> Record:
        values = self.model.blank_values()
        values.update(
            startYear=self.current_year,
            endYear=self.retirement_year(5),
            interestRate=DEFAULT_INTEREST_RATE,
            gracePeriod=DEFAULT_GRACE_PERIOD,
        )
        return values

    def load(self, edit_data: Record) -> Record:
        rate = edit_data.get("interestRate")
        grace = parse_int(edit_data.get("gracePeriod"))
        return {
            "title": edit_data.get("title") or "",
            "debtType": edit_data.get("debtType") or "bullet",
            "debtAmount": edit_data.get("debtAmount") if present(edit_data.get("debtAmount")) else "",
            "startYear": parse_int(edit_data.get("startYear")) or self.current_year,
            "endYear": parse_int(edit_data.get("endYear")) or self.retirement_year(5),
            "interestRate": percent_text(rate) if present(rate) else DEFAULT_INTEREST_RATE,
            "gracePeriod": grace if grace is not None else 0,
            "addCashToFlow": bool(edit_data.get("addCashToFlow")),
            "memo": edit_data.get("memo") or "",
        }

    def check(self, values: Record) -> Dict[str, str]:
        errors: Dict[str, str] = {}
        check_title(values, errors, "부채 항목명을 입력해주세요.")
        if values.get("debtType") not in DEBT_TYPES:
            errors["debtType"] = "상환 방식을 선택해주세요."
        check_positive(values, "debtAmount", errors, "대출 금액을 입력해주세요.")
        check_year_order(values, "startYear", "endYear", errors, "종료년도는 시작년도보다 늦어야 합니다.")
        check_rate(values, "interestRate", errors, "이자율은 0-100% 사이의 유효한 숫자여야 합니다.")
        if values.get("debtType") == "grace" and "endYear" not in errors and "startYear" not in errors:
            term = parse_int(values.get("endYear")) - parse_int(values.get("startYear")) + 1
            grace = parse_int(values.get("gracePeriod"))
            if grace is None or grace < 0 or grace >= term:
                errors["gracePeriod"] = "거치기간은 0년 이상, 대출기간보다 짧아야 합니다."
        return errors

    def normalize(self, values: Record) -> Record:
        return {
            "title": values["title"],
            "debtType": values["debtType"],
            "debtAmount": parse_int(values["debtAmount"]),
            "startYear": parse_int(values["startYear"]),
            "endYear": parse_int(values["endYear"]),
            "interestRate": fraction_from_percent(values["interestRate"]),
            "gracePeriod": parse_int(values.get("gracePeriod")) or 0,
            "addCashToFlow": bool(values.get("addCashToFlow")),
            "memo": values.get("memo") or "",
        }
