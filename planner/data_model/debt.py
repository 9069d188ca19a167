from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping

from .base import FieldDefinition, FormModel

DEBT_TYPES = ["bullet", "equal", "principal", "grace"]
DEBT_TYPE_LABELS = {
    "bullet": "만기일시상환",
    "equal": "원리금균등상환",
    "principal": "원금균등상환",
    "grace": "거치식상환",
}


class DebtFormModel(FormModel):
    def __init__(self) -> None:
        fields = [
            FieldDefinition("title", "부채 항목명", required=True),
            FieldDefinition(
                "debtType",
                "상환 방식",
                kind="select",
                default="bullet",
                options=DEBT_TYPES,
            ),
            FieldDefinition("debtAmount", "대출 금액 (만원)", kind="number", default="", min_value=0, step=100, required=True),
            FieldDefinition("startYear", "시작년도", kind="year", default=None, required=True),
            FieldDefinition("endYear", "종료년도", kind="year", default=None, required=True),
            FieldDefinition("interestRate", "이자율 (%)", kind="percent", default="3.5", min_value=0, max_value=100, step=0.1),
            FieldDefinition("gracePeriod", "거치기간 (년)", kind="number", default=5, min_value=0, step=1, help="거치식상환에서만 사용"),
            FieldDefinition("addCashToFlow", "대출금을 현금흐름에 반영", kind="checkbox", default=False),
            FieldDefinition("memo", "메모", kind="textarea"),
        ]
        super().__init__("debts", "부채", fields, {"debtType": DEBT_TYPE_LABELS})


@dataclass
class DebtItem:
    title: str
    debt_type: str
    amount: float
    start_year: int
    end_year: int
    interest_rate: float = 0.0
    grace_period: int = 0
    add_cash_to_flow: bool = False

    @property
    def term_years(self) -> int:
        return max(1, self.end_year - self.start_year + 1)


def records_to_debts(records: Iterable[Mapping[str, Any]]) -> List[DebtItem]:
    items: List[DebtItem] = []
    for row in records or []:
        title = str(row.get("title", "")).strip()
        if not title:
            continue
        amount = float(row.get("debtAmount", 0.0) or 0.0)
        if amount <= 0.0:
            continue
        debt_type = str(row.get("debtType", "bullet"))
        items.append(
            DebtItem(
                title=title,
                debt_type=debt_type if debt_type in DEBT_TYPES else "bullet",
                amount=amount,
                start_year=int(row.get("startYear") or 0),
                end_year=int(row.get("endYear") or row.get("startYear") or 0),
                interest_rate=float(row.get("interestRate", 0.0) or 0.0),
                grace_period=int(row.get("gracePeriod", 0) or 0),
                add_cash_to_flow=bool(row.get("addCashToFlow", False)),
            )
        )
    return items
