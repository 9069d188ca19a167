from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Literal, Mapping

from .base import FieldDefinition, FormModel

INCOME_FREQUENCIES = ["monthly", "yearly"]
EXPENSE_FREQUENCIES = ["monthly", "yearly", "one_time"]
SAVING_FREQUENCIES = ["monthly", "yearly", "one_time"]
FREQUENCY_LABELS = {"monthly": "월", "yearly": "년", "one_time": "일시"}

SAVING_MEMO = (
    "수익률 : 2020년부터 2024년까지의 5년간 퇴직연금의 연환산수익률\n"
    "증가율 : 연간 저축/투자금액 증가율 (%) → 1.89%"
)
EXPENSE_MEMO = "2014년부터 2024년까지의 10년간 평균"


class IncomeFormModel(FormModel):
    def __init__(self) -> None:
        fields = [
            FieldDefinition("title", "수입 항목명", required=True),
            FieldDefinition("frequency", "주기", kind="select", default="monthly", options=INCOME_FREQUENCIES),
            FieldDefinition("amount", "금액 (만원)", kind="number", default="", min_value=0, step=10, required=True),
            FieldDefinition("startYear", "시작년도", kind="year", default=None, required=True),
            FieldDefinition("endYear", "종료년도", kind="year", default=None, required=True),
            FieldDefinition("growthRate", "상승률 (%)", kind="percent", default="2.5", min_value=0, max_value=100, step=0.1),
            FieldDefinition("memo", "메모", kind="textarea"),
        ]
        super().__init__("incomes", "수입", fields, {"frequency": FREQUENCY_LABELS})


class ExpenseFormModel(FormModel):
    def __init__(self) -> None:
        fields = [
            FieldDefinition("title", "지출 항목명", required=True),
            FieldDefinition("frequency", "주기", kind="select", default="monthly", options=EXPENSE_FREQUENCIES),
            FieldDefinition("amount", "금액 (만원)", kind="number", default="", min_value=0, step=10, required=True),
            FieldDefinition("startYear", "시작년도", kind="year", default=None, required=True),
            FieldDefinition("endYear", "종료년도", kind="year", default=None, required=True),
            FieldDefinition(
                "growthRate",
                "물가상승률 (%)",
                kind="percent",
                default="1.89",
                min_value=-100,
                max_value=100,
                step=0.01,
                help="마이너스 값 허용",
            ),
            FieldDefinition("isFixedToRetirementYear", "은퇴년도에 종료 고정", kind="checkbox", default=False),
            FieldDefinition("memo", "메모", kind="textarea", default=EXPENSE_MEMO),
        ]
        super().__init__("expenses", "지출", fields, {"frequency": FREQUENCY_LABELS})


class SavingFormModel(FormModel):
    def __init__(self) -> None:
        fields = [
            FieldDefinition("title", "저축/투자 항목명", required=True),
            FieldDefinition("frequency", "주기", kind="select", default="monthly", options=SAVING_FREQUENCIES),
            FieldDefinition("amount", "저축/투자 금액 (만원)", kind="number", default="", min_value=0, step=10, required=True),
            FieldDefinition("currentAmount", "현재 보유 금액 (만원)", kind="number", default="", min_value=0, step=100),
            FieldDefinition("startYear", "시작년도", kind="year", default=None, required=True),
            FieldDefinition("endYear", "종료년도", kind="year", default=None, required=True),
            FieldDefinition("interestRate", "수익률 (%)", kind="percent", default="2.86", min_value=-100, max_value=100, step=0.01),
            FieldDefinition(
                "yearlyGrowthRate",
                "증가율 (%)",
                kind="percent",
                default="1.89",
                min_value=-100,
                max_value=100,
                step=0.01,
            ),
            FieldDefinition("memo", "메모", kind="textarea", default=SAVING_MEMO),
        ]
        super().__init__("savings", "저축/투자", fields, {"frequency": FREQUENCY_LABELS})


@dataclass
class CashflowItem:
    title: str
    amount: float
    frequency: str
    start_year: int
    end_year: int
    flow_type: Literal["income", "expense"] = "income"
    growth_rate: float = 0.0  # fraction

    def annual_amount(self) -> float:
        if self.frequency == "monthly":
            return self.amount * 12.0
        return self.amount

    def amount_in(self, year: int) -> float:
        if self.frequency == "one_time":
            return self.amount if year == self.start_year else 0.0
        if not (self.start_year <= year <= self.end_year):
            return 0.0
        elapsed = year - self.start_year
        return self.annual_amount() * (1.0 + self.growth_rate) ** elapsed


@dataclass
class SavingItem:
    title: str
    amount: float
    frequency: str
    start_year: int
    end_year: int
    current_amount: float = 0.0
    interest_rate: float = 0.0
    yearly_growth_rate: float = 0.0

    def contribution_in(self, year: int) -> float:
        if self.frequency == "one_time":
            return self.amount if year == self.start_year else 0.0
        if not (self.start_year <= year <= self.end_year):
            return 0.0
        base = self.amount * 12.0 if self.frequency == "monthly" else self.amount
        return base * (1.0 + self.yearly_growth_rate) ** (year - self.start_year)


def records_to_cashflows(
    records: Iterable[Mapping[str, Any]],
    flow_type: Literal["income", "expense"],
) -> List[CashflowItem]:
    """Income and expense records keep growthRate as a percentage."""
    rows: List[CashflowItem] = []
    for row in records or []:
        title = str(row.get("title", "")).strip()
        if not title:
            continue
        amount = float(row.get("amount", 0.0) or 0.0)
        if amount == 0.0:
            continue
        start_year = int(row.get("startYear") or 0)
        rows.append(
            CashflowItem(
                title=title,
                amount=amount,
                frequency=str(row.get("frequency", "monthly")),
                start_year=start_year,
                end_year=int(row.get("endYear") or start_year),
                flow_type=flow_type,
                growth_rate=float(row.get("growthRate", 0.0) or 0.0) / 100.0,
            )
        )
    return rows


def records_to_savings(records: Iterable[Mapping[str, Any]]) -> List[SavingItem]:
    rows: List[SavingItem] = []
    for row in records or []:
        title = str(row.get("title", "")).strip()
        if not title:
            continue
        amount = float(row.get("amount", 0.0) or 0.0)
        current_amount = float(row.get("currentAmount", 0.0) or 0.0)
        if amount == 0.0 and current_amount == 0.0:
            continue
        start_year = int(row.get("startYear") or 0)
        rows.append(
            SavingItem(
                title=title,
                amount=amount,
                frequency=str(row.get("frequency", "monthly")),
                start_year=start_year,
                end_year=int(row.get("endYear") or start_year),
                current_amount=current_amount,
                interest_rate=float(row.get("interestRate", 0.0) or 0.0),
                yearly_growth_rate=float(row.get("yearlyGrowthRate", 0.0) or 0.0),
            )
        )
    return rows
