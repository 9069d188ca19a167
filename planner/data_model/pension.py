from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping

from .base import FieldDefinition, FormModel

PENSION_TYPES = ["national", "retirement", "personal"]
PENSION_TYPE_LABELS = {
    "national": "국민연금",
    "retirement": "퇴직연금",
    "personal": "개인연금",
}
CONTRIBUTION_FREQUENCIES = ["monthly", "yearly"]


class PensionFormModel(FormModel):
    def __init__(self) -> None:
        fields = [
            FieldDefinition("type", "연금 타입", kind="select", default="", options=PENSION_TYPES, required=True),
            FieldDefinition("title", "연금 항목명", required=True),
            # national
            FieldDefinition("monthlyAmount", "월 수령 금액 (만원)", kind="number", default="", min_value=0, step=10),
            FieldDefinition("startYear", "수령 시작년도", kind="year", default=None),
            FieldDefinition("endYear", "수령 종료년도", kind="year", default=None),
            FieldDefinition("inflationRate", "물가상승률 (%)", kind="percent", default="2.5", min_value=0, max_value=100, step=0.1),
            # retirement / personal
            FieldDefinition("currentAmount", "현재 보유액 (만원)", kind="number", default="", min_value=0, step=100),
            FieldDefinition("contributionAmount", "적립 금액 (만원)", kind="number", default="", min_value=0, step=10),
            FieldDefinition(
                "contributionFrequency",
                "적립 주기",
                kind="select",
                default="monthly",
                options=CONTRIBUTION_FREQUENCIES,
            ),
            FieldDefinition("contributionStartYear", "적립 시작년도", kind="year", default=None),
            FieldDefinition("contributionEndYear", "적립 종료년도", kind="year", default=None),
            FieldDefinition("returnRate", "투자 수익률 (%)", kind="percent", default="5.0", min_value=0, max_value=100, step=0.1),
            FieldDefinition("paymentStartYear", "수령 시작년도", kind="year", default=None),
            FieldDefinition("paymentEndYear", "수령 종료년도", kind="year", default=None),
            FieldDefinition("memo", "메모", kind="textarea"),
        ]
        super().__init__(
            "pensions",
            "연금",
            fields,
            {"type": PENSION_TYPE_LABELS, "contributionFrequency": {"monthly": "월", "yearly": "년"}},
        )


@dataclass
class PensionItem:
    title: str
    pension_type: str
    monthly_amount: float = 0.0
    start_year: int = 0
    end_year: int = 0
    inflation_rate: float = 0.0
    current_amount: float = 0.0
    contribution_amount: float = 0.0
    contribution_frequency: str = "monthly"
    contribution_start_year: int = 0
    contribution_end_year: int = 0
    return_rate: float = 0.0
    payment_start_year: int = 0
    payment_end_year: int = 0

    @property
    def is_national(self) -> bool:
        return self.pension_type == "national"

    def annual_contribution(self, year: int) -> float:
        if self.is_national:
            return 0.0
        if not (self.contribution_start_year <= year <= self.contribution_end_year):
            return 0.0
        if self.contribution_frequency == "monthly":
            return self.contribution_amount * 12.0
        return self.contribution_amount


def records_to_pensions(records: Iterable[Mapping[str, Any]]) -> List[PensionItem]:
    items: List[PensionItem] = []
    for row in records or []:
        title = str(row.get("title", "")).strip()
        pension_type = str(row.get("type", "")).strip()
        if not title or pension_type not in PENSION_TYPES:
            continue
        items.append(
            PensionItem(
                title=title,
                pension_type=pension_type,
                monthly_amount=float(row.get("monthlyAmount", 0.0) or 0.0),
                start_year=int(row.get("startYear") or 0),
                end_year=int(row.get("endYear") or 0),
                inflation_rate=float(row.get("inflationRate", 0.0) or 0.0),
                current_amount=float(row.get("currentAmount", 0.0) or 0.0),
                contribution_amount=float(row.get("contributionAmount", 0.0) or 0.0),
                contribution_frequency=str(row.get("contributionFrequency", "monthly")),
                contribution_start_year=int(row.get("contributionStartYear") or 0),
                contribution_end_year=int(row.get("contributionEndYear") or 0),
                return_rate=float(row.get("returnRate", 0.0) or 0.0),
                payment_start_year=int(row.get("paymentStartYear") or 0),
                payment_end_year=int(row.get("paymentEndYear") or 0),
            )
        )
    return items
