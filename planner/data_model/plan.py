# data_model/plan.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Mapping

from ..config import DEFAULT_DEATH_AGE
from .base import FieldDefinition, FormModel
from .cashflow import CashflowItem, SavingItem
from .debt import DebtItem
from .pension import PensionItem


class ProfileFormModel(FormModel):
    def __init__(self) -> None:
        fields = [
            FieldDefinition("name", "이름", required=True),
            FieldDefinition("birthYear", "출생년도", kind="year", default=None, min_value=1900, required=True),
            FieldDefinition("retirementAge", "은퇴 나이", kind="number", default=55, min_value=30, max_value=80, required=True),
            FieldDefinition("deathAge", "기대 수명", kind="number", default=DEFAULT_DEATH_AGE, min_value=1, max_value=120),
            FieldDefinition("memo", "메모", kind="textarea"),
        ]
        super().__init__("profile", "프로필", fields)


@dataclass
class Profile:
    name: str
    birth_year: int
    retirement_age: int
    death_age: int = DEFAULT_DEATH_AGE

    def age_in(self, year: int) -> int:
        """만 나이 for a calendar year."""
        return int(year) - self.birth_year

    @property
    def retirement_year(self) -> int:
        return self.birth_year + self.retirement_age

    @property
    def final_year(self) -> int:
        return self.birth_year + self.death_age

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Profile":
        return cls(
            name=str(record.get("name", "")).strip(),
            birth_year=int(record.get("birthYear") or 0),
            retirement_age=int(record.get("retirementAge") or 65),
            death_age=int(record.get("deathAge") or DEFAULT_DEATH_AGE),
        )


@dataclass
class PlanConfig:
    profile: Profile
    start_year: int
    incomes: List[CashflowItem] = field(default_factory=list)
    expenses: List[CashflowItem] = field(default_factory=list)
    savings: List[SavingItem] = field(default_factory=list)
    pensions: List[PensionItem] = field(default_factory=list)
    debts: List[DebtItem] = field(default_factory=list)

    @property
    def end_year(self) -> int:
        return max(self.start_year, self.profile.final_year)

    def years(self) -> range:
        return range(self.start_year, self.end_year + 1)
