"""Savings-goal and DC-pension calculators.

Both calculators work in 만원. The goal calculator finds the level monthly
deposit that reaches a target with monthly compounding; the DC calculator
recovers the pre-tax monthly salary from the take-home pay and derives the
employer DC contribution (one month of pay per year) from it.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..data_model import Profile
from .base import Record, parse_float

INSURANCE_RATE = 0.094041  # national pension + health + long-term care + employment, 2024
BASIC_DEDUCTION = 150
LOCAL_TAX_RATE = 0.1
MAX_ITERATIONS = 100
TOLERANCE = 1.0


@dataclass(frozen=True)
class TaxBracket:
    low: float
    high: float
    rate: float
    deduction: float

    def tax(self, taxable: float) -> float:
        return max(0.0, taxable * self.rate - self.deduction)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "min": self.low,
            "max": "초과" if math.isinf(self.high) else self.high,
            "rate": f"{self.rate * 100:.0f}",
        }


TAX_BRACKETS: List[TaxBracket] = [
    TaxBracket(0, 1400, 0.06, 0),
    TaxBracket(1400, 5000, 0.15, 126),
    TaxBracket(5000, 8800, 0.24, 576),
    TaxBracket(8800, 15000, 0.35, 1544),
    TaxBracket(15000, 30000, 0.38, 1994),
    TaxBracket(30000, 50000, 0.40, 2594),
    TaxBracket(50000, 100000, 0.42, 3594),
    TaxBracket(100000, math.inf, 0.45, 6594),
]


def _round(value: float) -> int:
    return int(math.floor(value + 0.5))


def tax_bracket(annual_income: float) -> TaxBracket:
    for bracket in TAX_BRACKETS:
        if bracket.low < annual_income <= bracket.high:
            return bracket
    return TAX_BRACKETS[0] if annual_income <= 0 else TAX_BRACKETS[-1]


def after_tax_monthly(pre_tax_monthly: float) -> float:
    taxable = max(0.0, pre_tax_monthly * 12 - BASIC_DEDUCTION)
    monthly_income_tax = tax_bracket(taxable).tax(taxable) / 12
    insurance = pre_tax_monthly * INSURANCE_RATE
    local_tax = monthly_income_tax * LOCAL_TAX_RATE
    return pre_tax_monthly - (insurance + monthly_income_tax + local_tax)


def pre_tax_monthly(after_tax: float) -> float:
    """Invert `after_tax_monthly` by damped fixed-point iteration."""
    estimate = after_tax * 1.3
    for _ in range(MAX_ITERATIONS):
        difference = after_tax - after_tax_monthly(estimate)
        if abs(difference) < TOLERANCE:
            break
        estimate += difference * 0.5
    return estimate


def goal_saving(target: float, years: float, annual_rate_pct: float) -> Optional[Dict[str, Any]]:
    if target <= 0 or years <= 0 or annual_rate_pct < 0:
        return None
    months = years * 12
    monthly_rate = annual_rate_pct / 100.0 / 12.0
    if monthly_rate == 0:
        monthly = target / months
    else:
        monthly = target * monthly_rate / ((1 + monthly_rate) ** months - 1)
    return {
        "monthlySaving": _round(monthly),
        "totalSaving": _round(monthly * months),
        "totalReturn": _round(target - monthly * months),
        "targetAmount": target,
        "years": years,
        "returnRate": annual_rate_pct,
    }


def dc_pension(after_tax: float) -> Optional[Dict[str, Any]]:
    if after_tax <= 0:
        return None
    monthly = pre_tax_monthly(after_tax)
    annual = monthly * 12
    annual_dc = annual / 12
    return {
        "preTaxMonthly": _round(monthly),
        "preTaxAnnual": _round(annual),
        "taxBracket": tax_bracket(annual).to_payload(),
        "monthlyDC": _round(annual_dc / 12),
        "annualDC": _round(annual_dc),
    }


class CalculatorForm:
    """Two-tab calculator modal: ``goal`` and ``dc``."""

    MODES = ("goal", "dc")

    def __init__(self, profile: Profile | None = None, current_year: int | None = None) -> None:
        self.profile = profile
        self.current_year = current_year
        self.is_open = False
        self.mode = "goal"
        self.values: Dict[str, Record] = self._blank()
        self.errors: Dict[str, str] = {}
        self.result: Optional[Dict[str, Any]] = None

    def _blank(self) -> Dict[str, Record]:
        return {
            "goal": {"targetAmount": "", "years": "", "returnRate": "5.0"},
            "dc": {"afterTaxSalary": ""},
        }

    def open(self) -> None:
        self.is_open = True
        if self.profile and self.profile.birth_year and self.current_year:
            remaining = self.profile.retirement_age - self.profile.age_in(self.current_year)
            self.values["goal"]["years"] = str(remaining) if remaining > 0 else "10"

    def select(self, mode: str) -> None:
        if mode not in self.MODES:
            raise ValueError(f"unknown calculator: {mode}")
        self.mode = mode
        self.errors = {}
        self.result = None

    def update(self, **changes: Any) -> Record:
        self.values[self.mode].update(changes)
        return self.values[self.mode]

    def validate(self) -> bool:
        values = self.values[self.mode]
        errors: Dict[str, str] = {}
        if self.mode == "goal":
            target = parse_float(values.get("targetAmount"))
            if target is None or target <= 0:
                errors["targetAmount"] = "목표 금액을 입력해주세요."
            years = parse_float(values.get("years"))
            if years is None or years <= 0:
                errors["years"] = "모으는 기간을 입력해주세요."
            rate = parse_float(values.get("returnRate"))
            if rate is None or rate < 0 or rate > 100:
                errors["returnRate"] = "수익률은 0-100% 사이여야 합니다."
        else:
            salary = parse_float(values.get("afterTaxSalary"))
            if salary is None or salary <= 0:
                errors["afterTaxSalary"] = "세후 월급을 입력해주세요."
        self.errors = errors
        return not errors

    def calculate(self) -> Optional[Dict[str, Any]]:
        if not self.validate():
            self.result = None
            return None
        values = self.values[self.mode]
        if self.mode == "goal":
            self.result = goal_saving(
                parse_float(values["targetAmount"]),
                parse_float(values["years"]),
                parse_float(values["returnRate"]),
            )
        else:
            self.result = dc_pension(parse_float(values["afterTaxSalary"]))
        return self.result

    def close(self) -> None:
        self.is_open = False
        self.mode = "goal"
        self.values = self._blank()
        self.errors = {}
        self.result = None
