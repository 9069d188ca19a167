"""Derived figures for the report pages.

Each builder takes a ``simulationData`` payload and returns a plain dict, or
``None`` when the payload has nothing to report on. Missing fields count as
zero, so rows produced by older engines (or with real-estate fields absent)
still work. The fixed percentages here are presentation heuristics.
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

import pandas as pd

INCOME_FIELDS = [
    "income",
    "pension",
    "rentalIncome",
    "realEstatePension",
    "assetIncome",
    "realEstateSale",
    "assetSale",
    "debtInjection",
    "savingMaturity",
]
EXPENSE_FIELDS = [
    "expense",
    "savings",
    "pensionContribution",
    "debtInterest",
    "debtPrincipal",
    "realEstateTax",
    "capitalGainsTax",
]
REGULAR_INCOME_FIELDS = ["income", "pension", "rentalIncome", "assetIncome"]
REGULAR_EXPENSE_FIELDS = ["expense", "savings", "pensionContribution", "debtInterest", "debtPrincipal"]

RECOMMENDED_SAVINGS_RATE = 0.2
AVERAGE_SAVINGS_RATE = 0.09
REAL_ESTATE_SHARE = 0.8
LARGE_OUTFLOW_MULTIPLE = 2


def _rows(simulation_data: Any, key: str) -> List[Mapping[str, Any]]:
    if not isinstance(simulation_data, Mapping):
        return []
    simulation = simulation_data.get("simulation")
    if not isinstance(simulation, Mapping):
        return []
    rows = simulation.get(key)
    if not isinstance(rows, list):
        return []
    return [row for row in rows if isinstance(row, Mapping)]


def _profile(simulation_data: Any) -> Mapping[str, Any]:
    if isinstance(simulation_data, Mapping) and isinstance(simulation_data.get("profile"), Mapping):
        return simulation_data["profile"]
    return {}


def _num(row: Mapping[str, Any], field: str) -> float:
    try:
        return float(row.get(field, 0) or 0)
    except (TypeError, ValueError):
        return 0.0


def _frame(rows: List[Mapping[str, Any]], fields: List[str]) -> pd.DataFrame:
    return pd.DataFrame([{field: _num(row, field) for field in fields + ["year", "age"]} for row in rows])


def regular_totals(row: Mapping[str, Any]) -> Dict[str, float]:
    income = sum(_num(row, field) for field in REGULAR_INCOME_FIELDS)
    expense = sum(abs(_num(row, field)) for field in REGULAR_EXPENSE_FIELDS)
    return {"income": income, "expense": expense, "balance": income - expense}


def cashflow_analysis(simulation_data: Any) -> Optional[Dict[str, Any]]:
    """Year-by-year cash in/out from now until retirement."""
    cashflow = _rows(simulation_data, "cashflow")
    if not cashflow:
        return None
    profile = _profile(simulation_data)
    current_age = int(_num(profile, "currentAge"))
    retirement_age = int(_num(profile, "retirementAge"))
    display_count = max(1, retirement_age - current_age + 1) if retirement_age else len(cashflow)

    df = _frame(cashflow[:display_count], INCOME_FIELDS + EXPENSE_FIELDS)
    df["totalIncome"] = df[INCOME_FIELDS].sum(axis=1)
    df["totalExpense"] = df[EXPENSE_FIELDS].abs().sum(axis=1)
    df["net"] = df["totalIncome"] - df["totalExpense"]
    df["isRetirement"] = df["age"] >= retirement_age if retirement_age else False

    first = df.iloc[0]
    first_income = float(first["totalIncome"])
    first_expense = float(first["totalExpense"])
    chart = [
        {
            "year": int(row.year),
            "yearLabel": f"{int(row.year)}(은퇴)" if row.isRetirement else str(int(row.year)),
            "age": int(row.age),
            "income": float(row.totalIncome),
            "expense": float(row.totalExpense),
            "net": float(row.net),
            "isRetirement": bool(row.isRetirement),
        }
        for row in df.itertuples(index=False)
    ]
    return {
        "firstYearIncome": first_income,
        "firstYearExpense": first_expense,
        "firstYearNet": first_income - first_expense,
        "cumulativeNet": float(df["net"].sum()),
        "expenseRatio": first_expense / first_income * 100 if first_income > 0 else 0.0,
        "years": chart,
    }


def _debt_risk_level(debt_ratio: float, coverage: float) -> Dict[str, str]:
    if debt_ratio < 30 and coverage > 2:
        return {"level": "낮음", "color": "#10B981"}
    if debt_ratio < 50 and coverage > 1.5:
        return {"level": "보통", "color": "#F59E0B"}
    return {"level": "주의", "color": "#EF4444"}


def debt_management(simulation_data: Any, current_year: int | None = None) -> Optional[Dict[str, Any]]:
    assets = _rows(simulation_data, "assets")
    if not assets:
        return None
    cashflow = _rows(simulation_data, "cashflow")
    breakdown = assets[0].get("breakdown") or {}
    debts = [
        {"name": item.get("title") or item.get("label"), "amount": _num(item, "amount"), "type": item.get("type", "debt")}
        for item in breakdown.get("debtItems") or []
        if (item.get("title") or item.get("label")) and _num(item, "amount") > 0
    ]
    main_debt = max(debts, key=lambda debt: debt["amount"]) if debts else None
    total_debt = _num(breakdown, "totalDebt")
    total_assets = _num(breakdown, "totalAssets")

    first = cashflow[0] if cashflow else {}
    rental_income = _num(first, "rentalIncome")
    debt_interest = abs(_num(first, "debtInterest"))
    annual_income = _num(first, "income")
    coverage = rental_income / debt_interest if debt_interest > 0 else 0.0
    debt_ratio = total_debt / total_assets * 100 if total_assets > 0 else 0.0
    estimated_rate = debt_interest / total_debt * 100 if total_debt > 0 else 0.0
    rental_yield = rental_income / total_debt * 100 if total_debt > 0 else 0.0

    sale_years = [int(_num(row, "year")) for row in cashflow if _num(row, "realEstateSale") > 0]
    fallback_year = (current_year or int(_num(assets[0], "year"))) + 10
    return {
        "debts": debts,
        "mainDebt": main_debt,
        "totalDebt": total_debt,
        "totalAssets": total_assets,
        "debtRatio": debt_ratio,
        "dsr": debt_interest / annual_income * 100 if annual_income > 0 else 0.0,
        "interestCoverageRatio": coverage,
        "monthlyDebtInterest": debt_interest / 12,
        "riskLevel": _debt_risk_level(debt_ratio, coverage),
        "estimatedInterestRate": estimated_rate,
        "leverageEffect": rental_yield > estimated_rate,
        "plannedRepaymentYear": sale_years[0] if sale_years else fallback_year,
    }


def _risk(name: str, flagged: bool, high: tuple, low: tuple, color: str) -> Dict[str, Any]:
    probability, impact, severity = high if flagged else low
    return {
        "name": name,
        "probability": probability,
        "impact": impact,
        "severity": severity,
        "color": color if flagged else "#3B82F6",
    }


def retirement_risk(simulation_data: Any) -> Optional[Dict[str, Any]]:
    cashflow = _rows(simulation_data, "cashflow")
    if not cashflow:
        return None
    assets = _rows(simulation_data, "assets")
    totals = regular_totals(cashflow[0])
    total_income = totals["income"]
    balance = totals["balance"]
    savings_rate = balance / total_income * 100 if total_income > 0 else 0.0
    other_income = total_income - _num(cashflow[0], "income")
    dependency = other_income / total_income * 100 if total_income > 0 else 0.0

    critical_year = None
    for row in cashflow:
        outflow = _num(row, "realEstateSale") + abs(_num(row, "debtPrincipal"))
        if outflow > total_income * LARGE_OUTFLOW_MULTIPLE:
            critical_year = {"year": int(_num(row, "year")), "age": int(_num(row, "age")), "total": outflow}
            break

    rental_stop_year = None
    for previous, row in zip(cashflow, cashflow[1:]):
        if _num(row, "rentalIncome") == 0 and _num(previous, "rentalIncome") > 0:
            rental_stop_year = int(_num(row, "year"))
            break

    worst_year = None
    if assets:
        net = pd.Series([_num(row, "netAssets") for row in assets])
        worst = assets[int(net.idxmin())]
        worst_year = {"year": int(_num(worst, "year")), "age": int(_num(worst, "age")), "netAssets": float(net.min())}

    total_assets = _num(assets[0], "totalAssets") if assets else 0.0
    high_dependency = dependency > 40
    first_liquidity = (10, 9, 45) if critical_year else (5, 6, 30)
    return {
        "annualBalance": balance,
        "monthlyBalance": balance / 12,
        "savingsRate": savings_rate,
        "otherIncomeDependency": dependency,
        "realEstateEstimate": total_assets * REAL_ESTATE_SHARE,
        "criticalYear": critical_year,
        "rentalStopYear": rental_stop_year,
        "worstYear": worst_year,
        "risks": [
            {
                "name": "유동성 리스크",
                "probability": first_liquidity[0],
                "impact": first_liquidity[1],
                "severity": first_liquidity[2],
                "color": "#EF4444" if critical_year else "#F59E0B",
            },
            _risk("소득 의존도", high_dependency, (8, 7, 35), (4, 5, 20), "#F59E0B"),
            _risk("적자 구조", savings_rate < 0, (9, 7, 35), (5, 4, 20), "#F59E0B"),
            _risk("임대 중단", rental_stop_year is not None, (8, 6, 30), (4, 3, 12), "#F59E0B"),
        ],
    }


def _savings_status(rate: float) -> Dict[str, str]:
    if rate >= 30:
        return {"text": "이상적", "color": "#D4AF37", "severity": "excellent"}
    if rate >= 20:
        return {"text": "양호", "color": "#10B981", "severity": "good"}
    if rate >= 8:
        return {"text": "평균", "color": "#F59E0B", "severity": "average"}
    if rate >= 0:
        return {"text": "미달", "color": "#F59E0B", "severity": "below"}
    return {"text": "심각한 미달", "color": "#EF4444", "severity": "critical"}


def savings_capacity(simulation_data: Any) -> Optional[Dict[str, Any]]:
    cashflow = _rows(simulation_data, "cashflow")
    if not cashflow:
        return None
    totals = regular_totals(cashflow[0])
    income = totals["income"]
    annual = totals["balance"]
    rate = annual / income * 100 if income > 0 else 0.0
    current = max(0.0, annual)
    gap_recommended = income * RECOMMENDED_SAVINGS_RATE - current
    gap_average = income * AVERAGE_SAVINGS_RATE - current
    consumption = totals["expense"] / income * 100 if income > 0 else 100.0
    return {
        "annualCashflow": annual,
        "monthlyCashflow": annual / 12,
        "savingsRate": rate,
        "gapToRecommended": gap_recommended,
        "monthlyGapToRecommended": gap_recommended / 12,
        "gapToAverage": gap_average,
        "monthlyGapToAverage": gap_average / 12,
        "consumptionRate": consumption,
        "deficitRate": abs(rate) if rate < 0 else 0.0,
        "status": _savings_status(rate),
        "comparison": {
            "average": {"consumption": 90, "savings": 10, "deficit": 0},
            "mine": {
                "consumption": min(consumption, 100.0),
                "savings": min(rate, 100.0) if rate > 0 else 0.0,
                "deficit": min(abs(rate), 100.0) if rate < 0 else 0.0,
            },
            "recommended": {"consumption": 70, "savings": 30, "deficit": 0},
        },
    }


REPORT_PAGES = {
    "cashflow": cashflow_analysis,
    "debt": debt_management,
    "risk": retirement_risk,
    "savings": savings_capacity,
}
