import logging
from typing import Any, Dict, List, Mapping

import pandas as pd

from ..data_model import (
    PensionItem,
    PlanConfig,
    Profile,
    records_to_cashflows,
    records_to_debts,
    records_to_pensions,
    records_to_savings,
)
from .amortization import build_schedule, level_payment

logger = logging.getLogger(__name__)

SHORTFALL_TITLE = "부족 현금"
CASH_TITLE = "현금"

CASHFLOW_FIELDS = [
    "year",
    "age",
    "income",
    "expense",
    "pension",
    "pensionContribution",
    "savings",
    "debtInterest",
    "debtPrincipal",
    "debtInjection",
    "savingMaturity",
    "savingsWithdrawal",
    "netCashflow",
    "cumulativeCashflow",
]


def build_plan_config(record: Mapping[str, Any], start_year: int, death_age: int | None = None) -> PlanConfig:
    """Turn a stored profile record (profile fields plus ``items``) into a PlanConfig."""
    profile = Profile.from_record(record)
    if death_age and not record.get("deathAge"):
        profile.death_age = death_age
    items = record.get("items") or {}
    return PlanConfig(
        profile=profile,
        start_year=start_year,
        incomes=records_to_cashflows(items.get("incomes", []), "income"),
        expenses=records_to_cashflows(items.get("expenses", []), "expense"),
        savings=records_to_savings(items.get("savings", [])),
        pensions=records_to_pensions(items.get("pensions", [])),
        debts=records_to_debts(items.get("debts", [])),
    )


def _build_pension_state(item: PensionItem, start_year: int) -> dict:
    return {
        "item": item,
        "balance": 0.0 if item.is_national else item.current_amount,
        "payment": None,
        "start_year": start_year,
    }


def _pension_step(state: dict, year: int) -> tuple:
    """Advance one pension one year; returns (payout, contribution)."""
    item: PensionItem = state["item"]
    if item.is_national:
        if item.start_year <= year <= item.end_year:
            indexed = (1.0 + item.inflation_rate) ** max(0, year - state["start_year"])
            return item.monthly_amount * 12.0 * indexed, 0.0
        return 0.0, 0.0

    rate = item.return_rate
    if year < item.payment_start_year or item.payment_start_year <= 0:
        contribution = item.annual_contribution(year)
        state["balance"] = state["balance"] * (1.0 + rate) + contribution
        return 0.0, contribution
    if year > item.payment_end_year:
        return 0.0, 0.0
    if state["payment"] is None:
        periods = item.payment_end_year - item.payment_start_year + 1
        # annuity-due: paid at the start of each payment year
        state["payment"] = level_payment(state["balance"], rate, periods) / (1.0 + rate)
    payout = min(state["payment"], state["balance"])
    if year == item.payment_end_year:
        payout = state["balance"]
    state["balance"] = (state["balance"] - payout) * (1.0 + rate)
    return payout, 0.0


def simulate_yearly(cfg: PlanConfig) -> tuple:
    """Run the projection; returns (cashflow DataFrame, list of asset snapshots)."""
    profile = cfg.profile
    schedules = [(debt, build_schedule(debt).set_index("Year")) for debt in cfg.debts]
    pension_states = [_build_pension_state(item, cfg.start_year) for item in cfg.pensions]
    saving_states = [{"item": item, "balance": item.current_amount, "matured": False} for item in cfg.savings]

    cash = 0.0
    cumulative = 0.0
    records: List[Dict[str, Any]] = []
    assets: List[Dict[str, Any]] = []

    for year in cfg.years():
        income = sum(item.amount_in(year) for item in cfg.incomes)
        expense = sum(item.amount_in(year) for item in cfg.expenses)

        pension = 0.0
        pension_contribution = 0.0
        for state in pension_states:
            payout, contribution = _pension_step(state, year)
            pension += payout
            pension_contribution += contribution

        savings = 0.0
        maturity = 0.0
        for state in saving_states:
            if state["matured"]:
                continue
            item = state["item"]
            contribution = item.contribution_in(year)
            savings += contribution
            state["balance"] = state["balance"] * (1.0 + item.interest_rate) + contribution
            if year >= item.end_year:
                maturity += state["balance"]
                state["balance"] = 0.0
                state["matured"] = True

        debt_interest = 0.0
        debt_principal = 0.0
        injection = 0.0
        for debt, schedule in schedules:
            if debt.add_cash_to_flow and year == debt.start_year:
                injection += debt.amount
            if year in schedule.index:
                debt_interest += float(schedule.at[year, "Interest"])
                debt_principal += float(schedule.at[year, "Principal"])

        net = (
            income
            + pension
            + injection
            + maturity
            - expense
            - savings
            - pension_contribution
            - debt_interest
            - debt_principal
        )
        cumulative += net
        cash += net

        withdrawal = 0.0
        if cash < 0:
            for state in saving_states:
                if cash >= 0:
                    break
                take = min(state["balance"], -cash)
                if take <= 0:
                    continue
                state["balance"] -= take
                cash += take
                withdrawal += take

        records.append(
            {
                "year": year,
                "age": profile.age_in(year),
                "income": income,
                "expense": expense,
                "pension": pension,
                "pensionContribution": pension_contribution,
                "savings": savings,
                "debtInterest": debt_interest,
                "debtPrincipal": debt_principal,
                "debtInjection": injection,
                "savingMaturity": maturity,
                "savingsWithdrawal": withdrawal,
                "netCashflow": net,
                "cumulativeCashflow": cumulative,
            }
        )

        asset_items = [{"title": CASH_TITLE, "type": "cash", "amount": max(cash, 0.0)}]
        for state in saving_states:
            if not state["matured"]:
                asset_items.append({"title": state["item"].title, "type": "saving", "amount": state["balance"]})
        for state in pension_states:
            if not state["item"].is_national:
                asset_items.append({"title": state["item"].title, "type": "pension", "amount": state["balance"]})

        debt_items = []
        for debt, schedule in schedules:
            remaining = float(schedule.at[year, "Closing"]) if year in schedule.index else 0.0
            if remaining > 0:
                debt_items.append({"title": debt.title, "type": debt.debt_type, "amount": remaining})
        if cash < 0:
            debt_items.append({"title": SHORTFALL_TITLE, "type": "shortfall", "amount": -cash})

        total_assets = sum(item["amount"] for item in asset_items)
        total_debt = sum(item["amount"] for item in debt_items)
        breakdown = {
            "totalAssets": total_assets,
            "totalDebt": total_debt,
            "netAssets": total_assets - total_debt,
            "assetItems": asset_items,
            "debtItems": debt_items,
        }
        assets.append(
            {
                "year": year,
                "age": profile.age_in(year),
                "totalAssets": total_assets,
                "totalDebt": total_debt,
                "netAssets": total_assets - total_debt,
                "breakdown": breakdown,
            }
        )

    df = pd.DataFrame(records, columns=CASHFLOW_FIELDS)
    logger.debug(
        "simulated %s: %d years, %d items",
        profile.name or "profile",
        len(df),
        len(cfg.incomes) + len(cfg.expenses) + len(cfg.savings) + len(cfg.pensions) + len(cfg.debts),
    )
    return df, assets


def build_simulation_data(cfg: PlanConfig) -> Dict[str, Any]:
    df, assets = simulate_yearly(cfg)
    profile = cfg.profile
    return {
        "profile": {
            "name": profile.name,
            "birthYear": profile.birth_year,
            "currentAge": profile.age_in(cfg.start_year),
            "retirementAge": profile.retirement_age,
            "deathAge": profile.death_age,
        },
        "simulation": {
            "cashflow": df.to_dict(orient="records"),
            "assets": assets,
        },
    }
