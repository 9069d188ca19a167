import pytest

from planner.data_model import CashflowItem, DebtItem, PensionItem, PlanConfig, Profile, SavingItem
from planner.engine import (
    build_plan_config,
    build_schedule,
    build_simulation_data,
    level_payment,
    lifetime_totals,
    simulate_yearly,
    slice_by_age,
)
from planner.engine.simulator import CASHFLOW_FIELDS, SHORTFALL_TITLE


def _profile():
    return Profile(name="테스트", birth_year=1980, retirement_age=60, death_age=62)


def _debt(debt_type, **kwargs):
    values = dict(title="대출", debt_type=debt_type, amount=1000.0, start_year=2025, end_year=2029, interest_rate=0.05)
    values.update(kwargs)
    return DebtItem(**values)


def test_bullet_schedule_repays_at_maturity():
    schedule = build_schedule(_debt("bullet", end_year=2027))

    assert list(schedule["Interest"]) == pytest.approx([50.0, 50.0, 50.0])
    assert list(schedule["Principal"]) == [0.0, 0.0, 1000.0]
    assert schedule["Closing"].iloc[-1] == 0


def test_equal_schedule_has_level_payments():
    schedule = build_schedule(_debt("equal", amount=30000.0, end_year=2045, interest_rate=0.045))

    assert len(schedule) == 21
    assert schedule["Principal"].sum() == pytest.approx(30000.0)
    assert schedule["Payment"].max() - schedule["Payment"].min() == pytest.approx(0.0, abs=1e-6)
    assert schedule["Closing"].iloc[-1] == pytest.approx(0.0, abs=1e-6)


def test_principal_schedule_repays_equal_shares():
    schedule = build_schedule(_debt("principal"))

    assert list(schedule["Principal"]) == pytest.approx([200.0] * 5)
    assert schedule["Interest"].iloc[0] == pytest.approx(50.0)
    assert schedule["Interest"].iloc[-1] == pytest.approx(10.0)


def test_grace_schedule_pays_interest_first():
    schedule = build_schedule(_debt("grace", grace_period=2))

    assert list(schedule["Principal"].iloc[:2]) == [0.0, 0.0]
    later = schedule["Payment"].iloc[2:]
    assert later.max() - later.min() == pytest.approx(0.0, abs=1e-6)
    assert schedule["Principal"].sum() == pytest.approx(1000.0)


def test_level_payment_without_interest():
    assert level_payment(1200, 0, 12) == 100


def test_projection_covers_every_year_until_death():
    cfg = PlanConfig(
        profile=_profile(),
        start_year=2025,
        incomes=[CashflowItem("근로소득", 300, "monthly", 2025, 2039)],
        expenses=[CashflowItem("여행", 500, "one_time", 2030, 2030, flow_type="expense")],
    )

    df, assets = simulate_yearly(cfg)

    assert list(df.columns) == CASHFLOW_FIELDS
    assert len(df) == len(assets) == 18
    assert df["age"].iloc[0] == 45
    assert df["income"].iloc[0] == 3600
    assert (df["expense"] > 0).sum() == 1
    assert df["cumulativeCashflow"].iloc[-1] == pytest.approx(df["netCashflow"].sum())


def test_saving_matures_in_end_year():
    cfg = PlanConfig(
        profile=_profile(),
        start_year=2025,
        incomes=[CashflowItem("근로소득", 1000, "yearly", 2025, 2042)],
        savings=[SavingItem("적금", 100, "yearly", 2025, 2027)],
    )

    df, assets = simulate_yearly(cfg)

    assert list(df["savings"].iloc[:4]) == [100, 100, 100, 0]
    assert df.loc[df["year"] == 2027, "savingMaturity"].item() == pytest.approx(300.0)
    titles_2028 = [item["title"] for item in assets[3]["breakdown"]["assetItems"]]
    assert "적금" not in titles_2028


def test_deficit_draws_savings_then_becomes_shortfall_debt():
    cfg = PlanConfig(
        profile=_profile(),
        start_year=2025,
        expenses=[CashflowItem("생활비", 1000, "yearly", 2025, 2042, flow_type="expense")],
        savings=[SavingItem("예금", 0, "yearly", 2025, 2042, current_amount=1500)],
    )

    df, assets = simulate_yearly(cfg)

    assert df["savingsWithdrawal"].iloc[0] == pytest.approx(1000.0)
    assert df["savingsWithdrawal"].iloc[1] == pytest.approx(500.0)
    shortfall = [item for item in assets[-1]["breakdown"]["debtItems"] if item["title"] == SHORTFALL_TITLE]
    assert shortfall[0]["amount"] == pytest.approx(18000.0 - 1500.0)
    assert assets[-1]["netAssets"] < 0


def test_national_pension_is_indexed_from_start_year():
    cfg = PlanConfig(
        profile=_profile(),
        start_year=2025,
        pensions=[PensionItem("국민연금", "national", monthly_amount=100, start_year=2040, end_year=2042, inflation_rate=0.02)],
    )

    df, _ = simulate_yearly(cfg)

    assert df.loc[df["year"] == 2039, "pension"].item() == 0
    assert df.loc[df["year"] == 2040, "pension"].item() == pytest.approx(1200 * 1.02 ** 15)


def test_personal_pension_pays_out_accumulated_balance():
    pension = PensionItem(
        "개인연금",
        "personal",
        contribution_amount=10,
        contribution_start_year=2025,
        contribution_end_year=2029,
        payment_start_year=2030,
        payment_end_year=2034,
    )
    cfg = PlanConfig(profile=_profile(), start_year=2025, pensions=[pension])

    df, _ = simulate_yearly(cfg)

    assert df["pensionContribution"].sum() == pytest.approx(600.0)
    payouts = df.loc[df["pension"] > 0, "pension"]
    assert list(payouts) == pytest.approx([120.0] * 5)


def test_retirement_pension_pays_level_annuity_due_with_returns():
    pension = PensionItem(
        "퇴직연금",
        "retirement",
        current_amount=1000,
        return_rate=0.05,
        payment_start_year=2025,
        payment_end_year=2029,
    )
    cfg = PlanConfig(profile=_profile(), start_year=2025, pensions=[pension])

    df, assets = simulate_yearly(cfg)

    payouts = df.loc[df["year"].between(2025, 2029), "pension"]
    assert list(payouts) == pytest.approx([219.976] * 5, abs=1e-2)
    assert payouts.sum() > 1000
    assert df.loc[df["year"] > 2029, "pension"].sum() == 0
    balance = next(item for item in assets[4]["breakdown"]["assetItems"] if item["type"] == "pension")
    assert assets[4]["year"] == 2029
    assert balance["amount"] == pytest.approx(0.0, abs=1e-6)


def test_borrowed_cash_enters_the_flow_once():
    cfg = PlanConfig(
        profile=_profile(),
        start_year=2025,
        incomes=[CashflowItem("급여", 1000, "yearly", 2025, 2042)],
        debts=[_debt("bullet", add_cash_to_flow=True, end_year=2026)],
    )

    df, assets = simulate_yearly(cfg)

    assert list(df["debtInjection"].iloc[:3]) == [1000.0, 0.0, 0.0]
    assert assets[0]["totalDebt"] == pytest.approx(1000.0)
    assert assets[1]["totalDebt"] == 0


def test_build_simulation_data_from_stored_record():
    record = {
        "name": "홍길동",
        "birthYear": 1970,
        "retirementAge": 60,
        "items": {
            "incomes": [{"title": "급여", "frequency": "monthly", "amount": 400, "startYear": 2025, "endYear": 2029, "growthRate": 2.5}],
            "debts": [{"title": "대출", "debtType": "equal", "debtAmount": 3000, "startYear": 2025, "endYear": 2034, "interestRate": 0.045}],
        },
    }

    data = build_simulation_data(build_plan_config(record, 2025, death_age=85))

    assert data["profile"] == {"name": "홍길동", "birthYear": 1970, "currentAge": 55, "retirementAge": 60, "deathAge": 85}
    cashflow = data["simulation"]["cashflow"]
    assert len(cashflow) == 31
    assert cashflow[1]["income"] == pytest.approx(4800 * 1.025)


def test_slice_and_totals():
    rows = [
        {"year": 2026, "age": 46, "income": 100, "expense": 40},
        {"year": 2025, "age": 45, "income": 100, "expense": 60, "savings": 10},
        {"year": 2027, "age": 47, "pension": 50},
    ]

    sliced = slice_by_age(rows, 45, 46)
    totals = lifetime_totals(rows)

    assert [row["year"] for row in sliced] == [2025, 2026]
    assert totals["supply"] == pytest.approx(250.0)
    assert totals["demand"] == pytest.approx(110.0)
    assert totals["balance"] == pytest.approx(140.0)
    assert lifetime_totals([])["supply"] == 0.0


def test_totals_require_year_and_age():
    with pytest.raises(KeyError):
        lifetime_totals([{"income": 10}])
