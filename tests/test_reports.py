import pytest

from planner.engine import build_plan_config, build_simulation_data
from planner.reports import REPORT_PAGES, cashflow_analysis, debt_management, retirement_risk, savings_capacity


@pytest.fixture
def simulation_data():
    return {
        "profile": {"name": "홍길동", "currentAge": 60, "retirementAge": 61, "deathAge": 90},
        "simulation": {
            "cashflow": [
                {"year": 2025, "age": 60, "income": 1000, "pension": 200, "expense": 800, "savings": 100, "debtInterest": 50},
                {"year": 2026, "age": 61, "income": 1000, "pension": 200, "expense": 800, "debtPrincipal": 5000},
                {"year": 2027, "age": 62, "income": 0, "pension": 200, "expense": 800},
            ],
            "assets": [
                {
                    "year": 2025,
                    "age": 60,
                    "totalAssets": 1000,
                    "netAssets": 500,
                    "breakdown": {
                        "totalAssets": 1000,
                        "totalDebt": 500,
                        "netAssets": 500,
                        "assetItems": [{"title": "현금", "type": "cash", "amount": 1000}],
                        "debtItems": [{"title": "주택담보대출", "type": "equal", "amount": 500}],
                    },
                },
                {"year": 2026, "age": 61, "totalAssets": 400, "netAssets": -100, "breakdown": {}},
                {"year": 2027, "age": 62, "totalAssets": 300, "netAssets": 50, "breakdown": {}},
            ],
        },
    }


@pytest.mark.parametrize("builder", list(REPORT_PAGES.values()))
@pytest.mark.parametrize("payload", [None, {}, {"simulation": {}}, {"simulation": {"cashflow": [], "assets": []}}])
def test_reports_return_none_without_data(builder, payload):
    assert builder(payload) is None


def test_cashflow_analysis_stops_at_retirement(simulation_data):
    report = cashflow_analysis(simulation_data)

    assert [year["yearLabel"] for year in report["years"]] == ["2025", "2026(은퇴)"]
    assert report["firstYearIncome"] == 1200
    assert report["firstYearExpense"] == 950
    assert report["cumulativeNet"] == pytest.approx(250 - 4600)
    assert report["expenseRatio"] == pytest.approx(950 / 1200 * 100)


def test_debt_management_ratios(simulation_data):
    report = debt_management(simulation_data)

    assert report["mainDebt"] == {"name": "주택담보대출", "amount": 500, "type": "equal"}
    assert report["debtRatio"] == pytest.approx(50.0)
    assert report["dsr"] == pytest.approx(5.0)
    assert report["riskLevel"]["level"] == "주의"
    assert report["plannedRepaymentYear"] == 2035
    assert debt_management(simulation_data, current_year=2030)["plannedRepaymentYear"] == 2040


def test_retirement_risk_flags(simulation_data):
    report = retirement_risk(simulation_data)

    assert report["savingsRate"] == pytest.approx(250 / 1200 * 100)
    assert report["otherIncomeDependency"] == pytest.approx(200 / 1200 * 100)
    assert report["criticalYear"] == {"year": 2026, "age": 61, "total": 5000}
    assert report["worstYear"] == {"year": 2026, "age": 61, "netAssets": -100.0}
    assert report["rentalStopYear"] is None
    assert [risk["name"] for risk in report["risks"]] == ["유동성 리스크", "소득 의존도", "적자 구조", "임대 중단"]
    assert report["risks"][0]["color"] == "#EF4444"


def test_savings_capacity_status(simulation_data):
    report = savings_capacity(simulation_data)

    assert report["status"]["text"] == "양호"
    assert report["deficitRate"] == 0.0
    assert report["comparison"]["mine"]["savings"] == pytest.approx(250 / 1200 * 100)


def test_savings_capacity_deficit():
    data = {"simulation": {"cashflow": [{"year": 2025, "age": 50, "income": 100, "expense": 150}]}}

    report = savings_capacity(data)

    assert report["status"]["severity"] == "critical"
    assert report["deficitRate"] == pytest.approx(50.0)


def test_reports_count_pension_contributions_as_outflow():
    record = {
        "name": "홍길동",
        "birthYear": 1970,
        "retirementAge": 60,
        "items": {
            "incomes": [{"title": "급여", "frequency": "yearly", "amount": 1000, "startYear": 2025, "endYear": 2029, "growthRate": 0}],
            "pensions": [
                {
                    "title": "개인연금",
                    "type": "personal",
                    "contributionAmount": 50,
                    "contributionFrequency": "monthly",
                    "contributionStartYear": 2025,
                    "contributionEndYear": 2029,
                    "returnRate": 0.05,
                    "paymentStartYear": 2030,
                    "paymentEndYear": 2039,
                }
            ],
        },
    }
    data = build_simulation_data(build_plan_config(record, 2025))
    engine_net = data["simulation"]["cashflow"][0]["netCashflow"]

    report = cashflow_analysis(data)

    assert engine_net == pytest.approx(400.0)
    assert report["firstYearNet"] == pytest.approx(engine_net)
    assert retirement_risk(data)["annualBalance"] == pytest.approx(engine_net)
    assert savings_capacity(data)["annualCashflow"] == pytest.approx(engine_net)
