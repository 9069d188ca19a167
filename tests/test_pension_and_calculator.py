import pytest

from planner.data_model import Profile
from planner.forms import PensionForm
from planner.forms.calculator import (
    CalculatorForm,
    after_tax_monthly,
    dc_pension,
    goal_saving,
    pre_tax_monthly,
    tax_bracket,
)
from planner.forms.simulation import SimulationForm, validate_title


@pytest.fixture
def profile():
    return Profile(name="홍길동", birth_year=1970, retirement_age=60)


def test_national_pension_type_fills_title_and_payment_years(profile):
    form = PensionForm(profile=profile, current_year=2025)
    form.open()

    values = form.set_type("national")

    assert values["title"] == "국민연금"
    assert (values["startYear"], values["endYear"]) == (2035, 2060)


def test_national_pension_normalizes_unused_fields(profile):
    form = PensionForm(profile=profile, current_year=2025)
    form.open()
    form.set_type("national")
    form.update(monthlyAmount="120", inflationRate="2.5")

    record = form.submit()

    assert record["monthlyAmount"] == 120
    assert record["inflationRate"] == 0.025
    assert record["returnRate"] == 0.0
    assert record["contributionAmount"] == 0
    assert record["paymentYears"] == 26


def test_personal_pension_round_trip(profile):
    form = PensionForm(profile=profile, current_year=2025)
    form.open()
    form.set_type("personal")
    form.update(
        currentAmount="1000",
        contributionAmount="30",
        contributionStartYear=2025,
        contributionEndYear=2034,
        returnRate="4.5",
        paymentStartYear=2035,
        paymentEndYear=2044,
    )
    record = form.submit()

    values = form.open(record)

    assert record["returnRate"] == 0.045
    assert record["paymentYears"] == 10
    assert record["startYear"] == 0
    assert values["returnRate"] == "4.5"
    assert values["type"] == "personal"


def test_personal_pension_payment_must_follow_contributions(profile):
    form = PensionForm(profile=profile, current_year=2025)
    form.open()
    form.set_type("retirement")
    form.update(
        contributionAmount="30",
        contributionStartYear=2025,
        contributionEndYear=2040,
        paymentStartYear=2035,
        paymentEndYear=2044,
        returnRate="120",
    )

    assert form.submit() is None
    assert set(form.errors) == {"paymentStartYear", "returnRate"}


def test_pension_requires_type():
    form = PensionForm(current_year=2025)
    form.open()

    assert not form.validate()
    assert "type" in form.errors


def test_tax_bracket_boundaries():
    assert tax_bracket(0).rate == 0.06
    assert tax_bracket(1400).rate == 0.06
    assert tax_bracket(1401).rate == 0.15
    assert tax_bracket(200000).to_payload()["max"] == "초과"


def test_pre_tax_monthly_inverts_after_tax():
    pre_tax = pre_tax_monthly(300)

    assert pre_tax > 300
    assert abs(after_tax_monthly(pre_tax) - 300) < 1


def test_goal_saving_without_return_splits_evenly():
    result = goal_saving(1200, 1, 0)

    assert result["monthlySaving"] == 100
    assert result["totalSaving"] == 1200
    assert result["totalReturn"] == 0


def test_goal_saving_with_return_needs_less_principal():
    result = goal_saving(10000, 10, 5)

    assert result["monthlySaving"] == 64
    assert result["totalReturn"] > 0
    assert abs(result["totalSaving"] + result["totalReturn"] - 10000) <= 1


def test_goal_saving_rejects_non_positive_inputs():
    assert goal_saving(0, 10, 5) is None
    assert goal_saving(1000, 0, 5) is None
    assert dc_pension(0) is None


def test_dc_pension_is_one_month_of_pay_per_year():
    result = dc_pension(300)

    assert abs(result["annualDC"] - result["preTaxAnnual"] / 12) <= 1
    assert abs(result["monthlyDC"] - result["annualDC"] / 12) <= 1


def test_calculator_form_validates_current_tab(profile):
    calculator = CalculatorForm(profile=profile, current_year=2025)
    calculator.open()

    assert calculator.values["goal"]["years"] == "5"
    assert calculator.calculate() is None
    assert "targetAmount" in calculator.errors

    calculator.update(targetAmount="1200", years="1", returnRate="0")
    assert calculator.calculate()["monthlySaving"] == 100

    calculator.select("dc")
    assert calculator.result is None
    calculator.update(afterTaxSalary="300")
    assert calculator.calculate()["preTaxMonthly"] > 300

    with pytest.raises(ValueError):
        calculator.select("loan")


def test_simulation_title_rules():
    assert validate_title("   ") == "시뮬레이션 제목을 입력해주세요."
    assert validate_title("a") != ""
    assert validate_title("x" * 31) != ""
    assert validate_title(" 은퇴 계획 ") == ""


def test_simulation_form_passes_trimmed_title():
    created = []
    form = SimulationForm(on_create=created.append)
    form.open()

    form.set_title("  조기 은퇴  ")
    title = form.create()

    assert title == "조기 은퇴"
    assert created == ["조기 은퇴"]
