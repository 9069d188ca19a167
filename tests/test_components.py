import math

from components.charts import EMPTY_MESSAGE, asset_figure, axis_ticks, cashflow_figure, cashflow_points
from components.forms import FIELD_ID_TYPE, build_item_modal
from components.lists import checklist_list, item_lines, item_list, pension_lines, pension_type_color
from planner.checklist import build_template_items
from planner.data_model import DebtFormModel
from planner.engine import build_plan_config, build_simulation_data


def _annotation_texts(fig):
    return [annotation.text for annotation in fig.layout.annotations]


def test_cashflow_chart_without_usable_rows_shows_message():
    rows = [{"age": 40, "amount": math.nan}, {"age": None, "year": None, "amount": 5}, "bad"]

    assert cashflow_points(rows) == []
    assert _annotation_texts(cashflow_figure(rows)) == [EMPTY_MESSAGE]
    assert _annotation_texts(cashflow_figure(None)) == [EMPTY_MESSAGE]
    assert _annotation_texts(asset_figure([{"year": 2025}])) == [EMPTY_MESSAGE]


def test_cashflow_chart_uses_age_axis_and_net_cashflow():
    rows = [{"year": 2025, "age": 59, "netCashflow": 1200}, {"year": 2026, "age": 60, "netCashflow": -300}]

    fig = cashflow_figure(rows, retirement_age=60, death_age=62)

    assert len(fig.data) == 1
    assert list(fig.data[0].x) == [59, 60]
    assert list(fig.data[0].marker.color) == ["#10b981", "#ef4444"]
    assert fig.layout.xaxis.range == (58.5, 62.5)


def test_axis_ticks_use_chart_labels():
    ticks = axis_ticks([0, 12000])

    assert ticks["tickvals"][0] == 0
    assert ticks["ticktext"][-1] == "1.2억"


def test_asset_chart_stacks_assets_and_debts():
    record = {
        "name": "홍길동",
        "birthYear": 1970,
        "retirementAge": 60,
        "deathAge": 57,
        "items": {
            "incomes": [{"title": "급여", "frequency": "yearly", "amount": 1000, "startYear": 2025, "endYear": 2027}],
            "debts": [{"title": "대출", "debtType": "bullet", "debtAmount": 500, "startYear": 2025, "endYear": 2026, "interestRate": 0.05}],
        },
    }
    assets = build_simulation_data(build_plan_config(record, 2025))["simulation"]["assets"]

    fig = asset_figure(assets)

    names = [trace.name for trace in fig.data]
    assert names == ["현금", "대출", "순자산"]
    assert fig.layout.barmode == "relative"
    assert all(value <= 0 for value in fig.data[1].y)


def test_item_lines_show_percentages():
    debt = {"debtAmount": 30000, "debtType": "equal", "startYear": 2025, "endYear": 2045, "interestRate": 0.045}
    saving = {"amount": 50, "frequency": "monthly", "startYear": 2025, "endYear": 2035, "interestRate": 0.0286, "yearlyGrowthRate": 0}
    expense = {"amount": 5000, "frequency": "one_time", "startYear": 2032, "growthRate": 1.89}

    assert item_lines("debts", debt) == ["3억원 · 원리금균등상환", "2025년 - 2045년", "(이자율 4.5%)"]
    assert item_lines("savings", saving)[-1] == "(수익률 2.86%, 증가율 0%)"
    assert item_lines("expenses", expense) == ["5,000만원/일시", "2032년", "(상승률 1.89%)"]


def test_pension_lines_by_type():
    national = {"type": "national", "monthlyAmount": 120, "startYear": 2035, "endYear": 2060, "inflationRate": 0.025}
    personal = {
        "type": "personal",
        "currentAmount": 1000,
        "contributionAmount": 30,
        "contributionFrequency": "monthly",
        "contributionStartYear": 2025,
        "contributionEndYear": 2034,
        "paymentStartYear": 2035,
        "paymentEndYear": 2044,
        "paymentYears": 10,
        "returnRate": 0.045,
    }

    assert pension_lines(national) == ["120만원/월", "2035년 - 2060년", "(물가상승률 2.5% 적용)"]
    assert pension_lines(personal)[:2] == ["기 보유: 1,000만원", "30만원/월"]
    assert "수령: 2035년부터 10년간" in pension_lines(personal)
    assert pension_type_color("unknown") == "#6b7280"


def test_item_list_ids_and_empty_text():
    empty = item_list("debts", [])
    listed = item_list("debts", [{"id": "debt-1", "title": "대출", "debtAmount": 100, "debtType": "bullet", "interestRate": 0.03}])

    assert empty.children.children == "등록된 부채가 없습니다."
    header, body = listed.children[0].children
    assert header.children[1].id == {"type": "delete-item", "kind": "debts", "id": "debt-1"}
    assert body.id == {"type": "edit-item", "kind": "debts", "id": "debt-1"}


def test_checklist_list_renders_every_leaf():
    items = build_template_items()

    rendered = checklist_list(items)

    checkboxes = rendered.children[1:]
    assert len(checkboxes) == 20
    assert checkboxes[0].id == {"type": "checklist-toggle", "item": items[0]["id"]}


def test_item_modal_marks_invalid_fields():
    model = DebtFormModel()

    modal = build_item_modal(model, model.blank_values(), {"title": "부채 항목명을 입력해주세요."}, is_open=True, is_edit=True)

    assert modal.is_open is True
    body = modal.children[1].children
    title_row = body.children[0]
    control = title_row.children[1]
    assert control.id == {"type": FIELD_ID_TYPE, "field": "title"}
    assert control.invalid is True
    assert title_row.children[-1].children == "부채 항목명을 입력해주세요."
    assert modal.children[0].children.children == "부채 수정"
