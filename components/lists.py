# components/lists.py
from __future__ import annotations

from typing import Any, Dict, List

import dash_bootstrap_components as dbc
from dash import html

from planner.checklist import progress
from planner.data_model import DEBT_TYPE_LABELS, PENSION_TYPE_LABELS
from planner.data_model.cashflow import FREQUENCY_LABELS
from planner.forms.base import percent_text, present
from planner.formatting import format_amount, format_percent

PENSION_TYPE_COLORS = {
    "national": "#3b82f6",
    "retirement": "#10b981",
    "personal": "#f59e0b",
}
DEFAULT_TYPE_COLOR = "#6b7280"

EMPTY_TEXTS = {
    "incomes": "등록된 수입이 없습니다.",
    "expenses": "등록된 지출이 없습니다.",
    "savings": "등록된 저축/투자가 없습니다.",
    "pensions": "등록된 연금이 없습니다.",
    "debts": "등록된 부채가 없습니다.",
    "checklist": "체크리스트 항목이 없습니다.",
}


def pension_type_label(pension_type: str) -> str:
    return PENSION_TYPE_LABELS.get(pension_type, "연금")


def pension_type_color(pension_type: str) -> str:
    return PENSION_TYPE_COLORS.get(pension_type, DEFAULT_TYPE_COLOR)


def _percent(value: Any) -> str:
    return format_percent(percent_text(value)) if present(value) else format_percent(None)


def pension_lines(pension: Dict[str, Any]) -> List[str]:
    """Text rows shown under a pension's title."""
    if pension.get("type") == "national":
        return [
            f"{format_amount(pension.get('monthlyAmount', 0))}/월",
            f"{pension.get('startYear')}년 - {pension.get('endYear')}년",
            f"(물가상승률 {_percent(pension.get('inflationRate'))} 적용)",
        ]
    lines = []
    if (pension.get("currentAmount") or 0) > 0:
        lines.append(f"기 보유: {format_amount(pension['currentAmount'])}")
    if (pension.get("contributionAmount") or 0) > 0:
        unit = "월" if pension.get("contributionFrequency") == "monthly" else "년"
        lines.append(f"{format_amount(pension['contributionAmount'])}/{unit}")
    start, end = pension.get("paymentStartYear") or 0, pension.get("paymentEndYear") or 0
    years = pension.get("paymentYears") or (end - start + 1 if end else 10)
    lines.append(f"적립: {pension.get('contributionStartYear')}년 - {pension.get('contributionEndYear')}년")
    lines.append(f"수령: {start}년부터 {years}년간")
    lines.append(f"(연평균 수익률 {_percent(pension.get('returnRate'))} 적용, 연금인출 방식(PMT))")
    return lines


def item_lines(kind: str, item: Dict[str, Any]) -> List[str]:
    """Text rows for incomes, expenses, savings and debts."""
    if kind == "pensions":
        return pension_lines(item)
    if kind == "debts":
        return [
            f"{format_amount(item.get('debtAmount', 0))} · {DEBT_TYPE_LABELS.get(item.get('debtType'), '')}",
            f"{item.get('startYear')}년 - {item.get('endYear')}년",
            f"(이자율 {_percent(item.get('interestRate'))})",
        ]
    unit = FREQUENCY_LABELS.get(item.get("frequency"), "")
    lines = [f"{format_amount(item.get('amount', 0))}/{unit}"]
    if item.get("frequency") == "one_time":
        lines.append(f"{item.get('startYear')}년")
    else:
        lines.append(f"{item.get('startYear')}년 - {item.get('endYear')}년")
    if kind == "savings":
        lines.append(
            f"(수익률 {_percent(item.get('interestRate'))}, 증가율 {_percent(item.get('yearlyGrowthRate'))})"
        )
    elif present(item.get("growthRate")):
        lines.append(f"(상승률 {format_percent(item.get('growthRate'))})")
    return lines


def _title_color(kind: str, item: Dict[str, Any]) -> str | None:
    if kind == "pensions":
        return pension_type_color(item.get("type", ""))
    return None


def item_list(kind: str, items: List[Dict[str, Any]]):
    """Clickable list; edit/delete are raised through pattern-matching button ids."""
    if not items:
        return html.Div(html.P(EMPTY_TEXTS.get(kind, "")), className="text-muted small")
    rows = []
    for item in items:
        item_id = item.get("id")
        header = html.Div(
            [
                html.Span(item.get("title", ""), style={"color": _title_color(kind, item), "fontWeight": "bold"}),
                dbc.Button(
                    "×",
                    id={"type": "delete-item", "kind": kind, "id": item_id},
                    color="link",
                    size="sm",
                    className="float-end text-danger",
                    title="삭제",
                ),
            ]
        )
        body = [html.Div(line, className="small") for line in item_lines(kind, item)]
        if item.get("memo"):
            body.append(html.Div(item["memo"], className="small text-muted", style={"whiteSpace": "pre-line"}))
        rows.append(
            dbc.ListGroupItem(
                [header, html.Div(body, id={"type": "edit-item", "kind": kind, "id": item_id}, n_clicks=0)],
                action=True,
            )
        )
    return dbc.ListGroup(rows, flush=True)


def pension_list(pensions: List[Dict[str, Any]]):
    return item_list("pensions", pensions)


def profile_summary(profile: Dict[str, Any] | None, current_year: int):
    if not profile:
        return html.Div(className="profile-summary")
    birth_year = profile.get("birthYear") or 0
    retirement_age = profile.get("retirementAge") or 0
    age = current_year - birth_year if birth_year else None
    rows = [html.H5(profile.get("name", ""))]
    if age is not None:
        rows.append(html.Div(f"{birth_year}년생 · 현재 {age}세", className="small"))
        rows.append(
            html.Div(
                f"은퇴 {retirement_age}세 ({birth_year + retirement_age}년) · 기대수명 {profile.get('deathAge')}세",
                className="small",
            )
        )
    return html.Div(rows, className="profile-summary")


def checklist_list(items: List[Dict[str, Any]]):
    if not items:
        return html.Div(html.P(EMPTY_TEXTS["checklist"]), className="text-muted small")
    summary = progress(items)
    blocks = [
        dbc.Progress(value=summary["percent"], label=f"{summary['percent']}%", className="mb-2"),
    ]
    for item in items:
        blocks.append(
            dbc.Checkbox(
                id={"type": "checklist-toggle", "item": item["id"]},
                label=item["title"],
                value=bool(item["checked"]),
                className="fw-bold mt-2",
            )
        )
        for child in item.get("subItems", []):
            blocks.append(
                dbc.Checkbox(
                    id={"type": "checklist-sub-toggle", "item": item["id"], "sub": child["id"]},
                    label=child["title"],
                    value=bool(child["checked"]),
                    className="ms-4 small",
                )
            )
    return html.Div(blocks)
