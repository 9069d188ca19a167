# components/charts.py
from __future__ import annotations

import math
from typing import Any, Dict, Iterable, List, Mapping

import plotly.graph_objects as go

from planner.formatting import format_amount_for_chart

EMPTY_MESSAGE = "데이터가 없습니다."
POSITIVE_COLOR = "#10b981"
NEGATIVE_COLOR = "#ef4444"
RETIREMENT_COLOR = "#f59e0b"
ASSET_COLORS = {"cash": "#3b82f6", "saving": "#10b981", "pension": "#8b5cf6"}
DEBT_COLOR = "#ef4444"


def _finite(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def cashflow_points(rows: Iterable[Any] | None) -> List[Dict[str, float]]:
    """Keep rows with a numeric year/age and amount; ``netCashflow`` is accepted as the amount."""
    points = []
    for row in rows or []:
        if not isinstance(row, Mapping):
            continue
        amount = _finite(row.get("amount", row.get("netCashflow")))
        year = _finite(row.get("year"))
        age = _finite(row.get("age"))
        if amount is None or (year is None and age is None):
            continue
        points.append({"year": year, "age": age, "amount": amount})
    return points


def axis_ticks(values: Iterable[float], count: int = 6) -> Dict[str, list]:
    values = list(values)
    low, high = min(values + [0.0]), max(values + [0.0])
    if low == high:
        high = low + 1
    step = (high - low) / (count - 1)
    ticks = [low + step * i for i in range(count)]
    return {"tickvals": ticks, "ticktext": [format_amount_for_chart(t) for t in ticks]}


def empty_figure(message: str = EMPTY_MESSAGE) -> go.Figure:
    fig = go.Figure()
    fig.update_layout(
        xaxis={"visible": False},
        yaxis={"visible": False},
        annotations=[
            {
                "text": message,
                "xref": "paper",
                "yref": "paper",
                "x": 0.5,
                "y": 0.5,
                "showarrow": False,
                "font": {"size": 16, "color": "#6b7280"},
            }
        ],
        template="plotly_white",
    )
    return fig


def cashflow_figure(rows: Iterable[Any] | None, retirement_age: int | None = None, death_age: int = 90) -> go.Figure:
    points = cashflow_points(rows)
    if not points:
        return empty_figure()
    use_age = all(point["age"] is not None for point in points)
    x = [int(point["age"] if use_age else point["year"]) for point in points]
    y = [point["amount"] for point in points]
    fig = go.Figure(
        go.Bar(
            x=x,
            y=y,
            marker_color=[POSITIVE_COLOR if value >= 0 else NEGATIVE_COLOR for value in y],
            customdata=[format_amount_for_chart(value) for value in y],
            hovertemplate="%{x}: %{customdata}만원<extra></extra>",
            name="현금흐름",
        )
    )
    if use_age and retirement_age and retirement_age in x:
        fig.add_vline(x=retirement_age, line_dash="dash", line_color=RETIREMENT_COLOR, annotation_text="은퇴")
    fig.update_layout(
        title="현금 흐름 시뮬레이션",
        xaxis_title="나이" if use_age else "연도",
        xaxis_range=[min(x) - 0.5, max(max(x), death_age if use_age else max(x)) + 0.5],
        yaxis=axis_ticks(y),
        template="plotly_white",
        showlegend=False,
    )
    return fig


def asset_figure(assets: Iterable[Any] | None) -> go.Figure:
    """Stacked asset items above zero, debts below."""
    rows = [row for row in assets or [] if isinstance(row, Mapping) and isinstance(row.get("breakdown"), Mapping)]
    if not rows:
        return empty_figure()
    x = [row.get("age", row.get("year")) for row in rows]
    series: Dict[tuple, List[float]] = {}
    for index, row in enumerate(rows):
        breakdown = row["breakdown"]
        for item in breakdown.get("assetItems") or []:
            key = ("asset", item.get("title", ""), item.get("type", ""))
            series.setdefault(key, [0.0] * len(rows))[index] = _finite(item.get("amount")) or 0.0
        for item in breakdown.get("debtItems") or []:
            key = ("debt", item.get("title", ""), item.get("type", ""))
            series.setdefault(key, [0.0] * len(rows))[index] = -(_finite(item.get("amount")) or 0.0)

    fig = go.Figure()
    for (side, title, item_type), values in series.items():
        color = DEBT_COLOR if side == "debt" else ASSET_COLORS.get(item_type)
        fig.add_trace(go.Bar(x=x, y=values, name=title, marker_color=color))
    net = [_finite(row["breakdown"].get("netAssets")) or 0.0 for row in rows]
    fig.add_trace(go.Scatter(x=x, y=net, mode="lines", name="순자산", line={"color": "#111827", "width": 2}))
    stacked_up = [sum(max(values[i], 0.0) for values in series.values()) for i in range(len(rows))]
    stacked_down = [sum(min(values[i], 0.0) for values in series.values()) for i in range(len(rows))]
    all_values = stacked_up + stacked_down + net
    fig.update_layout(
        barmode="relative",
        title="자산 추이",
        yaxis=axis_ticks(all_values),
        template="plotly_white",
    )
    return fig
