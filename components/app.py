# components/app.py
"""Dash dashboard: profile items, add/edit modal, projection charts and checklist."""
from __future__ import annotations

import datetime
from typing import Any, Dict

import dash
import dash_bootstrap_components as dbc
from dash import ALL, Input, Output, State, ctx, dcc, html

from planner.checklist import toggle_item, toggle_sub_item
from planner.config import Settings
from planner.data_model import ITEM_KINDS
from planner.engine import ProfileState, build_plan_config, build_simulation_data
from planner.forms import FORM_REGISTRY

from .charts import asset_figure, cashflow_figure
from .forms import FIELD_ID_TYPE, build_item_modal
from .lists import checklist_list, item_list, profile_summary

KIND_TITLES = {
    "incomes": "수입",
    "expenses": "지출",
    "savings": "저축/투자",
    "pensions": "연금",
    "debts": "부채",
}


def _profile_options(state: ProfileState):
    return [{"label": p.get("name") or p["id"], "value": p["id"]} for p in state.list_profiles()]


def build_layout(state: ProfileState):
    options = _profile_options(state)
    tabs = [
        dbc.Tab(
            [
                dbc.Button(f"{title} 추가", id={"type": "add-item", "kind": kind}, size="sm", className="my-2"),
                html.Div(id={"type": "item-list", "kind": kind}),
            ],
            label=title,
            tab_id=kind,
        )
        for kind, title in KIND_TITLES.items()
    ]
    return dbc.Container(
        [
            dcc.Store(id="data-version", data=0),
            dcc.Store(id="modal-state", data=None),
            dbc.Row(
                [
                    dbc.Col(
                        [
                            dcc.Dropdown(
                                id="profile-select",
                                options=options,
                                value=options[0]["value"] if options else None,
                                placeholder="프로필 선택",
                            ),
                            html.Div(id="profile-summary", className="mt-2"),
                            dbc.Tabs(tabs, id="item-tabs", active_tab="incomes"),
                        ],
                        width=4,
                    ),
                    dbc.Col(
                        [
                            dcc.Graph(id="cashflow-chart"),
                            dcc.Graph(id="asset-chart"),
                            html.H5("은퇴 체크리스트", className="mt-3"),
                            html.Div(id="checklist"),
                        ],
                        width=8,
                    ),
                ],
                className="mt-3",
            ),
            html.Div(build_item_modal(FORM_REGISTRY["incomes"].model), id="modal-container"),
        ],
        fluid=True,
    )


def create_dash_app(state: ProfileState | None = None, current_year: int | None = None) -> dash.Dash:
    state = state or ProfileState(Settings.from_env().profiles_path)
    year = current_year or datetime.date.today().year
    app = dash.Dash(__name__, external_stylesheets=[dbc.themes.BOOTSTRAP], suppress_callback_exceptions=True)
    app.layout = build_layout(state)

    def make_form(profile_id: str, kind: str):
        record = state.get(profile_id)
        profile = build_plan_config(record, year).profile
        return FORM_REGISTRY[kind](profile=profile, current_year=year)

    @app.callback(
        Output("profile-summary", "children"),
        Output({"type": "item-list", "kind": ALL}, "children"),
        Output("cashflow-chart", "figure"),
        Output("asset-chart", "figure"),
        Output("checklist", "children"),
        Input("profile-select", "value"),
        Input("data-version", "data"),
    )
    def refresh(profile_id, _version):
        if not profile_id or profile_id not in state.profiles:
            empty = [item_list(kind, []) for kind in ITEM_KINDS]
            return profile_summary(None, year), empty, cashflow_figure([]), asset_figure([]), checklist_list([])
        record = state.get(profile_id)
        data = build_simulation_data(build_plan_config(record, year))
        lists = [item_list(kind, state.list_items(profile_id, kind)) for kind in ITEM_KINDS]
        return (
            profile_summary(record, year),
            lists,
            cashflow_figure(data["simulation"]["cashflow"], record.get("retirementAge"), data["profile"]["deathAge"]),
            asset_figure(data["simulation"]["assets"]),
            checklist_list(state.get_checklist(profile_id)),
        )

    @app.callback(
        Output("modal-container", "children"),
        Output("modal-state", "data"),
        Output("data-version", "data"),
        Input({"type": "add-item", "kind": ALL}, "n_clicks"),
        Input({"type": "edit-item", "kind": ALL, "id": ALL}, "n_clicks"),
        Input({"type": "delete-item", "kind": ALL, "id": ALL}, "n_clicks"),
        Input("item-modal-submit", "n_clicks"),
        Input("item-modal-cancel", "n_clicks"),
        State({"type": FIELD_ID_TYPE, "field": ALL}, "value"),
        State({"type": FIELD_ID_TYPE, "field": ALL}, "id"),
        State("modal-state", "data"),
        State("profile-select", "value"),
        State("data-version", "data"),
        prevent_initial_call=True,
    )
    def handle_items(_add, _edit, _delete, _submit, _cancel, field_values, field_ids, modal_state, profile_id, version):
        trigger = ctx.triggered_id
        if not profile_id or trigger is None or not ctx.triggered[0].get("value"):
            raise dash.exceptions.PreventUpdate
        if trigger == "item-modal-cancel":
            kind = (modal_state or {}).get("kind", "incomes")
            return build_item_modal(FORM_REGISTRY[kind].model), None, version

        if isinstance(trigger, dict) and trigger["type"] == "delete-item":
            state.delete_item(profile_id, trigger["kind"], trigger["id"])
            return dash.no_update, dash.no_update, version + 1

        if isinstance(trigger, dict):
            kind = trigger["kind"]
            form = make_form(profile_id, kind)
            edit_data = None
            if trigger["type"] == "edit-item":
                edit_data = next((i for i in state.list_items(profile_id, kind) if i["id"] == trigger["id"]), None)
            values = form.open(edit_data)
            modal = build_item_modal(form.model, values, is_open=True, is_edit=form.is_edit)
            return modal, {"kind": kind, "editId": trigger.get("id")}, version

        # submit
        kind = modal_state["kind"]
        form = make_form(profile_id, kind)
        edit_id = modal_state.get("editId")
        edit_data = None
        if edit_id:
            edit_data = next((i for i in state.list_items(profile_id, kind) if i["id"] == edit_id), None)
        form.open(edit_data)
        form.update(**{fid["field"]: value for fid, value in zip(field_ids, field_values)})
        record = form.submit()
        if record is None:
            modal = build_item_modal(form.model, form.values, form.errors, is_open=True, is_edit=edit_data is not None)
            return modal, modal_state, version
        if edit_data:
            state.update_item(profile_id, kind, edit_id, record)
        else:
            state.add_item(profile_id, kind, record)
        return build_item_modal(form.model), None, version + 1

    @app.callback(
        Output("data-version", "data", allow_duplicate=True),
        Input({"type": "checklist-toggle", "item": ALL}, "value"),
        Input({"type": "checklist-sub-toggle", "item": ALL, "sub": ALL}, "value"),
        State("profile-select", "value"),
        State("data-version", "data"),
        prevent_initial_call=True,
    )
    def handle_checklist(_items, _subs, profile_id, version):
        trigger: Dict[str, Any] | None = ctx.triggered_id
        if not profile_id or not isinstance(trigger, dict):
            raise dash.exceptions.PreventUpdate
        items = state.get_checklist(profile_id)
        if trigger["type"] == "checklist-toggle":
            current = next((i for i in items if i["id"] == trigger["item"]), None)
            if current is None or current["checked"] == ctx.triggered[0]["value"]:
                raise dash.exceptions.PreventUpdate
            items = toggle_item(items, trigger["item"])
        else:
            parent = next((i for i in items if i["id"] == trigger["item"]), None)
            child = next((c for c in (parent or {}).get("subItems", []) if c["id"] == trigger["sub"]), None)
            if child is None or child["checked"] == ctx.triggered[0]["value"]:
                raise dash.exceptions.PreventUpdate
            items = toggle_sub_item(items, trigger["item"], trigger["sub"])
        state.save_checklist(profile_id, items)
        return version + 1

    return app


def main() -> int:
    create_dash_app().run(debug=False)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
