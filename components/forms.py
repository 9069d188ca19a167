# components/forms.py
from __future__ import annotations

from typing import Any, Dict, List

import dash_bootstrap_components as dbc
from dash import html

from planner.data_model import FieldDefinition, FormModel

FIELD_ID_TYPE = "item-field"
TEXT_KINDS = {"number", "percent", "year"}


def field_id(field: str) -> Dict[str, str]:
    return {"type": FIELD_ID_TYPE, "field": field}


def _select_options(model: FormModel, col: FieldDefinition) -> List[Dict[str, str]]:
    labels = model.option_labels.get(col.field, {})
    return [{"label": labels.get(opt, opt), "value": opt} for opt in col.options or []]


def _control(model: FormModel, col: FieldDefinition, value: Any, invalid: bool):
    if col.kind == "select":
        return dbc.Select(
            id=field_id(col.field),
            options=_select_options(model, col),
            value=value,
            invalid=invalid,
        )
    if col.kind == "checkbox":
        return dbc.Checkbox(id=field_id(col.field), label=col.label, value=bool(value))
    if col.kind == "textarea":
        return dbc.Textarea(id=field_id(col.field), value=value or "", rows=3)
    # numeric inputs are plain text; the forms sanitize keystrokes the same way
    return dbc.Input(
        id=field_id(col.field),
        type="text",
        inputMode="decimal" if col.kind in TEXT_KINDS else None,
        value="" if value is None else str(value),
        invalid=invalid,
    )


def build_form_body(model: FormModel, values: Dict[str, Any] | None = None, errors: Dict[str, str] | None = None):
    values = values if values is not None else model.blank_values()
    errors = errors or {}
    rows = []
    for col in model.fields:
        invalid = col.field in errors
        control = _control(model, col, values.get(col.field, col.default), invalid)
        children = [] if col.kind == "checkbox" else [dbc.Label([col.label, html.Span(" *", className="text-danger") if col.required else None])]
        children.append(control)
        if col.help:
            children.append(dbc.FormText(col.help))
        if invalid:
            children.append(dbc.FormFeedback(errors[col.field], type="invalid"))
        rows.append(html.Div(children, className="mb-2"))
    return dbc.Form(rows)


def build_item_modal(
    model: FormModel,
    values: Dict[str, Any] | None = None,
    errors: Dict[str, str] | None = None,
    is_open: bool = False,
    is_edit: bool = False,
):
    title = f"{model.title} {'수정' if is_edit else '추가'}"
    return dbc.Modal(
        [
            dbc.ModalHeader(dbc.ModalTitle(title)),
            dbc.ModalBody(build_form_body(model, values, errors), id="item-modal-body"),
            dbc.ModalFooter(
                [
                    dbc.Button("취소", id="item-modal-cancel", color="secondary"),
                    dbc.Button("수정" if is_edit else "추가", id="item-modal-submit", color="primary"),
                ]
            ),
        ],
        id="item-modal",
        is_open=is_open,
        backdrop="static",
    )
