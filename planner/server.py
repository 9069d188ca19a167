"""REST backend for retirement plans: profiles, their financial items,
checklists, projections and report figures."""

from __future__ import annotations

import datetime
import json
import os
from typing import Any, Dict

from flask import Flask, jsonify, request

from . import __version__
from .checklist import build_template_items, toggle_item, toggle_sub_item
from .config import Settings, configure_logging
from .data_model import (
    DebtFormModel,
    ExpenseFormModel,
    IncomeFormModel,
    PensionFormModel,
    ProfileFormModel,
    SavingFormModel,
)
from .engine import ProfileState, build_plan_config, build_simulation_data, lifetime_totals
from .errors import PlannerError
from .forms import FORM_REGISTRY, CalculatorForm, ProfileForm, SimulationForm
from .reports import REPORT_PAGES

FORM_MODELS = [
    ProfileFormModel(),
    IncomeFormModel(),
    ExpenseFormModel(),
    SavingFormModel(),
    PensionFormModel(),
    DebtFormModel(),
]


def _read_version(path: str) -> Dict[str, Any]:
    if not os.path.exists(path):
        return {"version": __version__}
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (json.JSONDecodeError, OSError):
        return {"version": __version__}


def create_app(settings: Settings | None = None, state: ProfileState | None = None) -> Flask:
    settings = settings or Settings.from_env()
    app = Flask(__name__)
    app.config["SETTINGS"] = settings
    profiles = state or ProfileState(settings.profiles_path)

    def current_year() -> int:
        return app.config.get("CURRENT_YEAR") or datetime.date.today().year

    def profile_model(profile_id: str):
        record = profiles.get(profile_id)
        return build_plan_config(record, current_year(), settings.death_age).profile

    def simulation_data(profile_id: str) -> Dict[str, Any]:
        start_year = request.args.get("startYear", type=int) or current_year()
        cfg = build_plan_config(profiles.get(profile_id), start_year, settings.death_age)
        return build_simulation_data(cfg)

    def json_body() -> Dict[str, Any] | None:
        payload = request.get_json(silent=True)
        if payload is None:
            return {}
        return payload if isinstance(payload, dict) else None

    def bad_body():
        return jsonify({"error": "Request body must be a JSON object."}), 400

    @app.after_request
    def apply_cors_headers(response):
        response.headers["Access-Control-Allow-Origin"] = "*"
        response.headers["Access-Control-Allow-Methods"] = "GET,POST,PUT,DELETE,OPTIONS"
        response.headers["Access-Control-Allow-Headers"] = "Content-Type"
        return response

    @app.errorhandler(PlannerError)
    def handle_not_found(exc: PlannerError):
        return jsonify({"error": str(exc)}), 404

    @app.get("/api/health")
    def healthcheck():
        return jsonify({"status": "ok"})

    @app.get("/api/version")
    def get_version():
        return jsonify(_read_version(settings.version_file))

    @app.get("/api/schema")
    def get_schema():
        return jsonify({"forms": {model.name: model.to_payload() for model in FORM_MODELS}})

    # profiles

    @app.get("/api/profiles")
    def list_profiles():
        return jsonify({"profiles": profiles.list_profiles()})

    @app.post("/api/profiles")
    def create_profile():
        form = ProfileForm(current_year=current_year())
        form.open()
        payload = json_body()
        if payload is None:
            return bad_body()
        form.update(**payload)
        record = form.submit()
        if record is None:
            return jsonify({"errors": form.errors}), 400
        profile = profiles.create(record)
        app.logger.info("created profile %s", profile["id"])
        return jsonify({"profile": profile}), 201

    @app.get("/api/profiles/<profile_id>")
    def get_profile(profile_id: str):
        return jsonify({"profile": profiles.get(profile_id)})

    @app.put("/api/profiles/<profile_id>")
    def update_profile(profile_id: str):
        form = ProfileForm(current_year=current_year())
        form.open(profiles.get(profile_id))
        payload = json_body()
        if payload is None:
            return bad_body()
        form.update(**payload)
        record = form.submit()
        if record is None:
            return jsonify({"errors": form.errors}), 400
        return jsonify({"profile": profiles.update(profile_id, record)})

    @app.delete("/api/profiles/<profile_id>")
    def delete_profile(profile_id: str):
        profiles.delete(profile_id)
        return jsonify({"message": "Profile deleted.", "profiles": profiles.list_profiles()})

    # simulations

    @app.get("/api/profiles/<profile_id>/simulations")
    def list_simulations(profile_id: str):
        return jsonify({"simulations": profiles.list_simulations(profile_id)})

    @app.post("/api/profiles/<profile_id>/simulations")
    def create_simulation(profile_id: str):
        payload = json_body()
        if payload is None:
            return bad_body()
        created: Dict[str, Any] = {}
        form = SimulationForm(on_create=lambda title: created.update(profiles.add_simulation(profile_id, title)))
        form.open()
        title = payload.get("title")
        form.set_title(title if isinstance(title, str) else "")
        if form.create() is None:
            return jsonify({"errors": {"title": form.error}}), 400
        return jsonify({"simulation": created}), 201

    @app.get("/api/profiles/<profile_id>/simulations/<simulation_id>")
    def get_simulation(profile_id: str, simulation_id: str):
        return jsonify({"simulation": profiles.get_simulation(profile_id, simulation_id)})

    # financial items

    def item_form(profile_id: str, kind: str):
        form_cls = FORM_REGISTRY.get(kind)
        if form_cls is None:
            return None
        return form_cls(profile=profile_model(profile_id), current_year=current_year())

    @app.get("/api/profiles/<profile_id>/items/<kind>")
    def list_items(profile_id: str, kind: str):
        return jsonify({"items": profiles.list_items(profile_id, kind)})

    @app.post("/api/profiles/<profile_id>/items/<kind>")
    def create_item(profile_id: str, kind: str):
        form = item_form(profile_id, kind)
        if form is None:
            return jsonify({"error": f"Unknown item kind: {kind}"}), 404
        form.open()
        payload = json_body()
        if payload is None:
            return bad_body()
        form.update(**payload)
        record = form.submit()
        if record is None:
            return jsonify({"errors": form.errors}), 400
        return jsonify({"item": profiles.add_item(profile_id, kind, record)}), 201

    @app.put("/api/profiles/<profile_id>/items/<kind>/<item_id>")
    def update_item(profile_id: str, kind: str, item_id: str):
        form = item_form(profile_id, kind)
        if form is None:
            return jsonify({"error": f"Unknown item kind: {kind}"}), 404
        existing = next((item for item in profiles.list_items(profile_id, kind) if item.get("id") == item_id), None)
        if existing is None:
            return jsonify({"error": f"{kind} item not found: {item_id}"}), 404
        form.open(existing)
        payload = json_body()
        if payload is None:
            return bad_body()
        form.update(**payload)
        record = form.submit()
        if record is None:
            return jsonify({"errors": form.errors}), 400
        return jsonify({"item": profiles.update_item(profile_id, kind, item_id, record)})

    @app.delete("/api/profiles/<profile_id>/items/<kind>/<item_id>")
    def delete_item(profile_id: str, kind: str, item_id: str):
        profiles.delete_item(profile_id, kind, item_id)
        return jsonify({"message": "Item deleted.", "items": profiles.list_items(profile_id, kind)})

    # checklist

    @app.get("/api/profiles/<profile_id>/checklist")
    def get_checklist(profile_id: str):
        return jsonify({"items": profiles.get_checklist(profile_id)})

    @app.put("/api/profiles/<profile_id>/checklist")
    def save_checklist(profile_id: str):
        payload = json_body()
        if payload is None:
            return bad_body()
        items = payload.get("items")
        if not isinstance(items, list):
            return jsonify({"error": "Checklist items must be a list."}), 400
        return jsonify({"items": profiles.save_checklist(profile_id, items)})

    @app.post("/api/profiles/<profile_id>/checklist/template")
    def reset_checklist(profile_id: str):
        return jsonify({"items": profiles.save_checklist(profile_id, build_template_items())})

    @app.post("/api/profiles/<profile_id>/checklist/<item_id>/toggle")
    def toggle_checklist_item(profile_id: str, item_id: str):
        items = toggle_item(profiles.get_checklist(profile_id), item_id)
        return jsonify({"items": profiles.save_checklist(profile_id, items)})

    @app.post("/api/profiles/<profile_id>/checklist/<item_id>/sub/<sub_id>/toggle")
    def toggle_checklist_sub_item(profile_id: str, item_id: str, sub_id: str):
        items = toggle_sub_item(profiles.get_checklist(profile_id), item_id, sub_id)
        return jsonify({"items": profiles.save_checklist(profile_id, items)})

    # projection and reports

    @app.get("/api/profiles/<profile_id>/simulation")
    def get_simulation_data(profile_id: str):
        data = simulation_data(profile_id)
        data["totals"] = lifetime_totals(data["simulation"]["cashflow"])
        return jsonify(data)

    @app.get("/api/profiles/<profile_id>/reports/<page>")
    def get_report(profile_id: str, page: str):
        builder = REPORT_PAGES.get(page)
        if builder is None:
            return jsonify({"error": f"Unknown report page: {page}"}), 404
        return jsonify({"page": page, "report": builder(simulation_data(profile_id))})

    # calculators

    def run_calculator(mode: str):
        form = CalculatorForm()
        form.select(mode)
        payload = json_body()
        if payload is None:
            return bad_body()
        form.update(**payload)
        result = form.calculate()
        if result is None:
            return jsonify({"errors": form.errors}), 400
        return jsonify({"result": result})

    @app.post("/api/calculator/goal")
    def calculate_goal():
        return run_calculator("goal")

    @app.post("/api/calculator/dc")
    def calculate_dc():
        return run_calculator("dc")

    return app


def main() -> int:
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    create_app(settings).run(debug=False, port=settings.port)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
