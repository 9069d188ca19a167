import json
import logging
import math

import pytest

from planner.engine.state import ProfileState
from planner.engine.storage import _sanitize_json_compat, load_json, load_profiles, save_profiles
from planner.errors import ItemNotFoundError, ProfileNotFoundError


def test_sanitize_json_compat_replaces_special_numbers():
    payload = {
        "float": math.nan,
        "list": [1, float("inf"), -float("inf")],
        "nested": {"value": math.nan},
    }

    clean = _sanitize_json_compat(payload)

    assert clean == {
        "float": None,
        "list": [1, None, None],
        "nested": {"value": None},
    }


def test_save_profiles_persists_sanitized_values(tmp_path):
    path = tmp_path / "profiles.json"
    data = {"p1": {"value": math.nan, "items": [1, float("inf")], "name": "홍길동"}}

    save_profiles(str(path), data)

    with path.open("r", encoding="utf-8") as handle:
        stored = json.load(handle)

    assert stored == {"p1": {"value": None, "items": [1, None], "name": "홍길동"}}
    assert not (tmp_path / "profiles.json.tmp").exists()


def test_load_profiles_treats_missing_and_empty_files_as_empty(tmp_path):
    empty = tmp_path / "empty.json"
    empty.write_text("   ", encoding="utf-8")

    assert load_profiles(str(tmp_path / "missing.json")) == {}
    assert load_profiles(str(empty)) == {}


def test_unreadable_store_logs_warning(tmp_path, caplog):
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")

    with caplog.at_level(logging.WARNING):
        result = load_json(str(broken), [])

    assert result == []
    assert "broken.json" in caplog.text


def test_profile_state_round_trips_items(tmp_path):
    path = str(tmp_path / "data" / "profiles.json")
    state = ProfileState(path)
    profile = state.create({"name": "홍길동", "birthYear": 1970, "retirementAge": 60, "deathAge": 90})

    item = state.add_item(profile["id"], "debts", {"title": "주택담보대출", "debtAmount": 30000})
    state.update_item(profile["id"], "debts", item["id"], {"title": "전세대출", "debtAmount": 10000})

    reloaded = ProfileState(path)
    debts = reloaded.list_items(profile["id"], "debts")
    assert debts == [{"title": "전세대출", "debtAmount": 10000, "id": item["id"]}]
    assert len(reloaded.get_checklist(profile["id"])) == 5


def test_profile_state_raises_for_unknown_ids(tmp_path):
    state = ProfileState(str(tmp_path / "profiles.json"))
    profile = state.create({"name": "홍길동"})

    with pytest.raises(ProfileNotFoundError):
        state.get("missing")
    with pytest.raises(ItemNotFoundError):
        state.delete_item(profile["id"], "incomes", "nope")
    with pytest.raises(ItemNotFoundError):
        state.list_items(profile["id"], "assets")


def test_profile_state_delete_removes_profile(tmp_path):
    state = ProfileState(str(tmp_path / "profiles.json"))
    profile = state.create({"name": "홍길동"})

    state.delete(profile["id"])

    assert state.list_profiles() == []
