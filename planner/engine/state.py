# engine/state.py
import copy
import datetime
import uuid
from typing import Dict, List

from ..checklist import build_template_items, normalize_items
from ..data_model import ITEM_KINDS
from ..errors import ItemNotFoundError, ProfileNotFoundError, SimulationNotFoundError
from .storage import load_profiles, save_profiles

PROFILE_FIELDS = ("name", "birthYear", "retirementAge", "deathAge", "memo")


def _new_id(prefix: str) -> str:
    return f"{prefix}-{str(uuid.uuid4())[:8]}"


def _now() -> str:
    return datetime.datetime.now(datetime.timezone.utc).replace(microsecond=0).isoformat()


class ProfileState:
    """Profiles with their financial items, checklist and saved simulations,
    persisted as one JSON document keyed by profile id."""

    def __init__(self, storage_path: str = "user_data/profiles.json"):
        self.storage_path = storage_path
        self.profiles: Dict[str, dict] = load_profiles(storage_path)

    def _save(self) -> None:
        save_profiles(self.storage_path, self.profiles)

    def _require(self, profile_id: str) -> dict:
        profile = self.profiles.get(profile_id)
        if profile is None:
            raise ProfileNotFoundError(f"profile not found: {profile_id}")
        return profile

    def list_profiles(self) -> List[dict]:
        return [
            {key: profile.get(key) for key in ("id",) + PROFILE_FIELDS}
            for profile in sorted(self.profiles.values(), key=lambda p: p.get("createdAt", ""))
        ]

    def get(self, profile_id: str) -> dict:
        return copy.deepcopy(self._require(profile_id))

    def create(self, record: dict) -> dict:
        profile_id = _new_id("profile")
        profile = {key: record.get(key) for key in PROFILE_FIELDS}
        profile.update(
            id=profile_id,
            createdAt=_now(),
            items={kind: [] for kind in ITEM_KINDS},
            checklist=build_template_items(),
            simulations=[],
        )
        self.profiles[profile_id] = profile
        self._save()
        return copy.deepcopy(profile)

    def update(self, profile_id: str, record: dict) -> dict:
        profile = self._require(profile_id)
        profile.update({key: record[key] for key in PROFILE_FIELDS if key in record})
        self._save()
        return copy.deepcopy(profile)

    def delete(self, profile_id: str) -> None:
        self._require(profile_id)
        del self.profiles[profile_id]
        self._save()

    # items

    def _items(self, profile_id: str, kind: str) -> List[dict]:
        if kind not in ITEM_KINDS:
            raise ItemNotFoundError(f"unknown item kind: {kind}")
        items = self._require(profile_id).setdefault("items", {})
        return items.setdefault(kind, [])

    def list_items(self, profile_id: str, kind: str) -> List[dict]:
        return copy.deepcopy(self._items(profile_id, kind))

    def add_item(self, profile_id: str, kind: str, record: dict) -> dict:
        items = self._items(profile_id, kind)
        item = dict(record)
        item["id"] = _new_id(kind[:-1])
        items.append(item)
        self._save()
        return copy.deepcopy(item)

    def update_item(self, profile_id: str, kind: str, item_id: str, record: dict) -> dict:
        items = self._items(profile_id, kind)
        for index, item in enumerate(items):
            if item.get("id") == item_id:
                items[index] = {**record, "id": item_id}
                self._save()
                return copy.deepcopy(items[index])
        raise ItemNotFoundError(f"{kind} item not found: {item_id}")

    def delete_item(self, profile_id: str, kind: str, item_id: str) -> None:
        items = self._items(profile_id, kind)
        remaining = [item for item in items if item.get("id") != item_id]
        if len(remaining) == len(items):
            raise ItemNotFoundError(f"{kind} item not found: {item_id}")
        items[:] = remaining
        self._save()

    # checklist

    def get_checklist(self, profile_id: str) -> List[dict]:
        return normalize_items(self._require(profile_id).get("checklist"))

    def save_checklist(self, profile_id: str, items: List[dict]) -> List[dict]:
        profile = self._require(profile_id)
        profile["checklist"] = normalize_items(items)
        self._save()
        return copy.deepcopy(profile["checklist"])

    # simulations

    def list_simulations(self, profile_id: str) -> List[dict]:
        return copy.deepcopy(self._require(profile_id).get("simulations", []))

    def add_simulation(self, profile_id: str, title: str) -> dict:
        profile = self._require(profile_id)
        simulation = {"id": _new_id("sim"), "title": title, "createdAt": _now()}
        profile.setdefault("simulations", []).append(simulation)
        self._save()
        return copy.deepcopy(simulation)

    def get_simulation(self, profile_id: str, simulation_id: str) -> dict:
        for simulation in self._require(profile_id).get("simulations", []):
            if simulation.get("id") == simulation_id:
                return copy.deepcopy(simulation)
        raise SimulationNotFoundError(f"simulation not found: {simulation_id}")
