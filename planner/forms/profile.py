from __future__ import annotations

from typing import Dict

from ..config import DEFAULT_DEATH_AGE
from ..data_model import ProfileFormModel
from .base import ItemForm, Record, parse_int

MIN_RETIREMENT_AGE = 30
MAX_RETIREMENT_AGE = 80
DEFAULT_RETIREMENT_AGE = 55


class ProfileForm(ItemForm):
    model = ProfileFormModel()

    def defaults(self) -> Record:
        values = self.model.blank_values()
        values.update(birthYear="", retirementAge=DEFAULT_RETIREMENT_AGE, deathAge=DEFAULT_DEATH_AGE)
        return values

    def load(self, edit_data: Record) -> Record:
        return {
            "name": edit_data.get("name") or "",
            "birthYear": edit_data.get("birthYear") or "",
            "retirementAge": edit_data.get("retirementAge") or DEFAULT_RETIREMENT_AGE,
            "deathAge": edit_data.get("deathAge") or DEFAULT_DEATH_AGE,
            "memo": edit_data.get("memo") or "",
        }

    def check(self, values: Record) -> Dict[str, str]:
        errors: Dict[str, str] = {}
        if not str(values.get("name") or "").strip():
            errors["name"] = "이름을 입력해주세요."
        birth_year = parse_int(values.get("birthYear"))
        if birth_year is None or birth_year < 1900 or birth_year > self.current_year:
            errors["birthYear"] = "올바른 출생년도를 입력해주세요."
        retirement_age = parse_int(values.get("retirementAge"))
        if retirement_age is None or not MIN_RETIREMENT_AGE <= retirement_age <= MAX_RETIREMENT_AGE:
            errors["retirementAge"] = "은퇴 나이는 30-80세 사이여야 합니다."
        elif not self.is_edit and birth_year is not None and retirement_age <= self.current_year - birth_year:
            errors["retirementAge"] = "은퇴 나이는 현재 나이보다 많아야 합니다."
        death_age = parse_int(values.get("deathAge"))
        if death_age is None or (retirement_age is not None and death_age <= retirement_age):
            errors["deathAge"] = "기대 수명은 은퇴 나이보다 많아야 합니다."
        return errors

    def normalize(self, values: Record) -> Record:
        return {
            "name": str(values["name"]).strip(),
            "birthYear": parse_int(values["birthYear"]),
            "retirementAge": parse_int(values["retirementAge"]),
            "deathAge": parse_int(values["deathAge"]),
            "memo": values.get("memo") or "",
        }
