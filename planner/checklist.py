"""Retirement check-up checklist.

A checklist is a list of top-level items, each ``{id, title, checked,
subItems}``. Every update function returns a new list and leaves its input
untouched. Parent and child check states stay in sync: toggling a parent
applies its new state to every child, and toggling a child sets the parent
to "all children checked".
"""
from __future__ import annotations

import copy
import time
import uuid
from typing import Any, Dict, Iterable, List, Mapping, Optional

Item = Dict[str, Any]

CHECKLIST_TEMPLATE: List[Dict[str, Any]] = [
    {
        "title": "소득·현금흐름",
        "children": [
            "공적연금 개시 전 소득 공백기 – 55~65세 사이의 소득 없는 10년 동안 생활비 대비가 되었는지 확인",
            "퇴직금 수령 방식에 따른 세금 차이 – 일시금과 연금 수령의 실수령액 차이 비교 여부",
            "배우자의 연금·소득 구조 파악 – 가계 현금흐름이 한쪽에만 의존하고 있지 않은지 점검",
        ],
    },
    {
        "title": "세금·법적 구조",
        "children": [
            "연금 수령 시 세금 구조 이해 – 사적 연금 수령액이 1,500만 원 초과 시 종합과세 대상임을 인지",
            "금융소득(이자·배당) 합산과세 구간 검토 – 연금 외 소득 증가 시 세금 급증 가능성 점검",
            "상속·증여 설계 준비 – 배우자 사망 및 자녀 간 갈등 등으로 자산이 예상치 못하게 분할될 위험 점검",
        ],
    },
    {
        "title": "자산·부채",
        "children": [
            "부동산 비중 과다 여부 – 은퇴 후 현금흐름에 지장이 없는지, 유동성 확보 방안 검토",
            "변동금리 대출 유지 점검 – 금리 상승기 이자 부담 급증 가능성 검토",
            "배우자 명의 부채·보증 채무 확인 – 숨은 잠재 부채가 없는지 확인",
        ],
    },
    {
        "title": "건강·장수 리스크",
        "children": [
            "장수 리스크 반영 – 90세 이상 생존 시 자산 고갈 가능성 시나리오 검토",
            "간병·요양 비용 준비 – 70대 이후 연간 수백만~천만 원 발생 가능성 대비",
            "실손보험 보장 공백 확인 – 갱신 거절이나 중복 보장으로 필요한 시기 보장 누락 여부 점검",
        ],
    },
    {
        "title": "기타 비상·예비계획",
        "children": [
            "은퇴 후 즉시 사용 가능한 현금 6개월치 확보 – 생활비 비상자금 유지 여부 확인",
            "가족의 재무 구조 이해 공유 – 본인 유고 시 금융자산·보험·대출 현황 파악 가능하도록 정리",
            "비상자금이 투자자금으로 대체되지 않았는지 – 유동성 위기 시 손실 매각 가능성 점검",
        ],
    },
]


def create_item_id() -> str:
    return f"chk_{int(time.time() * 1000)}_{uuid.uuid4().hex[:6]}"


def _leaf(title: str, checked: bool = False, item_id: Optional[str] = None) -> Item:
    return {"id": item_id or create_item_id(), "title": title, "checked": checked}


def build_template_items() -> List[Item]:
    return [
        {
            **_leaf(section["title"]),
            "subItems": [_leaf(title) for title in section["children"]],
        }
        for section in CHECKLIST_TEMPLATE
    ]


def normalize_items(items: Iterable[Mapping[str, Any]] | None) -> List[Item]:
    """Coerce stored items (``children`` or ``subItems``) into the canonical shape."""
    normalized: List[Item] = []
    for item in items or []:
        children = item.get("subItems") or item.get("children") or []
        normalized.append(
            {
                **_leaf(str(item.get("title") or ""), bool(item.get("checked")), item.get("id")),
                "subItems": [
                    _leaf(str(child.get("title") or ""), bool(child.get("checked")), child.get("id"))
                    for child in children
                ],
            }
        )
    return normalized


def _map_item(items: List[Item], item_id: str, update) -> List[Item]:
    result = copy.deepcopy(items)
    for index, item in enumerate(result):
        if item["id"] == item_id:
            result[index] = update(item)
    return result


def add_item(items: List[Item], title: str, after_id: Optional[str] = None) -> List[Item]:
    title = (title or "").strip()
    if not title:
        return copy.deepcopy(items)
    result = copy.deepcopy(items)
    new_item = {**_leaf(title), "subItems": []}
    position = next((i + 1 for i, item in enumerate(result) if item["id"] == after_id), len(result))
    result.insert(position, new_item)
    return result


def add_sub_item(items: List[Item], parent_id: str, title: str) -> List[Item]:
    title = (title or "").strip()
    if not title:
        return copy.deepcopy(items)

    def update(item: Item) -> Item:
        item["subItems"].append(_leaf(title))
        # a new unchecked child means not every child is done
        item["checked"] = False
        return item

    return _map_item(items, parent_id, update)


def toggle_item(items: List[Item], item_id: str) -> List[Item]:
    def update(item: Item) -> Item:
        checked = not item["checked"]
        item["checked"] = checked
        for child in item["subItems"]:
            child["checked"] = checked
        return item

    return _map_item(items, item_id, update)


def toggle_sub_item(items: List[Item], parent_id: str, sub_id: str) -> List[Item]:
    def update(item: Item) -> Item:
        for child in item["subItems"]:
            if child["id"] == sub_id:
                child["checked"] = not child["checked"]
        if item["subItems"]:
            item["checked"] = all(child["checked"] for child in item["subItems"])
        return item

    return _map_item(items, parent_id, update)


def rename_item(items: List[Item], item_id: str, title: str) -> List[Item]:
    title = (title or "").strip()
    if not title:
        return copy.deepcopy(items)

    def update(item: Item) -> Item:
        item["title"] = title
        return item

    return _map_item(items, item_id, update)


def rename_sub_item(items: List[Item], parent_id: str, sub_id: str, title: str) -> List[Item]:
    title = (title or "").strip()
    if not title:
        return copy.deepcopy(items)

    def update(item: Item) -> Item:
        for child in item["subItems"]:
            if child["id"] == sub_id:
                child["title"] = title
        return item

    return _map_item(items, parent_id, update)


def delete_item(items: List[Item], item_id: str) -> List[Item]:
    return [copy.deepcopy(item) for item in items if item["id"] != item_id]


def delete_sub_item(items: List[Item], parent_id: str, sub_id: str) -> List[Item]:
    def update(item: Item) -> Item:
        item["subItems"] = [child for child in item["subItems"] if child["id"] != sub_id]
        if item["subItems"]:
            item["checked"] = all(child["checked"] for child in item["subItems"])
        return item

    return _map_item(items, parent_id, update)


def progress(items: List[Item]) -> Dict[str, Any]:
    """Completion over leaves; a parent without children counts as one leaf."""
    total = 0
    done = 0
    for item in items:
        leaves = item["subItems"] or [item]
        total += len(leaves)
        done += sum(1 for leaf in leaves if leaf["checked"])
    percent = round(done / total * 100) if total else 0
    return {"total": total, "checked": done, "percent": percent}
