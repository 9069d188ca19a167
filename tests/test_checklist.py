from planner.checklist import (
    add_item,
    add_sub_item,
    build_template_items,
    delete_item,
    delete_sub_item,
    normalize_items,
    progress,
    rename_item,
    toggle_item,
    toggle_sub_item,
)


def test_template_has_five_unchecked_sections():
    items = build_template_items()

    assert len(items) == 5
    assert all(len(item["subItems"]) == 3 for item in items)
    assert not any(item["checked"] for item in items)
    assert len({item["id"] for item in items}) == 5


def test_toggle_parent_applies_to_children_without_mutating_input():
    items = build_template_items()
    parent = items[0]

    toggled = toggle_item(items, parent["id"])

    assert toggled[0]["checked"] is True
    assert all(child["checked"] for child in toggled[0]["subItems"])
    assert items[0]["checked"] is False
    assert not any(child["checked"] for child in items[0]["subItems"])


def test_parent_follows_children():
    items = build_template_items()
    parent_id = items[1]["id"]
    sub_ids = [child["id"] for child in items[1]["subItems"]]

    for sub_id in sub_ids:
        items = toggle_sub_item(items, parent_id, sub_id)
    assert items[1]["checked"] is True

    items = toggle_sub_item(items, parent_id, sub_ids[0])
    assert items[1]["checked"] is False


def test_new_child_unchecks_parent():
    items = build_template_items()
    items = toggle_item(items, items[0]["id"])
    assert items[0]["checked"] is True

    items = add_sub_item(items, items[0]["id"], "비상금 통장 분리")

    assert items[0]["checked"] is False
    assert items[0]["subItems"][-1]["title"] == "비상금 통장 분리"


def test_deleting_unchecked_child_can_complete_parent():
    items = build_template_items()
    parent_id = items[2]["id"]
    first, second, third = [child["id"] for child in items[2]["subItems"]]
    items = toggle_sub_item(items, parent_id, first)
    items = toggle_sub_item(items, parent_id, second)

    items = delete_sub_item(items, parent_id, third)

    assert items[2]["checked"] is True


def test_blank_titles_are_ignored():
    items = build_template_items()

    assert add_item(items, "   ") == items
    assert rename_item(items, items[0]["id"], "") == items


def test_add_item_after_target_and_delete():
    items = build_template_items()

    items = add_item(items, "주거 계획", after_id=items[0]["id"])

    assert items[1]["title"] == "주거 계획"
    assert items[1]["subItems"] == []

    items = delete_item(items, items[1]["id"])
    assert [item["title"] for item in items][:2] == ["소득·현금흐름", "세금·법적 구조"]


def test_normalize_accepts_children_key():
    stored = [{"id": "a", "title": "부채", "checked": 1, "children": [{"id": "b", "title": "대출", "checked": 0}]}]

    items = normalize_items(stored)

    assert items == [
        {"id": "a", "title": "부채", "checked": True, "subItems": [{"id": "b", "title": "대출", "checked": False}]}
    ]


def test_progress_counts_leaves():
    items = build_template_items()
    items = toggle_item(items, items[0]["id"])
    items = add_item(items, "단독 항목")

    result = progress(items)

    assert result == {"total": 16, "checked": 3, "percent": 19}
    assert progress([]) == {"total": 0, "checked": 0, "percent": 0}
