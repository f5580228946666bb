import pytest

from conftest import USER_ID


def _goal(store, week="1", **extra):
    return store.insert("weekly_goals", {
        "user_id": USER_ID,
        "roadmap_type": "qiskit",
        "week_number": week,
        "focus_area": f"Week {week}",
        "topics": ["t"],
        **extra,
    })


def test_insert_returns_row_with_iso_timestamps(store):
    row = _goal(store, reference=[{"type": "Book", "custom_field": "Y"}])
    assert len(row["id"]) == 36
    assert row["created_at"].endswith("+00:00")
    assert row["reference"] == [{"type": "Book", "custom_field": "Y"}]


def test_select_filters_and_orders(store):
    _goal(store, "2")
    _goal(store, "1")
    store.insert("weekly_goals", {"user_id": "someone-else", "roadmap_type": "qiskit",
                                  "week_number": "3", "focus_area": "x"})

    rows = store.select("weekly_goals", filters={"user_id": USER_ID}, order="week_number")
    assert [r["week_number"] for r in rows] == ["1", "2"]
    rows = store.select("weekly_goals", filters={"user_id": USER_ID}, order="week_number.desc")
    assert [r["week_number"] for r in rows] == ["2", "1"]


def test_update_touches_updated_at(store):
    goal = _goal(store)
    rows = store.update("weekly_goals", {"id": goal["id"]}, {"focus_area": "Renamed"})
    assert rows[0]["focus_area"] == "Renamed"
    assert rows[0]["updated_at"] >= goal["updated_at"]


def test_unknown_column_and_table(store):
    with pytest.raises(ValueError):
        store.insert("weekly_goals", {"user_id": USER_ID, "bogus": 1})
    with pytest.raises(ValueError):
        store.select("habits")


def test_delete_cascades_to_tasks(store):
    goal = _goal(store)
    store.insert("tasks", {"user_id": USER_ID, "weekly_goal_id": goal["id"], "title": "A", "completed": False})

    store.delete("weekly_goals", {"id": goal["id"]})
    assert store.select("tasks") == []

    with pytest.raises(ValueError):
        store.delete("tasks", {})


def test_upsert_on_conflict_keys(store):
    first = store.upsert("user_progress", {"user_id": USER_ID, "roadmap_type": "qiskit", "completed_tasks": 1},
                         on_conflict="user_id,roadmap_type")
    second = store.upsert("user_progress", {"user_id": USER_ID, "roadmap_type": "qiskit", "completed_tasks": 2},
                          on_conflict="user_id,roadmap_type")
    assert first["id"] == second["id"]
    assert store.select("user_progress")[0]["completed_tasks"] == 2
