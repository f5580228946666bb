import json

import pytest

from conftest import USER_ID, OTHER_USER_ID
from services import progress_service
from services import roadmap_service
from services.roadmap_service import ImportResult, RoadmapImportError
from services.roadmap_validator import RoadmapBuilder, ValidationResult

TWO_WEEKS = {
    "title": "Two Week Plan",
    "weeks": [
        {"week": "1", "focus": "First", "topics": ["t1"], "goals": ["g1"], "deliverables": ["A", "B"],
         "reference": [{"type": "Book", "book": "X", "custom_field": "Y"}]},
        {"week": "2", "focus": "Second", "topics": ["t2"], "goals": ["g2"], "deliverables": ["C"]},
    ],
}


def test_import_two_weeks_creates_goals_and_tasks(store):
    result = roadmap_service.import_roadmap_json(store, USER_ID, json.dumps(TWO_WEEKS))

    assert isinstance(result, ImportResult)
    assert result.weeks_created == 2
    assert result.tasks_created == 3
    assert result.message == "Successfully imported 2 weeks with 3 tasks!"

    goals = store.select("weekly_goals", filters={"user_id": USER_ID})
    tasks = store.select("tasks", filters={"user_id": USER_ID})
    assert len(goals) == 2
    assert len(tasks) == 3
    assert all(t["completed"] is False for t in tasks)
    assert {g["roadmap_type"] for g in goals} == {"two_week_plan"}


def test_reference_extra_fields_survive_import(store):
    roadmap_service.import_roadmap_json(store, USER_ID, json.dumps(TWO_WEEKS))
    week_one = progress_service.find_week(roadmap_service.list_goals(store, USER_ID, "two_week_plan"), 1)
    assert week_one["reference"][0]["custom_field"] == "Y"


def test_invalid_document_writes_nothing(store):
    result = roadmap_service.import_roadmap_json(store, USER_ID, '{"title":"X","weeks":[]}')
    assert isinstance(result, ValidationResult)
    assert store.select("weekly_goals") == []


def test_task_insert_failure_is_skipped(fake_store):
    fake_store.fail_on.append(lambda table, data: table == "tasks" and data["title"] == "A")

    result = roadmap_service.import_roadmap_data(fake_store, USER_ID, TWO_WEEKS)

    assert result.weeks_created == 2
    assert result.tasks_created == 2
    assert [t["title"] for t in fake_store.tables["tasks"]] == ["B", "C"]


def test_goal_insert_failure_aborts_with_partial_counts(fake_store):
    fake_store.fail_on.append(lambda table, data: table == "weekly_goals" and data["week_number"] == "2")

    with pytest.raises(RoadmapImportError) as exc_info:
        roadmap_service.import_roadmap_data(fake_store, USER_ID, TWO_WEEKS)

    err = exc_info.value
    assert err.message.startswith("Failed to create week 2:")
    assert err.result.weeks_created == 1
    assert err.result.tasks_created == 2
    # rows from week 1 stay in place
    assert len(fake_store.tables["weekly_goals"]) == 1
    assert len(fake_store.tables["tasks"]) == 2


def test_advanced_goal_insert_failure_is_skipped(fake_store):
    fake_store.fail_on.append(lambda table, data: table == "weekly_goals" and data["week_number"] == "advanced-1")
    doc = dict(TWO_WEEKS, advanced_topics=[{"topic": "QEC", "description": "codes"}])

    result = roadmap_service.import_roadmap_data(fake_store, USER_ID, doc)

    assert result.weeks_created == 2
    assert result.advanced_topics_created == 0
    assert result.tasks_created == 3
    assert {g["week_number"] for g in fake_store.tables["weekly_goals"]} == {"1", "2"}


def test_list_goals_orders_weeks_numerically(store):
    weeks = [
        {"week": w, "focus": f"Focus {w}", "topics": ["t"], "goals": ["g"], "deliverables": [f"D{w}"]}
        for w in ("10", "2", "1")
    ]
    doc = {"title": "Long Plan", "weeks": weeks, "advanced_topics": [{"topic": "Extra", "description": "x"}]}
    roadmap_service.import_roadmap_data(store, USER_ID, doc)

    goals = roadmap_service.list_goals(store, USER_ID, "long_plan")
    assert [g["week_number"] for g in goals] == ["1", "2", "10", "advanced-1"]

    tasks = roadmap_service.list_tasks(store, USER_ID, "long_plan")
    ten = progress_service.find_week(goals, 10)
    task_id = next(t["id"] for t in tasks if t["weekly_goal_id"] == ten["id"])
    roadmap_service.toggle_task(store, USER_ID, task_id, True)

    chart = progress_service.weekly_chart(goals, roadmap_service.list_tasks(store, USER_ID, "long_plan"))
    assert [w["week"] for w in chart["weeks"]] == ["Week 1", "Week 2", "Week 10", "Week advanced-1"]
    assert [w["cumulative"] for w in chart["weeks"]] == [0, 0, 1, 1]


def test_advanced_topics_become_extra_weeks(store):
    doc = dict(TWO_WEEKS, advanced_topics=[{"topic": "QEC", "description": "codes"}])
    result = roadmap_service.import_roadmap_data(store, USER_ID, doc)
    assert result.advanced_topics_created == 1
    assert result.tasks_created == 4
    goals = roadmap_service.list_goals(store, USER_ID, "two_week_plan")
    assert "advanced-1" in {g["week_number"] for g in goals}


def test_create_custom_roadmap(store):
    builder = RoadmapBuilder("Mine", "My own plan")
    builder.weeks[0].focus_area = "Start"
    builder.update_item(0, "topics", 0, "a")
    builder.update_item(0, "goals", 0, "b")
    builder.update_item(0, "deliverables", 0, "c")

    result = roadmap_service.create_custom_roadmap(store, USER_ID, builder)
    assert result.weeks_created == 1
    doc = progress_service.reconstruct_roadmap("custom", roadmap_service.list_goals(store, USER_ID, "custom"))
    assert doc["title"] == "Mine"
    assert doc["description"] == "My own plan"


def test_create_single_goal(store):
    result = roadmap_service.create_single_goal(store, USER_ID, {
        "title": "Read BCS paper", "description": "Read and summarise the 1957 paper",
        "category": "physics", "priority": "medium",
    })
    assert result.weeks_created == 1
    assert result.tasks_created == 1
    goal = roadmap_service.list_goals(store, USER_ID, "custom")[0]
    assert goal["week_number"].startswith("custom-")


def test_start_predefined_roadmap_once(store):
    result = roadmap_service.start_predefined_roadmap(store, USER_ID, "qiskit")
    assert result.weeks_created == 3
    assert result.roadmap_type == "qiskit"
    assert roadmap_service.start_predefined_roadmap(store, USER_ID, "qiskit") is None

    with pytest.raises(KeyError):
        roadmap_service.start_predefined_roadmap(store, USER_ID, "unknown")


def test_toggle_task_round_trip(store):
    roadmap_service.import_roadmap_json(store, USER_ID, json.dumps(TWO_WEEKS))
    goals = roadmap_service.list_goals(store, USER_ID, "two_week_plan")
    tasks = roadmap_service.list_tasks(store, USER_ID, "two_week_plan")
    before = progress_service.roadmap_summary("two_week_plan", goals, tasks).overall_progress
    task_id = tasks[0]["id"]

    done = roadmap_service.toggle_task(store, USER_ID, task_id, True)
    assert done["completed"] is True
    assert done["completed_at"] is not None

    # setting completed again keeps the original timestamp
    again = roadmap_service.toggle_task(store, USER_ID, task_id, True)
    assert again["completed_at"] == done["completed_at"]

    progress = store.select("user_progress", filters={"user_id": USER_ID})
    assert len(progress) == 1
    assert progress[0]["completed_tasks"] == 1
    assert progress[0]["progress_percentage"] == 33

    undone = roadmap_service.toggle_task(store, USER_ID, task_id, False)
    assert undone["completed"] is False
    assert undone["completed_at"] is None

    tasks = roadmap_service.list_tasks(store, USER_ID, "two_week_plan")
    assert progress_service.roadmap_summary("two_week_plan", goals, tasks).overall_progress == before


def test_toggle_task_of_other_user_is_not_found(store):
    roadmap_service.import_roadmap_json(store, USER_ID, json.dumps(TWO_WEEKS))
    task_id = roadmap_service.list_tasks(store, USER_ID)[0]["id"]
    assert roadmap_service.toggle_task(store, OTHER_USER_ID, task_id, True) is None


def test_progress_refresh_failure_does_not_break_toggle(fake_store):
    roadmap_service.import_roadmap_data(fake_store, USER_ID, TWO_WEEKS)
    task_id = fake_store.tables["tasks"][0]["id"]

    def broken_upsert(*args, **kwargs):
        raise RuntimeError("progress table unavailable")

    fake_store.upsert = broken_upsert
    task = roadmap_service.toggle_task(fake_store, USER_ID, task_id, True)
    assert task["completed"] is True


def test_update_goal_reference(store):
    roadmap_service.import_roadmap_json(store, USER_ID, json.dumps(TWO_WEEKS))
    goal = roadmap_service.list_goals(store, USER_ID)[0]

    updated = roadmap_service.update_goal_reference(
        store, USER_ID, goal["id"], [{"type": "Video", "url": "https://example.org", "note": "keep"}]
    )
    assert updated["reference"] == [
        {"type": "Video", "title": "Untitled", "url": "https://example.org", "note": "keep"}
    ]
    assert roadmap_service.update_goal_reference(store, OTHER_USER_ID, goal["id"], []) is None


def test_delete_goal_removes_its_tasks(store):
    roadmap_service.import_roadmap_json(store, USER_ID, json.dumps(TWO_WEEKS))
    week_one = progress_service.find_week(roadmap_service.list_goals(store, USER_ID), 1)

    assert roadmap_service.delete_goal(store, USER_ID, week_one["id"]) is True
    assert len(store.select("tasks", filters={"user_id": USER_ID})) == 1
    assert roadmap_service.delete_goal(store, USER_ID, week_one["id"]) is False


def test_delete_roadmap(store):
    roadmap_service.import_roadmap_json(store, USER_ID, json.dumps(TWO_WEEKS))
    roadmap_service.start_predefined_roadmap(store, USER_ID, "qutip")

    assert roadmap_service.delete_roadmap(store, USER_ID, "two_week_plan") == 2
    remaining = roadmap_service.list_goals(store, USER_ID)
    assert {g["roadmap_type"] for g in remaining} == {"qutip"}
    assert len(roadmap_service.list_tasks(store, USER_ID)) == 8
