"""
roadmap_service.py - Writes and reads a user's roadmaps through a store.
Weekly goals are inserted one at a time, each followed by its tasks. A regular
week that fails to insert stops the import; a failed advanced week or task is
logged and skipped.
"""

import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone

from data.roadmaps import ROADMAPS
from services import progress_service
from services.roadmap_validator import (
    RoadmapBuilder,
    ValidationResult,
    WeekPlan,
    build_import_plan,
    build_single_goal_plan,
    normalize_reference,
    validate_roadmap_data,
    validate_roadmap_json,
    validate_single_goal,
)

logger = logging.getLogger(__name__)


@dataclass
class ImportResult:
    weeks_created: int = 0
    tasks_created: int = 0
    advanced_topics_created: int = 0
    roadmap_type: str | None = None

    @property
    def message(self) -> str:
        return f"Successfully imported {self.weeks_created} weeks with {self.tasks_created} tasks!"

    def to_dict(self) -> dict:
        return {
            "message": self.message,
            "roadmap_type": self.roadmap_type,
            "weeks_created": self.weeks_created,
            "tasks_created": self.tasks_created,
            "advanced_topics_created": self.advanced_topics_created,
        }


class RoadmapImportError(Exception):
    """A weekly goal could not be written. Rows already written stay in place."""

    def __init__(self, message: str, result: ImportResult):
        super().__init__(message)
        self.message = message
        self.result = result

    def to_dict(self) -> dict:
        return {
            "message": self.message,
            "weeks_created": self.result.weeks_created,
            "tasks_created": self.result.tasks_created,
        }


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# ── writes ────────────────────────────────────────────────────────

def persist_plan(store, user_id: str, plans: list[WeekPlan]) -> ImportResult:
    result = ImportResult(roadmap_type=plans[0].goal["roadmap_type"] if plans else None)
    for plan in plans:
        try:
            goal = store.insert("weekly_goals", {**plan.goal, "user_id": user_id})
        except Exception as e:
            if plan.advanced:
                # advanced weeks are best-effort
                logger.error(f"Skipping advanced topic week {plan.label}: {e}")
                continue
            raise RoadmapImportError(f"Failed to create week {plan.label}: {e}", result) from e

        if plan.advanced:
            result.advanced_topics_created += 1
        else:
            result.weeks_created += 1

        for title in plan.deliverables:
            try:
                store.insert("tasks", {
                    "user_id": user_id,
                    "weekly_goal_id": goal["id"],
                    "title": title,
                    "completed": False,
                })
                result.tasks_created += 1
            except Exception as e:
                logger.error(f"Skipping task '{title}' for week {plan.label}: {e}")

    logger.info(
        f"Roadmap {result.roadmap_type} written for {user_id}: "
        f"{result.weeks_created} weeks, {result.advanced_topics_created} advanced, "
        f"{result.tasks_created} tasks"
    )
    return result


def import_roadmap_json(store, user_id: str, text: str) -> ImportResult | ValidationResult:
    """Validate a pasted document and, when valid, write it. Invalid input writes nothing."""
    validation = validate_roadmap_json(text)
    if not validation.is_valid:
        return validation
    return persist_plan(store, user_id, build_import_plan(validation.preview))


def import_roadmap_data(store, user_id: str, data: dict, roadmap_type: str = None) -> ImportResult | ValidationResult:
    validation = validate_roadmap_data(data)
    if not validation.is_valid:
        return validation
    return persist_plan(store, user_id, build_import_plan(data, roadmap_type=roadmap_type))


def create_custom_roadmap(store, user_id: str, builder: RoadmapBuilder) -> ImportResult | ValidationResult:
    validation = builder.validate()
    if not validation.is_valid:
        return validation
    return persist_plan(store, user_id, builder.build_plan())


def create_single_goal(store, user_id: str, data: dict) -> ImportResult | ValidationResult:
    validation = validate_single_goal(data)
    if not validation.is_valid:
        return validation
    plan = build_single_goal_plan(data, now_ms=int(time.time() * 1000))
    return persist_plan(store, user_id, [plan])


def start_predefined_roadmap(store, user_id: str, roadmap_type: str) -> ImportResult | None:
    """
    Seed a catalogue roadmap under its catalogue key.
    Returns None when the user already has that roadmap. Raises KeyError for
    an unknown key.
    """
    document = ROADMAPS[roadmap_type]
    if store.select("weekly_goals", filters={"user_id": user_id, "roadmap_type": roadmap_type}):
        logger.info(f"Roadmap {roadmap_type} already started for {user_id}")
        return None
    result = import_roadmap_data(store, user_id, document, roadmap_type=roadmap_type)
    if isinstance(result, ValidationResult):
        raise ValueError(f"Catalogue roadmap {roadmap_type} is invalid: {result.errors}")
    return result


# ── reads ─────────────────────────────────────────────────────────

def list_goals(store, user_id: str, roadmap_type: str = None) -> list[dict]:
    filters = {"user_id": user_id}
    if roadmap_type:
        filters["roadmap_type"] = roadmap_type
        goals = store.select("weekly_goals", filters=filters, order="created_at")
        # week_number is text; "10" must follow "9"
        return sorted(goals, key=progress_service.week_order_key)
    return store.select("weekly_goals", filters=filters, order="created_at.desc")


def list_tasks(store, user_id: str, roadmap_type: str = None) -> list[dict]:
    tasks = store.select("tasks", filters={"user_id": user_id}, order="created_at")
    if not roadmap_type:
        return tasks
    goal_ids = {g["id"] for g in list_goals(store, user_id, roadmap_type)}
    return [t for t in tasks if t.get("weekly_goal_id") in goal_ids]


def get_goal(store, user_id: str, goal_id: str) -> dict | None:
    rows = store.select("weekly_goals", filters={"id": goal_id, "user_id": user_id})
    return rows[0] if rows else None


# ── updates ───────────────────────────────────────────────────────

def toggle_task(store, user_id: str, task_id: str, completed: bool) -> dict | None:
    rows = store.select("tasks", filters={"id": task_id, "user_id": user_id})
    if not rows:
        return None
    task = rows[0]

    changes = {"completed": completed}
    if completed and not task.get("completed"):
        changes["completed_at"] = _now_iso()
    elif not completed and task.get("completed"):
        changes["completed_at"] = None

    updated = store.update("tasks", {"id": task_id, "user_id": user_id}, changes)
    task = updated[0] if updated else {**task, **changes}

    _refresh_progress(store, user_id, task)
    return task


def _refresh_progress(store, user_id: str, task: dict):
    """Keep the per-roadmap user_progress row current. Failures are logged only."""
    try:
        goal = get_goal(store, user_id, task.get("weekly_goal_id"))
        if goal is None:
            return
        roadmap_type = goal["roadmap_type"]
        goals = list_goals(store, user_id, roadmap_type)
        tasks = list_tasks(store, user_id, roadmap_type)
        summary = progress_service.roadmap_summary(roadmap_type, goals, tasks)
        store.upsert("user_progress", {
            "user_id": user_id,
            "roadmap_type": roadmap_type,
            "total_tasks": summary.total_tasks,
            "completed_tasks": summary.completed_tasks,
            "progress_percentage": summary.overall_progress,
            "updated_at": _now_iso(),
        }, on_conflict="user_id,roadmap_type")
    except Exception as e:
        logger.error(f"Failed to update progress for {user_id}: {e}")


def update_goal_reference(store, user_id: str, goal_id: str, references: list) -> dict | None:
    if get_goal(store, user_id, goal_id) is None:
        return None
    refs = [normalize_reference(r) for r in references or []]
    rows = store.update("weekly_goals", {"id": goal_id, "user_id": user_id}, {"reference": refs})
    return rows[0] if rows else None


# ── deletes ───────────────────────────────────────────────────────

def delete_goal(store, user_id: str, goal_id: str) -> bool:
    if get_goal(store, user_id, goal_id) is None:
        return False
    store.delete("tasks", {"weekly_goal_id": goal_id, "user_id": user_id})
    store.delete("weekly_goals", {"id": goal_id, "user_id": user_id})
    return True


def delete_roadmap(store, user_id: str, roadmap_type: str) -> int:
    """Remove every week of a roadmap with its tasks and progress row. Returns weeks removed."""
    goals = list_goals(store, user_id, roadmap_type)
    for goal in goals:
        store.delete("tasks", {"weekly_goal_id": goal["id"], "user_id": user_id})
    if goals:
        store.delete("weekly_goals", {"user_id": user_id, "roadmap_type": roadmap_type})
    store.delete("user_progress", {"user_id": user_id, "roadmap_type": roadmap_type})
    logger.info(f"Deleted roadmap {roadmap_type} for {user_id} ({len(goals)} weeks)")
    return len(goals)
