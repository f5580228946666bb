"""
progress_service.py - Roadmap progress, streaks and dashboard numbers.
Pure functions over weekly-goal and task rows (dicts, as PostgREST returns
them). Nothing here performs I/O or reads configuration; callers pass the
already-fetched rows and, where dates matter, the timezone name.
"""

import math
from dataclasses import dataclass, asdict
from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from models.reference import Reference

NOT_STARTED = "not-started"
IN_PROGRESS = "in-progress"
COMPLETED = "completed"

ROADMAP_TITLES = {
    "qiskit": "Qiskit Quantum Programming",
    "qutip": "QuTiP Learning Path",
    "superconductivity": "Superconductivity Study",
    "superconductivity_study_roadmap": "Superconductivity Study Roadmap",
    "custom": "Custom Roadmap",
    "custom_python": "Python Import Roadmap",
    "json_import": "JSON Import Roadmap",
}

# Reference types written by the import/create flows that carry roadmap-level info
METADATA_REFERENCE_TYPES = ("Roadmap Metadata", "Custom Roadmap")


@dataclass
class RoadmapProgress:
    roadmap_type: str
    title: str
    total_weeks: int = 0
    completed_weeks: int = 0
    total_tasks: int = 0
    completed_tasks: int = 0
    overall_progress: int = 0
    weekly_progress: int = 0
    last_updated: str | None = None

    def to_dict(self) -> dict:
        return asdict(self)


# ── helpers ───────────────────────────────────────────────────────

def percent(part: int, whole: int) -> int:
    """round(100 * part / whole), halves rounded up. 0 when whole is 0."""
    if not whole or whole <= 0:
        return 0
    return (200 * part + whole) // (2 * whole)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _is_done(task: dict) -> bool:
    return bool(task.get("completed"))


def _tasks_by_goal(tasks) -> dict:
    grouped = {}
    for t in tasks or []:
        grouped.setdefault(t.get("weekly_goal_id"), []).append(t)
    return grouped


def _tasks_for(goal: dict, tasks) -> list:
    return [t for t in tasks or [] if t.get("weekly_goal_id") == goal.get("id")]


def parse_timestamp(value) -> datetime | None:
    """ISO-8601 string (or datetime) -> datetime. None when unparseable."""
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def _zone(tz_name: str | None):
    if not tz_name or tz_name == "local":
        return None
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        return None


def to_local_date(value, tz_name: str | None = None) -> date | None:
    """Calendar date of a timestamp in tz_name ('local'/None: system zone). Naive means UTC."""
    dt = parse_timestamp(value)
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(_zone(tz_name)).date()


def today_in(tz_name: str | None = None) -> date:
    return datetime.now(_zone(tz_name)).date()


def roadmap_title(roadmap_type: str) -> str:
    if roadmap_type in ROADMAP_TITLES:
        return ROADMAP_TITLES[roadmap_type]
    return " ".join(w[:1].upper() + w[1:] for w in (roadmap_type or "").split("_"))


# ── per goal ──────────────────────────────────────────────────────

def goal_progress(goal: dict, tasks) -> int:
    goal_tasks = _tasks_for(goal, tasks)
    return percent(sum(1 for t in goal_tasks if _is_done(t)), len(goal_tasks))


def goal_status(goal: dict, tasks) -> str:
    progress = goal_progress(goal, tasks)
    if progress == 100:
        return COMPLETED
    if progress > 0:
        return IN_PROGRESS
    return NOT_STARTED


# ── per roadmap ───────────────────────────────────────────────────

def _summarize(roadmap_type: str, goals: list, by_goal: dict) -> RoadmapProgress:
    summary = RoadmapProgress(roadmap_type=roadmap_type, title=roadmap_title(roadmap_type))
    latest = None
    for goal in goals:
        week_tasks = by_goal.get(goal.get("id"), [])
        done = sum(1 for t in week_tasks if _is_done(t))
        summary.total_weeks += 1
        summary.total_tasks += len(week_tasks)
        summary.completed_tasks += done
        # A week with no tasks is never complete
        if week_tasks and done == len(week_tasks):
            summary.completed_weeks += 1

        updated = parse_timestamp(goal.get("updated_at"))
        if updated is not None and (latest is None or _comparable(updated) > _comparable(latest)):
            latest = updated
            summary.last_updated = goal.get("updated_at")

    summary.overall_progress = percent(summary.completed_tasks, summary.total_tasks)
    summary.weekly_progress = percent(summary.completed_weeks, summary.total_weeks)
    return summary


def _comparable(dt: datetime) -> datetime:
    return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)


def roadmap_summary(roadmap_type: str, goals, tasks) -> RoadmapProgress:
    own = [g for g in goals or [] if g.get("roadmap_type") == roadmap_type]
    return _summarize(roadmap_type, own, _tasks_by_goal(tasks))


def roadmap_summaries(goals, tasks) -> list[RoadmapProgress]:
    """One summary per roadmap_type, in the order roadmaps first appear."""
    grouped = {}
    for g in goals or []:
        grouped.setdefault(g.get("roadmap_type"), []).append(g)
    by_goal = _tasks_by_goal(tasks)
    return [_summarize(rt, gs, by_goal) for rt, gs in grouped.items()]


# ── streak ────────────────────────────────────────────────────────

def completion_streak(tasks, today: date = None, tz_name: str | None = None) -> int:
    """
    Consecutive calendar days, counting back from today, with at least one
    completed task. No completion today means a streak of 0.
    """
    days = set()
    for t in tasks or []:
        if not _is_done(t) or not t.get("completed_at"):
            continue
        d = to_local_date(t["completed_at"], tz_name)
        if d is not None:
            days.add(d)

    curr_date = today or today_in(tz_name)
    streak = 0
    while curr_date in days:
        streak += 1
        curr_date -= timedelta(days=1)
    return streak


# ── week navigation ───────────────────────────────────────────────

def week_index(goal: dict) -> int | None:
    """Integer week for numeric week_number values; None for 'advanced-1', 'custom-…'."""
    raw = goal.get("week_number")
    text = str(raw).strip() if raw is not None else ""
    return int(text) if text.isdecimal() else None


def week_order_key(goal: dict) -> tuple:
    """Numbered weeks by value, then unnumbered ones."""
    index = week_index(goal)
    return (index is None, index or 0)


def numeric_weeks(goals) -> list[dict]:
    return sorted((g for g in goals or [] if week_index(g) is not None), key=week_index)


def clamp_week(week: int, total: int) -> int:
    if total <= 0:
        return 1
    return max(1, min(week, total))


def find_week(goals, week: int) -> dict | None:
    """Goal whose week_number equals week."""
    for g in goals or []:
        if week_index(g) == week:
            return g
    return None


def week_at(goals, position: int) -> dict | None:
    """Goal at a 1-based position among the numbered weeks, clamped. None when there are none."""
    weeks = numeric_weeks(goals)
    if not weeks:
        return None
    return weeks[clamp_week(position, len(weeks)) - 1]


def week_navigation(goals, current_week: int) -> dict:
    """Previous/Next over positions in numeric_weeks, so gaps and week 0 stay reachable."""
    weeks = numeric_weeks(goals)
    total = len(weeks)
    current = clamp_week(current_week, total)
    return {
        "current": current,
        "week_number": weeks[current - 1].get("week_number") if weeks else None,
        "previous": clamp_week(current - 1, total),
        "next": clamp_week(current + 1, total),
        "total": total,
        "has_previous": current > 1,
        "has_next": current < total,
        # excluded from Previous/Next; listed so they can still be opened directly
        "unnumbered": [g.get("week_number") for g in goals or [] if week_index(g) is None],
    }


# ── dashboard view-models ─────────────────────────────────────────

def overview_stats(goals, tasks, today: date = None, tz_name: str | None = None) -> dict:
    summaries = roadmap_summaries(goals, tasks)
    tasks = tasks or []
    average = (
        _round_half_up(sum(s.overall_progress for s in summaries) / len(summaries))
        if summaries else 0
    )
    return {
        "total_goals": len(tasks),
        "completed_goals": sum(1 for t in tasks if _is_done(t)),
        "total_roadmaps": len(summaries),
        "average_progress": average,
        "streak": completion_streak(tasks, today=today, tz_name=tz_name),
    }


def dashboard_stats(goals, tasks, today: date = None, tz_name: str | None = None) -> dict:
    goals = goals or []
    tasks = tasks or []
    total = len(tasks)
    completed = sum(1 for t in tasks if _is_done(t))
    rate = percent(completed, total)

    by_goal = _tasks_by_goal(tasks)
    weekly = []
    for g in goals:
        week_tasks = by_goal.get(g.get("id"), [])
        done = sum(1 for t in week_tasks if _is_done(t))
        weekly.append(done / len(week_tasks) * 100 if week_tasks else 0.0)
    average_weekly = _round_half_up(sum(weekly) / len(weekly)) if weekly else 0

    streak = completion_streak(tasks, today=today, tz_name=tz_name)
    return {
        "total_tasks": total,
        "completed_tasks": completed,
        "pending_tasks": total - completed,
        "completion_rate": rate,
        "average_weekly_progress": average_weekly,
        "active_weeks": len(goals),
        "streak": streak,
        "all_complete": total > 0 and rate == 100,
        "streak_badge": streak >= 7,
    }


def weekly_chart(goals, tasks) -> dict:
    """Bar (per-week %), line (cumulative completed) and doughnut data."""
    by_goal = _tasks_by_goal(tasks)
    weeks = []
    cumulative = 0
    for g in goals or []:
        week_tasks = by_goal.get(g.get("id"), [])
        done = sum(1 for t in week_tasks if _is_done(t))
        cumulative += done
        weeks.append({
            "week": f"Week {g.get('week_number')}",
            "progress": percent(done, len(week_tasks)),
            "completed": done,
            "total": len(week_tasks),
            "cumulative": cumulative,
        })
    completed = sum(1 for t in tasks or [] if _is_done(t))
    return {
        "weeks": weeks,
        "completion": {"completed": completed, "pending": len(tasks or []) - completed},
    }


def filter_goals(goals, tasks, query: str = "", category: str = "all",
                 status: str = "all", sort_by: str = "created_at") -> list[dict]:
    q = (query or "").lower()

    def matches(g):
        if q and q not in (g.get("focus_area") or "").lower() \
                and not any(q in str(t).lower() for t in g.get("topics") or []):
            return False
        if category not in (None, "", "all") and g.get("roadmap_type") != category:
            return False
        if status not in (None, "", "all") and goal_status(g, tasks) != status:
            return False
        return True

    result = [g for g in goals or [] if matches(g)]
    if sort_by == "progress":
        result.sort(key=lambda g: goal_progress(g, tasks), reverse=True)
    elif sort_by == "alphabetical":
        result.sort(key=lambda g: (g.get("focus_area") or "").casefold())
    else:
        floor = datetime.min.replace(tzinfo=timezone.utc)
        result.sort(
            key=lambda g: _comparable(parse_timestamp(g.get("created_at")) or floor),
            reverse=True,
        )
    return result


def reconstruct_roadmap(roadmap_type: str, goals) -> dict:
    """Rebuild the roadmap document from its stored weekly goals."""
    goals = goals or []
    title, description = None, None
    for g in goals:
        for raw in g.get("reference") or []:
            ref = Reference.from_raw(raw)
            if ref.type in METADATA_REFERENCE_TYPES and ref.title:
                title, description = ref.title, ref.description
                break
        if title:
            break

    return {
        "roadmap_type": roadmap_type,
        "title": title or roadmap_title(roadmap_type),
        "description": description or "Custom roadmap",
        "weeks": [
            {
                "id": g.get("id"),
                "week": g.get("week_number"),
                "focus": g.get("focus_area"),
                "topics": g.get("topics") or [],
                "goals": g.get("goals") or [],
                "deliverables": g.get("deliverables") or [],
                "reference": [Reference.from_raw(r) for r in g.get("reference") or []],
            }
            for g in goals
        ],
    }
