"""
roadmap_validator.py - Roadmap documents and builder input
Checks pasted JSON roadmaps, multi-step builder drafts and single goals, and
turns valid input into WeekPlans: the weekly-goal row to insert plus the
deliverables that each become one task. Problems come back as lists of
messages; nothing in here raises for bad user input or touches storage.
"""

import json
import re
from dataclasses import dataclass, field

from models.reference import Reference

ROADMAP_ARRAY_FIELDS = ("topics", "goals", "deliverables")
CUSTOM_ROADMAP_TYPE = "custom"
DEFAULT_IMPORT_TYPE = "json_import"
PRIORITIES = ("low", "medium", "high")


@dataclass
class ValidationResult:
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    preview: dict | None = None

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def summary(self) -> dict:
        """Counts shown next to a successful validation."""
        data = self.preview if isinstance(self.preview, dict) else {}

        def count(key):
            value = data.get(key)
            return len(value) if isinstance(value, list) else 0

        return {
            "weeks": count("weeks"),
            "advanced_topics": count("advanced_topics"),
            "prerequisites": count("prerequisites"),
            "checklist": count("checklist"),
        }

    def to_dict(self) -> dict:
        return {
            "is_valid": self.is_valid,
            "errors": self.errors,
            "warnings": self.warnings,
            "summary": self.summary(),
        }


@dataclass
class WeekPlan:
    """One weekly goal to insert (without user_id) and the task titles under it."""
    label: str
    goal: dict
    deliverables: list[str]
    advanced: bool = False


# ── shared helpers ────────────────────────────────────────────────

def clean_items(items) -> list[str]:
    """Drop blank/whitespace-only entries (and anything that isn't a string)."""
    if not isinstance(items, list):
        return []
    return [i for i in items if isinstance(i, str) and i.strip()]


def _missing(value) -> bool:
    return not value or (isinstance(value, str) and not value.strip())


def roadmap_type_from_title(title: str) -> str:
    slug = re.sub(r"\s+", "_", (title or "").lower())
    slug = re.sub(r"[^a-z0-9_]", "", slug)
    return slug or DEFAULT_IMPORT_TYPE


def normalize_reference(raw) -> Reference:
    """Fill in type/title defaults; every other key passes through untouched."""
    ref = Reference.from_raw(raw)
    out = {
        "type": ref.type or "Reference",
        "title": ref.title or ref.book or "Untitled",
    }
    for key, value in ref.items():
        if key in ("type", "title") and not value:
            continue
        out[key] = value
    return Reference(out)


def _week_references(week: dict):
    refs = week.get("reference")
    if refs is None:
        refs = week.get("references")
    return refs


# ── JSON documents ────────────────────────────────────────────────

def _check_array(errors: list, label: str, week: dict, name: str):
    value = week.get(name)
    if not isinstance(value, list):
        errors.append(f"{label}: Missing or empty {name} array")
    elif any(not isinstance(item, str) for item in value):
        errors.append(f"{label}: {name} must contain only strings")
    elif not clean_items(value):
        errors.append(f"{label}: Missing or empty {name} array")


def validate_roadmap_data(data) -> ValidationResult:
    """Validate an already-decoded roadmap document. All problems are collected."""
    result = ValidationResult(preview=data)
    errors, warnings = result.errors, result.warnings

    if not isinstance(data, dict):
        errors.append(f"JSON parsing error: expected an object, got {type(data).__name__}")
        return result

    title = data.get("title")
    if not isinstance(title, str) or not title.strip():
        errors.append("Missing or invalid title field")

    weeks = data.get("weeks")
    if not isinstance(weeks, list):
        errors.append("Missing or invalid weeks array")
    else:
        if len(weeks) == 0:
            errors.append("Weeks array cannot be empty")

        for index, week in enumerate(weeks, start=1):
            label = f"Week {index}"
            if not isinstance(week, dict):
                errors.append(f"{label}: Week entry must be an object")
                continue

            if _missing(week.get("week")):
                errors.append(f"{label}: Missing week number")

            focus = week.get("focus")
            if not isinstance(focus, str) or not focus.strip():
                errors.append(f"{label}: Missing or invalid focus area")

            for name in ROADMAP_ARRAY_FIELDS:
                _check_array(errors, label, week, name)

            refs = _week_references(week)
            if not isinstance(refs, list) or len(refs) == 0:
                warnings.append(f"{label}: No references provided (optional)")

    advanced = data.get("advanced_topics")
    if advanced is not None:
        if not isinstance(advanced, list):
            warnings.append("Advanced topics should be an array")
        else:
            for index, topic in enumerate(advanced, start=1):
                if not isinstance(topic, dict) or _missing(topic.get("topic")) or _missing(topic.get("description")):
                    warnings.append(f"Advanced topic {index}: Missing topic name or description")

    for key, name in (("prerequisites", "Prerequisites"), ("checklist", "Checklist")):
        value = data.get(key)
        if value is None:
            continue
        if not isinstance(value, list):
            warnings.append(f"{name} should be an array")
        elif len(value) == 0:
            warnings.append(f"{name} array is empty")

    return result


def validate_roadmap_json(text: str) -> ValidationResult:
    """Parse and validate a pasted roadmap document."""
    try:
        data = json.loads(text)
    except (ValueError, TypeError, RecursionError) as e:
        # RecursionError: nesting deeper than the decoder's stack allows
        return ValidationResult(errors=[f"JSON parsing error: {e}"])
    return validate_roadmap_data(data)


def build_import_plan(data: dict, roadmap_type: str = None) -> list[WeekPlan]:
    """
    Expand a validated document into WeekPlans. Regular weeks come first, then
    each advanced topic that names a topic becomes an "advanced-<n>" week.
    """
    rt = roadmap_type or roadmap_type_from_title(data["title"])
    metadata = {
        "type": "Roadmap Metadata",
        "title": data["title"],
        "description": data.get("description") or "Imported from JSON document",
        "prerequisites": data.get("prerequisites") or [],
        "checklist": data.get("checklist") or [],
        "advanced_topics": data.get("advanced_topics") or [],
    }

    plans = []
    for week in data["weeks"]:
        deliverables = clean_items(week["deliverables"])
        refs = _week_references(week)
        plans.append(WeekPlan(
            label=str(week["week"]).strip(),
            goal={
                "roadmap_type": rt,
                "week_number": str(week["week"]).strip(),
                "focus_area": week["focus"].strip(),
                "topics": clean_items(week["topics"]),
                "goals": clean_items(week["goals"]),
                "deliverables": deliverables,
                "reference": [normalize_reference(r) for r in (refs if isinstance(refs, list) else [])]
                             + [Reference(metadata)],
            },
            deliverables=deliverables,
        ))

    advanced = data.get("advanced_topics")
    for index, topic in enumerate(advanced if isinstance(advanced, list) else [], start=1):
        if not isinstance(topic, dict) or _missing(topic.get("topic")):
            continue
        name = str(topic["topic"]).strip()
        description = topic.get("description")
        deliverables = clean_items(topic.get("deliverables")) or [f"Complete study of {name}"]
        refs = topic.get("reference") or topic.get("references") or []
        week_number = f"advanced-{index}"
        plans.append(WeekPlan(
            label=week_number,
            goal={
                "roadmap_type": rt,
                "week_number": week_number,
                "focus_area": f"Advanced Topic: {name}",
                "topics": [description] if isinstance(description, str) and description.strip() else [name],
                "goals": [f"Master {name}"],
                "deliverables": deliverables,
                "reference": [normalize_reference(r) for r in (refs if isinstance(refs, list) else [])] + [
                    Reference({
                        "type": "Advanced Topic",
                        "title": name,
                        "description": description,
                        "recommended_time": topic.get("recommended_time") or "Variable",
                    })
                ],
            },
            deliverables=deliverables,
            advanced=True,
        ))
    return plans


# ── multi-step builder ────────────────────────────────────────────

def _blank_items() -> list[str]:
    return [""]


@dataclass
class WeekDraft:
    week_number: str
    focus_area: str = ""
    topics: list[str] = field(default_factory=_blank_items)
    goals: list[str] = field(default_factory=_blank_items)
    deliverables: list[str] = field(default_factory=_blank_items)


class RoadmapBuilder:
    """
    Form state for hand-building a custom roadmap.
    Step 1 holds title and description; step 2 (weekly structure) is only
    reachable once those are filled in.
    """

    def __init__(self, title: str = "", description: str = "", weeks: list[WeekDraft] = None):
        self.title = title
        self.description = description
        self.weeks = weeks or [WeekDraft(week_number="1")]
        self.step = 1

    @classmethod
    def from_payload(cls, payload: dict) -> "RoadmapBuilder":
        weeks = []
        for index, w in enumerate(payload.get("weeks") or [], start=1):
            w = w if isinstance(w, dict) else {}
            weeks.append(WeekDraft(
                week_number=str(w.get("week_number") or index),
                focus_area=w.get("focus_area") or "",
                topics=list(w.get("topics") or []),
                goals=list(w.get("goals") or []),
                deliverables=list(w.get("deliverables") or []),
            ))
        return cls(payload.get("title") or "", payload.get("description") or "", weeks or None)

    # step 1
    def validate_basics(self) -> list[str]:
        errors = []
        if not (self.title or "").strip():
            errors.append("Please enter a roadmap title")
        if not (self.description or "").strip():
            errors.append("Please enter a roadmap description")
        return errors

    def next_step(self) -> list[str]:
        errors = self.validate_basics()
        if not errors:
            self.step = 2
        return errors

    def prev_step(self):
        self.step = 1

    # step 2
    def add_week(self) -> WeekDraft:
        week = WeekDraft(week_number=str(len(self.weeks) + 1))
        self.weeks.append(week)
        return week

    def remove_week(self, index: int):
        if len(self.weeks) > 1:
            del self.weeks[index]

    def _items(self, week_index: int, name: str) -> list[str]:
        if name not in ROADMAP_ARRAY_FIELDS:
            raise ValueError(f"Unknown week field: {name}")
        return getattr(self.weeks[week_index], name)

    def add_item(self, week_index: int, name: str):
        self._items(week_index, name).append("")

    def remove_item(self, week_index: int, name: str, item_index: int):
        items = self._items(week_index, name)
        if len(items) > 1:
            del items[item_index]

    def update_item(self, week_index: int, name: str, item_index: int, value: str):
        self._items(week_index, name)[item_index] = value

    def validate(self) -> ValidationResult:
        result = ValidationResult(errors=self.validate_basics())
        for week in self.weeks:
            n = week.week_number
            if not (week.focus_area or "").strip():
                result.errors.append(f"Week {n} must have a focus area")
            for name, noun in (("topics", "topic"), ("goals", "goal"), ("deliverables", "deliverable")):
                if not clean_items(getattr(week, name)):
                    result.errors.append(f"Week {n} must have at least one {noun}")
        return result

    def build_plan(self) -> list[WeekPlan]:
        reference = {
            "type": "Custom Roadmap",
            "title": self.title.strip(),
            "description": self.description.strip(),
        }
        plans = []
        for week in self.weeks:
            deliverables = clean_items(week.deliverables)
            plans.append(WeekPlan(
                label=week.week_number,
                goal={
                    "roadmap_type": CUSTOM_ROADMAP_TYPE,
                    "week_number": week.week_number,
                    "focus_area": week.focus_area.strip(),
                    "topics": clean_items(week.topics),
                    "goals": clean_items(week.goals),
                    "deliverables": deliverables,
                    "reference": [Reference(reference)],
                },
                deliverables=deliverables,
            ))
        return plans


# ── single goal ───────────────────────────────────────────────────

def validate_single_goal(data: dict) -> ValidationResult:
    result = ValidationResult(preview=data)
    errors = result.errors
    title = (data.get("title") or "").strip()
    description = (data.get("description") or "").strip()

    if not title:
        errors.append("Title is required")
    elif len(title) < 3:
        errors.append("Title must be at least 3 characters")

    if not description:
        errors.append("Description is required")
    elif len(description) < 10:
        errors.append("Description must be at least 10 characters")

    if _missing(data.get("category")):
        errors.append("Category is required")

    priority = data.get("priority")
    if _missing(priority):
        errors.append("Priority is required")
    elif priority not in PRIORITIES:
        errors.append("Invalid priority")
    return result


def build_single_goal_plan(data: dict, now_ms: int) -> WeekPlan:
    title = data["title"].strip()
    tags = []
    for tag in data.get("tags") or []:
        if isinstance(tag, str) and tag.strip() and tag.strip() not in tags:
            tags.append(tag.strip())
    deliverables = [f"Complete: {title}"]
    week_number = f"custom-{now_ms}"
    return WeekPlan(
        label=week_number,
        goal={
            "roadmap_type": CUSTOM_ROADMAP_TYPE,
            "week_number": week_number,
            "focus_area": title,
            "topics": [data["description"].strip()],
            "goals": [title],
            "deliverables": deliverables,
            "reference": [Reference({
                "type": "Custom Goal",
                "title": title,
                "category": data.get("category"),
                "priority": data.get("priority"),
                "deadline": data.get("deadline"),
                "tags": tags,
            })],
        },
        deliverables=deliverables,
    )
