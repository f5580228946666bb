from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from typing import Optional

from auth import get_current_user
from config import TIMEZONE
from data.roadmaps import CATALOG, ROADMAPS
from services import progress_service
from services import roadmap_service
from services.roadmap_service import RoadmapImportError
from services.roadmap_validator import (
    RoadmapBuilder,
    ValidationResult,
    validate_roadmap_data,
    validate_roadmap_json,
)
from store import get_store

router = APIRouter(prefix="/api/v1/roadmaps", tags=["Roadmaps"])


class RoadmapDocument(BaseModel):
    # Either the pasted text or an already-decoded document
    content: Optional[str] = None
    roadmap: Optional[dict] = None


class WeekInput(BaseModel):
    week_number: Optional[str] = None
    focus_area: Optional[str] = ""
    topics: Optional[list[str]] = None
    goals: Optional[list[str]] = None
    deliverables: Optional[list[str]] = None


class CustomRoadmapCreate(BaseModel):
    title: Optional[str] = ""
    description: Optional[str] = ""
    weeks: Optional[list[WeekInput]] = None


def _invalid(result: ValidationResult) -> JSONResponse:
    return JSONResponse(status_code=422, content={"errors": result.errors, "warnings": result.warnings})


def _written(result) -> JSONResponse:
    if isinstance(result, ValidationResult):
        return _invalid(result)
    return JSONResponse(status_code=201, content={"status": "success", "data": result.to_dict()})


def _import_failed(e: RoadmapImportError) -> JSONResponse:
    return JSONResponse(status_code=500, content=e.to_dict())


@router.get("")
async def list_roadmaps(user_id: str = Depends(get_current_user), store=Depends(get_store)):
    try:
        goals = roadmap_service.list_goals(store, user_id)
        tasks = roadmap_service.list_tasks(store, user_id)
        return {
            "roadmaps": [s.to_dict() for s in progress_service.roadmap_summaries(goals, tasks)],
            "stats": progress_service.overview_stats(goals, tasks, tz_name=TIMEZONE),
        }
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/catalog")
async def roadmap_catalog(user_id: str = Depends(get_current_user)):
    return CATALOG


@router.post("/validate")
async def validate_roadmap(body: RoadmapDocument, user_id: str = Depends(get_current_user)):
    if body.content is not None:
        result = validate_roadmap_json(body.content)
    else:
        result = validate_roadmap_data(body.roadmap)
    return result.to_dict()


@router.post("/import", status_code=201)
async def import_roadmap(body: RoadmapDocument, user_id: str = Depends(get_current_user),
                         store=Depends(get_store)):
    try:
        if body.content is not None:
            result = roadmap_service.import_roadmap_json(store, user_id, body.content)
        else:
            result = roadmap_service.import_roadmap_data(store, user_id, body.roadmap)
        return _written(result)
    except RoadmapImportError as e:
        return _import_failed(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/custom", status_code=201)
async def create_custom_roadmap(body: CustomRoadmapCreate, user_id: str = Depends(get_current_user),
                                store=Depends(get_store)):
    try:
        builder = RoadmapBuilder.from_payload(body.dict())
        return _written(roadmap_service.create_custom_roadmap(store, user_id, builder))
    except RoadmapImportError as e:
        return _import_failed(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/predefined/{roadmap_type}", status_code=201)
async def start_predefined_roadmap(roadmap_type: str, user_id: str = Depends(get_current_user),
                                   store=Depends(get_store)):
    if roadmap_type not in ROADMAPS:
        raise HTTPException(status_code=404, detail="Roadmap not found")
    try:
        result = roadmap_service.start_predefined_roadmap(store, user_id, roadmap_type)
        if result is None:
            raise HTTPException(status_code=409, detail="Roadmap already started")
        return _written(result)
    except HTTPException:
        raise
    except RoadmapImportError as e:
        return _import_failed(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/{roadmap_type}")
async def get_roadmap(roadmap_type: str, week: int = 1, goal_id: Optional[str] = None,
                      user_id: str = Depends(get_current_user), store=Depends(get_store)):
    try:
        goals = roadmap_service.list_goals(store, user_id, roadmap_type)
        if not goals:
            raise HTTPException(status_code=404, detail="Roadmap not found")
        tasks = roadmap_service.list_tasks(store, user_id, roadmap_type)

        navigation = progress_service.week_navigation(goals, week)
        if goal_id:
            current = next((g for g in goals if g.get("id") == goal_id), None)
        else:
            current = progress_service.week_at(goals, navigation["current"])

        current_week = None
        if current is not None:
            current_week = {
                **current,
                "progress": progress_service.goal_progress(current, tasks),
                "status": progress_service.goal_status(current, tasks),
                "tasks": [t for t in tasks if t.get("weekly_goal_id") == current.get("id")],
            }

        return {
            "roadmap": progress_service.reconstruct_roadmap(roadmap_type, goals),
            "summary": progress_service.roadmap_summary(roadmap_type, goals, tasks).to_dict(),
            "current_week": current_week,
            "navigation": navigation,
            "stats": progress_service.dashboard_stats(goals, tasks, tz_name=TIMEZONE),
            "chart": progress_service.weekly_chart(goals, tasks),
        }
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/{roadmap_type}")
async def delete_roadmap(roadmap_type: str, user_id: str = Depends(get_current_user),
                         store=Depends(get_store)):
    try:
        removed = roadmap_service.delete_roadmap(store, user_id, roadmap_type)
        if removed == 0:
            raise HTTPException(status_code=404, detail="Roadmap not found")
        return {"status": "success", "weeks_deleted": removed}
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
