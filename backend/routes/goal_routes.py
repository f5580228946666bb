from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from typing import Optional

from auth import get_current_user
from services import progress_service
from services import roadmap_service
from services.roadmap_service import RoadmapImportError
from services.roadmap_validator import ValidationResult
from store import get_store

router = APIRouter(prefix="/api/v1/goals", tags=["Goals"])

class GoalCreate(BaseModel):
    title: Optional[str] = ""
    description: Optional[str] = ""
    category: Optional[str] = None
    priority: Optional[str] = "medium"
    deadline: Optional[str] = None
    tags: Optional[list[str]] = None

class ReferenceUpdate(BaseModel):
    reference: list

@router.get("")
async def list_goals(q: str = "", category: str = "all", status: str = "all",
                     sort_by: str = "created_at",
                     user_id: str = Depends(get_current_user), store=Depends(get_store)):
    try:
        goals = roadmap_service.list_goals(store, user_id)
        tasks = roadmap_service.list_tasks(store, user_id)
        filtered = progress_service.filter_goals(goals, tasks, query=q, category=category,
                                                 status=status, sort_by=sort_by)
        return [
            {
                **g,
                "progress": progress_service.goal_progress(g, tasks),
                "status": progress_service.goal_status(g, tasks),
                "tasks": [t for t in tasks if t.get("weekly_goal_id") == g.get("id")],
            }
            for g in filtered
        ]
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

@router.post("", status_code=201)
async def create_goal(goal_data: GoalCreate, user_id: str = Depends(get_current_user),
                      store=Depends(get_store)):
    try:
        result = roadmap_service.create_single_goal(store, user_id, goal_data.dict())
        if isinstance(result, ValidationResult):
            return JSONResponse(status_code=422, content={"errors": result.errors, "warnings": result.warnings})
        return {"status": "success", "data": result.to_dict()}
    except RoadmapImportError as e:
        return JSONResponse(status_code=500, content=e.to_dict())
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

@router.put("/{goal_id}/reference")
async def update_goal_reference(goal_id: str, body: ReferenceUpdate,
                                user_id: str = Depends(get_current_user), store=Depends(get_store)):
    try:
        goal = roadmap_service.update_goal_reference(store, user_id, goal_id, body.reference)
        if goal is None:
            raise HTTPException(status_code=404, detail="Goal not found")
        return {"status": "success", "data": goal}
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

@router.delete("/{goal_id}")
async def delete_goal(goal_id: str, user_id: str = Depends(get_current_user), store=Depends(get_store)):
    try:
        if not roadmap_service.delete_goal(store, user_id, goal_id):
            raise HTTPException(status_code=404, detail="Goal not found")
        return {"status": "success"}
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
