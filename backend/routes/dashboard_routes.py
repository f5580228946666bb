from fastapi import APIRouter, Depends, HTTPException
from typing import Optional

from auth import get_current_user
from config import TIMEZONE
from services import progress_service
from services import roadmap_service
from store import get_store

router = APIRouter(prefix="/api/v1/dashboard", tags=["Dashboard"])

def _load(store, user_id: str, roadmap_type: Optional[str]):
    goals = roadmap_service.list_goals(store, user_id, roadmap_type)
    tasks = roadmap_service.list_tasks(store, user_id, roadmap_type)
    return goals, tasks

@router.get("/stats")
async def dashboard_stats(roadmap_type: Optional[str] = None, user_id: str = Depends(get_current_user),
                          store=Depends(get_store)):
    try:
        goals, tasks = _load(store, user_id, roadmap_type)
        return progress_service.dashboard_stats(goals, tasks, tz_name=TIMEZONE)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

@router.get("/charts")
async def dashboard_charts(roadmap_type: Optional[str] = None, user_id: str = Depends(get_current_user),
                           store=Depends(get_store)):
    try:
        goals, tasks = _load(store, user_id, roadmap_type)
        return progress_service.weekly_chart(goals, tasks)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

@router.get("/streak")
async def completion_streak(user_id: str = Depends(get_current_user), store=Depends(get_store)):
    try:
        tasks = roadmap_service.list_tasks(store, user_id)
        return {"streak": progress_service.completion_streak(tasks, tz_name=TIMEZONE)}
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
