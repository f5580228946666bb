from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from typing import Optional

from auth import get_current_user
from services import roadmap_service
from store import get_store

router = APIRouter(prefix="/api/v1/tasks", tags=["Tasks"])

class TaskToggle(BaseModel):
    completed: bool

@router.get("")
async def list_tasks(roadmap_type: Optional[str] = None, user_id: str = Depends(get_current_user),
                     store=Depends(get_store)):
    try:
        return roadmap_service.list_tasks(store, user_id, roadmap_type)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

@router.patch("/{task_id}")
async def toggle_task(task_id: str, body: TaskToggle, user_id: str = Depends(get_current_user),
                      store=Depends(get_store)):
    try:
        task = roadmap_service.toggle_task(store, user_id, task_id, body.completed)
        if task is None:
            raise HTTPException(status_code=404, detail="Task not found")
        return {"status": "success", "data": task}
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
