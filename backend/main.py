import logging
import os
import sys

# Top-level imports (config, store, ...) resolve from this directory
current_dir = os.path.dirname(os.path.abspath(__file__))
if current_dir not in sys.path:
    sys.path.append(current_dir)

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import CORS_ORIGINS, PERSISTENCE_BACKEND, require_supabase_config
from database import init_db
from routes.auth_routes import router as auth_router
from routes.dashboard_routes import router as dashboard_router
from routes.goal_routes import router as goal_router
from routes.roadmap_routes import router as roadmap_router
from routes.task_routes import router as task_router

logger = logging.getLogger(__name__)

# Missing Supabase settings are fatal when the hosted backend is selected
require_supabase_config()

# The local SQL store needs its tables; Supabase manages its own schema
if PERSISTENCE_BACKEND == "sql":
    init_db()

app = FastAPI(title="StudyPath Roadmap Tracker")

@app.get("/api/v1/health-check")
async def health():
    return {"status": "ok", "message": "Backend is alive!", "backend": PERSISTENCE_BACKEND}

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(roadmap_router)
app.include_router(goal_router)
app.include_router(task_router)
app.include_router(dashboard_router)

logger.info(f"API ready with {PERSISTENCE_BACKEND} persistence")

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
