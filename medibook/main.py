"""Main FastAPI application for the MediBook lifecycle engine."""
import logging

from fastapi import FastAPI

from medibook.config import settings
from medibook.db.init import init_db
from medibook.routers import scheduled_tasks

logger = logging.getLogger(__name__)

# Create FastAPI application
app = FastAPI(
    title="MediBook Lifecycle Engine",
    description="Batch jobs for appointment reminders, review prompts and missed-appointment sweeps",
    version="1.0.0",
)


@app.on_event("startup")
async def startup_event():
    """Initialize database tables on startup."""
    try:
        init_db()
    except Exception as e:
        logger.warning(f"Database initialization failed: {e}. Batch runs will report store errors.")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": "1.0.0", "environment": settings.environment}


app.include_router(scheduled_tasks.router, prefix="/api")  # Task trigger: /api/tasks


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "medibook.main:app",
        host="0.0.0.0",
        port=8000,
    )
