"""
Project Planner API
FastAPI Application Entry Point
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from planner import models  # noqa: F401  registers tables on Base.metadata
from planner.config import settings
from planner.database import async_engine, Base
from planner.logging_config import configure_logging
from planner.api import users, projects, areas, tasks
from planner.api import meetings, meeting_notes, templates

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    configure_logging(settings.log_level)
    logger.info("Starting planner API with %s storage", settings.storage_backend)

    if settings.storage_backend == "database":
        async with async_engine.begin() as conn:
            # Create tables if they don't exist (for development)
            # In production, use Alembic migrations
            await conn.run_sync(Base.metadata.create_all)
    yield
    await async_engine.dispose()


app = FastAPI(
    title="Project Planner API",
    description="Projects, areas, tasks and meetings for event and property planning",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def _is_body_error(error: dict) -> bool:
    """Malformed JSON, or a body that is missing or not an object."""
    loc = tuple(error.get("loc", ()))
    return error.get("type") == "json_invalid" or loc == ("body",)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if any(_is_body_error(error) for error in errors):
        message = "Invalid JSON body"
    else:
        detail = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
        message = f"Invalid request: {detail}"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": message},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


# Include routers
app.include_router(users.router, prefix="/api/users", tags=["Users"])
app.include_router(projects.router, prefix="/api/projects", tags=["Projects"])
app.include_router(areas.router, prefix="/api/areas", tags=["Areas"])
app.include_router(tasks.router, prefix="/api/tasks", tags=["Tasks"])
app.include_router(meetings.router, prefix="/api/meetings", tags=["Meetings"])
app.include_router(meeting_notes.router, prefix="/api/meeting-notes", tags=["Meeting Notes"])
app.include_router(templates.router, prefix="/api/templates", tags=["Templates"])


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "healthy", "service": "Project Planner API", "version": "1.0.0"}


@app.get("/health")
async def health_check():
    """Detailed health check."""
    return {
        "status": "healthy",
        "storage": settings.storage_backend,
        "database_configured": settings.storage_backend == "database",
    }
