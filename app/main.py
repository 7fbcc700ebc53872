"""
Main FastAPI application for the Folio backend.
Handles CORS, request logging middleware, lifespan events, error mapping and router registration.
"""
import logging
import os
import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import IntegrityError

from app.config import settings
from app.database import close_db, init_db
from app.dependencies.auth import require_admin
from app.exceptions import ContentError
from app.models.database_models import utcnow
from app.routers import (
    blog_categories,
    blog_posts,
    comments,
    experiences,
    health,
    messages,
    profile,
    project_types,
    projects,
    public,
    services,
    skills,
)

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Startup / shutdown helpers
# ---------------------------------------------------------------------------

async def _check_database() -> bool:
    """Initialise DB tables and verify the connection.  Returns True on success."""
    try:
        await init_db()
        logger.info("✓ Database connection OK")
        return True
    except Exception as exc:
        logger.error("✗ Database connection failed: %s", exc)
        raise


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown event handler."""
    logger.info("=" * 60)
    logger.info("  Starting Folio backend …")
    logger.info("=" * 60)

    # 1 — Database (required; raises on failure)
    await _check_database()

    # 2 — Upload directory
    os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
    logger.info("✓ Upload directory: %s", os.path.abspath(settings.UPLOAD_DIR))

    if not settings.ADMIN_API_KEY:
        logger.warning("⚠ ADMIN_API_KEY is empty — admin endpoints are unprotected")

    logger.info("=" * 60)
    logger.info("  Folio backend ready on http://%s:%d", settings.HOST, settings.PORT)
    logger.info("  Swagger UI : http://%s:%d/docs", settings.HOST, settings.PORT)
    logger.info("  Health     : http://%s:%d/api/health", settings.HOST, settings.PORT)
    logger.info("=" * 60)

    yield  # ← server is running

    logger.info("Shutting down Folio backend …")
    await close_db()
    logger.info("✓ Shutdown complete.")


# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Folio API",
    description=(
        "**Folio** — portfolio, blog and services content API.\n\n"
        "Admin endpoints live under `/api/admin/*` and require the "
        "`X-Admin-Key` header; public read endpoints live under `/api`.\n\n"
        "Key endpoints:\n"
        "- `POST /api/admin/projects` — create a project with features, metrics, videos\n"
        "- `POST /api/admin/projects/reorder` — reorder (`order` or `items` payload)\n"
        "- `POST /api/admin/blog-posts/{id}/publish` — publish a post\n"
        "- `GET  /api/blog` — published posts\n"
        "- `GET  /api/about` — profile, skills and experience\n"
    ),
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)


# ---------------------------------------------------------------------------
# CORS
# ---------------------------------------------------------------------------

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_allowed_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Request / response logging middleware
# ---------------------------------------------------------------------------

@app.middleware("http")
async def log_requests(request: Request, call_next):
    """
    Log every request with method, path, status code, and elapsed time.
    Attaches an ``X-Process-Time`` header (milliseconds) to every response.
    """
    t0 = time.monotonic()
    response = await call_next(request)
    elapsed_ms = round((time.monotonic() - t0) * 1000, 2)

    # Skip noisy health-check polling from the frontend
    if request.url.path not in ("/api/health", "/"):
        logger.info(
            "%s %s → %d  (%.2f ms)",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )

    response.headers["X-Process-Time"] = f"{elapsed_ms}ms"
    return response


# ---------------------------------------------------------------------------
# Exception handlers
# ---------------------------------------------------------------------------

def _error_body(request: Request, payload: dict) -> dict:
    return {**payload, "path": str(request.url.path), "timestamp": utcnow().isoformat()}


@app.exception_handler(ContentError)
async def content_error_handler(request: Request, exc: ContentError):
    """Domain errors carry their own status code and context fields."""
    log = logger.error if exc.status_code >= 500 else logger.info
    log("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=_error_body(request, exc.to_dict()))


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError):
    """A constraint the handlers did not anticipate; reported as a conflict."""
    logger.warning("Integrity error on %s %s: %s", request.method, request.url.path, exc.orig)
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content=_error_body(
            request,
            {"detail": "The request conflicts with existing data.", "error": "IntegrityError"},
        ),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Return a structured JSON error for any unhandled exception."""
    logger.error(
        "Unhandled exception on %s %s: %s",
        request.method,
        request.url.path,
        exc,
        exc_info=True,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(request, {"detail": "Internal server error", "error": str(exc)}),
    )


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------

admin = [Depends(require_admin)]

app.include_router(health.router,           prefix="/api/health",                 tags=["Health"])
app.include_router(public.router,           prefix="/api",                        tags=["Public"])

app.include_router(projects.router,         prefix="/api/admin/projects",         tags=["Projects"],         dependencies=admin)
app.include_router(project_types.router,    prefix="/api/admin/project-types",    tags=["Project types"],    dependencies=admin)
app.include_router(blog_posts.router,       prefix="/api/admin/blog-posts",       tags=["Blog posts"],       dependencies=admin)
app.include_router(blog_categories.router,  prefix="/api/admin/blog-categories",  tags=["Blog categories"],  dependencies=admin)
app.include_router(blog_categories.tags_router, prefix="/api/admin/blog-tags",    tags=["Blog tags"],        dependencies=admin)
app.include_router(comments.router,         prefix="/api/admin/comments",         tags=["Comments"],         dependencies=admin)
app.include_router(services.router,         prefix="/api/admin/services",         tags=["Services"],         dependencies=admin)
app.include_router(skills.router,           prefix="/api/admin/skill-categories", tags=["Skills"],           dependencies=admin)
app.include_router(skills.skills_router,    prefix="/api/admin/skills",           tags=["Skills"],           dependencies=admin)
app.include_router(experiences.router,      prefix="/api/admin/experiences",      tags=["Experiences"],      dependencies=admin)
app.include_router(profile.router,          prefix="/api/admin/profile",          tags=["Profile"],          dependencies=admin)
app.include_router(messages.router,         prefix="/api/admin/messages",         tags=["Messages"],         dependencies=admin)

# Uploaded files
os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
app.mount(settings.STORAGE_URL_PREFIX, StaticFiles(directory=settings.UPLOAD_DIR), name="storage")


# ---------------------------------------------------------------------------
# Root
# ---------------------------------------------------------------------------

@app.get("/", tags=["Root"], include_in_schema=False)
async def root():
    """API root — returns basic service info."""
    return {
        "name": "Folio API",
        "version": "1.0.0",
        "description": "Portfolio, blog and services content backend",
        "docs": "/docs",
        "health": "/api/health",
        "endpoints": {
            "blog": "/api/blog",
            "projects": "/api/projects",
            "services": "/api/services",
            "about": "/api/about",
            "contact": "/api/contact",
            "admin": "/api/admin",
        },
    }


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=True,
        log_level="info",
    )
