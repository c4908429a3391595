"""
DeckShare Backend - Unified Application Entry Point
Mounts the presentation, auth, client and upload routers under a single FastAPI application
"""

import asyncio
import contextlib
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from database import AsyncSessionLocal, init_database
from services.auth import router as auth_router
from services.clients.app import router as clients_router
from services.image_store.app import router as upload_router
from services.image_store.store import ImageStore
from services.presentations.app import router as presentations_router
from services.presentations.tasks import run_purge_loop
from shared.config import config
from shared.errors import ServiceError
from shared.file_utils import ensure_directory
from shared.logging_utils import setup_logging
from shared.response_models import ErrorResponse, HealthResponse

logger = setup_logging("deckshare-backend")

API_PREFIX = "/api"
VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_database()
    ensure_directory(app.state.image_store.root)

    purge_task = None
    interval = float(config.get("expired_purge_interval_seconds", 3600) or 0)
    if interval > 0:
        purge_task = asyncio.create_task(run_purge_loop(AsyncSessionLocal, app.state.image_store, interval))

    logger.info("DeckShare backend started")
    yield

    if purge_task is not None:
        purge_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await purge_task
    logger.info("DeckShare backend stopped")


app = FastAPI(
    title="DeckShare Backend API",
    description="""
    Presentation sharing API: upload slide decks, share them through short links
    with optional password and expiry, and track views.
    """,
    version=VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Authentication", "description": "User registration, login and profile"},
        {"name": "Presentations", "description": "Presentation sharing - mounted at /api/presentations"},
        {"name": "Clients", "description": "Client directory - mounted at /api/clients"},
        {"name": "Uploads", "description": "Direct image uploads - mounted at /api/upload"},
        {"name": "Health", "description": "Service health and status endpoints"},
    ],
)

app.state.image_store = ImageStore.from_config()

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.get("allowed_origins", ["*"]),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=ErrorResponse.from_error(exc).model_dump())


app.include_router(auth_router, prefix=API_PREFIX)
app.include_router(presentations_router, prefix=API_PREFIX)
app.include_router(clients_router, prefix=API_PREFIX)
app.include_router(upload_router, prefix=API_PREFIX)

app.mount(
    app.state.image_store.settings.url_prefix,
    StaticFiles(directory=str(app.state.image_store.root), check_dir=False),
    name="uploads",
)


@app.get("/", tags=["Health"])
async def root():
    """Root endpoint with service information and API navigation"""
    return {
        "service": "DeckShare Backend API",
        "version": VERSION,
        "services": {
            "auth": {"base_url": f"{API_PREFIX}/auth", "token_endpoint": f"{API_PREFIX}/auth/token"},
            "presentations": {"base_url": f"{API_PREFIX}/presentations"},
            "clients": {"base_url": f"{API_PREFIX}/clients"},
            "uploads": {"base_url": f"{API_PREFIX}/upload", "files": app.state.image_store.settings.url_prefix},
        },
        "documentation": {
            "swagger_ui": "/docs",
            "redoc": "/redoc",
            "openapi_json": "/openapi.json",
        },
    }


@app.get(f"{API_PREFIX}/health", response_model=HealthResponse, tags=["Health"])
async def health_check() -> HealthResponse:
    """Health check endpoint"""
    return HealthResponse(status="healthy", message="DeckShare backend is running", version=VERSION)


if __name__ == "__main__":
    import uvicorn

    logger.info("Starting DeckShare Backend on http://0.0.0.0:8000")
    uvicorn.run("app:app", host="0.0.0.0", port=8000, reload=True, log_level="info")
