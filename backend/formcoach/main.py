"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from formcoach.config import get_settings
from formcoach.api import api_router
from formcoach.cv.thresholds import ExerciseType
from formcoach.session_store import SessionStore

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info(f"Starting {settings.app_name}")
    app.state.session_store = SessionStore(settings)
    yield
    logger.info(f"Shutting down {settings.app_name} with {len(app.state.session_store)} open sessions")
    app.state.session_store.clear()


app = FastAPI(
    title=settings.app_name,
    description="""
    Form Coach API

    Real-time exercise coaching from 2D pose keypoints: rep counting, form
    checks and spoken/visual feedback for eight bodyweight exercises.

    ## Key Features

    - **Rep Counting**: A rep counts only after a full cycle from the start position
    - **Form Feedback**: Stable feedback codes with joints to highlight and a focus region
    - **Holds**: Contiguous hold timing for plank and tree pose
    - **Coaching Prompts**: Bilingual (English/Arabic) voice prompts keyed by feedback code

    ## Session Flow

    Create a session, stream frames of detector keypoints to it in order,
    and read the analysis plus routed feedback from each response.
    """,
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix=settings.api_prefix)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.app_name,
        "version": "1.0.0",
        "exercises": len(ExerciseType),
    }


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "app": settings.app_name,
        "docs": "/docs",
        "health": "/health"
    }
