"""
FastAPI entrypoint for the Diary API.
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.core.config import settings
from app.core.logging_config import setup_logging
from app.api.error_handlers import register_error_handlers
from app.api.router import api_router
from app.db.session import init_db
from app.services.image_service import ensure_upload_dir

setup_logging(settings.LOG_LEVEL)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables and the upload directory before serving requests."""
    init_db()
    ensure_upload_dir(settings.UPLOAD_DIR)
    yield


app = FastAPI(
    title=settings.APP_NAME,
    description="Backend API for a personal diary with image attachments",
    version="1.0.0",
    debug=settings.DEBUG,
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Include API routes
app.include_router(api_router, prefix="/api")


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"message": "Diary API is running"}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}
