"""FastAPI Backend Main Application

This module initializes the FastAPI application with the generation router,
middleware, the client page and configuration for Crime Story Studio.
"""
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles
from contextlib import asynccontextmanager
import time

from backend.config import settings
from backend.utils.logger import setup_logging, get_logger
from backend.middleware.logging import LoggingMiddleware
from backend.middleware.error_handler import setup_exception_handlers
from backend.api.router import api_router
from config.settings import settings as llm_settings

setup_logging()
logger = get_logger(__name__)

static_dir = Path(settings.static_dir)


def _log_banner(host: str, port: int, log_level: str):
    logger.info("=" * 60)
    logger.info(f"Starting {settings.api_title} v{settings.api_version}")
    logger.info(f"Server: {host}:{port}")
    logger.info(f"Log Level: {log_level}")
    logger.info(f"LLM: {llm_settings.llm_model} @ {llm_settings.llm_api_url}")
    logger.info("=" * 60)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events"""
    _log_banner(settings.host, settings.port, settings.log_level)

    yield

    logger.info("Shutting down API server...")


app = FastAPI(
    title=settings.api_title,
    version=settings.api_version,
    description=settings.api_description,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(LoggingMiddleware)

setup_exception_handlers(app)

app.include_router(api_router)

if static_dir.exists():
    app.mount("/static", StaticFiles(directory=str(static_dir)), name="static")


@app.get("/", include_in_schema=False)
async def index():
    """Serve the client page"""
    return FileResponse(str(static_dir / "index.html"))


@app.get("/api", tags=["Root"])
async def api_info():
    """API information"""
    return {
        "name": settings.api_title,
        "version": settings.api_version,
        "status": "operational",
        "docs": "/docs",
        "redoc": "/redoc",
        "endpoints": {
            "generate": "/api/generate",
            "health": "/health"
        }
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "timestamp": time.time(),
        "service": settings.api_title,
        "version": settings.api_version
    }


if __name__ == "__main__":
    import argparse
    import uvicorn
    import os

    parser = argparse.ArgumentParser(description="Run Crime Story Studio API server")
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable DEBUG logging level"
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set logging level (overrides --debug)"
    )
    parser.add_argument(
        "--host",
        default=settings.host,
        help=f"Host to bind to (default: {settings.host})"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=settings.port,
        help=f"Port to bind to (default: {settings.port})"
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        default=False,
        help="Enable auto-reload on code changes"
    )

    args = parser.parse_args()

    if args.log_level:
        log_level = args.log_level
    elif args.debug:
        log_level = "DEBUG"
    else:
        log_level = settings.log_level

    settings.log_level = log_level

    # Child processes started by the reloader read LOG_LEVEL from the environment
    os.environ['LOG_LEVEL'] = log_level

    setup_logging(log_level=log_level)

    uvicorn.run(
        "backend.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=log_level.lower()
    )
