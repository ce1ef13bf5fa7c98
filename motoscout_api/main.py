"""
MotoScout API - main application.
"""
import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from motoscout.core import SearchSession
from motoscout.credentials import CredentialStore

from .config import config
from .routes import credentials_router, search_router

# Configure logging
logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout),
        logging.FileHandler(config.LOG_FILE_PATH)
    ]
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management."""
    logger.info("Starting MotoScout API...")
    app.state.session = SearchSession(CredentialStore(config.CREDENTIALS_PATH))
    logger.info(f"Credentials path: {config.CREDENTIALS_PATH}")
    try:
        yield
    finally:
        logger.info("Shutting down MotoScout API...")
        await app.state.session.aclose()


# Create FastAPI application
app = FastAPI(
    title=config.API_TITLE,
    version=config.API_VERSION,
    description=config.API_DESCRIPTION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=config.CORS_ALLOW_CREDENTIALS,
    allow_methods=config.CORS_ALLOW_METHODS,
    allow_headers=config.CORS_ALLOW_HEADERS,
)


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request, exc: Exception):
    """Global exception handler for unhandled errors."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"}
    )


# Health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    session = getattr(app.state, "session", None)
    return {
        "status": "healthy",
        "version": config.API_VERSION,
        "api_key_configured": bool(session and session.has_api_key()),
    }


# Include routers
app.include_router(search_router)
app.include_router(credentials_router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "motoscout_api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level=config.LOG_LEVEL.lower()
    )
