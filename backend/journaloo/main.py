"""
FastAPI entrypoint for the Journaloo backend application.
"""
import logging
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError, TimeoutError as PoolTimeoutError
from journaloo.core.config import settings
from journaloo.core.exceptions import (
    JournalooError, NotFoundError, DuplicateError, JourneyClosedError
)
from journaloo.api.router import api_router

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Journaloo API",
    description="Backend API for personal travel journaling",
    version="1.0.0"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(JournalooError)
async def journaloo_error_handler(request: Request, exc: JournalooError):
    """Map domain errors to HTTP statuses."""
    if isinstance(exc, NotFoundError):
        status_code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, (DuplicateError, JourneyClosedError)):
        status_code = status.HTTP_400_BAD_REQUEST
    else:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    return JSONResponse(status_code=status_code, content={"detail": exc.message})


@app.exception_handler(PoolTimeoutError)
async def pool_timeout_handler(request: Request, exc: PoolTimeoutError):
    """No database connection became available in time."""
    logger.error(f"{request.method} {request.url.path}: connection pool exhausted")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Service unavailable"}
    )


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    """Any other database failure."""
    logger.error(f"{request.method} {request.url.path}: database error -- {exc}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"}
    )


# Include API routes
app.include_router(api_router)


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"message": "Journaloo API is running"}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}
