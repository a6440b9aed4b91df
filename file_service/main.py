"""
File Service - Main Application
FastAPI app issuing S3 multipart upload sessions and listing finished uploads.
"""

import logging
from contextlib import asynccontextmanager

from botocore.exceptions import BotoCoreError, ClientError
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from upload_schemas.common import ErrorResponse
from upload_schemas.files import HealthCheckResponse
from file_service.core.config import settings
from file_service.core.database import SessionLocal, init_db
from file_service.s3.client import s3_client
from file_service.api import files

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Runs on startup and shutdown.
    """
    # Startup
    logger.info("Starting File Service...")

    init_db()
    logger.info("Metadata tables ready")

    if settings.CONFIGURE_BUCKET_CORS:
        try:
            s3_client.configure_cors()
        except ClientError as e:
            # Uploads from non-browser clients still work without bucket CORS
            logger.error(f"Failed to configure bucket CORS: {e}")

    logger.info("File Service started successfully")

    yield

    # Shutdown
    logger.info("Shutting down File Service...")


# Create FastAPI app
app = FastAPI(
    title="File Service",
    description="Chunked multipart uploads to S3 with pre-signed part URLs",
    version="1.0.0",
    lifespan=lifespan
)


# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["ETag"],
)


# Include API routers
app.include_router(files.router, prefix="/api")


@app.get("/", tags=["root"])
async def root():
    """Root endpoint with service information."""
    return {
        "service": "File Service",
        "version": "1.0.0",
        "status": "running",
        "endpoints": {
            "create": "POST /api/files/create-multipart",
            "complete": "POST /api/files/complete-multipart",
            "list": "GET /api/files",
            "health": "/health"
        },
        "documentation": {
            "swagger": "/docs",
            "redoc": "/redoc"
        }
    }


@app.get("/health", tags=["health"], response_model=HealthCheckResponse)
async def health_check():
    """Health check endpoint."""
    s3_status = "ok"
    db_status = "ok"

    try:
        s3_client.check_connection()
    except (BotoCoreError, ClientError) as e:
        logger.error(f"Health check S3 failure: {e}")
        s3_status = "failed"

    try:
        with SessionLocal() as db:
            db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Health check database failure: {e}")
        db_status = "failed"

    if s3_status == "ok" and db_status == "ok":
        return HealthCheckResponse(status="healthy", s3_connection=s3_status, database=db_status)

    return JSONResponse(
        status_code=503,
        content=HealthCheckResponse(
            status="unhealthy",
            s3_connection=s3_status,
            database=db_status
        ).model_dump()
    )


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler for unhandled errors."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(detail="Internal server error").model_dump()
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "file_service.main:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=True,
        log_level=settings.LOG_LEVEL.lower()
    )
