import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from hashlink_app.config import settings
from hashlink_app.database.connection import engine, Base
from hashlink_app.exceptions import LinkValidationError
from hashlink_app.logging_config import setup_logging
from hashlink_app.api.v1 import links, redirect

# Import models to ensure they're registered with Base
from hashlink_app.models import Link, User

setup_logging()
logger = logging.getLogger(__name__)

# Create database tables
Base.metadata.create_all(bind=engine)

# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="A URL shortener with hash id and branded short links",
    debug=settings.debug
)


@app.exception_handler(LinkValidationError)
async def link_validation_exception_handler(request: Request, exc: LinkValidationError):
    """Rejected link input is a client error"""
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.get("/")
def read_root():
    """Root endpoint with API information"""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "base_url": settings.public_base_url,
        "docs": "/docs",
    }


@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "environment": settings.environment}


######## Include routers
app.include_router(links.router, prefix="/api/v1")
app.include_router(redirect.router)
