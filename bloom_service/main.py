"""
Main entry point for the Bloom Watch service
"""
import os
import sys
import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger("bloom-service")

from . import __version__
from .api.routes import predict_router, blooms_router, health_router
from .config import Settings, load_settings
from .database.connection import close_connection
from .services.prediction_service import MISSING_FIELDS_MESSAGE

API_PREFIX = "/api"


def create_app(settings: Settings = None) -> FastAPI:
    """
    Build the FastAPI application

    Args:
        settings: Settings to inject; loaded from the environment if omitted
    """
    if settings is None:
        settings = load_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Lifecycle manager for the FastAPI application
        Handles startup and shutdown tasks
        """
        logger.info("Bloom Watch service starting")
        yield

        # Close database connection
        close_connection()
        logger.info("Database connection closed")

    app = FastAPI(
        title="Bloom Watch Service",
        description="NDVI observations and predictions for Kenyan counties",
        version=__version__,
        lifespan=lifespan
    )
    app.state.settings = settings

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        # Malformed prediction bodies get the same answer as missing fields
        if request.url.path.rstrip("/") == f"{API_PREFIX}/predict":
            return JSONResponse(status_code=400, content={"error": MISSING_FIELDS_MESSAGE})
        return await request_validation_exception_handler(request, exc)

    # Include API routers
    app.include_router(blooms_router, prefix=API_PREFIX)
    app.include_router(predict_router, prefix=API_PREFIX)
    app.include_router(health_router, prefix=API_PREFIX)

    @app.get("/")
    async def root():
        """Root endpoint that returns service information"""
        return {
            "service": "Bloom Watch Service",
            "version": __version__,
            "status": "running",
            "observation_store": settings.store_enabled,
        }

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    # Start the server if running directly
    port = int(os.environ.get("PORT", 5000))
    uvicorn.run("bloom_service.main:app", host="0.0.0.0", port=port, reload=True)
