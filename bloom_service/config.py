"""
Configuration for the Bloom Watch service

Settings are read once at process start from environment variables
(a .env file is loaded first when present) and injected into routes
through FastAPI dependencies.
"""
import os
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from fastapi import Request
from pydantic import BaseModel

logger = logging.getLogger("bloom-service")

DEFAULT_FORECAST_API_URL = "https://my-earth-access.onrender.com"
DEFAULT_FRONTEND_URL = "http://localhost:5173"
DEFAULT_MOCK_FILE = Path(__file__).resolve().parent.parent / "data" / "mock_predictions.json"


class Settings(BaseModel):
    """Runtime settings for the service"""
    forecast_api_url: str = DEFAULT_FORECAST_API_URL
    frontend_url: str = DEFAULT_FRONTEND_URL
    mock_predictions_file: Path = DEFAULT_MOCK_FILE
    predict_timeout_seconds: float = 10.0
    mongo_uri: Optional[str] = None
    mongo_db: str = "bloomwatch"
    blooms_collection: str = "blooms"

    @property
    def store_enabled(self) -> bool:
        return bool(self.mongo_uri)


def load_settings(env_file: Optional[str] = None) -> Settings:
    """
    Build Settings from the environment

    Args:
        env_file: Optional path to a .env file; defaults to searching upward
            from the working directory

    Returns:
        A populated Settings instance
    """
    if load_dotenv(env_file):
        logger.info("Loaded environment variables from .env file")

    settings = Settings(
        forecast_api_url=os.environ.get("PYTHON_API_URL", DEFAULT_FORECAST_API_URL).rstrip("/"),
        frontend_url=os.environ.get("FRONTEND_URL", DEFAULT_FRONTEND_URL),
        mock_predictions_file=Path(os.environ.get("MOCK_PREDICTIONS_FILE", str(DEFAULT_MOCK_FILE))),
        predict_timeout_seconds=float(os.environ.get("PREDICT_TIMEOUT_SECONDS", "10")),
        mongo_uri=os.environ.get("MONGO_URI") or None,
        mongo_db=os.environ.get("MONGO_DB", "bloomwatch"),
        blooms_collection=os.environ.get("BLOOMS_COLLECTION", "blooms"),
    )
    logger.info(f"Forecast service: {settings.forecast_api_url}")
    if not settings.store_enabled:
        logger.warning("MONGO_URI not set, observation store disabled")
    return settings


def get_settings(request: Request) -> Settings:
    """FastAPI dependency returning the settings attached at startup"""
    return request.app.state.settings
