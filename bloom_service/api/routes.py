"""
API routes for the Bloom Watch service
"""
from fastapi import APIRouter, HTTPException, Depends, Query
from fastapi.responses import JSONResponse
from typing import List, Optional
import logging

from ..config import Settings, get_settings
from ..errors import InvalidRequest
from ..models.bloom import BloomRecord
from ..models.prediction import PredictionRequest, PredictionResult
from ..services.observations import list_blooms
from ..services.prediction_service import generate_ndvi_prediction

# Configure logging
logger = logging.getLogger("bloom-service.api")

predict_router = APIRouter(prefix="/predict", tags=["predictions"])
blooms_router = APIRouter(prefix="/blooms", tags=["blooms"])
health_router = APIRouter(tags=["health"])


@predict_router.post(
    "",
    responses={
        200: {"model": PredictionResult, "description": "Forecast or mock prediction"},
        400: {"description": "city or date missing"},
    },
)
def request_prediction(
    request: PredictionRequest,
    settings: Settings = Depends(get_settings),
):
    """
    Get an NDVI prediction for a city and date

    The request is forwarded to the forecasting service; its answer is
    returned untouched. If the service is unavailable a mock prediction
    is returned instead.
    """
    logger.info(f"Received prediction request: {request}")

    try:
        result = generate_ndvi_prediction(settings, request.city, request.date)
    except InvalidRequest as e:
        return JSONResponse(status_code=400, content={"error": str(e)})

    return JSONResponse(content=result)


@blooms_router.get("", response_model=List[BloomRecord], response_model_exclude_none=True)
def get_blooms(
    county: Optional[str] = None,
    year: Optional[int] = Query(default=None, ge=1900, le=2100),
    settings: Settings = Depends(get_settings),
):
    """Get bloom observations, optionally filtered by county and year"""
    try:
        records = list_blooms(settings, county=county, year=year)
    except Exception as e:
        logger.exception(f"Error retrieving bloom records: {e}")
        raise HTTPException(
            status_code=500,
            detail=f"Failed to retrieve bloom records: {str(e)}"
        )

    if records is None:
        raise HTTPException(status_code=503, detail="Observation store is not configured")
    return records


@health_router.get("/health")
def health():
    """Liveness probe"""
    return {"ok": True}
