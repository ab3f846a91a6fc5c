"""
Prediction data models for the Bloom Watch service
"""
from pydantic import BaseModel
from typing import Optional


class PredictionRequest(BaseModel):
    """Request body for POST /api/predict"""
    city: Optional[str] = None
    date: Optional[str] = None


class PredictionResult(BaseModel):
    """NDVI prediction for a city and date"""
    city: Optional[str] = None
    latitude: float = 0
    longitude: float = 0
    date: Optional[str] = None
    predicted_ndvi: float
    interpretation: str
    anomaly: bool = False


class ForecastPoint(BaseModel):
    """A single point of a precomputed forecast curve in the mock file"""
    ds: str
    yhat: float
