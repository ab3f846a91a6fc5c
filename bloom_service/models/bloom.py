"""
Bloom observation models
"""
from pydantic import BaseModel
from typing import Optional


class BloomRecord(BaseModel):
    """A single NDVI observation shown as a marker on the map"""
    county: str
    date: str
    ndvi: float
    lat: Optional[float] = None
    lon: Optional[float] = None
    rainfall: Optional[float] = None
    anomaly: Optional[str] = None
    source: Optional[str] = None
