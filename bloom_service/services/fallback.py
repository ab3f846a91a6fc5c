#!/usr/bin/env python3
"""
Fallback resolver for prediction requests

Used when the forecasting service cannot answer. Produces a best-effort
prediction from the mock predictions file and never raises.
"""
import logging

from pydantic import ValidationError

from ..errors import FixtureUnreadable
from ..models.prediction import ForecastPoint
from .fixtures import is_blank, load_fixtures, lookup_entry

logger = logging.getLogger("bloom-service.fallback")

MOCK_INTERPRETATION = "Mock"
SYNTHETIC_INTERPRETATION = "Fallback mock: moderate vegetation"
SYNTHETIC_NDVI = 0.5


def synthetic_prediction(city, date):
    """The guaranteed last-resort response"""
    return {
        "city": city,
        "latitude": 0,
        "longitude": 0,
        "date": date,
        "predicted_ndvi": SYNTHETIC_NDVI,
        "interpretation": SYNTHETIC_INTERPRETATION,
        "anomaly": False,
    }


def point_to_prediction(city, point):
    """Map a forecast curve point to a prediction result"""
    return {
        "city": city,
        "latitude": 0,
        "longitude": 0,
        "date": point.ds,
        "predicted_ndvi": point.yhat,
        "interpretation": MOCK_INTERPRETATION,
        "anomaly": False,
    }


def pick_point(points, date):
    """
    Choose the forecast point to report

    Returns the point whose date equals the requested date, otherwise the
    first point of the curve. No nearest-date search is done.
    """
    for point in points:
        if isinstance(point, dict) and point.get("ds") == date:
            return point
    return points[0]


def resolve_fallback(city, date, fixture_path):
    """
    Build a prediction without the forecasting service

    Args:
        city: Requested location
        date: Requested date (YYYY-MM-DD)
        fixture_path: Path to the mock predictions file

    Returns:
        Dictionary shaped like a prediction result
    """
    try:
        fixtures = load_fixtures(fixture_path)
    except FixtureUnreadable as e:
        logger.error(f"Mock predictions unavailable: {e}")
        return synthetic_prediction(city, date)

    entry = lookup_entry(fixtures, city)
    if is_blank(entry):
        logger.info(f"No mock entry for {city} and no default entry")
        return synthetic_prediction(city, date)

    if isinstance(entry, list):
        if not entry:
            logger.warning(f"Mock forecast curve for {city} is empty")
            return synthetic_prediction(city, date)
        try:
            point = ForecastPoint.model_validate(pick_point(entry, date))
        except ValidationError as e:
            logger.error(f"Malformed mock forecast point for {city}: {e}")
            return synthetic_prediction(city, date)
        return point_to_prediction(city, point)

    if isinstance(entry, dict):
        return entry

    logger.warning(f"Unsupported mock entry type for {city}: {type(entry).__name__}")
    return synthetic_prediction(city, date)
