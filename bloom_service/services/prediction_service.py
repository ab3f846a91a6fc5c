#!/usr/bin/env python3
"""
Prediction request handling

Validates a request, forwards it to the forecasting service and, when
that fails, resolves a best-effort answer from the mock predictions.
"""
import logging

from ..errors import ExternalUnavailable, InvalidRequest, PersistenceFailure
from .fallback import resolve_fallback
from .forecast_client import call_forecast_api
from .observations import archive_prediction

logger = logging.getLogger("bloom-service")

MISSING_FIELDS_MESSAGE = "city and date are required in request body"


def validate_request(city, date):
    """Raise InvalidRequest unless both fields are non-empty strings"""
    if not city or not date or not isinstance(city, str) or not isinstance(date, str):
        raise InvalidRequest(MISSING_FIELDS_MESSAGE)


def generate_ndvi_prediction(settings, city, date):
    """
    Produce an NDVI prediction for a city and date

    Args:
        settings: Service settings
        city: Location name
        date: Target date in YYYY-MM-DD format

    Returns:
        The forecasting service's body unchanged on success, otherwise the
        fallback result

    Raises:
        InvalidRequest: if city or date is missing
    """
    validate_request(city, date)

    try:
        result = call_forecast_api(
            settings.forecast_api_url,
            city,
            date,
            timeout=settings.predict_timeout_seconds,
        )
    except ExternalUnavailable as e:
        logger.warning(
            f"Forecast service not reachable or returned error (status {e.status_code}). "
            f"Falling back to mock. Err: {e}"
        )
        return resolve_fallback(city, date, settings.mock_predictions_file)

    try:
        archive_prediction(settings, result, city, date)
    except PersistenceFailure as e:
        logger.exception(f"Prediction returned but not archived: {e}")
    except Exception as e:
        logger.exception(f"Unexpected error archiving prediction for {city} on {date}: {e}")

    return result
