#!/usr/bin/env python3
"""
Client for the external NDVI forecasting service

This module handles the single outbound call made for a prediction
request. Any failure is reported as ExternalUnavailable so the caller
can fall back to mock data.
"""
import logging
import requests

from ..errors import ExternalUnavailable

logger = logging.getLogger("bloom-service.forecast")


def call_forecast_api(base_url, city, date, timeout=10.0):
    """
    Ask the forecasting service for an NDVI prediction

    Args:
        base_url: Base URL of the forecasting service
        city: Location name
        date: Target date in YYYY-MM-DD format
        timeout: Seconds to wait before giving up

    Returns:
        The decoded JSON body, unmodified

    Raises:
        ExternalUnavailable: on network error, timeout, non-2xx status
            or a body that is not JSON
    """
    url = f"{base_url}/predict"
    logger.info(f"Calling forecast API: {url}")

    try:
        response = requests.post(url, json={"city": city, "date": date}, timeout=timeout)
    except requests.exceptions.Timeout as e:
        raise ExternalUnavailable(f"Forecast API timed out after {timeout}s: {e}") from e
    except requests.exceptions.RequestException as e:
        raise ExternalUnavailable(f"Forecast API unreachable: {e}") from e

    if not response.ok:
        raise ExternalUnavailable(
            f"Forecast API returned status {response.status_code}: {response.text[:200]}",
            status_code=response.status_code,
        )

    try:
        return response.json()
    except ValueError as e:
        raise ExternalUnavailable(f"Forecast API returned a non-JSON body: {e}",
                                  status_code=response.status_code) from e
