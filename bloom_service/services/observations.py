#!/usr/bin/env python3
"""
Observation store access

Reads bloom observations for the map and archives successful
predictions as denormalized bloom records.
"""
import logging
from datetime import datetime, timezone

from pymongo import ASCENDING, ReplaceOne
from pymongo.errors import InvalidOperation

from ..database.connection import get_database, with_db_connection
from ..errors import PersistenceFailure

logger = logging.getLogger("bloom-service.observations")

LOW_VEGETATION_THRESHOLD = 0.4


def anomaly_label(predicted_ndvi, flagged):
    """Derive the label stored in a bloom record's anomaly field"""
    if flagged:
        return "Anomaly"
    if predicted_ndvi is not None and predicted_ndvi < LOW_VEGETATION_THRESHOLD:
        return "Low vegetation"
    return None


def prediction_to_record(result, city, date):
    """
    Flatten a prediction result into a bloom record document

    Args:
        result: Prediction body returned by the forecasting service
        city: Requested city, used when the body does not echo it
        date: Requested date, used when the body does not echo it

    Returns:
        Document ready for insertion
    """
    ndvi = result.get("predicted_ndvi")
    return {
        "county": result.get("city") or city,
        "date": result.get("date") or date,
        "ndvi": ndvi,
        "anomaly": anomaly_label(ndvi, result.get("anomaly")),
        "lat": result.get("latitude"),
        "lon": result.get("longitude"),
        "source": "prediction",
        "created_at": datetime.now(timezone.utc).strftime('%Y-%m-%d %H:%M:%S'),
    }


@with_db_connection
def archive_prediction(settings, result, city, date):
    """
    Store a copy of a successful prediction

    Returns:
        True if a document was written, False if the store is disabled
        or the body cannot be archived

    Raises:
        PersistenceFailure: if the insert fails
    """
    db = get_database(settings)
    if db is None:
        return False

    ndvi = result.get("predicted_ndvi") if isinstance(result, dict) else None
    if isinstance(ndvi, bool) or not isinstance(ndvi, (int, float)):
        logger.warning(f"Prediction for {city} on {date} has no numeric predicted_ndvi, not archived")
        return False

    try:
        doc = prediction_to_record(result, city, date)
        db[settings.blooms_collection].insert_one(doc)
    except InvalidOperation:
        # Retried once by with_db_connection
        raise
    except Exception as e:
        raise PersistenceFailure(f"Failed to archive prediction for {city} on {date}: {e}") from e

    logger.info(f"Archived prediction for {doc['county']} on {doc['date']}")
    return True


def build_bloom_query(county=None, year=None):
    """Build the MongoDB filter for the county/year selection"""
    query = {}
    if county:
        query["county"] = county
    if year is not None:
        query["date"] = {"$regex": f"^{int(year):04d}-"}
    return query


@with_db_connection
def list_blooms(settings, county=None, year=None):
    """
    Fetch bloom records sorted by date

    Returns:
        List of records without MongoDB's _id field, or None when the
        store is disabled
    """
    db = get_database(settings)
    if db is None:
        return None

    query = build_bloom_query(county, year)
    cursor = db[settings.blooms_collection].find(query, {"_id": 0}).sort("date", ASCENDING)
    records = list(cursor)
    logger.info(f"Found {len(records)} bloom records for {query}")
    return records


def setup_indexes(db, collection="blooms"):
    """Set up indexes used by the county/year queries and imports"""
    db[collection].create_index([("county", ASCENDING), ("date", ASCENDING)])
    db[collection].create_index([("date", ASCENDING)])
    logger.info(f"Set up indexes on {collection}")


def upsert_blooms(db, records, collection="blooms"):
    """
    Insert or replace bloom records keyed by county and date

    Returns:
        Number of records inserted or modified
    """
    operations = [
        ReplaceOne({"county": r["county"], "date": r["date"]}, r, upsert=True)
        for r in records
    ]
    if not operations:
        return 0
    result = db[collection].bulk_write(operations, ordered=False)
    return result.upserted_count + result.modified_count


def count_by_county(db, collection="blooms"):
    """Return {county: record_count}"""
    pipeline = [
        {"$group": {"_id": "$county", "count": {"$sum": 1}}},
        {"$sort": {"_id": 1}},
    ]
    return {row["_id"]: row["count"] for row in db[collection].aggregate(pipeline)}
