"""
MongoDB connection manager for the Bloom Watch service

This module provides functions for managing the MongoDB connection
backing the observation store, including handling connection closures
and reconnection.
"""
import time
import logging
from pymongo import MongoClient
from pymongo.errors import InvalidOperation

# Configure logging
logger = logging.getLogger("bloom-service")

# Global client reference
_mongo_client = None


def connect_to_mongodb(mongo_uri, max_retries=5, retry_interval=5):
    """Connect to MongoDB with retry logic"""
    retry_count = 0
    while True:
        try:
            logger.info("Connecting to MongoDB")
            mongo_client = MongoClient(mongo_uri, serverSelectionTimeoutMS=5000)
            # Force a connection to verify it works
            mongo_client.server_info()
            logger.info("Successfully connected to MongoDB")
            return mongo_client
        except Exception as e:
            retry_count += 1
            if retry_count >= max_retries:
                raise ConnectionError(f"Failed to connect to MongoDB after {max_retries} attempts: {e}") from e
            logger.warning(f"MongoDB connection attempt {retry_count} failed: {e}. Retrying in {retry_interval} seconds...")
            time.sleep(retry_interval)


def get_database(settings):
    """
    Get or create MongoDB connection and return database

    Args:
        settings: Service settings holding mongo_uri and mongo_db

    Returns:
        MongoDB database object, or None when no store is configured
    """
    global _mongo_client

    if not settings.store_enabled:
        return None

    # Create new connection if needed
    if _mongo_client is None:
        logger.info(f"Creating new MongoDB connection to {settings.mongo_db}")
        _mongo_client = MongoClient(settings.mongo_uri, serverSelectionTimeoutMS=5000)
        return _mongo_client[settings.mongo_db]

    # Test if connection is still alive
    try:
        _mongo_client.admin.command('ping')
        return _mongo_client[settings.mongo_db]
    except Exception as e:
        logger.warning(f"MongoDB connection check failed: {str(e)}")
        try:
            _mongo_client.close()
        except Exception as close_error:
            logger.warning(f"Error closing MongoDB connection: {str(close_error)}")

        logger.info("Reconnecting to MongoDB")
        _mongo_client = MongoClient(settings.mongo_uri, serverSelectionTimeoutMS=5000)
        return _mongo_client[settings.mongo_db]


def with_db_connection(func):
    """
    Decorator to ensure DB connection is valid

    Retries the wrapped call once with a fresh client when pymongo reports
    that the client was used after close.
    """
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except InvalidOperation as e:
            if "Cannot use MongoClient after close" in str(e):
                logger.info("MongoDB connection was closed, reconnecting...")
                global _mongo_client
                _mongo_client = None
                return func(*args, **kwargs)
            raise
    return wrapper


def close_connection():
    """Close the MongoDB connection if it exists"""
    global _mongo_client
    if _mongo_client:
        try:
            _mongo_client.close()
            _mongo_client = None
            logger.info("MongoDB connection closed")
        except Exception as e:
            logger.warning(f"Error closing MongoDB connection: {str(e)}")
