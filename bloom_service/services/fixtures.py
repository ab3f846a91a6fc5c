"""
Mock predictions file access

The file is read and parsed on every call; nothing is cached.
"""
import json
import logging

from ..errors import FixtureUnreadable

logger = logging.getLogger("bloom-service.fallback")

DEFAULT_KEY = "default"


def load_fixtures(path):
    """
    Load the mock predictions table

    Args:
        path: Path to the JSON file

    Returns:
        Dict mapping location name to a prediction object or a list of
        {ds, yhat} forecast points

    Raises:
        FixtureUnreadable: if the file is missing, unparsable or not a JSON object
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise FixtureUnreadable(f"Mock predictions file not found: {path}") from e
    except (OSError, ValueError) as e:
        raise FixtureUnreadable(f"Failed to parse {path}: {e}") from e

    if not isinstance(data, dict):
        raise FixtureUnreadable(f"{path} must contain a JSON object, got {type(data).__name__}")
    return data


def is_blank(entry):
    """True for entries that count as absent: null, false, 0 and the empty string"""
    if isinstance(entry, (list, dict)):
        return False
    return not entry


def lookup_entry(fixtures, location):
    """
    Return the entry for location, else the default entry

    A blank location entry falls through to the default one. Empty lists
    and objects are real entries.
    """
    entry = fixtures.get(location)
    if is_blank(entry):
        entry = fixtures.get(DEFAULT_KEY)
    return entry
