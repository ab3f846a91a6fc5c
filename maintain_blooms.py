#!/usr/bin/env python3
"""
Observation store maintenance script for the Bloom Watch service

This script performs maintenance tasks such as:
- Importing bloom observations from a JSON or CSV file
- Setting up the indexes used by the county/year queries
- Reporting record counts per county
"""
import os
import sys
import json
import argparse
from datetime import datetime

import pandas as pd
from pydantic import ValidationError

from bloom_service.config import load_settings
from bloom_service.database.connection import connect_to_mongodb
from bloom_service.models.bloom import BloomRecord
from bloom_service.services.observations import setup_indexes, upsert_blooms, count_by_county


def normalize_date(value):
    """Accept YYYY-MM-DD or a full ISO timestamp and return YYYY-MM-DD"""
    value = str(value).strip()
    try:
        return datetime.strptime(value[:10], "%Y-%m-%d").strftime("%Y-%m-%d")
    except ValueError:
        raise ValueError(f"Invalid date: {value!r}")


def read_rows(path):
    """Read raw rows from a JSON list or a CSV file"""
    if path.lower().endswith(".json"):
        with open(path, encoding="utf-8") as f:
            rows = json.load(f)
        if not isinstance(rows, list):
            raise ValueError(f"{path} must contain a JSON list of records")
        return rows

    df = pd.read_csv(path, encoding="utf-8")
    # Empty CSV cells mean "no value"
    return [
        {k: v for k, v in row.items() if pd.notna(v)}
        for row in df.to_dict("records")
    ]


def parse_records(rows):
    """
    Validate raw rows into bloom record documents

    Returns:
        Tuple of (records, errors) where errors lists human readable problems
    """
    records = []
    errors = []
    for i, row in enumerate(rows, start=1):
        try:
            row = dict(row)
            row["date"] = normalize_date(row.get("date", ""))
            record = BloomRecord.model_validate(row)
        except (ValidationError, ValueError) as e:
            errors.append(f"row {i}: {e}")
            continue
        records.append(record.model_dump(exclude_none=True))
    return records, errors


def import_file(db, path, collection):
    """Import a bloom file into the collection and return the count written"""
    records, errors = parse_records(read_rows(path))
    for err in errors:
        print(f"Skipping {err}", file=sys.stderr)
    written = upsert_blooms(db, records, collection)
    print(f"Imported {len(records)} records from {path} ({written} inserted or changed)")
    return written


def main(argv=None):
    """Main function for the maintenance script"""
    parser = argparse.ArgumentParser(description='Perform observation store maintenance for Bloom Watch')
    parser.add_argument('--import', dest='import_file', metavar='FILE', help='Import bloom records from a JSON or CSV file')
    parser.add_argument('--setup-indexes', action='store_true', help='Create the county/date indexes')
    parser.add_argument('--report', action='store_true', help='Report record counts per county')
    args = parser.parse_args(argv)

    # If no specific arguments are given, perform basic maintenance tasks
    if not any([args.import_file, args.setup_indexes, args.report]):
        args.setup_indexes = True
        args.report = True

    if args.import_file and not os.path.exists(args.import_file):
        print(f"Error: {args.import_file} does not exist", file=sys.stderr)
        return 1

    settings = load_settings()
    if not settings.store_enabled:
        print("Error: MONGO_URI is not set", file=sys.stderr)
        return 1

    try:
        mongo_client = connect_to_mongodb(settings.mongo_uri)
        db = mongo_client[settings.mongo_db]
        collection = settings.blooms_collection

        if args.setup_indexes:
            print("Setting up indexes...")
            setup_indexes(db, collection)

        if args.import_file:
            import_file(db, args.import_file, collection)

        if args.report:
            counts = count_by_county(db, collection)
            print("\nRecord counts:")
            for county, count in counts.items():
                print(f"  {county}: {count} records")
            print(f"Total: {sum(counts.values())} records")

        mongo_client.close()
        return 0

    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
