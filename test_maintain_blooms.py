#!/usr/bin/env python3
"""
Test bloom file parsing in the maintenance script
"""
import os
import json
import shutil
import tempfile
import unittest
from unittest.mock import MagicMock, patch

from maintain_blooms import main, normalize_date, parse_records, read_rows

SAMPLE_CSV = os.path.join(os.path.dirname(os.path.abspath(__file__)), "data", "sample_blooms.csv")


class TestParsing(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.tmpdir)

    def test_normalize_date(self):
        self.assertEqual(normalize_date("2024-03-01"), "2024-03-01")
        self.assertEqual(normalize_date("2024-03-01T00:00:00.000Z"), "2024-03-01")
        with self.assertRaises(ValueError):
            normalize_date("March 2024")

    def test_sample_csv(self):
        records, errors = parse_records(read_rows(SAMPLE_CSV))

        self.assertEqual(errors, [])
        self.assertEqual(len(records), 7)
        kisumu = records[0]
        self.assertEqual(kisumu["county"], "Kisumu")
        self.assertAlmostEqual(kisumu["ndvi"], 0.44)
        self.assertNotIn("anomaly", kisumu)
        self.assertEqual(records[5]["anomaly"], "Drought stress")

    def test_csv_empty_cells_are_dropped(self):
        path = os.path.join(self.tmpdir, "blooms.csv")
        with open(path, "w", encoding="utf-8") as f:
            f.write("county,date,ndvi,lat,lon,rainfall,anomaly\n")
            f.write("Kitui,2024-02-01,0.3,,,,\n")

        records, errors = parse_records(read_rows(path))

        self.assertEqual(errors, [])
        self.assertEqual(records, [{"county": "Kitui", "date": "2024-02-01", "ndvi": 0.3}])

    def test_json_rows_and_bad_rows(self):
        path = os.path.join(self.tmpdir, "blooms.json")
        with open(path, "w", encoding="utf-8") as f:
            json.dump([
                {"county": "Kitui", "date": "2024-02-01", "ndvi": 0.3},
                {"county": "Kitui", "date": "yesterday", "ndvi": 0.3},
                {"county": "Kitui", "date": "2024-02-01", "ndvi": "green"},
            ], f)

        records, errors = parse_records(read_rows(path))

        self.assertEqual(len(records), 1)
        self.assertEqual(len(errors), 2)

    def test_json_must_be_list(self):
        path = os.path.join(self.tmpdir, "blooms.json")
        with open(path, "w", encoding="utf-8") as f:
            json.dump({"county": "Kitui"}, f)

        with self.assertRaises(ValueError):
            read_rows(path)


class TestMain(unittest.TestCase):

    @patch('maintain_blooms.load_settings')
    def test_requires_mongo_uri(self, mock_settings):
        mock_settings.return_value = MagicMock(store_enabled=False)
        self.assertEqual(main(["--report"]), 1)

    @patch('maintain_blooms.connect_to_mongodb')
    @patch('maintain_blooms.load_settings')
    def test_import_and_report(self, mock_settings, mock_connect):
        mock_settings.return_value = MagicMock(
            store_enabled=True, mongo_uri="mongodb://x", mongo_db="db", blooms_collection="blooms"
        )
        mock_client = MagicMock()
        mock_connect.return_value = mock_client
        collection = mock_client.__getitem__.return_value.__getitem__.return_value
        collection.bulk_write.return_value = MagicMock(upserted_count=7, modified_count=0)
        collection.aggregate.return_value = [{"_id": "Kisumu", "count": 2}]

        self.assertEqual(main(["--import", SAMPLE_CSV, "--report"]), 0)
        collection.bulk_write.assert_called_once()
        mock_client.close.assert_called_once()

    def test_missing_import_file(self):
        self.assertEqual(main(["--import", "/nonexistent/blooms.csv"]), 1)


if __name__ == '__main__':
    unittest.main()
