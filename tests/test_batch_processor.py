"""
Unit tests for BatchProcessor and ReportGenerator.
Tests replaying logged responses and summarizing the outcomes.
"""

import json
import os
import tempfile
import unittest

import pandas as pd

from pantry_ai.LLM.batch_processor import BatchProcessor, UNKNOWN_SHAPE
from pantry_ai.output_generation.report_generator import ReportGenerator


RECIPE_TEXT = json.dumps({
    "title": "Soup", "ingredients": ["water"], "steps": ["boil"], "time_minutes": 5
})


class TestBatchProcessor(unittest.TestCase):
    """Test cases for BatchProcessor."""

    def setUp(self):
        """Set up test resources."""
        self.processor = BatchProcessor()
        self.test_data = pd.DataFrame({
            'request_id': ['r1', 'r2', 'r3', 'r4', 'r5'],
            'raw_response': [
                "```json\n" + RECIPE_TEXT + "\n```",
                "I cannot see any food in this image.",
                '{"title": "Soup"}',
                "[]",
                float('nan')
            ],
            'shape': ['recipe', 'pantry_item_list', 'recipe', 'pizza', 'nutrition']
        })

    def test_process_dataframe(self):
        result = self.processor.process_dataframe(self.test_data)

        self.assertEqual(list(result['request_id']), ['r1', 'r2', 'r3', 'r4', 'r5'])
        self.assertEqual(list(result['successful']), [True, False, False, False, False])
        self.assertEqual(
            list(result['reason']),
            [None, 'no_json_found', 'missing_required_fields', UNKNOWN_SHAPE, 'no_json_found']
        )
        self.assertEqual(json.loads(result.loc[0, 'extracted_json'])['title'], 'Soup')
        self.assertEqual(result.loc[1, 'snippet'], "I cannot see any food in this image.")

    def test_input_is_not_modified(self):
        self.processor.process_dataframe(self.test_data)

        self.assertNotIn('successful', self.test_data.columns)

    def test_custom_columns(self):
        df = self.test_data.rename(columns={'raw_response': 'content', 'shape': 'expected'})

        result = self.processor.process_dataframe(df, text_column='content', shape_column='expected')

        self.assertTrue(result.loc[0, 'successful'])

    def test_missing_columns(self):
        with self.assertRaises(ValueError):
            self.processor.process_dataframe(self.test_data.drop(columns=['shape']))

    def test_empty_dataframe(self):
        empty = pd.DataFrame({'raw_response': [], 'shape': []})

        result = self.processor.process_dataframe(empty)

        self.assertTrue(result.empty)
        self.assertIn('reason', result.columns)

    def test_load_responses_csv(self):
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = os.path.join(tmp_dir, 'responses.csv')
            self.test_data.iloc[:4].to_csv(path, index=False)

            loaded = BatchProcessor.load_responses(path)

        self.assertEqual(len(loaded), 4)
        self.assertEqual(loaded.loc[3, 'raw_response'], '[]')

    def test_load_responses_jsonl(self):
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = os.path.join(tmp_dir, 'responses.jsonl')
            with open(path, 'w') as f:
                f.write(json.dumps({'raw_response': RECIPE_TEXT, 'shape': 'recipe'}) + '\n')

            loaded = BatchProcessor.load_responses(path)

        self.assertEqual(list(loaded.columns), ['raw_response', 'shape'])

    def test_load_responses_errors(self):
        with self.assertRaises(FileNotFoundError):
            BatchProcessor.load_responses('/nonexistent/responses.csv')

        with tempfile.NamedTemporaryFile(suffix='.txt') as tmp:
            with self.assertRaises(ValueError):
                BatchProcessor.load_responses(tmp.name)


class TestReportGenerator(unittest.TestCase):
    """Test cases for ReportGenerator."""

    def setUp(self):
        """Set up test resources."""
        self.tmp_dir = tempfile.TemporaryDirectory()
        self.reporter = ReportGenerator(logs_dir=self.tmp_dir.name)
        self.replayed = pd.DataFrame({
            'shape': ['recipe', 'recipe', 'nutrition', 'nutrition'],
            'successful': [True, False, False, False],
            'reason': [None, 'syntax_error', 'no_json_found', 'no_json_found']
        })

    def tearDown(self):
        """Clean up temporary files."""
        self.tmp_dir.cleanup()

    def test_generate_summary_stats(self):
        stats = self.reporter.generate_summary_stats(self.replayed)

        self.assertEqual(stats['total_records'], 4)
        self.assertEqual(stats['successful_records'], 1)
        self.assertEqual(stats['failed_records'], 3)
        self.assertAlmostEqual(stats['success_rate'], 0.25)
        self.assertEqual(stats['reason_breakdown'], {'no_json_found': 2, 'syntax_error': 1})
        self.assertEqual(stats['shape_breakdown']['recipe']['successful_records'], 1)
        self.assertEqual(stats['shape_breakdown']['nutrition']['reason_breakdown'], {'no_json_found': 2})

    def test_empty_summary(self):
        stats = self.reporter.generate_summary_stats(pd.DataFrame())

        self.assertEqual(stats['total_records'], 0)
        self.assertEqual(stats['success_rate'], 0.0)

    def test_write_json_log(self):
        stats = self.reporter.generate_summary_stats(self.replayed)

        log_path = self.reporter.write_json_log(stats, source='responses.csv')

        with open(log_path) as f:
            log_data = json.load(f)
        self.assertEqual(log_data['source'], 'responses.csv')
        self.assertEqual(log_data['summary']['failed_records'], 3)
        self.assertEqual(log_data['exit_code'], 1)


if __name__ == '__main__':
    unittest.main()
