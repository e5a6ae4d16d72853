"""
Batch Processor for Response Replay
Re-runs logged model responses through the extractor to measure how often
each shape parses and why the rest fail.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Optional

import pandas as pd

from .models import ShapeDescriptor
from .shapes import SHAPES
from .utils.result_parser import ResultParser

logger = logging.getLogger(__name__)

UNKNOWN_SHAPE = "unknown_shape"

RESULT_COLUMNS = ['successful', 'reason', 'snippet', 'extracted_json']


class BatchProcessor:
    """Replay batches of raw responses against their expected shapes."""

    def __init__(self, shapes: Optional[Dict[str, ShapeDescriptor]] = None):
        self.shapes = shapes if shapes is not None else SHAPES
        self.result_parser = ResultParser()

    @staticmethod
    def load_responses(path: str) -> pd.DataFrame:
        """Load a response log from .csv, .jsonl or .parquet."""
        file_path = Path(path)
        if not file_path.exists():
            raise FileNotFoundError(f"Response log not found at {file_path}")

        suffix = file_path.suffix.lower()
        if suffix == '.csv':
            df = pd.read_csv(file_path, keep_default_na=False)
        elif suffix == '.jsonl':
            df = pd.read_json(file_path, lines=True)
        elif suffix == '.parquet':
            df = pd.read_parquet(file_path)
        else:
            raise ValueError(f"Unsupported response log format: {suffix}")

        logger.info(f"Loaded {len(df)} responses from {file_path}")
        return df

    def process_record(self, raw_text, shape_name: str) -> Dict[str, object]:
        """Extract a single logged response."""
        shape = self.shapes.get(shape_name)
        if shape is None:
            logger.warning(f"No shape named '{shape_name}', skipping record")
            return {
                'successful': False,
                'reason': UNKNOWN_SHAPE,
                'snippet': '',
                'extracted_json': None
            }

        # Missing cells arrive from pandas as NaN
        if not isinstance(raw_text, str):
            raw_text = None

        result = self.result_parser.extract(raw_text, shape)
        if result.successful:
            return {
                'successful': True,
                'reason': None,
                'snippet': None,
                'extracted_json': json.dumps(result.value, ensure_ascii=False)
            }
        return {
            'successful': False,
            'reason': result.reason.value,
            'snippet': result.snippet,
            'extracted_json': None
        }

    def process_dataframe(
        self,
        df: pd.DataFrame,
        text_column: str = 'raw_response',
        shape_column: str = 'shape'
    ) -> pd.DataFrame:
        """
        Run every row through the extractor.

        Args:
            df: Response log with one raw response per row
            text_column: Column holding the raw model text
            shape_column: Column holding the catalog shape name

        Returns:
            pd.DataFrame: Copy of ``df`` with the result columns added
        """
        missing = {text_column, shape_column} - set(df.columns)
        if missing:
            raise ValueError(f"Missing required columns: {', '.join(sorted(missing))}")

        result_df = df.copy()
        if df.empty:
            for column in RESULT_COLUMNS:
                result_df[column] = pd.Series(dtype=object)
            return result_df

        records = [
            self.process_record(raw_text, shape_name)
            for raw_text, shape_name in zip(df[text_column], df[shape_column])
        ]
        outcomes = pd.DataFrame(records, index=df.index, columns=RESULT_COLUMNS)
        result_df[RESULT_COLUMNS] = outcomes

        succeeded = int(result_df['successful'].sum())
        logger.info(f"Replayed {len(result_df)} responses: {succeeded} parsed, {len(result_df) - succeeded} failed")
        return result_df
