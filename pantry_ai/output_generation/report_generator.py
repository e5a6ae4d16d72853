"""
Report Generator Module
Creates summary reports and statistics for replayed extractions.
"""

import pandas as pd
import json
import logging
from datetime import datetime
from typing import Dict, Any
from pathlib import Path

logger = logging.getLogger(__name__)

class ReportGenerator:
    """Generates summary reports and statistics."""

    def __init__(self, logs_dir: str = "logs"):
        self.logs_dir = Path(logs_dir)
        self.logs_dir.mkdir(parents=True, exist_ok=True)

    def generate_summary_stats(self, df: pd.DataFrame, shape_column: str = 'shape') -> Dict[str, Any]:
        """Generate summary statistics for a replayed DataFrame."""

        if df.empty:
            return {
                'total_records': 0,
                'successful_records': 0,
                'failed_records': 0,
                'success_rate': 0.0,
                'reason_breakdown': {},
                'shape_breakdown': {}
            }

        successful = df['successful'].astype(bool)
        successful_count = int(successful.sum())

        shape_breakdown = {}
        if shape_column in df.columns:
            for shape_name, group in df.groupby(shape_column):
                group_ok = group['successful'].astype(bool)
                shape_breakdown[str(shape_name)] = {
                    'total_records': len(group),
                    'successful_records': int(group_ok.sum()),
                    'reason_breakdown': {
                        str(k): int(v) for k, v in group.loc[~group_ok, 'reason'].value_counts().items()
                    }
                }

        stats = {
            'total_records': len(df),
            'successful_records': successful_count,
            'failed_records': len(df) - successful_count,
            'success_rate': successful_count / len(df),
            'reason_breakdown': {
                str(k): int(v) for k, v in df.loc[~successful, 'reason'].value_counts().items()
            },
            'shape_breakdown': shape_breakdown
        }

        return stats

    def write_json_log(self, stats: Dict[str, Any], source: str = "") -> str:
        """Write structured JSON report."""

        log_data = {
            'generated_at': datetime.now().isoformat(),
            'source': source,
            'summary': stats,
            'exit_code': 0 if stats['failed_records'] == 0 else 1
        }

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_path = self.logs_dir / f"extraction_report_{timestamp}.json"

        try:
            with open(log_path, 'w') as f:
                json.dump(log_data, f, indent=2, default=str)

            logger.info(f"JSON report written to {log_path}")
            return str(log_path)

        except Exception as e:
            logger.error(f"Error writing JSON report: {str(e)}")
            raise

    def print_console_summary(self, stats: Dict[str, Any]) -> None:
        """Print human-readable summary to console."""

        print("\n" + "="*60)
        print("           EXTRACTION REPLAY SUMMARY")
        print("="*60)

        print(f"Total Records: {stats['total_records']}")
        print(f"Parsed: {stats['successful_records']}")
        print(f"Failed: {stats['failed_records']}")
        print(f"Success Rate: {stats['success_rate'] * 100:.1f}%")

        if stats['reason_breakdown']:
            print("\nFAILURE REASONS:")
            print("-" * 40)
            for reason, count in stats['reason_breakdown'].items():
                print(f"  {reason}: {count}")

        if stats['shape_breakdown']:
            print("\nSHAPE BREAKDOWN:")
            print("-" * 40)
            for shape_name, details in stats['shape_breakdown'].items():
                print(f"  {shape_name}: {details['successful_records']}/{details['total_records']} parsed")

        print("="*60 + "\n")
