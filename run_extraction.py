#!/usr/bin/env python3
"""
Recover structured JSON from saved model responses.

This script provides a simple command-line interface to:
1. Parse one saved response against a named shape and print the result
2. Replay a whole response log and write an annotated table plus a summary

Usage:
    python run_extraction.py parse --shape recipe response.txt
    python run_extraction.py replay responses.csv --output-dir ./outputs
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

os.makedirs('logs', exist_ok=True)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler('logs/extraction.log', mode='a'),
        logging.StreamHandler()
    ]
)
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Recover structured JSON from model responses')
    subparsers = parser.add_subparsers(dest='command', required=True)

    parse_cmd = subparsers.add_parser('parse', help='Parse a single saved response')
    parse_cmd.add_argument(
        '--shape',
        type=str,
        required=True,
        help='Catalog shape name (e.g. "recipe", "pantry_item_list")'
    )
    parse_cmd.add_argument(
        'input',
        nargs='?',
        default='-',
        help='File holding the raw response; "-" reads stdin'
    )

    replay_cmd = subparsers.add_parser('replay', help='Replay a response log (.csv, .jsonl, .parquet)')
    replay_cmd.add_argument('input', help='Path to the response log')
    replay_cmd.add_argument(
        '--output-dir',
        type=str,
        default='./outputs',
        help='Directory to save the annotated results'
    )
    replay_cmd.add_argument(
        '--text-column',
        type=str,
        default='raw_response',
        help='Column holding the raw model text'
    )
    replay_cmd.add_argument(
        '--shape-column',
        type=str,
        default='shape',
        help='Column holding the shape name for each row'
    )
    return parser


def run_parse(args) -> int:
    from pantry_ai.LLM.shapes import get_shape
    from pantry_ai.LLM.utils.result_parser import extract

    shape = get_shape(args.shape)
    if args.input == '-':
        raw_text = sys.stdin.read()
    else:
        raw_text = Path(args.input).read_text(encoding='utf-8')

    result = extract(raw_text, shape)
    if result.successful:
        print(json.dumps({'success': True, 'data': result.value}, indent=2, ensure_ascii=False))
        return 0

    logger.warning(f"Extraction failed ({result.reason.value}): {result.snippet!r}")
    print(json.dumps({'success': False, 'reason': result.reason.value, 'snippet': result.snippet},
                     indent=2, ensure_ascii=False))
    return 1


def run_replay(args) -> int:
    from pantry_ai.LLM.batch_processor import BatchProcessor
    from pantry_ai.output_generation.report_generator import ReportGenerator

    os.makedirs(args.output_dir, exist_ok=True)

    processor = BatchProcessor()
    df = processor.load_responses(args.input)
    result_df = processor.process_dataframe(
        df, text_column=args.text_column, shape_column=args.shape_column
    )

    output_path = Path(args.output_dir) / f"{Path(args.input).stem}_replayed.csv"
    result_df.to_csv(output_path, index=False)
    logger.info(f"Annotated results saved to {output_path}")

    reporter = ReportGenerator()
    stats = reporter.generate_summary_stats(result_df, shape_column=args.shape_column)
    reporter.write_json_log(stats, source=args.input)
    reporter.print_console_summary(stats)
    return 0


def main(argv=None):
    """Main entry point for the extraction tools."""
    args = build_parser().parse_args(argv)

    try:
        if args.command == 'parse':
            return run_parse(args)
        return run_replay(args)
    except (KeyError, ValueError, FileNotFoundError) as e:
        logger.error(f"Failed to run {args.command}: {str(e)}")
        return 2

if __name__ == "__main__":
    sys.exit(main())
