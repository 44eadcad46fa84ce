#!/usr/bin/env python3
"""
Salesforce Opportunity Feed CLI Runner
Run the pipeline once and print or save the dashboard rows

Usage:
    python -m etl.run_etl                          # Print JSON envelope
    python -m etl.run_etl --output opps.csv        # Write dashboard CSV
    python -m etl.run_etl --dry-run                # Validate configuration only
"""

import argparse
import csv
import json
import logging
import sys

from etl.config import LOGGING_CONFIG, OUTPUT_COLUMNS, load_credentials
from etl.pipeline import OpportunityPipeline
from shared.exceptions import PipelineError


def setup_logging(level: str = 'INFO'):
    """Setup logging configuration"""
    logging.basicConfig(
        level=getattr(logging, level),
        format=LOGGING_CONFIG['format'],
        datefmt=LOGGING_CONFIG['date_format']
    )


def write_csv(rows, path: str):
    """Write transformed rows with the dashboard's column header"""
    with open(path, 'w', newline='', encoding='utf-8') as f:
        writer = csv.DictWriter(f, fieldnames=OUTPUT_COLUMNS)
        writer.writeheader()
        writer.writerows(rows)


def main(argv=None) -> int:
    """Main CLI entry point"""
    parser = argparse.ArgumentParser(
        description='Salesforce Opportunity Feed Runner',
        epilog="""
Examples:
  %(prog)s                              # Print JSON to stdout
  %(prog)s --output opportunities.csv   # Write CSV for the dashboard
  %(prog)s --dry-run                    # Check credentials are configured
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument(
        '--output',
        help='Write rows to this CSV file instead of printing JSON'
    )
    parser.add_argument(
        '--log-level',
        default='INFO',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Logging level (default: INFO)'
    )
    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Validate configuration without calling Salesforce'
    )

    args = parser.parse_args(argv)

    setup_logging(args.log_level)
    logger = logging.getLogger("Main")

    credentials = load_credentials()

    if args.dry_run:
        missing = credentials.missing_fields()
        if missing:
            logger.error(f"Missing configuration: {', '.join(missing)}")
            return 1
        logger.info("DRY RUN MODE - configuration is complete, Salesforce not called")
        return 0

    try:
        result = OpportunityPipeline(credentials).run()
    except PipelineError as e:
        logger.error(f"{e.code}: {e.message}")
        return 1
    except KeyboardInterrupt:
        logger.warning("Run interrupted by user")
        return 1
    except Exception as e:
        logger.error(f"Run failed: {e}", exc_info=True)
        return 1

    if args.output:
        write_csv(result['data'], args.output)
        logger.info(f"Wrote {result['recordCount']} rows to {args.output}")
    else:
        json.dump(result, sys.stdout, indent=2)
        sys.stdout.write('\n')

    return 0


if __name__ == '__main__':
    sys.exit(main())
