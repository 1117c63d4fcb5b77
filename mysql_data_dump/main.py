#!/usr/bin/env python3
"""
MySQL Data Dumper - CLI Entry Point
===================================
Dumps the row data of a MySQL database as replayable INSERT/REPLACE
statements, with support for:
- Batched multi-row statements
- Global read lock during the dump
- Dropping secondary indexes before the reload and recreating them after
- Per-table WHERE clauses
- Optional view data
- Compression support
"""

import argparse
import logging
import sys

import yaml

from .config import ConfigLoader
from .connection import DatabaseConnection
from .database_dumper import DatabaseDumper
from .errors import LockReleaseError
from .utils import print_dry_run_info, setup_logging


def connect(settings: dict) -> DatabaseConnection:
    return DatabaseConnection(
        host=settings['host'],
        port=settings.get('port', DatabaseConnection.DEFAULT_PORT),
        user=settings['user'],
        password=settings.get('password', ''),
        database=settings.get('database')
    )


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='MySQL Data Dumper - export table rows as SQL statements'
    )
    parser.add_argument(
        '-c', '--config',
        default='config.yaml',
        help='Path to configuration file (default: config.yaml)'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose output'
    )
    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Show what would be dumped without actually dumping'
    )
    parser.add_argument(
        '-o', '--output',
        help='Append the dump to this file (overrides output.file)'
    )
    parser.add_argument(
        '-t', '--table',
        action='append',
        help='Dump only this table; may be given several times'
    )

    args = parser.parse_args()

    # Load configuration
    try:
        config = ConfigLoader(args.config)
    except FileNotFoundError:
        print(f"Error: Configuration file '{args.config}' not found")
        sys.exit(1)
    except yaml.YAMLError as e:
        print(f"Error: Invalid YAML in configuration file: {e}")
        sys.exit(1)

    # Setup logging
    log_settings = config.get_logging_settings()
    if args.verbose:
        log_settings['level'] = 'DEBUG'
    setup_logging(log_settings)

    output_settings = config.get_output_settings()
    output_file = args.output or output_settings.get('file')
    tables_config = args.table or config.get_tables_config()

    try:
        options = config.get_dump_options()
        connection_settings = config.get_connection_settings()

        with connect(connection_settings) as metadata_conn, connect(connection_settings) as data_conn:
            dumper = DatabaseDumper(data_conn, options, metadata_connection=metadata_conn)
            tables = dumper.select_tables(
                metadata_conn.get_tables(),
                tables_config,
                config.get_exclude_patterns()
            )

            # Dry run mode
            if args.dry_run:
                logging.info("DRY RUN MODE - No data will be dumped")
                print_dry_run_info(tables, options)
                sys.exit(0)

            if not output_file and not options.return_from_function:
                logging.warning("No output file configured; the dump will be discarded")

            dumper.dump(tables, output_file, compress=output_settings.get('compress', False))

        stats = dumper.stats

        # Print summary
        logging.info("=" * 50)
        logging.info("DUMP COMPLETE")
        logging.info(f"Tables: {stats.total_tables}")
        logging.info(f"Total Rows: {stats.total_rows}")
        logging.info(f"Statements: {stats.total_statements}")

    except LockReleaseError as e:
        if e.tables is not None:
            logging.error(f"Dump completed but server lock state is unknown: {e}")
        else:
            logging.error(f"Dump failed and server lock state is unknown: {e}")
        sys.exit(1)
    except Exception as e:
        logging.error(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
