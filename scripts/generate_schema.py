#!/usr/bin/env python
# ============================================================================
# SCHEMA GENERATION SCRIPT
# ============================================================================
# PURPOSE: Print the desired schema for one connection as DDL
# USAGE:
#   python scripts/generate_schema.py --entity-dir app/entities
#   python scripts/generate_schema.py --report        # Per-entity outcomes as JSON
# ============================================================================

import argparse
import json
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from __version__ import __version__
from core.config import get_defaults
from core.logging import ComponentType, configure_logging, get_logger
from core.schema import SchemaProviderBridge, TranslationError

logger = get_logger("generate_schema", ComponentType.CLI)


def build_parser() -> argparse.ArgumentParser:
    defaults = get_defaults()
    parser = argparse.ArgumentParser(
        description="Generate DDL for entity classes on one connection",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/generate_schema.py --entity-dir app/entities
  python scripts/generate_schema.py --connection-name mysql --database-url mysql://localhost/app
  python scripts/generate_schema.py --report --strict

Environment Variables:
  ENTITY_DIRS           Entity directories (os.pathsep separated)
  ENTITY_CONNECTION     Connection name (default: default)
  DATABASE_URL          Target database URL, selects the dialect (default: sqlite://)
  SCHEMA_STRICT         Fail on the first broken entity (default: false)
  LOG_LEVEL / LOG_FORMAT
        """
    )
    parser.add_argument(
        "--entity-dir",
        action="append",
        dest="entity_dirs",
        help="Directory to scan for entities (repeatable)"
    )
    parser.add_argument(
        "--connection-name",
        default=defaults.translation.connection_name,
        help="Only entities on this connection are included"
    )
    parser.add_argument(
        "--database-url",
        default=defaults.translation.database_url,
        help="Database URL used to pick the SQL dialect"
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        default=defaults.translation.strict,
        help="Fail on the first entity that cannot be translated"
    )
    parser.add_argument(
        "--report",
        action="store_true",
        help="Print the translation report as JSON instead of DDL"
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        default=defaults.logging.json_output,
        help="Emit logs as JSON"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    defaults = get_defaults()

    configure_logging(
        level="DEBUG" if args.verbose else defaults.logging.level,
        json_output=args.json_logs,
    )

    entity_dirs = args.entity_dirs or list(defaults.discovery.entity_dirs)
    if not entity_dirs:
        print("No entity directories given (use --entity-dir or ENTITY_DIRS)", file=sys.stderr)
        return 2

    logger.info(f"Generating schema for connection {args.connection_name} from {len(entity_dirs)} directories")
    provider = SchemaProviderBridge(
        entity_dirs,
        args.connection_name,
        args.database_url,
        strict=args.strict,
    )

    try:
        if args.report:
            report = provider.create_report()
            print(json.dumps(report.to_dict(), indent=2))
            return 0 if report.success else 1

        for statement in provider.generate_ddl():
            print(f"{statement};")
            print()
    except TranslationError as e:
        print(f"Schema generation failed: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
