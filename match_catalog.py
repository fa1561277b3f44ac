#!/usr/bin/env python3
"""
match_catalog.py - Map an external movie feed onto the internal catalog

NEVER modifies the input files. Reads three CSVs and writes a mapping CSV.

Pipeline:
1. [PRECISION] Load internal catalog (id, title, year) → CatalogIndex
2. [PRECISION] Load cast/director roster (movie_id, name, role) → RosterIndex
3. [PRECISION] Per external row: normalized title + release year lookup
4. [REASONING] Title+year collisions → cast/director disambiguation
5. Write mapping (internal_id, external_id) and unresolved review report

Usage:
  python match_catalog.py                                  # paths from config.yaml
  python match_catalog.py --config my_feed.yaml
  python match_catalog.py --catalog movies.csv --roster actors_and_directors.csv \\
      --external xbox_feed.csv --output output/xbox_mapping.csv
"""

import sys
import logging
import argparse
from pathlib import Path
from typing import Dict, List, Optional

import yaml

from idmatch.exceptions import ConfigError, FatalCatalogError
from idmatch.models import Resolution
from idmatch.pipeline import build_indices, resolve_rows
from idmatch.resolver import summarize
from idmatch.sources import read_rows, write_mappings, write_unresolved

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

DEFAULTS = {
    'output_path': 'output/id_mapping.csv',
    'unresolved_path': 'output/unresolved.csv',
    'signal_column': None,
    'workers': 1,
}

REQUIRED_PATHS = ('catalog_path', 'roster_path', 'external_path')


def load_config(config_path: Path) -> dict:
    """Load configuration from YAML file"""
    with open(config_path, 'r') as f:
        return yaml.safe_load(f) or {}


def resolve_settings(args: argparse.Namespace) -> Dict:
    """
    Merge defaults, YAML config and command line flags (flags win)

    Raises:
        ConfigError: missing required path or invalid numeric setting
    """
    settings = dict(DEFAULTS)

    if args.config.exists():
        loaded = load_config(args.config)
        if not isinstance(loaded, dict):
            raise ConfigError(f"Config file must contain a mapping: {args.config}")
        settings.update(loaded)
    elif args.config_explicit:
        raise ConfigError(f"Config file not found: {args.config}")

    overrides = {
        'catalog_path': args.catalog,
        'roster_path': args.roster,
        'external_path': args.external,
        'output_path': args.output,
        'unresolved_path': args.unresolved,
        'signal_column': args.signal_column,
        'workers': args.workers,
    }
    settings.update({k: v for k, v in overrides.items() if v is not None})

    missing = [key for key in REQUIRED_PATHS if not settings.get(key)]
    if missing:
        raise ConfigError(f"Missing required setting(s): {', '.join(missing)}")

    for key in REQUIRED_PATHS + ('output_path', 'unresolved_path'):
        settings[key] = Path(settings[key])

    try:
        if settings['signal_column'] is not None:
            settings['signal_column'] = int(settings['signal_column'])
        settings['workers'] = int(settings['workers'])
    except (TypeError, ValueError) as e:
        raise ConfigError(f"signal_column and workers must be integers: {e}")

    if settings['workers'] < 1:
        raise ConfigError(f"workers must be >= 1, got {settings['workers']}")

    return settings


def run_match(settings: Dict) -> List[Resolution]:
    """Build indices, resolve the external feed and write outputs"""
    indices = build_indices(
        read_rows(settings['catalog_path']),
        read_rows(settings['roster_path']),
    )

    logger.info(f"Matching: {settings['external_path']}")
    resolutions = resolve_rows(
        indices,
        read_rows(settings['external_path']),
        signal_column=settings['signal_column'],
        workers=settings['workers'],
    )

    results = [r.result for r in resolutions if r.result is not None]
    write_mappings(results, settings['output_path'])
    write_unresolved(resolutions, settings['unresolved_path'])
    return resolutions


def print_stats(resolutions: List[Resolution]):
    """Print match summary"""
    counts = summarize(resolutions)
    total = len(resolutions)
    mapped = counts.get('matched', 0) + counts.get('disambiguated', 0)

    print("\n" + "=" * 60)
    print("MATCH STATISTICS")
    print("=" * 60)
    print(f"Total external records: {total}\n")

    print("BY OUTCOME:")
    for outcome in ['matched', 'disambiguated', 'ambiguous', 'miss']:
        count = counts.get(outcome, 0)
        pct = (count / total * 100) if total > 0 else 0
        print(f"  {outcome:15s}: {count:4d} ({pct:5.1f}%)")

    rate = (mapped / total * 100) if total > 0 else 0
    print(f"\nMatch rate: {rate:.1f}% ({mapped}/{total})")
    print("=" * 60)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description='Map external movie ids onto internal catalog ids',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
NEVER modifies input files. Only reads CSVs and writes CSV.

Examples:
  python match_catalog.py
  python match_catalog.py --config feeds/amazon.yaml
  python match_catalog.py --external xbox_feed.csv --signal-column 7
  python match_catalog.py --workers 4 --verbose
        """
    )
    parser.add_argument('--config', type=Path, default=None,
                        help='Configuration file (default: config.yaml if present)')
    parser.add_argument('--catalog', type=Path,
                        help='Internal catalog CSV (id,title,year)')
    parser.add_argument('--roster', type=Path,
                        help='Cast/director CSV (movie_id,name,role)')
    parser.add_argument('--external', type=Path,
                        help='External feed CSV (id in column 2, title 3, release date 4)')
    parser.add_argument('--output', '-o', type=Path,
                        help='Mapping CSV path (default: output/id_mapping.csv)')
    parser.add_argument('--unresolved', type=Path,
                        help='Unresolved review CSV path (default: output/unresolved.csv)')
    parser.add_argument('--signal-column', type=int, dest='signal_column',
                        help='External column holding cast/crew names for tie-breaking')
    parser.add_argument('--workers', type=int,
                        help='Worker threads for matching (default: 1)')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Log every hit and miss (DEBUG level)')

    args = parser.parse_args(argv)
    args.config_explicit = args.config is not None
    if args.config is None:
        args.config = Path('config.yaml')

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        settings = resolve_settings(args)
    except ConfigError as e:
        logger.error(str(e))
        return 1

    for key in REQUIRED_PATHS:
        if not settings[key].exists():
            logger.error(f"Input file does not exist: {settings[key]}")
            return 1

    try:
        resolutions = run_match(settings)
    except FatalCatalogError as e:
        logger.error(f"Catalog is corrupt, aborting: {e}")
        return 1

    print_stats(resolutions)
    return 0


if __name__ == '__main__':
    sys.exit(main())
