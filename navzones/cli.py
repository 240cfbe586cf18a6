#==============================================================================
# NavZones - Command Line Interface
#==============================================================================
# File: cli.py
# Description: Manage dead zones in a config file and run path queries
#              against a mesh file
# Date: October 2026
#==============================================================================

"""Command line front end: add / remove / list dead zones, query paths."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

import yaml

from .config import ConfigStore, load_or_create_config
from .errors import ValidationError
from .logging_utils import NavLogger
from .navmesh import NavMesh, NavMeshQuery, PathQueryEngine
from .zones import Vector3, ZoneManager

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False, log_file: Optional[str] = None) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO

    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
    )


def component_logger(args: argparse.Namespace, component: str) -> NavLogger:
    """Structured logger for a component, echoing to the console when verbose."""
    return NavLogger(component, log_dir=args.log_dir, console_output=args.verbose)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog='navzones',
        description='Manage navmesh dead zones and run path queries',
    )
    parser.add_argument(
        '--config',
        type=str,
        default='navzones.yaml',
        help='Path to the YAML config holding dead zones',
    )
    parser.add_argument('--verbose', action='store_true', help='Debug logging')
    parser.add_argument('--log-file', type=str, help='Also write logs to this file')
    parser.add_argument('--log-dir', type=str, help='Write structured .jsonl component logs here')

    sub = parser.add_subparsers(dest='command', required=True)

    add = sub.add_parser('add', help='Add a dead zone')
    add.add_argument('--region', type=int, required=True, help='Region key (0-65535)')
    add.add_argument('--at', type=float, nargs=3, required=True, metavar=('X', 'Y', 'Z'),
                     help='Zone centre')
    add.add_argument('--radius', type=str, help='Zone radius (default from config)')

    remove = sub.add_parser('remove', help='Remove a dead zone by index, or all')
    remove.add_argument('--region', type=int, required=True, help='Region key (0-65535)')
    remove.add_argument('selector', help="Zone index or 'all'")

    list_cmd = sub.add_parser('list', help='List dead zones of a region')
    list_cmd.add_argument('--region', type=int, required=True, help='Region key (0-65535)')

    path = sub.add_parser('path', help='Find a path avoiding the region\'s dead zones')
    path.add_argument('--mesh', type=str, required=True, help='Mesh file (YAML or JSON)')
    path.add_argument('--region', type=int, required=True, help='Region key (0-65535)')
    path.add_argument('--start', type=float, nargs=3, required=True, metavar=('X', 'Y', 'Z'))
    path.add_argument('--end', type=float, nargs=3, required=True, metavar=('X', 'Y', 'Z'))
    path.add_argument('--ignore-zones', action='store_true', help='Query without dead zones')

    return parser.parse_args(argv)


def run_zone_command(args: argparse.Namespace, store: ConfigStore) -> int:
    """Run add / remove / list. Returns exit code."""
    manager = ZoneManager(
        store.registry,
        default_radius=store.config.default_radius,
        logger=component_logger(args, ZoneManager.MODULE_NAME),
    )

    if args.command == 'add':
        result = manager.add(args.region, center=Vector3(*args.at), radius=args.radius)
        if result.corrected:
            print(f"Invalid radius value. Using default radius {manager.default_radius:g}.")
    elif args.command == 'remove':
        result = manager.remove(args.region, args.selector)
    else:
        result = manager.list(args.region)

    print(result.message)
    for index, zone in result.entries:
        print(f"  {index}: {zone.describe()}")

    store.flush()
    return 1 if result.status.is_failure else 0


def run_path_query(args: argparse.Namespace, store: ConfigStore) -> int:
    """Run a path query. Returns exit code."""
    try:
        mesh = NavMesh.load(args.mesh)
    except (OSError, ValueError, KeyError) as e:
        logger.error(f"Failed to load mesh {args.mesh}: {e}")
        return 2

    query = NavMeshQuery(
        mesh,
        max_nodes=store.config.query.max_search_nodes,
        logger=component_logger(args, NavMeshQuery.MODULE_NAME),
    )
    engine = PathQueryEngine(
        query,
        half_extents=store.config.query.search_half_extents,
        logger=component_logger(args, PathQueryEngine.MODULE_NAME),
    )
    try:
        zones = () if args.ignore_zones else store.registry.snapshot(args.region)
    except ValidationError as e:
        logger.error(str(e))
        return 2

    result = engine.find_path(args.start, args.end, zones)
    print(json.dumps(result.to_dict(), indent=2))
    return 0 if result.success else 1


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.verbose, args.log_file)

    try:
        config = load_or_create_config(Path(args.config))
        issues = config.validate()
    except (yaml.YAMLError, TypeError, ValueError) as e:
        logger.error(f"Failed to load config {args.config}: {e}")
        return 2
    if issues:
        for issue in issues:
            logger.error(f"Config issue: {issue}")
        return 2

    store = ConfigStore(
        config=config,
        path=Path(args.config),
        logger=component_logger(args, ConfigStore.MODULE_NAME),
    )

    if args.command == 'path':
        return run_path_query(args, store)
    return run_zone_command(args, store)


if __name__ == '__main__':
    sys.exit(main())
