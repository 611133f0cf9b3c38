#!/usr/bin/env python3
"""
Configuration update tool
Changes data file names and list limits in the Travel List config file.
"""

import argparse
import json
import sys
from typing import Dict, List, Optional

from colorama import Fore, init

from app.config import DEFAULT_CONFIG_PATH, ConfigManager
from app.log import setup_logging

init(autoreset=True)


def positive_int(value: str) -> int:
    """argparse type for limits that must be at least 1."""
    try:
        number = int(value)
    except ValueError:
        number = 0
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be a positive number, got '{value}'")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Update the Travel List configuration',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python3 update_config.py --cities-file data_example.json
  python3 update_config.py --max-cities 15
  python3 update_config.py --show
        """
    )
    parser.add_argument(
        '--config', '-c',
        default=DEFAULT_CONFIG_PATH,
        help='Path to config file (default: config/database.json)'
    )
    parser.add_argument(
        '--cities-file',
        metavar='FILENAME',
        help='Set the cities data file name (e.g., data.json)'
    )
    parser.add_argument(
        '--users-file',
        metavar='FILENAME',
        help='Set the users data file name (e.g., users.json)'
    )
    parser.add_argument(
        '--max-cities',
        type=positive_int,
        metavar='N',
        help='Set maximum cities per user (default: 10)'
    )
    parser.add_argument(
        '--max-attractions',
        type=positive_int,
        metavar='N',
        help='Set maximum attractions per city (default: 5)'
    )
    parser.add_argument(
        '--max-restaurants',
        type=positive_int,
        metavar='N',
        help='Set maximum restaurants per city (default: 5)'
    )
    parser.add_argument(
        '--show',
        action='store_true',
        help='Show current configuration'
    )
    return parser


def collect_updates(args: argparse.Namespace) -> Dict:
    """Translate parsed options into a partial config for ``update_config``."""
    updates: Dict = {}
    if args.cities_file:
        updates.setdefault('files', {})['cities'] = args.cities_file
    if args.users_file:
        updates.setdefault('files', {})['users'] = args.users_file
    if args.max_cities is not None:
        updates.setdefault('defaults', {})['maxCitiesPerUser'] = args.max_cities
    if args.max_attractions is not None:
        updates.setdefault('defaults', {})['maxAttractionsPerCity'] = args.max_attractions
    if args.max_restaurants is not None:
        updates.setdefault('defaults', {})['maxRestaurantsPerCity'] = args.max_restaurants
    return updates


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point.  Returns the process exit code."""
    setup_logging('WARNING')
    parser = build_parser()
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        parser.print_help()
        return 0
    args = parser.parse_args(argv)

    manager = ConfigManager(args.config)
    if args.show:
        print(f"{Fore.CYAN}Current Configuration:")
        print(json.dumps(manager.get_config(), indent=2))
        return 0

    updates = collect_updates(args)
    if not updates:
        parser.print_help()
        return 0

    try:
        manager.update_config(updates)
    except OSError as e:
        print(f"{Fore.RED}Error updating config: {e}")
        return 1

    print(f"{Fore.GREEN}Configuration updated successfully!")
    print(f"{Fore.CYAN}New configuration:")
    print(json.dumps(manager.get_config(), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
