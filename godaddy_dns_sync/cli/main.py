#!/usr/bin/env python3
"""
GoDaddy DNS Sync - Command Line Interface

Main entry point for listing managed records and applying change files.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

import yaml

from ..core.sync_manager import SyncManager
from ..exceptions import ConfigError, GoDaddyDNSError
from ..parsers.changes import ChangeSetParser

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="GoDaddy DNS Sync - Reconcile DNS records against the GoDaddy API"
    )

    parser.add_argument(
        "--config",
        "-c",
        default="configs/config.yaml",
        help="Configuration file path (default: configs/config.yaml)",
    )

    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose logging"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("records", help="List records of every managed domain")

    apply_parser = subparsers.add_parser("apply", help="Apply a change file")
    apply_parser.add_argument(
        "--changes", "-f", required=True, help="YAML file with create/update/delete lists"
    )
    apply_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be changed without making changes",
    )
    apply_parser.add_argument(
        "--output-file",
        "-o",
        help="File to save dry run output (only used with --dry-run)",
    )

    return parser


def main(argv: Optional[List[str]] = None):
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    if args.command == "apply":
        if args.output_file and not args.dry_run:
            print("Error: --output-file can only be used with --dry-run")
            sys.exit(1)

        if not Path(args.changes).exists():
            print(f"Error: Change file '{args.changes}' not found")
            sys.exit(1)

    try:
        config = load_config(args.config)
        config_logger(config, verbose=args.verbose)
        sync_manager = SyncManager(config)

        if args.command == "records":
            sync_manager.list_records()
            success = True
        else:
            changes = ChangeSetParser(args.changes).parse()
            success = sync_manager.process_changes(
                changes,
                dry_run=args.dry_run,
                output_file=args.output_file if args.dry_run else None,
            )

    except (GoDaddyDNSError, ValueError, OSError) as e:
        print(f"Error: {e}")
        if args.verbose:
            import traceback

            traceback.print_exc()
        sys.exit(1)

    if success:
        print("DNS sync completed successfully")
        sys.exit(0)
    else:
        print("DNS sync failed")
        sys.exit(1)


def load_config(config_path: str) -> Dict:
    """Load configuration from YAML file."""
    try:
        with open(config_path, "r") as f:
            config = yaml.safe_load(f) or {}
        logger.info(f"Configuration loaded from {config_path}")
        return config
    except FileNotFoundError:
        logger.warning(f"Config file {config_path} not found, using defaults")
        return get_default_config()
    except yaml.YAMLError as e:
        raise ConfigError(f"Error parsing config file: {e}")


def get_default_config() -> Dict:
    """Return default configuration."""
    return {
        "dns_providers": {"memory": {}},
        "default_provider": "memory",
        "domain_filter": {"domains": [], "match_all_when_empty": False},
        "reconciler": {"max_workers": 4},
        "logging": {"level": "INFO"},
    }


def config_logger(config: Dict, verbose: bool = False):
    """Configure logging."""
    logging_config = config.get("logging", None) or {}
    log_level = "DEBUG" if verbose else logging_config.get("level", "INFO")
    handlers = [logging.StreamHandler(sys.stdout)]

    log_file = logging_config.get("file")
    if log_file:
        handlers.insert(0, logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )


if __name__ == "__main__":
    main()
