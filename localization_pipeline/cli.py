"""Command-line interface for the localization pipeline."""

import sys
import json
import asyncio
import argparse
from pathlib import Path
from typing import Any, Dict, List, Optional

from .__version__ import __version__
from .core.errors import LoaderError
from .loaders.factory import create_bucket_loader
from .utils.colors import Colors
from .utils.config import (
    BUCKET_TYPES,
    CONFIG_FILE_NAME,
    Config,
    ConfigValidationError,
    create_default_config,
)
from .utils.key_matching import filter_entries_by_pattern, format_display_value
from .utils.logging import configure_logging


def load_and_validate_config(config_path: Optional[Path] = None, verbose: bool = False) -> Config:
    """
    Load configuration and validate it.

    Args:
        config_path: Config file (default: ./i18n.yml)
        verbose: Whether to print warnings

    Returns:
        Loaded Config object

    Raises:
        ConfigValidationError: If validation fails with errors
    """
    config = Config.from_file(config_path)
    errors, warnings = config.validate()

    if verbose and warnings:
        for warning in warnings:
            print(f"{Colors.warning('⚠️')}  Config warning: {warning}")

    if errors:
        print(f"{Colors.error('❌')} Configuration errors:")
        for error in errors:
            print(f"   • {error}")
        raise ConfigValidationError(errors)

    return config


async def _pull_source_records(
    config: Config,
    bucket_type: Optional[str],
    with_key_filters: bool,
) -> List[Dict[str, Any]]:
    """Pull the source locale of every configured file pattern."""
    results = []

    for bucket in config.get_buckets(bucket_type):
        for path_pattern in bucket.include:
            pipeline = create_bucket_loader(
                bucket.type,
                path_pattern,
                config.locale.source,
                locked_keys=bucket.locked_keys if with_key_filters else None,
                ignored_keys=bucket.ignored_keys if with_key_filters else None,
                locked_patterns=bucket.locked_patterns,
            )
            results.append({
                'bucket': bucket,
                'path': path_pattern,
                'pipeline': pipeline,
                'record': await pipeline.pull(config.locale.source),
            })

    return results


def cmd_init(args):
    """Initialize configuration file."""
    config_path = Path.cwd() / CONFIG_FILE_NAME

    if config_path.exists() and not args.force:
        print(f"{Colors.error('❌')} Config already exists: {config_path}")
        print(f"   Use --force to overwrite")
        return 1

    config = create_default_config(args.type)
    config.save(config_path)

    print(f"{Colors.success('✅')} Created: {config_path}")
    print(f"\n{Colors.bold('Next steps:')}")
    print(f"1. Edit {CONFIG_FILE_NAME} to list your locales and files")
    print(f"2. Run: localization-pipeline show locked-keys")

    return 0


def cmd_show(args):
    """List keys matched by the locked or ignored key patterns."""
    try:
        config = load_and_validate_config(verbose=args.verbose)
    except ConfigValidationError:
        return 1

    try:
        pulled = asyncio.run(_pull_source_records(config, args.bucket, with_key_filters=False))
    except LoaderError as e:
        print(f"{Colors.error('❌')} {e}")
        return 1

    total = 0
    for item in pulled:
        bucket = item['bucket']
        patterns = bucket.locked_keys if args.what == 'locked-keys' else bucket.ignored_keys
        matches = filter_entries_by_pattern(item['record'].items(), patterns)

        print(f"\n{Colors.bold(item['path'])} {Colors.dim(f'({bucket.type})')}")
        if not matches:
            print(f"   {Colors.dim('No matching keys')}")
            continue

        for key, value in matches:
            print(f"   {Colors.info(key)}: {format_display_value(value)}")
        total += len(matches)

    print(f"\n{Colors.success('✅')} {total} {args.what.replace('-', ' ')} found")
    return 0


def cmd_pull(args):
    """Print the translatable records of a locale as JSON."""
    try:
        config = load_and_validate_config(verbose=args.verbose)
    except ConfigValidationError:
        return 1

    locale = args.locale or config.locale.source

    async def _pull() -> Dict[str, Any]:
        records = {}
        for item in await _pull_source_records(config, args.bucket, with_key_filters=True):
            record = item['record']
            if locale != config.locale.source:
                record = await item['pipeline'].pull(locale)
            records[item['path']] = record
        return records

    try:
        records = asyncio.run(_pull())
    except LoaderError as e:
        print(f"{Colors.error('❌')} {e}")
        return 1

    print(json.dumps(records, indent=2, ensure_ascii=False))
    return 0


def main(argv: Optional[List[str]] = None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog='localization-pipeline',
        description='Prepare localization files for translation and inspect what gets translated',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('--verbose', '-v', action='store_true', help='Show detailed output')
    parser.add_argument('--quiet', '-q', action='store_true', help='Only show errors')
    parser.add_argument('--log-file', type=Path, metavar='PATH', help='Also write a debug log to this file')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # init command
    init_parser = subparsers.add_parser('init', help='Initialize configuration file')
    init_parser.add_argument('--type', choices=list(BUCKET_TYPES), default='json',
                             help='Bucket type of the default configuration (default: json)')
    init_parser.add_argument('--force', action='store_true', help='Overwrite existing config')

    # show command
    show_parser = subparsers.add_parser('show', help='Show keys matched by key patterns')
    show_parser.add_argument('what', choices=['locked-keys', 'ignored-keys'], help='Pattern list to apply')
    show_parser.add_argument('--bucket', choices=list(BUCKET_TYPES), help='Only this bucket type')

    # pull command
    pull_parser = subparsers.add_parser('pull', help='Print translatable records as JSON')
    pull_parser.add_argument('--locale', '-l', metavar='CODE', help='Locale to pull (default: source locale)')
    pull_parser.add_argument('--bucket', choices=list(BUCKET_TYPES), help='Only this bucket type')

    args = parser.parse_args(argv)

    configure_logging(verbose=args.verbose, quiet=args.quiet, log_file=args.log_file)

    # Execute command
    if args.command == 'init':
        return cmd_init(args)
    elif args.command == 'show':
        return cmd_show(args)
    elif args.command == 'pull':
        return cmd_pull(args)
    else:
        parser.print_help()
        return 0


if __name__ == '__main__':
    sys.exit(main())
