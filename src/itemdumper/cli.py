"""
CLI entry point for itemdumper.

Usage:
    itemdumper --cachedir <dir> --cachename <name> --outputdir <dir>

Reads item records from <cachedir>/<cachename>/cache and writes one JSON file
per item plus the generated ItemID / NullItemID tables to
<outputdir>/<cachename>/items.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from itemdumper import __version__
from itemdumper.cache.archive import DirectoryArchive
from itemdumper.cache.decoder import JsonItemDecoder
from itemdumper.config import DumperConfig, DumperSettings, load_settings
from itemdumper.dumper.exporter import ExportOptions
from itemdumper.dumper.pipeline import DumpOptions, dump_items
from itemdumper.errors import ConfigError, DumperError

logger = logging.getLogger(__name__)


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of exiting the process."""

    def error(self, message):
        raise ConfigError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="itemdumper",
        description="Dump item definitions and id tables from a game cache",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    itemdumper --cachedir caches --cachename 2024-05-01 --outputdir dumps
    itemdumper --cachedir caches --cachename 2024-05-01 --outputdir dumps --workers 4
"""
    )
    parser.add_argument('--version', action='version', version=f'itemdumper {__version__}')
    parser.add_argument('--cachedir', required=True, help='Directory holding cache folders')
    parser.add_argument('--cachename', required=True, help='Name of the cache folder to dump')
    parser.add_argument('--outputdir', required=True, help='Directory to write dumps into')
    parser.add_argument('--config', type=Path, help='YAML settings file')
    parser.add_argument('--workers', type=int, help='Threads used for writing item files')
    parser.add_argument('--lenient', action='store_true',
                        help='Report unresolved item links instead of failing')
    parser.add_argument('--dedupe-names', action='store_true',
                        help='Suffix repeated constant names with the item id')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    return parser


def _to_config(args: argparse.Namespace, settings: DumperSettings) -> DumperConfig:
    for flag in ('cachedir', 'cachename', 'outputdir'):
        if not getattr(args, flag).strip():
            raise ConfigError(f"--{flag} must not be empty")

    overrides = {}
    if args.workers is not None:
        overrides['workers'] = args.workers
    if args.lenient:
        overrides['strict_links'] = False
    if args.dedupe_names:
        overrides['dedupe_names'] = True
    if args.verbose:
        overrides['log_level'] = 'DEBUG'

    return DumperConfig(
        cache_dir=Path(args.cachedir),
        cache_name=args.cachename,
        output_dir=Path(args.outputdir),
        settings=settings.merged(overrides),
    )


def parse_args(argv: List[str], settings: Optional[DumperSettings] = None) -> DumperConfig:
    """
    Turn raw arguments into a validated DumperConfig.

    No files are read and the process is never exited; bad arguments raise
    ConfigError.
    """
    args = build_parser().parse_args(argv)
    return _to_config(args, settings or DumperSettings())


def run(config: DumperConfig) -> int:
    """Run a dump for a validated config. Returns the exit code."""
    options = DumpOptions(
        strict_links=config.settings.strict_links,
        dedupe_names=config.settings.dedupe_names,
        export=ExportOptions(
            workers=config.settings.workers,
            skip_unchanged=config.settings.skip_unchanged,
        ),
    )

    try:
        summary = dump_items(
            DirectoryArchive(config.read_path),
            JsonItemDecoder(),
            config.write_path,
            options,
        )
    except (DumperError, OSError) as e:
        logger.error(f"Dump failed: {e}")
        return 1

    logger.info(f"Done: {summary}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    if argv is None:
        argv = sys.argv[1:]

    try:
        args = build_parser().parse_args(argv)
        config = _to_config(args, load_settings(args.config))
    except ConfigError as e:
        print(f"Error parsing command line options: {e}", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=config.log_level,
        format='%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%H:%M:%S'
    )
    logger.debug(f"Config: {config.to_dict()}")

    return run(config)


if __name__ == "__main__":
    sys.exit(main())
