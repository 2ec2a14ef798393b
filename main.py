"""
Entry point for the legacy news migration tool.

Usage::

    python main.py discover --max-page 40 --out data/urls.json
    python main.py extract --max-page 40 --archive data/news_archive.json
    python main.py load --archive data/news_archive.json
    python main.py run --max-page 40 [--dry-run] [--limit 10]
"""

import argparse
import json
import os
import sys

from news_migration.config import DEFAULT_CONFIG_FILE, load_config
from news_migration.migration_tool import NewsMigrationTool
from news_migration.utils.errors import ConfigError, FetchError, PreFlightCheckError, log_message
from news_migration.utils.pre_flight_checks import run_pre_flight_checks


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Migrate legacy news articles into the new content API.")
    parser.add_argument("--config", default=DEFAULT_CONFIG_FILE, help=f"JSON configuration file (default: {DEFAULT_CONFIG_FILE})")
    sub = parser.add_subparsers(dest="command", required=True)

    discover = sub.add_parser("discover", help="List article URLs found on the archive index.")
    discover.add_argument("--max-page", type=int, required=True, help="Last archive page to read.")
    discover.add_argument("--out", default="data/urls.json", help="Output JSON file (default: data/urls.json)")

    extract = sub.add_parser("extract", help="Extract articles into the intermediate archive file.")
    extract.add_argument("--max-page", type=int, required=True, help="Last archive page to read.")
    extract.add_argument("--archive", default=None, help="Archive file (default: migration.archive_file)")

    for name, help_text in (
        ("load", "Transform and load articles from the archive file."),
        ("run", "Discover, extract, transform and load in one pass."),
    ):
        cmd = sub.add_parser(name, help=help_text)
        if name == "load":
            cmd.add_argument("--archive", default=None, help="Archive file (default: migration.archive_file)")
        else:
            cmd.add_argument("--max-page", type=int, required=True, help="Last archive page to read.")
        cmd.add_argument("--dry-run", action="store_true", default=None, help="Transform only; no uploads or creates.")
        cmd.add_argument("--limit", type=int, default=None, help="Migrate at most this many articles.")
        cmd.add_argument("--skip-preflight", action="store_true", help="Do not run the pre-flight checks.")

    return parser.parse_args(argv)


def main(argv=None) -> int:
    """
    Main function to run the legacy news migration tool.
    """
    args = parse_args(argv)
    try:
        config = load_config(config_file=args.config)
        config = config.with_overrides(
            dry_run=getattr(args, "dry_run", None),
            limit=getattr(args, "limit", None),
        )
        tool = NewsMigrationTool(config)
    except ConfigError as e:
        log_message(str(e), level="ERROR")
        return 2
    tool.log_message(f"Starting '{args.command}' against {config.legacy.base_url}")

    try:
        if args.command == "discover":
            urls = tool.discover_urls(args.max_page)
            os.makedirs(os.path.dirname(args.out) or ".", exist_ok=True)
            with open(args.out, "w", encoding="utf-8") as f:
                json.dump(urls, f, ensure_ascii=False, indent=2)
            tool.log_message(f"URLs saved to {args.out} (total: {len(urls)})")
            return 0

        if args.command == "extract":
            tool.extract_to_archive(args.max_page, args.archive)
            return 0

        if not config.migration.dry_run and not args.skip_preflight:
            run_pre_flight_checks(config, tool.session)

        if args.command == "load":
            report = tool.migrate_archive(args.archive)
        else:
            report = tool.run(args.max_page)
    except PreFlightCheckError as e:
        tool.log_message(f"Pre-flight check failed: {e}", level="ERROR")
        return 1
    except FetchError as e:
        tool.log_message(f"Archive discovery aborted: {e}", level="ERROR")
        return 1
    except FileNotFoundError as e:
        tool.log_message(f"Archive file not found: {e}", level="ERROR")
        return 1
    except ValueError as e:
        tool.log_message(f"Invalid input: {e}", level="ERROR")
        return 1

    tool.log_message("Migration process finished.")
    return 1 if report.failed else 0


if __name__ == "__main__":
    sys.exit(main())
