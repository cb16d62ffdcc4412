"""Moodly entry point.

Usage:
    python -m moodly [OPTIONS] COMMAND

Commands:
    insights         Print ranked insights as JSON
    streak           Print current and longest streaks as JSON
    digest PERIOD    Render (and optionally send) a weekly or monthly recap
"""

from pathlib import Path

from dotenv import load_dotenv

# Try to find .env in project root (parent of src/)
_env_file = Path(__file__).parent.parent.parent / ".env"
if _env_file.exists():
    load_dotenv(_env_file)
else:
    load_dotenv()

import argparse
import json
import logging
import sys
from contextlib import ExitStack
from datetime import date

from pymongo.errors import PyMongoError

from . import __version__
from .analytics import calculate_streak, generate_insights
from .config import MoodlyConfig
from .config.loader import load_config
from .config.profiles import detect_profile
from .digest import DigestGenerator, select_periods
from .email import EmailConfig, SMTPEmailSender
from .records import JSONRecordStore, MongoStorageClient, RecordStore, RecordStoreError


def setup_logging(level: str) -> None:
    """Configure logging based on config."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        prog="moodly",
        description="Moodly - insights and streaks for your daily journal",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m moodly insights --records entries.json
  python -m moodly streak --today 2024-01-05
  python -m moodly --profile prod digest auto --send

Environment:
  MOODLY_PROFILE   Set profile (dev, prod, test)
  EMAIL_ADDRESS, SMTP_HOST, SMTP_PORT, SMTP_USER, SMTP_PASS
""",
    )

    parser.add_argument("--config", type=Path, help="Path to YAML config file", metavar="PATH")
    parser.add_argument(
        "--profile",
        choices=["dev", "prod", "test"],
        help="Configuration profile to use",
    )
    parser.add_argument("--log-level", help="Override the configured log level")
    parser.add_argument(
        "--version",
        action="version",
        version=f"Moodly v{__version__}",
    )

    records_parent = argparse.ArgumentParser(add_help=False)
    records_parent.add_argument(
        "--records",
        type=Path,
        metavar="PATH",
        help="Read records from a JSON export instead of MongoDB",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("insights", parents=[records_parent], help="Print ranked insights")

    streak = commands.add_parser("streak", parents=[records_parent], help="Print streaks")
    streak.add_argument(
        "--today",
        type=date.fromisoformat,
        metavar="YYYY-MM-DD",
        help="Reference day for the current streak",
    )

    digest = commands.add_parser("digest", parents=[records_parent], help="Recap email")
    digest.add_argument(
        "period",
        choices=["weekly", "monthly", "auto"],
        help="Recap period; 'auto' follows the report settings",
    )
    digest.add_argument("--today", type=date.fromisoformat, metavar="YYYY-MM-DD")
    digest.add_argument("--send", action="store_true", help="Email the recap")

    return parser


def _open_store(args: argparse.Namespace, config: MoodlyConfig, stack: ExitStack) -> RecordStore:
    if args.records is not None:
        return JSONRecordStore(args.records)

    storage = config.storage
    client = MongoStorageClient(
        uri=storage.uri,
        database_name=storage.database,
        collection_name=storage.collection,
        connect_timeout_ms=storage.connect_timeout_ms,
        server_selection_timeout_ms=storage.server_selection_timeout_ms,
    )
    stack.enter_context(client)
    return client.records


def run_insights(store: RecordStore, config: MoodlyConfig) -> int:
    records = store.get_all()
    insights = generate_insights(records, config.analytics)
    print(json.dumps([insight.to_dict() for insight in insights], indent=2))
    return 0


def run_streak(store: RecordStore, today: date | None) -> int:
    streak = calculate_streak(store.list_dates(), today=today)
    print(json.dumps(streak.to_dict(), indent=2))
    return 0


def run_digest(
    store: RecordStore,
    config: MoodlyConfig,
    period: str,
    today: date | None,
    send: bool,
    logger: logging.Logger,
) -> int:
    periods = select_periods(config.reports, None if period == "auto" else period)
    if not periods:
        logger.info("Nothing to send today")
        return 0

    generator = DigestGenerator(store, config.reports, config.analytics)
    sender: SMTPEmailSender | None = None
    if send:
        email_config = EmailConfig.from_env()
        if email_config is None:
            logger.error("Email is not configured (set EMAIL_ADDRESS and SMTP_* variables)")
            return 1
        sender = SMTPEmailSender(email_config)

    exit_code = 0
    for digest_period in periods:
        report = generator.generate(digest_period, today)
        if report is None:
            logger.info(f"No entries for the {digest_period.value} recap")
            continue

        if sender is None:
            print(report.html)
            continue

        result = sender.send_digest(report)
        if result.success:
            logger.info(f"{digest_period.label} email sent")
        else:
            logger.error(f"{digest_period.label} email failed: {result.error_message}")
            exit_code = 1

    return exit_code


def main(argv: list[str] | None = None) -> int:
    """Main entry point for Moodly.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    args = build_parser().parse_args(argv)

    try:
        if args.config:
            config = load_config(path=args.config)
        else:
            config = load_config(profile=args.profile or detect_profile().value)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (TypeError, ValueError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 1

    setup_logging(args.log_level or config.logging.level)
    logger = logging.getLogger("moodly")
    logger.debug(f"Moodly v{__version__}, command {args.command}")

    try:
        with ExitStack() as stack:
            store = _open_store(args, config, stack)
            if args.command == "insights":
                return run_insights(store, config)
            if args.command == "streak":
                return run_streak(store, args.today)
            return run_digest(store, config, args.period, args.today, args.send, logger)
    except FileNotFoundError as e:
        logger.error(str(e))
        return 1
    except (RecordStoreError, ValueError, KeyError) as e:
        logger.error(f"Invalid records: {e}")
        return 1
    except PyMongoError as e:
        logger.error(f"Record store unavailable: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
