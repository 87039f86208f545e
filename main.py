import argparse
import logging
import sys
from typing import Optional, Sequence, TextIO

import structlog

from config import ENVIRONMENTS, Settings, get_settings, get_settings_for_environment
from feed import CsvTransactionFeed, MalformedFeedError, write_client_records
from ledger import Ledger
from models import ProcessingSummary
from services import TransactionService

logger = structlog.get_logger()


def configure_logging(settings: Settings) -> None:
    """Send structured logs to stderr; stdout is reserved for the report."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=settings.log_level.upper(),
        force=True,
    )

    if settings.log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        # Debug runs keep loggers reconfigurable, e.g. for log capture in tests
        cache_logger_on_first_use=not settings.debug,
    )


def run(source: TextIO, output: TextIO, settings: Settings) -> ProcessingSummary:
    """Apply every record of ``source`` and write the account report to ``output``."""
    ledger = Ledger()
    service = TransactionService(ledger, detailed_logging=settings.enable_detailed_logging)
    feed = CsvTransactionFeed(source)

    service.process(feed)
    write_client_records(ledger.snapshot(), output)

    return service.summary(records_rejected=feed.rejected_count)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="transaction-ledger",
        description="Apply a CSV feed of client transactions and print the final account balances as CSV."
    )
    parser.add_argument("transactions", help="Path to the transactions CSV file")
    parser.add_argument(
        "--env",
        choices=sorted(ENVIRONMENTS),
        default=None,
        help="Settings preset to use (defaults to environment variables / .env)"
    )
    parser.add_argument("--log-level", default=None, help="Override the configured log level")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    settings = get_settings_for_environment(args.env) if args.env else get_settings()
    if args.log_level:
        settings = settings.model_copy(update={"log_level": args.log_level})
    configure_logging(settings)

    logger.info(
        "Starting transaction run",
        app=settings.app_name,
        version=settings.app_version,
        path=args.transactions
    )

    try:
        # undecodable bytes become U+FFFD so the row fails validation on its own
        with open(args.transactions, newline="", encoding="utf-8-sig", errors="replace") as source:
            summary = run(source, sys.stdout, settings)
    except (OSError, MalformedFeedError) as e:
        logger.error("Cannot read transaction feed", path=args.transactions, error=str(e))
        return 1

    sys.stdout.flush()
    logger.info("Transaction run finished", **summary.model_dump())

    if settings.fail_on_rejected_rows and summary.records_rejected:
        logger.error("Transaction feed had rejected rows", records_rejected=summary.records_rejected)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
