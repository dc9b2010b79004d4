"""CLI entry point for the DCA buyer."""

import argparse
import logging
import sys

import httpx

from dcabot.config.loader import ConfigurationError, get_config_value, load_config, redacted_dump
from dcabot.config.schema import ExecutionMode
from dcabot.execution.signature import InvalidCredentials
from dcabot.ingest.market_data import MarketDataClient, MarketDataError
from dcabot.models.execution import OutcomeStatus
from dcabot.pipeline.purchase_pipeline import PurchasePipeline, trading_pair
from dcabot.reporting.formatters import format_outcome_json, format_outcome_text

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_AMBIGUOUS = 2
EXIT_ABORTED = 3

EXIT_CODES = {
    OutcomeStatus.SKIPPED: EXIT_OK,
    OutcomeStatus.PLACED: EXIT_OK,
    OutcomeStatus.DRY_RUN: EXIT_OK,
    OutcomeStatus.FAILED: EXIT_FAILED,
    OutcomeStatus.AMBIGUOUS: EXIT_AMBIGUOUS,
}


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="dcabot",
        description="Price-capped recurring Bitcoin buyer for Kraken",
    )
    parser.add_argument(
        "--config", default=None, help="Config YAML path (environment overrides it)"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command")

    # run
    run_p = sub.add_parser("run", help="Check price and buy if at or below threshold")
    run_p.add_argument(
        "--live", action="store_true", help="Send the order (default is dry-run)"
    )
    run_p.add_argument("--json", action="store_true", help="Print outcome as JSON")

    # price
    sub.add_parser("price", help="Show the last trade price")

    # config show / config get
    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Display current config (secrets masked)")
    get_p = config_sub.add_parser("get", help="Get a config value")
    get_p.add_argument("key", help="Dotted key, e.g. purchase.price_threshold")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config)
    except ConfigurationError as e:
        logger.error("%s", e)
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_ABORTED

    if args.command == "run":
        return _cmd_run(config, args)
    elif args.command == "price":
        return _cmd_price(config)
    elif args.command == "config":
        return _cmd_config(config, args)
    else:
        parser.print_help()
        return 1


def _cmd_run(config, args) -> int:
    if args.live:
        config = config.model_copy(
            update={"execution": config.execution.model_copy(update={"mode": ExecutionMode.LIVE})}
        )
        creds = config.credentials
        if not (creds.api_key.get_secret_value() and creds.api_secret.get_secret_value()):
            print(
                "Configuration error: --live requires KRAKEN_API_KEY and KRAKEN_PRIVATE_KEY",
                file=sys.stderr,
            )
            return EXIT_ABORTED
    if config.execution.mode == ExecutionMode.LIVE:
        logger.warning("LIVE mode: a real order will be sent if the price qualifies")

    try:
        outcome = PurchasePipeline(config).run()
    except MarketDataError as e:
        logger.error("Failed to retrieve price, no order placed: %s", e)
        return EXIT_ABORTED
    except InvalidCredentials as e:
        logger.error("Cannot sign order, no order placed: %s", e)
        return EXIT_ABORTED

    print(format_outcome_json(outcome) if args.json else format_outcome_text(outcome))
    return EXIT_CODES[outcome.status]


def _cmd_price(config) -> int:
    pair = trading_pair(config)
    with httpx.Client() as http:
        client = MarketDataClient(
            http, base_url=config.exchange.base_url, timeout=config.exchange.timeout_seconds,
        )
        try:
            snapshot = client.fetch_last_price(pair)
        except MarketDataError as e:
            print(f"Error: {e}", file=sys.stderr)
            return EXIT_ABORTED
    threshold = config.purchase.price_threshold
    print(f"{pair}: {snapshot.last_trade_price} (threshold {threshold})")
    return 0


def _cmd_config(config, args) -> int:
    if args.config_command == "show":
        print(redacted_dump(config))
        return 0
    elif args.config_command == "get":
        try:
            value = get_config_value(config, args.key)
        except (KeyError, AttributeError) as e:
            print(f"Error: {e}")
            return 1
        print(value)
        return 0
    else:
        print("Use: config show | config get KEY")
        return 1
