"""Purchase pipeline: one price check and at most one market buy."""

import logging
import time
import uuid

import httpx

from dcabot.config.loader import config_hash
from dcabot.config.schema import BotConfig, ExecutionMode
from dcabot.execution.classifier import classify
from dcabot.execution.dry_run import DryRunAdapter
from dcabot.execution.nonce import NonceSource
from dcabot.execution.submitter import OrderSubmitter, SubmissionNotSent, SubmissionUncertain
from dcabot.ingest.market_data import MarketDataClient
from dcabot.models.execution import Credentials, OrderOutcome, OrderSpec, OutcomeStatus
from dcabot.models.market import TradingPair
from dcabot.models.signal import Intent
from dcabot.signal.intent import decide

logger = logging.getLogger(__name__)


def trading_pair(config: BotConfig) -> TradingPair:
    return TradingPair(base=config.purchase.base_asset, quote=config.purchase.quote_currency)


def credentials(config: BotConfig) -> Credentials:
    return Credentials(
        api_key=config.credentials.api_key.get_secret_value(),
        api_secret=config.credentials.api_secret.get_secret_value(),
    )


class PurchasePipeline:
    """Runs one invocation: fetch price, decide, submit once, classify.

    Price-fetch errors (MarketDataError) and InvalidCredentials propagate;
    both happen before any order is sent. Everything after the POST is
    started is reported as an OrderOutcome.
    """

    def __init__(
        self,
        config: BotConfig,
        http_client: httpx.Client | None = None,
        nonce_source: NonceSource | None = None,
    ):
        self.config = config
        self.http_client = http_client
        self.nonce_source = nonce_source

    def run(self) -> OrderOutcome:
        run_id = str(uuid.uuid4())[:8]
        start_time = time.monotonic()
        owns_client = self.http_client is None
        http = self.http_client or httpx.Client()
        try:
            outcome = self._run(http, run_id)
        finally:
            if owns_client:
                http.close()
        logger.info(
            "Run %s finished: %s in %.2fs",
            run_id, outcome.status, time.monotonic() - start_time,
        )
        return outcome

    def _run(self, http: httpx.Client, run_id: str) -> OrderOutcome:
        cfg = self.config
        pair = trading_pair(cfg)
        threshold = cfg.purchase.price_threshold
        mode = cfg.execution.mode
        logger.info(
            "Run %s starting (%s, pair %s, config %s)", run_id, mode, pair, config_hash(cfg),
        )

        market = MarketDataClient(
            http, base_url=cfg.exchange.base_url, timeout=cfg.exchange.timeout_seconds,
        )
        snapshot = market.fetch_last_price(pair)
        price = snapshot.last_trade_price

        if decide(price, threshold) == Intent.SKIP:
            logger.info("Price %s is above threshold %s. No order placed.", price, threshold)
            return OrderOutcome.skipped(observed_price=price, threshold=threshold)

        logger.info("Price %s is at or below threshold %s, buying", price, threshold)
        order = OrderSpec(pair=pair, volume=cfg.purchase.quantity_to_buy)

        if mode == ExecutionMode.DRY_RUN:
            return DryRunAdapter(credentials(cfg), self.nonce_source).execute(order)

        submitter = OrderSubmitter(
            http,
            credentials(cfg),
            nonce_source=self.nonce_source,
            base_url=cfg.exchange.base_url,
            timeout=cfg.exchange.timeout_seconds,
        )
        try:
            response = submitter.submit(order)
        except SubmissionNotSent as e:
            logger.error("Order was not sent: %s", e)
            return OrderOutcome.failed(f"not sent: {e}")
        except SubmissionUncertain as e:
            logger.warning(
                "Order submission outcome unknown, verify on the exchange before rerunning: %s", e,
            )
            return OrderOutcome.ambiguous(str(e))

        outcome = classify(response.status_code, response.body)
        if outcome.status == OutcomeStatus.PLACED:
            logger.info("Successfully placed order: %s", outcome.description)
            logger.info("Transaction ID: %s", outcome.transaction_id)
        else:
            logger.error("Failed to place order: %s", outcome.reason)
        return outcome
