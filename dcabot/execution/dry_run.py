"""Dry-run execution adapter: builds and signs the order, never sends it."""

import logging

from dcabot.execution.nonce import NonceSource, WallClockNonceSource
from dcabot.execution.signature import sign
from dcabot.execution.submitter import ADD_ORDER_PATH, build_order_body, format_volume
from dcabot.models.execution import Credentials, OrderOutcome, OrderSpec

logger = logging.getLogger(__name__)


def describe_order(order: OrderSpec) -> str:
    """Mirror Kraken's descr.order wording, e.g. 'buy 0.001 XBTEUR @ market'."""
    return (
        f"{order.side} {format_volume(order.volume)} "
        f"{order.pair.query_symbol} @ {order.order_type}"
    )


class DryRunAdapter:
    def __init__(
        self,
        credentials: Credentials | None = None,
        nonce_source: NonceSource | None = None,
    ):
        self.credentials = credentials
        self.nonce_source = nonce_source or WallClockNonceSource()

    def execute(self, order: OrderSpec) -> OrderOutcome:
        """Simulate execution. Signs when a secret is configured so a bad key shows up early."""
        description = describe_order(order)
        if self.credentials is not None and self.credentials.api_secret:
            nonce = self.nonce_source.next_nonce()
            sign(ADD_ORDER_PATH, build_order_body(order, nonce), nonce, self.credentials.api_secret)
        logger.info("DRY-RUN: %s (not sent)", description)
        return OrderOutcome.dry_run(description)
