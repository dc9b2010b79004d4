"""Order, request and outcome models."""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import StrEnum

from dcabot.models.market import TradingPair


class OutcomeStatus(StrEnum):
    SKIPPED = "SKIPPED"
    PLACED = "PLACED"
    FAILED = "FAILED"
    AMBIGUOUS = "AMBIGUOUS"
    DRY_RUN = "DRY_RUN"


@dataclass(frozen=True)
class Credentials:
    api_key: str = field(repr=False)
    api_secret: str = field(repr=False)


@dataclass(frozen=True)
class OrderSpec:
    pair: TradingPair
    volume: Decimal
    side: str = "buy"
    order_type: str = "market"


@dataclass(frozen=True)
class SignedRequest:
    path: str
    body: str
    nonce: str
    signature: str = field(repr=False)


@dataclass(frozen=True)
class RawResponse:
    status_code: int
    body: str


@dataclass(frozen=True)
class OrderOutcome:
    """Result of one invocation.

    Exactly one of the optional groups is populated, depending on status:
    SKIPPED carries the observed price and threshold, PLACED the order
    description and transaction id, DRY_RUN the description, and
    FAILED/AMBIGUOUS a reason.
    """

    status: OutcomeStatus
    observed_price: Decimal | None = None
    threshold: Decimal | None = None
    description: str = ""
    transaction_id: str = ""
    reason: str = ""

    @classmethod
    def skipped(cls, observed_price: Decimal, threshold: Decimal) -> "OrderOutcome":
        return cls(OutcomeStatus.SKIPPED, observed_price=observed_price, threshold=threshold)

    @classmethod
    def placed(cls, description: str, transaction_id: str) -> "OrderOutcome":
        return cls(OutcomeStatus.PLACED, description=description, transaction_id=transaction_id)

    @classmethod
    def failed(cls, reason: str) -> "OrderOutcome":
        return cls(OutcomeStatus.FAILED, reason=reason)

    @classmethod
    def ambiguous(cls, reason: str) -> "OrderOutcome":
        return cls(OutcomeStatus.AMBIGUOUS, reason=reason)

    @classmethod
    def dry_run(cls, description: str) -> "OrderOutcome":
        return cls(OutcomeStatus.DRY_RUN, description=description)
