"""Signed AddOrder submission to Kraken's private REST API."""

import logging
from decimal import Decimal
from urllib.parse import urlencode

import httpx

from dcabot.execution.nonce import NonceSource, WallClockNonceSource
from dcabot.execution.signature import sign
from dcabot.models.execution import Credentials, OrderSpec, RawResponse, SignedRequest

logger = logging.getLogger(__name__)

KRAKEN_BASE_URL = "https://api.kraken.com"
ADD_ORDER_PATH = "/0/private/AddOrder"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded; charset=utf-8"


class SubmissionNotSent(Exception):
    """The request never left this host: no connection, or an unusable URL."""


class SubmissionUncertain(Exception):
    """The POST may or may not have reached the exchange.

    Raised on transport errors and timeouts after the request was started.
    The order's fate is unknown and must be checked by hand, never retried.
    """


def format_volume(volume: Decimal) -> str:
    # Decimal str() switches to exponent form for small values (1E-7)
    return format(volume, "f")


def build_order_body(order: OrderSpec, nonce: str) -> str:
    """Form body with fields in the fixed order nonce, ordertype, pair, type, volume."""
    return urlencode([
        ("nonce", nonce),
        ("ordertype", order.order_type),
        ("pair", order.pair.legacy_symbol),
        ("type", order.side),
        ("volume", format_volume(order.volume)),
    ])


class OrderSubmitter:
    """Builds, signs and posts one market order per call.

    The httpx client may be shared; authentication headers are passed per
    request and never set on the client.
    """

    def __init__(
        self,
        http: httpx.Client,
        credentials: Credentials,
        nonce_source: NonceSource | None = None,
        base_url: str = KRAKEN_BASE_URL,
        timeout: float = 30.0,
    ):
        self.http = http
        self.credentials = credentials
        self.nonce_source = nonce_source or WallClockNonceSource()
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def prepare(self, order: OrderSpec) -> SignedRequest:
        """Take one nonce and sign the order body with it."""
        nonce = self.nonce_source.next_nonce()
        body = build_order_body(order, nonce)
        signature = sign(ADD_ORDER_PATH, body, nonce, self.credentials.api_secret)
        return SignedRequest(path=ADD_ORDER_PATH, body=body, nonce=nonce, signature=signature)

    def _headers(self, signed: SignedRequest) -> dict[str, str]:
        return {
            "API-Key": self.credentials.api_key,
            "API-Sign": signed.signature,
            "Content-Type": FORM_CONTENT_TYPE,
        }

    def submit(self, order: OrderSpec) -> RawResponse:
        """POST the signed order and return the raw status and body."""
        signed = self.prepare(order)
        url = f"{self.base_url}{signed.path}"
        logger.info(
            "Submitting %s %s %s %s (nonce %s)",
            order.order_type, order.side, format_volume(order.volume),
            order.pair.legacy_symbol, signed.nonce,
        )
        try:
            resp = self.http.post(
                url,
                content=signed.body.encode("utf-8"),
                headers=self._headers(signed),
                timeout=self.timeout,
            )
        except (httpx.ConnectError, httpx.UnsupportedProtocol) as e:
            logger.error("AddOrder could not be sent: %s", e)
            raise SubmissionNotSent(f"{type(e).__name__}: {e}") from e
        except httpx.RequestError as e:
            logger.error("AddOrder transport failure, order state unknown: %s", e)
            raise SubmissionUncertain(f"{type(e).__name__}: {e}") from e

        logger.debug("AddOrder returned HTTP %d", resp.status_code)
        return RawResponse(status_code=resp.status_code, body=resp.text)
