"""Tests for OrderSubmitter with mocked httpx."""

from decimal import Decimal

import httpx
import pytest
import respx

from dcabot.execution.nonce import SequenceNonceSource
from dcabot.execution.signature import InvalidCredentials
from dcabot.execution.submitter import (
    OrderSubmitter,
    SubmissionNotSent,
    SubmissionUncertain,
    build_order_body,
    format_volume,
)
from dcabot.models.execution import Credentials, OrderSpec
from dcabot.models.market import TradingPair
from dcabot.tests.kraken_fixtures import (
    ADD_ORDER_URL,
    BASE_URL,
    TEST_API_KEY,
    TEST_SECRET,
    placed_payload,
)

GOLDEN_BODY = "nonce=1&ordertype=market&pair=XXBTZEUR&type=buy&volume=0.001"
GOLDEN_SIGN = "of2707uXIwACb1kaAq0hoFBx15mC9/AZVngHt0seLtx2Cg2H71hCEyCwmCPZXHbBrhnqVJEtDIyBTXYjOHfdvQ=="


@pytest.fixture
def order() -> OrderSpec:
    return OrderSpec(pair=TradingPair("XBT", "EUR"), volume=Decimal("0.001"))


def _submitter(http, nonces=(1,), secret=TEST_SECRET) -> OrderSubmitter:
    return OrderSubmitter(
        http,
        Credentials(api_key=TEST_API_KEY, api_secret=secret),
        nonce_source=SequenceNonceSource(nonces),
        base_url=BASE_URL,
        timeout=5.0,
    )


class TestOrderBody:
    def test_field_order(self, order):
        assert build_order_body(order, "1") == GOLDEN_BODY

    def test_small_volume_not_exponent(self):
        assert format_volume(Decimal("1E-7")) == "0.0000001"

    def test_pair_uses_legacy_symbol(self):
        order = OrderSpec(pair=TradingPair("XBT", "USD"), volume=Decimal("0.5"))
        assert "pair=XXBTZUSD" in build_order_body(order, "7")


class TestPrepare:
    def test_signed_request(self, http_client, order):
        signed = _submitter(http_client).prepare(order)
        assert signed.path == "/0/private/AddOrder"
        assert signed.nonce == "1"
        assert signed.body == GOLDEN_BODY
        assert signed.signature == GOLDEN_SIGN

    def test_one_nonce_per_order(self, http_client, order):
        submitter = _submitter(http_client, nonces=(10, 11))
        first = submitter.prepare(order)
        second = submitter.prepare(order)
        assert (first.nonce, second.nonce) == ("10", "11")
        assert first.signature != second.signature

    def test_signature_not_in_repr(self, http_client, order):
        assert GOLDEN_SIGN not in repr(_submitter(http_client).prepare(order))

    def test_bad_secret(self, http_client, order):
        with pytest.raises(InvalidCredentials):
            _submitter(http_client, secret="%%%").prepare(order)


class TestSubmit:
    @respx.mock
    def test_posts_signed_form(self, http_client, order):
        route = respx.post(ADD_ORDER_URL).mock(
            return_value=httpx.Response(200, json=placed_payload())
        )
        response = _submitter(http_client).submit(order)

        assert route.call_count == 1
        request = route.calls[0].request
        assert request.content.decode() == GOLDEN_BODY
        assert request.headers["API-Key"] == TEST_API_KEY
        assert request.headers["API-Sign"] == GOLDEN_SIGN
        assert request.headers["Content-Type"].startswith("application/x-www-form-urlencoded")
        assert response.status_code == 200
        assert "ABC123" in response.body

    @respx.mock
    def test_headers_not_left_on_client(self, http_client, order):
        respx.post(ADD_ORDER_URL).mock(return_value=httpx.Response(200, json=placed_payload()))
        _submitter(http_client).submit(order)
        assert "API-Key" not in http_client.headers
        assert "API-Sign" not in http_client.headers

    @respx.mock
    def test_fresh_signature_each_call(self, http_client, order):
        route = respx.post(ADD_ORDER_URL).mock(
            return_value=httpx.Response(200, json=placed_payload())
        )
        submitter = _submitter(http_client, nonces=(1, 2))
        submitter.submit(order)
        submitter.submit(order)
        signs = [call.request.headers["API-Sign"] for call in route.calls]
        assert signs[0] == GOLDEN_SIGN
        assert signs[1] != signs[0]

    @respx.mock
    def test_http_error_returned_raw(self, http_client, order):
        respx.post(ADD_ORDER_URL).mock(return_value=httpx.Response(502, text="Bad Gateway"))
        response = _submitter(http_client).submit(order)
        assert response.status_code == 502
        assert response.body == "Bad Gateway"

    @respx.mock
    def test_timeout_is_uncertain(self, http_client, order):
        respx.post(ADD_ORDER_URL).mock(side_effect=httpx.ReadTimeout("read timed out"))
        with pytest.raises(SubmissionUncertain, match="ReadTimeout"):
            _submitter(http_client).submit(order)

    @respx.mock
    def test_connect_error_not_sent(self, http_client, order):
        respx.post(ADD_ORDER_URL).mock(side_effect=httpx.ConnectError("connection refused"))
        with pytest.raises(SubmissionNotSent, match="ConnectError"):
            _submitter(http_client).submit(order)

    def test_unsupported_scheme_not_sent(self, order):
        with httpx.Client() as http:
            submitter = OrderSubmitter(
                http,
                Credentials(api_key=TEST_API_KEY, api_secret=TEST_SECRET),
                nonce_source=SequenceNonceSource([1]),
                base_url="ftp://kraken.example.com",
            )
            with pytest.raises(SubmissionNotSent, match="UnsupportedProtocol"):
                submitter.submit(order)

    @respx.mock
    def test_dropped_connection_is_uncertain(self, http_client, order):
        respx.post(ADD_ORDER_URL).mock(side_effect=httpx.RemoteProtocolError("peer closed connection"))
        with pytest.raises(SubmissionUncertain):
            _submitter(http_client).submit(order)
