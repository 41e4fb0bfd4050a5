# -*- coding: utf-8 -*-
"""
Tests for BingX request signing.
"""

import hashlib
import hmac
from unittest.mock import patch
from urllib.parse import parse_qsl

from perp_broker.auth import ApiCredentials, BingXSigner
from perp_broker.constants import API_KEY_HEADER

TIMESTAMP = 1700000000000


def expected_signature(payload: str, secret: str = "test_api_secret_0123456789abcdef") -> str:
    return hmac.new(secret.encode("utf-8"), payload.encode("utf-8"), hashlib.sha256).hexdigest()


class TestSignParams:
    """Test flat-parameter signing."""

    def test_signature_matches_hmac_of_sorted_query(self, signer):
        query = signer.sign_params({"symbol": "BTC-USDT", "leverage": "10"}, timestamp=TIMESTAMP)

        signed_part, signature = query.rsplit("&signature=", 1)
        assert signed_part == f"leverage=10&symbol=BTC-USDT&timestamp={TIMESTAMP}"
        assert signature == expected_signature(signed_part)
        assert len(signature) == 64
        assert signature == signature.lower()

    def test_deterministic_for_same_input(self, signer):
        first = signer.sign_params({"symbol": "BTC-USDT"}, timestamp=TIMESTAMP)
        second = signer.sign_params({"symbol": "BTC-USDT"}, timestamp=TIMESTAMP)

        assert first == second

    def test_insertion_order_does_not_matter(self, signer):
        first = signer.sign_params({"b": "2", "a": "1"}, timestamp=TIMESTAMP)
        second = signer.sign_params({"a": "1", "b": "2"}, timestamp=TIMESTAMP)

        assert first == second

    def test_any_change_alters_signature(self, signer):
        base = signer.sign_params({"symbol": "BTC-USDT", "quantity": "0.1"}, timestamp=TIMESTAMP)
        changed_value = signer.sign_params({"symbol": "BTC-USDT", "quantity": "0.2"}, timestamp=TIMESTAMP)
        changed_time = signer.sign_params({"symbol": "BTC-USDT", "quantity": "0.1"}, timestamp=TIMESTAMP + 1)

        signature = base.rsplit("=", 1)[1]
        assert changed_value.rsplit("=", 1)[1] != signature
        assert changed_time.rsplit("=", 1)[1] != signature

    def test_different_secret_alters_signature(self, signer):
        credentials = signer.credentials
        other = BingXSigner(ApiCredentials(credentials.api_key, credentials.api_secret + "x"))

        assert signer.sign_params({}, timestamp=TIMESTAMP) != other.sign_params({}, timestamp=TIMESTAMP)

    def test_stale_signature_is_never_signed(self, signer):
        query = signer.sign_params({"symbol": "BTC-USDT", "signature": "stale"}, timestamp=TIMESTAMP)

        pairs = parse_qsl(query)
        assert [key for key, _ in pairs].count("signature") == 1
        assert dict(pairs)["signature"] != "stale"
        assert query.endswith("&signature=" + expected_signature(f"symbol=BTC-USDT&timestamp={TIMESTAMP}"))

    def test_timestamp_injected_into_params(self, signer):
        params = {"symbol": "BTC-USDT"}
        signer.sign_params(params, timestamp=TIMESTAMP)

        assert params["timestamp"] == str(TIMESTAMP)

    def test_timestamp_defaults_to_now(self, signer):
        with patch("perp_broker.auth.time.time", return_value=1700000000.5):
            query = signer.sign_params()

        assert query.startswith("timestamp=1700000000500&signature=")

    def test_values_are_url_encoded(self, signer):
        query = signer.sign_params({"clientOrderId": "a b&c"}, timestamp=TIMESTAMP)

        signed_part = query.rsplit("&signature=", 1)[0]
        assert signed_part == f"clientOrderId=a+b%26c&timestamp={TIMESTAMP}"


class TestSignPayloadParams:
    """Test signing of parameters that embed JSON documents."""

    def test_signs_raw_string_and_sends_encoded_query(self, signer):
        stop_loss = '{"type":"STOP","stopPrice":29000.0}'
        query = signer.sign_payload_params(
            {"symbol": "BTC-USDT", "stopLoss": stop_loss}, timestamp=TIMESTAMP
        )

        raw = f"stopLoss={stop_loss}&symbol=BTC-USDT&timestamp={TIMESTAMP}"
        assert query.endswith("&signature=" + expected_signature(raw))
        assert "%7B%22type%22%3A%22STOP%22" in query
        assert dict(parse_qsl(query))["stopLoss"] == stop_loss

    def test_matches_flat_routine_when_nothing_needs_escaping(self, signer):
        params = {"symbol": "BTC-USDT", "quantity": "0.10000000"}

        assert signer.sign_payload_params(dict(params), timestamp=TIMESTAMP) == \
            signer.sign_params(dict(params), timestamp=TIMESTAMP)


class TestAuthHeaders:
    """Test header generation."""

    def test_api_key_header(self, signer):
        assert signer.get_auth_headers() == {API_KEY_HEADER: signer.credentials.api_key}
