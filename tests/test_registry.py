"""
Tests for signature registry lookups.

The HTTP session is mocked; no test touches the network.
"""

from unittest.mock import Mock, patch

import pytest
import requests

from eth_decoder.calldata import FunctionCall, decode_calldata, function_selector
from eth_decoder.calldata.registry import (
    KNOWN_SIGNATURES,
    FourByteRegistry,
    InMemoryResolver,
    resolve_signatures,
)
from eth_decoder.core.config import DEFAULT_REGISTRY_URL, RegistryConfig
from eth_decoder.exceptions import NoSignatureFoundError, SignatureLookupError

TRANSFER_SELECTOR = bytes.fromhex("a9059cbb")
TRANSFER_CALLDATA = "0xa9059cbb" + "00" * 12 + "11" * 20 + "00" * 30 + "03e8"


def registry_response(*signatures: str) -> Mock:
    """Create a mock 4byte.directory response."""
    response = Mock()
    response.raise_for_status.return_value = None
    response.json.return_value = {
        "count": len(signatures),
        "results": [
            {"id": index, "text_signature": text, "hex_signature": "0xa9059cbb"}
            for index, text in enumerate(signatures)
        ],
    }
    return response


@pytest.fixture
def mock_session():
    """Create a mock requests session."""
    return Mock(spec=requests.Session)


@pytest.fixture
def registry(mock_session):
    return FourByteRegistry(timeout=2.5, max_retries=3, backoff_factor=0, session=mock_session)


class TestFourByteRegistry:
    """Test the 4byte.directory client."""

    def test_lookup_returns_candidates_in_order(self, registry, mock_session):
        mock_session.get.return_value = registry_response(
            "transfer(address,uint256)", "many_msg_babbage(bytes1)"
        )

        candidates = registry(TRANSFER_SELECTOR)

        assert candidates == ["transfer(address,uint256)", "many_msg_babbage(bytes1)"]
        mock_session.get.assert_called_once_with(
            DEFAULT_REGISTRY_URL, params={"hex_signature": "0xa9059cbb"}, timeout=2.5
        )

    def test_empty_results(self, registry, mock_session):
        mock_session.get.return_value = registry_response()
        assert registry.lookup(TRANSFER_SELECTOR) == []

    @patch("eth_decoder.calldata.registry.time.sleep")
    def test_retries_transient_failure(self, mock_sleep, registry, mock_session):
        """Test a connection error is retried with backoff."""
        mock_session.get.side_effect = [
            requests.exceptions.ConnectionError("connection reset"),
            registry_response("transfer(address,uint256)"),
        ]

        assert registry(TRANSFER_SELECTOR) == ["transfer(address,uint256)"]
        assert mock_session.get.call_count == 2
        mock_sleep.assert_called_once_with(1)

    @patch("eth_decoder.calldata.registry.time.sleep")
    def test_timeout_on_every_attempt(self, mock_sleep, registry, mock_session):
        """Test a registry that always times out surfaces as a lookup error."""
        mock_session.get.side_effect = requests.exceptions.Timeout("read timed out")

        with pytest.raises(SignatureLookupError, match="after 3 attempts"):
            registry(TRANSFER_SELECTOR)

        assert mock_session.get.call_count == 3
        assert mock_sleep.call_count == 2

    @patch("eth_decoder.calldata.registry.time.sleep")
    def test_http_error_status(self, mock_sleep, registry, mock_session):
        response = Mock()
        response.raise_for_status.side_effect = requests.exceptions.HTTPError("502 Bad Gateway")
        mock_session.get.return_value = response

        with pytest.raises(SignatureLookupError):
            registry(TRANSFER_SELECTOR)

    def test_invalid_json(self, registry, mock_session):
        response = Mock()
        response.raise_for_status.return_value = None
        response.json.side_effect = ValueError("Expecting value")
        mock_session.get.return_value = response

        with pytest.raises(SignatureLookupError, match="invalid JSON"):
            registry(TRANSFER_SELECTOR)

        assert mock_session.get.call_count == 1

    def test_unexpected_payload(self, registry, mock_session):
        response = Mock()
        response.raise_for_status.return_value = None
        response.json.return_value = {"detail": "Not found."}
        mock_session.get.return_value = response

        with pytest.raises(SignatureLookupError, match="Unexpected registry response"):
            registry(TRANSFER_SELECTOR)

    def test_from_config(self):
        config = RegistryConfig(url="https://example.org/sigs/", timeout=1.5, max_retries=2)

        registry = FourByteRegistry.from_config(config)

        assert registry.url == "https://example.org/sigs/"
        assert registry.timeout == 1.5
        assert registry.max_retries == 2

    @patch("eth_decoder.calldata.registry.requests.Session")
    def test_session_per_lookup_without_injection(self, mock_session_cls):
        session = mock_session_cls.return_value.__enter__.return_value
        session.get.return_value = registry_response("transfer(address,uint256)")
        registry = FourByteRegistry(max_retries=1)

        registry(TRANSFER_SELECTOR)
        registry(TRANSFER_SELECTOR)

        assert registry.session is None
        assert mock_session_cls.call_count == 2
        assert session.get.call_count == 2

    def test_invalid_max_retries(self):
        with pytest.raises(ValueError, match="max_retries must be positive"):
            FourByteRegistry(max_retries=0)


class TestDecodeWithRegistry:
    """Test calldata decoding through the registry client."""

    def test_decode_calldata(self, registry, mock_session):
        mock_session.get.return_value = registry_response("transfer(address,uint256)")

        call = decode_calldata(TRANSFER_CALLDATA, registry)

        assert call.name == "transfer"
        assert call.parameter_values[1].value == 1000

    def test_registry_miss_reports_selector_only(self, registry, mock_session):
        mock_session.get.return_value = registry_response()

        call = decode_calldata(TRANSFER_CALLDATA, registry)

        assert call == FunctionCall(selector=TRANSFER_SELECTOR)

    @patch("eth_decoder.calldata.registry.time.sleep")
    def test_registry_outage_is_a_failure(self, mock_sleep, registry, mock_session):
        mock_session.get.side_effect = requests.exceptions.ConnectionError("unreachable")

        with pytest.raises(SignatureLookupError):
            decode_calldata(TRANSFER_CALLDATA, registry)


class TestResolveSignatures:
    """Test the resolver contract."""

    def test_empty_candidates_raise(self):
        with pytest.raises(NoSignatureFoundError) as exc_info:
            resolve_signatures(TRANSFER_SELECTOR, lambda selector: [])
        assert exc_info.value.selector == TRANSFER_SELECTOR

    def test_blank_candidates_are_dropped(self):
        assert resolve_signatures(TRANSFER_SELECTOR, lambda selector: ["", "f()"]) == ["f()"]

    def test_known_signatures_resolve(self):
        resolver = InMemoryResolver.with_known_signatures()
        for signature in KNOWN_SIGNATURES:
            assert signature in resolver(function_selector(signature))
