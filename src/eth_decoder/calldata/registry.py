"""
Function signature resolution.

A signature resolver is any callable mapping a 4-byte selector to a ranked
list of candidate text signatures ("name(type,...)"); index 0 is the primary
candidate and an empty list means "not found". The calldata decoder only
depends on that contract, so tests and offline tools can inject a
deterministic resolver instead of the network registry.

Resolvers provided here:
- FourByteRegistry: queries the public 4byte.directory API over HTTP
- InMemoryResolver: looks selectors up in a local table

Usage:
    from eth_decoder.calldata.registry import FourByteRegistry

    registry = FourByteRegistry(timeout=5.0)
    candidates = registry(bytes.fromhex("a9059cbb"))
"""

import logging
import time
from typing import Any, Callable, Iterable

import requests

from ..core.config import DEFAULT_REGISTRY_URL, RegistryConfig
from ..exceptions import NoSignatureFoundError, SignatureLookupError
from .signature import function_selector

logger = logging.getLogger(__name__)

SignatureResolver = Callable[[bytes], list[str]]

# Signatures shipped for offline use, keyed by selector
KNOWN_SIGNATURES = [
    "transfer(address,uint256)",
    "transferFrom(address,address,uint256)",
    "approve(address,uint256)",
    "setApprovalForAll(address,bool)",
    "safeTransferFrom(address,address,uint256)",
    "safeTransferFrom(address,address,uint256,bytes)",
    "permit(address,address,uint256,uint256,uint256,uint8,bytes32,bytes32)",
    "multicall(bytes[])",
    "swapExactTokensForTokens(uint256,uint256,address[],address,uint256)",
    "swapExactETHForTokens(uint256,address[],address,uint256)",
]


class FourByteRegistry:
    """
    Signature lookup against the 4byte.directory REST API.

    Implements exponential backoff for transient HTTP failures. Every request
    carries a timeout, so a stalled registry surfaces as SignatureLookupError
    rather than a hang.

    Without an injected session each lookup opens its own requests.Session,
    so one client can be shared across threads. An injected session is used
    for every lookup and must not be shared between threads.
    """

    def __init__(
        self,
        url: str = DEFAULT_REGISTRY_URL,
        timeout: float = 10.0,
        max_retries: int = 3,
        backoff_factor: float = 2.0,
        session: requests.Session | None = None,
    ):
        """
        Initialize the registry client.

        Args:
            url: Signature search endpoint
            timeout: Request timeout in seconds
            max_retries: Maximum number of attempts per lookup
            backoff_factor: Exponential backoff multiplier (delay = backoff_factor^attempt)
            session: Optional requests session reused by every lookup (a
                short-lived one is opened per lookup if None)
        """
        if max_retries <= 0:
            raise ValueError(f"max_retries must be positive, got {max_retries}")

        self.url = url
        self.timeout = timeout
        self.max_retries = max_retries
        self.backoff_factor = backoff_factor
        self.session = session

    @classmethod
    def from_config(cls, config: RegistryConfig) -> "FourByteRegistry":
        """Create a registry client from the registry section of the config."""
        return cls(
            url=config.url,
            timeout=config.timeout,
            max_retries=config.max_retries,
            backoff_factor=config.backoff_factor,
        )

    def __call__(self, selector: bytes) -> list[str]:
        return self.lookup(selector)

    def lookup(self, selector: bytes) -> list[str]:
        """
        Fetch candidate signatures for a selector.

        Args:
            selector: 4-byte function selector

        Returns:
            Candidate text signatures in registry order (empty if unknown)

        Raises:
            SignatureLookupError: If the registry cannot be reached, times out
                on every attempt, or returns an unexpected payload
        """
        hex_selector = "0x" + selector.hex()
        logger.debug(f"Looking up signature for {hex_selector}")

        payload = self.retry_with_backoff(self._fetch, hex_selector)
        candidates = self._parse_response(payload, hex_selector)

        logger.info(f"Registry returned {len(candidates)} signatures for {hex_selector}")
        return candidates

    def retry_with_backoff(self, func: Callable[..., Any], *args: Any) -> Any:
        """
        Execute function with exponential backoff retry logic.

        Raises:
            SignatureLookupError: If all retries fail
        """
        last_exception: Exception | None = None

        for attempt in range(self.max_retries):
            try:
                return func(*args)

            except requests.exceptions.RequestException as e:
                last_exception = e

                if attempt < self.max_retries - 1:
                    delay = self.backoff_factor**attempt
                    logger.warning(
                        f"Registry request failed (attempt {attempt + 1}/{self.max_retries}): {e}. "
                        f"Retrying in {delay:.2f} seconds..."
                    )
                    time.sleep(delay)
                else:
                    logger.error(
                        f"Registry request failed after {self.max_retries} attempts: {e}"
                    )

        raise SignatureLookupError(
            f"Signature registry unavailable after {self.max_retries} attempts: "
            f"{last_exception}"
        ) from last_exception

    def _fetch(self, hex_selector: str) -> Any:
        if self.session is not None:
            response = self._get(self.session, hex_selector)
        else:
            with requests.Session() as session:
                response = self._get(session, hex_selector)
        response.raise_for_status()
        try:
            return response.json()
        except ValueError as e:
            raise SignatureLookupError(
                f"Registry returned invalid JSON for {hex_selector}: {e}"
            ) from e

    def _get(self, session: requests.Session, hex_selector: str) -> requests.Response:
        return session.get(self.url, params={"hex_signature": hex_selector}, timeout=self.timeout)

    @staticmethod
    def _parse_response(payload: Any, hex_selector: str) -> list[str]:
        if not isinstance(payload, dict) or not isinstance(payload.get("results"), list):
            raise SignatureLookupError(
                f"Unexpected registry response for {hex_selector}: {payload!r}"
            )

        candidates = []
        for result in payload["results"]:
            text = result.get("text_signature") if isinstance(result, dict) else None
            if text:
                candidates.append(text)
        return candidates


class InMemoryResolver:
    """Resolve selectors from a fixed set of text signatures."""

    def __init__(self, signatures: Iterable[str] = ()):
        self._table: dict[bytes, list[str]] = {}
        for signature in signatures:
            self.add(signature)

    @classmethod
    def with_known_signatures(cls) -> "InMemoryResolver":
        return cls(KNOWN_SIGNATURES)

    def add(self, signature: str) -> bytes:
        """Register a signature and return its selector."""
        signature = signature.replace(" ", "")
        selector = function_selector(signature)
        candidates = self._table.setdefault(selector, [])
        if signature not in candidates:
            candidates.append(signature)
        return selector

    def __call__(self, selector: bytes) -> list[str]:
        return list(self._table.get(selector, []))


def resolve_signatures(selector: bytes, resolver: SignatureResolver) -> list[str]:
    """
    Ask a resolver for candidates, requiring at least one.

    Raises:
        NoSignatureFoundError: If the resolver has no candidate
        SignatureLookupError: Propagated from the resolver
    """
    candidates = [c for c in resolver(selector) if c]
    if not candidates:
        raise NoSignatureFoundError(selector)
    return candidates
