"""
0x Swap API Client

REST API client for the 0x Swap API (v2, Permit2 flavour).
Each call is a single GET request: no retries, timeouts come from httpx.
"""

import logging
from typing import Optional, Dict, Any

import httpx

from ...errors import ConfigurationError, QuoteUnavailable
from ...config import config as global_config

from .constants import (
    PRICE_ENDPOINT,
    QUOTE_ENDPOINT,
    SOURCES_ENDPOINT,
    API_KEY_HEADER,
    API_VERSION_HEADER,
    DEFAULT_API_VERSION,
)

logger = logging.getLogger(__name__)


class ZeroExAPI:
    """
    0x Swap API client

    Provides raw JSON access to:
    - /swap/permit2/price   indicative price
    - /swap/permit2/quote   firm quote with transaction and permit2 payload
    - /sources              liquidity sources for a chain

    Usage:
        api = ZeroExAPI(api_key="...")
        price = api.get_price({"chainId": "8453", ...})

    Note:
        Requires a 0x API key. Set ZEROEX_API_KEY environment variable.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        api_version: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        """
        Initialize 0x API client

        Args:
            api_key: 0x API key (or set ZEROEX_API_KEY env var)
            base_url: API base URL
            api_version: Value of the 0x-version header
            timeout: Request timeout in seconds
        """
        self._api_key = api_key or global_config.zeroex.api_key
        self._base_url = (base_url or global_config.zeroex.base_url).rstrip("/")
        self._api_version = api_version or global_config.zeroex.api_version or DEFAULT_API_VERSION
        self._timeout = timeout or global_config.zeroex.timeout
        self._client: Optional[httpx.Client] = None

        if not self._api_key:
            raise ConfigurationError.missing(
                "ZEROEX_API_KEY",
                "0x API key is required. Set ZEROEX_API_KEY environment variable."
            )

    def _get_client(self) -> httpx.Client:
        """Get or create HTTP client with auth headers"""
        if self._client is None:
            self._client = httpx.Client(
                timeout=self._timeout,
                headers={
                    "Accept": "application/json",
                    API_KEY_HEADER: self._api_key,
                    API_VERSION_HEADER: self._api_version,
                },
            )
        return self._client

    def _build_url(self, endpoint: str) -> str:
        """Build full API URL"""
        return f"{self._base_url}/{endpoint}"

    def _get(self, endpoint: str, params: Dict[str, str]) -> Dict[str, Any]:
        """
        Issue one GET request and decode the JSON body

        Raises:
            QuoteUnavailable: On transport errors, non-2xx status or non-JSON body
        """
        client = self._get_client()
        url = self._build_url(endpoint)

        try:
            response = client.get(url, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            reason = _extract_error_message(e.response)
            logger.warning(f"0x API error on /{endpoint}: HTTP {e.response.status_code} {reason}")
            raise QuoteUnavailable.http_error(endpoint, e.response.status_code, reason) from e
        except httpx.RequestError as e:
            logger.warning(f"0x API request error on /{endpoint}: {e}")
            raise QuoteUnavailable.request_failed(endpoint, e) from e

        try:
            data = response.json()
        except ValueError as e:
            raise QuoteUnavailable.invalid_response(endpoint, "body is not JSON", e) from e

        if not isinstance(data, dict):
            raise QuoteUnavailable.invalid_response(endpoint, "body is not a JSON object")
        return data

    def get_price(self, params: Dict[str, str]) -> Dict[str, Any]:
        """GET /swap/permit2/price"""
        return self._get(PRICE_ENDPOINT, params)

    def get_quote(self, params: Dict[str, str]) -> Dict[str, Any]:
        """GET /swap/permit2/quote"""
        return self._get(QUOTE_ENDPOINT, params)

    def get_sources(self, chain_id: int) -> Dict[str, Any]:
        """GET /sources"""
        return self._get(SOURCES_ENDPOINT, {"chainId": str(chain_id)})

    def close(self):
        """Close HTTP client"""
        if self._client:
            self._client.close()
            self._client = None

    def __enter__(self) -> "ZeroExAPI":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __repr__(self) -> str:
        return f"ZeroExAPI(base_url={self._base_url}, version={self._api_version})"


def _extract_error_message(response: httpx.Response) -> str:
    """Best-effort human-readable reason from an error response"""
    try:
        error_data = response.json()
    except ValueError:
        return response.text[:500] if response.text else f"HTTP {response.status_code}"

    if isinstance(error_data, dict):
        for key in ("message", "name", "error", "description"):
            if error_data.get(key):
                return str(error_data[key])
    return str(error_data)[:500]
