"""
Quote Module

Builds 0x query parameters and parses price/quote responses into typed
PriceQuote / SwapQuote objects.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List

from ..types import QuoteParams, PriceQuote, SwapQuote
from ..errors import ConfigurationError, QuoteUnavailable
from ..protocols.zeroex import ZeroExAPI, PRICE_ENDPOINT, QUOTE_ENDPOINT, SOURCES_ENDPOINT

if TYPE_CHECKING:
    from ..infra.chain_client import ChainClient

logger = logging.getLogger(__name__)


class QuoteService:
    """
    Price discovery and quote firming against the 0x API

    The taker and chain are taken from the injected ChainClient so the
    quote always matches the account that will sign it.

    Usage:
        quotes = QuoteService(chain, api, sell_token=weth, buy_token=usdc)
        price = quotes.fetch_price(10**17, fee_bps=0, surplus_collection=True)
        quote = quotes.fetch_quote(price.params)
    """

    def __init__(
        self,
        chain: "ChainClient",
        api: ZeroExAPI,
        sell_token: str,
        buy_token: str,
    ):
        """
        Initialize quote service

        Args:
            chain: ChainClient providing taker address and chain ID
            api: 0x API client
            sell_token: Sell token address
            buy_token: Buy token address
        """
        self._chain = chain
        self._api = api
        self._sell_token = sell_token
        self._buy_token = buy_token

    @property
    def sell_token(self) -> str:
        return self._sell_token

    @property
    def buy_token(self) -> str:
        return self._buy_token

    def build_params(
        self,
        sell_amount: int,
        fee_bps: int = 0,
        surplus_collection: bool = True,
    ) -> QuoteParams:
        """
        Build the parameter set shared by price and quote requests

        Args:
            sell_amount: Sell amount in base units
            fee_bps: Affiliate fee in basis points
            surplus_collection: Enable surplus collection
        """
        if sell_amount <= 0:
            raise ConfigurationError.invalid("sell_amount", f"must be positive, got {sell_amount}")
        return QuoteParams(
            chain_id=self._chain.chain_id,
            sell_token=self._sell_token,
            buy_token=self._buy_token,
            sell_amount=sell_amount,
            taker=self._chain.address,
            affiliate_fee_bps=fee_bps,
            surplus_collection=surplus_collection,
        )

    def fetch_price(
        self,
        sell_amount: int,
        fee_bps: int = 0,
        surplus_collection: bool = True,
    ) -> PriceQuote:
        """
        Get an indicative price

        Returns:
            PriceQuote carrying the params it was requested with

        Raises:
            QuoteUnavailable: On network, HTTP or parse errors
        """
        params = self.build_params(sell_amount, fee_bps, surplus_collection)
        logger.debug(f"Fetching price: {params.to_query()}")

        data = self._api.get_price(params.to_query())
        price = PriceQuote.from_response(data, params, PRICE_ENDPOINT)

        logger.info(f"Price: {price}")
        return price

    def fetch_quote(self, params: QuoteParams) -> SwapQuote:
        """
        Get a firm quote with identical params to the preceding price call

        Raises:
            QuoteUnavailable: On network, HTTP or parse errors
        """
        logger.debug(f"Fetching quote: {params.to_query()}")

        data = self._api.get_quote(params.to_query())
        quote = SwapQuote.from_response(data, params, QUOTE_ENDPOINT)

        logger.info(f"Quote: {quote}")
        return quote

    def fetch_sources(self) -> List[str]:
        """
        List liquidity source names available on this chain

        Raises:
            QuoteUnavailable: On network, HTTP or parse errors
        """
        data = self._api.get_sources(self._chain.chain_id)
        # v2 wraps the map in "sources"; v1 returned the map directly
        sources = data.get("sources", data)
        if not isinstance(sources, dict):
            raise QuoteUnavailable.invalid_response(SOURCES_ENDPOINT, "sources is not an object")
        return sorted(sources.keys())
