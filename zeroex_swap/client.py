"""
SwapClient - Entry point for 0x Permit2 swaps

Builds the chain client, the 0x API client and the pipeline stages for one
signing key and one sell/buy token pair, and owns their lifetime.
"""

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from .config import config as global_config
from .infra import ChainClient, create_chain_client
from .protocols.zeroex import ZeroExAPI
from .modules.quote import QuoteService
from .modules.allowance import AllowanceManager
from .modules.signature import SignatureEmbedder
from .modules.submit import TransactionSubmitter
from .modules.swap import SwapPipeline
from .types import SwapResult, resolve_token_address, is_native_token
from .errors import ConfigurationError


class SwapClient:
    """
    0x Permit2 swap client

    Provides access to the pipeline stages:
    - quotes: price, quote and liquidity source lookups
    - allowance: Permit2 approval
    - pipeline: full swap execution

    Usage:
        # From environment (.env)
        with SwapClient.from_config() as client:
            result = client.swap(Decimal("0.1"))
            print(result)

        # Explicit components
        chain = create_chain_client(rpc_url, private_key)
        client = SwapClient(chain, ZeroExAPI(api_key), "WETH", "USDC")
    """

    def __init__(
        self,
        chain: ChainClient,
        api: ZeroExAPI,
        sell_token: str,
        buy_token: str,
    ):
        """
        Initialize SwapClient

        Args:
            chain: Chain client holding the signing key
            api: 0x API client
            sell_token: Sell token symbol or address
            buy_token: Buy token symbol or address

        Raises:
            ConfigurationError: If a token cannot be resolved or the sell
                token is the native coin
        """
        chain_id = chain.chain_id
        sell_address = resolve_token_address(sell_token, chain_id)
        buy_address = resolve_token_address(buy_token, chain_id)

        # Permit2 only moves ERC20 tokens
        if is_native_token(sell_address):
            raise ConfigurationError.invalid(
                "sell_token", "native coin cannot be sold through Permit2, use its wrapped token"
            )

        self._chain = chain
        self._api = api
        self._quotes = QuoteService(chain, api, sell_address, buy_address)
        self._allowance = AllowanceManager(chain, sell_address)
        self._pipeline = SwapPipeline(
            chain,
            self._quotes,
            self._allowance,
            SignatureEmbedder(),
            TransactionSubmitter(chain),
        )

    @classmethod
    def from_config(
        cls,
        rpc_url: Optional[str] = None,
        private_key: Optional[str] = None,
        api_key: Optional[str] = None,
        sell_token: Optional[str] = None,
        buy_token: Optional[str] = None,
    ) -> "SwapClient":
        """Build a client, filling missing arguments from global config"""
        chain = create_chain_client(rpc_url, private_key)
        api = ZeroExAPI(api_key=api_key)
        return cls(
            chain,
            api,
            sell_token or global_config.swap.sell_token,
            buy_token or global_config.swap.buy_token,
        )

    @property
    def chain(self) -> ChainClient:
        return self._chain

    @property
    def api(self) -> ZeroExAPI:
        return self._api

    @property
    def quotes(self) -> QuoteService:
        return self._quotes

    @property
    def allowance(self) -> AllowanceManager:
        return self._allowance

    @property
    def pipeline(self) -> SwapPipeline:
        return self._pipeline

    @property
    def address(self) -> str:
        """Taker address"""
        return self._chain.address

    def swap(
        self,
        amount: Decimal,
        fee_bps: Optional[int] = None,
        surplus_collection: Optional[bool] = None,
        wait_confirmation: Optional[bool] = None,
    ) -> SwapResult:
        """Sell a UI amount of the sell token; see SwapPipeline.swap"""
        return self._pipeline.swap(amount, fee_bps, surplus_collection, wait_confirmation)

    def sources(self) -> List[str]:
        """Liquidity sources available on this chain"""
        return self._quotes.fetch_sources()

    def close(self):
        """Close the 0x API client"""
        self._api.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __repr__(self) -> str:
        return f"SwapClient(chain_id={self._chain.chain_id}, address={self.address[:10]}...)"
