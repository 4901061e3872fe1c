"""
Allowance Module

Resolves the missing-allowance issue reported by the price endpoint by
approving the designated spender (Permit2) for the maximum amount.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from ..types import PriceQuote
from ..errors import AllowanceSetupFailed, ChainError, ErrorCode
from ..infra.chain_client import ERC20_ABI, MAX_UINT256
from ..protocols.zeroex import PERMIT2_ADDRESS

if TYPE_CHECKING:
    from ..infra.chain_client import ChainClient

logger = logging.getLogger(__name__)


class AllowanceManager:
    """
    One-shot ERC20 approval for the sell token

    Usage:
        allowance = AllowanceManager(chain, sell_token)
        approval_hash = allowance.resolve(price)  # None when nothing to do
    """

    def __init__(self, chain: "ChainClient", token_address: str):
        """
        Args:
            chain: ChainClient used to submit the approval
            token_address: Sell token whose allowance is managed
        """
        self._chain = chain
        self._token_address = token_address

    @property
    def token_address(self) -> str:
        return self._token_address

    def resolve(self, price: PriceQuote) -> Optional[str]:
        """
        Approve the spender named in the price's allowance issue, if any

        Blocks until the approval receipt is observed.

        Args:
            price: Price quote from QuoteService.fetch_price

        Returns:
            Approval transaction hash, or None if no approval was needed

        Raises:
            AllowanceSetupFailed: If the approval cannot be simulated,
                submitted or confirmed
        """
        issue = price.allowance_issue
        if issue is None:
            logger.debug(f"Allowance for {self._token_address} already sufficient")
            return None

        spender = issue.spender
        if spender.lower() != PERMIT2_ADDRESS.lower():
            logger.warning(f"Allowance spender {spender} is not the canonical Permit2 contract")

        logger.info(
            f"Approving {self._token_address} for spender {spender} "
            f"(current allowance: {issue.actual})"
        )

        try:
            tx_hash = self._chain.write_contract(
                self._token_address,
                ERC20_ABI,
                "approve",
                spender,
                MAX_UINT256,
            )
        except ChainError as e:
            if e.code == ErrorCode.CHAIN_CALL_FAILED:
                raise AllowanceSetupFailed.simulation_failed(spender, e) from e
            raise AllowanceSetupFailed.submit_failed(spender, e) from e

        try:
            receipt = self._chain.wait_for_receipt(tx_hash)
        except ChainError as e:
            raise AllowanceSetupFailed.confirmation_failed(spender, tx_hash, str(e), e) from e

        if receipt.get("status") != 1:
            raise AllowanceSetupFailed.confirmation_failed(spender, tx_hash, "approval reverted")

        logger.info(f"Token approval successful: {tx_hash}")
        return tx_hash
