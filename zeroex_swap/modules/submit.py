"""
Submission Module

Assembles the final swap transaction from a signed template, signs it with
a freshly fetched nonce and broadcasts it.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, Optional

from web3 import Web3

from ..types import TransactionTemplate
from ..errors import ChainError, SubmissionFailed

if TYPE_CHECKING:
    from ..infra.chain_client import ChainClient

logger = logging.getLogger(__name__)


class TransactionSubmitter:
    """
    Final transaction assembly and broadcast

    Usage:
        submitter = TransactionSubmitter(chain)
        tx_hash = submitter.send(signed_template)
    """

    def __init__(self, chain: "ChainClient"):
        self._chain = chain

    def build_transaction(self, template: TransactionTemplate, nonce: int) -> Dict[str, Any]:
        """
        Legacy transaction dict from a template

        Missing value, gas and gasPrice default to zero; the quote endpoint
        omits them for some route types.
        """
        return {
            "to": Web3.to_checksum_address(template.to),
            "data": template.data,
            "value": template.value if template.value is not None else 0,
            "gas": template.gas if template.gas is not None else 0,
            "gasPrice": template.gas_price if template.gas_price is not None else 0,
            "nonce": nonce,
            "chainId": self._chain.chain_id,
        }

    def send(self, template: TransactionTemplate, account: Optional[str] = None) -> str:
        """
        Sign and broadcast the swap transaction

        Args:
            template: Template with the permit2 signature already embedded
            account: Sending account; must be the ChainClient's own address

        Returns:
            Transaction hash (0x-prefixed)

        Raises:
            SubmissionFailed: If the account is not the signer, or the nonce
                lookup, signing or broadcast fails
        """
        account = account or self._chain.address
        if account.lower() != self._chain.address.lower():
            raise SubmissionFailed.account_mismatch(account, self._chain.address)

        # Nonce is read right before signing, never cached
        try:
            nonce = self._chain.get_transaction_count(account)
        except ChainError as e:
            raise SubmissionFailed.nonce_failed(account, e) from e

        try:
            tx_dict = self.build_transaction(template, nonce)
        except (ChainError, ValueError) as e:
            raise SubmissionFailed.signing_failed(e) from e

        if tx_dict["gas"] == 0 or tx_dict["gasPrice"] == 0:
            logger.warning(f"Quote omitted gas fields, submitting with gas={tx_dict['gas']} gasPrice={tx_dict['gasPrice']}")

        try:
            raw_tx = self._chain.sign_transaction(tx_dict)
        except ChainError as e:
            raise SubmissionFailed.signing_failed(e) from e

        try:
            tx_hash = self._chain.send_raw_transaction(raw_tx)
        except ChainError as e:
            raise SubmissionFailed.send_failed(e) from e

        logger.info(f"Swap transaction submitted: {tx_hash} (nonce={nonce})")
        return tx_hash
