"""
Signature Module

Signs the quote's Permit2 EIP-712 payload and appends the signature to the
transaction calldata in the layout the 0x settler expects:

    calldata ++ uint256(len(signature)) big-endian ++ signature
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Protocol

from web3 import Web3

from ..types import TransactionTemplate
from ..errors import ChainError, SignatureMissing, SubmissionFailed
from ..protocols.zeroex import SIGNATURE_LENGTH_FIELD_BYTES

logger = logging.getLogger(__name__)


class TypedDataSigner(Protocol):
    """Anything that can sign EIP-712 typed data (ChainClient does)"""

    def sign_typed_data(self, typed_data: Dict[str, Any]) -> bytes:
        ...


def signature_length_field(signature: bytes) -> bytes:
    """32-byte big-endian unsigned encoding of the signature's byte length"""
    return len(signature).to_bytes(SIGNATURE_LENGTH_FIELD_BYTES, "big")


def embed_signature(calldata: str, signature: bytes) -> str:
    """
    Append length-prefixed signature to hex calldata

    Args:
        calldata: 0x-prefixed calldata
        signature: Raw signature bytes

    Returns:
        New 0x-prefixed calldata
    """
    data = Web3.to_bytes(hexstr=calldata)
    return Web3.to_hex(data + signature_length_field(signature) + signature)


class SignatureEmbedder:
    """
    Permit2 signature embedding

    Usage:
        signed_template = SignatureEmbedder().apply(quote.transaction, quote.permit2_eip712, chain)
    """

    def apply(
        self,
        template: TransactionTemplate,
        typed_data: Optional[Dict[str, Any]],
        signer: TypedDataSigner,
    ) -> TransactionTemplate:
        """
        Sign the typed data and embed the signature into the calldata

        Args:
            template: Unsigned transaction template from the quote
            typed_data: permit2.eip712 payload from the quote
            signer: Typed-data signer (ChainClient)

        Returns:
            Template with data replaced; other fields unchanged

        Raises:
            SignatureMissing: If the quote carries no typed-data payload
            SubmissionFailed: If signing fails
        """
        if not typed_data:
            raise SignatureMissing()

        try:
            signature = signer.sign_typed_data(typed_data)
        except ChainError as e:
            raise SubmissionFailed.permit_signing_failed(e) from e

        data = embed_signature(template.data, signature)
        logger.debug(f"Embedded {len(signature)}-byte permit2 signature into calldata")
        return template.with_data(data)
