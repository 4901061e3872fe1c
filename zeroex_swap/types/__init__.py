"""
Type definitions for the swap executor
"""

from .quote import (
    FULL_PROPORTION_BPS,
    QuoteParams,
    AllowanceIssue,
    BalanceIssue,
    RouteFill,
    TokenTax,
    TokenMetadata,
    TransactionTemplate,
    PriceQuote,
    SwapQuote,
)
from .result import TxStatus, PipelineState, SwapResult

# EVM token registry
from .evm_tokens import (
    EVMChain,
    EVMToken,
    NATIVE_TOKEN_ADDRESS,
    get_token_address,
    get_token_symbol,
    resolve_token_address,
    is_native_token,
)

__all__ = [
    # Aggregator types
    "FULL_PROPORTION_BPS",
    "QuoteParams",
    "AllowanceIssue",
    "BalanceIssue",
    "RouteFill",
    "TokenTax",
    "TokenMetadata",
    "TransactionTemplate",
    "PriceQuote",
    "SwapQuote",
    # Results
    "TxStatus",
    "PipelineState",
    "SwapResult",
    # EVM types
    "EVMChain",
    "EVMToken",
    "NATIVE_TOKEN_ADDRESS",
    "get_token_address",
    "get_token_symbol",
    "resolve_token_address",
    "is_native_token",
]
