"""
0x Swap Executor - Permit2 token swaps through the 0x aggregator

Pipeline:
- Price discovery (0x /swap/permit2/price)
- Permit2 allowance setup (ERC20 approve)
- Firm quote (0x /swap/permit2/quote)
- EIP-712 permit signature embedded into calldata
- Transaction signing, broadcast and confirmation
"""

from .client import SwapClient
from .types import (
    QuoteParams,
    PriceQuote,
    SwapQuote,
    TransactionTemplate,
    SwapResult,
    TxStatus,
    PipelineState,
    # EVM types
    EVMChain,
    EVMToken,
    NATIVE_TOKEN_ADDRESS,
)
from .errors import (
    SwapExecutorError,
    ChainError,
    QuoteUnavailable,
    AllowanceSetupFailed,
    SignatureMissing,
    SubmissionFailed,
    ConfigurationError,
    ErrorCode,
    PipelineStage,
)
from .infra import ChainClient, create_web3, create_chain_client
from .protocols.zeroex import ZeroExAPI
from .modules import (
    QuoteService,
    AllowanceManager,
    SignatureEmbedder,
    TransactionSubmitter,
    SwapPipeline,
)

__all__ = [
    # Client
    "SwapClient",
    # Types
    "QuoteParams",
    "PriceQuote",
    "SwapQuote",
    "TransactionTemplate",
    "SwapResult",
    "TxStatus",
    "PipelineState",
    # EVM Types
    "EVMChain",
    "EVMToken",
    "NATIVE_TOKEN_ADDRESS",
    # Errors
    "SwapExecutorError",
    "ChainError",
    "QuoteUnavailable",
    "AllowanceSetupFailed",
    "SignatureMissing",
    "SubmissionFailed",
    "ConfigurationError",
    "ErrorCode",
    "PipelineStage",
    # Infrastructure
    "ChainClient",
    "create_web3",
    "create_chain_client",
    "ZeroExAPI",
    # Pipeline stages
    "QuoteService",
    "AllowanceManager",
    "SignatureEmbedder",
    "TransactionSubmitter",
    "SwapPipeline",
]

__version__ = "0.1.0"
