"""
Infrastructure layer for the swap executor

Provides:
- ChainClient: signing key + RPC connection (web3.py / eth-account)
- create_web3 / create_chain_client: construction helpers
- SwapRun / SwapIdFilter: swap run IDs in log records
"""

from .chain_client import (
    ChainClient,
    ERC20_ABI,
    MAX_UINT256,
    create_web3,
    create_chain_client,
)
from .swap_run import (
    NO_SWAP_ID,
    SwapRun,
    SwapIdFilter,
    new_swap_id,
    current_swap_id,
    log_swap_event,
)

__all__ = [
    "ChainClient",
    "ERC20_ABI",
    "MAX_UINT256",
    "create_web3",
    "create_chain_client",
    "NO_SWAP_ID",
    "SwapRun",
    "SwapIdFilter",
    "new_swap_id",
    "current_swap_id",
    "log_swap_event",
]
