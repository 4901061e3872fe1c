"""
EVM Token Registry

Provides ERC20 token address mappings for the chains the 0x Permit2 swap
flow is commonly run on. Decimals are not stored here: they are always read
from the token contract before a sell amount is scaled.
"""

from typing import Dict, Optional
from enum import Enum
from dataclasses import dataclass

from ..errors import ConfigurationError


class EVMChain(Enum):
    """Chains with a built-in token registry"""
    ETH = 1
    BSC = 56
    POLYGON = 137
    BASE = 8453
    ARBITRUM = 42161


@dataclass(frozen=True)
class EVMToken:
    """EVM token information"""
    address: str
    symbol: str
    decimals: int
    name: str = ""
    chain_id: int = 1

    def __str__(self) -> str:
        return self.symbol


# Placeholder address used by aggregators for native ETH/BNB
NATIVE_TOKEN_ADDRESS = "0xEeeeeEeeeEeEeeEeEeEeeEEEeeeeEeeeeeeeEEeE"


# =============================================================================
# Ethereum Mainnet Tokens (Chain ID: 1)
# =============================================================================

ETH_TOKEN_ADDRESSES: Dict[str, str] = {
    "WETH": "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2",
    "USDC": "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48",
    "USDT": "0xdAC17F958D2ee523a2206206994597C13D831ec7",
    "DAI": "0x6B175474E89094C44Da98b954EedeaC495271d0F",
    "WBTC": "0x2260FAC5E5542a773Aa44fBCfeDf7C193bc2C599",
    "LINK": "0x514910771AF9Ca656af840dff83E8264EcF986CA",
    "UNI": "0x1f9840a85d5aF5bf1D1762F925BDADdC4201F984",
    "AAVE": "0x7Fc66500c84A76Ad7e9c93437bFc5Ac33E2DDaE9",
    "PEPE": "0x6982508145454Ce325dDbE47a25d4ec3d2311933",
    "STETH": "0xae7ab96520DE3A18E5e111B5EaAb095312D7fE84",
}


# =============================================================================
# BSC Mainnet Tokens (Chain ID: 56)
# =============================================================================

BSC_TOKEN_ADDRESSES: Dict[str, str] = {
    "WBNB": "0xbb4CdB9CBd36B01bD1cBaEBF2De08d9173bc095c",
    "USDC": "0x8AC76a51cc950d9822D68b83fE1Ad97B32Cd580d",
    "USDT": "0x55d398326f99059fF775485246999027B3197955",
    "ETH": "0x2170Ed0880ac9A755fd29B2688956BD959F933F8",
    "BTCB": "0x7130d2A12B9BCbFAe4f2634d864A1Ee1Ce3Ead9c",
    "CAKE": "0x0E09FaBB73Bd3Ade0a17ECC321fD13a19e81cE82",
}


# =============================================================================
# Polygon PoS Tokens (Chain ID: 137)
# =============================================================================

POLYGON_TOKEN_ADDRESSES: Dict[str, str] = {
    "WETH": "0x7ceB23fD6bC0adD59E62ac25578270cFf1b9f619",
    "USDC": "0x2791Bca1f2de4661ED88A30C99A7a9449Aa84174",
}


# =============================================================================
# Base Tokens (Chain ID: 8453)
# =============================================================================

BASE_TOKEN_ADDRESSES: Dict[str, str] = {
    "WETH": "0x4200000000000000000000000000000000000006",
    "USDC": "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913",
    "DAI": "0x50c5725949A6F0c72E6C4a641F24049A917DB0Cb",
    "CBETH": "0x2Ae3F1Ec7F1F5012CFEab0185bfc7aa3cf0DEc22",
}


# =============================================================================
# Arbitrum One Tokens (Chain ID: 42161)
# =============================================================================

ARBITRUM_TOKEN_ADDRESSES: Dict[str, str] = {
    "WETH": "0x82aF49447D8a07e3bd95BD0d56f35241523fBab1",
    "USDC": "0xaf88d065e77c8cC2239327C5EDb3A432268e5831",
    "USDT": "0xFd086bC7CD5C481DCC9C85ebE478A1C0b69FCbb9",
    "ARB": "0x912CE59144191C1204E64559FE8253a0e49E6548",
}


_REGISTRY: Dict[int, Dict[str, str]] = {
    EVMChain.ETH.value: ETH_TOKEN_ADDRESSES,
    EVMChain.BSC.value: BSC_TOKEN_ADDRESSES,
    EVMChain.POLYGON.value: POLYGON_TOKEN_ADDRESSES,
    EVMChain.BASE.value: BASE_TOKEN_ADDRESSES,
    EVMChain.ARBITRUM.value: ARBITRUM_TOKEN_ADDRESSES,
}


# =============================================================================
# Helper Functions
# =============================================================================

def get_token_addresses(chain_id: int) -> Dict[str, str]:
    """
    Get token address mapping for a chain

    Args:
        chain_id: EVM chain ID

    Returns:
        Dict mapping symbol to address (empty for unknown chains)
    """
    return _REGISTRY.get(chain_id, {})


def get_token_address(symbol: str, chain_id: int) -> Optional[str]:
    """
    Get token address for a symbol on a specific chain

    Returns:
        Token address if found, None otherwise
    """
    return get_token_addresses(chain_id).get(symbol.upper())


def resolve_token_address(token: str, chain_id: int) -> str:
    """
    Resolve token symbol or address to address

    Args:
        token: Token symbol (e.g., "WETH", "USDC") or address (0x...)
        chain_id: EVM chain ID

    Returns:
        Token address

    Raises:
        ConfigurationError: If token symbol is unknown and not an address
    """
    # Already an address
    if token.startswith("0x") and len(token) == 42:
        return token

    address = get_token_address(token, chain_id)
    if address:
        return address

    raise ConfigurationError.invalid("token", f"Unknown token: {token} on chain {chain_id}")


def is_native_token(address: str) -> bool:
    """Check if address is the native token placeholder address"""
    return address.lower() == NATIVE_TOKEN_ADDRESS.lower()


def get_token_symbol(address: str, chain_id: int) -> Optional[str]:
    """
    Get token symbol from address

    Returns:
        Token symbol or None if not found
    """
    address_lower = address.lower()
    for symbol, addr in get_token_addresses(chain_id).items():
        if addr.lower() == address_lower:
            return symbol
    return None
