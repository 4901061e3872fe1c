"""
EVM chain client using web3.py

Owns one local signing key bound to one chain and exposes the blocking
RPC operations the swap pipeline needs: contract reads, simulated-then-sent
contract writes, EIP-712 signing, nonce lookup, raw transaction signing and
broadcast, and receipt waits.

Nothing here retries. Every failure is raised as ChainError with the
underlying exception attached.
"""

from __future__ import annotations

import logging
import os
from typing import Optional, Dict, Any, Union

from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import Web3, HTTPProvider
from web3.exceptions import TimeExhausted
from web3.middleware import ExtraDataToPOAMiddleware

from ..errors import ChainError, ConfigurationError
from ..config import config as global_config

logger = logging.getLogger(__name__)

# Maximum uint256, used for unlimited approvals
MAX_UINT256 = 2**256 - 1

# Chains whose blocks carry PoA extraData (BSC, BSC testnet, Polygon, Amoy)
POA_CHAIN_IDS = (56, 97, 137, 80002)

# Minimal ERC20 ABI
ERC20_ABI = [
    {
        "constant": False,
        "inputs": [
            {"name": "_spender", "type": "address"},
            {"name": "_value", "type": "uint256"}
        ],
        "name": "approve",
        "outputs": [{"name": "", "type": "bool"}],
        "type": "function"
    },
    {
        "constant": True,
        "inputs": [
            {"name": "_owner", "type": "address"},
            {"name": "_spender", "type": "address"}
        ],
        "name": "allowance",
        "outputs": [{"name": "", "type": "uint256"}],
        "type": "function"
    },
    {
        "constant": True,
        "inputs": [],
        "name": "decimals",
        "outputs": [{"name": "", "type": "uint8"}],
        "type": "function"
    },
    {
        "constant": True,
        "inputs": [],
        "name": "symbol",
        "outputs": [{"name": "", "type": "string"}],
        "type": "function"
    },
]


class ChainClient:
    """
    Signing key + chain + RPC connection

    Usage:
        web3 = create_web3("https://base-mainnet.example/rpc")
        chain = ChainClient.from_private_key(web3, "0x...")

        decimals = chain.token_decimals("0x4200000000000000000000000000000000000006")
        nonce = chain.get_transaction_count()
        raw = chain.sign_transaction(tx_dict)
        tx_hash = chain.send_raw_transaction(raw)
        receipt = chain.wait_for_receipt(tx_hash)
    """

    def __init__(
        self,
        web3: Web3,
        account: LocalAccount,
        chain_id: Optional[int] = None,
        receipt_timeout: Optional[float] = None,
    ):
        """
        Initialize chain client

        Args:
            web3: Web3 instance connected to RPC
            account: LocalAccount from eth_account
            chain_id: Chain ID. If None, detected from RPC on first use.
            receipt_timeout: Default receipt wait timeout in seconds
        """
        self._web3 = web3
        self._account = account
        self._chain_id = chain_id
        self._receipt_timeout = receipt_timeout or global_config.chain.receipt_timeout

    @property
    def web3(self) -> Web3:
        return self._web3

    @property
    def address(self) -> str:
        """Get wallet address (checksummed)"""
        return self._account.address

    @property
    def chain_id(self) -> int:
        """Chain ID, detected from the RPC endpoint if not configured"""
        if self._chain_id is None:
            try:
                self._chain_id = int(self._web3.eth.chain_id)
            except Exception as e:
                raise ChainError.rpc_failed("eth_chainId", e) from e
        return self._chain_id

    def _contract(self, address: str, abi: list):
        return self._web3.eth.contract(
            address=Web3.to_checksum_address(address),
            abi=abi,
        )

    def read_contract(self, address: str, abi: list, fn_name: str, *args) -> Any:
        """
        Call a view function

        Args:
            address: Contract address
            abi: Contract ABI
            fn_name: Function name
            *args: Function arguments

        Returns:
            Decoded return value
        """
        try:
            contract = self._contract(address, abi)
            return getattr(contract.functions, fn_name)(*args).call()
        except Exception as e:
            raise ChainError.call_failed(fn_name, e) from e

    def token_decimals(self, token_address: str) -> int:
        """Read ERC20 decimals()"""
        return int(self.read_contract(token_address, ERC20_ABI, "decimals"))

    def write_contract(self, address: str, abi: list, fn_name: str, *args) -> str:
        """
        Simulate and submit a state-changing contract call

        The call is first executed with eth_call from this account; a revert
        there raises ChainError with code CHAIN_CALL_FAILED and nothing is
        broadcast.

        Returns:
            Transaction hash (0x-prefixed)
        """
        try:
            contract = self._contract(address, abi)
            fn = getattr(contract.functions, fn_name)(*args)
            fn.call({"from": self.address})
        except Exception as e:
            raise ChainError.call_failed(fn_name, e) from e

        nonce = self.get_transaction_count()
        try:
            tx = fn.build_transaction({
                "from": self.address,
                "nonce": nonce,
                "chainId": self.chain_id,
            })
        except Exception as e:
            raise ChainError.rpc_failed(f"build_transaction:{fn_name}", e) from e

        logger.debug(f"Submitting {fn_name} to {address} (nonce={nonce})")
        raw = self.sign_transaction(tx)
        return self.send_raw_transaction(raw)

    def sign_typed_data(self, typed_data: Dict[str, Any]) -> bytes:
        """
        Sign an EIP-712 typed-data structure

        Args:
            typed_data: Full message with types, domain, primaryType, message

        Returns:
            Raw signature bytes (r || s || v)
        """
        try:
            signed = self._account.sign_typed_data(full_message=typed_data)
        except Exception as e:
            raise ChainError.signing_failed("eth_signTypedData_v4", e) from e
        return bytes(signed.signature)

    def get_transaction_count(self, address: Optional[str] = None) -> int:
        """Current transaction count (nonce) for an address, defaulting to this account"""
        target = Web3.to_checksum_address(address or self.address)
        try:
            return int(self._web3.eth.get_transaction_count(target))
        except Exception as e:
            raise ChainError.rpc_failed("eth_getTransactionCount", e) from e

    def sign_transaction(self, tx_dict: Dict[str, Any]) -> bytes:
        """
        Sign a transaction

        Args:
            tx_dict: Transaction dictionary with to, data, value, gas, gasPrice, nonce, chainId

        Returns:
            Raw signed transaction bytes
        """
        try:
            signed = self._account.sign_transaction(tx_dict)
        except Exception as e:
            raise ChainError.signing_failed("sign_transaction", e) from e
        return bytes(signed.raw_transaction)

    def send_raw_transaction(self, raw_tx: bytes) -> str:
        """Broadcast a signed transaction and return its hash (0x-prefixed)"""
        try:
            tx_hash = self._web3.eth.send_raw_transaction(raw_tx)
        except Exception as e:
            raise ChainError.rpc_failed("eth_sendRawTransaction", e) from e
        return Web3.to_hex(tx_hash)

    def wait_for_receipt(self, tx_hash: Union[str, bytes], timeout: Optional[float] = None) -> Dict[str, Any]:
        """
        Block until the transaction is mined

        Args:
            tx_hash: Transaction hash
            timeout: Timeout in seconds (defaults to configured receipt timeout)

        Returns:
            Receipt as a plain dict
        """
        wait = timeout if timeout is not None else self._receipt_timeout
        try:
            receipt = self._web3.eth.wait_for_transaction_receipt(tx_hash, timeout=wait)
        except TimeExhausted as e:
            raise ChainError.timeout(str(tx_hash), e) from e
        except Exception as e:
            raise ChainError.rpc_failed("eth_getTransactionReceipt", e) from e
        return dict(receipt)

    @classmethod
    def from_private_key(
        cls,
        web3: Web3,
        private_key: str,
        chain_id: Optional[int] = None,
    ) -> "ChainClient":
        """
        Create client from private key

        Args:
            web3: Web3 instance
            private_key: Hex-encoded private key (with or without 0x prefix)
            chain_id: Optional chain ID

        Returns:
            ChainClient instance
        """
        if not private_key.startswith("0x"):
            private_key = "0x" + private_key

        try:
            account = Account.from_key(private_key)
        except Exception as e:
            raise ConfigurationError.invalid("EVM_PRIVATE_KEY", str(e)) from e
        return cls(web3, account, chain_id=chain_id)

    @classmethod
    def from_env(
        cls,
        web3: Web3,
        env_var: str = "EVM_PRIVATE_KEY",
        chain_id: Optional[int] = None,
    ) -> "ChainClient":
        """
        Create client from environment variable

        Raises:
            ConfigurationError: If environment variable is not set
        """
        private_key = os.getenv(env_var, "")
        if not private_key:
            raise ConfigurationError.missing(env_var)

        return cls.from_private_key(web3, private_key, chain_id=chain_id)

    def __repr__(self) -> str:
        return f"ChainClient(address={self.address}, chain_id={self._chain_id})"


def create_web3(
    rpc_url: str,
    chain_id: Optional[int] = None,
    timeout: Optional[float] = None,
) -> Web3:
    """
    Create Web3 instance for a chain

    Args:
        rpc_url: RPC endpoint URL
        chain_id: Chain ID. If None, PoA middleware is decided from the RPC's answer.
        timeout: Request timeout in seconds

    Returns:
        Configured Web3 instance
    """
    if not rpc_url:
        raise ConfigurationError.missing("EVM_RPC_URL")

    provider = HTTPProvider(
        rpc_url,
        request_kwargs={"timeout": timeout or global_config.chain.rpc_timeout},
    )

    web3 = Web3(provider)

    if chain_id is None:
        try:
            chain_id = web3.eth.chain_id
        except Exception as e:
            logger.warning(f"Failed to detect chain ID from RPC, skipping PoA middleware: {e}")

    if chain_id in POA_CHAIN_IDS:
        web3.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)

    return web3


def create_chain_client(
    rpc_url: Optional[str] = None,
    private_key: Optional[str] = None,
    chain_id: Optional[int] = None,
) -> ChainClient:
    """
    Create chain client based on configuration

    Priority for each argument: explicit value, then global config
    (EVM_RPC_URL, EVM_PRIVATE_KEY, EVM_CHAIN_ID).

    Raises:
        ConfigurationError: If RPC URL or private key is missing
    """
    rpc_url = rpc_url or global_config.chain.rpc_url
    private_key = private_key or global_config.signer.private_key
    chain_id = chain_id if chain_id is not None else global_config.chain.chain_id

    if not private_key:
        raise ConfigurationError.missing("EVM_PRIVATE_KEY", "Set it in the environment or .env file.")

    web3 = create_web3(rpc_url, chain_id)
    client = ChainClient.from_private_key(web3, private_key, chain_id=chain_id)
    logger.info(f"Chain client ready: address={client.address}")
    return client
