"""
Shared configuration and fixtures for live swap tests.

WARNING: These tests execute real transactions and spend real tokens!

Environment Variables:
    EVM_RPC_URL: RPC endpoint URL (required)
    EVM_PRIVATE_KEY: Hex private key of the taker (required)
    ZEROEX_API_KEY: 0x API key (required)
    ZEROEX_LIVE_TESTS: Set to 1 to opt in
"""

import os
import sys
from pathlib import Path

import pytest
from dotenv import load_dotenv

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

env_path = Path(__file__).parent.parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)

REQUIRED_ENV = ("EVM_RPC_URL", "EVM_PRIVATE_KEY", "ZEROEX_API_KEY")


def skip_if_no_config():
    """Return a skip message if live testing is not configured"""
    if os.getenv("ZEROEX_LIVE_TESTS") != "1":
        return "Live swap tests disabled. Set ZEROEX_LIVE_TESTS=1 to run them."
    missing = [key for key in REQUIRED_ENV if not os.getenv(key)]
    if missing:
        return f"Missing required environment variables: {', '.join(missing)}"
    return None


def create_client():
    """Create SwapClient with live RPC, real wallet and real 0x API key"""
    from zeroex_swap import SwapClient

    return SwapClient.from_config()


@pytest.fixture(scope="module")
def client():
    """SwapClient fixture for live tests"""
    skip_msg = skip_if_no_config()
    if skip_msg:
        pytest.skip(skip_msg)
    swap_client = create_client()
    yield swap_client
    swap_client.close()
