"""
Test Errors Module

Tests for zeroex_swap.errors package.
"""

import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))


def test_error_code():
    """Test ErrorCode enum"""
    from zeroex_swap.errors import ErrorCode

    print("Testing ErrorCode...")

    assert ErrorCode.CHAIN_RPC_FAILED.value == "1001"
    assert ErrorCode.QUOTE_REQUEST_FAILED.value == "2001"
    assert ErrorCode.ALLOWANCE_SIMULATION_FAILED.value == "3001"
    assert ErrorCode.SIGNATURE_MISSING.value == "4001"
    assert ErrorCode.TX_SIGN_FAILED.value == "5001"
    assert ErrorCode.CONFIG_INVALID.value == "9001"

    print("  ErrorCode: PASSED")


def test_swap_executor_error():
    """Test SwapExecutorError base class"""
    from zeroex_swap.errors import SwapExecutorError, ErrorCode

    print("Testing SwapExecutorError...")

    error = SwapExecutorError(
        message="Test error",
        code=ErrorCode.CHAIN_RPC_FAILED,
        recoverable=True,
    )

    # __str__ returns "[code] message" format
    assert "[1001] Test error" == str(error)
    assert error.code == ErrorCode.CHAIN_RPC_FAILED
    assert error.recoverable == True
    assert error.should_retry == True
    assert error.details == {}

    print("  SwapExecutorError: PASSED")


def test_chain_error():
    """Test ChainError factories"""
    from zeroex_swap.errors import ChainError, ErrorCode

    print("Testing ChainError...")

    cause = ConnectionError("connection refused")

    error1 = ChainError.rpc_failed("eth_getTransactionCount", cause)
    assert error1.code == ErrorCode.CHAIN_RPC_FAILED
    assert error1.operation == "eth_getTransactionCount"
    assert error1.original_error is cause
    assert error1.recoverable == False
    assert "connection refused" in str(error1)

    error2 = ChainError.call_failed("approve", ValueError("execution reverted"))
    assert error2.code == ErrorCode.CHAIN_CALL_FAILED

    error3 = ChainError.signing_failed("sign_transaction", ValueError("bad tx"))
    assert error3.code == ErrorCode.CHAIN_SIGNING_FAILED

    error4 = ChainError.timeout("0xabc", TimeoutError("120s"))
    assert error4.code == ErrorCode.CHAIN_TIMEOUT
    assert error4.operation == "wait_for_receipt"

    print("  ChainError: PASSED")


def test_quote_unavailable():
    """Test QuoteUnavailable factories"""
    from zeroex_swap.errors import QuoteUnavailable, ErrorCode, PipelineStage

    print("Testing QuoteUnavailable...")

    error1 = QuoteUnavailable.http_error("swap/permit2/price", 400, "Invalid sellAmount")
    assert error1.code == ErrorCode.QUOTE_HTTP_ERROR
    assert error1.status_code == 400
    assert error1.endpoint == "swap/permit2/price"
    assert "HTTP 400" in str(error1)
    assert error1.stage == PipelineStage.QUOTE

    error2 = QuoteUnavailable.no_liquidity("swap/permit2/quote")
    assert error2.code == ErrorCode.QUOTE_NO_LIQUIDITY

    error3 = QuoteUnavailable.invalid_response("swap/permit2/quote", "missing field 'buyAmount'")
    assert error3.code == ErrorCode.QUOTE_INVALID_RESPONSE
    assert "buyAmount" in error3.message

    print("  QuoteUnavailable: PASSED")


def test_allowance_setup_failed():
    """Test AllowanceSetupFailed factories"""
    from zeroex_swap.errors import AllowanceSetupFailed, ErrorCode, PipelineStage

    print("Testing AllowanceSetupFailed...")

    spender = "0x000000000022D473030F116dDEE9F6B43aC78BA3"

    error1 = AllowanceSetupFailed.simulation_failed(spender, ValueError("revert"))
    assert error1.code == ErrorCode.ALLOWANCE_SIMULATION_FAILED
    assert error1.spender == spender
    assert error1.stage == PipelineStage.ALLOWANCE

    error2 = AllowanceSetupFailed.confirmation_failed(spender, "0xdead", "approval reverted")
    assert error2.code == ErrorCode.ALLOWANCE_CONFIRMATION_FAILED
    assert error2.tx_hash == "0xdead"
    assert error2.details["tx_hash"] == "0xdead"

    print("  AllowanceSetupFailed: PASSED")


def test_signature_missing():
    """Test SignatureMissing defaults"""
    from zeroex_swap.errors import SignatureMissing, ErrorCode, PipelineStage

    print("Testing SignatureMissing...")

    error = SignatureMissing()
    assert error.code == ErrorCode.SIGNATURE_MISSING
    assert error.stage == PipelineStage.SIGNATURE
    assert "permit2.eip712" in str(error)

    print("  SignatureMissing: PASSED")


def test_submission_failed_stages():
    """Test SubmissionFailed factories and their stage attribution"""
    from zeroex_swap.errors import SubmissionFailed, ErrorCode, PipelineStage

    print("Testing SubmissionFailed...")

    error1 = SubmissionFailed.nonce_failed("0xabc", ValueError("rpc down"))
    assert error1.code == ErrorCode.TX_NONCE_FAILED
    assert error1.stage == PipelineStage.SUBMISSION

    error2 = SubmissionFailed.permit_signing_failed(ValueError("bad payload"))
    assert error2.code == ErrorCode.TX_SIGN_FAILED
    assert error2.stage == PipelineStage.SIGNATURE

    error3 = SubmissionFailed.reverted("0xfeed")
    assert error3.code == ErrorCode.TX_REVERTED
    assert error3.tx_hash == "0xfeed"
    assert error3.stage == PipelineStage.CONFIRMATION

    # Instance stage override does not leak into the class
    assert SubmissionFailed.stage == PipelineStage.SUBMISSION

    print("  SubmissionFailed: PASSED")


def test_configuration_error():
    """Test ConfigurationError factories"""
    from zeroex_swap.errors import ConfigurationError, ErrorCode

    print("Testing ConfigurationError...")

    error1 = ConfigurationError.missing("ZEROEX_API_KEY", "Set it in .env")
    assert error1.code == ErrorCode.CONFIG_MISSING
    assert "ZEROEX_API_KEY" in str(error1)
    assert "Set it in .env" in str(error1)

    error2 = ConfigurationError.invalid("sell_token", "native coin")
    assert error2.code == ErrorCode.CONFIG_INVALID

    print("  ConfigurationError: PASSED")


def test_error_inheritance():
    """Test every pipeline error derives from SwapExecutorError"""
    from zeroex_swap.errors import (
        SwapExecutorError,
        ChainError,
        QuoteUnavailable,
        AllowanceSetupFailed,
        SignatureMissing,
        SubmissionFailed,
        ConfigurationError,
    )

    print("Testing error inheritance...")

    for cls in (ChainError, QuoteUnavailable, AllowanceSetupFailed,
                SignatureMissing, SubmissionFailed, ConfigurationError):
        assert issubclass(cls, SwapExecutorError)
        assert issubclass(cls, Exception)

    print("  Error inheritance: PASSED")


def main():
    """Run all tests"""
    print("=" * 60)
    print("Errors Module Tests")
    print("=" * 60)
    print()

    tests = [
        test_error_code,
        test_swap_executor_error,
        test_chain_error,
        test_quote_unavailable,
        test_allowance_setup_failed,
        test_signature_missing,
        test_submission_failed_stages,
        test_configuration_error,
        test_error_inheritance,
    ]

    passed = 0
    failed = 0

    for test in tests:
        try:
            test()
            passed += 1
        except Exception as e:
            import traceback
            print(f"  FAILED: {e}")
            traceback.print_exc()
            failed += 1

    print()
    print("=" * 60)
    print(f"Results: {passed} passed, {failed} failed")
    print("=" * 60)

    return failed == 0


if __name__ == "__main__":
    success = main()
    sys.exit(0 if success else 1)
