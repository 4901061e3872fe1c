"""
Exception definitions for the swap executor
"""

from enum import Enum
from typing import Optional


class ErrorCode(Enum):
    """
    Unified error codes for swap execution

    1xxx - Chain (RPC / signing) errors
    2xxx - Aggregator quote errors
    3xxx - Allowance errors
    4xxx - Signature payload errors
    5xxx - Submission errors
    9xxx - Configuration errors
    """
    # Chain errors
    CHAIN_RPC_FAILED = "1001"
    CHAIN_CALL_FAILED = "1002"
    CHAIN_SIGNING_FAILED = "1003"
    CHAIN_TIMEOUT = "1004"

    # Quote errors
    QUOTE_REQUEST_FAILED = "2001"
    QUOTE_HTTP_ERROR = "2002"
    QUOTE_INVALID_RESPONSE = "2003"
    QUOTE_NO_LIQUIDITY = "2004"

    # Allowance errors
    ALLOWANCE_SIMULATION_FAILED = "3001"
    ALLOWANCE_SUBMIT_FAILED = "3002"
    ALLOWANCE_CONFIRMATION_FAILED = "3003"

    # Signature errors
    SIGNATURE_MISSING = "4001"

    # Submission errors
    TX_SIGN_FAILED = "5001"
    TX_SEND_FAILED = "5002"
    TX_NONCE_FAILED = "5003"
    TX_REVERTED = "5004"
    TX_CONFIRMATION_FAILED = "5005"

    # Configuration errors
    CONFIG_INVALID = "9001"
    CONFIG_MISSING = "9002"


class PipelineStage(Enum):
    """Pipeline step an error is attributed to"""
    SETUP = "setup"
    PRICE = "price"
    ALLOWANCE = "allowance"
    QUOTE = "quote"
    SIGNATURE = "signature"
    SUBMISSION = "submission"
    CONFIRMATION = "confirmation"


class SwapExecutorError(Exception):
    """
    Base exception for all swap executor errors

    Attributes:
        message: Human-readable error message
        code: Error code for programmatic handling
        recoverable: Whether the error might succeed on retry
        original_error: The underlying exception if any
        details: Additional error context
        stage: Pipeline stage the failure belongs to
    """

    stage: PipelineStage = PipelineStage.SETUP

    def __init__(
        self,
        message: str,
        code: ErrorCode,
        recoverable: bool = False,
        original_error: Optional[Exception] = None,
        details: Optional[dict] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.recoverable = recoverable
        self.original_error = original_error
        self.details = details or {}

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code.value}, stage={self.stage.value}, message={self.message!r})"

    @property
    def should_retry(self) -> bool:
        """Indicate if the operation should be retried"""
        return self.recoverable


class ChainError(SwapExecutorError):
    """
    RPC or local signing failure on any chain call

    Raised when:
    - The RPC endpoint is unreachable or returns an error
    - An eth_call simulation reverts
    - The local account fails to sign
    - A receipt wait times out
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.CHAIN_RPC_FAILED,
        original_error: Optional[Exception] = None,
        operation: Optional[str] = None,
    ):
        super().__init__(
            message,
            code,
            recoverable=False,
            original_error=original_error,
            details={"operation": operation} if operation else None,
        )
        self.operation = operation

    @classmethod
    def rpc_failed(cls, operation: str, error: Exception) -> "ChainError":
        return cls(
            f"RPC call '{operation}' failed: {error}",
            ErrorCode.CHAIN_RPC_FAILED,
            original_error=error,
            operation=operation,
        )

    @classmethod
    def call_failed(cls, operation: str, error: Exception) -> "ChainError":
        return cls(
            f"Contract call '{operation}' failed: {error}",
            ErrorCode.CHAIN_CALL_FAILED,
            original_error=error,
            operation=operation,
        )

    @classmethod
    def signing_failed(cls, operation: str, error: Exception) -> "ChainError":
        return cls(
            f"Signing '{operation}' failed: {error}",
            ErrorCode.CHAIN_SIGNING_FAILED,
            original_error=error,
            operation=operation,
        )

    @classmethod
    def timeout(cls, tx_hash: str, error: Exception) -> "ChainError":
        return cls(
            f"Timed out waiting for receipt of {tx_hash}: {error}",
            ErrorCode.CHAIN_TIMEOUT,
            original_error=error,
            operation="wait_for_receipt",
        )


class QuoteUnavailable(SwapExecutorError):
    """
    Aggregator request failed or returned unusable data

    Raised when:
    - The HTTP request fails (transport error or timeout)
    - The API answers with a non-2xx status
    - The body is not JSON or violates the expected schema
    - No liquidity is available for the pair
    """

    stage = PipelineStage.QUOTE

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.QUOTE_REQUEST_FAILED,
        original_error: Optional[Exception] = None,
        endpoint: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(
            message,
            code,
            recoverable=False,
            original_error=original_error,
            details={"endpoint": endpoint, "status_code": status_code},
        )
        self.endpoint = endpoint
        self.status_code = status_code

    @classmethod
    def request_failed(cls, endpoint: str, error: Exception) -> "QuoteUnavailable":
        return cls(
            f"Aggregator request to {endpoint} failed: {error}",
            ErrorCode.QUOTE_REQUEST_FAILED,
            original_error=error,
            endpoint=endpoint,
        )

    @classmethod
    def http_error(cls, endpoint: str, status_code: int, reason: str) -> "QuoteUnavailable":
        return cls(
            f"Aggregator returned HTTP {status_code} for {endpoint}: {reason}",
            ErrorCode.QUOTE_HTTP_ERROR,
            endpoint=endpoint,
            status_code=status_code,
        )

    @classmethod
    def invalid_response(cls, endpoint: str, reason: str, error: Exception = None) -> "QuoteUnavailable":
        return cls(
            f"Invalid aggregator response from {endpoint}: {reason}",
            ErrorCode.QUOTE_INVALID_RESPONSE,
            original_error=error,
            endpoint=endpoint,
        )

    @classmethod
    def no_liquidity(cls, endpoint: str) -> "QuoteUnavailable":
        return cls(
            f"No liquidity available for this pair ({endpoint})",
            ErrorCode.QUOTE_NO_LIQUIDITY,
            endpoint=endpoint,
        )


class AllowanceSetupFailed(SwapExecutorError):
    """
    Approval transaction could not be simulated, submitted or confirmed

    The swap cannot proceed without allowance, so this is always terminal.
    """

    stage = PipelineStage.ALLOWANCE

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.ALLOWANCE_SUBMIT_FAILED,
        original_error: Optional[Exception] = None,
        spender: Optional[str] = None,
        tx_hash: Optional[str] = None,
    ):
        super().__init__(
            message,
            code,
            recoverable=False,
            original_error=original_error,
            details={"spender": spender, "tx_hash": tx_hash},
        )
        self.spender = spender
        self.tx_hash = tx_hash

    @classmethod
    def simulation_failed(cls, spender: str, error: Exception) -> "AllowanceSetupFailed":
        return cls(
            f"Approval simulation for spender {spender} failed: {error}",
            ErrorCode.ALLOWANCE_SIMULATION_FAILED,
            original_error=error,
            spender=spender,
        )

    @classmethod
    def submit_failed(cls, spender: str, error: Exception) -> "AllowanceSetupFailed":
        return cls(
            f"Approval submission for spender {spender} failed: {error}",
            ErrorCode.ALLOWANCE_SUBMIT_FAILED,
            original_error=error,
            spender=spender,
        )

    @classmethod
    def confirmation_failed(cls, spender: str, tx_hash: str, reason: str, error: Exception = None) -> "AllowanceSetupFailed":
        return cls(
            f"Approval {tx_hash} for spender {spender} not confirmed: {reason}",
            ErrorCode.ALLOWANCE_CONFIRMATION_FAILED,
            original_error=error,
            spender=spender,
            tx_hash=tx_hash,
        )


class SignatureMissing(SwapExecutorError):
    """
    Quote carries no Permit2 typed-data payload to sign

    Terminal: the pipeline cannot build a valid Permit2 transaction.
    """

    stage = PipelineStage.SIGNATURE

    def __init__(self, message: str = "Quote does not include a permit2.eip712 payload"):
        super().__init__(message, ErrorCode.SIGNATURE_MISSING, recoverable=False)


class SubmissionFailed(SwapExecutorError):
    """
    Signing or broadcasting the swap transaction failed

    Raised when:
    - The nonce lookup fails
    - The permit payload or the transaction cannot be signed
    - The broadcast is rejected
    - The mined transaction reverted or its receipt never arrived
    """

    stage = PipelineStage.SUBMISSION

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.TX_SEND_FAILED,
        original_error: Optional[Exception] = None,
        tx_hash: Optional[str] = None,
        stage: Optional[PipelineStage] = None,
    ):
        super().__init__(
            message,
            code,
            recoverable=False,
            original_error=original_error,
            details={"tx_hash": tx_hash},
        )
        self.tx_hash = tx_hash
        if stage is not None:
            self.stage = stage

    @classmethod
    def account_mismatch(cls, account: str, signer: str) -> "SubmissionFailed":
        return cls(
            f"Account {account} is not the signing account {signer}",
            ErrorCode.TX_SIGN_FAILED,
        )

    @classmethod
    def nonce_failed(cls, address: str, error: Exception) -> "SubmissionFailed":
        return cls(
            f"Failed to fetch nonce for {address}: {error}",
            ErrorCode.TX_NONCE_FAILED,
            original_error=error,
        )

    @classmethod
    def permit_signing_failed(cls, error: Exception) -> "SubmissionFailed":
        return cls(
            f"Failed to sign permit2 payload: {error}",
            ErrorCode.TX_SIGN_FAILED,
            original_error=error,
            stage=PipelineStage.SIGNATURE,
        )

    @classmethod
    def signing_failed(cls, error: Exception) -> "SubmissionFailed":
        return cls(
            f"Failed to sign transaction: {error}",
            ErrorCode.TX_SIGN_FAILED,
            original_error=error,
        )

    @classmethod
    def send_failed(cls, error: Exception) -> "SubmissionFailed":
        return cls(
            f"Failed to broadcast transaction: {error}",
            ErrorCode.TX_SEND_FAILED,
            original_error=error,
        )

    @classmethod
    def reverted(cls, tx_hash: str) -> "SubmissionFailed":
        return cls(
            f"Transaction {tx_hash} reverted on-chain",
            ErrorCode.TX_REVERTED,
            tx_hash=tx_hash,
            stage=PipelineStage.CONFIRMATION,
        )

    @classmethod
    def confirmation_failed(cls, tx_hash: str, error: Exception) -> "SubmissionFailed":
        return cls(
            f"Transaction {tx_hash} was not confirmed: {error}",
            ErrorCode.TX_CONFIRMATION_FAILED,
            original_error=error,
            tx_hash=tx_hash,
            stage=PipelineStage.CONFIRMATION,
        )


class ConfigurationError(SwapExecutorError):
    """
    Configuration-related errors

    Raised when:
    - Required configuration is missing
    - Configuration values are invalid
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.CONFIG_INVALID,
    ):
        super().__init__(message, code, recoverable=False)

    @classmethod
    def missing(cls, param: str, hint: str = "") -> "ConfigurationError":
        message = f"Missing required configuration: {param}"
        if hint:
            message = f"{message}. {hint}"
        return cls(message, ErrorCode.CONFIG_MISSING)

    @classmethod
    def invalid(cls, param: str, reason: str) -> "ConfigurationError":
        return cls(f"Invalid configuration '{param}': {reason}", ErrorCode.CONFIG_INVALID)
