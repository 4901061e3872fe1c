"""
Error definitions for the swap executor
"""

from .exceptions import (
    ErrorCode,
    PipelineStage,
    SwapExecutorError,
    ChainError,
    QuoteUnavailable,
    AllowanceSetupFailed,
    SignatureMissing,
    SubmissionFailed,
    ConfigurationError,
)

__all__ = [
    "ErrorCode",
    "PipelineStage",
    "SwapExecutorError",
    "ChainError",
    "QuoteUnavailable",
    "AllowanceSetupFailed",
    "SignatureMissing",
    "SubmissionFailed",
    "ConfigurationError",
]
