"""
Result type definitions for swap execution
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List

from ..errors import PipelineStage, SwapExecutorError


class TxStatus(Enum):
    """Transaction status"""
    SUCCESS = "success"
    FAILED = "failed"
    PENDING = "pending"


class PipelineState(Enum):
    """
    Swap pipeline states

    START -> PRICE_FETCHED -> {ALLOWANCE_OK | ALLOWANCE_RESOLVED}
          -> QUOTE_FETCHED -> SIGNED -> SUBMITTED -> (CONFIRMED | FAILED)

    Any stage failure moves straight to FAILED.
    """
    START = "start"
    PRICE_FETCHED = "price_fetched"
    ALLOWANCE_OK = "allowance_ok"
    ALLOWANCE_RESOLVED = "allowance_resolved"
    QUOTE_FETCHED = "quote_fetched"
    SIGNED = "signed"
    SUBMITTED = "submitted"
    CONFIRMED = "confirmed"
    FAILED = "failed"


@dataclass
class SwapResult:
    """
    Swap pipeline outcome

    Attributes:
        status: Transaction status
        state: Last pipeline state reached
        tx_hash: Swap transaction hash (0x-prefixed)
        approval_tx_hash: Approval transaction hash if one was needed
        failed_stage: Stage that raised, when status is FAILED
        error: Error message if failed
        error_code: Error code for programmatic handling
        block_number: Block the swap was mined in
        gas_used: Gas used by the swap
        states: Every state visited, in order
    """
    status: TxStatus
    state: PipelineState
    tx_hash: Optional[str] = None
    approval_tx_hash: Optional[str] = None
    failed_stage: Optional[PipelineStage] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    block_number: Optional[int] = None
    gas_used: Optional[int] = None
    states: List[PipelineState] = field(default_factory=list)

    @property
    def is_success(self) -> bool:
        return self.status == TxStatus.SUCCESS

    @property
    def is_failed(self) -> bool:
        return self.status == TxStatus.FAILED

    @property
    def is_pending(self) -> bool:
        return self.status == TxStatus.PENDING

    @classmethod
    def failed(cls, error: SwapExecutorError, states: List[PipelineState], **kwargs) -> "SwapResult":
        """Create failed result from the stage error"""
        return cls(
            status=TxStatus.FAILED,
            state=PipelineState.FAILED,
            failed_stage=error.stage,
            error=error.message,
            error_code=error.code.value,
            states=list(states) + [PipelineState.FAILED],
            **kwargs
        )

    def __str__(self) -> str:
        if self.is_failed:
            stage = self.failed_stage.value if self.failed_stage else "unknown"
            return f"SwapResult(failed at {stage}, error={self.error})"
        tx_display = f"{self.tx_hash[:18]}..." if self.tx_hash else "no tx"
        return f"SwapResult({self.status.value}, {self.state.value}, {tx_display})"
