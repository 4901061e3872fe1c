"""
Swap Module

Drives one 0x Permit2 swap through its fixed sequence of stages:

    price -> allowance (if needed) -> quote -> permit2 signature -> submit
          -> receipt (optional)

Every stage is a blocking call that either returns the input of the next
stage or raises. The first error halts the run; nothing is retried and no
stage is re-entered.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from decimal import Decimal, InvalidOperation, localcontext
from typing import TYPE_CHECKING, Iterator, List, Optional

from ..types import PipelineState, SwapResult, TxStatus
from ..errors import (
    ConfigurationError,
    ChainError,
    PipelineStage,
    SubmissionFailed,
    SwapExecutorError,
)
from ..infra.swap_run import SwapRun, log_swap_event
from ..config import config as global_config
from .quote import QuoteService
from .allowance import AllowanceManager
from .signature import SignatureEmbedder
from .submit import TransactionSubmitter
from .report import format_route, format_taxes

if TYPE_CHECKING:
    from ..infra.chain_client import ChainClient

logger = logging.getLogger(__name__)


@contextmanager
def _stage(stage: PipelineStage) -> Iterator[None]:
    """Attribute any executor error raised inside the block to a stage"""
    try:
        yield
    except SwapExecutorError as e:
        e.stage = stage
        raise


class SwapPipeline:
    """
    Single-swap execution pipeline

    Usage:
        pipeline = SwapPipeline(chain, quotes, allowance, SignatureEmbedder(), TransactionSubmitter(chain))

        # Raises the first stage error
        result = pipeline.run(10**17)

        # Never raises executor errors; failure is reported in the result
        result = pipeline.execute(10**17)
        if result.is_failed:
            print(result.failed_stage, result.error)
    """

    def __init__(
        self,
        chain: "ChainClient",
        quotes: QuoteService,
        allowance: AllowanceManager,
        embedder: SignatureEmbedder,
        submitter: TransactionSubmitter,
    ):
        self._chain = chain
        self._quotes = quotes
        self._allowance = allowance
        self._embedder = embedder
        self._submitter = submitter

    def to_base_units(self, amount: Decimal) -> int:
        """
        Scale a UI amount of the sell token by its on-chain decimals

        Floats are taken at their printed value, so 0.1 means Decimal("0.1").

        Raises:
            ConfigurationError: If amount is not a positive number or has
                more fractional digits than the token supports
            ChainError: If decimals() cannot be read
        """
        try:
            amount = Decimal(str(amount))
        except InvalidOperation as e:
            raise ConfigurationError.invalid("amount", f"not a number: {amount!r}") from e
        if not amount.is_finite() or amount <= 0:
            raise ConfigurationError.invalid("amount", f"must be positive, got {amount}")

        decimals = self._chain.token_decimals(self._quotes.sell_token)
        with localcontext() as ctx:
            ctx.prec = 100
            scaled = amount.scaleb(decimals)
        if scaled != scaled.to_integral_value():
            raise ConfigurationError.invalid(
                "amount", f"{amount} has more than {decimals} decimal places"
            )
        return int(scaled)

    def run(
        self,
        sell_amount: int,
        fee_bps: Optional[int] = None,
        surplus_collection: Optional[bool] = None,
        wait_confirmation: Optional[bool] = None,
    ) -> SwapResult:
        """
        Execute the pipeline

        Args:
            sell_amount: Sell amount in base units
            fee_bps: Affiliate fee in bps (default from config)
            surplus_collection: Surplus collection flag (default from config)
            wait_confirmation: Block for the swap receipt (default from config)

        Returns:
            SwapResult with status SUCCESS (confirmed) or PENDING (submitted)

        Raises:
            SwapExecutorError: First stage failure, with ``stage`` set
        """
        return self._run([], sell_amount, fee_bps, surplus_collection, wait_confirmation)

    def execute(
        self,
        sell_amount: int,
        fee_bps: Optional[int] = None,
        surplus_collection: Optional[bool] = None,
        wait_confirmation: Optional[bool] = None,
    ) -> SwapResult:
        """Same as run() but reports a stage failure as a FAILED SwapResult"""
        states: List[PipelineState] = []
        try:
            return self._run(states, sell_amount, fee_bps, surplus_collection, wait_confirmation)
        except SwapExecutorError as e:
            return SwapResult.failed(e, states)

    def swap(
        self,
        amount: Decimal,
        fee_bps: Optional[int] = None,
        surplus_collection: Optional[bool] = None,
        wait_confirmation: Optional[bool] = None,
    ) -> SwapResult:
        """
        Swap a UI amount of the sell token (e.g. Decimal("0.1") WETH)

        Raises:
            SwapExecutorError: First stage failure, with ``stage`` set
        """
        with _stage(PipelineStage.SETUP):
            sell_amount = self.to_base_units(amount)
        return self.run(sell_amount, fee_bps, surplus_collection, wait_confirmation)

    def _run(
        self,
        states: List[PipelineState],
        sell_amount: int,
        fee_bps: Optional[int],
        surplus_collection: Optional[bool],
        wait_confirmation: Optional[bool],
    ) -> SwapResult:
        defaults = global_config.swap
        fee_bps = fee_bps if fee_bps is not None else defaults.affiliate_fee_bps
        surplus_collection = surplus_collection if surplus_collection is not None else defaults.surplus_collection
        wait_confirmation = wait_confirmation if wait_confirmation is not None else defaults.wait_confirmation

        def advance(state: PipelineState, message: str):
            states.append(state)
            log_swap_event(logger, logging.INFO, message, state.value)

        with SwapRun():
            advance(PipelineState.START, f"Selling {sell_amount} of {self._quotes.sell_token} for {self._quotes.buy_token}")
            try:
                with _stage(PipelineStage.PRICE):
                    price = self._quotes.fetch_price(sell_amount, fee_bps, surplus_collection)
                advance(PipelineState.PRICE_FETCHED, f"Estimated buy amount {price.buy_amount}")
                if price.balance_issue is not None:
                    issue = price.balance_issue
                    log_swap_event(
                        logger, logging.WARNING,
                        f"Balance of {issue.token or self._quotes.sell_token} is {issue.actual}, "
                        f"swap needs {issue.expected}",
                        "balance", actual=issue.actual, expected=issue.expected,
                    )

                with _stage(PipelineStage.ALLOWANCE):
                    approval_tx_hash = self._allowance.resolve(price)
                if approval_tx_hash is None:
                    advance(PipelineState.ALLOWANCE_OK, "No approval needed")
                else:
                    advance(PipelineState.ALLOWANCE_RESOLVED, f"Approval confirmed {approval_tx_hash}")

                with _stage(PipelineStage.QUOTE):
                    quote = self._quotes.fetch_quote(price.params)
                advance(PipelineState.QUOTE_FETCHED, f"Firm buy amount {quote.buy_amount}")
                for line in format_route(quote):
                    log_swap_event(logger, logging.INFO, line, "route")
                for line in format_taxes(quote.token_metadata):
                    log_swap_event(logger, logging.INFO, line, "tax")

                with _stage(PipelineStage.SIGNATURE):
                    template = self._embedder.apply(quote.transaction, quote.permit2_eip712, self._chain)
                advance(PipelineState.SIGNED, "Permit2 signature embedded")

                with _stage(PipelineStage.SUBMISSION):
                    tx_hash = self._submitter.send(template)
                advance(PipelineState.SUBMITTED, f"Submitted {tx_hash}")

                if not wait_confirmation:
                    return SwapResult(
                        status=TxStatus.PENDING,
                        state=PipelineState.SUBMITTED,
                        tx_hash=tx_hash,
                        approval_tx_hash=approval_tx_hash,
                        states=list(states),
                    )

                with _stage(PipelineStage.CONFIRMATION):
                    receipt = self._confirm(tx_hash)
                advance(PipelineState.CONFIRMED, f"Confirmed in block {receipt.get('blockNumber')}")

                return SwapResult(
                    status=TxStatus.SUCCESS,
                    state=PipelineState.CONFIRMED,
                    tx_hash=tx_hash,
                    approval_tx_hash=approval_tx_hash,
                    block_number=receipt.get("blockNumber"),
                    gas_used=receipt.get("gasUsed"),
                    states=list(states),
                )

            except SwapExecutorError as e:
                log_swap_event(
                    logger, logging.ERROR, f"Swap failed: {e}", PipelineState.FAILED.value,
                    stage=e.stage.value, error_code=e.code.value,
                )
                raise

    def _confirm(self, tx_hash: str) -> dict:
        try:
            receipt = self._chain.wait_for_receipt(tx_hash)
        except ChainError as e:
            raise SubmissionFailed.confirmation_failed(tx_hash, e) from e
        if receipt.get("status") != 1:
            raise SubmissionFailed.reverted(tx_hash)
        return receipt
