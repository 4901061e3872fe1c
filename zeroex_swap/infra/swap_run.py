"""
Swap run IDs for log tracing

Each SwapPipeline run is scoped by a short ID such as ``swap_1a2b3c4d5e6f``.
Handlers installed by ``setup_logging`` carry a SwapIdFilter, so every line
logged during the run (price call, approval, signing, broadcast) prints the
same ID. State transitions go through log_swap_event, which tags the record
with the pipeline state.
"""

import logging
import uuid
import contextvars
from typing import Optional

# Printed in place of the ID outside a swap run
NO_SWAP_ID = "-"

_swap_id: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "swap_id", default=None
)


def new_swap_id(prefix: str = "swap") -> str:
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


def current_swap_id() -> Optional[str]:
    """ID of the swap run active in this context, or None"""
    return _swap_id.get()


class SwapRun:
    """
    Scope of one swap run

    Usage:
        with SwapRun() as swap_id:
            log_swap_event(logger, logging.INFO, "Estimated buy amount 398107295", "price_fetched")
    """

    def __init__(self, prefix: str = "swap"):
        self.swap_id = new_swap_id(prefix)
        self._token: Optional[contextvars.Token] = None

    def __enter__(self) -> str:
        self._token = _swap_id.set(self.swap_id)
        return self.swap_id

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self._token is not None:
            _swap_id.reset(self._token)
            self._token = None


class SwapIdFilter(logging.Filter):
    """Stamp each record with ``swap_id`` for ``%(swap_id)s`` in log formats"""

    def filter(self, record: logging.LogRecord) -> bool:
        record.swap_id = current_swap_id() or NO_SWAP_ID
        return True


def log_swap_event(
    logger: logging.Logger,
    level: int,
    message: str,
    state: str,
    **fields
):
    """
    Log a pipeline event of the active swap run

    Args:
        logger: Module logger
        level: Logging level
        message: Event text; prefixed with ``[state]``
        state: Pipeline state or event name (``price_fetched``, ``route``, ...)
        **fields: Structured record fields (tx_hash, stage, error_code, ...)
    """
    logger.log(
        level,
        f"[{state}] {message}",
        extra={"swap_id": current_swap_id() or NO_SWAP_ID, "state": state, **fields},
    )
