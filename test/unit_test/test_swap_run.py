"""
Unit tests for swap run IDs in log records
"""

import logging
import sys
from pathlib import Path
from unittest.mock import MagicMock

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from zeroex_swap.infra.swap_run import (
    NO_SWAP_ID,
    SwapRun,
    SwapIdFilter,
    new_swap_id,
    current_swap_id,
    log_swap_event,
)


def make_record():
    return logging.LogRecord("zeroex_swap.modules.swap", logging.INFO, __file__, 1, "Submitted", None, None)


class TestSwapRun:
    """Test SwapRun scoping"""

    def test_new_swap_id(self):
        swap_id = new_swap_id()
        assert swap_id.startswith("swap_")
        assert len(swap_id) == len("swap_") + 12
        assert swap_id != new_swap_id()

    def test_run_sets_and_resets(self):
        assert current_swap_id() is None

        with SwapRun() as swap_id:
            assert current_swap_id() == swap_id

        assert current_swap_id() is None

    def test_nested_runs(self):
        with SwapRun() as outer:
            with SwapRun("retry") as inner:
                assert inner.startswith("retry_")
                assert current_swap_id() == inner
            assert current_swap_id() == outer


class TestSwapIdFilter:
    """Test record stamping"""

    def test_inside_run(self):
        record = make_record()
        with SwapRun() as swap_id:
            assert SwapIdFilter().filter(record) is True
        assert record.swap_id == swap_id

    def test_outside_run(self):
        record = make_record()
        SwapIdFilter().filter(record)
        assert record.swap_id == NO_SWAP_ID


def test_log_swap_event():
    """Test state prefix and structured fields"""
    logger = MagicMock(spec=logging.Logger)

    with SwapRun() as swap_id:
        log_swap_event(logger, logging.INFO, "Submitted 0xabc", "submitted", tx_hash="0xabc")

    level, message = logger.log.call_args[0]
    extra = logger.log.call_args[1]["extra"]
    assert level == logging.INFO
    assert message == "[submitted] Submitted 0xabc"
    assert extra["swap_id"] == swap_id
    assert extra["state"] == "submitted"
    assert extra["tx_hash"] == "0xabc"
