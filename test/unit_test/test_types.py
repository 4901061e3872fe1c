"""
Unit tests for type definitions

Covers query serialization, response parsing and the result object.
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent.parent))
sys.path.insert(0, str(Path(__file__).parent))

from zeroex_swap.types import (
    QuoteParams,
    PriceQuote,
    SwapQuote,
    TransactionTemplate,
    RouteFill,
    TokenMetadata,
    SwapResult,
    TxStatus,
    PipelineState,
    FULL_PROPORTION_BPS,
)
from zeroex_swap.errors import ErrorCode, PipelineStage, QuoteUnavailable, SignatureMissing
from sample_responses import (
    price_response,
    quote_response,
    PERMIT2,
    SETTLER,
    TEST_ADDRESS,
    WETH,
    USDC,
    ONE_TENTH_WETH,
)

PRICE = "swap/permit2/price"
QUOTE = "swap/permit2/quote"


def make_params(**overrides):
    values = dict(
        chain_id=8453,
        sell_token=WETH,
        buy_token=USDC,
        sell_amount=ONE_TENTH_WETH,
        taker=TEST_ADDRESS,
    )
    values.update(overrides)
    return QuoteParams(**values)


class TestQuoteParams:
    """Test QuoteParams wire format"""

    def test_to_query(self):
        query = make_params(affiliate_fee_bps=15).to_query()

        assert query == {
            "chainId": "8453",
            "sellToken": WETH,
            "buyToken": USDC,
            "sellAmount": "100000000000000000",
            "taker": TEST_ADDRESS,
            "affiliateFee": "15",
            "surplusCollection": "true",
        }

    def test_surplus_collection_false(self):
        assert make_params(surplus_collection=False).to_query()["surplusCollection"] == "false"

    def test_frozen(self):
        params = make_params()
        with pytest.raises(Exception):
            params.sell_amount = 1


class TestPriceQuote:
    """Test PriceQuote parsing"""

    def test_no_allowance_issue(self):
        price = PriceQuote.from_response(price_response(), make_params(), PRICE)

        assert price.sell_amount == ONE_TENTH_WETH
        assert price.buy_amount == 398107295
        assert price.allowance_issue is None
        assert price.needs_allowance is False
        assert price.total_network_fee == 1332056000000
        assert price.params == make_params()

    def test_allowance_issue(self):
        price = PriceQuote.from_response(
            price_response(allowance_spender=PERMIT2), make_params(), PRICE
        )

        assert price.needs_allowance is True
        assert price.allowance_issue.spender == PERMIT2
        assert price.allowance_issue.actual == 0

    def test_balance_issue(self):
        balance = {"token": WETH, "actual": "5", "expected": str(ONE_TENTH_WETH)}
        price = PriceQuote.from_response(price_response(balance=balance), make_params(), PRICE)

        assert price.balance_issue.token == WETH
        assert price.balance_issue.actual == 5
        assert price.balance_issue.expected == ONE_TENTH_WETH

    def test_no_liquidity(self):
        body = price_response()
        body["liquidityAvailable"] = False

        with pytest.raises(QuoteUnavailable) as exc_info:
            PriceQuote.from_response(body, make_params(), PRICE)
        assert exc_info.value.code == ErrorCode.QUOTE_NO_LIQUIDITY

    def test_missing_buy_amount(self):
        body = price_response()
        del body["buyAmount"]

        with pytest.raises(QuoteUnavailable) as exc_info:
            PriceQuote.from_response(body, make_params(), PRICE)
        assert exc_info.value.code == ErrorCode.QUOTE_INVALID_RESPONSE
        assert "buyAmount" in exc_info.value.message

    def test_non_numeric_amount(self):
        body = price_response()
        body["sellAmount"] = "lots"

        with pytest.raises(QuoteUnavailable):
            PriceQuote.from_response(body, make_params(), PRICE)

    def test_allowance_issue_without_spender(self):
        body = price_response()
        body["issues"]["allowance"] = {"actual": "0"}

        with pytest.raises(QuoteUnavailable):
            PriceQuote.from_response(body, make_params(), PRICE)


class TestSwapQuote:
    """Test SwapQuote parsing"""

    def test_parse(self):
        quote = SwapQuote.from_response(quote_response(), make_params(), QUOTE)

        assert quote.buy_amount == 398107295
        assert quote.min_buy_amount == 394126222
        assert quote.sources == ["Uniswap_V3", "Aerodrome_V3"]
        assert quote.total_proportion_bps == FULL_PROPORTION_BPS
        assert quote.transaction.to == SETTLER
        assert quote.transaction.data == "0x1fff991f"
        assert quote.transaction.gas == 220000
        assert quote.transaction.gas_price == 6054800
        assert quote.transaction.value == 0
        assert quote.permit2_eip712["primaryType"] == "PermitTransferFrom"

    def test_missing_permit_is_none(self):
        quote = SwapQuote.from_response(quote_response(with_permit=False), make_params(), QUOTE)
        assert quote.permit2_eip712 is None

    def test_empty_permit_is_none(self):
        body = quote_response()
        body["permit2"]["eip712"] = {}

        quote = SwapQuote.from_response(body, make_params(), QUOTE)
        assert quote.permit2_eip712 is None

    def test_omitted_gas_fields(self):
        quote = SwapQuote.from_response(
            quote_response(gas=None, gas_price=None), make_params(), QUOTE
        )
        assert quote.transaction.gas is None
        assert quote.transaction.gas_price is None

    def test_route_must_sum_to_full_proportion(self):
        fills = [
            {"source": "Uniswap_V3", "proportionBps": "6000"},
            {"source": "Aerodrome_V3", "proportionBps": "3000"},
        ]
        with pytest.raises(QuoteUnavailable) as exc_info:
            SwapQuote.from_response(quote_response(fills=fills), make_params(), QUOTE)
        assert "9000" in exc_info.value.message

    def test_empty_route_rejected(self):
        with pytest.raises(QuoteUnavailable):
            SwapQuote.from_response(quote_response(fills=[]), make_params(), QUOTE)

    def test_transaction_without_calldata(self):
        body = quote_response()
        del body["transaction"]["data"]

        with pytest.raises(QuoteUnavailable):
            SwapQuote.from_response(body, make_params(), QUOTE)

    def test_non_hex_calldata_rejected(self):
        with pytest.raises(QuoteUnavailable) as exc_info:
            SwapQuote.from_response(quote_response(calldata="0xzz"), make_params(), QUOTE)
        assert exc_info.value.code == ErrorCode.QUOTE_INVALID_RESPONSE
        assert "transaction.data" in exc_info.value.message

    def test_odd_length_calldata_rejected(self):
        with pytest.raises(QuoteUnavailable) as exc_info:
            SwapQuote.from_response(quote_response(calldata="0x1fff991"), make_params(), QUOTE)
        assert "transaction.data" in exc_info.value.message

    def test_calldata_without_prefix_rejected(self):
        with pytest.raises(QuoteUnavailable):
            SwapQuote.from_response(quote_response(calldata="1fff991f"), make_params(), QUOTE)

    def test_negative_proportion_rejected(self):
        fills = [
            {"source": "Uniswap_V3", "proportionBps": "-5000"},
            {"source": "Aerodrome_V3", "proportionBps": "15000"},
        ]
        with pytest.raises(QuoteUnavailable) as exc_info:
            SwapQuote.from_response(quote_response(fills=fills), make_params(), QUOTE)
        assert "negative" in exc_info.value.message

    def test_fractional_proportion_rejected(self):
        fills = [
            {"source": "Uniswap_V3", "proportionBps": 5000.5},
            {"source": "Aerodrome_V3", "proportionBps": 4999.5},
        ]
        with pytest.raises(QuoteUnavailable) as exc_info:
            SwapQuote.from_response(quote_response(fills=fills), make_params(), QUOTE)
        assert exc_info.value.code == ErrorCode.QUOTE_INVALID_RESPONSE

    def test_integral_float_accepted(self):
        fills = [{"source": "Uniswap_V3", "proportionBps": 10000.0}]
        quote = SwapQuote.from_response(quote_response(fills=fills), make_params(), QUOTE)
        assert quote.route[0].proportion_bps == FULL_PROPORTION_BPS

    def test_token_metadata_taxes(self):
        metadata = {
            "buyToken": {"buyTaxBps": "100", "sellTaxBps": "0"},
            "sellToken": {"buyTaxBps": "0", "sellTaxBps": "250"},
        }
        quote = SwapQuote.from_response(
            quote_response(token_metadata=metadata), make_params(), QUOTE
        )

        assert quote.token_metadata.buy_token.buy_tax_bps == 100
        assert quote.token_metadata.sell_token.sell_tax_bps == 250
        assert quote.token_metadata.buy_token.has_tax


class TestTransactionTemplate:
    """Test TransactionTemplate helpers"""

    def test_with_data_keeps_other_fields(self):
        template = TransactionTemplate(to=SETTLER, data="0x01", value=0, gas=21000, gas_price=7)
        updated = template.with_data("0x0102")

        assert updated.data == "0x0102"
        assert updated.to == SETTLER
        assert updated.gas == 21000
        assert updated.gas_price == 7
        assert template.data == "0x01"


def test_route_fill_percent():
    """Test RouteFill percent conversion"""
    fill = RouteFill(source="Uniswap_V3", proportion_bps=2550)
    assert str(fill.percent) == "25.5"


def test_token_metadata_default():
    """Test TokenMetadata defaults to no taxes"""
    metadata = TokenMetadata()
    assert not metadata.buy_token.has_tax
    assert not metadata.sell_token.has_tax


class TestSwapResult:
    """Test SwapResult"""

    def test_failed(self):
        states = [PipelineState.START, PipelineState.PRICE_FETCHED,
                  PipelineState.ALLOWANCE_OK, PipelineState.QUOTE_FETCHED]
        result = SwapResult.failed(SignatureMissing(), states)

        assert result.is_failed
        assert result.status == TxStatus.FAILED
        assert result.state == PipelineState.FAILED
        assert result.failed_stage == PipelineStage.SIGNATURE
        assert result.error_code == "4001"
        assert result.states[-1] == PipelineState.FAILED
        assert len(result.states) == 5
        assert "signature" in str(result)

    def test_success(self):
        result = SwapResult(
            status=TxStatus.SUCCESS,
            state=PipelineState.CONFIRMED,
            tx_hash="0x" + "12" * 32,
        )
        assert result.is_success
        assert not result.is_pending
        assert "confirmed" in str(result)
