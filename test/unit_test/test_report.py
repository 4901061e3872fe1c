"""
Unit tests for reporting helpers
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from zeroex_swap.modules.report import format_sources, format_route, format_taxes
from zeroex_swap.types import RouteFill, SwapQuote, TokenMetadata, TokenTax, TransactionTemplate


def make_quote(route):
    return SwapQuote(
        params=None,
        sell_amount=1,
        buy_amount=1,
        transaction=TransactionTemplate(to="0x" + "00" * 20, data="0x"),
        route=route,
    )


def test_format_sources():
    """Test source list formatting"""
    print("Testing format_sources...")

    assert format_sources(["Aerodrome_V3", "Uniswap_V3"]) == "Aerodrome_V3, Uniswap_V3"
    assert format_sources([]) == ""

    print("  format_sources: PASSED")


def test_format_route():
    """Test route fill formatting"""
    print("Testing format_route...")

    quote = make_quote([
        RouteFill(source="Uniswap_V3", proportion_bps=7550),
        RouteFill(source="Aerodrome_V3", proportion_bps=2450),
    ])

    assert format_route(quote) == ["Uniswap_V3: 75.50%", "Aerodrome_V3: 24.50%"]

    print("  format_route: PASSED")


def test_format_taxes():
    """Test only non-zero taxes are reported"""
    print("Testing format_taxes...")

    assert format_taxes(TokenMetadata()) == []

    metadata = TokenMetadata(
        buy_token=TokenTax(buy_tax_bps=100),
        sell_token=TokenTax(sell_tax_bps=250),
    )
    assert format_taxes(metadata) == [
        "Buy token buy tax: 1.00%",
        "Sell token sell tax: 2.50%",
    ]

    print("  format_taxes: PASSED")
