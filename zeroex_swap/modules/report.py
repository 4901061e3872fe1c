"""
Read-only display helpers for liquidity sources, routes and token taxes
"""

from decimal import Decimal
from typing import Iterable, List

from ..types import SwapQuote, TokenMetadata


def _bps_to_percent(bps: int) -> str:
    return f"{Decimal(bps) / Decimal(100):.2f}%"


def format_sources(sources: Iterable[str]) -> str:
    """Comma-separated liquidity source names"""
    return ", ".join(sources)


def format_route(quote: SwapQuote) -> List[str]:
    """One "<source>: <percent>" line per route fill"""
    return [f"{fill.source}: {_bps_to_percent(fill.proportion_bps)}" for fill in quote.route]


def format_taxes(metadata: TokenMetadata) -> List[str]:
    """Non-zero buy/sell taxes, one line each"""
    lines = []
    for side, tax in (("Buy token", metadata.buy_token), ("Sell token", metadata.sell_token)):
        if tax.buy_tax_bps > 0:
            lines.append(f"{side} buy tax: {_bps_to_percent(tax.buy_tax_bps)}")
        if tax.sell_tax_bps > 0:
            lines.append(f"{side} sell tax: {_bps_to_percent(tax.sell_tax_bps)}")
    return lines
