"""
Aggregator request and response types

Responses from the price and quote endpoints are parsed into these
dataclasses at the API boundary. Anything missing or malformed raises
QuoteUnavailable instead of leaking partially-filled values downstream.
"""

from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Optional, List, Dict, Any

from eth_utils import is_hexstr

from ..errors import QuoteUnavailable

# 100% in basis points
FULL_PROPORTION_BPS = 10000


def _to_int(value: Any, name: str, endpoint: str, default: Optional[int] = None) -> Optional[int]:
    """Parse an integer field that the API may send as a decimal string"""
    if value is None:
        if default is None:
            raise QuoteUnavailable.invalid_response(endpoint, f"missing field '{name}'")
        return default
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise QuoteUnavailable.invalid_response(endpoint, f"field '{name}' is not an integer: {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise QuoteUnavailable.invalid_response(
            endpoint, f"field '{name}' is not an integer: {value!r}", e
        ) from e


def _to_optional_int(value: Any, name: str, endpoint: str) -> Optional[int]:
    if value is None:
        return None
    return _to_int(value, name, endpoint)


def _require_dict(value: Any, name: str, endpoint: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise QuoteUnavailable.invalid_response(endpoint, f"field '{name}' must be an object")
    return value


@dataclass(frozen=True)
class QuoteParams:
    """
    Query parameters shared by the price and quote endpoints

    The aggregator requires the firm quote to be requested with exactly the
    same parameters as the price request, so one instance is reused for both.
    """
    chain_id: int
    sell_token: str
    buy_token: str
    sell_amount: int
    taker: str
    affiliate_fee_bps: int = 0
    surplus_collection: bool = True

    def to_query(self) -> Dict[str, str]:
        """Wire representation (all values are strings)"""
        return {
            "chainId": str(self.chain_id),
            "sellToken": self.sell_token,
            "buyToken": self.buy_token,
            "sellAmount": str(self.sell_amount),
            "taker": self.taker,
            "affiliateFee": str(self.affiliate_fee_bps),
            "surplusCollection": "true" if self.surplus_collection else "false",
        }


@dataclass(frozen=True)
class AllowanceIssue:
    """Insufficient allowance reported by the price endpoint"""
    spender: str
    actual: int = 0

    @classmethod
    def from_response(cls, data: Optional[Dict[str, Any]], endpoint: str) -> Optional["AllowanceIssue"]:
        if data is None:
            return None
        data = _require_dict(data, "issues.allowance", endpoint)
        spender = data.get("spender")
        if not isinstance(spender, str) or not spender:
            raise QuoteUnavailable.invalid_response(endpoint, "allowance issue without spender")
        return cls(
            spender=spender,
            actual=_to_int(data.get("actual"), "issues.allowance.actual", endpoint, default=0),
        )


@dataclass(frozen=True)
class BalanceIssue:
    """Insufficient sell token balance reported by the aggregator"""
    token: str
    actual: int
    expected: int

    @classmethod
    def from_response(cls, data: Optional[Dict[str, Any]], endpoint: str) -> Optional["BalanceIssue"]:
        if data is None:
            return None
        data = _require_dict(data, "issues.balance", endpoint)
        return cls(
            token=str(data.get("token", "")),
            actual=_to_int(data.get("actual"), "issues.balance.actual", endpoint, default=0),
            expected=_to_int(data.get("expected"), "issues.balance.expected", endpoint, default=0),
        )


@dataclass(frozen=True)
class RouteFill:
    """One liquidity source allocation within a route"""
    source: str
    proportion_bps: int
    from_token: str = ""
    to_token: str = ""

    @property
    def percent(self) -> Decimal:
        return Decimal(self.proportion_bps) / Decimal(100)


@dataclass(frozen=True)
class TokenTax:
    """Buy/sell tax of a token in basis points"""
    buy_tax_bps: int = 0
    sell_tax_bps: int = 0

    @property
    def has_tax(self) -> bool:
        return self.buy_tax_bps > 0 or self.sell_tax_bps > 0

    @classmethod
    def from_response(cls, data: Optional[Dict[str, Any]], name: str, endpoint: str) -> "TokenTax":
        if data is None:
            return cls()
        data = _require_dict(data, name, endpoint)
        return cls(
            buy_tax_bps=_to_int(data.get("buyTaxBps"), f"{name}.buyTaxBps", endpoint, default=0),
            sell_tax_bps=_to_int(data.get("sellTaxBps"), f"{name}.sellTaxBps", endpoint, default=0),
        )


@dataclass(frozen=True)
class TokenMetadata:
    """Tax metadata for both sides of the trade"""
    buy_token: TokenTax = field(default_factory=TokenTax)
    sell_token: TokenTax = field(default_factory=TokenTax)

    @classmethod
    def from_response(cls, data: Optional[Dict[str, Any]], endpoint: str) -> "TokenMetadata":
        if data is None:
            return cls()
        data = _require_dict(data, "tokenMetadata", endpoint)
        return cls(
            buy_token=TokenTax.from_response(data.get("buyToken"), "tokenMetadata.buyToken", endpoint),
            sell_token=TokenTax.from_response(data.get("sellToken"), "tokenMetadata.sellToken", endpoint),
        )


@dataclass(frozen=True)
class TransactionTemplate:
    """
    Unsigned transaction returned by the quote endpoint

    Attributes:
        to: Settlement contract address
        data: Calldata as 0x-prefixed hex string
        value: Native value in wei (None when omitted)
        gas: Gas limit (None when omitted)
        gas_price: Gas price in wei (None when omitted)
    """
    to: str
    data: str
    value: Optional[int] = None
    gas: Optional[int] = None
    gas_price: Optional[int] = None

    def with_data(self, data: str) -> "TransactionTemplate":
        """Copy of this template with calldata replaced"""
        return replace(self, data=data)

    @classmethod
    def from_response(cls, data: Any, endpoint: str) -> "TransactionTemplate":
        data = _require_dict(data, "transaction", endpoint)
        to = data.get("to")
        calldata = data.get("data")
        if not isinstance(to, str) or not to.startswith("0x"):
            raise QuoteUnavailable.invalid_response(endpoint, "transaction.to is not an address")
        # Whole bytes only
        if (
            not isinstance(calldata, str)
            or not calldata.startswith("0x")
            or not is_hexstr(calldata)
            or len(calldata) % 2 != 0
        ):
            raise QuoteUnavailable.invalid_response(endpoint, "transaction.data is not hex")
        return cls(
            to=to,
            data=calldata,
            value=_to_optional_int(data.get("value"), "transaction.value", endpoint),
            gas=_to_optional_int(data.get("gas"), "transaction.gas", endpoint),
            gas_price=_to_optional_int(data.get("gasPrice"), "transaction.gasPrice", endpoint),
        )


@dataclass
class PriceQuote:
    """
    Indicative, non-binding price from the price endpoint

    Attributes:
        params: Parameters the price was requested with
        sell_amount: Sell amount in base units
        buy_amount: Estimated buy amount in base units
        allowance_issue: Present when the Permit2 allowance is insufficient
        balance_issue: Present when the taker's balance is insufficient
        fees: Raw fee breakdown (integratorFee, zeroExFee, gasFee)
        total_network_fee: Estimated network fee in wei
        liquidity_available: Aggregator found liquidity for the pair
        raw_response: Raw API response data
    """
    params: QuoteParams
    sell_amount: int
    buy_amount: int
    allowance_issue: Optional[AllowanceIssue] = None
    balance_issue: Optional[BalanceIssue] = None
    fees: Dict[str, Any] = field(default_factory=dict)
    total_network_fee: Optional[int] = None
    liquidity_available: bool = True
    raw_response: Optional[dict] = None

    @property
    def needs_allowance(self) -> bool:
        return self.allowance_issue is not None

    @classmethod
    def from_response(cls, data: Any, params: QuoteParams, endpoint: str) -> "PriceQuote":
        data = _require_dict(data, "<root>", endpoint)
        if data.get("liquidityAvailable") is False:
            raise QuoteUnavailable.no_liquidity(endpoint)

        issues = data.get("issues") or {}
        issues = _require_dict(issues, "issues", endpoint)

        return cls(
            params=params,
            sell_amount=_to_int(data.get("sellAmount"), "sellAmount", endpoint),
            buy_amount=_to_int(data.get("buyAmount"), "buyAmount", endpoint),
            allowance_issue=AllowanceIssue.from_response(issues.get("allowance"), endpoint),
            balance_issue=BalanceIssue.from_response(issues.get("balance"), endpoint),
            fees=data.get("fees") or {},
            total_network_fee=_to_optional_int(data.get("totalNetworkFee"), "totalNetworkFee", endpoint),
            liquidity_available=True,
            raw_response=data,
        )

    def __str__(self) -> str:
        return f"Price({self.sell_amount} -> {self.buy_amount}, allowance_issue={self.needs_allowance})"


@dataclass
class SwapQuote:
    """
    Firm, executable quote from the quote endpoint

    Attributes:
        params: Parameters the quote was requested with (same as the price)
        sell_amount: Sell amount in base units
        buy_amount: Expected buy amount in base units
        min_buy_amount: Minimum buy amount after slippage
        route: Ordered route fills; proportions sum to 10000 bps
        token_metadata: Buy/sell token taxes
        permit2_eip712: EIP-712 typed data to sign (None if absent)
        transaction: Unsigned transaction template
        raw_response: Raw API response data
    """
    params: QuoteParams
    sell_amount: int
    buy_amount: int
    transaction: TransactionTemplate
    min_buy_amount: Optional[int] = None
    route: List[RouteFill] = field(default_factory=list)
    token_metadata: TokenMetadata = field(default_factory=TokenMetadata)
    permit2_eip712: Optional[Dict[str, Any]] = None
    raw_response: Optional[dict] = None

    @property
    def total_proportion_bps(self) -> int:
        return sum(fill.proportion_bps for fill in self.route)

    @property
    def sources(self) -> List[str]:
        return [fill.source for fill in self.route]

    @classmethod
    def from_response(cls, data: Any, params: QuoteParams, endpoint: str) -> "SwapQuote":
        data = _require_dict(data, "<root>", endpoint)
        if data.get("liquidityAvailable") is False:
            raise QuoteUnavailable.no_liquidity(endpoint)

        route = _parse_route(data.get("route"), endpoint)

        permit2 = data.get("permit2")
        eip712 = None
        if permit2 is not None:
            permit2 = _require_dict(permit2, "permit2", endpoint)
            eip712 = permit2.get("eip712")
            if eip712 is not None:
                eip712 = _require_dict(eip712, "permit2.eip712", endpoint)

        return cls(
            params=params,
            sell_amount=_to_int(data.get("sellAmount"), "sellAmount", endpoint),
            buy_amount=_to_int(data.get("buyAmount"), "buyAmount", endpoint),
            min_buy_amount=_to_optional_int(data.get("minBuyAmount"), "minBuyAmount", endpoint),
            transaction=TransactionTemplate.from_response(data.get("transaction"), endpoint),
            route=route,
            token_metadata=TokenMetadata.from_response(data.get("tokenMetadata"), endpoint),
            permit2_eip712=eip712 or None,
            raw_response=data,
        )

    def __str__(self) -> str:
        return f"Quote({self.sell_amount} -> {self.buy_amount}, sources={self.sources})"


def _parse_route(data: Any, endpoint: str) -> List[RouteFill]:
    """Parse route.fills and check that proportions cover the whole trade"""
    route = _require_dict(data, "route", endpoint)
    fills = route.get("fills")
    if not isinstance(fills, list) or not fills:
        raise QuoteUnavailable.invalid_response(endpoint, "route.fills is empty")

    parsed: List[RouteFill] = []
    for i, fill in enumerate(fills):
        fill = _require_dict(fill, f"route.fills[{i}]", endpoint)
        source = fill.get("source")
        if not isinstance(source, str) or not source:
            raise QuoteUnavailable.invalid_response(endpoint, f"route.fills[{i}] has no source")
        proportion_bps = _to_int(fill.get("proportionBps"), f"route.fills[{i}].proportionBps", endpoint)
        if proportion_bps < 0:
            raise QuoteUnavailable.invalid_response(
                endpoint, f"route.fills[{i}].proportionBps is negative: {proportion_bps}"
            )
        parsed.append(RouteFill(
            source=source,
            proportion_bps=proportion_bps,
            from_token=str(fill.get("from", "")),
            to_token=str(fill.get("to", "")),
        ))

    total = sum(f.proportion_bps for f in parsed)
    if total != FULL_PROPORTION_BPS:
        raise QuoteUnavailable.invalid_response(
            endpoint, f"route proportions sum to {total} bps, expected {FULL_PROPORTION_BPS}"
        )
    return parsed
