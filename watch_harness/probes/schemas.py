"""Pydantic schemas for streamed payloads.

The harness does not check market correctness; these schemas only reject
payloads whose shape contradicts the unified ccxt structures (unsorted
books, negative amounts, candles whose high is below their close, ...).
A violation is reported as ``ProbeValidationError``.
"""

from typing import Any, Iterable, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from watch_harness.capabilities import Capability
from watch_harness.exceptions import ProbeValidationError

Number = float | None


class _Payload(BaseModel):
    model_config = ConfigDict(extra="allow")


class OrderBookSchema(_Payload):
    """Unified order book: bids descending, asks ascending, not crossed."""

    symbol: str | None = None
    bids: list[list[float]]
    asks: list[list[float]]
    timestamp: int | None = None
    nonce: int | None = None

    @field_validator("bids", "asks")
    @classmethod
    def validate_levels(cls, levels: list[list[float]]) -> list[list[float]]:
        for level in levels:
            if len(level) < 2:
                raise ValueError(f"price level needs price and amount, got {level}")
            price, amount = level[0], level[1]
            if price <= 0:
                raise ValueError(f"price must be positive, got {price}")
            if amount < 0:
                raise ValueError(f"amount must not be negative, got {amount}")
        return levels

    @model_validator(mode="after")
    def validate_sorting(self) -> "OrderBookSchema":
        bid_prices = [level[0] for level in self.bids]
        ask_prices = [level[0] for level in self.asks]
        if bid_prices != sorted(bid_prices, reverse=True):
            raise ValueError("bids are not sorted by descending price")
        if ask_prices != sorted(ask_prices):
            raise ValueError("asks are not sorted by ascending price")
        if bid_prices and ask_prices and bid_prices[0] > ask_prices[0]:
            raise ValueError(f"book is crossed: bid {bid_prices[0]} > ask {ask_prices[0]}")
        return self


class AggregatedOrderBookSchema(OrderBookSchema):
    """Order book with exactly one entry per price level."""

    @model_validator(mode="after")
    def validate_unique_levels(self) -> "AggregatedOrderBookSchema":
        for side, levels in (("bids", self.bids), ("asks", self.asks)):
            prices = [level[0] for level in levels]
            if len(set(prices)) != len(prices):
                raise ValueError(f"{side} contain duplicate price levels")
        return self


class TickerSchema(_Payload):
    symbol: str
    timestamp: int | None = None
    bid: Number = None
    ask: Number = None
    last: Number = None
    high: Number = None
    low: Number = None
    baseVolume: Number = Field(default=None, ge=0)

    @model_validator(mode="after")
    def validate_range(self) -> "TickerSchema":
        if self.high is not None and self.low is not None and self.low > self.high:
            raise ValueError(f"low {self.low} is above high {self.high}")
        if self.bid is not None and self.ask is not None and self.bid > self.ask:
            raise ValueError(f"bid {self.bid} is above ask {self.ask}")
        return self


class TradeSchema(_Payload):
    symbol: str
    timestamp: int | None = None
    side: Literal["buy", "sell"] | None = None
    price: float = Field(..., gt=0)
    amount: Number = Field(default=None, ge=0)


class CandleSchema(BaseModel):
    """One ``[timestamp, open, high, low, close, volume]`` row."""

    timestamp: int
    open: float
    high: float
    low: float
    close: float
    volume: Number = Field(default=None, ge=0)

    @model_validator(mode="before")
    @classmethod
    def from_row(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            if len(value) != 6:
                raise ValueError(f"candle must have 6 fields, got {len(value)}")
            return dict(zip(("timestamp", "open", "high", "low", "close", "volume"), value))
        return value

    @model_validator(mode="after")
    def validate_range(self) -> "CandleSchema":
        if self.low > min(self.open, self.close) or self.high < max(self.open, self.close):
            raise ValueError(
                f"open/close outside low-high range: o={self.open} h={self.high} "
                f"l={self.low} c={self.close}"
            )
        return self


class BalanceSchema(_Payload):
    free: dict[str, Number] = Field(default_factory=dict)
    used: dict[str, Number] = Field(default_factory=dict)
    total: dict[str, Number] = Field(default_factory=dict)


class OrderSchema(_Payload):
    id: str
    symbol: str | None = None
    side: Literal["buy", "sell"] | None = None
    status: Literal["open", "closed", "canceled", "expired", "rejected"] | None = None
    amount: Number = Field(default=None, ge=0)


class TransactionSchema(_Payload):
    id: str | None = None
    currency: str | None = None
    type: Literal["deposit", "withdrawal"] | None = None
    amount: Number = Field(default=None, ge=0)


class LedgerEntrySchema(_Payload):
    id: str | None = None
    currency: str | None = None
    direction: Literal["in", "out"] | None = None
    amount: Number = Field(default=None, ge=0)


class StatusSchema(_Payload):
    status: str
    updated: int | None = None


SchemaT = TypeVar("SchemaT", bound=BaseModel)


def validate_payload(
    schema: type[SchemaT],
    payload: Any,
    capability: Capability,
    symbol: str | None = None,
) -> SchemaT:
    """Validate one payload, converting pydantic errors to ProbeValidationError."""
    try:
        return schema.model_validate(payload)
    except ValidationError as exc:
        raise ProbeValidationError(capability.value, symbol, str(exc)) from exc


def validate_each(
    schema: type[SchemaT],
    payloads: Iterable[Any],
    capability: Capability,
    symbol: str | None = None,
) -> list[SchemaT]:
    return [validate_payload(schema, payload, capability, symbol) for payload in payloads]


def ensure_symbol(capability: Capability, expected: str, actual: str | None) -> None:
    """Fail when a payload belongs to another market than requested."""
    if actual is not None and actual != expected:
        raise ProbeValidationError(
            capability.value, expected, f"payload is for symbol {actual}"
        )
