"""Ticker stream for one symbol."""

from typing import Any

from watch_harness.capabilities import Capability
from watch_harness.probes.base import watch_stream
from watch_harness.probes.schemas import TickerSchema, ensure_symbol, validate_payload

CAPABILITY = Capability.WATCH_TICKER


async def probe(exchange: Any, symbol: str, code: str | None = None) -> None:
    def validate(ticker: Any) -> None:
        parsed = validate_payload(TickerSchema, ticker, CAPABILITY, symbol)
        ensure_symbol(CAPABILITY, symbol, parsed.symbol)

    await watch_stream(
        exchange,
        CAPABILITY,
        lambda: exchange.watch_ticker(symbol),
        validate,
        symbol=symbol,
    )
