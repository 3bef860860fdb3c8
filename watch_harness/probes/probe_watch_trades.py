"""Public trades stream."""

from typing import Any

from watch_harness.capabilities import Capability
from watch_harness.probes.base import watch_stream
from watch_harness.probes.schemas import TradeSchema, ensure_symbol, validate_each

CAPABILITY = Capability.WATCH_TRADES


async def probe(exchange: Any, symbol: str, code: str | None = None) -> None:
    def validate(trades: Any) -> None:
        for trade in validate_each(TradeSchema, trades, CAPABILITY, symbol):
            ensure_symbol(CAPABILITY, symbol, trade.symbol)

    await watch_stream(
        exchange,
        CAPABILITY,
        lambda: exchange.watch_trades(symbol),
        validate,
        symbol=symbol,
    )
