"""OHLCV candle stream.

Uses the one-minute timeframe when the exchange offers it, otherwise the
first timeframe it lists.
"""

from typing import Any

from watch_harness.capabilities import Capability
from watch_harness.probes.base import watch_stream
from watch_harness.probes.schemas import CandleSchema, validate_each

CAPABILITY = Capability.WATCH_OHLCV
PREFERRED_TIMEFRAME = "1m"


def select_timeframe(timeframes: dict[str, Any] | None) -> str:
    if not timeframes or PREFERRED_TIMEFRAME in timeframes:
        return PREFERRED_TIMEFRAME
    return next(iter(timeframes))


async def probe(exchange: Any, symbol: str, code: str | None = None) -> None:
    timeframe = select_timeframe(exchange.timeframes)

    def validate(candles: Any) -> None:
        validate_each(CandleSchema, candles, CAPABILITY, symbol)

    await watch_stream(
        exchange,
        CAPABILITY,
        lambda: exchange.watch_ohlcv(symbol, timeframe),
        validate,
        symbol=symbol,
    )
