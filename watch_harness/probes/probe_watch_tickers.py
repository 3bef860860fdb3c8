"""Multi-ticker stream; the response is keyed by symbol."""

from typing import Any

from watch_harness.capabilities import Capability
from watch_harness.exceptions import ProbeValidationError
from watch_harness.probes.base import watch_stream
from watch_harness.probes.schemas import TickerSchema, ensure_symbol, validate_payload

CAPABILITY = Capability.WATCH_TICKERS


async def probe(exchange: Any, symbol: str, code: str | None = None) -> None:
    def validate(tickers: Any) -> None:
        if not isinstance(tickers, dict):
            raise ProbeValidationError(
                CAPABILITY.value, symbol, f"expected a mapping, got {type(tickers).__name__}"
            )
        for key, ticker in tickers.items():
            parsed = validate_payload(TickerSchema, ticker, CAPABILITY, symbol)
            ensure_symbol(CAPABILITY, key, parsed.symbol)

    await watch_stream(
        exchange,
        CAPABILITY,
        lambda: exchange.watch_tickers([symbol]),
        validate,
        symbol=symbol,
    )
