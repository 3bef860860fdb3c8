"""Multi-symbol order book stream, exercised with a single-symbol list."""

from typing import Any

from watch_harness.capabilities import Capability
from watch_harness.probes.base import watch_stream
from watch_harness.probes.schemas import OrderBookSchema, ensure_symbol, validate_payload

CAPABILITY = Capability.WATCH_ORDER_BOOKS


async def probe(exchange: Any, symbol: str, code: str | None = None) -> None:
    def validate(order_book: Any) -> None:
        book = validate_payload(OrderBookSchema, order_book, CAPABILITY, symbol)
        ensure_symbol(CAPABILITY, symbol, book.symbol)

    await watch_stream(
        exchange,
        CAPABILITY,
        lambda: exchange.watch_order_book_for_symbols([symbol]),
        validate,
        symbol=symbol,
    )
