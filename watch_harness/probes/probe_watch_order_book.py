"""Order book stream: sorted, non-crossed books for the requested symbol."""

from typing import Any

from watch_harness.capabilities import Capability
from watch_harness.probes.base import watch_stream
from watch_harness.probes.schemas import OrderBookSchema, ensure_symbol, validate_payload

CAPABILITY = Capability.WATCH_ORDER_BOOK


async def probe(exchange: Any, symbol: str, code: str | None = None) -> None:
    def validate(order_book: Any) -> None:
        book = validate_payload(OrderBookSchema, order_book, CAPABILITY, symbol)
        ensure_symbol(CAPABILITY, symbol, book.symbol)

    await watch_stream(
        exchange,
        CAPABILITY,
        lambda: exchange.watch_order_book(symbol),
        validate,
        symbol=symbol,
    )
