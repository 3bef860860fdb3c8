"""Private order updates for one symbol."""

from typing import Any

from watch_harness.capabilities import Capability
from watch_harness.probes.base import watch_stream
from watch_harness.probes.schemas import OrderSchema, ensure_symbol, validate_each

CAPABILITY = Capability.WATCH_ORDERS


async def probe(exchange: Any, symbol: str, code: str | None = None) -> None:
    def validate(orders: Any) -> None:
        for order in validate_each(OrderSchema, orders, CAPABILITY, symbol):
            ensure_symbol(CAPABILITY, symbol, order.symbol)

    await watch_stream(
        exchange,
        CAPABILITY,
        lambda: exchange.watch_orders(symbol),
        validate,
        symbol=symbol,
    )
