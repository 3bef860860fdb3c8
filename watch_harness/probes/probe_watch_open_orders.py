"""Private stream of orders that are still open."""

from typing import Any

from watch_harness.capabilities import Capability
from watch_harness.exceptions import ProbeValidationError
from watch_harness.probes.base import watch_stream
from watch_harness.probes.schemas import OrderSchema, ensure_symbol, validate_each

CAPABILITY = Capability.WATCH_OPEN_ORDERS


async def probe(exchange: Any, symbol: str, code: str | None = None) -> None:
    def validate(orders: Any) -> None:
        for order in validate_each(OrderSchema, orders, CAPABILITY, symbol):
            ensure_symbol(CAPABILITY, symbol, order.symbol)
            if order.status not in (None, "open"):
                raise ProbeValidationError(
                    CAPABILITY.value, symbol, f"order {order.id} has status {order.status}"
                )

    await watch_stream(
        exchange,
        CAPABILITY,
        lambda: exchange.watch_open_orders(symbol),
        validate,
        symbol=symbol,
    )
