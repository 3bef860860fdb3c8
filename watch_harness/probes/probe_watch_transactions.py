"""Private deposit and withdrawal stream for the settlement code."""

from typing import Any

from watch_harness.capabilities import Capability
from watch_harness.probes.base import watch_stream
from watch_harness.probes.schemas import TransactionSchema, validate_each

CAPABILITY = Capability.WATCH_TRANSACTIONS


async def probe(exchange: Any, symbol: str, code: str | None = None) -> None:
    await watch_stream(
        exchange,
        CAPABILITY,
        lambda: exchange.watch_transactions(code),
        lambda transactions: validate_each(TransactionSchema, transactions, CAPABILITY, code),
        symbol=code,
    )
