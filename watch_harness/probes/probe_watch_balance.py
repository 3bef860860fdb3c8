"""Private balance stream."""

from typing import Any

from watch_harness.capabilities import Capability
from watch_harness.probes.base import watch_stream
from watch_harness.probes.schemas import BalanceSchema, validate_payload

CAPABILITY = Capability.WATCH_BALANCE


async def probe(exchange: Any, symbol: str, code: str | None = None) -> None:
    await watch_stream(
        exchange,
        CAPABILITY,
        lambda: exchange.watch_balance(),
        lambda balance: validate_payload(BalanceSchema, balance, CAPABILITY),
    )
