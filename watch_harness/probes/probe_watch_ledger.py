"""Private ledger stream for the settlement code."""

from typing import Any

from watch_harness.capabilities import Capability
from watch_harness.probes.base import watch_stream
from watch_harness.probes.schemas import LedgerEntrySchema, validate_each

CAPABILITY = Capability.WATCH_LEDGER


async def probe(exchange: Any, symbol: str, code: str | None = None) -> None:
    await watch_stream(
        exchange,
        CAPABILITY,
        lambda: exchange.watch_ledger(code),
        lambda entries: validate_each(LedgerEntrySchema, entries, CAPABILITY, code),
        symbol=code,
    )
