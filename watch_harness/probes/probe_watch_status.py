"""Exchange status stream."""

from typing import Any

from watch_harness.capabilities import Capability
from watch_harness.probes.base import watch_stream
from watch_harness.probes.schemas import StatusSchema, validate_payload

CAPABILITY = Capability.WATCH_STATUS


async def probe(exchange: Any, symbol: str, code: str | None = None) -> None:
    await watch_stream(
        exchange,
        CAPABILITY,
        lambda: exchange.watch_status(),
        lambda status: validate_payload(StatusSchema, status, CAPABILITY),
    )
